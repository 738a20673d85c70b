from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field


ConfidenceLevel = Literal["high", "medium", "low"]
ProcessingStatus = Literal["idle", "uploading", "processing", "completed", "error"]


class ExtractedField(BaseModel):
    id: str
    label: str                       # camelCase key, e.g. "policyNumber"
    value: str
    confidence: ConfidenceLevel
    is_edited: bool = False


class Document(BaseModel):
    id: str
    filename: str
    file_type: str
    file_size: int
    uploaded_at: datetime
    status: ProcessingStatus
    extracted_fields: Optional[List[ExtractedField]] = None
    error_message: Optional[str] = None
    thumbnail_url: Optional[str] = None  # data URL, images only


class ProcessDocumentResponse(BaseModel):
    success: bool
    document: Optional[Document] = None
    error: Optional[str] = None


class ExportMetadata(BaseModel):
    original_file_type: str
    total_fields: int
    edited_fields: int


class ExportData(BaseModel):
    document_id: str
    filename: str
    processed_at: datetime
    fields: Dict[str, str]
    metadata: ExportMetadata


class FieldDefinitionCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    enabled: bool = True


class FieldDefinition(FieldDefinitionCreate):
    id: str


class FieldDefinitionUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    enabled: Optional[bool] = None


class EvaluateFieldsRequest(BaseModel):
    fields: List[ExtractedField] = Field(..., min_length=1)


class ExtractionResult(BaseModel):
    fields: List[ExtractedField] = []
    error: Optional[str] = None
