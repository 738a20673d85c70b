from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, EmailStr, Field


RequiredDocumentType = Literal["identityCard", "dischargeSummary", "bills", "investigations"]
SubmissionStatus = Literal["draft", "pending_documents", "ready", "processing", "completed", "notified"]

REQUIRED_DOCUMENT_TYPES: List[str] = ["identityCard", "dischargeSummary", "bills", "investigations"]

DOCUMENT_TYPE_LABELS: Dict[str, str] = {
    "identityCard": "Identity Card",
    "dischargeSummary": "Discharge Summary",
    "bills": "Bills",
    "investigations": "Investigations",
}


class PatientInfo(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=10)


class DocumentChecklistItem(BaseModel):
    type: RequiredDocumentType
    uploaded: bool = False
    filename: Optional[str] = None
    file_data: Optional[str] = None      # base64
    file_type: Optional[str] = None
    file_size: Optional[int] = None


class ClaimSubmission(BaseModel):
    id: str
    patient_info: PatientInfo
    document_checklist: List[DocumentChecklistItem]
    is_complete: bool = False
    missing_documents: List[RequiredDocumentType] = []
    created_at: datetime
    status: SubmissionStatus
    provider_email: Optional[EmailStr] = None
    notification_sent_at: Optional[datetime] = None
    extracted_data: Optional[Dict[str, Any]] = None


class CreateSubmissionRequest(BaseModel):
    patient_info: PatientInfo
    provider_email: EmailStr


class NotificationResult(BaseModel):
    success: bool
    error: Optional[str] = None
