from datetime import datetime, timezone
from typing import Literal, Optional, Union
from uuid import uuid4

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import Response

from claimscore.models.documents import Document, ExportData, ProcessDocumentResponse
from claimscore.services.document_extractor import NO_FIELDS_ERROR, extract_fields_from_document, to_base64
from claimscore.services.exporter import build_export, export_to_csv
from claimscore.services.storage import MemStorage, get_storage
from claimscore.services.uploads import read_upload


router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("/process", response_model=ProcessDocumentResponse)
def process_document(
    file: Optional[UploadFile] = File(None),
    store: MemStorage = Depends(get_storage),
) -> ProcessDocumentResponse:
    data = read_upload(file)
    data_base64 = to_base64(data)

    result = extract_fields_from_document(data_base64, file.content_type, store.get_enabled_field_definitions())
    if result.error:
        status = 400 if result.error == NO_FIELDS_ERROR else 502
        raise HTTPException(status_code=status, detail=result.error)

    document = Document(
        id=f"doc-{uuid4().hex[:12]}",
        filename=file.filename or "upload",
        file_type=file.content_type,
        file_size=len(data),
        uploaded_at=datetime.now(timezone.utc),
        status="completed",
        extracted_fields=result.fields,
        # Images get an inline preview; PDFs do not
        thumbnail_url=f"data:{file.content_type};base64,{data_base64}"
        if file.content_type.startswith("image/")
        else None,
    )
    return ProcessDocumentResponse(success=True, document=document)


@router.post("/export", response_model=None)
def export_document(
    document: Document,
    format: Literal["json", "csv"] = Query("json"),
) -> Union[ExportData, Response]:
    if not document.extracted_fields:
        raise HTTPException(status_code=400, detail="Document has no extracted fields to export")

    export = build_export(document)
    if format == "csv":
        return Response(
            content=export_to_csv(export),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{document.id}.csv"'},
        )
    return export
