import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from claimscore.models.submissions import REQUIRED_DOCUMENT_TYPES, ClaimSubmission, CreateSubmissionRequest
from claimscore.services.document_extractor import extract_fields_from_document, to_base64
from claimscore.services.notifier import send_missing_documents_email
from claimscore.services.storage import MemStorage, get_storage
from claimscore.services.uploads import read_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/submissions", tags=["submissions"])

# Uploaded file bodies stay server-side
HIDE_FILE_DATA = {"document_checklist": {"__all__": {"file_data"}}}


def _get_or_404(store: MemStorage, submission_id: str) -> ClaimSubmission:
    submission = store.get_submission(submission_id)
    if submission is None:
        raise HTTPException(status_code=404, detail="Submission not found")
    return submission


@router.post("", response_model=ClaimSubmission, response_model_exclude=HIDE_FILE_DATA)
def create_submission(req: CreateSubmissionRequest, store: MemStorage = Depends(get_storage)) -> ClaimSubmission:
    return store.create_submission(req.patient_info, str(req.provider_email))


@router.get("/{submission_id}", response_model=ClaimSubmission, response_model_exclude=HIDE_FILE_DATA)
def get_submission(submission_id: str, store: MemStorage = Depends(get_storage)) -> ClaimSubmission:
    return _get_or_404(store, submission_id)


@router.post("/{submission_id}/documents", response_model=ClaimSubmission, response_model_exclude=HIDE_FILE_DATA)
def upload_document(
    submission_id: str,
    document_type: str = Form(...),
    file: Optional[UploadFile] = File(None),
    store: MemStorage = Depends(get_storage),
) -> ClaimSubmission:
    if document_type not in REQUIRED_DOCUMENT_TYPES:
        raise HTTPException(status_code=400, detail="Invalid document type")

    _get_or_404(store, submission_id)
    data = read_upload(file)

    updated = store.update_submission_document(
        submission_id,
        document_type,
        filename=file.filename or document_type,
        file_data=to_base64(data),
        file_type=file.content_type,
        file_size=len(data),
    )
    return updated


@router.post("/{submission_id}/process", response_model=ClaimSubmission, response_model_exclude=HIDE_FILE_DATA)
def process_submission(submission_id: str, store: MemStorage = Depends(get_storage)) -> ClaimSubmission:
    submission = _get_or_404(store, submission_id)

    if not submission.is_complete:
        raise HTTPException(
            status_code=400,
            detail={
                "error": "Cannot process submission - missing documents",
                "missing_documents": submission.missing_documents,
            },
        )

    field_definitions = store.get_enabled_field_definitions()
    if not field_definitions:
        raise HTTPException(status_code=400, detail="No extraction fields are enabled")

    store.update_submission_status(submission_id, "processing")

    extracted: Dict[str, Any] = {}
    for doc in submission.document_checklist:
        if not (doc.uploaded and doc.file_data and doc.file_type):
            continue
        result = extract_fields_from_document(doc.file_data, doc.file_type, field_definitions)
        if result.error:
            logger.warning("Extraction failed for %s on submission %s: %s", doc.type, submission_id, result.error)
            continue
        # Later documents overwrite labels found in earlier ones
        for field in result.fields:
            extracted[field.label] = {
                "value": field.value,
                "confidence": field.confidence,
                "source": doc.type,
            }

    return store.set_submission_extracted_data(submission_id, extracted)


@router.post("/{submission_id}/notify", response_model=ClaimSubmission, response_model_exclude=HIDE_FILE_DATA)
def notify_provider(submission_id: str, store: MemStorage = Depends(get_storage)) -> ClaimSubmission:
    submission = _get_or_404(store, submission_id)

    if submission.is_complete:
        raise HTTPException(status_code=400, detail="All documents already uploaded")
    if not submission.provider_email:
        raise HTTPException(status_code=400, detail="No provider email configured")
    if submission.notification_sent_at is not None:
        raise HTTPException(
            status_code=400,
            detail=f"Notification already sent at {submission.notification_sent_at.isoformat()}",
        )

    result = send_missing_documents_email(submission)
    if not result.success:
        raise HTTPException(status_code=502, detail=result.error or "Failed to send email")

    return store.set_submission_notified(submission_id)
