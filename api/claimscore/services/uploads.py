from typing import Optional

from fastapi import HTTPException, UploadFile

from claimscore.config import settings


def read_upload(file: Optional[UploadFile]) -> bytes:
    """
    Read an uploaded document, enforcing the configured type and size limits.
    """
    if file is None:
        raise HTTPException(status_code=400, detail="No file provided")

    if file.content_type not in settings.ALLOWED_UPLOAD_TYPES:
        raise HTTPException(
            status_code=415,
            detail="Invalid file type. Only PDF, PNG, and JPG are allowed.",
        )

    # Read one byte past the limit so oversized files are detected without buffering them whole
    data = file.file.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds the {settings.MAX_UPLOAD_BYTES // (1024 * 1024)}MB upload limit",
        )
    if not data:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    return data
