from datetime import datetime, timezone
from typing import Optional

import pandas as pd

from claimscore.models.documents import Document, ExportData, ExportMetadata


def build_export(document: Document, processed_at: Optional[datetime] = None) -> ExportData:
    """Flatten a processed document into a label -> value map plus edit statistics."""
    extracted = document.extracted_fields or []

    # Later duplicates of a label win, matching how the review grid displays them
    fields = {f.label: f.value for f in extracted}

    return ExportData(
        document_id=document.id,
        filename=document.filename,
        processed_at=processed_at or datetime.now(timezone.utc),
        fields=fields,
        metadata=ExportMetadata(
            original_file_type=document.file_type,
            total_fields=len(extracted),
            edited_fields=sum(1 for f in extracted if f.is_edited),
        ),
    )


def export_to_csv(export: ExportData) -> str:
    frame = pd.DataFrame(
        [{"field": label, "value": value} for label, value in export.fields.items()],
        columns=["field", "value"],
    )
    return frame.to_csv(index=False)
