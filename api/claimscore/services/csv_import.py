import io
import logging
import re
from typing import Any, Dict, List, Tuple

import pandas as pd
from pydantic import ValidationError

from claimscore.models.claims import ClaimDataInput

logger = logging.getLogger(__name__)


NUMERIC_COLUMNS = {"claim_amount", "policy_limit", "previous_claims_count", "days_since_last_claim"}
_CLAIM_FIELDS = set(ClaimDataInput.model_fields)
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def normalize_header(header: str) -> str:
    """claimAmount / Claim Amount / claim_amount -> claim_amount; providerNPI -> provider_npi."""
    name = _CAMEL_BOUNDARY.sub("_", str(header).strip())
    return re.sub(r"[\s\-]+", "_", name).lower()


def _coerce_number(raw: str) -> Any:
    cleaned = raw.replace(",", "").replace("$", "").strip()
    try:
        number = float(cleaned)
    except ValueError:
        # Leave it as text; record validation will reject the row
        return raw
    return int(number) if number.is_integer() else number


def parse_claims_csv(content: str) -> Tuple[List[ClaimDataInput], int]:
    """
    Parse CSV text into claims. Blank cells are treated as absent, unknown
    columns are ignored, and rows that fail validation are skipped and counted.

    Raises ValueError when the text is not a CSV with a header row, or when
    two headers name the same claim field.
    """
    if not content.strip():
        raise ValueError("CSV content is empty")

    try:
        frame = pd.read_csv(io.StringIO(content), dtype=str, keep_default_na=False, skipinitialspace=True)
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as ex:
        raise ValueError(f"Could not parse CSV: {ex}") from ex

    columns = [normalize_header(c) for c in frame.columns]
    duplicates = sorted({c for c in columns if columns.count(c) > 1})
    if duplicates:
        raise ValueError(f"CSV header maps more than one column to: {', '.join(duplicates)}")
    frame.columns = columns
    known = [c for c in frame.columns if c in _CLAIM_FIELDS]
    if not known:
        raise ValueError("CSV header does not contain any recognised claim fields")

    claims: List[ClaimDataInput] = []
    skipped = 0
    for index, row in enumerate(frame[known].to_dict(orient="records")):
        record: Dict[str, Any] = {}
        for column, raw in row.items():
            value = str(raw).strip()
            if not value:
                continue
            record[column] = _coerce_number(value) if column in NUMERIC_COLUMNS else value
        try:
            claims.append(ClaimDataInput.model_validate(record))
        except ValidationError as ex:
            skipped += 1
            logger.info("Skipping CSV row %d: %d error(s)", index + 1, ex.error_count())

    return claims, skipped
