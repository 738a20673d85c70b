from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Optional, Tuple, TypeVar

from pydantic import TypeAdapter, ValidationError

from claimscore.config import settings
from claimscore.models.applications import (
    BulkUnderwritingResult,
    UnderwritingApplicationInput,
    UnderwritingAssessment,
    UnderwritingBulkSummary,
)
from claimscore.models.claims import (
    BulkFraudResult,
    ClaimDataInput,
    FraudAssessment,
    FraudBulkSummary,
)
from claimscore.services.fraud_engine import score_fraud
from claimscore.services.underwriting_engine import score_underwriting

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_claim_adapter = TypeAdapter(ClaimDataInput)
_application_adapter = TypeAdapter(UnderwritingApplicationInput)


def validate_items(raw_items: Iterable[Any], adapter: TypeAdapter) -> Tuple[List[Any], int]:
    """
    Validate each record on its own. Records that fail are dropped and
    counted; order of the survivors is preserved.
    """
    valid: List[Any] = []
    skipped = 0
    for index, item in enumerate(raw_items):
        try:
            valid.append(adapter.validate_python(item))
        except ValidationError as ex:
            skipped += 1
            logger.info("Skipping invalid record at index %d: %d error(s)", index, ex.error_count())
    return valid, skipped


def run_ordered(fn: Callable[[T], R], items: List[T], max_workers: Optional[int] = None) -> List[R]:
    """Map fn over items, concurrently when allowed; results always follow input order."""
    workers = max_workers if max_workers is not None else settings.BATCH_MAX_WORKERS
    if workers <= 1 or len(items) <= 1:
        return [fn(item) for item in items]
    with ThreadPoolExecutor(max_workers=workers) as pool:
        # Executor.map yields in submission order, not completion order
        return list(pool.map(fn, items))


def score_isolated(fn: Callable[[T], R], items: List[T], max_workers: Optional[int] = None) -> Tuple[List[R], int]:
    """
    Like run_ordered, but a record whose scoring raises is logged and dropped
    instead of aborting the batch. Returns the results and the failure count.
    """
    def guarded(item: T) -> Optional[R]:
        try:
            return fn(item)
        except Exception:
            logger.warning("Scoring failed for one record; skipping it", exc_info=True)
            return None

    outcomes = run_ordered(guarded, items, max_workers)
    results = [r for r in outcomes if r is not None]
    return results, len(outcomes) - len(results)


def _mean(values: List[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


# --------- FRAUD --------- #

def summarize_fraud(results: List[FraudAssessment]) -> FraudBulkSummary:
    return FraudBulkSummary(
        high_risk=sum(1 for r in results if r.risk_level == "high"),
        medium_risk=sum(1 for r in results if r.risk_level == "medium"),
        low_risk=sum(1 for r in results if r.risk_level == "low"),
        average_score=_mean([r.overall_score for r in results]),
    )


def score_claims_batch(raw_items: Iterable[Any], max_workers: Optional[int] = None) -> BulkFraudResult:
    claims, skipped = validate_items(raw_items, _claim_adapter)
    results, failed = score_isolated(score_fraud, claims, max_workers)
    skipped += failed

    logger.info("Scored %d claims (%d skipped)", len(results), skipped)

    return BulkFraudResult(
        total_count=len(results),
        skipped_count=skipped,
        analyzed_at=datetime.now(timezone.utc),
        summary=summarize_fraud(results),
        results=results,
    )


# --------- UNDERWRITING --------- #

def summarize_underwriting(results: List[UnderwritingAssessment]) -> UnderwritingBulkSummary:
    return UnderwritingBulkSummary(
        preferred=sum(1 for r in results if r.risk_tier == "preferred"),
        standard=sum(1 for r in results if r.risk_tier == "standard"),
        substandard=sum(1 for r in results if r.risk_tier == "substandard"),
        declined=sum(1 for r in results if r.risk_tier == "decline"),
        average_risk_score=_mean([r.overall_risk_score for r in results]),
        average_premium_adjustment=_mean([r.adjustment_percentage for r in results]),
        total_premium_value=sum(r.recommended_premium for r in results),
    )


def score_applications_batch(
    raw_items: Iterable[Any],
    max_workers: Optional[int] = None,
) -> BulkUnderwritingResult:
    applications, skipped = validate_items(raw_items, _application_adapter)
    results, failed = score_isolated(score_underwriting, applications, max_workers)
    skipped += failed

    logger.info("Scored %d applications (%d skipped)", len(results), skipped)

    return BulkUnderwritingResult(
        total_count=len(results),
        skipped_count=skipped,
        analyzed_at=datetime.now(timezone.utc),
        summary=summarize_underwriting(results),
        results=results,
    )
