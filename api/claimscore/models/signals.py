from typing import List, Literal, Optional
from pydantic import BaseModel, Field


SignalSeverity = Literal["info", "warning", "critical"]
SignalDimension = Literal["risk", "profitability"]
ApplicantType = Literal["individual", "company"]

# Presentation order: critical first
SEVERITY_RANK = {"critical": 0, "warning": 1, "info": 2}


class Signal(BaseModel):
    id: str                          # fresh per evaluation, not stable across runs
    code: str                        # e.g. "FR001", "UW007"
    name: str
    description: str                 # rendered detail, or the rule's static description
    severity: SignalSeverity
    confidence: int = Field(..., ge=0, le=100)
    impacted_fields: List[str] = []


class FraudSignal(Signal):
    score_impact: int                # round(base_weight * confidence / 100)
    remediation_hint: Optional[str] = None


class UnderwritingSignal(Signal):
    dimension: SignalDimension
    premium_impact: int              # signed; negative values are discounts
    recommendation: Optional[str] = None
