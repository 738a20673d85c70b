from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field, computed_field

from claimscore.models.signals import FraudSignal


RiskLevel = Literal["low", "medium", "high"]


class ClaimDataInput(BaseModel):
    # Claim identity
    claimant_name: Optional[str] = None
    policy_number: Optional[str] = None
    claim_number: Optional[str] = None
    claim_date: Optional[date] = None
    claim_amount: Optional[float] = None

    # Incident
    incident_date: Optional[date] = None
    incident_description: Optional[str] = None
    incident_location: Optional[str] = None
    vehicle_info: Optional[str] = None

    # Treatment / provider
    treatment_date: Optional[date] = None
    provider_name: Optional[str] = None
    provider_npi: Optional[str] = None
    diagnosis_code: Optional[str] = None

    # Claimant contact
    claimant_address: Optional[str] = None
    claimant_phone: Optional[str] = None
    claimant_email: Optional[str] = None

    # Policy & history
    policy_holder_name: Optional[str] = None
    policy_limit: Optional[float] = None
    previous_claims_count: Optional[int] = None
    days_since_last_claim: Optional[int] = None


class FraudAssessment(BaseModel):
    id: str
    submission_id: Optional[str] = None
    overall_score: int = Field(..., ge=0, le=100)
    risk_level: RiskLevel
    triggered_signals: List[FraudSignal]     # critical first, then warning, then info
    evaluated_at: datetime
    input_data: ClaimDataInput               # kept verbatim for audit/display
    summary: str
    analyst_notes: Optional[str] = None


class FraudBulkSummary(BaseModel):
    high_risk: int = 0
    medium_risk: int = 0
    low_risk: int = 0
    average_score: float = 0.0

    @computed_field
    @property
    def tier_counts(self) -> Dict[str, int]:
        return {"low": self.low_risk, "medium": self.medium_risk, "high": self.high_risk}


class BulkFraudResult(BaseModel):
    total_count: int
    skipped_count: int = 0                   # records dropped by schema validation
    analyzed_at: datetime
    summary: FraudBulkSummary
    results: List[FraudAssessment]           # same order as the valid inputs


class AnalyzeFraudRequest(BaseModel):
    claim_data: ClaimDataInput


class AnalyzeFraudBulkRequest(BaseModel):
    # Raw records: each one is validated individually so a bad row cannot sink the batch
    claims: List[Any]


class ParseCsvRequest(BaseModel):
    csv_content: str


class ParseCsvResponse(BaseModel):
    claims: List[ClaimDataInput]
    count: int
    skipped_rows: int = 0
