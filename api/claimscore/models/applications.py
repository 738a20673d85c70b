from typing import Annotated, Any, Dict, List, Optional, Literal, Union
from pydantic import BaseModel, Field, computed_field
from datetime import datetime

from claimscore.models.signals import ApplicantType, UnderwritingSignal


RiskTier = Literal["preferred", "standard", "substandard", "decline"]
SmokingStatus = Literal["never", "former", "current"]
Gender = Literal["male", "female", "other"]

# Upper bounds keep premium arithmetic finite
MAX_COVERAGE_AMOUNT = 1_000_000_000_000
MAX_EMPLOYEE_COUNT = 10_000_000


class IndividualApplicantInput(BaseModel):
    applicant_type: Literal["individual"] = "individual"

    # Identity
    full_name: str
    age: Optional[int] = Field(None, ge=0, le=120)
    gender: Optional[Gender] = None
    occupation: Optional[str] = None

    # Financials
    annual_income: Optional[float] = None
    net_worth: Optional[float] = None
    credit_score: Optional[int] = Field(None, ge=300, le=850)

    # Health
    smoking_status: Optional[SmokingStatus] = None
    has_chronic_conditions: bool = False
    chronic_conditions: List[str] = []
    bmi: Optional[float] = None
    hazardous_hobbies: List[str] = []

    # Insurance history
    previous_claims_count: Optional[int] = None
    previous_claims_amount: Optional[float] = None
    years_with_prior_coverage: Optional[int] = None

    # Requested cover
    requested_coverage_amount: float = Field(..., ge=0, le=MAX_COVERAGE_AMOUNT)
    coverage_type: Optional[str] = None      # e.g. "Life", "Health", "Disability"
    policy_term: Optional[int] = None        # years


class CompanyApplicantInput(BaseModel):
    applicant_type: Literal["company"] = "company"

    # Identity & context
    company_name: str
    industry: str
    industry_code: Optional[str] = None
    years_in_business: Optional[int] = None
    employee_count: Optional[int] = Field(None, ge=0, le=MAX_EMPLOYEE_COUNT)

    # Financials
    annual_revenue: Optional[float] = None
    annual_payroll: Optional[float] = None
    net_worth: Optional[float] = None
    liquidity_ratio: Optional[float] = None  # current assets / current liabilities

    # Loss history
    previous_claims_count: Optional[int] = None
    previous_claims_amount: Optional[float] = None
    prior_loss_ratio: Optional[float] = None  # percent, may exceed 100
    osha_incidents: Optional[int] = None

    # Risk management
    has_safety_certifications: bool = False
    safety_certifications: List[str] = []
    has_risk_management_program: bool = False
    geographic_concentration: Optional[float] = None  # percent of operations in one area

    # Requested cover
    requested_coverage_amount: float = Field(..., ge=0, le=MAX_COVERAGE_AMOUNT)
    coverage_type: Optional[str] = None
    policy_term: Optional[int] = None


UnderwritingApplicationInput = Annotated[
    Union[IndividualApplicantInput, CompanyApplicantInput],
    Field(discriminator="applicant_type"),
]


class UnderwritingAssessment(BaseModel):
    id: str
    applicant_type: ApplicantType
    applicant_name: str

    overall_risk_score: int = Field(..., ge=0, le=100)
    profitability_score: int = Field(..., ge=0, le=100)
    risk_tier: RiskTier

    # Pricing
    base_premium: int
    adjustment_percentage: int               # clamped to +/- the configured cap
    recommended_premium: int
    projected_loss_ratio: int                # fixed per tier; an approximation, not modelled

    triggered_signals: List[UnderwritingSignal]
    evaluated_at: datetime
    input_data: UnderwritingApplicationInput
    summary: str

    is_approved: bool
    decline_reason: Optional[str] = None


class UnderwritingBulkSummary(BaseModel):
    preferred: int = 0
    standard: int = 0
    substandard: int = 0
    declined: int = 0
    average_risk_score: float = 0.0
    average_premium_adjustment: float = 0.0
    total_premium_value: int = 0

    @computed_field
    @property
    def tier_counts(self) -> Dict[str, int]:
        return {
            "preferred": self.preferred,
            "standard": self.standard,
            "substandard": self.substandard,
            "decline": self.declined,
        }


class BulkUnderwritingResult(BaseModel):
    total_count: int
    skipped_count: int = 0
    analyzed_at: datetime
    summary: UnderwritingBulkSummary
    results: List[UnderwritingAssessment]


class AnalyzeUnderwritingRequest(BaseModel):
    application_data: UnderwritingApplicationInput


class AnalyzeUnderwritingBulkRequest(BaseModel):
    # Raw records, validated one by one so a bad element cannot sink the batch
    applications: List[Any]
