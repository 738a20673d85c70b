from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Dict, List, Optional, Union
from uuid import uuid4

from claimscore.config import settings
from claimscore.models.applications import (
    CompanyApplicantInput,
    IndividualApplicantInput,
    RiskTier,
    UnderwritingAssessment,
)
from claimscore.models.signals import UnderwritingSignal
from claimscore.services.scoring.engine import FiredRule, RuleEngine, round_half_up, tier_for
from claimscore.services.scoring.underwriting_rules import UNDERWRITING_RULES


Applicant = Union[IndividualApplicantInput, CompanyApplicantInput]

DECLINE_REASON = "Risk score exceeds acceptable threshold"

underwriting_engine: RuleEngine[Applicant] = RuleEngine(
    UNDERWRITING_RULES,
    variant_of=lambda app: app.applicant_type,
)


# --------- PUBLIC ENTRY POINT --------- #

def score_underwriting(
    application: Applicant,
    thresholds: Optional[Dict[str, int]] = None,
    adjustment_cap: Optional[int] = None,
) -> UnderwritingAssessment:
    """
    Score one application (individual or company) and price it.

    Only loadings (positive weights) feed the risk and profitability buckets.
    Discounts only move the premium adjustment, which sums every fired rule
    and is clamped to +/- adjustment_cap.
    """
    cap = adjustment_cap if adjustment_cap is not None else settings.PREMIUM_ADJUSTMENT_CAP

    fired = underwriting_engine.run(application)

    risk_score = 0
    profitability_score = 0
    total_adjustment = 0

    for f in fired:
        total_adjustment += f.score_impact
        if f.rule.base_weight <= 0:
            continue
        if f.rule.dimension == "risk":
            risk_score += abs(f.score_impact)
        else:
            profitability_score += abs(f.score_impact)

    adjustment = max(-cap, min(cap, total_adjustment))
    overall_risk_score = min(100, risk_score + profitability_score)
    risk_tier: RiskTier = tier_for(
        overall_risk_score,
        floor_tier="preferred",
        thresholds=thresholds if thresholds is not None else settings.UNDERWRITING_TIER_THRESHOLDS,
    )

    base = base_premium(application)
    recommended = recommended_premium(base, adjustment)
    signals = [_to_signal(f) for f in fired]
    approved = risk_tier != "decline"

    return UnderwritingAssessment(
        id=str(uuid4()),
        applicant_type=application.applicant_type,
        applicant_name=applicant_name(application),
        overall_risk_score=overall_risk_score,
        profitability_score=min(100, profitability_score),
        risk_tier=risk_tier,
        base_premium=base,
        adjustment_percentage=adjustment,
        recommended_premium=recommended,
        projected_loss_ratio=settings.PROJECTED_LOSS_RATIOS[risk_tier],
        triggered_signals=signals,
        evaluated_at=datetime.now(timezone.utc),
        input_data=application,
        summary=underwriting_summary(risk_tier, overall_risk_score, adjustment, recommended, signals),
        is_approved=approved,
        decline_reason=None if approved else DECLINE_REASON,
    )


# --------- PRICING --------- #

def age_factor(age: Optional[int]) -> float:
    if not age:
        return 1.0
    if age < 30:
        return 0.7
    if age < 40:
        return 0.9
    if age < 50:
        return 1.1
    if age < 60:
        return 1.4
    return 2.0


def employee_factor(employee_count: Optional[int]) -> float:
    if not employee_count:
        return 1.0
    return max(1.0, employee_count / 50)


def _whole_currency(amount: float) -> int:
    # Raised as ValueError so callers reject the application instead of crashing
    if not math.isfinite(amount):
        raise ValueError("Premium cannot be priced: coverage amount or headcount is too large")
    return round_half_up(amount)


def base_premium(application: Applicant, rate: Optional[float] = None) -> int:
    rate = rate if rate is not None else settings.BASE_PREMIUM_RATE
    coverage = application.requested_coverage_amount

    if isinstance(application, IndividualApplicantInput):
        return _whole_currency(coverage * rate * age_factor(application.age))
    return _whole_currency(coverage * rate * 0.8 * employee_factor(application.employee_count))


def recommended_premium(base: int, adjustment_percentage: int) -> int:
    return _whole_currency(base * (1 + adjustment_percentage / 100))


def applicant_name(application: Applicant) -> str:
    if isinstance(application, IndividualApplicantInput):
        return application.full_name
    return application.company_name


# --------- SUMMARY --------- #

def underwriting_summary(
    risk_tier: str,
    overall_risk_score: int,
    adjustment: int,
    premium: int,
    signals: List[UnderwritingSignal],
) -> str:
    if not signals:
        return (
            "No adverse risk factors were identified. Preferred risk classification at standard rates. "
            f"Recommended premium: ${premium:,}."
        )

    risk_signals = [s for s in signals if s.dimension == "risk" and s.premium_impact > 0]
    profit_signals = [s for s in signals if s.dimension == "profitability" and s.premium_impact > 0]
    favorable = [s for s in signals if s.premium_impact < 0]

    if risk_tier == "decline":
        return (
            f"Application declined due to {len(risk_signals)} critical risk factors. "
            f"Total risk score of {overall_risk_score} exceeds acceptable threshold. "
            "Manual underwriting review required for any exceptions."
        )
    if risk_tier == "substandard":
        return (
            f"Substandard risk classification with {adjustment:.1f}% premium adjustment. "
            f"{len(risk_signals)} risk factors and {len(profit_signals)} profitability concerns identified. "
            f"Recommended premium: ${premium:,}."
        )
    if risk_tier == "standard":
        return (
            f"Standard risk classification with {adjustment:.1f}% adjustment. "
            f"{len(favorable)} favorable factors identified. "
            f"Recommended premium: ${premium:,}."
        )
    return (
        f"Preferred risk classification with {abs(adjustment):.1f}% discount. "
        f"{len(favorable)} favorable factors qualify applicant for best rates. "
        f"Recommended premium: ${premium:,}."
    )


def _to_signal(fired: FiredRule[Applicant]) -> UnderwritingSignal:
    rule = fired.rule
    return UnderwritingSignal(
        id=str(uuid4()),
        code=rule.code,
        name=rule.name,
        description=fired.detail,
        severity=rule.severity,
        dimension=rule.dimension,
        confidence=fired.result.confidence,
        impacted_fields=list(rule.impacted_fields),
        premium_impact=fired.score_impact,
        recommendation=rule.remediation_hint,
    )


# --------- DEMO DATA --------- #

SAMPLE_APPLICATIONS: Dict[str, Applicant] = {
    "individual": IndividualApplicantInput(
        full_name="Sarah Mitchell",
        age=42,
        gender="female",
        occupation="Software Engineer",
        annual_income=145000,
        net_worth=620000,
        credit_score=782,
        smoking_status="never",
        has_chronic_conditions=False,
        bmi=23.4,
        previous_claims_count=0,
        previous_claims_amount=0,
        years_with_prior_coverage=12,
        requested_coverage_amount=1000000,
        coverage_type="Life",
        policy_term=20,
    ),
    "company": CompanyApplicantInput(
        company_name="Summit Ridge Builders LLC",
        industry="Construction",
        industry_code="236220",
        years_in_business=7,
        employee_count=85,
        annual_revenue=12500000,
        annual_payroll=4800000,
        net_worth=3200000,
        liquidity_ratio=1.3,
        previous_claims_count=3,
        previous_claims_amount=185000,
        prior_loss_ratio=64.5,
        osha_incidents=2,
        has_safety_certifications=True,
        safety_certifications=["OSHA 30", "ISO 45001"],
        has_risk_management_program=False,
        geographic_concentration=70,
        requested_coverage_amount=5000000,
        coverage_type="General Liability",
        policy_term=1,
    ),
}
