from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Dict, List, Optional
from uuid import uuid4

from claimscore.config import settings
from claimscore.models.claims import ClaimDataInput, FraudAssessment, RiskLevel
from claimscore.models.signals import FraudSignal
from claimscore.services.scoring.engine import FiredRule, RuleEngine, tier_for
from claimscore.services.scoring.fraud_rules import FRAUD_RULES


fraud_engine: RuleEngine[ClaimDataInput] = RuleEngine(FRAUD_RULES)


# --------- PUBLIC ENTRY POINT --------- #

def score_fraud(
    claim: ClaimDataInput,
    thresholds: Optional[Dict[str, int]] = None,
) -> FraudAssessment:
    """
    Score one claim against the fraud rule table.

    Every fired rule adds round(base_weight * confidence / 100) to a single
    total, which is capped at 100 and mapped to low / medium / high.
    """
    fired = fraud_engine.run(claim)

    total = sum(f.score_impact for f in fired)
    overall_score = min(100, max(0, total))
    risk_level: RiskLevel = tier_for(
        overall_score,
        floor_tier="low",
        thresholds=thresholds if thresholds is not None else settings.FRAUD_TIER_THRESHOLDS,
    )

    signals = [_to_signal(f) for f in fired]

    return FraudAssessment(
        id=str(uuid4()),
        overall_score=overall_score,
        risk_level=risk_level,
        triggered_signals=signals,
        evaluated_at=datetime.now(timezone.utc),
        input_data=claim,
        summary=fraud_summary(risk_level, signals),
    )


def fraud_summary(risk_level: str, signals: List[FraudSignal]) -> str:
    if not signals:
        return "No fraud indicators were detected. Standard processing recommended."

    critical = sum(1 for s in signals if s.severity == "critical")
    warning = sum(1 for s in signals if s.severity == "warning")
    info = sum(1 for s in signals if s.severity == "info")

    if risk_level == "high":
        return (
            f"High risk claim with {critical} critical and {warning} warning signals detected. "
            "Manual review strongly recommended before processing."
        )
    if risk_level == "medium":
        return (
            f"Moderate risk claim with {warning} warning and {info} informational signals. "
            "Additional verification may be needed."
        )
    return f"Low risk claim with {len(signals)} minor signals. Standard processing recommended."


def _to_signal(fired: FiredRule[ClaimDataInput]) -> FraudSignal:
    rule = fired.rule
    return FraudSignal(
        id=str(uuid4()),
        code=rule.code,
        name=rule.name,
        description=fired.detail,
        severity=rule.severity,
        confidence=fired.result.confidence,
        impacted_fields=list(rule.impacted_fields),
        score_impact=fired.score_impact,
        remediation_hint=rule.remediation_hint,
    )


# --------- DEMO DATA --------- #

SAMPLE_CLAIMS: List[ClaimDataInput] = [
    ClaimDataInput(
        claimant_name="John Smith",
        policy_number="POL-2024-00123",
        claim_number="CLM-2024-00456",
        claim_date=date(2024, 12, 1),
        claim_amount=15000,
        incident_date=date(2024, 11, 28),
        incident_description="Vehicle collision at intersection",
        incident_location="Main St & Oak Ave",
        treatment_date=date(2024, 11, 28),
        provider_name="City General Hospital",
        provider_npi="1234567890",
        diagnosis_code="S00.0",
        claimant_address="123 Main Street, Springfield",
        claimant_phone="555-123-4567",
        claimant_email="john.smith@email.com",
        vehicle_info="2022 Toyota Camry, VIN: 1234567890ABCDEF",
        policy_holder_name="John Smith",
        policy_limit=50000,
        previous_claims_count=1,
        days_since_last_claim=365,
    ),
    ClaimDataInput(
        claimant_name="Jane Doe",
        policy_number="POL-2024-00789",
        claim_number="CLM-2024-00999",
        claim_date=date(2024, 12, 5),
        claim_amount=75000,
        incident_date=date(2024, 12, 4),
        incident_description="Medical procedure complications",
        incident_location="Private Clinic",
        treatment_date=date(2024, 12, 4),
        provider_name="Unknown Provider",
        diagnosis_code="Z99.9",
        claimant_address="456 Oak Street, Springfield",
        claimant_phone="555-987-6543",
        claimant_email="jane.d@email.com",
        policy_holder_name="Robert Doe",
        policy_limit=25000,
        previous_claims_count=5,
        days_since_last_claim=30,
    ),
    ClaimDataInput(
        claimant_name="Michael Johnson",
        policy_number="POL-2024-00555",
        claim_number="CLM-2024-00777",
        claim_date=date(2024, 12, 3),
        claim_amount=3500,
        incident_date=date(2024, 12, 1),
        incident_description="Minor fender bender in parking lot",
        incident_location="Walmart Parking Lot",
        treatment_date=date(2024, 12, 2),
        provider_name="QuickCare Clinic",
        provider_npi="9876543210",
        diagnosis_code="S13.4",
        claimant_address="789 Pine Ave, Springfield",
        claimant_phone="555-456-7890",
        claimant_email="m.johnson@email.com",
        vehicle_info="2020 Honda Civic, VIN: ABCDEF1234567890",
        policy_holder_name="Michael Johnson",
        policy_limit=30000,
        previous_claims_count=0,
        days_since_last_claim=0,
    ),
]
