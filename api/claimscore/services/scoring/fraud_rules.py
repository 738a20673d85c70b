from __future__ import annotations

from typing import List

from claimscore.models.claims import ClaimDataInput
from claimscore.services.scoring.engine import (
    CheckResult,
    ScoringRule,
    not_triggered,
    triggered,
    validate_rule_table,
)
from claimscore.services.scoring.formatting import money


HIGH_CLAIM_AMOUNT = 50_000
FREQUENT_CLAIMS_COUNT = 3
FREQUENT_CLAIMS_WINDOW_DAYS = 90
MIN_DESCRIPTION_LENGTH = 20
SUSPICIOUS_PROVIDER_TERMS = ["unknown", "unregistered", "private", "cash only", "n/a", "none"]


def check_identity_mismatch(claim: ClaimDataInput) -> CheckResult:
    if not claim.claimant_name or not claim.policy_holder_name:
        return not_triggered()
    claimant = claim.claimant_name.strip().lower()
    holder = claim.policy_holder_name.strip().lower()
    if claimant != holder:
        return triggered(
            90,
            f'Claimant "{claim.claimant_name}" differs from policy holder "{claim.policy_holder_name}"',
        )
    return not_triggered()


def check_exceeds_policy_limit(claim: ClaimDataInput) -> CheckResult:
    if not claim.claim_amount or not claim.policy_limit:
        return not_triggered()
    if claim.claim_amount > claim.policy_limit:
        excess = claim.claim_amount - claim.policy_limit
        return triggered(
            100,
            f"Claim amount (${money(claim.claim_amount)}) exceeds policy limit "
            f"(${money(claim.policy_limit)}) by ${money(excess)}",
        )
    return not_triggered()


def check_claim_frequency(claim: ClaimDataInput) -> CheckResult:
    if claim.previous_claims_count is None or claim.days_since_last_claim is None:
        return not_triggered()
    if (
        claim.previous_claims_count >= FREQUENT_CLAIMS_COUNT
        and claim.days_since_last_claim < FREQUENT_CLAIMS_WINDOW_DAYS
    ):
        return triggered(
            85,
            f"{claim.previous_claims_count} previous claims with last claim only "
            f"{claim.days_since_last_claim} days ago",
        )
    return not_triggered()


def check_date_sequence(claim: ClaimDataInput) -> CheckResult:
    if claim.incident_date is None:
        return not_triggered()

    if claim.treatment_date is not None and claim.treatment_date < claim.incident_date:
        return triggered(
            95,
            f"Treatment date ({claim.treatment_date.isoformat()}) is before "
            f"incident date ({claim.incident_date.isoformat()})",
        )

    if claim.claim_date is not None and claim.claim_date < claim.incident_date:
        return triggered(
            95,
            f"Claim date ({claim.claim_date.isoformat()}) is before "
            f"incident date ({claim.incident_date.isoformat()})",
        )

    return not_triggered()


def check_suspicious_provider(claim: ClaimDataInput) -> CheckResult:
    if not claim.provider_name:
        return not_triggered()
    provider = claim.provider_name.lower()
    for term in SUSPICIOUS_PROVIDER_TERMS:
        if term in provider:
            return triggered(
                70,
                f'Provider name "{claim.provider_name}" contains suspicious term "{term}"',
            )
    return not_triggered()


def check_missing_npi(claim: ClaimDataInput) -> CheckResult:
    # Only meaningful once a provider is named
    if claim.provider_name and not claim.provider_npi:
        return triggered(60, "Provider NPI number is not provided")
    return not_triggered()


def check_high_amount(claim: ClaimDataInput) -> CheckResult:
    if not claim.claim_amount:
        return not_triggered()
    if claim.claim_amount > HIGH_CLAIM_AMOUNT:
        return triggered(
            75,
            f"Claim amount (${money(claim.claim_amount)}) exceeds ${money(HIGH_CLAIM_AMOUNT)} threshold",
        )
    return not_triggered()


def check_same_day_treatment(claim: ClaimDataInput) -> CheckResult:
    if claim.incident_date is None or claim.treatment_date is None:
        return not_triggered()
    if claim.incident_date == claim.treatment_date:
        return triggered(
            50,
            f"Treatment on same day as incident ({claim.incident_date.isoformat()})",
        )
    return not_triggered()


def check_vague_description(claim: ClaimDataInput) -> CheckResult:
    if not claim.incident_description:
        return not_triggered()
    length = len(claim.incident_description)
    if length < MIN_DESCRIPTION_LENGTH:
        return triggered(60, f"Incident description is only {length} characters")
    return not_triggered()


def check_round_amount(claim: ClaimDataInput) -> CheckResult:
    if not claim.claim_amount:
        return not_triggered()
    if claim.claim_amount >= 1000 and claim.claim_amount % 1000 == 0:
        return triggered(
            45,
            f"Claim amount (${money(claim.claim_amount)}) is a round number",
        )
    return not_triggered()


def check_missing_contact(claim: ClaimDataInput) -> CheckResult:
    missing: List[str] = []
    if not claim.claimant_phone:
        missing.append("phone")
    if not claim.claimant_email:
        missing.append("email")
    if not claim.claimant_address:
        missing.append("address")

    if len(missing) >= 2:
        return triggered(55, f"Missing contact info: {', '.join(missing)}")
    return not_triggered()


def check_rapid_submission(claim: ClaimDataInput) -> CheckResult:
    if claim.incident_date is None or claim.claim_date is None:
        return not_triggered()
    if (claim.claim_date - claim.incident_date).days == 0:
        return triggered(40, "Claim filed on same day as incident")
    return not_triggered()


FRAUD_RULES: List[ScoringRule[ClaimDataInput]] = [
    ScoringRule(
        code="FR001",
        name="Identity Mismatch",
        description="Claimant name does not match policy holder name",
        severity="critical",
        base_weight=25,
        impacted_fields=("claimant_name", "policy_holder_name"),
        remediation_hint="Verify claimant relationship to policy holder and request authorization documents",
        check=check_identity_mismatch,
    ),
    ScoringRule(
        code="FR002",
        name="Claim Exceeds Policy Limit",
        description="Claim amount exceeds the policy coverage limit",
        severity="critical",
        base_weight=30,
        impacted_fields=("claim_amount", "policy_limit"),
        remediation_hint="Review policy terms and verify claim amount breakdown",
        check=check_exceeds_policy_limit,
    ),
    ScoringRule(
        code="FR003",
        name="Suspicious Claim Frequency",
        description="Multiple claims filed within short time period",
        severity="warning",
        base_weight=20,
        impacted_fields=("previous_claims_count", "days_since_last_claim"),
        remediation_hint="Review claim history and verify each incident separately",
        check=check_claim_frequency,
    ),
    ScoringRule(
        code="FR004",
        name="Date Sequence Anomaly",
        description="Treatment or claim date precedes incident date",
        severity="critical",
        base_weight=35,
        impacted_fields=("incident_date", "treatment_date", "claim_date"),
        remediation_hint="Verify all dates in documentation and request clarification",
        check=check_date_sequence,
    ),
    ScoringRule(
        code="FR005",
        name="Unknown Provider",
        description="Healthcare provider name contains suspicious keywords",
        severity="warning",
        base_weight=15,
        impacted_fields=("provider_name",),
        remediation_hint="Verify provider credentials and registration status",
        check=check_suspicious_provider,
    ),
    ScoringRule(
        code="FR006",
        name="Missing Provider NPI",
        description="Healthcare provider NPI number is missing",
        severity="info",
        base_weight=10,
        impacted_fields=("provider_npi",),
        remediation_hint="Request valid NPI number from provider",
        check=check_missing_npi,
    ),
    ScoringRule(
        code="FR007",
        name="High Claim Amount",
        description="Claim amount is unusually high",
        severity="warning",
        base_weight=15,
        impacted_fields=("claim_amount",),
        remediation_hint="Request itemized breakdown and supporting documentation",
        check=check_high_amount,
    ),
    ScoringRule(
        code="FR008",
        name="Same-Day Incident and Treatment",
        description="Treatment occurred on same day as incident (common in staged claims)",
        severity="info",
        base_weight=8,
        impacted_fields=("incident_date", "treatment_date"),
        remediation_hint="Verify treatment necessity and review medical records",
        check=check_same_day_treatment,
    ),
    ScoringRule(
        code="FR009",
        name="Vague Incident Description",
        description="Incident description is too short or vague",
        severity="info",
        base_weight=5,
        impacted_fields=("incident_description",),
        remediation_hint="Request detailed incident report with specific circumstances",
        check=check_vague_description,
    ),
    ScoringRule(
        code="FR010",
        name="Round Number Claim",
        description="Claim amount is a suspiciously round number",
        severity="info",
        base_weight=5,
        impacted_fields=("claim_amount",),
        remediation_hint="Request itemized receipts and invoices",
        check=check_round_amount,
    ),
    ScoringRule(
        code="FR011",
        name="Missing Contact Information",
        description="Claimant contact information is incomplete",
        severity="info",
        base_weight=8,
        impacted_fields=("claimant_phone", "claimant_email", "claimant_address"),
        remediation_hint="Request complete contact information for verification",
        check=check_missing_contact,
    ),
    ScoringRule(
        code="FR012",
        name="Rapid Claim Submission",
        description="Claim filed very quickly after incident",
        severity="info",
        base_weight=5,
        impacted_fields=("incident_date", "claim_date"),
        remediation_hint="Verify incident details and documentation availability",
        check=check_rapid_submission,
    ),
]

validate_rule_table(FRAUD_RULES)
