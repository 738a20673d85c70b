from __future__ import annotations

from typing import List, Union

from claimscore.models.applications import CompanyApplicantInput, IndividualApplicantInput
from claimscore.services.scoring.engine import (
    CheckResult,
    ScoringRule,
    not_triggered,
    triggered,
    validate_rule_table,
)
from claimscore.services.scoring.formatting import money, number


Applicant = Union[IndividualApplicantInput, CompanyApplicantInput]

HAZARDOUS_OCCUPATIONS = [
    "Construction Worker", "Electrician", "Firefighter", "Police Officer",
    "Pilot", "Miner", "Logger", "Roofer",
]
HIGH_RISK_INDUSTRIES = ["Construction", "Mining", "Oil & Gas", "Manufacturing", "Transportation", "Agriculture"]
LOW_RISK_INDUSTRIES = ["Technology", "Professional Services", "Finance", "Education", "Telecommunications"]


def _in_list(value: str, options: List[str]) -> bool:
    needle = value.strip().lower()
    return any(needle == o.lower() for o in options)


# ---------------------------------------------------------------------------
# Individual applicants
# ---------------------------------------------------------------------------

def check_advanced_age(app: IndividualApplicantInput) -> CheckResult:
    if not app.age:
        return not_triggered()
    if app.age >= 60:
        return triggered(90, f"Applicant age ({app.age}) is in high-risk bracket")
    if app.age >= 50:
        return triggered(70, f"Applicant age ({app.age}) is in elevated-risk bracket")
    return not_triggered()


def check_smoker(app: IndividualApplicantInput) -> CheckResult:
    if app.smoking_status == "current":
        return triggered(100, "Applicant is a current tobacco user")
    if app.smoking_status == "former":
        return triggered(50, "Applicant is a former tobacco user")
    return not_triggered()


def check_chronic_conditions(app: IndividualApplicantInput) -> CheckResult:
    if app.has_chronic_conditions and app.chronic_conditions:
        return triggered(85, f"Pre-existing conditions: {', '.join(app.chronic_conditions)}")
    return not_triggered()


def check_high_bmi(app: IndividualApplicantInput) -> CheckResult:
    if not app.bmi:
        return not_triggered()
    if app.bmi >= 35:
        return triggered(90, f"BMI of {number(app.bmi)} indicates Class II obesity or higher")
    if app.bmi >= 30:
        return triggered(75, f"BMI of {number(app.bmi)} indicates obesity")
    return not_triggered()


def check_hazardous_occupation(app: IndividualApplicantInput) -> CheckResult:
    if not app.occupation:
        return not_triggered()
    occupation = app.occupation.lower()
    if any(o.lower() in occupation for o in HAZARDOUS_OCCUPATIONS):
        return triggered(85, f'Occupation "{app.occupation}" classified as hazardous')
    return not_triggered()


def check_hazardous_hobbies(app: IndividualApplicantInput) -> CheckResult:
    if app.hazardous_hobbies:
        return triggered(80, f"Hazardous activities: {', '.join(app.hazardous_hobbies)}")
    return not_triggered()


def check_poor_credit(app: IndividualApplicantInput) -> CheckResult:
    if not app.credit_score:
        return not_triggered()
    if app.credit_score < 580:
        return triggered(90, f"Credit score of {app.credit_score} is poor (below 580)")
    if app.credit_score < 670:
        return triggered(65, f"Credit score of {app.credit_score} is fair (below 670)")
    return not_triggered()


def check_excessive_coverage(app: IndividualApplicantInput) -> CheckResult:
    if not app.annual_income:
        return not_triggered()
    ratio = app.requested_coverage_amount / app.annual_income
    if ratio > 15:
        return triggered(95, f"Coverage ({ratio:.1f}x income) exceeds 15x income threshold")
    if ratio > 10:
        return triggered(70, f"Coverage ({ratio:.1f}x income) exceeds 10x income guideline")
    return not_triggered()


def check_individual_prior_claims(app: IndividualApplicantInput) -> CheckResult:
    if app.previous_claims_count and app.previous_claims_count >= 3:
        return triggered(
            85,
            f"{app.previous_claims_count} prior claims totaling ${money(app.previous_claims_amount or 0)}",
        )
    return not_triggered()


def check_no_prior_coverage(app: IndividualApplicantInput) -> CheckResult:
    if app.years_with_prior_coverage == 0:
        return triggered(70, "Applicant has no prior insurance coverage history")
    return not_triggered()


def check_excellent_credit(app: IndividualApplicantInput) -> CheckResult:
    if not app.credit_score:
        return not_triggered()
    if app.credit_score >= 750:
        return triggered(90, f"Excellent credit score of {app.credit_score}")
    return not_triggered()


def check_healthy_lifestyle(app: IndividualApplicantInput) -> CheckResult:
    healthy_bmi = app.bmi is not None and 18.5 <= app.bmi <= 25
    if app.smoking_status == "never" and healthy_bmi:
        return triggered(85, "Non-smoker with healthy BMI qualifies for wellness discount")
    return not_triggered()


# ---------------------------------------------------------------------------
# Company applicants
# ---------------------------------------------------------------------------

def check_high_risk_industry(app: CompanyApplicantInput) -> CheckResult:
    if _in_list(app.industry, HIGH_RISK_INDUSTRIES):
        return triggered(95, f'Industry "{app.industry}" classified as high-risk')
    return not_triggered()


def check_new_business(app: CompanyApplicantInput) -> CheckResult:
    if app.years_in_business is not None and app.years_in_business < 3:
        return triggered(85, f"Only {app.years_in_business} years in business")
    return not_triggered()


def check_loss_ratio(app: CompanyApplicantInput) -> CheckResult:
    if app.prior_loss_ratio is None:
        return not_triggered()
    if app.prior_loss_ratio > 75:
        return triggered(95, f"Prior loss ratio of {app.prior_loss_ratio:.1f}% exceeds 75% threshold")
    if app.prior_loss_ratio > 60:
        return triggered(75, f"Prior loss ratio of {app.prior_loss_ratio:.1f}% is elevated")
    return not_triggered()


def check_osha_incidents(app: CompanyApplicantInput) -> CheckResult:
    if not app.osha_incidents:
        return not_triggered()
    if app.osha_incidents >= 3:
        return triggered(95, f"{app.osha_incidents} OSHA recordable incidents")
    if app.osha_incidents >= 1:
        return triggered(70, f"{app.osha_incidents} OSHA recordable incident(s)")
    return not_triggered()


def check_geographic_concentration(app: CompanyApplicantInput) -> CheckResult:
    if app.geographic_concentration is None:
        return not_triggered()
    if app.geographic_concentration > 80:
        return triggered(
            85,
            f"{app.geographic_concentration:.0f}% of operations concentrated in single area",
        )
    return not_triggered()


def check_low_liquidity(app: CompanyApplicantInput) -> CheckResult:
    if app.liquidity_ratio is None:
        return not_triggered()
    if app.liquidity_ratio < 1.0:
        return triggered(90, f"Liquidity ratio of {app.liquidity_ratio:.2f} is below 1.0")
    if app.liquidity_ratio < 1.5:
        return triggered(65, f"Liquidity ratio of {app.liquidity_ratio:.2f} is marginal")
    return not_triggered()


def check_large_workforce(app: CompanyApplicantInput) -> CheckResult:
    if not app.employee_count:
        return not_triggered()
    if app.employee_count > 200:
        return triggered(80, f"{app.employee_count} employees increases aggregate exposure")
    return not_triggered()


def check_company_prior_claims(app: CompanyApplicantInput) -> CheckResult:
    if not app.previous_claims_count:
        return not_triggered()
    if app.previous_claims_count >= 5:
        return triggered(
            90,
            f"{app.previous_claims_count} prior claims totaling ${money(app.previous_claims_amount or 0)}",
        )
    if app.previous_claims_count >= 3:
        return triggered(70, f"{app.previous_claims_count} prior claims")
    return not_triggered()


def check_safety_certifications(app: CompanyApplicantInput) -> CheckResult:
    if app.has_safety_certifications and app.safety_certifications:
        return triggered(90, f"Holds certifications: {', '.join(app.safety_certifications)}")
    return not_triggered()


def check_risk_management_program(app: CompanyApplicantInput) -> CheckResult:
    if app.has_risk_management_program:
        return triggered(85, "Has formal risk management program in place")
    return not_triggered()


def check_established_business(app: CompanyApplicantInput) -> CheckResult:
    if app.years_in_business and app.years_in_business >= 10:
        return triggered(85, f"{app.years_in_business} years in business provides stability")
    return not_triggered()


def check_low_risk_industry(app: CompanyApplicantInput) -> CheckResult:
    if _in_list(app.industry, LOW_RISK_INDUSTRIES):
        return triggered(90, f'Industry "{app.industry}" classified as low-risk')
    return not_triggered()


INDIVIDUAL = ("individual",)
COMPANY = ("company",)

UNDERWRITING_RULES: List[ScoringRule[Applicant]] = [
    # --- individual: loadings ---
    ScoringRule(
        code="UW001",
        name="Advanced Age Risk",
        description="Applicant age significantly increases mortality/morbidity risk",
        severity="warning",
        dimension="risk",
        base_weight=15,
        applicable_types=INDIVIDUAL,
        impacted_fields=("age",),
        remediation_hint="Consider age-adjusted premium or reduced coverage term",
        check=check_advanced_age,
    ),
    ScoringRule(
        code="UW002",
        name="Current Smoker",
        description="Active tobacco use significantly increases health risks",
        severity="critical",
        dimension="risk",
        base_weight=25,
        applicable_types=INDIVIDUAL,
        impacted_fields=("smoking_status",),
        remediation_hint="Apply smoker rates or require cessation program enrollment",
        check=check_smoker,
    ),
    ScoringRule(
        code="UW003",
        name="Pre-existing Health Conditions",
        description="Chronic health conditions increase expected claims",
        severity="warning",
        dimension="risk",
        base_weight=20,
        applicable_types=INDIVIDUAL,
        impacted_fields=("has_chronic_conditions", "chronic_conditions"),
        remediation_hint="Request detailed medical records and apply condition-specific loading",
        check=check_chronic_conditions,
    ),
    ScoringRule(
        code="UW004",
        name="High BMI",
        description="Elevated BMI indicates increased health risks",
        severity="info",
        dimension="risk",
        base_weight=10,
        applicable_types=INDIVIDUAL,
        impacted_fields=("bmi",),
        remediation_hint="Consider health improvement incentive program",
        check=check_high_bmi,
    ),
    ScoringRule(
        code="UW005",
        name="Hazardous Occupation",
        description="Occupation involves elevated injury/mortality risk",
        severity="warning",
        dimension="risk",
        base_weight=15,
        applicable_types=INDIVIDUAL,
        impacted_fields=("occupation",),
        remediation_hint="Apply occupational hazard loading factor",
        check=check_hazardous_occupation,
    ),
    ScoringRule(
        code="UW006",
        name="Hazardous Hobbies",
        description="Recreational activities with elevated risk exposure",
        severity="warning",
        dimension="risk",
        base_weight=12,
        applicable_types=INDIVIDUAL,
        impacted_fields=("hazardous_hobbies",),
        remediation_hint="Apply avocation exclusion or additional premium loading",
        check=check_hazardous_hobbies,
    ),
    ScoringRule(
        code="UW007",
        name="Poor Credit Score",
        description="Low credit score correlates with higher claim frequency",
        severity="info",
        dimension="profitability",
        base_weight=10,
        applicable_types=INDIVIDUAL,
        impacted_fields=("credit_score",),
        remediation_hint="Apply credit-based insurance score adjustment",
        check=check_poor_credit,
    ),
    ScoringRule(
        code="UW008",
        name="Excessive Coverage Request",
        description="Coverage amount disproportionate to income/net worth",
        severity="critical",
        dimension="profitability",
        base_weight=20,
        applicable_types=INDIVIDUAL,
        impacted_fields=("requested_coverage_amount", "annual_income"),
        remediation_hint="Request financial justification or reduce coverage amount",
        check=check_excessive_coverage,
    ),
    ScoringRule(
        code="UW009",
        name="Frequent Prior Claims",
        description="History of multiple claims indicates higher future claim probability",
        severity="warning",
        dimension="risk",
        base_weight=18,
        applicable_types=INDIVIDUAL,
        impacted_fields=("previous_claims_count", "previous_claims_amount"),
        remediation_hint="Apply claims surcharge or exclude prior conditions",
        check=check_individual_prior_claims,
    ),
    ScoringRule(
        code="UW010",
        name="No Prior Coverage",
        description="Lack of insurance history may indicate adverse selection",
        severity="info",
        dimension="profitability",
        base_weight=8,
        applicable_types=INDIVIDUAL,
        impacted_fields=("years_with_prior_coverage",),
        remediation_hint="Consider waiting period for pre-existing conditions",
        check=check_no_prior_coverage,
    ),
    # --- individual: discounts ---
    ScoringRule(
        code="UW011",
        name="Excellent Credit",
        description="High credit score indicates lower claim risk",
        severity="info",
        dimension="profitability",
        base_weight=-8,
        applicable_types=INDIVIDUAL,
        impacted_fields=("credit_score",),
        remediation_hint="Apply preferred rate discount",
        check=check_excellent_credit,
    ),
    ScoringRule(
        code="UW012",
        name="Healthy Lifestyle",
        description="Non-smoker with healthy BMI indicates lower risk",
        severity="info",
        dimension="risk",
        base_weight=-10,
        applicable_types=INDIVIDUAL,
        impacted_fields=("smoking_status", "bmi"),
        remediation_hint="Apply healthy lifestyle discount",
        check=check_healthy_lifestyle,
    ),
    # --- company: loadings ---
    ScoringRule(
        code="UW101",
        name="High-Risk Industry",
        description="Industry classification indicates elevated loss exposure",
        severity="critical",
        dimension="risk",
        base_weight=25,
        applicable_types=COMPANY,
        impacted_fields=("industry",),
        remediation_hint="Apply industry hazard class loading and require safety protocols",
        check=check_high_risk_industry,
    ),
    ScoringRule(
        code="UW102",
        name="New Business",
        description="Limited operating history increases uncertainty",
        severity="warning",
        dimension="profitability",
        base_weight=15,
        applicable_types=COMPANY,
        impacted_fields=("years_in_business",),
        remediation_hint="Require personal guarantees or higher deductibles",
        check=check_new_business,
    ),
    ScoringRule(
        code="UW103",
        name="Poor Loss Ratio History",
        description="Historical loss ratio exceeds acceptable threshold",
        severity="critical",
        dimension="profitability",
        base_weight=30,
        applicable_types=COMPANY,
        impacted_fields=("prior_loss_ratio",),
        remediation_hint="Require loss control measures or increase premium significantly",
        check=check_loss_ratio,
    ),
    ScoringRule(
        code="UW104",
        name="OSHA Incidents",
        description="Workplace safety incidents indicate poor risk management",
        severity="critical",
        dimension="risk",
        base_weight=20,
        applicable_types=COMPANY,
        impacted_fields=("osha_incidents",),
        remediation_hint="Require safety audit and corrective action plan",
        check=check_osha_incidents,
    ),
    ScoringRule(
        code="UW105",
        name="High Geographic Concentration",
        description="Business concentrated in single geographic area increases CAT exposure",
        severity="warning",
        dimension="risk",
        base_weight=12,
        applicable_types=COMPANY,
        impacted_fields=("geographic_concentration",),
        remediation_hint="Consider geographic diversification requirements or CAT sublimits",
        check=check_geographic_concentration,
    ),
    ScoringRule(
        code="UW106",
        name="Low Liquidity",
        description="Poor liquidity may indicate inability to self-insure minor losses",
        severity="warning",
        dimension="profitability",
        base_weight=10,
        applicable_types=COMPANY,
        impacted_fields=("liquidity_ratio",),
        remediation_hint="Consider higher deductibles or require financial covenants",
        check=check_low_liquidity,
    ),
    ScoringRule(
        code="UW107",
        name="Large Workforce Risk",
        description="High employee count increases workers comp exposure",
        severity="info",
        dimension="risk",
        base_weight=8,
        applicable_types=COMPANY,
        impacted_fields=("employee_count",),
        remediation_hint="Verify workers compensation coverage and safety programs",
        check=check_large_workforce,
    ),
    ScoringRule(
        code="UW108",
        name="Frequent Prior Claims",
        description="History of multiple claims indicates higher future claim probability",
        severity="warning",
        dimension="profitability",
        base_weight=18,
        applicable_types=COMPANY,
        impacted_fields=("previous_claims_count", "previous_claims_amount"),
        remediation_hint="Require detailed loss runs and implement retention program",
        check=check_company_prior_claims,
    ),
    # --- company: discounts ---
    ScoringRule(
        code="UW109",
        name="Safety Certifications",
        description="Industry safety certifications indicate proactive risk management",
        severity="info",
        dimension="risk",
        base_weight=-12,
        applicable_types=COMPANY,
        impacted_fields=("has_safety_certifications", "safety_certifications"),
        remediation_hint="Apply safety certification discount",
        check=check_safety_certifications,
    ),
    ScoringRule(
        code="UW110",
        name="Risk Management Program",
        description="Formal risk management program reduces loss frequency",
        severity="info",
        dimension="risk",
        base_weight=-10,
        applicable_types=COMPANY,
        impacted_fields=("has_risk_management_program",),
        remediation_hint="Apply risk management discount",
        check=check_risk_management_program,
    ),
    ScoringRule(
        code="UW111",
        name="Established Business",
        description="Long operating history indicates stability and predictability",
        severity="info",
        dimension="profitability",
        base_weight=-8,
        applicable_types=COMPANY,
        impacted_fields=("years_in_business",),
        remediation_hint="Apply longevity discount",
        check=check_established_business,
    ),
    ScoringRule(
        code="UW112",
        name="Low-Risk Industry",
        description="Industry classification indicates lower loss exposure",
        severity="info",
        dimension="risk",
        base_weight=-10,
        applicable_types=COMPANY,
        impacted_fields=("industry",),
        remediation_hint="Apply preferred industry discount",
        check=check_low_risk_industry,
    ),
]

validate_rule_table(UNDERWRITING_RULES)
