import random
from datetime import date, timedelta
from typing import List, Optional, Union

from claimscore.models.applications import CompanyApplicantInput, IndividualApplicantInput
from claimscore.models.claims import ClaimDataInput
from claimscore.services.scoring.underwriting_rules import (
    HAZARDOUS_OCCUPATIONS,
    HIGH_RISK_INDUSTRIES,
    LOW_RISK_INDUSTRIES,
)


FIRST_NAMES = [
    "John", "Jane", "Michael", "Sarah", "David", "Emma", "Robert", "Emily", "William", "Olivia",
    "James", "Sophia", "Daniel", "Isabella", "Matthew", "Mia", "Andrew", "Charlotte", "Joseph", "Amelia",
]
LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis", "Rodriguez", "Martinez",
    "Hernandez", "Lopez", "Gonzalez", "Wilson", "Anderson", "Thomas", "Taylor", "Moore", "Jackson", "Martin",
]
PROVIDERS = [
    "City General Hospital", "Community Medical Center", "Regional Health Clinic", "Premier Care Hospital",
    "Wellness Medical Group", "QuickCare Clinic", "Unknown Provider", "Private Practice", "Central Hospital",
    "Metro Health",
]
LOCATIONS = [
    "Main St & Oak Ave", "Highway 101", "Parking Lot A", "Home", "Workplace", "Shopping Mall",
    "Interstate 95", "Downtown Area", "Residential Area", "Industrial Zone",
]
DESCRIPTIONS = [
    "Vehicle collision at intersection",
    "Slip and fall accident",
    "Medical procedure complications",
    "Minor fender bender",
    "Workplace injury",
    "Sports injury during game",
    "Home accident",
    "Auto accident on highway",
    "Pedestrian incident",
    "Property damage from storm",
    "brief",
    "accident",
]
DIAGNOSIS_CODES = ["S00.0", "S13.4", "Z99.9", "M54.5", "S62.5", "T14.9", "S92.9", "K08.9", "R51", "J06.9"]
STREETS = ["Main", "Oak", "Elm", "Pine", "Cedar"]
MAKES = ["Toyota", "Honda", "Ford", "Chevrolet", "BMW"]
MODELS = ["Camry", "Civic", "F-150", "Malibu", "X3"]

OFFICE_OCCUPATIONS = [
    "Software Engineer", "Accountant", "Teacher", "Nurse", "Sales Manager",
    "Graphic Designer", "Attorney", "Pharmacist", "Marketing Analyst", "Consultant",
]
HOBBIES = ["Skydiving", "Rock Climbing", "Scuba Diving", "Motorcycle Racing", "Hang Gliding", "Mountaineering"]
CHRONIC_CONDITIONS = ["Diabetes", "Hypertension", "Asthma", "Heart Disease", "COPD", "Arthritis"]
COVERAGE_TYPES_INDIVIDUAL = ["Life", "Health", "Disability"]
COVERAGE_TYPES_COMPANY = ["General Liability", "Workers Compensation", "Commercial Property", "Professional Liability"]
OTHER_INDUSTRIES = ["Retail", "Hospitality", "Healthcare", "Real Estate"]
COMPANY_PREFIXES = ["Summit", "Pioneer", "Harbor", "Cascade", "Ironwood", "Bluestone", "Keystone", "Northstar"]
COMPANY_SUFFIXES = ["Group", "Holdings", "Partners", "Industries", "Solutions", "Co."]
CERTIFICATIONS = ["OSHA 30", "ISO 45001", "ISO 9001", "SafetyFirst Gold", "COR Certified"]


# --------- PUBLIC ENTRY POINTS --------- #

def generate_claims(count: int, seed: Optional[int] = None, today: Optional[date] = None) -> List[ClaimDataInput]:
    """
    Synthetic claims with correlated fields. A fixed minority are adversarial
    (limit below amount, treatment before incident, frequent claimants) so a
    batch exercises the critical fraud rules.
    """
    rng = random.Random(seed)
    today = today or date.today()
    return [_make_claim(rng, index, today) for index in range(count)]


def generate_applications(
    count: int,
    applicant_type: Optional[str] = None,
    seed: Optional[int] = None,
) -> List[Union[IndividualApplicantInput, CompanyApplicantInput]]:
    """Synthetic underwriting applications; mixed 50/50 when applicant_type is None."""
    rng = random.Random(seed)

    apps: List[Union[IndividualApplicantInput, CompanyApplicantInput]] = []
    for _ in range(count):
        kind = applicant_type or rng.choice(["individual", "company"])
        if kind == "individual":
            apps.append(_make_individual(rng))
        else:
            apps.append(_make_company(rng))
    return apps


# --------- CLAIMS --------- #

def _make_claim(rng: random.Random, index: int, today: date) -> ClaimDataInput:
    first = rng.choice(FIRST_NAMES)
    last = rng.choice(LAST_NAMES)
    claimant_name = f"{first} {last}"

    if rng.random() < 0.7:
        policy_holder_name = claimant_name
    else:
        policy_holder_name = f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"

    incident_date = today - timedelta(days=rng.randrange(60))
    # 20% of treatments are dated the day before the incident
    treatment_offset = rng.randrange(3) if rng.random() < 0.8 else -1
    treatment_date = incident_date + timedelta(days=treatment_offset)
    claim_date = incident_date + timedelta(days=rng.randrange(7))

    roll = rng.random()
    if roll < 0.1:
        claim_amount = rng.randint(0, 100_000)
    elif roll < 0.37:
        claim_amount = rng.randint(1, 10) * 1000
    else:
        claim_amount = rng.randint(0, 50_000)

    if rng.random() < 0.15:
        policy_limit = claim_amount - rng.randrange(10_000)
    else:
        policy_limit = claim_amount + rng.randrange(50_000) + 10_000
    policy_limit = max(policy_limit, 5000)

    if rng.random() < 0.2:
        previous_claims_count = rng.randint(3, 8)
    else:
        previous_claims_count = rng.randint(0, 2)

    days_since_last_claim: Optional[int] = None
    if previous_claims_count > 0:
        days_since_last_claim = rng.randrange(60) if rng.random() < 0.3 else rng.randrange(365) + 60

    provider_name = rng.choice(PROVIDERS)
    has_npi = "unknown" not in provider_name.lower() and rng.random() < 0.7

    address = None
    if rng.random() >= 0.2:
        address = f"{rng.randint(1, 999)} {rng.choice(STREETS)} Street, Springfield"
    phone = None
    if rng.random() >= 0.15:
        phone = f"555-{rng.randint(100, 999)}-{rng.randint(1000, 9999)}"
    email = None
    if rng.random() >= 0.15:
        email = f"{first.lower()}.{last.lower()}@email.com"
    vehicle = None
    if rng.random() >= 0.5:
        vehicle = f"{rng.randint(2018, 2024)} {rng.choice(MAKES)} {rng.choice(MODELS)}"

    return ClaimDataInput(
        claimant_name=claimant_name,
        policy_number=f"POL-2024-{10000 + index:05d}",
        claim_number=f"CLM-2024-{50000 + index:05d}",
        claim_date=claim_date,
        claim_amount=claim_amount,
        incident_date=incident_date,
        incident_description=rng.choice(DESCRIPTIONS),
        incident_location=rng.choice(LOCATIONS),
        treatment_date=treatment_date,
        provider_name=provider_name,
        provider_npi=str(rng.randint(1_000_000_000, 9_999_999_999)) if has_npi else None,
        diagnosis_code=rng.choice(DIAGNOSIS_CODES),
        claimant_address=address,
        claimant_phone=phone,
        claimant_email=email,
        vehicle_info=vehicle,
        policy_holder_name=policy_holder_name,
        policy_limit=policy_limit,
        previous_claims_count=previous_claims_count,
        days_since_last_claim=days_since_last_claim,
    )


# --------- UNDERWRITING --------- #

def _make_individual(rng: random.Random) -> IndividualApplicantInput:
    age = rng.randint(22, 75)

    smoke_roll = rng.random()
    smoking_status = "current" if smoke_roll < 0.15 else "former" if smoke_roll < 0.35 else "never"

    # Older and smoking applicants skew heavier and less healthy
    bmi = rng.gauss(25.5 + (age - 40) * 0.05 + (1.5 if smoking_status == "current" else 0), 4.5)
    bmi = round(min(45.0, max(17.0, bmi)), 1)

    chronic_chance = 0.4 if age >= 50 else 0.12
    conditions = rng.sample(CHRONIC_CONDITIONS, rng.randint(1, 2)) if rng.random() < chronic_chance else []

    credit_base = 700 - (40 if smoking_status == "current" else 0) + min(age - 22, 30)
    credit_score = int(min(850, max(300, rng.gauss(credit_base, 60))))

    annual_income = rng.randint(30, 300) * 1000
    # Mostly 3-12x income, with a tail of oversized requests
    multiple = rng.uniform(3, 12) if rng.random() < 0.85 else rng.uniform(12, 20)
    coverage = round(annual_income * multiple / 10_000) * 10_000

    occupation = rng.choice(HAZARDOUS_OCCUPATIONS) if rng.random() < 0.2 else rng.choice(OFFICE_OCCUPATIONS)
    hobbies = rng.sample(HOBBIES, rng.randint(1, 2)) if rng.random() < 0.15 else []

    previous_claims = rng.randint(3, 6) if rng.random() < 0.15 else rng.randint(0, 2)

    return IndividualApplicantInput(
        full_name=f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}",
        age=age,
        gender=rng.choice(["male", "female", "other"]),
        occupation=occupation,
        annual_income=annual_income,
        net_worth=int(annual_income * rng.uniform(0.5, 8)),
        credit_score=credit_score,
        smoking_status=smoking_status,
        has_chronic_conditions=bool(conditions),
        chronic_conditions=conditions,
        bmi=bmi,
        hazardous_hobbies=hobbies,
        previous_claims_count=previous_claims,
        previous_claims_amount=previous_claims * rng.randint(2, 25) * 1000,
        years_with_prior_coverage=0 if rng.random() < 0.1 else rng.randint(1, min(30, age - 18)),
        requested_coverage_amount=max(coverage, 50_000),
        coverage_type=rng.choice(COVERAGE_TYPES_INDIVIDUAL),
        policy_term=rng.choice([10, 15, 20, 30]),
    )


def _make_company(rng: random.Random) -> CompanyApplicantInput:
    industry_roll = rng.random()
    if industry_roll < 0.4:
        industry = rng.choice(HIGH_RISK_INDUSTRIES)
    elif industry_roll < 0.75:
        industry = rng.choice(LOW_RISK_INDUSTRIES)
    else:
        industry = rng.choice(OTHER_INDUSTRIES)
    high_risk = industry in HIGH_RISK_INDUSTRIES

    years_in_business = rng.randint(1, 50)
    employee_count = rng.randint(5, 600)
    annual_revenue = employee_count * rng.randint(80, 250) * 1000

    # Loss history tracks the industry; young firms are less predictable
    loss_ratio = rng.gauss(65 if high_risk else 45, 15 if years_in_business < 5 else 10)
    osha = rng.randint(0, 6) if high_risk else rng.randint(0, 1)

    has_certs = rng.random() < (0.5 if years_in_business >= 10 else 0.25)
    previous_claims = rng.randint(3, 8) if rng.random() < 0.25 else rng.randint(0, 2)

    return CompanyApplicantInput(
        company_name=f"{rng.choice(COMPANY_PREFIXES)} {rng.choice(COMPANY_SUFFIXES)}",
        industry=industry,
        years_in_business=years_in_business,
        employee_count=employee_count,
        annual_revenue=annual_revenue,
        annual_payroll=int(annual_revenue * rng.uniform(0.2, 0.45)),
        net_worth=int(annual_revenue * rng.uniform(0.1, 0.8)),
        liquidity_ratio=round(rng.uniform(0.6, 3.0), 2),
        previous_claims_count=previous_claims,
        previous_claims_amount=previous_claims * rng.randint(10, 120) * 1000,
        prior_loss_ratio=round(min(120.0, max(5.0, loss_ratio)), 1),
        osha_incidents=osha,
        has_safety_certifications=has_certs,
        safety_certifications=rng.sample(CERTIFICATIONS, rng.randint(1, 2)) if has_certs else [],
        has_risk_management_program=rng.random() < 0.5,
        geographic_concentration=round(rng.uniform(20, 100), 0),
        requested_coverage_amount=round(annual_revenue * rng.uniform(0.2, 1.0) / 100_000) * 100_000 or 100_000,
        coverage_type=rng.choice(COVERAGE_TYPES_COMPANY),
        policy_term=rng.choice([1, 2, 3]),
    )
