from typing import List

from fastapi import APIRouter, HTTPException

from claimscore.config import settings
from claimscore.models.claims import (
    AnalyzeFraudBulkRequest,
    AnalyzeFraudRequest,
    BulkFraudResult,
    ClaimDataInput,
    FraudAssessment,
    ParseCsvRequest,
    ParseCsvResponse,
)
from claimscore.models.generation import GenerateRequest, GeneratedClaimsResponse
from claimscore.services.batch import score_claims_batch
from claimscore.services.claim_generator import generate_claims
from claimscore.services.csv_import import parse_claims_csv
from claimscore.services.fraud_engine import SAMPLE_CLAIMS, score_fraud

router = APIRouter(prefix="/fraud", tags=["fraud"])


@router.get("/sample-data", response_model=List[ClaimDataInput])
def sample_data() -> List[ClaimDataInput]:
    return SAMPLE_CLAIMS


@router.post("/analyze", response_model=FraudAssessment)
def analyze(req: AnalyzeFraudRequest) -> FraudAssessment:
    return score_fraud(req.claim_data)


@router.post("/analyze-bulk", response_model=BulkFraudResult)
def analyze_bulk(req: AnalyzeFraudBulkRequest) -> BulkFraudResult:
    if len(req.claims) > settings.BATCH_MAX_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"At most {settings.BATCH_MAX_SIZE} claims can be analyzed per request",
        )
    return score_claims_batch(req.claims)


@router.post("/generate-bulk", response_model=GeneratedClaimsResponse)
def generate_bulk(req: GenerateRequest) -> GeneratedClaimsResponse:
    claims = generate_claims(req.count, seed=req.seed)
    return GeneratedClaimsResponse(claims=claims, count=len(claims))


@router.post("/parse-csv", response_model=ParseCsvResponse)
def parse_csv(req: ParseCsvRequest) -> ParseCsvResponse:
    try:
        claims, skipped = parse_claims_csv(req.csv_content)
    except ValueError as ex:
        raise HTTPException(status_code=400, detail=str(ex))
    return ParseCsvResponse(claims=claims, count=len(claims), skipped_rows=skipped)
