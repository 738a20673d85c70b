from typing import Dict, Union

from fastapi import APIRouter, HTTPException

from claimscore.config import settings
from claimscore.models.applications import (
    AnalyzeUnderwritingBulkRequest,
    AnalyzeUnderwritingRequest,
    BulkUnderwritingResult,
    CompanyApplicantInput,
    IndividualApplicantInput,
    UnderwritingAssessment,
)
from claimscore.models.generation import GenerateRequest, GeneratedApplicationsResponse
from claimscore.services.batch import score_applications_batch
from claimscore.services.claim_generator import generate_applications
from claimscore.services.underwriting_engine import SAMPLE_APPLICATIONS, score_underwriting

router = APIRouter(prefix="/underwriting", tags=["underwriting"])


@router.get("/sample-data")
def sample_data() -> Dict[str, Union[IndividualApplicantInput, CompanyApplicantInput]]:
    return SAMPLE_APPLICATIONS


@router.post("/analyze", response_model=UnderwritingAssessment)
def analyze(req: AnalyzeUnderwritingRequest) -> UnderwritingAssessment:
    try:
        return score_underwriting(req.application_data)
    except ValueError as ex:
        raise HTTPException(status_code=422, detail=str(ex))


@router.post("/analyze-bulk", response_model=BulkUnderwritingResult)
def analyze_bulk(req: AnalyzeUnderwritingBulkRequest) -> BulkUnderwritingResult:
    if len(req.applications) > settings.BATCH_MAX_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"At most {settings.BATCH_MAX_SIZE} applications can be analyzed per request",
        )
    return score_applications_batch(req.applications)


@router.post("/generate-bulk", response_model=GeneratedApplicationsResponse)
def generate_bulk(req: GenerateRequest) -> GeneratedApplicationsResponse:
    applications = generate_applications(req.count, applicant_type=req.applicant_type, seed=req.seed)
    return GeneratedApplicationsResponse(applications=applications, count=len(applications))
