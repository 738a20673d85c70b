from pydantic import BaseModel, Field
from typing import List, Literal, Optional

from claimscore.models.applications import UnderwritingApplicationInput
from claimscore.models.claims import ClaimDataInput


class GenerateRequest(BaseModel):
    count: int = Field(100, gt=0, le=1000)
    applicant_type: Optional[Literal["individual", "company"]] = None  # underwriting only; None = mixed
    seed: Optional[int] = None


class GeneratedClaimsResponse(BaseModel):
    claims: List[ClaimDataInput]
    count: int


class GeneratedApplicationsResponse(BaseModel):
    applications: List[UnderwritingApplicationInput]
    count: int
