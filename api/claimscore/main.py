import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from claimscore.config import settings
from claimscore.api.fraud_routes import router as fraud_router
from claimscore.api.underwriting_routes import router as underwriting_router
from claimscore.api.rules_routes import router as rules_router
from claimscore.api.fields_routes import router as fields_router
from claimscore.api.documents_routes import router as documents_router
from claimscore.api.submissions_routes import router as submissions_router
from claimscore.services.llm_client import has_api_key

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.APP_TITLE,
    version="0.1.0",
    description="Claims intake, fraud scoring and underwriting risk scoring",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health_check() -> dict:
    """
    Liveness plus whether an extraction API key is configured
    """
    return {"status": "ok", "has_api_key": has_api_key()}


# Mount routers
app.include_router(fraud_router, prefix="/api")
app.include_router(underwriting_router, prefix="/api")
app.include_router(rules_router, prefix="/api")
app.include_router(fields_router, prefix="/api")
app.include_router(documents_router, prefix="/api")
app.include_router(submissions_router, prefix="/api")
