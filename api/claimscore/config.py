from typing import Dict, List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_TITLE: str = "Claims Intake & Risk Scoring API"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["http://localhost:5173"]

    # Tier lower bounds (inclusive). Anything below the smallest bound gets the floor tier.
    FRAUD_TIER_THRESHOLDS: Dict[str, int] = {"medium": 30, "high": 60}
    UNDERWRITING_TIER_THRESHOLDS: Dict[str, int] = {
        "standard": 25,
        "substandard": 50,
        "decline": 70,
    }

    # Premium tunables
    BASE_PREMIUM_RATE: float = 0.005
    PREMIUM_ADJUSTMENT_CAP: int = 40
    PROJECTED_LOSS_RATIOS: Dict[str, int] = {
        "preferred": 40,
        "standard": 55,
        "substandard": 70,
        "decline": 100,
    }

    # Bulk scoring
    BATCH_MAX_WORKERS: int = 4
    BATCH_MAX_SIZE: int = 1000

    # Uploads
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024
    ALLOWED_UPLOAD_TYPES: List[str] = [
        "application/pdf",
        "image/png",
        "image/jpeg",
        "image/jpg",
    ]

    # OpenAI-compatible endpoint used for document extraction (LM Studio by default)
    LLM_BASE_URL: str = "http://localhost:1234/v1"
    LLM_MODEL: str = "qwen/qwen3-vl-8b"
    LLM_API_KEY: str | None = None

    # Outbound e-mail
    SMTP_SERVER: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USERNAME: str | None = None
    SMTP_PASSWORD: str | None = None
    FROM_EMAIL: str = "noreply@claimscore.local"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
