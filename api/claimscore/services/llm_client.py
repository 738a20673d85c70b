from functools import lru_cache

from openai import OpenAI

from claimscore.config import settings


# Local OpenAI-compatible servers (LM Studio, vLLM) ignore the key, but the client insists on one
PLACEHOLDER_API_KEY = "local-placeholder-key"


def has_api_key() -> bool:
    return bool(settings.LLM_API_KEY)


@lru_cache(maxsize=1)
def get_lm_client() -> OpenAI:
    """
    Returns a singleton OpenAI-compatible client for the configured endpoint.
    """
    return OpenAI(
        base_url=settings.LLM_BASE_URL,
        api_key=settings.LLM_API_KEY or PLACEHOLDER_API_KEY,
    )
