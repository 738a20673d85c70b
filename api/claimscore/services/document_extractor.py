import base64
import json
import logging
import re
from typing import Any, List, Sequence
from uuid import uuid4

from claimscore.config import settings
from claimscore.models.documents import ConfidenceLevel, ExtractedField, ExtractionResult, FieldDefinition
from claimscore.services.llm_client import get_lm_client

logger = logging.getLogger(__name__)


NO_FIELDS_ERROR = "No extraction fields are enabled. Please enable at least one field in Settings."

_FENCED_JSON = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
_BARE_ARRAY = re.compile(r"\[[\s\S]*\]")


def to_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def build_extraction_prompt(fields: Sequence[FieldDefinition]) -> str:
    field_list = "\n".join(f"- {f.name}: {f.description}" for f in fields)

    return f"""
You are an expert document analyzer specializing in insurance claims processing.
Analyze the attached document (a PDF page or an image) and extract all relevant claims-related information.

For each field you extract, provide:
1. The field label (use camelCase, e.g., "policyNumber", "claimAmount")
2. The extracted value
3. Your confidence level: "high", "medium", or "low"

Focus on extracting these fields if present in the document:
{field_list}

Only include fields that are actually present in the document. Do not invent data.

Respond with a JSON array of objects in this exact format:
[
  {{"label": "fieldName", "value": "extracted value", "confidence": "high|medium|low"}}
]

If you cannot extract any useful information from the document, respond with an empty array: []
    """.strip()


def normalize_confidence(value: Any) -> ConfidenceLevel:
    normalized = str(value or "").strip().lower()
    if normalized in ("high", "medium", "low"):
        return normalized  # type: ignore[return-value]
    return "medium"


def parse_extraction_response(content: str) -> List[ExtractedField]:
    """
    Pull the JSON array out of a model reply. Accepts a ```json fenced block,
    a bare array embedded in prose, or the raw array. Raises ValueError otherwise.
    """
    payload = content.strip()
    fenced = _FENCED_JSON.search(payload)
    if fenced:
        payload = fenced.group(1).strip()
    else:
        bare = _BARE_ARRAY.search(payload)
        if bare:
            payload = bare.group(0)

    try:
        raw = json.loads(payload)
    except json.JSONDecodeError as ex:
        raise ValueError(f"Model did not return valid JSON: {ex}") from ex

    if not isinstance(raw, list):
        raise ValueError("Response is not a JSON array")

    fields: List[ExtractedField] = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            continue
        value = item.get("value")
        fields.append(
            ExtractedField(
                id=f"field-{index}-{uuid4().hex[:8]}",
                label=str(item.get("label") or f"field{index}"),
                value="" if value is None else str(value),
                confidence=normalize_confidence(item.get("confidence")),
            )
        )
    return fields


def extract_fields_from_document(
    data_base64: str,
    mime_type: str,
    field_definitions: Sequence[FieldDefinition],
) -> ExtractionResult:
    """
    Send one document to the OpenAI-compatible vision endpoint and parse the
    fields it returns. Never raises: failures come back in `error`.
    """
    if not field_definitions:
        return ExtractionResult(error=NO_FIELDS_ERROR)

    prompt = build_extraction_prompt(field_definitions)

    try:
        response = get_lm_client().chat.completions.create(
            model=settings.LLM_MODEL,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image_url",
                            "image_url": {"url": f"data:{mime_type};base64,{data_base64}"},
                        },
                        {"type": "text", "text": prompt},
                    ],
                }
            ],
            max_tokens=4096,
            temperature=0.1,
        )
        content = response.choices[0].message.content or ""
        fields = parse_extraction_response(content)
    except Exception as ex:
        logger.error("Document extraction failed: %s", ex)
        return ExtractionResult(error=str(ex) or "Failed to extract fields from document")

    logger.info("Extracted %d fields from %s document", len(fields), mime_type)
    return ExtractionResult(fields=fields)
