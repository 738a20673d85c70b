# tests/test_document_extractor.py
from types import SimpleNamespace

import pytest

from claimscore.services import document_extractor
from claimscore.services.document_extractor import (
    NO_FIELDS_ERROR,
    build_extraction_prompt,
    extract_fields_from_document,
    normalize_confidence,
    parse_extraction_response,
)
from claimscore.services.storage import DEFAULT_FIELD_DEFINITIONS


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _fake_client(monkeypatch, **kwargs):
    completions = FakeCompletions(**kwargs)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    monkeypatch.setattr(document_extractor, "get_lm_client", lambda: client)
    return completions


def test_parses_fenced_json_block():
    content = 'Here you go:\n```json\n[{"label": "policyNumber", "value": "POL-1", "confidence": "high"}]\n```'
    fields = parse_extraction_response(content)
    assert len(fields) == 1
    assert fields[0].label == "policyNumber"
    assert fields[0].value == "POL-1"
    assert fields[0].confidence == "high"
    assert fields[0].is_edited is False


def test_parses_bare_array_in_prose_and_normalizes_values():
    content = 'Result: [{"label": "claimAmount", "value": 1500, "confidence": "HIGH"}, ' \
              '{"label": "claimantName", "value": null, "confidence": "sure"}, "junk"] done'
    fields = parse_extraction_response(content)
    assert [f.label for f in fields] == ["claimAmount", "claimantName"]
    assert fields[0].value == "1500"
    assert fields[0].confidence == "high"
    assert fields[1].value == ""
    assert fields[1].confidence == "medium"
    assert fields[0].id != fields[1].id


def test_empty_array_is_no_fields():
    assert parse_extraction_response("[]") == []


def test_non_array_reply_raises():
    with pytest.raises(ValueError):
        parse_extraction_response('{"label": "x"}')
    with pytest.raises(ValueError):
        parse_extraction_response("I could not read this document.")


def test_normalize_confidence():
    assert normalize_confidence("Low") == "low"
    assert normalize_confidence(None) == "medium"
    assert normalize_confidence("very high") == "medium"


def test_prompt_lists_requested_fields():
    prompt = build_extraction_prompt(DEFAULT_FIELD_DEFINITIONS[:2])
    assert "- policyNumber: The insurance policy number" in prompt
    assert "- claimNumber: The claim reference number" in prompt


def test_no_field_definitions_short_circuits(monkeypatch):
    completions = _fake_client(monkeypatch, content="[]")
    result = extract_fields_from_document("AAAA", "image/png", [])
    assert result.error == NO_FIELDS_ERROR
    assert completions.calls == []


def test_extraction_sends_data_url(monkeypatch):
    completions = _fake_client(
        monkeypatch,
        content='[{"label": "claimNumber", "value": "CLM-9", "confidence": "low"}]',
    )
    result = extract_fields_from_document("QUJD", "application/pdf", DEFAULT_FIELD_DEFINITIONS)

    assert result.error is None
    assert [(f.label, f.value, f.confidence) for f in result.fields] == [("claimNumber", "CLM-9", "low")]
    parts = completions.calls[0]["messages"][0]["content"]
    assert parts[0]["image_url"]["url"] == "data:application/pdf;base64,QUJD"


def test_client_failure_is_returned_not_raised(monkeypatch):
    _fake_client(monkeypatch, error=RuntimeError("connection refused"))
    result = extract_fields_from_document("QUJD", "image/png", DEFAULT_FIELD_DEFINITIONS)
    assert result.fields == []
    assert result.error == "connection refused"


def test_garbled_reply_is_returned_as_error(monkeypatch):
    _fake_client(monkeypatch, content="no json here")
    result = extract_fields_from_document("QUJD", "image/png", DEFAULT_FIELD_DEFINITIONS)
    assert result.error.startswith("Model did not return valid JSON")
