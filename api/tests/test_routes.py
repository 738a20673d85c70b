# tests/test_routes.py
from claimscore.api import documents_routes, submissions_routes
from claimscore.config import settings
from claimscore.models.documents import ExtractedField, ExtractionResult
from claimscore.models.submissions import NotificationResult
from claimscore.services.fraud_engine import SAMPLE_CLAIMS

PNG = b"\x89PNG\r\n\x1a\n fake image body"


def _fake_extraction(fields):
    def extract(data_base64, mime_type, field_definitions):
        return ExtractionResult(
            fields=[ExtractedField(id=f"f{i}", label=k, value=v, confidence="high") for i, (k, v) in enumerate(fields)]
        )
    return extract


def test_health(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"
    assert "has_api_key" in res.json()


# --------- FRAUD --------- #

def test_fraud_sample_and_analyze(client):
    samples = client.get("/api/fraud/sample-data").json()
    assert len(samples) == 3

    res = client.post("/api/fraud/analyze", json={"claim_data": samples[1]})
    assert res.status_code == 200
    body = res.json()
    assert body["risk_level"] == "high"
    assert body["overall_score"] == 100
    assert body["input_data"]["claimant_name"] == "Jane Doe"


def test_fraud_analyze_rejects_bad_payload(client):
    res = client.post("/api/fraud/analyze", json={"claim_data": {"claim_amount": "lots"}})
    assert res.status_code == 422


def test_fraud_bulk_skips_invalid_records(client):
    claims = [c.model_dump(mode="json") for c in SAMPLE_CLAIMS] + [{"claim_amount": "x"}]
    body = client.post("/api/fraud/analyze-bulk", json={"claims": claims}).json()
    assert body["total_count"] == 3
    assert body["skipped_count"] == 1
    assert body["summary"]["high_risk"] == 1
    assert body["summary"]["tier_counts"] == {"low": 2, "medium": 0, "high": 1}


def test_fraud_bulk_size_limit(client, monkeypatch):
    monkeypatch.setattr(settings, "BATCH_MAX_SIZE", 2)
    res = client.post("/api/fraud/analyze-bulk", json={"claims": [{}, {}, {}]})
    assert res.status_code == 400


def test_fraud_generate_is_seeded(client):
    first = client.post("/api/fraud/generate-bulk", json={"count": 5, "seed": 42}).json()
    assert first["count"] == 5
    assert len(first["claims"]) == 5
    assert client.post("/api/fraud/generate-bulk", json={"count": 0}).status_code == 422


def test_fraud_parse_csv(client):
    csv_content = "claimantName,claimAmount,policyLimit\nJohn,60000,50000\n"
    body = client.post("/api/fraud/parse-csv", json={"csv_content": csv_content}).json()
    assert body["count"] == 1
    assert body["claims"][0]["claim_amount"] == 60000

    res = client.post("/api/fraud/parse-csv", json={"csv_content": ""})
    assert res.status_code == 400


# --------- UNDERWRITING --------- #

def test_underwriting_sample_and_analyze(client):
    samples = client.get("/api/underwriting/sample-data").json()
    assert set(samples) == {"individual", "company"}

    res = client.post("/api/underwriting/analyze", json={"application_data": samples["individual"]})
    assert res.status_code == 200
    assert res.json()["risk_tier"] == "preferred"


def test_underwriting_analyze_scenario(client):
    app = {"applicant_type": "individual", "full_name": "Walter Gray", "age": 65,
           "smoking_status": "current", "requested_coverage_amount": 500000}
    body = client.post("/api/underwriting/analyze", json={"application_data": app}).json()
    assert body["overall_risk_score"] == 39
    assert body["recommended_premium"] == 6950


def test_underwriting_unknown_applicant_type(client):
    app = {"applicant_type": "partnership", "requested_coverage_amount": 1000}
    assert client.post("/api/underwriting/analyze", json={"application_data": app}).status_code == 422


def test_underwriting_generate_company_only(client):
    body = client.post(
        "/api/underwriting/generate-bulk", json={"count": 4, "applicant_type": "company", "seed": 1}
    ).json()
    assert body["count"] == 4
    assert {a["applicant_type"] for a in body["applications"]} == {"company"}

    bulk = client.post("/api/underwriting/analyze-bulk", json={"applications": body["applications"]}).json()
    assert bulk["total_count"] == 4


# --------- RULES & FIELDS --------- #

def test_rules_crud_and_evaluate(client):
    assert client.get("/api/rules").json() == []

    created = client.post(
        "/api/rules",
        json={
            "name": "Unknown provider",
            "conditions": [{"field": "providerName", "operator": "contains", "value": "unknown"}],
        },
    )
    assert created.status_code == 200
    rule_id = created.json()["id"]

    fields = [{"id": "1", "label": "providerName", "value": "Unknown Clinic", "confidence": "high"}]
    verdict = client.post("/api/rules/evaluate", json={"fields": fields}).json()
    assert verdict["verdict"] == "fail"
    assert verdict["failed_rules"] == ["Unknown provider"]

    # disabled rules are ignored
    assert client.patch(f"/api/rules/{rule_id}", json={"enabled": False}).json()["enabled"] is False
    assert client.post("/api/rules/evaluate", json={"fields": fields}).json()["verdict"] == "pending"

    assert client.delete(f"/api/rules/{rule_id}").json() == {"success": True}
    assert client.delete(f"/api/rules/{rule_id}").status_code == 404
    assert client.patch(f"/api/rules/{rule_id}", json={"enabled": True}).status_code == 404


def test_rule_requires_conditions(client):
    assert client.post("/api/rules", json={"name": "Empty", "conditions": []}).status_code == 422


def test_fields_update_and_reset(client):
    assert len(client.get("/api/fields").json()) == 16
    assert client.patch("/api/fields/1", json={"enabled": False}).json()["enabled"] is False
    assert client.patch("/api/fields/999", json={"enabled": False}).status_code == 404

    reset = client.post("/api/fields/reset").json()
    assert all(f["enabled"] for f in reset)


# --------- DOCUMENTS --------- #

def test_process_document(client, monkeypatch):
    monkeypatch.setattr(
        documents_routes, "extract_fields_from_document", _fake_extraction([("policyNumber", "POL-1")])
    )
    res = client.post("/api/documents/process", files={"file": ("scan.png", PNG, "image/png")})
    assert res.status_code == 200
    doc = res.json()["document"]
    assert doc["id"].startswith("doc-")
    assert doc["status"] == "completed"
    assert doc["file_size"] == len(PNG)
    assert doc["thumbnail_url"].startswith("data:image/png;base64,")
    assert doc["extracted_fields"][0]["value"] == "POL-1"


def test_process_document_errors(client, monkeypatch):
    assert client.post("/api/documents/process").status_code == 400
    res = client.post("/api/documents/process", files={"file": ("notes.txt", b"hello", "text/plain")})
    assert res.status_code == 415

    monkeypatch.setattr(
        documents_routes,
        "extract_fields_from_document",
        lambda *args: ExtractionResult(error="model offline"),
    )
    res = client.post("/api/documents/process", files={"file": ("scan.pdf", b"%PDF-1.7", "application/pdf")})
    assert res.status_code == 502
    assert res.json()["detail"] == "model offline"


def test_export_document(client):
    document = {
        "id": "doc-1",
        "filename": "scan.pdf",
        "file_type": "application/pdf",
        "file_size": 10,
        "uploaded_at": "2024-12-10T09:30:00Z",
        "status": "completed",
        "extracted_fields": [
            {"id": "a", "label": "claimNumber", "value": "CLM-1", "confidence": "high", "is_edited": True},
        ],
    }
    body = client.post("/api/documents/export", json=document).json()
    assert body["fields"] == {"claimNumber": "CLM-1"}
    assert body["metadata"]["edited_fields"] == 1

    res = client.post("/api/documents/export?format=csv", json=document)
    assert res.headers["content-type"].startswith("text/csv")
    assert res.text.splitlines() == ["field,value", "claimNumber,CLM-1"]

    document["extracted_fields"] = []
    assert client.post("/api/documents/export", json=document).status_code == 400


# --------- SUBMISSIONS --------- #

def _create_submission(client):
    res = client.post(
        "/api/submissions",
        json={
            "patient_info": {"name": "Ann Lee", "email": "ann@example.com", "phone": "5551234567"},
            "provider_email": "provider@clinic.com",
        },
    )
    assert res.status_code == 200
    return res.json()


def _upload(client, submission_id, document_type):
    return client.post(
        f"/api/submissions/{submission_id}/documents",
        data={"document_type": document_type},
        files={"file": (f"{document_type}.png", PNG, "image/png")},
    )


def test_submission_flow(client, monkeypatch):
    sub = _create_submission(client)
    sid = sub["id"]
    assert sub["status"] == "pending_documents"

    res = client.post(f"/api/submissions/{sid}/process")
    assert res.status_code == 400
    assert len(res.json()["detail"]["missing_documents"]) == 4

    for doc_type in ("identityCard", "dischargeSummary", "bills", "investigations"):
        res = _upload(client, sid, doc_type)
        assert res.status_code == 200
    body = res.json()
    assert body["is_complete"] is True
    assert body["status"] == "ready"
    assert all("file_data" not in d for d in body["document_checklist"])

    monkeypatch.setattr(
        submissions_routes, "extract_fields_from_document", _fake_extraction([("claimAmount", "1200")])
    )
    done = client.post(f"/api/submissions/{sid}/process").json()
    assert done["status"] == "completed"
    # the last document wins for a repeated label
    assert done["extracted_data"]["claimAmount"] == {
        "value": "1200",
        "confidence": "high",
        "source": "investigations",
    }

    assert client.post(f"/api/submissions/{sid}/notify").status_code == 400


def test_submission_upload_validation(client):
    sid = _create_submission(client)["id"]
    assert _upload(client, sid, "xray").status_code == 400
    assert _upload(client, "missing", "bills").status_code == 404
    assert client.get("/api/submissions/missing").status_code == 404


def test_submission_notify_once(client, monkeypatch):
    sid = _create_submission(client)["id"]
    _upload(client, sid, "bills")

    monkeypatch.setattr(
        submissions_routes,
        "send_missing_documents_email",
        lambda submission: NotificationResult(success=False, error="SMTP credentials are not configured"),
    )
    assert client.post(f"/api/submissions/{sid}/notify").status_code == 502

    sent = []
    monkeypatch.setattr(
        submissions_routes,
        "send_missing_documents_email",
        lambda submission: sent.append(submission.missing_documents) or NotificationResult(success=True),
    )
    body = client.post(f"/api/submissions/{sid}/notify").json()
    assert body["status"] == "notified"
    assert body["notification_sent_at"] is not None
    assert sent == [["identityCard", "dischargeSummary", "investigations"]]

    assert client.post(f"/api/submissions/{sid}/notify").status_code == 400


def test_bulk_endpoints_skip_non_object_elements(client):
    body = client.post("/api/fraud/analyze-bulk", json={"claims": [{"claim_amount": 100}, None, "garbage"]}).json()
    assert body["total_count"] == 1
    assert body["skipped_count"] == 2

    app = {"applicant_type": "individual", "full_name": "A", "requested_coverage_amount": 100000}
    res = client.post("/api/underwriting/analyze-bulk", json={"applications": [None, app, 7]})
    assert res.status_code == 200
    assert res.json()["total_count"] == 1
    assert res.json()["skipped_count"] == 2


def test_underwriting_analyze_rejects_unpriceable_application(client, monkeypatch):
    huge = {"applicant_type": "company", "company_name": "Huge Co", "industry": "Retail",
            "employee_count": 100000000, "requested_coverage_amount": 1e308}
    assert client.post("/api/underwriting/analyze", json={"application_data": huge}).status_code == 422

    monkeypatch.setattr(settings, "BASE_PREMIUM_RATE", 1e300)
    company = {"applicant_type": "company", "company_name": "Big Co", "industry": "Retail",
               "employee_count": 10000000, "requested_coverage_amount": 1e12}
    res = client.post("/api/underwriting/analyze", json={"application_data": company})
    assert res.status_code == 422
    assert res.json()["detail"].startswith("Premium cannot be priced")


def test_parse_csv_rejects_duplicate_columns(client):
    csv_content = "claimAmount,claim_amount\n100,200\n"
    res = client.post("/api/fraud/parse-csv", json={"csv_content": csv_content})
    assert res.status_code == 400
    assert "claim_amount" in res.json()["detail"]
