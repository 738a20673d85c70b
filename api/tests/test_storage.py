# tests/test_storage.py
from claimscore.models.documents import FieldDefinitionCreate, FieldDefinitionUpdate
from claimscore.models.rules import RuleCondition, RuleCreate, RuleUpdate
from claimscore.models.submissions import PatientInfo
from claimscore.services.storage import DEFAULT_FIELD_DEFINITIONS


def _rule():
    return RuleCreate(
        name="High amount",
        conditions=[RuleCondition(field="claimAmount", operator="greaterThan", value="10000")],
    )


def test_defaults_loaded_and_reset(store):
    assert len(store.get_field_definitions()) == len(DEFAULT_FIELD_DEFINITIONS) == 16

    store.update_field_definition("1", FieldDefinitionUpdate(enabled=False))
    created = store.create_field_definition(FieldDefinitionCreate(name="icd10", description="ICD-10 code"))
    assert len(store.get_enabled_field_definitions()) == 16
    assert store.delete_field_definition("2")

    fields = store.reset_field_definitions()
    assert [f.id for f in fields] == [f.id for f in DEFAULT_FIELD_DEFINITIONS]
    assert all(f.enabled for f in fields)
    assert created.id not in {f.id for f in fields}


def test_update_only_touches_given_fields(store):
    updated = store.update_field_definition("4", FieldDefinitionUpdate(description="Total billed"))
    assert updated.name == "claimAmount"
    assert updated.description == "Total billed"
    assert updated.enabled is True
    assert store.update_field_definition("nope", FieldDefinitionUpdate(enabled=False)) is None


def test_rule_crud(store):
    rule = store.create_rule(_rule())
    assert store.get_rule(rule.id) == rule

    updated = store.update_rule(
        rule.id,
        RuleUpdate(conditions=[RuleCondition(field="providerName", operator="contains", value="unknown")]),
    )
    assert updated.name == "High amount"
    assert updated.conditions[0].field == "providerName"

    store.update_rule(rule.id, RuleUpdate(enabled=False))
    assert store.get_enabled_rules() == []
    assert len(store.get_rules()) == 1

    assert store.delete_rule(rule.id)
    assert not store.delete_rule(rule.id)
    assert store.update_rule(rule.id, RuleUpdate(enabled=True)) is None


def test_submission_completes_when_all_documents_uploaded(store):
    sub = store.create_submission(
        PatientInfo(name="Ann Lee", email="ann@example.com", phone="5551234567"),
        "provider@clinic.com",
    )
    assert sub.status == "pending_documents"
    assert sub.missing_documents == ["identityCard", "dischargeSummary", "bills", "investigations"]

    for doc_type in ("identityCard", "dischargeSummary", "bills"):
        sub = store.update_submission_document(
            sub.id, doc_type, filename=f"{doc_type}.pdf", file_data="QUJD", file_type="application/pdf", file_size=3
        )
    assert sub.missing_documents == ["investigations"]
    assert not sub.is_complete

    # Re-uploading keeps the checklist at four entries
    sub = store.update_submission_document(
        sub.id, "bills", filename="bills-v2.pdf", file_data="QUJD", file_type="application/pdf", file_size=3
    )
    assert len(sub.document_checklist) == 4

    sub = store.update_submission_document(
        sub.id, "investigations", filename="labs.png", file_data="QUJD", file_type="image/png", file_size=3
    )
    assert sub.is_complete
    assert sub.missing_documents == []
    assert sub.status == "ready"

    done = store.set_submission_extracted_data(sub.id, {"policyNumber": {"value": "P-1"}})
    assert done.status == "completed"
    assert store.get_submission(sub.id).extracted_data == {"policyNumber": {"value": "P-1"}}


def test_unknown_submission(store):
    assert store.get_submission("missing") is None
    assert store.set_submission_notified("missing") is None
    assert store.update_submission_document(
        "missing", "bills", filename="b.pdf", file_data="", file_type="application/pdf", file_size=0
    ) is None
