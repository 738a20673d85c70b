from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from claimscore.models.documents import FieldDefinition, FieldDefinitionCreate, FieldDefinitionUpdate
from claimscore.models.rules import Rule, RuleCreate, RuleUpdate
from claimscore.models.submissions import (
    REQUIRED_DOCUMENT_TYPES,
    ClaimSubmission,
    DocumentChecklistItem,
    PatientInfo,
    SubmissionStatus,
)

logger = logging.getLogger(__name__)


DEFAULT_FIELD_DEFINITIONS: List[FieldDefinition] = [
    FieldDefinition(id="1", name="policyNumber", description="The insurance policy number"),
    FieldDefinition(id="2", name="claimNumber", description="The claim reference number"),
    FieldDefinition(id="3", name="claimDate", description="The date the claim was filed"),
    FieldDefinition(id="4", name="claimAmount", description="The monetary amount being claimed"),
    FieldDefinition(id="5", name="claimantName", description="The name of the person filing the claim"),
    FieldDefinition(id="6", name="claimantAddress", description="The claimant's address"),
    FieldDefinition(id="7", name="claimantPhone", description="The claimant's phone number"),
    FieldDefinition(id="8", name="claimantEmail", description="The claimant's email address"),
    FieldDefinition(id="9", name="incidentDate", description="The date of the incident"),
    FieldDefinition(id="10", name="incidentDescription", description="Brief description of what happened"),
    FieldDefinition(id="11", name="incidentLocation", description="Where the incident occurred"),
    FieldDefinition(id="12", name="vehicleInfo", description="Vehicle details (make, model, VIN) if applicable"),
    FieldDefinition(id="13", name="diagnosisCode", description="Medical diagnosis codes if applicable"),
    FieldDefinition(id="14", name="treatmentDate", description="Date of medical treatment if applicable"),
    FieldDefinition(id="15", name="providerName", description="Healthcare or service provider name"),
    FieldDefinition(id="16", name="providerNPI", description="Provider NPI number if applicable"),
]


def missing_documents(checklist: List[DocumentChecklistItem]) -> List[str]:
    uploaded = {item.type for item in checklist if item.uploaded}
    return [t for t in REQUIRED_DOCUMENT_TYPES if t not in uploaded]


class MemStorage:
    """
    Process-local store for field definitions, validation rules and claim
    submissions. Nothing survives a restart.

    Records are pydantic models and are replaced, never mutated in place, so a
    caller holding an old copy never sees it change underneath.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._fields: Dict[str, FieldDefinition] = {}
        self._rules: Dict[str, Rule] = {}
        self._submissions: Dict[str, ClaimSubmission] = {}
        self._load_default_fields()

    def _load_default_fields(self) -> None:
        self._fields = {f.id: f.model_copy() for f in DEFAULT_FIELD_DEFINITIONS}

    # --------- FIELD DEFINITIONS --------- #

    def get_field_definitions(self) -> List[FieldDefinition]:
        with self._lock:
            return list(self._fields.values())

    def get_enabled_field_definitions(self) -> List[FieldDefinition]:
        with self._lock:
            return [f for f in self._fields.values() if f.enabled]

    def create_field_definition(self, data: FieldDefinitionCreate) -> FieldDefinition:
        field = FieldDefinition(id=str(uuid4()), **data.model_dump())
        with self._lock:
            self._fields[field.id] = field
        logger.debug("Created field definition %s (%s)", field.id, field.name)
        return field

    def update_field_definition(self, field_id: str, updates: FieldDefinitionUpdate) -> Optional[FieldDefinition]:
        with self._lock:
            existing = self._fields.get(field_id)
            if existing is None:
                return None
            updated = existing.model_copy(update=updates.model_dump(exclude_unset=True))
            self._fields[field_id] = updated
        logger.debug("Updated field definition %s", field_id)
        return updated

    def delete_field_definition(self, field_id: str) -> bool:
        with self._lock:
            return self._fields.pop(field_id, None) is not None

    def reset_field_definitions(self) -> List[FieldDefinition]:
        with self._lock:
            self._load_default_fields()
            return list(self._fields.values())

    # --------- VALIDATION RULES --------- #

    def get_rules(self) -> List[Rule]:
        with self._lock:
            return list(self._rules.values())

    def get_enabled_rules(self) -> List[Rule]:
        with self._lock:
            return [r for r in self._rules.values() if r.enabled]

    def get_rule(self, rule_id: str) -> Optional[Rule]:
        with self._lock:
            return self._rules.get(rule_id)

    def create_rule(self, data: RuleCreate) -> Rule:
        rule = Rule(id=str(uuid4()), **data.model_dump())
        with self._lock:
            self._rules[rule.id] = rule
        logger.debug("Created rule %s (%s)", rule.id, rule.name)
        return rule

    def update_rule(self, rule_id: str, updates: RuleUpdate) -> Optional[Rule]:
        with self._lock:
            existing = self._rules.get(rule_id)
            if existing is None:
                return None
            # Re-validate so nested conditions come back as models, not dicts
            merged = {**existing.model_dump(), **updates.model_dump(exclude_unset=True), "id": rule_id}
            updated = Rule.model_validate(merged)
            self._rules[rule_id] = updated
        logger.debug("Updated rule %s", rule_id)
        return updated

    def delete_rule(self, rule_id: str) -> bool:
        with self._lock:
            return self._rules.pop(rule_id, None) is not None

    # --------- SUBMISSIONS --------- #

    def create_submission(self, patient_info: PatientInfo, provider_email: str) -> ClaimSubmission:
        submission = ClaimSubmission(
            id=str(uuid4()),
            patient_info=patient_info,
            document_checklist=[DocumentChecklistItem(type=t) for t in REQUIRED_DOCUMENT_TYPES],
            is_complete=False,
            missing_documents=list(REQUIRED_DOCUMENT_TYPES),
            created_at=datetime.now(timezone.utc),
            status="pending_documents",
            provider_email=provider_email,
        )
        with self._lock:
            self._submissions[submission.id] = submission
        logger.debug("Created submission %s", submission.id)
        return submission

    def get_submission(self, submission_id: str) -> Optional[ClaimSubmission]:
        with self._lock:
            return self._submissions.get(submission_id)

    def update_submission_document(
        self,
        submission_id: str,
        document_type: str,
        *,
        filename: str,
        file_data: str,
        file_type: str,
        file_size: int,
    ) -> Optional[ClaimSubmission]:
        with self._lock:
            submission = self._submissions.get(submission_id)
            if submission is None:
                return None

            checklist = [
                DocumentChecklistItem(
                    type=item.type,
                    uploaded=True,
                    filename=filename,
                    file_data=file_data,
                    file_type=file_type,
                    file_size=file_size,
                )
                if item.type == document_type
                else item
                for item in submission.document_checklist
            ]
            missing = missing_documents(checklist)
            complete = not missing

            updated = submission.model_copy(
                update={
                    "document_checklist": checklist,
                    "missing_documents": missing,
                    "is_complete": complete,
                    "status": "ready" if complete else "pending_documents",
                }
            )
            self._submissions[submission_id] = updated
        logger.debug("Submission %s: %s uploaded, %d missing", submission_id, document_type, len(missing))
        return updated

    def update_submission_status(self, submission_id: str, status: SubmissionStatus) -> Optional[ClaimSubmission]:
        return self._replace_submission(submission_id, status=status)

    def set_submission_notified(self, submission_id: str) -> Optional[ClaimSubmission]:
        return self._replace_submission(
            submission_id,
            status="notified",
            notification_sent_at=datetime.now(timezone.utc),
        )

    def set_submission_extracted_data(self, submission_id: str, data: Dict[str, Any]) -> Optional[ClaimSubmission]:
        return self._replace_submission(submission_id, extracted_data=data, status="completed")

    def _replace_submission(self, submission_id: str, **changes: Any) -> Optional[ClaimSubmission]:
        with self._lock:
            submission = self._submissions.get(submission_id)
            if submission is None:
                return None
            updated = submission.model_copy(update=changes)
            self._submissions[submission_id] = updated
        logger.debug("Submission %s updated: %s", submission_id, ", ".join(changes))
        return updated


storage = MemStorage()


def get_storage() -> MemStorage:
    """FastAPI dependency; tests override it with a fresh MemStorage."""
    return storage
