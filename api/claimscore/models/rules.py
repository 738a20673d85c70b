from __future__ import annotations

from typing import List, Literal, Optional
from pydantic import BaseModel, Field, model_validator


RuleOperator = Literal[
    "greaterThan",
    "lessThan",
    "equals",
    "notEquals",
    "contains",
    "notContains",
    "greaterThanOrEqual",
    "lessThanOrEqual",
]
RuleLogic = Literal["all", "any"]
RuleAction = Literal["fail", "pass"]
VerdictStatus = Literal["pass", "fail", "pending"]


class RuleCondition(BaseModel):
    field: str            # extracted field label, e.g. "claimAmount" (matched case-insensitively)
    operator: RuleOperator
    value: str            # compared numerically when both sides parse, as text otherwise


class RuleCreate(BaseModel):
    name: str
    description: str = ""
    conditions: List[RuleCondition] = Field(..., min_length=1)
    logic: RuleLogic = "all"
    action: RuleAction = "fail"
    enabled: bool = True


class Rule(RuleCreate):
    id: str


class RuleUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    conditions: Optional[List[RuleCondition]] = Field(None, min_length=1)
    logic: Optional[RuleLogic] = None
    action: Optional[RuleAction] = None
    enabled: Optional[bool] = None

    @model_validator(mode="after")
    def _at_least_one_field(self) -> "RuleUpdate":
        if not self.model_dump(exclude_unset=True):
            raise ValueError("At least one field must be provided")
        return self


class ConditionResult(BaseModel):
    field: str
    operator: str
    expected_value: str
    actual_value: str     # "N/A" when the field is absent from the record
    matched: bool


class RuleEvaluationResult(BaseModel):
    rule_id: str
    rule_name: str
    passed: bool
    triggered_conditions: List[ConditionResult]


class ClaimVerdict(BaseModel):
    verdict: VerdictStatus
    evaluated_rules: List[RuleEvaluationResult] = []
    failed_rules: List[str] = []
    passed_rules: List[str] = []
