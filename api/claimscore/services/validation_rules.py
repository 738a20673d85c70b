from __future__ import annotations

import re
from typing import Callable, Dict, List, Optional, Tuple

from claimscore.models.documents import ExtractedField
from claimscore.models.rules import (
    ClaimVerdict,
    ConditionResult,
    Rule,
    RuleCondition,
    RuleEvaluationResult,
)


NOT_AVAILABLE = "N/A"

# Longest leading decimal literal, the way a lenient float parser reads "1,500 USD" -> 1500
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_NUMERIC_NOISE = re.compile(r"[,$%]")


def parse_numeric(value: str) -> Optional[float]:
    cleaned = _NUMERIC_NOISE.sub("", value).strip()
    match = _LEADING_NUMBER.match(cleaned)
    if match is None:
        return None
    return float(match.group(0))


# Applied to floats when both sides parse, to the raw strings otherwise
_ORDERING: Dict[str, Callable[[object, object], bool]] = {
    "greaterThan": lambda a, b: a > b,
    "lessThan": lambda a, b: a < b,
    "greaterThanOrEqual": lambda a, b: a >= b,
    "lessThanOrEqual": lambda a, b: a <= b,
}


def _find_field(label: str, fields: List[ExtractedField]) -> Optional[ExtractedField]:
    wanted = label.lower()
    for f in fields:
        if f.label.lower() == wanted:
            return f
    return None


def evaluate_condition(condition: RuleCondition, fields: List[ExtractedField]) -> Tuple[bool, str]:
    """
    Returns (matched, actual_value).

    Ordering operators compare numerically when both sides parse and fall back
    to plain string ordering otherwise, so "abc" > "100" is True.
    """
    field = _find_field(condition.field, fields)
    if field is None:
        return False, NOT_AVAILABLE

    actual = field.value or ""
    expected = condition.value
    actual_num = parse_numeric(actual)
    expected_num = parse_numeric(expected)
    both_numeric = actual_num is not None and expected_num is not None
    op = condition.operator

    if op in _ORDERING:
        compare = _ORDERING[op]
        if both_numeric:
            return compare(actual_num, expected_num), actual
        return compare(actual, expected), actual

    if op == "equals":
        if both_numeric:
            return actual_num == expected_num, actual
        return actual.lower() == expected.lower(), actual

    if op == "notEquals":
        if both_numeric:
            return actual_num != expected_num, actual
        return actual.lower() != expected.lower(), actual

    if op == "contains":
        return expected.lower() in actual.lower(), actual

    if op == "notContains":
        return expected.lower() not in actual.lower(), actual

    return False, actual


def evaluate_rule(rule: Rule, fields: List[ExtractedField]) -> RuleEvaluationResult:
    conditions: List[ConditionResult] = []
    for condition in rule.conditions:
        matched, actual = evaluate_condition(condition, fields)
        conditions.append(
            ConditionResult(
                field=condition.field,
                operator=condition.operator,
                expected_value=condition.value,
                actual_value=actual,
                matched=matched,
            )
        )

    if rule.logic == "all":
        met = all(c.matched for c in conditions)
    else:
        met = any(c.matched for c in conditions)

    # "pass" rules pass when their conditions hold; "fail" rules fail when they hold
    passed = met if rule.action == "pass" else not met

    return RuleEvaluationResult(
        rule_id=rule.id,
        rule_name=rule.name,
        passed=passed,
        triggered_conditions=conditions,
    )


def evaluate_claim(fields: List[ExtractedField], rules: List[Rule]) -> ClaimVerdict:
    """Binary gate over a set of rules: no rules -> pending, any failure -> fail."""
    if not rules:
        return ClaimVerdict(verdict="pending")

    evaluated = [evaluate_rule(rule, fields) for rule in rules]
    failed = [r.rule_name for r in evaluated if not r.passed]
    passed = [r.rule_name for r in evaluated if r.passed]

    return ClaimVerdict(
        verdict="fail" if failed else "pass",
        evaluated_rules=evaluated,
        failed_rules=failed,
        passed_rules=passed,
    )
