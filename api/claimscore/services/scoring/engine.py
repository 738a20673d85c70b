from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Generic, List, Optional, Sequence, Tuple, TypeVar

from claimscore.models.signals import SEVERITY_RANK, SignalDimension, SignalSeverity

logger = logging.getLogger(__name__)

TInput = TypeVar("TInput")


@dataclass(frozen=True)
class CheckResult:
    triggered: bool
    confidence: int = 0              # 0-100
    detail: Optional[str] = None     # embeds the offending values when triggered


def not_triggered() -> CheckResult:
    return CheckResult(triggered=False, confidence=0)


def triggered(confidence: int, detail: Optional[str] = None) -> CheckResult:
    return CheckResult(triggered=True, confidence=confidence, detail=detail)


@dataclass(frozen=True)
class ScoringRule(Generic[TInput]):
    """
    One row of a declarative rule table.

    `base_weight` is the largest contribution the rule can make; positive values
    are penalties, negative values discounts. `check` must be pure: the same
    input always produces the same CheckResult.
    """
    code: str
    name: str
    description: str
    severity: SignalSeverity
    base_weight: int
    impacted_fields: Tuple[str, ...]
    remediation_hint: str
    check: Callable[[TInput], CheckResult]
    dimension: SignalDimension = "risk"
    applicable_types: Tuple[str, ...] = ()   # empty = every input variant


@dataclass(frozen=True)
class FiredRule(Generic[TInput]):
    rule: ScoringRule[TInput]
    result: CheckResult
    score_impact: int

    @property
    def detail(self) -> str:
        return self.result.detail or self.rule.description


def round_half_up(value: float) -> int:
    """Round .5 towards +infinity (12.5 -> 13, -8.5 -> -8), unlike Python's banker's rounding."""
    return int(math.floor(value + 0.5))


def score_impact(base_weight: int, confidence: int) -> int:
    return round_half_up(base_weight * confidence / 100)


def validate_rule_table(rules: Sequence[ScoringRule]) -> None:
    seen: set[str] = set()
    for rule in rules:
        if rule.code in seen:
            raise ValueError(f"Duplicate rule code in table: {rule.code}")
        seen.add(rule.code)


def evaluate_rule(rule: ScoringRule[TInput], data: TInput) -> CheckResult:
    """
    Apply one rule to one input.

    A predicate that raises is logged and treated as not triggered, so a single
    broken rule never aborts the whole assessment.
    """
    try:
        result = rule.check(data)
    except Exception:
        logger.warning("Rule %s raised while evaluating; skipping it", rule.code, exc_info=True)
        return not_triggered()

    if not result.triggered:
        return not_triggered()

    confidence = max(0, min(100, int(result.confidence)))
    return CheckResult(triggered=True, confidence=confidence, detail=result.detail)


def tier_for(score: float, floor_tier: str, thresholds: Dict[str, int]) -> str:
    """
    Map a score to a tier. `thresholds` holds inclusive lower bounds, e.g.
    {"medium": 30, "high": 60} with floor "low": 29 -> low, 30 -> medium, 60 -> high.
    """
    tier = floor_tier
    for name, lower in sorted(thresholds.items(), key=lambda kv: kv[1]):
        if score >= lower:
            tier = name
    return tier


class RuleEngine(Generic[TInput]):
    """
    Runs a rule table over a single input. Domain engines (fraud, underwriting)
    own the score buckets; this class owns applicability, evaluation and ordering.
    """

    def __init__(
        self,
        rules: Sequence[ScoringRule[TInput]],
        variant_of: Optional[Callable[[TInput], str]] = None,
    ) -> None:
        validate_rule_table(rules)
        self.rules: Tuple[ScoringRule[TInput], ...] = tuple(rules)
        self._variant_of = variant_of

    def applicable_rules(self, data: TInput) -> List[ScoringRule[TInput]]:
        if self._variant_of is None:
            return list(self.rules)
        variant = self._variant_of(data)
        return [
            rule for rule in self.rules
            if not rule.applicable_types or variant in rule.applicable_types
        ]

    def run(self, data: TInput) -> List[FiredRule[TInput]]:
        fired: List[FiredRule[TInput]] = []

        for rule in self.applicable_rules(data):
            result = evaluate_rule(rule, data)
            if not result.triggered:
                continue
            fired.append(
                FiredRule(
                    rule=rule,
                    result=result,
                    score_impact=score_impact(rule.base_weight, result.confidence),
                )
            )

        # sorted() is stable, so equal severities keep rule-table order
        return sorted(fired, key=lambda f: SEVERITY_RANK[f.rule.severity])
