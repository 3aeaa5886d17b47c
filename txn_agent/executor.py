"""
Executor — applies a validated rule to transaction records.

Flow per record:
1. Unknown operator anywhere in the group → EvaluationSkip (whole record)
2. Walk the condition group (all = AND, any = OR, short-circuit)
3. Condition: missing fact → False
4. Outcome: match / no_match / skip(reason)

A skipped record is left out of the matches; the pass continues.
Input records are never modified.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Literal

from txn_agent.errors import EvaluationSkip
from txn_agent.types import Condition, Rule, value_kind

logger = logging.getLogger(__name__)

Record = dict[str, Any]


# =============================================================================
# Operators
# =============================================================================

def _both_numbers(actual: Any, expected: Any) -> bool:
    return value_kind(actual) == "number" and value_kind(expected) == "number"


def _strict_equal(a: Any, b: Any) -> bool:
    """Equality that never crosses kinds: 1 != "1", 1 != True."""
    kind = value_kind(a)
    if kind != value_kind(b):
        return False
    if kind == "sequence":
        a, b = list(a), list(b)
        return len(a) == len(b) and all(_strict_equal(x, y) for x, y in zip(a, b))
    return bool(a == b)


def _less_than(actual: Any, expected: Any) -> bool:
    return _both_numbers(actual, expected) and actual < expected


def _greater_than(actual: Any, expected: Any) -> bool:
    return _both_numbers(actual, expected) and actual > expected


def _less_than_inclusive(actual: Any, expected: Any) -> bool:
    return _both_numbers(actual, expected) and actual <= expected


def _greater_than_inclusive(actual: Any, expected: Any) -> bool:
    return _both_numbers(actual, expected) and actual >= expected


def _equal(actual: Any, expected: Any) -> bool:
    return _strict_equal(actual, expected)


def _not_equal(actual: Any, expected: Any) -> bool:
    return not _strict_equal(actual, expected)


def _contains(actual: Any, expected: Any) -> bool:
    """Substring for text, membership for lists."""
    kind = value_kind(actual)
    if kind == "string":
        return value_kind(expected) == "string" and expected in actual
    if kind == "sequence":
        return any(_strict_equal(item, expected) for item in actual)
    return False


def _in(actual: Any, expected: Any) -> bool:
    """Record value is one of the rule values. A scalar rule value is a one-item list."""
    candidates = expected if value_kind(expected) == "sequence" else [expected]
    return any(_strict_equal(actual, c) for c in candidates)


OPERATOR_FUNCS: dict[str, Callable[[Any, Any], bool]] = {
    "lessThan": _less_than,
    "greaterThan": _greater_than,
    "equal": _equal,
    "notEqual": _not_equal,
    "lessThanInclusive": _less_than_inclusive,
    "greaterThanInclusive": _greater_than_inclusive,
    "contains": _contains,
    "in": _in,
}


# =============================================================================
# Evaluation
# =============================================================================

@dataclass(frozen=True)
class RecordOutcome:
    """Result of one record against one rule."""
    status: Literal["match", "no_match", "skip"]
    reason: str | None = None

    @property
    def matched(self) -> bool:
        return self.status == "match"


@dataclass
class EvaluationReport:
    """Matches of a pass plus diagnostics for skipped records."""
    matched: list[Record]
    total: int
    skipped: list[tuple[int, str]] = field(default_factory=list)  # (index, reason)

    @property
    def match_count(self) -> int:
        return len(self.matched)

    @property
    def skip_count(self) -> int:
        return len(self.skipped)


def evaluate_condition(condition: Condition, record: Record) -> bool:
    """
    Evaluate one condition against one record.

    Raises:
        EvaluationSkip: operator is not one of the canonical eight
    """
    if condition.fact not in record:
        return False

    func = OPERATOR_FUNCS.get(condition.operator)
    if func is None:
        raise EvaluationSkip(
            f"Unknown operator '{condition.operator}' on fact '{condition.fact}'"
        )

    return func(record[condition.fact], condition.value)


def _unknown_operator(rule: Rule) -> Condition | None:
    """First condition whose operator is not canonical, if any."""
    for condition in rule.conditions.items:
        if condition.operator not in OPERATOR_FUNCS:
            return condition
    return None


def evaluate_record(rule: Rule, record: Record) -> RecordOutcome:
    """
    Evaluate the rule's condition group against one record.

    Every operator in the group is checked before any condition runs,
    so an unknown operator rejects the record even when another
    condition would decide the group.
    """
    group = rule.conditions
    try:
        bad = _unknown_operator(rule)
        if bad is not None:
            raise EvaluationSkip(
                f"Unknown operator '{bad.operator}' on fact '{bad.fact}'"
            )
        if group.mode == "all":
            matched = all(evaluate_condition(c, record) for c in group.items)
        else:
            matched = any(evaluate_condition(c, record) for c in group.items)
    except EvaluationSkip as e:
        return RecordOutcome(status="skip", reason=e.reason)

    return RecordOutcome(status="match" if matched else "no_match")


def evaluate_rule(rule: Rule, records: list[Record], annotate: bool = False) -> EvaluationReport:
    """
    Apply rule to every record, preserving input order.

    Args:
        rule: Validated rule
        records: Transaction records (read-only)
        annotate: If True, matches are copies with '_matchedEvents' added

    Returns:
        EvaluationReport with matches and skipped (index, reason) pairs
    """
    logger.info(f"Applying rule to {len(records)} transactions...")

    event = rule.event.model_dump()
    matched: list[Record] = []
    skipped: list[tuple[int, str]] = []

    for idx, record in enumerate(records):
        outcome = evaluate_record(rule, record)
        if outcome.status == "skip":
            logger.debug(f"Record {idx} skipped: {outcome.reason}")
            skipped.append((idx, outcome.reason))
        elif outcome.matched:
            matched.append({**record, "_matchedEvents": [event]} if annotate else record)

    if skipped:
        logger.warning(
            f"Skipped {len(skipped)} of {len(records)} transactions: {skipped[0][1]}"
        )
    logger.info(f"Found {len(matched)} matching transactions")

    return EvaluationReport(matched=matched, total=len(records), skipped=skipped)


def evaluate(rule: Rule, records: list[Record]) -> list[Record]:
    """Matching records in input order (the records themselves, unmodified)."""
    return evaluate_rule(rule, records).matched
