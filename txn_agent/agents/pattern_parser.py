"""
Pattern parser — deterministic rule from simple query phrasing.

Offline path only: used when the caller asks for it explicitly
(CLI --offline). It is not a fallback for backend failures.

Supported shapes:
- "show me transactions with amount less than 10"
- "amt >= 50", "merchant equals Starbucks"
- "transactions where category is food_dining"
- "fraud transactions", "fraudulent transactions"
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable

from txn_agent.errors import ParseError
from txn_agent.rules import get_field, is_canonical_operator, resolve_field, resolve_operator
from txn_agent.types import Rule, validate_rule

logger = logging.getLogger(__name__)

_WORD_OPS = (
    "less than or equal|greater than or equal|less than|greater than|"
    "not equal to|not equals|equal to|equals|is|lte|gte|lt|gt|over|under|above|below"
)
_OPS = rf"\b(?:{_WORD_OPS})\b|<=|>=|==|!=|<|>|="

# Field used when the phrase names no field but the value is a number
# ("transactions over 100 dollars")
DEFAULT_NUMERIC_FIELD = "amt"


@dataclass(frozen=True)
class ParsedCondition:
    field: str
    operator: str
    value: str | int | float


def _parse_value(text: str) -> str | int | float:
    """Number if it parses as one, else string without surrounding quotes."""
    trimmed = text.strip().rstrip(".,")
    cleaned = trimmed.lstrip("$")
    try:
        number = float(cleaned)
    except ValueError:
        return trimmed.strip("\"'")
    return int(number) if number.is_integer() and "." not in cleaned else number


def _resolve_phrase(text: str) -> str | None:
    """Resolve the longest trailing run of words that names a field."""
    words = text.split()
    for i in range(len(words)):
        field = resolve_field(" ".join(words[i:]))
        if field:
            return field
    return None


def _field(text: str) -> str:
    """Resolve field phrase, passing unknown text through (lowercased)."""
    return _resolve_phrase(text) or text.lower().strip()


def _comparison(match: re.Match) -> ParsedCondition:
    value = _parse_value(match.group("value"))
    field = _resolve_phrase(match.group("field"))
    if field is None and not isinstance(value, str):
        field = DEFAULT_NUMERIC_FIELD
    return ParsedCondition(
        field=field or match.group("field").lower().strip(),
        operator=resolve_operator(match.group("op")),
        value=value,
    )


def _where_is(match: re.Match) -> ParsedCondition:
    return ParsedCondition(
        field=_field(match.group("field")),
        operator="equal",
        value=_parse_value(match.group("value")),
    )


def _fraud(match: re.Match) -> ParsedCondition:
    return ParsedCondition(field="isFraud", operator="equal", value=1)


PATTERNS: list[tuple[re.Pattern, Callable[[re.Match], ParsedCondition]]] = [
    (
        re.compile(
            rf"show\s+me\s+transactions\s+with\s+(?P<field>\w+(?:\s+\w+)*?)\s+(?P<op>{_OPS})\s+(?P<value>\S+)",
            re.IGNORECASE,
        ),
        _comparison,
    ),
    (
        re.compile(
            rf"transactions\s+where\s+(?P<field>\w+(?:\s+\w+)*?)\s+(?P<value_op>is|equals|==|=)\s+(?P<value>\S+)",
            re.IGNORECASE,
        ),
        _where_is,
    ),
    (
        re.compile(r"(?P<word>fraud|fraudulent)\s+transactions", re.IGNORECASE),
        _fraud,
    ),
    (
        re.compile(
            rf"(?P<field>\w+(?:\s+\w+)*?)\s*(?P<op>{_OPS})\s*(?P<value>\S+)",
            re.IGNORECASE,
        ),
        _comparison,
    ),
]


class PatternParser:
    """
    Regex-based rule builder for simple one-condition queries.

    Usage:
        rule = PatternParser().parse("amount < 10")
        # rule.conditions.all[0] → fact="amt", operator="lessThan", value=10
    """

    def parse(self, query: str) -> Rule:
        """
        Build a single-condition rule.

        Raises:
            ParseError: no pattern produced a usable condition
        """
        for pattern, extract in PATTERNS:
            match = pattern.search(query)
            if not match:
                continue

            condition = extract(match)
            logger.debug(f"Pattern {pattern.pattern!r} → {condition}")

            if not is_canonical_operator(condition.operator):
                continue
            if get_field(condition.field) is None:
                logger.warning(f"Unknown field: {condition.field}")

            return self._to_rule(condition)

        raise ParseError(
            'Could not parse the query. Please try a format like: '
            '"show me transactions with amount less than 10"',
            raw_response=query,
        )

    def _to_rule(self, condition: ParsedCondition) -> Rule:
        return validate_rule({
            "conditions": {
                "all": [{
                    "fact": condition.field,
                    "operator": condition.operator,
                    "value": condition.value,
                }],
            },
            "event": {
                "type": "transaction-match",
                "params": {
                    "message": (
                        f"Transaction matches criteria: "
                        f"{condition.field} {condition.operator} {condition.value}"
                    ),
                },
            },
        })


def parse_pattern_rule(query: str) -> Rule:
    """Simple API — build rule without a backend."""
    return PatternParser().parse(query)
