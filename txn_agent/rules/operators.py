"""
Operators — how a condition compares a record value to a rule value.

Each operator has:
- description: what it checks
- phrases: trigger phrases listed in the generation prompt
- numeric: True if both sides must be numbers

The set is closed. Generated rules may only use these eight names.
"""

from types import MappingProxyType
from typing import Literal, TypedDict

OperatorName = Literal[
    "lessThan",
    "greaterThan",
    "equal",
    "notEqual",
    "lessThanInclusive",
    "greaterThanInclusive",
    "contains",
    "in",
]


class OperatorDef(TypedDict):
    description: str
    phrases: list[str]
    numeric: bool


OPERATORS: MappingProxyType = MappingProxyType({
    "lessThan": {
        "description": "Record value is below the rule value",
        "phrases": ["<", "less than", "under", "below"],
        "numeric": True,
    },
    "greaterThan": {
        "description": "Record value is above the rule value",
        "phrases": [">", "greater than", "over", "above"],
        "numeric": True,
    },
    "equal": {
        "description": "Record value equals the rule value (type-sensitive)",
        "phrases": ["=", "equals", "is", "equal to"],
        "numeric": False,
    },
    "notEqual": {
        "description": "Record value differs from the rule value",
        "phrases": ["!=", "not equal", "not equals"],
        "numeric": False,
    },
    "lessThanInclusive": {
        "description": "Record value is at most the rule value",
        "phrases": ["<=", "less than or equal"],
        "numeric": True,
    },
    "greaterThanInclusive": {
        "description": "Record value is at least the rule value",
        "phrases": [">=", "greater than or equal"],
        "numeric": True,
    },
    "contains": {
        "description": "Record text contains the rule value, or record list holds it",
        "phrases": ["text contains"],
        "numeric": False,
    },
    "in": {
        "description": "Record value is one of the rule values",
        "phrases": ["value in array"],
        "numeric": False,
    },
})


OPERATOR_ALIASES: MappingProxyType = MappingProxyType({
    "less than": "lessThan",
    "under": "lessThan",
    "below": "lessThan",
    "lt": "lessThan",
    "<": "lessThan",
    "greater than": "greaterThan",
    "over": "greaterThan",
    "above": "greaterThan",
    "gt": "greaterThan",
    ">": "greaterThan",
    "equal to": "equal",
    "equals": "equal",
    "is": "equal",
    "=": "equal",
    "==": "equal",
    "not equal to": "notEqual",
    "not equals": "notEqual",
    "!=": "notEqual",
    "less than or equal": "lessThanInclusive",
    "lte": "lessThanInclusive",
    "<=": "lessThanInclusive",
    "greater than or equal": "greaterThanInclusive",
    "gte": "greaterThanInclusive",
    ">=": "greaterThanInclusive",
    "contains": "contains",
    "includes": "contains",
    "in": "in",
})


# =============================================================================
# Lookup
# =============================================================================

def resolve_operator(text: str) -> str:
    """
    Resolve an operator phrase to its canonical name.

    Unknown phrases come back unchanged; callers check the result
    with is_canonical_operator().

    Examples:
        resolve_operator("gte") → "greaterThanInclusive"
        resolve_operator("Less Than") → "lessThan"
        resolve_operator("between") → "between"
    """
    normalized = text.lower().strip()
    return OPERATOR_ALIASES.get(normalized, text)


def is_canonical_operator(name: str) -> bool:
    """Check if name is one of the eight canonical operators."""
    return name in OPERATORS


def is_numeric_operator(name: str) -> bool:
    op = OPERATORS.get(name)
    return bool(op and op["numeric"])


def get_operators_for_prompt() -> str:
    """Operator vocabulary with trigger phrases for the generation prompt."""
    lines = []
    for name, op in OPERATORS.items():
        phrases = ", ".join(
            p if p in ("<", ">", "=", "!=", "<=", ">=") else f'"{p}"'
            for p in op["phrases"]
        )
        lines.append(f"- {name} (for {phrases})")
    return "\n".join(lines)
