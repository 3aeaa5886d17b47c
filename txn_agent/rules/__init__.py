"""
Rules vocabulary — single source of truth for fields and operators.

Used by:
- Generator prompt (field catalog, operator phrases)
- Pattern parser (alias resolution)
- Executor (canonical operator check)

Quick reference:
    from txn_agent.rules import (
        FIELDS,
        resolve_field,
        OPERATORS,
        resolve_operator,
        is_canonical_operator,
    )
"""

# Fields
from txn_agent.rules.fields import (
    FIELDS,
    FIELD_ALIASES,
    FieldDef,
    FieldType,
    resolve_field,
    get_field,
    get_field_names,
    get_fields_by_type,
    get_fields_for_prompt,
)

# Operators
from txn_agent.rules.operators import (
    OPERATORS,
    OPERATOR_ALIASES,
    OperatorDef,
    OperatorName,
    resolve_operator,
    is_canonical_operator,
    is_numeric_operator,
    get_operators_for_prompt,
)

__all__ = [
    # Fields
    "FIELDS",
    "FIELD_ALIASES",
    "FieldDef",
    "FieldType",
    "resolve_field",
    "get_field",
    "get_field_names",
    "get_fields_by_type",
    "get_fields_for_prompt",
    # Operators
    "OPERATORS",
    "OPERATOR_ALIASES",
    "OperatorDef",
    "OperatorName",
    "resolve_operator",
    "is_canonical_operator",
    "is_numeric_operator",
    "get_operators_for_prompt",
]
