"""
Pydantic models for rules and query results.

Rule wire format (json-rules-engine style):
    {
      "conditions": {"all": [{"fact": "amt", "operator": "lessThan", "value": 10}]},
      "event": {"type": "transaction-match", "params": {"message": "..."}}
    }

Exactly one of all/any, non-empty. Operators are NOT checked here:
an unknown operator is rejected per record by the executor.
"""

import numbers
from datetime import date, datetime
from typing import Any, Literal

from pydantic import (
    BaseModel,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    model_validator,
)

from txn_agent.errors import SchemaError


ScalarValue = StrictBool | StrictInt | StrictFloat | StrictStr
ConditionValue = ScalarValue | list[ScalarValue]

ValueKind = Literal["number", "string", "boolean", "sequence", "datetime", "other"]


def value_kind(value: Any) -> ValueKind:
    """
    Tag a record or rule value by kind.

    bool is checked before number (bool is an int subclass).
    numpy scalars count as numbers via the numbers ABCs.
    """
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, numbers.Real):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (datetime, date)):
        return "datetime"
    if isinstance(value, (list, tuple, set, frozenset)):
        return "sequence"
    return "other"


# =============================================================================
# Rule
# =============================================================================

class Condition(BaseModel):
    """One comparison: record[fact] <operator> value."""
    model_config = {"frozen": True}

    fact: str = Field(min_length=1, description="Field name from the catalog")
    operator: str = Field(min_length=1, description="Canonical operator name")
    value: ConditionValue = Field(description="Number, string, boolean or list")


class ConditionGroup(BaseModel):
    """Single-level boolean group: all (AND) or any (OR)."""
    model_config = {"frozen": True}

    all: list[Condition] | None = None
    any: list[Condition] | None = None

    @model_validator(mode="after")
    def exactly_one_group(self):
        present = [name for name in ("all", "any") if getattr(self, name) is not None]
        if len(present) != 1:
            raise ValueError("conditions must contain exactly one of 'all' or 'any'")
        if not getattr(self, present[0]):
            raise ValueError(f"conditions.{present[0]} must be a non-empty array")
        return self

    @property
    def mode(self) -> Literal["all", "any"]:
        return "all" if self.all is not None else "any"

    @property
    def items(self) -> list[Condition]:
        return self.all if self.all is not None else self.any


class EventParams(BaseModel):
    model_config = {"frozen": True}

    message: str = ""


class RuleEvent(BaseModel):
    model_config = {"frozen": True}

    type: str = "transaction-match"
    params: EventParams = Field(default_factory=EventParams)


class Rule(BaseModel):
    """Validated rule. Immutable once built."""
    model_config = {"frozen": True}

    conditions: ConditionGroup
    event: RuleEvent

    def to_wire(self) -> dict:
        """Rule as plain JSON-compatible dict."""
        return self.model_dump(exclude_none=True)


def validate_rule(payload: Any) -> Rule:
    """
    Check parsed JSON against the rule shape.

    Raises:
        SchemaError: with the offending payload and one line per problem
    """
    if not isinstance(payload, dict):
        raise SchemaError(
            "Generated rule must be a JSON object",
            payload=payload,
            problems=[f"got {type(payload).__name__}"],
        )

    try:
        return Rule.model_validate(payload)
    except ValidationError as e:
        problems = [
            f"{'.'.join(str(p) for p in err['loc']) or 'rule'}: {err['msg']}"
            for err in e.errors()
        ]
        raise SchemaError(
            "Generated rule does not match expected rule format",
            payload=payload,
            problems=problems,
        ) from e


# =============================================================================
# Usage
# =============================================================================

class Usage(BaseModel):
    """Token usage from a backend call."""
    input_tokens: int = 0
    output_tokens: int = 0

    def __add__(self, other: "Usage") -> "Usage":
        """Aggregate usage from multiple calls."""
        return Usage(
            input_tokens=self.input_tokens + other.input_tokens,
            output_tokens=self.output_tokens + other.output_tokens,
        )

    @classmethod
    def from_gemini(cls, response) -> "Usage":
        """Extract usage from Gemini response."""
        meta = getattr(response, "usage_metadata", None)
        if not meta:
            return cls()
        return cls(
            input_tokens=getattr(meta, "prompt_token_count", 0) or 0,
            output_tokens=getattr(meta, "candidates_token_count", 0) or 0,
        )

    @classmethod
    def from_ollama(cls, payload: dict) -> "Usage":
        """Extract usage from Ollama /api/generate body."""
        return cls(
            input_tokens=payload.get("prompt_eval_count", 0) or 0,
            output_tokens=payload.get("eval_count", 0) or 0,
        )


# =============================================================================
# Query results
# =============================================================================

class QuerySuccess(BaseModel):
    success: Literal[True] = True
    query: str
    rule: Rule
    matched: list[dict[str, Any]]
    match_count: int
    total: int
    match_percentage: float
    summary: str
    source: str
    skipped_count: int = 0
    usage: Usage = Field(default_factory=Usage)

    def to_dict(self) -> dict:
        """Caller-facing shape."""
        return {
            "success": True,
            "query": self.query,
            "generatedRule": self.rule.to_wire(),
            "matchedTransactions": self.matched,
            "results": {
                "matchCount": self.match_count,
                "totalTransactions": self.total,
                "matchPercentage": self.match_percentage,
            },
            "summary": self.summary,
            "source": self.source,
            "skippedCount": self.skipped_count,
        }


class QueryFailure(BaseModel):
    success: Literal[False] = False
    error: str
    help_message: str | None = None

    def to_dict(self) -> dict:
        """Caller-facing shape."""
        result = {"success": False, "error": self.error}
        if self.help_message:
            result["helpMessage"] = self.help_message
        return result


QueryResult = QuerySuccess | QueryFailure


class InitResult(BaseModel):
    success: bool
    message: str = ""
    error: str | None = None
    backend_available: bool = False
    transaction_count: int = 0
