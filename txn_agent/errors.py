"""
Error types for the rule pipeline.

Stage-fatal (generator):
- BackendUnavailableError: backend unreachable, timed out or non-200
- ParseError: completion has no isolable JSON object
- SchemaError: JSON does not have the rule shape

Recoverable:
- EvaluationSkip: one record could not be evaluated, it is left out
- SummaryDegraded: narrative call failed, template used instead
"""

from typing import Any


class RuleEngineError(Exception):
    """Base error for the transaction rule engine."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class GenerationError(RuleEngineError):
    """Rule could not be produced for the current query."""


class BackendUnavailableError(GenerationError):
    """Text-generation backend could not be reached or refused the request."""

    def __init__(
        self,
        detail: str,
        query: str | None = None,
        hint: str | None = None,
    ):
        self.detail = detail
        self.query = query
        self.hint = hint
        message = f"Backend request failed: {detail}."
        if query:
            message += f' Query "{query}" was not processed.'
        if hint:
            message += f" {hint}"
        super().__init__(message)


class ParseError(GenerationError):
    """Backend response did not contain a JSON object."""

    def __init__(self, message: str, raw_response: str = ""):
        super().__init__(message)
        self.raw_response = raw_response


class SchemaError(GenerationError):
    """Parsed JSON does not satisfy the rule shape."""

    def __init__(
        self,
        message: str,
        payload: Any = None,
        problems: list[str] | None = None,
    ):
        super().__init__(message)
        self.payload = payload
        self.problems = problems or []


class EvaluationSkip(RuleEngineError):
    """A single record could not be evaluated."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class SummaryDegraded(RuleEngineError):
    """Narrative summary unavailable, template used."""
