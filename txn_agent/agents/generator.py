"""
Generator agent — turns a question into a validated JSON rule.

Single responsibility: query → Rule.

Steps:
1. Build prompt (field catalog + operator vocabulary + query)
2. One backend call, low temperature
3. Extract JSON (result tags → code fences → brace block)
4. Validate shape (conditions.all|any non-empty, fact/operator/value)

Failures raise GenerationError subclasses. No retries here:
retry policy belongs to the caller.

Uses:
- prompts/generator.py for the prompt
- extraction.py for JSON isolation
- types.py for Rule schema
"""

import logging
from dataclasses import dataclass, field

import config
from txn_agent.backends import TextBackend, get_backend
from txn_agent.errors import BackendUnavailableError
from txn_agent.extraction import parse_rule_json
from txn_agent.prompts.generator import get_rule_prompt
from txn_agent.rules import get_field, is_canonical_operator
from txn_agent.types import Rule, Usage, validate_rule

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Generated rule with the raw completion for diagnostics."""
    rule: Rule
    raw_response: str
    usage: Usage = field(default_factory=Usage)


class RuleGenerator:
    """
    Rule generation from natural language.

    Usage:
        generator = RuleGenerator()
        result = generator.generate("transactions over 100 dollars")
        # result.rule.conditions.all[0].fact == "amt"
        # result.rule.conditions.all[0].operator == "greaterThan"
    """

    def __init__(
        self,
        backend: TextBackend | None = None,
        temperature: float | None = None,
        top_p: float | None = None,
    ):
        self.backend = backend or get_backend()
        self.temperature = temperature if temperature is not None else config.RULE_TEMPERATURE
        self.top_p = top_p if top_p is not None else config.TOP_P

    def generate(self, query: str) -> GenerationResult:
        """
        Generate a rule for the query.

        Raises:
            BackendUnavailableError: backend call failed (query embedded in message)
            ParseError: completion has no parsable JSON object
            SchemaError: JSON is not a valid rule
        """
        prompt = get_rule_prompt(query)

        try:
            completion = self.backend.generate(
                prompt,
                temperature=self.temperature,
                top_p=self.top_p,
            )
        except BackendUnavailableError as e:
            logger.error(f"Rule generation failed for '{query}': {e.detail}")
            raise BackendUnavailableError(e.detail, query=query, hint=e.hint) from e

        raw = completion.text
        logger.debug(f"Raw completion: {raw[:500]}")

        payload = parse_rule_json(raw)
        rule = validate_rule(payload)

        self._warn_unknown_vocabulary(rule)
        logger.info(
            f"Generated rule: {rule.conditions.mode} of {len(rule.conditions.items)} condition(s), "
            f"tokens={completion.usage.input_tokens}+{completion.usage.output_tokens}"
        )

        return GenerationResult(rule=rule, raw_response=raw, usage=completion.usage)

    def _warn_unknown_vocabulary(self, rule: Rule) -> None:
        """Log facts/operators outside the catalog. Executor decides what fails."""
        for condition in rule.conditions.items:
            if get_field(condition.fact) is None:
                logger.warning(f"Unknown field in generated rule: {condition.fact}")
            if not is_canonical_operator(condition.operator):
                logger.warning(f"Unknown operator in generated rule: {condition.operator}")


# =============================================================================
# Simple API
# =============================================================================

def generate_rule(query: str, backend: TextBackend | None = None) -> Rule:
    """
    Generate rule for query.

    Simple wrapper — returns just the Rule.
    """
    return RuleGenerator(backend=backend).generate(query).rule
