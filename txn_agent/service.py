"""
RuleEngineService — query in, structured result out.

Pipeline per query:
1. Generate rule (RuleGenerator, or PatternParser when offline)
2. Evaluate rule over the loaded records
3. Summarize matches

Records are loaded once by initialize() and treated as read-only.
Generation failures come back as QueryFailure with a help message;
evaluation skips and summary degradation never fail the query.
"""

import logging
from pathlib import Path
from typing import Any

import config
from data.loader import load_transactions, to_records
from txn_agent.agents.generator import RuleGenerator
from txn_agent.agents.pattern_parser import PatternParser
from txn_agent.agents.summarizer import Summarizer
from txn_agent.backends import TextBackend, get_backend
from txn_agent.errors import GenerationError, SchemaError
from txn_agent.executor import EvaluationReport, evaluate_rule
from txn_agent.stats import dataset_statistics, match_percentage
from txn_agent.types import InitResult, QueryFailure, QueryResult, QuerySuccess, Rule
from txn_agent.types import validate_rule as validate_rule_payload

logger = logging.getLogger(__name__)


HELP_MESSAGE = (
    'Please ensure the LLM backend is running and try queries like: '
    '"show me transactions with amount less than 10" or '
    '"find transactions where category is food_dining"'
)

EXAMPLE_QUERIES = [
    "show me transactions with amount less than 10 dollars",
    "find transactions where category is food_dining",
    "transactions over 100 dollars",
    "show me transactions in California",
    "find fraud transactions",
    "show me transactions at Starbucks",
    "transactions between 50 and 100 dollars",
    "show me travel category transactions",
]


class RuleEngineService:
    """
    Orchestrates generator → executor → summarizer over one dataset.

    Usage:
        service = RuleEngineService()
        init = service.initialize()
        if init.success:
            result = service.process_query("transactions over 100 dollars")
            print(result.to_dict())
    """

    def __init__(
        self,
        records: list[dict[str, Any]] | None = None,
        csv_path: str | Path | None = None,
        backend: TextBackend | None = None,
    ):
        self.csv_path = Path(csv_path) if csv_path else config.TRANSACTIONS_CSV
        self.records: list[dict[str, Any]] = list(records) if records is not None else []
        self._records_supplied = records is not None
        self.backend = backend or get_backend()

        self.generator = RuleGenerator(backend=self.backend)
        self.pattern_parser = PatternParser()
        self.summarizer = Summarizer(backend=self.backend)

        self.backend_available = False
        self.is_initialized = False

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def initialize(self, require_backend: bool = True) -> InitResult:
        """
        Load records and check the backend.

        Args:
            require_backend: If False, an unreachable backend does not
                fail initialization (offline use)
        """
        try:
            if not self._records_supplied:
                self.records = to_records(load_transactions(self.csv_path))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load transactions: {e}")
            return InitResult(success=False, error=str(e))

        self.backend_available = self.backend.is_available()
        logger.info(f"{self.backend.name} available: {self.backend_available}")

        if require_backend and not self.backend_available:
            return InitResult(
                success=False,
                error=(
                    f"{self.backend.name} is required but not available. "
                    f"{self.backend.setup_hint}"
                ),
                transaction_count=len(self.records),
            )

        self.is_initialized = True
        return InitResult(
            success=True,
            message="Rule engine service initialized successfully",
            backend_available=self.backend_available,
            transaction_count=len(self.records),
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def process_query(self, query: str, offline: bool = False) -> QueryResult:
        """
        Answer one natural-language query.

        Args:
            query: Question in plain English
            offline: Build the rule with PatternParser, no backend calls

        Returns:
            QuerySuccess, or QueryFailure if no rule could be produced
        """
        if not self.is_initialized:
            return QueryFailure(error="Service not initialized. Call initialize() first.")

        logger.info(f"Processing query: {query}")

        usage = None
        try:
            if offline:
                rule = self.pattern_parser.parse(query)
            else:
                generated = self.generator.generate(query)
                rule, usage = generated.rule, generated.usage
        except GenerationError as e:
            logger.warning(f"Rule generation failed: {e.message}")
            return QueryFailure(error=e.message, help_message=HELP_MESSAGE)

        report = self.apply_rule(rule)
        summary = self.summarizer.summarize(
            query, report.matched, report.total, narrative=not offline
        )
        if summary.degraded:
            logger.info("Summary degraded to template")

        if usage is not None:
            usage = usage + summary.usage
        else:
            usage = summary.usage

        return QuerySuccess(
            query=query,
            rule=rule,
            matched=report.matched,
            match_count=report.match_count,
            total=report.total,
            match_percentage=match_percentage(report.match_count, report.total),
            summary=summary.text,
            source="pattern" if offline else self.backend.name,
            skipped_count=report.skip_count,
            usage=usage,
        )

    def apply_rule(self, rule: Rule) -> EvaluationReport:
        """Evaluate rule over loaded records; matches carry '_matchedEvents'."""
        return evaluate_rule(rule, self.records, annotate=True)

    # =========================================================================
    # Info
    # =========================================================================

    def get_statistics(self) -> dict:
        if not self.is_initialized:
            return {"error": "Service not initialized"}

        return {
            **dataset_statistics(self.records),
            "backend": self.backend.name,
            "model": self.backend.model,
            "backend_available": self.backend_available,
        }

    def validate_rule(self, payload: Any) -> dict:
        """Check a rule payload without running it."""
        try:
            validate_rule_payload(payload)
        except SchemaError as e:
            return {"valid": False, "error": e.message, "problems": e.problems}
        return {"valid": True}

    def get_example_queries(self) -> list[str]:
        return list(EXAMPLE_QUERIES)
