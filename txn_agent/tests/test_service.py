"""Tests for RuleEngineService end to end with a scripted backend."""

from unittest.mock import patch

import pytest

from conftest import RULE_UNDER_10, FakeBackend
from txn_agent.errors import BackendUnavailableError
from txn_agent.service import HELP_MESSAGE, RuleEngineService
from txn_agent.types import QueryFailure, QuerySuccess


@pytest.fixture
def service_factory(transactions):
    def make(responses=None, available=True):
        backend = FakeBackend(responses, available=available)
        service = RuleEngineService(records=transactions, backend=backend)
        return service, backend
    return make


class TestInitialize:
    """Test service startup."""

    def test_with_records(self, service_factory):
        service, _ = service_factory()
        init = service.initialize()

        assert init.success
        assert init.transaction_count == 4
        assert init.backend_available
        assert service.is_initialized

    def test_backend_required(self, service_factory):
        service, _ = service_factory(available=False)
        init = service.initialize()

        assert not init.success
        assert "ollama is required but not available" in init.error
        assert not service.is_initialized

    def test_backend_optional(self, service_factory):
        service, _ = service_factory(available=False)
        init = service.initialize(require_backend=False)

        assert init.success
        assert not init.backend_available

    def test_missing_csv(self, tmp_path):
        service = RuleEngineService(csv_path=tmp_path / "missing.csv", backend=FakeBackend())
        init = service.initialize()

        assert not init.success
        assert "not found" in init.error

    def test_loads_csv(self, tmp_path):
        path = tmp_path / "data.csv"
        path.write_text(
            '0,2019-01-01 00:00:18,2703186189652095,"fraud_Rippin, Kub and Mann",misc_net,4.97,'
            "Jennifer,Banks,F,561 Perry Cove,Moravian Falls,NC,28654,36.0788,-81.1781,3495,"
            "Psychologist,1988-03-09,0b242abb,1325376018,36.011293,-82.048315,0,28705\n"
        )
        service = RuleEngineService(csv_path=path, backend=FakeBackend())
        init = service.initialize()

        assert init.success
        assert init.transaction_count == 1
        assert service.records[0]["merchant"] == "fraud_Rippin, Kub and Mann"


class TestProcessQuery:
    """Test the query pipeline."""

    def test_not_initialized(self, service_factory):
        service, _ = service_factory()
        result = service.process_query("anything")

        assert isinstance(result, QueryFailure)
        assert result.to_dict() == {
            "success": False,
            "error": "Service not initialized. Call initialize() first.",
        }

    def test_success(self, service_factory):
        service, backend = service_factory([RULE_UNDER_10, "Two small coffee purchases."])
        service.initialize()
        result = service.process_query("transactions under 10 dollars")

        assert isinstance(result, QuerySuccess)
        data = result.to_dict()
        assert data["success"] is True
        assert data["generatedRule"]["conditions"]["all"][0]["fact"] == "amt"
        assert [t["transactionId"] for t in data["matchedTransactions"]] == ["1", "4"]
        assert data["results"] == {"matchCount": 2, "totalTransactions": 4, "matchPercentage": 50.0}
        assert data["summary"] == "Two small coffee purchases."
        assert data["source"] == "ollama"
        assert len(backend.prompts) == 2

    def test_matches_carry_events(self, service_factory, transactions):
        service, _ = service_factory([RULE_UNDER_10, "ok"])
        service.initialize()
        result = service.process_query("q")

        assert result.matched[0]["_matchedEvents"][0]["type"] == "transaction-match"
        assert "_matchedEvents" not in transactions[0]

    def test_usage_summed(self, service_factory):
        service, _ = service_factory([RULE_UNDER_10, "ok"])
        service.initialize()
        result = service.process_query("q")

        assert result.usage.input_tokens == 20
        assert result.usage.output_tokens == 10

    def test_generation_failure(self, service_factory):
        service, _ = service_factory([BackendUnavailableError("connection refused")])
        service.initialize()
        result = service.process_query("coffee purchases")

        assert isinstance(result, QueryFailure)
        data = result.to_dict()
        assert data["success"] is False
        assert 'Query "coffee purchases" was not processed' in data["error"]
        assert data["helpMessage"] == HELP_MESSAGE

    def test_unparsable_completion(self, service_factory):
        service, _ = service_factory(["I don't know."])
        service.initialize()
        result = service.process_query("q")

        assert not result.success
        assert "Failed to parse JSON" in result.error

    def test_summary_failure_still_succeeds(self, service_factory):
        service, _ = service_factory([RULE_UNDER_10, BackendUnavailableError("timed out")])
        service.initialize()
        result = service.process_query("q")

        assert result.success
        assert result.summary.startswith('Found 2 transactions (50.0% of total) matching "q"')

    def test_zero_matches(self, service_factory):
        rule = RULE_UNDER_10.replace('"value": 10', '"value": 1')
        service, backend = service_factory([rule])
        service.initialize()
        result = service.process_query("tiny")

        assert result.match_count == 0
        assert result.summary == 'No transactions matched the criteria "tiny" out of 4 total transactions.'
        assert len(backend.prompts) == 1

    def test_offline_makes_no_backend_calls(self, service_factory):
        service, backend = service_factory(available=False)
        service.initialize(require_backend=False)
        result = service.process_query("show me fraud transactions", offline=True)

        assert result.success
        assert result.source == "pattern"
        assert [t["transactionId"] for t in result.matched] == ["3"]
        assert backend.prompts == []

    def test_offline_unparsable(self, service_factory):
        service, _ = service_factory()
        service.initialize()
        result = service.process_query("show me transactions in California", offline=True)

        assert not result.success
        assert result.help_message == HELP_MESSAGE

    def test_skipped_records_reported(self, service_factory):
        raw = (
            '{"conditions": {"all": [{"fact": "amt", "operator": "between", "value": [1, 2]}]}, '
            '"event": {"type": "transaction-match", "params": {"message": "m"}}}'
        )
        service, _ = service_factory([raw])
        service.initialize()
        result = service.process_query("q")

        assert result.success
        assert result.match_count == 0
        assert result.skipped_count == 4


class TestInfo:
    """Test statistics, validation and examples."""

    def test_statistics(self, service_factory):
        service, _ = service_factory()
        service.initialize()
        stats = service.get_statistics()

        assert stats["total_transactions"] == 4
        assert stats["backend"] == "ollama"
        assert stats["model"] == "fake-model"

    def test_statistics_not_initialized(self, service_factory):
        service, _ = service_factory()
        assert service.get_statistics() == {"error": "Service not initialized"}

    def test_validate_rule(self, service_factory):
        service, _ = service_factory()
        assert service.validate_rule({
            "conditions": {"any": [{"fact": "amt", "operator": "equal", "value": 1}]},
            "event": {"type": "transaction-match", "params": {"message": ""}},
        }) == {"valid": True}

    def test_validate_rule_invalid(self, service_factory):
        service, _ = service_factory()
        result = service.validate_rule({"conditions": {"all": []}})

        assert result["valid"] is False
        assert result["problems"]

    def test_example_queries(self, service_factory):
        service, _ = service_factory()
        examples = service.get_example_queries()
        assert "find fraud transactions" in examples
        examples.append("x")
        assert "x" not in service.get_example_queries()


class TestDefaultBackend:
    """Test backend selection from config."""

    def test_uses_configured_provider(self, transactions):
        with patch("txn_agent.service.get_backend", return_value=FakeBackend()) as mock_get:
            RuleEngineService(records=transactions)
        mock_get.assert_called_once_with()
