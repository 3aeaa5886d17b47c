"""Shared fixtures: scripted backend and a small transaction set."""

from datetime import datetime

import pytest

from txn_agent.backends.base import Completion, TextBackend
from txn_agent.errors import BackendUnavailableError
from txn_agent.types import Usage


class FakeBackend(TextBackend):
    """
    Backend that replays canned completions in order.

    Items may be strings (returned as completion text) or exceptions
    (raised). Every prompt is recorded in .prompts.
    """

    name = "ollama"

    def __init__(self, responses=None, available=True, model="fake-model"):
        super().__init__(model)
        self.responses = list(responses or [])
        self.available = available
        self.prompts: list[str] = []
        self.calls: list[dict] = []

    def generate(self, prompt, temperature, top_p):
        self.prompts.append(prompt)
        self.calls.append({"temperature": temperature, "top_p": top_p})
        if not self.responses:
            raise BackendUnavailableError("no scripted response left")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return Completion(text=item, usage=Usage(input_tokens=10, output_tokens=5))

    def is_available(self):
        return self.available

    def list_models(self):
        return [self.model] if self.available else []


RULE_UNDER_10 = (
    '{"conditions": {"all": [{"fact": "amt", "operator": "lessThan", "value": 10}]}, '
    '"event": {"type": "transaction-match", "params": {"message": "Amount under $10"}}}'
)


def make_transaction(**overrides) -> dict:
    record = {
        "transactionId": "0",
        "timestamp": datetime(2019, 1, 1, 12, 30),
        "cardNumber": "2703186189652095",
        "merchant": "fraud_Rippin, Kub and Mann",
        "category": "misc_net",
        "amt": 4.97,
        "firstName": "Jennifer",
        "lastName": "Banks",
        "gender": "F",
        "streetAddress": "561 Perry Cove",
        "city": "Moravian Falls",
        "state": "NC",
        "zip": "28654",
        "lat": 36.0788,
        "long": -81.1781,
        "cityPop": 3495,
        "job": "Psychologist, counselling",
        "dob": datetime(1988, 3, 9),
        "transHash": "0b242abb623afc578575680df30655b9",
        "unixTime": 1325376018,
        "merLat": 36.011293,
        "merLong": -82.048315,
        "isFraud": 0,
        "merZip": "28705",
    }
    record.update(overrides)
    return record


@pytest.fixture
def transactions() -> list[dict]:
    return [
        make_transaction(transactionId="1", amt=5.0, merchant="Starbucks Coffee", category="food_dining"),
        make_transaction(transactionId="2", amt=15.0, merchant="Shell", category="gas_transport"),
        make_transaction(transactionId="3", amt=250.0, merchant="Delta", category="travel", isFraud=1),
        make_transaction(transactionId="4", amt=8.5, merchant="Starbucks", category="food_dining", state="CA"),
    ]


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()
