"""Base class for text-generation backends."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from txn_agent.types import Usage


@dataclass
class Completion:
    """Single non-streamed completion."""
    text: str
    usage: Usage = field(default_factory=Usage)


class TextBackend(ABC):
    """
    Prompt in, completion text out.

    Implementations raise BackendUnavailableError for transport
    failures, timeouts and non-success responses.
    """

    name: str = "backend"

    def __init__(self, model: str):
        self.model = model

    def set_model(self, model: str) -> None:
        self.model = model

    @abstractmethod
    def generate(self, prompt: str, temperature: float, top_p: float) -> Completion:
        """
        Request one completion.

        Args:
            prompt: Full prompt text
            temperature: Sampling temperature
            top_p: Nucleus sampling threshold

        Returns:
            Completion with text and token usage
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check that the backend answers. Never raises."""

    @abstractmethod
    def list_models(self) -> list[str]:
        """Model names the backend can serve. Empty list on failure."""

    @property
    def setup_hint(self) -> str:
        """Remediation text shown when the backend is unavailable."""
        return f"Please ensure the {self.name} backend is reachable."
