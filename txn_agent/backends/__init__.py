"""
Text-generation backends.

- OllamaBackend: local Ollama server over HTTP (default)
- GeminiBackend: Google Gemini via google-genai

Provider is chosen by config.LLM_PROVIDER.
"""

import config
from txn_agent.backends.base import Completion, TextBackend
from txn_agent.backends.gemini import GeminiBackend
from txn_agent.backends.ollama import OllamaBackend

BACKENDS: dict[str, type[TextBackend]] = {
    "ollama": OllamaBackend,
    "gemini": GeminiBackend,
}


def get_backend(provider: str | None = None) -> TextBackend:
    """Create backend for provider (defaults to config.LLM_PROVIDER)."""
    provider = (provider or config.LLM_PROVIDER).lower()
    backend_cls = BACKENDS.get(provider)
    if backend_cls is None:
        raise ValueError(
            f"Unknown LLM provider '{provider}'. "
            f"Available: {', '.join(BACKENDS)}"
        )
    return backend_cls()


__all__ = [
    "BACKENDS",
    "Completion",
    "TextBackend",
    "GeminiBackend",
    "OllamaBackend",
    "get_backend",
]
