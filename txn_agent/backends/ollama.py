"""
Ollama backend over HTTP.

Endpoints:
- POST /api/generate  {model, prompt, stream: false, options: {temperature, top_p}}
- GET  /api/tags      installed models
"""

import logging

import requests

import config
from txn_agent.backends.base import Completion, TextBackend
from txn_agent.errors import BackendUnavailableError
from txn_agent.types import Usage

logger = logging.getLogger(__name__)


class OllamaBackend(TextBackend):
    """Local Ollama server."""

    name = "ollama"

    def __init__(
        self,
        url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
    ):
        super().__init__(model or config.OLLAMA_MODEL)
        self.url = (url or config.OLLAMA_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT

    @property
    def setup_hint(self) -> str:
        return (
            f"Please ensure Ollama is running on {self.url} "
            f"and the model '{self.model}' is available "
            f"(ollama pull {self.model})."
        )

    def generate(self, prompt: str, temperature: float, top_p: float) -> Completion:
        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": temperature,
                "top_p": top_p,
            },
        }

        try:
            response = requests.post(
                f"{self.url}/api/generate",
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Cannot connect to Ollama server at {self.url}")
            raise BackendUnavailableError(
                f"cannot connect to Ollama at {self.url}", hint=self.setup_hint
            ) from e
        except requests.exceptions.Timeout as e:
            logger.error(f"Ollama request timed out after {self.timeout}s")
            raise BackendUnavailableError(
                f"request timed out after {self.timeout}s", hint=self.setup_hint
            ) from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "unknown"
            logger.error(f"Ollama returned HTTP {status}")
            raise BackendUnavailableError(
                f"Ollama returned HTTP {status}", hint=self.setup_hint
            ) from e
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Ollama request failed: {e}")
            raise BackendUnavailableError(str(e), hint=self.setup_hint) from e

        if not isinstance(body, dict):
            logger.error(f"Ollama returned a non-object body: {type(body).__name__}")
            raise BackendUnavailableError(
                "Ollama returned an unexpected response body", hint=self.setup_hint
            )

        text = body.get("response")
        if text is None:
            raise BackendUnavailableError(
                "Ollama response has no 'response' field", hint=self.setup_hint
            )

        usage = Usage.from_ollama(body)
        logger.debug(f"Ollama tokens: {usage.input_tokens}+{usage.output_tokens}")
        return Completion(text=text, usage=usage)

    def is_available(self) -> bool:
        try:
            response = requests.get(f"{self.url}/api/tags", timeout=10)
        except requests.exceptions.RequestException:
            logger.warning(f"Ollama server not reachable at {self.url}")
            return False
        return response.status_code == 200

    def list_models(self) -> list[str]:
        try:
            response = requests.get(f"{self.url}/api/tags", timeout=10)
            response.raise_for_status()
            body = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Failed to get Ollama models: {e}")
            return []
        if not isinstance(body, dict):
            logger.error("Ollama /api/tags returned a non-object body")
            return []
        return [m["name"] for m in body.get("models", []) if isinstance(m, dict) and m.get("name")]
