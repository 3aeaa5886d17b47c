"""Google Gemini backend via google-genai."""

import logging

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

import config
from txn_agent.backends.base import Completion, TextBackend
from txn_agent.errors import BackendUnavailableError
from txn_agent.types import Usage

logger = logging.getLogger(__name__)


class GeminiBackend(TextBackend):
    """Gemini models through the Google AI API."""

    name = "gemini"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        client: genai.Client | None = None,
    ):
        super().__init__(model or config.GEMINI_MODEL)
        self.api_key = api_key or config.GOOGLE_API_KEY
        self._client = client

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            if not self.api_key:
                raise BackendUnavailableError(
                    "GOOGLE_API_KEY is not set", hint=self.setup_hint
                )
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    @property
    def setup_hint(self) -> str:
        return (
            f"Please check GOOGLE_API_KEY and that the model '{self.model}' "
            "is available for your key."
        )

    def generate(self, prompt: str, temperature: float, top_p: float) -> Completion:
        client = self.client
        try:
            response = client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=temperature,
                    top_p=top_p,
                ),
            )
        except genai_errors.APIError as e:
            logger.error(f"Gemini request failed: {e}")
            raise BackendUnavailableError(
                f"Gemini returned {e.code}: {e.message}", hint=self.setup_hint
            ) from e
        except Exception as e:
            # Transport errors (connect, timeout) come from the SDK's HTTP client
            logger.error(f"Gemini request failed: {e}")
            raise BackendUnavailableError(str(e), hint=self.setup_hint) from e

        text = response.text
        if text is None:
            raise BackendUnavailableError(
                "Gemini returned an empty completion", hint=self.setup_hint
            )

        usage = Usage.from_gemini(response)
        logger.debug(f"Gemini tokens: {usage.input_tokens}+{usage.output_tokens}")
        return Completion(text=text, usage=usage)

    def is_available(self) -> bool:
        if not self.api_key and self._client is None:
            return False
        return bool(self.list_models())

    def list_models(self) -> list[str]:
        try:
            return [m.name for m in self.client.models.list() if m.name]
        except Exception as e:  # SDK transport errors included
            logger.error(f"Failed to list Gemini models: {e}")
            return []
