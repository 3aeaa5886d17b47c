"""Tests for Ollama and Gemini backends (HTTP and SDK mocked)."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
import requests

from txn_agent.backends import GeminiBackend, OllamaBackend, get_backend
from txn_agent.errors import BackendUnavailableError


def http_response(status=200, body=None):
    response = MagicMock()
    response.status_code = status
    response.json.return_value = body or {}
    if status >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=response)
    else:
        response.raise_for_status.return_value = None
    return response


# =============================================================================
# Ollama
# =============================================================================

class TestOllamaGenerate:
    """Test /api/generate calls and error mapping."""

    @pytest.fixture
    def backend(self):
        return OllamaBackend(url="http://ollama:11434/", model="llama3.2:3b-instruct-fp16", timeout=5)

    def test_request_payload(self, backend):
        body = {"response": "{}", "prompt_eval_count": 100, "eval_count": 20}
        with patch("txn_agent.backends.ollama.requests.post", return_value=http_response(body=body)) as mock_post:
            completion = backend.generate("prompt", temperature=0.1, top_p=0.9)

        mock_post.assert_called_once_with(
            "http://ollama:11434/api/generate",
            json={
                "model": "llama3.2:3b-instruct-fp16",
                "prompt": "prompt",
                "stream": False,
                "options": {"temperature": 0.1, "top_p": 0.9},
            },
            timeout=5,
        )
        assert completion.text == "{}"
        assert completion.usage.input_tokens == 100
        assert completion.usage.output_tokens == 20

    def test_connection_error(self, backend):
        with patch("txn_agent.backends.ollama.requests.post",
                   side_effect=requests.exceptions.ConnectionError("refused")):
            with pytest.raises(BackendUnavailableError) as exc:
                backend.generate("p", 0.1, 0.9)
        assert "cannot connect to Ollama at http://ollama:11434" in exc.value.message
        assert "ollama pull llama3.2:3b-instruct-fp16" in exc.value.message

    def test_timeout(self, backend):
        with patch("txn_agent.backends.ollama.requests.post",
                   side_effect=requests.exceptions.Timeout()):
            with pytest.raises(BackendUnavailableError) as exc:
                backend.generate("p", 0.1, 0.9)
        assert "timed out after 5s" in exc.value.message

    def test_http_error(self, backend):
        with patch("txn_agent.backends.ollama.requests.post", return_value=http_response(status=404)):
            with pytest.raises(BackendUnavailableError) as exc:
                backend.generate("p", 0.1, 0.9)
        assert "HTTP 404" in exc.value.message

    def test_missing_response_field(self, backend):
        with patch("txn_agent.backends.ollama.requests.post", return_value=http_response(body={"done": True})):
            with pytest.raises(BackendUnavailableError):
                backend.generate("p", 0.1, 0.9)

    def test_non_object_body(self, backend):
        for body in (["response"], "response"):
            with patch("txn_agent.backends.ollama.requests.post", return_value=http_response(body=body)):
                with pytest.raises(BackendUnavailableError) as exc:
                    backend.generate("p", 0.1, 0.9)
            assert "unexpected response body" in exc.value.message

    def test_set_model_changes_payload(self, backend):
        backend.set_model("mistral")
        body = {"response": "{}"}
        with patch("txn_agent.backends.ollama.requests.post", return_value=http_response(body=body)) as mock_post:
            backend.generate("p", 0.1, 0.9)
        assert mock_post.call_args.kwargs["json"]["model"] == "mistral"


class TestOllamaModels:
    """Test availability and model listing."""

    def test_available(self):
        with patch("txn_agent.backends.ollama.requests.get", return_value=http_response()):
            assert OllamaBackend(url="http://x").is_available()

    def test_unreachable(self):
        with patch("txn_agent.backends.ollama.requests.get",
                   side_effect=requests.exceptions.ConnectionError()):
            assert not OllamaBackend(url="http://x").is_available()

    def test_list_models(self):
        body = {"models": [{"name": "llama3.2:3b-instruct-fp16"}, {"name": "mistral"}]}
        with patch("txn_agent.backends.ollama.requests.get", return_value=http_response(body=body)):
            assert OllamaBackend(url="http://x").list_models() == ["llama3.2:3b-instruct-fp16", "mistral"]

    def test_list_models_failure(self):
        with patch("txn_agent.backends.ollama.requests.get",
                   side_effect=requests.exceptions.Timeout()):
            assert OllamaBackend(url="http://x").list_models() == []

    def test_list_models_non_object_body(self):
        with patch("txn_agent.backends.ollama.requests.get", return_value=http_response(body=["mistral"])):
            assert OllamaBackend(url="http://x").list_models() == []


# =============================================================================
# Gemini
# =============================================================================

class TestGemini:
    """Test Gemini backend with a mocked client."""

    def test_generate(self):
        client = MagicMock()
        client.models.generate_content.return_value = SimpleNamespace(
            text="{}",
            usage_metadata=SimpleNamespace(prompt_token_count=50, candidates_token_count=7),
        )
        backend = GeminiBackend(model="gemini-test", client=client)
        completion = backend.generate("prompt", temperature=0.3, top_p=0.9)

        assert completion.text == "{}"
        assert completion.usage.input_tokens == 50
        kwargs = client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-test"
        assert kwargs["contents"] == "prompt"
        assert kwargs["config"].temperature == 0.3

    def test_transport_error(self):
        client = MagicMock()
        client.models.generate_content.side_effect = RuntimeError("connection reset")
        with pytest.raises(BackendUnavailableError) as exc:
            GeminiBackend(client=client).generate("p", 0.1, 0.9)
        assert "connection reset" in exc.value.message

    def test_empty_text(self):
        client = MagicMock()
        client.models.generate_content.return_value = SimpleNamespace(text=None, usage_metadata=None)
        with pytest.raises(BackendUnavailableError):
            GeminiBackend(client=client).generate("p", 0.1, 0.9)

    def test_missing_key(self):
        backend = GeminiBackend(api_key=None)
        backend.api_key = None
        with pytest.raises(BackendUnavailableError) as exc:
            backend.generate("p", 0.1, 0.9)
        assert "GOOGLE_API_KEY is not set" in exc.value.message
        assert not backend.is_available()

    def test_list_models(self):
        client = MagicMock()
        client.models.list.return_value = [SimpleNamespace(name="models/gemini-a"), SimpleNamespace(name=None)]
        assert GeminiBackend(client=client).list_models() == ["models/gemini-a"]


class TestGetBackend:
    """Test provider selection."""

    def test_ollama(self):
        assert isinstance(get_backend("ollama"), OllamaBackend)

    def test_case_insensitive(self):
        assert isinstance(get_backend("Gemini"), GeminiBackend)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown LLM provider"):
            get_backend("openai")
