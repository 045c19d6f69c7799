"""Unit tests for OpenAILLM provider."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from openai import APIConnectionError, APITimeoutError, RateLimitError

from speechcoach.services.llm.openai import OpenAILLM

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_completion(text: str | None):
    """Build a minimal object that looks like ``ChatCompletion``."""
    message = SimpleNamespace(content=text)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _mock_settings(**overrides):
    defaults = {
        "openai_api_key": "sk-openai-test",
        "openai_model": "gpt-4",
        "evaluation_max_tokens": 2048,
        "evaluation_temperature": 0.2,
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


@pytest.fixture
def mock_client():
    """Return an ``AsyncMock`` mimicking ``AsyncOpenAI``."""
    client = AsyncMock()
    client.chat.completions.create = AsyncMock(return_value=_make_completion("{}"))
    return client


@pytest.fixture
def llm(mock_client):
    with patch("speechcoach.services.llm.openai.get_settings", return_value=_mock_settings()):
        with patch("speechcoach.services.llm.openai.AsyncOpenAI", return_value=mock_client):
            instance = OpenAILLM()
    return instance


# ---------------------------------------------------------------------------
# Init
# ---------------------------------------------------------------------------


def test_defaults_from_settings():
    with patch("speechcoach.services.llm.openai.get_settings", return_value=_mock_settings()):
        with patch("speechcoach.services.llm.openai.AsyncOpenAI") as mock_cls:
            llm = OpenAILLM()

    assert llm._model == "gpt-4"
    assert llm._max_tokens == 2048
    assert llm._temperature == 0.2
    mock_cls.assert_called_once_with(api_key="sk-openai-test")


def test_zero_temperature_is_kept():
    with patch("speechcoach.services.llm.openai.get_settings", return_value=_mock_settings()):
        with patch("speechcoach.services.llm.openai.AsyncOpenAI"):
            llm = OpenAILLM(temperature=0.0)

    assert llm._temperature == 0.0


# ---------------------------------------------------------------------------
# generate()
# ---------------------------------------------------------------------------


class TestGenerate:
    async def test_returns_message_content(self, llm, mock_client):
        mock_client.chat.completions.create.return_value = _make_completion('{"a": 1}')

        assert await llm.generate("prompt") == '{"a": 1}'

    async def test_none_content_becomes_empty_string(self, llm, mock_client):
        mock_client.chat.completions.create.return_value = _make_completion(None)

        assert await llm.generate("prompt") == ""

    async def test_system_message_comes_first(self, llm, mock_client):
        await llm.generate("user prompt", system="You analyze speech")

        messages = mock_client.chat.completions.create.call_args.kwargs["messages"]
        assert messages == [
            {"role": "system", "content": "You analyze speech"},
            {"role": "user", "content": "user prompt"},
        ]

    async def test_json_mode_requests_json_object(self, llm, mock_client):
        await llm.generate("prompt", json_mode=True)

        call_kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert call_kwargs["response_format"] == {"type": "json_object"}

    async def test_plain_mode_has_no_response_format(self, llm, mock_client):
        await llm.generate("prompt")

        assert "response_format" not in mock_client.chat.completions.create.call_args.kwargs

    async def test_single_request_per_call(self, llm, mock_client):
        await llm.generate("prompt")

        mock_client.chat.completions.create.assert_awaited_once()


# ---------------------------------------------------------------------------
# Error translation
# ---------------------------------------------------------------------------


class TestErrorTranslation:
    async def test_timeout(self, llm, mock_client):
        mock_client.chat.completions.create.side_effect = APITimeoutError(request=_REQUEST)

        with pytest.raises(TimeoutError):
            await llm.generate("prompt")

    async def test_connection(self, llm, mock_client):
        mock_client.chat.completions.create.side_effect = APIConnectionError(request=_REQUEST)

        with pytest.raises(ConnectionError):
            await llm.generate("prompt")

    async def test_rate_limit(self, llm, mock_client):
        response = httpx.Response(429, request=_REQUEST)
        mock_client.chat.completions.create.side_effect = RateLimitError(
            "slow down", response=response, body=None
        )

        with pytest.raises(ConnectionError, match="rate limit"):
            await llm.generate("prompt")

    async def test_other_errors(self, llm, mock_client):
        mock_client.chat.completions.create.side_effect = KeyError("choices")

        with pytest.raises(RuntimeError):
            await llm.generate("prompt")
