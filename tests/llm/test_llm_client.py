"""Tests for picocode/llm - providers, retries and response parsing."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from picocode.exceptions import APIError, ConfigurationError, ConnectionError, RateLimitError
from picocode.llm.client import LLMClient
from picocode.llm.models import parse_tool_call_arguments
from picocode.llm.providers import PROVIDERS, ResolvedProvider, get_provider, resolve_provider
from picocode.llm.retry import RetryStrategy

REQUEST = httpx.Request("POST", "https://api.example.com/v1/chat/completions")


def rate_limit_error() -> openai.RateLimitError:
    return openai.RateLimitError(
        "slow down",
        response=httpx.Response(429, request=REQUEST),
        body=None,
    )


def bad_request_error() -> openai.BadRequestError:
    return openai.BadRequestError(
        "bad request",
        response=httpx.Response(400, request=REQUEST),
        body=None,
    )


class TestProviders:
    """Tests for the provider table."""

    def test_known_providers(self):
        for name in [
            "anthropic",
            "openai",
            "deepseek",
            "gemini",
            "google",
            "groq",
            "mistral",
            "moonshot",
            "ollama",
            "openrouter",
            "perplexity",
            "together",
            "xai",
        ]:
            assert name in PROVIDERS

    def test_google_is_gemini(self):
        assert get_provider("google") is get_provider("gemini")

    def test_unknown_provider(self):
        with pytest.raises(ConfigurationError) as exc_info:
            get_provider("acme")
        assert exc_info.value.message.startswith("Unknown provider: acme")

    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_provider("openai")
        assert exc_info.value.message == (
            "Missing API key for provider openai. "
            "Please set the OPENAI_API_KEY environment variable."
        )

    def test_resolve_with_key(self, monkeypatch):
        monkeypatch.setenv("DEEPSEEK_API_KEY", "sk-test")
        provider = resolve_provider("deepseek", "deepseek-coder")
        assert provider.api_key == "sk-test"
        assert provider.model == "deepseek-coder"
        assert provider.base_url == "https://api.deepseek.com/v1"

    def test_default_model(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        assert resolve_provider("openai").model == "gpt-4o-mini"

    def test_ollama_needs_no_key(self):
        provider = resolve_provider("ollama")
        assert provider.api_key == "ollama"


class TestRetryStrategy:
    """Tests for RetryStrategy."""

    @pytest.mark.asyncio
    async def test_retries_rate_limit_then_succeeds(self):
        func = AsyncMock(side_effect=[rate_limit_error(), "ok"])
        on_retry = MagicMock()

        result = await RetryStrategy(max_retries=2, base_delay=0.0).execute(func, on_retry=on_retry)

        assert result == "ok"
        assert func.await_count == 2
        on_retry.assert_called_once()

    @pytest.mark.asyncio
    async def test_rate_limit_exhausted(self):
        func = AsyncMock(side_effect=rate_limit_error())

        with pytest.raises(RateLimitError):
            await RetryStrategy(max_retries=2, base_delay=0.0).execute(func)

        assert func.await_count == 3

    @pytest.mark.asyncio
    async def test_connection_error_exhausted(self):
        func = AsyncMock(side_effect=openai.APIConnectionError(request=REQUEST))

        with pytest.raises(ConnectionError):
            await RetryStrategy(max_retries=1, base_delay=0.0).execute(func)

    @pytest.mark.asyncio
    async def test_api_error_not_retried(self):
        func = AsyncMock(side_effect=bad_request_error())

        with pytest.raises(APIError) as exc_info:
            await RetryStrategy(max_retries=3).execute(func)

        assert func.await_count == 1
        assert exc_info.value.status_code == 400

    def test_backoff_capped(self):
        strategy = RetryStrategy(base_delay=1.0, max_delay=5.0)
        assert [strategy._calculate_delay(a) for a in range(5)] == [1.0, 2.0, 4.0, 5.0, 5.0]


class TestLLMClient:
    """Tests for LLMClient request building and parsing."""

    @pytest.fixture
    def client(self) -> LLMClient:
        provider = ResolvedProvider(
            name="openai",
            base_url="https://api.openai.com/v1",
            model="gpt-4o-mini",
            api_key="sk-test",
        )
        return LLMClient(provider, retry_strategy=RetryStrategy(max_retries=0))

    @pytest.mark.asyncio
    async def test_complete_parses_tool_calls(self, client: LLMClient, monkeypatch):
        response = SimpleNamespace(
            choices=[
                SimpleNamespace(
                    finish_reason="tool_calls",
                    message=SimpleNamespace(
                        content=None,
                        tool_calls=[
                            SimpleNamespace(
                                id="call_1",
                                function=SimpleNamespace(
                                    name="read_file",
                                    arguments='{"path": "a.py"}',
                                ),
                            ),
                        ],
                    ),
                ),
            ],
            usage=SimpleNamespace(
                prompt_tokens=10,
                completion_tokens=5,
                total_tokens=15,
                prompt_tokens_details=None,
            ),
        )
        create = AsyncMock(return_value=response)
        fake = MagicMock()
        fake.chat.completions.create = create
        monkeypatch.setattr(client, "_get_client", lambda: fake)

        completion = await client.complete(
            [{"role": "user", "content": "hi"}],
            [{"name": "read_file", "description": "Read", "parameters": {"type": "object"}}],
        )

        assert completion.text == ""
        assert completion.tool_calls[0].name == "read_file"
        assert completion.tool_calls[0].arguments == {"path": "a.py"}
        assert completion.usage.total_tokens == 15
        kwargs = create.await_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["tools"][0]["type"] == "function"
        assert kwargs["tool_choice"] == "auto"

    @pytest.mark.asyncio
    async def test_complete_without_tools(self, client: LLMClient, monkeypatch):
        response = SimpleNamespace(
            choices=[
                SimpleNamespace(
                    finish_reason="stop",
                    message=SimpleNamespace(content="hello", tool_calls=None),
                ),
            ],
            usage=None,
        )
        create = AsyncMock(return_value=response)
        fake = MagicMock()
        fake.chat.completions.create = create
        monkeypatch.setattr(client, "_get_client", lambda: fake)

        completion = await client.complete([{"role": "user", "content": "hi"}])

        assert completion.text == "hello"
        assert not completion.has_tool_calls
        assert "tools" not in create.await_args.kwargs

    @pytest.mark.asyncio
    async def test_close_without_client(self, client: LLMClient):
        await client.close()


class TestParseToolCallArguments:
    """Tests for parse_tool_call_arguments."""

    def test_valid_json(self):
        assert parse_tool_call_arguments('{"cmd": "ls"}') == {"cmd": "ls"}

    def test_empty(self):
        assert parse_tool_call_arguments("") == {}

    def test_invalid_json(self):
        assert parse_tool_call_arguments("{oops") == {"raw_arguments": "{oops"}

    def test_non_object(self):
        assert parse_tool_call_arguments("[1, 2]") == {"raw_arguments": "[1, 2]"}
