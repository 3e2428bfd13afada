"""
LLM client implementation for picocode.

This module provides an async client for OpenAI-compatible chat completion
APIs, with tool calling and retry logic.
"""

import logging
from typing import Any

from openai import AsyncOpenAI

from picocode.llm.models import Completion, TokenUsage, ToolCall, parse_tool_call_arguments
from picocode.llm.providers import ResolvedProvider
from picocode.llm.retry import RetryStrategy
from picocode.types import MessageDict, ToolDefinitions

logger = logging.getLogger(__name__)


class LLMClient:
    """
    Client for OpenAI-compatible chat completion endpoints.

    Parameters
    ----------
    provider : ResolvedProvider
        Endpoint, model and API key.
    retry_strategy : RetryStrategy | None, optional
        Retry policy. Defaults to three retries with backoff.

    Attributes
    ----------
    provider : ResolvedProvider
        Endpoint, model and API key.
    _client : AsyncOpenAI | None
        Internal OpenAI client instance (lazy-initialized).
    _retry_strategy : RetryStrategy
        Strategy for handling retries.

    Examples
    --------
    >>> client = LLMClient(resolve_provider("openai"))
    >>> completion = await client.complete([{"role": "user", "content": "Hello"}])
    >>> print(completion.text)
    >>> await client.close()
    """

    def __init__(
        self,
        provider: ResolvedProvider,
        retry_strategy: RetryStrategy | None = None,
    ) -> None:
        self.provider: ResolvedProvider = provider
        self._client: AsyncOpenAI | None = None
        self._retry_strategy: RetryStrategy = retry_strategy or RetryStrategy()

    @property
    def model(self) -> str:
        return self.provider.model

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.provider.api_key,
                base_url=self.provider.base_url,
                max_retries=0,
            )
            logger.debug(f"LLM client initialized for {self.provider.base_url}")

        return self._client

    async def close(self) -> None:
        """
        Close the client and release resources.

        Examples
        --------
        >>> await client.close()
        """
        if self._client:
            await self._client.close()
            self._client = None
            logger.debug("LLM client closed")

    def _build_tools(self, tools: ToolDefinitions) -> list[dict[str, Any]]:
        """
        Build tool definitions in OpenAI format.

        Parameters
        ----------
        tools : ToolDefinitions
            ``{"name", "description", "parameters"}`` dicts.

        Returns
        -------
        list[dict[str, Any]]
            Tool definitions wrapped as ``{"type": "function", ...}``.
        """
        return [
            {
                "type": "function",
                "function": {
                    "name": tool["name"],
                    "description": tool.get("description", ""),
                    "parameters": tool.get(
                        "parameters",
                        {"type": "object", "properties": {}},
                    ),
                },
            }
            for tool in tools
        ]

    async def complete(
        self,
        messages: list[MessageDict],
        tools: ToolDefinitions | None = None,
    ) -> Completion:
        """
        Generate one model reply.

        Parameters
        ----------
        messages : list[MessageDict]
            List of messages in the conversation.
        tools : ToolDefinitions | None, optional
            Tool schemas available to the model.

        Returns
        -------
        Completion
            Reply text, tool calls and usage.

        Raises
        ------
        ConnectionError
            If the API stays unreachable after retries.
        RateLimitError
            If the API keeps rate limiting after retries.
        APIError
            If the API returns an error.
        """
        client: AsyncOpenAI = self._get_client()

        kwargs: dict[str, Any] = {
            "model": self.provider.model,
            "messages": messages,
        }

        if tools:
            kwargs["tools"] = self._build_tools(tools)
            kwargs["tool_choice"] = "auto"

        response = await self._retry_strategy.execute(
            lambda: client.chat.completions.create(**kwargs),
        )
        return self._parse_response(response)

    def _parse_response(self, response: Any) -> Completion:
        choice = response.choices[0]
        message = choice.message

        tool_calls: list[ToolCall] = []
        if message.tool_calls:
            for tc in message.tool_calls:
                tool_calls.append(
                    ToolCall(
                        call_id=tc.id,
                        name=tc.function.name,
                        arguments=parse_tool_call_arguments(tc.function.arguments),
                    ),
                )

        usage: TokenUsage | None = None
        if response.usage:
            usage = TokenUsage(
                prompt_tokens=response.usage.prompt_tokens or 0,
                completion_tokens=response.usage.completion_tokens or 0,
                total_tokens=response.usage.total_tokens or 0,
                cached_tokens=(
                    response.usage.prompt_tokens_details.cached_tokens or 0
                    if getattr(response.usage, "prompt_tokens_details", None)
                    else 0
                ),
            )

        return Completion(
            text=message.content or "",
            tool_calls=tool_calls,
            usage=usage,
            finish_reason=choice.finish_reason,
        )
