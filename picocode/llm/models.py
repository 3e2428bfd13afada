"""
Data models for completion requests and responses.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, Field


class ToolCall(BaseModel):
    """
    A tool call requested by the model.

    Parameters
    ----------
    call_id : str
        Identifier echoed back in the tool result message.
    name : str
        Requested tool name.
    arguments : dict[str, Any], default={}
        Parsed call arguments.

    Examples
    --------
    >>> call = ToolCall(call_id="call_1", name="read_file", arguments={"path": "a.py"})
    """

    call_id: str = Field(description="Tool call identifier")
    name: str = Field(description="Tool name")
    arguments: dict[str, Any] = Field(
        default_factory=dict,
        description="Tool arguments",
    )

    def to_message_dict(self) -> dict[str, Any]:
        """Render the call in the assistant message ``tool_calls`` format."""
        return {
            "id": self.call_id,
            "type": "function",
            "function": {
                "name": self.name,
                "arguments": json.dumps(self.arguments),
            },
        }


class TokenUsage(BaseModel):
    """
    Represents token usage statistics for an LLM request.

    Parameters
    ----------
    prompt_tokens : int, default=0
        Number of tokens in the prompt.
    completion_tokens : int, default=0
        Number of tokens in the completion.
    total_tokens : int, default=0
        Total number of tokens used.
    cached_tokens : int, default=0
        Number of tokens that were cached.
    """

    prompt_tokens: int = Field(default=0, ge=0, description="Prompt tokens")
    completion_tokens: int = Field(default=0, ge=0, description="Completion tokens")
    total_tokens: int = Field(default=0, ge=0, description="Total tokens")
    cached_tokens: int = Field(default=0, ge=0, description="Cached tokens")

    def __add__(self, other: TokenUsage) -> TokenUsage:
        return TokenUsage(
            prompt_tokens=self.prompt_tokens + other.prompt_tokens,
            completion_tokens=self.completion_tokens + other.completion_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
            cached_tokens=self.cached_tokens + other.cached_tokens,
        )


class Completion(BaseModel):
    """
    One model reply.

    A reply with no tool calls ends the turn; its text is the answer.

    Parameters
    ----------
    text : str, default=""
        Assistant text. May be empty when only tools were requested.
    tool_calls : list[ToolCall], default=[]
        Requested tool calls, in the order the model gave them.
    usage : TokenUsage | None, optional
        Token accounting, if the provider reported it.
    finish_reason : str | None, optional
        Provider finish reason.
    """

    text: str = Field(default="", description="Assistant text")
    tool_calls: list[ToolCall] = Field(
        default_factory=list,
        description="Requested tool calls",
    )
    usage: TokenUsage | None = Field(default=None, description="Token usage")
    finish_reason: str | None = Field(default=None, description="Finish reason")

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)


def parse_tool_call_arguments(arguments_str: str) -> dict[str, Any]:
    """
    Parse tool call arguments from a JSON string.

    Parameters
    ----------
    arguments_str : str
        JSON string containing tool call arguments.

    Returns
    -------
    dict[str, Any]
        Parsed arguments. An empty string gives an empty dict. Text that is
        not a JSON object gives ``{"raw_arguments": text}``, which then fails
        parameter validation and is reported back to the model.

    Examples
    --------
    >>> parse_tool_call_arguments('{"cmd": "ls"}')
    {'cmd': 'ls'}
    >>> parse_tool_call_arguments("not json")
    {'raw_arguments': 'not json'}
    """
    if not arguments_str:
        return {}

    try:
        parsed: Any = json.loads(arguments_str)
    except json.JSONDecodeError:
        return {"raw_arguments": arguments_str}

    if not isinstance(parsed, dict):
        return {"raw_arguments": arguments_str}
    return parsed
