"""
Completion engine for picocode.

This package provides the OpenAI-compatible client, the retry strategy and
the provider table.
"""

from picocode.llm.client import LLMClient
from picocode.llm.models import Completion, TokenUsage, ToolCall
from picocode.llm.providers import resolve_provider

__all__ = ["LLMClient", "Completion", "TokenUsage", "ToolCall", "resolve_provider"]
