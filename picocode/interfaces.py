"""
Protocol definitions for the collaborators the conversation loop depends on.

This module defines protocols that allow the completion engine to be
replaced, for example by a scripted fake in tests.
"""

from typing import Protocol

from picocode.llm.models import Completion
from picocode.types import MessageDict, ToolDefinitions


class CompletionModel(Protocol):
    """
    Protocol for completion engine implementations.

    This protocol defines the interface that all completion engines must
    implement, allowing providers to be used interchangeably.
    """

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
            The conversation so far, system message first.
        tools : ToolDefinitions | None, optional
            Tool schemas the model may call.

        Returns
        -------
        Completion
            The reply's text and any requested tool calls.

        Raises
        ------
        PicocodeError
            On connection, rate limit or API failures.
        """
        ...

    async def close(self) -> None:
        """Release any network resources."""
        ...
