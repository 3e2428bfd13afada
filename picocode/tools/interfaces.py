"""
Protocol definitions for tool extensibility.

The registry, the guard and the engine only depend on this protocol, so a
guarded tool and a plain tool are interchangeable.
"""

from typing import Any, Protocol

from picocode.tools.models import ToolInvocation, ToolKind, ToolResult


class ToolProtocol(Protocol):
    """
    Protocol for tool implementations.

    Attributes
    ----------
    name : str
        Unique name of the tool.
    description : str
        Human-readable description of what the tool does.
    kind : ToolKind
        Category of the tool operation.
    """

    name: str
    description: str
    kind: ToolKind

    async def execute(self, invocation: ToolInvocation) -> ToolResult:
        """
        Execute the tool with the given invocation.

        Parameters
        ----------
        invocation : ToolInvocation
            Invocation context with parameters and sandbox root.

        Returns
        -------
        ToolResult
            Result of the tool execution.
        """
        ...

    def validate_params(self, params: dict[str, Any]) -> list[str]:
        """
        Validate tool parameters.

        Parameters
        ----------
        params : dict[str, Any]
            Parameters to validate.

        Returns
        -------
        list[str]
            List of validation error messages. Empty list if valid.
        """
        ...

    def describe_call(self, params: dict[str, Any]) -> str:
        """
        Describe a call as a single string.

        Auto-approval patterns are matched against this string and the
        confirmation preview is derived from it.

        Parameters
        ----------
        params : dict[str, Any]
            Tool parameters.

        Returns
        -------
        str
            The call description.
        """
        ...

    def to_openai_schema(self) -> dict[str, Any]:
        """
        Convert tool to OpenAI function calling schema.

        Returns
        -------
        dict[str, Any]
            OpenAI-compatible function schema.
        """
        ...
