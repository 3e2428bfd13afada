"""
Data models for the tools system.

This module defines Pydantic models for tool invocations and results.
"""

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class ToolKind(str, Enum):
    """
    Categories of tools based on their operation type.

    Attributes
    ----------
    READ : str
        Read-only operations (reading files, listing directories, searching).
    WRITE : str
        Operations that change the filesystem.
    SHELL : str
        Shell command execution.
    NETWORK : str
        Operations that reach outside the machine.
    """

    READ = "read"
    WRITE = "write"
    SHELL = "shell"
    NETWORK = "network"


class ToolErrorKind(str, Enum):
    """
    Why a tool call failed.

    Attributes
    ----------
    SANDBOX : str
        A path argument resolved outside the sandbox root.
    CANCELLED : str
        The operator refused the call.
    IO : str
        The filesystem or a subprocess reported an error.
    INVALID_PARAMS : str
        Arguments did not match the tool's schema.
    UNKNOWN_TOOL : str
        The model named a tool that is not registered.
    INTERNAL : str
        The tool raised an unexpected exception.
    """

    SANDBOX = "sandbox"
    CANCELLED = "cancelled"
    IO = "io"
    INVALID_PARAMS = "invalid_params"
    UNKNOWN_TOOL = "unknown_tool"
    INTERNAL = "internal"


class ToolResult(BaseModel):
    """
    Result of a tool execution.

    A failed result is still delivered to the model as a tool message. Only
    the completion engine itself can fail a turn.

    Parameters
    ----------
    success : bool
        Whether the tool execution was successful.
    output : str
        Output from the tool execution.
    error : str | None, optional
        Error message if execution failed.
    error_kind : ToolErrorKind | None, optional
        Category of the failure.
    metadata : dict[str, Any], default={}
        Additional metadata about the execution.
    exit_code : int | None, optional
        Exit code for shell commands.

    Examples
    --------
    >>> result = ToolResult.success_result("ok")
    >>> result = ToolResult.error_result(
    ...     "Action cancelled by user",
    ...     error_kind=ToolErrorKind.CANCELLED,
    ... )
    """

    success: bool = Field(description="Whether execution succeeded")
    output: str = Field(default="", description="Tool output")
    error: str | None = Field(default=None, description="Error message")
    error_kind: ToolErrorKind | None = Field(
        default=None,
        description="Failure category",
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional metadata",
    )
    exit_code: int | None = Field(default=None, description="Exit code")

    @classmethod
    def error_result(
        cls,
        error: str,
        output: str = "",
        error_kind: ToolErrorKind | None = None,
        **kwargs: Any,
    ) -> "ToolResult":
        """
        Create an error result.

        Parameters
        ----------
        error : str
            Error message.
        output : str, default=""
            Optional output text.
        error_kind : ToolErrorKind | None, optional
            Failure category.
        **kwargs : Any
            Additional fields for the result.

        Returns
        -------
        ToolResult
            Error result instance.
        """
        return cls(
            success=False,
            output=output,
            error=error,
            error_kind=error_kind,
            **kwargs,
        )

    @classmethod
    def success_result(cls, output: str, **kwargs: Any) -> "ToolResult":
        """
        Create a success result.

        Parameters
        ----------
        output : str
            Output text.
        **kwargs : Any
            Additional fields for the result.

        Returns
        -------
        ToolResult
            Success result instance.
        """
        return cls(success=True, output=output, error=None, **kwargs)

    def to_model_output(self) -> str:
        """
        Render the result as the content of a tool message.

        Returns
        -------
        str
            The output on success, otherwise ``Error: ...`` followed by any
            partial output.

        Examples
        --------
        >>> ToolResult.error_result("boom").to_model_output()
        'Error: boom'
        """
        if self.success:
            return self.output

        if self.output:
            return f"Error: {self.error}\n\nOutput:\n{self.output}"
        return f"Error: {self.error}"


class ToolInvocation(BaseModel):
    """
    Represents an invocation of a tool.

    Parameters
    ----------
    params : dict[str, Any]
        Parameters for the tool.
    cwd : Path
        Sandbox root for the invocation.

    Examples
    --------
    >>> invocation = ToolInvocation(params={"path": "main.py"}, cwd=Path("/work"))
    """

    params: dict[str, Any] = Field(description="Tool parameters")
    cwd: Path = Field(description="Sandbox root")
