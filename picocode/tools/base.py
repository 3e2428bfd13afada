"""
Base tool class.

This module provides the abstract base class for builtin tools, with
parameter validation, call description, sandboxed path resolution and
schema generation.
"""

import abc
import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError
from pydantic.json_schema import model_json_schema

from picocode.config.schema import Configuration
from picocode.safety.sandbox import resolve_in_sandbox
from picocode.tools.models import ToolInvocation, ToolKind, ToolResult

__all__ = ["Tool", "ToolKind"]


class Tool(abc.ABC):
    """
    Abstract base class for builtin tools.

    Subclasses set ``name``, ``description``, ``kind`` and ``schema`` (a
    Pydantic model class) and implement :meth:`execute`. Tools may raise
    :class:`~picocode.exceptions.SandboxViolation` or :class:`OSError`; the
    registry turns those into failed results.

    Parameters
    ----------
    config : Configuration
        Configuration object with settings and context.

    Attributes
    ----------
    name : str
        Unique name of the tool.
    description : str
        Description shown to the model.
    kind : ToolKind
        Category of tool operation.
    primary_param : str | None
        Parameter whose value describes a call. When None the whole
        parameter dict is used.
    requires_confirmation : bool
        Whether the agent wraps the tool in a confirmation guard.
    config : Configuration
        Configuration object.

    Examples
    --------
    >>> class EchoTool(Tool):
    ...     name = "echo"
    ...     description = "Echo text back"
    ...     kind = ToolKind.READ
    ...     schema = EchoParams
    ...     primary_param = "text"
    ...
    ...     async def execute(self, invocation: ToolInvocation) -> ToolResult:
    ...         return ToolResult.success_result(invocation.params["text"])
    """

    name: str = "base_tool"
    description: str = "Base tool"
    kind: ToolKind = ToolKind.READ
    primary_param: str | None = None
    requires_confirmation: bool = False

    def __init__(self, config: Configuration) -> None:
        self.config: Configuration = config

    @property
    def schema(self) -> type[BaseModel]:
        """
        Get the parameter schema for this tool.

        Returns
        -------
        type[BaseModel]
            A Pydantic model class.

        Raises
        ------
        NotImplementedError
            If not set by the subclass.
        """
        raise NotImplementedError(
            "Tool must define schema property or class attribute",
        )

    @abc.abstractmethod
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

    def validate_params(self, params: dict[str, Any]) -> list[str]:
        """
        Validate tool parameters against the schema.

        Parameters
        ----------
        params : dict[str, Any]
            Parameters to validate.

        Returns
        -------
        list[str]
            List of validation error messages. Empty list if valid.

        Examples
        --------
        >>> tool.validate_params({})
        ["Parameter 'path': Field required"]
        """
        try:
            self.schema(**params)
        except ValidationError as e:
            errors: list[str] = []
            for error in e.errors():
                field = ".".join(str(x) for x in error.get("loc", []))
                msg = error.get("msg", "Validation error")
                errors.append(f"Parameter '{field}': {msg}")
            return errors

        return []

    def describe_call(self, params: dict[str, Any]) -> str:
        """
        Describe a call as a single string.

        Parameters
        ----------
        params : dict[str, Any]
            Tool parameters.

        Returns
        -------
        str
            The value of ``primary_param`` if the tool has one and it was
            supplied, otherwise the parameters as JSON.
        """
        if self.primary_param and self.primary_param in params:
            value: Any = params[self.primary_param]
            return value if isinstance(value, str) else json.dumps(value)
        return json.dumps(params, ensure_ascii=False)

    def resolve(self, invocation: ToolInvocation, requested: str) -> Path:
        """
        Resolve a path argument against the sandbox root.

        Parameters
        ----------
        invocation : ToolInvocation
            Current invocation.
        requested : str
            Path as supplied by the model.

        Returns
        -------
        Path
            Path inside the sandbox.

        Raises
        ------
        SandboxViolation
            If the path escapes the sandbox root.
        """
        return resolve_in_sandbox(invocation.cwd, requested)

    def to_openai_schema(self) -> dict[str, Any]:
        """
        Convert tool to OpenAI function calling schema format.

        Returns
        -------
        dict[str, Any]
            ``{"name", "description", "parameters"}`` for the tool.
        """
        json_schema = model_json_schema(self.schema, mode="serialization")

        return {
            "name": self.name,
            "description": self.description,
            "parameters": {
                "type": "object",
                "properties": json_schema.get("properties", {}),
                "required": json_schema.get("required", []),
            },
        }
