"""
Tool registry for managing and invoking tools.

This module provides functionality to register and invoke tools. Every
failure of a call is returned as a :class:`ToolResult`, so the conversation
loop can hand it back to the model.
"""

import logging
from pathlib import Path
from typing import Any

from picocode.exceptions import SandboxViolation
from picocode.tools.interfaces import ToolProtocol
from picocode.tools.models import ToolErrorKind, ToolInvocation, ToolResult

logger = logging.getLogger(__name__)


class ToolRegistry:
    """
    Registry for managing and invoking tools.

    Guarded and plain tools are registered the same way. The registry never
    prompts; confirmation happens inside :class:`~picocode.safety.guard.GuardedTool`.

    Attributes
    ----------
    _tools : dict[str, ToolProtocol]
        Registered tools keyed by name, in registration order.

    Examples
    --------
    >>> registry = ToolRegistry()
    >>> registry.register(ReadFileTool(config))
    >>> result = await registry.invoke("read_file", {"path": "main.py"}, config.cwd)
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolProtocol] = {}

    def register(self, tool: ToolProtocol) -> None:
        """
        Register a tool in the registry.

        Parameters
        ----------
        tool : ToolProtocol
            Tool instance to register. A tool with the same name is replaced.
        """
        if tool.name in self._tools:
            logger.warning(f"Overwriting existing tool: {tool.name}")

        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")

    def unregister(self, name: str) -> bool:
        if name in self._tools:
            del self._tools[name]
            logger.debug(f"Unregistered tool: {name}")
            return True

        return False

    def get(self, name: str) -> ToolProtocol | None:
        return self._tools.get(name)

    def get_tools(self) -> list[ToolProtocol]:
        return list(self._tools.values())

    def get_schemas(self) -> list[dict[str, Any]]:
        """
        Get OpenAI-compatible schemas for all tools.

        Returns
        -------
        list[dict[str, Any]]
            One ``{"name", "description", "parameters"}`` dict per tool.
        """
        return [tool.to_openai_schema() for tool in self.get_tools()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    async def invoke(
        self,
        name: str,
        params: dict[str, Any],
        cwd: Path,
    ) -> ToolResult:
        """
        Validate and run a tool call.

        Parameters
        ----------
        name : str
            Name of the tool to invoke.
        params : dict[str, Any]
            Arguments supplied by the model.
        cwd : Path
            Sandbox root.

        Returns
        -------
        ToolResult
            Result of the call. Unknown tools, invalid parameters, sandbox
            violations, I/O errors and unexpected exceptions all become
            failed results with the matching ``error_kind``.

        Examples
        --------
        >>> result = await registry.invoke(
        ...     "write_file",
        ...     {"path": "hello.py", "content": "print('hello')"},
        ...     Path.cwd(),
        ... )
        """
        tool = self.get(name)
        if tool is None:
            return ToolResult.error_result(
                f"Unknown tool: {name}",
                error_kind=ToolErrorKind.UNKNOWN_TOOL,
                metadata={"tool_name": name},
            )

        validation_errors = tool.validate_params(params)
        if validation_errors:
            return ToolResult.error_result(
                f"Invalid parameters: {'; '.join(validation_errors)}",
                error_kind=ToolErrorKind.INVALID_PARAMS,
                metadata={
                    "tool_name": name,
                    "validation_errors": validation_errors,
                },
            )

        invocation = ToolInvocation(params=params, cwd=cwd)

        try:
            result = await tool.execute(invocation)
        except SandboxViolation as e:
            logger.warning(f"Tool {name} blocked: {e.requested!r} is outside {e.root}")
            result = ToolResult.error_result(
                str(e),
                error_kind=ToolErrorKind.SANDBOX,
                metadata={"tool_name": name},
            )
        except OSError as e:
            logger.debug(f"Tool {name} failed with I/O error: {e}")
            result = ToolResult.error_result(
                str(e),
                error_kind=ToolErrorKind.IO,
                metadata={"tool_name": name},
            )
        except Exception as e:
            logger.exception(f"Tool {name} raised unexpected error")
            result = ToolResult.error_result(
                f"Internal error: {str(e)}",
                error_kind=ToolErrorKind.INTERNAL,
                metadata={"tool_name": name},
            )

        return result
