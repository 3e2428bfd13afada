"""
Builtin tools for picocode.

This package provides the file, search, shell and browser tools.
"""

import logging

from picocode.config.schema import Configuration
from picocode.tools.base import Tool
from picocode.tools.builtin.browser import AgentBrowserTool, is_agent_browser_available
from picocode.tools.builtin.edit_file import EditFileTool
from picocode.tools.builtin.file_ops import (
    CopyFileTool,
    MakeDirTool,
    MoveFileTool,
    RemoveTool,
)
from picocode.tools.builtin.glob import GlobTool
from picocode.tools.builtin.grep import GrepTool
from picocode.tools.builtin.list_dir import ListDirTool
from picocode.tools.builtin.read_file import ReadFileTool
from picocode.tools.builtin.shell import BashTool
from picocode.tools.builtin.write_file import WriteFileTool

logger = logging.getLogger(__name__)

__all__ = [
    "ReadFileTool",
    "WriteFileTool",
    "EditFileTool",
    "GlobTool",
    "GrepTool",
    "ListDirTool",
    "MakeDirTool",
    "RemoveTool",
    "MoveFileTool",
    "CopyFileTool",
    "BashTool",
    "AgentBrowserTool",
    "get_all_builtin_tools",
    "create_builtin_tools",
]


def get_all_builtin_tools() -> list[type[Tool]]:
    """
    Get the tool classes that are always available.

    Returns
    -------
    list[type[Tool]]
        Tool classes, in registration order.
    """
    return [
        ReadFileTool,
        WriteFileTool,
        EditFileTool,
        GlobTool,
        GrepTool,
        ListDirTool,
        MakeDirTool,
        RemoveTool,
        MoveFileTool,
        CopyFileTool,
    ]


def create_builtin_tools(config: Configuration) -> list[Tool]:
    """
    Instantiate the builtin tools enabled by the configuration.

    ``bash`` is added when ``config.use_bash`` is set. ``agent_browser`` is
    added when its executable is found on ``PATH``.

    Parameters
    ----------
    config : Configuration
        Application configuration.

    Returns
    -------
    list[Tool]
        Unguarded tool instances.
    """
    tools: list[Tool] = [tool_class(config) for tool_class in get_all_builtin_tools()]

    if config.use_bash:
        tools.append(BashTool(config))

    if is_agent_browser_available():
        tools.append(AgentBrowserTool(config))
    else:
        logger.debug("agent-browser not found on PATH, skipping agent_browser tool")

    return tools
