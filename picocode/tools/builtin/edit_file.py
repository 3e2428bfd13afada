"""
Edit file tool for exact string replacement.
"""

import logging
from pathlib import Path

from pydantic import BaseModel, Field

from picocode.constants import DEFAULT_ENCODING
from picocode.tools.base import Tool
from picocode.tools.models import ToolErrorKind, ToolInvocation, ToolKind, ToolResult
from picocode.utils.paths import read_text

logger = logging.getLogger(__name__)


class EditFileParams(BaseModel):
    """
    Parameters for the edit_file tool.

    Parameters
    ----------
    path : str
        Path to the file to edit.
    old : str
        Exact text to replace, including whitespace.
    new : str
        Replacement text. May be empty to delete ``old``.
    all : bool, default=False
        Replace every occurrence instead of requiring a unique match.

    Examples
    --------
    >>> params = EditFileParams(path="main.py", old="print('a')", new="print('b')")
    """

    path: str = Field(..., description="Path to the file to edit")
    old: str = Field(
        ...,
        min_length=1,
        description="Exact text to replace. Must be unique unless all is true",
    )
    new: str = Field(..., description="Replacement text")
    all: bool = Field(False, description="Replace all occurrences")


class EditFileTool(Tool):
    """Tool for replacing one exact snippet (or every copy of it) in a file."""

    name: str = "edit_file"
    description: str = (
        "Replace exact text in a file. old must match exactly and be unique "
        "in the file unless all is true."
    )
    kind: ToolKind = ToolKind.WRITE
    schema: type[EditFileParams] = EditFileParams
    primary_param: str = "path"

    async def execute(self, invocation: ToolInvocation) -> ToolResult:
        params = EditFileParams(**invocation.params)
        path: Path = self.resolve(invocation, params.path)

        content: str = read_text(path)
        count: int = content.count(params.old)

        if count == 0:
            return ToolResult.error_result(
                "old_string not found",
                error_kind=ToolErrorKind.INVALID_PARAMS,
                metadata={"path": str(path)},
            )

        if count > 1 and not params.all:
            return ToolResult.error_result(
                f"old_string appears {count} times, must be unique (use all=true)",
                error_kind=ToolErrorKind.INVALID_PARAMS,
                metadata={"path": str(path), "occurrence_count": count},
            )

        if params.all:
            new_content: str = content.replace(params.old, params.new)
        else:
            new_content = content.replace(params.old, params.new, 1)

        path.write_text(new_content, encoding=DEFAULT_ENCODING)
        logger.debug(f"Edited {path}: replaced {count if params.all else 1} occurrence(s)")

        return ToolResult.success_result(
            "ok",
            metadata={
                "path": str(path),
                "replaced": count if params.all else 1,
            },
        )
