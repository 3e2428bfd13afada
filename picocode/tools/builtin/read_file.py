"""
Read file tool for reading text file contents with line numbers.
"""

import logging
from pathlib import Path

from pydantic import BaseModel, Field

from picocode.tools.base import Tool
from picocode.tools.models import ToolInvocation, ToolKind, ToolResult
from picocode.utils.paths import is_binary_file, read_text

logger = logging.getLogger(__name__)


class ReadFileParams(BaseModel):
    """
    Parameters for the read_file tool.

    Parameters
    ----------
    path : str
        Path to the file, relative to the working directory.
    offset : int, default=0
        Number of lines to skip.
    limit : int, default=0
        Maximum number of lines to return. 0 returns every line.

    Examples
    --------
    >>> params = ReadFileParams(path="main.py", offset=10, limit=20)
    """

    path: str = Field(..., description="Path to the file to read")
    offset: int = Field(0, ge=0, description="Number of lines to skip")
    limit: int = Field(
        0,
        ge=0,
        description="Maximum number of lines to read (0 reads to the end)",
    )


class ReadFileTool(Tool):
    """
    Tool for reading text files.

    Each returned line is prefixed with its 1-based line number, right
    aligned to four columns and followed by ``| ``.
    """

    name: str = "read_file"
    description: str = (
        "Read a text file. Returns the content with line numbers. "
        "Use offset and limit to read part of a large file."
    )
    kind: ToolKind = ToolKind.READ
    schema: type[ReadFileParams] = ReadFileParams
    primary_param: str = "path"

    async def execute(self, invocation: ToolInvocation) -> ToolResult:
        params = ReadFileParams(**invocation.params)
        path: Path = self.resolve(invocation, params.path)

        if is_binary_file(path):
            return ToolResult.error_result(
                f"Cannot read binary file: {path.name}",
                metadata={"path": str(path)},
            )

        lines: list[str] = read_text(path).splitlines()
        end: int = params.offset + params.limit if params.limit else len(lines)
        selected: list[str] = lines[params.offset:end]

        output: str = "".join(
            f"{number:4}| {line}\n"
            for number, line in enumerate(selected, start=params.offset + 1)
        )

        return ToolResult.success_result(
            output,
            metadata={
                "path": str(path),
                "total_lines": len(lines),
                "shown": len(selected),
            },
        )
