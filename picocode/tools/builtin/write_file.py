"""
Write file tool for creating or overwriting files.
"""

import logging
from pathlib import Path

from pydantic import BaseModel, Field

from picocode.constants import DEFAULT_ENCODING
from picocode.tools.base import Tool
from picocode.tools.models import ToolInvocation, ToolKind, ToolResult
from picocode.utils.paths import ensure_parent_directory

logger = logging.getLogger(__name__)


class WriteFileParams(BaseModel):
    """
    Parameters for the write_file tool.

    Parameters
    ----------
    path : str
        Path to the file, relative to the working directory.
    content : str
        Full content to write.
    """

    path: str = Field(..., description="Path to the file to write")
    content: str = Field(..., description="Content to write to the file")


class WriteFileTool(Tool):
    """
    Tool for writing a whole file.

    Missing parent directories are created. An existing file is replaced.
    """

    name: str = "write_file"
    description: str = (
        "Write content to a file, replacing it if it exists. "
        "Parent directories are created as needed."
    )
    kind: ToolKind = ToolKind.WRITE
    schema: type[WriteFileParams] = WriteFileParams
    primary_param: str = "path"

    async def execute(self, invocation: ToolInvocation) -> ToolResult:
        params = WriteFileParams(**invocation.params)
        path: Path = self.resolve(invocation, params.path)

        is_new_file: bool = not path.exists()
        ensure_parent_directory(path)
        path.write_text(params.content, encoding=DEFAULT_ENCODING)
        logger.debug(f"Wrote {len(params.content)} characters to {path}")

        return ToolResult.success_result(
            "ok",
            metadata={
                "path": str(path),
                "is_new_file": is_new_file,
                "bytes": len(params.content.encode(DEFAULT_ENCODING)),
            },
        )
