"""
File operation tools for creating directories, removing, moving and copying.

All four tools change the filesystem and are wrapped in a confirmation
guard by the agent.
"""

import logging
import shutil
from pathlib import Path

from pydantic import BaseModel, Field

from picocode.tools.base import Tool
from picocode.tools.models import ToolInvocation, ToolKind, ToolResult

logger = logging.getLogger(__name__)


class MakeDirParams(BaseModel):
    path: str = Field(..., description="Directory to create, with any missing parents")


class RemoveParams(BaseModel):
    """
    Parameters for the remove tool.

    Parameters
    ----------
    path : str
        File or directory to remove.
    recursive : bool, default=False
        Remove a non-empty directory and everything in it.
    """

    path: str = Field(..., description="File or directory to remove")
    recursive: bool = Field(
        False,
        description="Remove directories recursively",
    )


class TransferParams(BaseModel):
    """
    Parameters for the move_file and copy_file tools.

    Parameters
    ----------
    src : str
        Source path.
    dst : str
        Destination path.
    """

    src: str = Field(..., description="Source path")
    dst: str = Field(..., description="Destination path")


class MakeDirTool(Tool):
    name: str = "make_dir"
    description: str = "Create a directory, including missing parent directories."
    kind: ToolKind = ToolKind.WRITE
    schema: type[MakeDirParams] = MakeDirParams
    primary_param: str = "path"
    requires_confirmation: bool = True

    async def execute(self, invocation: ToolInvocation) -> ToolResult:
        params = MakeDirParams(**invocation.params)
        path: Path = self.resolve(invocation, params.path)

        path.mkdir(parents=True, exist_ok=True)

        return ToolResult.success_result("ok", metadata={"path": str(path)})


class RemoveTool(Tool):
    """
    Tool for removing a file or directory.

    An empty directory is removed with ``rmdir``. A non-empty one needs
    ``recursive=true``.
    """

    name: str = "remove"
    description: str = (
        "Remove a file or directory. Set recursive to true to remove a "
        "directory and its contents."
    )
    kind: ToolKind = ToolKind.WRITE
    schema: type[RemoveParams] = RemoveParams
    primary_param: str = "path"
    requires_confirmation: bool = True

    async def execute(self, invocation: ToolInvocation) -> ToolResult:
        params = RemoveParams(**invocation.params)
        path: Path = self.resolve(invocation, params.path)

        if path.is_dir() and not path.is_symlink():
            if params.recursive:
                shutil.rmtree(path)
            else:
                path.rmdir()
        else:
            path.unlink()

        logger.debug(f"Removed {path}")
        return ToolResult.success_result("ok", metadata={"path": str(path)})


class MoveFileTool(Tool):
    name: str = "move_file"
    description: str = "Move or rename a file or directory."
    kind: ToolKind = ToolKind.WRITE
    schema: type[TransferParams] = TransferParams
    requires_confirmation: bool = True

    async def execute(self, invocation: ToolInvocation) -> ToolResult:
        params = TransferParams(**invocation.params)
        source: Path = self.resolve(invocation, params.src)
        destination: Path = self.resolve(invocation, params.dst)

        source.rename(destination)

        return ToolResult.success_result(
            "ok",
            metadata={"source": str(source), "destination": str(destination)},
        )


class CopyFileTool(Tool):
    """Tool for copying a single file. Directories are rejected."""

    name: str = "copy_file"
    description: str = "Copy a file to a new location."
    kind: ToolKind = ToolKind.WRITE
    schema: type[TransferParams] = TransferParams
    requires_confirmation: bool = True

    async def execute(self, invocation: ToolInvocation) -> ToolResult:
        params = TransferParams(**invocation.params)
        source: Path = self.resolve(invocation, params.src)
        destination: Path = self.resolve(invocation, params.dst)

        if source.is_dir():
            return ToolResult.error_result(
                f"Source is a directory: {params.src}",
                metadata={"source": str(source)},
            )

        shutil.copy(source, destination)

        return ToolResult.success_result(
            "ok",
            metadata={"source": str(source), "destination": str(destination)},
        )
