"""
List directory tool.
"""

import asyncio
from pathlib import Path

from pydantic import BaseModel, Field

from picocode.constants import EMPTY_OUTPUT
from picocode.tools.base import Tool
from picocode.tools.models import ToolInvocation, ToolKind, ToolResult
from picocode.utils.gitignore import IgnoreRules


class ListDirParams(BaseModel):
    """
    Parameters for the list_dir tool.

    Parameters
    ----------
    path : str, default="."
        Directory to list.
    """

    path: str = Field(".", description="Directory to list")


class ListDirTool(Tool):
    """
    Tool for listing one directory level, directories suffixed with ``/``.

    Entries matched by a ``.gitignore`` are left out.
    """

    name: str = "list_dir"
    description: str = (
        "List the entries of a directory. Directories end with '/'."
    )
    kind: ToolKind = ToolKind.READ
    schema: type[ListDirParams] = ListDirParams
    primary_param: str = "path"

    async def execute(self, invocation: ToolInvocation) -> ToolResult:
        params = ListDirParams(**invocation.params)
        dir_path: Path = self.resolve(invocation, params.path)

        entries: list[str] = await asyncio.to_thread(
            self._list,
            dir_path,
            invocation.cwd,
        )

        if not entries:
            return ToolResult.success_result(EMPTY_OUTPUT, metadata={"entries": 0})

        return ToolResult.success_result(
            "\n".join(entries),
            metadata={
                "path": str(dir_path),
                "entries": len(entries),
            },
        )

    def _list(self, dir_path: Path, root: Path) -> list[str]:
        ignore: IgnoreRules = IgnoreRules.for_directory(dir_path, root)
        entries: list[str] = []
        for item in dir_path.iterdir():
            is_dir: bool = item.is_dir()
            if ignore.is_ignored(item, is_dir=is_dir):
                continue
            entries.append(f"{item.name}/" if is_dir else item.name)
        return sorted(entries)
