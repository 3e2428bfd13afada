"""
Glob tool for finding files by pattern.
"""

import asyncio
import fnmatch
import logging
from pathlib import Path

from pydantic import BaseModel, Field

from picocode.constants import NO_MATCHES
from picocode.safety.sandbox import display_path
from picocode.tools.base import Tool
from picocode.tools.models import ToolInvocation, ToolKind, ToolResult
from picocode.utils.paths import walk_files

logger = logging.getLogger(__name__)


class GlobParams(BaseModel):
    """
    Parameters for the glob_files tool.

    Parameters
    ----------
    pat : str
        Glob pattern, matched against paths relative to ``path``.
    path : str, default="."
        Directory to search in.

    Examples
    --------
    >>> params = GlobParams(pat="**/*.py", path="src")
    """

    pat: str = Field(..., description="Glob pattern, e.g. **/*.py")
    path: str = Field(".", description="Directory to search in")


def matches_glob(relative: str, pattern: str) -> bool:
    """
    Match a relative path against a glob pattern.

    ``*`` may cross directory separators, and a leading ``**/`` also
    matches files at the top level.

    Examples
    --------
    >>> matches_glob("main.py", "**/*.py")
    True
    >>> matches_glob("src/app.py", "*.py")
    True
    """
    if fnmatch.fnmatchcase(relative, pattern):
        return True
    return pattern.startswith("**/") and fnmatch.fnmatchcase(relative, pattern[3:])


class GlobTool(Tool):
    """
    Tool for finding files by glob pattern.

    Results are listed relative to the working directory, newest first.
    """

    name: str = "glob_files"
    description: str = (
        "Find files matching a glob pattern. Results are sorted by "
        "modification time, newest first."
    )
    kind: ToolKind = ToolKind.READ
    schema: type[GlobParams] = GlobParams
    primary_param: str = "pat"

    async def execute(self, invocation: ToolInvocation) -> ToolResult:
        params = GlobParams(**invocation.params)
        base: Path = self.resolve(invocation, params.path)

        matches: list[Path] = await asyncio.to_thread(
            self._find,
            base,
            params.pat,
            invocation.cwd,
        )

        if not matches:
            return ToolResult.success_result(NO_MATCHES, metadata={"matches": 0})

        return ToolResult.success_result(
            "\n".join(display_path(p, invocation.cwd) for p in matches),
            metadata={
                "path": str(base),
                "matches": len(matches),
            },
        )

    def _find(self, base: Path, pattern: str, root: Path) -> list[Path]:
        found: list[tuple[float, Path]] = []

        for file_path in walk_files(base, root):
            relative: str = file_path.relative_to(base).as_posix()
            if not matches_glob(relative, pattern):
                continue
            try:
                mtime: float = file_path.stat().st_mtime
            except OSError as e:
                logger.debug(f"Skipping {file_path}: {e}")
                continue
            found.append((mtime, file_path))

        found.sort(key=lambda item: item[0], reverse=True)
        return [path for _, path in found]
