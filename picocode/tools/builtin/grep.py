"""
Grep tool for searching file contents with a regular expression.
"""

import asyncio
import logging
import re
from pathlib import Path

from pydantic import BaseModel, Field

from picocode.constants import DEFAULT_ENCODING, GREP_MAX_MATCHES, NO_MATCHES
from picocode.safety.sandbox import display_path
from picocode.tools.base import Tool
from picocode.tools.models import ToolErrorKind, ToolInvocation, ToolKind, ToolResult
from picocode.utils.paths import walk_files

logger = logging.getLogger(__name__)


class GrepParams(BaseModel):
    """
    Parameters for the grep_text tool.

    Parameters
    ----------
    pat : str
        Regular expression to search for.
    path : str, default="."
        File or directory to search.
    """

    pat: str = Field(..., description="Regular expression to search for")
    path: str = Field(".", description="File or directory to search")


class GrepTool(Tool):
    """
    Tool for searching file contents.

    Output lines are ``path:line:text`` with paths relative to the working
    directory. At most ``GREP_MAX_MATCHES`` lines are returned. Files that
    are not valid UTF-8 are skipped.
    """

    name: str = "grep_text"
    description: str = (
        f"Search files for a regular expression. Returns up to "
        f"{GREP_MAX_MATCHES} matching lines as path:line:text."
    )
    kind: ToolKind = ToolKind.READ
    schema: type[GrepParams] = GrepParams
    primary_param: str = "pat"

    async def execute(self, invocation: ToolInvocation) -> ToolResult:
        params = GrepParams(**invocation.params)
        base: Path = self.resolve(invocation, params.path)

        try:
            pattern = re.compile(params.pat)
        except re.error as e:
            return ToolResult.error_result(
                f"Invalid regex pattern: {e}",
                error_kind=ToolErrorKind.INVALID_PARAMS,
            )

        lines: list[str] = await asyncio.to_thread(
            self._search,
            base,
            pattern,
            invocation.cwd,
        )

        if not lines:
            return ToolResult.success_result(NO_MATCHES, metadata={"matches": 0})

        # _search collects one match past the cap to detect truncation.
        shown: list[str] = lines[:GREP_MAX_MATCHES]
        return ToolResult.success_result(
            "\n".join(shown),
            metadata={
                "path": str(base),
                "matches": len(shown),
                "truncated": len(lines) > GREP_MAX_MATCHES,
            },
        )

    def _search(
        self,
        base: Path,
        pattern: re.Pattern[str],
        root: Path,
    ) -> list[str]:
        results: list[str] = []

        for file_path in walk_files(base, root):
            try:
                content: str = file_path.read_text(encoding=DEFAULT_ENCODING)
            except (OSError, UnicodeDecodeError) as e:
                logger.debug(f"Failed to read {file_path}: {e}")
                continue

            shown: str = display_path(file_path, root)
            for number, line in enumerate(content.splitlines(), start=1):
                if pattern.search(line):
                    results.append(f"{shown}:{number}:{line}")
                    if len(results) > GREP_MAX_MATCHES:
                        return results

        return results
