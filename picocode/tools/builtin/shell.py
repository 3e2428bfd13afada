"""
Shell command execution tool.

Commands run in the sandbox root with stderr merged into stdout. The exit
status is reported in the result metadata but does not fail the call.
"""

import asyncio
import fnmatch
import logging
import os
import sys
from pathlib import Path

from pydantic import BaseModel, Field

from picocode.config.schema import ShellEnvironmentPolicy
from picocode.constants import DEFAULT_ENCODING, EMPTY_OUTPUT
from picocode.tools.base import Tool
from picocode.tools.models import ToolInvocation, ToolKind, ToolResult

logger = logging.getLogger(__name__)


class BashParams(BaseModel):
    cmd: str = Field(..., description="The shell command to execute")


def build_shell_environment(policy: ShellEnvironmentPolicy) -> dict[str, str]:
    """
    Build environment variables for command execution.

    Filters out sensitive environment variables and adds any explicitly set
    variables.

    Parameters
    ----------
    policy : ShellEnvironmentPolicy
        Exclusion patterns and extra variables.

    Returns
    -------
    dict[str, str]
        Environment variables dictionary.

    Examples
    --------
    >>> env = build_shell_environment(ShellEnvironmentPolicy())
    >>> "OPENAI_API_KEY" in env
    False
    """
    env: dict[str, str] = os.environ.copy()

    if not policy.ignore_default_excludes:
        for pattern in policy.exclude_patterns:
            keys_to_remove: list[str] = [
                k for k in env.keys() if fnmatch.fnmatch(k.upper(), pattern.upper())
            ]

            for k in keys_to_remove:
                del env[k]

    if policy.set_vars:
        env.update(policy.set_vars)

    return env


async def run_shell_command(
    command: str,
    cwd: Path,
    env: dict[str, str],
) -> tuple[str, int | None]:
    """
    Run a command through the shell and capture its combined output.

    Parameters
    ----------
    command : str
        Command text.
    cwd : Path
        Working directory.
    env : dict[str, str]
        Environment for the child process.

    Returns
    -------
    tuple[str, int | None]
        Trimmed stdout and stderr (``(empty)`` if there was none), and the
        exit code.
    """
    if sys.platform == "win32":
        shell_cmd: list[str] = ["cmd.exe", "/c", command]
    else:
        shell_cmd = ["/bin/bash", "-c", command]

    process = await asyncio.create_subprocess_exec(
        *shell_cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT,
        cwd=cwd,
        env=env,
    )
    stdout_data, _ = await process.communicate()

    output: str = stdout_data.decode(DEFAULT_ENCODING, errors="replace").strip()
    return output or EMPTY_OUTPUT, process.returncode


class BashTool(Tool):
    """
    Tool for executing shell commands.

    The command text is what auto-approval patterns are matched against.
    """

    name: str = "bash"
    description: str = (
        "Run a shell command in the working directory. Returns stdout and "
        "stderr combined."
    )
    kind: ToolKind = ToolKind.SHELL
    schema: type[BashParams] = BashParams
    primary_param: str = "cmd"
    requires_confirmation: bool = True

    async def execute(self, invocation: ToolInvocation) -> ToolResult:
        params = BashParams(**invocation.params)

        output, exit_code = await run_shell_command(
            params.cmd,
            invocation.cwd,
            build_shell_environment(self.config.shell_environment),
        )
        logger.debug(f"bash exited with {exit_code}: {params.cmd}")

        return ToolResult.success_result(output, exit_code=exit_code)
