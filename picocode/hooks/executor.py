"""
Audit command execution.

This module runs a configured hook command or inline script with a timeout.
"""

import asyncio
import logging
import os
import signal
import sys
import tempfile
from pathlib import Path

from picocode.config.schema import HookConfig

logger = logging.getLogger(__name__)


async def execute_hook(
    hook: HookConfig,
    env: dict[str, str],
    cwd: Path,
) -> int | None:
    """
    Execute a hook command or script.

    Parameters
    ----------
    hook : HookConfig
        Hook configuration.
    env : dict[str, str]
        Environment variables for execution.
    cwd : Path
        Working directory for execution.

    Returns
    -------
    int | None
        Exit code of the command.

    Raises
    ------
    asyncio.TimeoutError
        If the command runs longer than ``hook.timeout_sec``. The process
        group is killed first.
    OSError
        If the command cannot be started.
    """
    if hook.command:
        return await _run_command(hook.command, hook.timeout_sec, env, cwd)

    script_path: Path = _create_script_file(hook.script or "")
    try:
        return await _run_command(str(script_path), hook.timeout_sec, env, cwd)
    finally:
        script_path.unlink(missing_ok=True)


def _create_script_file(script_content: str) -> Path:
    with tempfile.NamedTemporaryFile(
        mode="w",
        suffix=".sh",
        delete=False,
    ) as f:
        f.write("#!/bin/bash\n")
        f.write(script_content)
        script_path = Path(f.name)

    os.chmod(script_path, 0o755)
    return script_path


async def _run_command(
    command: str,
    timeout: float,
    env: dict[str, str],
    cwd: Path,
) -> int | None:
    process = await asyncio.create_subprocess_shell(
        command,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=cwd,
        env=env,
        start_new_session=True,
    )

    try:
        _, stderr_data = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        if sys.platform != "win32":
            os.killpg(os.getpgid(process.pid), signal.SIGKILL)
        else:
            process.kill()
        await process.wait()
        raise

    if process.returncode:
        logger.debug(
            f"Hook command exited with {process.returncode}: "
            f"{stderr_data.decode('utf-8', errors='replace').strip()}",
        )
    return process.returncode
