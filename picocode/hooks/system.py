"""
Configured audit commands as a tool dispatch hook.
"""

import json
import logging
import os
from typing import Any

from picocode.config.schema import Configuration, HookConfig, HookTrigger
from picocode.constants import HOOK_ENV_PREFIX
from picocode.hooks.executor import execute_hook
from picocode.tools.models import ToolResult

logger = logging.getLogger(__name__)


def build_hook_environment(
    config: Configuration,
    trigger: HookTrigger,
    tool_name: str,
    tool_params: dict[str, Any] | None = None,
    tool_result: ToolResult | None = None,
) -> dict[str, str]:
    """
    Build environment variables for a hook command.

    Parameters
    ----------
    config : Configuration
        Configuration object.
    trigger : HookTrigger
        Trigger that caused the hook.
    tool_name : str
        Name of the tool.
    tool_params : dict[str, Any] | None, optional
        Call arguments, for ``before_tool``.
    tool_result : ToolResult | None, optional
        Call result, for ``after_tool``.

    Returns
    -------
    dict[str, str]
        The process environment plus ``PICOCODE_TRIGGER``, ``PICOCODE_CWD``,
        ``PICOCODE_TOOL_NAME`` and, when given, ``PICOCODE_TOOL_PARAMS`` (JSON),
        ``PICOCODE_TOOL_RESULT`` and ``PICOCODE_TOOL_SUCCESS``.

    Examples
    --------
    >>> env = build_hook_environment(
    ...     config,
    ...     HookTrigger.BEFORE_TOOL,
    ...     "bash",
    ...     tool_params={"cmd": "ls"},
    ... )
    >>> env["PICOCODE_TOOL_NAME"]
    'bash'
    """
    env: dict[str, str] = os.environ.copy()
    env[f"{HOOK_ENV_PREFIX}TRIGGER"] = trigger.value
    env[f"{HOOK_ENV_PREFIX}CWD"] = str(config.cwd)
    env[f"{HOOK_ENV_PREFIX}TOOL_NAME"] = tool_name

    if tool_params is not None:
        env[f"{HOOK_ENV_PREFIX}TOOL_PARAMS"] = json.dumps(tool_params)

    if tool_result is not None:
        env[f"{HOOK_ENV_PREFIX}TOOL_RESULT"] = tool_result.to_model_output()
        env[f"{HOOK_ENV_PREFIX}TOOL_SUCCESS"] = "1" if tool_result.success else "0"

    return env


class CommandHook:
    """
    Runs the configured ``before_tool`` and ``after_tool`` commands.

    Commands run one after another in the sandbox root. A command that fails
    or times out is logged and the next one still runs.

    Parameters
    ----------
    config : Configuration
        Configuration with ``hooks_enabled`` and ``hooks``.

    Attributes
    ----------
    hooks : list[HookConfig]
        Enabled hooks. Empty when ``hooks_enabled`` is false.

    Examples
    --------
    >>> hook = CommandHook(config)
    >>> await hook.on_tool_call("bash", {"cmd": "make test"})
    """

    def __init__(self, config: Configuration) -> None:
        self.config: Configuration = config
        self.hooks: list[HookConfig] = []
        if self.config.hooks_enabled:
            self.hooks = [hook for hook in self.config.hooks if hook.enabled]
            logger.debug(f"Initialized command hooks with {len(self.hooks)} hooks")

    async def on_tool_call(self, name: str, args: dict[str, Any]) -> None:
        env = build_hook_environment(
            self.config,
            HookTrigger.BEFORE_TOOL,
            name,
            tool_params=args,
        )
        await self._run(HookTrigger.BEFORE_TOOL, env)

    async def on_tool_result(self, name: str, result: ToolResult) -> None:
        env = build_hook_environment(
            self.config,
            HookTrigger.AFTER_TOOL,
            name,
            tool_result=result,
        )
        await self._run(HookTrigger.AFTER_TOOL, env)

    async def _run(self, trigger: HookTrigger, env: dict[str, str]) -> None:
        for hook in self.hooks:
            if hook.trigger != trigger:
                continue
            try:
                await execute_hook(hook, env, self.config.cwd)
            except Exception as e:
                logger.warning(f"Hook '{hook.name}' failed: {e}", exc_info=True)
