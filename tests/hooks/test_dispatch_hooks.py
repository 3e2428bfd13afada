"""Tests for picocode/hooks - dispatch hooks and audit commands."""

import asyncio
import json
import os
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from picocode.config.schema import Configuration, HookConfig, HookTrigger
from picocode.exceptions import ValidationError
from picocode.hooks.dispatch import (
    CompositeHook,
    DisplayHook,
    NullHook,
    ToolDispatchHook,
    safe_dispatch,
)
from picocode.hooks.executor import execute_hook
from picocode.hooks.system import CommandHook, build_hook_environment
from picocode.tools.models import ToolResult

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX shell")


class TestSafeDispatch:
    """Tests for safe_dispatch."""

    @pytest.mark.asyncio
    async def test_exception_logged_not_raised(self, caplog):
        async def failing() -> None:
            raise RuntimeError("kaput")

        await safe_dispatch(failing, hook_name="audit")

        assert "Hook 'audit' failed: kaput" in caplog.text

    @pytest.mark.asyncio
    async def test_sync_exception_logged_not_raised(self, caplog):
        def failing(name: str) -> None:
            raise RuntimeError(f"sync {name}")

        await safe_dispatch(failing, "bash", hook_name="audit")

        assert "Hook 'audit' failed: sync bash" in caplog.text

    @pytest.mark.asyncio
    async def test_sync_callback_called(self):
        callback = MagicMock(return_value=None)
        await safe_dispatch(callback, "bash", {"cmd": "ls"}, hook_name="audit")
        callback.assert_called_once_with("bash", {"cmd": "ls"})

    @pytest.mark.asyncio
    async def test_success_is_silent(self, caplog):
        await safe_dispatch(NullHook().on_tool_call, "x", {}, hook_name="null")
        assert caplog.text == ""


class TestDisplayHook:
    """Tests for DisplayHook."""

    @pytest.mark.asyncio
    async def test_forwards_to_output(self):
        output = MagicMock()
        hook = DisplayHook(output)

        await hook.on_tool_call("read_file", {"path": "a.py"})
        await hook.on_tool_result("read_file", ToolResult.error_result("nope"))

        output.display_tool_call.assert_called_once_with("read_file", {"path": "a.py"})
        output.display_tool_result.assert_called_once_with("Error: nope")

    def test_satisfies_protocol(self):
        assert isinstance(DisplayHook(MagicMock()), ToolDispatchHook)
        assert isinstance(NullHook(), ToolDispatchHook)


class TestCompositeHook:
    """Tests for CompositeHook."""

    @pytest.mark.asyncio
    async def test_failure_isolated(self):
        """Test that a failing hook does not stop the next one."""
        failing = AsyncMock()
        failing.on_tool_call.side_effect = RuntimeError("first")
        recording = AsyncMock()

        await CompositeHook([failing, recording]).on_tool_call("bash", {"cmd": "ls"})

        recording.on_tool_call.assert_awaited_once_with("bash", {"cmd": "ls"})

    @pytest.mark.asyncio
    async def test_sync_failure_isolated(self):
        """Test that a plain-method hook raising does not skip the others."""
        failing = MagicMock()
        failing.on_tool_call.side_effect = RuntimeError("first")
        recording = AsyncMock()

        await CompositeHook([failing, recording]).on_tool_call("bash", {"cmd": "ls"})

        recording.on_tool_call.assert_awaited_once_with("bash", {"cmd": "ls"})

    @pytest.mark.asyncio
    async def test_results_fan_out(self):
        hooks = [AsyncMock(), AsyncMock()]
        result = ToolResult.success_result("ok")

        await CompositeHook(hooks).on_tool_result("bash", result)

        for hook in hooks:
            hook.on_tool_result.assert_awaited_once_with("bash", result)


class TestBuildHookEnvironment:
    """Tests for build_hook_environment."""

    def test_before_tool(self, config: Configuration):
        env = build_hook_environment(
            config,
            HookTrigger.BEFORE_TOOL,
            "bash",
            tool_params={"cmd": "ls"},
        )
        assert env["PICOCODE_TRIGGER"] == "before_tool"
        assert env["PICOCODE_TOOL_NAME"] == "bash"
        assert env["PICOCODE_CWD"] == str(config.cwd)
        assert json.loads(env["PICOCODE_TOOL_PARAMS"]) == {"cmd": "ls"}
        assert "PICOCODE_TOOL_RESULT" not in env

    def test_after_tool(self, config: Configuration):
        env = build_hook_environment(
            config,
            HookTrigger.AFTER_TOOL,
            "bash",
            tool_result=ToolResult.error_result("denied"),
        )
        assert env["PICOCODE_TOOL_RESULT"] == "Error: denied"
        assert env["PICOCODE_TOOL_SUCCESS"] == "0"


class TestHookConfig:
    """Tests for HookConfig validation."""

    def test_requires_command_or_script(self):
        with pytest.raises(ValidationError):
            HookConfig(name="empty", trigger=HookTrigger.AFTER_TOOL)

    def test_rejects_both(self):
        with pytest.raises(ValidationError):
            HookConfig(
                name="both",
                trigger=HookTrigger.AFTER_TOOL,
                command="true",
                script="true",
            )


@posix_only
class TestCommandHook:
    """Tests for CommandHook and execute_hook."""

    @pytest.mark.asyncio
    async def test_disabled_by_default(self, workspace: Path):
        config = Configuration(
            cwd=workspace,
            hooks=[HookConfig(name="a", trigger=HookTrigger.AFTER_TOOL, command="true")],
        )
        assert CommandHook(config).hooks == []

    @pytest.mark.asyncio
    async def test_runs_matching_trigger(self, workspace: Path):
        log = workspace / "audit.log"
        config = Configuration(
            cwd=workspace,
            hooks_enabled=True,
            hooks=[
                HookConfig(
                    name="before",
                    trigger=HookTrigger.BEFORE_TOOL,
                    command=f'echo "before $PICOCODE_TOOL_NAME" >> {log}',
                ),
                HookConfig(
                    name="after",
                    trigger=HookTrigger.AFTER_TOOL,
                    script=f'echo "after $PICOCODE_TOOL_SUCCESS" >> {log}',
                ),
                HookConfig(
                    name="off",
                    trigger=HookTrigger.BEFORE_TOOL,
                    command=f"echo off >> {log}",
                    enabled=False,
                ),
            ],
        )
        hook = CommandHook(config)

        await hook.on_tool_call("bash", {"cmd": "ls"})
        await hook.on_tool_result("bash", ToolResult.success_result("ok"))

        assert log.read_text().splitlines() == ["before bash", "after 1"]

    @pytest.mark.asyncio
    async def test_timeout_raises(self, workspace: Path):
        hook = HookConfig(
            name="slow",
            trigger=HookTrigger.AFTER_TOOL,
            command="sleep 5",
            timeout_sec=0.1,
        )
        with pytest.raises(asyncio.TimeoutError):
            await execute_hook(hook, dict(os.environ), workspace)

    @pytest.mark.asyncio
    async def test_failing_hook_is_logged(self, workspace: Path, caplog):
        config = Configuration(
            cwd=workspace,
            hooks_enabled=True,
            hooks=[
                HookConfig(
                    name="slow",
                    trigger=HookTrigger.BEFORE_TOOL,
                    command="sleep 5",
                    timeout_sec=0.1,
                ),
            ],
        )

        await CommandHook(config).on_tool_call("bash", {"cmd": "ls"})

        assert "Hook 'slow' failed" in caplog.text

    @pytest.mark.asyncio
    async def test_exit_code_returned(self, workspace: Path):
        hook = HookConfig(name="fail", trigger=HookTrigger.AFTER_TOOL, command="exit 4")
        assert await execute_hook(hook, dict(os.environ), workspace) == 4
