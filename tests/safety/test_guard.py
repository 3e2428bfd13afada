"""Tests for picocode/safety/guard.py - confirmation guard."""

import asyncio
from pathlib import Path
from typing import Any

import pytest
from pydantic import BaseModel

from picocode.config.schema import Configuration, ToolSettings
from picocode.safety.guard import AutoApproveRules, GuardedTool, guard_tool, make_preview
from picocode.safety.models import Confirmation, ConfirmationRequest, parse_confirmation
from picocode.tools.base import Tool
from picocode.tools.models import ToolErrorKind, ToolInvocation, ToolKind, ToolResult


class CommandParams(BaseModel):
    cmd: str


class CountingTool(Tool):
    """Guardable tool that counts how often it actually ran."""

    name = "bash"
    description = "Run a command"
    kind = ToolKind.SHELL
    schema = CommandParams
    primary_param = "cmd"
    requires_confirmation = True

    def __init__(self, config: Configuration) -> None:
        super().__init__(config)
        self.runs: list[str] = []

    async def execute(self, invocation: ToolInvocation) -> ToolResult:
        self.runs.append(invocation.params["cmd"])
        return ToolResult.success_result("ran")


class ScriptedConfirm:
    """Confirmation callback answering from a list and recording requests."""

    def __init__(self, *answers: Confirmation) -> None:
        self.answers: list[Confirmation] = list(answers)
        self.requests: list[ConfirmationRequest] = []

    def __call__(self, request: ConfirmationRequest) -> Confirmation:
        self.requests.append(request)
        return self.answers.pop(0) if self.answers else Confirmation.NO


def invocation(workspace: Path, cmd: str) -> ToolInvocation:
    return ToolInvocation(params={"cmd": cmd}, cwd=workspace)


class TestParseConfirmation:
    """Tests for parse_confirmation."""

    @pytest.mark.parametrize("answer", ["y", "yes", " YES ", "Y"])
    def test_yes(self, answer: str):
        assert parse_confirmation(answer) == Confirmation.YES

    @pytest.mark.parametrize("answer", ["s", "session", "Session"])
    def test_session(self, answer: str):
        assert parse_confirmation(answer) == Confirmation.ALWAYS

    @pytest.mark.parametrize("answer", ["", "n", "no", "maybe", "yess"])
    def test_anything_else_is_no(self, answer: str):
        assert parse_confirmation(answer) == Confirmation.NO


class TestMakePreview:
    """Tests for make_preview."""

    def test_short_text_unchanged(self):
        assert make_preview("ls -la") == "ls -la"

    def test_newlines_flattened(self):
        assert make_preview("echo a\necho b") == "echo a echo b"

    def test_long_text_truncated(self):
        preview = make_preview("x" * 80)
        assert preview == "x" * 50 + "..."


class TestAutoApproveRules:
    """Tests for AutoApproveRules."""

    def test_search_semantics(self):
        """Test that patterns match anywhere unless anchored."""
        rules = AutoApproveRules(["status"])
        assert rules.matches("git status --short")

    def test_anchored_pattern(self):
        rules = AutoApproveRules(["^ls( |$)"])
        assert rules.matches("ls")
        assert rules.matches("ls -la")
        assert not rules.matches("lsof")
        assert not rules.matches("echo; ls")

    def test_invalid_pattern_skipped(self, caplog):
        """Test that a bad pattern is logged and the valid ones still work."""
        rules = AutoApproveRules(["([unclosed", "^git status"], "bash")
        assert len(rules) == 1
        assert rules.matches("git status")
        assert "Ignoring invalid auto_allow pattern" in caplog.text

    def test_empty_rules_match_nothing(self):
        rules = AutoApproveRules()
        assert not rules
        assert not rules.matches("anything")


class TestGuardedTool:
    """Tests for GuardedTool approval flow."""

    @pytest.mark.asyncio
    async def test_yes_runs_once_and_asks_again(self, config: Configuration, workspace: Path):
        tool = CountingTool(config)
        confirm = ScriptedConfirm(Confirmation.YES, Confirmation.YES)
        guarded = GuardedTool(tool, confirm)

        await guarded.execute(invocation(workspace, "make"))
        await guarded.execute(invocation(workspace, "make test"))

        assert tool.runs == ["make", "make test"]
        assert len(confirm.requests) == 2
        assert not guarded.always_approved

    @pytest.mark.asyncio
    async def test_prompt_text_and_preview(self, config: Configuration, workspace: Path):
        confirm = ScriptedConfirm(Confirmation.YES)
        guarded = GuardedTool(CountingTool(config), confirm)

        await guarded.execute(invocation(workspace, "rm -rf build\nls"))

        request = confirm.requests[0]
        assert request.message == "Confirm tool BASH call?"
        assert request.tool_name == "bash"
        assert request.preview == "rm -rf build ls"

    @pytest.mark.asyncio
    async def test_no_returns_cancellation(self, config: Configuration, workspace: Path):
        """Test that a refusal is a failed result, not an exception."""
        tool = CountingTool(config)
        guarded = GuardedTool(tool, ScriptedConfirm(Confirmation.NO))

        result = await guarded.execute(invocation(workspace, "rm -rf /"))

        assert not result.success
        assert result.error == "Action cancelled by user"
        assert result.error_kind == ToolErrorKind.CANCELLED
        assert tool.runs == []

    @pytest.mark.asyncio
    async def test_always_stops_prompting(self, config: Configuration, workspace: Path):
        tool = CountingTool(config)
        confirm = ScriptedConfirm(Confirmation.ALWAYS)
        guarded = GuardedTool(tool, confirm)

        for cmd in ["a", "b", "c"]:
            result = await guarded.execute(invocation(workspace, cmd))
            assert result.success

        assert tool.runs == ["a", "b", "c"]
        assert len(confirm.requests) == 1
        assert guarded.always_approved

    @pytest.mark.asyncio
    async def test_always_is_per_guard(self, config: Configuration, workspace: Path):
        """Test that a session approval does not leak into another guard."""
        confirm = ScriptedConfirm(Confirmation.ALWAYS, Confirmation.NO)
        first = GuardedTool(CountingTool(config), confirm)
        second = GuardedTool(CountingTool(config), confirm)

        await first.execute(invocation(workspace, "a"))
        result = await second.execute(invocation(workspace, "b"))

        assert result.error_kind == ToolErrorKind.CANCELLED
        assert len(confirm.requests) == 2

    @pytest.mark.asyncio
    async def test_yolo_never_prompts(self, config: Configuration, workspace: Path):
        tool = CountingTool(config)
        confirm = ScriptedConfirm()
        guarded = GuardedTool(tool, confirm, yolo=True)

        await guarded.execute(invocation(workspace, "rm -rf build"))

        assert tool.runs == ["rm -rf build"]
        assert confirm.requests == []

    @pytest.mark.asyncio
    async def test_auto_approve_skips_prompt(self, config: Configuration, workspace: Path):
        tool = CountingTool(config)
        confirm = ScriptedConfirm(Confirmation.NO)
        guarded = GuardedTool(tool, confirm, auto_approve=["^git status"])

        approved = await guarded.execute(invocation(workspace, "git status"))
        refused = await guarded.execute(invocation(workspace, "git push"))

        assert approved.success
        assert refused.error_kind == ToolErrorKind.CANCELLED
        assert tool.runs == ["git status"]
        assert len(confirm.requests) == 1

    @pytest.mark.asyncio
    async def test_auto_approve_does_not_set_always(self, config: Configuration, workspace: Path):
        guarded = GuardedTool(CountingTool(config), ScriptedConfirm(), auto_approve=["^ls"])
        await guarded.execute(invocation(workspace, "ls"))
        assert not guarded.always_approved

    @pytest.mark.asyncio
    async def test_async_confirm_callback(self, config: Configuration, workspace: Path):
        async def confirm(request: ConfirmationRequest) -> Confirmation:
            return Confirmation.YES

        tool = CountingTool(config)
        result = await GuardedTool(tool, confirm).execute(invocation(workspace, "ls"))

        assert result.success
        assert tool.runs == ["ls"]

    @pytest.mark.asyncio
    async def test_concurrent_calls_prompt_once_after_always(
        self,
        config: Configuration,
        workspace: Path,
    ):
        """Test that calls waiting on the prompt lock see a session approval."""
        prompts: list[str] = []

        async def confirm(request: ConfirmationRequest) -> Confirmation:
            prompts.append(request.preview)
            await asyncio.sleep(0.01)
            return Confirmation.ALWAYS

        tool = CountingTool(config)
        guarded = GuardedTool(tool, confirm)

        results = await asyncio.gather(
            *(guarded.execute(invocation(workspace, f"cmd {i}")) for i in range(5)),
        )

        assert all(result.success for result in results)
        assert len(prompts) == 1
        assert sorted(tool.runs) == [f"cmd {i}" for i in range(5)]

    @pytest.mark.asyncio
    async def test_prompts_never_overlap(self, config: Configuration, workspace: Path):
        """Test that the shared lock serializes prompts across guards."""
        active: list[int] = [0]
        overlap: list[bool] = []

        async def confirm(request: ConfirmationRequest) -> Confirmation:
            active[0] += 1
            overlap.append(active[0] > 1)
            await asyncio.sleep(0.01)
            active[0] -= 1
            return Confirmation.YES

        lock = asyncio.Lock()
        guards = [
            GuardedTool(CountingTool(config), confirm, prompt_lock=lock)
            for _ in range(3)
        ]

        await asyncio.gather(
            *(guard.execute(invocation(workspace, "x")) for guard in guards),
        )

        assert overlap == [False, False, False]

    def test_delegates_surface(self, config: Configuration):
        tool = CountingTool(config)
        guarded = GuardedTool(tool, ScriptedConfirm())

        assert guarded.name == "bash"
        assert guarded.kind == ToolKind.SHELL
        assert guarded.to_openai_schema() == tool.to_openai_schema()
        assert guarded.validate_params({}) != []


class TestGuardTool:
    """Tests for guard_tool."""

    @pytest.mark.asyncio
    async def test_uses_config_policy(self, workspace: Path):
        config = Configuration(
            cwd=workspace,
            tool_config={"bash": ToolSettings(auto_allow=["^ls"])},
        )
        guarded = guard_tool(CountingTool(config), config, ScriptedConfirm(), asyncio.Lock())

        assert not guarded.yolo
        assert guarded.auto_approve.matches("ls -la")

    def test_yolo_from_config(self, workspace: Path):
        config = Configuration(cwd=workspace, yolo=True)
        guarded = guard_tool(CountingTool(config), config, ScriptedConfirm(), asyncio.Lock())
        assert guarded.yolo

    def test_describe_call_falls_back_to_json(self, config: Configuration):
        guarded = GuardedTool(CountingTool(config), ScriptedConfirm())
        params: dict[str, Any] = {"other": 1}
        assert guarded.describe_call(params) == '{"other": 1}'
