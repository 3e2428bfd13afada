"""Shared fixtures for picocode tests."""

from pathlib import Path
from typing import Any

import pytest

from picocode.config.schema import Configuration
from picocode.llm.models import Completion
from picocode.safety.models import Confirmation, ConfirmationRequest
from picocode.types import MessageDict


class ScriptedModel:
    """Completion model that replays canned completions and records requests."""

    def __init__(self, completions: list[Completion] | None = None) -> None:
        self.completions: list[Completion] = list(completions or [])
        self.requests: list[list[MessageDict]] = []
        self.tools: list[Any] = []
        self.closed: bool = False

    async def complete(
        self,
        messages: list[MessageDict],
        tools: list[dict[str, Any]] | None = None,
    ) -> Completion:
        self.requests.append([dict(message) for message in messages])
        self.tools.append(tools)
        if not self.completions:
            raise AssertionError("ScriptedModel ran out of completions")
        return self.completions.pop(0)

    async def close(self) -> None:
        self.closed = True

    @property
    def call_count(self) -> int:
        return len(self.requests)


class RecordingOutput:
    """Output sink that records every call and answers prompts from a script."""

    def __init__(
        self,
        lines: list[str] | None = None,
        answers: list[Confirmation] | None = None,
    ) -> None:
        self.lines: list[str] = list(lines or [])
        self.answers: list[Confirmation] = list(answers or [])
        self.events: list[tuple[str, Any]] = []
        self.requests: list[ConfirmationRequest] = []

    def _record(self, name: str, value: Any = None) -> None:
        self.events.append((name, value))

    def of(self, name: str) -> list[Any]:
        return [value for event, value in self.events if event == name]

    def display_header(self, **kwargs: Any) -> None:
        self._record("header", kwargs)

    def display_text(self, text: str) -> None:
        self._record("text", text)

    def display_tool_call(self, name: str, args: dict[str, Any]) -> None:
        self._record("tool_call", (name, args))

    def display_tool_result(self, result: str) -> None:
        self._record("tool_result", result)

    def display_error(self, error: str) -> None:
        self._record("error", error)

    def display_system(self, text: str) -> None:
        self._record("system", text)

    def display_help(self, text: str) -> None:
        self._record("help", text)

    def display_separator(self) -> None:
        self._record("separator")

    def display_thinking(self, message: str) -> None:
        self._record("thinking", message)

    def stop_thinking(self) -> None:
        self._record("stop_thinking")

    def get_user_input(self) -> str | None:
        if not self.lines:
            return None
        return self.lines.pop(0)

    def confirm(self, request: ConfirmationRequest) -> Confirmation:
        self.requests.append(request)
        if not self.answers:
            return Confirmation.NO
        return self.answers.pop(0)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    root = tmp_path / "work"
    root.mkdir()
    return root


@pytest.fixture
def config(workspace: Path) -> Configuration:
    return Configuration(cwd=workspace)


@pytest.fixture
def scripted_model():
    def factory(*completions: Completion) -> ScriptedModel:
        return ScriptedModel(list(completions))

    return factory


@pytest.fixture
def recording_output():
    def factory(
        lines: list[str] | None = None,
        answers: list[Confirmation] | None = None,
    ) -> RecordingOutput:
        return RecordingOutput(lines, answers)

    return factory
