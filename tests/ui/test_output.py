"""Tests for picocode/ui/output.py - output sinks and formatting helpers."""

import io
import logging
from pathlib import Path

import pytest
from rich.console import Console

from picocode.safety.models import Confirmation, ConfirmationRequest
from picocode.ui.output import (
    ConsoleOutput,
    LogOutput,
    NoOutput,
    QuietOutput,
    format_header,
    get_preview,
    truncate,
)
from picocode.ui.theme import PICOCODE_THEME

REQUEST = ConfirmationRequest(
    message="Confirm tool BASH call?",
    tool_name="bash",
    preview="rm -rf build",
)


@pytest.fixture
def console() -> Console:
    return Console(
        file=io.StringIO(),
        theme=PICOCODE_THEME,
        highlight=False,
        record=True,
        width=120,
    )


class TestHelpers:
    """Tests for truncate, get_preview and format_header."""

    def test_truncate(self):
        assert truncate("abcdef", 3) == "abc..."
        assert truncate("abc", 3) == "abc"

    def test_preview_first_value(self):
        assert get_preview({"path": "src/main.py", "content": "x"}) == "src/main.py"

    def test_preview_non_string(self):
        assert get_preview({"items": [1, 2]}) == "[1, 2]"

    def test_preview_single_line_and_short(self):
        preview = get_preview({"cmd": "echo a\necho b" + "x" * 80})
        assert "\n" not in preview
        assert len(preview) == 53

    def test_preview_empty(self):
        assert get_preview({}) == ""

    def test_header(self):
        header = format_header("openai", "gpt-4o-mini", True, False, 50, None, Path("/w"))
        assert header.plain == (
            "picocode | openai (gpt-4o-mini) | [x] bash | [ ] yolo | limit:50 | /w"
        )

    def test_header_with_persona(self):
        header = format_header("groq", "llama", False, True, 5, "zen", Path("/w"))
        assert " | zen | " in header.plain
        assert "[x] yolo" in header.plain


class TestConsoleOutput:
    """Tests for ConsoleOutput."""

    def test_tool_call_and_result(self, console: Console):
        output = ConsoleOutput(console)

        output.display_tool_call("read_file", {"path": "a.py"})
        output.display_tool_result("\n".join(f"line {i}" for i in range(6)))

        text = console.export_text()
        assert "Read_file(a.py)" in text
        assert "line 3" in text
        assert "line 4" not in text
        assert "... +2 lines" in text

    def test_error_result_shown_in_full(self, console: Console):
        output = ConsoleOutput(console)
        output.display_tool_result("Error: a\nb\nc\nd\ne\nf")
        assert "f" in console.export_text().splitlines()[-1]

    def test_empty_result(self, console: Console):
        ConsoleOutput(console).display_tool_result("")
        assert "(empty)" in console.export_text()

    def test_error_and_system(self, console: Console):
        output = ConsoleOutput(console)
        output.display_error("boom")
        output.display_system("Switched to plan mode.")

        text = console.export_text()
        assert "Error: boom" in text
        assert "Switched to plan mode." in text

    def test_input_eof_closes_session(self, console: Console, monkeypatch):
        def eof(prompt: str = "") -> str:
            raise EOFError

        monkeypatch.setattr(console, "input", eof)
        assert ConsoleOutput(console).get_user_input() is None

    @pytest.mark.parametrize(
        ("answer", "expected"),
        [
            ("y", Confirmation.YES),
            ("s", Confirmation.ALWAYS),
            ("", Confirmation.NO),
            ("nope", Confirmation.NO),
        ],
    )
    def test_confirm(self, console: Console, monkeypatch, answer: str, expected: Confirmation):
        monkeypatch.setattr(console, "input", lambda prompt="": answer)

        assert ConsoleOutput(console).confirm(REQUEST) == expected
        text = console.export_text()
        assert "Confirm tool BASH call? [y/n/s]" in text
        assert "rm -rf build" in text


class TestQuietOutput:
    """Tests for QuietOutput."""

    def test_only_errors_shown(self, console: Console):
        output = QuietOutput(console)

        output.display_text("answer")
        output.display_tool_call("bash", {"cmd": "ls"})
        output.display_error("bad")

        assert console.export_text().strip() == "Error: bad"

    def test_never_reads_lines(self, console: Console):
        assert QuietOutput(console).get_user_input() is None

    def test_confirm_reads_answer(self, console: Console, monkeypatch):
        monkeypatch.setattr(console, "input", lambda prompt="": "yes")
        assert QuietOutput(console).confirm(REQUEST) == Confirmation.YES


class TestHeadlessOutputs:
    """Tests for NoOutput and LogOutput."""

    def test_no_output_approves(self):
        assert NoOutput().confirm(REQUEST) == Confirmation.YES

    def test_log_output_refuses(self, caplog):
        caplog.set_level(logging.INFO, logger="picocode")
        assert LogOutput().confirm(REQUEST) == Confirmation.NO
        assert "Refusing confirmation: Confirm tool BASH call?" in caplog.text

    def test_log_output_routes_to_logger(self, caplog):
        log = logging.getLogger("picocode.test")
        caplog.set_level(logging.INFO, logger="picocode.test")
        output = LogOutput(log)

        output.display_tool_call("bash", {"cmd": "ls"})
        output.display_error("denied")

        assert "Tool call: bash with args: {'cmd': 'ls'}" in caplog.text
        assert "denied" in caplog.text
