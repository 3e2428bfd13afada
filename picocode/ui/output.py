"""
Output sinks for the agent.

Every user-facing message goes through an :class:`Output`. Four sinks are
provided:

- :class:`ConsoleOutput` renders to the terminal with rich,
- :class:`QuietOutput` only shows errors, prompts and the spinner on stderr,
- :class:`NoOutput` discards everything and approves every confirmation,
- :class:`LogOutput` writes to the ``picocode`` logger and refuses every
  confirmation.
"""

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from rich.console import Console
from rich.markdown import Markdown
from rich.rule import Rule
from rich.status import Status
from rich.text import Text

from picocode.constants import CONFIRM_PREVIEW_LENGTH, EMPTY_OUTPUT
from picocode.safety.models import Confirmation, ConfirmationRequest, parse_confirmation
from picocode.ui.console import get_console, get_error_console

logger = logging.getLogger(__name__)

RESULT_PREVIEW_LINES: int = 4
RESULT_LINE_WIDTH: int = 100


class Output(Protocol):
    """Protocol for everything the agent shows to, or asks of, the operator."""

    def display_header(
        self,
        provider: str,
        model: str,
        bash: bool,
        yolo: bool,
        limit: int,
        persona: str | None,
        cwd: Path,
    ) -> None: ...

    def display_text(self, text: str) -> None: ...

    def display_tool_call(self, name: str, args: dict[str, Any]) -> None: ...

    def display_tool_result(self, result: str) -> None: ...

    def display_error(self, error: str) -> None: ...

    def display_system(self, text: str) -> None: ...

    def display_help(self, text: str) -> None: ...

    def display_separator(self) -> None: ...

    def display_thinking(self, message: str) -> None: ...

    def stop_thinking(self) -> None: ...

    def get_user_input(self) -> str | None:
        """Read one line. None means the operator closed the input."""
        ...

    def confirm(self, request: ConfirmationRequest) -> Confirmation: ...


def truncate(text: str, max_len: int) -> str:
    if len(text) > max_len:
        return f"{text[:max_len]}..."
    return text


def get_preview(args: dict[str, Any]) -> str:
    """
    Summarize tool arguments as their first value on one line.

    Examples
    --------
    >>> get_preview({"path": "src/main.py", "content": "..."})
    'src/main.py'
    """
    if args:
        first: Any = next(iter(args.values()))
        text: str = first if isinstance(first, str) else json.dumps(first)
    else:
        text = ""
    return truncate(text.replace("\n", " "), CONFIRM_PREVIEW_LENGTH)


def format_header(
    provider: str,
    model: str,
    bash: bool,
    yolo: bool,
    limit: int,
    persona: str | None,
    cwd: Path,
) -> Text:
    """
    Build the session header line.

    Examples
    --------
    >>> format_header("openai", "gpt-4o-mini", True, False, 50, None, Path("/w")).plain
    'picocode | openai (gpt-4o-mini) | [x] bash | [ ] yolo | limit:50 | /w'
    """

    def status(active: bool, label: str, style: str) -> tuple[str, str]:
        return (f"[{'x' if active else ' '}] {label}", style if active else "dim")

    header = Text.assemble(
        ("picocode", "bold"),
        " | ",
        (provider, "header.provider"),
        " (",
        (model, "header.model"),
        ")",
    )
    if persona:
        header.append(" | ")
        header.append(persona, style="header.persona")

    header.append(" | ")
    header.append_text(Text.assemble(status(bash, "bash", "header.bash")))
    header.append(" | ")
    header.append_text(Text.assemble(status(yolo, "yolo", "header.yolo")))
    header.append(" | ")
    header.append(f"limit:{limit}", style="header.limit")
    header.append(" | ")
    header.append(str(cwd), style="dim")
    return header


class ConsoleOutput:
    """
    Terminal output rendered with rich.

    Parameters
    ----------
    console : Console | None, optional
        Console to draw on. Defaults to the shared stdout console.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console: Console = console or get_console()
        self._status: Status | None = None

    def display_header(
        self,
        provider: str,
        model: str,
        bash: bool,
        yolo: bool,
        limit: int,
        persona: str | None,
        cwd: Path,
    ) -> None:
        self.console.print(format_header(provider, model, bash, yolo, limit, persona, cwd))

    def display_text(self, text: str) -> None:
        self.stop_thinking()
        self.console.print()
        self.console.print(Text("⏺", style="assistant"))
        self.console.print(Markdown(text))

    def display_tool_call(self, name: str, args: dict[str, Any]) -> None:
        self.stop_thinking()
        self.console.print()
        self.console.print(
            Text.assemble(
                ("⏺ ", "tool"),
                (name[:1].upper() + name[1:], "tool.name"),
                "(",
                (get_preview(args), "dim"),
                ")",
            ),
        )

    def display_tool_result(self, result: str) -> None:
        """
        Show up to four lines of a tool result.

        Failed results (``Error: ...``) are shown in full.
        """
        self.stop_thinking()

        lines: list[str] = result.splitlines()
        if not lines:
            self.console.print(Text.assemble(("  └  ", "dim"), (EMPTY_OUTPUT, "dim")))
            return

        is_error: bool = result.startswith("Error:")
        show_max: int = len(lines) if is_error else RESULT_PREVIEW_LINES

        for i, line in enumerate(lines[:show_max]):
            last: bool = i == len(lines) - 1 and len(lines) <= show_max
            symbol: str = "└" if last else "│"
            if is_error:
                body = Text(line, style="tool.error")
            else:
                body = Text(truncate(line, RESULT_LINE_WIDTH), style="dim")
            self.console.print(Text.assemble((f"  {symbol}  ", "dim"), body))

        if len(lines) > show_max:
            self.console.print(
                Text(f"  └  ... +{len(lines) - show_max} lines", style="dim"),
            )

    def display_error(self, error: str) -> None:
        self.stop_thinking()
        self.console.print(Text.assemble(("⏺ ", "error"), f"Error: {error}"))

    def display_system(self, text: str) -> None:
        self.stop_thinking()
        self.console.print(Text(text, style="system"))

    def display_help(self, text: str) -> None:
        self.stop_thinking()
        self.console.print(Markdown(text))

    def display_separator(self) -> None:
        self.stop_thinking()
        self.console.print(Rule(style="dim"))

    def display_thinking(self, message: str) -> None:
        if self._status is None:
            self._status = self.console.status(message)
            self._status.start()

    def stop_thinking(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None

    def get_user_input(self) -> str | None:
        self.stop_thinking()
        try:
            return self.console.input("[user]❯[/user] ").strip()
        except (EOFError, KeyboardInterrupt):
            return None

    def confirm(self, request: ConfirmationRequest) -> Confirmation:
        self.stop_thinking()
        self.console.print()
        self.console.print(
            Text.assemble(("⚠ ", "warning"), request.message, " [y/n/s]"),
        )
        if request.preview:
            self.console.print(Text(f"  {request.preview}", style="dim"))
        self.console.print(
            Text.assemble(
                "  ",
                ("y", "bold"),
                "es / ",
                ("n", "bold"),
                "o / ",
                ("s", "bold"),
                "ession",
            ),
        )
        return parse_confirmation(self.get_user_input() or "")


class QuietOutput:
    """
    Output for scripted runs.

    Only errors, confirmation prompts and the spinner are shown, all on
    stderr, so stdout can carry the final answer alone.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console: Console = console or get_error_console()
        self._status: Status | None = None

    def display_header(self, *args: Any, **kwargs: Any) -> None:
        return None

    def display_text(self, text: str) -> None:
        return None

    def display_tool_call(self, name: str, args: dict[str, Any]) -> None:
        return None

    def display_tool_result(self, result: str) -> None:
        return None

    def display_error(self, error: str) -> None:
        self.stop_thinking()
        self.console.print(Text(f"Error: {error}", style="error"))

    def display_system(self, text: str) -> None:
        return None

    def display_help(self, text: str) -> None:
        return None

    def display_separator(self) -> None:
        return None

    def display_thinking(self, message: str) -> None:
        if self._status is None:
            self._status = self.console.status(message)
            self._status.start()

    def stop_thinking(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None

    def get_user_input(self) -> str | None:
        return None

    def confirm(self, request: ConfirmationRequest) -> Confirmation:
        self.stop_thinking()
        try:
            answer: str = self.console.input(f"Confirm: {request.message} [y/n/s] ")
        except (EOFError, KeyboardInterrupt):
            return Confirmation.NO
        return parse_confirmation(answer)


class NoOutput:
    """Discards all output and approves every confirmation."""

    def display_header(self, *args: Any, **kwargs: Any) -> None:
        return None

    def display_text(self, text: str) -> None:
        return None

    def display_tool_call(self, name: str, args: dict[str, Any]) -> None:
        return None

    def display_tool_result(self, result: str) -> None:
        return None

    def display_error(self, error: str) -> None:
        return None

    def display_system(self, text: str) -> None:
        return None

    def display_help(self, text: str) -> None:
        return None

    def display_separator(self) -> None:
        return None

    def display_thinking(self, message: str) -> None:
        return None

    def stop_thinking(self) -> None:
        return None

    def get_user_input(self) -> str | None:
        return None

    def confirm(self, request: ConfirmationRequest) -> Confirmation:
        return Confirmation.YES


class LogOutput:
    """
    Routes output to a logger instead of the terminal.

    Confirmations are always refused, since nobody is there to answer.

    Parameters
    ----------
    log : logging.Logger | None, optional
        Target logger. Defaults to the ``picocode`` logger.
    """

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log: logging.Logger = log or logging.getLogger("picocode")

    def display_header(
        self,
        provider: str,
        model: str,
        bash: bool,
        yolo: bool,
        limit: int,
        persona: str | None,
        cwd: Path,
    ) -> None:
        self.log.info(
            f"picocode | {provider} | {model} | persona:{persona or 'default'} "
            f"| bash:{bash} yolo:{yolo} limit:{limit} | {cwd}",
        )

    def display_text(self, text: str) -> None:
        self.log.info(text)

    def display_tool_call(self, name: str, args: dict[str, Any]) -> None:
        self.log.info(f"Tool call: {name} with args: {args}")

    def display_tool_result(self, result: str) -> None:
        self.log.info(f"Tool result: {result}")

    def display_error(self, error: str) -> None:
        self.log.error(error)

    def display_system(self, text: str) -> None:
        self.log.debug(f"System: {text}")

    def display_help(self, text: str) -> None:
        self.log.debug(text)

    def display_separator(self) -> None:
        return None

    def display_thinking(self, message: str) -> None:
        return None

    def stop_thinking(self) -> None:
        return None

    def get_user_input(self) -> str | None:
        return None

    def confirm(self, request: ConfirmationRequest) -> Confirmation:
        self.log.info(f"Refusing confirmation: {request.message}")
        return Confirmation.NO
