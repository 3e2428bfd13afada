"""
Operator modes and session commands.

In PLAN mode every message is framed so that the model investigates and
proposes a plan instead of changing anything. ``/go`` switches to CODE mode
and asks the model to carry the plan out. :func:`interpret_line` maps one
input line to the action the session loop should take; it has no side
effects.
"""

from enum import Enum

from pydantic import BaseModel

from picocode.constants import DEFAULT_PLAN_FILE_NAME, IMPLEMENT_DIRECTIVE

PLAN_PREAMBLE: str = (
    "You are in PLAN mode. Investigate the codebase with read-only tools and "
    "answer with a concise, numbered implementation plan. Do not create, "
    "edit, move or delete files and do not run commands that change state. "
    "The operator will review the plan and switch to CODE mode to carry it out."
)

HELP_TEXT: str = """\
**Commands**

- `/plan` switch to plan mode: the assistant proposes a plan without changing files
- `/code` switch to code mode: messages are sent as typed
- `/go` switch to code mode and implement the current plan
- `/write [name]` save the last response to a file (default `plan.md`)
- `/clear` start a fresh conversation
- `/help` show this help
- `/q`, `/quit`, `/exit` or `exit` leave the session
"""

EXIT_COMMANDS: frozenset[str] = frozenset({"/q", "/quit", "/exit", "exit"})


class AgentMode(str, Enum):
    PLAN = "plan"
    CODE = "code"


class SessionActionKind(str, Enum):
    SEND = "send"
    NOTICE = "notice"
    WRITE = "write"
    EXIT = "exit"
    CLEAR = "clear"
    HELP = "help"
    NONE = "none"


class SessionAction(BaseModel):
    """
    What the session loop should do with one input line.

    Parameters
    ----------
    kind : SessionActionKind
        The action.
    mode : AgentMode
        Mode in effect after the line.
    text : str | None, optional
        Message for the model (SEND) or content to save (WRITE).
    notice : str | None, optional
        Message for the operator.
    file_name : str | None, optional
        Target file for WRITE.
    """

    kind: SessionActionKind
    mode: AgentMode
    text: str | None = None
    notice: str | None = None
    file_name: str | None = None


def frame_input(mode: AgentMode, text: str) -> str:
    """
    Frame a message for the current mode.

    Examples
    --------
    >>> frame_input(AgentMode.CODE, "fix it")
    'fix it'
    """
    if mode == AgentMode.PLAN:
        return f"{PLAN_PREAMBLE}\n\n{text}"
    return text


def _switch(mode: AgentMode, target: AgentMode) -> SessionAction:
    if mode == target:
        return SessionAction(
            kind=SessionActionKind.NOTICE,
            mode=mode,
            notice=f"Already in {target.value} mode.",
        )
    return SessionAction(
        kind=SessionActionKind.NOTICE,
        mode=target,
        notice=f"Switched to {target.value} mode.",
    )


def interpret_line(
    line: str,
    mode: AgentMode,
    last_response: str | None = None,
) -> SessionAction:
    """
    Interpret one line typed at the interactive prompt.

    Parameters
    ----------
    line : str
        Raw input line.
    mode : AgentMode
        Current mode.
    last_response : str | None, optional
        Latest assistant response of the session, used by ``/write``.

    Returns
    -------
    SessionAction
        Action to take and the mode after it.

    Examples
    --------
    >>> interpret_line("/go", AgentMode.PLAN).text
    'Implement the plan.'
    """
    stripped: str = line.strip()
    if not stripped:
        return SessionAction(kind=SessionActionKind.NONE, mode=mode)

    if stripped in EXIT_COMMANDS:
        return SessionAction(kind=SessionActionKind.EXIT, mode=mode)

    if not stripped.startswith("/"):
        return SessionAction(
            kind=SessionActionKind.SEND,
            mode=mode,
            text=frame_input(mode, stripped),
        )

    parts: list[str] = stripped.split(maxsplit=1)
    command: str = parts[0]
    argument: str = parts[1].strip() if len(parts) > 1 else ""

    if command == "/plan":
        return _switch(mode, AgentMode.PLAN)

    if command == "/code":
        return _switch(mode, AgentMode.CODE)

    if command == "/go":
        if mode == AgentMode.CODE:
            return SessionAction(
                kind=SessionActionKind.NOTICE,
                mode=mode,
                notice="Already in code mode.",
            )
        return SessionAction(
            kind=SessionActionKind.SEND,
            mode=AgentMode.CODE,
            text=IMPLEMENT_DIRECTIVE,
            notice="Switched to code mode.",
        )

    if command == "/write":
        if not last_response:
            return SessionAction(
                kind=SessionActionKind.NOTICE,
                mode=mode,
                notice="Nothing to write yet.",
            )
        return SessionAction(
            kind=SessionActionKind.WRITE,
            mode=mode,
            text=last_response,
            file_name=argument or DEFAULT_PLAN_FILE_NAME,
        )

    if command == "/help":
        return SessionAction(kind=SessionActionKind.HELP, mode=mode, text=HELP_TEXT)

    if command == "/clear":
        return SessionAction(
            kind=SessionActionKind.CLEAR,
            mode=mode,
            notice="Conversation cleared.",
        )

    return SessionAction(
        kind=SessionActionKind.NOTICE,
        mode=mode,
        notice=f"Unknown command: {command}",
    )
