"""
Confirmation guard for destructive tools.

A :class:`GuardedTool` wraps any tool and exposes the same surface. Before
delegating a call it decides whether the call may run:

1. global yolo mode approves everything,
2. an earlier "session" answer approves every later call through the same
   guard,
3. an auto-approve pattern matching the call description approves that
   call,
4. otherwise the operator is asked.

A refused call returns a cancellation result; it never raises.
"""

import asyncio
import logging
import re
import threading
from typing import Any, Awaitable, Callable, Iterable

from picocode.config.schema import Configuration
from picocode.constants import CANCELLED_MESSAGE, CONFIRM_PREVIEW_LENGTH
from picocode.safety.models import Confirmation, ConfirmationRequest
from picocode.tools.interfaces import ToolProtocol
from picocode.tools.models import ToolErrorKind, ToolInvocation, ToolKind, ToolResult

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[
    [ConfirmationRequest],
    Confirmation | Awaitable[Confirmation],
]


def make_preview(text: str, limit: int = CONFIRM_PREVIEW_LENGTH) -> str:
    """
    Flatten a call description to one short line.

    Parameters
    ----------
    text : str
        Call description.
    limit : int, default=50
        Maximum number of characters kept before the ellipsis.

    Returns
    -------
    str
        Description with newlines replaced by spaces, truncated with
        ``...`` if longer than ``limit``.

    Examples
    --------
    >>> make_preview("echo a\\necho b")
    'echo a echo b'
    """
    flat: str = text.replace("\n", " ")
    if len(flat) > limit:
        return f"{flat[:limit]}..."
    return flat


class AutoApproveRules:
    """
    Ordered regular expressions that approve a call without prompting.

    Patterns that fail to compile are logged and skipped, so a typo in the
    config can only cause extra prompts, never extra approvals.

    Parameters
    ----------
    patterns : Iterable[str] | None, optional
        Regular expressions, searched anywhere in the call description.
    tool_name : str, default=""
        Tool the rules belong to, used in log messages.

    Examples
    --------
    >>> rules = AutoApproveRules(["^ls( |$)", "^git status"])
    >>> rules.matches("ls -la")
    True
    >>> rules.matches("rm -rf build")
    False
    """

    def __init__(
        self,
        patterns: Iterable[str] | None = None,
        tool_name: str = "",
    ) -> None:
        self.patterns: list[re.Pattern[str]] = []
        for pattern in patterns or []:
            try:
                self.patterns.append(re.compile(pattern))
            except re.error as e:
                logger.warning(
                    f"Ignoring invalid auto_allow pattern {pattern!r} "
                    f"for {tool_name or 'tool'}: {e}",
                )

    def matches(self, description: str) -> bool:
        return any(pattern.search(description) for pattern in self.patterns)

    def __bool__(self) -> bool:
        return bool(self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)


class GuardedTool:
    """
    Wraps a tool with a confirmation and auto-approval policy.

    Each guard owns its "approved for the session" flag. The flag is a
    :class:`threading.Event`, and all prompts go through ``prompt_lock``, so
    concurrent calls through one guard never prompt twice after a session
    answer and prompts from different guards never interleave.

    Parameters
    ----------
    tool : ToolProtocol
        The tool to guard.
    confirm : ConfirmCallback
        Asks the operator. May be sync or async.
    yolo : bool, default=False
        Approve every call without prompting or touching the flag.
    auto_approve : AutoApproveRules | Iterable[str] | None, optional
        Patterns matched against ``tool.describe_call(params)``.
    prompt_lock : asyncio.Lock | None, optional
        Lock shared by all guards of one agent.

    Attributes
    ----------
    tool : ToolProtocol
        The wrapped tool.
    auto_approve : AutoApproveRules
        Compiled auto-approval patterns.
    prompt_lock : asyncio.Lock
        Serializes confirmation prompts.

    Examples
    --------
    >>> guarded = GuardedTool(
    ...     RemoveTool(config),
    ...     confirm=lambda request: Confirmation.YES,
    ... )
    >>> result = await guarded.execute(invocation)
    """

    def __init__(
        self,
        tool: ToolProtocol,
        confirm: ConfirmCallback,
        yolo: bool = False,
        auto_approve: AutoApproveRules | Iterable[str] | None = None,
        prompt_lock: asyncio.Lock | None = None,
    ) -> None:
        self.tool: ToolProtocol = tool
        self.confirm: ConfirmCallback = confirm
        self.yolo: bool = yolo
        if isinstance(auto_approve, AutoApproveRules):
            self.auto_approve: AutoApproveRules = auto_approve
        else:
            self.auto_approve = AutoApproveRules(auto_approve, tool.name)
        self.prompt_lock: asyncio.Lock = prompt_lock or asyncio.Lock()
        self._always_approved: threading.Event = threading.Event()

    @property
    def name(self) -> str:
        return self.tool.name

    @property
    def description(self) -> str:
        return self.tool.description

    @property
    def kind(self) -> ToolKind:
        return self.tool.kind

    @property
    def schema(self) -> Any:
        return self.tool.schema

    @property
    def always_approved(self) -> bool:
        """Whether the operator approved this tool for the session."""
        return self._always_approved.is_set()

    def validate_params(self, params: dict[str, Any]) -> list[str]:
        return self.tool.validate_params(params)

    def describe_call(self, params: dict[str, Any]) -> str:
        return self.tool.describe_call(params)

    def to_openai_schema(self) -> dict[str, Any]:
        return self.tool.to_openai_schema()

    async def execute(self, invocation: ToolInvocation) -> ToolResult:
        """
        Run the wrapped tool if the call is approved.

        Parameters
        ----------
        invocation : ToolInvocation
            Invocation to check and delegate.

        Returns
        -------
        ToolResult
            The wrapped tool's result, or a cancellation result if the
            operator refused.
        """
        if await self.is_approved(invocation.params):
            return await self.tool.execute(invocation)

        logger.debug(f"Call to {self.name} cancelled by operator")
        return ToolResult.error_result(
            CANCELLED_MESSAGE,
            error_kind=ToolErrorKind.CANCELLED,
            metadata={"tool_name": self.name},
        )

    async def is_approved(self, params: dict[str, Any]) -> bool:
        """
        Decide whether a call may run, prompting if necessary.

        Parameters
        ----------
        params : dict[str, Any]
            Call parameters.

        Returns
        -------
        bool
            True if the call may run.
        """
        if self.yolo:
            logger.debug(f"yolo: approving {self.name}")
            return True

        if self._always_approved.is_set():
            logger.debug(f"Session approval: approving {self.name}")
            return True

        description: str = self.tool.describe_call(params)
        if self.auto_approve.matches(description):
            logger.debug(f"Auto-approved {self.name}: {make_preview(description)}")
            return True

        async with self.prompt_lock:
            # Another call may have been approved for the session while
            # this one was waiting for the lock.
            if self._always_approved.is_set():
                return True

            request = ConfirmationRequest(
                message=f"Confirm tool {self.name.upper()} call?",
                tool_name=self.name,
                preview=make_preview(description),
            )
            answer: Confirmation = await self._ask(request)
            logger.debug(f"Operator answered {answer.value} for {self.name}")

            if answer == Confirmation.ALWAYS:
                self._always_approved.set()
                return True

        return answer == Confirmation.YES

    async def _ask(self, request: ConfirmationRequest) -> Confirmation:
        result = self.confirm(request)
        # Handle both sync and async callbacks
        if isinstance(result, Awaitable):
            return await result
        return result


def guard_tool(
    tool: ToolProtocol,
    config: Configuration,
    confirm: ConfirmCallback,
    prompt_lock: asyncio.Lock,
) -> GuardedTool:
    """
    Wrap a tool using the policy from the configuration.

    Parameters
    ----------
    tool : ToolProtocol
        Tool to guard.
    config : Configuration
        Supplies ``yolo`` and the tool's ``auto_allow`` patterns.
    confirm : ConfirmCallback
        Operator prompt.
    prompt_lock : asyncio.Lock
        Lock shared by every guard of the agent.

    Returns
    -------
    GuardedTool
        The guarded tool.
    """
    return GuardedTool(
        tool,
        confirm=confirm,
        yolo=config.yolo,
        auto_approve=AutoApproveRules(config.auto_allow_for(tool.name), tool.name),
        prompt_lock=prompt_lock,
    )
