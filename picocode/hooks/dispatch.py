"""
Observer hooks around tool dispatch.

The conversation loop announces every tool call before it runs and every
result after it returns. Hooks only observe: what they return is ignored and
anything they raise is logged and dropped by :func:`safe_dispatch`, so a
broken hook can never fail a tool call or reach the model.
"""

import inspect
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Iterable, Protocol, runtime_checkable

from picocode.tools.models import ToolResult

if TYPE_CHECKING:
    from picocode.ui.output import Output

logger = logging.getLogger(__name__)


@runtime_checkable
class ToolDispatchHook(Protocol):
    """
    Protocol for tool dispatch observers.

    Both methods are called inline by the conversation loop. They may be
    plain or async methods; a returned awaitable is awaited.
    """

    async def on_tool_call(self, name: str, args: dict[str, Any]) -> None:
        """
        Called before a tool call is dispatched.

        Parameters
        ----------
        name : str
            Tool name as requested by the model.
        args : dict[str, Any]
            Parsed call arguments.
        """
        ...

    async def on_tool_result(self, name: str, result: ToolResult) -> None:
        """
        Called after a tool call returns, including failed calls.

        Parameters
        ----------
        name : str
            Tool name as requested by the model.
        result : ToolResult
            The call's result.
        """
        ...


async def safe_dispatch(
    callback: Callable[..., Awaitable[None] | None],
    *args: Any,
    hook_name: str,
) -> None:
    """
    Call a hook method, logging and discarding any exception.

    The callback may be a plain or an async method. It is called inside the
    ``try``, so an exception raised before the first ``await``, or by a
    synchronous hook, is caught as well.

    Parameters
    ----------
    callback : Callable[..., Awaitable[None] | None]
        Bound hook method, e.g. ``hook.on_tool_call``.
    *args : Any
        Arguments for the callback.
    hook_name : str
        Used in the log message.

    Examples
    --------
    >>> await safe_dispatch(hook.on_tool_call, "bash", {"cmd": "ls"}, hook_name="display")
    """
    try:
        outcome = callback(*args)
        if inspect.isawaitable(outcome):
            await outcome
    except Exception as e:
        logger.warning(f"Hook '{hook_name}' failed: {e}", exc_info=True)


class NullHook:
    """Hook that does nothing."""

    async def on_tool_call(self, name: str, args: dict[str, Any]) -> None:
        return None

    async def on_tool_result(self, name: str, result: ToolResult) -> None:
        return None


class DisplayHook:
    """
    Renders tool calls and results through an :class:`~picocode.ui.output.Output`.

    Parameters
    ----------
    output : Output
        Where calls and results are shown.
    """

    def __init__(self, output: "Output") -> None:
        self.output: "Output" = output

    async def on_tool_call(self, name: str, args: dict[str, Any]) -> None:
        self.output.display_tool_call(name, args)

    async def on_tool_result(self, name: str, result: ToolResult) -> None:
        self.output.display_tool_result(result.to_model_output())


class CompositeHook:
    """
    Fans each notification out to several hooks in order.

    A failing hook does not prevent the ones after it from running.

    Parameters
    ----------
    hooks : Iterable[ToolDispatchHook]
        Hooks to notify.

    Examples
    --------
    >>> hook = CompositeHook([DisplayHook(output), CommandHook(config)])
    """

    def __init__(self, hooks: Iterable[ToolDispatchHook]) -> None:
        self.hooks: list[ToolDispatchHook] = list(hooks)

    async def on_tool_call(self, name: str, args: dict[str, Any]) -> None:
        for hook in self.hooks:
            await safe_dispatch(hook.on_tool_call, name, args, hook_name=type(hook).__name__)

    async def on_tool_result(self, name: str, result: ToolResult) -> None:
        for hook in self.hooks:
            await safe_dispatch(
                hook.on_tool_result,
                name,
                result,
                hook_name=type(hook).__name__,
            )
