"""
Multi-turn tool-calling engine.

One call to :meth:`ToolCallingEngine.prompt` is one turn: the model is asked
for a reply, any tool calls it requests are run, and their results are fed
back until the model answers without requesting tools. The number of tool
rounds per turn is capped.
"""

import asyncio
import logging
from pathlib import Path

from picocode.agent.history import ConversationHistory, MessageItem
from picocode.constants import DEFAULT_TOOL_CALL_LIMIT
from picocode.exceptions import RoundLimitError
from picocode.hooks.dispatch import NullHook, ToolDispatchHook, safe_dispatch
from picocode.interfaces import CompletionModel
from picocode.llm.models import Completion, TokenUsage, ToolCall
from picocode.tools.models import ToolResult
from picocode.tools.registry import ToolRegistry
from picocode.types import MessageDict

logger = logging.getLogger(__name__)


class ToolCallingEngine:
    """
    Runs bounded tool-calling turns against a completion model.

    Parameters
    ----------
    model : CompletionModel
        The completion engine.
    registry : ToolRegistry
        Tools the model may call. Guarded tools are registered already
        wrapped.
    system_prompt : str
        System message sent first in every request.
    cwd : Path
        Sandbox root passed to every tool call.
    hook : ToolDispatchHook | None, optional
        Observer notified around each tool call.

    Attributes
    ----------
    total_usage : TokenUsage
        Tokens used by every completion so far.

    Examples
    --------
    >>> engine = ToolCallingEngine(client, registry, "Concise coding assistant.", cwd)
    >>> answer = await engine.prompt("What does main.py do?", max_rounds=10)
    """

    def __init__(
        self,
        model: CompletionModel,
        registry: ToolRegistry,
        system_prompt: str,
        cwd: Path,
        hook: ToolDispatchHook | None = None,
    ) -> None:
        self.model: CompletionModel = model
        self.registry: ToolRegistry = registry
        self.system_prompt: str = system_prompt
        self.cwd: Path = cwd
        self.hook: ToolDispatchHook = hook or NullHook()
        self.total_usage: TokenUsage = TokenUsage()

    async def prompt(
        self,
        input: str,
        history: ConversationHistory | None = None,
        max_rounds: int = DEFAULT_TOOL_CALL_LIMIT,
    ) -> str:
        """
        Run one turn.

        Parameters
        ----------
        input : str
            The user message for this turn.
        history : ConversationHistory | None, optional
            Earlier messages of the session. When given, the messages of
            this turn are appended to it.
        max_rounds : int, default=50
            Maximum number of tool-call rounds.

        Returns
        -------
        str
            The model's final answer.

        Raises
        ------
        RoundLimitError
            If the model still requests tools after ``max_rounds`` rounds.
            The calls of that last request are not run. The completed
            rounds are appended to ``history``.
        PicocodeError
            If the completion engine fails. Nothing is appended to
            ``history``.
        """
        prior: list[MessageDict] = history.to_messages() if history is not None else []
        turn: list[MessageItem] = [MessageItem.user(input)]
        tools = self.registry.get_schemas()
        rounds_used: int = 0
        last_text: str = ""

        while True:
            messages: list[MessageDict] = [
                {"role": "system", "content": self.system_prompt},
                *prior,
                *(item.to_dict() for item in turn),
            ]
            completion: Completion = await self.model.complete(messages, tools or None)
            if completion.usage:
                self.total_usage = self.total_usage + completion.usage
            if completion.text:
                last_text = completion.text

            if not completion.tool_calls:
                turn.append(MessageItem.assistant(completion.text))
                if history is not None:
                    history.extend(turn)
                logger.debug(f"Turn finished after {rounds_used} tool rounds")
                return completion.text

            if rounds_used >= max_rounds:
                logger.warning(
                    f"Round limit of {max_rounds} reached, dropping "
                    f"{len(completion.tool_calls)} requested tool calls",
                )
                if history is not None:
                    history.extend(turn)
                raise RoundLimitError(max_rounds, last_text)

            rounds_used += 1
            logger.debug(
                f"Round {rounds_used}/{max_rounds}: "
                f"{', '.join(call.name for call in completion.tool_calls)}",
            )
            turn.append(MessageItem.assistant(completion.text, completion.tool_calls))

            results: list[ToolResult] = await asyncio.gather(
                *(self._dispatch(call) for call in completion.tool_calls),
            )
            for call, result in zip(completion.tool_calls, results):
                turn.append(MessageItem.tool_result(call.call_id, result.to_model_output()))

    async def _dispatch(self, call: ToolCall) -> ToolResult:
        await safe_dispatch(
            self.hook.on_tool_call,
            call.name,
            call.arguments,
            hook_name=type(self.hook).__name__,
        )

        result: ToolResult = await self.registry.invoke(
            call.name,
            call.arguments,
            self.cwd,
        )
        if not result.success:
            logger.debug(
                f"Tool {call.name} failed ({result.error_kind}): {result.error}",
            )

        await safe_dispatch(
            self.hook.on_tool_result,
            call.name,
            result,
            hook_name=type(self.hook).__name__,
        )
        return result
