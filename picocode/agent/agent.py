"""
The coding agent and its session loops.

:class:`CodeAgent` ties the engine to an :class:`~picocode.ui.output.Output`:
it shows the header and spinner, runs single-shot prompts, and drives the
interactive loop with its mode commands.
"""

import asyncio
import logging
from typing import Any

from picocode.agent.engine import ToolCallingEngine
from picocode.agent.history import ConversationHistory
from picocode.agent.modes import AgentMode, SessionAction, SessionActionKind, interpret_line
from picocode.config.schema import Configuration
from picocode.constants import DEFAULT_ENCODING
from picocode.exceptions import PicocodeError, SandboxViolation
from picocode.hooks.dispatch import CompositeHook, DisplayHook
from picocode.hooks.system import CommandHook
from picocode.interfaces import CompletionModel
from picocode.llm.client import LLMClient
from picocode.llm.providers import resolve_provider
from picocode.prompts.builder import build_system_prompt
from picocode.safety.guard import guard_tool
from picocode.safety.sandbox import display_path, resolve_in_sandbox
from picocode.tools.builtin import create_builtin_tools
from picocode.tools.registry import ToolRegistry
from picocode.ui.output import Output
from picocode.utils.paths import ensure_parent_directory

logger = logging.getLogger(__name__)


class CodeAgent:
    """
    Coding agent bound to one configuration and one output sink.

    Parameters
    ----------
    config : Configuration
        Application configuration.
    output : Output
        Where everything is shown and confirmations are asked.
    engine : ToolCallingEngine
        Engine running the turns.

    Attributes
    ----------
    mode : AgentMode
        Current operator mode of the interactive session.
    history : ConversationHistory
        Messages of the interactive session.
    last_response : str | None
        Latest assistant response, saved by ``/write``.

    Examples
    --------
    >>> async with build_agent(config, ConsoleOutput()) as agent:
    ...     await agent.run_once("Summarize README.md")
    """

    def __init__(
        self,
        config: Configuration,
        output: Output,
        engine: ToolCallingEngine,
    ) -> None:
        self.config: Configuration = config
        self.output: Output = output
        self.engine: ToolCallingEngine = engine
        self.mode: AgentMode = AgentMode.CODE
        self.history: ConversationHistory = ConversationHistory()
        self.last_response: str | None = None

    @property
    def model(self) -> CompletionModel:
        return self.engine.model

    async def __aenter__(self) -> "CodeAgent":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self.engine.model.close()

    def display_header(self) -> None:
        self.output.display_header(
            provider=self.config.provider,
            model=self.config.model or "",
            bash=self.config.use_bash,
            yolo=self.config.yolo,
            limit=self.config.tool_call_limit,
            persona=self.config.persona,
            cwd=self.config.cwd,
        )

    async def turn(self, input: str, history: ConversationHistory | None = None) -> str:
        """
        Run one turn with the spinner shown.

        Parameters
        ----------
        input : str
            Message for the model.
        history : ConversationHistory | None, optional
            Session history to continue and extend.

        Returns
        -------
        str
            The model's final answer.
        """
        self.output.display_thinking("Thinking...")
        try:
            return await self.engine.prompt(
                input,
                history=history,
                max_rounds=self.config.tool_call_limit,
            )
        finally:
            self.output.stop_thinking()

    async def run_once(self, input: str) -> str:
        """
        Run a single prompt without history.

        Raises
        ------
        PicocodeError
            If the turn fails or hits the round limit.
        """
        self.display_header()
        self.output.display_separator()
        response: str = await self.turn(input)
        self.output.display_text(response)
        return response

    async def run_interactive(self) -> None:
        """
        Read and handle lines until the operator leaves.

        Errors from a turn are shown and the session goes on.
        """
        self.display_header()

        while True:
            self.output.display_separator()
            line: str | None = self.output.get_user_input()
            if line is None:
                break

            action: SessionAction = interpret_line(line, self.mode, self.last_response)
            if action.mode != self.mode:
                logger.debug(f"Mode changed from {self.mode.value} to {action.mode.value}")
            self.mode = action.mode

            if action.kind == SessionActionKind.EXIT:
                break

            await self.handle_action(action)

    async def handle_action(self, action: SessionAction) -> None:
        """Carry out one interpreted line, except EXIT."""
        if action.notice:
            self.output.display_system(action.notice)

        if action.kind == SessionActionKind.SEND and action.text:
            try:
                response: str = await self.turn(action.text, self.history)
            except PicocodeError as e:
                logger.debug(f"Turn failed: {e}")
                self.output.display_error(e.message)
                return
            self.last_response = response
            self.output.display_text(response)

        elif action.kind == SessionActionKind.WRITE and action.text and action.file_name:
            self.write_response(action.file_name, action.text)

        elif action.kind == SessionActionKind.CLEAR:
            self.history.clear()
            self.last_response = None

        elif action.kind == SessionActionKind.HELP and action.text:
            self.output.display_help(action.text)

    def write_response(self, file_name: str, content: str) -> None:
        """Save a response to a file inside the working directory."""
        try:
            path = resolve_in_sandbox(self.config.cwd, file_name)
            ensure_parent_directory(path)
            path.write_text(content, encoding=DEFAULT_ENCODING)
        except SandboxViolation as e:
            self.output.display_error(str(e))
            return
        except OSError as e:
            self.output.display_error(f"Failed to write {file_name}: {e}")
            return

        self.output.display_system(f"Saved to {display_path(path, self.config.cwd)}")


def build_registry(config: Configuration, output: Output) -> ToolRegistry:
    """
    Register the builtin tools, guarding the ones that need confirmation.

    All guards share one prompt lock so that concurrent calls never prompt
    at the same time.
    """
    registry = ToolRegistry()
    prompt_lock = asyncio.Lock()

    for tool in create_builtin_tools(config):
        if tool.requires_confirmation:
            registry.register(guard_tool(tool, config, output.confirm, prompt_lock))
        else:
            registry.register(tool)

    return registry


def build_agent(
    config: Configuration,
    output: Output,
    model: CompletionModel | None = None,
) -> CodeAgent:
    """
    Assemble an agent from the configuration.

    Parameters
    ----------
    config : Configuration
        Application configuration.
    output : Output
        Output sink, also used for confirmations.
    model : CompletionModel | None, optional
        Completion engine. By default an :class:`LLMClient` for the
        configured provider.

    Returns
    -------
    CodeAgent
        The agent. Close it, or use it as an async context manager.

    Raises
    ------
    ConfigurationError
        If the provider, its API key or the persona cannot be resolved.
    """
    if model is None:
        provider = resolve_provider(config.provider, config.model)
        config.model = provider.model
        model = LLMClient(provider)

    registry = build_registry(config, output)
    hook = CompositeHook([DisplayHook(output), CommandHook(config)])
    engine = ToolCallingEngine(
        model=model,
        registry=registry,
        system_prompt=build_system_prompt(config),
        cwd=config.cwd,
        hook=hook,
    )
    logger.debug(f"Agent ready with {len(registry)} tools")
    return CodeAgent(config, output, engine)
