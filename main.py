"""
Main entry point for the picocode coding assistant.

This module provides the command-line interface with interactive and
single-shot modes, recipes and output selection.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

import click
from dotenv import load_dotenv

from picocode.agent import CodeAgent, build_agent
from picocode.config.loader import load_configuration
from picocode.config.schema import Configuration, Recipe
from picocode.constants import DEFAULT_TOOL_CALL_LIMIT
from picocode.exceptions import ConfigurationError, PicocodeError, RoundLimitError
from picocode.prompts.personas import list_personas
from picocode.ui.console import get_error_console
from picocode.ui.output import ConsoleOutput, Output, QuietOutput

LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)

error_console = get_error_console()


class CLI:
    """
    Command-line interface for the picocode agent.

    Parameters
    ----------
    config : Configuration
        Configuration object.
    output : Output
        Output sink for the agent.

    Examples
    --------
    >>> config = load_configuration()
    >>> cli = CLI(config, ConsoleOutput())
    >>> await cli.run_single("Fix the bug")
    """

    def __init__(self, config: Configuration, output: Output) -> None:
        self.config: Configuration = config
        self.output: Output = output

    async def run_single(self, message: str) -> str:
        """
        Run the agent on a single message.

        Raises
        ------
        PicocodeError
            If the turn fails or hits the round limit.
        """
        agent: CodeAgent = build_agent(self.config, self.output)
        async with agent:
            return await agent.run_once(message)

    async def run_interactive(self) -> None:
        agent: CodeAgent = build_agent(self.config, self.output)
        async with agent:
            await agent.run_interactive()


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )


def resolve_recipe(
    name: str,
    cwd: Path | None,
    config_path: Path | None,
    overrides: dict[str, Any],
) -> tuple[Configuration, Recipe]:
    """
    Load the configuration with a recipe's settings applied.

    Options given on the command line win over the recipe.

    Raises
    ------
    ConfigurationError
        If the recipe does not exist.
    """
    base: Configuration = load_configuration(cwd=cwd, config_path=config_path)
    recipe: Recipe = base.get_recipe(name)

    recipe_overrides: dict[str, Any] = {
        "provider": recipe.provider,
        "model": recipe.model,
        "persona": recipe.persona,
        "yolo": recipe.yolo,
        "quiet": recipe.quiet or None,
    }
    recipe_overrides.update({k: v for k, v in overrides.items() if v is not None})

    config: Configuration = load_configuration(
        cwd=cwd,
        config_path=config_path,
        overrides=recipe_overrides,
    )
    return config, recipe


@click.command(
    epilog=f"\b\nPersonas:\n{list_personas()}",
)
@click.option("-p", "--provider", help="Provider name (default: anthropic)")
@click.option("-m", "--model", help="Model name (default depends on the provider)")
@click.option("--input", "input_text", help="Run a single prompt and exit")
@click.option("--bash", "use_bash", is_flag=True, help="Enable the bash tool")
@click.option("--yolo", is_flag=True, help="Approve every tool call")
@click.option("-q", "--quiet", is_flag=True, help="Only print the final response")
@click.option(
    "--tool-call-limit",
    type=click.IntRange(min=1),
    default=None,
    help=f"Maximum tool-call rounds per turn (default: {DEFAULT_TOOL_CALL_LIMIT})",
)
@click.option("--persona", help="Builtin persona name or path to a persona file")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file to use instead of picocode.toml",
)
@click.option("--recipe", help="Run a recipe from the configuration")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(
    provider: str | None,
    model: str | None,
    input_text: str | None,
    use_bash: bool,
    yolo: bool,
    quiet: bool,
    tool_call_limit: int | None,
    persona: str | None,
    config_path: Path | None,
    recipe: str | None,
    debug: bool,
) -> None:
    """
    picocode - a small, sandboxed coding assistant.

    Run interactively, or pass --input or --recipe for a single prompt.
    """
    load_dotenv()
    configure_logging(debug)

    overrides: dict[str, Any] = {
        "provider": provider,
        "model": model,
        "use_bash": use_bash or None,
        "yolo": yolo or None,
        "quiet": quiet or None,
        "tool_call_limit": tool_call_limit,
        "persona": persona,
        "debug": debug or None,
    }

    selected_recipe: Recipe | None = None
    try:
        if recipe:
            config, selected_recipe = resolve_recipe(recipe, None, config_path, overrides)
            input_text = input_text or selected_recipe.resolve_prompt(config.cwd)
            if not input_text:
                raise ConfigurationError(
                    f"Recipe {recipe} has no prompt",
                    config_key="recipes",
                )
        else:
            config = load_configuration(config_path=config_path, overrides=overrides)
    except ConfigurationError as e:
        error_console.print(f"[error]Configuration Error: {e.message}[/error]")
        sys.exit(1)

    errors: list[str] = config.validate()
    if errors:
        for error in errors:
            error_console.print(f"[error]{error}[/error]")
        sys.exit(1)

    output: Output = QuietOutput() if config.quiet else ConsoleOutput()
    cli = CLI(config, output)

    if not input_text:
        try:
            asyncio.run(cli.run_interactive())
        except ConfigurationError as e:
            error_console.print(f"[error]Configuration Error: {e.message}[/error]")
            sys.exit(1)
        return

    try:
        response: str = asyncio.run(cli.run_single(input_text))
    except ConfigurationError as e:
        error_console.print(f"[error]Configuration Error: {e.message}[/error]")
        sys.exit(1)
    except RoundLimitError as e:
        output.display_error(e.message)
        if config.quiet and e.last_text:
            click.echo(e.last_text)
        sys.exit(1)
    except PicocodeError as e:
        output.display_error(e.message)
        sys.exit(1)

    if config.quiet:
        click.echo(response)

    if selected_recipe is not None and selected_recipe.is_error(response):
        logger.debug(f"Recipe {recipe} response matched error_if")
        sys.exit(1)


if __name__ == "__main__":
    main()
