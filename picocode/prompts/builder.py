"""
System prompt construction.
"""

import logging
from pathlib import Path

from picocode.config.schema import Configuration
from picocode.constants import DEFAULT_ENCODING
from picocode.exceptions import ConfigurationError
from picocode.prompts.personas import get_persona

logger = logging.getLogger(__name__)


def load_agent_prompt(config: Configuration) -> str | None:
    """
    Get the configured agent prompt.

    ``agent_prompt`` wins over ``agent_prompt_file``. A relative file path is
    resolved against ``config.cwd``.

    Raises
    ------
    ConfigurationError
        If the prompt file cannot be read.
    """
    if config.agent_prompt:
        return config.agent_prompt

    if not config.agent_prompt_file:
        return None

    path: Path = Path(config.agent_prompt_file)
    if not path.is_absolute():
        path = config.cwd / path

    try:
        return path.read_text(encoding=DEFAULT_ENCODING)
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read agent prompt file: {path}",
            config_key="agent_prompt_file",
            config_file=str(path),
            cause=e,
        ) from e


def resolve_persona_prompt(config: Configuration) -> str | None:
    """
    Get the prompt for ``config.persona``.

    Raises
    ------
    ConfigurationError
        If the persona is neither a file nor a builtin name.
    """
    if not config.persona:
        return None

    prompt: str | None = get_persona(config.persona, config.cwd)
    if prompt is None:
        raise ConfigurationError(
            f"Unknown persona: {config.persona}. "
            f"Use a builtin name or a path to a prompt file.",
            config_key="persona",
        )
    return prompt


def build_system_prompt(config: Configuration) -> str:
    """
    Build the system message.

    Sections, joined by blank lines: the persona prompt, the base line
    naming the working directory, the agent prompt and ``AGENTS.md``.

    Parameters
    ----------
    config : Configuration
        Application configuration.

    Returns
    -------
    str
        The system message.

    Examples
    --------
    >>> build_system_prompt(config)
    'Concise coding assistant. cwd: /work'
    """
    sections: list[str] = []

    persona_prompt = resolve_persona_prompt(config)
    if persona_prompt:
        sections.append(persona_prompt.strip())

    sections.append(f"Concise coding assistant. cwd: {config.cwd}")

    agent_prompt = load_agent_prompt(config)
    if agent_prompt:
        sections.append(agent_prompt.strip())

    if config.developer_instructions:
        sections.append(config.developer_instructions.strip())

    logger.debug(f"Built system prompt with {len(sections)} sections")
    return "\n\n".join(sections)
