"""
Configuration schema definitions for picocode.

This module defines the Pydantic models for configuration validation,
including per-tool auto-approval rules, recipes, shell environment
policies and audit hooks.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from picocode.constants import DEFAULT_PROVIDER, DEFAULT_TOOL_CALL_LIMIT
from picocode.exceptions import ConfigurationError, ValidationError


class ToolSettings(BaseModel):
    """
    Per-tool settings.

    Parameters
    ----------
    auto_allow : list[str], default=[]
        Regular expressions matched against the tool's call description.
        A match approves the call without prompting.

    Examples
    --------
    >>> ToolSettings(auto_allow=["^ls( |$)", "^git status"])
    """

    auto_allow: list[str] = Field(
        default_factory=list,
        description="Patterns that auto-approve a call",
    )


class Recipe(BaseModel):
    """
    A named, preconfigured single-shot run.

    Every field except ``error_if`` overrides the corresponding CLI value
    when set. ``prompt_file`` wins over ``prompt``.

    Parameters
    ----------
    prompt : str | None, optional
        Prompt text to run.
    prompt_file : str | None, optional
        File whose contents are the prompt, relative to the working directory.
    provider : str | None, optional
        Provider override.
    model : str | None, optional
        Model override.
    persona : str | None, optional
        Persona name or persona file.
    yolo : bool | None, optional
        Bypass all confirmations.
    quiet : bool, default=False
        Use quiet output.
    error_if : str | None, optional
        Regular expression; a response matching it counts as a failure.

    Examples
    --------
    >>> recipe = Recipe(prompt="Run the tests", error_if="FAILED")
    >>> recipe.is_error("2 FAILED, 10 passed")
    True
    """

    prompt: str | None = Field(default=None, description="Prompt text")
    prompt_file: str | None = Field(default=None, description="Prompt file")
    provider: str | None = Field(default=None, description="Provider override")
    model: str | None = Field(default=None, description="Model override")
    persona: str | None = Field(default=None, description="Persona override")
    yolo: bool | None = Field(default=None, description="Bypass confirmations")
    quiet: bool = Field(default=False, description="Quiet output")
    error_if: str | None = Field(
        default=None,
        description="Regex marking a response as an error",
    )

    @field_validator("error_if")
    @classmethod
    def validate_error_if(cls, v: str | None) -> str | None:
        """
        Reject ``error_if`` patterns that do not compile.

        Parameters
        ----------
        v : str | None
            Pattern to validate.

        Returns
        -------
        str | None
            The pattern unchanged.

        Raises
        ------
        ValidationError
            If the pattern is not a valid regular expression.
        """
        if v is None:
            return v
        try:
            re.compile(v)
        except re.error as e:
            raise ValidationError(
                f"Invalid error_if pattern {v!r}: {e}",
                field="error_if",
                cause=e,
            ) from e
        return v

    def is_error(self, response: str) -> bool:
        """
        Check whether a response matches ``error_if``.

        Parameters
        ----------
        response : str
            Final assistant response.

        Returns
        -------
        bool
            True if ``error_if`` is set and found anywhere in the response.
        """
        if not self.error_if:
            return False
        return re.search(self.error_if, response) is not None

    def resolve_prompt(self, cwd: Path) -> str | None:
        """
        Return the prompt text, reading ``prompt_file`` if set.

        Parameters
        ----------
        cwd : Path
            Directory relative prompt files are resolved against.

        Returns
        -------
        str | None
            Prompt text, or None if the recipe defines neither field.

        Raises
        ------
        ConfigurationError
            If ``prompt_file`` cannot be read.
        """
        if self.prompt_file:
            path: Path = Path(self.prompt_file)
            if not path.is_absolute():
                path = cwd / path
            try:
                return path.read_text(encoding="utf-8")
            except OSError as e:
                raise ConfigurationError(
                    f"Failed to read recipe prompt file {path}: {e}",
                    config_key="prompt_file",
                    cause=e,
                ) from e
        return self.prompt


class ShellEnvironmentPolicy(BaseModel):
    """
    Policy for the environment passed to shell commands and hooks.

    Parameters
    ----------
    ignore_default_excludes : bool, default=False
        Pass the environment through unfiltered.
    exclude_patterns : list[str], default=["*KEY*", "*TOKEN*", "*SECRET*"]
        Case-insensitive glob patterns of variable names to drop.
    set_vars : dict[str, str], default={}
        Variables to set explicitly.
    """

    ignore_default_excludes: bool = Field(
        default=False,
        description="Ignore default exclusion patterns",
    )
    exclude_patterns: list[str] = Field(
        default_factory=lambda: ["*KEY*", "*TOKEN*", "*SECRET*"],
        description="Patterns to exclude from environment",
    )
    set_vars: dict[str, str] = Field(
        default_factory=dict,
        description="Environment variables to set",
    )


class HookTrigger(str, Enum):
    """Trigger points for audit hook commands."""

    BEFORE_TOOL = "before_tool"
    AFTER_TOOL = "after_tool"


class HookConfig(BaseModel):
    """
    An audit command run around every tool call.

    Parameters
    ----------
    name : str
        Unique name for the hook.
    trigger : HookTrigger
        Whether the hook runs before or after the tool.
    command : str | None, optional
        Shell command to execute.
    script : str | None, optional
        Inline bash script body to execute.
    timeout_sec : float, default=30.0
        Maximum execution time in seconds.
    enabled : bool, default=True
        Whether the hook is enabled.

    Examples
    --------
    >>> HookConfig(
    ...     name="audit",
    ...     trigger=HookTrigger.AFTER_TOOL,
    ...     command="echo \"$PICOCODE_TOOL_NAME\" >> audit.log",
    ... )
    """

    name: str = Field(description="Hook name")
    trigger: HookTrigger = Field(description="When to execute hook")
    command: str | None = Field(default=None, description="Command to execute")
    script: str | None = Field(default=None, description="Inline script body")
    timeout_sec: float = Field(
        default=30.0,
        ge=0.0,
        description="Execution timeout in seconds",
    )
    enabled: bool = Field(default=True, description="Whether hook is enabled")

    @model_validator(mode="after")
    def validate_hook(self) -> HookConfig:
        """
        Require exactly one of ``command`` or ``script``.

        Returns
        -------
        HookConfig
            The validated configuration.

        Raises
        ------
        ValidationError
            If neither or both are provided.
        """
        if not self.command and not self.script:
            raise ValidationError(
                "Hook must have either 'command' or 'script'",
                field="hook",
            )
        if self.command and self.script:
            raise ValidationError(
                "Hook cannot have both 'command' and 'script'",
                field="hook",
            )
        return self


class Configuration(BaseModel):
    """
    Main configuration model for picocode.

    The sandbox root is ``cwd``. It is fixed when the configuration is
    loaded and every tool resolves paths against it.

    Parameters
    ----------
    cwd : Path, optional
        Working directory and sandbox root. Defaults to the process cwd.
    provider : str, default="anthropic"
        Completion provider name.
    model : str | None, optional
        Model name. None selects the provider's default.
    yolo : bool, default=False
        Approve every guarded call without prompting.
    use_bash : bool, default=False
        Register the guarded ``bash`` tool.
    quiet : bool, default=False
        Suppress interactive rendering.
    tool_call_limit : int, default=50
        Maximum tool-call rounds per turn.
    persona : str | None, optional
        Builtin persona name or path to a persona file.
    agent_prompt : str | None, optional
        Extra system prompt text.
    agent_prompt_file : str | None, optional
        File whose contents replace ``agent_prompt``.
    tool_config : dict[str, ToolSettings], default={}
        Per-tool settings keyed by tool name.
    recipes : dict[str, Recipe], default={}
        Named single-shot runs.
    shell_environment : ShellEnvironmentPolicy, optional
        Environment filtering for shell commands and hooks.
    hooks_enabled : bool, default=False
        Whether audit hooks run.
    hooks : list[HookConfig], default=[]
        Audit hook definitions.
    developer_instructions : str | None, optional
        Contents of ``AGENTS.md``.
    debug : bool, default=False
        Enable debug logging.

    Examples
    --------
    >>> config = Configuration(provider="openai", use_bash=True)
    >>> config.auto_allow_for("bash")
    []
    """

    cwd: Path = Field(
        default_factory=Path.cwd,
        description="Working directory and sandbox root",
    )
    provider: str = Field(default=DEFAULT_PROVIDER, description="Provider name")
    model: str | None = Field(default=None, description="Model name")
    yolo: bool = Field(default=False, description="Approve everything")
    use_bash: bool = Field(default=False, description="Enable the bash tool")
    quiet: bool = Field(default=False, description="Quiet output")
    tool_call_limit: int = Field(
        default=DEFAULT_TOOL_CALL_LIMIT,
        ge=1,
        description="Maximum tool-call rounds per turn",
    )
    persona: str | None = Field(default=None, description="Persona name or file")
    agent_prompt: str | None = Field(default=None, description="Agent prompt")
    agent_prompt_file: str | None = Field(
        default=None,
        description="Agent prompt file",
    )
    tool_config: dict[str, ToolSettings] = Field(
        default_factory=dict,
        description="Per-tool settings",
    )
    recipes: dict[str, Recipe] = Field(
        default_factory=dict,
        description="Named recipes",
    )
    shell_environment: ShellEnvironmentPolicy = Field(
        default_factory=ShellEnvironmentPolicy,
        description="Shell environment policy",
    )
    hooks_enabled: bool = Field(default=False, description="Whether hooks run")
    hooks: list[HookConfig] = Field(
        default_factory=list,
        description="Hook configurations",
    )
    developer_instructions: str | None = Field(
        default=None,
        description="Contents of AGENTS.md",
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    @field_validator("provider")
    @classmethod
    def normalize_provider(cls, v: str) -> str:
        return v.strip().lower()

    def auto_allow_for(self, tool_name: str) -> list[str]:
        """
        Get the auto-approval patterns configured for a tool.

        Parameters
        ----------
        tool_name : str
            Tool name as exposed to the model.

        Returns
        -------
        list[str]
            Patterns in configuration order, empty if none.
        """
        settings: ToolSettings | None = self.tool_config.get(tool_name)
        if settings is None:
            return []
        return list(settings.auto_allow)

    def get_recipe(self, name: str) -> Recipe:
        """
        Look up a recipe by name.

        Parameters
        ----------
        name : str
            Recipe name.

        Returns
        -------
        Recipe
            The recipe.

        Raises
        ------
        ConfigurationError
            If no recipe has that name.
        """
        recipe: Recipe | None = self.recipes.get(name)
        if recipe is None:
            available: str = ", ".join(sorted(self.recipes)) or "none"
            raise ConfigurationError(
                f"Unknown recipe: {name} (available: {available})",
                config_key="recipes",
            )
        return recipe

    def validate(self) -> list[str]:
        """
        Validate the configuration and return any errors.

        Returns
        -------
        list[str]
            List of error messages. Empty list if configuration is valid.
        """
        errors: list[str] = []

        if not self.cwd.is_absolute():
            errors.append(f"Working directory must be absolute: {self.cwd}")

        if not self.cwd.is_dir():
            errors.append(f"Working directory does not exist: {self.cwd}")

        return errors

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
