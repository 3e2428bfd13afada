"""
Configuration loader for picocode.

This module loads and merges configuration from the user-wide config file,
the project config file, ``AGENTS.md`` and command-line overrides.
"""

import logging
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]

from picocode.config.schema import Configuration
from picocode.constants import (
    AGENTS_MD_FILE_NAME,
    APP_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_ENCODING,
    PROJECT_CONFIG_FILE_NAME,
)
from picocode.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def get_config_dir() -> Path:
    """
    Get the user-wide configuration directory.

    Returns
    -------
    Path
        Path to the configuration directory.
    """
    return Path(user_config_dir(APP_NAME))


def get_system_config_path() -> Path:
    """
    Get the path to the user-wide configuration file.

    Returns
    -------
    Path
        Path to ``config.toml`` inside :func:`get_config_dir`.

    Examples
    --------
    >>> config_path = get_system_config_path()
    >>> if config_path.exists():
    ...     print(f"Found config at: {config_path}")
    """
    return get_config_dir() / CONFIG_FILE_NAME


def _parse_toml(path: Path) -> dict[str, Any]:
    """
    Parse a TOML configuration file.

    Parameters
    ----------
    path : Path
        Path to the TOML file to parse.

    Returns
    -------
    dict[str, Any]
        Parsed configuration as a dictionary.

    Raises
    ------
    ConfigurationError
        If the file cannot be read or contains invalid TOML.
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(
            f"Invalid TOML in {path}: {e}",
            config_file=str(path),
            cause=e,
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read config file {path}: {e}",
            config_file=str(path),
            cause=e,
        ) from e


def _get_project_config(cwd: Path) -> Path | None:
    """
    Find the project configuration file in the working directory.

    Parameters
    ----------
    cwd : Path
        Working directory to look in.

    Returns
    -------
    Path | None
        Path to ``picocode.toml`` if present, None otherwise.
    """
    config_file: Path = cwd / PROJECT_CONFIG_FILE_NAME
    if config_file.is_file():
        return config_file
    return None


def _get_agents_md_content(cwd: Path) -> str | None:
    """
    Read ``AGENTS.md`` from the working directory if it exists.

    Parameters
    ----------
    cwd : Path
        Working directory to look in.

    Returns
    -------
    str | None
        File content, or None if missing, empty or unreadable.
    """
    agents_md_file: Path = cwd / AGENTS_MD_FILE_NAME
    if not agents_md_file.is_file():
        return None

    try:
        content: str = agents_md_file.read_text(encoding=DEFAULT_ENCODING)
    except OSError as e:
        logger.warning(f"Failed to read {agents_md_file}: {e}", exc_info=True)
        return None

    return content if content.strip() else None


def _merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Recursively merge two dictionaries, ``override`` winning.

    Parameters
    ----------
    base : dict[str, Any]
        Base dictionary to merge into.
    override : dict[str, Any]
        Dictionary with values that override base.

    Returns
    -------
    dict[str, Any]
        Merged dictionary.

    Examples
    --------
    >>> _merge_dicts({"a": 1, "b": {"c": 2}}, {"b": {"d": 3}})
    {'a': 1, 'b': {'c': 2, 'd': 3}}
    """
    result: dict[str, Any] = base.copy()
    for key, value in override.items():
        if (
            key in result
            and isinstance(result[key], dict)
            and isinstance(value, dict)
        ):
            result[key] = _merge_dicts(result[key], value)
        else:
            result[key] = value

    return result


def load_configuration(
    cwd: Path | None = None,
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Configuration:
    """
    Load configuration from all sources.

    Sources are merged in this order, later ones winning:

    1. User-wide ``config.toml`` (skipped with a warning if invalid)
    2. Project ``picocode.toml`` in ``cwd``, or ``config_path`` if given
    3. ``AGENTS.md`` in ``cwd`` as ``developer_instructions``
    4. ``overrides`` (values that are None are ignored)

    Parameters
    ----------
    cwd : Path | None, optional
        Working directory and sandbox root. Defaults to the process cwd.
    config_path : Path | None, optional
        Explicit project configuration file.
    overrides : dict[str, Any] | None, optional
        Values from the command line.

    Returns
    -------
    Configuration
        Loaded and validated configuration.

    Raises
    ------
    ConfigurationError
        If the project file is invalid, ``config_path`` does not exist, or
        the merged configuration fails validation.

    Examples
    --------
    >>> config = load_configuration()
    >>> config = load_configuration(overrides={"provider": "openai", "yolo": True})
    """
    cwd = (cwd or Path.cwd()).absolute()
    config_dict: dict[str, Any] = {}

    system_path: Path = get_system_config_path()
    if system_path.is_file():
        try:
            config_dict = _parse_toml(system_path)
            logger.debug(f"Loaded system config from {system_path}")
        except ConfigurationError as e:
            logger.warning(f"Skipping invalid system config {system_path}: {e}")

    if config_path is not None:
        if not config_path.is_file():
            raise ConfigurationError(
                f"Config file not found: {config_path}",
                config_file=str(config_path),
            )
        project_path: Path | None = config_path
    else:
        project_path = _get_project_config(cwd)

    if project_path:
        config_dict = _merge_dicts(config_dict, _parse_toml(project_path))
        logger.debug(f"Loaded project config from {project_path}")

    # The sandbox root is always the startup directory
    config_dict["cwd"] = str(cwd)

    if "developer_instructions" not in config_dict:
        agents_md: str | None = _get_agents_md_content(cwd)
        if agents_md:
            config_dict["developer_instructions"] = agents_md
            logger.debug(f"Loaded {AGENTS_MD_FILE_NAME} from {cwd}")

    if overrides:
        config_dict = _merge_dicts(
            config_dict,
            {k: v for k, v in overrides.items() if v is not None},
        )

    try:
        config: Configuration = Configuration(**config_dict)
    except Exception as e:
        raise ConfigurationError(f"Invalid configuration: {e}", cause=e) from e

    validation_errors: list[str] = config.validate()
    if validation_errors:
        error_msg: str = "Configuration validation failed:\n" + "\n".join(
            f"  - {err}" for err in validation_errors
        )
        raise ConfigurationError(error_msg)

    logger.debug(f"Configuration loaded for {cwd}")
    return config
