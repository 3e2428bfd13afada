"""
Console factory for creating rich console instances.
"""

from rich.console import Console

from picocode.ui.theme import PICOCODE_THEME

# Singleton console instances
_console: Console | None = None
_error_console: Console | None = None


def get_console() -> Console:
    """
    Get the shared stdout Console with the picocode theme.

    Returns
    -------
    Console
        Configured rich Console instance.

    Examples
    --------
    >>> console = get_console()
    >>> console.print("[highlight]picocode[/highlight]")
    """
    global _console
    if _console is None:
        _console = Console(theme=PICOCODE_THEME, highlight=False)
    return _console


def get_error_console() -> Console:
    """Get the shared stderr Console, used when stdout carries the answer."""
    global _error_console
    if _error_console is None:
        _error_console = Console(theme=PICOCODE_THEME, highlight=False, stderr=True)
    return _error_console
