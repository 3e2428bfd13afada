"""
picocode theme definition for rich console styling.
"""

from rich.theme import Theme

PICOCODE_THEME = Theme(
    {
        # General styles
        "info": "cyan",
        "warning": "yellow",
        "error": "bright_red bold",
        "success": "green",
        "dim": "dim",
        "muted": "grey50",
        "border": "grey35",
        "highlight": "bold cyan",
        # Role styles
        "user": "bright_blue bold",
        "assistant": "cyan",
        "system": "bold dim",
        # Tool styles
        "tool": "green",
        "tool.name": "bold",
        "tool.error": "red",
        # Header styles
        "header.provider": "cyan",
        "header.model": "blue",
        "header.persona": "magenta",
        "header.bash": "green",
        "header.yolo": "red",
        "header.limit": "yellow",
    },
)
