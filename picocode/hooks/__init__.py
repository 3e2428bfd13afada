"""
Tool dispatch hooks for picocode.
"""

from picocode.hooks.dispatch import (
    CompositeHook,
    DisplayHook,
    NullHook,
    ToolDispatchHook,
    safe_dispatch,
)
from picocode.hooks.system import CommandHook

__all__ = [
    "ToolDispatchHook",
    "safe_dispatch",
    "NullHook",
    "DisplayHook",
    "CompositeHook",
    "CommandHook",
]
