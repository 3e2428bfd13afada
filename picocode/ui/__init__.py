"""
Terminal output for picocode.
"""

from picocode.ui.output import ConsoleOutput, LogOutput, NoOutput, Output, QuietOutput

__all__ = ["Output", "ConsoleOutput", "QuietOutput", "NoOutput", "LogOutput"]
