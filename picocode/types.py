"""
Shared type aliases.
"""

from pathlib import Path
from typing import Any, Dict, List, Union

# One chat-completions message: {"role": ..., "content": ..., ...}
MessageDict = Dict[str, Any]

# OpenAI function schemas as sent in the ``tools`` request field
ToolDefinitions = List[Dict[str, Any]]

# Anything accepted where a filesystem path is expected
PathLike = Union[str, Path]
