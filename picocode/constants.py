"""
Application-wide constants for picocode.

This module defines constants used throughout the application to ensure
consistency and maintainability.
"""

# Configuration file names
CONFIG_FILE_NAME: str = "config.toml"
PROJECT_CONFIG_FILE_NAME: str = "picocode.toml"
AGENTS_MD_FILE_NAME: str = "AGENTS.md"
GITIGNORE_FILE_NAME: str = ".gitignore"

# Application directories
APP_NAME: str = "picocode"

# Default values
DEFAULT_MAX_RETRIES: int = 3
DEFAULT_RETRY_BASE_DELAY: float = 1.0
DEFAULT_RETRY_MAX_DELAY: float = 60.0
DEFAULT_TOOL_CALL_LIMIT: int = 50
DEFAULT_PROVIDER: str = "anthropic"

# Session commands
DEFAULT_PLAN_FILE_NAME: str = "plan.md"
IMPLEMENT_DIRECTIVE: str = "Implement the plan."

# Guard
CONFIRM_PREVIEW_LENGTH: int = 50
CANCELLED_MESSAGE: str = "Action cancelled by user"
SANDBOX_VIOLATION_MESSAGE: str = "Access denied: path must be within the current directory"

# Tool output
GREP_MAX_MATCHES: int = 50
EMPTY_OUTPUT: str = "(empty)"
NO_MATCHES: str = "none"

# File operations
DEFAULT_ENCODING: str = "utf-8"
DEFAULT_BINARY_CHECK_CHUNK_SIZE: int = 8192
SKIPPED_DIRECTORIES: frozenset[str] = frozenset(
    {"node_modules", "__pycache__", ".git", ".venv", "venv"},
)

# Hooks
HOOK_ENV_PREFIX: str = "PICOCODE_"
