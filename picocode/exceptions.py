"""
Exception hierarchy for picocode.

Every error raised by the package derives from :class:`PicocodeError`, which
carries an error code, structured details and an optional cause so that the
CLI can report failures uniformly and tests can match on the code.
"""

from typing import Any
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for categorizing exceptions."""

    UNKNOWN = "UNKNOWN"
    CONFIGURATION = "CONFIGURATION"
    CONNECTION = "CONNECTION"
    API = "API"
    VALIDATION = "VALIDATION"
    RATE_LIMIT = "RATE_LIMIT"
    SANDBOX = "SANDBOX"
    ROUND_LIMIT = "ROUND_LIMIT"


class PicocodeError(Exception):
    """
    Base exception class for all picocode errors.

    Parameters
    ----------
    message : str
        Human-readable error message.
    error_code : ErrorCode, default=ErrorCode.UNKNOWN
        Categorization code for the error.
    details : dict[str, Any] | None, optional
        Additional context about the error.
    cause : Exception | None, optional
        The underlying exception that caused this error.

    Attributes
    ----------
    message : str
        The error message.
    error_code : ErrorCode
        The error code categorizing this error.
    details : dict[str, Any]
        Additional error context.
    cause : Exception | None
        The underlying exception, if any.

    Examples
    --------
    >>> raise PicocodeError("Something went wrong")
    >>> raise PicocodeError(
    ...     "Bad provider",
    ...     ErrorCode.CONFIGURATION,
    ...     details={"provider": "acme"},
    ... )
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message: str = message
        self.error_code: ErrorCode = error_code
        self.details: dict[str, Any] = details or {}
        self.cause: Exception | None = cause

    def __str__(self) -> str:
        """
        Return the message with its code, details and cause.

        Returns
        -------
        str
            Formatted error string.
        """
        parts: list[str] = [f"[{self.error_code.value}] {self.message}"]
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"Details: {detail_str}")
        if self.cause:
            parts.append(f"Caused by: {type(self.cause).__name__}: {self.cause}")
        return " | ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code.value!r}, "
            f"details={self.details!r}, "
            f"cause={self.cause!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize the error to a dictionary.

        Returns
        -------
        dict[str, Any]
            Dictionary with type, code, message, details and cause.
        """
        result: dict[str, Any] = {
            "type": self.__class__.__name__,
            "error_code": self.error_code.value,
            "message": self.message,
            "details": self.details,
        }
        if self.cause:
            result["cause"] = {
                "type": type(self.cause).__name__,
                "message": str(self.cause),
            }
        return result


class ConfigurationError(PicocodeError):
    """
    Raised when configuration cannot be loaded or is inconsistent.

    Covers unreadable or malformed TOML, unknown providers, missing API keys,
    unknown recipes and unreadable persona or prompt files. These errors are
    fatal at startup.

    Parameters
    ----------
    message : str
        Human-readable error message.
    config_key : str | None, optional
        The configuration key that caused the error.
    config_file : str | None, optional
        The configuration file path where the error occurred.
    details : dict[str, Any] | None, optional
        Additional context about the error.
    cause : Exception | None, optional
        The underlying exception that caused this error.

    Examples
    --------
    >>> raise ConfigurationError("Unknown provider: acme", config_key="provider")
    """

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        config_file: str | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        details = details or {}
        if config_key:
            details["config_key"] = config_key
        if config_file:
            details["config_file"] = config_file
        super().__init__(
            message,
            error_code=ErrorCode.CONFIGURATION,
            details=details,
            cause=cause,
        )
        self.config_key: str | None = config_key
        self.config_file: str | None = config_file


class ConnectionError(PicocodeError):
    """
    Raised when the completion endpoint cannot be reached.

    Parameters
    ----------
    message : str
        Human-readable error message.
    endpoint : str | None, optional
        The endpoint that failed to connect.
    details : dict[str, Any] | None, optional
        Additional context about the error.
    cause : Exception | None, optional
        The underlying exception that caused this error.
    """

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        details = details or {}
        if endpoint:
            details["endpoint"] = endpoint
        super().__init__(
            message,
            error_code=ErrorCode.CONNECTION,
            details=details,
            cause=cause,
        )
        self.endpoint: str | None = endpoint


class APIError(PicocodeError):
    """
    Raised when the completion endpoint rejects a request.

    Parameters
    ----------
    message : str
        Human-readable error message.
    status_code : int | None, optional
        HTTP status code if applicable.
    details : dict[str, Any] | None, optional
        Additional context about the error.
    cause : Exception | None, optional
        The underlying exception that caused this error.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        details = details or {}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(
            message,
            error_code=ErrorCode.API,
            details=details,
            cause=cause,
        )
        self.status_code: int | None = status_code


class RateLimitError(APIError):
    """
    Raised when the provider keeps rate limiting after all retries.

    Parameters
    ----------
    message : str
        Human-readable error message.
    retry_after : float | None, optional
        Suggested time in seconds to wait before retrying.
    details : dict[str, Any] | None, optional
        Additional context about the error.
    cause : Exception | None, optional
        The underlying exception that caused this error.
    """

    def __init__(
        self,
        message: str,
        retry_after: float | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        details = details or {}
        if retry_after is not None:
            details["retry_after"] = retry_after
        super().__init__(
            message,
            status_code=429,
            details=details,
            cause=cause,
        )
        self.error_code = ErrorCode.RATE_LIMIT
        self.retry_after: float | None = retry_after


class ValidationError(PicocodeError):
    """
    Raised when a value fails validation.

    Parameters
    ----------
    message : str
        Human-readable error message.
    field : str | None, optional
        The field that failed validation.
    details : dict[str, Any] | None, optional
        Additional context about the error.
    cause : Exception | None, optional
        The underlying exception that caused this error.

    Examples
    --------
    >>> raise ValidationError("tool_call_limit must be >= 1", field="tool_call_limit")
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(
            message,
            error_code=ErrorCode.VALIDATION,
            details=details,
            cause=cause,
        )
        self.field: str | None = field


class SandboxViolation(PicocodeError):
    """
    Raised when a requested path resolves outside the sandbox root.

    Parameters
    ----------
    message : str
        Human-readable error message shown to the model.
    requested : str | None, optional
        The path as the caller supplied it.
    root : str | None, optional
        The sandbox root it was resolved against.

    Examples
    --------
    >>> raise SandboxViolation(
    ...     "Access denied: path must be within the current directory",
    ...     requested="../etc/passwd",
    ...     root="/work",
    ... )
    """

    def __init__(
        self,
        message: str,
        requested: str | None = None,
        root: str | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if requested is not None:
            details["requested"] = requested
        if root is not None:
            details["root"] = root
        super().__init__(message, error_code=ErrorCode.SANDBOX, details=details)
        self.requested: str | None = requested
        self.root: str | None = root

    def __str__(self) -> str:
        return self.message


class RoundLimitError(PicocodeError):
    """
    Raised when a turn would need more tool-call rounds than allowed.

    The requests of the round that hit the limit are never executed.

    Parameters
    ----------
    max_rounds : int
        The configured round cap.
    last_text : str, default=""
        Most recent assistant text produced during the turn.
    """

    def __init__(self, max_rounds: int, last_text: str = "") -> None:
        super().__init__(
            f"Tool call limit reached ({max_rounds} rounds). "
            "Consider breaking the task into smaller steps.",
            error_code=ErrorCode.ROUND_LIMIT,
            details={"max_rounds": max_rounds},
        )
        self.max_rounds: int = max_rounds
        self.last_text: str = last_text
