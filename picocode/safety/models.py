"""
Data models for confirmation prompts.

This module defines the operator's possible answers to a confirmation
prompt and the request shown to them.
"""

from enum import Enum

from pydantic import BaseModel, Field


class Confirmation(str, Enum):
    """
    Operator answer to a confirmation prompt.

    Attributes
    ----------
    YES : str
        Run this one call.
    NO : str
        Refuse this one call. The model receives a cancellation error.
    ALWAYS : str
        Run this call and every later call through the same guard without
        asking again for the rest of the session.

    Examples
    --------
    >>> parse_confirmation("s")
    <Confirmation.ALWAYS: 'always'>
    """

    YES = "yes"
    NO = "no"
    ALWAYS = "always"


def parse_confirmation(answer: str) -> Confirmation:
    """
    Interpret a typed answer to a confirmation prompt.

    ``y``/``yes`` approve once, ``s``/``session`` approve for the session and
    anything else, including an empty line, refuses.

    Parameters
    ----------
    answer : str
        Raw line typed by the operator.

    Returns
    -------
    Confirmation
        The parsed answer.

    Examples
    --------
    >>> parse_confirmation(" Yes ")
    <Confirmation.YES: 'yes'>
    >>> parse_confirmation("")
    <Confirmation.NO: 'no'>
    """
    normalized: str = answer.strip().lower()
    if normalized in {"y", "yes"}:
        return Confirmation.YES
    if normalized in {"s", "session"}:
        return Confirmation.ALWAYS
    return Confirmation.NO


class ConfirmationRequest(BaseModel):
    """
    A request for operator approval of one tool call.

    Parameters
    ----------
    message : str
        Prompt text, e.g. ``Confirm tool BASH call?``.
    tool_name : str
        Name of the guarded tool.
    preview : str
        Short single-line preview of the call's arguments.

    Examples
    --------
    >>> request = ConfirmationRequest(
    ...     message="Confirm tool REMOVE call?",
    ...     tool_name="remove",
    ...     preview="build",
    ... )
    """

    message: str = Field(description="Prompt text")
    tool_name: str = Field(description="Name of the tool")
    preview: str = Field(default="", description="Argument preview")
