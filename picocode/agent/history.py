"""
Conversation history for interactive sessions.

A history is an append-only list of messages. The conversation loop appends
a turn's messages only once the turn has produced them all, so a history
never ends with an assistant tool request that has no results.
"""

import logging
from typing import Any, Iterable, Iterator

from pydantic import BaseModel, Field

from picocode.llm.models import ToolCall
from picocode.types import MessageDict

logger = logging.getLogger(__name__)


class MessageItem(BaseModel):
    """
    Represents a single message in a conversation.

    Parameters
    ----------
    role : str
        Message role (user, assistant, tool).
    content : str, default=""
        Message content.
    tool_call_id : str | None, optional
        Tool call ID if this is a tool result message.
    tool_calls : list[dict[str, Any]], default=[]
        Tool calls if this is an assistant message requesting tools.

    Examples
    --------
    >>> MessageItem(role="user", content="Hello!").to_dict()
    {'role': 'user', 'content': 'Hello!'}
    """

    role: str = Field(description="Message role")
    content: str = Field(default="", description="Message content")
    tool_call_id: str | None = Field(default=None, description="Tool call ID")
    tool_calls: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Tool calls in this message",
    )

    @classmethod
    def user(cls, content: str) -> "MessageItem":
        return cls(role="user", content=content)

    @classmethod
    def assistant(
        cls,
        content: str,
        tool_calls: list[ToolCall] | None = None,
    ) -> "MessageItem":
        return cls(
            role="assistant",
            content=content,
            tool_calls=[call.to_message_dict() for call in tool_calls or []],
        )

    @classmethod
    def tool_result(cls, tool_call_id: str, content: str) -> "MessageItem":
        return cls(role="tool", content=content, tool_call_id=tool_call_id)

    def to_dict(self) -> MessageDict:
        """
        Convert the message to the chat completion API format.

        Returns
        -------
        MessageDict
            ``role`` plus whichever of ``tool_call_id``, ``tool_calls`` and
            ``content`` apply. Tool results always carry ``content``.
        """
        result: MessageDict = {"role": self.role}

        if self.tool_call_id:
            result["tool_call_id"] = self.tool_call_id

        if self.tool_calls:
            result["tool_calls"] = self.tool_calls

        if self.content or self.role != "assistant" or not self.tool_calls:
            result["content"] = self.content

        return result


class ConversationHistory:
    """
    Messages exchanged in earlier turns of a session.

    Examples
    --------
    >>> history = ConversationHistory()
    >>> history.extend([MessageItem.user("hi"), MessageItem.assistant("hello")])
    >>> len(history)
    2
    """

    def __init__(self) -> None:
        self._messages: list[MessageItem] = []

    @property
    def messages(self) -> list[MessageItem]:
        return list(self._messages)

    def append(self, item: MessageItem) -> None:
        self._messages.append(item)

    def extend(self, items: Iterable[MessageItem]) -> None:
        added: list[MessageItem] = list(items)
        self._messages.extend(added)
        logger.debug(f"History grew by {len(added)} messages to {len(self._messages)}")

    def to_messages(self) -> list[MessageDict]:
        return [item.to_dict() for item in self._messages]

    def clear(self) -> None:
        self._messages.clear()

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[MessageItem]:
        return iter(list(self._messages))
