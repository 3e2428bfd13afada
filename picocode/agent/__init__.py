"""
Agent, engine and session handling for picocode.
"""

from picocode.agent.agent import CodeAgent, build_agent, build_registry
from picocode.agent.engine import ToolCallingEngine
from picocode.agent.history import ConversationHistory, MessageItem
from picocode.agent.modes import AgentMode, SessionAction, SessionActionKind, interpret_line

__all__ = [
    "CodeAgent",
    "build_agent",
    "build_registry",
    "ToolCallingEngine",
    "ConversationHistory",
    "MessageItem",
    "AgentMode",
    "SessionAction",
    "SessionActionKind",
    "interpret_line",
]
