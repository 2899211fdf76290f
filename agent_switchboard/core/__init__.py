"""Core switchboard components.

This module provides the agent contract, the agent registry, the router that
owns a conversation session, the suggestion heuristic and the shared state
store.
"""

from .agent_protocol import (
    INVALID_INPUT_MESSAGE,
    AgentExecutionError,
    AgentProtocol,
    BaseAgent,
)
from .agent_registry import AgentRegistry, UnknownAgentError
from .router import AgentRouter
from .shared_state import SharedStateStore
from .suggestions import SUGGESTION_RULES, SuggestionRule, suggest_agent


__all__ = [
    "INVALID_INPUT_MESSAGE",
    "SUGGESTION_RULES",
    "AgentExecutionError",
    "AgentProtocol",
    "AgentRegistry",
    "AgentRouter",
    "BaseAgent",
    "SharedStateStore",
    "SuggestionRule",
    "UnknownAgentError",
    "suggest_agent",
]
