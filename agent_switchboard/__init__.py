"""Agent Switchboard - conversational agent routing and shared project state.

This package routes user messages to one of several specialized agents,
records the conversation, and coordinates a shared project/task model that
multiple agents read and mutate.

Core Components:
- core.router: AgentRouter owning one conversation session
- core.shared_state: SharedStateStore with change subscriptions and broadcasts
- core.suggestions: keyword heuristic recommending an agent for a message
- agents: the six agent variants and ``build_default_agents``
- integrations: completion service client (langchain-openai)
- schemas: pydantic models and enums
"""

from .agents import build_default_agents
from .config import SwitchboardSettings, get_settings
from .core import (
    AgentRegistry,
    AgentRouter,
    BaseAgent,
    SharedStateStore,
    UnknownAgentError,
    suggest_agent,
)
from .schemas import (
    AgentId,
    AgentSuggestion,
    Message,
    Response,
    ResponseKind,
    SessionState,
    SharedProject,
    Task,
    TaskStatus,
)

__version__ = "0.1.0"

__all__ = [
    "AgentId",
    "AgentRegistry",
    "AgentRouter",
    "AgentSuggestion",
    "BaseAgent",
    "Message",
    "Response",
    "ResponseKind",
    "SessionState",
    "SharedProject",
    "SharedStateStore",
    "SwitchboardSettings",
    "Task",
    "TaskStatus",
    "UnknownAgentError",
    "build_default_agents",
    "get_settings",
    "suggest_agent",
]
