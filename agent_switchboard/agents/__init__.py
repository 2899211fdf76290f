"""Agent variant implementations.

This package contains the closed set of agents the router dispatches to.
Each module implements the AgentProtocol for one ``AgentId``.
"""

from ..config import SwitchboardSettings
from ..core.agent_protocol import BaseAgent
from ..core.shared_state import SharedStateStore
from ..integrations.completion_client import CompletionService
from .conversational_agent import ConversationalAgent
from .coordination_agent import CoordinationAgent
from .creative_ui_agent import CreativeUIAgent
from .forecasting_agent import ForecastingAgent
from .oversight_agent import OversightAgent
from .tool_ui_agent import ToolUIAgent


def build_default_agents(
    store: SharedStateStore,
    completion_service: CompletionService | None = None,
    settings: SwitchboardSettings | None = None,
) -> list[BaseAgent]:
    """Construct one instance of every agent variant.

    Args:
        store: Shared state store handed to the coordination agent
        completion_service: Optional backend for the conversational agent
        settings: Agent limits; defaults are used when omitted

    Returns:
        Agents in ``AgentId`` order

    """
    agent_settings = settings.agents if settings else None

    conversational = (
        ConversationalAgent(
            completion_service=completion_service,
            memory_limit=agent_settings.conversation_memory_limit,
            context_window=agent_settings.context_window_messages,
        )
        if agent_settings
        else ConversationalAgent.create_default(completion_service)
    )
    oversight = (
        OversightAgent(title_word_limit=agent_settings.title_word_limit)
        if agent_settings
        else OversightAgent.create_default()
    )

    return [
        conversational,
        CreativeUIAgent.create_default(),
        oversight,
        ForecastingAgent.create_default(),
        CoordinationAgent.create_default(store),
        ToolUIAgent.create_default(),
    ]


__all__ = [
    "ConversationalAgent",
    "CoordinationAgent",
    "CreativeUIAgent",
    "ForecastingAgent",
    "OversightAgent",
    "ToolUIAgent",
    "build_default_agents",
]
