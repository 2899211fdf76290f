"""Agent router owning one conversation session.

The router is a state machine over a single variable, the active agent id.
It dispatches messages to the active agent, records each exchange in the
session history, and offers non-binding agent suggestions.

Key Features:
- Explicit or suggestion-driven agent switching with provenance in context
- History recorded as user/assistant pairs with per-session message ids
- ``dispatch`` never raises; every failure becomes an error Response
"""

import copy
import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from ..config import SwitchboardSettings, get_settings
from ..integrations.completion_client import CompletionService
from ..schemas import (
    AgentId,
    AgentInfo,
    AgentSuggestion,
    Message,
    MessageRole,
    Response,
    ResponseKind,
    SessionState,
)
from ..utils.identifiers import SequentialIdFactory
from .agent_protocol import AgentProtocol, BaseAgent
from .agent_registry import AgentRegistry, UnknownAgentError
from .shared_state import SharedStateStore
from .suggestions import suggest_agent


logger = logging.getLogger(__name__)


# Context keys stamped on every agent switch
PREVIOUS_AGENT_KEY = "previous_agent"
SWITCH_TIME_KEY = "agent_switch_time"
SWITCH_REASON_KEY = "agent_switch_reason"


class AgentRouter:
    """Routes messages to the active agent and records the conversation."""

    def __init__(
        self,
        agents: Iterable[AgentProtocol] | None = None,
        store: SharedStateStore | None = None,
        settings: SwitchboardSettings | None = None,
        completion_service: CompletionService | None = None,
        auto_switch: bool | None = None,
    ):
        """Initialize router with its agents and a fresh session.

        Args:
            agents: Agent instances to register. When omitted, one instance of
                every variant is built around ``store``.
            store: Shared state store. A new one is created when omitted.
            settings: Router and agent settings; global settings when omitted.
            completion_service: Backend passed to agents built here.
            auto_switch: Override for ``settings.router.auto_switch``.

        """
        self.settings = settings or get_settings()
        self.store = store or SharedStateStore(self.settings.state.broadcast_log_size)

        if agents is None:
            # Imported here: the agents package depends on core
            from ..agents import build_default_agents

            agents = build_default_agents(self.store, completion_service, self.settings)

        self.registry = AgentRegistry()
        for agent in agents:
            self.registry.register(agent)

        self.default_agent_id = self.settings.router.default_agent
        if str(self.default_agent_id) not in self.registry:
            raise UnknownAgentError(
                str(self.default_agent_id), self.registry.list_agent_ids()
            )

        self.auto_switch = (
            self.settings.router.auto_switch if auto_switch is None else auto_switch
        )
        self.auto_switch_threshold = self.settings.router.auto_switch_threshold

        self._message_ids = SequentialIdFactory("msg")
        self.state = SessionState(active_agent_id=self.default_agent_id)

        logger.info(
            f"Router initialized with {len(self.registry)} agents "
            f"(default: {self.default_agent_id}, auto_switch: {self.auto_switch})"
        )

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def dispatch(
        self, message: str, target_agent_id: str | None = None
    ) -> Response:
        """Send a message to the active (or requested) agent.

        Args:
            message: User message text
            target_agent_id: Agent to switch to before processing

        Returns:
            The agent's response, or an error response; never raises

        """
        try:
            if target_agent_id is not None:
                if target_agent_id != self.state.active_agent_id:
                    self.switch_agent(target_agent_id, "Explicit agent selection")
            elif self.auto_switch and isinstance(message, str):
                self._maybe_auto_switch(message)

            self.state.is_processing = True
            agent = self.registry.require(str(self.state.active_agent_id))

            if not BaseAgent.validate_input(message):
                return await agent.process(message, self.get_state())

            self._append(MessageRole.USER, message, agent)
            response = await agent.process(message, self.get_state())
            self._append(MessageRole.ASSISTANT, response.content, agent, response.metadata)
            self.state.tools_snapshot = list(agent.get_tools())

            logger.info(
                f"Dispatched message to '{agent.get_id()}' "
                f"(history: {len(self.state.history)} messages)"
            )
            return response

        except Exception as e:
            logger.error(f"Dispatch failed: {e}")
            return Response(
                content=f"Sorry, I couldn't process your message: {e}",
                kind=ResponseKind.TEXT,
                metadata={
                    "error": True,
                    "error_detail": str(e),
                    "original_message": message,
                    "agent_id": str(self.state.active_agent_id),
                    "timestamp": datetime.now().isoformat(),
                },
            )
        finally:
            self.state.is_processing = False

    def _maybe_auto_switch(self, message: str) -> None:
        suggestion = self.suggest(message)
        if (
            suggestion is not None
            and suggestion.confidence > self.auto_switch_threshold
            and suggestion.suggested_agent_id != self.state.active_agent_id
            and str(suggestion.suggested_agent_id) in self.registry
        ):
            self.switch_agent(suggestion.suggested_agent_id, suggestion.reason)

    def _append(
        self,
        role: MessageRole,
        content: str,
        agent: AgentProtocol,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        self.state.history.append(
            Message(
                id=self._message_ids.next_id(),
                role=role,
                content=content,
                agent_tag=str(agent.get_id()),
                metadata=copy.deepcopy(metadata or {}),
            )
        )

    # ------------------------------------------------------------------
    # Agent selection
    # ------------------------------------------------------------------

    def switch_agent(self, agent_id: str, reason: str | None = None) -> None:
        """Make another known agent active.

        Raises:
            UnknownAgentError: If the id is not registered; state is unchanged

        """
        agent = self.registry.require(str(agent_id))
        previous = self.state.active_agent_id

        self.state.active_agent_id = AgentId(agent.get_id())
        self.state.context = {
            **self.state.context,
            PREVIOUS_AGENT_KEY: str(previous),
            SWITCH_TIME_KEY: datetime.now().isoformat(),
            SWITCH_REASON_KEY: reason or "User requested",
        }
        logger.info(f"Switched agent {previous} -> {agent.get_id()} ({reason or 'User requested'})")

    def suggest(self, message: str) -> AgentSuggestion | None:
        """Recommend an agent for a message without changing any state."""
        return suggest_agent(message)

    def get_current_agent_id(self) -> AgentId:
        """Id of the active agent."""
        return self.state.active_agent_id

    def list_available_agents(self) -> list[str]:
        """Ids of all registered agents."""
        return self.registry.list_agent_ids()

    def get_agent(self, agent_id: str) -> AgentProtocol | None:
        """Registered agent instance, or None."""
        return self.registry.get_agent(str(agent_id))

    def get_agent_descriptor(self, agent_id: str) -> AgentInfo | None:
        """Descriptor of one agent with availability flags."""
        agent = self.registry.get_agent(str(agent_id))
        if agent is None:
            return None
        return AgentInfo.from_descriptor(
            agent.get_descriptor(),
            is_available=True,
            is_current=agent.get_id() == self.state.active_agent_id,
        )

    def list_agent_descriptors(self) -> list[AgentInfo]:
        """Descriptors of all registered agents, in registration order."""
        return [
            self.get_agent_descriptor(agent_id)
            for agent_id in self.registry.list_agent_ids()
        ]

    # ------------------------------------------------------------------
    # Session state
    # ------------------------------------------------------------------

    def get_state(self) -> SessionState:
        """Deep copy of the session state."""
        return self.state.model_copy(deep=True)

    def update_context(self, key: str, value: Any) -> None:
        """Set one context entry, keeping the others."""
        self.state.context = {**self.state.context, key: value}

    def clear_context(self) -> None:
        """Drop all context entries."""
        self.state.context = {}

    def get_conversation_history(self, limit: int | None = None) -> list[Message]:
        """Recorded messages, oldest first; only the last ``limit`` when given."""
        history = list(self.state.history)
        if limit is not None:
            return history[-limit:] if limit > 0 else []
        return history

    def reset(self) -> None:
        """Return to the default agent with empty history and context."""
        self.state = SessionState(active_agent_id=self.default_agent_id)
        self._message_ids.reset()
        logger.info("Router session reset")

    def close(self) -> None:
        """Release agents' external resources such as store subscriptions."""
        for agent in self.registry.list_agents():
            agent.close()
        logger.info("Router closed")
