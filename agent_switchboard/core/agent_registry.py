"""Agent registry mapping agent ids to agent instances.

The router holds one registry built at startup; it is the authority on which
agent ids are known.
"""

import logging

from .agent_protocol import AgentProtocol


logger = logging.getLogger(__name__)


class UnknownAgentError(ValueError):
    """Raised when an agent id is not registered."""

    def __init__(self, agent_id: str, known: list[str] | None = None):
        """Initialize with the rejected id and the known ids."""
        self.agent_id = agent_id
        self.known = known or []
        message = f"Agent '{agent_id}' is not available"
        if self.known:
            message += f". Known agents: {', '.join(self.known)}"
        super().__init__(message)


class AgentRegistry:
    """Id-to-instance map with strict lookup for unknown ids."""

    def __init__(self):
        """Initialize empty registry."""
        self._agents: dict[str, AgentProtocol] = {}

    def __contains__(self, agent_id: object) -> bool:
        """Whether an agent id is registered."""
        return isinstance(agent_id, str) and agent_id in self._agents

    def __len__(self) -> int:
        """Number of registered agents."""
        return len(self._agents)

    def register(self, agent: AgentProtocol) -> None:
        """Register an agent under its id.

        Raises:
            ValueError: If an agent with the same id is already registered

        """
        agent_id = str(agent.get_id())
        if agent_id in self._agents:
            raise ValueError(f"Agent '{agent_id}' is already registered")

        self._agents[agent_id] = agent
        logger.info(f"Registered agent '{agent_id}'")

    def get_agent(self, agent_id: str) -> AgentProtocol | None:
        """Get agent by id, or None if not found."""
        return self._agents.get(agent_id)

    def require(self, agent_id: str) -> AgentProtocol:
        """Get agent by id.

        Raises:
            UnknownAgentError: If the id is not registered

        """
        agent = self._agents.get(agent_id)
        if agent is None:
            raise UnknownAgentError(agent_id, self.list_agent_ids())
        return agent

    def list_agents(self) -> list[AgentProtocol]:
        """Registered agents in registration order."""
        return list(self._agents.values())

    def list_agent_ids(self) -> list[str]:
        """Ids of registered agents in registration order."""
        return list(self._agents.keys())
