"""Standardized agent protocol interface.

This module defines the contract every agent variant implements so the
router can dispatch to any of them without knowing which one it holds.
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from ..schemas import (
    AgentDescriptor,
    AgentId,
    Response,
    ResponseKind,
    SessionState,
    ToolDescriptor,
)


logger = logging.getLogger(__name__)


INVALID_INPUT_MESSAGE = "I didn't receive a valid message. Could you please try again?"


@runtime_checkable
class AgentProtocol(Protocol):
    """Standard protocol that all agents must implement.

    ``process`` is the only operation with side effects and must never raise.
    """

    def get_id(self) -> AgentId:
        """Return the agent id."""
        ...

    def get_display_name(self) -> str:
        """Return the human readable agent name."""
        ...

    def get_description(self) -> str:
        """Return the agent description."""
        ...

    def get_capabilities(self) -> frozenset[str]:
        """Return the declared capabilities."""
        ...

    def get_descriptor(self) -> AgentDescriptor:
        """Return the immutable descriptor."""
        ...

    def get_system_prompt(self) -> str:
        """Return the instructions handed to the completion service."""
        ...

    def get_tools(self) -> list[ToolDescriptor]:
        """Return the tools the completion service may invoke."""
        ...

    async def process(self, message: str, session: SessionState) -> Response:
        """Turn a message and session state into a response.

        Args:
            message: Raw user message
            session: Snapshot of the router's session state

        Returns:
            Response; failures are reported through ``metadata["error"]``

        """
        ...

    def get_health_status(self) -> dict[str, Any]:
        """Return agent health and usage counters."""
        ...

    def close(self) -> None:
        """Release resources held outside the agent, such as subscriptions."""
        ...


class BaseAgent(ABC):
    """Abstract base class for agent implementations.

    Subclasses provide ``get_system_prompt``, ``get_tools`` and
    ``_generate_response``; input validation and failure conversion happen
    here.
    """

    def __init__(self, descriptor: AgentDescriptor):
        """Initialize agent with its descriptor."""
        self.descriptor = descriptor
        self._calls = 0
        self._failures = 0
        self._last_error: str | None = None

    # Descriptor accessors

    def get_id(self) -> AgentId:
        """Get agent id."""
        return self.descriptor.id

    def get_display_name(self) -> str:
        """Get agent display name."""
        return self.descriptor.display_name

    def get_description(self) -> str:
        """Get agent description."""
        return self.descriptor.description

    def get_capabilities(self) -> frozenset[str]:
        """Get agent capabilities."""
        return self.descriptor.capabilities

    def get_descriptor(self) -> AgentDescriptor:
        """Get the immutable descriptor."""
        return self.descriptor

    @abstractmethod
    def get_system_prompt(self) -> str:
        """Instructions for the completion service."""

    @abstractmethod
    def get_tools(self) -> list[ToolDescriptor]:
        """Tools declared to the completion service."""

    @abstractmethod
    async def _generate_response(self, message: str, session: SessionState) -> Response:
        """Variant-specific response generation for a validated message."""

    async def process(self, message: str, session: SessionState) -> Response:
        """Validate input, generate a response and convert failures."""
        if not self.validate_input(message):
            return self.create_response(INVALID_INPUT_MESSAGE, ResponseKind.TEXT)

        self._calls += 1
        try:
            response = await self._generate_response(message, session)
        except Exception as e:
            return self.handle_error(e, message)

        self._last_error = None
        return response

    def get_health_status(self) -> dict[str, Any]:
        """Return agent health and usage counters."""
        return {
            "id": str(self.get_id()),
            "name": self.get_display_name(),
            "healthy": self._last_error is None,
            "enabled": self.descriptor.enabled,
            "calls": self._calls,
            "failures": self._failures,
            "last_error": self._last_error,
            "capabilities": sorted(self.get_capabilities()),
        }

    def close(self) -> None:
        """Release external resources. Nothing to release by default."""

    # Helpers shared by variants

    def create_response(
        self,
        content: str,
        kind: ResponseKind = ResponseKind.TEXT,
        metadata: dict[str, Any] | None = None,
    ) -> Response:
        """Create a response stamped with the agent identity."""
        return Response(
            content=content,
            kind=kind,
            metadata={
                "agent_id": str(self.get_id()),
                "timestamp": datetime.now().isoformat(),
                **(metadata or {}),
            },
        )

    @staticmethod
    def validate_input(message: Any) -> bool:
        """A message is valid when it is a non-blank string."""
        return isinstance(message, str) and len(message.strip()) > 0

    @staticmethod
    def enhance_message(message: str, session: SessionState, window: int = 3) -> str:
        """Append session context and recent conversation to a message."""
        enhanced = message

        if session.context:
            enhanced += (
                f"\n\nContext: {json.dumps(session.context, indent=2, default=str)}"
            )

        recent = session.history[-window:] if window > 0 else []
        if recent:
            history = "\n".join(f"{m.role}: {m.content}" for m in recent)
            enhanced += f"\n\nRecent conversation:\n{history}"

        return enhanced

    def handle_error(self, error: Exception, message: str) -> Response:
        """Convert an internal failure into an error response."""
        self._failures += 1
        self._last_error = str(error) or type(error).__name__
        logger.error(f"[{self.get_display_name()}] Error processing message: {error}")

        return self.create_response(
            f"I encountered an error while processing your request: {message}. "
            "Please try again.",
            ResponseKind.TEXT,
            {
                "error": True,
                "error_detail": self._last_error,
                "original_message": message,
            },
        )


class AgentExecutionError(Exception):
    """Exception raised when an agent fails to produce a response."""

    def __init__(
        self,
        agent_id: str,
        message: str,
        cause: Exception | None = None,
    ):
        """Initialize with agent context."""
        self.agent_id = agent_id
        self.cause = cause
        super().__init__(f"Agent {agent_id} failed: {message}")
