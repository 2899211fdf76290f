"""Tool UI Agent placeholder."""

from ..core.agent_protocol import BaseAgent
from ..schemas import (
    AgentDescriptor,
    AgentId,
    Response,
    ResponseKind,
    SessionState,
    ToolDescriptor,
)

ACKNOWLEDGEMENT = "Tool UI Agent ready!"


class ToolUIAgent(BaseAgent):
    """Minimal agent that acknowledges every message."""

    def __init__(self, descriptor: AgentDescriptor | None = None):
        if descriptor is None:
            descriptor = self._create_default_descriptor()
        super().__init__(descriptor)

    @classmethod
    def create_default(cls) -> "ToolUIAgent":
        """Create a ToolUIAgent with default configuration."""
        return cls()

    @staticmethod
    def _create_default_descriptor() -> AgentDescriptor:
        return AgentDescriptor(
            id=AgentId.TOOL_UI,
            display_name="Tool-based UI",
            description="Specialized tools for forms, charts and widgets",
            capabilities=frozenset({"form_building", "chart_building", "widget_tools"}),
        )

    def get_system_prompt(self) -> str:
        return (
            "You are a Tool-based Generative UI AI agent that creates dynamic "
            "user interfaces using specialized tools."
        )

    def get_tools(self) -> list[ToolDescriptor]:
        return []

    async def _generate_response(self, message: str, session: SessionState) -> Response:
        return self.create_response(ACKNOWLEDGEMENT, ResponseKind.TEXT)
