"""Keyword-based agent suggestion heuristic.

Rules are checked in order and the first match wins. A message can match
several rules, so the order below is part of the observable behaviour.
"""

from pydantic import BaseModel, ConfigDict, Field

from ..schemas import AgentId, AgentSuggestion


class SuggestionRule(BaseModel):
    """Substring rule mapping keywords to a recommended agent."""

    model_config = ConfigDict(frozen=True)

    keywords: tuple[str, ...] = Field(..., min_length=1)
    agent_id: AgentId
    confidence: float = Field(..., gt=0.0, le=1.0)
    reason: str

    def matches(self, lowered_message: str) -> bool:
        """Whether any keyword occurs in the lower-cased message."""
        return any(keyword in lowered_message for keyword in self.keywords)

    def to_suggestion(self) -> AgentSuggestion:
        """Build the suggestion this rule yields."""
        return AgentSuggestion(
            suggested_agent_id=self.agent_id,
            confidence=self.confidence,
            reason=self.reason,
        )


SUGGESTION_RULES: tuple[SuggestionRule, ...] = (
    SuggestionRule(
        keywords=("create", "generate", "ui", "component"),
        agent_id=AgentId.GENERATIVE_UI,
        confidence=0.8,
        reason=(
            "Message contains UI/creation keywords - "
            "Generative UI agent would be more suitable"
        ),
    ),
    SuggestionRule(
        keywords=("approve", "review", "confirm", "permission"),
        agent_id=AgentId.HUMAN_LOOP,
        confidence=0.9,
        reason="Message requires human approval - Human in Loop agent recommended",
    ),
    SuggestionRule(
        keywords=("predict", "forecast", "anticipate", "what will"),
        agent_id=AgentId.PREDICTIVE_STATE,
        confidence=0.7,
        reason=(
            "Message asks about future states - "
            "Predictive State agent could help"
        ),
    ),
    SuggestionRule(
        keywords=("team", "multiple", "coordinate", "collaborate"),
        agent_id=AgentId.SHARED_STATE,
        confidence=0.8,
        reason=(
            "Message involves coordination - "
            "Shared State agent for multi-agent collaboration"
        ),
    ),
    SuggestionRule(
        keywords=("form", "chart", "table", "tool", "widget"),
        agent_id=AgentId.TOOL_UI,
        confidence=0.9,
        reason=(
            "Message requests specific UI components - "
            "Tool-based UI agent specializes in component generation"
        ),
    ),
)


def suggest_agent(
    message: str, rules: tuple[SuggestionRule, ...] = SUGGESTION_RULES
) -> AgentSuggestion | None:
    """Return the first matching rule's suggestion, or None.

    Pure function: no state is read or written.
    """
    lowered = message.lower()
    for rule in rules:
        if rule.matches(lowered):
            return rule.to_suggestion()
    return None
