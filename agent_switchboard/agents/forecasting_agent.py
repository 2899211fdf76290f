"""Forecasting Agent for future-state predictions.

Predictions are fixed heuristics, not learned: the probability and
confidence are constants and the timeframe is bucketed by keyword.
"""

import logging

from ..core.agent_protocol import BaseAgent
from ..schemas import (
    AgentDescriptor,
    AgentId,
    Prediction,
    Response,
    ResponseKind,
    SessionState,
    Timeframe,
    ToolDescriptor,
)
from ..utils.identifiers import generate_id

logger = logging.getLogger(__name__)


PREDICTION_KEYWORDS = ("predict", "forecast", "future")

DEFAULT_PROBABILITY = 0.75
DEFAULT_CONFIDENCE = 0.8

RECOMMENDED_ACTIONS = (
    "Monitor current progress and key metrics",
    "Implement optimization strategies",
    "Prepare contingency plans for variations",
    "Set up early warning indicators",
)


class ForecastingAgent(BaseAgent):
    """Agent that produces heuristic predictions and keeps a prediction log."""

    def __init__(self, descriptor: AgentDescriptor | None = None):
        """Initialize forecasting agent with an empty prediction log."""
        if descriptor is None:
            descriptor = self._create_default_descriptor()

        super().__init__(descriptor)
        self._predictions: list[Prediction] = []

    @classmethod
    def create_default(cls) -> "ForecastingAgent":
        """Create a ForecastingAgent with default configuration."""
        return cls()

    @staticmethod
    def _create_default_descriptor() -> AgentDescriptor:
        return AgentDescriptor(
            id=AgentId.PREDICTIVE_STATE,
            display_name="Predictive State",
            description="Future-aware AI that anticipates user needs and prepares suggestions",
            capabilities=frozenset(
                {
                    "state_prediction",
                    "anticipatory_loading",
                    "suggestion_engine",
                    "pattern_recognition",
                }
            ),
        )

    def get_system_prompt(self) -> str:
        """Instructions for forecasting."""
        return """You are a Predictive State AI agent that analyzes current conditions to forecast future states and provide proactive assistance.

Your capabilities:
- Analyze current state and predict likely future scenarios
- Generate proactive suggestions and recommendations
- Provide confidence-weighted predictions with actionable insights

Guidelines:
1. Provide multiple future scenarios with probability weights
2. Include actionable suggestions for each predicted state
3. Consider both opportunities and potential risks
4. Maintain confidence levels and explain reasoning"""

    def get_tools(self) -> list[ToolDescriptor]:
        """Declare the state analysis tool."""
        return [
            ToolDescriptor(
                name="analyze_state",
                description="Analyze current state and predict future scenarios",
                parameters={
                    "type": "object",
                    "properties": {
                        "context": {"type": "string"},
                        "timeframe": {"type": "string"},
                    },
                    "required": ["context"],
                },
            )
        ]

    async def _generate_response(self, message: str, session: SessionState) -> Response:
        """Produce a prediction for forecasting requests."""
        lowered = message.lower()
        if any(keyword in lowered for keyword in PREDICTION_KEYWORDS):
            return self._predict(message)

        return self.create_response(
            """🔮 **Predictive State Agent Ready!**

I specialize in future-aware assistance and proactive recommendations.

**💡 Try asking me:**
- "Predict the outcome of this project"
- "Forecast our short-term delivery risks"
- "What does the long-term future look like?"

**🎯 Prediction Types:**
- **Short-term** (days) - Immediate actions
- **Medium-term** (weeks) - Strategic planning
- **Long-term** (months) - Vision planning

What future scenario would you like me to analyze?""",
            ResponseKind.PREDICTION,
        )

    @staticmethod
    def extract_timeframe(message: str) -> Timeframe:
        """Bucket the forecast horizon by keyword."""
        lowered = message.lower()
        if "immediate" in lowered or "short" in lowered:
            return Timeframe.SHORT
        if "long" in lowered or "year" in lowered:
            return Timeframe.LONG
        return Timeframe.MEDIUM

    def _predict(self, message: str) -> Response:
        prediction = Prediction(
            id=generate_id("pred"),
            scenario=f"Outcome based on: {message}",
            probability=DEFAULT_PROBABILITY,
            timeframe=self.extract_timeframe(message),
            actions=list(RECOMMENDED_ACTIONS),
            confidence=DEFAULT_CONFIDENCE,
        )
        self._predictions.append(prediction)
        logger.info(f"Prediction {prediction.id} recorded ({prediction.timeframe})")

        actions = "\n".join(
            f"{index}. {action}" for index, action in enumerate(prediction.actions, 1)
        )
        return self.create_response(
            f"""🔮 **Future State Prediction**

**Prediction ID:** {prediction.id}
**Scenario:** {prediction.scenario}
**Timeframe:** {prediction.timeframe.label}
**Confidence:** {prediction.confidence * 100:.1f}%

**📊 Probability Analysis:**
{prediction.probability * 100:.1f}% likelihood this scenario will occur

**🎯 Recommended Actions:**
{actions}""",
            ResponseKind.PREDICTION,
            {
                "prediction_id": prediction.id,
                "prediction": prediction.model_dump(mode="json"),
            },
        )

    def get_current_predictions(self) -> list[Prediction]:
        """All predictions made so far, oldest first."""
        return [prediction.model_copy() for prediction in self._predictions]
