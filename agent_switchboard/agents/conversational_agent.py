"""Conversational Agent for multi-turn reasoning and planning.

This module implements the default agent: it keeps its own bounded memory of
exchanged messages, classifies intent by keyword, and recommends switching
to a specialized agent when the suggestion heuristic is confident.
"""

import logging
from collections import deque

from ..core.agent_protocol import AgentExecutionError, BaseAgent
from ..core.suggestions import suggest_agent
from ..integrations.completion_client import CompletionService
from ..schemas import (
    AgentDescriptor,
    AgentId,
    AgentSuggestion,
    Message,
    MessageRole,
    Response,
    ResponseKind,
    SessionState,
    ToolDescriptor,
)
from ..utils.identifiers import SequentialIdFactory

logger = logging.getLogger(__name__)


# Ordered (intent, keywords) pairs; an intent applies when any keyword occurs.
INTENT_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("seeking_help", ("help", "assist")),
    ("creation_task", ("create", "build", "generate")),
    ("planning", ("plan", "strategy")),
    ("initiation", ("start", "begin")),
    ("technical", ("api", "technical")),
    ("educational", ("course", "learning")),
    ("needs_oversight", ("approve", "review")),
)

RECOMMENDATION_THRESHOLD = 0.8

STOP_WORDS = frozenset({"this", "that", "with", "have", "would", "could", "should"})


class ConversationalAgent(BaseAgent):
    """Enhanced conversational agent with context memory.

    Handles open-ended conversation, multi-turn planning and agent
    recommendations. Uses the completion service for general inquiries
    when one is configured.
    """

    def __init__(
        self,
        descriptor: AgentDescriptor | None = None,
        completion_service: CompletionService | None = None,
        memory_limit: int = 100,
        context_window: int = 3,
    ):
        """Initialize conversational agent with bounded memory."""
        if descriptor is None:
            descriptor = self._create_default_descriptor()

        super().__init__(descriptor)

        self.completion_service = completion_service
        self.context_window = context_window
        self._memory: deque[Message] = deque(maxlen=memory_limit)
        self._memory_ids = SequentialIdFactory("memory")

    @classmethod
    def create_default(
        cls, completion_service: CompletionService | None = None
    ) -> "ConversationalAgent":
        """Create a ConversationalAgent with default configuration."""
        return cls(completion_service=completion_service)

    @staticmethod
    def _create_default_descriptor() -> AgentDescriptor:
        """Create default descriptor for the conversational agent."""
        return AgentDescriptor(
            id=AgentId.AGENTIC_CHAT,
            display_name="Agentic Chat",
            description="Enhanced conversational AI with advanced reasoning capabilities",
            capabilities=frozenset(
                {"conversation", "reasoning", "context_memory", "multi_turn_planning"}
            ),
        )

    def get_system_prompt(self) -> str:
        """Instructions for open-ended reasoning conversations."""
        return """You are an advanced agentic chat assistant with enhanced conversational capabilities.

Your key abilities:
- Advanced reasoning and multi-turn conversation planning
- Context-aware responses with memory of previous interactions
- Ability to break down complex problems into manageable steps
- Chain-of-thought reasoning for complex queries
- Proactive suggestions and follow-up questions

Guidelines:
1. Always maintain conversation context and memory
2. Use chain-of-thought reasoning for complex questions
3. Provide detailed, helpful responses
4. Ask clarifying questions when needed
5. Suggest next steps or related actions
6. Be conversational yet professional"""

    def get_tools(self) -> list[ToolDescriptor]:
        """Declare the context memory tool."""
        return [
            ToolDescriptor(
                name="remember_context",
                description="Store important context for future conversations",
                parameters={
                    "type": "object",
                    "properties": {
                        "key": {"type": "string", "description": "Context key"},
                        "value": {
                            "type": "string",
                            "description": "Context value to remember",
                        },
                    },
                    "required": ["key", "value"],
                },
            )
        ]

    async def _generate_response(self, message: str, session: SessionState) -> Response:
        """Remember the exchange and build a reasoning response."""
        self._remember(MessageRole.USER, message)

        intents = self.analyze_intent(message)
        suggestion = suggest_agent(message)
        if suggestion and suggestion.confidence < RECOMMENDATION_THRESHOLD:
            suggestion = None

        content = await self._compose(message, session, intents, suggestion)

        self._remember(MessageRole.ASSISTANT, content)

        metadata = {
            "conversation_length": len(self._memory),
            "has_context": bool(session.context),
            "intents": intents,
        }
        if suggestion:
            metadata["suggested_agent"] = str(suggestion.suggested_agent_id)
            metadata["suggestion_confidence"] = suggestion.confidence

        return self.create_response(content, ResponseKind.TEXT, metadata)

    async def _compose(
        self,
        message: str,
        session: SessionState,
        intents: list[str],
        suggestion: AgentSuggestion | None,
    ) -> str:
        """Pick the topic template, or ask the completion service."""
        lowered = message.lower()
        conversation = self._recent_conversation(session)

        if "course" in lowered and ("generation" in lowered or "create" in lowered):
            body = self._course_response()
        elif "start" in lowered or "begin" in lowered:
            body = self._start_response(conversation)
        elif "api" in lowered or "xero" in lowered:
            body = self._api_response()
        elif "hello" in lowered or "hi" in lowered:
            body = self._greeting_response(conversation)
        elif self.completion_service is not None:
            body = await self._completion_response(message, session)
        else:
            body = self._analysis_response(message, session, intents)

        if suggestion:
            body += (
                f"\n\n**🔄 Agent Recommendation:** {suggestion.reason} "
                f"(confidence {suggestion.confidence:.0%}). "
                f"Switch to `{suggestion.suggested_agent_id}` to continue there."
            )
        return body

    async def _completion_response(self, message: str, session: SessionState) -> str:
        """Delegate a general inquiry to the completion service."""
        try:
            return await self.completion_service.complete(
                system_prompt=self.get_system_prompt(),
                prompt=self.enhance_message(message, session, self.context_window),
                tools=self.get_tools(),
                history=session.history[-self.context_window :]
                if self.context_window
                else [],
            )
        except Exception as e:
            raise AgentExecutionError(
                str(self.get_id()), f"completion service failed: {e}", e
            ) from e

    def analyze_intent(self, message: str) -> list[str]:
        """Classify intent by keyword containment, in a fixed order."""
        lowered = message.lower()
        return [
            intent
            for intent, keywords in INTENT_KEYWORDS
            if any(keyword in lowered for keyword in keywords)
        ]

    def get_conversation_memory(self) -> list[Message]:
        """Copy of the agent's own memory, oldest first."""
        return list(self._memory)

    def _remember(self, role: MessageRole, content: str) -> None:
        self._memory.append(
            Message(
                id=self._memory_ids.next_id(),
                role=role,
                content=content,
                agent_tag=str(self.get_id()),
            )
        )

    def _recent_conversation(self, session: SessionState) -> str:
        recent = session.history[-self.context_window :] if self.context_window else []
        return " ".join(m.content for m in recent)

    @staticmethod
    def extract_topics(conversation: str) -> str:
        """Pick up to three longer words from recent conversation."""
        words = conversation.lower().split()
        topics = [w for w in words if len(w) > 4 and w not in STOP_WORDS]
        return ", ".join(topics[:3]) or "various topics"

    def _reasoning(self, message: str, intents: list[str], has_context: bool) -> list[str]:
        reasoning = [
            f"• **Intent Analysis**: {', '.join(intents) if intents else 'general_inquiry'}",
            f"• **Complexity Level**: {'complex' if len(message) > 50 else 'simple'} query",
            "• **Context Available**: "
            + (
                "Yes - building on previous conversation"
                if has_context
                else "No - fresh start"
            ),
        ]
        if "creation_task" in intents:
            reasoning.append(
                "• **Recommendation**: Consider Generative UI agent for creative tasks"
            )
        if "technical" in intents:
            reasoning.append(
                "• **Recommendation**: Tool-based UI agent might be helpful for "
                "technical implementation"
            )
        if "needs_oversight" in intents:
            reasoning.append(
                "• **Recommendation**: Human in Loop agent can route this for approval"
            )
        return reasoning

    def _analysis_response(
        self, message: str, session: SessionState, intents: list[str]
    ) -> str:
        has_context = bool(session.context)
        reasoning = "\n".join(self._reasoning(message, intents, has_context))
        context_line = (
            f"Building on our previous discussion: {', '.join(sorted(session.context))}"
            if has_context
            else "Starting fresh - I'll remember everything we discuss for future "
            "conversations."
        )
        return f"""🤔 **Let me analyze your message: "{message}"**

**💭 My Reasoning Process:**
{reasoning}

**🧠 Context Consideration:**
{context_line}

**🎯 How I can help:**

1. **Deep Dive**: I can explore this topic systematically with you
2. **Step-by-step Planning**: Break it into actionable components
3. **Context Building**: Remember details for future conversations
4. **Agent Recommendations**: Suggest if other AI agents would be better suited

**💡 To give you the most helpful response:**
- What specific aspect interests you most?
- Are you looking for planning, analysis, or implementation help?
- What's the broader context or goal?"""

    @staticmethod
    def _course_response() -> str:
        return """🎓 **Online Course Generation - Great topic!**

**💡 My Analysis:**
- You're interested in automated course generation
- This involves content planning, structure design, and delivery methods
- This could benefit from multiple AI agents working together

**🧠 Let me break this down:**

1. **Course Planning**: What subject/topic are you targeting?
2. **Content Structure**: Modules, lessons, assessments, practical exercises
3. **Delivery Method**: Video, text, interactive, hybrid approach
4. **Target Audience**: Skill level, learning preferences, time constraints

**Next Steps:** What specific aspect of course generation interests you most?"""

    def _start_response(self, conversation: str) -> str:
        context_line = (
            f"Building on our previous discussion about {self.extract_topics(conversation)}."
            if conversation
            else "Starting fresh - I'll remember everything we discuss."
        )
        return f"""🚀 **Ready to Start - Let's Plan Together!**

**🧠 Context Analysis:**
{context_line}

**🎯 How I can help you start:**

1. **Goal Clarification**: What exactly do you want to start?
2. **Resource Assessment**: What do you have available?
3. **Step-by-Step Planning**: Break it into manageable phases
4. **Timeline & Milestones**: When do you want to achieve what?

**Questions to move forward:**
- What project or goal are you thinking about starting?
- What's your timeline?
- What resources or constraints should I know about?"""

    @staticmethod
    def _api_response() -> str:
        return """💼 **API Integration - Let's Plan It!**

**🧠 My Analysis:**
- You're likely working on business or data automation
- You need to integrate external data with applications
- This is a technical implementation project

**🎯 Planning Your Integration:**

1. **Use Case Definition**: What business process are you automating?
2. **Data Requirements**: Which endpoints do you need?
3. **Authentication Setup**: OAuth app registration and credentials
4. **Development Environment**: Testing vs production considerations

**Next Steps:**
- What specific problem are you solving with this API?
- Are you building a custom app or integrating with existing software?"""

    @staticmethod
    def _greeting_response(conversation: str) -> str:
        interaction = "a continuation of our chat" if conversation else "our first interaction"
        return f"""👋 **Hello! I'm your Enhanced Agentic Chat Assistant**

**🧠 What makes me different:**
- **Advanced Reasoning**: I think through problems step-by-step
- **Context Memory**: I remember our conversation history
- **Multi-turn Planning**: I help you achieve complex goals over time
- **Agent Coordination**: I can suggest when other AI agents would be better

**💭 I notice this is {interaction}.**

What would you like to work on together?"""
