"""Oversight Agent for human-in-the-loop approval workflows."""

import logging

from ..core.agent_protocol import BaseAgent
from ..schemas import (
    AgentDescriptor,
    AgentId,
    ApprovalRequest,
    ApprovalStatus,
    Response,
    ResponseKind,
    SessionState,
    ToolDescriptor,
)
from ..utils.identifiers import generate_id

logger = logging.getLogger(__name__)


APPROVAL_KEYWORDS = ("approve", "workflow")


class OversightAgent(BaseAgent):
    """Agent that queues requests for human approval.

    Approval requests live in an in-memory queue; decisions are recorded
    through ``approve_request`` and ``reject_request``.
    """

    def __init__(self, descriptor: AgentDescriptor | None = None, title_word_limit: int = 6):
        """Initialize oversight agent with an empty approval queue."""
        if descriptor is None:
            descriptor = self._create_default_descriptor()

        super().__init__(descriptor)
        self.title_word_limit = title_word_limit
        self._approval_queue: list[ApprovalRequest] = []

    @classmethod
    def create_default(cls) -> "OversightAgent":
        """Create an OversightAgent with default configuration."""
        return cls()

    @staticmethod
    def _create_default_descriptor() -> AgentDescriptor:
        return AgentDescriptor(
            id=AgentId.HUMAN_LOOP,
            display_name="Human in Loop",
            description="Collaborative AI requiring human approval for sensitive actions",
            capabilities=frozenset(
                {
                    "approval_workflows",
                    "human_collaboration",
                    "safety_checks",
                    "decision_support",
                }
            ),
        )

    def get_system_prompt(self) -> str:
        """Instructions for approval-driven collaboration."""
        return """You are a Human-in-the-Loop AI agent that facilitates collaborative decision-making between AI and humans.

Your capabilities:
- Create approval workflows for important decisions
- Generate step-by-step tasks that require human oversight
- Pause execution for human input when needed
- Track approval status and manage pending actions

Guidelines:
1. Always request approval for significant actions
2. Break complex tasks into manageable steps
3. Provide clear context for decisions
4. Track approval status transparently"""

    def get_tools(self) -> list[ToolDescriptor]:
        """Declare the approval request tool."""
        return [
            ToolDescriptor(
                name="request_approval",
                description="Request human approval for an action",
                parameters={
                    "type": "object",
                    "properties": {
                        "title": {"type": "string"},
                        "description": {"type": "string"},
                    },
                    "required": ["title", "description"],
                },
            )
        ]

    async def _generate_response(self, message: str, session: SessionState) -> Response:
        """Queue qualifying requests, otherwise describe the workflow options."""
        lowered = message.lower()
        if any(keyword in lowered for keyword in APPROVAL_KEYWORDS):
            return self._create_approval_request(message)

        return self.create_response(
            """🤝 **Human-in-the-Loop Agent Ready!**

I specialize in collaborative workflows that combine AI efficiency with human oversight.

**🔄 Core Capabilities:**
- **Approval Workflows** - Create checkpoints for important decisions
- **Task Breakdown** - Split complex work into manageable steps
- **Decision Support** - Present options with recommendations
- **Progress Tracking** - Monitor approval status

**💡 Try asking me:**
- "Create an approval workflow for deploying code"
- "Set up a content review workflow"

What workflow would you like me to help you design?""",
            ResponseKind.APPROVAL_REQUEST,
            {"pending_approvals": len(self.get_pending_approvals())},
        )

    def _create_approval_request(self, message: str) -> Response:
        approval = ApprovalRequest(
            id=generate_id("approval"),
            title=self.extract_title(message),
            description=message,
        )
        self._approval_queue.append(approval)
        logger.info(f"Approval request {approval.id} queued: {approval.title}")

        return self.create_response(
            f"""🔐 **Approval Request Created**

**Request ID:** {approval.id}
**Title:** {approval.title}

**📋 Details:**
{approval.description}

**⏳ Status:** Pending human approval
**🕒 Created:** {approval.timestamp:%Y-%m-%d %H:%M:%S}

**Next Steps:**
1. Review the request details
2. Approve or reject it
3. I'll proceed based on your decision""",
            ResponseKind.APPROVAL_REQUEST,
            {
                "approval_id": approval.id,
                "approval_request": approval.model_dump(mode="json"),
            },
        )

    def extract_title(self, message: str) -> str:
        """First words of the request, with an ellipsis when truncated."""
        words = message.split()
        title = " ".join(words[: self.title_word_limit])
        return title + "..." if len(words) > self.title_word_limit else title

    def get_pending_approvals(self) -> list[ApprovalRequest]:
        """Requests still waiting for a decision."""
        return [
            approval.model_copy()
            for approval in self._approval_queue
            if approval.status == ApprovalStatus.PENDING
        ]

    def get_approval(self, approval_id: str) -> ApprovalRequest | None:
        """Look up an approval request by id."""
        approval = self._find(approval_id)
        return approval.model_copy() if approval else None

    def approve_request(self, approval_id: str) -> bool:
        """Mark a request approved. Returns False for unknown ids."""
        return self._decide(approval_id, ApprovalStatus.APPROVED)

    def reject_request(self, approval_id: str) -> bool:
        """Mark a request rejected. Returns False for unknown ids."""
        return self._decide(approval_id, ApprovalStatus.REJECTED)

    def _decide(self, approval_id: str, status: ApprovalStatus) -> bool:
        approval = self._find(approval_id)
        if approval is None:
            logger.warning(f"Approval request {approval_id} not found")
            return False
        approval.status = status
        logger.info(f"Approval request {approval_id} {status}")
        return True

    def _find(self, approval_id: str) -> ApprovalRequest | None:
        for approval in self._approval_queue:
            if approval.id == approval_id:
                return approval
        return None
