"""Unified models for the agent switchboard.

This module holds every domain type shared by the router, the agents and the
shared state store: conversation messages and session state, agent
descriptors and responses, and the project/task coordination model.
"""

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ============================================================================
# UNIFIED ENUMS
# ============================================================================


class AgentId(StrEnum):
    """Closed set of agent variants known to the router."""

    AGENTIC_CHAT = "agentic_chat"
    GENERATIVE_UI = "generative_ui"
    HUMAN_LOOP = "human_loop"
    PREDICTIVE_STATE = "predictive_state"
    SHARED_STATE = "shared_state"
    TOOL_UI = "tool_ui"


class MessageRole(StrEnum):
    """Author of a conversation message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    TOOL = "tool"


class ResponseKind(StrEnum):
    """Informational tag on an agent response."""

    TEXT = "text"
    UI = "ui"
    APPROVAL_REQUEST = "approval_request"
    PREDICTION = "prediction"
    TOOL_RESULT = "tool_result"


class ProjectStatus(StrEnum):
    """Lifecycle state of a shared project."""

    PLANNING = "planning"
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Priority(StrEnum):
    """Priority shared by projects and tasks."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskStatus(StrEnum):
    """Status a task moves through. Tasks are never deleted."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    TESTING = "testing"
    DONE = "done"
    BLOCKED = "blocked"

    @property
    def label(self) -> str:
        """Human readable name used in status reports."""
        return _TASK_STATUS_LABELS[self]


_TASK_STATUS_LABELS = {
    TaskStatus.TODO: "Todo",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.TESTING: "Testing",
    TaskStatus.DONE: "Done",
    TaskStatus.BLOCKED: "Blocked",
}


class BroadcastLevel(StrEnum):
    """Severity of an informational broadcast."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class ApprovalStatus(StrEnum):
    """Decision state of an approval request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Timeframe(StrEnum):
    """Horizon bucket for a prediction."""

    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"

    @property
    def label(self) -> str:
        """Human readable horizon."""
        return _TIMEFRAME_LABELS[self]


_TIMEFRAME_LABELS = {
    Timeframe.SHORT: "Short-term (1-7 days)",
    Timeframe.MEDIUM: "Medium-term (2-8 weeks)",
    Timeframe.LONG: "Long-term (3-12 months)",
}


# ============================================================================
# UNIFIED CONFIGURATION
# ============================================================================


class UnifiedConfig:
    """Centralized model configuration for consistent behavior across schemas."""

    PYDANTIC_CONFIG = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        use_enum_values=False,
        from_attributes=True,
    )

    FROZEN_CONFIG = ConfigDict(
        extra="forbid",
        use_enum_values=False,
        from_attributes=True,
        frozen=True,
    )


class BaseBusinessModel(BaseModel):
    """Base for mutable business models."""

    model_config = UnifiedConfig.PYDANTIC_CONFIG


class BaseValueModel(BaseModel):
    """Base for immutable value objects."""

    model_config = UnifiedConfig.FROZEN_CONFIG


# ============================================================================
# CONVERSATION MODELS
# ============================================================================


class Message(BaseValueModel):
    """One entry of a conversation history. Immutable once created."""

    id: str = Field(..., min_length=1)
    role: MessageRole
    content: str
    timestamp: datetime = Field(default_factory=datetime.now)
    agent_tag: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class ToolDescriptor(BaseValueModel):
    """Declarative description of a tool an agent exposes to the completion service."""

    name: str = Field(..., min_length=1)
    description: str
    parameters: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )

    def to_openai_tool(self) -> dict[str, Any]:
        """Render in the OpenAI function-calling format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


class AgentAction(BaseBusinessModel):
    """Follow-up action proposed alongside a response."""

    type: str
    payload: Any = None
    requires_approval: bool = False


class Response(BaseBusinessModel):
    """Result of a single agent call."""

    content: str
    kind: ResponseKind = ResponseKind.TEXT
    metadata: dict[str, Any] = Field(default_factory=dict)
    actions: list[AgentAction] | None = None

    @property
    def is_error(self) -> bool:
        """Whether this response reports a failure."""
        return bool(self.metadata.get("error", False))


class SessionState(BaseBusinessModel):
    """Conversation state owned by a single router."""

    history: list[Message] = Field(default_factory=list)
    active_agent_id: AgentId = AgentId.AGENTIC_CHAT
    context: dict[str, Any] = Field(default_factory=dict)
    tools_snapshot: list[ToolDescriptor] = Field(default_factory=list)
    is_processing: bool = False


# ============================================================================
# AGENT DESCRIPTION MODELS
# ============================================================================


class AgentDescriptor(BaseValueModel):
    """Static configuration of an agent variant."""

    id: AgentId
    display_name: str = Field(..., min_length=1)
    description: str = ""
    capabilities: frozenset[str] = Field(default_factory=frozenset)
    enabled: bool = True


class AgentInfo(BaseBusinessModel):
    """Descriptor enriched with router-side availability flags."""

    id: AgentId
    display_name: str
    description: str
    capabilities: list[str]
    is_available: bool
    is_current: bool

    @classmethod
    def from_descriptor(
        cls, descriptor: AgentDescriptor, is_available: bool, is_current: bool
    ) -> "AgentInfo":
        """Build from an immutable descriptor."""
        return cls(
            id=descriptor.id,
            display_name=descriptor.display_name,
            description=descriptor.description,
            capabilities=sorted(descriptor.capabilities),
            is_available=is_available,
            is_current=is_current,
        )


class AgentSuggestion(BaseValueModel):
    """Non-binding recommendation to switch agents."""

    suggested_agent_id: AgentId
    confidence: float = Field(..., gt=0.0, le=1.0)
    reason: str


# ============================================================================
# SHARED PROJECT MODELS
# ============================================================================


class Task(BaseBusinessModel):
    """Unit of work inside a shared project."""

    id: str
    title: str = Field(..., min_length=1)
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: Priority = Priority.MEDIUM
    tags: set[str] = Field(default_factory=set)
    assignee: str | None = None
    created_by: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class SharedProject(BaseBusinessModel):
    """The single current project coordinated through the shared state store."""

    id: str
    name: str = Field(..., min_length=1)
    description: str = ""
    status: ProjectStatus = ProjectStatus.PLANNING
    priority: Priority = Priority.MEDIUM
    team: list[str] = Field(default_factory=list)
    tasks: list[Task] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)
    last_updated: datetime = Field(default_factory=datetime.now)

    @field_validator("team")
    @classmethod
    def deduplicate_team(cls, v: list[str]) -> list[str]:
        """Team is a set of participant ids; keep first occurrence order."""
        return list(dict.fromkeys(v))

    def find_task(self, task_id: str) -> Task | None:
        """Look up a task by id."""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None


class AgentRegistration(BaseBusinessModel):
    """Roster entry for an agent instance present in the shared state store."""

    agent_id: str
    role: str
    capabilities: list[str] = Field(default_factory=list)
    status: str = "active"
    registered_at: datetime = Field(default_factory=datetime.now)


class SharedStateSnapshot(BaseBusinessModel):
    """Copy of the store aggregate handed to subscribers."""

    current_project: SharedProject | None = None
    active_agents: dict[str, AgentRegistration] = Field(default_factory=dict)


class BroadcastMessage(BaseValueModel):
    """Informational fan-out message carrying no state change."""

    id: str
    sender_id: str
    text: str
    level: BroadcastLevel = BroadcastLevel.INFO
    timestamp: datetime = Field(default_factory=datetime.now)


# ============================================================================
# AGENT ARTIFACT MODELS
# ============================================================================


class ApprovalRequest(BaseBusinessModel):
    """Request waiting for a human decision."""

    id: str
    title: str
    description: str
    status: ApprovalStatus = ApprovalStatus.PENDING
    timestamp: datetime = Field(default_factory=datetime.now)


class Prediction(BaseBusinessModel):
    """Heuristic forecast produced by the forecasting agent."""

    id: str
    scenario: str
    probability: float = Field(..., ge=0.0, le=1.0)
    timeframe: Timeframe = Timeframe.MEDIUM
    actions: list[str] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=1.0)
    created_at: datetime = Field(default_factory=datetime.now)


class ComponentBlueprint(BaseBusinessModel):
    """Structural description of a generated UI artifact."""

    id: str
    name: str
    description: str
    features: list[str] = Field(default_factory=list)
    sections: list[str] = Field(default_factory=list)
    code: str = Field("", description="TSX component template")
    source_request: str
    created_at: datetime = Field(default_factory=datetime.now)
