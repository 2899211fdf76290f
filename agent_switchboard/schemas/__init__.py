"""Unified schema package for the agent switchboard.

Quick usage:
    from agent_switchboard.schemas import AgentId, Response, SharedProject, TaskStatus
"""

from .unified_models import (
    AgentAction,
    AgentDescriptor,
    AgentId,
    AgentInfo,
    AgentRegistration,
    AgentSuggestion,
    ApprovalRequest,
    ApprovalStatus,
    BroadcastLevel,
    BroadcastMessage,
    ComponentBlueprint,
    Message,
    MessageRole,
    Prediction,
    Priority,
    ProjectStatus,
    Response,
    ResponseKind,
    SessionState,
    SharedProject,
    SharedStateSnapshot,
    Task,
    TaskStatus,
    Timeframe,
    ToolDescriptor,
)

__all__ = [
    "AgentAction",
    "AgentDescriptor",
    "AgentId",
    "AgentInfo",
    "AgentRegistration",
    "AgentSuggestion",
    "ApprovalRequest",
    "ApprovalStatus",
    "BroadcastLevel",
    "BroadcastMessage",
    "ComponentBlueprint",
    "Message",
    "MessageRole",
    "Prediction",
    "Priority",
    "ProjectStatus",
    "Response",
    "ResponseKind",
    "SessionState",
    "SharedProject",
    "SharedStateSnapshot",
    "Task",
    "TaskStatus",
    "Timeframe",
    "ToolDescriptor",
]
