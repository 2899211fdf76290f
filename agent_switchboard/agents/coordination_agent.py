"""Coordination Agent for shared project and task state.

This is the only agent that reads and mutates the shared state store. It
registers itself on the store roster when constructed, keeps a subscription
open until ``close()`` is called, and handles three intents:

- "create" + "project": initialize a new shared project and broadcast it
- "add" + "task": append a task to the current project and broadcast it
- "status" / "progress": report the per-status tally and completion
"""

import logging
import re

from ..core.agent_protocol import BaseAgent
from ..core.shared_state import SharedStateStore
from ..schemas import (
    AgentDescriptor,
    AgentId,
    BroadcastLevel,
    Priority,
    ProjectStatus,
    Response,
    ResponseKind,
    SessionState,
    SharedStateSnapshot,
    TaskStatus,
    ToolDescriptor,
)
from ..utils.project_calculations import ProjectCalculations

logger = logging.getLogger(__name__)


DEFAULT_PROJECT_NAME = "New Collaborative Project"
DEFAULT_TASK_TITLE = "New Collaborative Task"

COORDINATOR_ROLE = "coordinator"
COORDINATOR_CAPABILITIES = ["project_management", "task_coordination", "team_collaboration"]

_QUOTE = "'\"`“”‘’"

PROJECT_NAME_PATTERNS = (
    re.compile(rf"create.*project.*[{_QUOTE}]([^{_QUOTE}]+)[{_QUOTE}]", re.IGNORECASE),
    re.compile(rf"project.*(?:called|named)\s+[{_QUOTE}]([^{_QUOTE}]+)[{_QUOTE}]", re.IGNORECASE),
    re.compile(r"(?:called|named)\s+([A-Za-z0-9][\w\s-]*?)\s*[.!?]?$", re.IGNORECASE),
    re.compile(r"new\s+project\s+([A-Za-z0-9][\w\s-]*?)\s*[.!?]?$", re.IGNORECASE),
)

TASK_TITLE_PATTERNS = (
    re.compile(rf"add.*task.*[{_QUOTE}]([^{_QUOTE}]+)[{_QUOTE}]", re.IGNORECASE),
    re.compile(rf"task.*[{_QUOTE}]([^{_QUOTE}]+)[{_QUOTE}]", re.IGNORECASE),
    re.compile(r"add\s+(?:a\s+|an\s+|new\s+)*task\s+(?:to\s+|for\s+)?(.+?)\s*[.!?]?$", re.IGNORECASE),
)


class CoordinationAgent(BaseAgent):
    """Agent that coordinates multi-agent work through the shared state store."""

    def __init__(self, store: SharedStateStore, descriptor: AgentDescriptor | None = None):
        """Register with the store and subscribe to its changes."""
        if descriptor is None:
            descriptor = self._create_default_descriptor()

        super().__init__(descriptor)
        self.store = store
        self._last_snapshot: SharedStateSnapshot | None = None

        self.store.register_agent(
            str(self.get_id()),
            {
                "role": COORDINATOR_ROLE,
                "capabilities": list(COORDINATOR_CAPABILITIES),
                "status": "active",
            },
        )
        self._unsubscribe = self.store.subscribe(self._on_state_change)

    @classmethod
    def create_default(cls, store: SharedStateStore) -> "CoordinationAgent":
        """Create a CoordinationAgent bound to the given store."""
        return cls(store)

    @staticmethod
    def _create_default_descriptor() -> AgentDescriptor:
        return AgentDescriptor(
            id=AgentId.SHARED_STATE,
            display_name="Shared State",
            description="Multi-agent collaboration with synchronized project state",
            capabilities=frozenset(
                {
                    "state_synchronization",
                    "multi_agent_coordination",
                    "project_management",
                    "team_collaboration",
                }
            ),
        )

    def close(self) -> None:
        """Drop the store subscription. Safe to call more than once."""
        self._unsubscribe()

    @property
    def last_snapshot(self) -> SharedStateSnapshot | None:
        """Most recent store snapshot delivered to this agent."""
        return self._last_snapshot

    def _on_state_change(self, snapshot: SharedStateSnapshot) -> None:
        self._last_snapshot = snapshot

    def get_system_prompt(self) -> str:
        """Instructions embedding the live project and roster."""
        project = self.store.get_current_project()
        active_agents = self.store.get_active_agents()

        return f"""You are a Shared State AI agent that coordinates multi-agent collaboration and manages synchronized project state.

Your primary role:
- Manage shared project state across all agents
- Coordinate task assignments and progress tracking
- Facilitate communication between agents
- Ensure state consistency and conflict resolution

Current Context:
- Active Project: {project.name if project else 'None'}
- Project Status: {project.status if project else 'N/A'}
- Active Agents: {len(active_agents)} ({', '.join(active_agents)})
- Total Tasks: {len(project.tasks) if project else 0}

Guidelines:
1. Always maintain state consistency across all agents
2. Provide clear project status and progress updates
3. Coordinate task assignments efficiently
4. Broadcast important updates to all agents"""

    def get_tools(self) -> list[ToolDescriptor]:
        """Declare project and task tools."""
        return [
            ToolDescriptor(
                name="create_project",
                description="Initialize a new shared project",
                parameters={
                    "type": "object",
                    "properties": {"name": {"type": "string"}},
                    "required": ["name"],
                },
            ),
            ToolDescriptor(
                name="add_task",
                description="Add a new task to the project",
                parameters={
                    "type": "object",
                    "properties": {"title": {"type": "string"}},
                    "required": ["title"],
                },
            ),
        ]

    async def _generate_response(self, message: str, session: SessionState) -> Response:
        """Dispatch on project, task and status intents."""
        lowered = message.lower()

        if "create" in lowered and "project" in lowered:
            return self._create_project(message)
        if "add" in lowered and "task" in lowered:
            return self._add_task(message)
        if "status" in lowered or "progress" in lowered:
            return self._status_report()

        return self._overview()

    @staticmethod
    def extract_project_name(message: str) -> str | None:
        """Project name from quotes, "called X" or "new project X"."""
        return _first_match(PROJECT_NAME_PATTERNS, message)

    @staticmethod
    def extract_task_title(message: str) -> str | None:
        """Task title from quotes or "add task X"."""
        return _first_match(TASK_TITLE_PATTERNS, message)

    def _create_project(self, message: str) -> Response:
        name = self.extract_project_name(message) or DEFAULT_PROJECT_NAME
        project = self.store.initialize_project(
            name=name,
            description=f"Project created via Shared State Agent: {message}",
            status=ProjectStatus.PLANNING,
            priority=Priority.MEDIUM,
            team=[str(agent_id) for agent_id in AgentId],
        )
        self.store.broadcast_message(
            str(self.get_id()),
            f'New project "{name}" has been created',
            BroadcastLevel.SUCCESS,
        )

        return self.create_response(
            f"""✅ **Project Created Successfully!**

**📁 Project Details:**
- **Name:** {project.name}
- **ID:** {project.id}
- **Status:** {project.status}
- **Priority:** {project.priority}
- **Team:** {', '.join(project.team)}

**🔄 State Synchronization:**
Project state has been synchronized across all active agents.

**📢 Broadcast:** All active agents have been notified of the new project.""",
            ResponseKind.TEXT,
            {"action": "create_project", "project": project.model_dump(mode="json")},
        )

    def _add_task(self, message: str) -> Response:
        if self.store.get_current_project() is None:
            return self.create_response(
                "❌ **No Active Project**\n\n"
                "Please create a project first before adding tasks.",
                ResponseKind.TEXT,
                {"action": "add_task", "missing_project": True},
            )

        title = self.extract_task_title(message) or DEFAULT_TASK_TITLE
        task = self.store.add_task(
            str(self.get_id()),
            title=title,
            description=f"Task created from: {message}",
            status=TaskStatus.TODO,
            priority=Priority.MEDIUM,
            tags=["collaborative"],
            assignee=str(self.get_id()),
        )
        if task is None:
            return self.create_response(
                "❌ **Failed to Add Task**\n\nCould not add task to the current project.",
                ResponseKind.TEXT,
                {"action": "add_task"},
            )

        self.store.broadcast_message(
            str(self.get_id()),
            f'New task "{title}" has been added to the project',
            BroadcastLevel.INFO,
        )
        project = self.store.get_current_project()

        return self.create_response(
            f"""✅ **Task Added Successfully!**

**📋 Task Details:**
- **Title:** {task.title}
- **ID:** {task.id}
- **Status:** {task.status.label}
- **Priority:** {task.priority}
- **Assignee:** {task.assignee or 'Unassigned'}

**📈 Project Progress:**
Total tasks in project: {len(project.tasks)}

**📢 Broadcast:** All team members have been notified of the new task.""",
            ResponseKind.TEXT,
            {"action": "add_task", "task": task.model_dump(mode="json")},
        )

    def _status_report(self) -> Response:
        project = self.store.get_current_project()
        active_agents = self.store.get_active_agents()

        if project is None:
            return self.create_response(
                f"""📊 **System Status**

**Project:** No active project
**Active Agents:** {len(active_agents)} ({', '.join(active_agents)})

Create a project to start tracking progress and coordinating with other agents.""",
                ResponseKind.TEXT,
                {"action": "status", "has_project": False},
            )

        breakdown = ProjectCalculations.status_breakdown(project)
        completed = ProjectCalculations.completed_count(project)
        total = len(project.tasks)
        percentage = ProjectCalculations.completion_percentage(project)
        tally = "\n".join(f"- {status.label}: {count}" for status, count in breakdown.items())

        return self.create_response(
            f"""📊 **Project Status Report**

**📁 Project:** {project.name}
**🎯 Status:** {project.status}
**📈 Progress:** {percentage}% ({completed}/{total} tasks completed)
Total tasks: {total}
**👥 Team:** {', '.join(project.team)}
**🤖 Active Agents:** {len(active_agents)}

**📋 Task Breakdown:**
{tally}

**🕒 Last Updated:** {project.last_updated:%Y-%m-%d %H:%M:%S}""",
            ResponseKind.TEXT,
            {
                "action": "status",
                "has_project": True,
                "completion_percentage": percentage,
                "completed_tasks": completed,
                "total_tasks": total,
                "status_breakdown": {str(status): count for status, count in breakdown.items()},
            },
        )

    def _overview(self) -> Response:
        project = self.store.get_current_project()
        if project:
            state = (
                f"**Active Project:** {project.name}\n"
                f"**Status:** {project.status}\n"
                f"**Tasks:** {len(project.tasks)} total\n"
                f"**Team:** {', '.join(project.team) or 'No team assigned'}"
            )
        else:
            state = "**No Active Project** - Create one to get started!"

        return self.create_response(
            f"""🤝 **Shared State Agent Ready!**

I coordinate multi-agent collaboration and manage synchronized project state.

**🎯 Core Capabilities:**
- **Project Management** - Create and manage shared projects
- **Task Coordination** - Add, update, and track tasks across agents
- **Team Collaboration** - Coordinate team members and assignments
- **State Synchronization** - Keep all agents in sync with latest state

**📊 Current State:**
{state}

**🤖 Active Agents:** {len(self.store.get_active_agents())}

**💡 Try asking me:**
- "Create a new project called 'Customer Portal'"
- "Add a task to implement user authentication"
- "Show project status"

How can I help coordinate your multi-agent project?""",
            ResponseKind.TEXT,
        )


def _first_match(patterns: tuple[re.Pattern[str], ...], message: str) -> str | None:
    for pattern in patterns:
        match = pattern.search(message)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return None
