"""Tests for the coordination agent.

Covers roster registration, project and task intents, status reporting and
name extraction.
"""

import pytest

from agent_switchboard.agents.coordination_agent import (
    DEFAULT_PROJECT_NAME,
    DEFAULT_TASK_TITLE,
    CoordinationAgent,
)
from agent_switchboard.schemas import AgentId, BroadcastLevel, TaskStatus
from tests.utils.factories import seed_store


class TestCoordinationAgentLifecycle:
    """Test registration and subscription handling."""

    def test_registers_on_construction(self, store):
        """Test the agent joins the store roster."""
        CoordinationAgent.create_default(store)

        registration = store.get_registration("shared_state")
        assert store.get_active_agents() == ["shared_state"]
        assert registration.role == "coordinator"
        assert registration.capabilities == [
            "project_management",
            "task_coordination",
            "team_collaboration",
        ]

    def test_receives_snapshots_until_closed(self, store):
        """Test close() drops the subscription."""
        agent = CoordinationAgent.create_default(store)

        store.initialize_project("Portal")
        assert agent.last_snapshot.current_project.name == "Portal"

        agent.close()
        agent.close()
        store.initialize_project("Other")
        assert agent.last_snapshot.current_project.name == "Portal"

    def test_system_prompt_reflects_live_state(self, store):
        """Test the prompt embeds the current project and roster."""
        agent = CoordinationAgent.create_default(store)
        assert "Active Project: None" in agent.get_system_prompt()

        seed_store(store, [TaskStatus.TODO])
        prompt = agent.get_system_prompt()

        assert "Active Project: Test Project" in prompt
        assert "Total Tasks: 1" in prompt
        assert "shared_state" in prompt


class TestCoordinationAgentIntents:
    """Test project, task and status intents."""

    @pytest.fixture
    def agent(self, store):
        """Create coordination agent bound to the store."""
        return CoordinationAgent.create_default(store)

    @pytest.mark.asyncio
    async def test_create_project(self, agent, store, session):
        """Test project creation and broadcast."""
        response = await agent.process("create project 'Customer Portal'", session)

        project = store.get_current_project()
        assert project.name == "Customer Portal"
        assert project.team == [str(agent_id) for agent_id in AgentId]
        assert "Project Created Successfully" in response.content
        assert response.metadata["action"] == "create_project"

        broadcast = store.get_recent_broadcasts()[-1]
        assert broadcast.level == BroadcastLevel.SUCCESS
        assert "Customer Portal" in broadcast.text

    @pytest.mark.asyncio
    async def test_create_project_default_name(self, agent, store, session):
        """Test a project without a recognizable name."""
        await agent.process("Please create a project", session)

        assert store.get_current_project().name == DEFAULT_PROJECT_NAME

    @pytest.mark.asyncio
    async def test_add_task_without_project(self, agent, store, session):
        """Test missing project is a descriptive response, not an error."""
        response = await agent.process("add task 'Design UI'", session)

        assert "No Active Project" in response.content
        assert not response.is_error
        assert store.get_current_project() is None
        assert store.get_recent_broadcasts() == []

    @pytest.mark.asyncio
    async def test_add_task(self, agent, store, session):
        """Test task creation and broadcast."""
        await agent.process("create project 'Customer Portal'", session)

        response = await agent.process("add task 'Design UI'", session)

        task = store.get_current_project().tasks[0]
        assert task.title == "Design UI"
        assert task.tags == {"collaborative"}
        assert task.assignee == "shared_state"
        assert task.created_by == "shared_state"
        assert task.status == TaskStatus.TODO
        assert "Total tasks in project: 1" in response.content
        assert store.get_recent_broadcasts()[-1].level == BroadcastLevel.INFO

    @pytest.mark.asyncio
    async def test_add_task_default_title(self, agent, store, session):
        """Test a task without a recognizable title."""
        store.initialize_project("Portal")

        await agent.process("add a task", session)

        assert store.get_current_project().tasks[0].title == DEFAULT_TASK_TITLE

    @pytest.mark.asyncio
    async def test_status_without_project(self, agent, session):
        """Test system status when nothing is tracked."""
        response = await agent.process("status", session)

        assert "System Status" in response.content
        assert "No active project" in response.content
        assert response.metadata["has_project"] is False

    @pytest.mark.asyncio
    async def test_status_report_tally(self, agent, store, session):
        """Test per-status tally and completion for [Done, Done, Todo, Blocked]."""
        seed_store(
            store,
            [TaskStatus.DONE, TaskStatus.DONE, TaskStatus.TODO, TaskStatus.BLOCKED],
        )

        response = await agent.process("What's the progress?", session)

        assert "50% (2/4 tasks completed)" in response.content
        assert "Total tasks: 4" in response.content
        assert "- Todo: 1" in response.content
        assert "- Done: 2" in response.content
        assert "- Blocked: 1" in response.content
        assert "- In Progress: 0" in response.content
        assert response.metadata["completion_percentage"] == 50

    @pytest.mark.asyncio
    async def test_status_report_empty_project(self, agent, store, session):
        """Test an empty project is 0% complete."""
        store.initialize_project("Empty")

        response = await agent.process("show status", session)

        assert "0% (0/0 tasks completed)" in response.content

    @pytest.mark.asyncio
    async def test_overview(self, agent, session):
        """Test other messages get the capability overview."""
        response = await agent.process("hello", session)

        assert "Shared State Agent Ready" in response.content
        assert "No Active Project" in response.content


class TestNameExtraction:
    """Test project name and task title extraction."""

    @pytest.mark.parametrize(
        "message,name",
        [
            ("create project 'Customer Portal'", "Customer Portal"),
            ('Create a new project "Mobile App"', "Mobile App"),
            ("Create a new project called Customer Portal", "Customer Portal"),
            ("Create a project named Atlas.", "Atlas"),
            ("new project Phoenix", "Phoenix"),
            ("create a project", None),
        ],
    )
    def test_extract_project_name(self, message, name):
        """Test project name patterns."""
        assert CoordinationAgent.extract_project_name(message) == name

    @pytest.mark.parametrize(
        "message,title",
        [
            ("add task 'Design UI'", "Design UI"),
            ('Add a task "Write tests" please', "Write tests"),
            ("Add a task to implement user authentication", "implement user authentication"),
            ("add a task", None),
        ],
    )
    def test_extract_task_title(self, message, title):
        """Test task title patterns."""
        assert CoordinationAgent.extract_task_title(message) == title
