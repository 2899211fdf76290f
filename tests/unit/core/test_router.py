"""Test suite for core/router.py.

Tests agent switching, dispatch bookkeeping, failure conversion,
auto-switching and session state accessors.
"""

import pytest

from agent_switchboard.agents import ConversationalAgent, ToolUIAgent
from agent_switchboard.core.agent_protocol import INVALID_INPUT_MESSAGE
from agent_switchboard.core.agent_registry import UnknownAgentError
from agent_switchboard.core.router import (
    PREVIOUS_AGENT_KEY,
    SWITCH_REASON_KEY,
    SWITCH_TIME_KEY,
    AgentRouter,
)
from agent_switchboard.schemas import (
    AgentDescriptor,
    AgentId,
    MessageRole,
    Response,
    ResponseKind,
    SessionState,
)


class ExplodingAgent(ToolUIAgent):
    """Agent whose process call raises instead of returning."""

    def __init__(self):
        super().__init__(
            AgentDescriptor(id=AgentId.TOOL_UI, display_name="Exploding")
        )

    async def process(self, message: str, session: SessionState) -> Response:
        raise RuntimeError("agent crashed")


class TestAgentSwitching:
    """Test the active agent state machine."""

    def test_default_agent(self, router):
        """Test the router starts on the conversational agent."""
        assert router.get_current_agent_id() == AgentId.AGENTIC_CHAT
        assert router.list_available_agents() == [str(a) for a in AgentId]

    @pytest.mark.parametrize("agent_id", list(AgentId))
    def test_switch_to_every_known_agent(self, router, agent_id):
        """Test switching records the previous agent."""
        previous = router.get_current_agent_id()

        router.switch_agent(agent_id)

        assert router.get_current_agent_id() == agent_id
        context = router.get_state().context
        assert context[PREVIOUS_AGENT_KEY] == str(previous)
        assert SWITCH_TIME_KEY in context
        assert context[SWITCH_REASON_KEY]

    def test_switch_unknown_agent_fails(self, router):
        """Test unknown ids leave the state unchanged."""
        with pytest.raises(UnknownAgentError):
            router.switch_agent("unknown_agent")

        assert router.get_current_agent_id() == AgentId.AGENTIC_CHAT
        assert router.get_state().context == {}

    def test_switch_merges_context(self, router):
        """Test existing context keys survive a switch."""
        router.update_context("customer", "ACME")

        router.switch_agent(AgentId.HUMAN_LOOP, "needs approval")

        context = router.get_state().context
        assert context["customer"] == "ACME"
        assert context[SWITCH_REASON_KEY] == "needs approval"

    def test_consecutive_switches_track_previous(self, router):
        """Test previous agent follows the chain of switches."""
        router.switch_agent(AgentId.GENERATIVE_UI)
        router.switch_agent(AgentId.SHARED_STATE)

        assert router.get_state().context[PREVIOUS_AGENT_KEY] == "generative_ui"


class TestDispatch:
    """Test message dispatch."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", ["", "   "])
    async def test_blank_message_does_not_touch_history(self, router, message):
        """Test blank input is answered but not recorded."""
        response = await router.dispatch(message)

        assert response.content == INVALID_INPUT_MESSAGE
        assert response.kind == ResponseKind.TEXT
        assert router.get_conversation_history() == []
        assert router.get_state().is_processing is False

    @pytest.mark.asyncio
    async def test_dispatch_records_user_then_assistant(self, router):
        """Test history grows by exactly two ordered entries."""
        response = await router.dispatch("hello there")
        history = router.get_conversation_history()

        assert len(history) == 2
        assert history[0].role == MessageRole.USER
        assert history[0].content == "hello there"
        assert history[1].role == MessageRole.ASSISTANT
        assert history[1].content == response.content
        assert history[1].agent_tag == "agentic_chat"
        assert router.get_state().is_processing is False

    @pytest.mark.asyncio
    async def test_message_ids_are_unique_and_ordered(self, router):
        """Test back-to-back messages never share an id."""
        await router.dispatch("first")
        await router.dispatch("second")

        ids = [m.id for m in router.get_conversation_history()]
        assert ids == ["msg-1", "msg-2", "msg-3", "msg-4"]

    @pytest.mark.asyncio
    async def test_dispatch_with_target_switches_first(self, router):
        """Test explicit target selects the agent before processing."""
        response = await router.dispatch("anything", AgentId.TOOL_UI)

        assert response.content == "Tool UI Agent ready!"
        assert router.get_current_agent_id() == AgentId.TOOL_UI
        assert router.get_state().context[PREVIOUS_AGENT_KEY] == "agentic_chat"

    @pytest.mark.asyncio
    async def test_dispatch_unknown_target_returns_error(self, router):
        """Test a failed switch becomes an error response."""
        response = await router.dispatch("hello", "unknown_agent")

        assert response.kind == ResponseKind.TEXT
        assert response.is_error
        assert response.metadata["original_message"] == "hello"
        assert router.get_current_agent_id() == AgentId.AGENTIC_CHAT
        assert router.get_conversation_history() == []
        assert router.get_state().is_processing is False

    @pytest.mark.asyncio
    async def test_dispatch_never_raises(self, store, settings):
        """Test an agent raising from process is converted."""
        router = AgentRouter(
            agents=[ConversationalAgent.create_default(), ExplodingAgent()],
            store=store,
            settings=settings,
        )

        response = await router.dispatch("boom", AgentId.TOOL_UI)

        assert response.is_error
        assert "agent crashed" in response.metadata["error_detail"]
        assert router.get_state().is_processing is False

    @pytest.mark.asyncio
    async def test_tools_snapshot_follows_active_agent(self, router):
        """Test the tools snapshot is refreshed after dispatch."""
        await router.dispatch("show status", AgentId.SHARED_STATE)

        names = [tool.name for tool in router.get_state().tools_snapshot]
        assert names == ["create_project", "add_task"]

    @pytest.mark.asyncio
    async def test_agent_receives_session_copy(self, router):
        """Test agents see the user message already recorded."""
        await router.dispatch("hello")
        await router.dispatch("start something")

        response = router.get_conversation_history()[-1]
        assert "Building on our previous discussion" in response.content


class TestAutoSwitch:
    """Test suggestion-driven switching."""

    @pytest.mark.asyncio
    async def test_auto_switch_above_threshold(self, store, settings):
        """Test a confident suggestion switches before dispatch."""
        router = AgentRouter(store=store, settings=settings, auto_switch=True)

        response = await router.dispatch("Please approve the deployment")

        assert router.get_current_agent_id() == AgentId.HUMAN_LOOP
        assert response.kind == ResponseKind.APPROVAL_REQUEST
        assert "Human in Loop" in router.get_state().context[SWITCH_REASON_KEY]

    @pytest.mark.asyncio
    async def test_auto_switch_requires_strictly_greater(self, store, settings):
        """Test a suggestion equal to the threshold does not switch."""
        router = AgentRouter(store=store, settings=settings, auto_switch=True)

        await router.dispatch("predict next quarter")

        assert router.get_current_agent_id() == AgentId.AGENTIC_CHAT

    @pytest.mark.asyncio
    async def test_auto_switch_disabled_by_default(self, router):
        """Test suggestions alone never switch agents."""
        await router.dispatch("Please approve the deployment")

        assert router.get_current_agent_id() == AgentId.AGENTIC_CHAT

    @pytest.mark.asyncio
    async def test_explicit_target_wins_over_suggestion(self, store, settings):
        """Test explicit targets bypass auto-switching."""
        router = AgentRouter(store=store, settings=settings, auto_switch=True)

        await router.dispatch("Please approve the deployment", AgentId.TOOL_UI)

        assert router.get_current_agent_id() == AgentId.TOOL_UI


class TestSessionAccessors:
    """Test read-only accessors and session maintenance."""

    def test_suggest_is_read_only(self, router):
        """Test suggestions do not change state."""
        before = router.get_state()

        suggestion = router.suggest("create a dashboard")

        assert suggestion.suggested_agent_id == AgentId.GENERATIVE_UI
        assert router.get_state() == before

    def test_get_state_is_a_copy(self, router):
        """Test mutating the returned state has no effect."""
        state = router.get_state()
        state.context["leak"] = True

        assert "leak" not in router.get_state().context

    @pytest.mark.asyncio
    async def test_history_limit(self, router):
        """Test history slicing keeps the most recent messages."""
        for message in ["one", "two", "three"]:
            await router.dispatch(message)

        assert len(router.get_conversation_history()) == 6
        limited = router.get_conversation_history(limit=2)
        assert [m.role for m in limited] == [MessageRole.USER, MessageRole.ASSISTANT]
        assert limited[0].content == "three"
        assert router.get_conversation_history(limit=0) == []

    def test_context_management(self, router):
        """Test update and clear of context."""
        router.update_context("a", 1)
        router.update_context("b", 2)
        assert router.get_state().context == {"a": 1, "b": 2}

        router.clear_context()
        assert router.get_state().context == {}

    def test_agent_descriptors(self, router):
        """Test descriptors flag the current agent."""
        router.switch_agent(AgentId.PREDICTIVE_STATE)

        infos = router.list_agent_descriptors()
        current = [info.id for info in infos if info.is_current]

        assert current == [AgentId.PREDICTIVE_STATE]
        assert all(info.is_available for info in infos)
        assert router.get_agent_descriptor("ghost") is None
        assert router.get_agent_descriptor(AgentId.HUMAN_LOOP).display_name == "Human in Loop"

    @pytest.mark.asyncio
    async def test_reset(self, router):
        """Test reset restores defaults."""
        await router.dispatch("hello", AgentId.TOOL_UI)
        router.update_context("a", 1)

        router.reset()

        state = router.get_state()
        assert state.active_agent_id == AgentId.AGENTIC_CHAT
        assert state.history == []
        assert state.context == {}
        assert state.is_processing is False

    def test_default_agent_must_be_registered(self, store, settings):
        """Test construction fails when the default agent is missing."""
        with pytest.raises(UnknownAgentError):
            AgentRouter(agents=[ToolUIAgent.create_default()], store=store, settings=settings)


class TestRouterLifecycle:
    """Test releasing store subscriptions and history isolation."""

    def test_close_releases_store_subscription(self, store, settings):
        """Test closed routers no longer follow the shared store."""
        routers = [AgentRouter(store=store, settings=settings) for _ in range(20)]
        for router in routers[1:]:
            router.close()

        store.initialize_project("After close")

        coordinators = [router.get_agent(AgentId.SHARED_STATE) for router in routers]
        assert coordinators[0].last_snapshot.current_project.name == "After close"
        for coordinator in coordinators[1:]:
            snapshot = coordinator.last_snapshot
            assert snapshot is None or snapshot.current_project is None

    def test_close_is_idempotent(self, store, settings):
        """Test closing twice is harmless."""
        router = AgentRouter(store=store, settings=settings)

        router.close()
        router.close()
        store.initialize_project("Portal")

        assert router.get_agent(AgentId.SHARED_STATE).last_snapshot is None

    @pytest.mark.asyncio
    async def test_history_metadata_is_isolated_from_response(self, router):
        """Test editing a returned response leaves the recorded history intact."""
        response = await router.dispatch(
            "create project 'Customer Portal'", AgentId.SHARED_STATE
        )

        response.metadata["project"]["name"] = "Tampered"

        recorded = router.get_conversation_history()[-1]
        assert recorded.metadata["project"]["name"] == "Customer Portal"
