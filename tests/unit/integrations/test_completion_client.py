"""Tests for the completion service client.

The chat model is replaced by a mock so no network calls are made.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from agent_switchboard.config import OpenAISettings
from agent_switchboard.integrations.completion_client import (
    CompletionClient,
    CompletionService,
    CompletionServiceError,
    to_langchain_messages,
)
from agent_switchboard.schemas import Message, MessageRole, ToolDescriptor


@pytest.fixture
def openai_config():
    """Completion settings with an API key and no retry delay."""
    return OpenAISettings(api_key="sk-test", max_retries=2, base_retry_delay=0.0)


@pytest.fixture
def chat_model():
    """Mock chat model returning a fixed answer."""
    model = MagicMock()
    model.ainvoke = AsyncMock(return_value=AIMessage(content="model answer"))
    model.bind_tools.return_value = model
    return model


class TestMessageConversion:
    """Test history conversion."""

    def test_roles_are_mapped(self):
        """Test system prompt, history and prompt order."""
        history = [
            Message(id="msg-1", role=MessageRole.USER, content="hi"),
            Message(id="msg-2", role=MessageRole.ASSISTANT, content="hello"),
        ]

        messages = to_langchain_messages("be helpful", "next", history)

        assert [type(m) for m in messages] == [
            SystemMessage,
            HumanMessage,
            AIMessage,
            HumanMessage,
        ]
        assert messages[0].content == "be helpful"
        assert messages[-1].content == "next"


class TestCompletionClient:
    """Test CompletionClient behaviour."""

    def test_satisfies_protocol(self, openai_config, chat_model):
        """Test the client implements the service interface."""
        client = CompletionClient(openai_config, chat_model=chat_model)

        assert isinstance(client, CompletionService)

    def test_missing_api_key(self):
        """Test construction without key or model fails."""
        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            CompletionClient(OpenAISettings(api_key=None))

    def test_builds_chat_openai(self, openai_config):
        """Test ChatOpenAI is configured from settings."""
        with patch("agent_switchboard.integrations.completion_client.ChatOpenAI") as chat_cls:
            client = CompletionClient(openai_config, model="gpt-4o")

        chat_cls.assert_called_once()
        assert chat_cls.call_args.kwargs["model"] == "gpt-4o"
        assert chat_cls.call_args.kwargs["api_key"] == "sk-test"
        assert client.chat_model is chat_cls.return_value

    @pytest.mark.asyncio
    async def test_complete_returns_text(self, openai_config, chat_model):
        """Test plain completions."""
        client = CompletionClient(openai_config, chat_model=chat_model)

        result = await client.complete("system", "prompt")

        assert result == "model answer"
        chat_model.bind_tools.assert_not_called()

    @pytest.mark.asyncio
    async def test_tools_are_bound(self, openai_config, chat_model):
        """Test tool descriptors are bound in OpenAI format."""
        client = CompletionClient(openai_config, chat_model=chat_model)
        tool = ToolDescriptor(name="add_task", description="Add a task")

        await client.complete("system", "prompt", tools=[tool])

        chat_model.bind_tools.assert_called_once_with([tool.to_openai_tool()])

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self, openai_config, chat_model):
        """Test transient failures are retried."""
        chat_model.ainvoke.side_effect = [
            RuntimeError("rate limited"),
            AIMessage(content="second try"),
        ]
        client = CompletionClient(openai_config, chat_model=chat_model)

        assert await client.complete("system", "prompt") == "second try"
        assert chat_model.ainvoke.await_count == 2

    @pytest.mark.asyncio
    async def test_gives_up_after_retries(self, openai_config, chat_model):
        """Test persistent failures raise CompletionServiceError."""
        chat_model.ainvoke.side_effect = RuntimeError("down")
        client = CompletionClient(openai_config, chat_model=chat_model)

        with pytest.raises(CompletionServiceError, match="after 3 attempts"):
            await client.complete("system", "prompt")

        assert chat_model.ainvoke.await_count == 3

    @pytest.mark.asyncio
    async def test_content_parts_are_joined(self, openai_config, chat_model):
        """Test list content is flattened."""
        chat_model.ainvoke.return_value = AIMessage(
            content=[{"type": "text", "text": "part one "}, {"type": "text", "text": "two"}]
        )
        client = CompletionClient(openai_config, chat_model=chat_model)

        assert await client.complete("system", "prompt") == "part one two"

    @pytest.mark.asyncio
    async def test_tool_call_only_response(self, openai_config, chat_model):
        """Test responses with only tool calls are described."""
        chat_model.ainvoke.return_value = AIMessage(
            content="",
            tool_calls=[{"name": "add_task", "args": {}, "id": "call-1"}],
        )
        client = CompletionClient(openai_config, chat_model=chat_model)

        assert await client.complete("system", "prompt") == "Requested tool call(s): add_task"

    @pytest.mark.asyncio
    async def test_empty_response_is_an_error(self, openai_config, chat_model):
        """Test empty content is not retried."""
        chat_model.ainvoke.return_value = AIMessage(content="   ")
        client = CompletionClient(openai_config, chat_model=chat_model)

        with pytest.raises(CompletionServiceError, match="empty response"):
            await client.complete("system", "prompt")

        assert chat_model.ainvoke.await_count == 1
