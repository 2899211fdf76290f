"""Completion service client for agent integration.

This module wraps an OpenAI-compatible chat model behind the narrow
``CompletionService`` interface agents depend on: system prompt, tool
declarations and conversation context in, generated text out.
"""

import asyncio
import logging
from typing import Protocol, runtime_checkable

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from ..config import OpenAISettings, get_completion_config
from ..schemas import Message, MessageRole, ToolDescriptor


logger = logging.getLogger(__name__)


class CompletionServiceError(Exception):
    """Raised when the completion backend fails or returns nothing usable."""


@runtime_checkable
class CompletionService(Protocol):
    """Opaque text-completion service consumed by agents."""

    async def complete(
        self,
        system_prompt: str,
        prompt: str,
        tools: list[ToolDescriptor] | None = None,
        history: list[Message] | None = None,
    ) -> str:
        """Generate text for a prompt.

        Raises:
            CompletionServiceError: If the backend fails

        """
        ...


def to_langchain_messages(
    system_prompt: str, prompt: str, history: list[Message] | None = None
) -> list[BaseMessage]:
    """Convert a system prompt, session history and new prompt to chat messages."""
    messages: list[BaseMessage] = [SystemMessage(content=system_prompt)]

    for message in history or []:
        if message.role == MessageRole.USER:
            messages.append(HumanMessage(content=message.content))
        elif message.role == MessageRole.ASSISTANT:
            messages.append(AIMessage(content=message.content))
        elif message.role == MessageRole.SYSTEM:
            messages.append(SystemMessage(content=message.content))
        # Tool messages need a tool_call_id the session does not keep.

    messages.append(HumanMessage(content=prompt))
    return messages


class CompletionClient:
    """Chat completion client backed by ``langchain_openai.ChatOpenAI``.

    Features:
    - Async invocation with retries and exponential backoff
    - Tool declarations bound in OpenAI function-calling format
    - Failures surfaced as CompletionServiceError
    """

    def __init__(
        self,
        config: OpenAISettings | None = None,
        api_key: str | None = None,
        model: str | None = None,
        max_retries: int | None = None,
        chat_model: ChatOpenAI | None = None,
    ):
        """Initialize completion client with centralized configuration.

        Args:
            config: OpenAISettings instance. If None, uses global settings.
            api_key: API key override. If None, uses config or environment variable.
            model: Model name override.
            max_retries: Retry override. If None, uses config default.
            chat_model: Pre-built chat model, mainly for tests.

        """
        if config is None:
            config = OpenAISettings(**get_completion_config())
        self.config = config

        self.api_key = api_key or self.config.api_key
        self.model_name = model or self.config.model
        self.max_retries = (
            max_retries if max_retries is not None else self.config.max_retries
        )
        self.base_retry_delay = self.config.base_retry_delay

        if chat_model is None:
            if not self.api_key:
                raise ValueError(
                    "OPENAI_API_KEY must be provided via config, parameter, "
                    "or environment variable"
                )
            chat_model = ChatOpenAI(
                model=self.model_name,
                api_key=self.api_key,
                base_url=str(self.config.base_url),
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
                timeout=self.config.timeout_seconds,
            )
        self.chat_model = chat_model

    async def complete(
        self,
        system_prompt: str,
        prompt: str,
        tools: list[ToolDescriptor] | None = None,
        history: list[Message] | None = None,
    ) -> str:
        """Generate text, retrying transient failures."""
        messages = to_langchain_messages(system_prompt, prompt, history)
        runnable = self.chat_model
        if tools:
            runnable = self.chat_model.bind_tools(
                [tool.to_openai_tool() for tool in tools]
            )

        last_error: Exception | None = None
        for attempt in range(self.max_retries + 1):
            try:
                response = await runnable.ainvoke(messages)
                return self._extract_text(response)
            except CompletionServiceError:
                raise
            except Exception as e:
                last_error = e
                if attempt < self.max_retries:
                    delay = self.base_retry_delay * (2**attempt)
                    logger.warning(
                        f"Completion attempt {attempt + 1} failed: {e}; "
                        f"retrying in {delay:.1f}s"
                    )
                    await asyncio.sleep(delay)

        raise CompletionServiceError(
            f"Completion failed after {self.max_retries + 1} attempts: {last_error}"
        ) from last_error

    @staticmethod
    def _extract_text(response: BaseMessage) -> str:
        """Pull generated text out of a chat response."""
        content = response.content
        if isinstance(content, list):
            content = "".join(
                part.get("text", "") if isinstance(part, dict) else str(part)
                for part in content
            )

        if content and content.strip():
            return content

        tool_calls = getattr(response, "tool_calls", None) or []
        if tool_calls:
            names = ", ".join(call["name"] for call in tool_calls)
            return f"Requested tool call(s): {names}"

        raise CompletionServiceError("Completion service returned an empty response")
