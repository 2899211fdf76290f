"""Switchboard Integration Tools.

This package contains the client for the external completion service used
by agent implementations.

Available Clients:
- CompletionClient: OpenAI-compatible chat completions via langchain-openai
"""

from .completion_client import (
    CompletionClient,
    CompletionService,
    CompletionServiceError,
    to_langchain_messages,
)

__all__ = [
    "CompletionClient",
    "CompletionService",
    "CompletionServiceError",
    "to_langchain_messages",
]
