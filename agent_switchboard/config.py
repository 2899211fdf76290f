"""Unified Configuration Settings Management for the Agent Switchboard.

This module provides centralized, hierarchical configuration management using
pydantic-settings with validation, environment variable support and cached
global access.

Features:
- Hierarchical BaseSettings classes with nested models
- Environment variable support with SWITCHBOARD_ prefix
- Field validation with bounds and custom validators
- Support for .env files and secrets directories
- Global settings caching
"""

import logging
import os
from functools import lru_cache
from typing import Any

from pydantic import Field, HttpUrl, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .schemas import AgentId


VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class APIClientSettings(BaseSettings):
    """Shared API client configuration with common patterns.

    Base class for API client configurations providing standardized
    timeout and retry behaviour.
    """

    timeout_seconds: int = Field(
        60, ge=1, le=600, description="Request timeout in seconds"
    )
    max_retries: int = Field(
        2, ge=0, le=10, description="Maximum retry attempts for failed requests"
    )
    base_retry_delay: float = Field(
        1.0,
        ge=0.0,
        le=10.0,
        description="Base delay between retries (exponential backoff)",
    )


class OpenAISettings(APIClientSettings):
    """OpenAI/OpenAI-compatible completion service configuration."""

    model_config = SettingsConfigDict(env_prefix="OPENAI_")

    api_key: str | None = Field(None, description="OpenAI API key")
    base_url: HttpUrl = Field(
        "https://api.openai.com/v1", description="OpenAI API base URL"
    )
    model: str = Field("gpt-4o-mini", description="Default completion model name")
    temperature: float = Field(
        0.3, ge=0.0, le=2.0, description="Default temperature for completions"
    )
    max_tokens: int = Field(
        2000, ge=1, le=200000, description="Maximum tokens for completions"
    )

    @property
    def is_configured(self) -> bool:
        """Whether an API key is available."""
        return bool(self.api_key and self.api_key.strip())


class RouterSettings(BaseSettings):
    """Agent router behaviour."""

    model_config = SettingsConfigDict(env_prefix="SWITCHBOARD_ROUTER_")

    default_agent: AgentId = Field(
        AgentId.AGENTIC_CHAT, description="Agent active after construction or reset"
    )
    auto_switch: bool = Field(
        False, description="Switch to the suggested agent before dispatching"
    )
    auto_switch_threshold: float = Field(
        0.7,
        ge=0.0,
        le=1.0,
        description="Suggestions must exceed this confidence to trigger a switch",
    )


class AgentSettings(BaseSettings):
    """Agent-specific configuration."""

    model_config = SettingsConfigDict(env_prefix="SWITCHBOARD_AGENTS_")

    conversation_memory_limit: int = Field(
        100,
        ge=2,
        le=10000,
        description="Messages kept in the conversational agent's own memory",
    )
    context_window_messages: int = Field(
        3,
        ge=0,
        le=50,
        description="Recent history messages folded into completion prompts",
    )
    title_word_limit: int = Field(
        6, ge=1, le=50, description="Words used to derive approval request titles"
    )


class SharedStateSettings(BaseSettings):
    """Shared state store configuration."""

    model_config = SettingsConfigDict(env_prefix="SWITCHBOARD_STATE_")

    broadcast_log_size: int = Field(
        50, ge=1, le=10000, description="Broadcast messages retained for inspection"
    )


class SwitchboardSettings(BaseSettings):
    """Main configuration combining all subsystem settings.

    This is the root configuration class that aggregates all other settings
    and provides the global configuration interface.
    """

    openai: OpenAISettings = Field(default_factory=OpenAISettings)
    router: RouterSettings = Field(default_factory=RouterSettings)
    agents: AgentSettings = Field(default_factory=AgentSettings)
    state: SharedStateSettings = Field(default_factory=SharedStateSettings)

    use_completion_service: bool = Field(
        False, description="Let agents call the completion service when configured"
    )

    # Development and debugging
    debug_mode: bool = Field(False, description="Enable debug logging")
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    config_version: str = Field("1.0.0", description="Configuration schema version")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        env_prefix="SWITCHBOARD_",
        extra="ignore",
        validate_default=True,
        case_sensitive=False,
        secrets_dir=os.getenv("SWITCHBOARD_SECRETS_DIR"),
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the logging level name."""
        level = v.strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log level '{v}'. Expected one of: {', '.join(VALID_LOG_LEVELS)}"
            )
        return level

    @model_validator(mode="after")
    def validate_configuration(self) -> "SwitchboardSettings":
        """Perform cross-field consistency adjustments."""
        if self.debug_mode:
            self.log_level = "DEBUG"
        return self

    @property
    def numeric_log_level(self) -> int:
        """The configured level as a logging constant."""
        return getattr(logging, self.log_level)

    def get_api_client_config(self, client_type: str) -> dict[str, Any]:
        """Get configuration for a specific API client.

        Args:
            client_type: Type of client (currently only ``openai``)

        Returns:
            Dictionary of client configuration values

        Raises:
            ValueError: If client type is unknown

        """
        client_map = {"openai": self.openai}

        client_config = client_map.get(client_type)
        if not client_config:
            raise ValueError(f"Unknown client type: {client_type}")

        return client_config.model_dump()


@lru_cache(maxsize=1)
def get_settings() -> SwitchboardSettings:
    """Get cached global settings instance.

    Returns:
        Global SwitchboardSettings instance

    """
    return SwitchboardSettings()


def get_completion_config() -> dict[str, Any]:
    """Get completion service client configuration."""
    return get_settings().get_api_client_config("openai")


def validate_configuration(settings: SwitchboardSettings | None = None) -> bool:
    """Validate configuration and raise descriptive errors if invalid.

    Args:
        settings: Settings to check. If None, settings are loaded afresh.

    Returns:
        True if configuration is valid

    Raises:
        ValueError: If configuration is invalid with detailed error message

    """
    try:
        test_settings = settings if settings is not None else SwitchboardSettings()

        if test_settings.use_completion_service and not test_settings.openai.is_configured:
            raise ValueError(
                "Completion service enabled but OPENAI_API_KEY is not set. "
                "Set the key or disable SWITCHBOARD_USE_COMPLETION_SERVICE."
            )

        return True

    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e!s}") from e


__all__ = [
    "APIClientSettings",
    "AgentSettings",
    "OpenAISettings",
    "RouterSettings",
    "SharedStateSettings",
    "SwitchboardSettings",
    "get_completion_config",
    "get_settings",
    "validate_configuration",
]
