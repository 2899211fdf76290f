"""Pytest configuration and fixtures for agent switchboard tests."""

from unittest.mock import AsyncMock

import pytest

from agent_switchboard.config import SwitchboardSettings
from agent_switchboard.core.router import AgentRouter
from agent_switchboard.core.shared_state import SharedStateStore
from agent_switchboard.schemas import SessionState


@pytest.fixture
def settings():
    """Settings built from defaults only, ignoring any local .env file."""
    return SwitchboardSettings(_env_file=None)


@pytest.fixture
def store():
    """Fresh shared state store."""
    return SharedStateStore()


@pytest.fixture
def router(store, settings):
    """Router with every default agent, bound to the shared store."""
    return AgentRouter(store=store, settings=settings)


@pytest.fixture
def session():
    """Empty session state for calling agents directly."""
    return SessionState()


@pytest.fixture
def mock_completion_service():
    """Completion service double returning a fixed answer."""
    service = AsyncMock()
    service.complete.return_value = "Here is a thoughtful answer from the model."
    return service


@pytest.fixture
def state_recorder(store):
    """Subscribe a recorder to the store and return the list it fills."""
    snapshots = []
    store.subscribe(snapshots.append)
    return snapshots
