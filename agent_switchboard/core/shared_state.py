"""Shared state store for multi-agent coordination.

One store instance holds the current project (with its tasks) and the roster
of registered agents. It is constructed explicitly and passed to every router
and agent that needs it; all holders observe the same aggregate.

Every mutating operation notifies each subscriber exactly once, synchronously,
after the mutation has been committed and before the call returns.
Subscribers must not mutate the store from inside their callback.
"""

import logging
from collections import deque
from collections.abc import Callable, Iterable
from datetime import datetime

from ..schemas import (
    AgentRegistration,
    BroadcastLevel,
    BroadcastMessage,
    Priority,
    ProjectStatus,
    SharedProject,
    SharedStateSnapshot,
    Task,
    TaskStatus,
)
from ..utils.identifiers import generate_id


logger = logging.getLogger(__name__)


StateSubscriber = Callable[[SharedStateSnapshot], None]
BroadcastListener = Callable[[BroadcastMessage], None]


class SharedStateStore:
    """Process-wide coordination point for project, task and roster data."""

    def __init__(self, broadcast_log_size: int = 50):
        """Initialize an empty store."""
        self._current_project: SharedProject | None = None
        self._active_agents: dict[str, AgentRegistration] = {}
        self._subscribers: list[StateSubscriber] = []
        self._broadcast_listeners: list[BroadcastListener] = []
        self._broadcasts: deque[BroadcastMessage] = deque(maxlen=broadcast_log_size)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_agent(
        self, agent_id: str, registration: AgentRegistration | dict
    ) -> AgentRegistration:
        """Insert or overwrite the roster entry for an agent."""
        if isinstance(registration, dict):
            registration = AgentRegistration(agent_id=agent_id, **registration)
        elif registration.agent_id != agent_id:
            registration = registration.model_copy(update={"agent_id": agent_id})

        self._active_agents[agent_id] = registration
        logger.info(f"Agent '{agent_id}' registered as {registration.role}")
        self._notify()
        return registration.model_copy(deep=True)

    def unregister_agent(self, agent_id: str) -> bool:
        """Remove an agent from the roster. Returns False if it was absent."""
        if agent_id not in self._active_agents:
            return False
        del self._active_agents[agent_id]
        logger.info(f"Agent '{agent_id}' unregistered")
        self._notify()
        return True

    def get_active_agents(self) -> list[str]:
        """Ids of registered agents in registration order."""
        return list(self._active_agents.keys())

    def get_registration(self, agent_id: str) -> AgentRegistration | None:
        """Roster entry for an agent, or None."""
        registration = self._active_agents.get(agent_id)
        return registration.model_copy(deep=True) if registration else None

    # ------------------------------------------------------------------
    # Project lifecycle
    # ------------------------------------------------------------------

    def initialize_project(
        self,
        name: str,
        description: str = "",
        status: ProjectStatus = ProjectStatus.PLANNING,
        priority: Priority = Priority.MEDIUM,
        team: Iterable[str] | None = None,
    ) -> SharedProject:
        """Create a new current project, discarding any previous one."""
        now = datetime.now()
        project = SharedProject(
            id=generate_id("project"),
            name=name,
            description=description,
            status=status,
            priority=priority,
            team=list(team or []),
            tasks=[],
            created_at=now,
            last_updated=now,
        )

        if self._current_project is not None:
            logger.info(
                f"Replacing project '{self._current_project.name}' "
                f"({len(self._current_project.tasks)} tasks discarded)"
            )

        self._current_project = project
        logger.info(f"Project '{name}' initialized with id {project.id}")
        self._notify()
        return project.model_copy(deep=True)

    def get_current_project(self) -> SharedProject | None:
        """Copy of the current project, or None."""
        if self._current_project is None:
            return None
        return self._current_project.model_copy(deep=True)

    # ------------------------------------------------------------------
    # Task lifecycle
    # ------------------------------------------------------------------

    def add_task(
        self,
        requesting_agent_id: str,
        title: str,
        description: str = "",
        status: TaskStatus = TaskStatus.TODO,
        priority: Priority = Priority.MEDIUM,
        tags: Iterable[str] | None = None,
        assignee: str | None = None,
    ) -> Task | None:
        """Append a task to the current project.

        Returns:
            The created task, or None if there is no current project

        """
        if self._current_project is None:
            logger.warning(
                f"Agent '{requesting_agent_id}' tried to add task '{title}' "
                "without a current project"
            )
            return None

        now = datetime.now()
        task = Task(
            id=generate_id("task"),
            title=title,
            description=description,
            status=status,
            priority=priority,
            tags=set(tags or []),
            assignee=assignee,
            created_by=requesting_agent_id,
            created_at=now,
            updated_at=now,
        )

        self._current_project.tasks.append(task)
        self._current_project.last_updated = now
        logger.info(
            f"Task '{title}' added to project '{self._current_project.name}' "
            f"by {requesting_agent_id}"
        )
        self._notify()
        return task.model_copy(deep=True)

    def update_task_status(
        self, task_id: str, status: TaskStatus, requesting_agent_id: str
    ) -> Task | None:
        """Transition a task to a new status.

        Returns:
            The updated task, or None if there is no current project or the id
            is unknown

        """
        if self._current_project is None:
            return None

        task = self._current_project.find_task(task_id)
        if task is None:
            logger.warning(f"Task '{task_id}' not found in current project")
            return None

        now = datetime.now()
        previous = task.status
        task.status = status
        task.updated_at = now
        self._current_project.last_updated = now
        logger.info(
            f"Task '{task.title}' moved from {previous} to {status} "
            f"by {requesting_agent_id}"
        )
        self._notify()
        return task.model_copy(deep=True)

    # ------------------------------------------------------------------
    # Notification
    # ------------------------------------------------------------------

    def subscribe(self, callback: StateSubscriber) -> Callable[[], None]:
        """Register a state subscriber.

        Returns:
            Function that removes the subscription; calling it twice is harmless

        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def on_broadcast(self, listener: BroadcastListener) -> Callable[[], None]:
        """Register a broadcast listener and return its remover."""
        self._broadcast_listeners.append(listener)

        def remove() -> None:
            if listener in self._broadcast_listeners:
                self._broadcast_listeners.remove(listener)

        return remove

    def broadcast_message(
        self,
        sender_id: str,
        text: str,
        level: BroadcastLevel = BroadcastLevel.INFO,
    ) -> BroadcastMessage:
        """Fan out an informational message. The aggregate is not changed."""
        broadcast = BroadcastMessage(
            id=generate_id("broadcast"),
            sender_id=sender_id,
            text=text,
            level=level,
        )
        self._broadcasts.append(broadcast)
        logger.info(f"[broadcast:{level}] {sender_id}: {text}")

        for listener in list(self._broadcast_listeners):
            try:
                listener(broadcast)
            except Exception as e:
                logger.error(f"Broadcast listener failed: {e}")

        return broadcast

    def get_recent_broadcasts(self, limit: int | None = None) -> list[BroadcastMessage]:
        """Most recent broadcasts, oldest first."""
        broadcasts = list(self._broadcasts)
        return broadcasts[-limit:] if limit else broadcasts

    def snapshot(self) -> SharedStateSnapshot:
        """Deep copy of the current aggregate."""
        return SharedStateSnapshot(
            current_project=self.get_current_project(),
            active_agents={
                agent_id: registration.model_copy(deep=True)
                for agent_id, registration in self._active_agents.items()
            },
        )

    def reset(self) -> None:
        """Drop project, roster, subscribers and broadcasts."""
        self._current_project = None
        self._active_agents.clear()
        self._subscribers.clear()
        self._broadcast_listeners.clear()
        self._broadcasts.clear()

    def _notify(self) -> None:
        """Deliver a separate post-mutation snapshot to each subscriber."""
        if not self._subscribers:
            return

        logger.debug(f"Notifying {len(self._subscribers)} state subscribers")
        for callback in list(self._subscribers):
            try:
                callback(self.snapshot())
            except Exception as e:
                logger.error(f"State subscriber failed: {e}")
