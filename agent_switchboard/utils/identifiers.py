"""Identifier generation for messages, projects, tasks and agent artifacts."""

import itertools
import uuid


def generate_id(prefix: str) -> str:
    """Return a collision-resistant identifier such as ``task-3f2a9c1b0d4e``."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class SequentialIdFactory:
    """Monotonic identifiers unique within one owner (e.g. one session).

    Two ids produced back to back never collide, unlike ids derived from a
    millisecond clock.
    """

    def __init__(self, prefix: str, start: int = 1):
        """Initialize the counter."""
        self.prefix = prefix
        self._start = start
        self._counter = itertools.count(start)

    def next_id(self) -> str:
        """Return the next identifier."""
        return f"{self.prefix}-{next(self._counter)}"

    def reset(self) -> None:
        """Restart numbering from the initial value."""
        self._counter = itertools.count(self._start)
