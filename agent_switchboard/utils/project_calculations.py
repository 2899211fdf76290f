"""Project calculation utilities for status reports.

Aggregates over a shared project's tasks, used by the coordination agent and
by the CLI project view.
"""

import math

from ..schemas.unified_models import SharedProject, TaskStatus


class ProjectCalculations:
    """Utility class for project-level metrics."""

    @staticmethod
    def status_breakdown(project: SharedProject) -> dict[TaskStatus, int]:
        """Count tasks per status, including statuses with no tasks."""
        breakdown = {status: 0 for status in TaskStatus}
        for task in project.tasks:
            breakdown[task.status] += 1
        return breakdown

    @staticmethod
    def completed_count(project: SharedProject) -> int:
        """Number of tasks in the done state."""
        return sum(1 for task in project.tasks if task.status == TaskStatus.DONE)

    @staticmethod
    def completion_percentage(project: SharedProject) -> int:
        """Percent of tasks done, rounded half up; 0 for a project without tasks."""
        total = len(project.tasks)
        if total == 0:
            return 0
        done = ProjectCalculations.completed_count(project)
        # Half-up, not banker's rounding: 12.5 -> 13.
        return math.floor(done / total * 100 + 0.5)
