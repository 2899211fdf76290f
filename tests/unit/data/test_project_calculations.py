"""Tests for utils/project_calculations.py."""

import pytest

from agent_switchboard.schemas import TaskStatus
from agent_switchboard.utils.project_calculations import ProjectCalculations
from tests.utils.factories import make_project

D, T, B, P = TaskStatus.DONE, TaskStatus.TODO, TaskStatus.BLOCKED, TaskStatus.IN_PROGRESS


class TestProjectCalculations:
    """Test completion and tally helpers."""

    @pytest.mark.parametrize(
        "statuses,expected",
        [
            ([], 0),
            ([D, D, T, B], 50),
            ([D, T, T], 33),
            ([D, D, T], 67),
            ([D, T, T, T, T, T, T, T], 13),
            ([D, D, D, T, T, T, T, T], 38),
            ([D], 100),
            ([T, P], 0),
        ],
    )
    def test_completion_percentage(self, statuses, expected):
        """Test rounding half up and the empty project."""
        assert ProjectCalculations.completion_percentage(make_project(statuses)) == expected

    def test_status_breakdown_includes_zero_counts(self):
        """Test every status is reported."""
        breakdown = ProjectCalculations.status_breakdown(make_project([D, D, T, B]))

        assert breakdown == {
            TaskStatus.TODO: 1,
            TaskStatus.IN_PROGRESS: 0,
            TaskStatus.TESTING: 0,
            TaskStatus.DONE: 2,
            TaskStatus.BLOCKED: 1,
        }
        assert list(breakdown) == list(TaskStatus)

    def test_completed_count(self):
        """Test done tasks are counted."""
        assert ProjectCalculations.completed_count(make_project([D, P, D])) == 2
