"""Utility modules for the agent switchboard."""

from .identifiers import SequentialIdFactory, generate_id
from .project_calculations import ProjectCalculations

__all__ = ["ProjectCalculations", "SequentialIdFactory", "generate_id"]
