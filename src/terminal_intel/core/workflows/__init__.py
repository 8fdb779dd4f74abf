"""
Parameterized command workflows.
"""

from .models import TerminalWorkflow, WorkflowParameter
from .defaults import default_workflows
from .engine import WorkflowEngine, PLACEHOLDER_PATTERN

__all__ = [
    "TerminalWorkflow",
    "WorkflowParameter",
    "default_workflows",
    "WorkflowEngine",
    "PLACEHOLDER_PATTERN",
]
