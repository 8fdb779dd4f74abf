"""
Workflow search, substitution and authoring.

`resolve` is a pure substitution: it does not check that required
parameters were supplied. Callers use `missing_required` to prompt first.
"""

import re
from typing import Dict, List, Mapping, Optional, Union

from ...utils.error_handling import PersistenceError, ValidationError
from ...utils.logging import get_logger
from ..history.storage import WORKFLOWS_KEY, KeyValueStore
from .defaults import default_workflows
from .models import TerminalWorkflow, WorkflowParameter

logger = get_logger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{\{(\w+)\}\}")


class WorkflowEngine:
    """In-memory workflow collection with optional persistence."""

    def __init__(self, store: Optional[KeyValueStore] = None,
                 workflows: Optional[List[TerminalWorkflow]] = None):
        self.store = store
        self._workflows: List[TerminalWorkflow] = list(workflows) if workflows is not None else default_workflows()

    @property
    def workflows(self) -> List[TerminalWorkflow]:
        return list(self._workflows)

    def get(self, workflow_id: str) -> Optional[TerminalWorkflow]:
        for workflow in self._workflows:
            if workflow.id == workflow_id:
                return workflow
        return None

    def find_by_name(self, name: str) -> Optional[TerminalWorkflow]:
        lowered = name.strip().lower()
        for workflow in self._workflows:
            if workflow.name.lower() == lowered:
                return workflow
        return None

    def search(self, query: str = "") -> List[TerminalWorkflow]:
        """Case-insensitive substring match over name, description, command and tags."""
        needle = (query or "").strip().lower()
        if not needle:
            return self.workflows
        return [
            w for w in self._workflows
            if needle in w.name.lower()
            or needle in w.description.lower()
            or needle in w.command.lower()
            or any(needle in tag.lower() for tag in w.tags)
        ]

    def categories(self) -> List[str]:
        return sorted({w.category for w in self._workflows})

    @staticmethod
    def resolve(workflow: Union[TerminalWorkflow, str], values: Mapping[str, str]) -> str:
        """Replace every ``{{name}}`` that has a value; leave the rest literal."""
        template = workflow.command if isinstance(workflow, TerminalWorkflow) else workflow
        for name, value in values.items():
            template = template.replace(f"{{{{{name}}}}}", str(value))
        return template

    @staticmethod
    def with_defaults(workflow: TerminalWorkflow, values: Mapping[str, str]) -> Dict[str, str]:
        """`values` plus declared defaults for parameters left empty."""
        merged = {p.name: p.default for p in workflow.parameters if p.default is not None}
        merged.update({k: v for k, v in values.items() if v is not None and v != ""})
        return merged

    @staticmethod
    def missing_required(workflow: TerminalWorkflow, values: Mapping[str, str]) -> List[str]:
        """Required parameters with neither a supplied value nor a default."""
        return [
            p.name for p in workflow.parameters
            if p.required and not values.get(p.name) and p.default is None
        ]

    @staticmethod
    def extract_parameters(command: str) -> List[WorkflowParameter]:
        """Declared parameters for every distinct placeholder, in order of appearance."""
        names = dict.fromkeys(PLACEHOLDER_PATTERN.findall(command))
        return [WorkflowParameter(name=name, description=name.replace("_", " ").capitalize()) for name in names]

    def add(self, workflow: TerminalWorkflow) -> TerminalWorkflow:
        """Add a workflow, deriving parameters from its command when none are declared."""
        if not workflow.name.strip() or not workflow.command.strip():
            raise ValidationError("Workflow name and command are required")
        if not workflow.parameters:
            workflow.parameters = self.extract_parameters(workflow.command)
        self._workflows.append(workflow)
        self.save()
        return workflow

    def remove(self, workflow_id: str) -> bool:
        before = len(self._workflows)
        self._workflows = [w for w in self._workflows if w.id != workflow_id]
        removed = len(self._workflows) != before
        if removed:
            self.save()
        return removed

    def save(self) -> None:
        if self.store is None:
            return
        try:
            self.store.set(WORKFLOWS_KEY, [w.to_dict() for w in self._workflows])
        except PersistenceError as e:
            logger.warning(f"Failed to save workflows: {e}")

    def load(self) -> int:
        """Load persisted workflows; keeps the seed list when nothing was saved."""
        if self.store is None:
            return len(self._workflows)
        try:
            raw = self.store.get(WORKFLOWS_KEY)
        except PersistenceError as e:
            logger.warning(f"Failed to load workflows: {e}")
            return len(self._workflows)
        if raw is None:
            return len(self._workflows)

        loaded = []
        for item in raw:
            try:
                loaded.append(TerminalWorkflow.from_dict(item))
            except (KeyError, TypeError) as e:
                logger.warning(f"Skipping malformed workflow: {e}")
        self._workflows = loaded
        return len(loaded)
