"""
Workflow data models.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class WorkflowParameter:
    """A named ``{{placeholder}}`` the user fills in before running a workflow."""
    name: str
    description: str = ""
    placeholder: str = ""
    required: bool = True
    default: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "placeholder": self.placeholder,
            "required": self.required,
            "default": self.default,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkflowParameter":
        return cls(
            name=data["name"],
            description=data.get("description", ""),
            placeholder=data.get("placeholder", ""),
            required=data.get("required", True),
            default=data.get("default"),
        )


@dataclass
class TerminalWorkflow:
    """A reusable, parameterized command template."""
    name: str
    description: str
    command: str
    parameters: List[WorkflowParameter] = field(default_factory=list)
    category: str = "General"
    tags: List[str] = field(default_factory=list)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def parameter(self, name: str) -> Optional[WorkflowParameter]:
        for param in self.parameters:
            if param.name == name:
                return param
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "command": self.command,
            "parameters": [p.to_dict() for p in self.parameters],
            "category": self.category,
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TerminalWorkflow":
        return cls(
            id=data.get("id") or str(uuid.uuid4()),
            name=data["name"],
            description=data.get("description", ""),
            command=data["command"],
            parameters=[WorkflowParameter.from_dict(p) for p in data.get("parameters", [])],
            category=data.get("category", "General"),
            tags=list(data.get("tags", [])),
        )
