"""
Shared types for the suggestion and translation pipeline.

Everything here is ephemeral: built per request, passed by value, never
persisted.
"""

import platform
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Protocol


class CommandCategory(Enum):
    """Categories a translated command can fall into."""
    GIT = "Git"
    FILE = "File Management"
    NETWORK = "Network"
    SYSTEM = "System"
    DOCKER = "Docker"
    NPM = "NPM/Yarn"
    OTHER = "Other"

    @classmethod
    def from_label(cls, label: Optional[str]) -> "CommandCategory":
        """Map a free-form label from a model answer onto a category."""
        if not label:
            return cls.OTHER
        normalized = label.strip().lower()
        for category in cls:
            if category.value.lower() == normalized or category.name.lower() == normalized:
                return category
        aliases = {
            "file": cls.FILE,
            "files": cls.FILE,
            "npm": cls.NPM,
            "yarn": cls.NPM,
            "node": cls.NPM,
        }
        return aliases.get(normalized, cls.OTHER)


@dataclass(frozen=True)
class AICommandSuggestion:
    """One ranked command suggestion."""
    command: str
    description: str
    confidence: float
    is_from_ai: bool
    category: Optional[str] = None

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within [0, 1], got {self.confidence}")


@dataclass
class CommandContext:
    """What the pipeline knows about the session when a request is made."""
    working_directory: Optional[str] = None
    git_branch: Optional[str] = None
    repo_path: Optional[str] = None
    recent_commands: List[str] = field(default_factory=list)
    environment: Dict[str, str] = field(default_factory=dict)
    os_type: str = field(default_factory=platform.system)


@dataclass
class NLCommandResponse:
    """Result of translating a natural-language request into a command."""
    command: str
    explanation: str
    confidence: float
    alternatives: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    category: CommandCategory = CommandCategory.OTHER

    @property
    def has_placeholders(self) -> bool:
        """True while the command still contains {{name}} placeholders."""
        return "{{" in self.command and "}}" in self.command

    @property
    def is_destructive(self) -> bool:
        return bool(self.warnings)


# Translation requests carry the same context as suggestion requests.
NLContext = CommandContext


class SessionWriter(Protocol):
    """The terminal session as seen by this layer: text goes in, nothing comes back."""

    def write_input(self, text: str) -> None:
        ...
