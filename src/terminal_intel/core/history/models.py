"""
Data models for the command history.
"""

import asyncio
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

EXPORT_VERSION = "1.0"


def _parse_time(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _format_time(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class TrackedCommand:
    """One executed command and everything observed about it.

    `is_complete` is derived from `exit_code`, so the two can never disagree.
    `explain_task` holds the pending failure explanation, if any; it is
    cancelled when the entry leaves the history and is never serialized.
    """
    command: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=datetime.now)
    start_time: datetime = field(default_factory=datetime.now)
    end_time: Optional[datetime] = None
    output: str = ""
    exit_code: Optional[int] = None
    git_branch: Optional[str] = None
    working_directory: Optional[str] = None
    ai_explanation: Optional[str] = None
    explain_task: Optional[asyncio.Task] = field(default=None, repr=False, compare=False)

    @property
    def is_complete(self) -> bool:
        return self.exit_code is not None

    @property
    def status(self) -> str:
        if not self.is_complete:
            return "running"
        return "success" if self.exit_code == 0 else "failed"

    @property
    def duration(self) -> Optional[float]:
        """Seconds between start and end, None while running."""
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds()

    @property
    def duration_formatted(self) -> str:
        duration = self.duration
        if duration is None:
            return "Running..."
        if duration < 1:
            return f"{duration * 1000:.0f}ms"
        if duration < 60:
            return f"{duration:.1f}s"
        return f"{int(duration // 60)}m {int(duration % 60)}s"

    def finish(self, exit_code: int, end_time: Optional[datetime] = None) -> None:
        """Record completion; the end time is never earlier than the start."""
        end_time = end_time or datetime.now()
        self.end_time = max(end_time, self.start_time)
        self.exit_code = exit_code

    def cancel_explanation(self) -> None:
        if self.explain_task is not None and not self.explain_task.done():
            self.explain_task.cancel()
        self.explain_task = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "command": self.command,
            "timestamp": _format_time(self.timestamp),
            "start_time": _format_time(self.start_time),
            "end_time": _format_time(self.end_time),
            "output": self.output,
            "exit_code": self.exit_code,
            "git_branch": self.git_branch,
            "working_directory": self.working_directory,
            "ai_explanation": self.ai_explanation,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrackedCommand":
        """Rebuild an entry from `to_dict` output.

        Raises:
            KeyError: If the command text is missing
            TypeError: If the entry is not a mapping
            ValueError: If a timestamp is malformed
        """
        if not isinstance(data, dict):
            raise TypeError(f"history entry must be an object, got {type(data).__name__}")
        timestamp = _parse_time(data.get("timestamp")) or datetime.now()
        return cls(
            command=data["command"],
            id=data.get("id") or str(uuid.uuid4()),
            timestamp=timestamp,
            start_time=_parse_time(data.get("start_time")) or timestamp,
            end_time=_parse_time(data.get("end_time")),
            output=data.get("output") or "",
            exit_code=data.get("exit_code"),
            git_branch=data.get("git_branch"),
            working_directory=data.get("working_directory"),
            ai_explanation=data.get("ai_explanation"),
        )


@dataclass
class HistoryStats:
    """Aggregate figures over a list of tracked commands."""
    total_commands: int
    successful_commands: int
    failed_commands: int
    total_duration: float
    git_commands: int

    @property
    def success_rate(self) -> float:
        if self.total_commands == 0:
            return 0.0
        return self.successful_commands / self.total_commands

    @property
    def average_duration(self) -> float:
        if self.total_commands == 0:
            return 0.0
        return self.total_duration / self.total_commands

    @classmethod
    def from_commands(cls, commands: List[TrackedCommand]) -> "HistoryStats":
        return cls(
            total_commands=len(commands),
            successful_commands=sum(1 for c in commands if c.exit_code == 0),
            failed_commands=sum(1 for c in commands if c.exit_code not in (None, 0)),
            total_duration=sum(c.duration for c in commands if c.duration is not None),
            git_commands=sum(1 for c in commands if c.command.startswith("git ")),
        )


@dataclass
class SessionExport:
    """A named, versioned snapshot of history for sharing."""
    name: str
    commands: List[TrackedCommand]
    exported_at: datetime = field(default_factory=datetime.now)
    version: str = EXPORT_VERSION

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "name": self.name,
            "exported_at": _format_time(self.exported_at),
            "commands": [c.to_dict() for c in self.commands],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionExport":
        commands = data.get("commands", [])
        if not isinstance(commands, list):
            raise TypeError("commands must be a list")
        return cls(
            name=data["name"],
            commands=[TrackedCommand.from_dict(c) for c in commands],
            exported_at=_parse_time(data.get("exported_at")) or datetime.now(),
            version=data.get("version", EXPORT_VERSION),
        )
