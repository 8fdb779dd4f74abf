"""
Command history: tracked entries, persistence and the tracker itself.
"""

from .models import TrackedCommand, HistoryStats, SessionExport, EXPORT_VERSION
from .storage import KeyValueStore, InMemoryStore, JsonFileStore, HISTORY_KEY, WORKFLOWS_KEY
from .tracker import CommandHistoryTracker, FailureExplainer, lookup_git_branch

__all__ = [
    "TrackedCommand",
    "HistoryStats",
    "SessionExport",
    "EXPORT_VERSION",
    "KeyValueStore",
    "InMemoryStore",
    "JsonFileStore",
    "HISTORY_KEY",
    "WORKFLOWS_KEY",
    "CommandHistoryTracker",
    "FailureExplainer",
    "lookup_git_branch",
]
