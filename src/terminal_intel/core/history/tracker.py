"""
Command history tracking.

The tracker owns the ordered, bounded list of executed commands. Callers get
copies; entries are only mutated through the tracker. Every mutation writes
the whole list to the store. A failed command spawns a detached task that
asks the AI layer for an explanation and attaches it to the entry if the
entry is still there when the answer arrives.
"""

import asyncio
import copy
import os
import subprocess
from collections import deque
from typing import Any, Awaitable, Callable, Deque, Dict, List, Optional

from ...utils.error_handling import PersistenceError, ValidationError, validate_input
from ...utils.logging import get_logger
from .models import EXPORT_VERSION, HistoryStats, SessionExport, TrackedCommand
from .storage import HISTORY_KEY, KeyValueStore

logger = get_logger(__name__)

# (command, output, working_directory) -> explanation or None
FailureExplainer = Callable[[str, str, Optional[str]], Awaitable[Optional[str]]]
BranchLookup = Callable[[Optional[str]], Optional[str]]


def lookup_git_branch(path: Optional[str], timeout: float = 2.0) -> Optional[str]:
    """Current branch of the repository at `path`, or None on any failure."""
    args = ["git"]
    if path:
        args += ["-C", path]
    args += ["rev-parse", "--abbrev-ref", "HEAD"]
    try:
        result = subprocess.run(args, capture_output=True, text=True, timeout=timeout)
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"git branch lookup failed: {e}")
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


class CommandHistoryTracker:
    """Bounded, persisted history of executed commands."""

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        explainer: Optional[FailureExplainer] = None,
        max_entries: int = 100,
        working_directory: Optional[str] = None,
        branch_lookup: Optional[BranchLookup] = None,
        git_timeout: float = 2.0,
    ):
        if max_entries < 1:
            raise ValidationError("max_entries must be positive", details={"max_entries": max_entries})
        self.store = store
        self.explainer = explainer
        self.max_entries = max_entries
        self.working_directory = working_directory
        self._branch_lookup = branch_lookup or (lambda path: lookup_git_branch(path, git_timeout))
        self._entries: Deque[TrackedCommand] = deque()

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def commands(self) -> List[TrackedCommand]:
        """Copies of all entries, oldest first."""
        return [self._copy(entry) for entry in self._entries]

    @staticmethod
    def _copy(entry: TrackedCommand) -> TrackedCommand:
        duplicate = copy.copy(entry)
        duplicate.explain_task = None
        return duplicate

    def _find(self, command_id: str) -> Optional[TrackedCommand]:
        for entry in self._entries:
            if entry.id == command_id:
                return entry
        return None

    def get(self, command_id: str) -> Optional[TrackedCommand]:
        entry = self._find(command_id)
        return self._copy(entry) if entry else None

    def pending_explanation(self, command_id: str) -> Optional[asyncio.Task]:
        """The in-flight explanation task for an entry, if one is running."""
        entry = self._find(command_id)
        return entry.explain_task if entry else None

    def track(self, command_text: str, working_directory: Optional[str] = None) -> TrackedCommand:
        """Record a submitted command and return a copy of the new entry."""
        validate_input(command_text, "command_text", str, allow_empty=False)

        cwd = working_directory or self.working_directory or os.getcwd()
        entry = TrackedCommand(
            command=command_text,
            git_branch=self._branch_lookup(cwd),
            working_directory=cwd,
        )
        self._entries.append(entry)

        while len(self._entries) > self.max_entries:
            evicted = self._entries.popleft()
            evicted.cancel_explanation()

        self.save()
        logger.debug(f"Tracked command {entry.id}: {command_text!r}")
        return self._copy(entry)

    def update_output(self, command_id: str, text: str, append: bool = True) -> bool:
        """Append to (or replace) the captured output. False if the id is unknown."""
        entry = self._find(command_id)
        if entry is None:
            logger.debug(f"update_output for unknown command {command_id}")
            return False
        entry.output = entry.output + text if append else text
        self.save()
        return True

    def complete(self, command_id: str, exit_code: int) -> Optional[TrackedCommand]:
        """Finalize an entry; a non-zero exit schedules a failure explanation.

        The explanation runs detached from the caller and needs a running
        event loop; without one the entry is completed but not explained.
        """
        entry = self._find(command_id)
        if entry is None:
            logger.debug(f"complete for unknown command {command_id}")
            return None

        entry.finish(exit_code)
        self.save()

        if exit_code != 0 and self.explainer is not None:
            self._schedule_explanation(entry)

        return self._copy(entry)

    def _schedule_explanation(self, entry: TrackedCommand) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(f"No running event loop; skipping explanation for {entry.id}")
            return

        entry.cancel_explanation()
        entry.explain_task = loop.create_task(
            self._explain(entry.id, entry.command, entry.output, entry.working_directory)
        )

    async def _explain(self, command_id: str, command: str, output: str, cwd: Optional[str]) -> None:
        try:
            explanation = await self.explainer(command, output, cwd)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.debug(f"Failure explanation for {command_id} failed: {e}")
            return

        entry = self._find(command_id)
        if entry is None:
            logger.debug(f"Dropping explanation for evicted command {command_id}")
            return
        entry.explain_task = None
        if explanation:
            entry.ai_explanation = explanation
            self.save()

    def recent_commands(self, n: int) -> List[str]:
        """Command text of the last `n` entries, oldest first."""
        if n <= 0:
            return []
        return [entry.command for entry in list(self._entries)[-n:]]

    def clear(self) -> None:
        """Drop every entry and cancel outstanding explanations."""
        self.cancel_pending()
        self._entries.clear()
        self.save()

    def stats(self) -> HistoryStats:
        return HistoryStats.from_commands(list(self._entries))

    def save(self) -> None:
        """Write the whole history to the store. Failures are logged, not raised."""
        if self.store is None:
            return
        try:
            self.store.set(HISTORY_KEY, [entry.to_dict() for entry in self._entries])
        except PersistenceError as e:
            logger.warning(f"Failed to save command history: {e}")

    def load(self) -> int:
        """Replace in-memory history with the persisted snapshot.

        Returns:
            Number of entries restored
        """
        if self.store is None:
            return 0
        try:
            raw = self.store.get(HISTORY_KEY) or []
        except PersistenceError as e:
            logger.warning(f"Failed to load command history: {e}")
            return 0
        if not isinstance(raw, list):
            logger.warning(f"Ignoring persisted history of type {type(raw).__name__}")
            return 0

        restored = []
        for item in raw:
            try:
                restored.append(TrackedCommand.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed history entry: {e}")

        self.cancel_pending()
        self._entries = deque(restored[-self.max_entries:])
        logger.debug(f"Loaded {len(self._entries)} history entries")
        return len(self._entries)

    def cancel_pending(self) -> None:
        """Cancel every outstanding failure explanation."""
        for entry in self._entries:
            entry.cancel_explanation()

    def export_session(self, name: str, redact: Optional[Callable[[str], str]] = None) -> Dict[str, Any]:
        """Versioned export of the current history.

        Args:
            name: Display name of the exported session
            redact: Optional text filter applied to every entry's output
        """
        commands = self.commands
        if redact is not None:
            for entry in commands:
                entry.output = redact(entry.output)
        return SessionExport(name=name, commands=commands).to_dict()

    @staticmethod
    def import_session(data: Dict[str, Any]) -> SessionExport:
        """Parse an export produced by `export_session`.

        The imported commands are returned as a separate session and do not
        touch the live history.

        Raises:
            ValidationError: If the data is not a supported export
        """
        if not isinstance(data, dict):
            raise ValidationError("Session export must be a JSON object")
        version = data.get("version")
        if version != EXPORT_VERSION:
            raise ValidationError(
                f"Unsupported session export version: {version!r}",
                details={"version": version},
            )
        try:
            session = SessionExport.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Malformed session export: {e}") from e
        session.name = f"{session.name} (Imported)"
        return session
