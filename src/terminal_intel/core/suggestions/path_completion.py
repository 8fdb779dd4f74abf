"""
Filesystem path completion for path-taking commands.

Synchronous and local; any filesystem error yields an empty list.
"""

import os
from typing import List, Optional, Tuple

from ...utils.logging import get_logger
from ..types import AICommandSuggestion

logger = get_logger(__name__)

PATH_COMMANDS = frozenset({
    "cd", "ls", "cat", "vim", "nano", "open", "code",
    "rm", "mv", "cp", "mkdir", "touch", "grep", "find",
})


def split_path_input(text: str) -> Optional[Tuple[str, str]]:
    """Return (command, partial_path) if `text` starts with a path command."""
    parts = text.lstrip().split(None, 1)
    if not parts or parts[0] not in PATH_COMMANDS:
        return None
    partial = parts[1].strip() if len(parts) > 1 else ""
    return parts[0], partial


def _resolve(partial: str, working_directory: str) -> Tuple[str, str, str]:
    """Split a partial path into (directory to list, name prefix, typed directory part)."""
    typed_dir, prefix = os.path.split(partial)
    if typed_dir and not typed_dir.endswith(os.sep):
        typed_dir += os.sep

    if partial.startswith("/"):
        search_dir = typed_dir or "/"
    elif partial.startswith("~/"):
        search_dir = os.path.expanduser(typed_dir)
    else:
        search_dir = os.path.join(working_directory, typed_dir)
    return search_dir, prefix, typed_dir


def complete_path(
    text: str,
    working_directory: Optional[str] = None,
    max_results: int = 8,
) -> List[AICommandSuggestion]:
    """Completions for `text`, or [] when it is not a path command.

    Directories sort before files, then case-insensitively by name. Hidden
    entries are listed only when the typed prefix starts with a dot, and
    `cd` only ever completes directories.
    """
    parsed = split_path_input(text)
    if parsed is None:
        return []
    command, partial = parsed

    search_dir, prefix, typed_dir = _resolve(partial, working_directory or os.getcwd())

    matches: List[Tuple[str, bool]] = []
    try:
        with os.scandir(search_dir) as entries:
            for entry in entries:
                name = entry.name
                if prefix and not name.startswith(prefix):
                    continue
                if name.startswith(".") and not prefix.startswith("."):
                    continue
                try:
                    is_dir = entry.is_dir()
                except OSError:
                    continue
                if command == "cd" and not is_dir:
                    continue
                matches.append((name, is_dir))
    except OSError as e:
        logger.debug(f"Path completion could not list {search_dir}: {e}")
        return []

    matches.sort(key=lambda item: (not item[1], item[0].lower()))

    suggestions = []
    for name, is_dir in matches[:max_results]:
        display = typed_dir + name
        if " " in display:
            display = f'"{display}"'
        suggestions.append(AICommandSuggestion(
            command=f"{command} {display}",
            description="directory" if is_dir else "file",
            confidence=0.95,
            is_from_ai=False,
            category="Path",
        ))
    return suggestions
