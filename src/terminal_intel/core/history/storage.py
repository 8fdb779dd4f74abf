"""
Key-value persistence for history and workflows.

Values are whole collections encoded as JSON. Both stores raise
PersistenceError; callers decide whether a failed write matters.
"""

import json
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ...utils.error_handling import PersistenceError
from ...utils.logging import get_logger

HISTORY_KEY = "terminal.commandHistory"
WORKFLOWS_KEY = "terminal.workflows"

logger = get_logger(__name__)


class KeyValueStore(ABC):
    """Whole-value read/write under fixed string keys."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the stored value, or None when the key was never written."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Replace the value stored under `key`."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove `key` if present."""


class InMemoryStore(KeyValueStore):
    """Store for tests and ephemeral sessions; values are JSON round-tripped."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value: Any) -> None:
        try:
            self._data[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Value for {key} is not JSON serializable: {e}") from e

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def snapshot(self) -> Dict[str, Any]:
        return {key: self.get(key) for key in self._data}


class JsonFileStore(KeyValueStore):
    """One JSON file per key inside a data directory."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory).expanduser()

    def _path_for(self, key: str) -> Path:
        safe_name = re.sub(r"[^A-Za-z0-9_.-]", "_", key)
        return self.directory / f"{safe_name}.json"

    def get(self, key: str) -> Optional[Any]:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Failed to read {path}: {e}", details={"key": key}) from e

    def set(self, key: str, value: Any) -> None:
        path = self._path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(value, f, indent=2, ensure_ascii=False)
            tmp_path.replace(path)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"Failed to write {path}: {e}", details={"key": key}) from e
        logger.debug(f"Saved {key} to {path}")

    def delete(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise PersistenceError(f"Failed to delete {path}: {e}", details={"key": key}) from e
