"""
Bounded per-input suggestion cache.
"""

from collections import OrderedDict
from typing import Dict, List, Optional

from ..types import AICommandSuggestion


def normalize_key(text: str) -> str:
    return text.strip().lower()


class SuggestionCache:
    """LRU cache of suggestion lists keyed by normalized input."""

    def __init__(self, capacity: int = 256):
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._entries: "OrderedDict[str, List[AICommandSuggestion]]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, text: str) -> bool:
        return normalize_key(text) in self._entries

    def get(self, text: str) -> Optional[List[AICommandSuggestion]]:
        """Cached suggestions for `text` (marking them recently used), or None."""
        key = normalize_key(text)
        if key not in self._entries:
            self.misses += 1
            return None
        self._entries.move_to_end(key)
        self.hits += 1
        return list(self._entries[key])

    def put(self, text: str, suggestions: List[AICommandSuggestion]) -> None:
        """Store a non-empty result, evicting the least recently used entry if full."""
        if not suggestions:
            return
        key = normalize_key(text)
        self._entries[key] = list(suggestions)
        self._entries.move_to_end(key)
        while len(self._entries) > self.capacity:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> Dict[str, int]:
        return {"size": len(self._entries), "capacity": self.capacity, "hits": self.hits, "misses": self.misses}
