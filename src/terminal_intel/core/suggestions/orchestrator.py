"""
Suggestion orchestration for one terminal session.

`update_input` is called on every edit. Cheap answers (path completion,
short input, cache hits) are applied synchronously. Everything else starts a
debounced fetch that supersedes any fetch already in flight: the old task is
cancelled and, should it still wake up, its generation token no longer
matches and it exits without touching state.
"""

import asyncio
from typing import Callable, List, Optional

from ...config.models import SuggestionsConfig
from ...utils.logging import get_logger
from ..history import CommandHistoryTracker, TrackedCommand
from ..types import AICommandSuggestion, CommandContext, SessionWriter
from .assistant import TerminalAssistant
from .cache import SuggestionCache, normalize_key
from .path_completion import complete_path
from .static_table import StaticSuggestionTable

logger = get_logger(__name__)

SuggestionListener = Callable[[List[AICommandSuggestion]], None]


class SuggestionOrchestrator:
    """Owns the current suggestion list, selection cursor and in-flight fetch."""

    def __init__(
        self,
        assistant: Optional[TerminalAssistant] = None,
        config: Optional[SuggestionsConfig] = None,
        static_table: Optional[StaticSuggestionTable] = None,
        cache: Optional[SuggestionCache] = None,
        writer: Optional[SessionWriter] = None,
        tracker: Optional[CommandHistoryTracker] = None,
        on_change: Optional[SuggestionListener] = None,
    ):
        self.assistant = assistant
        self.config = config or SuggestionsConfig()
        self.static_table = static_table or StaticSuggestionTable()
        self.cache = cache or SuggestionCache(self.config.cache_capacity)
        self.writer = writer
        self.tracker = tracker
        self.on_change = on_change

        self.current_input = ""
        self.completed_fetches = 0
        self._suggestions: List[AICommandSuggestion] = []
        self._selected_index = 0
        self._generation = 0
        self._fetch_task: Optional[asyncio.Task] = None

    @property
    def suggestions(self) -> List[AICommandSuggestion]:
        return list(self._suggestions)

    @property
    def selected_index(self) -> int:
        return self._selected_index

    @property
    def selected(self) -> Optional[AICommandSuggestion]:
        if not self._suggestions:
            return None
        return self._suggestions[self._selected_index]

    @property
    def pending(self) -> Optional[asyncio.Task]:
        """The in-flight fetch task, if any."""
        if self._fetch_task is not None and not self._fetch_task.done():
            return self._fetch_task
        return None

    def _set_suggestions(self, suggestions: List[AICommandSuggestion]) -> None:
        self._suggestions = list(suggestions)
        self._selected_index = 0
        if self.on_change is not None:
            self.on_change(list(self._suggestions))

    def _cancel_inflight(self) -> None:
        self._generation += 1
        if self._fetch_task is not None and not self._fetch_task.done():
            self._fetch_task.cancel()
        self._fetch_task = None

    def update_input(self, text: str, context: Optional[CommandContext] = None) -> Optional[asyncio.Task]:
        """React to an input change.

        Returns the debounced fetch task when one was started, None when the
        answer was applied synchronously. Starting a fetch requires a running
        event loop.
        """
        context = context or CommandContext()
        self.current_input = text

        paths = complete_path(
            text,
            context.repo_path or context.working_directory,
            self.config.max_path_results,
        )
        if paths:
            self._cancel_inflight()
            self._set_suggestions(paths)
            return None

        if len(text.strip()) < self.config.min_input_length:
            self._cancel_inflight()
            self._set_suggestions([])
            return None

        cached = self.cache.get(text)
        if cached is not None:
            self._cancel_inflight()
            self._set_suggestions(cached)
            return None

        self._cancel_inflight()
        generation = self._generation
        self._fetch_task = asyncio.get_running_loop().create_task(
            self._debounced_fetch(text, context, generation)
        )
        return self._fetch_task

    async def _debounced_fetch(self, text: str, context: CommandContext, generation: int) -> None:
        await asyncio.sleep(self.config.debounce_seconds)
        if generation != self._generation:
            return

        suggestions = await self.fetch(text, context)

        if generation != self._generation or normalize_key(self.current_input) != normalize_key(text):
            logger.debug(f"Discarding superseded suggestions for {text!r}")
            return
        self.completed_fetches += 1
        self._set_suggestions(suggestions)

    async def suggest(self, text: str, context: Optional[CommandContext] = None) -> List[AICommandSuggestion]:
        """One-shot suggestions in the same priority order as `update_input`, without debounce."""
        context = context or CommandContext()
        paths = complete_path(text, context.repo_path or context.working_directory, self.config.max_path_results)
        if paths:
            return paths
        if len(text.strip()) < self.config.min_input_length:
            return []
        cached = self.cache.get(text)
        if cached is not None:
            return cached
        return await self.fetch(text, context)

    async def fetch(self, text: str, context: Optional[CommandContext] = None) -> List[AICommandSuggestion]:
        """Provider chain then static table, without debounce or state changes.

        Never raises (except cancellation). Non-empty results are cached.
        """
        context = context or CommandContext()
        suggestions: List[AICommandSuggestion] = []

        if self.assistant is not None:
            try:
                result = await self.assistant.suggest(text, context)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.warning(f"Suggestion providers raised for {text!r}: {e}")
            else:
                if result.is_ok and result.value:
                    logger.debug(f"{len(result.value)} suggestions from {result.provider}")
                    suggestions = result.value
                else:
                    logger.debug(f"Provider chain gave {result.status.value}; using static table")

        if not suggestions:
            suggestions = self.static_table.suggest(text)

        self.cache.put(text, suggestions)
        return suggestions

    def select_next(self) -> Optional[AICommandSuggestion]:
        if self._suggestions:
            self._selected_index = min(self._selected_index + 1, len(self._suggestions) - 1)
        return self.selected

    def select_previous(self) -> Optional[AICommandSuggestion]:
        if self._suggestions:
            self._selected_index = max(self._selected_index - 1, 0)
        return self.selected

    def apply_suggestion(self, suggestion: AICommandSuggestion) -> Optional[TrackedCommand]:
        """Send the command to the session, track it, then reset input and suggestions."""
        if self.writer is not None:
            self.writer.write_input(suggestion.command + "\n")

        tracked = self.tracker.track(suggestion.command) if self.tracker is not None else None

        self._cancel_inflight()
        self.current_input = ""
        self._set_suggestions([])
        return tracked

    def apply_selected(self) -> Optional[TrackedCommand]:
        suggestion = self.selected
        if suggestion is None:
            return None
        return self.apply_suggestion(suggestion)

    def clear(self) -> None:
        self._cancel_inflight()
        self.current_input = ""
        self._set_suggestions([])

    async def aclose(self) -> None:
        """Cancel the in-flight fetch and wait for it to finish."""
        task = self._fetch_task
        self._cancel_inflight()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass
