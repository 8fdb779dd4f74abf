"""
Per-session wiring of the terminal intelligence layer.

A TerminalSession builds its own redactor, providers, tracker, orchestrator,
translator and workflow engine, and tears them down in `aclose`. Nothing is
shared between sessions.
"""

import os
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .config.models import TerminalIntelConfig
from .core.availability import AvailabilityMonitor
from .core.history import CommandHistoryTracker, JsonFileStore, KeyValueStore, TrackedCommand, lookup_git_branch
from .core.providers import BaseLLMProvider, close_providers, create_providers
from .core.redaction import RedactionResult, SecretRedactor
from .core.suggestions import NLTranslator, SuggestionOrchestrator, TerminalAssistant
from .core.suggestions.orchestrator import SuggestionListener
from .core.types import CommandContext, NLCommandResponse, SessionWriter
from .core.workflows import TerminalWorkflow, WorkflowEngine
from .utils.error_handling import ValidationError
from .utils.logging import get_logger

logger = get_logger(__name__)


class TerminalSession:
    """Everything one embedded terminal needs, created and destroyed together."""

    def __init__(
        self,
        config: Optional[TerminalIntelConfig] = None,
        writer: Optional[SessionWriter] = None,
        store: Optional[KeyValueStore] = None,
        providers: Optional[Tuple[BaseLLMProvider, Optional[BaseLLMProvider]]] = None,
        working_directory: Optional[str] = None,
        on_suggestions: Optional[SuggestionListener] = None,
    ):
        self.config = config or TerminalIntelConfig()
        self.writer = writer
        self.working_directory = working_directory or os.getcwd()
        self.store = store if store is not None else JsonFileStore(self.config.app.data_dir)

        self.redactor = SecretRedactor(max_dots=self.config.redaction.max_mask_dots)

        self.local_provider, self.cloud_provider = providers or create_providers(self.config)
        self.monitor = AvailabilityMonitor(self.local_provider, ttl=self.config.local_model.availability_ttl)
        self.assistant = TerminalAssistant(
            self.local_provider,
            self.cloud_provider,
            monitor=self.monitor,
            local_config=self.config.local_model,
            redactor=self.redactor,
            recent_limit=self.config.suggestions.recent_command_context,
        )

        self.tracker = CommandHistoryTracker(
            store=self.store,
            explainer=self.assistant.explain_failure if self.config.history.explain_failures else None,
            max_entries=self.config.history.max_entries,
            working_directory=self.working_directory,
            git_timeout=self.config.history.git_timeout_seconds,
        )
        self.orchestrator = SuggestionOrchestrator(
            self.assistant,
            config=self.config.suggestions,
            writer=writer,
            tracker=self.tracker,
            on_change=on_suggestions,
        )
        self.translator = NLTranslator(self.assistant)
        self.workflows = WorkflowEngine(store=self.store)

        self._git_branch: Optional[str] = None
        self._closed = False

    def load(self) -> None:
        """Restore persisted history and workflows and look up the git branch."""
        self.tracker.load()
        self.workflows.load()
        self.refresh_branch()

    def refresh_branch(self) -> Optional[str]:
        self._git_branch = lookup_git_branch(self.working_directory, self.config.history.git_timeout_seconds)
        return self._git_branch

    def context(self) -> CommandContext:
        """Snapshot of what the AI layer may know about this session."""
        return CommandContext(
            working_directory=self.working_directory,
            git_branch=self._git_branch,
            repo_path=self.working_directory if self._git_branch else None,
            recent_commands=self.tracker.recent_commands(self.config.suggestions.recent_command_context),
        )

    def update_input(self, text: str):
        return self.orchestrator.update_input(text, self.context())

    def submit(self, command: str) -> TrackedCommand:
        """Send a typed command to the terminal and start tracking it."""
        if self.writer is not None:
            self.writer.write_input(command + "\n")
        tracked = self.tracker.track(command)
        self.orchestrator.clear()
        return tracked

    def record_output(self, command_id: str, text: str, append: bool = True) -> bool:
        return self.tracker.update_output(command_id, text, append=append)

    def complete(self, command_id: str, exit_code: int) -> Optional[TrackedCommand]:
        return self.tracker.complete(command_id, exit_code)

    def render_output(self, command_id: str) -> RedactionResult:
        """Output of a tracked command as it should be displayed."""
        entry = self.tracker.get(command_id)
        if entry is None:
            raise ValidationError(f"Unknown command id: {command_id}", details={"command_id": command_id})
        if not self.config.redaction.enabled:
            return RedactionResult(entry.output, [])
        return self.redactor.redact(entry.output)

    def execute_workflow(self, workflow: TerminalWorkflow, values: Optional[Mapping[str, str]] = None) -> TrackedCommand:
        """Resolve a workflow, send it to the terminal and track it.

        Raises:
            ValidationError: If a required parameter has no value or default
        """
        merged = self.workflows.with_defaults(workflow, values or {})
        missing = self.workflows.missing_required(workflow, merged)
        if missing:
            raise ValidationError(
                f"Missing required parameters for {workflow.name}: {', '.join(missing)}",
                details={"workflow": workflow.name, "missing": missing},
            )
        return self.submit(self.workflows.resolve(workflow, merged))

    async def translate(self, text: str) -> NLCommandResponse:
        return await self.translator.translate(text, self.context())

    async def explain_command(self, command: str) -> str:
        return await self.translator.explain_command(command, self.context())

    async def explain_error(self, command_id: str) -> str:
        """User-requested explanation for a tracked command's output."""
        entry = self.tracker.get(command_id)
        if entry is None:
            raise ValidationError(f"Unknown command id: {command_id}", details={"command_id": command_id})
        return await self.assistant.explain_error(entry.command, entry.output, entry.working_directory)

    def export_history(self, name: str) -> Dict[str, Any]:
        """Shareable export of the history with secrets masked."""
        return self.tracker.export_session(name, redact=lambda text: self.redactor.redact(text).text)

    def history(self) -> List[TrackedCommand]:
        return self.tracker.commands

    async def aclose(self) -> None:
        """Cancel background work and close HTTP clients."""
        if self._closed:
            return
        self._closed = True
        await self.orchestrator.aclose()
        self.tracker.cancel_pending()
        await close_providers(*[p for p in (self.local_provider, self.cloud_provider) if p is not None])
        logger.debug("Terminal session closed")

    async def __aenter__(self) -> "TerminalSession":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
