"""
CLI command handlers for terminal-intel.

Each handler takes the loaded configuration and parsed arguments and
returns a process exit code.
"""

import asyncio
import sys
from pathlib import Path

from ..config import load_config, ConfigurationError
from ..core.history import InMemoryStore, JsonFileStore
from ..core.redaction import SecretRedactor
from ..core.workflows import WorkflowEngine
from ..session import TerminalSession
from ..utils import setup_logging, get_logger, TerminalIntelError


def has_action(args) -> bool:
    return any([
        args.redact is not None, args.suggest is not None, args.translate is not None,
        args.workflows is not None, args.check_llm,
    ])


def handle_cli_command(args) -> int:
    """
    Handle CLI commands based on parsed arguments.

    Returns:
        int: Exit code (0 for success, non-zero for error)
    """
    try:
        config = load_config(args.config)
        setup_logging(config, verbose=args.verbose)

        if args.redact is not None:
            return _handle_redact(config, args)
        elif args.suggest is not None:
            return asyncio.run(_handle_suggest(config, args))
        elif args.translate is not None:
            return asyncio.run(_handle_translate(config, args))
        elif args.workflows is not None:
            return _handle_workflows(config, args)
        elif args.check_llm:
            return asyncio.run(_handle_check_llm(config, args))

        print("Nothing to do. Run with --help for usage.", file=sys.stderr)
        return 1

    except ConfigurationError as e:
        print(f"❌ Configuration error: {e}", file=sys.stderr)
        return 1
    except TerminalIntelError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    except Exception as e:
        get_logger(__name__).debug("Unhandled CLI error", exc_info=True)
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        return 1


def _handle_redact(config, args) -> int:
    """Redact secrets from a file or stdin."""
    if args.redact == "-":
        text = sys.stdin.read()
    else:
        path = Path(args.redact).expanduser()
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            print(f"❌ Cannot read {path}: {e}", file=sys.stderr)
            return 1

    redactor = SecretRedactor(max_dots=config.redaction.max_mask_dots)
    redacted, secrets = redactor.redact(text)
    sys.stdout.write(redacted)

    if args.verbose or secrets:
        print(f"\n🔒 {len(secrets)} secret(s) redacted", file=sys.stderr)
        if args.verbose:
            for secret in secrets:
                print(f"  {secret.category.value} at {secret.start}-{secret.end}", file=sys.stderr)
    return 0


def _session(config) -> TerminalSession:
    # One-shot commands must not touch the user's saved history.
    return TerminalSession(config, store=InMemoryStore())


async def _handle_suggest(config, args) -> int:
    """Print suggestions for a partial input."""
    async with _session(config) as session:
        session.refresh_branch()
        suggestions = await session.orchestrator.suggest(args.suggest, session.context())

    if not suggestions:
        print("No suggestions")
        return 0

    for suggestion in suggestions:
        origin = "ai" if suggestion.is_from_ai else (suggestion.category or "static").lower()
        print(f"  {suggestion.confidence:.2f}  {suggestion.command:<32} {suggestion.description} [{origin}]")
    return 0


async def _handle_translate(config, args) -> int:
    """Translate a natural-language request."""
    async with _session(config) as session:
        session.refresh_branch()
        response = await session.translate(args.translate)

    print(response.command)
    print(f"  {response.explanation} ({response.category.value}, confidence {response.confidence:.2f})")
    for alternative in response.alternatives:
        print(f"  alt: {alternative}")
    for warning in response.warnings:
        print(f"  ⚠️  {warning}")
    if response.has_placeholders:
        print("  Fill in the {{placeholders}} before running.")
    return 0


def _handle_workflows(config, args) -> int:
    """List or search workflows."""
    engine = WorkflowEngine(store=JsonFileStore(config.app.data_dir))
    engine.load()
    workflows = engine.search(args.workflows)

    if not workflows:
        print(f"No workflows match {args.workflows!r}")
        return 0

    print("📋 Workflows:")
    for workflow in workflows:
        print(f"  {workflow.name} [{workflow.category}]: {workflow.command}")
        if args.verbose:
            for param in workflow.parameters:
                flag = "required" if param.required else "optional"
                print(f"    {{{{{param.name}}}}} ({flag}) {param.description}")
    return 0


async def _handle_check_llm(config, args) -> int:
    """Report whether the local engine and cloud fallback are usable."""
    print("🔍 Checking inference providers...")

    async with _session(config) as session:
        local_ok = config.local_model.enabled and await session.monitor.is_available()
        cloud_ok = await session.cloud_provider.health_check() if session.cloud_provider else False

    local = config.local_model
    if not local.enabled:
        print(f"  local ({local.model}): ⏸️ disabled")
    else:
        print(f"  local ({local.model} @ {local.base_url}): {'✅ available' if local_ok else '❌ unavailable'}")
    print(f"  cloud ({config.cloud_model.model}): {'✅ configured' if cloud_ok else '❌ not configured'}")
    if not (local_ok or cloud_ok):
        print("  Suggestions will come from the static table only.")
    return 0 if local_ok or cloud_ok else 1
