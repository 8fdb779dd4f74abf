"""
Core components of terminal-intel.

Redaction, command history, availability monitoring, suggestions,
translation and workflows. Providers and the HTTP clients live in
subpackages; `terminal_intel.session` wires everything together.
"""

from .redaction import SecretRedactor, SecretCategory, RedactedSecret, RedactionResult
from .availability import AvailabilityMonitor
from .types import AICommandSuggestion, CommandCategory, CommandContext, NLCommandResponse

__all__ = [
    "SecretRedactor",
    "SecretCategory",
    "RedactedSecret",
    "RedactionResult",
    "AvailabilityMonitor",
    "AICommandSuggestion",
    "CommandCategory",
    "CommandContext",
    "NLCommandResponse",
]
