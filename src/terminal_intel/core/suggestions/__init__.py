"""
Command suggestions and natural-language translation.

Usage:
    orchestrator = SuggestionOrchestrator(assistant, config.suggestions, writer=session)
    task = orchestrator.update_input("git s", context)
"""

from .assistant import TerminalAssistant, ProviderSlot
from .cache import SuggestionCache
from .nl_matcher import NLPattern, NLPatternMatcher, DEFAULT_PATTERNS
from .orchestrator import SuggestionOrchestrator
from .path_completion import PATH_COMMANDS, complete_path
from .static_table import StaticSuggestionTable
from .translator import NLTranslator, UNRECOGNIZED_COMMAND

__all__ = [
    "TerminalAssistant",
    "ProviderSlot",
    "SuggestionCache",
    "NLPattern",
    "NLPatternMatcher",
    "DEFAULT_PATTERNS",
    "SuggestionOrchestrator",
    "PATH_COMMANDS",
    "complete_path",
    "StaticSuggestionTable",
    "NLTranslator",
    "UNRECOGNIZED_COMMAND",
]
