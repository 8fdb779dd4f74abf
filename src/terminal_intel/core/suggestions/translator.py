"""
Natural-language to command translation.

The rule table answers first; only unmatched requests go to the provider
chain. Translation never raises: when every provider fails the caller gets a
low-confidence "not recognized" response.
"""

from typing import Optional

from ...utils.logging import get_logger
from ..prompts import EXPLANATION_TEMPLATE, TRANSLATION_TEMPLATE, build_explanation_prompt, build_translation_prompt
from ..response import parse_translation
from ..types import CommandCategory, CommandContext, NLCommandResponse
from .assistant import TerminalAssistant, parse_text
from .nl_matcher import NLPatternMatcher

logger = get_logger(__name__)

UNRECOGNIZED_COMMAND = "# Command not recognized"
UNRECOGNIZED_CONFIDENCE = 0.1


def unrecognized(text: str, reason: Optional[str] = None) -> NLCommandResponse:
    explanation = f"Could not translate: {text!r}"
    if reason:
        explanation += f" ({reason})"
    return NLCommandResponse(
        command=UNRECOGNIZED_COMMAND,
        explanation=explanation,
        confidence=UNRECOGNIZED_CONFIDENCE,
        category=CommandCategory.OTHER,
    )


class NLTranslator:
    """Rule table first, AI translation second."""

    def __init__(self, assistant: Optional[TerminalAssistant] = None,
                 matcher: Optional[NLPatternMatcher] = None):
        self.assistant = assistant
        self.matcher = matcher or NLPatternMatcher()

    async def translate(self, text: str, context: Optional[CommandContext] = None) -> NLCommandResponse:
        """Translate a request into a command; never raises."""
        context = context or CommandContext()
        if not text or not text.strip():
            return unrecognized(text or "", "empty request")

        matched = self.matcher.match(text, context)
        if matched is not None:
            logger.debug(f"Rule matched {text!r} -> {matched.command!r}")
            return matched

        if self.assistant is None:
            return unrecognized(text, "no inference providers")

        limits = self.assistant.local_config
        result = await self.assistant.run(
            build_translation_prompt(text, context, self.assistant.recent_limit),
            parse_translation,
            temperature=TRANSLATION_TEMPLATE.temperature,
            max_tokens=limits.translation_max_tokens,
        )
        if result.is_ok:
            return result.value

        logger.debug(f"AI translation failed for {text!r}: {result.status.value} {result.error}")
        return unrecognized(text, result.error)

    async def explain_command(self, command: str, context: Optional[CommandContext] = None) -> str:
        """Plain-language explanation of `command`."""
        context = context or CommandContext()
        if self.assistant is not None:
            result = await self.assistant.run(
                build_explanation_prompt(command, context),
                parse_text,
                temperature=EXPLANATION_TEMPLATE.temperature,
                max_tokens=self.assistant.local_config.explanation_max_tokens,
            )
            if result.is_ok:
                return result.value
        return f"Command: {command}\nExplanation: no explanation is available right now."
