"""
Ordered provider chain for suggestions and explanations.

Each provider attempt produces a tagged ProviderResult; the chain stops at
the first OK result. Nothing here raises to the caller except cancellation.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, TypeVar

from ...config.models import LocalModelConfig
from ...utils.error_handling import ProviderError
from ...utils.logging import get_logger, log_performance
from ..availability import AvailabilityMonitor
from ..prompts import ERROR_TEMPLATE, SUGGESTION_TEMPLATE, build_error_prompt, build_suggestion_prompt
from ..providers.base import (
    BaseLLMProvider,
    GenerationRequest,
    ProviderResult,
    ProviderUnavailableError,
)
from ..redaction import SecretRedactor
from ..response import ResponseParseError, parse_suggestions
from ..types import AICommandSuggestion, CommandContext

logger = get_logger(__name__)

T = TypeVar("T")

GENERIC_EXPLANATION_HINT = "Try checking the command syntax and ensure you have the necessary permissions."


@dataclass
class ProviderSlot:
    """A provider plus the check that decides whether to try it at all."""
    provider: BaseLLMProvider
    is_available: Callable[[], Awaitable[bool]]

    @property
    def name(self) -> str:
        return self.provider.provider_name


def parse_text(content: str) -> str:
    """Parser for plain-text answers: anything non-blank is accepted."""
    text = content.strip()
    if not text:
        raise ResponseParseError("Model returned an empty answer")
    return text


class TerminalAssistant:
    """Runs prompts through local then cloud inference."""

    def __init__(
        self,
        local: BaseLLMProvider,
        cloud: Optional[BaseLLMProvider] = None,
        monitor: Optional[AvailabilityMonitor] = None,
        local_config: Optional[LocalModelConfig] = None,
        redactor: Optional[SecretRedactor] = None,
        recent_limit: int = 3,
    ):
        self.local_config = local_config or LocalModelConfig()
        self.monitor = monitor or AvailabilityMonitor(local, ttl=self.local_config.availability_ttl)
        self.redactor = redactor
        self.recent_limit = recent_limit

        self.chain: List[ProviderSlot] = []
        if self.local_config.enabled:
            self.chain.append(ProviderSlot(local, self.monitor.is_available))
        else:
            logger.info("Local inference disabled; using the cloud fallback only")
        if cloud is not None:
            self.chain.append(ProviderSlot(cloud, cloud.health_check))

    async def _attempt(self, slot: ProviderSlot, request: GenerationRequest,
                       parse: Callable[[str], T]) -> ProviderResult[T]:
        try:
            if not await slot.is_available():
                return ProviderResult.unavailable(slot.name, "health check failed")
        except asyncio.CancelledError:
            raise
        except Exception as e:
            return ProviderResult.unavailable(slot.name, str(e))

        try:
            with log_performance(f"{slot.name} generation"):
                response = await slot.provider.generate(request)
        except asyncio.CancelledError:
            raise
        except ProviderUnavailableError as e:
            return ProviderResult.unavailable(slot.name, e.message)
        except ProviderError as e:
            return ProviderResult.failed(slot.name, e.message)
        except Exception as e:
            logger.warning(f"{slot.name} provider raised unexpectedly: {e}")
            return ProviderResult.failed(slot.name, str(e))

        try:
            return ProviderResult.ok(slot.name, parse(response.content))
        except ResponseParseError as e:
            return ProviderResult.parse_error(slot.name, str(e))

    async def run(self, prompt: str, parse: Callable[[str], T], temperature: Optional[float] = None,
                  max_tokens: Optional[int] = None) -> ProviderResult[T]:
        """Try each provider in order and return the first OK result.

        When every provider fails, the last attempt's result is returned.
        """
        request = GenerationRequest(prompt=prompt, temperature=temperature, max_tokens=max_tokens)
        result: ProviderResult[T] = ProviderResult.unavailable("none", "no providers configured")
        for slot in self.chain:
            result = await self._attempt(slot, request, parse)
            if result.is_ok:
                return result
            logger.debug(f"{slot.name} {result.status.value}: {result.error}")
        return result

    async def suggest(self, text: str, context: CommandContext) -> ProviderResult[List[AICommandSuggestion]]:
        """Ranked suggestions from the first provider that answers with usable JSON."""
        prompt = build_suggestion_prompt(text, context, self.recent_limit)
        return await self.run(
            prompt,
            parse_suggestions,
            temperature=SUGGESTION_TEMPLATE.temperature,
            max_tokens=self.local_config.suggestion_max_tokens,
        )

    async def explain_failure(self, command: str, output: str,
                              working_directory: Optional[str] = None) -> Optional[str]:
        """Explanation of a failed command, or None when no provider answers."""
        if self.redactor is not None:
            output = self.redactor.redact(output).text
        prompt = build_error_prompt(command, output, working_directory)
        result = await self.run(
            prompt,
            parse_text,
            temperature=ERROR_TEMPLATE.temperature,
            max_tokens=self.local_config.explanation_max_tokens,
        )
        return result.value if result.is_ok else None

    async def explain_error(self, command: str, output: str, working_directory: Optional[str] = None) -> str:
        """User-requested explanation; falls back to a generic message."""
        explanation = await self.explain_failure(command, output, working_directory)
        if explanation:
            return explanation
        return f"Unable to get AI explanation for `{command}`.\n\n{GENERIC_EXPLANATION_HINT}"
