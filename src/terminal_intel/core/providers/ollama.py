"""
Ollama provider implementation for terminal-intel.

Adapts OllamaClient to the provider interface: maps client exceptions onto
provider exceptions and fills in generation options from configuration.
"""

import time
from typing import Optional

from ...config.models import LocalModelConfig
from ...utils.error_handling import handle_provider_operation
from ..llm_client import (
    OllamaClient, LLMClientError, LLMConnectionError, LLMServerError, LLMTimeoutError
)
from .base import (
    BaseLLMProvider,
    ProviderType,
    GenerationRequest,
    GenerationResponse,
    ProviderConnectionError,
    ProviderModelError,
    ProviderTimeoutError,
)


class OllamaProvider(BaseLLMProvider):
    """Local inference through an Ollama server."""

    provider_type = ProviderType.OLLAMA

    def __init__(self, config: LocalModelConfig, client: Optional[OllamaClient] = None):
        """Initialize the Ollama provider.

        Args:
            config: LocalModelConfig with endpoint, model and timeouts
            client: Optional pre-built client (tests inject one with a mock transport)
        """
        super().__init__(config)
        self.client = client or OllamaClient(
            base_url=config.base_url,
            probe_timeout=config.probe_timeout,
            generation_timeout=config.generation_timeout,
            max_retries=config.max_retries,
            retry_delay=config.retry_delay,
        )

    @handle_provider_operation("ollama_generate")
    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """Generate text from a prompt using Ollama."""
        start_time = time.perf_counter()

        options = {
            "temperature": request.temperature if request.temperature is not None else self.config.temperature,
            "num_predict": request.max_tokens if request.max_tokens is not None else self.config.suggestion_max_tokens,
            "top_p": request.top_p if request.top_p is not None else self.config.top_p,
        }

        try:
            result = await self.client.generate(
                model=self.config.model,
                prompt=request.prompt,
                options=options,
            )
        except LLMConnectionError as e:
            raise ProviderConnectionError(str(e), "ollama") from e
        except LLMServerError as e:
            raise ProviderModelError(str(e), "ollama", error_code=str(e.status_code)) from e
        except LLMTimeoutError as e:
            raise ProviderTimeoutError(str(e), "ollama") from e
        except LLMClientError as e:
            raise ProviderModelError(str(e), "ollama") from e

        return GenerationResponse(
            content=result.text,
            model=result.model or self.config.model,
            provider="ollama",
            done=result.done,
            response_time_ms=(time.perf_counter() - start_time) * 1000,
        )

    async def health_check(self) -> bool:
        """Probe /api/tags with the short probe timeout."""
        return await self.client.probe()

    async def cleanup(self):
        """Close the HTTP client."""
        await self.client.close()
