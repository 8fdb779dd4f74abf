"""
Cloud inference fallback provider.

Wraps any OpenAI-compatible chat completions endpoint. Without an API key the
provider reports itself unavailable instead of attempting a request.
"""

import time
from typing import Optional

from ...config.models import CloudModelConfig
from ...utils.error_handling import handle_provider_operation
from ..llm_client import (
    ChatCompletionsClient, LLMClientError, LLMConnectionError, LLMServerError, LLMTimeoutError
)
from .base import (
    BaseLLMProvider,
    ProviderType,
    GenerationRequest,
    GenerationResponse,
    ProviderConnectionError,
    ProviderModelError,
    ProviderTimeoutError,
    ProviderUnavailableError,
)


class CloudProvider(BaseLLMProvider):
    """Provider-agnostic cloud fallback: prompt in, text out."""

    provider_type = ProviderType.CLOUD

    def __init__(self, config: CloudModelConfig, client: Optional[ChatCompletionsClient] = None):
        super().__init__(config)
        self.client = client
        if self.client is None and config.enabled and config.api_key:
            self.client = ChatCompletionsClient(
                base_url=config.base_url,
                api_key=config.api_key,
                timeout=config.timeout,
            )

    @property
    def is_configured(self) -> bool:
        return self.config.enabled and self.client is not None

    @handle_provider_operation("cloud_generate")
    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """Send the prompt to the cloud endpoint."""
        if not self.is_configured:
            raise ProviderUnavailableError("Cloud fallback is not configured", "cloud")

        start_time = time.perf_counter()
        try:
            content = await self.client.complete(
                model=self.config.model,
                prompt=request.prompt,
                temperature=request.temperature if request.temperature is not None else self.config.temperature,
                max_tokens=request.max_tokens if request.max_tokens is not None else self.config.max_tokens,
            )
        except LLMConnectionError as e:
            raise ProviderConnectionError(str(e), "cloud") from e
        except LLMServerError as e:
            raise ProviderModelError(str(e), "cloud", error_code=str(e.status_code)) from e
        except LLMTimeoutError as e:
            raise ProviderTimeoutError(str(e), "cloud") from e
        except LLMClientError as e:
            raise ProviderModelError(str(e), "cloud") from e

        return GenerationResponse(
            content=content,
            model=self.config.model,
            provider="cloud",
            response_time_ms=(time.perf_counter() - start_time) * 1000,
        )

    async def health_check(self) -> bool:
        """The cloud side is not probed; it is usable whenever it is configured."""
        return self.is_configured

    async def cleanup(self):
        if self.client is not None:
            await self.client.close()
