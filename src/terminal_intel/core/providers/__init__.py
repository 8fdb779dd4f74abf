"""
Inference provider abstraction for terminal-intel.

Usage:
    from terminal_intel.core.providers import create_providers, GenerationRequest

    local, cloud = create_providers(config)
    response = await local.generate(GenerationRequest(prompt="list files"))
"""

from .base import (
    BaseLLMProvider,
    ProviderType,
    GenerationRequest,
    GenerationResponse,
    LLMProviderError,
    ProviderConnectionError,
    ProviderModelError,
    ProviderTimeoutError,
    ProviderUnavailableError,
    ProviderResult,
    ResultStatus,
)
from .ollama import OllamaProvider
from .cloud import CloudProvider
from .factory import create_providers, close_providers

__all__ = [
    "BaseLLMProvider",
    "ProviderType",
    "GenerationRequest",
    "GenerationResponse",
    "LLMProviderError",
    "ProviderConnectionError",
    "ProviderModelError",
    "ProviderTimeoutError",
    "ProviderUnavailableError",
    "ProviderResult",
    "ResultStatus",
    "OllamaProvider",
    "CloudProvider",
    "create_providers",
    "close_providers",
]
