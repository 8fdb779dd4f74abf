"""HTTP clients for the local inference engine and the cloud fallback."""

from .client import OllamaClient, GenerateResult
from .cloud import ChatCompletionsClient
from .exceptions import (
    LLMClientError, LLMServerError, LLMConnectionError, LLMTimeoutError, LLMResponseError
)

__all__ = [
    "OllamaClient",
    "GenerateResult",
    "ChatCompletionsClient",
    "LLMClientError",
    "LLMServerError",
    "LLMConnectionError",
    "LLMTimeoutError",
    "LLMResponseError",
]
