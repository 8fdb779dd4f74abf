"""
Abstract base classes for inference providers in terminal-intel.

A provider turns a prompt into text. The suggestion pipeline only ever sees
this interface, so the local engine and the cloud fallback are interchangeable
entries in an ordered provider list.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

from ...utils.error_handling import ProviderError
from ...utils.logging import get_logger


class ProviderType(Enum):
    """Supported provider types."""
    OLLAMA = "ollama"
    CLOUD = "cloud"
    CUSTOM = "custom"


@dataclass
class GenerationRequest:
    """Standard request format for text generation."""
    prompt: str
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    top_p: Optional[float] = None

    def __post_init__(self):
        if not self.prompt:
            raise ValueError("prompt must not be empty")
        if self.temperature is not None and not 0.0 <= self.temperature <= 2.0:
            raise ValueError("temperature must be between 0.0 and 2.0")
        if self.max_tokens is not None and self.max_tokens < 1:
            raise ValueError("max_tokens must be positive")


@dataclass
class GenerationResponse:
    """Standard response format for text generation."""
    content: str
    model: str
    provider: str
    done: bool = True
    response_time_ms: Optional[float] = None
    provider_metadata: Dict[str, Any] = field(default_factory=dict)


class LLMProviderError(ProviderError):
    """Base exception for inference provider errors."""
    def __init__(self, message: str, provider: str, error_code: Optional[str] = None):
        super().__init__(message, details={"provider": provider, "error_code": error_code})
        self.provider = provider
        self.error_code = error_code


class ProviderConnectionError(LLMProviderError):
    """Connection-related provider errors."""
    pass


class ProviderModelError(LLMProviderError):
    """Model-related provider errors."""
    pass


class ProviderTimeoutError(LLMProviderError):
    """Timeout-related provider errors."""
    pass


class ProviderUnavailableError(LLMProviderError):
    """The provider is switched off, unconfigured or failed its health probe."""
    pass


class BaseLLMProvider(ABC):
    """
    Abstract base class for all inference providers.

    Subclasses implement `generate` and `health_check`; `cleanup` releases
    network resources and is called when the owning session closes.
    """

    provider_type: ProviderType = ProviderType.CUSTOM

    def __init__(self, config: Any):
        self.config = config
        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """Generate text from a prompt.

        Raises:
            ProviderConnectionError: If connection fails
            ProviderModelError: If the model returns an error
            ProviderTimeoutError: If the request times out
            ProviderUnavailableError: If the provider cannot be used at all
        """

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the provider is healthy and responding."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.cleanup()

    async def cleanup(self):
        """Clean up resources (override in subclasses if needed)."""
        pass

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        return self.provider_type.value

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(provider_name='{self.provider_name}')"


class ResultStatus(Enum):
    """Outcome of one provider attempt."""
    OK = "ok"
    UNAVAILABLE = "unavailable"
    PARSE_ERROR = "parse_error"
    FAILED = "failed"


T = TypeVar("T")


@dataclass
class ProviderResult(Generic[T]):
    """
    Tagged result of asking one provider for something.

    Callers iterate an ordered provider list and stop at the first result
    whose status is OK; every other status means "try the next one".
    """
    status: ResultStatus
    provider: str
    value: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, provider: str, value: T) -> "ProviderResult[T]":
        return cls(ResultStatus.OK, provider, value=value)

    @classmethod
    def unavailable(cls, provider: str, error: Optional[str] = None) -> "ProviderResult[T]":
        return cls(ResultStatus.UNAVAILABLE, provider, error=error)

    @classmethod
    def parse_error(cls, provider: str, error: str) -> "ProviderResult[T]":
        return cls(ResultStatus.PARSE_ERROR, provider, error=error)

    @classmethod
    def failed(cls, provider: str, error: str) -> "ProviderResult[T]":
        return cls(ResultStatus.FAILED, provider, error=error)

    @property
    def is_ok(self) -> bool:
        return self.status is ResultStatus.OK
