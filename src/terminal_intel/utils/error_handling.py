"""
Unified error handling utilities for terminal-intel.

This module provides the exception hierarchy and the decorator used to
standardize error handling around inference provider calls.
"""

import functools
import asyncio
from typing import Any, Callable, Optional, Dict

from ..utils.logging import get_logger


class TerminalIntelError(Exception):
    """Base exception for all terminal-intel errors."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(TerminalIntelError):
    """Configuration-related error."""
    pass


class ProviderError(TerminalIntelError):
    """Inference provider-related error."""
    pass


class ValidationError(TerminalIntelError):
    """Input validation error."""
    pass


class PersistenceError(TerminalIntelError):
    """Durable storage read or write failed."""
    pass


def handle_provider_operation(operation_name: str, timeout: Optional[float] = None):
    """
    Decorator to standardize inference provider error handling.

    Errors that are already ProviderError subclasses pass through untouched;
    timeouts and unexpected failures are wrapped in ProviderError.

    Args:
        operation_name: Human-readable name of the operation
        timeout: Optional timeout for the operation
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs) -> Any:
            logger = get_logger(f"terminal_intel.providers.{operation_name}")

            try:
                logger.debug(f"Starting {operation_name}")

                if timeout:
                    result = await asyncio.wait_for(func(*args, **kwargs), timeout=timeout)
                else:
                    result = await func(*args, **kwargs)

                logger.debug(f"{operation_name} completed successfully")
                return result

            except asyncio.CancelledError:
                raise

            except ProviderError:
                raise

            except asyncio.TimeoutError:
                logger.warning(f"{operation_name} timed out after {timeout}s")
                raise ProviderError(
                    f"{operation_name} timed out",
                    details={"error_type": "timeout", "timeout_seconds": timeout}
                )

            except ConnectionError as e:
                logger.warning(f"{operation_name} failed - connection error: {e}")
                raise ProviderError(
                    f"{operation_name} failed: Connection error",
                    details={"error_type": "connection", "original_error": str(e)}
                ) from e

            except Exception as e:
                logger.error(f"{operation_name} failed - unexpected error: {e}", exc_info=True)
                raise ProviderError(
                    f"{operation_name} failed: {e}",
                    details={"error_type": "unexpected", "original_error": str(e)}
                ) from e

        if not asyncio.iscoroutinefunction(func):
            raise TypeError(f"handle_provider_operation requires a coroutine function, got {func!r}")

        return async_wrapper

    return decorator


def validate_input(value: Any, name: str, expected_type: type, allow_empty: bool = True) -> None:
    """Validate a public API argument.

    Raises:
        ValidationError: If the value has the wrong type or is empty when not allowed
    """
    if not isinstance(value, expected_type):
        raise ValidationError(
            f"{name} must be {expected_type.__name__}, got {type(value).__name__}",
            details={"parameter": name}
        )
    if not allow_empty and not value:
        raise ValidationError(f"{name} must not be empty", details={"parameter": name})
