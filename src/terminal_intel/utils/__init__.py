"""
terminal-intel utilities

Logging setup and the shared error handling helpers.
"""

from .logging import (
    setup_logging,
    get_logger,
    log_performance,
    is_logging_initialized,
)

from .error_handling import (
    TerminalIntelError,
    ConfigurationError,
    ProviderError,
    ValidationError,
    PersistenceError,
    handle_provider_operation,
    validate_input,
)

__all__ = [
    # Logging utilities
    "setup_logging",
    "get_logger",
    "log_performance",
    "is_logging_initialized",

    # Error handling utilities
    "TerminalIntelError",
    "ConfigurationError",
    "ProviderError",
    "ValidationError",
    "PersistenceError",
    "handle_provider_operation",
    "validate_input",
]
