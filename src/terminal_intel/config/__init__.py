"""
terminal-intel configuration system

    from terminal_intel.config import load_config

    config = load_config()
    print(config.local_model.model)       # "deepseek-coder:6.7b"
    print(config.history.max_entries)     # 100
"""

from .loader import (
    ConfigLoader,
    load_config,
    validate_config_file,
)

from .models import (
    TerminalIntelConfig,
    AppConfig,
    LocalModelConfig,
    CloudModelConfig,
    SuggestionsConfig,
    HistoryConfig,
    RedactionConfig,
    LogLevel,
    DEFAULT_LOCAL_MODEL,
)

from ..utils.error_handling import ConfigurationError

__all__ = [
    "ConfigLoader",
    "load_config",
    "validate_config_file",
    "ConfigurationError",
    "TerminalIntelConfig",
    "AppConfig",
    "LocalModelConfig",
    "CloudModelConfig",
    "SuggestionsConfig",
    "HistoryConfig",
    "RedactionConfig",
    "LogLevel",
    "DEFAULT_LOCAL_MODEL",
]
