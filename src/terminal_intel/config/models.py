"""
Pydantic models for terminal-intel configuration validation.

One section per subsystem: application/logging, the local inference engine,
the cloud fallback, the suggestion pipeline, command history and redaction.
"""

from typing import Optional
from pathlib import Path
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from enum import Enum


class LogLevel(str, Enum):
    """Supported log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class AppConfig(BaseModel):
    """Application-level configuration settings."""

    name: str = Field(default="terminal-intel", min_length=1, description="Application display name")
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    verbose_logging: bool = Field(default=False, description="Enable verbose debug logging")
    data_dir: str = Field(default="~/.terminal-intel", description="Directory for persisted history and workflows")

    log_file: Optional[str] = Field(default="~/.terminal-intel/logs/terminal-intel.log", description="Main log file location")
    max_log_size_mb: int = Field(default=10, ge=1, le=1000, description="Maximum log file size")
    backup_count: int = Field(default=5, ge=1, le=100, description="Number of backup log files")

    @field_validator('data_dir', 'log_file')
    @classmethod
    def expand_path(cls, v):
        """Expand user home directory in paths."""
        if v is None:
            return v
        return str(Path(v).expanduser())


# The model the local engine is asked for unless configured otherwise.
DEFAULT_LOCAL_MODEL = "deepseek-coder:6.7b"


class LocalModelConfig(BaseModel):
    """Local inference engine (Ollama) configuration."""

    enabled: bool = Field(default=True, description="Try the local engine before the cloud fallback")
    base_url: str = Field(default="http://localhost:11434", description="Local engine base URL")
    model: str = Field(default=DEFAULT_LOCAL_MODEL, min_length=1, description="Model name")

    probe_timeout: float = Field(default=2.0, gt=0.0, le=30.0, description="Health probe timeout in seconds")
    generation_timeout: float = Field(default=10.0, gt=0.0, le=600.0, description="Generation request timeout in seconds")
    availability_ttl: float = Field(default=60.0, ge=0.0, le=3600.0, description="How long a probe result is trusted")
    max_retries: int = Field(default=0, ge=0, le=10, description="Retries on connection failures")
    retry_delay: float = Field(default=0.5, ge=0.0, le=10.0, description="Delay between retries")

    temperature: float = Field(default=0.3, ge=0.0, le=2.0, description="Sampling temperature")
    top_p: float = Field(default=0.9, ge=0.0, le=1.0, description="Nucleus sampling parameter")
    suggestion_max_tokens: int = Field(default=300, ge=1, le=32768, description="Token budget for suggestions")
    explanation_max_tokens: int = Field(default=500, ge=1, le=32768, description="Token budget for error explanations")
    translation_max_tokens: int = Field(default=500, ge=1, le=32768, description="Token budget for NL translation")

    @field_validator('base_url')
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip('/')


class CloudModelConfig(BaseModel):
    """Cloud inference fallback configuration (OpenAI-compatible endpoint)."""

    enabled: bool = Field(default=True, description="Use the cloud fallback when the local engine fails")
    base_url: str = Field(default="https://api.openai.com/v1", description="API base URL")
    model: str = Field(default="gpt-4o-mini", min_length=1, description="Model name")
    api_key: Optional[str] = Field(default=None, description="API key; the fallback is unavailable without one")
    timeout: float = Field(default=15.0, gt=0.0, le=600.0, description="Request timeout in seconds")
    temperature: float = Field(default=0.3, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: int = Field(default=500, ge=1, le=32768, description="Maximum tokens per response")

    @field_validator('base_url')
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip('/')


class SuggestionsConfig(BaseModel):
    """Suggestion orchestrator configuration."""

    debounce_seconds: float = Field(default=0.3, ge=0.0, le=5.0, description="Quiet period before fetching")
    min_input_length: int = Field(default=2, ge=1, le=20, description="Inputs shorter than this clear suggestions")
    max_path_results: int = Field(default=8, ge=1, le=100, description="Maximum path completions")
    cache_capacity: int = Field(default=256, ge=1, le=100000, description="LRU capacity of the per-input cache")
    recent_command_context: int = Field(default=3, ge=0, le=50, description="Recent commands embedded in prompts")


class HistoryConfig(BaseModel):
    """Command history configuration."""

    max_entries: int = Field(default=100, ge=1, le=10000, description="History cap; oldest entries are evicted")
    git_timeout_seconds: float = Field(default=2.0, gt=0.0, le=30.0, description="Timeout for the git branch lookup")
    explain_failures: bool = Field(default=True, description="Ask the AI layer to explain failed commands")


class RedactionConfig(BaseModel):
    """Secret redaction configuration."""

    enabled: bool = Field(default=True, description="Redact secrets in rendered output")
    max_mask_dots: int = Field(default=8, ge=1, le=20, description="Dots per mask; never more than the match length")


class TerminalIntelConfig(BaseModel):
    """Main configuration model."""

    model_config = ConfigDict(extra="allow", validate_assignment=True)

    app: AppConfig = Field(default_factory=AppConfig)
    local_model: LocalModelConfig = Field(default_factory=LocalModelConfig)
    cloud_model: CloudModelConfig = Field(default_factory=CloudModelConfig)
    suggestions: SuggestionsConfig = Field(default_factory=SuggestionsConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    redaction: RedactionConfig = Field(default_factory=RedactionConfig)

    @model_validator(mode='after')
    def validate_timeouts(self):
        """The availability probe must stay shorter than a generation call."""
        if self.local_model.probe_timeout > self.local_model.generation_timeout:
            raise ValueError(
                "local_model.probe_timeout must not exceed local_model.generation_timeout"
            )
        return self
