"""
Configuration loading system for terminal-intel.

This module handles loading, merging, and validating configuration from
YAML files, environment variables, and CLI arguments.
"""

import os
from pathlib import Path
from typing import Optional, Dict, Any, Union, Tuple
import yaml
from pydantic import ValidationError
from dotenv import load_dotenv

from .models import TerminalIntelConfig
from ..utils.error_handling import ConfigurationError


ENV_PREFIX = "TINTEL_"


class ConfigLoader:
    """
    Configuration loader that supports multiple sources and validation.

    Loading priority (highest to lowest):
    1. Environment variables (TINTEL_*)
    2. CLI-specified config file
    3. Environment-specific config (e.g., configs/development.yaml)
    4. Default configuration file
    5. Built-in defaults (from Pydantic models)
    """

    def __init__(self, search_dir: Optional[Union[str, Path]] = None):
        self._config_path: Optional[Path] = None
        self._search_dir = Path(search_dir) if search_dir else Path(".")

        env_file = self._search_dir / ".env"
        if env_file.exists():
            load_dotenv(env_file)

    def load_config(self, config_path: Optional[Union[str, Path]] = None) -> TerminalIntelConfig:
        """
        Load configuration from multiple sources and validate it.

        Args:
            config_path: Optional path to a specific config file

        Returns:
            Validated TerminalIntelConfig instance

        Raises:
            ConfigurationError: If configuration loading or validation fails
        """
        try:
            config_data: Dict[str, Any] = {}

            default_config_path = self._find_config("default")
            if default_config_path:
                config_data = self._deep_merge(config_data, self._load_yaml_file(default_config_path))

            env_name = os.getenv(f"{ENV_PREFIX}ENV")
            env_config_path = self._find_config(env_name) if env_name else None
            if env_config_path and env_config_path != default_config_path:
                config_data = self._deep_merge(config_data, self._load_yaml_file(env_config_path))

            if config_path:
                cli_config_path = Path(config_path)
                if not cli_config_path.exists():
                    raise ConfigurationError(f"Specified config file not found: {config_path}")

                config_data = self._deep_merge(config_data, self._load_yaml_file(cli_config_path))
                self._config_path = cli_config_path

            config_data = self._apply_env_overrides(config_data)

            return TerminalIntelConfig(**config_data)

        except ConfigurationError:
            raise
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {self._format_validation_error(e)}")
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {str(e)}")

    @property
    def config_path(self) -> Optional[Path]:
        return self._config_path

    def _find_config(self, name: str) -> Optional[Path]:
        """Find configs/<name>.yaml (or .yml) under the search directory."""
        for candidate in (f"configs/{name}.yaml", f"configs/{name}.yml", f"{name}.yaml", f"{name}.yml"):
            path = self._search_dir / candidate
            if path.exists():
                return path
        return None

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """
        Load and parse a YAML configuration file.

        Raises:
            ConfigurationError: If file cannot be loaded or parsed
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)

            if data is None:
                return {}

            if not isinstance(data, dict):
                raise ConfigurationError(f"Configuration file {file_path} must contain a YAML object (dictionary)")

            return data

        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {file_path}: {str(e)}")
        except IOError as e:
            raise ConfigurationError(f"Cannot read configuration file {file_path}: {str(e)}")

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two configuration dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _apply_env_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply environment variable overrides to configuration.

        TINTEL_LOCAL_MODEL_BASE_URL=http://gpu-box:11434 overrides
        local_model.base_url. Section names may themselves contain
        underscores, so the longest matching section wins.
        """
        result = config_data.copy()
        sections = sorted(TerminalIntelConfig.model_fields.keys(), key=len, reverse=True)

        for env_key, env_value in os.environ.items():
            if not env_key.startswith(ENV_PREFIX) or env_key == f"{ENV_PREFIX}ENV":
                continue

            path = self._env_key_to_path(env_key[len(ENV_PREFIX):].lower(), sections)
            if path is None:
                continue

            section, field_name = path
            section_data = result.get(section)
            if not isinstance(section_data, dict):
                section_data = {}
            else:
                section_data = section_data.copy()
            section_data[field_name] = self._convert_env_value(env_value)
            result[section] = section_data

        return result

    @staticmethod
    def _env_key_to_path(key: str, sections) -> Optional[Tuple[str, str]]:
        for section in sections:
            prefix = section + "_"
            if key.startswith(prefix) and len(key) > len(prefix):
                return section, key[len(prefix):]
        return None

    def _convert_env_value(self, value: str) -> Any:
        """Convert environment variable string to bool, int, float, list or str."""
        if value.lower() in ('true', 'yes', 'on'):
            return True
        elif value.lower() in ('false', 'no', 'off'):
            return False

        try:
            if '.' not in value:
                return int(value)
            else:
                return float(value)
        except ValueError:
            pass

        if ',' in value:
            return [item.strip() for item in value.split(',')]

        return value

    def _format_validation_error(self, error: ValidationError) -> str:
        """Format a Pydantic validation error for user-friendly display."""
        messages = []
        for err in error.errors():
            location = " -> ".join(str(loc) for loc in err['loc'])
            message = err['msg']
            value = err.get('input', 'N/A')
            messages.append(f"  {location}: {message} (got: {value})")

        return "Validation errors:\n" + "\n".join(messages)


def load_config(config_path: Optional[Union[str, Path]] = None) -> TerminalIntelConfig:
    """
    Load configuration from multiple sources.

    Raises:
        ConfigurationError: If configuration loading fails
    """
    return ConfigLoader().load_config(config_path)


def validate_config_file(config_path: Union[str, Path]) -> Tuple[bool, Optional[str]]:
    """
    Validate a configuration file, reporting the error instead of raising.

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        ConfigLoader().load_config(config_path)
        return True, None
    except ConfigurationError as e:
        return False, str(e)
