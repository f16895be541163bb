"""
Configuration Manager

Handles hierarchical configuration loading and validation with support for
CLI args → environment variables → config files → defaults.
"""

import os
import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional, Union, List

import yaml
from pydantic import ValidationError

from rockplugin.core.config.models import ToolConfig
from rockplugin.core.exceptions import ConfigurationError, ErrorCode, config_error

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = ("rockplugin.yaml", "rockplugin.yml", ".rockplugin.yaml")

# Keys that hold paths and are anchored to the config file directory
_PATH_KEYS = ("version_source", "manifests", "templates_dir")


class ConfigManager:
    """
    Manages tool configuration with hierarchical loading and validation.

    Configuration sources in order of precedence:
    1. CLI arguments (highest priority)
    2. Environment variables
    3. Configuration file
    4. Default values (lowest priority)

    Relative paths from the configuration file are resolved against the
    file's directory; everything else is resolved against ``base_dir``.
    """

    def __init__(self, base_dir: Union[str, Path],
                 config_file: Optional[Union[str, Path]] = None):
        """
        Initialize configuration manager.

        Args:
            base_dir: Directory relative paths are resolved against
            config_file: Optional explicit path to configuration file
        """
        self.base_dir = Path(base_dir)
        self.config_file = Path(config_file) if config_file else None
        self._config: Optional[ToolConfig] = None

    def find_config_file(self) -> Optional[Path]:
        """Return the configuration file to use, if any."""
        if self.config_file:
            config_file = self.config_file if self.config_file.is_absolute() else self.base_dir / self.config_file
            if not config_file.is_file():
                raise ConfigurationError(
                    f"Configuration file not found: {config_file}",
                    error_code=ErrorCode.CONFIG_FILE_NOT_FOUND
                )
            return config_file

        for name in CONFIG_FILE_NAMES:
            candidate = self.base_dir / name
            if candidate.is_file():
                return candidate
        return None

    def load_config(
        self,
        cli_args: Optional[Dict[str, Any]] = None,
        env_prefix: str = "ROCKPLUGIN_"
    ) -> ToolConfig:
        """
        Load and validate configuration from all sources.

        Args:
            cli_args: Dictionary of CLI arguments, ``None`` values are ignored
            env_prefix: Prefix for environment variables

        Returns:
            Validated ToolConfig with absolute paths

        Raises:
            ConfigurationError: If configuration is invalid
        """
        config_data: Dict[str, Any] = {}

        config_file = self.find_config_file()
        if config_file:
            file_data = self._load_config_file(config_file)
            config_data.update(self._anchor_file_paths(file_data, config_file.parent))
            logger.debug(f"Loaded configuration from {config_file}")

        config_data.update(self._load_env_config(env_prefix))

        if cli_args:
            config_data.update({k: v for k, v in cli_args.items() if v is not None})

        try:
            config = ToolConfig(**config_data)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {e}",
                                     error_code=ErrorCode.CONFIG_INVALID_VALUE, cause=e)

        self._config = config.resolve_paths(self.base_dir)
        return self._config

    def get_config(self) -> ToolConfig:
        """Get the loaded configuration, loading defaults if necessary."""
        if self._config is None:
            return self.load_config()
        return self._config

    def _load_config_file(self, config_file: Path) -> Dict[str, Any]:
        """Load configuration from a YAML or JSON file."""
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                if config_file.suffix.lower() == '.json':
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f) or {}
        except (IOError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to load config file {config_file}: {e}", cause=e)

        if not isinstance(data, dict):
            raise config_error(f"Config file {config_file} must contain a mapping")
        return data

    def _anchor_file_paths(self, data: Dict[str, Any], directory: Path) -> Dict[str, Any]:
        """Resolve relative paths of a config file against its directory."""
        anchored = dict(data)
        for key in _PATH_KEYS:
            value = anchored.get(key)
            if value is None:
                continue
            if isinstance(value, list):
                anchored[key] = [self._anchor(directory, item) for item in value]
            elif isinstance(value, str) and key == "manifests":
                anchored[key] = [self._anchor(directory, item.strip())
                                 for item in value.split(',') if item.strip()]
            else:
                anchored[key] = self._anchor(directory, value)
        return anchored

    @staticmethod
    def _anchor(directory: Path, value: Any) -> Path:
        path = Path(value)
        return path if path.is_absolute() else directory / path

    def _load_env_config(self, prefix: str) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: Dict[str, Any] = {}

        env_mappings = {
            f"{prefix}VERSION_SOURCE": ("version_source", str),
            f"{prefix}MANIFESTS": ("manifests", self._parse_list),
            f"{prefix}MANIFEST_INDENT": ("manifest_indent", int),
            f"{prefix}TEMPLATES_DIR": ("templates_dir", str),
            f"{prefix}VERBOSE": ("verbose", self._parse_bool),
        }

        for env_var, (key, parser) in env_mappings.items():
            value = os.environ.get(env_var)
            if value is not None:
                try:
                    env_config[key] = parser(value)
                except (ValueError, TypeError) as e:
                    raise config_error(f"Invalid value for {env_var}: {value} ({e})", key=key)

        return env_config

    @staticmethod
    def _parse_bool(value: str) -> bool:
        """Parse boolean value from string."""
        lowered = value.strip().lower()
        if lowered in ('true', '1', 'yes', 'on'):
            return True
        if lowered in ('false', '0', 'no', 'off', ''):
            return False
        raise ValueError(f"not a boolean: {value!r}")

    @staticmethod
    def _parse_list(value: str) -> List[str]:
        """Parse comma-separated list from string."""
        return [item.strip() for item in value.split(',') if item.strip()]
