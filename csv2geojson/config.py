"""
Configuration settings for the csv2geojson package.

Configuration can be set via:
1. Command-line arguments (highest priority)
2. Environment variables (CSV2GEOJSON_<KEY>)
3. Configuration files (YAML/JSON)
4. Default values (lowest priority)
"""

import os
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from csv2geojson.errors import ConfigurationError
from csv2geojson.models import ConverterSettings, describe_validation_error

# Set up logger
logger = logging.getLogger(__name__)

# Default configuration paths, searched in order
DEFAULT_CONFIG_PATHS = [
    Path("csv2geojson.yml"),
    Path("csv2geojson.yaml"),
    Path("csv2geojson.json"),
    Path.home() / ".config" / "csv2geojson.yml",
    Path.home() / ".config" / "csv2geojson.yaml",
    Path.home() / ".config" / "csv2geojson.json",
    Path.home() / ".csv2geojson.yml",
    Path.home() / ".csv2geojson.yaml",
    Path.home() / ".csv2geojson.json",
]

ENV_PREFIX = "CSV2GEOJSON_"

OUTPUT_EXTENSION = ".geojson"

SETTING_KEYS = tuple(ConverterSettings.model_fields)


class ConfigManager:
    """
    Configuration manager that handles loading and accessing configuration
    from files, environment variables, and default settings.
    """

    def __init__(
        self,
        config_file: Optional[Union[str, Path]] = None,
        profile: str = "default",
        env_prefix: str = ENV_PREFIX,
        search_paths: Optional[list[Path]] = None
    ):
        """
        Initialize the configuration manager.

        Args:
            config_file: Optional path to a configuration file
            profile: Configuration profile to use (for multi-environment setups)
            env_prefix: Prefix for environment variables
            search_paths: Locations tried when no config_file is given
        """
        self.config_file = config_file
        self.profile = profile
        self.env_prefix = env_prefix
        self.search_paths = DEFAULT_CONFIG_PATHS if search_paths is None else search_paths
        self.config_data: Dict[str, Any] = {}

        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from the first available configuration file."""
        if self.config_file:
            config_path = Path(self.config_file)
            if not config_path.is_file():
                raise ConfigurationError(f"Specified config file not found: {config_path}")
            self._load_config_file(config_path)
        else:
            for path in self.search_paths:
                if path.is_file():
                    logger.debug("Loading configuration from: %s", path)
                    self._load_config_file(path)
                    break

    def _load_config_file(self, config_path: Path) -> None:
        """
        Load configuration from a file.

        Args:
            config_path: Path to configuration file (YAML or JSON)

        Raises:
            ConfigurationError: If the file cannot be read or parsed
        """
        extension = config_path.suffix.lower()

        try:
            if extension in ['.yml', '.yaml']:
                with open(config_path, 'r', encoding='utf-8') as f:
                    config_data = yaml.safe_load(f)
            elif extension == '.json':
                with open(config_path, 'r', encoding='utf-8') as f:
                    config_data = json.load(f)
            else:
                raise ConfigurationError(f"Unsupported config file format: {extension}")
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Error loading config file {config_path}: {str(e)}") from e

        if not config_data:
            logger.warning("Empty configuration file: %s", config_path)
            return

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Config file {config_path} must contain a mapping")

        # Handle profiles
        if 'profiles' in config_data:
            profiles = config_data.get('profiles') or {}
            if self.profile in profiles:
                self.config_data = profiles[self.profile] or {}
                logger.debug("Loaded configuration profile: %s", self.profile)
            else:
                logger.warning("Profile '%s' not found in config file", self.profile)
                if 'default' in profiles:
                    self.config_data = profiles['default'] or {}
                    logger.debug("Loaded 'default' profile as fallback")
        else:
            self.config_data = config_data

        logger.debug("Successfully loaded configuration from %s", config_path)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value with fallback to environment and default.

        Args:
            key: Configuration key
            default: Default value if not found in config or environment

        Returns:
            Configuration value
        """
        env_key = f"{self.env_prefix}{key.upper()}"
        env_value = os.getenv(env_key)
        if env_value is not None:
            return self._convert_value(env_value)

        if key in self.config_data:
            return self.config_data[key]

        return default

    def _convert_value(self, value: str) -> Any:
        """
        Convert string values from environment variables to appropriate types.

        Args:
            value: String value from environment variable

        Returns:
            Converted value (bool, int, float, or original string)
        """
        lower_val = value.lower()
        if lower_val in ['true', 'yes']:
            return True
        if lower_val in ['false', 'no']:
            return False

        try:
            if '.' in value:
                return float(value)
            else:
                return int(value)
        except ValueError:
            return value

    def get_dict(self) -> Dict[str, Any]:
        """
        Get every known converter setting that is set in the environment or config file.

        Returns:
            Dictionary of configuration values
        """
        result = {}
        for key in SETTING_KEYS:
            value = self.get(key)
            if value is not None:
                result[key] = value
        return result


def load_settings(
    manager: Optional[ConfigManager] = None,
    **overrides: Any
) -> ConverterSettings:
    """
    Build validated converter settings.

    Args:
        manager: Configuration manager to read from (a default one is created if omitted)
        **overrides: Values that win over everything else; None values are ignored

    Returns:
        ConverterSettings instance

    Raises:
        ConfigurationError: If a value fails validation
    """
    if manager is None:
        manager = ConfigManager()

    values = manager.get_dict()
    values.update({key: value for key, value in overrides.items() if value is not None})

    try:
        settings = ConverterSettings(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {describe_validation_error(e)}") from e

    logger.debug("Converter settings: %s", settings.model_dump())
    return settings
