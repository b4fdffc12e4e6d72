"""
Configuration Management for the Weather Plugin Host

Layers configuration from built-in defaults, YAML files in the config
directory and WEATHER_PLUGIN_* environment variables, then validates the
result before the host starts any plugin.
"""

import copy
import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml


WEATHER_PLUGIN_ID = "adorika-weather-plugin"

DEFAULT_CONFIG: Dict[str, Any] = {
    "app": {
        "name": "Weather Plugin Host",
        "version": "1.0.0",
        "debug": False,
        "log_level": "INFO",
        "plugin_modules": ["plugins.weather_forecast"]
    },
    "web": {
        "host": "127.0.0.1",
        "port": 8080
    },
    "logging": {
        "level": "INFO",
        "file": None,
        "max_size": "10MB",
        "backup_count": 5,
        "console": True
    },
    "plugins": {
        WEATHER_PLUGIN_ID: {
            "enabled": True,
            "seed_count": 5
        }
    }
}

ENV_MAPPINGS = {
    "WEATHER_PLUGIN_DEBUG": "app.debug",
    "WEATHER_PLUGIN_LOG_LEVEL": "app.log_level",
    "WEATHER_PLUGIN_WEB_HOST": "web.host",
    "WEATHER_PLUGIN_WEB_PORT": "web.port",
    "WEATHER_PLUGIN_SEED_COUNT": f"plugins.{WEATHER_PLUGIN_ID}.seed_count"
}

VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
MAX_SEED_COUNT = 30


@dataclass
class ConfigSource:
    """Configuration source definition"""
    name: str
    priority: int
    loader: Callable[[], Dict[str, Any]]
    path: Optional[str] = None


class ConfigurationError(Exception):
    """Configuration-related errors"""
    pass


def _coerce_env_value(value: str) -> Any:
    if value.lower() in ('true', 'false'):
        return value.lower() == 'true'
    if value.isdigit():
        return int(value)
    return value


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into a copy of base"""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _set_path(config: Dict[str, Any], key_path: str, value: Any) -> None:
    *parents, leaf = key_path.split('.')
    for key in parents:
        config = config.setdefault(key, {})
    config[leaf] = value


class ConfigurationManager:
    """
    Host configuration, lowest to highest priority:
    defaults, config/default.yaml, config/config.yaml, environment.
    """

    def __init__(self, config_dir: str = "config"):
        self.config_dir = Path(config_dir)
        self.config: Dict[str, Any] = {}
        self.logger = logging.getLogger(__name__)

        self.sources: List[ConfigSource] = [
            ConfigSource("defaults", 1, lambda: DEFAULT_CONFIG),
            self._file_source("default_config", 2, "default.yaml"),
            self._file_source("local_config", 3, "config.yaml"),
            ConfigSource("environment", 4, self._load_from_env),
        ]

    def _file_source(self, name: str, priority: int, filename: str) -> ConfigSource:
        path = self.config_dir / filename
        return ConfigSource(name, priority, lambda: self._load_from_file(path), str(path))

    def load_config(self) -> None:
        """
        Load and validate configuration from all sources.

        Raises:
            ConfigurationError: If the merged configuration is invalid
        """
        merged: Dict[str, Any] = {}
        for source in sorted(self.sources, key=lambda s: s.priority):
            values = source.loader()
            if values:
                merged = _merge(merged, values)
                self.logger.debug(f"Loaded configuration from {source.name}")

        self.config = merged
        self._validate_config()
        self.logger.info("Configuration loaded successfully")

    def _load_from_env(self) -> Dict[str, Any]:
        config: Dict[str, Any] = {}
        for env_var, key_path in ENV_MAPPINGS.items():
            value = os.getenv(env_var)
            if value is not None:
                _set_path(config, key_path, _coerce_env_value(value))
        return config

    def _load_from_file(self, path: Path) -> Dict[str, Any]:
        """Read one YAML file; a missing or unreadable file contributes nothing"""
        if not path.exists():
            return {}

        try:
            with open(path, 'r') as f:
                return yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            self.logger.error(f"Error loading config file {path}: {e}")
            return {}

    def _validate_config(self) -> None:
        errors = [f"Missing required configuration section: {section}"
                  for section in ('app', 'web', 'plugins') if section not in self.config]

        port = self.get('web.port')
        if port is not None and (not isinstance(port, int) or not 1 <= port <= 65535):
            errors.append(f"Invalid web port: {port}")

        log_level = self.get('app.log_level', 'INFO')
        if str(log_level).upper() not in VALID_LOG_LEVELS:
            errors.append(f"Invalid log level: {log_level}")

        for plugin_id, plugin_config in (self.get('plugins') or {}).items():
            if not isinstance(plugin_config, dict):
                continue
            seed_count = plugin_config.get('seed_count')
            if seed_count is not None and (
                    not isinstance(seed_count, int) or not 1 <= seed_count <= MAX_SEED_COUNT):
                errors.append(f"Invalid seed_count for {plugin_id}: {seed_count}")

        if errors:
            raise ConfigurationError(f"Configuration validation failed: {'; '.join(errors)}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation"""
        current = self.config
        for part in key.split('.'):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def set(self, key: str, value: Any) -> None:
        """Set configuration value using dot notation"""
        _set_path(self.config, key, value)

    def apply_overrides(self, overrides: Dict[str, Any]) -> None:
        """
        Apply dot-notation overrides (e.g. from the command line) and revalidate.

        Raises:
            ConfigurationError: If an override makes the configuration invalid
        """
        for key, value in overrides.items():
            if value is not None:
                self.set(key, value)
                self.logger.info(f"Configuration override: {key}={value!r}")
        self._validate_config()

    def get_section(self, section: str) -> Dict[str, Any]:
        return self.get(section, {})

    def get_plugin_config(self, plugin_id: str) -> Dict[str, Any]:
        """Copy of one plugin's configuration section (empty if none)"""
        return dict(self.get_section('plugins').get(plugin_id) or {})

    def is_plugin_enabled(self, plugin_id: str) -> bool:
        return self.get_plugin_config(plugin_id).get('enabled', True)

    def get_plugin_modules(self) -> List[str]:
        return list(self.get('app.plugin_modules') or [])

    def get_web_host(self) -> str:
        return self.get('web.host', '127.0.0.1')

    def get_web_port(self) -> int:
        return self.get('web.port', 8080)
