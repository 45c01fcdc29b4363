"""
Configuration management for the signage player.
Loads display credentials and polling settings from a YAML file.
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


DEFAULTS: Dict[str, Any] = {
    'server': {
        'base_url': 'http://localhost:5000',
    },
    'display': {
        'id': '',
        'secret_key': '',
    },
    'polling': {
        'content_interval': 30,
        'heartbeat_interval': 60,
    },
    'http': {
        'timeout': 10,
    },
}

# Environment variable -> dotted config key
ENV_OVERRIDES = {
    'SIGNAGE_SERVER_URL': 'server.base_url',
    'SIGNAGE_DISPLAY_ID': 'display.id',
    'SIGNAGE_SECRET_KEY': 'display.secret_key',
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class PlayerConfig:
    """Player settings from a YAML file, defaults and environment overrides."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to a YAML config file. If None, only defaults
                         and environment variables are used.
        """
        self.config_path = Path(config_path) if config_path else None
        self._config: Dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        """Load configuration from the YAML file (if any) over the defaults."""
        loaded: Dict[str, Any] = {}
        if self.config_path is not None:
            if not self.config_path.exists():
                raise FileNotFoundError(f"Config file not found: {self.config_path}")

            with open(self.config_path, 'r') as f:
                loaded = yaml.safe_load(f) or {}

            if not isinstance(loaded, dict):
                raise ValueError(f"Config file must contain a mapping: {self.config_path}")

        self._config = _merge(DEFAULTS, loaded)

        # Apply environment variable overrides
        self._apply_env_overrides()

    def _apply_env_overrides(self) -> None:
        """Override config values from environment variables."""
        for env_var, key in ENV_OVERRIDES.items():
            if env_var in os.environ:
                self.set(key, os.environ[env_var])

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key: Configuration key (e.g., 'server.base_url')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self._config
        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value using dot notation.

        Args:
            key: Configuration key (e.g., 'display.secret_key')
            value: Value to set
        """
        keys = key.split('.')
        config = self._config

        # Navigate to the parent key
        for k in keys[:-1]:
            config = config.setdefault(k, {})

        config[keys[-1]] = value

    @property
    def base_url(self) -> str:
        """Server base URL without a trailing slash."""
        return str(self.get('server.base_url', '')).rstrip('/')

    @property
    def display_id(self) -> str:
        return self.get('display.id', '')

    @property
    def secret_key(self) -> str:
        return self.get('display.secret_key', '')

    @property
    def content_interval(self) -> int:
        """Seconds between content polls."""
        return int(self.get('polling.content_interval', 30))

    @property
    def heartbeat_interval(self) -> int:
        """Seconds between heartbeats."""
        return int(self.get('polling.heartbeat_interval', 60))

    @property
    def timeout(self) -> float:
        """HTTP request timeout in seconds."""
        return float(self.get('http.timeout', 10))

    def __repr__(self) -> str:
        """String representation."""
        return f"PlayerConfig(path={self.config_path}, display={self.display_id})"
