"""
User configuration management for Finch.

Supports configuration from multiple sources (in order of priority):
1. Runtime parameters (highest priority)
2. Environment variables
3. User config file (~/.finch/config.json)
4. Default values from config.py (lowest priority)

Configuration file location: ~/.finch/config.json

Example config.json:
{
    "api_key": null,
    "default_tolerance": 0.9,
    "default_workers": 4,
    "request_timeout": 30.0
}
"""

import json
import os
from pathlib import Path
from typing import Any, Optional
import logging

from .config import DEFAULT_TIMEOUT, DEFAULT_TOLERANCE, DEFAULT_WORKERS

logger = logging.getLogger(__name__)


class UserConfig:
    """
    Manages user configuration from file and environment variables.

    Attributes are lazy-loaded and cached for performance.
    """

    _instance: Optional['UserConfig'] = None
    _config_data: Optional[dict] = None

    def __new__(cls):
        """Singleton pattern to ensure one config instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def config_dir(self) -> Path:
        """Get the configuration directory path."""
        env_dir = os.getenv('FINCH_CONFIG_DIR')
        if env_dir:
            return Path(env_dir)

        return Path.home() / '.finch'

    @property
    def config_file_path(self) -> Path:
        """Get the configuration file path."""
        return self.config_dir / 'config.json'

    def _load_config_file(self) -> dict:
        """Load configuration from JSON file."""
        if not self.config_file_path.exists():
            return {}

        try:
            with open(self.config_file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
                logger.debug(f"Loaded configuration from {self.config_file_path}")
                return data
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load config file {self.config_file_path}: {e}")
            return {}

    def _get_config_data(self) -> dict:
        """Get cached config data (lazy loading)."""
        if self._config_data is None:
            self._config_data = self._load_config_file()
        return self._config_data

    def reload(self):
        """Reload configuration from file."""
        self._config_data = None

    def get(self, key: str, default: Any = None, env_var: Optional[str] = None) -> Any:
        """
        Get a configuration value with priority:
        1. Environment variable (if env_var specified)
        2. Config file
        3. Default value

        Args:
            key: Configuration key
            default: Default value if not found
            env_var: Optional environment variable name to check

        Returns:
            Configuration value
        """
        if env_var:
            env_value = os.getenv(env_var)
            if env_value is not None:
                # Numbers arrive as strings, try JSON first
                try:
                    return json.loads(env_value)
                except (json.JSONDecodeError, TypeError):
                    return env_value

        config_data = self._get_config_data()
        if key in config_data and config_data[key] is not None:
            return config_data[key]

        return default

    @property
    def api_key(self) -> Optional[str]:
        """Google Vision API key."""
        value = self.get('api_key', env_var='FINCH_API_KEY')
        return str(value) if value is not None else None

    @property
    def default_tolerance(self) -> float:
        """Similarity tolerance (0-1)."""
        return float(self.get(
            'default_tolerance',
            default=DEFAULT_TOLERANCE,
            env_var='FINCH_TOLERANCE'
        ))

    @property
    def default_workers(self) -> int:
        """Number of parallel workers."""
        return int(self.get(
            'default_workers',
            default=DEFAULT_WORKERS,
            env_var='FINCH_WORKERS'
        ))

    @property
    def request_timeout(self) -> float:
        """Seconds to wait on each HTTP request."""
        return float(self.get(
            'request_timeout',
            default=DEFAULT_TIMEOUT,
            env_var='FINCH_TIMEOUT'
        ))

    def create_example_config(self) -> bool:
        """Create an example configuration file."""
        example_config = {
            "_comment": "Finch User Configuration",
            "api_key": None,
            "default_tolerance": DEFAULT_TOLERANCE,
            "default_workers": DEFAULT_WORKERS,
            "request_timeout": DEFAULT_TIMEOUT,
        }

        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, 'w', encoding='utf-8') as f:
                json.dump(example_config, f, indent=2)
            logger.info(f"Created example config file at {self.config_file_path}")
            return True
        except OSError as e:
            logger.error(f"Failed to create example config: {e}")
            return False


# Global instance
_user_config = UserConfig()


def get_user_config() -> UserConfig:
    """Get the global UserConfig instance."""
    return _user_config
