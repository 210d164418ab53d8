"""
load the client config from config.yaml, .env and the environment
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any

from dotenv import load_dotenv


class Config:
    """Configuration loader that reads from config.yaml and environment variables."""

    def __init__(self, config_path: str = None, env_file: str = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to a YAML file. If None, the config.yaml shipped
                        next to this module is used.
            env_file: Optional .env file; the default lookup of python-dotenv
                     applies when omitted.
        """
        if config_path is None:
            config_path = Path(__file__).parent / "config.yaml"

        load_dotenv(env_file)
        self.config_path = Path(config_path)
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file and override with environment variables."""
        try:
            with open(self.config_path, 'r') as f:
                config = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")

        return self._apply_env_overrides(config)

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration."""
        env_mappings = {
            'BRIDGE_CONNECT_TIMEOUT': ('client', 'connect_timeout'),
            'BRIDGE_READ_TIMEOUT': ('client', 'read_timeout'),
            'BRIDGE_WRITE_TIMEOUT': ('client', 'write_timeout'),
            'BRIDGE_POOL_TIMEOUT': ('client', 'pool_timeout'),
            'BRIDGE_MAX_CONNECTIONS': ('client', 'max_connections'),
            'BRIDGE_MAX_KEEPALIVE': ('client', 'max_keepalive_connections'),
            'BRIDGE_KEEPALIVE_EXPIRY': ('client', 'keepalive_expiry'),
            'BRIDGE_FOLLOW_REDIRECTS': ('client', 'follow_redirects'),
            'BRIDGE_MAX_REDIRECTS': ('client', 'max_redirects'),
            'LOG_LEVEL': ('logging', 'level'),
            'LOG_RENDERER': ('logging', 'renderer'),
        }

        for env_var, config_path in env_mappings.items():
            env_value = os.getenv(env_var)
            if env_value is not None:
                current = config
                for key in config_path[:-1]:
                    if not isinstance(current.get(key), dict):
                        current[key] = {}
                    current = current[key]

                current[config_path[-1]] = self._convert_env_value(env_value)

        return config

    def _convert_env_value(self, value: str):
        """Convert environment variable string to appropriate Python type."""
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    def get(self, *keys, default=None):
        """Get configuration value using a key path.

        Args:
            *keys: Configuration keys (e.g., 'client', 'read_timeout')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        current = self._config
        for key in keys:
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default
        return current

    @property
    def client(self) -> Dict[str, Any]:
        """Get HTTP client configuration."""
        return self.get('client', default={})

    @property
    def logging(self) -> Dict[str, Any]:
        """Get logging configuration."""
        return self.get('logging', default={})
