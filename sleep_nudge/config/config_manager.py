# sleep_nudge/config/config_manager.py
import os

import yaml

from sleep_nudge.core.models.data_models import RegularityConfig

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), 'config.yaml')


class ConfigManager:
    """Central configuration manager"""

    def __init__(self, config_path=None):
        self.config_path = config_path or DEFAULT_CONFIG_PATH
        self.config = self._load_config()

    def _load_config(self):
        """Load configuration from file"""
        with open(self.config_path, 'r') as file:
            return yaml.safe_load(file) or {}

    def get(self, key, default=None):
        """Get configuration value"""
        # Support nested keys with dot notation
        keys = key.split('.')
        value = self.config
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def regularity_config(self, **overrides):
        """Validated engine settings, with any non-None overrides applied"""
        settings = dict(self.get('regularity', {}) or {})
        settings.update({k: v for k, v in overrides.items() if v is not None})
        return RegularityConfig(**settings)
