"""
Configuration Manager - YAML-based configuration management
Manages numerical and logging settings for the Black-Litterman model,
loaded from a YAML file and environment variables with validation and
default values.

File: config.py
Modified: 2025-07-15
"""

import copy
import logging
import os
import yaml
from typing import Dict, Any
from pathlib import Path

logger = logging.getLogger(__name__)

POSTERIOR_COVARIANCE_MODES = ('prior', 'full')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

DEFAULT_CONFIG: Dict[str, Any] = {
    'numerics': {
        'max_condition_number': 1e15,
        'symmetry_tolerance': 1e-8
    },
    'posterior_covariance': {
        'mode': 'prior'  # 'prior' passes S through, 'full' derives it
    },
    'logging': {
        'level': 'INFO',
        'log_dir': None
    }
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


class Config:
    """Configuration management"""

    def __init__(self, config_path: str = "configs/config.yaml"):
        self.config_path = Path(config_path)
        self.config = self._load_config()
        self._load_env_vars()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file on top of the defaults"""
        config = copy.deepcopy(DEFAULT_CONFIG)

        if self.config_path.exists():
            with open(self.config_path, 'r') as f:
                loaded = yaml.safe_load(f) or {}
            if not isinstance(loaded, dict):
                raise ValueError(f"Configuration file {self.config_path} must contain a mapping")
            _deep_merge(config, loaded)
            logger.debug(f"Loaded configuration from {self.config_path}")

        return config

    def _load_env_vars(self):
        """Load environment variables and override config"""
        # Numerical settings
        if 'BL_MAX_CONDITION_NUMBER' in os.environ:
            self.set('numerics.max_condition_number', float(os.environ['BL_MAX_CONDITION_NUMBER']))

        if 'BL_SYMMETRY_TOLERANCE' in os.environ:
            self.set('numerics.symmetry_tolerance', float(os.environ['BL_SYMMETRY_TOLERANCE']))

        # Model output
        if 'BL_POSTERIOR_COVARIANCE' in os.environ:
            self.set('posterior_covariance.mode', os.environ['BL_POSTERIOR_COVARIANCE'].lower())

        # Logging
        if 'BL_LOG_LEVEL' in os.environ:
            self.set('logging.level', os.environ['BL_LOG_LEVEL'].upper())

        if 'BL_LOG_DIR' in os.environ:
            self.set('logging.log_dir', os.environ['BL_LOG_DIR'])

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value"""
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any):
        """Set configuration value"""
        keys = key.split('.')
        config = self.config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def save(self):
        """Save configuration to file"""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.config_path, 'w') as f:
            yaml.dump(self.config, f, default_flow_style=False)

    def validate(self) -> bool:
        """Validate configuration"""
        valid = True

        max_cond = self.get('numerics.max_condition_number')
        if not isinstance(max_cond, (int, float)) or isinstance(max_cond, bool) or max_cond <= 0:
            logger.error(f"numerics.max_condition_number must be a positive number, got {max_cond!r}")
            valid = False

        tolerance = self.get('numerics.symmetry_tolerance')
        if not isinstance(tolerance, (int, float)) or isinstance(tolerance, bool) or tolerance < 0:
            logger.error(f"numerics.symmetry_tolerance must be a non-negative number, got {tolerance!r}")
            valid = False

        mode = self.get('posterior_covariance.mode')
        if mode not in POSTERIOR_COVARIANCE_MODES:
            logger.error(f"posterior_covariance.mode must be one of {POSTERIOR_COVARIANCE_MODES}, got {mode!r}")
            valid = False

        level = self.get('logging.level')
        if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
            logger.error(f"logging.level must be one of {LOG_LEVELS}, got {level!r}")
            valid = False

        return valid
