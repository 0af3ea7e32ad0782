#!/usr/bin/env python3
"""
Configuration Manager for influxroute
Handles environment variables, .env files and paths centrally
"""

import os
import logging
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_MAX_QUERY_LENGTH = 65536

@dataclass
class RouterConfig:
    """influxroute configuration settings"""

    # Base path - use environment or default
    base_dir: Path = None

    # Runtime settings
    debug_mode: bool = False
    log_level: str = "INFO"

    # Queries longer than this are not inspected (0 disables the limit)
    max_query_length: int = DEFAULT_MAX_QUERY_LENGTH

    # Profile settings
    profile: str = "dev"  # dev, demo, prod

    def __post_init__(self):
        """Initialize paths and load environment variables"""
        self.profile = os.environ.get('INFLUXROUTE_PROFILE', 'dev')

        if self.base_dir is None:
            default_root = Path(__file__).parent.parent
            self.base_dir = Path(os.environ.get('INFLUXROUTE_HOME', default_root))
        else:
            self.base_dir = Path(self.base_dir)

        self.debug_mode = os.environ.get('INFLUXROUTE_DEBUG', '').lower() == 'true'
        self.log_level = os.environ.get('INFLUXROUTE_LOG_LEVEL', 'INFO').upper()

        raw_limit = os.environ.get('INFLUXROUTE_MAX_QUERY_LENGTH')
        if raw_limit is not None:
            try:
                self.max_query_length = int(raw_limit)
            except ValueError:
                logger.warning(f"Invalid INFLUXROUTE_MAX_QUERY_LENGTH '{raw_limit}', "
                               f"using {DEFAULT_MAX_QUERY_LENGTH}")
                self.max_query_length = DEFAULT_MAX_QUERY_LENGTH

        # Apply profile defaults if not overridden
        if self.profile == 'prod':
            self.debug_mode = False
            self.log_level = 'WARNING'
        elif self.profile == 'demo':
            self.debug_mode = True
            self.log_level = 'INFO'

    @property
    def env_file(self) -> Path:
        return self.base_dir / '.env'

    def get_safe_dict(self) -> Dict[str, Any]:
        """Get configuration as dict for display"""
        return {
            'base_dir': str(self.base_dir),
            'profile': self.profile,
            'debug_mode': self.debug_mode,
            'log_level': self.log_level,
            'max_query_length': self.max_query_length,
        }

def read_env_file(env_file: Path) -> Dict[str, str]:
    """Parse ``KEY=value`` lines, ignoring blanks and ``#`` comments"""
    values: Dict[str, str] = {}
    try:
        text = env_file.read_text()
    except OSError as e:
        logger.warning(f"Could not load .env file: {e}")
        return values
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        key, sep, value = line.partition('=')
        if sep:
            values[key.strip()] = value.strip()
    return values

class ConfigManager:
    """Singleton configuration manager"""

    _instance: Optional['ConfigManager'] = None
    _config: Optional[RouterConfig] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._config is None:
            self.load_config()

    def load_config(self, env_file: Optional[Path] = None) -> RouterConfig:
        """Load configuration from the environment and a .env file.

        The .env file defaults to ``<base_dir>/.env``. Exported
        INFLUXROUTE_* variables take precedence over its entries.
        """
        config = RouterConfig()
        env_file = Path(env_file) if env_file is not None else config.env_file
        if env_file.exists():
            for key, value in read_env_file(env_file).items():
                os.environ.setdefault(key, value)
            config = RouterConfig(base_dir=config.base_dir)
            logger.debug(f"Loaded settings from {env_file}")
        self._config = config
        return config

    @property
    def config(self) -> RouterConfig:
        """Get the current configuration"""
        if self._config is None:
            self.load_config()
        return self._config


# Global config instance
def get_config() -> RouterConfig:
    """Get the global configuration instance"""
    return ConfigManager().config
