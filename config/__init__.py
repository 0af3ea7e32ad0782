"""influxroute configuration"""

from .router_config import RouterConfig, ConfigManager, get_config, read_env_file

__all__ = ['RouterConfig', 'ConfigManager', 'get_config', 'read_env_file']
