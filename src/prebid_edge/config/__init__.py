"""
Edge Configuration Module

Key components:
    - SmartAdServerConfig: Immutable adapter parameters parsed from YAML
    - ServerSettings: Dispatcher settings read from the environment
"""

from .pbs_config import (
    DefaultConfig,
    SmartAdServerConfig,
    adapter_section,
    load_yaml,
    parse_smartadserver_config,
    read_config_file,
)
from .settings import ServerSettings

__all__ = [
    "DefaultConfig",
    "SmartAdServerConfig",
    "adapter_section",
    "load_yaml",
    "parse_smartadserver_config",
    "read_config_file",
    "ServerSettings",
]
