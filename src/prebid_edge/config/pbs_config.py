"""
PBS Adapter Configuration

Parses the YAML adapter configuration into immutable records. The
record is built once at startup and shared read-only by every request.

Expected layout:

    adapters:
      smartadserver:
        enabled: true
        endpoint: "https://prg.smartadserver.com/ortb"
        platform-id: 1234
        default-config:
          site-id: 1
          page-id: 2
          format-id: 3
          platform-id: 1234

Missing fields take zero values; unknown fields are ignored.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from ..errors import ConfigParseError


@dataclass(frozen=True)
class DefaultConfig:
    """Default placement identifiers sent with every impression."""

    site_id: int = 0
    page_id: int = 0
    format_id: int = 0
    platform_id: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DefaultConfig":
        """Create from the ``default-config`` YAML mapping."""
        section = "default-config"
        return cls(
            site_id=_int_field(data, "site-id", section),
            page_id=_int_field(data, "page-id", section),
            format_id=_int_field(data, "format-id", section),
            platform_id=_int_field(data, "platform-id", section),
        )


@dataclass(frozen=True)
class SmartAdServerConfig:
    """
    Validated Smart AdServer adapter parameters.

    Attributes:
        enabled: Whether the adapter may be built at all
        endpoint: Exchange OpenRTB endpoint URL
        platform_id: Network identifier, sent as ``networkId``
        default_config: Default site/page/format identifiers
    """

    enabled: bool = False
    endpoint: str = ""
    platform_id: int = 0
    default_config: DefaultConfig = field(default_factory=DefaultConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SmartAdServerConfig":
        """Create from the ``adapters.smartadserver`` YAML mapping."""
        section = "adapters.smartadserver"
        return cls(
            enabled=_bool_field(data, "enabled", section),
            endpoint=_str_field(data, "endpoint", section),
            platform_id=_int_field(data, "platform-id", section),
            default_config=DefaultConfig.from_dict(
                _mapping_field(data, "default-config", section)
            ),
        )


def load_yaml(raw_config: bytes | str) -> dict[str, Any]:
    """
    Decode raw YAML into a mapping.

    An empty document decodes to an empty mapping.

    Raises:
        ConfigParseError: If the YAML is malformed or not a mapping
    """
    try:
        data = yaml.safe_load(raw_config)
    except yaml.YAMLError as e:
        raise ConfigParseError(f"error parsing PBS config: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigParseError(
            f"error parsing PBS config: expected a mapping at top level, got {type(data).__name__}"
        )
    return data


def adapter_section(data: dict[str, Any], bidder_code: str) -> dict[str, Any]:
    """Return ``adapters.<bidder_code>`` or an empty mapping when absent."""
    adapters = _mapping_field(data, "adapters", "config")
    return _mapping_field(adapters, bidder_code, "adapters")


def parse_smartadserver_config(raw_config: bytes | str) -> SmartAdServerConfig:
    """
    Parse raw YAML bytes into a SmartAdServerConfig.

    Raises:
        ConfigParseError: If the structure cannot be decoded
    """
    data = load_yaml(raw_config)
    return SmartAdServerConfig.from_dict(adapter_section(data, "smartadserver"))


def read_config_file(path: str | Path) -> bytes:
    """
    Read raw configuration bytes from disk.

    Raises:
        ConfigParseError: If the file cannot be read
    """
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise ConfigParseError(f"failed to read PBS config {path}: {e}") from e


def _mapping_field(data: dict[str, Any], key: str, section: str) -> dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigParseError(f"{section}.{key}: expected a mapping, got {type(value).__name__}")
    return value


def _bool_field(data: dict[str, Any], key: str, section: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ConfigParseError(f"{section}.{key}: expected a boolean, got {value!r}")
    return value


def _int_field(data: dict[str, Any], key: str, section: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigParseError(f"{section}.{key}: expected an integer, got {value!r}")
    return value


def _str_field(data: dict[str, Any], key: str, section: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ConfigParseError(f"{section}.{key}: expected a string, got {value!r}")
    return value
