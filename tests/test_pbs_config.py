"""Tests for PBS adapter configuration parsing and server settings."""

import dataclasses

import pytest

from prebid_edge.config import (
    DefaultConfig,
    ServerSettings,
    SmartAdServerConfig,
    parse_smartadserver_config,
    read_config_file,
)
from prebid_edge.errors import ConfigParseError


FULL_CONFIG = b"""
adapters:
  smartadserver:
    enabled: true
    endpoint: "https://prg.smartadserver.com/ortb"
    platform-id: 4016
    default-config:
      site-id: 104808
      page-id: 663264
      format-id: 12345
      platform-id: 4016
"""


class TestParseSmartAdServerConfig:
    """Tests for YAML decoding into SmartAdServerConfig."""

    def test_full_config(self):
        """All fields should be decoded."""
        config = parse_smartadserver_config(FULL_CONFIG)

        assert config.enabled is True
        assert config.endpoint == "https://prg.smartadserver.com/ortb"
        assert config.platform_id == 4016
        assert config.default_config == DefaultConfig(
            site_id=104808, page_id=663264, format_id=12345, platform_id=4016
        )

    def test_missing_fields_take_zero_values(self):
        """Absent fields should default to zero values."""
        config = parse_smartadserver_config(b"adapters:\n  smartadserver:\n    enabled: true\n")

        assert config.enabled is True
        assert config.endpoint == ""
        assert config.platform_id == 0
        assert config.default_config == DefaultConfig()

    def test_empty_document(self):
        """An empty document is a disabled, zero-valued config."""
        assert parse_smartadserver_config(b"") == SmartAdServerConfig()

    def test_unknown_fields_ignored(self):
        """Unrecognized keys should not fail decoding."""
        raw = FULL_CONFIG + b"  appnexus:\n    enabled: true\nmetrics:\n  enabled: false\n"
        config = parse_smartadserver_config(raw)
        assert config.platform_id == 4016

    def test_malformed_yaml(self):
        """Unparseable YAML should raise ConfigParseError."""
        with pytest.raises(ConfigParseError):
            parse_smartadserver_config(b"adapters: [unclosed")

    def test_top_level_not_mapping(self):
        """A list at top level is structurally invalid."""
        with pytest.raises(ConfigParseError):
            parse_smartadserver_config(b"- one\n- two\n")

    @pytest.mark.parametrize(
        "raw",
        [
            b"adapters:\n  smartadserver:\n    enabled: 'sometimes'\n",
            b"adapters:\n  smartadserver:\n    platform-id: abc\n",
            b"adapters:\n  smartadserver:\n    platform-id: true\n",
            b"adapters:\n  smartadserver:\n    endpoint: [1, 2]\n",
            b"adapters:\n  smartadserver:\n    default-config: 7\n",
            b"adapters: 3\n",
        ],
    )
    def test_wrong_field_types(self, raw):
        """Fields of the wrong type should raise ConfigParseError."""
        with pytest.raises(ConfigParseError):
            parse_smartadserver_config(raw)

    def test_config_is_immutable(self):
        """The record must be read-only after construction."""
        config = parse_smartadserver_config(FULL_CONFIG)
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.endpoint = "https://elsewhere.example.com"


class TestReadConfigFile:
    """Tests for reading configuration bytes from disk."""

    def test_reads_bytes(self, tmp_path):
        path = tmp_path / "pbs.yaml"
        path.write_bytes(FULL_CONFIG)
        assert read_config_file(path) == FULL_CONFIG

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigParseError):
            read_config_file(tmp_path / "missing.yaml")


class TestServerSettings:
    """Tests for environment-driven server settings."""

    def test_defaults(self, monkeypatch):
        for var in ("PBS_CONFIG_PATH", "PBS_BIDDER", "BACKEND_NAME", "BACKEND_TIMEOUT_MS"):
            monkeypatch.delenv(var, raising=False)

        settings = ServerSettings.from_env()

        assert settings.config_path == "config/pbs.yaml"
        assert settings.bidder == "smartadserver"
        assert settings.backend_name == "smartadserver_backend"
        assert settings.backend_timeout_ms == 1000
        assert settings.backend_timeout_seconds == 1.0

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("PBS_CONFIG_PATH", "/etc/pbs.yaml")
        monkeypatch.setenv("BACKEND_TIMEOUT_MS", "250")

        settings = ServerSettings.from_env()

        assert settings.config_path == "/etc/pbs.yaml"
        assert settings.backend_timeout_ms == 250

    def test_invalid_timeout(self, monkeypatch):
        monkeypatch.setenv("BACKEND_TIMEOUT_MS", "soon")
        with pytest.raises(ValueError):
            ServerSettings.from_env()

    def test_non_positive_timeout(self):
        with pytest.raises(ValueError):
            ServerSettings(backend_timeout_ms=0)
