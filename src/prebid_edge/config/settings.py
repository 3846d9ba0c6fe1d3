"""
Edge server settings, read from the environment at startup.
"""

import os
from dataclasses import dataclass

DEFAULT_CONFIG_PATH = "config/pbs.yaml"
DEFAULT_BIDDER = "smartadserver"
DEFAULT_BACKEND_NAME = "smartadserver_backend"
DEFAULT_BACKEND_TIMEOUT_MS = 1000


@dataclass(frozen=True)
class ServerSettings:
    """
    Process-wide settings for the edge dispatcher.

    Attributes:
        config_path: Path of the YAML adapter configuration
        bidder: Registered adapter name to build at startup
        backend_name: Label for the exchange backend in logs
        backend_timeout_ms: Timeout for a single send to the exchange
    """

    config_path: str = DEFAULT_CONFIG_PATH
    bidder: str = DEFAULT_BIDDER
    backend_name: str = DEFAULT_BACKEND_NAME
    backend_timeout_ms: int = DEFAULT_BACKEND_TIMEOUT_MS

    def __post_init__(self):
        if self.backend_timeout_ms <= 0:
            raise ValueError(
                f"backend_timeout_ms must be positive, got {self.backend_timeout_ms}"
            )

    @property
    def backend_timeout_seconds(self) -> float:
        return self.backend_timeout_ms / 1000.0

    @classmethod
    def from_env(cls) -> "ServerSettings":
        """Build settings from environment variables, falling back to defaults."""
        timeout = os.environ.get("BACKEND_TIMEOUT_MS", str(DEFAULT_BACKEND_TIMEOUT_MS))
        try:
            timeout_ms = int(timeout)
        except ValueError:
            raise ValueError(f"BACKEND_TIMEOUT_MS must be an integer, got {timeout!r}")

        return cls(
            config_path=os.environ.get("PBS_CONFIG_PATH", DEFAULT_CONFIG_PATH),
            bidder=os.environ.get("PBS_BIDDER", DEFAULT_BIDDER),
            backend_name=os.environ.get("BACKEND_NAME", DEFAULT_BACKEND_NAME),
            backend_timeout_ms=timeout_ms,
        )
