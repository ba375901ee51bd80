"""Application configuration.

Delegates to specialized components:
- Settings: Environment variables
- HostKeyVerifier: Manages known_hosts
"""

import os
from dataclasses import dataclass

from sshdeck.config.host_keys import HostKeyVerifier
from sshdeck.config.settings import Settings


@dataclass
class Config:
    """Application configuration.

    Aggregates settings from environment and known_hosts.
    """

    settings: Settings
    host_keys: HostKeyVerifier

    @classmethod
    def from_env(cls) -> "Config":
        """Create config from environment.

        Returns:
            Configured instance with all components initialized
        """
        settings = Settings.from_env()
        host_keys = HostKeyVerifier(
            known_hosts_path=os.getenv("SSHDECK_KNOWN_HOSTS"),
            strict_checking=cls._get_bool_env("SSHDECK_STRICT_HOST_KEY_CHECKING", True),
        )
        return cls(settings=settings, host_keys=host_keys)

    @staticmethod
    def _get_bool_env(key: str, default: bool) -> bool:
        """Get boolean from environment; anything but 'false' is True."""
        value = os.getenv(key)
        if value is None:
            return default
        return value.lower() != "false"

    # Delegate to settings for convenience
    @property
    def command_timeout(self) -> int:
        """Command timeout in seconds (0 means no limit)."""
        return self.settings.command_timeout

    @property
    def connect_timeout(self) -> int:
        """Connect timeout in seconds."""
        return self.settings.connect_timeout

    @property
    def transport(self) -> str:
        """Transport type (http or stdio)."""
        return self.settings.transport

    @property
    def http_host(self) -> str:
        """HTTP server bind address."""
        return self.settings.http_host

    @property
    def http_port(self) -> int:
        """HTTP server port."""
        return self.settings.http_port

    @property
    def strict_host_key_checking(self) -> bool:
        """Whether to reject unknown host keys."""
        return self.host_keys.strict_checking
