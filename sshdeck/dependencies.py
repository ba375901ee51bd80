"""Dependency injection container for SSH Deck.

Replaces ambient global session state with explicit wiring: the server
builds one container and hands its controller to the tools.
"""

from dataclasses import dataclass

from sshdeck.config import Config
from sshdeck.services.lifecycle import SessionController
from sshdeck.services.transport import AsyncSSHTransport


@dataclass
class Dependencies:
    """Container for SSH Deck dependencies.

    Example:
        deps = Dependencies.create()
        await deps.controller.connect({"host": "10.0.0.5", "username": "root"})
    """

    config: Config
    transport: AsyncSSHTransport
    controller: SessionController

    @classmethod
    def create(cls) -> "Dependencies":
        """Create dependencies from environment configuration."""
        return cls.from_config(Config.from_env())

    @classmethod
    def from_config(cls, config: Config) -> "Dependencies":
        """Create dependencies with custom configuration.

        Args:
            config: Custom Config instance

        Returns:
            Dependencies with transport and controller built from config
        """
        transport = AsyncSSHTransport(
            host_keys=config.host_keys,
            connect_timeout=config.connect_timeout,
        )
        controller = SessionController(
            transport,
            command_timeout=config.command_timeout or None,
        )
        return cls(config=config, transport=transport, controller=controller)

    async def cleanup(self) -> None:
        """Close the session and any transport connections left open."""
        await self.controller.disconnect()
        await self.transport.close_all()
