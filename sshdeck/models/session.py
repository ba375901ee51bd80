"""Session lifecycle data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from sshdeck.models.connection import ConnectionConfig


class SessionState(str, Enum):
    """Lifecycle state of the controller."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTING = "disconnecting"


@dataclass(frozen=True)
class SessionHandle:
    """Live session issued by the transport. Carries no secrets."""

    session_id: str
    host: str
    port: int
    username: str
    created_at: datetime = field(default_factory=datetime.now, compare=False)

    @classmethod
    def from_config(cls, session_id: str, config: ConnectionConfig) -> "SessionHandle":
        """Build a handle from the config that opened the session."""
        return cls(
            session_id=session_id,
            host=config.host,
            port=config.port,
            username=config.username,
        )

    @property
    def label(self) -> str:
        """Display form user@host:port."""
        return f"{self.username}@{self.host}:{self.port}"


@dataclass
class ConnectResponse:
    """Outcome of a transport connect attempt."""

    success: bool
    message: str
    session_id: str | None = None
    current_directory: str = ""
