"""Data models for SSH Deck."""

from sshdeck.models.command import (
    CONNECTION_MARKER,
    TRANSPORT_FAILURE_STATUS,
    CommandResult,
    TranscriptEntry,
)
from sshdeck.models.connection import (
    AuthMethod,
    ConnectionConfig,
    KeyAuth,
    PasswordAuth,
)
from sshdeck.models.session import ConnectResponse, SessionHandle, SessionState

__all__ = [
    "AuthMethod",
    "CONNECTION_MARKER",
    "CommandResult",
    "ConnectResponse",
    "ConnectionConfig",
    "KeyAuth",
    "PasswordAuth",
    "SessionHandle",
    "SessionState",
    "TRANSPORT_FAILURE_STATUS",
    "TranscriptEntry",
]
