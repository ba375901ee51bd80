"""Services for SSH Deck."""

from sshdeck.services.credentials import parse_port, resolve_credentials
from sshdeck.services.lifecycle import SessionController
from sshdeck.services.registry import SessionRegistry
from sshdeck.services.serializer import CommandSerializer
from sshdeck.services.transcript import TranscriptStore, TranscriptView
from sshdeck.services.transport import AsyncSSHTransport

__all__ = [
    "AsyncSSHTransport",
    "CommandSerializer",
    "SessionController",
    "SessionRegistry",
    "TranscriptStore",
    "TranscriptView",
    "parse_port",
    "resolve_credentials",
]
