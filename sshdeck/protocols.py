"""Protocol interfaces for dependency inversion.

The session controller only depends on :class:`SSHTransport`, so tests and
scripted harnesses can drive it with any object exposing the three
operations.

Usage Example:

    from sshdeck.protocols import SSHTransport

    class FakeTransport:
        async def connect(self, config):
            return ConnectResponse(True, "ok", session_id="s1")

        async def execute(self, session_id, command):
            return CommandResult(stdout="", stderr="", exit_status=0)

        async def disconnect(self, session_id):
            return True

    controller = SessionController(FakeTransport())
"""

from typing import Protocol, runtime_checkable

from sshdeck.models import CommandResult, ConnectionConfig, ConnectResponse


@runtime_checkable
class SSHTransport(Protocol):
    """Protocol for the SSH transport collaborator."""

    async def connect(self, config: ConnectionConfig) -> ConnectResponse:
        """Open and authenticate a session.

        Args:
            config: Resolved connection request

        Returns:
            ConnectResponse carrying a session id only on success
        """
        ...

    async def execute(self, session_id: str, command: str) -> CommandResult:
        """Run one command to completion on an open session.

        Args:
            session_id: Identifier returned by connect
            command: Shell command text

        Returns:
            Captured output and exit status

        Raises:
            TransportFailure: If the command could not be carried out
            SessionLost: If the session no longer exists
        """
        ...

    async def disconnect(self, session_id: str) -> bool:
        """Close a session.

        Returns:
            True if a session was closed, False if none was open

        Raises:
            TransportFailure: If teardown failed
        """
        ...
