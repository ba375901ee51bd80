"""Session lifecycle state machine.

Drives the registry, transcript and serializer through:

    disconnected -> connecting -> connected -> disconnecting -> disconnected

Local state only changes after the awaited transport call resolves; nothing
is updated optimistically.
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from sshdeck.exceptions import AlreadyConnected, ConnectFailure, SessionLost
from sshdeck.models import (
    AuthMethod,
    ConnectionConfig,
    SessionHandle,
    SessionState,
    TranscriptEntry,
)
from sshdeck.services.credentials import resolve_credentials
from sshdeck.services.registry import SessionRegistry
from sshdeck.services.serializer import CommandSerializer
from sshdeck.services.transcript import TranscriptStore, TranscriptView

if TYPE_CHECKING:
    from sshdeck.protocols import SSHTransport

logger = logging.getLogger(__name__)


class SessionController:
    """Single-session SSH controller.

    The only entry point the presentation layer talks to. Exposes connect,
    execute and disconnect plus a read-only view of state and transcript.
    """

    def __init__(
        self,
        transport: "SSHTransport",
        registry: SessionRegistry | None = None,
        transcript: TranscriptStore | None = None,
        command_timeout: float | None = None,
    ) -> None:
        """Initialize controller.

        Args:
            transport: SSH transport collaborator
            registry: Handle registry (new one if omitted)
            transcript: Transcript store (new one if omitted)
            command_timeout: Seconds before a running command is abandoned,
                None or 0 for no limit
        """
        self._transport = transport
        self._registry = registry or SessionRegistry()
        self._transcript = transcript or TranscriptStore()
        self._serializer = CommandSerializer(
            transport,
            self._registry,
            self._transcript,
            timeout=command_timeout,
        )
        self._state = SessionState.DISCONNECTED
        self._cwd = ""

    # Read-only view

    @property
    def state(self) -> SessionState:
        """Current lifecycle state."""
        return self._state

    @property
    def is_connected(self) -> bool:
        """Whether a session is established."""
        return self._state is SessionState.CONNECTED

    @property
    def handle(self) -> SessionHandle | None:
        """Live session handle, if any."""
        return self._registry.current

    @property
    def transcript(self) -> TranscriptView:
        """Transcript entries in submission order."""
        return self._transcript.all()

    @property
    def is_executing(self) -> bool:
        """Whether a command is currently in flight."""
        handle = self._registry.current
        return handle is not None and self._serializer.is_busy(handle.session_id)

    @property
    def pending_command(self) -> str | None:
        """Command text in flight, cleared once it resolves."""
        handle = self._registry.current
        if handle is None:
            return None
        return self._serializer.pending(handle.session_id)

    @property
    def current_directory(self) -> str:
        """Last known remote working directory."""
        return self._cwd

    @property
    def command_timeout(self) -> float | None:
        """Seconds a command may run before it is abandoned."""
        return self._serializer.timeout

    # Operations

    async def connect(
        self,
        request: Mapping[str, Any] | ConnectionConfig,
        auth_method: AuthMethod | str = AuthMethod.PASSWORD,
    ) -> SessionHandle:
        """Open a session.

        Args:
            request: Raw connect fields or an already resolved config
            auth_method: "password" or "key" (ignored for a resolved config)

        Returns:
            Handle of the new session

        Raises:
            InvalidConfig: Malformed request, raised before any network call
            AlreadyConnected: A session is open or being opened
            ConnectFailure: The transport could not connect or authenticate
        """
        if isinstance(request, ConnectionConfig):
            config = request
        else:
            config = resolve_credentials(request, auth_method)

        try:
            if self._state is not SessionState.DISCONNECTED:
                current = self._registry.current
                raise AlreadyConnected(
                    f"Cannot connect while {self._state.value}",
                    context=current.label if current else None,
                )
            return await self._open(config)
        finally:
            config.discard_secrets()

    async def _open(self, config: ConnectionConfig) -> SessionHandle:
        """Run the connecting transition for a resolved config."""
        self._state = SessionState.CONNECTING
        logger.info(
            "Opening SSH session to %s (auth=%s)",
            config.label,
            config.auth_method.value,
        )

        try:
            response = await self._transport.connect(config)
        except asyncio.CancelledError:
            self._state = SessionState.DISCONNECTED
            raise
        except Exception as e:
            self._state = SessionState.DISCONNECTED
            logger.error("Connection to %s failed: %s", config.label, e)
            raise ConnectFailure(f"Connection failed: {e}") from e

        if not response.success or not response.session_id:
            self._state = SessionState.DISCONNECTED
            logger.error("Connection to %s failed: %s", config.label, response.message)
            raise ConnectFailure(response.message or "Connection failed")

        handle = SessionHandle.from_config(response.session_id, config)
        try:
            self._registry.register(handle)
        except AlreadyConnected:
            self._state = SessionState.DISCONNECTED
            await self._close_quietly(handle)
            raise
        self._transcript.append(TranscriptEntry.greeting(handle.label, response.message))
        self._cwd = response.current_directory
        self._state = SessionState.CONNECTED
        logger.info("SSH session established to %s", handle.label)
        return handle

    async def execute(self, command: str) -> TranscriptEntry | None:
        """Run a command on the live session.

        Args:
            command: Command text; blank input is ignored

        Returns:
            The transcript entry, or None if nothing was run

        Raises:
            ExecutionInProgress: Another command is still running
            SessionLost: The transport dropped the session; local state has
                been torn down
        """
        if not command.strip():
            return None

        handle = self._registry.current
        if self._state is not SessionState.CONNECTED or handle is None:
            logger.debug("Ignoring command while %s", self._state.value)
            return None

        try:
            entry = await self._serializer.execute(handle, command)
        except SessionLost as e:
            logger.error("Session %s lost: %s", handle.label, e)
            if self._registry.is_registered(handle):
                self._teardown(handle)
            raise

        if entry is not None and entry.result.current_directory:
            if self._registry.is_registered(handle):
                self._cwd = entry.result.current_directory
        return entry

    async def disconnect(self) -> None:
        """Close the session. Local state is cleared even if teardown fails."""
        if self._state is SessionState.DISCONNECTED:
            logger.debug("Disconnect requested with no session")
            return
        if self._state is not SessionState.CONNECTED:
            logger.warning("Disconnect ignored while %s", self._state.value)
            return

        handle = self._registry.current
        self._state = SessionState.DISCONNECTING
        try:
            if handle is not None:
                logger.info("Closing SSH session to %s", handle.label)
                await self._close_quietly(handle)
        finally:
            self._teardown(handle)

    async def _close_quietly(self, handle: SessionHandle) -> None:
        """Best-effort transport teardown; failures are only logged."""
        try:
            await self._transport.disconnect(handle.session_id)
        except Exception as e:
            logger.warning(
                "Disconnect from %s failed, clearing local state anyway: %s",
                handle.label,
                e,
            )

    def _teardown(self, handle: SessionHandle | None) -> None:
        """Enter the disconnected state and discard session data."""
        if handle is not None:
            self._serializer.forget(handle.session_id)
        self._registry.clear()
        self._transcript.clear()
        self._cwd = ""
        self._state = SessionState.DISCONNECTED
        logger.debug("Session state reset to disconnected")
