"""asyncssh-backed SSH transport.

Keeps one asyncssh connection per session id and tracks each session's
working directory, since every command runs on a fresh channel.
"""

import logging
import re
import shlex
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

import asyncssh

from sshdeck.exceptions import SessionLost, TransportFailure
from sshdeck.models import CommandResult, ConnectionConfig, ConnectResponse, KeyAuth

if TYPE_CHECKING:
    from sshdeck.config import HostKeyVerifier

logger = logging.getLogger(__name__)

# Command separators and pipes; a cd mixed with these runs as a plain command
SHELL_OPERATORS = re.compile(r"[;&|\n]")

CONNECTED_MESSAGE = "Successfully connected and authenticated"
SESSION_NOT_FOUND = "Connection not found. Please connect first."


@dataclass
class RemoteSession:
    """An open asyncssh connection and its tracked working directory."""

    connection: "asyncssh.SSHClientConnection"
    current_directory: str = ""
    opened_at: datetime = field(default_factory=datetime.now)

    @property
    def is_closed(self) -> bool:
        """Check if the underlying connection was closed."""
        return bool(self.connection.is_closed())


def _decode(data: Any) -> str:
    """Normalize asyncssh output (None, bytes or str) to text."""
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return str(data)


def is_directory_change(command: str) -> bool:
    """Whether the command is a bare ``cd`` or a single ``cd <dir>``.

    Compound commands such as ``cd /tmp && ls`` do not count; their output
    is shown as-is and the tracked directory stays put.
    """
    stripped = command.strip()
    if SHELL_OPERATORS.search(stripped):
        return False
    return stripped == "cd" or stripped.startswith("cd ")


def build_remote_command(command: str, cwd: str) -> str:
    """Wrap a command so it runs in the tracked working directory.

    ``cd`` commands are rewritten to print the resulting directory so the
    caller can record it.
    """
    prefix = f"cd {shlex.quote(cwd)} && " if cwd else ""
    stripped = command.strip()
    if is_directory_change(stripped):
        target = stripped[2:].strip()
        if not target:
            return "cd && pwd"
        return f"{prefix}cd {target} && pwd"
    return f"{prefix}{stripped}"


class AsyncSSHTransport:
    """SSH transport implementing the SSHTransport protocol."""

    def __init__(
        self,
        host_keys: "HostKeyVerifier | None" = None,
        connect_timeout: int = 30,
    ) -> None:
        """Initialize transport.

        Args:
            host_keys: known_hosts manager, or None to disable verification
            connect_timeout: Seconds allowed for TCP connect and handshake
        """
        self._host_keys = host_keys
        self.connect_timeout = connect_timeout
        self._sessions: dict[str, RemoteSession] = {}

        if host_keys is None:
            logger.warning(
                "SSH host key verification DISABLED - vulnerable to MITM attacks. "
                "Set SSHDECK_KNOWN_HOSTS to a valid known_hosts file path."
            )

    @property
    def active_sessions(self) -> list[str]:
        """Session ids with an open connection."""
        return list(self._sessions.keys())

    def get_current_directory(self, session_id: str) -> str:
        """Tracked working directory of a session.

        Raises:
            SessionLost: If the session is unknown
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionLost(SESSION_NOT_FOUND, context=session_id)
        return session.current_directory

    def _connect_options(self, config: ConnectionConfig) -> dict[str, Any]:
        """Build asyncssh.connect keyword arguments for the selected auth."""
        options: dict[str, Any] = {
            "port": config.port,
            "username": config.username,
            "connect_timeout": self.connect_timeout,
        }
        if isinstance(config.auth, KeyAuth):
            options["client_keys"] = [config.auth.identity_path]
            options["passphrase"] = config.auth.passphrase
        else:
            options["password"] = config.auth.password
            options["client_keys"] = None
        return options

    async def _open_connection(
        self, config: ConnectionConfig
    ) -> "asyncssh.SSHClientConnection":
        """Connect with host key policy applied."""
        known_hosts = (
            self._host_keys.get_known_hosts_path() if self._host_keys else None
        )
        options = self._connect_options(config)

        try:
            return await asyncssh.connect(
                config.host, known_hosts=known_hosts, **options
            )
        except asyncssh.HostKeyNotVerifiable as e:
            if self._host_keys is None or self._host_keys.strict_checking:
                logger.error(
                    "Host key verification failed for %s: %s. "
                    "Add the host key to %s or set "
                    "SSHDECK_STRICT_HOST_KEY_CHECKING=false",
                    config.label,
                    e,
                    known_hosts,
                )
                raise
            logger.warning(
                "Host key not verified for %s (strict mode disabled): %s",
                config.label,
                e,
            )
            return await asyncssh.connect(config.host, known_hosts=None, **options)

    async def connect(self, config: ConnectionConfig) -> ConnectResponse:
        """Open and authenticate a session.

        Never raises for network or authentication problems; those come back
        as an unsuccessful ConnectResponse.
        """
        session_id = config.label

        try:
            conn = await self._open_connection(config)
        except asyncssh.PermissionDenied as e:
            return ConnectResponse(
                success=False,
                message=f"Authentication failed: {e}",
            )
        except (asyncssh.Error, OSError, ValueError) as e:
            # ValueError covers unreadable or undecryptable identity files
            return ConnectResponse(
                success=False,
                message=f"Failed to create SSH connection: {e}",
            )

        try:
            result = await conn.run("pwd", check=False)
        except (asyncssh.Error, OSError) as e:
            conn.close()
            return ConnectResponse(
                success=False,
                message=f"Failed to read working directory: {e}",
            )
        except BaseException:
            conn.close()
            raise

        stale = self._sessions.pop(session_id, None)
        if stale is not None:
            logger.info("Replacing existing session %s", session_id)
            stale.connection.close()

        cwd = _decode(result.stdout).strip()
        self._sessions[session_id] = RemoteSession(connection=conn, current_directory=cwd)
        logger.info(
            "SSH connection established to %s (cwd=%s, sessions=%d)",
            session_id,
            cwd or "?",
            len(self._sessions),
        )
        return ConnectResponse(
            success=True,
            message=CONNECTED_MESSAGE,
            session_id=session_id,
            current_directory=cwd,
        )

    async def execute(self, session_id: str, command: str) -> CommandResult:
        """Run one command in the session's working directory.

        Raises:
            SessionLost: If the session is unknown or its connection closed
            TransportFailure: If the command could not be run
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionLost(SESSION_NOT_FOUND, context=session_id)
        if session.is_closed:
            del self._sessions[session_id]
            raise SessionLost("Connection closed by remote host", context=session_id)

        changes_directory = is_directory_change(command)
        full_command = build_remote_command(command, session.current_directory)
        logger.debug("Running on %s: %s", session_id, full_command)

        try:
            result = await session.connection.run(full_command, check=False)
        except (asyncssh.Error, OSError) as e:
            raise TransportFailure(f"Command execution failed: {e}") from e

        stdout = _decode(result.stdout)
        stderr = _decode(result.stderr)
        exit_status = result.returncode if result.returncode is not None else -1

        if changes_directory and exit_status == 0:
            session.current_directory = stdout.strip()
            # The pwd output only feeds the tracked directory
            stdout = ""

        return CommandResult(
            stdout=stdout,
            stderr=stderr,
            exit_status=exit_status,
            current_directory=session.current_directory,
        )

    async def disconnect(self, session_id: str) -> bool:
        """Close a session.

        Returns:
            True if a session was closed, False if none was open

        Raises:
            TransportFailure: If the connection did not close cleanly
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            logger.debug("No session to close for %s", session_id)
            return False

        logger.info(
            "Closing SSH connection to %s (sessions=%d)",
            session_id,
            len(self._sessions),
        )
        try:
            session.connection.close()
            await session.connection.wait_closed()
        except (asyncssh.Error, OSError) as e:
            raise TransportFailure(f"Disconnect failed: {e}") from e
        return True

    async def close_all(self) -> None:
        """Close every open session, logging failures."""
        session_ids = list(self._sessions.keys())
        if session_ids:
            logger.info("Closing all %d session(s)", len(session_ids))
        for session_id in session_ids:
            try:
                await self.disconnect(session_id)
            except TransportFailure as e:
                logger.warning("Failed to close %s: %s", session_id, e)
