"""Serialized command execution over a live session.

Locking Strategy:
- One slot (asyncio.Lock plus pending text) per session id, created lazily
  and replaced after forget(), so a reconnect under the same id never
  shares state with a call still running on the old session
- A call arriving while the lock is held is rejected with
  ExecutionInProgress instead of waiting on the lock
- Checking ``locked()`` and entering the lock happen without an await in
  between, so the check cannot race on a single event loop

Ordering:
- The transcript entry is built and appended only after the transport call
  resolves, and only if the handle is still the registered one
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from sshdeck.exceptions import ExecutionInProgress, SessionLost
from sshdeck.models import CommandResult, SessionHandle, TranscriptEntry

if TYPE_CHECKING:
    from sshdeck.protocols import SSHTransport
    from sshdeck.services.registry import SessionRegistry
    from sshdeck.services.transcript import TranscriptStore

logger = logging.getLogger(__name__)


@dataclass
class _Slot:
    """Per-session lock and the command text it guards."""

    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    pending: str | None = None


class CommandSerializer:
    """Runs at most one command per session and records each result."""

    def __init__(
        self,
        transport: "SSHTransport",
        registry: "SessionRegistry",
        transcript: "TranscriptStore",
        timeout: float | None = None,
    ) -> None:
        """Initialize serializer.

        Args:
            transport: SSH transport used to run commands
            registry: Registry holding the live handle
            transcript: Store receiving completed entries
            timeout: Seconds to wait for a command, None or 0 to wait forever
        """
        self._transport = transport
        self._registry = registry
        self._transcript = transcript
        self.timeout = timeout or None
        self._slots: dict[str, _Slot] = {}

    def is_busy(self, session_id: str) -> bool:
        """Whether a command is in flight for the session."""
        slot = self._slots.get(session_id)
        return slot is not None and slot.lock.locked()

    def pending(self, session_id: str) -> str | None:
        """Command text currently in flight for the session."""
        slot = self._slots.get(session_id)
        return slot.pending if slot is not None else None

    def forget(self, session_id: str) -> None:
        """Drop per-session state after the session ends."""
        self._slots.pop(session_id, None)

    async def execute(
        self,
        handle: SessionHandle,
        command: str,
    ) -> TranscriptEntry | None:
        """Run a command on the session and append its result.

        Args:
            handle: Live session handle
            command: Command text; surrounding whitespace is stripped

        Returns:
            The recorded entry, or None when the call was a no-op

        Raises:
            ExecutionInProgress: If another command is running on the handle
            SessionLost: If the transport no longer has the session
        """
        text = command.strip()
        if not text:
            return None

        if not self._registry.is_registered(handle):
            logger.debug("Ignoring command for inactive session %s", handle.session_id)
            return None

        session_id = handle.session_id
        slot = self._slots.setdefault(session_id, _Slot())
        if slot.lock.locked():
            raise ExecutionInProgress(session_id, slot.pending)

        async with slot.lock:
            slot.pending = text
            submitted_at = datetime.now()
            logger.info("Executing on %s: %s", handle.label, text)
            try:
                result = await self._dispatch(session_id, text)
            finally:
                slot.pending = None

        entry = TranscriptEntry(command=text, result=result, timestamp=submitted_at)

        if not self._registry.is_registered(handle):
            logger.warning(
                "Session %s closed while '%s' was running, result discarded "
                "(exit=%d)",
                handle.label,
                text,
                result.exit_status,
            )
            return entry

        self._transcript.append(entry)
        logger.debug(
            "Command on %s completed (exit=%d, transport_error=%s)",
            handle.label,
            result.exit_status,
            result.transport_error,
        )
        return entry

    async def _dispatch(self, session_id: str, command: str) -> CommandResult:
        """Call the transport, folding failures into a CommandResult."""
        try:
            if self.timeout is None:
                return await self._transport.execute(session_id, command)
            return await asyncio.wait_for(
                self._transport.execute(session_id, command),
                timeout=self.timeout,
            )
        except SessionLost:
            raise
        except asyncio.TimeoutError:
            logger.warning(
                "Command on %s timed out after %gs: %s",
                session_id,
                self.timeout,
                command,
            )
            return CommandResult.transport_failure(
                f"Command timed out after {self.timeout:g}s"
            )
        except Exception as e:
            logger.warning("Command on %s failed to run: %s", session_id, e)
            return CommandResult.transport_failure(f"Error executing command: {e}")
