"""Session tool handlers.

Each handler drives the SessionController and renders the outcome as plain
text. Expected failures come back as "Error: ..." strings rather than
exceptions so the MCP client always gets a readable answer.
"""

import logging
from typing import TYPE_CHECKING

from sshdeck.exceptions import (
    AlreadyConnected,
    ConnectFailure,
    ExecutionInProgress,
    InvalidConfig,
    SessionLost,
)
from sshdeck.models import TranscriptEntry

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sshdeck.services import SessionController

logger = logging.getLogger(__name__)


def format_entry(entry: TranscriptEntry) -> str:
    """Render one transcript entry the way a terminal would show it."""
    lines = []
    if not entry.is_marker:
        lines.append(f"$ {entry.command}")
    result = entry.result
    if result.stdout:
        lines.append(result.stdout.rstrip("\n"))
    if result.stderr:
        lines.append(result.stderr.rstrip("\n"))
    if not entry.is_marker:
        if result.transport_error:
            lines.append("[not executed]")
        elif result.exit_status != 0:
            lines.append(f"[exit {result.exit_status}]")
    return "\n".join(lines)


def format_transcript(entries: "Iterable[TranscriptEntry]") -> str:
    """Render a transcript in submission order."""
    return "\n".join(format_entry(entry) for entry in entries)


async def handle_connect(
    controller: "SessionController",
    host: str,
    username: str,
    port: int | str = 22,
    auth_method: str = "password",
    password: str = "",
    identity_path: str = "",
    passphrase: str = "",
) -> str:
    """Open a session and return the greeting."""
    request = {
        "host": host,
        "port": port,
        "username": username,
        "password": password,
        "identity_path": identity_path,
        "passphrase": passphrase,
    }
    try:
        await controller.connect(request, auth_method)
    except InvalidConfig as e:
        return f"Error: Invalid connection settings: {e}"
    except AlreadyConnected as e:
        return f"Error: {e}"
    except ConnectFailure as e:
        return f"Error: Connection failed: {e}"

    return format_transcript(controller.transcript)


async def handle_execute(controller: "SessionController", command: str) -> str:
    """Run a command and return its transcript entry."""
    if not command.strip():
        return "Nothing to run: command is empty."
    if not controller.is_connected:
        return "Not connected. Use ssh_connect first."

    try:
        entry = await controller.execute(command)
    except ExecutionInProgress as e:
        return f"Error: {e}. Wait for it to finish."
    except SessionLost as e:
        return f"Error: Session lost: {e}. Connect again."

    if entry is None:
        return "Command was not run: session closed."
    return format_entry(entry)


async def handle_disconnect(controller: "SessionController") -> str:
    """Close the session."""
    handle = controller.handle
    if handle is None:
        return "Not connected."
    await controller.disconnect()
    return f"Disconnected from {handle.label}."


def handle_status(controller: "SessionController") -> str:
    """Describe the controller state."""
    handle = controller.handle
    lines = [f"State: {controller.state.value}"]
    if handle is not None:
        lines.append(f"Session: {handle.label}")
        lines.append(f"Connected since: {handle.created_at:%Y-%m-%d %H:%M:%S}")
    if controller.current_directory:
        lines.append(f"Directory: {controller.current_directory}")
    lines.append(f"Transcript entries: {len(controller.transcript)}")
    if controller.is_executing:
        lines.append(f"Executing: {controller.pending_command}")
    return "\n".join(lines)


def handle_transcript(controller: "SessionController") -> str:
    """Return the full transcript."""
    entries = controller.transcript
    if not entries:
        return "Transcript is empty."
    return format_transcript(entries)
