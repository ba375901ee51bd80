"""Command execution data models."""

from dataclasses import dataclass, field
from datetime import datetime

# Command text recorded for the synthetic greeting entry
CONNECTION_MARKER = "connection_established"

# Exit status used when the command could not be carried out at all
TRANSPORT_FAILURE_STATUS = -1


@dataclass(frozen=True)
class CommandResult:
    """Result of a remote command execution.

    ``transport_error`` separates "the command never ran" from a remote
    command that exited with status -1.
    """

    stdout: str
    stderr: str
    exit_status: int
    transport_error: bool = False
    current_directory: str = ""

    @property
    def success(self) -> bool:
        """True when the command ran and exited 0."""
        return self.exit_status == 0 and not self.transport_error

    @classmethod
    def transport_failure(cls, message: str) -> "CommandResult":
        """Uniform result for a command the transport could not run."""
        return cls(
            stdout="",
            stderr=message,
            exit_status=TRANSPORT_FAILURE_STATUS,
            transport_error=True,
        )


@dataclass(frozen=True)
class TranscriptEntry:
    """One submitted command (or the greeting marker) and its result."""

    command: str
    result: CommandResult
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def is_marker(self) -> bool:
        """Whether this is the synthetic connection greeting."""
        return self.command == CONNECTION_MARKER

    @classmethod
    def greeting(cls, label: str, message: str) -> "TranscriptEntry":
        """Entry recorded when a session is established."""
        return cls(
            command=CONNECTION_MARKER,
            result=CommandResult(
                stdout=f"Connected to {label}\n{message}",
                stderr="",
                exit_status=0,
            ),
        )
