"""Exception hierarchy for SSH Deck.

Every failure of the session controller maps onto one of these types so the
presentation layer can decide whether to show a pre-flight message, a failure
notice, or nothing at all (transcript already records it).
"""


class SSHDeckError(Exception):
    """Base exception for all SSH Deck errors."""

    def __init__(self, message: str, context: str | None = None):
        self.message = message
        self.context = context
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with optional context."""
        if self.context:
            return f"{self.message} ({self.context})"
        return self.message


class InvalidConfig(SSHDeckError):
    """Connection request is malformed; no network attempt was made."""

    pass


class ConnectFailure(SSHDeckError):
    """Transport could not establish or authenticate the session."""

    pass


class AlreadyConnected(SSHDeckError):
    """A session is already registered; disconnect first."""

    pass


class ExecutionInProgress(SSHDeckError):
    """A command is still running on this session."""

    def __init__(self, session_id: str, pending: str | None = None):
        self.session_id = session_id
        self.pending = pending
        super().__init__(
            f"Command already running on {session_id}",
            context=f"pending: {pending}" if pending else None,
        )


class TransportFailure(SSHDeckError):
    """Transport could not carry out the requested operation."""

    pass


class SessionLost(TransportFailure):
    """Transport no longer holds the session (closed or never opened)."""

    pass
