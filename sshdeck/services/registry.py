"""Registry of the live session handle."""

import logging

from sshdeck.exceptions import AlreadyConnected
from sshdeck.models import SessionHandle

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Holds at most one live SessionHandle (single-session client)."""

    def __init__(self) -> None:
        self._handle: SessionHandle | None = None

    @property
    def current(self) -> SessionHandle | None:
        """The registered handle, or None."""
        return self._handle

    def is_registered(self, handle: SessionHandle) -> bool:
        """Whether this exact handle is the live one."""
        return self._handle is handle

    def register(self, handle: SessionHandle) -> None:
        """Register a freshly connected session.

        Raises:
            AlreadyConnected: If a handle is already registered
        """
        if self._handle is not None:
            raise AlreadyConnected(
                f"Already connected to {self._handle.label}",
                context="disconnect first",
            )
        self._handle = handle
        logger.debug("Registered session %s", handle.session_id)

    def clear(self) -> None:
        """Forget the registered handle. Safe to call when empty."""
        if self._handle is not None:
            logger.debug("Cleared session %s", self._handle.session_id)
        self._handle = None
