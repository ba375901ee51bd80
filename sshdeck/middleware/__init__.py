"""SSH Deck middleware components."""

from sshdeck.middleware.base import DeckMiddleware
from sshdeck.middleware.errors import ErrorHandlingMiddleware
from sshdeck.middleware.logging import LoggingMiddleware

__all__ = [
    "DeckMiddleware",
    "ErrorHandlingMiddleware",
    "LoggingMiddleware",
]
