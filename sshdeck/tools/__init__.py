"""SSH Deck MCP tools."""

from sshdeck.tools.handlers import (
    format_entry,
    format_transcript,
    handle_connect,
    handle_disconnect,
    handle_execute,
    handle_status,
    handle_transcript,
)

__all__ = [
    "format_entry",
    "format_transcript",
    "handle_connect",
    "handle_disconnect",
    "handle_execute",
    "handle_status",
    "handle_transcript",
]
