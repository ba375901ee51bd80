"""Colorful console logging formatter."""

import logging
import re
from datetime import datetime

# ANSI color codes
COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "white": "\033[37m",
    "cyan": "\033[36m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "bright_black": "\033[90m",
    "bright_red": "\033[91m",
    "bright_green": "\033[92m",
    "bright_yellow": "\033[93m",
    "bright_blue": "\033[94m",
    "bright_magenta": "\033[95m",
    "bright_cyan": "\033[96m",
    "bg_red": "\033[41m",
}

LEVEL_COLORS = {
    "DEBUG": COLORS["bright_black"],
    "INFO": COLORS["bright_green"],
    "WARNING": COLORS["bright_yellow"],
    "ERROR": COLORS["bright_red"],
    "CRITICAL": COLORS["bg_red"] + COLORS["white"] + COLORS["bold"],
}

# Component colors for logger names (longest prefix first)
COMPONENT_COLORS = {
    "sshdeck.services.transport": COLORS["bright_magenta"],
    "sshdeck.services": COLORS["bright_blue"],
    "sshdeck.server": COLORS["bright_cyan"],
    "sshdeck.tools": COLORS["cyan"],
    "sshdeck.middleware": COLORS["yellow"],
    "sshdeck.config": COLORS["green"],
}

# user@host:port
SSH_TARGET_PATTERN = re.compile(r"([\w.\-]+@[\w.\-]+:\d+)")
DURATION_PATTERN = re.compile(r"(\d+\.?\d*ms)")
EXIT_PATTERN = re.compile(r"(exit=-?\d+)")

# Prefix markers keyed by words in the message
EVENT_MARKERS = [
    (("starting", "ready"), ">>>", "bright_green"),
    (("shutting down", "shutdown"), "<<<", "bright_red"),
    (("error", "failed", "lost"), "!!", "bright_red"),
    (("warning", "slow", "timed out"), "!", "bright_yellow"),
    (("established", "completed"), "OK", "bright_green"),
    (("opening", "executing"), "+", "bright_cyan"),
    (("closing", "cleared"), "-", "bright_yellow"),
]


class ColorfulFormatter(logging.Formatter):
    """Log formatter with aligned columns and component highlighting."""

    def __init__(self, use_colors: bool = True) -> None:
        """Initialize the formatter.

        Args:
            use_colors: Whether to use ANSI colors.
        """
        super().__init__()
        self.use_colors = use_colors

    def _colorize(self, text: str, color: str) -> str:
        if not self.use_colors:
            return text
        return f"{color}{text}{COLORS['reset']}"

    def _component_color(self, name: str) -> str:
        for prefix, color in COMPONENT_COLORS.items():
            if name.startswith(prefix):
                return color
        return COLORS["white"]

    def _format_timestamp(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created).astimezone()
        return f"{dt:%H:%M:%S}.{int(record.msecs):03d} {dt:%m/%d}"

    def _format_component(self, record: logging.LogRecord) -> str:
        name = record.name.removeprefix("sshdeck.")
        return self._colorize(f"{name:<20}", self._component_color(record.name))

    def _highlight_message(self, message: str) -> str:
        if not self.use_colors:
            return message
        for pattern, color in (
            (SSH_TARGET_PATTERN, COLORS["bright_magenta"]),
            (DURATION_PATTERN, COLORS["bright_yellow"]),
            (EXIT_PATTERN, COLORS["cyan"]),
        ):
            message = pattern.sub(f"{color}\\1{COLORS['reset']}", message)
        return message

    def _event_marker(self, message: str) -> str:
        lowered = message.lower()
        for words, marker, color in EVENT_MARKERS:
            if any(word in lowered for word in words):
                return self._colorize(f"{marker:<3}", COLORS[color])
        return "   "

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as one aligned line."""
        timestamp = self._colorize(self._format_timestamp(record), COLORS["dim"])
        level = self._colorize(
            f"{record.levelname:<8}",
            LEVEL_COLORS.get(record.levelname, COLORS["white"]),
        )
        component = self._format_component(record)
        sep = self._colorize("|", COLORS["dim"])
        message = record.getMessage()
        marker = self._event_marker(message) if self.use_colors else ""
        line = (
            f"{timestamp} {sep} {level} {sep} {component} {sep} "
            f"{self._highlight_message(message)}"
        )
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return f"{marker} {line}" if marker else line
