"""SSH Deck FastMCP server.

Thin wiring layer: exposes the session controller as MCP tools. All session
logic lives in services/, text rendering in tools/.
"""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from sshdeck.config import Settings
from sshdeck.dependencies import Dependencies
from sshdeck.middleware import ErrorHandlingMiddleware, LoggingMiddleware
from sshdeck.tools import (
    handle_connect,
    handle_disconnect,
    handle_execute,
    handle_status,
    handle_transcript,
)
from sshdeck.utils.console import ColorfulFormatter

NOISY_LOGGERS = [
    "asyncssh",
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "httpx",
    "httpcore",
    "fastmcp",
    "starlette",
    "anyio",
]


def configure_logging(settings: Settings) -> None:
    """Attach the colorful stderr handler to the sshdeck logger.

    Safe to call repeatedly; the handler is only added once.
    """
    use_colors = settings.log_colors and sys.stderr.isatty()

    deck_logger = logging.getLogger("sshdeck")
    deck_logger.setLevel(getattr(logging, settings.log_level, logging.INFO))

    if not deck_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColorfulFormatter(use_colors=use_colors))
        deck_logger.addHandler(handler)
        deck_logger.propagate = False

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


logger = logging.getLogger(__name__)


def make_lifespan(deps: Dependencies) -> Any:
    """Build a lifespan that closes the SSH session on shutdown."""

    @asynccontextmanager
    async def app_lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
        logger.info("SSH Deck server starting up")
        try:
            yield {"deps": deps}
        finally:
            logger.info("SSH Deck server shutting down")
            handle = deps.controller.handle
            if handle is not None:
                logger.info("Closing active SSH session: %s", handle.label)
            await deps.cleanup()
            logger.info("SSH Deck server shutdown complete")

    return app_lifespan


def configure_middleware(server: FastMCP, settings: Settings) -> None:
    """Add middleware in order: ErrorHandling -> Logging (with timing)."""
    server.add_middleware(
        ErrorHandlingMiddleware(include_traceback=settings.include_traceback)
    )
    server.add_middleware(
        LoggingMiddleware(
            include_payloads=settings.log_payloads,
            slow_threshold_ms=float(settings.slow_threshold_ms),
        )
    )


def register_tools(server: FastMCP, deps: Dependencies) -> None:
    """Register the session tools bound to this server's controller."""
    controller = deps.controller

    @server.tool()
    async def ssh_connect(
        host: str,
        username: str,
        port: int | str = 22,
        auth_method: str = "password",
        password: str = "",
        identity_path: str = "",
        passphrase: str = "",
    ) -> str:
        """Connect to an SSH server. Only one session can be open at a time.

        Args:
            host: Hostname or IP address
            username: Remote user
            port: SSH port (invalid values fall back to 22)
            auth_method: "password" or "key"
            password: Password for auth_method="password"
            identity_path: Private key file for auth_method="key"
            passphrase: Optional passphrase for the private key
        """
        return await handle_connect(
            controller,
            host=host,
            username=username,
            port=port,
            auth_method=auth_method,
            password=password,
            identity_path=identity_path,
            passphrase=passphrase,
        )

    @server.tool()
    async def ssh_execute(command: str) -> str:
        """Run a shell command on the connected host and return its output.

        Commands run one at a time; `cd` changes the directory used for later
        commands.

        Args:
            command: Shell command to run
        """
        return await handle_execute(controller, command)

    @server.tool()
    async def ssh_disconnect() -> str:
        """Close the SSH session and discard its transcript."""
        return await handle_disconnect(controller)

    @server.tool()
    async def ssh_status() -> str:
        """Show connection state, remote directory and transcript size."""
        return handle_status(controller)

    @server.tool()
    async def ssh_transcript() -> str:
        """Show every command run in this session with its output."""
        return handle_transcript(controller)


def create_server(deps: Dependencies | None = None) -> FastMCP:
    """Create and configure the MCP server.

    Args:
        deps: Dependencies to use, built from the environment if omitted

    Returns:
        Configured FastMCP server instance
    """
    deps = deps or Dependencies.create()
    settings = deps.config.settings
    configure_logging(settings)

    server = FastMCP("sshdeck", lifespan=make_lifespan(deps))
    configure_middleware(server, settings)
    register_tools(server, deps)

    @server.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> PlainTextResponse:
        """Health check endpoint."""
        client_host = request.client.host if request.client else "unknown"
        logger.debug("Health check from %s", client_host)
        return PlainTextResponse("OK")

    logger.info(
        "Server configured (command_timeout=%ss, connect_timeout=%ss)",
        settings.command_timeout or "none",
        settings.connect_timeout,
    )
    return server


# Default server instance
mcp = create_server()
