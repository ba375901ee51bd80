"""Entry point for the sshdeck server."""

import logging

from sshdeck.config import Config
from sshdeck.server import mcp

logger = logging.getLogger(__name__)


def run_server() -> None:
    """Run the MCP server with configured transport."""
    config = Config.from_env()

    if config.transport == "stdio":
        logger.info("Starting SSH Deck server (transport=stdio)")
        mcp.run(transport="stdio")
    else:
        logger.info(
            "Starting SSH Deck server (transport=http, host=%s, port=%d)",
            config.http_host,
            config.http_port,
        )
        mcp.run(
            transport="http",
            host=config.http_host,
            port=config.http_port,
        )


if __name__ == "__main__":
    run_server()
