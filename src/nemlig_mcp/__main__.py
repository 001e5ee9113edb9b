"""
Entry point for the Nemlig MCP server.

Runs as a stdio MCP server for Claude Desktop or any other MCP client.

Environment Variables:
    NEMLIG_USERNAME - Your nemlig.com username/email
    NEMLIG_PASSWORD - Your nemlig.com password
    NEMLIG_API_URL - API base URL (default: https://www.nemlig.com/webapi)
    NEMLIG_TIMEOUT - Request timeout in milliseconds (default: 30000)
    NEMLIG_REQUESTS_PER_SECOND / NEMLIG_BURST_SIZE - Rate limit (default: 1 / 2)
    LOG_LEVEL - Logging level (default: INFO)
"""

import asyncio
import logging
import sys

from .config import load_config
from .logging_setup import configure_logging
from .server import create_server
from .tools.shared import get_client

logger = logging.getLogger(__name__)


def main():
    try:
        config = load_config()
        configure_logging(config.server.log_level)
        logger.info(f"Starting {config.server.name} v{config.server.version}")

        mcp = create_server(config)

        if config.nemlig.has_credentials:
            result = asyncio.run(get_client().authenticate())
            if result.ok:
                logger.info("Authentication successful")
            else:
                logger.warning(f"Authentication failed: {result.error}")
        else:
            logger.warning("No credentials provided - cart and order tools will not work")

        logger.info("Server ready - waiting for MCP requests via stdio")
        mcp.run()
    except KeyboardInterrupt:
        logger.info("Shutting down")
    except Exception:
        logger.exception("Fatal error starting server")
        sys.exit(1)


if __name__ == "__main__":
    main()
