"""
FastMCP server setup for Nemlig
"""

import logging
from typing import Optional

from fastmcp import FastMCP

from .client import NemligClient
from .config import Config
from .tools import cart_tools, delivery_tools, order_tools, product_tools, profile_tools, shared

logger = logging.getLogger(__name__)

INSTRUCTIONS = (
    "Shop groceries on nemlig.com: search products, inspect product details, "
    "manage the basket, browse past orders and delivery slots. "
    "If a tool reports that authentication failed, call authenticate and retry."
)

TOOL_MODULES = (product_tools, cart_tools, order_tools, delivery_tools, profile_tools)


def create_server(config: Config, client: Optional[NemligClient] = None) -> FastMCP:
    """Build the MCP server and register every tool module.

    The client becomes the process-wide client used by the tools.
    """
    shared.set_client(client or NemligClient(config.nemlig))

    mcp = FastMCP(name=config.server.name, instructions=INSTRUCTIONS)
    for module in TOOL_MODULES:
        module.register_tools(mcp)

    logger.info(f"Registered tools: {', '.join(shared.get_dispatcher().tool_names)}")
    return mcp
