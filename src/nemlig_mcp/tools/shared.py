"""
Shared client management for the Nemlig tools
"""

from typing import Any, Dict, Optional

from ..client import NemligClient
from ..config import load_config
from .dispatcher import ToolDispatcher

# One client per process: it owns the session cookies and the rate limiter
_client: Optional[NemligClient] = None
_dispatcher: Optional[ToolDispatcher] = None


def set_client(client: NemligClient) -> None:
    """Install the client (and a dispatcher around it) used by every tool"""
    global _client, _dispatcher
    _client = client
    _dispatcher = ToolDispatcher(client)


def get_client() -> NemligClient:
    """Get the process-wide client, creating it from the environment on first use"""
    if _client is None:
        set_client(NemligClient(load_config().nemlig))
    return _client


def get_dispatcher() -> ToolDispatcher:
    get_client()
    return _dispatcher


def reset_client() -> None:
    """Drop the client; the next tool call builds a fresh one"""
    global _client, _dispatcher
    _client = None
    _dispatcher = None


async def report(ctx, result: Dict[str, Any], success_message: str) -> None:
    """Mirror a tool result to the MCP client log"""
    if not ctx:
        return
    if result.get("success"):
        await ctx.info(success_message)
    else:
        await ctx.error(result.get("error", "Unknown error"))
