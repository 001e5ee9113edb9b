"""
Authentication tools for Nemlig MCP server
"""

from typing import Any, Dict

from fastmcp import Context

from .shared import get_dispatcher, report


def register_tools(mcp):
    """Register authentication tools with the FastMCP server"""

    @mcp.tool()
    async def authenticate(ctx: Context = None) -> Dict[str, Any]:
        """
        Log in to Nemlig with the configured credentials.

        The server logs in on startup. Use this when another tool reports
        "Authentication failed", which means the session has expired.

        Returns:
            Dictionary indicating whether the login succeeded
        """
        if ctx:
            await ctx.info("Logging in to Nemlig")

        result = await get_dispatcher().dispatch("authenticate", {})
        await report(ctx, result, "Authenticated with Nemlig")
        return result

    @mcp.tool()
    async def force_reauthenticate(ctx: Context = None) -> Dict[str, Any]:
        """
        Clear the stored session cookies and log in again.

        Use this if authenticate alone does not fix authentication errors.

        Returns:
            Dictionary indicating whether the new login succeeded
        """
        if ctx:
            await ctx.info("Clearing Nemlig session and logging in again")

        result = await get_dispatcher().dispatch("force_reauthenticate", {})
        await report(ctx, result, "Session renewed")
        return result
