"""
Delivery slot tools for Nemlig MCP server
"""

from typing import Any, Dict

from fastmcp import Context

from .shared import get_dispatcher, report


def register_tools(mcp):
    """Register delivery tools with the FastMCP server"""

    @mcp.tool()
    async def get_delivery_slots(ctx: Context = None) -> Dict[str, Any]:
        """
        Get available delivery time slots.

        Note: Nemlig's delivery slot endpoint has not been identified yet, so
        this tool currently reports that the operation is not implemented.

        Returns:
            Dictionary with dates, time ranges, availability and delivery prices
        """
        if ctx:
            await ctx.info("Getting delivery slots")

        result = await get_dispatcher().dispatch("get_delivery_slots", {})
        await report(ctx, result, f"Retrieved {len(result.get('slots', []))} delivery slots")
        return result
