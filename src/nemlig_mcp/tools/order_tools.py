"""
Order history tools for Nemlig MCP server
"""

from typing import Any, Dict

from fastmcp import Context

from .shared import get_dispatcher, report


def register_tools(mcp):
    """Register order tools with the FastMCP server"""

    @mcp.tool()
    async def get_order_history(limit: Any = None, ctx: Context = None) -> Dict[str, Any]:
        """
        Retrieve past orders.

        Includes order numbers, dates, status, totals and delivery information.
        Useful for reordering or analyzing shopping patterns; use
        get_order_details to see the products of a single order.

        Args:
            limit: Maximum number of orders to return (default: 10)

        Returns:
            Dictionary containing the most recent orders
        """
        if ctx:
            await ctx.info("Getting order history")

        result = await get_dispatcher().dispatch("get_order_history", {"limit": limit})
        await report(ctx, result, f"Retrieved {result.get('count', 0)} orders")
        return result

    @mcp.tool()
    async def get_order_details(orderId: Any = None, ctx: Context = None) -> Dict[str, Any]:
        """
        Get the full contents of a past order.

        Args:
            orderId: The order id (the "id" field from get_order_history)

        Returns:
            Dictionary with the order lines, coupons, discounts, shipping,
            packaging and deposit prices
        """
        if ctx:
            await ctx.info(f"Getting details for order {orderId}")

        result = await get_dispatcher().dispatch("get_order_details", {"orderId": orderId})
        await report(ctx, result, f"Retrieved order {orderId}")
        return result
