"""
Basket (cart) tools for Nemlig MCP server.

Every tool returns the basket exactly as Nemlig reports it after the call;
nothing is tracked locally.
"""

from typing import Any, Dict

from fastmcp import Context

from .shared import get_dispatcher, report


def register_tools(mcp):
    """Register cart tools with the FastMCP server"""

    @mcp.tool()
    async def view_cart(ctx: Context = None) -> Dict[str, Any]:
        """
        View the current shopping cart.

        Returns:
            Dictionary with all items, quantities, unit prices, line totals and the cart total
        """
        if ctx:
            await ctx.info("Fetching Nemlig basket")

        result = await get_dispatcher().dispatch("view_cart", {})
        await report(ctx, result, "Retrieved basket")
        return result

    @mcp.tool()
    async def add_to_cart(
        productId: Any = None,
        quantity: Any = None,
        ctx: Context = None,
    ) -> Dict[str, Any]:
        """
        Add a product to the shopping cart.

        Use this after finding products via search_products or get_product_details.

        Args:
            productId: The Nemlig product id to add
            quantity: Number of units to add (default: 1, must be at least 1)

        Returns:
            Dictionary confirming the addition, with the updated cart
        """
        if ctx:
            await ctx.info(f"Adding {productId} to basket")

        result = await get_dispatcher().dispatch(
            "add_to_cart", {"productId": productId, "quantity": quantity}
        )
        await report(ctx, result, f"Added {result.get('quantity')}x {productId} to basket")
        return result

    @mcp.tool()
    async def remove_from_cart(productId: Any = None, ctx: Context = None) -> Dict[str, Any]:
        """
        Remove a product from the shopping cart completely.

        Args:
            productId: The Nemlig product id to remove

        Returns:
            Dictionary confirming the removal, with the updated cart
        """
        if ctx:
            await ctx.info(f"Removing {productId} from basket")

        result = await get_dispatcher().dispatch("remove_from_cart", {"productId": productId})
        await report(ctx, result, f"Removed {productId} from basket")
        return result
