"""
Product search and details tools for Nemlig MCP server
"""

from typing import Any, Dict

from fastmcp import Context

from .shared import get_dispatcher, report


def register_tools(mcp):
    """Register product-related tools with the FastMCP server"""

    @mcp.tool()
    async def search_products(
        query: Any = None,
        limit: Any = None,
        page: Any = None,
        ctx: Context = None,
    ) -> Dict[str, Any]:
        """
        Search for products in the Nemlig catalog.

        Returns products matching the search query with prices, availability
        and basic information, in the order Nemlig ranks them.

        Args:
            query: Search query (e.g. "mælk", "økologiske grøntsager", "glutenfrit brød")
            limit: Maximum number of results to return (default: 20)
            page: Page number, echoed back in the result (default: 1)

        Returns:
            Dictionary with the matching products and the total number of hits
        """
        if ctx:
            await ctx.info(f"Searching Nemlig for '{query}'")

        result = await get_dispatcher().dispatch(
            "search_products", {"query": query, "limit": limit, "page": page}
        )
        await report(ctx, result, f"Found {result.get('totalResults', 0)} products for '{query}'")
        return result

    @mcp.tool()
    async def get_product_details(productId: Any = None, ctx: Context = None) -> Dict[str, Any]:
        """
        Get detailed information about a specific product.

        Includes description, nutritional information (when Nemlig provides
        it), price, availability and image.

        Args:
            productId: The Nemlig product id (as returned by search_products)

        Returns:
            Dictionary containing the product details
        """
        if ctx:
            await ctx.info(f"Getting details for product {productId}")

        result = await get_dispatcher().dispatch("get_product_details", {"productId": productId})
        await report(ctx, result, f"Retrieved product {productId}")
        return result
