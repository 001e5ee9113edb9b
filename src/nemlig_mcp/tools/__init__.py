"""
Tools package for Nemlig MCP server

This package contains all the tool modules organized by functionality:
- product_tools: Product search and details
- cart_tools: Basket management (view, add, remove)
- order_tools: Order history and order details
- delivery_tools: Delivery slots (no known Nemlig endpoint yet)
- profile_tools: Login and session renewal
- dispatcher: Argument validation, client calls and result shaping shared by all tools
- shared: Process-wide client management

Result shape:
- Success: {"success": true, ...fields}
- Failure: {"success": false, "error": "<message>"}

Tool parameters are typed loosely (Any). The dispatcher checks them, so a
missing or wrong-kind argument still comes back in the failure shape.

Authentication is cookie based. When a tool reports "Authentication failed",
the Nemlig session has expired: run authenticate (or force_reauthenticate).
"""
