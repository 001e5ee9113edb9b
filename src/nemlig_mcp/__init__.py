"""
Nemlig MCP server: nemlig.com grocery shopping exposed as MCP tools
"""

__version__ = "1.0.0"
