"""MCP Server for USDA FoodData Central.

Exposes FoodData Central food lookups and search to MCP clients
via the Model Context Protocol (MCP).
"""

from .client import FdcClient
from .server import FoodDataCentralMCP, create_server

__all__ = ["FdcClient", "FoodDataCentralMCP", "create_server"]
