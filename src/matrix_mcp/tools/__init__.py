"""Matrix operations exposed as MCP tools."""

from matrix_mcp.tools.catalog import OPERATIONS, OperationDefinition, get_operation
from matrix_mcp.tools.dispatch import ToolDispatcher

__all__ = [
    "OPERATIONS",
    "OperationDefinition",
    "ToolDispatcher",
    "get_operation",
]
