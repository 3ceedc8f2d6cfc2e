"""Matrix MCP - MCP server exposing Matrix tasks and messages as agent tools."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("matrix-mcp")
except PackageNotFoundError:
    # Package not installed (development mode without editable install)
    __version__ = "1.0.0"

from matrix_mcp.server import create_server, main

__all__ = ["__version__", "create_server", "main"]
