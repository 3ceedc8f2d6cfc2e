"""MCP server for matrix-mcp.

Exposes the Matrix operations from ``matrix_mcp.tools.catalog`` over stdio.

The low-level ``mcp`` server is used rather than FastMCP: tool arguments
such as ``from`` are not valid Python identifiers, and the tool call
handler returns the dispatcher's ``CallToolResult`` verbatim without the SDK
re-validating arguments against the advertised schema.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import List, Optional

import httpx
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from matrix_mcp.config import MatrixConfig
from matrix_mcp.core.client import MatrixClient
from matrix_mcp.core.errors import ConfigurationError
from matrix_mcp.tools.dispatch import ToolDispatcher

logger = logging.getLogger(__name__)


def create_server(
    config: Optional[MatrixConfig] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Server:
    """Create and configure the MCP server instance.

    Args:
        config: Server configuration (read from the environment if None)
        transport: Optional httpx transport for the Matrix API client

    Raises:
        ConfigurationError: If the configuration lacks an API key
    """
    if config is None:
        config = MatrixConfig.from_env()

    config.validate()
    config.setup_logging()

    client = MatrixClient.from_config(config, transport=transport)
    dispatcher = ToolDispatcher(client, strict_arguments=config.strict_arguments)

    server: Server = Server(config.server_name, version=config.server_version)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return dispatcher.list_tools()

    async def call_tool(request: types.CallToolRequest) -> types.ServerResult:
        result = await dispatcher.call_tool(request.params.name, request.params.arguments)
        return types.ServerResult(result)

    server.request_handlers[types.CallToolRequest] = call_tool

    logger.info(
        "Server created: %s v%s (base_url=%s, strict_arguments=%s)",
        config.server_name,
        config.server_version,
        client.base_url,
        config.strict_arguments,
    )
    return server


async def serve(server: Server) -> None:
    """Run the server over stdin/stdout until the client disconnects."""
    async with stdio_server() as (read_stream, write_stream):
        sys.stderr.write(f"{server.name} server running (stdio)\n")
        sys.stderr.flush()
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def main(config: Optional[MatrixConfig] = None) -> None:
    """Main entry point for the matrix-mcp server."""

    if config is None:
        config = MatrixConfig.from_env()

    try:
        server = create_server(config)
    except ConfigurationError as exc:
        sys.stderr.write(f"ERROR: {exc}\n")
        sys.exit(1)

    logger.info("Starting %s v%s", config.server_name, config.server_version)

    try:
        asyncio.run(serve(server))
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
        sys.exit(0)
    except Exception as exc:
        logger.error("Server error: %s: %s", type(exc).__name__, exc)
        sys.stderr.write(f"Fatal: {exc}\n")
        sys.exit(1)


if __name__ == "__main__":
    main()
