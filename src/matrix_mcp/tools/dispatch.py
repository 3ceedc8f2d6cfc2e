"""Tool dispatch: argument bag in, ``CallToolResult`` out.

``ToolDispatcher.call_tool`` is the error boundary of the server. Every
failure while serving a call (unknown tool, malformed arguments, upstream
HTTP error, network or JSON failure) comes back as an error-flagged result;
nothing is raised to the protocol layer.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, List, Mapping, Optional

from mcp import types

from matrix_mcp.core.client import MatrixClient
from matrix_mcp.core.context import sync_request_context
from matrix_mcp.tools.arguments import decode_arguments
from matrix_mcp.tools.catalog import OPERATIONS, OperationDefinition

logger = logging.getLogger(__name__)


def text_result(text: str, *, is_error: bool = False) -> types.CallToolResult:
    """Wrap text in the protocol's single-content-item result shape."""
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        isError=is_error,
    )


def error_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class ToolDispatcher:
    """Route tool invocations to the Matrix API.

    Args:
        client: Client used to issue the outbound request
        strict_arguments: Validate argument bags before building requests
        operations: Operation table (defaults to the full Matrix catalog)
    """

    def __init__(
        self,
        client: MatrixClient,
        *,
        strict_arguments: bool = False,
        operations: Optional[Mapping[str, OperationDefinition]] = None,
    ):
        self._client = client
        self._strict_arguments = strict_arguments
        self._operations = dict(OPERATIONS if operations is None else operations)

    @property
    def tool_names(self) -> List[str]:
        return list(self._operations)

    def list_tools(self) -> List[types.Tool]:
        return [operation.to_tool() for operation in self._operations.values()]

    async def call_tool(
        self,
        name: str,
        arguments: Optional[Mapping[str, Any]] = None,
    ) -> types.CallToolResult:
        """Execute one tool invocation.

        Args:
            name: Tool name, matched exactly
            arguments: Argument bag (None is treated as empty)

        Returns:
            Pretty-printed JSON of the API response on success, otherwise
            ``Unknown tool: {name}`` or ``Error: {message}`` with isError set
        """
        operation = self._operations.get(name)
        if operation is None:
            logger.warning("Unknown tool requested: %s", name)
            return text_result(f"Unknown tool: {name}", is_error=True)

        with sync_request_context(tool_name=name):
            start = time.perf_counter()
            try:
                result = await self._execute(operation, dict(arguments or {}))
            except Exception as exc:
                duration_ms = round((time.perf_counter() - start) * 1000, 2)
                logger.warning(
                    "Tool call failed: %s: %s",
                    type(exc).__name__,
                    exc,
                    extra={"duration_ms": duration_ms, "success": False},
                )
                return text_result(f"Error: {error_message(exc)}", is_error=True)

            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            logger.info(
                "Tool call succeeded",
                extra={"duration_ms": duration_ms, "success": True},
            )
            return text_result(json.dumps(result, indent=2, ensure_ascii=False))

    async def _execute(self, operation: OperationDefinition, arguments: dict) -> Any:
        if self._strict_arguments:
            arguments = decode_arguments(operation.name, arguments)

        path = operation.build_path(arguments)
        body = operation.build_body(arguments) if operation.build_body else None
        return await self._client.api_fetch(path, method=operation.method, body=body)


__all__ = ["ToolDispatcher", "error_message", "text_result"]
