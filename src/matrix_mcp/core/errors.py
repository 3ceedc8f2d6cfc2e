"""Exceptions raised inside matrix-mcp.

Only ``ConfigurationError`` is allowed to escape to the process boundary.
Everything raised while serving a tool call is converted into an
error-flagged ``CallToolResult`` by the dispatcher.
"""

from __future__ import annotations

import json
from typing import Any, Optional


# =============================================================================
# Exceptions
# =============================================================================


class MatrixMCPError(Exception):
    """Base exception for matrix-mcp."""


class ConfigurationError(MatrixMCPError):
    """Required configuration is missing or unusable.

    Raised before any request is served; the server cannot start without
    credentials.
    """


class MatrixAPIError(MatrixMCPError):
    """The Matrix API answered with a non-2xx status.

    Attributes:
        status_code: HTTP status code of the response
        body: Parsed JSON body, or None when the body was not JSON
        text: Raw response text, kept only when the body was not JSON
    """

    def __init__(
        self,
        status_code: int,
        body: Any = None,
        *,
        text: Optional[str] = None,
    ):
        self.status_code = status_code
        self.body = body
        self.text = text
        rendered = text if text is not None else _compact_json(body)
        super().__init__(f"Matrix API error {status_code}: {rendered}")


class MalformedArgumentsError(MatrixMCPError):
    """Tool arguments failed strict decoding.

    Attributes:
        tool_name: Tool whose arguments were rejected
        detail: Validation failure summary
    """

    def __init__(self, tool_name: str, detail: str):
        self.tool_name = tool_name
        self.detail = detail
        super().__init__(f"Malformed arguments for {tool_name}: {detail}")


def _compact_json(body: Any) -> str:
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False, default=str)


__all__ = [
    "ConfigurationError",
    "MalformedArgumentsError",
    "MatrixAPIError",
    "MatrixMCPError",
]
