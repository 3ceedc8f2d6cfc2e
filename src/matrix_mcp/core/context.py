"""Per-invocation context for log correlation.

Every tool call runs inside ``sync_request_context`` so that log records
emitted while serving it carry the same correlation ID and tool name.

Usage:
    from matrix_mcp.core.context import sync_request_context, get_correlation_id

    with sync_request_context(tool_name="get_task") as ctx:
        logger.info("Fetching task")  # record carries ctx.correlation_id

The values live in ``contextvars``. The MCP server handles each request in
its own task, so overlapping calls never observe each other's context.
"""

from __future__ import annotations

import secrets
import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Dict, Generator, Optional

__all__ = [
    "correlation_id_var",
    "tool_name_var",
    "start_time_var",
    "RequestContext",
    "generate_correlation_id",
    "sync_request_context",
    "get_correlation_id",
    "get_tool_name",
    "get_start_time",
]

# -----------------------------------------------------------------------------
# Context Variables
# -----------------------------------------------------------------------------

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")
"""Correlation ID of the tool call being served."""

tool_name_var: ContextVar[str] = ContextVar("tool_name", default="")
"""Name of the tool being invoked."""

start_time_var: ContextVar[float] = ContextVar("start_time", default=0.0)
"""Call start time as Unix timestamp."""


def generate_correlation_id(prefix: str = "call") -> str:
    """Generate a unique correlation ID.

    Format: {prefix}_{12_hex_chars}
    Example: "call_a1b2c3d4e5f6"
    """
    return f"{prefix}_{secrets.token_hex(6)}"


@dataclass
class RequestContext:
    """Snapshot of the context of one tool call.

    Attributes:
        correlation_id: Unique call identifier
        tool_name: Invoked tool
        start_time: Call start timestamp
    """

    correlation_id: str = ""
    tool_name: str = ""
    start_time: float = field(default_factory=time.time)

    @property
    def elapsed_ms(self) -> float:
        """Milliseconds since the call started."""
        if self.start_time <= 0:
            return 0.0
        return (time.time() - self.start_time) * 1000

    def to_dict(self) -> Dict[str, Any]:
        return {
            "correlation_id": self.correlation_id,
            "tool_name": self.tool_name,
            "start_time": self.start_time,
            "elapsed_ms": round(self.elapsed_ms, 2),
        }


@contextmanager
def sync_request_context(
    *,
    tool_name: str = "",
    correlation_id: Optional[str] = None,
) -> Generator[RequestContext, None, None]:
    """Set the call context for the duration of the with block.

    Args:
        tool_name: Name of the invoked tool
        correlation_id: Call ID (auto-generated if None)

    Yields:
        RequestContext snapshot
    """
    corr_id = correlation_id or generate_correlation_id()
    start = time.time()

    token_corr = correlation_id_var.set(corr_id)
    token_tool = tool_name_var.set(tool_name)
    token_start = start_time_var.set(start)

    try:
        yield RequestContext(
            correlation_id=corr_id,
            tool_name=tool_name,
            start_time=start,
        )
    finally:
        correlation_id_var.reset(token_corr)
        tool_name_var.reset(token_tool)
        start_time_var.reset(token_start)


def get_correlation_id() -> str:
    """Return the current correlation ID (empty outside a call)."""
    return correlation_id_var.get()


def get_tool_name() -> str:
    """Return the tool currently being served (empty outside a call)."""
    return tool_name_var.get()


def get_start_time() -> float:
    """Return the current call start time (0.0 outside a call)."""
    return start_time_var.get()
