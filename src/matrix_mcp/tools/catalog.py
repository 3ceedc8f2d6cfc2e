"""Declarative table of the Matrix operations exposed as MCP tools.

Each entry pairs the tool schema advertised to the agent with the rules that
turn an argument bag into one HTTP request: method, path builder and body
builder.

Arguments are forwarded as given. Values are stringified into paths and
query strings without type checks; the Matrix API performs validation. An
absent path parameter renders as ``undefined``, which the API rejects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple
from urllib.parse import urlencode

from mcp import types

Arguments = Mapping[str, Any]
PathBuilder = Callable[[Arguments], str]
BodyBuilder = Callable[[Arguments], Dict[str, Any]]

_MISSING_VALUE = "undefined"
_EXPONENT_THRESHOLD = 1e21

_STATUS_VALUES = "pending, in_progress, ready_to_deploy, review, done, failed, rejected"


@dataclass(frozen=True)
class ParameterSpec:
    """One property of a tool's input schema."""

    name: str
    type: str
    description: str
    required: bool = False

    def to_schema(self) -> Dict[str, Any]:
        return {"type": self.type, "description": self.description}


@dataclass(frozen=True)
class OperationDefinition:
    """Describe a single Matrix operation.

    Attributes:
        name: Tool name (exact-match lookup key)
        description: Human-readable description shown to the agent
        method: HTTP method
        parameters: Input schema properties, in declaration order
        build_path: Renders the request path (with query string) from arguments
        build_body: Renders the JSON body from arguments, None for bodiless calls
    """

    name: str
    description: str
    method: str
    parameters: Tuple[ParameterSpec, ...]
    build_path: PathBuilder
    build_body: Optional[BodyBuilder] = None

    @property
    def required(self) -> List[str]:
        return [param.name for param in self.parameters if param.required]

    def input_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {
            "type": "object",
            "properties": {param.name: param.to_schema() for param in self.parameters},
        }
        if self.required:
            schema["required"] = self.required
        return schema

    def to_tool(self) -> types.Tool:
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_schema(),
        )


# ---------------------------------------------------------------------------
# Value rendering
# ---------------------------------------------------------------------------


def format_value(value: Any) -> str:
    """Render an argument value the way it appears in a URL.

    Lists are joined with commas, an element of None rendering empty.
    Integral floats below 1e21 lose their fractional part; larger ones keep
    exponent notation (``1e+21``).
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer() and abs(value) < _EXPONENT_THRESHOLD:
        return str(int(value))
    if isinstance(value, list):
        return ",".join("" if item is None else format_value(item) for item in value)
    return str(value)


def is_set(value: Any) -> bool:
    """Whether a filter value counts as given.

    Only None, False, empty strings, zero and NaN are unset; empty lists and
    objects count as given.
    """
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, (int, float)):
        return value == value and value != 0
    if isinstance(value, str):
        return value != ""
    return True


def path_value(arguments: Arguments, key: str) -> str:
    if key not in arguments:
        return _MISSING_VALUE
    return format_value(arguments[key])


def query_string(arguments: Arguments, *keys: str) -> str:
    """Build ``?k=v&...`` from the arguments among ``keys`` that are set.

    Returns an empty string when no key has a value.
    """
    qs = urlencode(
        [(key, format_value(arguments[key])) for key in keys if is_set(arguments.get(key))]
    )
    return f"?{qs}" if qs else ""


def pick(arguments: Arguments, *keys: str) -> Dict[str, Any]:
    """Copy the present keys into a request body; absent keys are left out."""
    return {key: arguments[key] for key in keys if key in arguments}


# ---------------------------------------------------------------------------
# Path and body builders
# ---------------------------------------------------------------------------


def _list_tasks_path(arguments: Arguments) -> str:
    return f"/api/tasks{query_string(arguments, 'status', 'assignee')}"


def _task_path(arguments: Arguments) -> str:
    return f"/api/task/{path_value(arguments, 'id')}"


def _task_note_path(arguments: Arguments) -> str:
    return f"/api/task/{path_value(arguments, 'id')}/note"


def _messages_path(arguments: Arguments) -> str:
    return f"/api/messages{query_string(arguments, 'since')}"


def _status_body(arguments: Arguments) -> Dict[str, Any]:
    return pick(arguments, "status", "result")


def _message_body(arguments: Arguments) -> Dict[str, Any]:
    return pick(arguments, "from", "text")


_TASK_ID = ParameterSpec("id", "number", "Task ID", required=True)

OPERATIONS: Dict[str, OperationDefinition] = {
    op.name: op
    for op in (
        OperationDefinition(
            name="list_tasks",
            description="List Matrix tasks with optional filters by status or assignee",
            method="GET",
            parameters=(
                ParameterSpec("status", "string", f"Filter by status: {_STATUS_VALUES}"),
                ParameterSpec("assignee", "string", "Filter by assignee name (e.g. 'Hal 2')"),
            ),
            build_path=_list_tasks_path,
        ),
        OperationDefinition(
            name="get_task",
            description="Get full details of a Matrix task including its notes",
            method="GET",
            parameters=(_TASK_ID,),
            build_path=_task_path,
        ),
        OperationDefinition(
            name="update_task_status",
            description=f"Update a Matrix task's status. Valid statuses: {_STATUS_VALUES}",
            method="PATCH",
            parameters=(
                _TASK_ID,
                ParameterSpec("status", "string", "New status value", required=True),
                ParameterSpec(
                    "result",
                    "string",
                    "Optional summary of work done (recommended when marking "
                    "ready_to_deploy or review)",
                ),
            ),
            build_path=_task_path,
            build_body=_status_body,
        ),
        OperationDefinition(
            name="post_message",
            description="Post a chat message to the Matrix message bus",
            method="POST",
            parameters=(
                ParameterSpec("from", "string", "Sender display name (e.g. 'Gemini')", required=True),
                ParameterSpec("text", "string", "Message text", required=True),
            ),
            build_path=lambda _arguments: "/api/message",
            build_body=_message_body,
        ),
        OperationDefinition(
            name="get_messages",
            description="Get recent Matrix chat messages, optionally filtered by a since timestamp",
            method="GET",
            parameters=(
                ParameterSpec(
                    "since",
                    "number",
                    "Unix millisecond timestamp — only return messages after this time",
                ),
            ),
            build_path=_messages_path,
        ),
        OperationDefinition(
            name="add_task_note",
            description="Add a note to an existing Matrix task",
            method="POST",
            parameters=(
                _TASK_ID,
                ParameterSpec("from", "string", "Author display name", required=True),
                ParameterSpec("text", "string", "Note content", required=True),
            ),
            build_path=_task_note_path,
            build_body=_message_body,
        ),
    )
}


def get_operation(name: str) -> Optional[OperationDefinition]:
    """Look up an operation by exact tool name."""
    return OPERATIONS.get(name)


def list_operations() -> List[OperationDefinition]:
    return list(OPERATIONS.values())


__all__ = [
    "OPERATIONS",
    "OperationDefinition",
    "ParameterSpec",
    "format_value",
    "get_operation",
    "is_set",
    "list_operations",
    "path_value",
    "pick",
    "query_string",
]
