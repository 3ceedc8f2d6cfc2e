"""Strict decoding of tool arguments.

Disabled by default: the server forwards argument bags as-is and lets the
Matrix API reject bad input. With ``strict_arguments`` enabled, each bag is
validated against the model registered for its tool before any request is
made, and failures are reported as malformed arguments.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from matrix_mcp.core.errors import MalformedArgumentsError


class ToolArguments(BaseModel):
    """Base model for tool argument bags."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ListTasksArguments(ToolArguments):
    status: Optional[str] = None
    assignee: Optional[str] = None


class TaskArguments(ToolArguments):
    id: int


class UpdateTaskStatusArguments(TaskArguments):
    status: str
    result: Optional[str] = None


class PostMessageArguments(ToolArguments):
    sender: str = Field(alias="from")
    text: str


class GetMessagesArguments(ToolArguments):
    since: Optional[Union[int, float]] = None


class AddTaskNoteArguments(TaskArguments):
    sender: str = Field(alias="from")
    text: str


ARGUMENT_MODELS: Dict[str, Type[ToolArguments]] = {
    "list_tasks": ListTasksArguments,
    "get_task": TaskArguments,
    "update_task_status": UpdateTaskStatusArguments,
    "post_message": PostMessageArguments,
    "get_messages": GetMessagesArguments,
    "add_task_note": AddTaskNoteArguments,
}


def _summarize(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "arguments"
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


def decode_arguments(tool_name: str, arguments: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate an argument bag and return its normalized form.

    The returned mapping uses wire names (``from`` rather than ``sender``)
    and contains only the keys the caller supplied, so optional fields keep
    their absent-versus-null distinction.

    Raises:
        MalformedArgumentsError: If the bag does not match the tool's model
    """
    model = ARGUMENT_MODELS.get(tool_name)
    if model is None:
        return dict(arguments)

    try:
        decoded = model.model_validate(dict(arguments))
    except ValidationError as exc:
        raise MalformedArgumentsError(tool_name, _summarize(exc)) from exc

    return decoded.model_dump(by_alias=True, exclude_unset=True)


__all__ = [
    "ARGUMENT_MODELS",
    "AddTaskNoteArguments",
    "GetMessagesArguments",
    "ListTasksArguments",
    "PostMessageArguments",
    "TaskArguments",
    "ToolArguments",
    "UpdateTaskStatusArguments",
    "decode_arguments",
]
