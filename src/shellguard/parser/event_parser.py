"""Hook event parsing — turns the JSON payload on stdin into a ``HookEvent``."""

from __future__ import annotations

import json
import os
from typing import Any

from shellguard.exceptions import EventParseError
from shellguard.models.event import HookEvent

# Checked in order; the first non-empty string wins.
COMMAND_FIELD_PATHS: tuple[tuple[str, ...], ...] = (
    ("tool_input", "command"),
    ("parameters", "command"),
    ("arguments", "command"),
    ("tool_arguments", "command"),
    ("command",),
)

WORKING_DIRECTORY_FIELDS: tuple[str, ...] = ("cwd", "working_directory")


def _lookup(data: dict[str, Any], path: tuple[str, ...]) -> Any:
    node: Any = data
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def extract_command(data: dict[str, Any]) -> str | None:
    for path in COMMAND_FIELD_PATHS:
        value = _lookup(data, path)
        if isinstance(value, str) and value.strip():
            return value
    return None


def extract_working_directory(data: dict[str, Any]) -> str:
    for field in WORKING_DIRECTORY_FIELDS:
        value = data.get(field)
        if isinstance(value, str) and value:
            return value
    return os.getcwd()


def parse_event(raw: str) -> HookEvent:
    if not raw.strip():
        raise EventParseError("No input received")

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise EventParseError(f"Malformed event JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise EventParseError("Event payload must be a JSON object")

    return HookEvent(
        tool_name=str(data.get("tool_name") or ""),
        hook_event_name=str(data.get("hook_event_name") or data.get("event") or ""),
        session_id=str(data.get("session_id") or ""),
        command=extract_command(data),
        working_directory=extract_working_directory(data),
        message=str(data.get("message") or ""),
        raw=data,
    )
