"""Hook event model — output of the event parser."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class HookEvent(BaseModel):
    tool_name: str = ""
    hook_event_name: str = ""
    session_id: str = ""
    command: str | None = None
    working_directory: str
    message: str = ""
    raw: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_bash(self) -> bool:
        return self.tool_name == "Bash"
