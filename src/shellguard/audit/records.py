"""Pydantic models for security log, audit trail and history records."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SecurityLogRecord(BaseModel):
    timestamp: datetime = Field(default_factory=_utcnow)
    event_type: str = "security_check"
    action: str
    command: str
    working_directory: str
    reason: str = ""
    risk_level: str | None = None
    category: str | None = None
    matched_pattern: str | None = None
    user_response: str | None = None


class SecurityErrorRecord(BaseModel):
    timestamp: datetime = Field(default_factory=_utcnow)
    event_type: str = "security_error"
    error: str
    stack: str = ""
    event_data: dict[str, Any] = Field(default_factory=dict)


class SecurityAssessment(BaseModel):
    risk_level: str
    action_taken: str = "allow"
    category: str | None = None
    reason: str = "No security concerns"
    matched_pattern: str | None = None


class AuditEntry(BaseModel):
    timestamp: datetime = Field(default_factory=_utcnow)
    session_id: str
    audit_id: str
    event_type: str = "tool_execution"
    tool_name: str = ""
    hook_event_name: str = ""
    command: str
    command_hash: str | None = None
    working_directory: str
    project_name: str
    user: str
    hostname: str
    platform: str
    python_version: str
    security_assessment: SecurityAssessment
    raw_event_data: dict[str, Any] = Field(default_factory=dict)
    risk_indicators: list[str] = Field(default_factory=list)


class SuspiciousActivity(BaseModel):
    timestamp: datetime = Field(default_factory=_utcnow)
    pattern: str
    severity: str
    details: str
    audit_id: str
    command: str
    working_directory: str


class ToolUseRecord(BaseModel):
    timestamp: datetime = Field(default_factory=_utcnow)
    project: str
    tool: str = ""
    input: Any = None
    output: Any = None
    event: str | None = None


class DecisionRecord(BaseModel):
    id: str
    action: str
    command: str
    working_directory: str
    reason: str = ""
    risk_level: str | None = None
    category: str | None = None
    matched_pattern: str | None = None
    user_response: str | None = None
    bypassed: bool = False
    created_at: datetime = Field(default_factory=_utcnow)
