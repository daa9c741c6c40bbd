"""Decision models — output of the validator and the guard pipeline."""

from __future__ import annotations

import enum
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class Action(str, enum.Enum):
    ALLOW = "allow"
    BLOCK = "block"
    CONFIRM = "confirm"


class RiskLevel(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    UNKNOWN = "unknown"


class ValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    action: Action
    reason: str
    risk_level: RiskLevel = RiskLevel.LOW
    category: str | None = None
    matched_pattern: str | None = None

    @classmethod
    def allow(cls, reason: str) -> ValidationResult:
        return cls(action=Action.ALLOW, reason=reason, risk_level=RiskLevel.LOW)

    @classmethod
    def block(
        cls,
        reason: str,
        category: str | None = None,
        matched_pattern: str | None = None,
    ) -> ValidationResult:
        return cls(
            action=Action.BLOCK,
            reason=reason,
            risk_level=RiskLevel.HIGH,
            category=category,
            matched_pattern=matched_pattern,
        )

    @classmethod
    def confirm(
        cls,
        reason: str,
        category: str | None = None,
        matched_pattern: str | None = None,
    ) -> ValidationResult:
        return cls(
            action=Action.CONFIRM,
            reason=reason,
            risk_level=RiskLevel.MEDIUM,
            category=category,
            matched_pattern=matched_pattern,
        )


class GuardDecision(BaseModel):
    """Final outcome of one guard invocation."""

    command: str
    working_directory: str
    result: ValidationResult
    bypassed: bool = False
    user_response: str | None = None
    decided_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def allowed(self) -> bool:
        return self.result.action == Action.ALLOW
