"""Application settings loaded from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

_CLAUDE_DIR = Path.home() / ".claude"


class Settings(BaseSettings):
    model_config = {"env_prefix": "SHELLGUARD_"}

    policy_path: Path = Field(
        default=_CLAUDE_DIR / "hooks" / "security-policy.json",
        description="JSON security policy file",
    )
    log_dir: Path = Field(
        default=_CLAUDE_DIR / "logs",
        description="Directory for security, audit and tool-use logs",
    )
    db_path: Path = Field(
        default=_CLAUDE_DIR / "logs" / "history.db",
        description="SQLite decision history database",
    )
    record_history: bool = Field(
        default=True, description="Write guard decisions to the SQLite history"
    )
    log_level: str = Field(default="WARNING", description="Diagnostic logging level")
    log_format: str = Field(
        default="console", description="Diagnostic log format (console/json)"
    )
    notifications_enabled: bool = Field(
        default=True, description="Deliver desktop notifications"
    )
    notification_sound_enabled: bool = Field(
        default=False, description="Play a sound with notifications (macOS)"
    )
    notification_sound: str = Field(default="default", description="Notification sound")
    stop_sound: str = Field(default="default", description="Sound for Stop events")
