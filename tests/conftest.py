"""Shared fixtures for all tests."""

from __future__ import annotations

import asyncio
import json

import pytest
import pytest_asyncio
import structlog

from shellguard.audit.store import DecisionStore
from shellguard.config.settings import Settings
from shellguard.logging import clear_context
from shellguard.models.decision import ValidationResult
from shellguard.models.event import HookEvent
from shellguard.models.policy import BypassConfig, Category, PathRestrictions, Policy
from shellguard.policy.defaults import default_policy, default_policy_document


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    # CLI runs point structlog at a captured stream that is closed afterwards.
    structlog.reset_defaults()
    clear_context()


@pytest.fixture
def mock_settings(monkeypatch, tmp_path):
    monkeypatch.setenv("SHELLGUARD_POLICY_PATH", str(tmp_path / "security-policy.json"))
    monkeypatch.setenv("SHELLGUARD_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("SHELLGUARD_DB_PATH", str(tmp_path / "logs" / "history.db"))
    monkeypatch.setenv("SHELLGUARD_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("SHELLGUARD_NOTIFICATIONS_ENABLED", "true")
    return Settings()


@pytest.fixture
def policy() -> Policy:
    return default_policy()


@pytest.fixture
def policy_file(mock_settings):
    mock_settings.policy_path.parent.mkdir(parents=True, exist_ok=True)
    mock_settings.policy_path.write_text(
        json.dumps(default_policy_document()), encoding="utf-8"
    )
    return mock_settings.policy_path


@pytest.fixture
def simple_policy() -> Policy:
    """Two small categories plus path restrictions, for precedence tests."""
    return Policy(
        enabled=True,
        categories={
            "first": Category(
                block_patterns=(r"\bdanger\b",),
                confirm_patterns=(r"\bshared\b", r"\bfirst-confirm\b"),
            ),
            "second": Category(
                block_patterns=(r"\bshared\b",),
                confirm_patterns=(r"\bsecond-confirm\b",),
            ),
        },
        path_restrictions=PathRestrictions(
            enabled=True,
            blocked_paths=("/etc", "/bin"),
            allowed_read_only_ops_outside_cwd=frozenset({"cat", "ls"}),
            confirm_ops_outside_cwd=frozenset({"rm", "cp"}),
        ),
        bypass=BypassConfig(enabled=True, keyword="LET_ME_THROUGH"),
    )


@pytest.fixture
def confirm_result() -> ValidationResult:
    return ValidationResult.confirm(
        "Command requires confirmation for file_destruction",
        category="file_destruction",
        matched_pattern=r"\brm\s+(-\S+\s+)*-[a-z]*[rf]",
    )


@pytest.fixture
def bash_event() -> HookEvent:
    return HookEvent(
        tool_name="Bash",
        hook_event_name="PreToolUse",
        session_id="session-001",
        command="ls -la",
        working_directory="/home/dev/project",
        raw={
            "tool_name": "Bash",
            "tool_input": {"command": "ls -la"},
            "cwd": "/home/dev/project",
        },
    )


@pytest_asyncio.fixture
async def temp_store():
    store = DecisionStore(db_path=":memory:")
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def answer():
    """Factory for readers that answer immediately."""
    def _make(text: str):
        async def _read() -> str:
            return text
        return _read
    return _make


@pytest.fixture
def never_answers():
    """Reader that waits until it is cancelled."""
    async def _read() -> str:
        await asyncio.Event().wait()
        return ""
    return _read
