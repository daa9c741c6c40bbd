"""Typer CLI commands."""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from shellguard.audit.auditor import Auditor, record_tool_use
from shellguard.audit.store import DecisionStore
from shellguard.cli.output import (
    print_allow,
    print_block,
    print_error,
    print_history,
    print_info,
    print_policy_summary,
    print_validation,
)
from shellguard.config.settings import Settings
from shellguard.exceptions import EventParseError, NotificationError, ShellguardError
from shellguard.logging import bind_context, configure_logging
from shellguard.models.decision import Action, GuardDecision, ValidationResult
from shellguard.notify.desktop import DesktopNotifier, notification_for
from shellguard.parser.event_parser import parse_event
from shellguard.policy.bypass import is_bypassed
from shellguard.policy.defaults import default_policy
from shellguard.policy.loader import load_policy, write_default_policy
from shellguard.policy.validator import validate_command

console = Console()
app = typer.Typer(name="shellguard", help="Security policy guard for agent shell commands.")


def _setup() -> Settings:
    settings = Settings()
    configure_logging(settings)
    return settings


def _get_pipeline(settings: Settings, interactive: bool = True):
    from shellguard.main import build_pipeline
    return build_pipeline(settings=settings, interactive=interactive)


def _read_stdin() -> str:
    return sys.stdin.read()


@app.command()
def check(
    non_interactive: bool = typer.Option(
        False, "--non-interactive", help="Block instead of prompting for confirmation"
    ),
) -> None:
    """Evaluate a pre-execution hook event from stdin (exit 0 = proceed)."""
    settings = _setup()
    try:
        event = parse_event(_read_stdin())
    except EventParseError as exc:
        print_error(str(exc))
        raise typer.Exit(1)

    if event.session_id:
        bind_context(session_id=event.session_id)

    async def _run() -> GuardDecision:
        pipeline = _get_pipeline(settings, interactive=not non_interactive)
        await pipeline.open()
        try:
            return await pipeline.run_event(event)
        finally:
            await pipeline.close()

    decision = asyncio.run(_run())
    if decision.allowed:
        print_allow(decision)
        raise typer.Exit(0)

    print_block(decision)
    raise typer.Exit(1)


@app.command()
def evaluate(
    command: str = typer.Argument(..., help="Shell command to evaluate"),
    cwd: Optional[str] = typer.Option(None, "--cwd", help="Working directory"),
    policy_file: Optional[Path] = typer.Option(None, "--policy", help="Policy file to use"),
    use_default: bool = typer.Option(
        False, "--default-policy", help="Evaluate against the built-in policy"
    ),
) -> None:
    """Show how a command would be decided, without prompting or logging."""
    settings = _setup()
    if use_default:
        policy = default_policy()
    else:
        policy = load_policy(policy_file or settings.policy_path)

    if is_bypassed(command, policy.bypass):
        print_validation(command, ValidationResult.allow("Bypass keyword detected"))
        raise typer.Exit(0)

    result = validate_command(command, cwd or os.getcwd(), policy)
    print_validation(command, result)
    raise typer.Exit(1 if result.action == Action.BLOCK else 0)


@app.command()
def audit() -> None:
    """Record a post-execution hook event in the audit trail (always exits 0)."""
    settings = _setup()
    auditor = Auditor(settings.log_dir, load_policy(settings.policy_path))
    raw = _read_stdin()
    try:
        event = parse_event(raw)
        auditor.record(event)
    except (ShellguardError, OSError) as exc:
        print_error(f"Audit failed: {exc}")
        auditor.record_error(exc, {"raw": raw[:1000]})
    raise typer.Exit(0)


@app.command(name="log-tool")
def log_tool() -> None:
    """Append a tool-use hook event to the per-project log."""
    settings = _setup()
    try:
        event = parse_event(_read_stdin())
        record_tool_use(settings.log_dir, event)
    except (ShellguardError, OSError) as exc:
        print_error(f"Tool-use logging failed: {exc}")
        raise typer.Exit(1)


@app.command()
def notify() -> None:
    """Send a desktop notification for a Notification/Stop hook event."""
    settings = _setup()
    try:
        event = parse_event(_read_stdin())
    except EventParseError as exc:
        print_error(str(exc))
        raise typer.Exit(1)

    notification = notification_for(event)
    if notification is None or not settings.notifications_enabled:
        raise typer.Exit(0)

    notifier = DesktopNotifier(
        sound_enabled=settings.notification_sound_enabled,
        notification_sound=settings.notification_sound,
        stop_sound=settings.stop_sound,
    )
    try:
        asyncio.run(notifier.send(notification))
    except NotificationError as exc:
        print_error(f"Error notifying: {exc}")
        raise typer.Exit(1)


@app.command()
def history(
    limit: int = typer.Option(20, "--limit", "-n", help="Number of records"),
    action: Optional[str] = typer.Option(
        None, "--action", help="Only show one action (allow, block, bypass, ...)"
    ),
) -> None:
    """Show recent guard decisions."""
    settings = _setup()

    async def _run():
        store = DecisionStore(db_path=settings.db_path)
        await store.initialize()
        try:
            return await store.get_history(limit=limit, action=action)
        finally:
            await store.close()

    records = asyncio.run(_run())
    if not records:
        print_info("No history found.")
    else:
        print_history(records)


@app.command(name="config")
def show_config() -> None:
    """Show current configuration and the loaded policy."""
    try:
        settings = _setup()
    except Exception as exc:
        print_error(f"Failed to load settings: {exc}")
        raise typer.Exit(1)

    policy = load_policy(settings.policy_path)
    table_data = {
        "Policy Path": str(settings.policy_path),
        "Policy Enabled": str(policy.enabled),
        "Bypass Enabled": str(policy.bypass.enabled),
        "Path Restrictions": str(policy.path_restrictions.enabled),
        "Security Log": str(policy.logging_enabled),
        "Log Dir": str(settings.log_dir),
        "DB Path": str(settings.db_path),
        "Record History": str(settings.record_history),
        "Log Level": settings.log_level,
        "Notifications": str(settings.notifications_enabled),
    }

    table = Table(title="Configuration", show_header=False)
    table.add_column("Setting", style="bold cyan")
    table.add_column("Value")
    for k, v in table_data.items():
        table.add_row(k, v)
    console.print(table)

    if policy.categories:
        print_policy_summary(policy)


@app.command(name="init-policy")
def init_policy(
    path: Optional[Path] = typer.Option(None, "--path", help="Where to write the policy"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing policy"),
) -> None:
    """Write the built-in default policy to the policy path."""
    settings = _setup()
    target = path or settings.policy_path
    try:
        written = write_default_policy(target, overwrite=force)
    except FileExistsError as exc:
        print_error(f"{exc}. Use --force to overwrite.")
        raise typer.Exit(1)
    print_info(f"Default policy written to {written}")
