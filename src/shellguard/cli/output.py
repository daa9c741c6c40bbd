"""Rich display helpers for CLI output."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from shellguard.audit.records import DecisionRecord
from shellguard.models.decision import Action, GuardDecision, RiskLevel, ValidationResult
from shellguard.models.policy import Policy

console = Console()
err_console = Console(stderr=True)

_ACTION_STYLES = {
    Action.ALLOW: "green",
    Action.BLOCK: "red",
    Action.CONFIRM: "yellow",
}


def print_allow(decision: GuardDecision) -> None:
    console.print(f"Security Guard: ALLOW - {escape(decision.result.reason)}", highlight=False)


def print_block(decision: GuardDecision) -> None:
    result = decision.result
    err_console.print(f"[red]🛑 BLOCKED: {escape(result.reason)}[/]", highlight=False)
    if result.risk_level == RiskLevel.HIGH:
        err_console.print(
            f"⚠️  HIGH RISK COMMAND BLOCKED: {escape(decision.command)}", highlight=False
        )
    if result.category:
        err_console.print(f"📂 Category: {escape(result.category)}", highlight=False)
    if result.matched_pattern:
        err_console.print(f"🔍 Matched pattern: {escape(result.matched_pattern)}", highlight=False)


def print_validation(command: str, result: ValidationResult) -> None:
    style = _ACTION_STYLES[result.action]
    table = Table(title="Security Evaluation", show_header=False, expand=True)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")
    table.add_row("Command", escape(command))
    table.add_row("Action", f"[{style}]{result.action.value.upper()}[/]")
    table.add_row("Risk", result.risk_level.value.upper())
    table.add_row("Category", escape(result.category or "-"))
    table.add_row("Matched pattern", escape(result.matched_pattern or "-"))
    table.add_row("Reason", escape(result.reason))
    console.print(table)


def print_history(records: list[DecisionRecord]) -> None:
    table = Table(title="Decision History", expand=True)
    table.add_column("Time")
    table.add_column("Action", justify="center")
    table.add_column("Command")
    table.add_column("Category")
    table.add_column("Reason")

    for record in records:
        action = record.action.upper()
        if record.action in ("block", "confirmed_block"):
            action = f"[red]{action}[/]"
        elif record.action == "bypass":
            action = f"[yellow]{action}[/]"
        else:
            action = f"[green]{action}[/]"
        table.add_row(
            record.created_at.strftime("%Y-%m-%d %H:%M:%S"),
            action,
            escape(record.command),
            escape(record.category or ""),
            escape(record.reason),
        )

    console.print(table)


def print_policy_summary(policy: Policy) -> None:
    table = Table(title="Policy Categories", expand=True)
    table.add_column("Category", style="bold cyan")
    table.add_column("Enabled", justify="center")
    table.add_column("Block", justify="right")
    table.add_column("Confirm", justify="right")

    for name, category in policy.categories.items():
        enabled = "[green]Yes[/]" if category.enabled else "[red]No[/]"
        table.add_row(
            name,
            enabled,
            str(len(category.block_patterns)),
            str(len(category.confirm_patterns)),
        )

    console.print(table)


def print_error(message: str) -> None:
    err_console.print(Panel(f"[red]{escape(message)}[/]", title="Error", border_style="red"))


def print_info(message: str) -> None:
    console.print(f"[dim]{escape(message)}[/]")
