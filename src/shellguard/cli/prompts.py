"""Confirmation prompt rendering."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from shellguard.confirmation.explanations import explain_risk
from shellguard.models.decision import ValidationResult

console = Console(stderr=True)


def render_confirmation_prompt(command: str, result: ValidationResult) -> None:
    lines = [
        f"[bold]Command:[/] {escape(command)}",
        f"[bold]Risk Level:[/] {result.risk_level.value.upper()}",
        f"[bold]Category:[/] {escape(result.category or 'unknown')}",
        f"[bold]Reason:[/] {explain_risk(result.category)}",
    ]
    if result.matched_pattern:
        lines.append(f"[bold]Matched pattern:[/] [dim]{escape(result.matched_pattern)}[/]")

    console.print(
        Panel(
            "\n".join(lines),
            title="⚠️  SECURITY WARNING ⚠️",
            border_style="yellow",
            expand=False,
        ),
        markup=True,
        highlight=False,
    )
    console.print("Do you want to proceed? (y/N) ", end="")
