"""Entry point and dependency wiring."""

from __future__ import annotations

from shellguard.audit.security_log import SecurityLog
from shellguard.audit.store import DecisionStore
from shellguard.cli.app import app
from shellguard.cli.prompts import render_confirmation_prompt
from shellguard.config.settings import Settings
from shellguard.confirmation.controller import ConfirmationController, terminal_reader
from shellguard.models.policy import Policy
from shellguard.pipeline import Pipeline
from shellguard.policy.loader import load_policy


def build_pipeline(
    settings: Settings | None = None,
    policy: Policy | None = None,
    interactive: bool = True,
) -> Pipeline:
    settings = settings or Settings()
    policy = policy if policy is not None else load_policy(settings.policy_path)

    confirmation = None
    if interactive:
        confirmation = ConfirmationController(
            reader=terminal_reader(),
            prompt=render_confirmation_prompt,
        )

    store = DecisionStore(db_path=settings.db_path) if settings.record_history else None

    return Pipeline(
        policy=policy,
        confirmation=confirmation,
        security_log=SecurityLog(settings.log_dir),
        store=store,
    )


if __name__ == "__main__":
    app()
