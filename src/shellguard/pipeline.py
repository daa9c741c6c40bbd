"""Guard pipeline — wires bypass → validate → confirm → record."""

from __future__ import annotations

import aiosqlite

from shellguard.audit.security_log import SecurityLog
from shellguard.audit.store import DecisionStore
from shellguard.confirmation.controller import ConfirmationController
from shellguard.logging import get_logger
from shellguard.models.decision import Action, GuardDecision, ValidationResult
from shellguard.models.event import HookEvent
from shellguard.models.policy import Policy
from shellguard.policy.bypass import is_bypassed
from shellguard.policy.validator import validate_command

logger = get_logger(__name__)


class Pipeline:
    def __init__(
        self,
        policy: Policy,
        confirmation: ConfirmationController | None = None,
        security_log: SecurityLog | None = None,
        store: DecisionStore | None = None,
    ) -> None:
        self._policy = policy
        self._confirmation = confirmation
        self._security_log = security_log
        self._store = store

    @property
    def policy(self) -> Policy:
        return self._policy

    async def open(self) -> None:
        if self._store is None:
            return
        try:
            await self._store.initialize()
        except (aiosqlite.Error, OSError) as exc:
            # Decisions never depend on the history store.
            logger.error("history_unavailable", db_path=self._store.db_path, error=str(exc))
            self._store = None

    async def close(self) -> None:
        if self._store is not None:
            await self._store.close()

    async def run_event(self, event: HookEvent) -> GuardDecision:
        if not event.is_bash:
            return self._passthrough(event, "Not a Bash command")
        if event.command is None:
            return self._passthrough(event, "No command found")
        return await self.run(event.command, event.working_directory, event_data=event.raw)

    async def run(
        self,
        command: str,
        working_directory: str,
        event_data: dict | None = None,
    ) -> GuardDecision:
        # 1. Bypass short-circuits every other check
        if is_bypassed(command, self._policy.bypass):
            decision = GuardDecision(
                command=command,
                working_directory=working_directory,
                result=ValidationResult.allow("Bypass keyword detected"),
                bypassed=True,
            )
            await self._record(decision)
            return decision

        # 2. Validate, then 3. confirm; any unexpected failure fails closed
        user_response: str | None = None
        try:
            result = validate_command(command, working_directory, self._policy)
            if result.action == Action.CONFIRM:
                result, user_response = await self._confirm(command, result)
        except Exception as exc:
            logger.exception("validation_failed", command=command)
            if self._security_log is not None:
                self._security_log.record_error(exc, event_data)
            result = ValidationResult.block("Security system error")
            user_response = None

        decision = GuardDecision(
            command=command,
            working_directory=working_directory,
            result=result,
            user_response=user_response,
        )

        # 4. Record
        await self._record(decision)
        return decision

    async def _confirm(
        self, command: str, result: ValidationResult
    ) -> tuple[ValidationResult, str | None]:
        if self._confirmation is None:
            return (
                result.model_copy(
                    update={"action": Action.BLOCK, "reason": "Confirmation unavailable"}
                ),
                None,
            )
        outcome = await self._confirmation.confirm(command, result)
        return outcome.result, outcome.user_response

    async def _record(self, decision: GuardDecision) -> None:
        if self._security_log is not None and self._policy.logging_enabled:
            self._security_log.record(decision)

        if self._store is not None:
            try:
                await self._store.log_decision(decision)
            except (aiosqlite.Error, OSError) as exc:
                logger.error("history_write_failed", error=str(exc))

    def _passthrough(self, event: HookEvent, reason: str) -> GuardDecision:
        return GuardDecision(
            command=event.command or "",
            working_directory=event.working_directory,
            result=ValidationResult.allow(reason),
        )
