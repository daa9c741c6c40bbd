"""Security log — one JSON line per guard decision in ``security.log``."""

from __future__ import annotations

import traceback
from pathlib import Path
from typing import Any

from shellguard.audit.records import SecurityErrorRecord, SecurityLogRecord
from shellguard.audit.writer import append_record
from shellguard.logging import get_logger
from shellguard.models.decision import Action, GuardDecision

logger = get_logger(__name__)

SECURITY_LOG_NAME = "security.log"


def decision_label(decision: GuardDecision) -> str:
    """Action name as written to the log: bypass and confirmations are distinct."""
    if decision.bypassed:
        return "bypass"
    if decision.user_response is not None:
        if decision.result.action == Action.ALLOW:
            return "confirmed_allow"
        return "confirmed_block"
    return decision.result.action.value


class SecurityLog:
    def __init__(self, log_dir: Path | str) -> None:
        self.path = Path(log_dir) / SECURITY_LOG_NAME

    def record(self, decision: GuardDecision) -> SecurityLogRecord:
        result = decision.result
        entry = SecurityLogRecord(
            action=decision_label(decision),
            command=decision.command,
            working_directory=decision.working_directory,
            reason=result.reason,
            risk_level=None if decision.bypassed else result.risk_level.value,
            category=result.category,
            matched_pattern=result.matched_pattern,
            user_response=decision.user_response,
        )
        try:
            append_record(self.path, entry)
        except OSError as exc:
            logger.error("security_log_write_failed", path=str(self.path), error=str(exc))
        return entry

    def record_error(self, error: BaseException, event_data: dict[str, Any] | None = None) -> None:
        entry = SecurityErrorRecord(
            error=str(error),
            stack="".join(traceback.format_exception(type(error), error, error.__traceback__)),
            event_data=event_data or {},
        )
        try:
            append_record(self.path, entry)
        except OSError as exc:
            logger.error("security_log_write_failed", path=str(self.path), error=str(exc))
