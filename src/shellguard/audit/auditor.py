"""Post-execution audit trail and suspicious-activity heuristics."""

from __future__ import annotations

import getpass
import hashlib
import os
import platform
import re
import socket
import traceback
import uuid
from collections.abc import Callable
from pathlib import Path

from shellguard.audit.records import (
    AuditEntry,
    SecurityAssessment,
    SecurityErrorRecord,
    SuspiciousActivity,
    ToolUseRecord,
)
from shellguard.audit.writer import append_line, append_record
from shellguard.logging import get_logger
from shellguard.models.event import HookEvent
from shellguard.models.policy import Policy
from shellguard.policy.validator import validate_command

logger = get_logger(__name__)

AUDIT_LOG_NAME = "audit.log"
DETAILED_AUDIT_LOG_NAME = "detailed-audit.json"
SUSPICIOUS_LOG_NAME = "suspicious-activity.log"
AUDIT_ERROR_LOG_NAME = "audit-errors.log"

UNKNOWN_COMMAND = "unknown_command"

SENSITIVE_DIRECTORIES = ("/etc", "/bin", "/usr/bin", "/sbin", "/boot", "/sys")

EXFILTRATION_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"curl.*-d.*@"),
    re.compile(r"wget.*--post-file"),
    re.compile(r"nc.*-e"),
    re.compile(r"ssh.*-R"),
)

_RISK_ICONS = {"MEDIUM": "⚠️ ", "HIGH": "🛑"}


def hash_command(command: str) -> str | None:
    if not command or command == UNKNOWN_COMMAND:
        return None
    return hashlib.sha256(command.encode("utf-8")).hexdigest()


def project_name(working_directory: str) -> str:
    if not working_directory:
        return "unknown"
    return Path(working_directory).name or working_directory


def session_id_for(event: HookEvent) -> str:
    return (
        os.environ.get("CLAUDE_SESSION_ID")
        or event.session_id
        or f"session_{uuid.uuid4().hex[:12]}"
    )


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return os.environ.get("USER", "unknown")


def identify_risk_indicators(command: str, working_directory: str) -> list[str]:
    indicators: list[str] = []
    if "sudo" in command:
        indicators.append("elevated_privileges")
    if "rm" in command:
        indicators.append("file_deletion")
    if "curl" in command or "wget" in command:
        indicators.append("network_access")
    if ".." in command:
        indicators.append("path_traversal")
    if "/dev/" in command:
        indicators.append("device_access")
    if "&&" in command or "||" in command or "|" in command:
        indicators.append("command_chaining")
    if "eval" in command or "exec" in command:
        indicators.append("code_execution")

    if "/tmp" in working_directory:
        indicators.append("temporary_directory")
    if working_directory == "/":
        indicators.append("root_directory_operation")
    return indicators


def assess_security(command: str, working_directory: str, policy: Policy) -> SecurityAssessment:
    if command == UNKNOWN_COMMAND:
        return SecurityAssessment(risk_level="unknown", reason="Command not identified")

    result = validate_command(command, working_directory, policy)
    return SecurityAssessment(
        risk_level=result.risk_level.value,
        action_taken=result.action.value,
        category=result.category,
        reason=result.reason or "No security concerns",
        matched_pattern=result.matched_pattern,
    )


def format_audit_line(entry: AuditEntry) -> str:
    timestamp = entry.timestamp.strftime("%Y-%m-%d %H:%M:%S")
    risk = entry.security_assessment.risk_level.upper()
    action = entry.security_assessment.action_taken.upper()
    icon = _RISK_ICONS.get(risk, "✅")
    return f"{timestamp} {icon} [{action}] {entry.tool_name}: {entry.command} ({entry.project_name})"


# Each check returns (severity, details) when the entry looks suspicious.
SuspicionCheck = Callable[[AuditEntry], tuple[str, str] | None]


def check_high_risk_command(entry: AuditEntry) -> tuple[str, str] | None:
    if entry.security_assessment.risk_level == "high":
        return "high", "High-risk command detected"
    return None


def check_unusual_directory_access(entry: AuditEntry) -> tuple[str, str] | None:
    for directory in SENSITIVE_DIRECTORIES:
        if entry.working_directory.startswith(directory):
            return "medium", f"Operation in sensitive directory: {directory}"
    return None


def check_potential_data_exfiltration(entry: AuditEntry) -> tuple[str, str] | None:
    if any(pattern.search(entry.command) for pattern in EXFILTRATION_PATTERNS):
        return "high", "Potential data exfiltration pattern detected"
    return None


SUSPICION_CHECKS: dict[str, SuspicionCheck] = {
    "high_risk_command": check_high_risk_command,
    "unusual_directory_access": check_unusual_directory_access,
    "potential_data_exfiltration": check_potential_data_exfiltration,
}


class Auditor:
    """Writes the audit trail for executed tool calls.

    Every entry produces one human-readable line in ``audit.log`` and one JSON
    line in ``detailed-audit.json``; heuristic hits are appended to
    ``suspicious-activity.log``.
    """

    def __init__(self, log_dir: Path | str, policy: Policy) -> None:
        self._log_dir = Path(log_dir)
        self._policy = policy

    @property
    def audit_path(self) -> Path:
        return self._log_dir / AUDIT_LOG_NAME

    @property
    def detailed_path(self) -> Path:
        return self._log_dir / DETAILED_AUDIT_LOG_NAME

    @property
    def suspicious_path(self) -> Path:
        return self._log_dir / SUSPICIOUS_LOG_NAME

    @property
    def error_path(self) -> Path:
        return self._log_dir / AUDIT_ERROR_LOG_NAME

    def build_entry(self, event: HookEvent) -> AuditEntry:
        command = event.command or UNKNOWN_COMMAND
        return AuditEntry(
            session_id=session_id_for(event),
            audit_id=uuid.uuid4().hex,
            tool_name=event.tool_name,
            hook_event_name=event.hook_event_name,
            command=command,
            command_hash=hash_command(command),
            working_directory=event.working_directory,
            project_name=project_name(event.working_directory),
            user=_current_user(),
            hostname=socket.gethostname(),
            platform=platform.system().lower(),
            python_version=platform.python_version(),
            security_assessment=assess_security(command, event.working_directory, self._policy),
            raw_event_data=event.raw,
            risk_indicators=identify_risk_indicators(command, event.working_directory),
        )

    def analyze(self, entry: AuditEntry) -> list[SuspiciousActivity]:
        findings: list[SuspiciousActivity] = []
        for name, check in SUSPICION_CHECKS.items():
            hit = check(entry)
            if hit is None:
                continue
            severity, details = hit
            findings.append(
                SuspiciousActivity(
                    pattern=name,
                    severity=severity,
                    details=details,
                    audit_id=entry.audit_id,
                    command=entry.command,
                    working_directory=entry.working_directory,
                )
            )
        return findings

    def record(self, event: HookEvent) -> tuple[AuditEntry, list[SuspiciousActivity]]:
        entry = self.build_entry(event)
        append_line(self.audit_path, format_audit_line(entry))
        append_record(self.detailed_path, entry)

        findings = self.analyze(entry)
        for finding in findings:
            append_record(self.suspicious_path, finding)
            logger.warning(
                "suspicious_activity",
                pattern=finding.pattern,
                details=finding.details,
                audit_id=finding.audit_id,
            )
        return entry, findings

    def record_error(self, error: BaseException, event_data: dict | None = None) -> None:
        entry = SecurityErrorRecord(
            event_type="audit_error",
            error=str(error),
            stack="".join(traceback.format_exception(type(error), error, error.__traceback__)),
            event_data=event_data or {},
        )
        try:
            append_record(self.error_path, entry)
        except OSError as exc:
            logger.error("audit_error_log_failed", path=str(self.error_path), error=str(exc))


def record_tool_use(log_dir: Path | str, event: HookEvent) -> ToolUseRecord:
    """Append the tool call to ``<project>.log`` in ``log_dir``."""
    project = project_name(event.working_directory)
    record = ToolUseRecord(
        project=project,
        tool=event.tool_name,
        input=event.raw.get("tool_input"),
        output=event.raw.get("tool_output") or event.raw.get("tool_response"),
        event=event.hook_event_name or None,
    )
    append_record(Path(log_dir) / f"{project}.log", record)
    return record
