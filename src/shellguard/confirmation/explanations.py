"""Human-readable explanations shown in the confirmation prompt."""

from __future__ import annotations

RISK_EXPLANATIONS: dict[str, str] = {
    "file_destruction": "This command can permanently delete files or directories",
    "system_modification": "This command can modify critical system files or permissions",
    "process_control": "This command can terminate processes or affect system stability",
    "network_security": "This command can establish network connections or download content",
    "permission_escalation": "This command can elevate privileges or modify security settings",
    "disk_operations": "This command can modify disk partitions or filesystems",
    "archive_operations": "This command can extract files in potentially dangerous ways",
    "symlink_attacks": "This command can create symbolic links outside the current directory",
    "environment_manipulation": "This command can modify environment variables affecting system behavior",
    "code_execution": "This command can execute arbitrary code",
    "path_restriction": "This command operates outside the current working directory",
}

GENERIC_EXPLANATION = "This command has been flagged for security review"


def explain_risk(category: str | None) -> str:
    if category is None:
        return GENERIC_EXPLANATION
    return RISK_EXPLANATIONS.get(category, GENERIC_EXPLANATION)
