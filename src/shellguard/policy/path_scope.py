"""Path-scope analysis: protected system paths and operations outside the CWD.

These checks are textual heuristics, not a shell parser. In particular the
outside-CWD test treats any ``/word`` token as a path, so a URL or an
argument like ``--prefix=/x`` also counts as "outside the working directory".
"""

from __future__ import annotations

import re

from shellguard.models.decision import ValidationResult
from shellguard.models.policy import PathRestrictions

PATH_RESTRICTION_CATEGORY = "path_restriction"

# Commands allowed to inspect protected paths without being blocked.
READ_ONLY_COMMANDS = frozenset({
    "ls", "cat", "less", "more", "head", "tail", "grep", "find",
    "file", "stat", "du", "df", "wc", "sort", "uniq", "cut",
    "awk", "sed", "diff", "cmp", "strings", "hexdump", "od",
})

OUTSIDE_CWD_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"/[^/\s]+"),  # absolute path
    re.compile(r"\.\./"),  # parent traversal
    re.compile(r"~/[^/\s]+"),  # home shorthand
    re.compile(r"\$HOME"),
)


def command_name(command: str) -> str:
    parts = command.strip().split()
    return parts[0] if parts else ""


def is_read_only_command(command: str) -> bool:
    return command_name(command).lower() in READ_ONLY_COMMANDS


def _blocked_path_regexes(prefix: str) -> tuple[re.Pattern[str], ...]:
    escaped = re.escape(prefix)
    return (
        # rm /etc/passwd
        re.compile(rf"\s+{escaped}(/\S*)?\s*$", re.IGNORECASE),
        # rm /etc/passwd --force
        re.compile(rf"\s+{escaped}(/\S*)?\s+", re.IGNORECASE),
        re.compile(rf"^\S+\s+{escaped}(/|\s|$)", re.IGNORECASE),
    )


def find_blocked_path(command: str, blocked_paths: tuple[str, ...]) -> str | None:
    """Return the first protected prefix referenced as a path argument."""
    for prefix in blocked_paths:
        if any(regex.search(command) for regex in _blocked_path_regexes(prefix)):
            return prefix
    return None


def operates_outside_cwd(command: str) -> bool:
    return any(pattern.search(command) for pattern in OUTSIDE_CWD_PATTERNS)


def _in_ops(command: str, ops: frozenset[str]) -> bool:
    name = command_name(command).lower()
    return bool(name) and name in {op.lower() for op in ops}


def check_path(
    command: str,
    working_dir: str,
    restrictions: PathRestrictions,
) -> ValidationResult:
    # working_dir is part of the contract; the textual heuristics never resolve
    # paths against it.
    if not restrictions.enabled:
        return ValidationResult.allow("Path restrictions disabled")

    blocked = find_blocked_path(command, restrictions.blocked_paths)
    if blocked is not None and not is_read_only_command(command):
        return ValidationResult.block(
            f"Operation on protected system path: {blocked}",
            category=PATH_RESTRICTION_CATEGORY,
        )

    if operates_outside_cwd(command):
        if _in_ops(command, restrictions.allowed_read_only_ops_outside_cwd):
            return ValidationResult.allow("Read-only operation outside CWD allowed")
        if _in_ops(command, restrictions.confirm_ops_outside_cwd):
            return ValidationResult.confirm(
                "Operation outside working directory requires confirmation",
                category=PATH_RESTRICTION_CATEGORY,
            )

    return ValidationResult.allow("Path validation passed")
