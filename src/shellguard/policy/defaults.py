"""Built-in default policy, in the same shape as the JSON policy file."""

from __future__ import annotations

import copy
from typing import Any

from shellguard.models.policy import Policy

DEFAULT_BYPASS_KEYWORD = "SECURITY_OVERRIDE"

# Categories are evaluated in this order; the first one with a matching block
# pattern decides the outcome.
DEFAULT_POLICY_DOCUMENT: dict[str, Any] = {
    "enabled": True,
    "bypass": {
        "enabled": True,
        "bypass_keyword": DEFAULT_BYPASS_KEYWORD,
    },
    "logging": {"enabled": True},
    "path_restrictions": {
        "enabled": True,
        "blocked_paths": [
            "/etc", "/bin", "/sbin", "/usr/bin", "/usr/sbin", "/usr/lib",
            "/boot", "/sys", "/proc", "/dev", "/lib", "/lib64", "/root",
            "/System", "/Library",
        ],
        "allowed_operations_outside_cwd": [
            "ls", "cat", "head", "tail", "less", "more", "grep", "find",
            "wc", "stat", "file", "du", "df", "diff", "tree", "which",
        ],
        "always_require_confirmation_outside_cwd": [
            "rm", "mv", "cp", "chmod", "chown", "ln", "rsync", "dd",
            "tar", "unzip", "touch", "mkdir", "rmdir", "truncate",
        ],
    },
    "policies": {
        "file_destruction": {
            "enabled": True,
            "block_patterns": [
                r"\brm\s+(.*\s)?/\*?(\s|$)",
                r"\brm\s+(-\S+\s+)*~/?(\s|$)",
                r"--no-preserve-root",
                r"\bshred\s+.*/(usr|etc|bin|sbin|boot|lib|var|dev)/",
                r"\bdd\s+.*of=/dev/(sd|hd|nvme|xvd|vd|disk|mmcblk)",
                r">\s*/dev/(sd|hd|nvme|disk)[a-z0-9]*",
            ],
            "require_confirmation": [
                r"\brm\s+(-\S+\s+)*-[a-z]*[rf]",
                r"\bshred\b",
                r"\bfind\s+.*-delete\b",
                r"\btruncate\s+",
            ],
        },
        "system_modification": {
            "enabled": True,
            "block_patterns": [
                r"\bchmod\s+(-\S+\s+)*0?777\s+/",
                r"\bchmod\s+-R\s+\S+\s+/(\s|$)",
                r"\bchown\s+(-\S+\s+)*\S+\s+/(\s|$)",
                r">\s*/etc/(passwd|shadow|sudoers|hosts)\b",
            ],
            "require_confirmation": [
                r"\bchmod\s+(-\S+\s+)*0?777\b",
                r"\bchmod\s+-R\b",
                r"\bchown\s+-R\b",
            ],
        },
        "process_control": {
            "enabled": True,
            "block_patterns": [
                r"\bkill\s+(-\S+\s+)*-1\s*$",
                r"\bkill\s+(-\S+\s+)*1\s*$",
                r"\b(killall|pkill)\s+(-\S+\s+)*(init|systemd|launchd)\b",
            ],
            "require_confirmation": [
                r"\bkill\s+-(9|KILL|SIGKILL)\b",
                r"\bkillall\b",
                r"\bpkill\b",
            ],
        },
        "network_security": {
            "enabled": True,
            "block_patterns": [
                r"\b(curl|wget)\b.*\|\s*(sudo\s+)?(ba|z|da|k)?sh\b",
                r"\b(nc|ncat|netcat)\s+(.*\s)?-[a-z]*e\b",
                r"/dev/tcp/",
            ],
            "require_confirmation": [
                r"\b(curl|wget)\s+(-\S+\s+)*https?://",
                r"\b(nc|ncat|netcat)\s+-[a-z]*l",
                r"\bssh\s+.*-R\b",
                r"\bscp\s+",
            ],
        },
        "permission_escalation": {
            "enabled": True,
            "block_patterns": [
                r"\bsudo\s+su\b",
                r"\bsudo\s+-[is]\b",
                r"\bsudo\s+(ba|z)?sh\b",
                r"\bchmod\s+(-\S+\s+)*[ugoa]*\+s\b",
                r"\bvisudo\b",
                r"\bpasswd\s+root\b",
            ],
            "require_confirmation": [
                r"\bsudo\b",
                r"\bsu\s+",
                r"\bdoas\b",
            ],
        },
        "disk_operations": {
            "enabled": True,
            "block_patterns": [
                r"\b(fdisk|sfdisk|cfdisk|gdisk|parted)\b",
                r"\bmkfs(\.\w+)?\s",
                r"\bwipefs\b",
            ],
            "require_confirmation": [
                r"\bmount\s+",
                r"\bumount\s+",
            ],
        },
        "archive_operations": {
            "enabled": True,
            "block_patterns": [
                r"\btar\s+.*(-P\b|--absolute-names)",
                r"\btar\s+.*-C\s+/(\s|$)",
                r"\bunzip\s+.*-d\s+/(\s|$)",
            ],
            "require_confirmation": [
                r"\btar\s+-?[a-z]*x",
                r"\bunzip\s+",
            ],
        },
        "symlink_attacks": {
            "enabled": True,
            "block_patterns": [
                r"\bln\s+(.*\s)?-[a-z]*s[a-z]*\s+(\S*\.\./|/(etc|bin|sbin|usr|boot|root|var)\b)",
            ],
            "require_confirmation": [
                r"\bln\s+(.*\s)?-[a-z]*s",
            ],
        },
        "environment_manipulation": {
            "enabled": True,
            "block_patterns": [
                r"\bLD_PRELOAD\s*=",
                r"\bLD_LIBRARY_PATH\s*=",
                r"\bDYLD_INSERT_LIBRARIES\s*=",
            ],
            "require_confirmation": [
                r"\bexport\s+PATH=",
                r"\bunset\s+PATH\b",
            ],
        },
        "code_execution": {
            "enabled": True,
            "block_patterns": [
                r"\beval\s+[\"']?\$",
                r"\bsource\s+/tmp/",
                r"(^|[;&|]\s*)\.\s+/tmp/",
            ],
            "require_confirmation": [
                r"\beval\s+",
                r"\b(ba|z)?sh\s+-c\b",
                r"\bpython[0-9.]*\s+-c\b",
                r"\b(perl|ruby|node)\s+-e\b",
            ],
        },
    },
}


def default_policy_document() -> dict[str, Any]:
    return copy.deepcopy(DEFAULT_POLICY_DOCUMENT)


def default_policy() -> Policy:
    return Policy.model_validate(DEFAULT_POLICY_DOCUMENT)
