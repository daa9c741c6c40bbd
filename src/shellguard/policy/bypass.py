"""Bypass keyword check."""

from __future__ import annotations

from shellguard.models.policy import BypassConfig


def is_bypassed(command: str, bypass: BypassConfig) -> bool:
    # An empty keyword would be a substring of every command.
    if not bypass.enabled or not bypass.keyword:
        return False
    return bypass.keyword in command
