"""Custom exception hierarchy for shellguard."""

from __future__ import annotations


class ShellguardError(Exception):
    """Base exception for all shellguard errors."""


class PolicyLoadError(ShellguardError):
    """Raised when the policy file cannot be read or validated."""

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class EventParseError(ShellguardError):
    """Raised when a hook event payload is malformed."""


class ConfirmationError(ShellguardError):
    """Raised when the confirmation input cannot be read."""


class NotificationError(ShellguardError):
    """Raised when a desktop notification cannot be delivered."""
