"""Brutal tests for exception hierarchy."""

from __future__ import annotations

import pytest

from shellguard.exceptions import (
    ConfirmationError,
    EventParseError,
    NotificationError,
    PolicyLoadError,
    ShellguardError,
)


class TestExceptionHierarchy:
    def test_base_is_exception(self):
        assert issubclass(ShellguardError, Exception)

    @pytest.mark.parametrize(
        "exc_cls", [PolicyLoadError, EventParseError, ConfirmationError, NotificationError]
    )
    def test_inherits_base(self, exc_cls):
        assert issubclass(exc_cls, ShellguardError)

    def test_policy_load_error_path(self):
        err = PolicyLoadError("bad policy", path="/tmp/p.json")
        assert str(err) == "bad policy"
        assert err.path == "/tmp/p.json"

    def test_policy_load_error_default_path(self):
        assert PolicyLoadError("bad").path == ""

    def test_catchable_as_base(self):
        with pytest.raises(ShellguardError):
            raise EventParseError("nope")
