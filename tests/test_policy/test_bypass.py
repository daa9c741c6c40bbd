"""Brutal tests for the bypass keyword."""

from __future__ import annotations

from shellguard.models.policy import BypassConfig
from shellguard.policy.bypass import is_bypassed


class TestBypass:
    def test_keyword_anywhere(self):
        bypass = BypassConfig(enabled=True, keyword="SECURITY_OVERRIDE")
        assert is_bypassed("rm -rf / # SECURITY_OVERRIDE", bypass)
        assert is_bypassed("SECURITY_OVERRIDE=1 rm -rf /", bypass)

    def test_case_sensitive(self):
        bypass = BypassConfig(enabled=True, keyword="SECURITY_OVERRIDE")
        assert not is_bypassed("rm -rf / # security_override", bypass)

    def test_disabled(self):
        bypass = BypassConfig(enabled=False, keyword="SECURITY_OVERRIDE")
        assert not is_bypassed("rm -rf / # SECURITY_OVERRIDE", bypass)

    def test_empty_keyword_never_bypasses(self):
        assert not is_bypassed("rm -rf /", BypassConfig(enabled=True, keyword=""))

    def test_policy_aliases(self):
        bypass = BypassConfig.model_validate({"enabled": True, "bypass_keyword": "OK_GO"})
        assert bypass.keyword == "OK_GO"
        assert is_bypassed("deploy OK_GO", bypass)
