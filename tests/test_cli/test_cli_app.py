"""Brutal tests for the CLI commands."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock, patch

from typer.testing import CliRunner

from shellguard.cli.app import app
from shellguard.exceptions import NotificationError

runner = CliRunner()


def _bash_event(command: str, cwd: str = "/home/dev/project") -> str:
    return json.dumps({
        "tool_name": "Bash",
        "hook_event_name": "PreToolUse",
        "session_id": "cli-session",
        "tool_input": {"command": command},
        "cwd": cwd,
    })


class TestCheckCommand:
    def test_allow(self, policy_file, mock_settings):
        result = runner.invoke(app, ["check", "--non-interactive"], input=_bash_event("ls -la"))
        assert result.exit_code == 0
        assert "Security Guard: ALLOW" in result.output

        log = mock_settings.log_dir / "security.log"
        entry = json.loads(log.read_text(encoding="utf-8").splitlines()[0])
        assert entry["action"] == "allow"
        assert entry["command"] == "ls -la"

    def test_block(self, policy_file):
        result = runner.invoke(app, ["check", "--non-interactive"], input=_bash_event("rm -rf /"))
        assert result.exit_code == 1
        assert "BLOCKED" in result.output
        assert "file_destruction" in result.output

    def test_confirm_without_terminal_blocks(self, policy_file):
        result = runner.invoke(
            app, ["check", "--non-interactive"], input=_bash_event("rm -rf ./build")
        )
        assert result.exit_code == 1
        assert "Confirmation unavailable" in result.output

    def test_bypass(self, policy_file, mock_settings):
        result = runner.invoke(
            app,
            ["check", "--non-interactive"],
            input=_bash_event("rm -rf / # SECURITY_OVERRIDE"),
        )
        assert result.exit_code == 0
        log = mock_settings.log_dir / "security.log"
        assert json.loads(log.read_text(encoding="utf-8"))["action"] == "bypass"

    def test_no_policy_fails_open(self, mock_settings):
        result = runner.invoke(app, ["check", "--non-interactive"], input=_bash_event("rm -rf /"))
        assert result.exit_code == 0

    def test_non_bash_event(self, policy_file):
        event = json.dumps({"tool_name": "Edit", "tool_input": {"file_path": "a.py"}})
        result = runner.invoke(app, ["check"], input=event)
        assert result.exit_code == 0
        assert "Not a Bash command" in result.output

    def test_empty_input(self, mock_settings):
        result = runner.invoke(app, ["check"], input="")
        assert result.exit_code == 1
        assert "No input received" in result.output

    def test_malformed_input(self, mock_settings):
        result = runner.invoke(app, ["check"], input="{nope")
        assert result.exit_code == 1

    def test_interactive_uses_pipeline_confirmation(self, policy_file, answer):
        from shellguard.confirmation.controller import ConfirmationController
        from shellguard.main import build_pipeline

        def _pipeline(settings, interactive=True):
            pipeline = build_pipeline(settings=settings, interactive=False)
            pipeline._confirmation = ConfirmationController(answer("yes"))
            return pipeline

        with patch("shellguard.cli.app._get_pipeline", side_effect=_pipeline):
            result = runner.invoke(app, ["check"], input=_bash_event("rm -rf ./build"))
        assert result.exit_code == 0
        assert "User confirmed risky operation" in result.output


class TestEvaluateCommand:
    def test_block(self, mock_settings):
        result = runner.invoke(app, ["evaluate", "rm -rf /", "--default-policy"])
        assert result.exit_code == 1
        assert "BLOCK" in result.output

    def test_confirm(self, mock_settings):
        result = runner.invoke(app, ["evaluate", "kill -9 12345", "--default-policy"])
        assert result.exit_code == 0
        assert "CONFIRM" in result.output

    def test_allow(self, mock_settings):
        result = runner.invoke(app, ["evaluate", "ls -la", "--default-policy"])
        assert result.exit_code == 0
        assert "ALLOW" in result.output

    def test_policy_file(self, policy_file):
        result = runner.invoke(app, ["evaluate", "sudo su -", "--policy", str(policy_file)])
        assert result.exit_code == 1

    def test_bypass(self, mock_settings):
        result = runner.invoke(
            app, ["evaluate", "rm -rf / SECURITY_OVERRIDE", "--default-policy"]
        )
        assert result.exit_code == 0
        assert "Bypass" in result.output

    def test_does_not_log(self, mock_settings):
        runner.invoke(app, ["evaluate", "rm -rf /", "--default-policy"])
        assert not (mock_settings.log_dir / "security.log").exists()


class TestAuditCommand:
    def test_records(self, policy_file, mock_settings):
        result = runner.invoke(app, ["audit"], input=_bash_event("rm -rf /"))
        assert result.exit_code == 0
        assert (mock_settings.log_dir / "audit.log").exists()
        assert (mock_settings.log_dir / "detailed-audit.json").exists()
        assert (mock_settings.log_dir / "suspicious-activity.log").exists()

    def test_bad_input_still_exits_zero(self, mock_settings):
        result = runner.invoke(app, ["audit"], input="{nope")
        assert result.exit_code == 0
        errors = (mock_settings.log_dir / "audit-errors.log").read_text(encoding="utf-8")
        assert json.loads(errors)["event_type"] == "audit_error"


class TestLogToolCommand:
    def test_writes_project_log(self, mock_settings):
        result = runner.invoke(app, ["log-tool"], input=_bash_event("ls", cwd="/home/dev/webapp"))
        assert result.exit_code == 0
        entry = json.loads((mock_settings.log_dir / "webapp.log").read_text(encoding="utf-8"))
        assert entry["tool"] == "Bash"
        assert entry["input"] == {"command": "ls"}

    def test_bad_input(self, mock_settings):
        result = runner.invoke(app, ["log-tool"], input="")
        assert result.exit_code == 1


class TestNotifyCommand:
    def _stop(self) -> str:
        return json.dumps({"hook_event_name": "Stop", "cwd": "/home/dev/webapp"})

    def test_sends(self, mock_settings):
        notifier = MagicMock()
        notifier.send = AsyncMock()
        with patch("shellguard.cli.app.DesktopNotifier", return_value=notifier):
            result = runner.invoke(app, ["notify"], input=self._stop())
        assert result.exit_code == 0
        sent = notifier.send.call_args.args[0]
        assert sent.title == "webapp"
        assert sent.kind == "stop"

    def test_disabled(self, mock_settings, monkeypatch):
        monkeypatch.setenv("SHELLGUARD_NOTIFICATIONS_ENABLED", "false")
        with patch("shellguard.cli.app.DesktopNotifier") as mock_cls:
            result = runner.invoke(app, ["notify"], input=self._stop())
        assert result.exit_code == 0
        mock_cls.assert_not_called()

    def test_nothing_to_notify(self, mock_settings):
        event = json.dumps({"hook_event_name": "PreToolUse", "cwd": "/x"})
        with patch("shellguard.cli.app.DesktopNotifier") as mock_cls:
            result = runner.invoke(app, ["notify"], input=event)
        assert result.exit_code == 0
        mock_cls.assert_not_called()

    def test_delivery_failure(self, mock_settings):
        notifier = MagicMock()
        notifier.send = AsyncMock(side_effect=NotificationError("notify-send is not installed"))
        with patch("shellguard.cli.app.DesktopNotifier", return_value=notifier):
            result = runner.invoke(app, ["notify"], input=self._stop())
        assert result.exit_code == 1
        assert "Error notifying" in result.output


class TestHistoryCommand:
    def test_empty(self, mock_settings):
        result = runner.invoke(app, ["history"])
        assert result.exit_code == 0
        assert "No history found" in result.output

    def test_after_check(self, policy_file):
        runner.invoke(app, ["check", "--non-interactive"], input=_bash_event("rm -rf /"))
        runner.invoke(app, ["check", "--non-interactive"], input=_bash_event("ls"))

        result = runner.invoke(app, ["history"])
        assert result.exit_code == 0
        assert "Decision History" in result.output

        result = runner.invoke(app, ["history", "--action", "block", "-n", "5"])
        assert "BLOCK" in result.output
        assert "ALLOW" not in result.output


class TestConfigCommand:
    def test_shows_settings(self, policy_file):
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "Configuration" in result.output
        assert "Policy Categories" in result.output

    def test_missing_policy(self, mock_settings):
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "Policy Categories" not in result.output


class TestInitPolicyCommand:
    def test_writes_default(self, mock_settings):
        result = runner.invoke(app, ["init-policy"])
        assert result.exit_code == 0
        data = json.loads(mock_settings.policy_path.read_text(encoding="utf-8"))
        assert data["enabled"] is True

    def test_refuses_existing(self, policy_file):
        result = runner.invoke(app, ["init-policy"])
        assert result.exit_code == 1
        assert "--force" in result.output

    def test_force(self, policy_file):
        policy_file.write_text("{}", encoding="utf-8")
        result = runner.invoke(app, ["init-policy", "--force"])
        assert result.exit_code == 0
        assert json.loads(policy_file.read_text(encoding="utf-8"))["policies"]

    def test_custom_path(self, mock_settings, tmp_path):
        target = tmp_path / "custom" / "policy.json"
        result = runner.invoke(app, ["init-policy", "--path", str(target)])
        assert result.exit_code == 0
        assert target.exists()
