"""Desktop notifications for agent Notification/Stop events."""

from __future__ import annotations

import asyncio
import re
import shutil
import sys
from pathlib import Path

from pydantic import BaseModel

from shellguard.exceptions import NotificationError
from shellguard.models.event import HookEvent

MAX_MESSAGE_LENGTH = 200
STOP_MESSAGE = "Task completed successfully"

_MARKDOWN_CHARS = re.compile(r"[*_`]")


class Notification(BaseModel):
    title: str
    message: str
    kind: str = "notification"
    open_url: str = ""


def clean_message(message: str) -> str:
    message = _MARKDOWN_CHARS.sub("", message).strip()
    if len(message) > MAX_MESSAGE_LENGTH:
        message = message[:MAX_MESSAGE_LENGTH] + "... message truncated"
    return message


def notification_for(event: HookEvent) -> Notification | None:
    """Build the notification for ``event``, or ``None`` when there is nothing to say."""
    if event.hook_event_name == "Notification" and event.message:
        message, kind = event.message, "notification"
    elif event.hook_event_name == "Stop":
        message, kind = STOP_MESSAGE, "stop"
    elif event.message:
        message, kind = event.message, "notification"
    else:
        return None

    message = clean_message(message)
    if not message:
        return None

    return Notification(
        title=Path(event.working_directory).name or event.working_directory,
        message=message,
        kind=kind,
        open_url=f"cursor://file/{event.working_directory}",
    )


class DesktopNotifier:
    def __init__(
        self,
        sound_enabled: bool = False,
        notification_sound: str = "default",
        stop_sound: str = "default",
        platform: str | None = None,
    ) -> None:
        self._sound_enabled = sound_enabled
        self._notification_sound = notification_sound
        self._stop_sound = stop_sound
        self._platform = platform or sys.platform

    def build_command(self, notification: Notification) -> list[str]:
        if self._platform == "darwin":
            binary = shutil.which("terminal-notifier")
            if binary is None:
                raise NotificationError("terminal-notifier is not installed")
            argv = [
                binary,
                "-title", notification.title,
                "-message", notification.message,
            ]
            if notification.open_url:
                argv += ["-open", notification.open_url]
            if self._sound_enabled:
                sound = self._stop_sound if notification.kind == "stop" else self._notification_sound
                argv += ["-sound", sound]
            return argv

        binary = shutil.which("notify-send")
        if binary is None:
            raise NotificationError("notify-send is not installed")
        return [binary, notification.title, notification.message]

    async def send(self, notification: Notification) -> None:
        argv = self.build_command(notification)
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            _, stderr = await proc.communicate()
        except OSError as exc:
            raise NotificationError(f"Failed to run notifier: {exc}") from exc

        if proc.returncode != 0:
            raise NotificationError(
                f"Notifier failed (rc={proc.returncode}): {stderr.decode().strip()}"
            )
