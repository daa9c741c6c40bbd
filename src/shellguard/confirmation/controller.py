"""Interactive confirmation for commands the validator marks as ``confirm``.

A confirmation session starts in ``AWAITING_INPUT`` and ends in exactly one of
``CONFIRMED``, ``DENIED`` or ``TIMED_OUT``. The pending read and the timeout are
two separate tasks raced with ``asyncio.wait``; whichever finishes first
decides the state and the other is cancelled.
"""

from __future__ import annotations

import asyncio
import enum
import sys
import threading
from collections.abc import Awaitable, Callable
from typing import TextIO

from pydantic import BaseModel

from shellguard.exceptions import ConfirmationError
from shellguard.logging import get_logger
from shellguard.models.decision import Action, ValidationResult

logger = get_logger(__name__)

CONFIRMATION_TIMEOUT = 30.0

AFFIRMATIVE_RESPONSES = frozenset({"y", "yes"})

ResponseReader = Callable[[], Awaitable[str]]
PromptRenderer = Callable[[str, ValidationResult], None]


class ConfirmationState(str, enum.Enum):
    AWAITING_INPUT = "awaiting_input"
    CONFIRMED = "confirmed"
    DENIED = "denied"
    TIMED_OUT = "timed_out"

    @property
    def is_terminal(self) -> bool:
        return self is not ConfirmationState.AWAITING_INPUT


class ConfirmationOutcome(BaseModel):
    state: ConfirmationState
    result: ValidationResult
    user_response: str | None = None


class ConfirmationSession:
    """Tracks one prompt's state; each session resolves exactly once."""

    def __init__(self) -> None:
        self._state = ConfirmationState.AWAITING_INPUT

    @property
    def state(self) -> ConfirmationState:
        return self._state

    def resolve(self, state: ConfirmationState) -> ConfirmationState:
        if self._state.is_terminal:
            raise RuntimeError(f"Confirmation already resolved as {self._state.value}")
        if not state.is_terminal:
            raise ValueError(f"Cannot resolve to non-terminal state {state.value}")
        self._state = state
        return state


def is_affirmative(response: str) -> bool:
    return response.strip().lower() in AFFIRMATIVE_RESPONSES


# Returns the stream to read from and whether the reader owns (and closes) it.
StreamSource = Callable[[], tuple[TextIO, bool]]


def _line_reader(source: StreamSource) -> ResponseReader:
    """Build a reader that takes one line from ``source`` without blocking the loop.

    The stream is acquired, read and released on a daemon thread, so an
    abandoned read neither delays interpreter exit nor delivers its line after
    cancellation, and an owned stream is closed once ``readline`` returns.
    """

    async def _read() -> str:
        loop = asyncio.get_running_loop()
        future: asyncio.Future[str] = loop.create_future()

        def _settle(line: str | None, error: BaseException | None) -> None:
            if future.done():
                return
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result((line or "").rstrip("\r\n"))

        def _worker() -> None:
            try:
                stream, owned = source()
                try:
                    line = stream.readline()
                finally:
                    if owned:
                        stream.close()
            except (OSError, ValueError) as exc:
                payload: tuple[str | None, BaseException | None] = (
                    None,
                    ConfirmationError(f"Cannot read confirmation: {exc}"),
                )
            else:
                payload = (line, None)
            try:
                loop.call_soon_threadsafe(_settle, *payload)
            except RuntimeError:
                # Loop already closed: the read was abandoned.
                return

        threading.Thread(target=_worker, name="confirmation-reader", daemon=True).start()
        return await future

    return _read


def stream_reader(stream: TextIO) -> ResponseReader:
    """Read one line from ``stream``; the caller keeps ownership of it."""
    return _line_reader(lambda: (stream, False))


class ConfirmationController:
    def __init__(
        self,
        reader: ResponseReader,
        prompt: PromptRenderer | None = None,
        timeout: float = CONFIRMATION_TIMEOUT,
    ) -> None:
        self._reader = reader
        self._prompt = prompt
        self._timeout = timeout

    async def confirm(self, command: str, result: ValidationResult) -> ConfirmationOutcome:
        session = ConfirmationSession()
        if self._prompt is not None:
            self._prompt(command, result)

        read_task = asyncio.ensure_future(self._reader())
        timer_task = asyncio.ensure_future(asyncio.sleep(self._timeout))
        done, pending = await asyncio.wait(
            {read_task, timer_task}, return_when=asyncio.FIRST_COMPLETED
        )
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

        if read_task not in done:
            session.resolve(ConfirmationState.TIMED_OUT)
            logger.warning("confirmation_timed_out", command=command, timeout=self._timeout)
            return ConfirmationOutcome(
                state=session.state,
                result=_denied(result, "Confirmation timed out"),
            )

        try:
            response = read_task.result()
        except ConfirmationError as exc:
            session.resolve(ConfirmationState.DENIED)
            logger.warning("confirmation_input_failed", command=command, error=str(exc))
            return ConfirmationOutcome(
                state=session.state,
                result=_denied(result, "Confirmation input unavailable"),
            )

        if is_affirmative(response):
            session.resolve(ConfirmationState.CONFIRMED)
            return ConfirmationOutcome(
                state=session.state,
                result=result.model_copy(
                    update={"action": Action.ALLOW, "reason": "User confirmed risky operation"}
                ),
                user_response=response,
            )

        session.resolve(ConfirmationState.DENIED)
        return ConfirmationOutcome(
            state=session.state,
            result=_denied(result, "User denied confirmation"),
            user_response=response,
        )


def _denied(result: ValidationResult, reason: str) -> ValidationResult:
    return result.model_copy(update={"action": Action.BLOCK, "reason": reason})


TTY_PATH = "/dev/tty"


def terminal_reader(tty_path: str = TTY_PATH) -> ResponseReader:
    """Read the answer from the controlling terminal.

    Hook processes receive their event on stdin, so the terminal is preferred;
    stdin is used only when no terminal can be opened.
    """

    def _open() -> tuple[TextIO, bool]:
        try:
            return open(tty_path, encoding="utf-8"), True
        except OSError:
            return sys.stdin, False

    return _line_reader(_open)
