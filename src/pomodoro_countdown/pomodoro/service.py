"""In-memory work/break session state machine driven by external ticks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Literal, Optional

from .constants import (
    ACTION_RESET,
    ACTION_SET_DURATION,
    ACTION_TOGGLE,
    DEFAULT_ALLOWED_DURATIONS,
    DEFAULT_BREAK_DURATION_SECONDS,
    DEFAULT_WORK_DURATION_SECONDS,
    MODE_BREAK,
    MODE_WORK,
    MODES,
    REASON_DURATION_UPDATED,
    REASON_INVALID_DURATION,
    REASON_INVALID_MODE,
    REASON_PAUSED,
    REASON_RESET,
    REASON_STARTED,
)

SessionMode = Literal["work", "break"]
SessionAction = Literal["toggle", "reset", "set_duration"]


class InvalidDuration(ValueError):
    """Raised when a duration is outside the allowed set."""


def format_mmss(seconds: int) -> str:
    """Format a duration in seconds as zero-padded `MM:SS`."""
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{remainder:02d}"


def other_mode(mode: SessionMode) -> SessionMode:
    return MODE_BREAK if mode == MODE_WORK else MODE_WORK


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable session state exposed to renderers."""
    mode: SessionMode
    work_duration_seconds: int
    break_duration_seconds: int
    remaining_seconds: int
    is_running: bool

    @property
    def display(self) -> str:
        return format_mmss(self.remaining_seconds)

    def duration_for(self, mode: SessionMode) -> int:
        if mode == MODE_WORK:
            return self.work_duration_seconds
        return self.break_duration_seconds


@dataclass(frozen=True)
class SessionActionResult:
    """Result envelope returned after applying a user action."""
    action: SessionAction
    accepted: bool
    reason: str
    snapshot: SessionSnapshot


@dataclass(frozen=True)
class SessionEnded:
    """Emitted when a session runs out and the mode switches."""
    previous_mode: SessionMode
    snapshot: SessionSnapshot


@dataclass(frozen=True)
class SessionTick:
    """Tick payload returned while the countdown is running."""
    snapshot: SessionSnapshot
    ended_mode: Optional[SessionMode] = None

    @property
    def switched(self) -> bool:
        return self.ended_mode is not None


ChangeListener = Callable[[SessionSnapshot], None]
SessionEndedListener = Callable[[SessionEnded], None]


class SessionController:
    """Owns the work/break session state and enforces all transitions.

    The controller does not keep time. An external scheduler calls
    :meth:`tick` once per elapsed second and user input calls
    :meth:`toggle_run`, :meth:`reset` and :meth:`set_duration`. Every
    accepted call notifies change listeners after all state mutation for
    that call is complete.

    Calls are expected from a single thread of control.
    """

    def __init__(
        self,
        *,
        work_duration_seconds: int = DEFAULT_WORK_DURATION_SECONDS,
        break_duration_seconds: int = DEFAULT_BREAK_DURATION_SECONDS,
        allowed_durations: Optional[Iterable[int]] = DEFAULT_ALLOWED_DURATIONS,
        logger: Optional[logging.Logger] = None,
    ):
        self._allowed_durations: Optional[frozenset[int]] = (
            frozenset(int(value) for value in allowed_durations)
            if allowed_durations
            else None
        )
        self._logger = logger or logging.getLogger("pomodoro")

        try:
            self._validate_duration(work_duration_seconds)
            self._validate_duration(break_duration_seconds)
        except InvalidDuration as error:
            raise ValueError(f"Invalid default duration: {error}") from error

        self._work_duration_seconds = int(work_duration_seconds)
        self._break_duration_seconds = int(break_duration_seconds)
        self._mode: SessionMode = MODE_WORK
        self._remaining_seconds = self._work_duration_seconds
        self._is_running = False

        self._listeners: list[ChangeListener] = []
        self._ended_listeners: list[SessionEndedListener] = []

    @property
    def allowed_durations(self) -> Optional[frozenset[int]]:
        return self._allowed_durations

    def add_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def add_session_ended_listener(self, listener: SessionEndedListener) -> None:
        self._ended_listeners.append(listener)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            mode=self._mode,
            work_duration_seconds=self._work_duration_seconds,
            break_duration_seconds=self._break_duration_seconds,
            remaining_seconds=self._remaining_seconds,
            is_running=self._is_running,
        )

    def toggle_run(self) -> SessionActionResult:
        self._is_running = not self._is_running
        reason = REASON_STARTED if self._is_running else REASON_PAUSED
        self._logger.info(
            "Session %s: mode=%s remaining=%ss",
            reason,
            self._mode,
            self._remaining_seconds,
        )
        return self._accepted(ACTION_TOGGLE, reason)

    def reset(self) -> SessionActionResult:
        self._is_running = False
        self._remaining_seconds = self._duration_for(self._mode)
        self._logger.info(
            "Session reset: mode=%s remaining=%ss",
            self._mode,
            self._remaining_seconds,
        )
        return self._accepted(ACTION_RESET, REASON_RESET)

    def set_duration(self, mode: str, seconds: int) -> SessionActionResult:
        if mode not in MODES:
            self._logger.warning("Rejected duration for unknown mode: %r", mode)
            return self._rejected(ACTION_SET_DURATION, REASON_INVALID_MODE)

        try:
            value = self._validate_duration(seconds)
        except InvalidDuration as error:
            self._logger.warning("Rejected %s duration: %s", mode, error)
            return self._rejected(ACTION_SET_DURATION, REASON_INVALID_DURATION)

        if mode == MODE_WORK:
            self._work_duration_seconds = value
        else:
            self._break_duration_seconds = value

        # A running countdown keeps going; the new value applies on the
        # next reset or mode switch.
        if not self._is_running:
            self._remaining_seconds = self._duration_for(self._mode)

        self._logger.info("Session %s duration set to %ss", mode, value)
        return self._accepted(ACTION_SET_DURATION, REASON_DURATION_UPDATED)

    def tick(self) -> Optional[SessionTick]:
        if not self._is_running:
            return None

        self._remaining_seconds -= 1
        ended: Optional[SessionEnded] = None
        if self._remaining_seconds <= 0:
            previous_mode = self._mode
            self._mode = other_mode(previous_mode)
            self._remaining_seconds = self._duration_for(self._mode)
            self._logger.info(
                "Session ended: %s -> %s (%ss)",
                previous_mode,
                self._mode,
                self._remaining_seconds,
            )
            ended = SessionEnded(previous_mode=previous_mode, snapshot=self.snapshot())
            for listener in tuple(self._ended_listeners):
                self._call_listener(listener, ended)

        snapshot = self._notify()
        return SessionTick(
            snapshot=snapshot,
            ended_mode=ended.previous_mode if ended else None,
        )

    def _validate_duration(self, seconds: object) -> int:
        if isinstance(seconds, bool) or not isinstance(seconds, int):
            raise InvalidDuration(f"duration must be an integer, got: {seconds!r}")
        if seconds <= 0:
            raise InvalidDuration(f"duration must be positive, got: {seconds}")
        if self._allowed_durations is not None and seconds not in self._allowed_durations:
            allowed = ", ".join(str(value) for value in sorted(self._allowed_durations))
            raise InvalidDuration(f"{seconds} is not one of: {allowed}")
        return seconds

    def _duration_for(self, mode: SessionMode) -> int:
        if mode == MODE_WORK:
            return self._work_duration_seconds
        return self._break_duration_seconds

    def _accepted(self, action: SessionAction, reason: str) -> SessionActionResult:
        snapshot = self._notify()
        return SessionActionResult(
            action=action,
            accepted=True,
            reason=reason,
            snapshot=snapshot,
        )

    def _rejected(self, action: SessionAction, reason: str) -> SessionActionResult:
        return SessionActionResult(
            action=action,
            accepted=False,
            reason=reason,
            snapshot=self.snapshot(),
        )

    def _notify(self) -> SessionSnapshot:
        snapshot = self.snapshot()
        for listener in tuple(self._listeners):
            self._call_listener(listener, snapshot)
        return snapshot

    def _call_listener(self, listener: Callable[[object], None], payload: object) -> None:
        try:
            listener(payload)
        except Exception as error:
            self._logger.error("Session listener failed: %s", error, exc_info=True)
