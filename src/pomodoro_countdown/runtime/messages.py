"""User-facing status and session-ended text."""

from __future__ import annotations

from pomodoro_countdown.pomodoro import SessionSnapshot
from pomodoro_countdown.pomodoro.constants import MODE_WORK

MODE_LABELS: dict[str, str] = {
    "work": "Work",
    "break": "Break",
}


def mode_label(mode: str) -> str:
    return MODE_LABELS.get(mode, mode.title())


def session_ended_text(previous_mode: str) -> str:
    """Return the toast text shown when a session runs out."""
    if previous_mode == MODE_WORK:
        return "Work session over, time for a break!"
    return "Break over, back to work!"


def session_status_message(snapshot: SessionSnapshot) -> str:
    """Build a one-line status such as ``Work 00:07 (running)``."""
    state = "running" if snapshot.is_running else "paused"
    return f"{mode_label(snapshot.mode)} {snapshot.display} ({state})"
