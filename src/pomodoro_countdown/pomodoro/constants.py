"""Mode, action, and reason constants used by the session state machine."""

from __future__ import annotations

MODE_WORK = "work"
MODE_BREAK = "break"

MODES: tuple[str, ...] = (MODE_WORK, MODE_BREAK)

DEFAULT_WORK_DURATION_SECONDS = 10
DEFAULT_BREAK_DURATION_SECONDS = 5
DEFAULT_ALLOWED_DURATIONS: frozenset[int] = frozenset({5, 10, 15, 20})

ACTION_TOGGLE = "toggle"
ACTION_RESET = "reset"
ACTION_SET_DURATION = "set_duration"

ACTION_SYNC = "sync"

REASON_STARTED = "started"
REASON_PAUSED = "paused"
REASON_RESET = "reset"
REASON_DURATION_UPDATED = "duration_updated"
REASON_INVALID_DURATION = "invalid_duration"
REASON_INVALID_MODE = "invalid_mode"

REASON_STARTUP = "startup"
