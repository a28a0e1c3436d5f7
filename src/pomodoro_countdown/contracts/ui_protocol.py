"""Web UI websocket event and command constants."""

from __future__ import annotations

# Websocket event types (server -> page)
EVENT_HELLO = "hello"
EVENT_SESSION = "session"
EVENT_SESSION_ENDED = "session_ended"
EVENT_ERROR = "error"

# Websocket command names (page -> server)
COMMAND_TOGGLE = "toggle"
COMMAND_RESET = "reset"
COMMAND_SET_DURATION = "set_duration"

COMMANDS: frozenset[str] = frozenset(
    {
        COMMAND_TOGGLE,
        COMMAND_RESET,
        COMMAND_SET_DURATION,
    }
)

STICKY_EVENT_TYPES: frozenset[str] = frozenset({EVENT_SESSION})

STICKY_EVENT_ORDER: tuple[str, ...] = (EVENT_SESSION,)
