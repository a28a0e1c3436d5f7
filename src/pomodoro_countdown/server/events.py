"""Serialization of websocket events and the replay cache for late joiners."""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Iterable

from pomodoro_countdown.contracts.ui_protocol import STICKY_EVENT_ORDER


def make_event(
    event_type: str,
    *,
    now_fn: Callable[[], datetime] | None = None,
    **payload: Any,
) -> str:
    """Serialize an event payload with type and timestamp for websocket delivery."""
    now = now_fn() if now_fn is not None else datetime.now(timezone.utc)
    return json.dumps(
        {
            "type": event_type,
            "timestamp": now.isoformat(),
            **payload,
        }
    )


class StickyEventStore:
    """Keeps the latest message per sticky event type.

    A freshly connected page receives :meth:`replay` right after the
    hello event so it can render the current session without waiting
    for the next tick.
    """
    def __init__(self, sticky_types: Iterable[str] = STICKY_EVENT_ORDER):
        self._order = tuple(sticky_types)
        self._events: dict[str, str] = {}
        self._lock = threading.Lock()

    def remember(self, event_type: str, message: str) -> bool:
        if event_type not in self._order:
            return False
        with self._lock:
            self._events[event_type] = message
        return True

    def replay(self) -> list[str]:
        with self._lock:
            return [self._events[key] for key in self._order if key in self._events]
