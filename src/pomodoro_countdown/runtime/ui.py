from __future__ import annotations

from typing import Any, Iterable, Optional, Protocol

from pomodoro_countdown.contracts.ui_protocol import EVENT_ERROR, EVENT_SESSION, EVENT_SESSION_ENDED
from pomodoro_countdown.pomodoro import SessionSnapshot

from .messages import mode_label, session_ended_text


class UIServerLike(Protocol):
    def publish(self, event_type: str, **payload: Any) -> None:
        ...


class RuntimeUIPublisher:
    """Renders session snapshots into websocket events for the page."""
    def __init__(
        self,
        ui_server: Optional[UIServerLike],
        *,
        allowed_durations: Optional[Iterable[int]] = None,
    ):
        self._ui_server = ui_server
        self._allowed_durations = sorted(allowed_durations) if allowed_durations else []

    def publish(self, event_type: str, **payload: Any) -> None:
        if self._ui_server:
            self._ui_server.publish(event_type, **payload)

    def publish_session(
        self,
        snapshot: SessionSnapshot,
        *,
        action: str = "",
        accepted: Optional[bool] = None,
        reason: str = "",
    ) -> None:
        payload: dict[str, Any] = {
            "mode": snapshot.mode,
            "mode_label": mode_label(snapshot.mode),
            "remaining_seconds": snapshot.remaining_seconds,
            "display": snapshot.display,
            "is_running": snapshot.is_running,
            "work_duration_seconds": snapshot.work_duration_seconds,
            "break_duration_seconds": snapshot.break_duration_seconds,
            "allowed_durations": list(self._allowed_durations),
        }
        if action:
            payload["action"] = action
        if accepted is not None:
            payload["accepted"] = accepted
        if reason:
            payload["reason"] = reason
        self.publish(EVENT_SESSION, **payload)

    def publish_session_ended(
        self,
        previous_mode: str,
        snapshot: SessionSnapshot,
    ) -> None:
        self.publish(
            EVENT_SESSION_ENDED,
            previous_mode=previous_mode,
            mode=snapshot.mode,
            message=session_ended_text(previous_mode),
        )

    def publish_error(self, message: str) -> None:
        self.publish(EVENT_ERROR, message=message)
