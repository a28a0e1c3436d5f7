"""Change handlers that render session updates and session-ended notices."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from pomodoro_countdown.pomodoro import SessionController, SessionEnded, SessionSnapshot

from .messages import session_ended_text, session_status_message
from .ui import RuntimeUIPublisher


@dataclass(frozen=True)
class TickDependencies:
    """Dependencies required for rendering controller notifications."""
    logger: logging.Logger
    ui: RuntimeUIPublisher
    on_session_ended: Optional[Callable[[SessionEnded], None]] = None


class TickProcessor:
    """Subscribes to a controller and forwards its notifications to the page."""
    def __init__(self, dependencies: TickDependencies):
        self._dependencies = dependencies

    def attach(self, controller: SessionController) -> None:
        controller.add_session_ended_listener(self.handle_session_ended)
        controller.add_listener(self.handle_change)

    def handle_change(self, snapshot: SessionSnapshot) -> None:
        deps = self._dependencies
        deps.logger.debug("Session update: %s", session_status_message(snapshot))
        deps.ui.publish_session(snapshot)

    def handle_session_ended(self, event: SessionEnded) -> None:
        deps = self._dependencies
        deps.logger.info(session_ended_text(event.previous_mode))
        deps.ui.publish_session_ended(event.previous_mode, event.snapshot)
        if deps.on_session_ended is not None:
            deps.on_session_ended(event)
