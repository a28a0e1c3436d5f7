"""Runtime orchestration loop that serializes page commands and ticks."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from queue import Empty, SimpleQueue
from typing import Any, Callable, Mapping, Optional

from pomodoro_countdown.pomodoro import SessionActionResult, SessionController, SessionEnded
from pomodoro_countdown.pomodoro.constants import ACTION_SYNC, REASON_STARTUP

from .commands import CommandError, apply_command, parse_command
from .scheduler import TickScheduler
from .ticks import TickDependencies, TickProcessor
from .ui import RuntimeUIPublisher, UIServerLike

_STOP = object()


@dataclass(frozen=True)
class RuntimeBootstrap:
    """Dependency bundle required to construct the runtime engine."""
    logger: logging.Logger
    controller: SessionController
    scheduler: TickScheduler
    ui_server: Optional[UIServerLike] = None
    on_session_ended: Optional[Callable[[SessionEnded], None]] = None


class RuntimeEngine:
    """Single thread of control for all session mutation.

    Commands may be submitted from any thread (the websocket server runs
    its own loop); they are queued and applied here in arrival order,
    interleaved with the ticks the scheduler reports as due.
    """

    def __init__(self, bootstrap: RuntimeBootstrap):
        self._bootstrap = bootstrap
        self._logger = bootstrap.logger
        self._controller = bootstrap.controller
        self._scheduler = bootstrap.scheduler

        self._ui = RuntimeUIPublisher(
            bootstrap.ui_server,
            allowed_durations=self._controller.allowed_durations,
        )
        self._tick_processor = TickProcessor(
            TickDependencies(
                logger=self._logger,
                ui=self._ui,
                on_session_ended=bootstrap.on_session_ended,
            )
        )
        self._tick_processor.attach(self._controller)

        self._commands: SimpleQueue[Any] = SimpleQueue()
        self._stop_requested = threading.Event()

    @property
    def controller(self) -> SessionController:
        return self._controller

    def submit(self, payload: Mapping[str, Any]) -> None:
        self._commands.put(payload)

    def stop(self) -> None:
        # Safe from a signal handler: SimpleQueue.put is reentrant.
        self._stop_requested.set()
        self._commands.put(_STOP)

    def run(self) -> int:
        self._publish_startup_sync()
        self._scheduler.start()
        self._logger.info(
            "Timer ready: tick every %.1fs",
            self._scheduler.interval_seconds,
        )

        while not self._stop_requested.is_set():
            self.run_once()

        self._logger.info("Runtime loop stopped")
        return 0

    def run_once(self, timeout: Optional[float] = None) -> int:
        """Handle at most one queued command, then every due tick.

        Returns the number of ticks applied.
        """
        wait = self._scheduler.seconds_until_next() if timeout is None else timeout
        try:
            item = self._commands.get(timeout=wait)
        except Empty:
            item = None

        if item is not None and item is not _STOP:
            self.handle_command(item)

        due = self._scheduler.pop_due()
        for _ in range(due):
            self._controller.tick()
        return due

    def handle_command(self, payload: Mapping[str, Any]) -> Optional[SessionActionResult]:
        try:
            command = parse_command(payload)
        except CommandError as error:
            self._logger.warning("Ignoring UI command: %s", error)
            self._ui.publish_error(str(error))
            return None

        result = apply_command(self._controller, command)
        if not result.accepted:
            # Re-render so the page drops the rejected selector value.
            self._ui.publish_session(
                result.snapshot,
                action=result.action,
                accepted=False,
                reason=result.reason,
            )
        return result

    def _publish_startup_sync(self) -> None:
        self._ui.publish_session(
            self._controller.snapshot(),
            action=ACTION_SYNC,
            accepted=True,
            reason=REASON_STARTUP,
        )
