from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import threading
from pathlib import Path
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

import websockets
from websockets.asyncio.server import ServerConnection, serve
from websockets.datastructures import Headers
from websockets.http11 import Request, Response

from pomodoro_countdown.contracts.ui_protocol import EVENT_ERROR, EVENT_HELLO

from .config import HEALTHZ_PATH, INDEX_PATH, ROOT_PATH, UIServerConfig
from .events import StickyEventStore, make_event
from .static_files import guess_content_type, resolve_static_file

CommandSink = Callable[[dict[str, Any]], None]


class UIServer:
    """Threaded asyncio server for the static timer page + websocket events.

    Outbound events may be published from any thread. Inbound page
    commands are decoded here and handed to ``command_sink`` untouched;
    the server never mutates session state itself.
    """

    def __init__(
        self,
        config: UIServerConfig,
        *,
        command_sink: Optional[CommandSink] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._command_sink = command_sink
        self._logger = logger or logging.getLogger("ui_server")
        self._thread: Optional[threading.Thread] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._stop_async: Optional[asyncio.Event] = None
        self._started = threading.Event()
        self._startup_error: Optional[Exception] = None
        self._connected_clients: set[ServerConnection] = set()
        self._sticky_events = StickyEventStore()
        self._index_html = Path(self._config.index_file).read_bytes()

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def port(self) -> int:
        return self._config.port

    @property
    def websocket_path(self) -> str:
        return self._config.websocket_path

    @property
    def is_running(self) -> bool:
        return (
            self._thread is not None
            and self._thread.is_alive()
            and self._startup_error is None
        )

    def set_command_sink(self, command_sink: Optional[CommandSink]) -> None:
        self._command_sink = command_sink

    def start(self, timeout_seconds: float = 5.0) -> None:
        if self.is_running:
            self._logger.warning("UI server is already running")
            return

        self._startup_error = None
        self._started.clear()
        self._thread = threading.Thread(
            target=self._run_loop,
            daemon=True,
            name="ui-server",
        )
        self._thread.start()

        if not self._started.wait(timeout_seconds):
            raise RuntimeError(
                f"UI server did not start within {timeout_seconds:.1f}s"
            )

        if self._startup_error is not None:
            raise RuntimeError(f"UI server startup failed: {self._startup_error}")

    def stop(self, timeout_seconds: float = 5.0) -> None:
        if self._thread is None:
            return

        if self._loop and self._stop_async:
            self._loop.call_soon_threadsafe(self._stop_async.set)

        self._thread.join(timeout=timeout_seconds)
        if self._thread.is_alive():
            self._logger.error(
                "UI server thread did not stop within %.1fs",
                timeout_seconds,
            )

        self._thread = None
        self._loop = None
        self._stop_async = None

    def publish(self, event_type: str, **payload: Any) -> None:
        message = make_event(event_type, **payload)
        self._sticky_events.remember(event_type, message)

        if not self.is_running or self._loop is None:
            return

        try:
            future = asyncio.run_coroutine_threadsafe(
                self._broadcast(message),
                self._loop,
            )
            future.add_done_callback(self._consume_future_exception)
        except RuntimeError:
            # Loop may be shutting down.
            return

    @staticmethod
    def _consume_future_exception(future) -> None:
        with contextlib.suppress(Exception):
            future.result()

    def _run_loop(self) -> None:
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)
        self._stop_async = asyncio.Event()

        try:
            self._loop.run_until_complete(self._serve())
        except Exception as error:  # pragma: no cover - needs a bound port
            self._startup_error = error
            self._logger.error("UI server failed: %s", error, exc_info=True)
            self._started.set()
        finally:
            if self._loop is not None:
                pending = asyncio.all_tasks(self._loop)
                for task in pending:
                    task.cancel()
                with contextlib.suppress(Exception):
                    self._loop.run_until_complete(
                        asyncio.gather(*pending, return_exceptions=True)
                    )
                self._loop.close()

    async def _serve(self) -> None:
        async with serve(
            self._handler,
            host=self._config.host,
            port=self._config.port,
            process_request=self._process_request,
            logger=self._logger,
        ):
            self._logger.info(
                "UI server running at http://%s:%d (websocket: %s)",
                self._config.host,
                self._config.port,
                self._config.websocket_path,
            )
            self._started.set()
            await self._stop_async.wait()
            await self._close_clients()

    async def _handler(self, websocket: ServerConnection) -> None:
        request_path = (
            urlsplit(websocket.request.path).path
            if websocket.request is not None
            else ""
        )
        if request_path != self._config.websocket_path:
            await websocket.close(code=1008, reason="Invalid websocket path")
            return

        self._connected_clients.add(websocket)
        self._logger.info("Client connected: %s", websocket.remote_address)
        try:
            await websocket.send(
                make_event(EVENT_HELLO, message="Timer websocket connected")
            )
            for message in self._sticky_events.replay():
                await websocket.send(message)
            async for message in websocket:
                error = self.dispatch_message(message)
                if error:
                    await websocket.send(make_event(EVENT_ERROR, message=error))
        except websockets.exceptions.ConnectionClosed:
            self._logger.info("Client disconnected: %s", websocket.remote_address)
        finally:
            self._connected_clients.discard(websocket)

    def dispatch_message(self, message: str | bytes) -> Optional[str]:
        """Decode one inbound frame and forward it; return an error text on failure."""
        self._logger.debug("Received from UI: %s", message)
        try:
            payload = json.loads(message)
        except (TypeError, ValueError):
            return "Command must be a JSON object"
        if not isinstance(payload, dict):
            return "Command must be a JSON object"

        if self._command_sink is None:
            self._logger.warning("Dropping UI command, no command sink: %s", payload)
            return None
        self._command_sink(payload)
        return None

    async def _process_request(
        self,
        connection: ServerConnection,
        request: Request,
    ) -> Response | None:
        del connection  # Unused in static routing.
        path = urlsplit(request.path).path

        if path == self._config.websocket_path:
            return None

        if path in (ROOT_PATH, INDEX_PATH):
            return self._response(
                200,
                "OK",
                self._index_html,
                "text/html; charset=utf-8",
            )

        if path == HEALTHZ_PATH:
            return self._response(
                200,
                "OK",
                b"ok\n",
                "text/plain; charset=utf-8",
            )

        static_file = resolve_static_file(self._config.ui_root, path)
        if static_file is not None:
            return self._response(
                200,
                "OK",
                static_file.read_bytes(),
                guess_content_type(static_file),
            )

        return self._response(
            404,
            "Not Found",
            b"not found\n",
            "text/plain; charset=utf-8",
        )

    def _response(
        self,
        status_code: int,
        reason_phrase: str,
        body: bytes,
        content_type: str,
    ) -> Response:
        headers = Headers()
        headers["Content-Type"] = content_type
        headers["Content-Length"] = str(len(body))
        headers["Cache-Control"] = "no-store"
        return Response(status_code, reason_phrase, headers, body)

    async def _close_clients(self) -> None:
        if not self._connected_clients:
            return

        tasks = [
            client.close(code=1001, reason="Server shutting down")
            for client in tuple(self._connected_clients)
        ]
        await asyncio.gather(*tasks, return_exceptions=True)
        self._connected_clients.clear()

    async def _broadcast(self, message: str) -> None:
        if not self._connected_clients:
            return

        clients = tuple(self._connected_clients)
        disconnected = []
        tasks = [client.send(message) for client in clients]
        results = await asyncio.gather(*tasks, return_exceptions=True)
        for client, result in zip(clients, results):
            if isinstance(result, Exception):
                disconnected.append(client)
                self._logger.warning("Failed to send message to client: %s", result)

        for client in disconnected:
            self._connected_clients.discard(client)
