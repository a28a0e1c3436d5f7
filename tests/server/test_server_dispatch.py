import json
import tempfile
import unittest
from pathlib import Path

from pomodoro_countdown.server import UIServer, UIServerConfig


class UIServerDispatchTests(unittest.TestCase):
    def setUp(self) -> None:
        self._temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self._temp_dir.cleanup)
        index = Path(self._temp_dir.name) / "index.html"
        index.write_text("<html></html>", encoding="utf-8")
        self.received: list[dict[str, object]] = []
        self.server = UIServer(
            UIServerConfig(index_file=str(index)),
            command_sink=self.received.append,
        )

    def test_json_object_is_forwarded_to_sink(self) -> None:
        error = self.server.dispatch_message('{"command": "toggle"}')

        self.assertIsNone(error)
        self.assertEqual([{"command": "toggle"}], self.received)

    def test_invalid_frames_return_error_text(self) -> None:
        self.assertIsNotNone(self.server.dispatch_message("not json"))
        self.assertIsNotNone(self.server.dispatch_message("[1, 2]"))
        self.assertEqual([], self.received)

    def test_missing_sink_drops_command(self) -> None:
        self.server.set_command_sink(None)
        with self.assertLogs("ui_server", level="WARNING"):
            self.assertIsNone(self.server.dispatch_message('{"command": "reset"}'))

    def test_publish_before_start_is_remembered_for_replay(self) -> None:
        self.assertFalse(self.server.is_running)

        self.server.publish("session", mode="work", remaining_seconds=10)
        self.server.publish("session_ended", previous_mode="work")

        replay = self.server._sticky_events.replay()
        self.assertEqual(1, len(replay))
        self.assertEqual("session", json.loads(replay[0])["type"])


if __name__ == "__main__":
    unittest.main()
