import datetime as dt
import json
import unittest

from pomodoro_countdown.server.events import StickyEventStore, make_event


class ServerEventsTests(unittest.TestCase):
    def test_make_event_serializes_timestamp_and_payload(self) -> None:
        now = dt.datetime(2026, 10, 19, 10, 0, tzinfo=dt.timezone.utc)
        raw = make_event("session", now_fn=lambda: now, mode="work", display="00:10")
        payload = json.loads(raw)

        self.assertEqual("session", payload["type"])
        self.assertEqual(now.isoformat(), payload["timestamp"])
        self.assertEqual("work", payload["mode"])
        self.assertEqual("00:10", payload["display"])

    def test_sticky_store_ignores_transient_events(self) -> None:
        store = StickyEventStore()
        self.assertFalse(store.remember("hello", '{"type":"hello"}'))
        self.assertFalse(store.remember("session_ended", '{"type":"session_ended"}'))
        self.assertEqual([], store.replay())

    def test_sticky_store_keeps_latest_session(self) -> None:
        store = StickyEventStore()
        self.assertTrue(store.remember("session", '{"type":"session","remaining_seconds":10}'))
        store.remember("session", '{"type":"session","remaining_seconds":9}')

        replay = store.replay()
        self.assertEqual(1, len(replay))
        self.assertEqual(9, json.loads(replay[0])["remaining_seconds"])

    def test_sticky_store_follows_configured_order(self) -> None:
        store = StickyEventStore(sticky_types=("session", "error"))
        store.remember("error", '{"type":"error"}')
        store.remember("session", '{"type":"session"}')

        decoded_types = [json.loads(item)["type"] for item in store.replay()]
        self.assertEqual(["session", "error"], decoded_types)


if __name__ == "__main__":
    unittest.main()
