import unittest

from pomodoro_countdown.pomodoro import SessionController
from pomodoro_countdown.runtime.commands import (
    CommandError,
    UserCommand,
    apply_command,
    coerce_seconds,
    parse_command,
)


class ParseCommandTests(unittest.TestCase):
    def test_parses_simple_commands(self) -> None:
        self.assertEqual(UserCommand(name="toggle"), parse_command({"command": "toggle"}))
        self.assertEqual(UserCommand(name="reset"), parse_command({"command": " Reset "}))

    def test_parses_set_duration(self) -> None:
        command = parse_command({"command": "set_duration", "mode": "Work", "seconds": "15"})
        self.assertEqual("set_duration", command.name)
        self.assertEqual("work", command.mode)
        self.assertEqual("15", command.seconds)

    def test_rejects_malformed_payloads(self) -> None:
        for payload in (
            {},
            {"command": 3},
            {"command": "  "},
            {"command": "skip"},
            {"command": "set_duration", "seconds": 10},
            {"command": "set_duration", "mode": "work"},
        ):
            with self.subTest(payload=payload):
                with self.assertRaises(CommandError):
                    parse_command(payload)


class CoerceSecondsTests(unittest.TestCase):
    def test_coerces_selector_values(self) -> None:
        self.assertEqual(15, coerce_seconds("15"))
        self.assertEqual(15, coerce_seconds(" 15 "))
        self.assertEqual(10, coerce_seconds(10.0))
        self.assertEqual(10, coerce_seconds(10))

    def test_leaves_unparseable_values_for_the_controller(self) -> None:
        self.assertEqual("ten", coerce_seconds("ten"))
        self.assertEqual(10.5, coerce_seconds(10.5))
        self.assertIs(True, coerce_seconds(True))
        self.assertIsNone(coerce_seconds(None))


class ApplyCommandTests(unittest.TestCase):
    def setUp(self) -> None:
        self.controller = SessionController(work_duration_seconds=10, break_duration_seconds=5)

    def test_toggle_and_reset_route_to_controller(self) -> None:
        result = apply_command(self.controller, UserCommand(name="toggle"))
        self.assertEqual("toggle", result.action)
        self.assertTrue(self.controller.snapshot().is_running)

        result = apply_command(self.controller, UserCommand(name="reset"))
        self.assertEqual("reset", result.action)
        self.assertFalse(self.controller.snapshot().is_running)

    def test_set_duration_accepts_string_value(self) -> None:
        result = apply_command(
            self.controller,
            UserCommand(name="set_duration", mode="work", seconds="20"),
        )
        self.assertTrue(result.accepted)
        self.assertEqual(20, self.controller.snapshot().remaining_seconds)

    def test_set_duration_rejects_value_outside_allowed_set(self) -> None:
        result = apply_command(
            self.controller,
            UserCommand(name="set_duration", mode="break", seconds="12"),
        )
        self.assertFalse(result.accepted)
        self.assertEqual("invalid_duration", result.reason)
        self.assertEqual(5, self.controller.snapshot().break_duration_seconds)

    def test_unknown_command_raises(self) -> None:
        with self.assertRaises(CommandError):
            apply_command(self.controller, UserCommand(name="skip"))


if __name__ == "__main__":
    unittest.main()
