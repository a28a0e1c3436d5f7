"""Decoding of page commands and routing onto the session controller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from pomodoro_countdown.contracts.ui_protocol import (
    COMMAND_RESET,
    COMMAND_SET_DURATION,
    COMMAND_TOGGLE,
    COMMANDS,
)
from pomodoro_countdown.pomodoro import SessionActionResult, SessionController


class CommandError(ValueError):
    """Raised when an inbound command payload is malformed."""


@dataclass(frozen=True)
class UserCommand:
    """A validated input-surface gesture."""
    name: str
    mode: Optional[str] = None
    seconds: Any = None


def parse_command(payload: Mapping[str, Any]) -> UserCommand:
    """Validate the shape of a page command.

    Duration values are passed through as received; range checks belong
    to the controller so that a bad value becomes a rejected action
    rather than a protocol error.
    """
    name = payload.get("command")
    if not isinstance(name, str) or not name.strip():
        raise CommandError("Command payload requires a 'command' string")

    name = name.strip().lower()
    if name not in COMMANDS:
        raise CommandError(f"Unsupported command: {name}")

    if name != COMMAND_SET_DURATION:
        return UserCommand(name=name)

    mode = payload.get("mode")
    if not isinstance(mode, str) or not mode.strip():
        raise CommandError("set_duration requires a 'mode' string")
    if "seconds" not in payload:
        raise CommandError("set_duration requires 'seconds'")
    return UserCommand(
        name=name,
        mode=mode.strip().lower(),
        seconds=payload["seconds"],
    )


def coerce_seconds(value: Any) -> Any:
    """Turn selector values such as ``"15"`` into integers when possible."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text, 10)
        except ValueError:
            return value
    return value


def apply_command(
    controller: SessionController,
    command: UserCommand,
) -> SessionActionResult:
    if command.name == COMMAND_TOGGLE:
        return controller.toggle_run()
    if command.name == COMMAND_RESET:
        return controller.reset()
    if command.name == COMMAND_SET_DURATION:
        return controller.set_duration(command.mode or "", coerce_seconds(command.seconds))
    raise CommandError(f"Unsupported command: {command.name}")
