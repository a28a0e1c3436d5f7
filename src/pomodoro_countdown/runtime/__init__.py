"""Runtime engine exports."""

from .commands import CommandError, UserCommand, apply_command, parse_command
from .loop import RuntimeBootstrap, RuntimeEngine
from .scheduler import TickScheduler

__all__ = [
    "CommandError",
    "RuntimeBootstrap",
    "RuntimeEngine",
    "TickScheduler",
    "UserCommand",
    "apply_command",
    "parse_command",
]
