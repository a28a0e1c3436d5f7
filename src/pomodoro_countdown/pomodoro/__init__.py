from .service import (
    InvalidDuration,
    SessionAction,
    SessionActionResult,
    SessionController,
    SessionEnded,
    SessionMode,
    SessionSnapshot,
    SessionTick,
    format_mmss,
    other_mode,
)

__all__ = [
    "InvalidDuration",
    "SessionAction",
    "SessionActionResult",
    "SessionController",
    "SessionEnded",
    "SessionMode",
    "SessionSnapshot",
    "SessionTick",
    "format_mmss",
    "other_mode",
]
