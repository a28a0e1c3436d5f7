"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_CONFIG_FILE = "config.toml"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class TimerSettings:
    """Session durations and tick cadence from `[timer]`."""
    work_duration_seconds: int = 10
    break_duration_seconds: int = 5
    allowed_durations: tuple[int, ...] = field(default=(5, 10, 15, 20))
    tick_interval_seconds: float = 1.0
    autostart: bool = False


@dataclass(frozen=True)
class UIServerSettings:
    """Built-in UI server settings from `[ui_server]`."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    index_file: str = ""


@dataclass(frozen=True)
class LoggingSettings:
    """Root logger settings from `[logging]`."""
    level: str = "INFO"


@dataclass(frozen=True)
class AppConfig:
    timer: TimerSettings
    ui_server: UIServerSettings
    logging: LoggingSettings
    source_file: str
