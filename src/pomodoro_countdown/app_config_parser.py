"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from pomodoro_countdown.app_config_schema import (
    AppConfig,
    AppConfigurationError,
    LoggingSettings,
    TimerSettings,
    UIServerSettings,
)

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    timer = _parse_timer_settings(_section(raw, "timer"))
    ui_server = _parse_ui_server_settings(_section(raw, "ui_server"), base_dir=base_dir)
    logging_settings = _parse_logging_settings(_section(raw, "logging"))

    return AppConfig(
        timer=timer,
        ui_server=ui_server,
        logging=logging_settings,
        source_file=source_file,
    )


def _parse_timer_settings(section: Mapping[str, Any]) -> TimerSettings:
    defaults = TimerSettings()
    allowed = _as_int_tuple(
        section.get("allowed_durations", list(defaults.allowed_durations)),
        "timer.allowed_durations",
    )
    for value in allowed:
        if value <= 0:
            raise AppConfigurationError(
                f"timer.allowed_durations must contain positive integers, got: {value}"
            )

    work = _as_int(
        section.get("work_duration_seconds", defaults.work_duration_seconds),
        "timer.work_duration_seconds",
    )
    break_ = _as_int(
        section.get("break_duration_seconds", defaults.break_duration_seconds),
        "timer.break_duration_seconds",
    )
    for name, value in (
        ("timer.work_duration_seconds", work),
        ("timer.break_duration_seconds", break_),
    ):
        if value <= 0:
            raise AppConfigurationError(f"{name} must be greater than zero.")
        if allowed and value not in allowed:
            raise AppConfigurationError(
                f"{name}={value} is not listed in timer.allowed_durations."
            )

    interval = _as_float(
        section.get("tick_interval_seconds", defaults.tick_interval_seconds),
        "timer.tick_interval_seconds",
    )
    if interval <= 0:
        raise AppConfigurationError("timer.tick_interval_seconds must be greater than zero.")

    return TimerSettings(
        work_duration_seconds=work,
        break_duration_seconds=break_,
        allowed_durations=allowed,
        tick_interval_seconds=interval,
        autostart=_as_bool(section.get("autostart", defaults.autostart), "timer.autostart"),
    )


def _parse_ui_server_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> UIServerSettings:
    index_file = _as_str(section.get("index_file", ""), "ui_server.index_file")
    return UIServerSettings(
        enabled=_as_bool(section.get("enabled", True), "ui_server.enabled"),
        host=_as_str(section.get("host", "127.0.0.1"), "ui_server.host"),
        port=_as_int(section.get("port", 8765), "ui_server.port"),
        index_file=_resolve_path(base_dir, index_file) if index_file else "",
    )


def _parse_logging_settings(section: Mapping[str, Any]) -> LoggingSettings:
    level = _as_str(section.get("level", "INFO"), "logging.level").upper()
    if level not in _LOG_LEVELS:
        allowed = ", ".join(_LOG_LEVELS)
        raise AppConfigurationError(f"logging.level must be one of: {allowed}")
    return LoggingSettings(level=level)


def log_level(settings: LoggingSettings) -> int:
    return logging.getLevelName(settings.level)


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip(), 10)
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _as_int_tuple(value: Any, field: str) -> tuple[int, ...]:
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        raise AppConfigurationError(f"{field} must be an array of integers.")
    items = [_as_int(item, f"{field}[{index}]") for index, item in enumerate(value)]
    return tuple(sorted(set(items)))


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be a float.")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be a float.") from error
    raise AppConfigurationError(f"{field} must be a float.")


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)
