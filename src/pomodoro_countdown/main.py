import logging
import signal
import sys
from typing import Optional

from pomodoro_countdown.app_config import (
    AppConfigurationError,
    load_app_config,
    log_level,
    resolve_config_path,
)
from pomodoro_countdown.pomodoro import SessionController
from pomodoro_countdown.runtime import RuntimeBootstrap, RuntimeEngine, TickScheduler
from pomodoro_countdown.server import ServerConfigurationError, UIServer, UIServerConfig


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("pomodoro_app")


def setup_signal_handlers(engine: RuntimeEngine) -> None:
    """Set up graceful shutdown on SIGTERM and SIGINT."""

    def signal_handler(signum: int, frame) -> None:
        del frame
        logging.getLogger("pomodoro_app").info(
            "%s received, stopping...",
            signal.Signals(signum).name,
        )
        engine.stop()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


def main() -> int:
    """Run the pomodoro timer with its web UI until interrupted."""
    logger = setup_logging(level=logging.INFO)

    try:
        config_path = resolve_config_path()
        app_config = load_app_config(str(config_path))
        logger.info("Loaded runtime config: %s", config_path)
    except AppConfigurationError as error:
        logger.error("App configuration error: %s", error)
        return 1

    logging.getLogger().setLevel(log_level(app_config.logging))

    timer_settings = app_config.timer
    try:
        controller = SessionController(
            work_duration_seconds=timer_settings.work_duration_seconds,
            break_duration_seconds=timer_settings.break_duration_seconds,
            allowed_durations=timer_settings.allowed_durations,
            logger=logging.getLogger("pomodoro"),
        )
        scheduler = TickScheduler(
            interval_seconds=timer_settings.tick_interval_seconds,
            logger=logging.getLogger("runtime.scheduler"),
        )
    except ValueError as error:
        logger.error("Timer configuration error: %s", error)
        return 1

    ui_server: Optional[UIServer] = None
    if app_config.ui_server.enabled:
        try:
            ui_config = UIServerConfig.from_settings(app_config.ui_server)
        except ServerConfigurationError as error:
            logger.error("UI server configuration error: %s", error)
            return 1
        ui_server = UIServer(config=ui_config, logger=logging.getLogger("ui_server"))
    else:
        logger.info("UI server disabled; running headless")

    engine = RuntimeEngine(
        RuntimeBootstrap(
            logger=logging.getLogger("runtime"),
            controller=controller,
            scheduler=scheduler,
            ui_server=ui_server,
        )
    )
    setup_signal_handlers(engine)

    try:
        if ui_server:
            ui_server.set_command_sink(engine.submit)
            ui_server.start()
        if timer_settings.autostart:
            controller.toggle_run()
        return engine.run()

    except KeyboardInterrupt:
        logger.info("Shutting down...")
        return 0

    except Exception as error:
        logger.error("Unexpected error: %s", error, exc_info=True)
        return 1

    finally:
        if ui_server:
            logger.info("Stopping UI server...")
            try:
                ui_server.stop(timeout_seconds=5.0)
            except Exception as error:
                logger.error("Error stopping UI server: %s", error, exc_info=True)


if __name__ == "__main__":
    sys.exit(main())
