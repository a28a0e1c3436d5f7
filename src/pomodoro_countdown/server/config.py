"""Configuration model for static UI and websocket server runtime."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class ServerConfigurationError(Exception):
    """Raised when UI server configuration is invalid."""


WEBSOCKET_PATH = "/ws"
ROOT_PATH = "/"
INDEX_PATH = "/index.html"
HEALTHZ_PATH = "/healthz"
_UI_INDEX_FILE = Path(__file__).resolve().parent / "web_ui" / "index.html"


def default_index_file() -> Path:
    return _UI_INDEX_FILE


@dataclass(frozen=True)
class UIServerConfig:
    """Validated UI server configuration derived from app settings."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    index_file: str = ""

    def __post_init__(self) -> None:
        if not self.host.strip():
            raise ServerConfigurationError("ui_server.host cannot be empty")

        if not 1 <= self.port <= 65535:
            raise ServerConfigurationError(
                f"ui_server.port must be in [1, 65535], got: {self.port}"
            )

        if self.enabled:
            if not self.index_file:
                raise ServerConfigurationError("ui_server.index_file cannot be empty")

            index_path = Path(self.index_file)
            if not index_path.exists():
                raise ServerConfigurationError(f"UI index file not found: {index_path}")
            if not index_path.is_file():
                raise ServerConfigurationError(
                    f"UI index path is not a file: {index_path}"
                )

    @property
    def websocket_path(self) -> str:
        return WEBSOCKET_PATH

    @property
    def ui_root(self) -> Path:
        return Path(self.index_file).resolve().parent

    @classmethod
    def from_settings(cls, settings) -> "UIServerConfig":
        index_file = settings.index_file.strip() if settings.index_file else ""
        if not index_file:
            index_file = str(default_index_file())
        return cls(
            enabled=bool(settings.enabled),
            host=settings.host,
            port=settings.port,
            index_file=index_file,
        )
