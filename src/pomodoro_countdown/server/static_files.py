"""Static asset lookup for the timer page (path safety and content types)."""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Optional

_TEXT_TYPES = {
    "application/javascript",
    "application/json",
    "image/svg+xml",
}


def resolve_static_file(ui_root: Path, request_path: str) -> Optional[Path]:
    """Return the asset for `request_path` if it lives inside `ui_root`."""
    relative = request_path.lstrip("/")
    if not relative:
        return None

    # Dotfiles (editor swap files, .DS_Store, ...) are never served.
    if any(part.startswith(".") for part in Path(relative).parts):
        return None

    root = ui_root.resolve()
    candidate = (root / relative).resolve()
    if root not in candidate.parents or not candidate.is_file():
        return None
    return candidate


def guess_content_type(path: Path) -> str:
    """Guess a content type, adding a UTF-8 charset for text payloads."""
    mime_type, _ = mimetypes.guess_type(str(path))
    if not mime_type:
        return "application/octet-stream"
    if mime_type.startswith("text/") or mime_type in _TEXT_TYPES:
        return f"{mime_type}; charset=utf-8"
    return mime_type
