"""
Resolve a song's stored path into something a player can open. No decoding happens here.
"""

from __future__ import annotations

from pathlib import Path

from ..errors import MediaNotFound


def is_url(path: str) -> bool:
    return path.strip().lower().startswith(("http://", "https://"))


def resolve_media_source(path: str | None) -> str | None:
    """
    Empty path -> None (song has no media).
    http(s) URL -> URL with spaces encoded.
    Local path -> file:// URI; raises MediaNotFound if the file does not exist.
    """
    path = (path or "").strip()
    if not path:
        return None
    if is_url(path):
        return path.replace(" ", "%20")
    p = Path(path).expanduser()
    if not p.is_file():
        raise MediaNotFound(path)
    return p.resolve().as_uri()
