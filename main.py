#!/usr/bin/env python3
"""
Mood Music — entry point. Brings the data layer up and prints the library by mood,
honouring the last mood filter and playlist saved in preferences.
"""

import sys
from pathlib import Path

# Allow running from repo root without installing package
sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from mood_music.db import get_all_playlist_names, list_songs
from mood_music.errors import MediaNotFound
from mood_music.logging_setup import setup_logging
from mood_music.moods import MOODS, is_all_moods, mood_label
from mood_music.services.app_state import AppState
from mood_music.services.media import resolve_media_source
from mood_music.services.preferences import get_last_mood_filter, get_last_playlist, get_log_level


def _media_status(path: str) -> str:
    try:
        return "" if resolve_media_source(path) else "  (no media)"
    except MediaNotFound:
        return "  (missing media)"


def main() -> None:
    setup_logging(get_log_level(), console=False)
    mood_filter = get_last_mood_filter()
    moods = MOODS if is_all_moods(mood_filter) else [mood_filter]
    with AppState() as state:
        for mood in moods:
            songs = list_songs(state.db, mood)
            print(f"{mood_label(mood)}: {len(songs)}")
            for s in songs:
                print(f"    {s.id:>4}  {s.title} by {s.artist}{_media_status(s.path)}")
        last = get_last_playlist()
        names = [f"{n} *" if n == last else n for n in get_all_playlist_names(state.db)]
        print(f"Playlists: {', '.join(names) if names else '(none)'}")


if __name__ == "__main__":
    main()
