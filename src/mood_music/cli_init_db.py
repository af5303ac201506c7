"""
Initialize the Mood Music database (schema, sample songs, default admin).
Run: python -m mood_music.cli_init_db  (or the mood-music-init-db script)
"""

from .db import count_songs, get_all_playlist_names
from .logging_setup import setup_logging
from .services.app_state import AppState
from .services.preferences import get_log_level


def main() -> None:
    setup_logging(get_log_level())
    with AppState() as state:
        print(f"Database path: {state.db.db_path}")
        print(f"Songs: {count_songs(state.db)}, playlists: {len(get_all_playlist_names(state.db))}")
    print("Schema created and defaults seeded.")


if __name__ == "__main__":
    main()
