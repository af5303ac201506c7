from .connection import ConnectionManager, RetryPolicy
from .schema import create_schema, seed_defaults, init_and_seed, SAMPLE_SONGS
from .song_repo import (
    SongRow,
    get_all_songs,
    get_songs_by_mood,
    list_songs,
    get_song,
    find_song_ids_by_mood,
    insert_song,
    update_song,
    delete_song,
    count_songs,
)
from .playlist_repo import (
    PLAYLIST_ERROR,
    PlaylistRow,
    MoodPlaylistResult,
    create_playlist,
    get_playlist,
    add_song_to_playlist,
    add_song_to_playlist_by_name,
    get_all_playlist_names,
    get_songs_for_playlist,
    count_playlist_songs,
    generate_mood_playlist,
)
from .user_repo import (
    UserRow,
    DEFAULT_ADMIN_USERNAME,
    DEFAULT_ADMIN_PASSWORD,
    hash_password,
    register,
    authenticate,
    user_exists,
)

__all__ = [
    "ConnectionManager",
    "RetryPolicy",
    "create_schema",
    "seed_defaults",
    "init_and_seed",
    "SAMPLE_SONGS",
    "SongRow",
    "get_all_songs",
    "get_songs_by_mood",
    "list_songs",
    "get_song",
    "find_song_ids_by_mood",
    "insert_song",
    "update_song",
    "delete_song",
    "count_songs",
    "PLAYLIST_ERROR",
    "PlaylistRow",
    "MoodPlaylistResult",
    "create_playlist",
    "get_playlist",
    "add_song_to_playlist",
    "add_song_to_playlist_by_name",
    "get_all_playlist_names",
    "get_songs_for_playlist",
    "count_playlist_songs",
    "generate_mood_playlist",
    "UserRow",
    "DEFAULT_ADMIN_USERNAME",
    "DEFAULT_ADMIN_PASSWORD",
    "hash_password",
    "register",
    "authenticate",
    "user_exists",
]
