"""Exceptions raised by the data layer."""

from __future__ import annotations


class MoodMusicError(Exception):
    """Base class for all data-layer failures."""


class ConnectivityError(MoodMusicError):
    """The database file could not be opened or kept alive."""


class RetryInterrupted(ConnectivityError):
    """A retry sleep was interrupted; the operation is abandoned."""


class InitializationError(MoodMusicError):
    """Schema creation or seeding failed after all attempts. Fatal to startup."""


class RepositoryError(MoodMusicError):
    """A write did not have the expected effect (e.g. no generated id)."""


class ValidationError(MoodMusicError, ValueError):
    """Input rejected before reaching storage (empty field, unknown mood, ...)."""


class SongNotFound(RepositoryError):
    def __init__(self, song_id: int) -> None:
        super().__init__(f"No song with id {song_id}")
        self.song_id = song_id


class DuplicateUsername(ValidationError):
    def __init__(self, username: str) -> None:
        super().__init__(f"Username already exists: {username}")
        self.username = username


class InvalidCredentials(MoodMusicError):
    def __init__(self) -> None:
        super().__init__("Invalid username or password")


class MediaNotFound(MoodMusicError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Media file not found: {path}")
        self.path = path
