"""
Mood vocabulary: the five fixed tags a song can carry, plus display helpers.
"""

from __future__ import annotations

from .errors import ValidationError

MOODS: tuple[str, ...] = ("Happy", "Sad", "Energetic", "Calm", "Focus")

# Pseudo-mood used by the library filter to mean "no filter".
ALL_MOODS = "All"

MOOD_EMOJIS: dict[str, str] = {
    "Happy": "\U0001F60A",
    "Sad": "\U0001F622",
    "Energetic": "⚡",
    "Calm": "\U0001F60C",
    "Focus": "\U0001F3AF",
}

_BY_LOWER = {m.lower(): m for m in MOODS}


def normalize_mood(value: str | None) -> str:
    """Canonical spelling of a mood ('happy ' -> 'Happy'). Raises ValidationError if empty or unknown."""
    key = (value or "").strip().lower()
    if not key:
        raise ValidationError("Mood must be selected")
    try:
        return _BY_LOWER[key]
    except KeyError:
        raise ValidationError(f"Unknown mood: {value!r} (expected one of {', '.join(MOODS)})") from None


def is_all_moods(value: str | None) -> bool:
    return value is None or value.strip().lower() == ALL_MOODS.lower()


def mood_label(mood: str) -> str:
    """Emoji-prefixed label for display, e.g. '😊 Happy'. Unknown moods are returned as-is."""
    emoji = MOOD_EMOJIS.get(mood)
    return f"{emoji} {mood}" if emoji else mood
