"""
Game settings - the fixed, enumerated configuration per variant.

Callers hand over whatever dictionary their lobby holds; values outside
the allowed range fall back to the defaults rather than failing.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Mapping


DEFAULT_CHAIN_COUNT = 5
CHAIN_COUNT_RANGE = (3, 10)
SECRET_LENGTHS = (4, 5, 6)
DEFAULT_SECRET_LENGTH = 4
DEFAULT_MAX_ATTEMPTS = 6
DEFAULT_MAX_MISTAKES = 7
GRID_SIZE = 10
DEFAULT_TURN_SECONDS = 60
LANGUAGES = ("en", "fr")


@dataclass(frozen=True)
class GameSettings:
    chain_count: int = DEFAULT_CHAIN_COUNT
    secret_length: int = DEFAULT_SECRET_LENGTH
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    max_mistakes: int = DEFAULT_MAX_MISTAKES
    grid_size: int = GRID_SIZE
    turn_seconds: int = DEFAULT_TURN_SECONDS
    language: str = "en"

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> GameSettings:
        """Build settings from a caller dict, clamping unknown values to defaults."""
        raw = raw or {}

        chain_count = _as_int(raw.get("chain_count"), DEFAULT_CHAIN_COUNT)
        low, high = CHAIN_COUNT_RANGE
        if not low <= chain_count <= high:
            chain_count = DEFAULT_CHAIN_COUNT

        secret_length = _as_int(raw.get("secret_length"), DEFAULT_SECRET_LENGTH)
        if secret_length not in SECRET_LENGTHS:
            secret_length = DEFAULT_SECRET_LENGTH

        turn_seconds = _as_int(raw.get("turn_seconds"), DEFAULT_TURN_SECONDS)
        if turn_seconds <= 0:
            turn_seconds = DEFAULT_TURN_SECONDS

        language = raw.get("language", "en")
        if language not in LANGUAGES:
            language = "en"

        return cls(
            chain_count=chain_count,
            secret_length=secret_length,
            turn_seconds=turn_seconds,
            language=language,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "chain_count": self.chain_count,
            "secret_length": self.secret_length,
            "max_attempts": self.max_attempts,
            "max_mistakes": self.max_mistakes,
            "grid_size": self.grid_size,
            "turn_seconds": self.turn_seconds,
            "language": self.language,
        }


def _as_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
