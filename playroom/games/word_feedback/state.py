"""
Word Feedback State - attempt rows and the hidden target.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum

from ...engine_core.state import GameStatus, Phase, PublicState, Variant  # noqa: F401 (inherited field types)


class LetterColor(str, Enum):
    EXACT = "EXACT"  # Right letter, right place
    PARTIAL = "PARTIAL"  # In the word, elsewhere
    ABSENT = "ABSENT"


@dataclass
class LetterResult:
    letter: str
    color: LetterColor


@dataclass
class FeedbackRow:
    player_id: str
    guess: str
    letters: list[LetterResult] = field(default_factory=list)

    @property
    def solved(self) -> bool:
        return bool(self.letters) and all(r.color == LetterColor.EXACT for r in self.letters)


@dataclass
class WordFeedbackState(PublicState):
    """
    Only the target's length and first letter are public.

    final_word is filled in when the game ends, never before.
    """
    word_length: int = 0
    first_letter: str = ""
    max_attempts: int = 6
    attempts: list[FeedbackRow] = field(default_factory=list)
    final_word: str | None = None

    @property
    def attempts_left(self) -> int:
        return max(0, self.max_attempts - len(self.attempts))


@dataclass
class WordFeedbackSecrets:
    target: str = ""
