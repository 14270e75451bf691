"""
Hangman State - two alternating rounds over each player's word.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ...engine_core.state import GameStatus, Phase, PublicState, SetupTracker, Variant  # noqa: F401 (inherited field types)


HIDDEN = "_"


@dataclass
class HangmanState(PublicState):
    """
    Round 0: player_ids[1] guesses player_ids[0]'s word. Round 1 swaps.

    current_player_index always points at the round's guesser.
    """
    setup: SetupTracker = field(default_factory=SetupTracker)
    round_index: int = 0
    guessed_letters: list[str] = field(default_factory=list)
    mistakes: int = 0
    max_mistakes: int = 7
    word_length: int = 0
    revealed_word: str = ""
    round_winners: list[str | None] = field(default_factory=lambda: [None, None])

    @property
    def target_id(self) -> str:
        return self.player_ids[self.round_index]

    @property
    def guesser_id(self) -> str:
        return self.player_ids[1 - self.round_index]

    @property
    def mistakes_left(self) -> int:
        return max(0, self.max_mistakes - self.mistakes)


@dataclass
class HangmanSecrets:
    words: dict[str, str] = field(default_factory=dict)


def mask_word(word: str, guessed: list[str]) -> str:
    known = set(guessed)
    return "".join(c if c in known else HIDDEN for c in word)
