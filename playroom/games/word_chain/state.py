"""
Word Chain State - masked word descriptors and the guess log.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ...engine_core.state import GameStatus, Phase, PublicState, SetupTracker, Variant  # noqa: F401 (inherited field types)


@dataclass
class ChainWord:
    """
    Public descriptor of one secret word.

    revealed_prefix grows one letter per missed guess; word is set only
    once the word has been guessed.
    """
    first_letter: str = ""
    length: int = 0
    revealed_prefix: str = ""
    word: str | None = None

    @property
    def revealed(self) -> bool:
        return self.word is not None


@dataclass
class ChainGuess:
    guesser_id: str
    target_id: str
    word: str
    correct: bool
    word_index: int | None = None


@dataclass
class WordChainState(PublicState):
    chain_count: int = 5
    setup: SetupTracker = field(default_factory=SetupTracker)
    theme_words: dict[str, str] = field(default_factory=dict)
    chains: dict[str, list[ChainWord]] = field(default_factory=dict)
    guess_history: list[ChainGuess] = field(default_factory=list)

    # Deadline bookkeeping; the caller enforces it
    turn_started_at: float | None = None
    turn_seconds: int = 60

    def unrevealed_count(self, player_id: str) -> int:
        return sum(1 for w in self.chains.get(player_id, []) if not w.revealed)

    def first_hidden_index(self, player_id: str) -> int | None:
        for i, w in enumerate(self.chains.get(player_id, [])):
            if not w.revealed:
                return i
        return None


@dataclass
class WordChainSecrets:
    words: dict[str, list[str]] = field(default_factory=dict)
