"""
Game State - Shared scaffolding for every variant's public state.

Design principles:
- Broadcastable: public state never holds a secret value, only its
  shape, length or already-revealed parts
- Secrets live in a separate per-variant store owned by the host
- Serializable: every public state round-trips through plain dicts
- Turn cursor is always a valid index into player_ids
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum


TIE = "TIE"


class Variant(str, Enum):
    """The game variants hosted by the engine."""
    DIGIT_DUEL = "DIGIT_DUEL"
    WORD_FEEDBACK = "WORD_FEEDBACK"
    WORD_CHAIN = "WORD_CHAIN"
    HANGMAN = "HANGMAN"
    NAVAL = "NAVAL"
    MR_WHITE = "MR_WHITE"


class Phase(str, Enum):
    """Phases across all variants. Each variant uses a subset."""
    SETUP = "SETUP"
    PLAY = "PLAY"

    # Social deduction
    CLUES = "CLUES"
    DISCUSSION = "DISCUSSION"
    VOTING = "VOTING"
    LAST_GUESS = "LAST_GUESS"

    ENDED = "ENDED"


class GameStatus(str, Enum):
    PLAYING = "PLAYING"
    ENDED = "ENDED"


@dataclass
class PublicState:
    """
    Fields common to every variant.

    Variant states extend this; all their fields need defaults so the
    dataclass hierarchy stays valid.
    """
    variant: Variant
    player_ids: list[str]
    phase: Phase
    status: GameStatus = GameStatus.PLAYING
    winner: str | None = None
    current_player_index: int = 0

    @property
    def current_player_id(self) -> str:
        return self.player_ids[self.current_player_index]

    @property
    def num_players(self) -> int:
        return len(self.player_ids)

    @property
    def is_over(self) -> bool:
        return self.status == GameStatus.ENDED

    def advance_turn(self) -> None:
        """Pass the turn to the next player in seating order."""
        self.current_player_index = (self.current_player_index + 1) % len(self.player_ids)

    def index_of(self, player_id: str) -> int:
        return self.player_ids.index(player_id)

    def opponent_of(self, player_id: str) -> str:
        """The other player in a two-player game."""
        return self.player_ids[1 - self.index_of(player_id)]


@dataclass
class SetupTracker:
    """All-submitted barrier for variants with a secret-submission phase."""
    submitted: dict[str, bool] = field(default_factory=dict)

    @classmethod
    def for_players(cls, player_ids: list[str]) -> SetupTracker:
        return cls(submitted={pid: False for pid in player_ids})

    def mark(self, player_id: str) -> None:
        self.submitted[player_id] = True

    def has_submitted(self, player_id: str) -> bool:
        return self.submitted.get(player_id, False)

    @property
    def complete(self) -> bool:
        return all(self.submitted.values())
