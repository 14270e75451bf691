"""
Mr White State - clue rounds, votes and eliminations.

The shared word and the Mr White role are secret until a vote catches
him or the game ends. Individual votes stay in the secret store until
the round's tally is published.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum

from ...engine_core.state import GameStatus, Phase, PublicState, Variant  # noqa: F401 (inherited field types)


MAX_CLUE_LENGTH = 40


class Side(str, Enum):
    MR_WHITE = "MR_WHITE"
    CIVILIANS = "CIVILIANS"


@dataclass
class Clue:
    player_id: str
    text: str
    round_number: int


@dataclass
class VoteTally:
    round_number: int
    votes: dict[str, str] = field(default_factory=dict)  # voter -> target
    counts: dict[str, int] = field(default_factory=dict)
    eliminated_id: str | None = None  # None on a tied vote


@dataclass
class MrWhiteState(PublicState):
    active_player_ids: list[str] = field(default_factory=list)
    eliminated_ids: list[str] = field(default_factory=list)
    round_number: int = 1
    clues: list[Clue] = field(default_factory=list)
    voters: list[str] = field(default_factory=list)
    tallies: list[VoteTally] = field(default_factory=list)

    # Published once caught or at the end
    mr_white_id: str | None = None
    final_word: str | None = None
    winning_side: Side | None = None

    def is_active(self, player_id: str) -> bool:
        return player_id in self.active_player_ids

    def next_active_after(self, player_id: str) -> str | None:
        """The next active player in seating order, None past the last one."""
        start = self.index_of(player_id) + 1
        for pid in self.player_ids[start:]:
            if self.is_active(pid):
                return pid
        return None


@dataclass
class MrWhiteSecrets:
    word: str = ""
    mr_white_id: str = ""
    votes: dict[str, str] = field(default_factory=dict)
