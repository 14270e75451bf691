"""
Digit Duel State - public guess log and the server-held codes.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ...engine_core.state import GameStatus, Phase, PublicState, SetupTracker, Variant  # noqa: F401 (inherited field types)


@dataclass
class DigitGuess:
    """One resolved guess, as broadcast to both players."""
    guesser_id: str
    target_id: str
    guess: str
    correct_digits: int
    correct_place: int


@dataclass
class DigitDuelState(PublicState):
    """
    Broadcastable state.

    Only whether each code has been set is public; the codes themselves
    live in DigitDuelSecrets.
    """
    secret_length: int = 4
    setup: SetupTracker = field(default_factory=SetupTracker)
    guess_history: list[DigitGuess] = field(default_factory=list)


@dataclass
class DigitDuelSecrets:
    codes: dict[str, str] = field(default_factory=dict)
