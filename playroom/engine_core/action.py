"""
Move System - Moves, payloads, and results.

Moves represent:
1. Setup submissions (a code, words, a fleet)
2. Turn moves (guesses, shots, clues)
3. Caller-driven moves (timeout pass, opening the vote)

All state changes flow through moves.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import Rejection, RejectionCode


class MoveType(str, Enum):
    """Types of moves in the system."""
    SUBMIT_SECRET = "SUBMIT_SECRET"

    GUESS = "GUESS"
    GUESS_LETTER = "GUESS_LETTER"
    FIRE = "FIRE"
    PASS_TURN = "PASS_TURN"

    # Social deduction
    CLUE = "CLUE"
    START_VOTING = "START_VOTING"
    VOTE = "VOTE"


class Outcome(str, Enum):
    """What an accepted move did to the flow of the game."""
    WAITING = "WAITING"  # Setup accepted, other players still submitting
    STARTED = "STARTED"  # Setup accepted and the barrier closed
    CONTINUE = "CONTINUE"  # Same player keeps the turn
    PASS = "PASS"  # Turn moved on
    ENDED = "ENDED"


@dataclass
class Move:
    """
    A move to be applied to an instance.

    The payload is a plain dict so callers can forward decoded JSON
    unchanged; each variant's validator checks its shape.
    """
    move_type: MoveType
    payload: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def submit_secret(cls, **payload: Any) -> Move:
        """Factory for a setup submission."""
        return cls(move_type=MoveType.SUBMIT_SECRET, payload=payload)

    @classmethod
    def guess(cls, value: str) -> Move:
        """Factory for a code/word guess."""
        return cls(move_type=MoveType.GUESS, payload={"value": value})

    @classmethod
    def guess_letter(cls, letter: str) -> Move:
        return cls(move_type=MoveType.GUESS_LETTER, payload={"letter": letter})

    @classmethod
    def fire(cls, row: int, col: int) -> Move:
        """Factory for a shot at the opponent's grid."""
        return cls(move_type=MoveType.FIRE, payload={"row": row, "col": col})

    @classmethod
    def pass_turn(cls, now: float) -> Move:
        """Factory for a deadline-expired pass, issued by the caller's scheduler."""
        return cls(move_type=MoveType.PASS_TURN, payload={"now": now})

    @classmethod
    def clue(cls, text: str) -> Move:
        return cls(move_type=MoveType.CLUE, payload={"text": text})

    @classmethod
    def start_voting(cls) -> Move:
        return cls(move_type=MoveType.START_VOTING)

    @classmethod
    def vote(cls, target_id: str) -> Move:
        return cls(move_type=MoveType.VOTE, payload={"target_id": target_id})


@dataclass
class MoveResult:
    """
    Result of applying a move.

    Contains:
    - Whether the move was accepted
    - The rejection code and message (if refused)
    - Structured detail for transport events (if accepted)
    """
    accepted: bool
    move_type: MoveType | None = None
    player_id: str | None = None

    outcome: Outcome | None = None
    details: dict[str, Any] = field(default_factory=dict)
    events: list[str] = field(default_factory=list)  # Human-readable changes

    rejection: RejectionCode | None = None
    error: str | None = None

    @classmethod
    def rejected(cls, rejection: Rejection, move: Move | None = None, player_id: str | None = None) -> MoveResult:
        """Create a rejection result."""
        return cls(
            accepted=False,
            move_type=move.move_type if move else None,
            player_id=player_id,
            rejection=rejection.code,
            error=rejection.message,
        )

    @classmethod
    def ok(
        cls,
        outcome: Outcome,
        details: dict[str, Any] | None = None,
        events: list[str] | None = None,
    ) -> MoveResult:
        """Create an accepted result. The base instance fills in move/player."""
        return cls(
            accepted=True,
            outcome=outcome,
            details=details or {},
            events=events or [],
        )

    @property
    def game_over(self) -> bool:
        return self.outcome == Outcome.ENDED
