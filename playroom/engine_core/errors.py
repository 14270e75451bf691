"""
Errors - Rejection taxonomy and engine exceptions.

Two kinds of failure exist in the engine:

1. Rejections: a single move is refused. The instance is untouched and
   the caller can simply report the code back to the player. These are
   returned (never raised) as part of a MoveResult.
2. Exceptions: creation failed (bad configuration, word source down) or
   the engine itself was driven into an impossible transition.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class RejectionCode(str, Enum):
    """Caller-recoverable reasons a move is refused."""
    WRONG_PHASE = "WRONG_PHASE"
    NOT_A_PLAYER = "NOT_A_PLAYER"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    INVALID_PAYLOAD = "INVALID_PAYLOAD"
    DUPLICATE = "DUPLICATE"
    ALREADY_OVER = "ALREADY_OVER"
    SECRET_UNAVAILABLE = "SECRET_UNAVAILABLE"


@dataclass(frozen=True)
class Rejection:
    """Outcome of a failed validation: a code plus a readable message."""
    code: RejectionCode
    message: str


class EngineError(Exception):
    """Base class for engine exceptions."""


class GameConfigError(EngineError, ValueError):
    """Instance could not be constructed from the given players/settings."""


class IllegalTransition(EngineError):
    """A phase change not present in the variant's transition table."""

    def __init__(self, variant: str, current: str, target: str):
        super().__init__(f"{variant}: illegal transition {current} -> {target}")
        self.variant = variant
        self.current = current
        self.target = target


class UnknownPlayer(EngineError, KeyError):
    """A projection was requested for someone who is not in the game."""

    def __str__(self) -> str:
        return f"Unknown player: {self.args[0]}"


class SourceUnavailable(EngineError):
    """A word source or dictionary lookup could not produce an answer."""
