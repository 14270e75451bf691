"""
Engine Core - Authoritative state management for turn-based games.

The engine is the runtime that:
1. Holds one variant's public state and its separate secret store
2. Validates moves against phase, seat, turn and payload
3. Resolves accepted moves atomically
4. Moves phases through the variant's transition table
5. Projects per-player views that never leak another player's secret
"""

from .state import TIE, GameStatus, Phase, PublicState, SetupTracker, Variant
from .action import Move, MoveResult, MoveType, Outcome
from .errors import (
    EngineError,
    GameConfigError,
    IllegalTransition,
    Rejection,
    RejectionCode,
    SourceUnavailable,
    UnknownPlayer,
)
from .settings import GameSettings
from .clock import TurnClock
from .projector import ProjectedView, from_plain, to_plain
from .instance import GameInstance

__all__ = [
    "TIE",
    "GameStatus",
    "Phase",
    "PublicState",
    "SetupTracker",
    "Variant",
    "Move",
    "MoveResult",
    "MoveType",
    "Outcome",
    "EngineError",
    "GameConfigError",
    "IllegalTransition",
    "Rejection",
    "RejectionCode",
    "SourceUnavailable",
    "UnknownPlayer",
    "GameSettings",
    "TurnClock",
    "ProjectedView",
    "from_plain",
    "to_plain",
    "GameInstance",
]
