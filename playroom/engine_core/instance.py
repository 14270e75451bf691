"""
Game Instance - validate-then-resolve for every variant.

The instance is the single point of state mutation.
All state changes must go through apply_move().

Design principles:
- Validates before resolving: a rejected move never touches state
- Resolvers work on copies that are committed only when they return,
  so public state and secrets change together or not at all
- Returns MoveResult with accepted/rejected, never raises for bad moves
- Phase changes go through the variant's transition table
"""

from __future__ import annotations
import copy
import logging
import time
from typing import Any, Callable, ClassVar, Iterable

from .action import Move, MoveResult, MoveType
from .errors import EngineError, GameConfigError, Rejection, RejectionCode, UnknownPlayer
from .fsm import TransitionTable, check_table, transition
from .projector import ProjectedView, from_plain, to_plain
from .settings import GameSettings
from .state import GameStatus, Phase, PublicState, Variant


logger = logging.getLogger(__name__)

Resolver = Callable[[Any, Any, str, Move], MoveResult]


class GameInstance:
    """
    One live game of one variant.

    Subclasses declare:
    - variant, state_cls, secrets_cls
    - transitions / initial_phase (checked at class definition)
    - move_phases: which phases accept which move types
    - turn_moves: moves only the turn holder may make
    and implement _validate_move, _resolvers and _private_view.
    """
    variant: ClassVar[Variant]
    state_cls: ClassVar[type]
    secrets_cls: ClassVar[type]

    transitions: ClassVar[TransitionTable]
    initial_phase: ClassVar[Phase]
    move_phases: ClassVar[dict[MoveType, frozenset[Phase]]] = {}
    turn_moves: ClassVar[frozenset[MoveType]] = frozenset()

    min_players: ClassVar[int] = 2
    max_players: ClassVar[int | None] = 2

    def __init_subclass__(cls, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        if "transitions" not in cls.__dict__:
            return
        check_table(cls.transitions, cls.initial_phase)
        for move_type, phases in cls.move_phases.items():
            unknown = phases - set(cls.transitions)
            if unknown:
                raise EngineError(f"{cls.__name__}: {move_type.value} accepted in undeclared phases")
            if Phase.ENDED in phases:
                raise EngineError(f"{cls.__name__}: {move_type.value} accepted after the game ended")

    def __init__(
        self,
        state: PublicState,
        secrets: Any | None,
        settings: GameSettings | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.state = state
        self._secrets = secrets
        self.settings = settings or GameSettings()
        self.clock = clock

    # =========================================================================
    # Construction and restore
    # =========================================================================

    @classmethod
    def check_players(cls, player_ids: Iterable[str]) -> list[str]:
        """Validate the seating list; raises GameConfigError."""
        ids = list(player_ids)
        if len(set(ids)) != len(ids):
            raise GameConfigError("Player ids must be unique")
        if len(ids) < cls.min_players:
            raise GameConfigError(f"{cls.variant.value} needs at least {cls.min_players} players")
        if cls.max_players is not None and len(ids) > cls.max_players:
            raise GameConfigError(f"{cls.variant.value} allows at most {cls.max_players} players")
        return ids

    @classmethod
    def restore(
        cls,
        public: dict[str, Any],
        settings: GameSettings | None = None,
        secrets: Any | None = None,
        clock: Callable[[], float] = time.time,
    ) -> GameInstance:
        """
        Rebuild an instance from a persisted public state.

        Secrets are NOT part of the public state. Until inject_secrets()
        is called, every move is rejected with SECRET_UNAVAILABLE.
        """
        state = from_plain(cls.state_cls, public)
        if state.variant != cls.variant:
            raise GameConfigError(f"State is for {state.variant.value}, not {cls.variant.value}")
        instance = cls(state, None, settings, clock=clock)
        if secrets is not None:
            instance.inject_secrets(secrets)
        return instance

    def inject_secrets(self, secrets: Any) -> None:
        """Re-attach the server-held secret store (dataclass or plain dict)."""
        if isinstance(secrets, dict):
            secrets = from_plain(self.secrets_cls, secrets)
        if not isinstance(secrets, self.secrets_cls):
            raise GameConfigError(f"Expected {self.secrets_cls.__name__}")
        self._secrets = secrets

    def export_secrets(self) -> Any | None:
        """Copy of the secret store for the caller's side channel."""
        return copy.deepcopy(self._secrets)

    @property
    def has_secrets(self) -> bool:
        return self._secrets is not None

    # =========================================================================
    # Caller contract
    # =========================================================================

    def apply_setup(self, player_id: str, payload: dict[str, Any]) -> MoveResult:
        """Submit a player's secret (code, words, fleet)."""
        return self.apply_move(player_id, Move(MoveType.SUBMIT_SECRET, dict(payload)))

    def apply_move(self, player_id: str, move: Move) -> MoveResult:
        """
        Validate and resolve one move.

        Returns MoveResult with the outcome or the rejection.
        """
        rejection = self.validate(player_id, move)
        if rejection is not None:
            logger.debug(
                "%s: rejected %s from %s (%s: %s)",
                self.variant.value, move.move_type, player_id, rejection.code.value, rejection.message,
            )
            return MoveResult.rejected(rejection, move, player_id)

        handler = self._resolvers()[move.move_type]
        state = copy.deepcopy(self.state)
        secrets = copy.deepcopy(self._secrets)
        result = handler(state, secrets, player_id, move)

        self.state = state
        self._secrets = secrets
        result.move_type = move.move_type
        result.player_id = player_id

        logger.info(
            "%s: %s by %s -> %s",
            self.variant.value, move.move_type.value, player_id, result.outcome.value,
        )
        return result

    def get_public_state(self) -> PublicState:
        return copy.deepcopy(self.state)

    def public_dict(self) -> dict[str, Any]:
        return to_plain(self.state)

    def get_view_for(self, player_id: str) -> ProjectedView:
        """Public state plus only this player's private knowledge."""
        if player_id not in self.state.player_ids:
            raise UnknownPlayer(player_id)
        private = self._private_view(player_id) if self._secrets is not None else {}
        return ProjectedView(
            player_id=player_id,
            variant=self.variant,
            public=self.public_dict(),
            private=private,
        )

    def is_over(self) -> bool:
        return self.state.status == GameStatus.ENDED

    def reveal(self) -> dict[str, Any]:
        """Every secret, for the terminal reveal event only."""
        if not self.is_over():
            raise EngineError("Secrets are only revealed once the game has ended")
        if self._secrets is None:
            raise EngineError("Secret store has not been injected")
        return to_plain(self._secrets)

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self, player_id: str, move: Move) -> Rejection | None:
        """
        Check a move without mutating anything.

        Returns the first rejection found, None if the move is legal.
        """
        phases = self.move_phases.get(move.move_type)
        if phases is None:
            return Rejection(
                RejectionCode.INVALID_PAYLOAD,
                f"{self.variant.value} has no {getattr(move.move_type, 'value', move.move_type)} move",
            )

        if self.state.status == GameStatus.ENDED:
            return Rejection(RejectionCode.ALREADY_OVER, "Game is over")

        if self.state.phase not in phases:
            return Rejection(
                RejectionCode.WRONG_PHASE,
                f"{move.move_type.value} not allowed during {self.state.phase.value}",
            )

        if not self._is_participant(player_id):
            return Rejection(RejectionCode.NOT_A_PLAYER, f"{player_id} is not playing")

        if move.move_type in self.turn_moves and self.state.current_player_id != player_id:
            return Rejection(RejectionCode.NOT_YOUR_TURN, "Not your turn")

        if self._secrets is None:
            return Rejection(RejectionCode.SECRET_UNAVAILABLE, "Game secrets have not been restored")

        if not isinstance(move.payload, dict):
            return Rejection(RejectionCode.INVALID_PAYLOAD, "Payload must be an object")

        return self._validate_move(player_id, move)

    def _is_participant(self, player_id: str) -> bool:
        return player_id in self.state.player_ids

    def _validate_move(self, player_id: str, move: Move) -> Rejection | None:
        """Variant syntax and duplicate checks."""
        raise NotImplementedError

    # =========================================================================
    # Resolution helpers
    # =========================================================================

    def _resolvers(self) -> dict[MoveType, Resolver]:
        raise NotImplementedError

    def _private_view(self, player_id: str) -> dict[str, Any]:
        raise NotImplementedError

    def _move_to(self, state: PublicState, phase: Phase) -> None:
        transition(self.transitions, state, phase)

    def _finish(self, state: PublicState, winner: str | None) -> None:
        """Enter ENDED and fix the winner."""
        transition(self.transitions, state, Phase.ENDED)
        state.status = GameStatus.ENDED
        state.winner = winner
