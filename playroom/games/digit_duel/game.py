"""
Digit Duel Game - validator, resolver and projector for code guessing.
"""

from __future__ import annotations
import time
from typing import Any, Callable, Iterable

from ...engine_core.action import Move, MoveResult, MoveType, Outcome
from ...engine_core.errors import Rejection, RejectionCode
from ...engine_core.fsm import SECRET_DUEL_TRANSITIONS
from ...engine_core.instance import GameInstance, Resolver
from ...engine_core.settings import GameSettings
from ...engine_core.state import Phase, SetupTracker, Variant
from .rules import is_valid_code, score_guess
from .state import DigitDuelSecrets, DigitDuelState, DigitGuess


class DigitDuelGame(GameInstance):
    """
    Two players, one secret code each.

    The turn passes after every guess, right or wrong; a guess that
    matches every position ends the game with the guesser as winner.
    """
    variant = Variant.DIGIT_DUEL
    state_cls = DigitDuelState
    secrets_cls = DigitDuelSecrets

    transitions = SECRET_DUEL_TRANSITIONS
    initial_phase = Phase.SETUP
    move_phases = {
        MoveType.SUBMIT_SECRET: frozenset({Phase.SETUP}),
        MoveType.GUESS: frozenset({Phase.PLAY}),
    }
    turn_moves = frozenset({MoveType.GUESS})

    state: DigitDuelState
    _secrets: DigitDuelSecrets

    @classmethod
    def create(
        cls,
        player_ids: Iterable[str],
        settings: GameSettings | None = None,
        clock: Callable[[], float] = time.time,
    ) -> DigitDuelGame:
        settings = settings or GameSettings()
        ids = cls.check_players(player_ids)
        state = DigitDuelState(
            variant=cls.variant,
            player_ids=ids,
            phase=cls.initial_phase,
            secret_length=settings.secret_length,
            setup=SetupTracker.for_players(ids),
        )
        return cls(state, DigitDuelSecrets(), settings, clock=clock)

    def _validate_move(self, player_id: str, move: Move) -> Rejection | None:
        length = self.state.secret_length

        if move.move_type == MoveType.SUBMIT_SECRET:
            if not is_valid_code(move.payload.get("code"), length):
                return Rejection(RejectionCode.INVALID_PAYLOAD, f"Secret must be exactly {length} digits")
            if self.state.setup.has_submitted(player_id):
                return Rejection(RejectionCode.DUPLICATE, "Secret already set")
            return None

        if not is_valid_code(move.payload.get("value"), length):
            return Rejection(RejectionCode.INVALID_PAYLOAD, f"Guess must be exactly {length} digits")
        return None

    def _resolvers(self) -> dict[MoveType, Resolver]:
        return {
            MoveType.SUBMIT_SECRET: self._resolve_secret,
            MoveType.GUESS: self._resolve_guess,
        }

    def _resolve_secret(
        self, state: DigitDuelState, secrets: DigitDuelSecrets, player_id: str, move: Move
    ) -> MoveResult:
        secrets.codes[player_id] = move.payload["code"]
        state.setup.mark(player_id)

        if not state.setup.complete:
            return MoveResult.ok(Outcome.WAITING, events=[f"{player_id} set a secret"])

        self._move_to(state, Phase.PLAY)
        state.current_player_index = 0
        return MoveResult.ok(
            Outcome.STARTED,
            details={"current_player_id": state.current_player_id},
            events=[f"{player_id} set a secret", "All secrets set, guessing starts"],
        )

    def _resolve_guess(
        self, state: DigitDuelState, secrets: DigitDuelSecrets, player_id: str, move: Move
    ) -> MoveResult:
        target_id = state.opponent_of(player_id)
        guess = move.payload["value"]
        score = score_guess(secrets.codes[target_id], guess)

        state.guess_history.append(DigitGuess(
            guesser_id=player_id,
            target_id=target_id,
            guess=guess,
            correct_digits=score.correct_digits,
            correct_place=score.correct_place,
        ))
        details: dict[str, Any] = {
            "target_id": target_id,
            "guess": guess,
            "correct_digits": score.correct_digits,
            "correct_place": score.correct_place,
        }

        # No continuation bonus: the cursor moves on even for the winning guess.
        state.advance_turn()

        if score.correct_place == state.secret_length:
            self._finish(state, player_id)
            return MoveResult.ok(Outcome.ENDED, details, [f"{player_id} cracked the code"])

        details["current_player_id"] = state.current_player_id
        return MoveResult.ok(Outcome.PASS, details)

    def _private_view(self, player_id: str) -> dict[str, Any]:
        return {"my_code": self._secrets.codes.get(player_id)}
