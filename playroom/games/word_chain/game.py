"""
Word Chain Game - validator, resolver and projector.
"""

from __future__ import annotations
import time
from typing import Any, Callable, Iterable

from ...engine_core.action import Move, MoveResult, MoveType, Outcome
from ...engine_core.clock import TurnClock
from ...engine_core.errors import Rejection, RejectionCode
from ...engine_core.fsm import SECRET_DUEL_TRANSITIONS
from ...engine_core.instance import GameInstance, Resolver
from ...engine_core.settings import GameSettings
from ...engine_core.state import Phase, SetupTracker, Variant
from ...engine_core.text import is_plain_word
from .state import ChainGuess, ChainWord, WordChainSecrets, WordChainState


class WordChainGame(GameInstance):
    """
    Two players, a theme word and N hidden words each.

    Turn deadlines are recorded (turn_started_at) but never enforced here:
    the caller's scheduler issues PASS_TURN once time_remaining() hits 0.
    """
    variant = Variant.WORD_CHAIN
    state_cls = WordChainState
    secrets_cls = WordChainSecrets

    transitions = SECRET_DUEL_TRANSITIONS
    initial_phase = Phase.SETUP
    move_phases = {
        MoveType.SUBMIT_SECRET: frozenset({Phase.SETUP}),
        MoveType.GUESS: frozenset({Phase.PLAY}),
        MoveType.PASS_TURN: frozenset({Phase.PLAY}),
    }
    turn_moves = frozenset({MoveType.GUESS, MoveType.PASS_TURN})

    state: WordChainState
    _secrets: WordChainSecrets

    @classmethod
    def create(
        cls,
        player_ids: Iterable[str],
        settings: GameSettings | None = None,
        clock: Callable[[], float] = time.time,
    ) -> WordChainGame:
        settings = settings or GameSettings()
        ids = cls.check_players(player_ids)
        state = WordChainState(
            variant=cls.variant,
            player_ids=ids,
            phase=cls.initial_phase,
            chain_count=settings.chain_count,
            setup=SetupTracker.for_players(ids),
            theme_words={pid: "" for pid in ids},
            chains={pid: [] for pid in ids},
            turn_seconds=settings.turn_seconds,
        )
        return cls(state, WordChainSecrets(), settings, clock=clock)

    # =========================================================================
    # Deadline
    # =========================================================================

    def turn_clock(self) -> TurnClock | None:
        if self.state.phase != Phase.PLAY or self.state.turn_started_at is None:
            return None
        return TurnClock(self.state.turn_started_at, self.state.turn_seconds)

    def time_remaining(self, now: float) -> float | None:
        """Seconds left in the current turn, None outside play."""
        clock = self.turn_clock()
        return clock.time_remaining(now) if clock else None

    # =========================================================================
    # Validation
    # =========================================================================

    def _validate_move(self, player_id: str, move: Move) -> Rejection | None:
        if move.move_type == MoveType.SUBMIT_SECRET:
            return self._validate_words(player_id, move.payload)

        if move.move_type == MoveType.PASS_TURN:
            now = move.payload.get("now")
            if isinstance(now, bool) or not isinstance(now, (int, float)):
                return Rejection(RejectionCode.INVALID_PAYLOAD, "PASS_TURN needs the current time")
            clock = self.turn_clock()
            if clock is not None and not clock.is_expired(now):
                return Rejection(RejectionCode.INVALID_PAYLOAD, "Turn deadline has not passed")
            return None

        if not is_plain_word(move.payload.get("value")):
            return Rejection(RejectionCode.INVALID_PAYLOAD, "Guess must be 2-20 letters")
        return None

    def _validate_words(self, player_id: str, payload: dict[str, Any]) -> Rejection | None:
        theme = payload.get("theme")
        words = payload.get("words")
        count = self.state.chain_count

        if not is_plain_word(theme):
            return Rejection(RejectionCode.INVALID_PAYLOAD, "Theme word must be 2-20 letters")
        if not isinstance(words, list) or len(words) != count:
            return Rejection(RejectionCode.INVALID_PAYLOAD, f"Must provide exactly {count} words")
        if not all(is_plain_word(w) for w in words):
            return Rejection(RejectionCode.INVALID_PAYLOAD, "Each word must be 2-20 letters")
        if self.state.setup.has_submitted(player_id):
            return Rejection(RejectionCode.DUPLICATE, "Words already submitted")
        return None

    # =========================================================================
    # Resolution
    # =========================================================================

    def _resolvers(self) -> dict[MoveType, Resolver]:
        return {
            MoveType.SUBMIT_SECRET: self._resolve_words,
            MoveType.GUESS: self._resolve_guess,
            MoveType.PASS_TURN: self._resolve_pass,
        }

    def _resolve_words(
        self, state: WordChainState, secrets: WordChainSecrets, player_id: str, move: Move
    ) -> MoveResult:
        words = [w.upper() for w in move.payload["words"]]
        state.theme_words[player_id] = move.payload["theme"].upper()
        state.chains[player_id] = [
            ChainWord(first_letter=w[0], length=len(w), revealed_prefix=w[0])
            for w in words
        ]
        secrets.words[player_id] = words
        state.setup.mark(player_id)

        if not state.setup.complete:
            return MoveResult.ok(Outcome.WAITING, events=[f"{player_id} set their words"])

        self._move_to(state, Phase.PLAY)
        state.current_player_index = 0
        state.turn_started_at = self.clock()
        return MoveResult.ok(
            Outcome.STARTED,
            details={"current_player_id": state.current_player_id, "turn_started_at": state.turn_started_at},
        )

    def _resolve_guess(
        self, state: WordChainState, secrets: WordChainSecrets, player_id: str, move: Move
    ) -> MoveResult:
        target_id = state.opponent_of(player_id)
        guess = move.payload["value"].upper()
        chain = state.chains[target_id]
        hidden_words = secrets.words[target_id]

        matched = next(
            (i for i, w in enumerate(hidden_words) if not chain[i].revealed and w == guess),
            None,
        )
        state.guess_history.append(ChainGuess(
            guesser_id=player_id,
            target_id=target_id,
            word=guess,
            correct=matched is not None,
            word_index=matched,
        ))
        details: dict[str, Any] = {"target_id": target_id, "word": guess, "correct": matched is not None}

        if matched is not None:
            entry = chain[matched]
            entry.word = guess
            entry.revealed_prefix = guess
            details["word_index"] = matched

            if state.unrevealed_count(target_id) == 0:
                self._finish(state, player_id)
                return MoveResult.ok(Outcome.ENDED, details, [f"{player_id} uncovered every word"])

            state.turn_started_at = self.clock()
            details["turn_started_at"] = state.turn_started_at
            return MoveResult.ok(Outcome.CONTINUE, details)

        hint_index = state.first_hidden_index(target_id)
        if hint_index is not None:
            entry = chain[hint_index]
            word = hidden_words[hint_index]
            shown = min(len(entry.revealed_prefix) + 1, len(word))
            entry.revealed_prefix = word[:shown]
            details["hint_index"] = hint_index
            details["revealed_letters"] = shown

        self._pass_turn(state)
        details["current_player_id"] = state.current_player_id
        return MoveResult.ok(Outcome.PASS, details)

    def _resolve_pass(
        self, state: WordChainState, secrets: WordChainSecrets, player_id: str, move: Move
    ) -> MoveResult:
        self._pass_turn(state)
        return MoveResult.ok(
            Outcome.PASS,
            details={"current_player_id": state.current_player_id, "timed_out": player_id},
            events=[f"{player_id} ran out of time"],
        )

    def _pass_turn(self, state: WordChainState) -> None:
        state.advance_turn()
        state.turn_started_at = self.clock()

    def _private_view(self, player_id: str) -> dict[str, Any]:
        return {"my_words": list(self._secrets.words.get(player_id, []))}
