"""
Word Feedback Game - validator, resolver and projector.
"""

from __future__ import annotations
import logging
import time
from typing import TYPE_CHECKING, Any, Callable, Iterable

from ...engine_core.action import Move, MoveResult, MoveType, Outcome
from ...engine_core.errors import GameConfigError, Rejection, RejectionCode
from ...engine_core.fsm import OPEN_PLAY_TRANSITIONS
from ...engine_core.instance import GameInstance, Resolver
from ...engine_core.settings import GameSettings
from ...engine_core.state import TIE, Phase, Variant
from ...engine_core.text import normalize_word
from .rules import color_guess
from .state import FeedbackRow, WordFeedbackSecrets, WordFeedbackState

if TYPE_CHECKING:
    from ...words import WordSource


logger = logging.getLogger(__name__)


class WordFeedbackGame(GameInstance):
    """
    Turn-based guessing of one hidden word.

    Guesses must have the target's length and start with its (public)
    first letter. Dictionary membership is checked by the caller before
    the move reaches the engine.
    """
    variant = Variant.WORD_FEEDBACK
    state_cls = WordFeedbackState
    secrets_cls = WordFeedbackSecrets

    transitions = OPEN_PLAY_TRANSITIONS
    initial_phase = Phase.PLAY
    move_phases = {MoveType.GUESS: frozenset({Phase.PLAY})}
    turn_moves = frozenset({MoveType.GUESS})

    max_players = None

    state: WordFeedbackState
    _secrets: WordFeedbackSecrets

    @classmethod
    async def create(
        cls,
        player_ids: Iterable[str],
        settings: GameSettings | None = None,
        source: WordSource | None = None,
        clock: Callable[[], float] = time.time,
    ) -> WordFeedbackGame:
        """
        Fetch a target from the word source, then build the instance.

        Raises SourceUnavailable if no word could be fetched; nothing is
        constructed in that case.
        """
        settings = settings or GameSettings()
        ids = cls.check_players(player_ids)
        if source is None:
            raise GameConfigError("WORD_FEEDBACK needs a word source")
        pick = await source.fetch(settings.language)
        return cls.from_word(ids, pick.word, settings, clock=clock)

    @classmethod
    def from_word(
        cls,
        player_ids: Iterable[str],
        word: str,
        settings: GameSettings | None = None,
        clock: Callable[[], float] = time.time,
    ) -> WordFeedbackGame:
        settings = settings or GameSettings()
        ids = cls.check_players(player_ids)
        target = normalize_word(word)
        if not target:
            raise GameConfigError("Target word has no letters")

        state = WordFeedbackState(
            variant=cls.variant,
            player_ids=ids,
            phase=cls.initial_phase,
            word_length=len(target),
            first_letter=target[0],
            max_attempts=settings.max_attempts,
        )
        logger.info("Word feedback game created for %d players (length %d)", len(ids), len(target))
        return cls(state, WordFeedbackSecrets(target=target), settings, clock=clock)

    def _validate_move(self, player_id: str, move: Move) -> Rejection | None:
        raw = move.payload.get("value")
        guess = normalize_word(raw) if isinstance(raw, str) else ""

        if len(guess) != self.state.word_length:
            return Rejection(
                RejectionCode.INVALID_PAYLOAD,
                f"Guess must be exactly {self.state.word_length} letters",
            )
        if not guess.startswith(self.state.first_letter):
            return Rejection(
                RejectionCode.INVALID_PAYLOAD,
                f'Guess must start with "{self.state.first_letter}"',
            )
        return None

    def _resolvers(self) -> dict[MoveType, Resolver]:
        return {MoveType.GUESS: self._resolve_guess}

    def _resolve_guess(
        self, state: WordFeedbackState, secrets: WordFeedbackSecrets, player_id: str, move: Move
    ) -> MoveResult:
        guess = normalize_word(move.payload["value"])
        letters = color_guess(secrets.target, guess)
        row = FeedbackRow(player_id=player_id, guess=guess, letters=letters)
        state.attempts.append(row)

        details: dict[str, Any] = {
            "guess": guess,
            "letters": [{"letter": r.letter, "color": r.color.value} for r in letters],
            "attempt": len(state.attempts),
            "attempts_left": state.attempts_left,
        }

        if guess == secrets.target:
            state.final_word = secrets.target
            self._finish(state, player_id)
            details["final_word"] = secrets.target
            return MoveResult.ok(Outcome.ENDED, details, [f"{player_id} found the word"])

        if state.attempts_left == 0:
            state.final_word = secrets.target
            self._finish(state, TIE)
            details["final_word"] = secrets.target
            return MoveResult.ok(Outcome.ENDED, details, ["No attempts left"])

        state.advance_turn()
        details["current_player_id"] = state.current_player_id
        return MoveResult.ok(Outcome.PASS, details)

    def _private_view(self, player_id: str) -> dict[str, Any]:
        # Nobody holds private knowledge here: the target is hidden from everyone.
        return {}
