"""
Hangman Game - validator, resolver and projector.
"""

from __future__ import annotations
import time
from typing import Any, Callable, Iterable

from ...engine_core.action import Move, MoveResult, MoveType, Outcome
from ...engine_core.errors import Rejection, RejectionCode
from ...engine_core.fsm import SECRET_DUEL_TRANSITIONS
from ...engine_core.instance import GameInstance, Resolver
from ...engine_core.settings import GameSettings
from ...engine_core.state import TIE, Phase, SetupTracker, Variant
from ...engine_core.text import is_plain_word, normalize_letter
from .state import HIDDEN, HangmanSecrets, HangmanState, mask_word


class HangmanGame(GameInstance):
    """
    Each player hides a word; the other guesses it letter by letter.

    A round goes to the guesser when the word is complete and to the
    word's owner when the mistake budget runs out. Winning both rounds
    wins the game, a split is a TIE.
    """
    variant = Variant.HANGMAN
    state_cls = HangmanState
    secrets_cls = HangmanSecrets

    transitions = SECRET_DUEL_TRANSITIONS
    initial_phase = Phase.SETUP
    move_phases = {
        MoveType.SUBMIT_SECRET: frozenset({Phase.SETUP}),
        MoveType.GUESS_LETTER: frozenset({Phase.PLAY}),
    }
    turn_moves = frozenset({MoveType.GUESS_LETTER})

    state: HangmanState
    _secrets: HangmanSecrets

    @classmethod
    def create(
        cls,
        player_ids: Iterable[str],
        settings: GameSettings | None = None,
        clock: Callable[[], float] = time.time,
    ) -> HangmanGame:
        settings = settings or GameSettings()
        ids = cls.check_players(player_ids)
        state = HangmanState(
            variant=cls.variant,
            player_ids=ids,
            phase=cls.initial_phase,
            setup=SetupTracker.for_players(ids),
            max_mistakes=settings.max_mistakes,
        )
        return cls(state, HangmanSecrets(), settings, clock=clock)

    def _validate_move(self, player_id: str, move: Move) -> Rejection | None:
        if move.move_type == MoveType.SUBMIT_SECRET:
            word = move.payload.get("word")
            if isinstance(word, str):
                word = word.strip()
            if not is_plain_word(word):
                return Rejection(RejectionCode.INVALID_PAYLOAD, "Word must be 2-20 letters")
            if self.state.setup.has_submitted(player_id):
                return Rejection(RejectionCode.DUPLICATE, "Word already set")
            return None

        letter = normalize_letter(move.payload.get("letter"))
        if not ("a" <= letter <= "z"):
            return Rejection(RejectionCode.INVALID_PAYLOAD, "Guess a single letter")
        if letter in self.state.guessed_letters:
            return Rejection(RejectionCode.DUPLICATE, "Already guessed that letter")
        return None

    def _resolvers(self) -> dict[MoveType, Resolver]:
        return {
            MoveType.SUBMIT_SECRET: self._resolve_word,
            MoveType.GUESS_LETTER: self._resolve_letter,
        }

    def _resolve_word(
        self, state: HangmanState, secrets: HangmanSecrets, player_id: str, move: Move
    ) -> MoveResult:
        secrets.words[player_id] = move.payload["word"].strip().lower()
        state.setup.mark(player_id)

        if not state.setup.complete:
            return MoveResult.ok(Outcome.WAITING, events=[f"{player_id} set their word"])

        self._move_to(state, Phase.PLAY)
        self._start_round(state, secrets, 0)
        return MoveResult.ok(Outcome.STARTED, details={"current_player_id": state.current_player_id})

    def _resolve_letter(
        self, state: HangmanState, secrets: HangmanSecrets, player_id: str, move: Move
    ) -> MoveResult:
        letter = normalize_letter(move.payload["letter"])
        word = secrets.words[state.target_id]

        state.guessed_letters.append(letter)
        in_word = letter in word
        if not in_word:
            state.mistakes += 1
        state.revealed_word = mask_word(word, state.guessed_letters)

        details: dict[str, Any] = {
            "letter": letter,
            "in_word": in_word,
            "round_index": state.round_index,
            "revealed_word": state.revealed_word,
            "mistakes": state.mistakes,
        }

        if HIDDEN not in state.revealed_word:
            round_winner = state.guesser_id
        elif state.mistakes >= state.max_mistakes:
            round_winner = state.target_id
        else:
            return MoveResult.ok(Outcome.CONTINUE, details)

        state.round_winners[state.round_index] = round_winner
        details["round_winner"] = round_winner

        if state.round_index == 1:
            r0, r1 = state.round_winners
            self._finish(state, r0 if r0 == r1 else TIE)
            return MoveResult.ok(Outcome.ENDED, details, [f"Round 2 won by {round_winner}"])

        self._start_round(state, secrets, 1)
        details["current_player_id"] = state.current_player_id
        return MoveResult.ok(Outcome.PASS, details, [f"Round 1 won by {round_winner}"])

    def _start_round(self, state: HangmanState, secrets: HangmanSecrets, round_index: int) -> None:
        state.round_index = round_index
        state.guessed_letters = []
        state.mistakes = 0
        word = secrets.words[state.target_id]
        state.word_length = len(word)
        state.revealed_word = HIDDEN * len(word)
        state.current_player_index = state.index_of(state.guesser_id)

    def _private_view(self, player_id: str) -> dict[str, Any]:
        return {"my_word": self._secrets.words.get(player_id)}
