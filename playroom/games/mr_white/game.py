"""
Mr White Game - social deduction over one shared secret word.

Every player but one knows the word. Players give clues in turn,
discuss, then vote someone out. Catching Mr White gives him one last
guess at the word; running the table down to two players hands him
the win.
"""

from __future__ import annotations
import logging
import random
import time
from collections import Counter
from typing import TYPE_CHECKING, Any, Callable, Iterable

from ...engine_core.action import Move, MoveResult, MoveType, Outcome
from ...engine_core.errors import GameConfigError, Rejection, RejectionCode
from ...engine_core.fsm import SOCIAL_DEDUCTION_TRANSITIONS
from ...engine_core.instance import GameInstance, Resolver
from ...engine_core.settings import GameSettings
from ...engine_core.state import TIE, Phase, Variant
from ...engine_core.text import normalize_word
from .state import MAX_CLUE_LENGTH, Clue, MrWhiteSecrets, MrWhiteState, Side, VoteTally

if TYPE_CHECKING:
    from ...words import WordSource


logger = logging.getLogger(__name__)

# Mr White wins once this few players are left
SURVIVAL_THRESHOLD = 2


class MrWhiteGame(GameInstance):
    variant = Variant.MR_WHITE
    state_cls = MrWhiteState
    secrets_cls = MrWhiteSecrets

    transitions = SOCIAL_DEDUCTION_TRANSITIONS
    initial_phase = Phase.CLUES
    move_phases = {
        MoveType.CLUE: frozenset({Phase.CLUES}),
        MoveType.START_VOTING: frozenset({Phase.DISCUSSION}),
        MoveType.VOTE: frozenset({Phase.VOTING}),
        MoveType.GUESS: frozenset({Phase.LAST_GUESS}),
    }
    turn_moves = frozenset({MoveType.CLUE, MoveType.GUESS})

    min_players = 3
    max_players = None

    state: MrWhiteState
    _secrets: MrWhiteSecrets

    @classmethod
    async def create(
        cls,
        player_ids: Iterable[str],
        settings: GameSettings | None = None,
        source: WordSource | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.time,
    ) -> MrWhiteGame:
        """Fetch the shared word, then deal the roles. Raises SourceUnavailable."""
        settings = settings or GameSettings()
        ids = cls.check_players(player_ids)
        if source is None:
            raise GameConfigError("MR_WHITE needs a word source")
        pick = await source.fetch(settings.language)
        return cls.from_word(ids, pick.word, settings, rng=rng, clock=clock)

    @classmethod
    def from_word(
        cls,
        player_ids: Iterable[str],
        word: str,
        settings: GameSettings | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.time,
    ) -> MrWhiteGame:
        ids = cls.check_players(player_ids)
        word = normalize_word(word)
        if not word:
            raise GameConfigError("Secret word has no letters")

        mr_white_id = (rng or random.Random()).choice(ids)
        state = MrWhiteState(
            variant=cls.variant,
            player_ids=ids,
            phase=cls.initial_phase,
            active_player_ids=list(ids),
        )
        logger.info("Mr White game created for %d players", len(ids))
        return cls(state, MrWhiteSecrets(word=word, mr_white_id=mr_white_id), settings, clock=clock)

    # =========================================================================
    # Validation
    # =========================================================================

    def _is_participant(self, player_id: str) -> bool:
        return self.state.is_active(player_id)

    def _validate_move(self, player_id: str, move: Move) -> Rejection | None:
        if move.move_type == MoveType.CLUE:
            return self._validate_clue(player_id, move.payload.get("text"))

        if move.move_type == MoveType.VOTE:
            target_id = move.payload.get("target_id")
            if target_id == player_id:
                return Rejection(RejectionCode.INVALID_PAYLOAD, "You cannot vote for yourself")
            if not isinstance(target_id, str) or not self.state.is_active(target_id):
                return Rejection(RejectionCode.INVALID_PAYLOAD, "Vote for a player still in the game")
            if player_id in self.state.voters:
                return Rejection(RejectionCode.DUPLICATE, "Already voted this round")
            return None

        if move.move_type == MoveType.GUESS:
            raw = move.payload.get("value")
            if not isinstance(raw, str) or not normalize_word(raw):
                return Rejection(RejectionCode.INVALID_PAYLOAD, "Guess must contain letters")
        return None

    def _validate_clue(self, player_id: str, text: Any) -> Rejection | None:
        if not isinstance(text, str) or not text.strip():
            return Rejection(RejectionCode.INVALID_PAYLOAD, "Clue cannot be empty")
        if len(text.strip()) > MAX_CLUE_LENGTH:
            return Rejection(RejectionCode.INVALID_PAYLOAD, f"Clue must be at most {MAX_CLUE_LENGTH} characters")
        # Mr White does not know the word; checking him would leak it
        if player_id != self._secrets.mr_white_id:
            if self._secrets.word in normalize_word(text):
                return Rejection(RejectionCode.INVALID_PAYLOAD, "Clue cannot contain the secret word")
        return None

    # =========================================================================
    # Resolution
    # =========================================================================

    def _resolvers(self) -> dict[MoveType, Resolver]:
        return {
            MoveType.CLUE: self._resolve_clue,
            MoveType.START_VOTING: self._resolve_start_voting,
            MoveType.VOTE: self._resolve_vote,
            MoveType.GUESS: self._resolve_last_guess,
        }

    def _resolve_clue(
        self, state: MrWhiteState, secrets: MrWhiteSecrets, player_id: str, move: Move
    ) -> MoveResult:
        state.clues.append(Clue(player_id=player_id, text=move.payload["text"].strip(), round_number=state.round_number))

        next_id = state.next_active_after(player_id)
        if next_id is None:
            self._move_to(state, Phase.DISCUSSION)
            return MoveResult.ok(Outcome.PASS, {"phase": state.phase.value}, ["All clues are in"])

        state.current_player_index = state.index_of(next_id)
        return MoveResult.ok(Outcome.PASS, {"current_player_id": next_id})

    def _resolve_start_voting(
        self, state: MrWhiteState, secrets: MrWhiteSecrets, player_id: str, move: Move
    ) -> MoveResult:
        self._move_to(state, Phase.VOTING)
        state.voters = []
        secrets.votes = {}
        return MoveResult.ok(Outcome.CONTINUE, {"phase": state.phase.value}, [f"{player_id} opened the vote"])

    def _resolve_vote(
        self, state: MrWhiteState, secrets: MrWhiteSecrets, player_id: str, move: Move
    ) -> MoveResult:
        secrets.votes[player_id] = move.payload["target_id"]
        state.voters.append(player_id)

        if len(state.voters) < len(state.active_player_ids):
            return MoveResult.ok(Outcome.WAITING, {"voters": list(state.voters)})

        return self._tally(state, secrets)

    def _tally(self, state: MrWhiteState, secrets: MrWhiteSecrets) -> MoveResult:
        counts = Counter(secrets.votes.values())
        top = max(counts.values())
        leaders = [pid for pid, n in counts.items() if n == top]
        eliminated_id = leaders[0] if len(leaders) == 1 else None

        tally = VoteTally(
            round_number=state.round_number,
            votes=dict(secrets.votes),
            counts=dict(counts),
            eliminated_id=eliminated_id,
        )
        state.tallies.append(tally)
        details: dict[str, Any] = {"eliminated_id": eliminated_id, "counts": dict(counts)}

        if eliminated_id is not None and eliminated_id == secrets.mr_white_id:
            state.mr_white_id = secrets.mr_white_id
            self._move_to(state, Phase.LAST_GUESS)
            state.current_player_index = state.index_of(secrets.mr_white_id)
            details["mr_white_id"] = secrets.mr_white_id
            return MoveResult.ok(Outcome.PASS, details, [f"{eliminated_id} was Mr White"])

        events = []
        if eliminated_id is None:
            events.append("Tied vote, nobody leaves")
        else:
            state.active_player_ids.remove(eliminated_id)
            state.eliminated_ids.append(eliminated_id)
            events.append(f"{eliminated_id} was eliminated")

            if len(state.active_player_ids) <= SURVIVAL_THRESHOLD:
                self._end(state, secrets, Side.MR_WHITE)
                details["mr_white_id"] = secrets.mr_white_id
                return MoveResult.ok(Outcome.ENDED, details, events + ["Mr White survived"])

        self._move_to(state, Phase.CLUES)
        state.round_number += 1
        state.voters = []
        secrets.votes = {}
        state.current_player_index = state.index_of(state.active_player_ids[0])
        details["round_number"] = state.round_number
        return MoveResult.ok(Outcome.PASS, details, events)

    def _resolve_last_guess(
        self, state: MrWhiteState, secrets: MrWhiteSecrets, player_id: str, move: Move
    ) -> MoveResult:
        guessed = normalize_word(move.payload["value"]) == secrets.word
        side = Side.MR_WHITE if guessed else Side.CIVILIANS
        self._end(state, secrets, side)
        return MoveResult.ok(
            Outcome.ENDED,
            {"correct": guessed, "winning_side": side.value, "final_word": secrets.word},
        )

    def _end(self, state: MrWhiteState, secrets: MrWhiteSecrets, side: Side) -> None:
        state.mr_white_id = secrets.mr_white_id
        state.final_word = secrets.word
        state.winning_side = side
        self._finish(state, secrets.mr_white_id if side == Side.MR_WHITE else TIE)

    def _private_view(self, player_id: str) -> dict[str, Any]:
        is_mr_white = player_id == self._secrets.mr_white_id
        return {
            "role": Side.MR_WHITE.value if is_mr_white else "CIVILIAN",
            "word": None if is_mr_white else self._secrets.word,
            "my_vote": self._secrets.votes.get(player_id),
        }
