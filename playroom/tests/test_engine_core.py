"""
Tests for the shared engine scaffolding.

Tests:
- Transition tables are checked when a variant class is defined
- Common validation order and atomic rejection
- Restore without secrets fails safe until they are injected
- Settings, text normalization and the turn clock
"""

import pytest

from ..engine_core.action import Move, MoveType, Outcome
from ..engine_core.clock import TurnClock
from ..engine_core.errors import EngineError, GameConfigError, IllegalTransition, RejectionCode, UnknownPlayer
from ..engine_core.fsm import SECRET_DUEL_TRANSITIONS, check_table, transition
from ..engine_core.instance import GameInstance
from ..engine_core.settings import GameSettings
from ..engine_core.state import GameStatus, Phase, Variant
from ..engine_core.text import is_plain_word, normalize_letter, normalize_word
from ..games import restore_game
from ..games.digit_duel import DigitDuelGame, DigitDuelSecrets, DigitDuelState


class TestTransitionTables:
    """Phase machines are validated up front."""

    def test_ended_must_be_terminal(self):
        table = {Phase.PLAY: frozenset({Phase.ENDED}), Phase.ENDED: frozenset({Phase.PLAY})}
        with pytest.raises(EngineError):
            check_table(table, Phase.PLAY)

    def test_ended_must_be_reachable(self):
        table = {Phase.SETUP: frozenset(), Phase.PLAY: frozenset({Phase.ENDED}), Phase.ENDED: frozenset()}
        with pytest.raises(EngineError):
            check_table(table, Phase.SETUP)

    def test_undeclared_target_rejected(self):
        table = {Phase.PLAY: frozenset({Phase.VOTING, Phase.ENDED}), Phase.ENDED: frozenset()}
        with pytest.raises(EngineError):
            check_table(table, Phase.PLAY)

    def test_bad_table_fails_at_class_definition(self):
        """A variant whose table lets the game leave ENDED cannot be defined."""
        with pytest.raises(EngineError):
            class Broken(GameInstance):
                variant = Variant.DIGIT_DUEL
                transitions = {Phase.PLAY: frozenset({Phase.ENDED}), Phase.ENDED: frozenset({Phase.PLAY})}
                initial_phase = Phase.PLAY

    def test_move_accepted_after_end_fails_at_class_definition(self):
        with pytest.raises(EngineError):
            class Broken(GameInstance):
                variant = Variant.DIGIT_DUEL
                transitions = SECRET_DUEL_TRANSITIONS
                initial_phase = Phase.SETUP
                move_phases = {MoveType.GUESS: frozenset({Phase.PLAY, Phase.ENDED})}

    def test_transition_outside_table_raises(self):
        state = DigitDuelState(variant=Variant.DIGIT_DUEL, player_ids=["a", "b"], phase=Phase.SETUP)
        with pytest.raises(IllegalTransition):
            transition(SECRET_DUEL_TRANSITIONS, state, Phase.ENDED)
        assert state.phase == Phase.SETUP


class TestValidationOrder:
    """Common checks run before any variant check, in a fixed order."""

    def test_already_over_beats_wrong_phase(self, digit_duel):
        digit_duel.apply_move("alice", Move.guess("5678"))
        result = digit_duel.apply_move("bob", Move.submit_secret(code="1234"))
        assert result.rejection == RejectionCode.ALREADY_OVER

    def test_wrong_phase_beats_not_a_player(self, clock):
        game = DigitDuelGame.create(["alice", "bob"], clock=clock)
        result = game.apply_move("mallory", Move.guess("1234"))
        assert result.rejection == RejectionCode.WRONG_PHASE

    def test_not_a_player_beats_not_your_turn(self, digit_duel):
        result = digit_duel.apply_move("mallory", Move.guess("1234"))
        assert result.rejection == RejectionCode.NOT_A_PLAYER

    def test_not_your_turn_beats_invalid_payload(self, digit_duel):
        result = digit_duel.apply_move("bob", Move.guess("12"))
        assert result.rejection == RejectionCode.NOT_YOUR_TURN

    def test_unsupported_move_type(self, digit_duel):
        result = digit_duel.apply_move("alice", Move.fire(0, 0))
        assert not result.accepted
        assert result.rejection == RejectionCode.INVALID_PAYLOAD

    def test_rejection_leaves_state_unchanged(self, digit_duel):
        before_public = digit_duel.public_dict()
        before_secrets = digit_duel.export_secrets()

        digit_duel.apply_move("alice", Move.guess("12a4"))
        digit_duel.apply_move("bob", Move.guess("1234"))

        assert digit_duel.public_dict() == before_public
        assert digit_duel.export_secrets() == before_secrets


class TestRestore:
    """Public state and secrets travel separately."""

    def test_public_state_has_no_codes(self, digit_duel):
        public = digit_duel.public_dict()
        assert "4821" not in str(public)
        assert "5678" not in str(public)

    def test_restored_without_secrets_fails_safe(self, digit_duel, clock):
        restored = restore_game(Variant.DIGIT_DUEL, digit_duel.public_dict(), clock=clock)

        assert not restored.has_secrets
        result = restored.apply_move("alice", Move.guess("5678"))
        assert result.rejection == RejectionCode.SECRET_UNAVAILABLE
        assert restored.public_dict() == digit_duel.public_dict()

    def test_inject_secrets_resumes_play(self, digit_duel, clock):
        restored = restore_game(Variant.DIGIT_DUEL, digit_duel.public_dict(), clock=clock)
        restored.inject_secrets({"codes": {"alice": "4821", "bob": "5678"}})

        result = restored.apply_move("alice", Move.guess("5678"))
        assert result.outcome == Outcome.ENDED
        assert restored.state.winner == "alice"

    def test_inject_wrong_secret_type(self, digit_duel):
        with pytest.raises(GameConfigError):
            digit_duel.inject_secrets(object())

    def test_restore_wrong_variant(self, digit_duel):
        with pytest.raises(GameConfigError):
            restore_game(Variant.HANGMAN, digit_duel.public_dict())

    def test_round_trip_preserves_state(self, digit_duel):
        digit_duel.apply_move("alice", Move.guess("1234"))
        restored = DigitDuelGame.restore(digit_duel.public_dict(), secrets=DigitDuelSecrets(codes={}))
        assert restored.state == digit_duel.state
        assert restored.state.status == GameStatus.PLAYING


class TestProjection:
    def test_unknown_player(self, digit_duel):
        with pytest.raises(UnknownPlayer):
            digit_duel.get_view_for("mallory")

    def test_reveal_only_after_end(self, digit_duel):
        with pytest.raises(EngineError):
            digit_duel.reveal()
        digit_duel.apply_move("alice", Move.guess("5678"))
        assert digit_duel.reveal() == {"codes": {"alice": "4821", "bob": "5678"}}


class TestPlayerChecks:
    def test_duplicate_player_ids(self):
        with pytest.raises(GameConfigError):
            DigitDuelGame.create(["alice", "alice"])

    def test_too_many_players(self):
        with pytest.raises(ValueError):
            DigitDuelGame.create(["alice", "bob", "carol"])


class TestSettings:
    def test_defaults(self):
        settings = GameSettings.from_mapping(None)
        assert settings.chain_count == 5
        assert settings.secret_length == 4
        assert settings.turn_seconds == 60

    def test_out_of_range_falls_back(self):
        settings = GameSettings.from_mapping({"chain_count": 42, "secret_length": 7, "language": "de"})
        assert settings.chain_count == 5
        assert settings.secret_length == 4
        assert settings.language == "en"

    def test_accepts_strings_and_ignores_unknown_keys(self):
        settings = GameSettings.from_mapping({"chain_count": "3", "secret_length": "6", "colour": "red"})
        assert settings.chain_count == 3
        assert settings.secret_length == 6


class TestText:
    def test_normalize_word_strips_accents(self):
        assert normalize_word("Élève") == "ELEVE"
        assert normalize_word("garçon!") == "GARCON"
        assert normalize_word("") == ""

    def test_plain_word(self):
        assert is_plain_word("apple")
        assert not is_plain_word("a")
        assert not is_plain_word("two words")
        assert not is_plain_word("x" * 21)
        assert not is_plain_word(None)
        assert not is_plain_word("cat\n")
        assert not is_plain_word("\ncat")

    def test_normalize_letter(self):
        assert normalize_letter(" Q ") == "q"
        assert normalize_letter(5) == ""


class TestTurnClock:
    def test_time_remaining_floors_at_zero(self):
        clock = TurnClock(started_at=100.0, duration_seconds=60)
        assert clock.deadline == 160.0
        assert clock.time_remaining(130.0) == 30.0
        assert clock.time_remaining(500.0) == 0.0

    def test_expiry(self):
        clock = TurnClock(started_at=100.0, duration_seconds=60)
        assert not clock.is_expired(159.9)
        assert clock.is_expired(160.0)
