"""
Tests for the progressive-reveal word-chain variant.
"""

import pytest

from ..engine_core.action import Move, MoveType, Outcome
from ..engine_core.errors import RejectionCode
from ..engine_core.settings import GameSettings
from ..engine_core.state import Phase
from ..games.word_chain import WordChainGame


@pytest.fixture
def game(clock):
    """alice's chain: fruit words. bob's chain: colors. Three words each."""
    game = WordChainGame.create(["alice", "bob"], GameSettings(chain_count=3, turn_seconds=60), clock=clock)
    game.apply_setup("alice", {"theme": "fruit", "words": ["apple", "banana", "cherry"]})
    game.apply_setup("bob", {"theme": "color", "words": ["red", "green", "blue"]})
    return game


class TestSetup:
    def test_theme_public_words_masked(self, game):
        public = game.public_dict()
        assert public["theme_words"] == {"alice": "FRUIT", "bob": "COLOR"}

        bob_chain = public["chains"]["bob"]
        assert [w["first_letter"] for w in bob_chain] == ["R", "G", "B"]
        assert [w["length"] for w in bob_chain] == [3, 5, 4]
        assert [w["revealed_prefix"] for w in bob_chain] == ["R", "G", "B"]
        assert all(w["word"] is None for w in bob_chain)
        assert "GREEN" not in str(public)

    def test_play_starts_with_a_timestamp(self, game, clock):
        assert game.state.phase == Phase.PLAY
        assert game.state.current_player_id == "alice"
        assert game.state.turn_started_at == clock.now

    def test_wrong_word_count(self, clock):
        game = WordChainGame.create(["alice", "bob"], GameSettings(chain_count=3), clock=clock)
        result = game.apply_setup("alice", {"theme": "fruit", "words": ["apple", "banana"]})
        assert result.rejection == RejectionCode.INVALID_PAYLOAD

    def test_non_letter_word(self, clock):
        game = WordChainGame.create(["alice", "bob"], GameSettings(chain_count=3), clock=clock)
        result = game.apply_setup("alice", {"theme": "fruit", "words": ["apple", "ban4na", "cherry"]})
        assert result.rejection == RejectionCode.INVALID_PAYLOAD

    def test_trailing_newline_rejected(self, clock):
        game = WordChainGame.create(["alice", "bob"], GameSettings(chain_count=3), clock=clock)
        result = game.apply_setup("alice", {"theme": "fruit", "words": ["cat\n", "banana", "cherry"]})
        assert result.rejection == RejectionCode.INVALID_PAYLOAD

        result = game.apply_setup("alice", {"theme": "fruit\n", "words": ["apple", "banana", "cherry"]})
        assert result.rejection == RejectionCode.INVALID_PAYLOAD
        assert not game.state.setup.has_submitted("alice")

    def test_duplicate_submission(self, clock):
        game = WordChainGame.create(["alice", "bob"], GameSettings(chain_count=3), clock=clock)
        game.apply_setup("alice", {"theme": "fruit", "words": ["apple", "banana", "cherry"]})
        result = game.apply_setup("alice", {"theme": "veg", "words": ["leek", "kale", "corn"]})
        assert result.rejection == RejectionCode.DUPLICATE


class TestGuessing:
    def test_hit_reveals_and_keeps_turn(self, game, clock):
        clock.advance(10)
        result = game.apply_move("alice", Move.guess("Green"))

        assert result.outcome == Outcome.CONTINUE
        assert result.details["word_index"] == 1
        assert game.state.current_player_id == "alice"
        assert game.state.chains["bob"][1].word == "GREEN"
        assert game.state.turn_started_at == clock.now

    def test_miss_reveals_letter_of_first_hidden_word(self, game):
        result = game.apply_move("alice", Move.guess("pink"))

        assert result.outcome == Outcome.PASS
        assert game.state.chains["bob"][0].revealed_prefix == "RE"
        assert game.state.current_player_id == "bob"
        assert game.state.guess_history[-1].correct is False

    def test_hint_skips_revealed_words(self, game):
        game.apply_move("alice", Move.guess("red"))
        game.apply_move("alice", Move.guess("pink"))
        assert game.state.chains["bob"][1].revealed_prefix == "GR"

    def test_hint_capped_at_full_length(self, game):
        for _ in range(4):
            game.apply_move("alice", Move.guess("pink"))
            game.apply_move("bob", Move.guess("kiwi"))

        red = game.state.chains["bob"][0]
        assert red.revealed_prefix == "RED"
        assert not red.revealed
        assert game.state.unrevealed_count("bob") == 3

    def test_revealing_every_word_wins(self, game):
        game.apply_move("alice", Move.guess("red"))
        game.apply_move("alice", Move.guess("blue"))
        result = game.apply_move("alice", Move.guess("green"))

        assert result.game_over
        assert game.state.winner == "alice"

    def test_guessing_a_revealed_word_is_a_miss(self, game):
        game.apply_move("alice", Move.guess("red"))
        result = game.apply_move("alice", Move.guess("red"))
        assert result.details["correct"] is False
        assert result.outcome == Outcome.PASS

    def test_each_miss_grows_at_most_one_hidden_word(self, game):
        game.apply_move("alice", Move.guess("green"))
        for _ in range(8):
            before = [len(w.revealed_prefix) for w in game.state.chains["bob"]]
            result = game.apply_move("alice", Move.guess("pink"))
            assert result.outcome == Outcome.PASS
            after = [len(w.revealed_prefix) for w in game.state.chains["bob"]]

            grown = [i for i, (b, a) in enumerate(zip(before, after)) if a != b]
            assert len(grown) <= 1
            assert all(0 <= a - b <= 1 for b, a in zip(before, after))
            assert all(not game.state.chains["bob"][i].revealed for i in grown)
            assert all(a <= w.length for a, w in zip(after, game.state.chains["bob"]))
            assert game.state.unrevealed_count("bob") == 2
            game.apply_move("bob", Move.guess("kiwi"))

    def test_out_of_turn(self, game):
        result = game.apply_move("bob", Move.guess("apple"))
        assert result.rejection == RejectionCode.NOT_YOUR_TURN


class TestDeadline:
    def test_time_remaining(self, game, clock):
        clock.advance(45)
        assert game.time_remaining(clock.now) == 15

    def test_pass_before_deadline_rejected(self, game, clock):
        result = game.apply_move("alice", Move.pass_turn(clock.now + 30))
        assert result.rejection == RejectionCode.INVALID_PAYLOAD
        assert game.state.current_player_id == "alice"

    def test_pass_after_deadline(self, game, clock):
        clock.advance(61)
        result = game.apply_move("alice", Move.pass_turn(clock.now))

        assert result.outcome == Outcome.PASS
        assert game.state.current_player_id == "bob"
        assert game.state.turn_started_at == clock.now

    def test_pass_needs_time(self, game):
        result = game.apply_move("alice", Move(MoveType.PASS_TURN, {}))
        assert result.rejection == RejectionCode.INVALID_PAYLOAD


class TestViews:
    def test_own_words_private(self, game):
        view = game.get_view_for("alice")
        assert view.private == {"my_words": ["APPLE", "BANANA", "CHERRY"]}
        assert "GREEN" not in str(view.to_dict())
