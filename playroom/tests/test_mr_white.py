"""
Tests for the Mr White social deduction variant.
"""

import asyncio

import pytest

from ..engine_core.action import Move, Outcome
from ..engine_core.errors import GameConfigError, RejectionCode, SourceUnavailable
from ..engine_core.state import TIE, Phase
from ..games.mr_white import MrWhiteGame, Side
from .conftest import FixedChoice


PLAYERS = ["ann", "ben", "cat", "dan"]


@pytest.fixture
def game(clock):
    """dan is Mr White; the word is APPLE."""
    return MrWhiteGame.from_word(PLAYERS, "apple", rng=FixedChoice("dan"), clock=clock)


def give_clues(game, clues=None):
    clues = clues or {}
    for pid in list(game.state.active_player_ids):
        result = game.apply_move(pid, Move.clue(clues.get(pid, f"clue from {pid}")))
        assert result.accepted, result.error


def vote_round(game, votes):
    game.apply_move(game.state.active_player_ids[0], Move.start_voting())
    result = None
    for voter, target in votes.items():
        result = game.apply_move(voter, Move.vote(target))
        assert result.accepted, result.error
    return result


class TestCreation:
    def test_roles_are_secret(self, game):
        public = game.public_dict()
        assert public["mr_white_id"] is None
        assert "APPLE" not in str(public)
        assert game.state.phase == Phase.CLUES

    def test_needs_three_players(self):
        with pytest.raises(GameConfigError):
            MrWhiteGame.from_word(["ann", "ben"], "apple")

    def test_create_from_source(self, word_source):
        game = asyncio.run(MrWhiteGame.create(PLAYERS, source=word_source, rng=FixedChoice("ann")))
        assert game.export_secrets().word == "PLANE"
        assert game.export_secrets().mr_white_id == "ann"

    def test_source_down(self, broken_source):
        with pytest.raises(SourceUnavailable):
            asyncio.run(MrWhiteGame.create(PLAYERS, source=broken_source))


class TestClues:
    def test_clues_in_turn_order(self, game):
        result = game.apply_move("ben", Move.clue("red"))
        assert result.rejection == RejectionCode.NOT_YOUR_TURN

        game.apply_move("ann", Move.clue("red"))
        assert game.state.current_player_id == "ben"

    def test_last_clue_opens_discussion(self, game):
        give_clues(game)
        assert game.state.phase == Phase.DISCUSSION
        assert len(game.state.clues) == 4

    def test_civilian_clue_cannot_contain_word(self, game):
        result = game.apply_move("ann", Move.clue("Apple pie"))
        assert result.rejection == RejectionCode.INVALID_PAYLOAD

    def test_mr_white_clue_is_not_checked_against_word(self, game):
        give_clues(game, {"dan": "apple"})
        assert game.state.clues[-1].text == "apple"

    def test_clue_length(self, game):
        assert game.apply_move("ann", Move.clue("x" * 41)).rejection == RejectionCode.INVALID_PAYLOAD
        assert game.apply_move("ann", Move.clue("   ")).rejection == RejectionCode.INVALID_PAYLOAD


class TestVoting:
    def test_vote_only_in_voting_phase(self, game):
        give_clues(game)
        result = game.apply_move("ann", Move.vote("dan"))
        assert result.rejection == RejectionCode.WRONG_PHASE

    def test_vote_targets(self, game):
        give_clues(game)
        game.apply_move("cat", Move.start_voting())

        assert game.apply_move("ann", Move.vote("ann")).rejection == RejectionCode.INVALID_PAYLOAD
        assert game.apply_move("ann", Move.vote("zed")).rejection == RejectionCode.INVALID_PAYLOAD
        assert game.apply_move("ann", Move.vote("dan")).accepted
        assert game.apply_move("ann", Move.vote("ben")).rejection == RejectionCode.DUPLICATE

    def test_votes_hidden_until_tally(self, game):
        give_clues(game)
        game.apply_move("ann", Move.start_voting())
        result = game.apply_move("ann", Move.vote("dan"))

        assert result.outcome == Outcome.WAITING
        assert game.state.voters == ["ann"]
        assert game.state.tallies == []
        assert game.get_view_for("ann").private["my_vote"] == "dan"
        assert game.get_view_for("ben").private["my_vote"] is None

    def test_catching_mr_white_opens_last_guess(self, game):
        give_clues(game)
        vote_round(game, {"ann": "dan", "ben": "dan", "cat": "dan", "dan": "ann"})

        assert game.state.phase == Phase.LAST_GUESS
        assert game.state.mr_white_id == "dan"
        assert game.state.current_player_id == "dan"
        assert game.state.tallies[-1].votes["dan"] == "ann"

    def test_tie_starts_new_round(self, game):
        give_clues(game)
        vote_round(game, {"ann": "ben", "ben": "ann", "cat": "dan", "dan": "cat"})

        assert game.state.phase == Phase.CLUES
        assert game.state.round_number == 2
        assert game.state.active_player_ids == PLAYERS
        assert game.state.tallies[-1].eliminated_id is None
        assert game.state.voters == []

    def test_eliminated_player_is_out(self, game):
        give_clues(game)
        vote_round(game, {"ann": "ben", "ben": "dan", "cat": "ben", "dan": "ben"})

        assert game.state.eliminated_ids == ["ben"]
        assert game.state.current_player_id == "ann"
        game.apply_move("ann", Move.clue("fruit"))
        assert game.apply_move("ben", Move.clue("tree")).rejection == RejectionCode.NOT_A_PLAYER

    def test_mr_white_survives_to_two(self, game):
        give_clues(game)
        vote_round(game, {"ann": "ben", "ben": "dan", "cat": "ben", "dan": "ben"})
        give_clues(game)
        result = vote_round(game, {"ann": "cat", "cat": "ann", "dan": "cat"})

        assert result.game_over
        assert game.state.winner == "dan"
        assert game.state.winning_side == Side.MR_WHITE
        assert game.state.final_word == "APPLE"


class TestLastGuess:
    @pytest.fixture
    def caught(self, game):
        give_clues(game)
        vote_round(game, {"ann": "dan", "ben": "dan", "cat": "dan", "dan": "ann"})
        return game

    def test_only_mr_white_guesses(self, caught):
        assert caught.apply_move("ann", Move.guess("apple")).rejection == RejectionCode.NOT_YOUR_TURN

    def test_right_guess_wins(self, caught):
        result = caught.apply_move("dan", Move.guess("Apple"))
        assert result.game_over
        assert caught.state.winner == "dan"
        assert caught.state.winning_side == Side.MR_WHITE

    def test_wrong_guess_civilians_win(self, caught):
        caught.apply_move("dan", Move.guess("pear"))
        assert caught.state.winner == TIE
        assert caught.state.winning_side == Side.CIVILIANS
        assert caught.reveal()["word"] == "APPLE"


class TestViews:
    def test_roles(self, game):
        assert game.get_view_for("ann").private["word"] == "APPLE"
        assert game.get_view_for("ann").private["role"] == "CIVILIAN"

        dan = game.get_view_for("dan")
        assert dan.private["role"] == "MR_WHITE"
        assert dan.private["word"] is None
        assert "APPLE" not in str(dan.to_dict())
