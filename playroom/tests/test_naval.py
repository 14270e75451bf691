"""
Tests for the naval combat variant.
"""

import itertools

import pytest

from ..engine_core.action import Move, Outcome
from ..engine_core.errors import RejectionCode
from ..engine_core.state import Phase
from ..games.naval import Cell, NavalGame
from ..games.naval.rules import PlacementError, is_straight_line, neighbors, validate_fleet
from .conftest import naval_fleet


SHIP_CELLS = [(r, c) for ship in naval_fleet() for r, c in ((p["row"], p["col"]) for p in ship["positions"])]
BATTLESHIP = [(0, 0), (0, 1), (0, 2), (0, 3)]


@pytest.fixture
def game(clock):
    game = NavalGame.create(["alice", "bob"], clock=clock)
    game.apply_setup("alice", {"ships": naval_fleet()})
    game.apply_setup("bob", {"ships": naval_fleet()})
    return game


def fleet_with(index, cells):
    fleet = naval_fleet()
    fleet[index]["positions"] = [{"row": r, "col": c} for r, c in cells]
    return fleet


class TestPlacementRules:
    def test_valid_fleet(self):
        assert len(validate_fleet(naval_fleet(), 10)) == 10

    def test_missing_ship(self):
        with pytest.raises(PlacementError):
            validate_fleet(naval_fleet()[:-1], 10)

    def test_wrong_size_for_class(self):
        fleet = naval_fleet()
        fleet[0]["size"] = 3
        with pytest.raises(PlacementError):
            validate_fleet(fleet, 10)

    def test_out_of_bounds(self):
        with pytest.raises(PlacementError):
            validate_fleet(fleet_with(9, [(9, 10)]), 10)

    def test_diagonal_ship(self):
        with pytest.raises(PlacementError):
            validate_fleet(fleet_with(3, [(8, 8), (9, 9)]), 10)

    def test_gap_in_ship(self):
        with pytest.raises(PlacementError):
            validate_fleet(fleet_with(1, [(8, 0), (8, 1), (8, 3)]), 10)

    def test_overlap(self):
        with pytest.raises(PlacementError):
            validate_fleet(fleet_with(9, [(0, 0)]), 10)

    def test_diagonal_touching(self):
        # (5, 2) touches the destroyer at (4, 1) corner to corner
        with pytest.raises(PlacementError):
            validate_fleet(fleet_with(9, [(5, 2)]), 10)

    def test_straight_line(self):
        assert is_straight_line([Cell(3, 5), Cell(1, 5), Cell(2, 5)])
        assert not is_straight_line([Cell(1, 1), Cell(1, 3)])

    def test_neighbors_clip_to_grid(self):
        assert neighbors([Cell(0, 0)], 10) == {Cell(0, 1), Cell(1, 0), Cell(1, 1)}


class TestSetup:
    def test_invalid_fleet_rejected(self, clock):
        game = NavalGame.create(["alice", "bob"], clock=clock)
        result = game.apply_setup("alice", {"ships": naval_fleet()[:5]})
        assert result.rejection == RejectionCode.INVALID_PAYLOAD

    def test_second_placement_duplicate(self, clock):
        game = NavalGame.create(["alice", "bob"], clock=clock)
        game.apply_setup("alice", {"ships": naval_fleet()})
        result = game.apply_setup("alice", {"ships": naval_fleet()})
        assert result.rejection == RejectionCode.DUPLICATE

    def test_battle_starts_when_both_placed(self, game):
        assert game.state.phase == Phase.PLAY
        assert game.state.current_player_id == "alice"

    def test_ship_ids(self, game):
        fleet = game.export_secrets().fleets["bob"]
        assert [s.id for s in fleet][:2] == ["bob-ship-0", "bob-ship-1"]


class TestFiring:
    def test_miss_passes_turn(self, game):
        result = game.apply_move("alice", Move.fire(9, 9))

        assert result.outcome == Outcome.PASS
        assert result.details["shot"]["hit"] is False
        assert game.state.current_player_id == "bob"

    def test_hit_does_not_grant_extra_turn(self, game):
        result = game.apply_move("alice", Move.fire(0, 0))
        assert result.details["shot"]["hit"] is True
        assert game.state.current_player_id == "bob"

    def test_sinking_marks_surroundings(self, game):
        result = game.apply_move("alice", Move.fire(6, 0))

        assert result.details["shot"]["sunk_ship"] == "Submarine"
        autos = {(s.position.row, s.position.col) for s in game.state.shots["alice"] if s.auto}
        assert autos == {(5, 0), (5, 1), (6, 1), (7, 0), (7, 1)}
        assert [s.name for s in game.state.sunk_ships["bob"]] == ["Submarine"]
        assert game.state.last_shot.position == Cell(6, 0)

    def test_auto_missed_cell_cannot_be_fired_again(self, game):
        game.apply_move("alice", Move.fire(6, 0))
        game.apply_move("bob", Move.fire(9, 9))
        result = game.apply_move("alice", Move.fire(7, 1))
        assert result.rejection == RejectionCode.DUPLICATE

    def test_repeat_shot(self, game):
        game.apply_move("alice", Move.fire(9, 9))
        game.apply_move("bob", Move.fire(9, 9))
        result = game.apply_move("alice", Move.fire(9, 9))
        assert result.rejection == RejectionCode.DUPLICATE

    def test_out_of_bounds_shot(self, game):
        assert game.apply_move("alice", Move.fire(10, 0)).rejection == RejectionCode.INVALID_PAYLOAD
        assert game.apply_move("alice", Move.fire(-1, 0)).rejection == RejectionCode.INVALID_PAYLOAD

    @pytest.mark.parametrize("order", list(itertools.permutations(BATTLESHIP)))
    def test_battleship_sinks_on_fourth_hit_in_any_order(self, game, order):
        bob_misses = iter([(9, c) for c in range(10)])
        # Fired before the sinking, so never auto-recorded
        game.apply_move("alice", Move.fire(1, 4))
        game.apply_move("bob", Move.fire(*next(bob_misses)))

        for i, (r, c) in enumerate(order):
            result = game.apply_move("alice", Move.fire(r, c))
            assert result.details["shot"]["hit"] is True
            battleship = game.export_secrets().fleets["bob"][0]
            assert battleship.sunk == (i == 3)
            assert len(battleship.hits) == i + 1
            game.apply_move("bob", Move.fire(*next(bob_misses)))

        assert result.details["shot"]["sunk_ship"] == "Battleship"
        autos = [(s.position.row, s.position.col) for s in game.state.shots["alice"] if s.auto]
        assert autos == [(0, 4), (1, 0), (1, 1), (1, 2), (1, 3)]
        assert len(game.state.shots["alice"]) == 1 + 4 + 5

    def test_sinking_the_fleet_wins(self, game):
        bob_misses = [(r, c) for r in (8, 9) for c in range(10)]
        result = None
        for i, (r, c) in enumerate(SHIP_CELLS):
            result = game.apply_move("alice", Move.fire(r, c))
            assert result.accepted, result.error
            if not result.game_over:
                game.apply_move("bob", Move.fire(*bob_misses[i]))

        assert result.outcome == Outcome.ENDED
        assert game.state.winner == "alice"
        assert len(game.state.sunk_ships["bob"]) == 10


class TestViews:
    def test_enemy_fleet_hidden_until_sunk(self, game):
        game.apply_move("alice", Move.fire(0, 0))
        view = game.get_view_for("alice")

        assert len(view.private["my_fleet"]) == 10
        assert "fleets" not in view.public
        assert view.public["sunk_ships"]["bob"] == []

    def test_shots_received(self, game):
        game.apply_move("alice", Move.fire(0, 0))
        view = game.get_view_for("bob")
        assert view.private["shots_received"][0]["position"] == {"row": 0, "col": 0}
        assert view.private["my_fleet"][0]["hits"] == [{"row": 0, "col": 0}]
