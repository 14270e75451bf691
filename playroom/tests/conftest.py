"""
Pytest fixtures for Playroom tests.
"""

import pytest

from ..engine_core.action import Move
from ..engine_core.errors import SourceUnavailable
from ..engine_core.settings import GameSettings
from ..games.digit_duel import DigitDuelGame
from ..words import ListWordSource, WordSource


class FakeClock:
    """Manually advanced stand-in for time.time."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FixedChoice:
    """rng stand-in whose choice() always picks the same player."""

    def __init__(self, pick: str):
        self.pick = pick

    def choice(self, seq):
        assert self.pick in seq
        return self.pick


class BrokenSource(WordSource):
    """A word source that is always down."""

    def __init__(self):
        self.calls = 0

    async def fetch(self, language: str = "en"):
        self.calls += 1
        raise SourceUnavailable("word service is down")


def naval_fleet() -> list[dict]:
    """A legal fleet: nothing overlaps, nothing touches."""
    def ship(name, cells):
        return {"name": name, "size": len(cells), "positions": [{"row": r, "col": c} for r, c in cells]}

    return [
        ship("Battleship", [(0, 0), (0, 1), (0, 2), (0, 3)]),
        ship("Cruiser", [(2, 0), (2, 1), (2, 2)]),
        ship("Cruiser", [(2, 4), (2, 5), (2, 6)]),
        ship("Destroyer", [(4, 0), (4, 1)]),
        ship("Destroyer", [(4, 3), (4, 4)]),
        ship("Destroyer", [(4, 6), (4, 7)]),
        ship("Submarine", [(6, 0)]),
        ship("Submarine", [(6, 2)]),
        ship("Submarine", [(6, 4)]),
        ship("Submarine", [(6, 6)]),
    ]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> GameSettings:
    return GameSettings()


@pytest.fixture
def word_source() -> ListWordSource:
    """Single-word source, so every pick is predictable."""
    return ListWordSource(["plane"])


@pytest.fixture
def broken_source() -> BrokenSource:
    return BrokenSource()


@pytest.fixture
def digit_duel(clock) -> DigitDuelGame:
    """A digit duel past setup: alice hides 4821, bob hides 5678."""
    game = DigitDuelGame.create(["alice", "bob"], clock=clock)
    game.apply_move("alice", Move.submit_secret(code="4821"))
    game.apply_move("bob", Move.submit_secret(code="5678"))
    return game
