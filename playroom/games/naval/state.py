"""
Naval State - shots are public, fleets stay in the secret store.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ...engine_core.state import GameStatus, Phase, PublicState, SetupTracker, Variant  # noqa: F401 (inherited field types)


@dataclass(frozen=True)
class Cell:
    row: int
    col: int


@dataclass
class Ship:
    id: str
    name: str
    size: int
    cells: list[Cell] = field(default_factory=list)
    hits: list[Cell] = field(default_factory=list)
    sunk: bool = False


@dataclass
class SunkShip:
    """A ship made public because it went down."""
    id: str
    name: str
    size: int
    cells: list[Cell] = field(default_factory=list)


@dataclass
class ShotRecord:
    position: Cell
    hit: bool
    sunk_ship: str | None = None  # Ship name when this shot sank it
    auto: bool = False  # Filled in around a sunk ship, not fired


@dataclass
class NavalState(PublicState):
    """
    shots[p] holds the shots fired BY p; sunk_ships[p] the ships p has lost.
    """
    grid_size: int = 10
    setup: SetupTracker = field(default_factory=SetupTracker)
    shots: dict[str, list[ShotRecord]] = field(default_factory=dict)
    sunk_ships: dict[str, list[SunkShip]] = field(default_factory=dict)
    last_shot: ShotRecord | None = None

    def has_fired_at(self, player_id: str, cell: Cell) -> bool:
        return any(s.position == cell for s in self.shots.get(player_id, []))


@dataclass
class NavalSecrets:
    fleets: dict[str, list[Ship]] = field(default_factory=dict)
