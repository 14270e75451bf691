"""
Fleet composition and placement rules.

Placement follows the no-touching convention: ships may not overlap
and may not sit next to each other, diagonals included.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass
from typing import Any, Iterable

from .state import Cell


# name -> (size, count)
FLEET_COMPOSITION: dict[str, tuple[int, int]] = {
    "Battleship": (4, 1),
    "Cruiser": (3, 2),
    "Destroyer": (2, 3),
    "Submarine": (1, 4),
}


class PlacementError(ValueError):
    """A submitted fleet breaks a composition or placement rule."""


@dataclass
class Placement:
    name: str
    size: int
    cells: list[Cell]


def in_bounds(cell: Cell, grid_size: int) -> bool:
    return 0 <= cell.row < grid_size and 0 <= cell.col < grid_size


def neighbors(cells: Iterable[Cell], grid_size: int) -> set[Cell]:
    """The in-bounds 8-connected ring around a group of cells."""
    own = set(cells)
    ring: set[Cell] = set()
    for cell in own:
        for dr in (-1, 0, 1):
            for dc in (-1, 0, 1):
                candidate = Cell(cell.row + dr, cell.col + dc)
                if candidate not in own and in_bounds(candidate, grid_size):
                    ring.add(candidate)
    return ring


def is_straight_line(cells: list[Cell]) -> bool:
    """Consecutive cells along one row or one column."""
    if len(cells) <= 1:
        return True
    rows = {c.row for c in cells}
    cols = {c.col for c in cells}
    if len(rows) == 1:
        spine = sorted(c.col for c in cells)
    elif len(cols) == 1:
        spine = sorted(c.row for c in cells)
    else:
        return False
    return all(b == a + 1 for a, b in zip(spine, spine[1:]))


def parse_cell(raw: Any) -> Cell:
    if isinstance(raw, dict):
        row, col = raw.get("row"), raw.get("col")
    elif isinstance(raw, (list, tuple)) and len(raw) == 2:
        row, col = raw
    else:
        raise PlacementError("Cells must be {row, col}")
    if not all(isinstance(v, int) and not isinstance(v, bool) for v in (row, col)):
        raise PlacementError("Cell coordinates must be integers")
    return Cell(row, col)


def parse_fleet(raw: Any) -> list[Placement]:
    if not isinstance(raw, list):
        raise PlacementError("ships must be a list")
    fleet = []
    for entry in raw:
        if not isinstance(entry, dict):
            raise PlacementError("Each ship must be an object")
        name = entry.get("name")
        positions = entry.get("positions")
        if not isinstance(name, str) or not isinstance(positions, list):
            raise PlacementError("Each ship needs a name and positions")
        size = entry.get("size", len(positions))
        fleet.append(Placement(name=name, size=size, cells=[parse_cell(p) for p in positions]))
    return fleet


def check_composition(fleet: list[Placement]) -> None:
    counts = Counter(p.name for p in fleet)
    expected = {name: count for name, (_, count) in FLEET_COMPOSITION.items()}
    if counts != Counter(expected):
        raise PlacementError("Invalid fleet composition")
    for p in fleet:
        if p.size != FLEET_COMPOSITION[p.name][0]:
            raise PlacementError(f"{p.name} must have size {FLEET_COMPOSITION[p.name][0]}")


def check_placement(fleet: list[Placement], grid_size: int) -> None:
    """Bounds, shape, overlap and no-touching, checked in placement order."""
    occupied: set[Cell] = set()
    blocked: set[Cell] = set()
    for p in fleet:
        if len(p.cells) != p.size:
            raise PlacementError(f"{p.name} must cover {p.size} cells")
        if not all(in_bounds(c, grid_size) for c in p.cells):
            raise PlacementError(f"{p.name} is out of bounds")
        if len(set(p.cells)) != len(p.cells) or not is_straight_line(p.cells):
            raise PlacementError(f"{p.name} must be a straight horizontal or vertical line")
        if any(c in occupied or c in blocked for c in p.cells):
            raise PlacementError(f"{p.name} overlaps or touches another ship")
        occupied.update(p.cells)
        blocked.update(neighbors(p.cells, grid_size))


def validate_fleet(raw: Any, grid_size: int) -> list[Placement]:
    """Parse and check a submitted fleet. Raises PlacementError."""
    fleet = parse_fleet(raw)
    check_composition(fleet)
    check_placement(fleet, grid_size)
    return fleet
