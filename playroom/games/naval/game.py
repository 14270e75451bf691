"""
Naval Game - validator, resolver and projector for fleet combat.
"""

from __future__ import annotations
import time
from typing import Any, Callable, Iterable

from ...engine_core.action import Move, MoveResult, MoveType, Outcome
from ...engine_core.errors import Rejection, RejectionCode
from ...engine_core.fsm import SECRET_DUEL_TRANSITIONS
from ...engine_core.instance import GameInstance, Resolver
from ...engine_core.projector import to_plain
from ...engine_core.settings import GameSettings
from ...engine_core.state import Phase, SetupTracker, Variant
from .rules import PlacementError, in_bounds, neighbors, validate_fleet
from .state import Cell, NavalSecrets, NavalState, Ship, ShotRecord, SunkShip


class NavalGame(GameInstance):
    """
    Two fleets on a square grid, one shot per turn.

    A hit does not earn another shot. Sinking a ship fills its
    surrounding cells in as misses for the shooter.
    """
    variant = Variant.NAVAL
    state_cls = NavalState
    secrets_cls = NavalSecrets

    transitions = SECRET_DUEL_TRANSITIONS
    initial_phase = Phase.SETUP
    move_phases = {
        MoveType.SUBMIT_SECRET: frozenset({Phase.SETUP}),
        MoveType.FIRE: frozenset({Phase.PLAY}),
    }
    turn_moves = frozenset({MoveType.FIRE})

    state: NavalState
    _secrets: NavalSecrets

    @classmethod
    def create(
        cls,
        player_ids: Iterable[str],
        settings: GameSettings | None = None,
        clock: Callable[[], float] = time.time,
    ) -> NavalGame:
        settings = settings or GameSettings()
        ids = cls.check_players(player_ids)
        state = NavalState(
            variant=cls.variant,
            player_ids=ids,
            phase=cls.initial_phase,
            grid_size=settings.grid_size,
            setup=SetupTracker.for_players(ids),
            shots={pid: [] for pid in ids},
            sunk_ships={pid: [] for pid in ids},
        )
        return cls(state, NavalSecrets(), settings, clock=clock)

    def _validate_move(self, player_id: str, move: Move) -> Rejection | None:
        if move.move_type == MoveType.SUBMIT_SECRET:
            try:
                validate_fleet(move.payload.get("ships"), self.state.grid_size)
            except PlacementError as e:
                return Rejection(RejectionCode.INVALID_PAYLOAD, str(e))
            if self.state.setup.has_submitted(player_id):
                return Rejection(RejectionCode.DUPLICATE, "Ships already placed")
            return None

        row, col = move.payload.get("row"), move.payload.get("col")
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in (row, col)):
            return Rejection(RejectionCode.INVALID_PAYLOAD, "Shot needs integer row and col")
        cell = Cell(row, col)
        if not in_bounds(cell, self.state.grid_size):
            return Rejection(RejectionCode.INVALID_PAYLOAD, "Shot out of bounds")
        if self.state.has_fired_at(player_id, cell):
            return Rejection(RejectionCode.DUPLICATE, "Already fired at this position")
        return None

    def _resolvers(self) -> dict[MoveType, Resolver]:
        return {
            MoveType.SUBMIT_SECRET: self._resolve_fleet,
            MoveType.FIRE: self._resolve_shot,
        }

    def _resolve_fleet(
        self, state: NavalState, secrets: NavalSecrets, player_id: str, move: Move
    ) -> MoveResult:
        fleet = validate_fleet(move.payload["ships"], state.grid_size)
        secrets.fleets[player_id] = [
            Ship(id=f"{player_id}-ship-{i}", name=p.name, size=p.size, cells=list(p.cells))
            for i, p in enumerate(fleet)
        ]
        state.setup.mark(player_id)

        if not state.setup.complete:
            return MoveResult.ok(Outcome.WAITING, events=[f"{player_id} placed their fleet"])

        self._move_to(state, Phase.PLAY)
        state.current_player_index = 0
        return MoveResult.ok(Outcome.STARTED, details={"current_player_id": state.current_player_id})

    def _resolve_shot(
        self, state: NavalState, secrets: NavalSecrets, player_id: str, move: Move
    ) -> MoveResult:
        target_id = state.opponent_of(player_id)
        cell = Cell(move.payload["row"], move.payload["col"])
        fleet = secrets.fleets[target_id]
        shots = state.shots[player_id]

        struck = next((s for s in fleet if cell in s.cells and cell not in s.hits), None)
        record = ShotRecord(position=cell, hit=struck is not None)
        shots.append(record)
        events = []

        if struck is not None:
            struck.hits.append(cell)
            if len(struck.hits) == struck.size:
                struck.sunk = True
                record.sunk_ship = struck.name
                state.sunk_ships[target_id].append(
                    SunkShip(id=struck.id, name=struck.name, size=struck.size, cells=list(struck.cells))
                )
                for around in sorted(neighbors(struck.cells, state.grid_size), key=lambda c: (c.row, c.col)):
                    if not state.has_fired_at(player_id, around):
                        shots.append(ShotRecord(position=around, hit=False, auto=True))
                events.append(f"{player_id} sank {target_id}'s {struck.name}")

        state.last_shot = record
        details: dict[str, Any] = {"target_id": target_id, "shot": to_plain(record)}

        if all(s.sunk for s in fleet):
            self._finish(state, player_id)
            return MoveResult.ok(Outcome.ENDED, details, events + [f"{player_id} sank the whole fleet"])

        state.advance_turn()
        details["current_player_id"] = state.current_player_id
        return MoveResult.ok(Outcome.PASS, details, events)

    def _private_view(self, player_id: str) -> dict[str, Any]:
        opponent_id = self.state.opponent_of(player_id)
        return {
            "my_fleet": [to_plain(s) for s in self._secrets.fleets.get(player_id, [])],
            "shots_received": [to_plain(s) for s in self.state.shots.get(opponent_id, [])],
        }
