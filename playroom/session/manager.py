"""
Room Manager - Hosts one live game instance per room.

LIFECYCLE:
1. Host starts a game in a room -> instance created (word fetched first
   for word-sourced variants), secrets written to the vault
2. During the game:
   - Players submit setup secrets and moves
   - Each submission runs under the room's lock, validate-then-resolve
     completes before the next one starts
   - Accepted submissions refresh the vault
3. Host reconnects -> public state restored from the snapshot, secrets
   re-injected from the vault
4. Game ends or the host resets -> instance discarded, vault entry dropped

SINGLE WRITER:
- No two moves for the same room are ever resolved concurrently
- Nothing awaits while a room lock is held
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Optional
import logging
import random
import threading
import time

from ..engine_core.action import Move, MoveResult
from ..engine_core.errors import EngineError
from ..engine_core.instance import GameInstance
from ..engine_core.projector import ProjectedView, to_plain
from ..engine_core.settings import GameSettings
from ..engine_core.state import Variant
from ..games import create_game, restore_game
from ..words import WordSource
from .vault import SecretVault


logger = logging.getLogger(__name__)


class RoomNotFound(EngineError, KeyError):
    def __str__(self) -> str:
        return f"Room not found: {self.args[0]}"


class NoActiveGame(EngineError):
    """The room exists but no game is running in it."""


class RoomState(Enum):
    """State of a room."""
    LOBBY = "lobby"  # No instance
    PLAYING = "playing"  # Instance live
    FINISHED = "finished"  # Instance ended, kept for the reveal


@dataclass
class Room:
    """
    A room and at most one live instance.

    The lock serializes every setup submission and move for this room.
    """
    room_id: str
    created_at: float
    variant: Variant | None = None
    settings: GameSettings = field(default_factory=GameSettings)
    instance: GameInstance | None = None
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    @property
    def state(self) -> RoomState:
        if self.instance is None:
            return RoomState.LOBBY
        if self.instance.is_over():
            return RoomState.FINISHED
        return RoomState.PLAYING

    def is_active(self) -> bool:
        return self.state == RoomState.PLAYING

    def require_instance(self) -> GameInstance:
        if self.instance is None:
            raise NoActiveGame(f"No game running in room {self.room_id}")
        return self.instance


class RoomManager:
    """
    Manages rooms.

    Responsibilities:
    - Create instances and keep exactly one per room
    - Serialize moves per room
    - Keep the vault in step with every accepted submission
    - Restore instances after a reconnect
    """

    def __init__(
        self,
        vault: Optional[SecretVault] = None,
        source: Optional[WordSource] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._rooms: dict[str, Room] = {}
        self._rooms_lock = threading.Lock()
        self.vault = vault or SecretVault()
        self.source = source
        self.rng = rng
        self.clock = clock

    # =========================================================================
    # Rooms
    # =========================================================================

    def open_room(self, room_id: str) -> Room:
        """Get or create a room."""
        with self._rooms_lock:
            room = self._rooms.get(room_id)
            if room is None:
                room = Room(room_id=room_id, created_at=self.clock())
                self._rooms[room_id] = room
            return room

    def get_room(self, room_id: str) -> Room:
        room = self._rooms.get(room_id)
        if room is None:
            raise RoomNotFound(room_id)
        return room

    def close_room(self, room_id: str) -> None:
        with self._rooms_lock:
            self._rooms.pop(room_id, None)
        self.vault.drop(room_id)

    def list_rooms(self) -> list[dict[str, Any]]:
        return [
            {
                "room_id": room.room_id,
                "state": room.state.value,
                "variant": room.variant.value if room.variant else None,
            }
            for room in self._rooms.values()
        ]

    def cleanup_stale_rooms(self, max_age_seconds: int = 3600) -> list[str]:
        """
        Close rooms older than max_age that have no game in progress.

        Called periodically to free memory.
        """
        now = self.clock()
        stale = [
            room_id for room_id, room in self._rooms.items()
            if now - room.created_at > max_age_seconds and not room.is_active()
        ]
        for room_id in stale:
            self.close_room(room_id)
        if stale:
            logger.info("Closed %d stale rooms", len(stale))
        return stale

    # =========================================================================
    # Game lifecycle
    # =========================================================================

    async def start_game(
        self,
        room_id: str,
        variant: Variant | str,
        player_ids: Iterable[str],
        settings: Optional[GameSettings] = None,
    ) -> Room:
        """
        Start a game, replacing whatever the room was running.

        The word (if any) is fetched and the secrets are written to the
        vault before the room is touched, so a SourceUnavailable or an
        InvalidRoomId leaves the room exactly as it was.
        """
        settings = settings or GameSettings()
        self.vault.check_room_id(room_id)
        instance = await create_game(
            variant, player_ids, settings, source=self.source, rng=self.rng, clock=self.clock,
        )

        room = self.open_room(room_id)
        with room.lock:
            self.vault.put(room_id, to_plain(instance.export_secrets()))
            room.variant = instance.variant
            room.settings = settings
            room.instance = instance
        logger.info("Room %s started %s", room_id, instance.variant.value)
        return room

    def reset_to_lobby(self, room_id: str) -> None:
        room = self.get_room(room_id)
        with room.lock:
            room.instance = None
            room.variant = None
        self.vault.drop(room_id)
        logger.info("Room %s back to lobby", room_id)

    def submit_setup(self, room_id: str, player_id: str, payload: dict[str, Any]) -> MoveResult:
        room = self.get_room(room_id)
        with room.lock:
            result = room.require_instance().apply_setup(player_id, payload)
            if result.accepted:
                self._store_secrets(room)
            return result

    def apply_move(self, room_id: str, player_id: str, move: Move) -> MoveResult:
        room = self.get_room(room_id)
        with room.lock:
            result = room.require_instance().apply_move(player_id, move)
            if result.accepted:
                self._store_secrets(room)
            return result

    # =========================================================================
    # Views
    # =========================================================================

    def get_view(self, room_id: str, player_id: str) -> ProjectedView:
        room = self.get_room(room_id)
        with room.lock:
            return room.require_instance().get_view_for(player_id)

    def snapshot(self, room_id: str) -> dict[str, Any]:
        """Serialized public state, safe to persist or broadcast."""
        room = self.get_room(room_id)
        with room.lock:
            return room.require_instance().public_dict()

    def reveal(self, room_id: str) -> dict[str, Any]:
        room = self.get_room(room_id)
        with room.lock:
            return room.require_instance().reveal()

    # =========================================================================
    # Reconnect
    # =========================================================================

    def restore(
        self,
        room_id: str,
        variant: Variant | str,
        public: dict[str, Any],
        settings: Optional[GameSettings] = None,
        with_vault: bool = True,
    ) -> Room:
        """
        Rebuild the room's instance from a persisted snapshot.

        With with_vault, secrets are re-injected straight away when the
        vault holds them; otherwise moves fail with SECRET_UNAVAILABLE
        until inject_secrets() is called.
        """
        settings = settings or GameSettings()
        self.vault.check_room_id(room_id)
        secrets = self.vault.get(room_id) if with_vault else None
        instance = restore_game(variant, public, settings, secrets, clock=self.clock)

        room = self.open_room(room_id)
        with room.lock:
            room.variant = instance.variant
            room.settings = settings
            room.instance = instance
        logger.info(
            "Room %s restored %s (secrets %s)",
            room_id, instance.variant.value, "present" if instance.has_secrets else "missing",
        )
        return room

    def inject_secrets(self, room_id: str, secrets: Optional[dict[str, Any]] = None) -> None:
        """Re-attach secrets, from the vault unless given explicitly."""
        room = self.get_room(room_id)
        if secrets is None:
            secrets = self.vault.get(room_id)
            if secrets is None:
                raise NoActiveGame(f"Vault has no secrets for room {room_id}")
        with room.lock:
            room.require_instance().inject_secrets(secrets)
            self._store_secrets(room)

    def _store_secrets(self, room: Room) -> None:
        secrets = room.instance.export_secrets() if room.instance else None
        if secrets is not None:
            self.vault.put(room.room_id, to_plain(secrets))
