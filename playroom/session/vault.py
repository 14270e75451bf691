"""
Secret Vault - the host-held side channel for secret stores.

Public state is what a room persists and broadcasts. Secret stores
never travel with it: the vault keeps them, keyed by room, so a
reconnecting host can re-inject them into a restored instance.
"""

from __future__ import annotations
import json
import logging
import re
from pathlib import Path
from typing import Any, Optional


logger = logging.getLogger(__name__)

ROOM_ID_RE = re.compile(r"[A-Za-z0-9_-]{1,64}")


class InvalidRoomId(ValueError):
    """A room id that cannot key a vault entry (and so cannot host a game)."""


class SecretVault:
    """
    In-memory secret storage, optionally mirrored to one JSON file per room.

    Entries are plain dicts (the serialized secret store); the file
    mirror survives a process restart. Room ids are checked on every
    write, with or without a directory, so a room that works in memory
    also works on disk.
    """

    def __init__(self, directory: Optional[str | Path] = None):
        self._entries: dict[str, dict[str, Any]] = {}
        self.directory = Path(directory) if directory else None
        if self.directory is not None:
            self.directory.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def check_room_id(room_id: str) -> None:
        if not isinstance(room_id, str) or not ROOM_ID_RE.fullmatch(room_id):
            raise InvalidRoomId(f"Invalid room id: {room_id!r}")

    def put(self, room_id: str, secrets: dict[str, Any]) -> None:
        self.check_room_id(room_id)
        if self.directory is not None:
            self._path(room_id).write_text(json.dumps(secrets), encoding="utf-8")
        self._entries[room_id] = secrets

    def get(self, room_id: str) -> dict[str, Any] | None:
        if room_id in self._entries:
            return self._entries[room_id]
        if self.directory is None or not ROOM_ID_RE.fullmatch(room_id):
            return None
        path = self._path(room_id)
        if not path.exists():
            return None
        secrets = json.loads(path.read_text(encoding="utf-8"))
        self._entries[room_id] = secrets
        logger.info("Loaded secrets for room %s from disk", room_id)
        return secrets

    def drop(self, room_id: str) -> None:
        self._entries.pop(room_id, None)
        if self.directory is not None and ROOM_ID_RE.fullmatch(room_id):
            self._path(room_id).unlink(missing_ok=True)

    def __contains__(self, room_id: str) -> bool:
        return self.get(room_id) is not None

    def _path(self, room_id: str) -> Path:
        return self.directory / f"{room_id}.json"
