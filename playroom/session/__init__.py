"""
Session Module - Hosts live games on behalf of the transport layer.

A room holds at most one game instance:
- Created when the host starts a game
- Every setup submission and move runs under the room's lock
- Secret stores are mirrored into the vault, never into public state
- Restorable from a public snapshot plus the vault after a reconnect
"""

from .manager import NoActiveGame, Room, RoomManager, RoomNotFound, RoomState
from .vault import InvalidRoomId, SecretVault

__all__ = [
    "InvalidRoomId",
    "NoActiveGame",
    "Room",
    "RoomManager",
    "RoomNotFound",
    "RoomState",
    "SecretVault",
]
