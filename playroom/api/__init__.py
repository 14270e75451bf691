"""
API Module - HTTP and WebSocket interface to game rooms.

Clients:
1. Start a game in a room
2. Submit their secret during setup
3. Play moves and receive per-player view updates over a WebSocket
4. Fetch the reveal once the game has ended

Views are per player: no response carries another player's secret.
"""

from .schemas import (
    # Requests
    CreateGameRequest,
    SetupRequest,
    MoveRequest,
    # Responses
    GameResponse,
    MoveResponse,
    ViewResponse,
    RevealResponse,
    ErrorResponse,
    # Enums
    ErrorCode,
)
from .service import GameService
from .app import create_app

__all__ = [
    # Requests
    "CreateGameRequest",
    "SetupRequest",
    "MoveRequest",
    # Responses
    "GameResponse",
    "MoveResponse",
    "ViewResponse",
    "RevealResponse",
    "ErrorResponse",
    # Enums
    "ErrorCode",
    # Service
    "GameService",
    "create_app",
]
