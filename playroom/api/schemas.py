"""
Pydantic Schemas for API - Request/response models for OpenAPI.

Error Codes:
- ROOM_NOT_FOUND: Room does not exist
- NO_ACTIVE_GAME: Room exists but has no game running
- UNKNOWN_VARIANT: Variant tag not recognized
- INVALID_CONFIG: Wrong player count or duplicate player ids
- SOURCE_UNAVAILABLE: Word source or dictionary could not answer
- MOVE_REJECTED: The engine refused the move (see details.rejection)
- NOT_A_WORD: Word guess failed the dictionary check
- UNKNOWN_PLAYER: Player is not seated in this game
- GAME_NOT_OVER: Secrets are only revealed after the game ends
"""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field

from ..engine_core.action import MoveType
from ..engine_core.state import Variant


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    NO_ACTIVE_GAME = "NO_ACTIVE_GAME"
    INVALID_ROOM_ID = "INVALID_ROOM_ID"
    UNKNOWN_VARIANT = "UNKNOWN_VARIANT"
    INVALID_CONFIG = "INVALID_CONFIG"
    SOURCE_UNAVAILABLE = "SOURCE_UNAVAILABLE"
    MOVE_REJECTED = "MOVE_REJECTED"
    NOT_A_WORD = "NOT_A_WORD"
    UNKNOWN_PLAYER = "UNKNOWN_PLAYER"
    GAME_NOT_OVER = "GAME_NOT_OVER"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Request Models
# =============================================================================

class CreateGameRequest(BaseModel):
    """Request to start a game in a room."""
    variant: Variant
    player_ids: list[str] = Field(..., min_length=2, description="Seating order")
    settings: dict[str, Any] = Field(default_factory=dict, description="Lobby settings")


class SetupRequest(BaseModel):
    """A player's secret submission (code, words, fleet)."""
    player_id: str
    payload: dict[str, Any] = Field(default_factory=dict)


class MoveRequest(BaseModel):
    """A turn move."""
    player_id: str
    move_type: MoveType
    payload: dict[str, Any] = Field(default_factory=dict)


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class VariantInfo(BaseModel):
    variant: Variant
    min_players: int
    max_players: Optional[int] = None
    has_setup: bool
    needs_word_source: bool


class VariantListResponse(BaseModel):
    variants: list[VariantInfo]
    count: int


class GameResponse(BaseModel):
    """A room's game and its public state."""
    room_id: str
    variant: Variant
    room_state: str
    public: dict[str, Any]
    api_version: str = "v1"


class MoveResponse(BaseModel):
    """An accepted setup submission or move."""
    accepted: bool = True
    move_type: MoveType
    player_id: str
    outcome: str
    details: dict[str, Any] = Field(default_factory=dict)
    events: list[str] = Field(default_factory=list)
    public: dict[str, Any] = Field(default_factory=dict)
    api_version: str = "v1"


class ViewResponse(BaseModel):
    """One player's projection."""
    player_id: str
    variant: Variant
    public: dict[str, Any]
    private: dict[str, Any] = Field(default_factory=dict)


class RevealResponse(BaseModel):
    room_id: str
    variant: Variant
    winner: Optional[str] = None
    secrets: dict[str, Any]


class RoomInfo(BaseModel):
    room_id: str
    state: str
    variant: Optional[Variant] = None


class RoomListResponse(BaseModel):
    rooms: list[RoomInfo]
    count: int


class EndGameResponse(BaseModel):
    success: bool
    room_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
