"""
FastAPI Application - REST + WebSocket surface for game rooms.

Endpoints:
    GET    /api/v1/variants                         List hosted variants
    GET    /api/v1/rooms                            List rooms
    POST   /api/v1/rooms/{room_id}/game             Start a game
    DELETE /api/v1/rooms/{room_id}/game             Back to lobby
    POST   /api/v1/rooms/{room_id}/setup            Submit a secret
    POST   /api/v1/rooms/{room_id}/moves            Play a move
    GET    /api/v1/rooms/{room_id}/state            Public state
    GET    /api/v1/rooms/{room_id}/view/{player_id} One player's projection
    GET    /api/v1/rooms/{room_id}/reveal           Every secret, after the end
    WS     /api/v1/rooms/{room_id}/ws?player_id=    Per-player view updates

All responses are JSON with explicit Pydantic schemas. A refused move
answers 409 with the engine's rejection code in details.rejection.
"""

from contextlib import asynccontextmanager
from typing import Optional, Union
import json
import logging

from fastapi import FastAPI, Query, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..config import Config
from .service import GameService
from .schemas import (
    CreateGameRequest,
    EndGameResponse,
    ErrorCode,
    ErrorResponse,
    GameResponse,
    HealthResponse,
    MoveRequest,
    MoveResponse,
    RevealResponse,
    RoomListResponse,
    SetupRequest,
    VariantListResponse,
    ViewResponse,
)


logger = logging.getLogger(__name__)

STATUS_CODES = {
    ErrorCode.ROOM_NOT_FOUND: 404,
    ErrorCode.NO_ACTIVE_GAME: 404,
    ErrorCode.UNKNOWN_PLAYER: 404,
    ErrorCode.MOVE_REJECTED: 409,
    ErrorCode.GAME_NOT_OVER: 409,
    ErrorCode.NOT_A_WORD: 422,
    ErrorCode.SOURCE_UNAVAILABLE: 503,
    ErrorCode.INTERNAL_ERROR: 500,
}


def create_app(service: Optional[GameService] = None, config: Optional[Config] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional GameService (built from config if not provided)
        config: Optional Config (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    config = config or Config.from_env()
    api_service = service or GameService.from_config(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await api_service.aclose()

    app = FastAPI(
        lifespan=lifespan,
        title="Playroom Game API",
        description="""
Authoritative engine for two-player and party word/number games.

## Error Codes

| Code | Description |
|------|-------------|
| `ROOM_NOT_FOUND` | Room does not exist |
| `NO_ACTIVE_GAME` | Room has no game running |
| `INVALID_CONFIG` | Wrong player count or duplicate ids |
| `INVALID_ROOM_ID` | Room id unusable as a storage key |
| `SOURCE_UNAVAILABLE` | Word source or dictionary unreachable |
| `MOVE_REJECTED` | Engine refused the move |
| `NOT_A_WORD` | Guess failed the dictionary check |
        """,
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # room_id -> {websocket: player_id}
    ws_connections: dict[str, dict[WebSocket, str]] = {}

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=STATUS_CODES.get(error.error_code, 400),
            content=error.model_dump(mode="json"),
        )

    async def broadcast_views(room_id: str):
        """Send every connected player their own fresh projection."""
        connections = ws_connections.get(room_id)
        if not connections:
            return
        dead_connections = []
        for ws, player_id in list(connections.items()):
            view = api_service.get_view(room_id, player_id)
            if isinstance(view, ErrorResponse):
                continue
            try:
                await ws.send_json({"type": "view_update", "payload": view.model_dump(mode="json")})
            except (RuntimeError, WebSocketDisconnect):
                dead_connections.append(ws)
        for ws in dead_connections:
            connections.pop(ws, None)

    # =========================================================================
    # Variants and rooms
    # =========================================================================

    @app.get("/api/v1/variants", response_model=VariantListResponse, tags=["Games"])
    async def list_variants() -> VariantListResponse:
        return api_service.list_variants()

    @app.get("/api/v1/rooms", response_model=RoomListResponse, tags=["Rooms"])
    async def list_rooms() -> RoomListResponse:
        return api_service.list_rooms()

    # =========================================================================
    # Game lifecycle
    # =========================================================================

    @app.post(
        "/api/v1/rooms/{room_id}/game",
        response_model=GameResponse,
        responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
        tags=["Rooms"],
        summary="Start a game in a room",
    )
    async def create_game(room_id: str, request: CreateGameRequest) -> Union[GameResponse, JSONResponse]:
        """
        Start a game, replacing any game the room was running.

        Word-sourced variants fetch their word first; if the source is
        down the room is left untouched and 503 is returned.
        """
        response = await api_service.create_game(room_id, request)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        await broadcast_views(room_id)
        return response

    @app.delete(
        "/api/v1/rooms/{room_id}/game",
        response_model=EndGameResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Rooms"],
    )
    async def end_game(room_id: str) -> Union[EndGameResponse, JSONResponse]:
        response = api_service.end_game(room_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.post(
        "/api/v1/rooms/{room_id}/setup",
        response_model=MoveResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Play"],
        summary="Submit a player's secret",
    )
    async def submit_setup(room_id: str, request: SetupRequest) -> Union[MoveResponse, JSONResponse]:
        response = api_service.submit_setup(room_id, request)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        await broadcast_views(room_id)
        return response

    @app.post(
        "/api/v1/rooms/{room_id}/moves",
        response_model=MoveResponse,
        responses={
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse, "description": "Move rejected"},
            422: {"model": ErrorResponse, "description": "Word not in dictionary"},
        },
        tags=["Play"],
        summary="Play a move",
    )
    async def submit_move(room_id: str, request: MoveRequest) -> Union[MoveResponse, JSONResponse]:
        """
        Play a move.

        ```json
        {"player_id": "alice", "move_type": "GUESS", "payload": {"value": "1234"}}
        ```
        """
        response = await api_service.submit_move(room_id, request)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        await broadcast_views(room_id)
        return response

    # =========================================================================
    # Views
    # =========================================================================

    @app.get(
        "/api/v1/rooms/{room_id}/state",
        response_model=GameResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Views"],
    )
    async def get_state(room_id: str) -> Union[GameResponse, JSONResponse]:
        response = api_service.get_state(room_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.get(
        "/api/v1/rooms/{room_id}/view/{player_id}",
        response_model=ViewResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Views"],
    )
    async def get_view(room_id: str, player_id: str) -> Union[ViewResponse, JSONResponse]:
        response = api_service.get_view(room_id, player_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.get(
        "/api/v1/rooms/{room_id}/reveal",
        response_model=RevealResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Views"],
    )
    async def reveal(room_id: str) -> Union[RevealResponse, JSONResponse]:
        response = api_service.reveal(room_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    @app.websocket("/api/v1/rooms/{room_id}/ws")
    async def websocket_endpoint(websocket: WebSocket, room_id: str, player_id: str = Query(...)):
        """
        WebSocket for real-time updates.

        Messages from server:
        - view_update: this player's projection changed
        - error: malformed client message

        Messages from client:
        - ping: Keep-alive
        """
        await websocket.accept()
        ws_connections.setdefault(room_id, {})[websocket] = player_id

        try:
            view = api_service.get_view(room_id, player_id)
            if not isinstance(view, ErrorResponse):
                await websocket.send_json({"type": "view_update", "payload": view.model_dump(mode="json")})

            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                except json.JSONDecodeError:
                    await websocket.send_json({"type": "error", "payload": {"message": "Invalid JSON"}})
                    continue
                if isinstance(message, dict) and message.get("type") == "ping":
                    await websocket.send_json({"type": "pong"})

        except WebSocketDisconnect:
            logger.debug("Room %s: %s disconnected", room_id, player_id)
        finally:
            connections = ws_connections.get(room_id)
            if connections is not None:
                connections.pop(websocket, None)
                if not connections:
                    ws_connections.pop(room_id, None)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get("/health", response_model=HealthResponse, tags=["System"], summary="Health check")
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(status="healthy", service="playroom", version="1.0.0")

    @app.get("/", tags=["System"])
    async def root():
        return {
            "service": "playroom",
            "version": "1.0.0",
            "docs": "/api/docs",
        }

    return app


# No module-level app: importing must not open HTTP clients or vault
# directories. Run with: uvicorn --factory playroom.api.app:create_app
