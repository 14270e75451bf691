"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to room manager calls
2. Runs the dictionary check before forwarding word guesses
3. Turns engine exceptions and rejections into ErrorResponse objects

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional
import logging

from ..config import Config
from ..engine_core.action import Move, MoveResult, MoveType
from ..engine_core.errors import GameConfigError, SourceUnavailable, UnknownPlayer
from ..engine_core.settings import GameSettings
from ..engine_core.state import Variant
from ..games import GAME_TYPES, SOURCED_VARIANTS
from ..session import InvalidRoomId, NoActiveGame, RoomManager, RoomNotFound, SecretVault
from ..words import ChainedWordSource, ListWordSource, RandomWordApiSource, WiktionaryChecker, WordSource
from .schemas import (
    CreateGameRequest,
    EndGameResponse,
    ErrorCode,
    ErrorResponse,
    GameResponse,
    MoveRequest,
    MoveResponse,
    RevealResponse,
    RoomInfo,
    RoomListResponse,
    SetupRequest,
    VariantInfo,
    VariantListResponse,
    ViewResponse,
)


logger = logging.getLogger(__name__)


@dataclass
class GameService:
    """
    Main API service.

    Usage:
        service = GameService()

        # Start a game
        response = await service.create_game("room1", request)

        # Play
        response = await service.submit_move("room1", move_request)
    """
    room_manager: RoomManager = field(default_factory=RoomManager)
    checker: Optional[WiktionaryChecker] = None

    @classmethod
    def from_config(cls, config: Config) -> GameService:
        """Wire sources, vault and checker from environment settings."""
        sources: list[WordSource] = []
        if config.words_file:
            sources.append(ListWordSource.from_file(config.words_file))
        sources.append(RandomWordApiSource(config.word_api_url))

        manager = RoomManager(
            vault=SecretVault(config.vault_dir),
            source=ChainedWordSource(sources),
        )
        checker = WiktionaryChecker() if config.check_words else None
        return cls(room_manager=manager, checker=checker)

    # =========================================================================
    # Variants and rooms
    # =========================================================================

    def list_variants(self) -> VariantListResponse:
        variants = [
            VariantInfo(
                variant=variant,
                min_players=cls.min_players,
                max_players=cls.max_players,
                has_setup=MoveType.SUBMIT_SECRET in cls.move_phases,
                needs_word_source=variant in SOURCED_VARIANTS,
            )
            for variant, cls in GAME_TYPES.items()
        ]
        return VariantListResponse(variants=variants, count=len(variants))

    def list_rooms(self) -> RoomListResponse:
        rooms = [RoomInfo(**info) for info in self.room_manager.list_rooms()]
        return RoomListResponse(rooms=rooms, count=len(rooms))

    # =========================================================================
    # Game lifecycle
    # =========================================================================

    async def create_game(self, room_id: str, request: CreateGameRequest) -> GameResponse | ErrorResponse:
        settings = GameSettings.from_mapping(request.settings)
        try:
            room = await self.room_manager.start_game(room_id, request.variant, request.player_ids, settings)
        except SourceUnavailable as e:
            logger.warning("Room %s: word source unavailable: %s", room_id, e)
            return ErrorResponse(error=str(e), error_code=ErrorCode.SOURCE_UNAVAILABLE)
        except InvalidRoomId as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.INVALID_ROOM_ID)
        except GameConfigError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.INVALID_CONFIG)

        return GameResponse(
            room_id=room_id,
            variant=room.variant,
            room_state=room.state.value,
            public=room.instance.public_dict(),
        )

    def end_game(self, room_id: str) -> EndGameResponse | ErrorResponse:
        try:
            self.room_manager.reset_to_lobby(room_id)
        except RoomNotFound as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.ROOM_NOT_FOUND)
        return EndGameResponse(success=True, room_id=room_id)

    def get_state(self, room_id: str) -> GameResponse | ErrorResponse:
        try:
            room = self.room_manager.get_room(room_id)
            public = self.room_manager.snapshot(room_id)
        except (RoomNotFound, NoActiveGame) as e:
            return self._lookup_error(e)
        return GameResponse(room_id=room_id, variant=room.variant, room_state=room.state.value, public=public)

    def get_view(self, room_id: str, player_id: str) -> ViewResponse | ErrorResponse:
        try:
            view = self.room_manager.get_view(room_id, player_id)
        except (RoomNotFound, NoActiveGame) as e:
            return self._lookup_error(e)
        except UnknownPlayer as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.UNKNOWN_PLAYER)
        return ViewResponse(**view.to_dict())

    def reveal(self, room_id: str) -> RevealResponse | ErrorResponse:
        try:
            room = self.room_manager.get_room(room_id)
            instance = room.require_instance()
        except (RoomNotFound, NoActiveGame) as e:
            return self._lookup_error(e)
        if not instance.is_over():
            return ErrorResponse(error="Game is still in progress", error_code=ErrorCode.GAME_NOT_OVER)
        return RevealResponse(
            room_id=room_id,
            variant=room.variant,
            winner=instance.state.winner,
            secrets=self.room_manager.reveal(room_id),
        )

    # =========================================================================
    # Moves
    # =========================================================================

    def submit_setup(self, room_id: str, request: SetupRequest) -> MoveResponse | ErrorResponse:
        try:
            result = self.room_manager.submit_setup(room_id, request.player_id, request.payload)
        except (RoomNotFound, NoActiveGame) as e:
            return self._lookup_error(e)
        return self._move_response(room_id, result)

    async def submit_move(self, room_id: str, request: MoveRequest) -> MoveResponse | ErrorResponse:
        """
        Forward a move to the room.

        Word-feedback guesses are checked against the dictionary first;
        the lookup is awaited before the room lock is taken.
        """
        try:
            room = self.room_manager.get_room(room_id)
            room.require_instance()
        except (RoomNotFound, NoActiveGame) as e:
            return self._lookup_error(e)

        if self._needs_dictionary_check(room.variant, request):
            word = request.payload.get("value")
            try:
                known = await self.checker.is_word(word, room.settings.language)
            except SourceUnavailable as e:
                return ErrorResponse(error=str(e), error_code=ErrorCode.SOURCE_UNAVAILABLE)
            if not known:
                return ErrorResponse(error=f"{word!r} is not in the dictionary", error_code=ErrorCode.NOT_A_WORD)

        move = Move(move_type=request.move_type, payload=request.payload)
        try:
            result = self.room_manager.apply_move(room_id, request.player_id, move)
        except (RoomNotFound, NoActiveGame) as e:
            return self._lookup_error(e)
        return self._move_response(room_id, result)

    def _needs_dictionary_check(self, variant: Variant | None, request: MoveRequest) -> bool:
        return (
            self.checker is not None
            and variant == Variant.WORD_FEEDBACK
            and request.move_type == MoveType.GUESS
            and isinstance(request.payload.get("value"), str)
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _move_response(self, room_id: str, result: MoveResult) -> MoveResponse | ErrorResponse:
        if not result.accepted:
            return ErrorResponse(
                error=result.error or "Move rejected",
                error_code=ErrorCode.MOVE_REJECTED,
                details={"rejection": result.rejection.value if result.rejection else None},
            )
        return MoveResponse(
            move_type=result.move_type,
            player_id=result.player_id,
            outcome=result.outcome.value,
            details=result.details,
            events=result.events,
            public=self.room_manager.snapshot(room_id),
        )

    def _lookup_error(self, error: Exception) -> ErrorResponse:
        if isinstance(error, RoomNotFound):
            return ErrorResponse(error=str(error), error_code=ErrorCode.ROOM_NOT_FOUND)
        return ErrorResponse(error=str(error), error_code=ErrorCode.NO_ACTIVE_GAME)

    async def aclose(self) -> None:
        if self.room_manager.source is not None:
            await self.room_manager.source.aclose()
        if self.checker is not None:
            await self.checker.aclose()
