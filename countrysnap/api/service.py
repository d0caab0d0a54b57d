"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to game loop calls
2. Manages hosted games
3. Formats engine state for the game screen

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable

from shapely.geometry import mapping

from .schemas import (
    # Requests
    CreateGameRequest,
    AddPlayerRequest,
    GuessRequest,
    # Responses
    GameStateResponse,
    ActionResponse,
    CameraResponse,
    LeaderboardResponse,
    ErrorResponse,
    # Shared
    PlayerInfo,
    FactsInfo,
    RoundInfo,
    LeaderboardEntryInfo,
    # Enums
    RoundStatus,
    ErrorCode,
)
from ..engine_core.action import ActionResult
from ..engine_core.state import GameState
from ..session import GameManager, GameLoop
from ..viewport import WORLD_OVERVIEW


@dataclass
class APIService:
    """
    Main API service for the game screen.

    Usage:
        service = APIService(game_manager=GameManager.from_config())

        game = service.create_game(CreateGameRequest())
        service.add_player(game.game_id, AddPlayerRequest(name="Ana"))
        service.start_session(game.game_id)
        service.guess(game.game_id, GuessRequest(text="france"))
    """
    game_manager: GameManager = field(default_factory=GameManager.from_config)

    def create_game(self, request: CreateGameRequest) -> GameStateResponse:
        game = self.game_manager.create_game(seed=request.seed)
        return self._state_to_response(game.game_id, game.loop.snapshot())

    def get_game(self, game_id: str) -> GameStateResponse | ErrorResponse:
        game = self.game_manager.get_game(game_id)
        if not game:
            return self._not_found(game_id)
        return self._state_to_response(game_id, game.loop.snapshot())

    def close_game(self, game_id: str) -> bool:
        return self.game_manager.close_game(game_id)

    def list_games(self) -> list[str]:
        return self.game_manager.list_games()

    # =========================================================================
    # Actions
    # =========================================================================

    def add_player(self, game_id: str, request: AddPlayerRequest) -> ActionResponse | ErrorResponse:
        return self._run(game_id, lambda loop: loop.add_player(request.name))

    def remove_player(self, game_id: str, player_id: str) -> ActionResponse | ErrorResponse:
        return self._run(game_id, lambda loop: loop.remove_player(player_id))

    def start_session(self, game_id: str) -> ActionResponse | ErrorResponse:
        return self._run(game_id, lambda loop: loop.start_session())

    def end_session(self, game_id: str) -> ActionResponse | ErrorResponse:
        return self._run(game_id, lambda loop: loop.end_session())

    def start_round(self, game_id: str) -> ActionResponse | ErrorResponse:
        return self._run(game_id, lambda loop: loop.start_round())

    def guess(self, game_id: str, request: GuessRequest) -> ActionResponse | ErrorResponse:
        return self._run(game_id, lambda loop: loop.guess(request.text))

    def skip(self, game_id: str) -> ActionResponse | ErrorResponse:
        return self._run(game_id, lambda loop: loop.skip())

    def request_hint(self, game_id: str) -> ActionResponse | ErrorResponse:
        return self._run(game_id, lambda loop: loop.request_hint())

    # =========================================================================
    # Views
    # =========================================================================

    def camera(self, game_id: str, width: float, height: float) -> CameraResponse | ErrorResponse:
        game = self.game_manager.get_game(game_id)
        if not game:
            return self._not_found(game_id)

        transform = game.loop.camera(width, height)
        return CameraResponse(
            translate_x=transform.translate_x,
            translate_y=transform.translate_y,
            scale=transform.scale,
            framed=transform != WORLD_OVERVIEW,
        )

    def leaderboard(self, game_id: str | None = None) -> LeaderboardResponse | ErrorResponse:
        """Leaderboard as a game sees it, or straight from the store."""
        if game_id is None:
            with self.game_manager.store_lock:
                entries = self.game_manager.store.load()
        else:
            game = self.game_manager.get_game(game_id)
            if not game:
                return self._not_found(game_id)
            entries = list(game.loop.snapshot().leaderboard)

        return LeaderboardResponse(
            entries=[LeaderboardEntryInfo.model_validate(e) for e in entries],
            count=len(entries),
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _run(
        self,
        game_id: str,
        operation: Callable[[GameLoop], ActionResult],
    ) -> ActionResponse | ErrorResponse:
        game = self.game_manager.get_game(game_id)
        if not game:
            return self._not_found(game_id)

        result = operation(game.loop)
        return ActionResponse(
            accepted=result.success,
            reason=result.error,
            reason_code=result.error_code,
            changes=result.state_changes,
            game_state=self._state_to_response(game_id, game.loop.snapshot()),
        )

    def _not_found(self, game_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Game {game_id} not found",
            error_code=ErrorCode.GAME_NOT_FOUND,
        )

    def _state_to_response(self, game_id: str, state: GameState) -> GameStateResponse:
        """Convert engine state to the API shape."""
        current = state.current_player
        round_state = state.round
        target = round_state.target
        resolved = round_state.status.is_resolved

        facts = None
        if resolved and target and target.facts:
            facts = FactsInfo.model_validate(target.facts)

        return GameStateResponse(
            game_id=game_id,
            catalog_error=state.catalog_error,
            session_active=state.session_active,
            players=[
                PlayerInfo(
                    player_id=p.player_id,
                    name=p.name,
                    score=p.score,
                    color=p.color,
                    is_current_turn=current is not None and p.player_id == current.player_id,
                )
                for p in state.players
            ],
            current_player_id=current.player_id if current else None,
            rounds_started=state.rounds_started,
            round=RoundInfo(
                status=RoundStatus(round_state.status.value),
                lives_remaining=round_state.lives_remaining,
                hints=list(round_state.hints),
                message=round_state.message,
                target_geometry=mapping(target.shape.geometry) if target else None,
                answer=target.shape.name if resolved and target else None,
                facts=facts,
            ),
            hint_in_flight=state.hint_in_flight,
        )
