"""
FastAPI Application - REST API for the game screen.

Endpoints:
    GET    /api/v1/health                          Health check
    POST   /api/v1/games                           Host a new game
    GET    /api/v1/games                           List hosted games
    GET    /api/v1/games/{id}                      Get game state
    DELETE /api/v1/games/{id}                      Close a game
    POST   /api/v1/games/{id}/players              Add a player (lobby only)
    DELETE /api/v1/games/{id}/players/{player_id}  Remove a player (lobby only)
    POST   /api/v1/games/{id}/session              Start a session
    DELETE /api/v1/games/{id}/session              End the session, record scores
    POST   /api/v1/games/{id}/rounds               Next round (passes the turn)
    POST   /api/v1/games/{id}/guess                Submit a guess
    POST   /api/v1/games/{id}/skip                 Give up on the round
    POST   /api/v1/games/{id}/hint                 Ask for a hint
    GET    /api/v1/games/{id}/camera               Camera transform for a canvas
    GET    /api/v1/leaderboard                     Stored leaderboard

Actions the engine ignores return 200 with accepted=false.
"""

from typing import Annotated, Union
import logging

from ..config import Config


logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    from contextlib import asynccontextmanager

    from fastapi import FastAPI, Query, Request
    from fastapi.exceptions import RequestValidationError
    from fastapi.middleware.cors import CORSMiddleware
    from fastapi.encoders import jsonable_encoder
    from fastapi.responses import JSONResponse

    from .service import APIService
    from .schemas import (
        CreateGameRequest,
        AddPlayerRequest,
        GuessRequest,
        GameStateResponse,
        ActionResponse,
        CameraResponse,
        LeaderboardResponse,
        ErrorResponse,
        GameListResponse,
        CloseGameResponse,
        HealthResponse,
        ErrorCode,
    )
    from .. import __version__

    api_service = service or APIService()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        api_service.game_manager.shutdown()

    app = FastAPI(
        title="CountrySnap API",
        description="""
Guess the country from its outline.

## Round flow

1. `POST /games` then add players with `POST /games/{id}/players`
2. `POST /games/{id}/session` starts the first round
3. Poll `GET /games/{id}` until `round.status` is `playing`
4. `POST /guess`, `/skip` or `/hint` until the round is `success` or `failure`
5. `POST /rounds` for the next turn, `DELETE /session` to finish

## Error Codes

| Code | Description |
|------|-------------|
| `GAME_NOT_FOUND` | Game does not exist or was closed |
| `VALIDATION_ERROR` | Malformed request |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=Config.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: dict | None = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message, error_code=error_code, details=details,
            ).model_dump(mode="json"),
        )

    def respond(response):
        """Pass responses through, turning service errors into 404s."""
        if isinstance(response, ErrorResponse):
            return make_error_response(response.error_code, response.error, status_code=404)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed bodies and queries get the standard error shape."""
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Invalid request",
            status_code=422,
            details={"errors": jsonable_encoder(exc.errors())},
        )

    # =========================================================================
    # Health
    # =========================================================================

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["System"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="countrysnap", version=__version__)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games",
        response_model=GameStateResponse,
        tags=["Games"],
        summary="Host a new game",
    )
    def create_game(body: CreateGameRequest | None = None) -> GameStateResponse:
        """
        Host a new game on this device.

        If the world map could not be loaded, `catalog_error` is set and
        sessions cannot start.
        """
        return api_service.create_game(body or CreateGameRequest())

    @app.get(
        "/api/v1/games",
        response_model=GameListResponse,
        tags=["Games"],
        summary="List hosted games",
    )
    def list_games() -> GameListResponse:
        games = api_service.list_games()
        return GameListResponse(games=games, count=len(games))

    @app.get(
        "/api/v1/games/{game_id}",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Get game state",
    )
    def get_game(game_id: str) -> Union[GameStateResponse, JSONResponse]:
        return respond(api_service.get_game(game_id))

    @app.delete(
        "/api/v1/games/{game_id}",
        response_model=CloseGameResponse,
        tags=["Games"],
        summary="Close a game",
    )
    def close_game(game_id: str) -> CloseGameResponse:
        """Close a game. A session in progress is discarded, not recorded."""
        success = api_service.close_game(game_id)
        return CloseGameResponse(success=success, game_id=game_id)

    # =========================================================================
    # Lobby Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games/{game_id}/players",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Lobby"],
        summary="Add a player",
    )
    def add_player(game_id: str, body: AddPlayerRequest) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.add_player(game_id, body))

    @app.delete(
        "/api/v1/games/{game_id}/players/{player_id}",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Lobby"],
        summary="Remove a player",
    )
    def remove_player(game_id: str, player_id: str) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.remove_player(game_id, player_id))

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games/{game_id}/session",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Session"],
        summary="Start a session",
    )
    def start_session(game_id: str) -> Union[ActionResponse, JSONResponse]:
        """Start playing. With no players added, a default player is created."""
        return respond(api_service.start_session(game_id))

    @app.delete(
        "/api/v1/games/{game_id}/session",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Session"],
        summary="End the session",
    )
    def end_session(game_id: str) -> Union[ActionResponse, JSONResponse]:
        """End the session. Positive scores go to the leaderboard."""
        return respond(api_service.end_session(game_id))

    # =========================================================================
    # Round Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games/{game_id}/rounds",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Rounds"],
        summary="Start the next round",
    )
    def start_round(game_id: str) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.start_round(game_id))

    @app.post(
        "/api/v1/games/{game_id}/guess",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Rounds"],
        summary="Submit a guess",
    )
    def guess(game_id: str, body: GuessRequest) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.guess(game_id, body))

    @app.post(
        "/api/v1/games/{game_id}/skip",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Rounds"],
        summary="Give up on the round",
    )
    def skip(game_id: str) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.skip(game_id))

    @app.post(
        "/api/v1/games/{game_id}/hint",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Rounds"],
        summary="Ask for a hint",
    )
    def request_hint(game_id: str) -> Union[ActionResponse, JSONResponse]:
        """The hint arrives later; poll the game state for `round.hints`."""
        return respond(api_service.request_hint(game_id))

    @app.get(
        "/api/v1/games/{game_id}/camera",
        response_model=CameraResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Rounds"],
        summary="Camera transform for a canvas",
    )
    def camera(
        game_id: str,
        width: Annotated[float, Query(gt=0, description="Canvas width in pixels")],
        height: Annotated[float, Query(gt=0, description="Canvas height in pixels")],
    ) -> Union[CameraResponse, JSONResponse]:
        return respond(api_service.camera(game_id, width, height))

    # =========================================================================
    # Leaderboard
    # =========================================================================

    @app.get(
        "/api/v1/leaderboard",
        response_model=LeaderboardResponse,
        tags=["Leaderboard"],
        summary="Stored leaderboard",
    )
    def leaderboard() -> LeaderboardResponse:
        return api_service.leaderboard()

    return app


# For running directly: uvicorn countrysnap.api.app:app
app = create_app()
