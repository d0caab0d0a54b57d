"""
API Module - Game screen interface.

Exposes the engine via REST API for a browser or tablet front end.
The screen:
1. Hosts a game and adds players
2. Starts a session and polls the round state
3. Sends guesses, skips and hint requests
4. Asks for the camera transform for its canvas
5. Ends the session to record scores

Games live in memory. The leaderboard is the only thing stored.
"""

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
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateGameRequest",
    "AddPlayerRequest",
    "GuessRequest",
    # Responses
    "GameStateResponse",
    "ActionResponse",
    "CameraResponse",
    "LeaderboardResponse",
    "ErrorResponse",
    # Shared
    "PlayerInfo",
    "FactsInfo",
    "RoundInfo",
    "LeaderboardEntryInfo",
    # Service
    "APIService",
    "create_app",
]
