"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between the game screen and the engine.

Error Codes:
- GAME_NOT_FOUND: Game does not exist or was closed
- VALIDATION_ERROR: Request body or query is malformed

Actions the engine ignores (wrong state, empty input) are not errors:
they return 200 with accepted=false and the reason.
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class RoundStatus(str, Enum):
    """Round status values."""
    IDLE = "idle"
    LOADING = "loading"
    PLAYING = "playing"
    SUCCESS = "success"
    FAILURE = "failure"


class ErrorCode(str, Enum):
    """Structured error codes."""
    GAME_NOT_FOUND = "GAME_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class PlayerInfo(BaseModel):
    """Player information for display."""
    player_id: str
    name: str
    score: int = 0
    color: str
    is_current_turn: bool = False

    model_config = {"from_attributes": True}


class FactsInfo(BaseModel):
    """Country facts shown once a round is over."""
    name: str
    capital: Optional[str] = None
    region: Optional[str] = None
    flag: Optional[str] = None

    model_config = {"from_attributes": True}


class RoundInfo(BaseModel):
    """The current round. The answer is only included once resolved."""
    status: RoundStatus
    lives_remaining: int = Field(..., ge=0, le=3)
    hints: list[str] = Field(default_factory=list)
    message: Optional[str] = None
    target_geometry: Optional[dict[str, Any]] = Field(
        None, description="GeoJSON geometry of the outline to guess"
    )
    answer: Optional[str] = Field(None, description="Canonical name, once resolved")
    facts: Optional[FactsInfo] = None


class LeaderboardEntryInfo(BaseModel):
    """A leaderboard row."""
    name: str
    score: int
    timestamp: str

    model_config = {"from_attributes": True}


# =============================================================================
# Request Models
# =============================================================================

class CreateGameRequest(BaseModel):
    """Request to host a new game."""
    seed: Optional[int] = Field(None, description="Random seed for target draws")


class AddPlayerRequest(BaseModel):
    """Request to add a player to the lobby."""
    name: str = Field(..., max_length=40)


class GuessRequest(BaseModel):
    """A typed guess for the current round."""
    text: str = Field(..., max_length=100)


# =============================================================================
# Response Models
# =============================================================================

class GameStateResponse(BaseModel):
    """Complete game state for display."""
    game_id: str
    catalog_error: Optional[str] = None
    session_active: bool
    players: list[PlayerInfo] = Field(default_factory=list)
    current_player_id: Optional[str] = None
    rounds_started: int = 0
    round: RoundInfo
    hint_in_flight: bool = False
    api_version: str = "v1"


class ActionResponse(BaseModel):
    """Outcome of a player action plus the state after it."""
    accepted: bool
    reason: Optional[str] = None
    reason_code: Optional[str] = None
    changes: list[str] = Field(default_factory=list)
    game_state: GameStateResponse


class CameraResponse(BaseModel):
    """Target camera transform: translate(x, y) then scale."""
    translate_x: float
    translate_y: float
    scale: float = Field(..., ge=1.0, le=50.0)
    framed: bool = Field(False, description="False means the world overview")


class LeaderboardResponse(BaseModel):
    """Ranked results, best first."""
    entries: list[LeaderboardEntryInfo] = Field(default_factory=list)
    count: int = 0


class ErrorResponse(BaseModel):
    """Standardized error response."""
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None


class GameListResponse(BaseModel):
    """Response listing hosted games."""
    games: list[str]
    count: int


class CloseGameResponse(BaseModel):
    """Response after closing a game."""
    success: bool
    game_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
