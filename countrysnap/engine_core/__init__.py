"""
Engine Core - Deterministic round/turn state management.

The engine is the runtime that:
1. Holds GameState (roster, turn pointer, current round, leaderboard)
2. Judges guesses against the target's names
3. Applies actions via the reducer
4. Describes side effects for the game loop to execute
"""

from .state import (
    GameState, RoundState, RoundStatus, Player, Target, GeoShape,
    CountryFacts, LeaderboardEntry, MAX_LIVES, PLAYER_COLORS,
)
from .action import Action, ActionType, ActionPayload, ActionResult
from .effects import Effect, ResolveFacts, RevealTarget, GenerateHint, ClearMessage, SaveLeaderboard
from .judge import judge, levenshtein_distance, tolerance_for
from .reducer import Reducer, apply_action, is_playable

__all__ = [
    "GameState",
    "RoundState",
    "RoundStatus",
    "Player",
    "Target",
    "GeoShape",
    "CountryFacts",
    "LeaderboardEntry",
    "MAX_LIVES",
    "PLAYER_COLORS",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "Effect",
    "ResolveFacts",
    "RevealTarget",
    "GenerateHint",
    "ClearMessage",
    "SaveLeaderboard",
    "judge",
    "levenshtein_distance",
    "tolerance_for",
    "Reducer",
    "apply_action",
    "is_playable",
]
