"""
Action System - Actions, payloads, and results.

Actions represent:
1. Player actions (add player, guess, skip, ask for a hint)
2. Session actions (start/end session, next round)
3. Background completions (catalog loaded, facts resolved, hint ready,
   delayed timers firing)

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Types of actions in the system."""
    # Roster editing (lobby only)
    ADD_PLAYER = "add_player"
    REMOVE_PLAYER = "remove_player"

    # Session lifecycle
    START_SESSION = "start_session"
    END_SESSION = "end_session"

    # Round actions
    START_ROUND = "start_round"
    SUBMIT_GUESS = "submit_guess"
    SKIP = "skip"
    REQUEST_HINT = "request_hint"

    # Background completions
    CATALOG_LOADED = "catalog_loaded"
    CATALOG_FAILED = "catalog_failed"
    LEADERBOARD_LOADED = "leaderboard_loaded"
    REVEAL_TARGET = "reveal_target"
    FACTS_RESOLVED = "facts_resolved"
    HINT_RESOLVED = "hint_resolved"
    CLEAR_MESSAGE = "clear_message"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types have different payload shapes.
    This is a generic container; validation happens in the reducer.
    """
    # Roster
    player_id: str | None = None
    name: str | None = None

    # Guessing
    text: str | None = None

    # Background completions carry the round they were issued for
    round_token: int | None = None
    message_id: int | None = None

    # Catalog, facts, leaderboard snapshots
    data: Any | None = None


@dataclass
class Action:
    """
    A complete action to be applied to the game state.

    Actions are:
    - Validated before application
    - Applied atomically by the reducer
    """
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)
    timestamp: float | None = None

    @classmethod
    def add_player(cls, name: str, player_id: str | None = None) -> Action:
        return cls(
            action_type=ActionType.ADD_PLAYER,
            payload=ActionPayload(name=name, player_id=player_id),
        )

    @classmethod
    def remove_player(cls, player_id: str) -> Action:
        return cls(
            action_type=ActionType.REMOVE_PLAYER,
            payload=ActionPayload(player_id=player_id),
        )

    @classmethod
    def start_session(cls) -> Action:
        return cls(action_type=ActionType.START_SESSION)

    @classmethod
    def end_session(cls, timestamp: float | None = None) -> Action:
        return cls(action_type=ActionType.END_SESSION, timestamp=timestamp)

    @classmethod
    def start_round(cls) -> Action:
        return cls(action_type=ActionType.START_ROUND)

    @classmethod
    def guess(cls, text: str) -> Action:
        """Factory for a typed guess."""
        return cls(
            action_type=ActionType.SUBMIT_GUESS,
            payload=ActionPayload(text=text),
        )

    @classmethod
    def skip(cls) -> Action:
        return cls(action_type=ActionType.SKIP)

    @classmethod
    def request_hint(cls) -> Action:
        return cls(action_type=ActionType.REQUEST_HINT)

    @classmethod
    def catalog_loaded(cls, shapes: list[Any]) -> Action:
        return cls(
            action_type=ActionType.CATALOG_LOADED,
            payload=ActionPayload(data=shapes),
        )

    @classmethod
    def catalog_failed(cls, error: str) -> Action:
        return cls(
            action_type=ActionType.CATALOG_FAILED,
            payload=ActionPayload(text=error),
        )

    @classmethod
    def leaderboard_loaded(cls, entries: list[Any]) -> Action:
        return cls(
            action_type=ActionType.LEADERBOARD_LOADED,
            payload=ActionPayload(data=entries),
        )

    @classmethod
    def reveal_target(cls, round_token: int) -> Action:
        return cls(
            action_type=ActionType.REVEAL_TARGET,
            payload=ActionPayload(round_token=round_token),
        )

    @classmethod
    def facts_resolved(cls, round_token: int, facts: Any) -> Action:
        return cls(
            action_type=ActionType.FACTS_RESOLVED,
            payload=ActionPayload(round_token=round_token, data=facts),
        )

    @classmethod
    def hint_resolved(cls, round_token: int, text: str) -> Action:
        return cls(
            action_type=ActionType.HINT_RESOLVED,
            payload=ActionPayload(round_token=round_token, text=text),
        )

    @classmethod
    def clear_message(cls, round_token: int, message_id: int) -> Action:
        return cls(
            action_type=ActionType.CLEAR_MESSAGE,
            payload=ActionPayload(round_token=round_token, message_id=message_id),
        )


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action was applied
    - New state (if applied)
    - Why it was ignored (if not)
    - Effects the caller must execute (fetches, timers, persistence)
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: str | None = None

    # For UI/presentation
    state_changes: list[str] = field(default_factory=list)

    # Side-effect commands for the game loop
    effects: list[Any] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        """Create a failure result. The state is left untouched."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
        effects: list[Any] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
            effects=effects or [],
        )
