"""
Reducer - Applies actions to game state.

The reducer is the single point of state mutation.
Every state change is a Reducer.apply() call; apply_action() wraps one for
one-off use.

Design principles:
- Pure function: (state, action) -> new_state + effects
- Validates before applying; invalid input is ignored, not raised
- Background completions are checked against the round token
- Never performs I/O; effects describe the work for the game loop
"""

from __future__ import annotations
from dataclasses import dataclass, field
import random

from .state import (
    GameState, RoundState, RoundStatus, Player, Target, CountryFacts,
    GeoShape, MAX_LIVES, PLAYER_COLORS,
)
from .action import Action, ActionType, ActionResult
from .effects import ResolveFacts, RevealTarget, GenerateHint, ClearMessage, SaveLeaderboard
from .judge import judge
from ..leaderboard import ledger


CORRECT_POINTS = 5
WRONG_POINTS = -5
INCORRECT_MESSAGE = "Incorrect!"
DEFAULT_PLAYER_NAME = "Player 1"

# Landmasses with no usable outline for guessing
UNPLAYABLE_NAMES = frozenset({"Antarctica"})


def is_playable(shape: GeoShape) -> bool:
    """Whether a catalog entry can be picked as a round target."""
    if not shape.name or shape.name in UNPLAYABLE_NAMES:
        return False
    geometry = shape.geometry
    return geometry is not None and not geometry.is_empty


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless apart from the random source used to draw targets.
    """
    rng: random.Random = field(default_factory=random.Random)

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state, or a failure explaining why
        the action was ignored.
        """
        validation_error = self._validate_action(state, action)
        if validation_error:
            error, code = validation_error
            return ActionResult.failure(error, error_code=code)

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code="NO_HANDLER",
            )

        return handler(state, action)

    def _validate_action(self, state: GameState, action: Action) -> tuple[str, str] | None:
        """
        Validate that an action is legal in the current state.

        Returns (message, code) if invalid, None if valid.
        """
        action_type = action.action_type
        status = state.status

        # Roster is only editable in the lobby
        if action_type in {ActionType.ADD_PLAYER, ActionType.REMOVE_PLAYER}:
            if state.session_active:
                return "Players cannot change during a session", "SESSION_ACTIVE"

        if action_type in {ActionType.START_SESSION, ActionType.START_ROUND}:
            if not state.catalog_loaded:
                return (
                    state.catalog_error or "World map is not loaded",
                    "CATALOG_UNAVAILABLE",
                )

        if action_type == ActionType.START_SESSION and state.session_active:
            return "Session already active", "INVALID_STATE"

        if action_type == ActionType.END_SESSION and not state.session_active:
            return "No active session", "INVALID_STATE"

        if action_type == ActionType.START_ROUND:
            if not state.session_active:
                return "No active session", "INVALID_STATE"
            if status not in {RoundStatus.IDLE, RoundStatus.SUCCESS, RoundStatus.FAILURE}:
                return f"Round still {status.value}", "INVALID_STATE"

        if action_type in {ActionType.SUBMIT_GUESS, ActionType.SKIP}:
            if status != RoundStatus.PLAYING:
                return f"Not accepting guesses while {status.value}", "INVALID_STATE"

        if action_type == ActionType.REQUEST_HINT:
            if state.target is None:
                return "No target to hint at", "NO_TARGET"
            if state.hint_in_flight:
                return "A hint is already on its way", "HINT_IN_FLIGHT"

        # Completions for a round that has moved on are discarded
        if action_type in {
            ActionType.REVEAL_TARGET,
            ActionType.FACTS_RESOLVED,
            ActionType.HINT_RESOLVED,
            ActionType.CLEAR_MESSAGE,
        }:
            if action.payload.round_token != state.round_token:
                return "Response for a previous round", "STALE"

        return None

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.ADD_PLAYER: self._handle_add_player,
            ActionType.REMOVE_PLAYER: self._handle_remove_player,
            ActionType.START_SESSION: self._handle_start_session,
            ActionType.END_SESSION: self._handle_end_session,
            ActionType.START_ROUND: self._handle_start_round,
            ActionType.SUBMIT_GUESS: self._handle_submit_guess,
            ActionType.SKIP: self._handle_skip,
            ActionType.REQUEST_HINT: self._handle_request_hint,
            ActionType.CATALOG_LOADED: self._handle_catalog_loaded,
            ActionType.CATALOG_FAILED: self._handle_catalog_failed,
            ActionType.LEADERBOARD_LOADED: self._handle_leaderboard_loaded,
            ActionType.REVEAL_TARGET: self._handle_reveal_target,
            ActionType.FACTS_RESOLVED: self._handle_facts_resolved,
            ActionType.HINT_RESOLVED: self._handle_hint_resolved,
            ActionType.CLEAR_MESSAGE: self._handle_clear_message,
        }
        return handlers.get(action_type)

    # =========================================================================
    # Roster
    # =========================================================================

    def _handle_add_player(self, state: GameState, action: Action) -> ActionResult:
        name = (action.payload.name or "").strip()
        if not name:
            return ActionResult.failure("Player name is empty", error_code="EMPTY_NAME")

        seq = state.player_seq + 1
        player = Player(
            player_id=action.payload.player_id or f"player-{seq}",
            name=name,
            score=0,
            color=PLAYER_COLORS[state.num_players % len(PLAYER_COLORS)],
        )
        new_state = state._copy_with(
            players=state.players + (player,),
            player_seq=seq,
        )
        return ActionResult.success_with_state(new_state, changes=[f"{name} joined"])

    def _handle_remove_player(self, state: GameState, action: Action) -> ActionResult:
        player_id = action.payload.player_id
        player = state.get_player(player_id)
        if not player:
            return ActionResult.failure(
                f"Player {player_id} not found", error_code="PLAYER_NOT_FOUND"
            )

        new_players = tuple(p for p in state.players if p.player_id != player_id)
        new_state = state._copy_with(players=new_players, current_player_idx=0)
        return ActionResult.success_with_state(new_state, changes=[f"{player.name} left"])

    # =========================================================================
    # Session
    # =========================================================================

    def _handle_start_session(self, state: GameState, action: Action) -> ActionResult:
        players = state.players
        seq = state.player_seq
        if not players:
            seq += 1
            players = (Player(
                player_id=f"player-{seq}",
                name=DEFAULT_PLAYER_NAME,
                color=PLAYER_COLORS[0],
            ),)

        new_state = state._copy_with(
            players=players,
            player_seq=seq,
            current_player_idx=0,
            session_active=True,
            rounds_started=0,
        )
        result = self._begin_round(new_state, rotate=False)
        result.state_changes.insert(0, f"Session started with {len(players)} player(s)")
        return result

    def _handle_end_session(self, state: GameState, action: Action) -> ActionResult:
        """
        Freeze scores and reset to an empty lobby.

        The local snapshot is merged right away for display; the store merge
        runs later against the stored entries, which other games may have
        added to since this game loaded them.
        """
        results = tuple((p.name, p.score) for p in state.players)
        timestamp = ledger.utc_timestamp(action.timestamp)
        entries = ledger.record(state.leaderboard, results, timestamp=timestamp)

        new_state = state._copy_with(
            session_active=False,
            players=(),
            current_player_idx=0,
            rounds_started=0,
            round=RoundState(),
            round_token=state.round_token + 1,
            hint_in_flight=False,
            leaderboard=tuple(entries),
        )
        return ActionResult.success_with_state(
            new_state,
            changes=["Session ended"],
            effects=[SaveLeaderboard(results=results, timestamp=timestamp)],
        )

    # =========================================================================
    # Round lifecycle
    # =========================================================================

    def _handle_start_round(self, state: GameState, action: Action) -> ActionResult:
        # Every round after the session's first passes the turn on
        return self._begin_round(state, rotate=state.rounds_started > 0)

    def _begin_round(self, state: GameState, rotate: bool) -> ActionResult:
        """Draw a target and enter loading. Targets may repeat across rounds."""
        current_idx = state.current_player_idx
        if rotate and state.num_players:
            current_idx = (current_idx + 1) % state.num_players

        shape = self.rng.choice(state.catalog)
        token = state.round_token + 1

        new_state = state._copy_with(
            current_player_idx=current_idx,
            rounds_started=state.rounds_started + 1,
            round=RoundState(status=RoundStatus.LOADING, target=Target(shape=shape)),
            round_token=token,
            hint_in_flight=False,
        )
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Round {new_state.rounds_started} for {new_state.current_player.name}"],
            effects=[
                ResolveFacts(round_token=token, shape=shape),
                RevealTarget(round_token=token),
            ],
        )

    def _handle_reveal_target(self, state: GameState, action: Action) -> ActionResult:
        if state.status != RoundStatus.LOADING:
            return ActionResult.failure("Target already revealed", error_code="INVALID_STATE")

        new_state = state.with_round(
            status=RoundStatus.PLAYING,
            lives_remaining=MAX_LIVES,
            hints=(),
            message=None,
        )
        return ActionResult.success_with_state(new_state, changes=["Identify the country"])

    def _handle_facts_resolved(self, state: GameState, action: Action) -> ActionResult:
        """Attach facts to the target. Never changes the round status."""
        target = state.target
        if target is None:
            return ActionResult.failure("No target", error_code="NO_TARGET")

        facts = action.payload.data
        if not isinstance(facts, CountryFacts) or not facts.name:
            facts = CountryFacts.fallback(target.shape)

        new_state = state.with_round(target=target.with_facts(facts))
        return ActionResult.success_with_state(new_state)

    def _handle_submit_guess(self, state: GameState, action: Action) -> ActionResult:
        text = (action.payload.text or "").strip()
        if not text:
            return ActionResult.failure("Empty guess", error_code="EMPTY_GUESS")

        guesser = state.current_player.name
        if judge(text, state.target.acceptable_names):
            new_state = state.with_current_player_score(CORRECT_POINTS).with_round(
                status=RoundStatus.SUCCESS,
                message=None,
            )
            return ActionResult.success_with_state(
                new_state, changes=[f"{guesser} guessed correctly"]
            )

        lives = max(0, state.round.lives_remaining - 1)
        new_state = state.with_current_player_score(WRONG_POINTS)

        if lives == 0:
            new_state = new_state.with_round(
                status=RoundStatus.FAILURE,
                lives_remaining=0,
                message=None,
            )
            return ActionResult.success_with_state(
                new_state, changes=[f"{guesser} is out of lives"]
            )

        message_id = state.round.message_id + 1
        new_state = new_state.with_round(
            lives_remaining=lives,
            message=INCORRECT_MESSAGE,
            message_id=message_id,
        )
        return ActionResult.success_with_state(
            new_state,
            changes=[f"{guesser} guessed wrong, {lives} lives left"],
            effects=[ClearMessage(round_token=state.round_token, message_id=message_id)],
        )

    def _handle_skip(self, state: GameState, action: Action) -> ActionResult:
        """Giving up costs a life and the points of a wrong guess, and ends the round."""
        new_state = state.with_current_player_score(WRONG_POINTS).with_round(
            status=RoundStatus.FAILURE,
            lives_remaining=max(0, state.round.lives_remaining - 1),
            message=None,
        )
        return ActionResult.success_with_state(
            new_state, changes=[f"{state.current_player.name} skipped"]
        )

    def _handle_clear_message(self, state: GameState, action: Action) -> ActionResult:
        if action.payload.message_id != state.round.message_id:
            return ActionResult.failure("Message already replaced", error_code="STALE")

        new_state = state.with_round(message=None)
        return ActionResult.success_with_state(new_state)

    # =========================================================================
    # Hints
    # =========================================================================

    def _handle_request_hint(self, state: GameState, action: Action) -> ActionResult:
        new_state = state._copy_with(hint_in_flight=True)
        return ActionResult.success_with_state(
            new_state,
            changes=["Hint requested"],
            effects=[GenerateHint(
                round_token=state.round_token,
                country_name=state.target.shape.name,
                prior_hints=state.round.hints,
            )],
        )

    def _handle_hint_resolved(self, state: GameState, action: Action) -> ActionResult:
        text = (action.payload.text or "").strip()
        hints = state.round.hints + (text,) if text else state.round.hints
        new_state = state._copy_with(hint_in_flight=False).with_round(hints=hints)
        return ActionResult.success_with_state(new_state)

    # =========================================================================
    # Collaborator snapshots
    # =========================================================================

    def _handle_catalog_loaded(self, state: GameState, action: Action) -> ActionResult:
        shapes = tuple(s for s in (action.payload.data or []) if is_playable(s))
        if not shapes:
            return self._handle_catalog_failed(
                state, Action.catalog_failed("World map has no playable countries")
            )

        new_state = state._copy_with(catalog=shapes, catalog_loaded=True, catalog_error=None)
        return ActionResult.success_with_state(
            new_state, changes=[f"Loaded {len(shapes)} countries"]
        )

    def _handle_catalog_failed(self, state: GameState, action: Action) -> ActionResult:
        error = action.payload.text or "Failed to load map data"
        new_state = state._copy_with(catalog=(), catalog_loaded=False, catalog_error=error)
        return ActionResult.success_with_state(new_state, changes=[error])

    def _handle_leaderboard_loaded(self, state: GameState, action: Action) -> ActionResult:
        # Re-ranking enforces ordering and the cap on whatever the store held
        entries = ledger.record(action.payload.data or [], [])
        new_state = state._copy_with(leaderboard=tuple(entries))
        return ActionResult.success_with_state(new_state)


def apply_action(state: GameState, action: Action, rng: random.Random | None = None) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer(rng=rng or random.Random())
    return reducer.apply(state, action)
