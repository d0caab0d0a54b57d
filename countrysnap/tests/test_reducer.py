"""
Tests for the reducer (state transitions).

Tests:
- Roster editing and session start/end
- Round lifecycle and lives
- Scoring and turn rotation
- Stale completions and hint requests
- Catalog and leaderboard snapshots
"""

import pytest
from shapely.geometry import Polygon

from ..engine_core.state import GameState, GeoShape, CountryFacts, RoundStatus, MAX_LIVES
from ..engine_core.action import Action
from ..engine_core.effects import ResolveFacts, RevealTarget, GenerateHint, ClearMessage, SaveLeaderboard
from ..engine_core.reducer import Reducer, apply_action, is_playable, CORRECT_POINTS, WRONG_POINTS
from .conftest import apply_all, load_catalog


class TestRoster:
    """Players can only change in the lobby."""

    def test_add_players(self, reducer, lobby_state):
        state = apply_all(reducer, lobby_state, Action.add_player("Ana"), Action.add_player("Bo"))

        assert [p.name for p in state.players] == ["Ana", "Bo"]
        assert [p.player_id for p in state.players] == ["player-1", "player-2"]
        assert state.players[0].color != state.players[1].color
        assert all(p.score == 0 for p in state.players)

    def test_blank_name_ignored(self, reducer, lobby_state):
        result = reducer.apply(lobby_state, Action.add_player("   "))

        assert not result.success
        assert result.error_code == "EMPTY_NAME"

    def test_remove_player(self, reducer, lobby_state):
        state = apply_all(reducer, lobby_state, Action.add_player("Ana"), Action.add_player("Bo"))
        state = apply_all(reducer, state, Action.remove_player("player-1"))

        assert [p.name for p in state.players] == ["Bo"]
        # Ids are never reused
        state = apply_all(reducer, state, Action.add_player("Cy"))
        assert state.players[-1].player_id == "player-3"

    def test_remove_unknown_player(self, reducer, lobby_state):
        result = reducer.apply(lobby_state, Action.remove_player("nobody"))

        assert not result.success
        assert result.error_code == "PLAYER_NOT_FOUND"

    def test_roster_locked_during_session(self, reducer, playing_state):
        result = reducer.apply(playing_state, Action.add_player("Late"))

        assert not result.success
        assert result.error_code == "SESSION_ACTIVE"
        assert not reducer.apply(playing_state, Action.remove_player("player-1")).success


class TestSessionStart:
    """Tests for starting a session."""

    def test_start_enters_loading(self, reducer, lobby_state, france):
        state = apply_all(reducer, lobby_state, Action.add_player("Ana"))
        result = reducer.apply(state, Action.start_session())

        assert result.success
        new_state = result.new_state
        assert new_state.session_active
        assert new_state.status == RoundStatus.LOADING
        assert new_state.target.shape == france
        assert new_state.rounds_started == 1
        assert new_state.current_player.name == "Ana"

    def test_start_emits_facts_and_reveal(self, reducer, lobby_state, france):
        result = reducer.apply(lobby_state, Action.start_session())
        token = result.new_state.round_token

        assert ResolveFacts(round_token=token, shape=france) in result.effects
        assert RevealTarget(round_token=token) in result.effects

    def test_empty_roster_gets_default_player(self, reducer, lobby_state):
        state = apply_all(reducer, lobby_state, Action.start_session())

        assert state.num_players == 1
        assert state.players[0].name == "Player 1"
        assert state.players[0].score == 0

    def test_start_without_catalog(self, reducer):
        state = apply_all(reducer, GameState(), Action.catalog_failed("Failed to load map data"))
        result = reducer.apply(state, Action.start_session())

        assert not result.success
        assert result.error_code == "CATALOG_UNAVAILABLE"
        assert result.error == "Failed to load map data"

    def test_start_twice_ignored(self, reducer, playing_state):
        result = reducer.apply(playing_state, Action.start_session())

        assert not result.success
        assert result.error_code == "INVALID_STATE"


class TestRoundLifecycle:
    """Tests for loading, playing and resolution."""

    def test_reveal_starts_playing_with_full_lives(self, playing_state):
        assert playing_state.status == RoundStatus.PLAYING
        assert playing_state.round.lives_remaining == MAX_LIVES
        assert playing_state.round.hints == ()
        assert playing_state.round.message is None

    def test_guess_while_loading_ignored(self, reducer, lobby_state):
        state = apply_all(reducer, lobby_state, Action.start_session())
        result = reducer.apply(state, Action.guess("France"))

        assert not result.success
        assert result.error_code == "INVALID_STATE"

    def test_correct_guess(self, reducer, playing_state):
        result = reducer.apply(playing_state, Action.guess("france"))

        assert result.success
        state = result.new_state
        assert state.status == RoundStatus.SUCCESS
        assert state.players[0].score == CORRECT_POINTS
        assert state.players[1].score == 0

    def test_wrong_guess_costs_life_and_points(self, reducer, playing_state):
        result = reducer.apply(playing_state, Action.guess("Spain"))

        state = result.new_state
        assert state.status == RoundStatus.PLAYING
        assert state.round.lives_remaining == MAX_LIVES - 1
        assert state.players[0].score == WRONG_POINTS
        assert state.round.message == "Incorrect!"
        assert result.effects == [ClearMessage(round_token=state.round_token, message_id=1)]

    def test_three_wrong_guesses_fail_round(self, reducer, playing_state):
        state = apply_all(
            reducer, playing_state,
            Action.guess("Spain"), Action.guess("Spain"), Action.guess("Spain"),
        )

        assert state.status == RoundStatus.FAILURE
        assert state.round.lives_remaining == 0
        assert state.players[0].score == 3 * WRONG_POINTS
        assert state.round.message is None

    def test_no_guesses_after_resolution(self, reducer, playing_state):
        state = apply_all(reducer, playing_state, Action.guess("France"))

        for action in (Action.guess("France"), Action.guess("Spain"), Action.skip()):
            result = reducer.apply(state, action)
            assert not result.success
            assert result.error_code == "INVALID_STATE"
        assert state.players[0].score == CORRECT_POINTS

    def test_empty_guess_ignored(self, reducer, playing_state):
        result = reducer.apply(playing_state, Action.guess("  "))

        assert not result.success
        assert result.error_code == "EMPTY_GUESS"

    def test_skip_fails_round(self, reducer, playing_state):
        state = apply_all(reducer, playing_state, Action.skip())

        assert state.status == RoundStatus.FAILURE
        assert state.round.lives_remaining == MAX_LIVES - 1
        assert state.players[0].score == WRONG_POINTS

    def test_skip_on_last_life_stays_at_zero(self, reducer, playing_state):
        state = apply_all(reducer, playing_state, Action.guess("Spain"), Action.guess("Spain"))
        state = apply_all(reducer, state, Action.skip())

        assert state.round.lives_remaining == 0
        assert state.status == RoundStatus.FAILURE

    def test_reveal_only_once(self, reducer, playing_state):
        result = reducer.apply(playing_state, Action.reveal_target(playing_state.round_token))

        assert not result.success


class TestTurnRotation:
    """Each round after the first passes the turn."""

    def test_rotation_cycles(self, reducer, lobby_state):
        state = apply_all(
            reducer, lobby_state,
            Action.add_player("Ana"), Action.add_player("Bo"), Action.add_player("Cy"),
            Action.start_session(),
        )
        order = [state.current_player_idx]
        for _ in range(5):
            state = apply_all(reducer, state, Action.reveal_target(state.round_token), Action.skip())
            state = apply_all(reducer, state, Action.start_round())
            order.append(state.current_player_idx)

        assert order == [0, 1, 2, 0, 1, 2]

    def test_start_round_while_playing_ignored(self, reducer, playing_state):
        result = reducer.apply(playing_state, Action.start_round())

        assert not result.success
        assert result.error_code == "INVALID_STATE"

    def test_new_round_resets_lives_and_hints(self, reducer, playing_state):
        state = apply_all(reducer, playing_state, Action.request_hint())
        state = apply_all(
            reducer, state,
            Action.hint_resolved(state.round_token, "Wine."),
            Action.guess("Spain"),
            Action.skip(),
            Action.start_round(),
        )
        state = apply_all(reducer, state, Action.reveal_target(state.round_token))

        assert state.round.lives_remaining == MAX_LIVES
        assert state.round.hints == ()
        assert state.current_player.name == "Bo"

    def test_score_goes_to_guesser(self, reducer, playing_state):
        state = apply_all(reducer, playing_state, Action.skip(), Action.start_round())
        state = apply_all(reducer, state, Action.reveal_target(state.round_token), Action.guess("France"))

        assert state.players[0].score == WRONG_POINTS
        assert state.players[1].score == CORRECT_POINTS


class TestStaleCompletions:
    """Completions carry the token of the round they were issued for."""

    def test_stale_reveal_discarded(self, reducer, lobby_state):
        state = apply_all(reducer, lobby_state, Action.start_session())
        result = reducer.apply(state, Action.reveal_target(state.round_token - 1))

        assert not result.success
        assert result.error_code == "STALE"

    def test_stale_facts_discarded(self, reducer, playing_state):
        old_token = playing_state.round_token
        state = apply_all(reducer, playing_state, Action.skip(), Action.start_round())

        result = reducer.apply(state, Action.facts_resolved(old_token, CountryFacts(name="Old")))
        assert not result.success
        assert result.error_code == "STALE"

    def test_stale_hint_discarded(self, reducer, playing_state):
        old_token = playing_state.round_token
        state = apply_all(reducer, playing_state, Action.request_hint(), Action.skip(), Action.start_round())

        result = reducer.apply(state, Action.hint_resolved(old_token, "Too late"))
        assert not result.success
        assert not state.hint_in_flight

    def test_facts_attach_without_changing_status(self, reducer, playing_state):
        facts = CountryFacts(name="France", capital="Paris", region="Europe")
        state = apply_all(reducer, playing_state, Action.facts_resolved(playing_state.round_token, facts))

        assert state.status == RoundStatus.PLAYING
        assert state.target.facts == facts

    def test_facts_during_loading_keep_loading(self, reducer, lobby_state):
        state = apply_all(reducer, lobby_state, Action.start_session())
        state = apply_all(reducer, state, Action.facts_resolved(state.round_token, CountryFacts(name="France")))

        assert state.status == RoundStatus.LOADING

    def test_facts_without_name_use_fallback(self, reducer, playing_state):
        state = apply_all(reducer, playing_state, Action.facts_resolved(playing_state.round_token, None))

        assert state.target.facts == CountryFacts(name="France")

    def test_message_cleared_only_if_unchanged(self, reducer, playing_state):
        first = reducer.apply(playing_state, Action.guess("Spain"))
        second = reducer.apply(first.new_state, Action.guess("Spain"))
        state = second.new_state
        token = state.round_token

        # The first clear fires after the second message replaced it
        result = reducer.apply(state, Action.clear_message(token, 1))
        assert not result.success
        assert state.round.message == "Incorrect!"

        state = apply_all(reducer, state, Action.clear_message(token, 2))
        assert state.round.message is None


class TestHints:
    """Tests for hint requests."""

    def test_request_hint(self, reducer, playing_state):
        result = reducer.apply(playing_state, Action.request_hint())

        assert result.success
        assert result.new_state.hint_in_flight
        assert result.effects == [GenerateHint(
            round_token=playing_state.round_token,
            country_name="France",
            prior_hints=(),
        )]

    def test_one_hint_at_a_time(self, reducer, playing_state):
        state = apply_all(reducer, playing_state, Action.request_hint())
        result = reducer.apply(state, Action.request_hint())

        assert not result.success
        assert result.error_code == "HINT_IN_FLIGHT"

    def test_hint_appended(self, reducer, playing_state):
        state = apply_all(reducer, playing_state, Action.request_hint())
        state = apply_all(reducer, state, Action.hint_resolved(state.round_token, "Famous for cheese."))

        assert state.round.hints == ("Famous for cheese.",)
        assert not state.hint_in_flight

        state = apply_all(reducer, state, Action.request_hint())
        result = reducer.apply(state, Action.request_hint())
        assert not result.success

    def test_prior_hints_passed_along(self, reducer, playing_state):
        state = apply_all(reducer, playing_state, Action.request_hint())
        state = apply_all(reducer, state, Action.hint_resolved(state.round_token, "One."))
        result = reducer.apply(state, Action.request_hint())

        assert result.effects[0].prior_hints == ("One.",)

    def test_no_hint_without_target(self, reducer, lobby_state):
        result = reducer.apply(lobby_state, Action.request_hint())

        assert not result.success
        assert result.error_code == "NO_TARGET"

    def test_hint_does_not_change_status(self, reducer, playing_state):
        state = apply_all(reducer, playing_state, Action.request_hint())
        state = apply_all(reducer, state, Action.hint_resolved(state.round_token, "Hexagonal."))

        assert state.status == RoundStatus.PLAYING
        assert state.round.lives_remaining == MAX_LIVES


class TestSessionEnd:
    """Ending a session records positive scores and resets the lobby."""

    def test_end_records_positive_scores(self, reducer, playing_state):
        state = apply_all(reducer, playing_state, Action.guess("France"))
        result = reducer.apply(state, Action.end_session(timestamp=0))

        assert result.success
        new_state = result.new_state
        assert [(e.name, e.score) for e in new_state.leaderboard] == [("Ana", CORRECT_POINTS)]
        assert new_state.leaderboard[0].timestamp.startswith("1970-01-01")
        # The store merge gets every result; admission is decided there
        assert result.effects == [SaveLeaderboard(
            results=(("Ana", CORRECT_POINTS), ("Bo", 0)),
            timestamp="1970-01-01T00:00:00+00:00",
        )]

    def test_end_resets_to_empty_lobby(self, reducer, playing_state):
        state = apply_all(reducer, playing_state, Action.end_session())

        assert not state.session_active
        assert state.players == ()
        assert state.status == RoundStatus.IDLE
        assert state.target is None
        assert state.round_token == playing_state.round_token + 1

    def test_end_without_session_ignored(self, reducer, lobby_state):
        result = reducer.apply(lobby_state, Action.end_session())

        assert not result.success
        assert result.error_code == "INVALID_STATE"

    def test_zero_and_negative_scores_not_recorded(self, reducer, playing_state):
        state = apply_all(reducer, playing_state, Action.skip(), Action.end_session())

        assert state.leaderboard == ()


class TestCatalog:
    """Tests for catalog snapshots."""

    def test_unplayable_shapes_filtered(self, world, antarctica):
        state = load_catalog(world)

        assert state.catalog_loaded
        assert antarctica not in state.catalog
        assert len(state.catalog) == 3

    def test_empty_catalog_is_an_error(self, antarctica):
        state = load_catalog([antarctica])

        assert not state.catalog_loaded
        assert state.catalog_error

    def test_is_playable(self, france, antarctica):
        assert is_playable(france)
        assert not is_playable(antarctica)
        assert not is_playable(GeoShape("XXX", "Nowhere", Polygon()))
        assert not is_playable(GeoShape("XXX", "", france.geometry))


class TestApplyAction:
    def test_convenience_function(self, lobby_state):
        result = apply_action(lobby_state, Action.add_player("Ana"))

        assert result.success
        assert result.new_state.players[0].name == "Ana"

    def test_invalid_action_leaves_state_alone(self, lobby_state):
        result = apply_action(lobby_state, Action.skip())

        assert not result.success
        assert result.new_state is None
