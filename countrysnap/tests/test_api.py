"""
Tests for API layer.

Tests:
- API service methods
- Request/response serialization
- Game lifecycle via HTTP
- Error handling
"""

import pytest
from fastapi.testclient import TestClient

from ..api.app import create_app
from ..api.schemas import (
    AddPlayerRequest,
    CreateGameRequest,
    GuessRequest,
    RoundStatus,
)
from ..api.service import APIService
from ..hints import CannedHintGenerator
from ..session import GameManager
from ..world import StaticCatalog
from .conftest import ManualRunner


@pytest.fixture
def manager(france, facts, store):
    return GameManager(
        catalog=StaticCatalog([france]),
        facts=facts,
        hints=CannedHintGenerator(["Known for wine."]),
        store=store,
        runner_factory=ManualRunner,
    )


@pytest.fixture
def service(manager):
    return APIService(game_manager=manager)


@pytest.fixture
def client(service):
    with TestClient(create_app(service)) as test_client:
        yield test_client


def flush(manager, game_id):
    manager.get_game(game_id).loop.runner.run_all()


class TestAPIService:
    """Tests for APIService."""

    def test_create_game(self, service):
        response = service.create_game(CreateGameRequest(seed=3))

        assert response.game_id
        assert not response.session_active
        assert response.catalog_error is None
        assert response.round.status == RoundStatus.IDLE

    def test_unknown_game(self, service):
        response = service.guess("nope", GuessRequest(text="France"))

        assert hasattr(response, "error")
        assert response.error_code == "GAME_NOT_FOUND"

    def test_ignored_action_is_not_an_error(self, service):
        game = service.create_game(CreateGameRequest())
        response = service.guess(game.game_id, GuessRequest(text="France"))

        assert not response.accepted
        assert response.reason_code == "INVALID_STATE"
        assert response.game_state.game_id == game.game_id

    def test_answer_hidden_until_resolved(self, service, manager):
        game = service.create_game(CreateGameRequest())
        service.add_player(game.game_id, AddPlayerRequest(name="Ana"))
        service.start_session(game.game_id)
        flush(manager, game.game_id)

        playing = service.get_game(game.game_id)
        assert playing.round.status == RoundStatus.PLAYING
        assert playing.round.answer is None
        assert playing.round.facts is None
        assert playing.round.target_geometry["type"] == "Polygon"

        response = service.skip(game.game_id)
        assert response.accepted
        resolved = response.game_state.round
        assert resolved.answer == "France"
        assert resolved.facts.capital == "Paris"

    def test_current_turn_flag(self, service):
        game = service.create_game(CreateGameRequest())
        service.add_player(game.game_id, AddPlayerRequest(name="Ana"))
        response = service.add_player(game.game_id, AddPlayerRequest(name="Bo"))
        response = service.start_session(game.game_id)

        players = response.game_state.players
        assert [p.is_current_turn for p in players] == [True, False]
        assert response.game_state.current_player_id == players[0].player_id

    def test_camera(self, service, manager):
        game = service.create_game(CreateGameRequest())
        service.start_session(game.game_id)

        assert not service.camera(game.game_id, 800, 600).framed
        flush(manager, game.game_id)
        assert service.camera(game.game_id, 800, 600).framed

    def test_leaderboard_from_store(self, service, manager):
        game = service.create_game(CreateGameRequest())
        service.start_session(game.game_id)
        flush(manager, game.game_id)
        service.guess(game.game_id, GuessRequest(text="france"))
        service.end_session(game.game_id)
        flush(manager, game.game_id)

        board = service.leaderboard()
        assert board.count == 1
        assert board.entries[0].name == "Player 1"
        assert board.entries[0].score == 5


class TestHTTP:
    """Tests through the FastAPI app."""

    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_full_round(self, client, manager):
        game_id = client.post("/api/v1/games", json={"seed": 1}).json()["game_id"]

        added = client.post(f"/api/v1/games/{game_id}/players", json={"name": "Ana"})
        assert added.json()["accepted"]

        started = client.post(f"/api/v1/games/{game_id}/session")
        assert started.json()["game_state"]["round"]["status"] == "loading"
        flush(manager, game_id)

        hint = client.post(f"/api/v1/games/{game_id}/hint")
        assert hint.json()["game_state"]["hint_in_flight"]
        flush(manager, game_id)

        wrong = client.post(f"/api/v1/games/{game_id}/guess", json={"text": "Spain"}).json()
        assert wrong["accepted"]
        assert wrong["game_state"]["round"]["lives_remaining"] == 2
        assert wrong["game_state"]["round"]["message"] == "Incorrect!"

        right = client.post(f"/api/v1/games/{game_id}/guess", json={"text": "france"}).json()
        state = right["game_state"]
        assert state["round"]["status"] == "success"
        assert state["round"]["hints"] == ["Known for wine."]
        assert state["players"][0]["score"] == 0

        ended = client.delete(f"/api/v1/games/{game_id}/session").json()
        assert ended["accepted"]
        assert not ended["game_state"]["session_active"]

    def test_create_without_body(self, client):
        response = client.post("/api/v1/games")

        assert response.status_code == 200
        assert response.json()["round"]["status"] == "idle"

    def test_unknown_game_is_404(self, client):
        response = client.get("/api/v1/games/missing")

        assert response.status_code == 404
        assert response.json()["error_code"] == "GAME_NOT_FOUND"

    def test_unknown_game_action_is_404(self, client):
        response = client.post("/api/v1/games/missing/skip")

        assert response.status_code == 404

    def test_ignored_action_is_200(self, client):
        game_id = client.post("/api/v1/games").json()["game_id"]
        response = client.post(f"/api/v1/games/{game_id}/skip")

        assert response.status_code == 200
        assert response.json()["accepted"] is False

    def test_missing_guess_text_is_422(self, client):
        game_id = client.post("/api/v1/games").json()["game_id"]
        response = client.post(f"/api/v1/games/{game_id}/guess", json={})

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"
        assert response.json()["details"]["errors"]

    def test_camera_needs_positive_size(self, client):
        game_id = client.post("/api/v1/games").json()["game_id"]

        empty = client.get(f"/api/v1/games/{game_id}/camera", params={"width": 0, "height": 10})
        assert empty.status_code == 422
        assert empty.json()["error_code"] == "VALIDATION_ERROR"
        camera = client.get(f"/api/v1/games/{game_id}/camera", params={"width": 800, "height": 600})
        assert camera.status_code == 200
        assert camera.json()["scale"] == 1.0

    def test_stopping_the_app_closes_games(self, service, manager):
        with TestClient(create_app(service)) as test_client:
            test_client.post("/api/v1/games")
            assert len(manager.list_games()) == 1

        assert manager.list_games() == []

    def test_list_and_close(self, client):
        game_id = client.post("/api/v1/games").json()["game_id"]

        assert game_id in client.get("/api/v1/games").json()["games"]
        assert client.delete(f"/api/v1/games/{game_id}").json()["success"]
        assert client.get(f"/api/v1/games/{game_id}").status_code == 404

    def test_roster_edit(self, client):
        game_id = client.post("/api/v1/games").json()["game_id"]
        client.post(f"/api/v1/games/{game_id}/players", json={"name": "Ana"})

        removed = client.delete(f"/api/v1/games/{game_id}/players/player-1").json()
        assert removed["accepted"]
        assert removed["game_state"]["players"] == []

    def test_leaderboard_endpoint(self, client):
        response = client.get("/api/v1/leaderboard")

        assert response.status_code == 200
        assert response.json() == {"entries": [], "count": 0}
