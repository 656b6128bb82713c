"""HTTP tests for src/api/routes.py (requests go through the full stack, on the test database)"""

from typing import Any, Generator
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from src.api.app import create_app
from src.db.database import get_db


@pytest.fixture
def client(db_session_repo: Session) -> Generator[TestClient, None, None]:
    app = create_app()
    app.dependency_overrides[get_db] = lambda: db_session_repo
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def game(client: TestClient) -> dict[str, Any]:
    response = client.post("/games", json={"player_names": ["Ada", "Bo", "Cy"], "seed": 5})
    assert response.status_code == 201
    return response.json()


def test_create_game(game: dict[str, Any]) -> None:
    assert game["status"] == "campaign"
    assert game["awaiting_player"] == 1
    assert [player["name"] for player in game["players"]] == ["Ada", "Bo", "Cy"]


def test_create_game_with_too_few_players(client: TestClient) -> None:
    response = client.post("/games", json={"player_names": ["Ada", "Bo"]})
    assert response.status_code == 400
    assert "players" in response.json()["detail"]


def test_get_game(client: TestClient, game: dict[str, Any]) -> None:
    response = client.get(f"/games/{game['game_id']}")
    assert response.status_code == 200
    assert response.json() == game


def test_unknown_game(client: TestClient) -> None:
    response = client.get(f"/games/{uuid4()}")
    assert response.status_code == 404


def test_legal_moves(client: TestClient, game: dict[str, Any]) -> None:
    response = client.get(
        f"/games/{game['game_id']}/players/1/legal-moves", params={"move_type": "advance"}
    )
    assert response.status_code == 200
    moves = response.json()["legal_moves"]
    assert moves
    assert {move["move_type"] for move in moves} == {"advance"}


def test_tile_play_round_trip(client: TestClient, game: dict[str, Any]) -> None:
    game_id = game["game_id"]
    hand = client.get(f"/games/{game_id}/players/1/hand").json()["hand"]

    response = client.post(
        "/games/actions/play-tile",
        json={
            "game_id": game_id,
            "player_id": 1,
            "tile_id": hand[0],
            "receiver": 2,
            "moves": [{"piece_id": "campaign_mark_10", "to_location": "p1_seat2"}],
        },
    )
    assert response.status_code == 200
    assert response.json()["status"] == "pending acceptance"

    # only the receiver may look at the tile
    assert client.get(f"/games/{game_id}/players/3/played-tile").status_code == 409
    tile = client.get(f"/games/{game_id}/players/2/played-tile").json()
    assert tile["tile_id"] == hand[0]

    response = client.post(
        "/games/actions/receiver-decision",
        json={"game_id": game_id, "player_id": 2, "accept": True},
    )
    assert response.status_code == 200
    assert response.json()["awaiting_player"] == 3


def test_acting_out_of_turn(client: TestClient, game: dict[str, Any]) -> None:
    response = client.post(
        "/games/actions/receiver-decision",
        json={"game_id": game["game_id"], "player_id": 2, "accept": True},
    )
    assert response.status_code == 409  # nobody played a tile yet

    hand = client.get(f"/games/{game['game_id']}/players/2/hand").json()["hand"]
    response = client.post(
        "/games/actions/play-tile",
        json={"game_id": game["game_id"], "player_id": 2, "tile_id": hand[0], "receiver": 1},
    )
    assert response.status_code == 409


def test_invalid_location_in_request(client: TestClient, game: dict[str, Any]) -> None:
    response = client.post(
        "/games/actions/play-tile",
        json={
            "game_id": game["game_id"],
            "player_id": 1,
            "tile_id": "05",
            "receiver": 2,
            "moves": [{"piece_id": "campaign_mark_10", "to_location": "the moon"}],
        },
    )
    assert response.status_code == 400


def test_delete_game(client: TestClient, game: dict[str, Any]) -> None:
    response = client.delete(f"/games/{game['game_id']}")
    assert response.status_code == 204
    assert client.get(f"/games/{game['game_id']}").status_code == 404
    assert client.delete(f"/games/{game['game_id']}").status_code == 404


def test_bureaucracy_options_during_campaign(client: TestClient, game: dict[str, Any]) -> None:
    response = client.get(f"/games/{game['game_id']}/players/1/bureaucracy-options")
    assert response.status_code == 409
