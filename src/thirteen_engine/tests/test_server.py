"""
WebSocket and HTTP surface tests.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from thirteen_engine.errors import INVALID_EVENT, NOT_HOST, NOT_YOUR_TURN
from thirteen_engine.lobby import LobbyManager
from thirteen_engine.ws import server


@pytest.fixture(autouse=True)
def fresh_lobbies(monkeypatch):
    lobby_manager = LobbyManager(seed=11)
    monkeypatch.setattr(server, "lobby_manager", lobby_manager)
    return lobby_manager


@pytest.fixture
def client():
    with TestClient(server.app) as test_client:
        yield test_client


def receive_until(websocket, event_type):
    """Read messages until one of the given type arrives and return it."""
    while True:
        message = websocket.receive_json()
        if message["type"] == event_type:
            return message


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_malformed_event(client):
    with client.websocket_connect("/ws") as ws:
        receive_until(ws, "lobbyList")
        ws.send_text("{not json")
        reply = ws.receive_json()
        assert reply["type"] == "invalid"
        assert reply["code"] == INVALID_EVENT


def test_lobby_game_round_trip(client, fresh_lobbies):
    with client.websocket_connect("/ws") as ann:
        receive_until(ann, "lobbyList")
        ann.send_json({"type": "setName", "name": "Ann"})
        assert receive_until(ann, "nameSet")["name"] == "Ann"

        ann.send_json({"type": "createLobby"})
        info = receive_until(ann, "lobbyInfo")
        assert info["hostName"] == "Ann"
        lobby_id = info["id"]

        with client.websocket_connect("/ws") as bob:
            listing = receive_until(bob, "lobbyList")
            assert [lobby["id"] for lobby in listing["lobbies"]] == [lobby_id]

            bob.send_json({"type": "setName", "name": "Bob"})
            receive_until(bob, "nameSet")
            bob.send_json({"type": "joinLobby", "lobbyId": lobby_id})
            receive_until(bob, "lobbyInfo")

            bob.send_json({"type": "startGame"})
            assert receive_until(bob, "invalid")["code"] == NOT_HOST

            ann.send_json({"type": "startGame"})
            hands = {
                "Ann": receive_until(ann, "start")["hand"],
                "Bob": receive_until(bob, "start")["hand"],
            }
            assert len(hands["Ann"]) == len(hands["Bob"]) == 13

            state = receive_until(ann, "state")
            assert state["phase"] == "active"
            assert all("hand" not in player for player in state["players"])

            waiting = "Bob" if state["currentTurn"] == "Ann" else "Ann"
            sockets = {"Ann": ann, "Bob": bob}
            sockets[waiting].send_json({"type": "play", "cards": hands[waiting][:1]})
            rejection = receive_until(sockets[waiting], "invalid")
            assert rejection["code"] == NOT_YOUR_TURN

        over = receive_until(ann, "gameOver")
        assert [entry["name"] for entry in over["rankings"]] == ["Ann"]

    assert fresh_lobbies.lobbies == {}


def test_free_table_join(client):
    with client.websocket_connect("/ws") as first, client.websocket_connect("/ws") as second:
        first.send_json({"type": "join", "name": "Cy"})
        assert receive_until(first, "joined") == {"type": "joined", "name": "Cy", "spectator": False}
        second.send_json({"type": "join", "name": "Di"})

        for ws in (first, second):
            assert len(receive_until(ws, "start")["hand"]) == 13


@pytest.mark.asyncio
async def test_lobbies_endpoint(fresh_lobbies):
    fresh_lobbies.connect("abc")
    fresh_lobbies.create_lobby("abc")

    transport = httpx.ASGITransport(app=server.app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/lobbies")

    assert response.status_code == 200
    lobbies = response.json()["lobbies"]
    assert len(lobbies) == 1
    assert lobbies[0]["hostName"] == "Player-abc"


def test_root():
    from thirteen_engine.main import app

    with TestClient(app) as test_client:
        response = test_client.get("/")
    assert response.json()["message"] == "Thirteen Card Game API"
