import pytest
from fastapi.testclient import TestClient

from main import app


@pytest.fixture(scope="module")
def client():
    # one portal, so both sockets share the app's event loop
    with TestClient(app) as c:
        yield c


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_missing_room_is_404(client):
    resp = client.get("/api/rooms/NOSUCH")
    assert resp.status_code == 404


def receive_until(ws, kind):
    while True:
        msg = ws.receive_json()
        if msg["type"] == kind:
            return msg


@pytest.mark.usefixtures("no_round_timer")
def test_websocket_round_trip(client):
    with client.websocket_connect("/ws") as a, client.websocket_connect("/ws") as b:
        assert a.receive_json()["type"] == "HELLO"
        assert b.receive_json()["type"] == "HELLO"

        a.send_json({"type": "CREATE_ROOM", "name": "Ann", "role": "RETAIL"})
        created = a.receive_json()
        assert created["type"] == "ROOM_CREATED"
        code = created["roomCode"]

        b.send_json({"type": "JOIN_ROOM", "roomCode": code, "name": "Bob", "role": "HEDGE"})
        assert receive_until(b, "ROOM_JOINED")["roomCode"] == code
        assert receive_until(a, "PLAYER_JOINED")["gameState"]["players"]

        a.send_json({"type": "PLAYER_READY"})
        b.send_json({"type": "PLAYER_READY"})
        assert receive_until(a, "GAME_START")["gameState"]["round"] == 1
        receive_until(b, "GAME_START")

        a.send_json({"type": "SUBMIT_ACTION", "action": "BUY"})
        receive_until(b, "ACTION_SUBMITTED")
        b.send_json({"type": "SUBMIT_ACTION", "action": "SHORT"})
        result = receive_until(a, "ROUND_RESULT")["roundResult"]
        assert result["retailAction"] == "BUY"
        assert receive_until(b, "NEXT_ROUND")["gameState"]["round"] == 2

        resp = client.get(f"/api/rooms/{code}")
        assert resp.status_code == 200
        body = resp.json()
        assert body["round"] == 2
        assert body["phase"] == "IN_PROGRESS"
        assert len(body["roundHistory"]) == 1
        assert body["priceHistory"][0] == {"round": 0, "price": 20.0}

        rooms = client.get("/api/rooms").json()
        assert {"roomCode": code, "phase": "IN_PROGRESS", "players": 2, "round": 2} in rooms

        a.send_json({"type": "SUBMIT_ACTION", "action": "SHORT"})
        err = receive_until(a, "ERROR")
        assert err["code"] == "invalid_action"


@pytest.mark.usefixtures("no_round_timer")
def test_websocket_rejects_garbage(client):
    with client.websocket_connect("/ws") as ws:
        ws.receive_json()
        ws.send_text("not json")
        assert ws.receive_json()["code"] == "bad_message"
        ws.send_json({"type": "JOIN_ROOM", "roomCode": "ZZZZZZ", "role": "HEDGE"})
        assert ws.receive_json()["code"] == "room_not_found"
