import pytest

from domain.registry import RoomRegistry
from realtime.handlers import handle_disconnect, handle_message


@pytest.fixture
def env():
    return RoomRegistry(seed=42), {}


def types(events):
    return [ev.payload["type"] for ev in events]


def send(env, pid, **msg):
    registry, rooms = env
    return handle_message(registry, rooms, pid, msg)


def open_game(env):
    created = send(env, "a", type="CREATE_ROOM", name="Ann", role="RETAIL")
    code = created[0].payload["roomCode"]
    send(env, "b", type="JOIN_ROOM", roomCode=code.lower(), name="Bob", role="HEDGE")
    send(env, "a", type="PLAYER_READY")
    return code, send(env, "b", type="PLAYER_READY")


def test_create_room(env):
    events = send(env, "a", type="CREATE_ROOM", name="Ann", role="RETAIL")
    assert types(events) == ["ROOM_CREATED"]
    payload = events[0].payload
    assert events[0].room is None
    assert payload["playerId"] == "a"
    state = payload["gameState"]
    assert state["phase"] == "LOBBY"
    assert state["stockPrice"] == 20.0
    assert state["players"]["a"]["role"] == "RETAIL"
    assert env[1] == {"a": payload["roomCode"]}


def test_create_with_bad_role_leaves_no_room(env):
    events = send(env, "a", type="CREATE_ROOM", name="Ann", role="WHALE")
    assert types(events) == ["ERROR"]
    assert events[0].payload["code"] == "invalid_action"
    assert len(env[0]) == 0
    assert env[1] == {}


def test_join_errors(env):
    assert send(env, "b", type="JOIN_ROOM", roomCode="ZZZZZZ", role="HEDGE")[0].payload["code"] == "room_not_found"
    code = send(env, "a", type="CREATE_ROOM", role="RETAIL")[0].payload["roomCode"]
    assert send(env, "b", type="JOIN_ROOM", roomCode=code, role="RETAIL")[0].payload["code"] == "role_taken"
    send(env, "b", type="JOIN_ROOM", roomCode=code, role="HEDGE")
    assert send(env, "c", type="JOIN_ROOM", roomCode=code, role="HEDGE")[0].payload["code"] == "room_full"
    assert send(env, "a", type="JOIN_ROOM", roomCode=code, role="HEDGE")[0].payload["code"] == "already_in_room"


def test_join_and_start(env):
    code, events = open_game(env)
    assert types(events) == ["PLAYER_READY", "GAME_START"]
    assert all(ev.room == code for ev in events)
    assert events[1].payload["gameState"]["round"] == 1
    assert events[1].payload["gameState"]["gameStarted"] is True


def test_round_flow(env):
    code, _ = open_game(env)
    first = send(env, "a", type="SUBMIT_ACTION", action="BUY")
    assert types(first) == ["ACTION_SUBMITTED"]
    assert first[0].payload["role"] == "RETAIL"

    events = send(env, "b", type="SUBMIT_ACTION", action="SHORT")
    assert types(events) == ["ROUND_RESULT", "NEXT_ROUND"]
    result = events[0].payload["roundResult"]
    assert result["round"] == 1
    assert (result["retailAction"], result["hedgeAction"]) == ("BUY", "SHORT")
    assert result["payoffMatrix"]["BUY"]["SHORT"] == {"retail": 100, "hedge": -100}
    assert result["retailProfit"] == round(result["priceChange"] * 100, 2)
    assert set(result["optimalStrategy"]) == {"retailStrategy", "hedgeStrategy"}
    assert events[1].payload["gameState"]["round"] == 2
    assert events[1].payload["gameState"]["retailShares"] == 100


def test_invalid_action_reports_error(env):
    open_game(env)
    events = send(env, "a", type="SUBMIT_ACTION", action="COVER")
    assert types(events) == ["ERROR"]
    assert events[0].payload["code"] == "invalid_action"
    assert "(BUY, HOLD, SELL)" in events[0].payload["message"]


def test_submit_before_start(env):
    send(env, "a", type="CREATE_ROOM", role="RETAIL")
    events = send(env, "a", type="SUBMIT_ACTION", action="BUY")
    assert events[0].payload["code"] == "invalid_phase"


def test_not_in_room(env):
    assert send(env, "x", type="PLAYER_READY")[0].payload["code"] == "room_not_found"


def test_full_game_ends(env):
    env[0].max_rounds = 2
    code, _ = open_game(env)
    for _ in range(2):
        send(env, "a", type="SUBMIT_ACTION", action="HOLD")
        events = send(env, "b", type="SUBMIT_ACTION", action="HOLD")
    assert types(events) == ["ROUND_RESULT", "GAME_END"]
    stats = events[1].payload["gameStats"]
    assert stats["winner"] == "HEDGE"
    assert len(stats["roundHistory"]) == 2
    assert events[1].payload["gameState"]["gameEnded"] is True


def test_leave_and_disconnect(env):
    code, _ = open_game(env)
    events = send(env, "a", type="LEAVE_ROOM")
    assert types(events) == ["LEFT_ROOM", "PLAYER_LEFT"]
    assert list(events[1].payload["gameState"]["players"]) == ["b"]
    assert code in env[0]
    # last one out deletes the room, nobody is left to tell
    assert handle_disconnect(env[0], env[1], "b") == []
    assert code not in env[0]
    assert env[1] == {}


def test_ping_and_unknown(env):
    assert types(send(env, "a", type="PING")) == ["PONG"]
    assert send(env, "a", type="DANCE") == []
