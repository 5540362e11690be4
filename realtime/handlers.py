# realtime/handlers.py
"""
Websocket message handlers.

Each handler takes the registry, the sender's player id and the decoded
message, mutates the core through its public operations and returns the
events to deliver. Handlers never touch a socket: delivering the returned
`Outbound` events is the endpoint's job.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from domain.errors import GameError, RoomNotFound
from domain.registry import RoomRegistry
from realtime.payloads import (
    game_state_payload,
    game_stats_payload,
    round_result_payload,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Outbound:
    payload: dict
    # None -> sender only, otherwise everyone currently in that room
    room: Optional[str] = None


def error_event(code: str, message: str = "") -> Outbound:
    return Outbound({"type": "ERROR", "code": code, "message": message or code})


def _state(registry: RoomRegistry, code: str) -> dict:
    return game_state_payload(registry.get(code).snapshot())


def _current_room(room_by_player: Dict[str, str], player_id: str) -> str:
    code = room_by_player.get(player_id)
    if not code:
        raise RoomNotFound("you are not in a room")
    return code


def on_create_room(registry, room_by_player, player_id, msg) -> List[Outbound]:
    if player_id in room_by_player:
        return [error_event("already_in_room", "leave your current room first")]
    code, session = registry.create()
    try:
        session.add_player(msg.get("playerName") or msg.get("name") or
                           f"Player-{player_id[:4]}",
                           msg.get("role"),
                           player_id=player_id)
    except GameError:
        registry.remove(code)
        raise
    room_by_player[player_id] = code
    return [
        Outbound({
            "type": "ROOM_CREATED",
            "roomCode": code,
            "playerId": player_id,
            "gameState": _state(registry, code),
        })
    ]


def on_join_room(registry, room_by_player, player_id, msg) -> List[Outbound]:
    if player_id in room_by_player:
        return [error_event("already_in_room", "leave your current room first")]
    code = (msg.get("roomCode") or "").strip().upper()
    session = registry.get(code)
    session.add_player(msg.get("playerName") or msg.get("name") or
                       f"Player-{player_id[:4]}",
                       msg.get("role"),
                       player_id=player_id)
    room_by_player[player_id] = code
    state = _state(registry, code)
    return [
        Outbound({"type": "PLAYER_JOINED", "gameState": state}, room=code),
        Outbound({
            "type": "ROOM_JOINED",
            "roomCode": code,
            "playerId": player_id,
            "gameState": state,
        }),
    ]


def on_player_ready(registry, room_by_player, player_id, msg) -> List[Outbound]:
    code = _current_room(room_by_player, player_id)
    started = registry.get(code).set_ready(player_id)
    state = _state(registry, code)
    events = [Outbound({"type": "PLAYER_READY", "gameState": state}, room=code)]
    if started:
        events.append(Outbound({"type": "GAME_START", "gameState": state}, room=code))
    return events


def on_submit_action(registry, room_by_player, player_id, msg) -> List[Outbound]:
    code = _current_room(room_by_player, player_id)
    session = registry.get(code)
    result = session.submit_action(player_id, msg.get("action"))
    if result is None:
        role = session.player(player_id).role
        return [Outbound({"type": "ACTION_SUBMITTED", "role": role.value}, room=code)]

    snap = session.snapshot()
    state = game_state_payload(snap)
    events = [
        Outbound({
            "type": "ROUND_RESULT",
            "roundResult": round_result_payload(result),
            "gameState": state,
        }, room=code)
    ]
    if snap.game_ended:
        events.append(Outbound({
            "type": "GAME_END",
            "gameStats": game_stats_payload(snap.stats),
            "gameState": state,
        }, room=code))
    else:
        events.append(Outbound({"type": "NEXT_ROUND", "gameState": state}, room=code))
    return events


def on_leave_room(registry, room_by_player, player_id, msg) -> List[Outbound]:
    code = room_by_player.pop(player_id, None)
    if not code:
        return []
    deleted = registry.remove_player(code, player_id)
    events = [Outbound({"type": "LEFT_ROOM", "roomCode": code})]
    if not deleted:
        events.append(Outbound({"type": "PLAYER_LEFT", "gameState": _state(registry, code)},
                               room=code))
    return events


def on_ping(registry, room_by_player, player_id, msg) -> List[Outbound]:
    return [Outbound({"type": "PONG", "ts": time.time()})]


HANDLERS: Dict[str, Callable[..., List[Outbound]]] = {
    "CREATE_ROOM": on_create_room,
    "JOIN_ROOM": on_join_room,
    "PLAYER_READY": on_player_ready,
    "SUBMIT_ACTION": on_submit_action,
    "LEAVE_ROOM": on_leave_room,
    "PING": on_ping,
}


def handle_message(registry: RoomRegistry, room_by_player: Dict[str, str],
                   player_id: str, msg: dict) -> List[Outbound]:
    handler = HANDLERS.get(msg.get("type"))
    if handler is None:
        # ignore unknown
        return []
    try:
        return handler(registry, room_by_player, player_id, msg)
    except GameError as e:
        logger.info("Rejected %s from %s: %s", msg.get("type"), player_id, e.message)
        return [error_event(e.code, e.message)]


def handle_disconnect(registry: RoomRegistry, room_by_player: Dict[str, str],
                      player_id: str) -> List[Outbound]:
    """
    A dropped connection leaves its room. The opponent, if any, is told and
    otherwise left where they are; there is no forfeit.
    """
    try:
        events = on_leave_room(registry, room_by_player, player_id, {})
    except GameError:
        return []
    # the sender is gone; only room broadcasts still make sense
    return [ev for ev in events if ev.room is not None]
