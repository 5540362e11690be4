# realtime/utils.py
from __future__ import annotations

import logging
from typing import Iterable, Optional

from fastapi import WebSocket

from domain.errors import RoomNotFound
from realtime.handlers import Outbound
from state import registry, ws_by_player

logger = logging.getLogger(__name__)


async def send_json_safe(ws: WebSocket, payload: dict):
    try:
        await ws.send_json(payload)
    except Exception as e:
        # a dead socket is cleaned up by its own endpoint loop
        logger.debug("send to %s failed: %s", ws, e)


async def broadcast_room(code: str, payload: dict):
    try:
        players = registry.get(code).snapshot().players
    except RoomNotFound:
        return
    for p in players:
        ws = ws_by_player.get(p.player_id)
        if ws:
            await send_json_safe(ws, payload)


async def dispatch(ws: Optional[WebSocket], events: Iterable[Outbound]):
    """Deliver handler output: room events to the room, the rest to `ws`."""
    for ev in events:
        if ev.room is not None:
            await broadcast_room(ev.room, ev.payload)
        elif ws is not None:
            await send_json_safe(ws, ev.payload)
