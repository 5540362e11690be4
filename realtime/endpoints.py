# realtime/endpoints.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import Query, WebSocket, WebSocketDisconnect

from realtime.handlers import error_event, handle_disconnect, handle_message
from realtime.ticker import track
from realtime.utils import dispatch, send_json_safe
from state import gen_player_id, registry, room_by_player, ws_by_player

logger = logging.getLogger(__name__)


async def ws_endpoint(ws: WebSocket,
                      playerId: Optional[str] = Query(default=None)):
    await ws.accept()

    # a connection is a player; ids are never shared between live sockets
    pid = playerId if playerId and playerId not in ws_by_player else gen_player_id()
    ws_by_player[pid] = ws
    logger.info("Player connected: %s", pid)

    await send_json_safe(ws, {"type": "HELLO", "playerId": pid})

    try:
        while True:
            try:
                msg = await ws.receive_json()
            except ValueError:
                msg = None
            if not isinstance(msg, dict):
                await dispatch(ws, [error_event("bad_message", "expected a JSON object")])
                continue
            events = handle_message(registry, room_by_player, pid, msg)
            await dispatch(ws, events)
            track(events)

    except WebSocketDisconnect:
        pass
    finally:
        logger.info("Player disconnected: %s", pid)
        if ws_by_player.get(pid) is ws:
            ws_by_player.pop(pid, None)
        events = handle_disconnect(registry, room_by_player, pid)
        await dispatch(None, events)
