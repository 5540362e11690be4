# realtime/ticker.py
from __future__ import annotations

import asyncio
import logging
from typing import Dict, Iterable

import config
from domain.catalog import Role
from domain.errors import RoomNotFound
from domain.models import Phase
from realtime.handlers import Outbound, handle_message
from realtime.utils import dispatch
from state import registry, room_by_player

logger = logging.getLogger(__name__)

round_timers: Dict[str, asyncio.Task] = {}  # roomCode -> timer task


def cancel_round_timer(code: str):
    task = round_timers.pop(code, None)
    if task and not task.done() and task is not asyncio.current_task():
        task.cancel()


def arm_round_timer(code: str, round_no: int):
    if config.ROUND_SECONDS <= 0:
        return
    cancel_round_timer(code)
    round_timers[code] = asyncio.create_task(round_timer(code, round_no))


async def round_timer(code: str, round_no: int):
    """
    Submit the default action for whoever has not moved once the round
    clock runs out. A role with no player is skipped, so a room that lost
    a player stays stalled.
    """
    try:
        await asyncio.sleep(config.ROUND_SECONDS)
        for role in (Role.RETAIL, Role.HEDGE):
            # delivering the previous auto-move yields to the loop, so a real
            # move may have closed the round in the meantime
            try:
                session = registry.get(code)
            except RoomNotFound:
                return
            snap = session.snapshot()
            if snap.phase is not Phase.IN_PROGRESS or snap.round != round_no:
                return
            if role in snap.submitted:
                continue
            player_id = session.player_id_for(role)
            if player_id is None:
                continue
            logger.info("Round %d timed out in room %s, %s plays %s", round_no,
                        code, role.value, config.DEFAULT_TIMEOUT_ACTION)
            events = handle_message(registry, room_by_player, player_id, {
                "type": "SUBMIT_ACTION",
                "action": config.DEFAULT_TIMEOUT_ACTION
            })
            await dispatch(None, events)
            track(events)
    finally:
        if round_timers.get(code) is asyncio.current_task():
            round_timers.pop(code, None)


def track(events: Iterable[Outbound]):
    """(Re)arm or stop a room's round clock based on what just happened."""
    for ev in events:
        if ev.room is None:
            continue
        kind = ev.payload.get("type")
        if kind in ("GAME_START", "NEXT_ROUND"):
            arm_round_timer(ev.room, ev.payload["gameState"]["round"])
        elif kind == "GAME_END":
            cancel_round_timer(ev.room)
