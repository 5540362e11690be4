# api/routes.py
from typing import List

from fastapi import APIRouter, HTTPException

from api.schemas import GameStateOut, RoomSummaryOut
from domain.errors import RoomNotFound
from realtime.payloads import game_state_payload
from state import registry

router = APIRouter(prefix="/api")


@router.get("/rooms", response_model=List[RoomSummaryOut])
async def list_rooms():
    rows = []
    for code, session in registry:
        snap = session.snapshot()
        rows.append(
            RoomSummaryOut(roomCode=code,
                           phase=snap.phase.value,
                           players=len(snap.players),
                           round=snap.round))
    return rows


@router.get("/rooms/{room_code}", response_model=GameStateOut)
async def get_room(room_code: str):
    """Read-only view of one room, same shape as the websocket gameState."""
    try:
        snap = registry.get(room_code).snapshot()
    except RoomNotFound as e:
        raise HTTPException(404, e.message)
    return game_state_payload(snap)
