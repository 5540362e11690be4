# state.py
from __future__ import annotations

import random
import string
from typing import Dict

from fastapi import WebSocket

import config
from domain.registry import RoomRegistry

# ---- Connections ----
ws_by_player: Dict[str, WebSocket] = {}            # playerId -> ws

# ---- Rooms ----
registry = RoomRegistry(
    max_rounds=config.MAX_ROUNDS,
    start_price=config.START_PRICE,
    code_length=config.ROOM_CODE_LENGTH,
    seed=config.RNG_SEED,
    clamp_sentiment=config.CLAMP_SENTIMENT_WEIGHTS,
)
room_by_player: Dict[str, str] = {}                # playerId -> roomCode


# ---- ID generators ----
def gen_player_id() -> str:
    """Generate a short opaque player id, e.g. 'k8z2q1m9d0'."""
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=10))
