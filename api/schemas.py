# api/schemas.py
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel


class RoomSummaryOut(BaseModel):
    roomCode: str
    phase: str
    players: int
    round: int


class PricePointOut(BaseModel):
    round: int
    price: float


class PlayerOut(BaseModel):
    id: str
    name: str
    role: str
    ready: bool


class GameStateOut(BaseModel):
    roomCode: str
    phase: str
    players: Dict[str, PlayerOut]
    round: int
    maxRounds: int
    stockPrice: float
    startPrice: float
    priceHistory: List[PricePointOut]
    sentiment: str
    retailScore: float
    hedgeScore: float
    retailShares: int
    hedgeShares: int
    submitted: List[str]
    roundHistory: List[dict]
    gameStarted: bool
    gameEnded: bool
    retailOptimalCount: int
    hedgeOptimalCount: int
    winner: Optional[str] = None
