# domain/models.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from domain.catalog import HedgeAction, RetailAction, Role, Sentiment
from domain.nash import Equilibrium, MixedStrategy, OptimalPlay
from domain.payoff import PayoffMatrix


class Phase(str, Enum):
    LOBBY = "LOBBY"
    IN_PROGRESS = "IN_PROGRESS"
    ENDED = "ENDED"


class Player:

    def __init__(self, player_id: str, name: str, role: Role):
        self.player_id = player_id
        self.name = name
        self.role = role
        self.ready = False


@dataclass(frozen=True)
class Achievement:
    title: str
    message: str


@dataclass(frozen=True)
class RoundResult:
    round: int
    retail_action: RetailAction
    hedge_action: HedgeAction
    old_price: float
    new_price: float
    price_change: float
    retail_profit: float
    hedge_profit: float
    sentiment: Sentiment
    payoff_matrix: PayoffMatrix
    equilibria: Tuple[Equilibrium, ...]
    optimal_strategy: MixedStrategy
    optimal_play: OptimalPlay
    achievement: Optional[Achievement] = None


@dataclass(frozen=True)
class PlayerView:
    player_id: str
    name: str
    role: Role
    ready: bool


@dataclass(frozen=True)
class GameStats:
    winner: Role
    retail_score: float
    hedge_score: float
    retail_optimal_percentage: float
    hedge_optimal_percentage: float
    final_price: float
    price_change_percentage: float
    round_history: Tuple[RoundResult, ...]


@dataclass(frozen=True)
class GameState:
    """Read-only copy of a session, safe to hand to the transport layer."""

    room_code: str
    phase: Phase
    players: Tuple[PlayerView, ...]
    round: int
    max_rounds: int
    price: float
    start_price: float
    price_history: Tuple[Tuple[int, float], ...]
    sentiment: Sentiment
    scores: Dict[Role, float]
    shares: Dict[Role, int]
    submitted: Tuple[Role, ...]
    round_history: Tuple[RoundResult, ...]
    optimal_counts: Dict[Role, int]
    winner: Optional[Role] = None
    stats: Optional[GameStats] = None

    @property
    def game_started(self) -> bool:
        return self.phase is not Phase.LOBBY

    @property
    def game_ended(self) -> bool:
        return self.phase is Phase.ENDED
