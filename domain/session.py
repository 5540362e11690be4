# domain/session.py
from __future__ import annotations

import logging
import random
import threading
import uuid
from typing import Dict, Optional, Union

from domain.catalog import (
    Action,
    HedgeAction,
    RetailAction,
    Role,
    Sentiment,
    actions_for,
    parse_action,
    parse_role,
)
from domain.errors import (
    InvalidAction,
    InvalidPhase,
    PlayerNotFound,
    RoleTaken,
    RoomFull,
)
from domain.models import (
    Achievement,
    GameState,
    GameStats,
    Phase,
    Player,
    PlayerView,
    RoundResult,
)
from domain.nash import check_optimal_play, find_pure_equilibria, mixed_strategy
from domain.payoff import build_payoff_matrix
from domain.portfolio import PositionLedger
from domain.pricing import calculate_new_price, round_price
from domain.sentiment import next_sentiment

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROUNDS = 10
DEFAULT_START_PRICE = 20.0
MAX_PLAYERS = 2

NICE_PRICE_LOW = 69.41
NICE_PRICE_HIGH = 69.43


def check_achievement(new_price: float) -> Optional[Achievement]:
    if NICE_PRICE_LOW <= new_price <= NICE_PRICE_HIGH:
        return Achievement(title="Nice!", message="Stock hit $69.42!")
    return None


class GameSession:
    """
    One room: two players, up to `max_rounds` simultaneous-move rounds.

    All mutation goes through the public methods, each of which holds the
    session lock for its whole body. The second submission of a round
    resolves it inside the same critical section, so a round resolves
    exactly once no matter how the two submissions interleave. A failed
    call raises a GameError and leaves the session untouched.
    """

    def __init__(
        self,
        room_code: str,
        *,
        max_rounds: int = DEFAULT_MAX_ROUNDS,
        start_price: float = DEFAULT_START_PRICE,
        sentiment: Sentiment = Sentiment.NEUTRAL,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        clamp_sentiment: bool = True,
    ):
        if max_rounds < 1:
            raise ValueError("max_rounds must be at least 1")
        self.room_code = room_code
        self.max_rounds = max_rounds
        self.start_price = round_price(max(1.0, start_price))
        self.clamp_sentiment = clamp_sentiment
        # market
        self.seed = seed if seed is not None else random.randint(1, 10_000)
        self.rng = rng if rng is not None else random.Random(self.seed)
        self.price = self.start_price
        self.sentiment = sentiment
        self.price_history = [(0, self.start_price)]
        # players / round state
        self.players: Dict[Role, Player] = {}
        self.phase = Phase.LOBBY
        self.round = 0
        self.pending: Dict[Role, Action] = {}
        self.round_history = []
        self.ledger = PositionLedger()
        self.scores = {Role.RETAIL: 0.0, Role.HEDGE: 0.0}
        self.optimal_counts = {Role.RETAIL: 0, Role.HEDGE: 0}
        self.winner: Optional[Role] = None
        self.stats: Optional[GameStats] = None

        self._lock = threading.Lock()

    # ---------- lookups ----------
    def _find(self, player_id: str) -> Player:
        for pl in self.players.values():
            if pl.player_id == player_id:
                return pl
        raise PlayerNotFound(f"no player {player_id!r} in room {self.room_code}")

    def player(self, player_id: str) -> Player:
        with self._lock:
            return self._find(player_id)

    def player_id_for(self, role: Role) -> Optional[str]:
        with self._lock:
            pl = self.players.get(role)
            return pl.player_id if pl else None

    @property
    def is_empty(self) -> bool:
        return not self.players

    # ---------- lobby ----------
    def add_player(self, name: str, role: Union[Role, str],
                   player_id: Optional[str] = None) -> Player:
        try:
            role = parse_role(role)
        except ValueError:
            raise InvalidAction(f"unknown role {role!r}") from None

        with self._lock:
            if len(self.players) >= MAX_PLAYERS:
                raise RoomFull(f"room {self.room_code} is full")
            if self.phase is not Phase.LOBBY:
                raise InvalidPhase(f"room {self.room_code} is no longer in the lobby")
            if role in self.players:
                raise RoleTaken(f"{role.value} is already taken")

            pl = Player(player_id or uuid.uuid4().hex, name, role)
            self.players[role] = pl
            logger.info("%s joined room %s as %s", name, self.room_code, role.value)
            return pl

    def set_ready(self, player_id: str) -> bool:
        """Mark a player ready. Returns True if this call started the game."""
        with self._lock:
            pl = self._find(player_id)
            if self.phase is not Phase.LOBBY:
                return False
            pl.ready = True
            if len(self.players) == MAX_PLAYERS and all(
                    p.ready for p in self.players.values()):
                self.phase = Phase.IN_PROGRESS
                self.round = 1
                logger.info("Game started in room %s", self.room_code)
                return True
            return False

    def remove_player(self, player_id: str) -> bool:
        """Drop a player. Returns True when the room is now empty."""
        with self._lock:
            pl = self._find(player_id)
            del self.players[pl.role]
            self.pending.pop(pl.role, None)
            logger.info("%s left room %s", pl.name, self.room_code)
            return not self.players

    # ---------- play ----------
    def submit_action(self, player_id: str,
                      action: Union[Action, str]) -> Optional[RoundResult]:
        """
        Record (or overwrite) the player's move for the current round.

        Returns the RoundResult when this submission completed the round,
        otherwise None.
        """
        with self._lock:
            if self.phase is not Phase.IN_PROGRESS:
                raise InvalidPhase(f"room {self.room_code} is {self.phase.value}")
            pl = self._find(player_id)
            try:
                move = parse_action(pl.role, action)
            except ValueError:
                legal = ", ".join(a.value for a in actions_for(pl.role))
                raise InvalidAction(
                    f"{action!r} is not a {pl.role.value} action ({legal})") from None

            self.pending[pl.role] = move
            logger.debug("%s (%s) submitted %s in room %s", pl.name,
                         pl.role.value, move.value, self.room_code)

            if Role.RETAIL in self.pending and Role.HEDGE in self.pending:
                return self._resolve_round()
            return None

    def _resolve_round(self) -> RoundResult:
        # caller holds the lock
        retail: RetailAction = self.pending[Role.RETAIL]
        hedge: HedgeAction = self.pending[Role.HEDGE]
        old_price = self.price

        matrix = build_payoff_matrix(old_price, self.sentiment)

        new_price = calculate_new_price(old_price, retail, hedge, self.sentiment,
                                        self.rng)
        price_change = round_price(new_price - old_price)
        retail_profit, hedge_profit = self.ledger.settle(retail, hedge,
                                                         price_change)

        self.scores[Role.RETAIL] = round(self.scores[Role.RETAIL] + retail_profit, 2)
        self.scores[Role.HEDGE] = round(self.scores[Role.HEDGE] + hedge_profit, 2)
        self.price = new_price

        self.sentiment = next_sentiment(self.sentiment, retail, hedge, self.rng,
                                        clamp_negative=self.clamp_sentiment)

        equilibria = find_pure_equilibria(matrix)
        strategy = mixed_strategy(matrix)
        judged = check_optimal_play(retail, hedge, matrix)
        if judged.retail_optimal:
            self.optimal_counts[Role.RETAIL] += 1
        if judged.hedge_optimal:
            self.optimal_counts[Role.HEDGE] += 1

        result = RoundResult(
            round=self.round,
            retail_action=retail,
            hedge_action=hedge,
            old_price=old_price,
            new_price=new_price,
            price_change=price_change,
            retail_profit=retail_profit,
            hedge_profit=hedge_profit,
            sentiment=self.sentiment,
            payoff_matrix=matrix,
            equilibria=tuple(equilibria),
            optimal_strategy=strategy,
            optimal_play=judged,
            achievement=check_achievement(new_price),
        )
        self.price_history.append((self.round, new_price))
        self.round_history.append(result)
        self.pending = {}

        logger.info(
            "Room %s round %d: %s/%s %.2f -> %.2f (%s)", self.room_code,
            self.round, retail.value, hedge.value, old_price, new_price,
            self.sentiment.value)

        if self.round >= self.max_rounds:
            self._finish()
        else:
            self.round += 1
        return result

    def _finish(self) -> None:
        retail_score = self.scores[Role.RETAIL]
        hedge_score = self.scores[Role.HEDGE]
        # ties go to HEDGE
        self.winner = Role.RETAIL if retail_score > hedge_score else Role.HEDGE
        self.phase = Phase.ENDED
        self.stats = GameStats(
            winner=self.winner,
            retail_score=retail_score,
            hedge_score=hedge_score,
            retail_optimal_percentage=round(
                self.optimal_counts[Role.RETAIL] / self.max_rounds * 100, 1),
            hedge_optimal_percentage=round(
                self.optimal_counts[Role.HEDGE] / self.max_rounds * 100, 1),
            final_price=self.price,
            price_change_percentage=round(
                (self.price - self.start_price) / self.start_price * 100, 1),
            round_history=tuple(self.round_history),
        )
        logger.info("Game ended in room %s. Winner: %s", self.room_code,
                    self.winner.value)

    # ---------- views ----------
    def snapshot(self) -> GameState:
        with self._lock:
            return GameState(
                room_code=self.room_code,
                phase=self.phase,
                players=tuple(
                    PlayerView(p.player_id, p.name, p.role, p.ready)
                    for p in self.players.values()),
                round=self.round,
                max_rounds=self.max_rounds,
                price=self.price,
                start_price=self.start_price,
                price_history=tuple(self.price_history),
                sentiment=self.sentiment,
                scores=dict(self.scores),
                shares={
                    Role.RETAIL: self.ledger.retail_shares,
                    Role.HEDGE: self.ledger.hedge_shares,
                },
                submitted=tuple(r for r in (Role.RETAIL, Role.HEDGE)
                                if r in self.pending),
                round_history=tuple(self.round_history),
                optimal_counts=dict(self.optimal_counts),
                winner=self.winner,
                stats=self.stats,
            )
