# domain/registry.py
from __future__ import annotations

import logging
import random
import string
import threading
from typing import Callable, Dict, Iterator, Optional, Tuple

from domain.errors import RoomNotFound
from domain.session import DEFAULT_MAX_ROUNDS, DEFAULT_START_PRICE, GameSession

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + "23456789"  # avoid 0/1 for readability
DEFAULT_CODE_LENGTH = 6


def gen_room_code(rng: random.Random, length: int = DEFAULT_CODE_LENGTH) -> str:
    """Generate a room code, e.g. 'AB3Z9Q'."""
    return "".join(rng.choices(CODE_ALPHABET, k=length))


class RoomRegistry:
    """
    Owns every live GameSession, keyed by room code.

    Callers hold on to codes, not sessions: once a room is removed, `get`
    raises RoomNotFound instead of handing back a stale session.
    """

    def __init__(
        self,
        *,
        max_rounds: int = DEFAULT_MAX_ROUNDS,
        start_price: float = DEFAULT_START_PRICE,
        code_length: int = DEFAULT_CODE_LENGTH,
        seed: Optional[int] = None,
        clamp_sentiment: bool = True,
        code_factory: Optional[Callable[[], str]] = None,
    ):
        self.max_rounds = max_rounds
        self.start_price = start_price
        self.code_length = code_length
        self.clamp_sentiment = clamp_sentiment
        self._rng = random.Random(seed)
        self._seeded = seed is not None
        self._code_factory = code_factory or (
            lambda: gen_room_code(self._rng, self.code_length))
        self._rooms: Dict[str, GameSession] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, code: str) -> bool:
        return self._normalize(code) in self._rooms

    def __iter__(self) -> Iterator[Tuple[str, GameSession]]:
        with self._lock:
            return iter(list(self._rooms.items()))

    @staticmethod
    def _normalize(code: str) -> str:
        return (code or "").strip().upper()

    def create(self) -> Tuple[str, GameSession]:
        with self._lock:
            code = self._code_factory()
            while code in self._rooms:
                code = self._code_factory()
            session = GameSession(
                code,
                max_rounds=self.max_rounds,
                start_price=self.start_price,
                # a seeded registry hands out reproducible per-room seeds
                seed=self._rng.randint(1, 10_000) if self._seeded else None,
                clamp_sentiment=self.clamp_sentiment,
            )
            self._rooms[code] = session
        logger.info("Room created: %s", code)
        return code, session

    def get(self, code: str) -> GameSession:
        session = self._rooms.get(self._normalize(code))
        if session is None:
            raise RoomNotFound(f"room {code!r} not found")
        return session

    def remove(self, code: str) -> bool:
        with self._lock:
            removed = self._rooms.pop(self._normalize(code), None) is not None
        if removed:
            logger.info("Room %s deleted (empty)", self._normalize(code))
        return removed

    def remove_player(self, code: str, player_id: str) -> bool:
        """
        Take a player out of a room and drop the room once nobody is left.

        Returns True if the room was deleted.
        """
        with self._lock:
            session = self._rooms.get(self._normalize(code))
            if session is None:
                raise RoomNotFound(f"room {code!r} not found")
            if not session.remove_player(player_id):
                return False
            del self._rooms[session.room_code]
        logger.info("Room %s deleted (empty)", session.room_code)
        return True
