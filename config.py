# config.py
from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw not in (None, "") else default


# ---------- Server ----------
HOST = os.getenv("HOST", "0.0.0.0")
PORT = _env_int("PORT", 3000)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# ---------- Game ----------
MAX_ROUNDS = _env_int("MAX_ROUNDS", 10)
START_PRICE = float(os.getenv("START_PRICE", "20.0"))
ROOM_CODE_LENGTH = _env_int("ROOM_CODE_LENGTH", 6)
CLAMP_SENTIMENT_WEIGHTS = _env_bool("CLAMP_SENTIMENT_WEIGHTS", True)
RNG_SEED = int(os.environ["RNG_SEED"]) if os.getenv("RNG_SEED") else None

# ---------- Round timer ----------
ROUND_SECONDS = _env_int("ROUND_SECONDS", 60)  # 0 disables auto-submit
DEFAULT_TIMEOUT_ACTION = os.getenv("DEFAULT_TIMEOUT_ACTION", "HOLD").upper()
