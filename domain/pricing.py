# domain/pricing.py
from __future__ import annotations

import random

from domain.catalog import (
    HedgeAction,
    RetailAction,
    Sentiment,
    hedge_impact,
    multiplier,
    retail_impact,
)

PRICE_FLOOR = 1.0


def round_price(x: float) -> float:
    return round(x, 2)


def net_impact(retail: RetailAction, hedge: HedgeAction,
               sentiment: Sentiment) -> float:
    """Deterministic part of the move: summed impacts scaled by mood."""
    return (retail_impact(retail) + hedge_impact(hedge)) * multiplier(sentiment)


def draw_noise(rng: random.Random) -> float:
    # uniform on [-1, 1)
    return rng.random() * 2 - 1


def calculate_new_price(
    old_price: float,
    retail: RetailAction,
    hedge: HedgeAction,
    sentiment: Sentiment,
    rng: random.Random,
) -> float:
    move = net_impact(retail, hedge, sentiment) + draw_noise(rng)
    return round_price(max(PRICE_FLOOR, old_price + move))
