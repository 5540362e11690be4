# domain/sentiment.py
from __future__ import annotations

import random
from typing import Dict, Mapping

from domain.catalog import HedgeAction, RetailAction, Sentiment, SENTIMENTS

# rows are "from", columns are "to"; every row sums to 1.0
BASE_TRANSITIONS: Mapping[Sentiment, Mapping[Sentiment, float]] = {
    Sentiment.BEARISH: {
        Sentiment.BEARISH: 0.50,
        Sentiment.NEUTRAL: 0.30,
        Sentiment.BULLISH: 0.15,
        Sentiment.MANIC: 0.05,
    },
    Sentiment.NEUTRAL: {
        Sentiment.BEARISH: 0.20,
        Sentiment.NEUTRAL: 0.40,
        Sentiment.BULLISH: 0.30,
        Sentiment.MANIC: 0.10,
    },
    Sentiment.BULLISH: {
        Sentiment.BEARISH: 0.10,
        Sentiment.NEUTRAL: 0.20,
        Sentiment.BULLISH: 0.50,
        Sentiment.MANIC: 0.20,
    },
    Sentiment.MANIC: {
        Sentiment.BEARISH: 0.05,
        Sentiment.NEUTRAL: 0.15,
        Sentiment.BULLISH: 0.30,
        Sentiment.MANIC: 0.50,
    },
}

# a coordinated push in one direction tilts the mood that way
_RALLY_SHIFT = {
    Sentiment.BULLISH: 0.20,
    Sentiment.MANIC: 0.10,
    Sentiment.BEARISH: -0.20,
}
_SELLOFF_SHIFT = {
    Sentiment.BEARISH: 0.20,
    Sentiment.BULLISH: -0.10,
    Sentiment.MANIC: -0.10,
}


def adjusted_weights(
    current: Sentiment,
    retail: RetailAction,
    hedge: HedgeAction,
    clamp_negative: bool = True,
) -> Dict[Sentiment, float]:
    """
    Transition weights out of `current` after the action-pair shift,
    normalized to sum to 1.

    With clamp_negative=False a shift can leave a weight below zero
    (e.g. MANIC -> BEARISH is 0.05 before a -0.20 rally shift) and it is
    carried into normalization as-is.
    """
    weights = dict(BASE_TRANSITIONS[current])

    if retail is RetailAction.BUY and hedge is HedgeAction.COVER:
        shift = _RALLY_SHIFT
    elif retail is RetailAction.SELL and hedge is HedgeAction.SHORT:
        shift = _SELLOFF_SHIFT
    else:
        shift = {}

    for state, delta in shift.items():
        weights[state] += delta

    if clamp_negative:
        weights = {s: max(0.0, w) for s, w in weights.items()}

    total = sum(weights.values())
    return {s: weights[s] / total for s in SENTIMENTS}


def next_sentiment(
    current: Sentiment,
    retail: RetailAction,
    hedge: HedgeAction,
    rng: random.Random,
    clamp_negative: bool = True,
) -> Sentiment:
    weights = adjusted_weights(current, retail, hedge, clamp_negative)
    draw = rng.random()
    cumulative = 0.0
    for state in SENTIMENTS:
        weight = weights[state]
        # a clamped-out state is unreachable, even on a draw of exactly 0
        if clamp_negative and weight <= 0.0:
            continue
        cumulative += weight
        if cumulative >= draw:
            return state
    # only reachable through float rounding at the top end
    return Sentiment.NEUTRAL
