# domain/catalog.py
from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple, Type, Union


class Role(str, Enum):
    RETAIL = "RETAIL"
    HEDGE = "HEDGE"


class RetailAction(str, Enum):
    BUY = "BUY"
    HOLD = "HOLD"
    SELL = "SELL"


class HedgeAction(str, Enum):
    SHORT = "SHORT"
    COVER = "COVER"
    HOLD = "HOLD"


class Sentiment(str, Enum):
    BEARISH = "BEARISH"
    NEUTRAL = "NEUTRAL"
    BULLISH = "BULLISH"
    MANIC = "MANIC"


Action = Union[RetailAction, HedgeAction]

# Enumeration order is canonical: matrix layout, tie-breaks and the
# sentiment walk all iterate in this order.
RETAIL_ACTIONS: Tuple[RetailAction, ...] = tuple(RetailAction)
HEDGE_ACTIONS: Tuple[HedgeAction, ...] = tuple(HedgeAction)
SENTIMENTS: Tuple[Sentiment, ...] = tuple(Sentiment)

_RETAIL_IMPACT: Dict[RetailAction, int] = {
    RetailAction.BUY: 3,
    RetailAction.HOLD: 0,
    RetailAction.SELL: -2,
}
_HEDGE_IMPACT: Dict[HedgeAction, int] = {
    HedgeAction.SHORT: -2,
    HedgeAction.COVER: 3,
    HedgeAction.HOLD: 0,
}
_MULTIPLIER: Dict[Sentiment, float] = {
    Sentiment.BEARISH: 0.7,
    Sentiment.NEUTRAL: 1.0,
    Sentiment.BULLISH: 1.5,
    Sentiment.MANIC: 2.0,
}

_ACTIONS_BY_ROLE: Dict[Role, Type[Enum]] = {
    Role.RETAIL: RetailAction,
    Role.HEDGE: HedgeAction,
}


def retail_impact(action: RetailAction) -> int:
    return _RETAIL_IMPACT[action]


def hedge_impact(action: HedgeAction) -> int:
    return _HEDGE_IMPACT[action]


def multiplier(sentiment: Sentiment) -> float:
    return _MULTIPLIER[sentiment]


def actions_for(role: Role) -> Tuple[Action, ...]:
    """Legal actions for `role`, in canonical order."""
    return RETAIL_ACTIONS if role is Role.RETAIL else HEDGE_ACTIONS


def is_legal(role: Role, action: object) -> bool:
    return isinstance(action, _ACTIONS_BY_ROLE[role])


def parse_role(value: object) -> Role:
    """Role or wire string -> Role. Raises ValueError for anything else."""
    if isinstance(value, Role):
        return value
    return Role(str(getattr(value, "value", value)).upper())


def parse_action(role: Role, value: object) -> Action:
    """
    Wire string -> action enum for `role`.

    "HOLD" exists for both roles, so the role decides which enum it maps to.
    Raises ValueError when the string is not a legal action for the role.
    """
    if isinstance(value, Enum):
        if is_legal(role, value):
            return value
        value = value.value
    return _ACTIONS_BY_ROLE[role](str(value).upper())
