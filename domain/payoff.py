# domain/payoff.py
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterator, NamedTuple, Tuple

from domain.catalog import (
    HEDGE_ACTIONS,
    RETAIL_ACTIONS,
    HedgeAction,
    RetailAction,
    Sentiment,
)
from domain.pricing import PRICE_FLOOR, net_impact

# fixed lot sizes used for the projection; live positions are ignored
_RETAIL_SIZE = {
    RetailAction.BUY: 100,
    RetailAction.HOLD: 50,
    RetailAction.SELL: -50,
}
_HEDGE_SIZE = {
    HedgeAction.SHORT: -100,
    HedgeAction.COVER: 50,
    HedgeAction.HOLD: -50,
}


class Payoff(NamedTuple):
    retail: int
    hedge: int


def _to_int(x: float) -> int:
    # half away from zero, matching how the figures are displayed
    return int(Decimal(repr(x)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PayoffMatrix:
    """
    Hypothetical payoffs for all nine action pairs at one price/sentiment.

    A projection for analysis only. It never stands in for ledger profit.
    """

    def __init__(self, cells: Dict[Tuple[RetailAction, HedgeAction], Payoff]):
        if len(cells) != len(RETAIL_ACTIONS) * len(HEDGE_ACTIONS):
            raise ValueError("payoff matrix needs one cell per action pair")
        self._cells = dict(cells)

    def __getitem__(self, key: Tuple[RetailAction, HedgeAction]) -> Payoff:
        return self._cells[key]

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Tuple[RetailAction, HedgeAction]]:
        for r in RETAIL_ACTIONS:
            for h in HEDGE_ACTIONS:
                yield (r, h)

    def retail(self, r: RetailAction, h: HedgeAction) -> int:
        return self._cells[(r, h)].retail

    def hedge(self, r: RetailAction, h: HedgeAction) -> int:
        return self._cells[(r, h)].hedge

    def as_dict(self) -> Dict[str, Dict[str, Dict[str, int]]]:
        return {
            r.value: {
                h.value: {"retail": self.retail(r, h), "hedge": self.hedge(r, h)}
                for h in HEDGE_ACTIONS
            }
            for r in RETAIL_ACTIONS
        }


def build_payoff_matrix(price: float, sentiment: Sentiment) -> PayoffMatrix:
    cells = {}
    for r in RETAIL_ACTIONS:
        for h in HEDGE_ACTIONS:
            projected = max(PRICE_FLOOR, price + net_impact(r, h, sentiment))
            delta = projected - price
            cells[(r, h)] = Payoff(
                retail=_to_int(delta * _RETAIL_SIZE[r]),
                hedge=_to_int(delta * _HEDGE_SIZE[h]),
            )
    return PayoffMatrix(cells)
