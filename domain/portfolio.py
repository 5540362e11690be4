# domain/portfolio.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from domain.catalog import HedgeAction, RetailAction

OPEN_LOT = 100
CLOSE_LOT = 50


@dataclass
class PositionLedger:
    """
    Running share exposure per side.

    Retail is long the instrument, Hedge is short it, so a rising price pays
    Retail and costs Hedge. Opening (BUY / SHORT) adds a lot before the round
    is marked, so the new exposure rides this round's move. Closing (SELL /
    COVER) marks the full position first and only then trims it.
    """

    retail_shares: int = 0
    hedge_shares: int = 0

    def settle_retail(self, action: RetailAction, price_change: float) -> float:
        if action is RetailAction.BUY:
            self.retail_shares += OPEN_LOT
            return price_change * self.retail_shares
        if action is RetailAction.SELL:
            if self.retail_shares <= 0:
                return 0.0
            profit = price_change * self.retail_shares
            self.retail_shares = max(0, self.retail_shares - CLOSE_LOT)
            return profit
        return price_change * self.retail_shares

    def settle_hedge(self, action: HedgeAction, price_change: float) -> float:
        if action is HedgeAction.SHORT:
            self.hedge_shares += OPEN_LOT
            return -price_change * self.hedge_shares
        if action is HedgeAction.COVER:
            if self.hedge_shares <= 0:
                return 0.0
            profit = -price_change * self.hedge_shares
            self.hedge_shares = max(0, self.hedge_shares - CLOSE_LOT)
            return profit
        return -price_change * self.hedge_shares

    def settle(self, retail: RetailAction, hedge: HedgeAction,
               price_change: float) -> Tuple[float, float]:
        """Apply both actions and return (retail_profit, hedge_profit), 2dp."""
        retail_profit = self.settle_retail(retail, price_change)
        hedge_profit = self.settle_hedge(hedge, price_change)
        return round(retail_profit, 2), round(hedge_profit, 2)
