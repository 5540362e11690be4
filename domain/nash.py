# domain/nash.py
"""
Game-theoretic read of a payoff matrix.

Everything here is a pure function of a PayoffMatrix: pure-strategy Nash
equilibria, a display-only mixed-strategy heuristic, and whether the moves
actually played were best responses.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from domain.catalog import HEDGE_ACTIONS, RETAIL_ACTIONS, HedgeAction, RetailAction
from domain.payoff import PayoffMatrix


@dataclass(frozen=True)
class Equilibrium:
    retail_action: RetailAction
    hedge_action: HedgeAction


@dataclass(frozen=True)
class MixedStrategy:
    # action -> percentage, one decimal
    retail: Dict[RetailAction, float]
    hedge: Dict[HedgeAction, float]


@dataclass(frozen=True)
class OptimalPlay:
    retail_optimal: bool
    hedge_optimal: bool
    best_retail_action: RetailAction
    best_hedge_action: HedgeAction
    retail_lost_payoff: int
    hedge_lost_payoff: int


def find_pure_equilibria(matrix: PayoffMatrix) -> List[Equilibrium]:
    """All cells where neither side gains by a unilateral strict deviation."""
    found = []
    for r, h in matrix:
        retail_here = matrix.retail(r, h)
        if any(matrix.retail(alt, h) > retail_here for alt in RETAIL_ACTIONS):
            continue
        hedge_here = matrix.hedge(r, h)
        if any(matrix.hedge(r, alt) > hedge_here for alt in HEDGE_ACTIONS):
            continue
        found.append(Equilibrium(r, h))
    return found


def _normalize(sums: Dict, order: Sequence) -> Dict:
    clamped = {a: max(0, sums[a]) for a in order}
    total = sum(clamped.values()) or 1
    return {a: round(clamped[a] / total * 100, 1) for a in order}


def mixed_strategy(matrix: PayoffMatrix) -> MixedStrategy:
    """
    Weight each action by its total payoff against every opposing action.

    Not an equilibrium computation. Negative totals count as zero and an
    all-zero row of totals yields all-zero percentages.
    """
    retail_sums = {
        r: sum(matrix.retail(r, h) for h in HEDGE_ACTIONS) for r in RETAIL_ACTIONS
    }
    hedge_sums = {
        h: sum(matrix.hedge(r, h) for r in RETAIL_ACTIONS) for h in HEDGE_ACTIONS
    }
    return MixedStrategy(
        retail=_normalize(retail_sums, RETAIL_ACTIONS),
        hedge=_normalize(hedge_sums, HEDGE_ACTIONS),
    )


def _best_response(payoffs: Sequence[Tuple[object, int]], played: object,
                   actual: int) -> Tuple[bool, object, int]:
    best_action, best = played, actual
    for action, value in payoffs:
        if value > best:
            best_action, best = action, value
    if best_action is played:
        return True, played, 0
    return False, best_action, best - actual


def check_optimal_play(retail: RetailAction, hedge: HedgeAction,
                       matrix: PayoffMatrix) -> OptimalPlay:
    retail_ok, best_r, retail_lost = _best_response(
        [(r, matrix.retail(r, hedge)) for r in RETAIL_ACTIONS],
        retail,
        matrix.retail(retail, hedge),
    )
    hedge_ok, best_h, hedge_lost = _best_response(
        [(h, matrix.hedge(retail, h)) for h in HEDGE_ACTIONS],
        hedge,
        matrix.hedge(retail, hedge),
    )
    return OptimalPlay(
        retail_optimal=retail_ok,
        hedge_optimal=hedge_ok,
        best_retail_action=best_r,
        best_hedge_action=best_h,
        retail_lost_payoff=retail_lost,
        hedge_lost_payoff=hedge_lost,
    )
