# realtime/payloads.py
from __future__ import annotations

from typing import Optional

from domain.catalog import Role
from domain.models import GameState, GameStats, RoundResult


def round_result_payload(r: RoundResult) -> dict:
    strat = r.optimal_strategy
    judged = r.optimal_play
    return {
        "round": r.round,
        "retailAction": r.retail_action.value,
        "hedgeAction": r.hedge_action.value,
        "oldPrice": r.old_price,
        "newPrice": r.new_price,
        "priceChange": r.price_change,
        "retailProfit": r.retail_profit,
        "hedgeProfit": r.hedge_profit,
        "sentiment": r.sentiment.value,
        "payoffMatrix": r.payoff_matrix.as_dict(),
        "equilibria": [{
            "retailAction": eq.retail_action.value,
            "hedgeAction": eq.hedge_action.value
        } for eq in r.equilibria],
        "optimalStrategy": {
            "retailStrategy": {a.value: p for a, p in strat.retail.items()},
            "hedgeStrategy": {a.value: p for a, p in strat.hedge.items()},
        },
        "optimalPlay": {
            "retailOptimal": judged.retail_optimal,
            "hedgeOptimal": judged.hedge_optimal,
            "bestRetailAction": judged.best_retail_action.value,
            "bestHedgeAction": judged.best_hedge_action.value,
            "retailLostPayoff": judged.retail_lost_payoff,
            "hedgeLostPayoff": judged.hedge_lost_payoff,
        },
        "achievement": ({
            "title": r.achievement.title,
            "message": r.achievement.message
        } if r.achievement else None),
    }


def game_stats_payload(stats: Optional[GameStats]) -> Optional[dict]:
    if stats is None:
        return None
    return {
        "winner": stats.winner.value,
        "retailScore": stats.retail_score,
        "hedgeScore": stats.hedge_score,
        "retailOptimalPercentage": stats.retail_optimal_percentage,
        "hedgeOptimalPercentage": stats.hedge_optimal_percentage,
        "finalPrice": stats.final_price,
        "priceChange": stats.price_change_percentage,
        "roundHistory": [round_result_payload(r) for r in stats.round_history],
    }


def game_state_payload(st: GameState) -> dict:
    return {
        "roomCode": st.room_code,
        "phase": st.phase.value,
        "players": {
            p.player_id: {
                "id": p.player_id,
                "name": p.name,
                "role": p.role.value,
                "ready": p.ready
            } for p in st.players
        },
        "round": st.round,
        "maxRounds": st.max_rounds,
        "stockPrice": st.price,
        "startPrice": st.start_price,
        "priceHistory": [{"round": rnd, "price": px} for rnd, px in st.price_history],
        "sentiment": st.sentiment.value,
        "retailScore": st.scores[Role.RETAIL],
        "hedgeScore": st.scores[Role.HEDGE],
        "retailShares": st.shares[Role.RETAIL],
        "hedgeShares": st.shares[Role.HEDGE],
        "submitted": [r.value for r in st.submitted],
        "roundHistory": [round_result_payload(r) for r in st.round_history],
        "gameStarted": st.game_started,
        "gameEnded": st.game_ended,
        "retailOptimalCount": st.optimal_counts[Role.RETAIL],
        "hedgeOptimalCount": st.optimal_counts[Role.HEDGE],
        "winner": st.winner.value if st.winner else None,
    }
