"""Grading engine: sim ensemble + market line (+ final score) -> picks.

Each market is graded independently. The ensemble's medians choose the
side, the share of simulations clearing the line is the pick's
confidence, and a final score (when present) settles the pick.
"""

from typing import List, Optional, Sequence, Tuple
import logging

import numpy as np

from cfbtrends.constants import (
    FAVORITE,
    LOSS,
    MONEYLINE,
    OVER,
    PUSH,
    PUSH_EPSILON,
    SPREAD,
    TOTAL,
    UNDER,
    UNDERDOG,
    WIN,
)
from cfbtrends.models.pricing import (
    DEFAULT_PRICING,
    PricingModel,
    american_to_implied_prob,
    stake_risk_for_odds,
    win_payout_for_odds,
)
from cfbtrends.models.types import Ensemble, GameRow, GradedPick, SimulationPair
from cfbtrends.normalization.ids import make_pick_key
from cfbtrends.normalization.orientation import reconcile_orientation
from cfbtrends.ops.metrics import MetricsRecorder, get_metrics_recorder

logger = logging.getLogger(__name__)


def _format_line(value: float) -> str:
    # -0.0 prints as "-0"
    value = value or 0.0
    if value > 0:
        return f"+{value:g}"
    return f"{value:g}"


def _bounded_probability(prob: float, n_sims: int) -> float:
    """Keep a sim frequency strictly inside (0, 1).

    A side that covers in every simulation (or none) gets a half-sample
    continuity correction; interior frequencies are returned unchanged.
    """
    floor = 0.5 / n_sims
    return float(min(1.0 - floor, max(floor, prob)))


def _split(pairs: Sequence[SimulationPair]) -> Tuple[np.ndarray, np.ndarray]:
    left = np.fromiter((pair.points_left for pair in pairs), dtype=float, count=len(pairs))
    right = np.fromiter((pair.points_right for pair in pairs), dtype=float, count=len(pairs))
    return left, right


def _base_fields(game: GameRow, market: str) -> dict:
    return {
        "market": market,
        "week": game.week,
        "week_num": game.week_num,
        "key": make_pick_key(game.team_left, game.team_right, market),
        "team_left": game.team_left,
        "team_right": game.team_right,
        "kickoff": game.kickoff,
        "conf_left": game.conf_left,
        "conf_right": game.conf_right,
    }


def _settle_vig_market(result: Optional[str], pricing: PricingModel) -> Tuple[float, float]:
    """Return (units, stake_risk) for a spread/total pick."""
    if result is None:
        return 0.0, pricing.stake_risk
    if result == PUSH:
        return 0.0, 0.0
    if result == WIN:
        return pricing.win_payout, pricing.stake_risk
    return -pricing.stake_risk, pricing.stake_risk


def grade_spread(
    left: np.ndarray,
    right: np.ndarray,
    game: GameRow,
    pricing: PricingModel = DEFAULT_PRICING,
) -> Optional[GradedPick]:
    spread = game.line.spread
    n_sims = len(left)
    if spread is None or n_sims == 0:
        return None

    p_left = float(np.mean(left + spread > right))
    diff = float(np.median(left)) + spread - float(np.median(right))
    if diff == 0:
        logger.debug("Spread push candidate for %s vs %s, no pick", game.team_left, game.team_right)
        return None

    pick_left = diff > 0
    confidence = _bounded_probability(p_left if pick_left else 1.0 - p_left, n_sims)
    if pick_left:
        pick_text = f"{game.team_left} {_format_line(spread)}"
    else:
        pick_text = f"{game.team_right} {_format_line(-spread)}"

    if spread < 0:
        favorite_side = "left"
    elif spread > 0:
        favorite_side = "right"
    else:
        favorite_side = None
    picked_side = "left" if pick_left else "right"

    result = None
    if game.result is not None:
        margin = game.result.final_left + spread - game.result.final_right
        if abs(margin) < PUSH_EPSILON:
            result = PUSH
        elif (margin > 0) == pick_left:
            result = WIN
        else:
            result = LOSS
    units, stake_risk = _settle_vig_market(result, pricing)

    return GradedPick(
        pick_side=picked_side,
        pick_text=pick_text,
        confidence=confidence,
        is_positive_ev=pricing.is_positive_ev(confidence),
        is_favorite_pick=favorite_side is not None and picked_side == favorite_side,
        is_underdog_pick=favorite_side is not None and picked_side != favorite_side,
        result=result,
        units=units,
        stake_risk=stake_risk,
        **_base_fields(game, SPREAD),
    )


def grade_total(
    left: np.ndarray,
    right: np.ndarray,
    game: GameRow,
    pricing: PricingModel = DEFAULT_PRICING,
) -> Optional[GradedPick]:
    total = game.line.total
    n_sims = len(left)
    if total is None or n_sims == 0:
        return None

    p_over = float(np.mean(left + right > total))
    predicted = float(np.median(left)) + float(np.median(right))
    if predicted == total:
        logger.debug("Total push candidate for %s vs %s, no pick", game.team_left, game.team_right)
        return None

    is_over = predicted > total
    confidence = _bounded_probability(p_over if is_over else 1.0 - p_over, n_sims)

    result = None
    if game.result is not None:
        actual = game.result.final_left + game.result.final_right
        if abs(actual - total) < PUSH_EPSILON:
            result = PUSH
        elif (actual > total) == is_over:
            result = WIN
        else:
            result = LOSS
    units, stake_risk = _settle_vig_market(result, pricing)

    return GradedPick(
        pick_side=OVER if is_over else UNDER,
        pick_text=f"{'Over' if is_over else 'Under'} {total:g}",
        confidence=confidence,
        is_positive_ev=pricing.is_positive_ev(confidence),
        is_over_pick=is_over,
        is_under_pick=not is_over,
        result=result,
        units=units,
        stake_risk=stake_risk,
        **_base_fields(game, TOTAL),
    )


def grade_moneyline(
    left: np.ndarray,
    right: np.ndarray,
    game: GameRow,
) -> Optional[GradedPick]:
    line = game.line
    n_sims = len(left)
    if not line.has_moneyline or n_sims == 0:
        return None

    p_left = float(np.mean(left > right))
    pick_left = p_left >= 0.5
    odds = line.ml_left if pick_left else line.ml_right
    team = game.team_left if pick_left else game.team_right
    confidence = _bounded_probability(p_left if pick_left else 1.0 - p_left, n_sims)
    implied = american_to_implied_prob(odds)
    is_favorite = odds < 0
    stake_risk = stake_risk_for_odds(odds)

    result = None
    units = 0.0
    if game.result is not None:
        if pick_left:
            picked_won = game.result.final_left > game.result.final_right
        else:
            picked_won = game.result.final_right > game.result.final_left
        result = WIN if picked_won else LOSS
        units = win_payout_for_odds(odds) if picked_won else -stake_risk

    return GradedPick(
        pick_side="left" if pick_left else "right",
        pick_text=f"{team} ML {_format_line(odds)}",
        confidence=confidence,
        is_positive_ev=confidence > implied,
        is_favorite_pick=is_favorite,
        is_underdog_pick=not is_favorite,
        result=result,
        units=units,
        stake_risk=stake_risk,
        **_base_fields(game, MONEYLINE),
    )


def grade_game(
    ensemble: Optional[Ensemble],
    game: GameRow,
    pricing: PricingModel = DEFAULT_PRICING,
    recorder: Optional[MetricsRecorder] = None,
) -> List[GradedPick]:
    """Grade every market posted for one game.

    Returns zero to three picks. A missing or empty ensemble yields no
    picks; a market without a line is skipped.
    """
    recorder = recorder or get_metrics_recorder()
    if ensemble is None:
        recorder.increment("grading.no_ensemble")
        logger.debug("No ensemble for %s vs %s", game.team_left, game.team_right)
        return []
    if not ensemble.pairs:
        recorder.increment("grading.empty_ensemble")
        logger.debug("Empty ensemble for %s vs %s", game.team_left, game.team_right)
        return []

    pairs = reconcile_orientation(ensemble, game.team_left, game.team_right)
    left, right = _split(pairs)

    picks: List[GradedPick] = []
    for market, pick in (
        (SPREAD, grade_spread(left, right, game, pricing)),
        (TOTAL, grade_total(left, right, game, pricing)),
        (MONEYLINE, grade_moneyline(left, right, game)),
    ):
        if pick is None:
            recorder.increment("grading.skipped_market")
            continue
        recorder.increment("grading.pending" if pick.is_pending else "grading.graded")
        picks.append(pick)
    return picks


def pick_type_of(pick: GradedPick) -> str:
    """Return the pick-type label written to pick reports.

    Any side pick that is not the favorite is labelled underdog, a
    pick'em spread included. Slice matching is stricter and uses the
    pick's favorite/underdog flags, so a pick'em matches neither.
    """
    if pick.market == TOTAL:
        return OVER if pick.is_over_pick else UNDER
    return FAVORITE if pick.is_favorite_pick else UNDERDOG
