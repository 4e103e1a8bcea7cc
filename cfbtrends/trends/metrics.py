"""Per-slice matching and statistics over graded picks."""

from collections import OrderedDict
from typing import Iterable, List, Optional, Sequence, Tuple
import math

import numpy as np

from cfbtrends.constants import (
    BREAK_EVEN_SPREAD_TOTAL,
    CONFERENCE_SCOPE,
    DEFAULT_HALF_LIFE_WEEKS,
    FAVORITE,
    LOSS,
    MARKET_VIEWS,
    MONEYLINE,
    OVER,
    RESULT_PICK_TYPES,
    SPREAD,
    TOTAL,
    UNDER,
    UNDERDOG,
    WILSON_CONFIDENCE_LEVEL,
    WIN,
    normalize_market,
)
from cfbtrends.exceptions import ConfigError
from cfbtrends.models.types import GradedPick, ResultsSummary, TrendMetrics, TrendSlice, WeekRecord

# Defer scipy import for faster module load
_stats = None


def _get_stats():
    """Lazy import of scipy.stats."""
    global _stats
    if _stats is None:
        from scipy import stats
        _stats = stats
    return _stats


# =============================================================================
# MATCHING
# =============================================================================

def _matches_pick_type(pick: GradedPick, pick_type: str) -> bool:
    if pick_type == "all":
        return True
    if pick_type == OVER:
        return pick.market == TOTAL and pick.is_over_pick
    if pick_type == UNDER:
        return pick.market == TOTAL and pick.is_under_pick
    if pick_type == FAVORITE:
        return pick.market in (SPREAD, MONEYLINE) and pick.is_favorite_pick
    if pick_type == UNDERDOG:
        return pick.market in (SPREAD, MONEYLINE) and pick.is_underdog_pick
    return False


def _matches_scope(pick: GradedPick, trend_slice: TrendSlice) -> bool:
    conf_left = (pick.conf_left or "").strip().lower()
    conf_right = (pick.conf_right or "").strip().lower()
    if not conf_left or not conf_right:
        return False
    target = trend_slice.conference.strip().lower()
    same_conference = conf_left == conf_right
    if trend_slice.game_scope == CONFERENCE_SCOPE:
        return same_conference and conf_left == target
    return not same_conference and (conf_left == target or conf_right == target)


def pick_matches_slice(pick: GradedPick, trend_slice: TrendSlice) -> bool:
    if not pick.is_positive_ev:
        return False
    if trend_slice.market != "all" and pick.market != trend_slice.market:
        return False
    low, high = trend_slice.confidence_band
    pct = pick.confidence * 100
    if pct < low or pct >= high:
        return False
    if not _matches_pick_type(pick, trend_slice.pick_type):
        return False
    return _matches_scope(pick, trend_slice)


def rows_for_slice(picks: Iterable[GradedPick], trend_slice: TrendSlice) -> List[GradedPick]:
    """Picks (graded or pending) that fall inside a trend slice."""
    return [pick for pick in picks if pick_matches_slice(pick, trend_slice)]


def matches_for_week(
    picks: Iterable[GradedPick],
    trend_slice: TrendSlice,
    week_num: int,
) -> List[GradedPick]:
    return [pick for pick in rows_for_slice(picks, trend_slice) if pick.week_num == week_num]


# =============================================================================
# STATISTICS
# =============================================================================

def chronological(rows: Iterable[GradedPick]) -> List[GradedPick]:
    """Sort by kickoff (unknown last), then week number, then pick key."""
    return sorted(rows, key=lambda pick: (pick.kickoff_ts, pick.week_num, pick.key))


def weekly_profit(rows: Iterable[GradedPick]) -> List[Tuple[int, float]]:
    by_week: "OrderedDict[int, float]" = OrderedDict()
    for pick in sorted(rows, key=lambda p: p.week_num):
        by_week[pick.week_num] = by_week.get(pick.week_num, 0.0) + pick.units
    return list(by_week.items())


def ewma_weekly_profit(weekly: Sequence[Tuple[int, float]], half_life_weeks: float = DEFAULT_HALF_LIFE_WEEKS) -> float:
    """Recency-weighted average of weekly profit, oldest week first."""
    if not weekly:
        return 0.0
    decay = math.pow(0.5, 1.0 / half_life_weeks)
    ewma = 0.0
    for _, profit in sorted(weekly, key=lambda item: item[0]):
        ewma = decay * ewma + (1.0 - decay) * profit
    return ewma


def max_drawdown(series: Iterable[float]) -> float:
    peak = -math.inf
    worst = 0.0
    for value in series:
        if value > peak:
            peak = value
        drawdown = peak - value
        if drawdown > worst:
            worst = drawdown
    return worst


def wilson_lower_bound(successes: int, trials: int, confidence_level: float = WILSON_CONFIDENCE_LEVEL) -> float:
    if trials <= 0:
        return 0.0
    z = float(_get_stats().norm.ppf((1 + confidence_level) / 2))
    phat = successes / trials
    denom = 1 + z * z / trials
    centre = phat + z * z / (2 * trials)
    margin = z * math.sqrt(phat * (1 - phat) / trials + z * z / (4 * trials * trials))
    return (centre - margin) / denom


def sharpeish(units: Sequence[float]) -> float:
    """Mean units per bet over sample stdev, scaled by sqrt(n)."""
    if len(units) < 2:
        return 0.0
    values = np.asarray(units, dtype=float)
    sd = float(np.std(values, ddof=1))
    if sd <= 0:
        return 0.0
    return float(np.mean(values)) / sd * math.sqrt(len(values))


def _win_loss(rows: Iterable[GradedPick]) -> Tuple[int, int]:
    wins = losses = 0
    for pick in rows:
        if pick.result == WIN:
            wins += 1
        elif pick.result == LOSS:
            losses += 1
    return wins, losses


def compute_trend_metrics(
    rows: Sequence[GradedPick],
    break_even: float = BREAK_EVEN_SPREAD_TOTAL,
    half_life_weeks: float = DEFAULT_HALF_LIFE_WEEKS,
) -> TrendMetrics:
    """Statistics for the graded picks of one slice.

    Pending picks must be filtered out by the caller; they carry no units.
    """
    n_bets = len(rows)
    profit_units = sum(pick.units for pick in rows)
    risk_sum = sum(max(0.0, pick.stake_risk) for pick in rows)
    ror = profit_units / risk_sum if risk_sum > 0 else 0.0

    wins, losses = _win_loss(rows)
    win_pct = wins / (wins + losses) if wins + losses > 0 else 0.5

    weekly = weekly_profit(rows)
    if weekly:
        consistency = sum(1 for _, profit in weekly if profit >= 0) / len(weekly)
    else:
        consistency = 0.5

    timeline: List[Tuple[int, float]] = []
    cumulative = 0.0
    for idx, pick in enumerate(chronological(rows), start=1):
        cumulative += pick.units
        timeline.append((idx, cumulative))

    wilson_edge = 0.0
    st_wins, st_losses = _win_loss(pick for pick in rows if pick.market in (SPREAD, TOTAL))
    if st_wins + st_losses > 0:
        wilson_edge = wilson_lower_bound(st_wins, st_wins + st_losses) - break_even

    return TrendMetrics(
        n_bets=n_bets,
        n_weeks=len(weekly),
        profit_units=profit_units,
        risk_sum=risk_sum,
        ror=ror,
        win_pct=win_pct,
        consistency=consistency,
        max_drawdown=max_drawdown(cum for _, cum in timeline),
        ewma_profit=ewma_weekly_profit(weekly, half_life_weeks),
        sharpeish=sharpeish([pick.units for pick in rows]),
        wilson_lower_vs_breakeven=wilson_edge,
        timeline=timeline,
    )


def graded_only(picks: Iterable[GradedPick]) -> List[GradedPick]:
    return [pick for pick in picks if pick.is_graded]


def slice_metrics(
    picks: Iterable[GradedPick],
    trend_slice: TrendSlice,
    break_even: Optional[float] = None,
    half_life_weeks: float = DEFAULT_HALF_LIFE_WEEKS,
) -> TrendMetrics:
    rows = rows_for_slice(graded_only(picks), trend_slice)
    return compute_trend_metrics(
        rows,
        break_even=BREAK_EVEN_SPREAD_TOTAL if break_even is None else break_even,
        half_life_weeks=half_life_weeks,
    )


# =============================================================================
# RESULTS SUMMARY
# =============================================================================

def _results_order(pick: GradedPick) -> Tuple:
    return (pick.week_num, pick.kickoff_ts, pick.key)


def filter_results(
    picks: Iterable[GradedPick],
    market: str = "all",
    pick_type: str = "all",
    positive_ev_only: bool = False,
    conf_min: float = 0.0,
    conf_max: float = 100.0,
) -> List[GradedPick]:
    """Graded picks inside a market / pick-type / EV / confidence filter.

    The confidence window is in percent, inclusive at both ends, clamped
    to [0, 100]; a max below the min collapses to the min.
    """
    view = normalize_market(market or "all")
    if view not in MARKET_VIEWS:
        raise ConfigError("market", f"unknown market {market!r}")
    pick_type = (pick_type or "all").strip().lower()
    if pick_type not in RESULT_PICK_TYPES:
        raise ConfigError("pick_type", f"expected one of {', '.join(RESULT_PICK_TYPES)}, got {pick_type!r}")

    low = max(0.0, min(100.0, conf_min))
    high = max(low, min(100.0, conf_max))
    rows = []
    for pick in graded_only(picks):
        if view != "all" and pick.market != view:
            continue
        pct = pick.confidence * 100
        if pct < low or pct > high:
            continue
        if positive_ev_only and not pick.is_positive_ev:
            continue
        if not _matches_pick_type(pick, pick_type):
            continue
        rows.append(pick)
    return rows


def summarize_results(
    picks: Iterable[GradedPick],
    market: str = "all",
    pick_type: str = "all",
    positive_ev_only: bool = False,
    conf_min: float = 0.0,
    conf_max: float = 100.0,
) -> ResultsSummary:
    """W-L-P record, profit, return on risk and weekly splits.

    Win rate excludes pushes and is 0 when nothing was won or lost.
    """
    rows = sorted(
        filter_results(picks, market, pick_type, positive_ev_only, conf_min, conf_max),
        key=_results_order,
    )
    wins, losses = _win_loss(rows)
    pushes = sum(1 for pick in rows if pick.is_push)
    profit_units = sum(pick.units for pick in rows)
    risk_sum = sum(max(0.0, pick.stake_risk) for pick in rows)

    weeks: "OrderedDict[int, WeekRecord]" = OrderedDict()
    for pick in rows:
        record = weeks.get(pick.week_num)
        if record is None:
            record = weeks[pick.week_num] = WeekRecord(week=pick.week, week_num=pick.week_num)
        if pick.result == WIN:
            record.wins += 1
        elif pick.result == LOSS:
            record.losses += 1
        else:
            record.pushes += 1
    for week_num, units in weekly_profit(rows):
        weeks[week_num].units = units

    timeline: List[Tuple[int, float]] = []
    cumulative = 0.0
    for idx, pick in enumerate(rows, start=1):
        cumulative += pick.units
        timeline.append((idx, cumulative))

    return ResultsSummary(
        n_picks=len(rows),
        wins=wins,
        losses=losses,
        pushes=pushes,
        profit_units=profit_units,
        risk_sum=risk_sum,
        ror=profit_units / risk_sum if risk_sum > 0 else 0.0,
        win_pct=wins / (wins + losses) if wins + losses > 0 else 0.0,
        by_week=list(weeks.values()),
        timeline=timeline,
    )
