"""Composite trend scoring, guardrails and ranking."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence
import logging
import math

from cfbtrends.constants import (
    BREAK_EVEN_SPREAD_TOTAL,
    CONFERENCE_SCOPE,
    CONSISTENCY_BOOST_WEIGHT,
    DEFAULT_HALF_LIFE_WEEKS,
    DEFAULT_MIN_BETS,
    DEFAULT_MIN_WEEKS,
    DEFAULT_POOL_SIZE,
    DEFAULT_SIZE_SHRINK_K,
    DEFAULT_TOP_N,
    DRAWDOWN_PENALTY_WEIGHT,
    MARKET_VIEWS,
    MONEYLINE,
    NONCONFERENCE_SCOPE,
    SCORE_WEIGHTS,
    normalize_market,
)
from cfbtrends.exceptions import ConfigError
from cfbtrends.models.types import GradedPick, TrendMetrics, TrendScored, TrendSlice
from cfbtrends.trends.metrics import compute_trend_metrics, graded_only, rows_for_slice
from cfbtrends.trends.slices import build_candidate_slices

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankingSettings:
    min_bets: int = DEFAULT_MIN_BETS
    min_weeks: int = DEFAULT_MIN_WEEKS
    size_shrink_k: float = DEFAULT_SIZE_SHRINK_K
    half_life_weeks: float = DEFAULT_HALF_LIFE_WEEKS
    pool_size: int = DEFAULT_POOL_SIZE
    break_even: float = BREAK_EVEN_SPREAD_TOTAL
    weights: Dict[str, float] = field(default_factory=lambda: dict(SCORE_WEIGHTS))


DEFAULT_SETTINGS = RankingSettings()


@dataclass
class _Candidate:
    slice: TrendSlice
    metrics: TrendMetrics
    overall: float
    recent: float
    stability: float


def zscores(values: Sequence[float]) -> List[float]:
    """Population mean over sample stdev; all zeros when the spread is zero."""
    finite = [v for v in values if math.isfinite(v)]
    mean = sum(finite) / (len(finite) or 1)
    sd = math.sqrt(sum((v - mean) ** 2 for v in finite) / max(1, len(finite) - 1))
    return [(v - mean) / sd if sd > 0 else 0.0 for v in values]


def passes_guardrails(metrics: TrendMetrics, settings: RankingSettings = DEFAULT_SETTINGS) -> bool:
    return metrics.n_bets >= settings.min_bets and metrics.n_weeks >= settings.min_weeks


def resolve_market_view(market_view: Optional[str]) -> str:
    view = normalize_market(market_view or "all")
    if view not in MARKET_VIEWS:
        raise ConfigError("market_view", f"unknown market view {market_view!r}")
    return view


def composite_score(
    trend_slice: TrendSlice,
    metrics: TrendMetrics,
    z_overall: float,
    z_recent: float,
    z_stability: float,
    settings: RankingSettings = DEFAULT_SETTINGS,
) -> float:
    weights = settings.weights
    if trend_slice.market == MONEYLINE:
        ci_edge = 0.0
    else:
        ci_edge = max(0.0, metrics.wilson_lower_vs_breakeven)
    size_mult = math.sqrt(metrics.n_bets / (metrics.n_bets + settings.size_shrink_k))
    consist_boost = CONSISTENCY_BOOST_WEIGHT * (metrics.consistency - 0.5)
    dd_penalty = DRAWDOWN_PENALTY_WEIGHT * metrics.max_drawdown
    core = (
        weights["overall"] * z_overall
        + weights["recent"] * z_recent
        + weights["stability"] * z_stability
        + weights["ci_edge"] * ci_edge
    )
    return core * size_mult + consist_boost - dd_penalty


def conferences_from_picks(picks: Iterable[GradedPick]) -> List[str]:
    """Distinct conference names in first-seen order (case-insensitive)."""
    seen = set()
    out: List[str] = []
    for pick in picks:
        for conf in (pick.conf_left, pick.conf_right):
            if not conf:
                continue
            key = conf.strip().lower()
            if key and key not in seen:
                seen.add(key)
                out.append(conf.strip())
    return out


def rank_trends(
    picks: Iterable[GradedPick],
    market_view: str = "all",
    conferences: Optional[Sequence[str]] = None,
    settings: RankingSettings = DEFAULT_SETTINGS,
) -> List[TrendScored]:
    """Score every candidate slice over graded picks and rank them.

    The market view narrows the candidate population before
    normalization, so scores are only comparable within one view.
    Slices failing the sample guardrails are dropped before z-scoring.
    """
    view = resolve_market_view(market_view)
    graded = graded_only(picks)
    if not graded:
        return []
    if conferences is None:
        conferences = conferences_from_picks(graded)

    slices = build_candidate_slices(conferences)
    if view != "all":
        slices = [s for s in slices if s.market == view]

    kept: List[_Candidate] = []
    for trend_slice in slices:
        metrics = compute_trend_metrics(
            rows_for_slice(graded, trend_slice),
            break_even=settings.break_even,
            half_life_weeks=settings.half_life_weeks,
        )
        if not passes_guardrails(metrics, settings):
            continue
        kept.append(_Candidate(
            slice=trend_slice,
            metrics=metrics,
            overall=metrics.profit_units / metrics.n_bets if metrics.n_bets else 0.0,
            recent=metrics.ewma_profit,
            stability=metrics.sharpeish,
        ))
    logger.debug("%d of %d slices passed guardrails (view=%s)", len(kept), len(slices), view)

    z_overall = zscores([c.overall for c in kept])
    z_recent = zscores([c.recent for c in kept])
    z_stability = zscores([c.stability for c in kept])

    scored = [
        TrendScored(
            slice=c.slice,
            metrics=c.metrics,
            score=composite_score(c.slice, c.metrics, z_overall[i], z_recent[i], z_stability[i], settings),
        )
        for i, c in enumerate(kept)
    ]
    scored.sort(key=lambda t: t.score, reverse=True)

    seen = set()
    unique: List[TrendScored] = []
    for trend in scored:
        identity = trend.slice.identity()
        if identity in seen:
            continue
        seen.add(identity)
        unique.append(trend)
        if len(unique) >= settings.pool_size:
            break
    return unique


def trend_sections(
    ranked: Sequence[TrendScored],
    top_n: int = DEFAULT_TOP_N,
    conference_focus: str = "all",
) -> Dict[str, List[TrendScored]]:
    """Split an already ranked pool into the presentation sections."""
    conference = [t for t in ranked if t.slice.game_scope == CONFERENCE_SCOPE]
    if conference_focus and conference_focus.lower() != "all":
        focus = conference_focus.strip().lower()
        conference = [t for t in conference if t.slice.conference.lower() == focus]
    nonconference = [t for t in ranked if t.slice.game_scope == NONCONFERENCE_SCOPE]
    return {
        "overall": list(ranked[:top_n]),
        "conference": conference[:top_n],
        "nonconference": nonconference[:top_n],
    }
