"""Trend slice enumeration, statistics and ranking."""

from cfbtrends.trends.slices import build_candidate_slices, parse_band, slice_label
from cfbtrends.trends.metrics import (
    compute_trend_metrics,
    matches_for_week,
    rows_for_slice,
    slice_metrics,
    summarize_results,
)
from cfbtrends.trends.ranking import RankingSettings, rank_trends, trend_sections

__all__ = [
    "build_candidate_slices",
    "parse_band",
    "slice_label",
    "compute_trend_metrics",
    "matches_for_week",
    "rows_for_slice",
    "slice_metrics",
    "summarize_results",
    "RankingSettings",
    "rank_trends",
    "trend_sections",
]
