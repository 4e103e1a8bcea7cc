"""Data model and pricing. Grading lives in ``cfbtrends.models.grading``."""

from cfbtrends.models.types import (
    Ensemble,
    GameResult,
    GameRow,
    GradedPick,
    MarketLine,
    SimulationPair,
    TrendMetrics,
    TrendScored,
    TrendSlice,
)
from cfbtrends.models.pricing import PricingModel, DEFAULT_PRICING, american_to_implied_prob

__all__ = [
    "Ensemble",
    "GameResult",
    "GameRow",
    "GradedPick",
    "MarketLine",
    "SimulationPair",
    "TrendMetrics",
    "TrendScored",
    "TrendSlice",
    "PricingModel",
    "DEFAULT_PRICING",
    "american_to_implied_prob",
]
