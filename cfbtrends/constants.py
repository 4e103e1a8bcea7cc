"""
Constants for cfbtrends.

Provides market and pick-type vocabularies, the confidence band grid,
default pricing assumptions, and the trend score weights.
"""

from typing import Dict, List, Tuple


# =============================================================================
# MARKETS
# =============================================================================

SPREAD = "spread"
TOTAL = "total"
MONEYLINE = "moneyline"

MARKETS: List[str] = [SPREAD, TOTAL, MONEYLINE]
MARKET_VIEWS: List[str] = ["all"] + MARKETS

# Spellings accepted at the CLI / file boundary
MARKET_ALIASES: Dict[str, str] = {
    "spread": SPREAD,
    "spreads": SPREAD,
    "ats": SPREAD,
    "total": TOTAL,
    "totals": TOTAL,
    "ou": TOTAL,
    "o/u": TOTAL,
    "moneyline": MONEYLINE,
    "ml": MONEYLINE,
    "all": "all",
}


def normalize_market(value: str) -> str:
    """Map a user-supplied market name to its canonical form ("" if unknown)."""
    return MARKET_ALIASES.get((value or "").strip().lower(), "")


# =============================================================================
# PICK TYPES / SCOPES
# =============================================================================

FAVORITE = "favorite"
UNDERDOG = "underdog"
OVER = "over"
UNDER = "under"

PICK_TYPES_BY_MARKET: Dict[str, List[str]] = {
    SPREAD: [FAVORITE, UNDERDOG],
    TOTAL: [OVER, UNDER],
    MONEYLINE: [FAVORITE, UNDERDOG],
}

# Results filter accepts any of these regardless of market
RESULT_PICK_TYPES: List[str] = ["all", FAVORITE, UNDERDOG, OVER, UNDER]

CONFERENCE_SCOPE = "conference"
NONCONFERENCE_SCOPE = "nonconference"
GAME_SCOPES: List[str] = [CONFERENCE_SCOPE, NONCONFERENCE_SCOPE]

# Lower bound inclusive, upper exclusive. The last band tops out at 101 so
# that a 100% pick would still land somewhere.
CONFIDENCE_BANDS: List[Tuple[int, int]] = [
    (53, 60),
    (60, 70),
    (70, 80),
    (80, 90),
    (90, 101),
]

# Results
WIN = "win"
LOSS = "loss"
PUSH = "push"


# =============================================================================
# PRICING DEFAULTS
# =============================================================================

DEFAULT_VIG_ODDS = -110
DEFAULT_SPREAD_TOTAL_EV_THRESHOLD = 0.525
# Break-even win rate at -110: 110 / 210
BREAK_EVEN_SPREAD_TOTAL = 0.5238095238095238

# Equality tolerance for line-vs-score comparisons
PUSH_EPSILON = 1e-9


# =============================================================================
# TREND SCORING
# =============================================================================

DEFAULT_MIN_BETS = 5
DEFAULT_MIN_WEEKS = 2
DEFAULT_SIZE_SHRINK_K = 60.0
DEFAULT_HALF_LIFE_WEEKS = 2.0
DEFAULT_POOL_SIZE = 50
DEFAULT_TOP_N = 5

WILSON_CONFIDENCE_LEVEL = 0.95

SCORE_WEIGHTS: Dict[str, float] = {
    "overall": 0.45,
    "recent": 0.35,
    "stability": 0.20,
    "ci_edge": 2.0,
}
CONSISTENCY_BOOST_WEIGHT = 0.5
DRAWDOWN_PENALTY_WEIGHT = 0.1
