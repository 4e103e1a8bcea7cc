"""
Odds conversion and stake/payout economics.

Provides:
- American odds conversions (implied probability, break-even rate)
- Risk and payout per unit for a single bet at given odds
- PricingModel, the pluggable vig/EV assumptions used when grading
  spread and total picks (moneyline always prices off the posted odds)
"""

from dataclasses import dataclass

from cfbtrends.constants import DEFAULT_SPREAD_TOTAL_EV_THRESHOLD, DEFAULT_VIG_ODDS


# =============================================================================
# ODDS CONVERSIONS
# =============================================================================

def american_to_implied_prob(odds: float) -> float:
    """
    Convert American odds to implied probability.

    Examples:
        -110 -> 0.524 (52.4% implied)
        +130 -> 0.435
        -150 -> 0.600

    Args:
        odds: American odds (positive or negative)

    Returns:
        Implied probability (0 to 1)
    """
    if odds < 0:
        return abs(odds) / (abs(odds) + 100)
    return 100 / (abs(odds) + 100)


def calculate_breakeven_winrate(odds: float) -> float:
    """Win rate needed to break even at the given odds (the implied probability)."""
    return american_to_implied_prob(odds)


def stake_risk_for_odds(odds: float) -> float:
    """
    Units risked to win one unit on a favorite, or one unit staked on a dog.

    Examples:
        -110 -> 1.1
        -150 -> 1.5
        +130 -> 1.0
    """
    if odds < 0:
        return abs(odds) / 100
    return 1.0


def win_payout_for_odds(odds: float) -> float:
    """
    Units won when a bet at these odds cashes.

    Examples:
        -150 -> 1.0
        +130 -> 1.3
    """
    if odds < 0:
        return 1.0
    return odds / 100


# =============================================================================
# PRICING MODEL
# =============================================================================

@dataclass(frozen=True)
class PricingModel:
    """Vig and EV assumptions for spread/total picks.

    The defaults (-110 both ways, EV above 52.5%) reproduce the fixed
    economics every graded spread/total pick has always used.
    """

    vig_odds: float = DEFAULT_VIG_ODDS
    ev_threshold: float = DEFAULT_SPREAD_TOTAL_EV_THRESHOLD

    @property
    def stake_risk(self) -> float:
        return stake_risk_for_odds(self.vig_odds)

    @property
    def win_payout(self) -> float:
        return win_payout_for_odds(self.vig_odds)

    @property
    def break_even(self) -> float:
        return calculate_breakeven_winrate(self.vig_odds)

    def is_positive_ev(self, confidence: float) -> bool:
        return confidence > self.ev_threshold


DEFAULT_PRICING = PricingModel()
