"""Canonical keys and boundary normalization."""

from cfbtrends.normalization.aliases import FIELD_ALIASES, lookup, lookup_number
from cfbtrends.normalization.ids import (
    canonical_pair,
    canonicalize_team_name,
    make_pair_key,
    make_pick_key,
    team_match_key,
    week_number,
)

__all__ = [
    "FIELD_ALIASES",
    "lookup",
    "lookup_number",
    "canonical_pair",
    "canonicalize_team_name",
    "make_pair_key",
    "make_pick_key",
    "team_match_key",
    "week_number",
]
