"""Candidate trend slice enumeration."""

from typing import List, Sequence, Tuple
import re

from cfbtrends.constants import (
    CONFERENCE_SCOPE,
    CONFIDENCE_BANDS,
    GAME_SCOPES,
    MARKETS,
    PICK_TYPES_BY_MARKET,
)
from cfbtrends.exceptions import ConfigError
from cfbtrends.models.types import TrendSlice


def build_candidate_slices(conferences: Sequence[str]) -> List[TrendSlice]:
    """Every market x pick type x band x scope x conference combination.

    There is no "all conferences" member: scope is always judged
    relative to one named conference. The result is deterministic for a
    given conference order.
    """
    out: List[TrendSlice] = []
    for market in MARKETS:
        for pick_type in PICK_TYPES_BY_MARKET[market]:
            for band in CONFIDENCE_BANDS:
                for scope in GAME_SCOPES:
                    for conference in conferences:
                        out.append(TrendSlice(
                            market=market,
                            pick_type=pick_type,
                            confidence_band=band,
                            game_scope=scope,
                            conference=conference,
                        ))
    return out


def slice_label(trend_slice: TrendSlice) -> str:
    parts = [trend_slice.market if trend_slice.market != "all" else "All Markets"]
    if trend_slice.pick_type != "all":
        parts.append(trend_slice.pick_type)
    low, high = trend_slice.confidence_band
    parts.append(f"{low}–{high}% conf")
    parts.append("Conference" if trend_slice.game_scope == CONFERENCE_SCOPE else "Non-Conf")
    parts.append(trend_slice.conference)
    return " • ".join(parts)


def parse_band(text: str) -> Tuple[int, int]:
    """Parse "60-70" / "60–70" / "60:70" into a confidence band tuple."""
    match = re.match(r"^\s*(\d{1,3})\s*[-–:,]\s*(\d{1,3})\s*$", str(text or ""))
    if not match:
        raise ConfigError("band", f"expected LOW-HIGH, got {text!r}")
    low, high = int(match.group(1)), int(match.group(2))
    if low >= high:
        raise ConfigError("band", f"lower bound must be below upper bound: {text!r}")
    return low, high
