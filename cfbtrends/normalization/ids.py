"""Canonical ID helpers."""

from typing import Tuple
import re

_PAIR_SEPARATOR = "__"


def canonicalize_team_name(name: str) -> str:
    return " ".join(str(name or "").strip().split())


def team_match_key(name: str) -> str:
    """Case- and whitespace-insensitive key used for team lookups."""
    return re.sub(r"\s+", "", str(name or "")).lower()


def canonical_pair(team_a: str, team_b: str) -> Tuple[str, str]:
    first, second = sorted((canonicalize_team_name(team_a), canonicalize_team_name(team_b)))
    return first, second


def make_pair_key(team_a: str, team_b: str) -> str:
    return _PAIR_SEPARATOR.join(canonical_pair(team_a, team_b))


def make_pick_key(team_a: str, team_b: str, market: str) -> str:
    return f"{make_pair_key(team_a, team_b)}{_PAIR_SEPARATOR}{market}"


def week_number(week: str) -> int:
    digits = re.sub(r"[^0-9]", "", str(week or ""))
    if not digits:
        return 0
    return int(digits)
