"""Header alias table for loosely-authored CSV rows.

Week-games files, sim files and the team info sheet have been written by
hand over several seasons, so the same field shows up under many headers.
Everything downstream of ingestion only sees canonical keys.
"""

from typing import Dict, Iterable, List, Mapping, Optional
import math


FIELD_ALIASES: Dict[str, List[str]] = {
    # week games
    "team_left": ["Team A", "team_a", "teamA", "A", "Home", "home"],
    "team_right": ["Team B", "team_b", "teamB", "B", "Away", "away"],
    "conf_left": [
        "Team A Conf", "team_a_conf", "confA", "ConfA", "A Conf",
        "home_conf", "Home Conf", "HomeConf",
        "Team A Conference", "team_a_conference",
    ],
    "conf_right": [
        "Team B Conf", "team_b_conf", "confB", "ConfB", "B Conf",
        "away_conf", "Away Conf", "AwayConf",
        "Team B Conference", "team_b_conference",
    ],
    "spread": ["Spread", "spread", "Line", "line"],
    "total": ["OU", "O/U", "Total", "total"],
    "final_left": ["Team A Score Actual", "team_a_score_actual", "TeamAScoreActual"],
    "final_right": ["Team B Score Actual", "team_b_score_actual", "TeamBScoreActual"],
    "ml_left": ["TeamAML", "team_a_ml", "TeamA_ML", "teamAML"],
    "ml_right": ["TeamBML", "team_b_ml", "TeamB_ML", "teamBML"],
    "date": ["Date", "date", "Game Date", "game_date"],
    "time": ["Time", "time", "Kick", "kick", "Kickoff", "kickoff"],
    "datetime": ["Datetime", "DateTime", "datetime", "start_time", "StartTime"],
    # sims
    "sim_team": ["team", "Team"],
    "sim_opp": ["opp", "Opp", "opponent", "Opponent"],
    "sim_pts": ["pts", "Pts", "points"],
    "sim_opp_pts": ["opp_pts", "Opp Pts", "opp_points"],
    # team info
    "info_team": ["team", "Team", "school", "School", "name", "Name"],
    "info_conference": ["conference", "Conference", "conf", "Conf"],
    "info_alias": ["short_name", "Short Name", "alias", "Alias"],
}


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value.strip() == ""


def first_value(row: Mapping, keys: Iterable[str]):
    for key in keys:
        if key in row and not _is_blank(row[key]):
            return row[key]
    return None


def lookup(row: Mapping, canonical: str) -> Optional[str]:
    """Return the first non-empty alias value for ``canonical`` as stripped text."""
    value = first_value(row, FIELD_ALIASES[canonical])
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_number(value) -> Optional[float]:
    if _is_blank(value):
        return None
    if isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip().replace(",", ""))
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def lookup_number(row: Mapping, canonical: str) -> Optional[float]:
    """Return the first alias whose value parses to a finite float."""
    for key in FIELD_ALIASES[canonical]:
        if key not in row:
            continue
        number = _parse_number(row[key])
        if number is not None:
            return number
    return None
