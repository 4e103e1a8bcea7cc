"""
Pytest configuration and shared fixtures for grading and trend tests.
"""

from pathlib import Path

import pandas as pd
import pytest

from cfbtrends.constants import SPREAD, WIN
from cfbtrends.models.types import Ensemble, GameResult, GameRow, GradedPick, MarketLine, SimulationPair
from cfbtrends.ops.metrics import get_metrics_recorder


SAMPLE_PAIRS = [(24, 20), (27, 21), (20, 24), (30, 17)]


@pytest.fixture(autouse=True)
def reset_metrics():
    get_metrics_recorder().reset()
    yield
    get_metrics_recorder().reset()


@pytest.fixture
def sample_ensemble():
    """Four sims for Alabama (left) vs Georgia (right)."""
    return Ensemble(
        team_a="Alabama",
        team_b="Georgia",
        pairs=[SimulationPair(points_left=l, points_right=r) for l, r in SAMPLE_PAIRS],
    )


@pytest.fixture
def make_game():
    def _make(
        spread=-3.0,
        total=44.5,
        ml_left=-150,
        ml_right=130,
        final=None,
        team_left="Alabama",
        team_right="Georgia",
        week="week1",
        conf_left="SEC",
        conf_right="SEC",
        kickoff=None,
    ):
        return GameRow(
            week=week,
            team_left=team_left,
            team_right=team_right,
            line=MarketLine(spread=spread, total=total, ml_left=ml_left, ml_right=ml_right),
            result=GameResult(*final) if final is not None else None,
            conf_left=conf_left,
            conf_right=conf_right,
            kickoff=kickoff,
        )
    return _make


@pytest.fixture
def make_pick():
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        fields = dict(
            market=SPREAD,
            pick_side="left",
            pick_text="Alabama -3",
            confidence=0.75,
            is_positive_ev=True,
            stake_risk=1.1,
            week="week1",
            week_num=1,
            key=f"game{counter['n']:03d}__{overrides.get('market', SPREAD)}",
            team_left="Alabama",
            team_right="Georgia",
            result=WIN,
            units=1.0,
            is_favorite_pick=True,
            conf_left="SEC",
            conf_right="SEC",
        )
        if "week_num" in overrides and "week" not in overrides:
            fields["week"] = f"week{overrides['week_num']}"
        fields.update(overrides)
        return GradedPick(**fields)
    return _make


def _write_csv(path: Path, rows) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(rows).to_csv(path, index=False)
    return path


@pytest.fixture
def write_csv():
    """Write a list of dict rows to CSV with pandas, creating parent dirs."""
    return _write_csv


@pytest.fixture
def season_data_dir(tmp_path):
    """Three weeks of SEC games; weeks 1-2 have finals, week 3 is pending."""
    data = tmp_path / "data"
    matchups = [("Alabama", "Georgia"), ("LSU", "Auburn"), ("Texas", "Florida")]
    finals = {
        "week1": [(24, 20), (31, 10), (17, 24)],
        "week2": [(28, 14), (24, 20), (35, 21)],
        "week3": [None, None, None],
    }
    for week, week_finals in finals.items():
        sims = []
        games = []
        for (left, right), final in zip(matchups, week_finals):
            for pts, opp_pts in SAMPLE_PAIRS:
                sims.append({"team": left, "opp": right, "pts": pts, "opp_pts": opp_pts})
            games.append({
                "Date": "Sat, Sep 6",
                "Time": "7:30 PM",
                "Team A": left,
                "Team B": right,
                "Spread": -3,
                "OU": 44.5,
                "TeamAML": -150,
                "TeamBML": 130,
                "Team A Score Actual": final[0] if final else None,
                "Team B Score Actual": final[1] if final else None,
            })
        _write_csv(data / week / "scores" / f"{week}_sims.csv", sims)
        _write_csv(data / week / f"{week}_games.csv", games)

    _write_csv(data / "team_info.csv", [
        {"team": name, "conference": "SEC", "short_name": ""}
        for pair in matchups for name in pair
    ])
    return data
