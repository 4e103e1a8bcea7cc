"""Unit tests for CSV/JSON writers and the run manifest."""

import csv
import json

import pytest

from cfbtrends.constants import CONFERENCE_SCOPE, SPREAD
from cfbtrends.models.types import TrendMetrics, TrendScored, TrendSlice
from cfbtrends.reporting import write_picks_csv, write_results_csv, write_trends_csv, write_trends_json
from cfbtrends.reporting.json_output import read_trends_json
from cfbtrends.runtime.manifest import RunManifest
from cfbtrends.trends.metrics import summarize_results


def _trend(score=1.25):
    metrics = TrendMetrics(
        n_bets=6, n_weeks=2, profit_units=3.9, risk_sum=6.6, ror=0.59, win_pct=0.833,
        consistency=1.0, max_drawdown=1.1, ewma_profit=0.8, sharpeish=1.9,
        wilson_lower_vs_breakeven=0.0, timeline=[(1, 1.0), (2, -0.1)],
    )
    return TrendScored(TrendSlice(SPREAD, "favorite", (70, 80), CONFERENCE_SCOPE, "SEC"), metrics, score)


def test_write_picks_csv(tmp_path, make_pick):
    path = tmp_path / "out" / "graded.csv"
    write_picks_csv([make_pick(), make_pick(result=None, units=0.0)], str(path))
    with path.open(encoding="utf-8", newline="") as handle:
        rows = list(csv.DictReader(handle))
    assert len(rows) == 2
    assert rows[0]["market"] == "spread"
    assert rows[0]["result"] == "win"
    assert rows[1]["result"] == ""
    assert rows[0]["pick_type"] == "favorite"


def test_picks_csv_labels_pickem_as_underdog(tmp_path, make_pick):
    path = tmp_path / "picks.csv"
    write_picks_csv([make_pick(is_favorite_pick=False, pick_text="Georgia 0")], str(path))
    with path.open(encoding="utf-8", newline="") as handle:
        rows = list(csv.DictReader(handle))
    assert rows[0]["pick_type"] == "underdog"


def test_write_picks_csv_empty(tmp_path):
    path = tmp_path / "empty.csv"
    write_picks_csv([], str(path))
    assert path.read_text(encoding="utf-8") == ""


def test_write_trends_csv(tmp_path):
    path = tmp_path / "trends.csv"
    write_trends_csv([_trend(2.0), _trend(1.0)], str(path))
    with path.open(encoding="utf-8", newline="") as handle:
        rows = list(csv.DictReader(handle))
    assert [row["rank"] for row in rows] == ["1", "2"]
    assert rows[0]["label"] == "spread • favorite • 70–80% conf • Conference • SEC"
    assert rows[0]["band_low"] == "70"
    assert rows[0]["n_bets"] == "6"


def test_write_trends_json(tmp_path):
    path = tmp_path / "trends.json"
    trend = _trend()
    write_trends_json([trend], str(path), sections={"overall": [trend]}, market_view="spread")
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["market_view"] == "spread"
    assert payload["sections"]["overall"] == [trend.id]
    assert payload["trends"][0]["timeline"] == [
        {"bet": 1, "cumulative_units": 1.0},
        {"bet": 2, "cumulative_units": -0.1},
    ]
    assert read_trends_json(str(path))[0]["score"] == 1.25


def test_manifest_to_dict():
    manifest = RunManifest(command="rank", weeks=["week1"])
    payload = manifest.to_dict()
    assert payload["command"] == "rank"
    assert len(payload["run_id"]) == 32
    assert payload["weeks"] == ["week1"]
    assert payload["outputs"] == {}


def test_write_results_csv(tmp_path, make_pick):
    picks = [
        make_pick(units=1.0),
        make_pick(week_num=2, result="loss", units=-1.1),
    ]
    path = tmp_path / "results.csv"
    write_results_csv(summarize_results(picks), str(path))
    with path.open(encoding="utf-8", newline="") as handle:
        rows = list(csv.DictReader(handle))
    assert [row["week"] for row in rows] == ["week1", "week2", "total"]
    assert rows[0]["record"] == "1-0-0"
    assert rows[-1]["record"] == "1-1-0"
    assert float(rows[-1]["units"]) == pytest.approx(-0.1)
