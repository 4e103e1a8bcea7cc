"""Unit tests for the trend engine facade over in-memory sources."""

import pytest

from cfbtrends.config import Config
from cfbtrends.constants import CONFERENCE_SCOPE, MONEYLINE, SPREAD
from cfbtrends.engine import TrendEngine, WeekGrades
from cfbtrends.models.types import TrendSlice
from cfbtrends.ops.metrics import InMemoryMetricsRecorder
from cfbtrends.sources import InMemoryEnsembleSource, InMemoryMarketSource, TableConferenceLookup


@pytest.fixture
def engine(sample_ensemble, make_game):
    weeks = {
        "week1": [make_game(week="week1", final=(24, 20), conf_left=None, conf_right=None)],
        "week2": [make_game(week="week2", final=(17, 24), conf_left=None, conf_right=None)],
        "week3": [make_game(week="week3", conf_left=None, conf_right=None)],
    }

    def loader(week_id):
        return InMemoryEnsembleSource([sample_ensemble]), InMemoryMarketSource(weeks.get(week_id, []))

    conferences = TableConferenceLookup({"Alabama": "SEC", "Georgia": "SEC"})
    return TrendEngine(loader, conferences=conferences, config=Config(min_bets=1), recorder=InMemoryMetricsRecorder())


def test_grade_week_resolves_conferences(engine):
    grades = engine.grade_week("week1")
    assert len(grades.graded) == 3
    assert grades.pending == []
    assert all(p.conf_left == "SEC" and p.conf_right == "SEC" for p in grades.graded)


def test_pending_week(engine):
    grades = engine.grade_week("week3")
    assert grades.graded == []
    assert len(grades.pending) == 3


def test_unknown_week_is_empty(engine):
    assert engine.grade_week("week12").all_picks == []


def test_grade_weeks_in_order(engine):
    grades = engine.grade_weeks(["week1", "week2", "week3"])
    assert [p.week_num for p in grades.graded] == [1, 1, 1, 2, 2, 2]
    assert len(grades.pending) == 3
    assert engine.recorder.snapshot()["counters"]["grading.graded"] == 6


def test_rank_and_drill_down(engine):
    grades = engine.grade_weeks(["week1", "week2", "week3"])
    ranked = engine.rank_trends(grades.graded, market_view="all")
    markets = {t.slice.market for t in ranked}
    assert markets == {SPREAD, MONEYLINE}
    assert "ranking.rank_trends" in engine.recorder.snapshot()["timings"]

    sections = engine.trend_sections(ranked)
    assert len(sections["overall"]) == 2
    assert sections["nonconference"] == []

    spread_slice = TrendSlice(SPREAD, "favorite", (70, 80), CONFERENCE_SCOPE, "SEC")
    week3 = engine.matches_for_week(grades.all_picks, spread_slice, 3)
    assert len(week3) == 1 and week3[0].is_pending
    metrics = engine.slice_metrics(grades.all_picks, spread_slice)
    assert metrics.n_bets == 2
    assert metrics.profit_units == pytest.approx(1.0 - 1.1)


def test_game_row_conferences_take_precedence(sample_ensemble, make_game):
    game = make_game(final=(24, 20), conf_left="Big Ten", conf_right=None)

    def loader(week_id):
        return InMemoryEnsembleSource([sample_ensemble]), InMemoryMarketSource([game])

    engine = TrendEngine(loader, conferences=TableConferenceLookup({"Alabama": "SEC", "Georgia": "SEC"}))
    pick = engine.grade_week("week1").graded[0]
    assert (pick.conf_left, pick.conf_right) == ("Big Ten", "SEC")


def test_week_grades_extend():
    combined = WeekGrades()
    combined.extend(WeekGrades(graded=[1], pending=[2]))
    assert combined.all_picks == [1, 2]
