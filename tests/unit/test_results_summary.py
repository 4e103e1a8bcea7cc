"""Unit tests for the filtered graded-results summary."""

import pytest

from cfbtrends.constants import LOSS, MONEYLINE, PUSH, TOTAL
from cfbtrends.exceptions import ConfigError
from cfbtrends.trends.metrics import filter_results, summarize_results


@pytest.fixture
def results_picks(make_pick):
    return [
        make_pick(confidence=0.75, units=1.0),
        make_pick(confidence=0.6875, result=LOSS, units=-1.1),
        make_pick(week_num=2, confidence=0.75, result=PUSH, units=0.0, stake_risk=0.0),
        make_pick(
            week_num=2, market=TOTAL, confidence=0.5625, is_positive_ev=False,
            is_favorite_pick=False, is_over_pick=True, pick_text="Over 44.5", units=1.0,
        ),
        make_pick(
            week_num=2, market=MONEYLINE, confidence=0.625, is_favorite_pick=False,
            is_underdog_pick=True, pick_text="Georgia ML +130", units=1.3, stake_risk=1.0,
        ),
        make_pick(week_num=3, result=None, units=0.0),
    ]


class TestSummarizeResults:
    def test_overall_record(self, results_picks):
        summary = summarize_results(results_picks)
        assert summary.n_picks == 5
        assert summary.record == "3-1-1"
        assert summary.profit_units == pytest.approx(2.2)
        assert summary.risk_sum == pytest.approx(4.3)
        assert summary.ror == pytest.approx(2.2 / 4.3)
        assert summary.win_pct == pytest.approx(0.75)
        assert summary.timeline[-1] == (5, pytest.approx(2.2))

    def test_week_by_week(self, results_picks):
        weeks = summarize_results(results_picks).by_week
        assert [(w.week, w.record) for w in weeks] == [("week1", "1-1-0"), ("week2", "2-0-1")]
        assert weeks[0].units == pytest.approx(-0.1)
        assert weeks[1].units == pytest.approx(2.3)

    def test_market_filter_accepts_alias(self, results_picks):
        summary = summarize_results(results_picks, market="ml")
        assert summary.record == "1-0-0"
        assert summary.ror == pytest.approx(1.3)

    def test_pick_type_filter(self, results_picks):
        assert summarize_results(results_picks, pick_type="favorite").record == "1-1-1"
        assert summarize_results(results_picks, pick_type="underdog").record == "1-0-0"
        assert summarize_results(results_picks, pick_type="over").record == "1-0-0"
        assert summarize_results(results_picks, pick_type="under").n_picks == 0

    def test_positive_ev_only(self, results_picks):
        assert summarize_results(results_picks, positive_ev_only=True).record == "2-1-1"

    def test_confidence_window_is_inclusive(self, results_picks):
        summary = summarize_results(results_picks, conf_min=62.5, conf_max=68.75)
        assert summary.record == "1-1-0"

    def test_max_below_min_collapses_to_min(self, results_picks):
        assert summarize_results(results_picks, conf_min=75, conf_max=10).record == "1-0-1"

    def test_pushes_excluded_from_win_rate(self, make_pick):
        picks = [make_pick(result=PUSH, units=0.0, stake_risk=0.0), make_pick(units=1.0)]
        assert summarize_results(picks).win_pct == 1.0

    def test_empty(self):
        summary = summarize_results([])
        assert summary.n_picks == 0
        assert summary.win_pct == 0.0
        assert summary.ror == 0.0
        assert summary.by_week == []

    def test_bad_filters_raise(self, results_picks):
        with pytest.raises(ConfigError):
            filter_results(results_picks, market="props")
        with pytest.raises(ConfigError):
            filter_results(results_picks, pick_type="sideways")
