"""Unit tests for canonical ids, header aliases and orientation."""

import math

import pytest

from cfbtrends.exceptions import CFBTrendsError, OrientationError
from cfbtrends.models.types import Ensemble, SimulationPair
from cfbtrends.normalization.aliases import first_value, lookup, lookup_number
from cfbtrends.normalization.ids import (
    canonical_pair,
    canonicalize_team_name,
    make_pair_key,
    make_pick_key,
    team_match_key,
    week_number,
)
from cfbtrends.normalization.orientation import orient_sim_row, reconcile_orientation


class TestIds:
    def test_pair_key_is_order_independent(self):
        assert make_pair_key("Georgia", "Alabama") == make_pair_key("Alabama", "Georgia")
        assert make_pair_key("Georgia", "Alabama") == "Alabama__Georgia"

    def test_canonical_pair_collapses_whitespace(self):
        assert canonical_pair("  Ohio   State ", "Michigan") == ("Michigan", "Ohio State")
        assert canonicalize_team_name(None) == ""

    def test_pick_key(self):
        assert make_pick_key("LSU", "Auburn", "total") == "Auburn__LSU__total"

    def test_match_key(self):
        assert team_match_key("Ohio  State") == team_match_key("ohiostate")

    @pytest.mark.parametrize("week,expected", [("week3", 3), ("Week 12", 12), ("bowls", 0), ("", 0)])
    def test_week_number(self, week, expected):
        assert week_number(week) == expected


class TestAliases:
    def test_first_non_empty_alias_wins(self):
        row = {"Team A": "", "team_a": "Alabama", "teamA": "Other"}
        assert lookup(row, "team_left") == "Alabama"

    def test_nan_is_blank(self):
        row = {"Spread": math.nan, "Line": "-3.5"}
        assert lookup_number(row, "spread") == -3.5

    def test_lookup_number_skips_garbage(self):
        row = {"OU": "pk", "Total": "51"}
        assert lookup_number(row, "total") == 51.0

    def test_lookup_number_rejects_non_finite(self):
        assert lookup_number({"Spread": "inf"}, "spread") is None
        assert lookup_number({}, "spread") is None

    def test_lookup_strips_text(self):
        assert lookup({"Home Conf": "  SEC "}, "conf_left") == "SEC"
        assert lookup({"Home Conf": "   "}, "conf_left") is None

    def test_first_value(self):
        assert first_value({"a": None, "b": 0}, ["a", "b"]) == 0


class TestOrientation:
    def _ensemble(self):
        return Ensemble(
            team_a="Alabama",
            team_b="Georgia",
            pairs=[SimulationPair(24, 20), SimulationPair(17, 21)],
        )

    def test_same_orientation_passes_through(self):
        pairs = reconcile_orientation(self._ensemble(), "Alabama", "Georgia")
        assert [(p.points_left, p.points_right) for p in pairs] == [(24, 20), (17, 21)]

    def test_flipped_orientation(self):
        pairs = reconcile_orientation(self._ensemble(), "Georgia", "Alabama")
        assert [(p.points_left, p.points_right) for p in pairs] == [(20, 24), (21, 17)]

    def test_mismatch_raises_assertion(self):
        with pytest.raises(OrientationError) as excinfo:
            reconcile_orientation(self._ensemble(), "Alabama", "Auburn")
        assert isinstance(excinfo.value, AssertionError)
        assert isinstance(excinfo.value, CFBTrendsError)
        assert excinfo.value.market_teams == ("Alabama", "Auburn")

    def test_orient_sim_row(self):
        assert orient_sim_row("Georgia", "Alabama", 21, 14, "Alabama") == SimulationPair(14.0, 21.0)
        assert orient_sim_row("Alabama", "Georgia", 21, 14, "Alabama") == SimulationPair(21.0, 14.0)
