"""Unit tests for the in-memory source implementations."""

import pytest

from cfbtrends.models.grading import grade_game
from cfbtrends.models.types import Ensemble, GameResult, SimulationPair
from cfbtrends.sources import (
    ConferenceLookup,
    EnsembleSource,
    InMemoryEnsembleSource,
    InMemoryMarketSource,
    MarketSource,
    TableConferenceLookup,
    ensemble_for,
)


def test_base_sources_are_abstract():
    with pytest.raises(NotImplementedError):
        EnsembleSource().get_pairs("A", "B")
    with pytest.raises(NotImplementedError):
        MarketSource().games()
    with pytest.raises(NotImplementedError):
        ConferenceLookup().of("A")


class TestInMemoryEnsembleSource:
    def test_lookup_either_order(self):
        source = InMemoryEnsembleSource([ensemble_for("Georgia", "Alabama", [SimulationPair(1, 2)])])
        ensemble = source.get_pairs("Georgia", "Alabama")
        assert ensemble.team_a == "Alabama"
        assert source.get_pairs("Alabama", "Georgia") is ensemble
        assert source.get_pairs("Alabama", "Auburn") is None

    def test_same_game_concatenates(self):
        source = InMemoryEnsembleSource()
        source.add(ensemble_for("Alabama", "Georgia", [SimulationPair(1, 2)]))
        source.add(ensemble_for("Alabama", "Georgia", [SimulationPair(3, 4)]))
        assert len(source) == 1
        assert len(source.get_pairs("Alabama", "Georgia")) == 2

    def test_flipped_ensemble_is_reoriented_before_merging(self):
        # Georgia wins 30-10 in both sims, written from each side
        source = InMemoryEnsembleSource()
        source.add(Ensemble("Georgia", "Alabama", [SimulationPair(30, 10)]))
        source.add(Ensemble("Alabama", "Georgia", [SimulationPair(10, 30)]))
        merged = source.get_pairs("Alabama", "Georgia")
        assert (merged.team_a, merged.team_b) == ("Georgia", "Alabama")
        assert [(p.points_left, p.points_right) for p in merged.pairs] == [(30, 10), (30, 10)]

    def test_merged_game_grades_for_the_winner(self, make_game):
        source = InMemoryEnsembleSource()
        source.add(ensemble_for("Georgia", "Alabama", [SimulationPair(30, 10)]))
        source.add(ensemble_for("Alabama", "Georgia", [SimulationPair(10, 30)]))
        game = make_game(spread=3.0, ml_left=130, ml_right=-150)
        picks = {p.market: p for p in grade_game(source.get_pairs("Alabama", "Georgia"), game)}
        assert picks["moneyline"].pick_text == "Georgia ML -150"
        assert picks["moneyline"].confidence == pytest.approx(0.75)

    def test_callers_ensemble_is_not_mutated(self):
        first = Ensemble("Alabama", "Georgia", [SimulationPair(1, 2)])
        source = InMemoryEnsembleSource([first])
        source.add(Ensemble("Alabama", "Georgia", [SimulationPair(3, 4)]))
        assert len(first) == 1
        assert len(source.get_pairs("Alabama", "Georgia")) == 2


class TestEnsembleFor:
    def test_pairs_follow_team_a(self):
        ensemble = ensemble_for("Georgia", "Alabama", [SimulationPair(30, 10), SimulationPair(28, 14)])
        assert (ensemble.team_a, ensemble.team_b) == ("Alabama", "Georgia")
        assert [(p.points_left, p.points_right) for p in ensemble.pairs] == [(10, 30), (14, 28)]

    def test_alphabetical_input_is_kept(self):
        ensemble = ensemble_for("Alabama", "Georgia", [SimulationPair(24, 20)])
        assert (ensemble.pairs[0].points_left, ensemble.pairs[0].points_right) == (24, 20)

    def test_grades_for_the_sim_favorite(self, make_game):
        ensemble = ensemble_for("Georgia", "Alabama", [SimulationPair(30, 10), SimulationPair(28, 14)])
        game = make_game(spread=3.0, ml_left=130, ml_right=-150)
        ml = [p for p in grade_game(ensemble, game) if p.market == "moneyline"][0]
        assert ml.pick_text == "Georgia ML -150"


class TestInMemoryMarketSource:
    def test_line_and_result(self, make_game):
        game = make_game(final=(24, 20))
        source = InMemoryMarketSource([game])
        assert source.games() == [game]
        assert source.get_line("Georgia", "Alabama").spread == -3
        assert source.get_result("Alabama", "Georgia") == GameResult(24, 20)
        assert source.get_line("Alabama", "LSU") is None
        assert source.get_result("Alabama", "LSU") is None


class TestTableConferenceLookup:
    def test_case_and_whitespace_insensitive(self):
        lookup = TableConferenceLookup({"Ohio State": "Big Ten", "Alabama": "SEC"})
        assert lookup.of("ohio state") == "Big Ten"
        assert lookup.of("OhioState") == "Big Ten"
        assert lookup.of("  Alabama ") == "SEC"
        assert lookup.of("Nowhere") is None
        assert lookup.of("") is None

    def test_conferences_are_distinct_in_first_seen_order(self):
        lookup = TableConferenceLookup()
        lookup.register("Alabama", "SEC")
        lookup.register("Ohio State", "Big Ten")
        lookup.register("Georgia", "sec")
        lookup.register("Bama", "SEC")
        lookup.register("Nobody", "")
        assert lookup.conferences == ["SEC", "Big Ten"]
        assert lookup.of("bama") == "SEC"
        assert lookup.of("Nobody") is None
