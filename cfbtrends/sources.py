"""Data source interfaces consumed by the grading engine."""

from typing import Dict, Iterable, List, Mapping, Optional

from cfbtrends.models.types import Ensemble, GameResult, GameRow, MarketLine, SimulationPair
from cfbtrends.normalization.ids import (
    canonical_pair,
    canonicalize_team_name,
    make_pair_key,
    team_match_key,
)
from cfbtrends.normalization.orientation import reconcile_orientation


class EnsembleSource:
    def get_pairs(self, team_a: str, team_b: str) -> Optional[Ensemble]:
        raise NotImplementedError


class MarketSource:
    def games(self) -> List[GameRow]:
        raise NotImplementedError

    def get_line(self, team_a: str, team_b: str) -> Optional[MarketLine]:
        raise NotImplementedError

    def get_result(self, team_a: str, team_b: str) -> Optional[GameResult]:
        raise NotImplementedError


class ConferenceLookup:
    def of(self, team: str) -> Optional[str]:
        raise NotImplementedError

    @property
    def conferences(self) -> List[str]:
        raise NotImplementedError


class InMemoryEnsembleSource(EnsembleSource):
    def __init__(self, ensembles: Iterable[Ensemble] = ()) -> None:
        self._data: Dict[str, Ensemble] = {}
        for ensemble in ensembles:
            self.add(ensemble)

    def add(self, ensemble: Ensemble) -> None:
        """Store an ensemble, merging it into any already held for the game.

        Later ensembles are flipped onto the stored orientation before
        merging. The caller's ensemble is never modified.
        """
        key = make_pair_key(ensemble.team_a, ensemble.team_b)
        existing = self._data.get(key)
        if existing is None:
            self._data[key] = Ensemble(
                team_a=ensemble.team_a,
                team_b=ensemble.team_b,
                pairs=list(ensemble.pairs),
            )
            return
        pairs = reconcile_orientation(ensemble, existing.team_a, existing.team_b)
        self._data[key] = Ensemble(
            team_a=existing.team_a,
            team_b=existing.team_b,
            pairs=existing.pairs + pairs,
        )

    def get_pairs(self, team_a: str, team_b: str) -> Optional[Ensemble]:
        return self._data.get(make_pair_key(team_a, team_b))

    def __len__(self) -> int:
        return len(self._data)


class InMemoryMarketSource(MarketSource):
    def __init__(self, rows: Iterable[GameRow] = ()) -> None:
        self._rows: List[GameRow] = list(rows)
        self._by_pair: Dict[str, GameRow] = {}
        for row in self._rows:
            self._by_pair.setdefault(make_pair_key(row.team_left, row.team_right), row)

    def games(self) -> List[GameRow]:
        return list(self._rows)

    def _row(self, team_a: str, team_b: str) -> Optional[GameRow]:
        return self._by_pair.get(make_pair_key(team_a, team_b))

    def get_line(self, team_a: str, team_b: str) -> Optional[MarketLine]:
        row = self._row(team_a, team_b)
        return row.line if row else None

    def get_result(self, team_a: str, team_b: str) -> Optional[GameResult]:
        row = self._row(team_a, team_b)
        return row.result if row else None


class TableConferenceLookup(ConferenceLookup):
    """Team -> conference map matched case- and whitespace-insensitively."""

    def __init__(self, mapping: Optional[Mapping[str, str]] = None) -> None:
        self._team_to_conf: Dict[str, str] = {}
        self._conferences: List[str] = []
        for team, conference in (mapping or {}).items():
            self.register(team, conference)

    def register(self, team: str, conference: Optional[str]) -> None:
        team = canonicalize_team_name(team)
        conference = (conference or "").strip()
        if not team or not conference:
            return
        if conference.lower() not in {c.lower() for c in self._conferences}:
            self._conferences.append(conference)
        self._team_to_conf[team.lower()] = conference
        self._team_to_conf[team_match_key(team)] = conference

    def of(self, team: str) -> Optional[str]:
        if not team:
            return None
        name = canonicalize_team_name(team)
        return self._team_to_conf.get(name.lower()) or self._team_to_conf.get(team_match_key(name))

    @property
    def conferences(self) -> List[str]:
        return list(self._conferences)

    def __len__(self) -> int:
        return len(self._team_to_conf)


def ensemble_for(team_a: str, team_b: str, pairs=None) -> Ensemble:
    """Build an ensemble keyed in canonical (alphabetical) orientation.

    ``pairs`` are read with ``points_left`` belonging to ``team_a``; they
    are flipped when ``team_a`` is not the alphabetically-first team.
    """
    first, second = canonical_pair(team_a, team_b)
    pairs = list(pairs or [])
    if canonicalize_team_name(team_a) != first:
        pairs = [SimulationPair(points_left=p.points_right, points_right=p.points_left) for p in pairs]
    return Ensemble(team_a=first, team_b=second, pairs=pairs)
