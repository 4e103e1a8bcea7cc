"""Left/right reconciliation between sim ensembles and market rows."""

from typing import List

from cfbtrends.exceptions import OrientationError
from cfbtrends.models.types import Ensemble, SimulationPair
from cfbtrends.normalization.ids import canonicalize_team_name


def orient_sim_row(team: str, opp: str, pts: float, opp_pts: float, team_a: str) -> SimulationPair:
    """Orient one raw sim row so ``points_left`` belongs to ``team_a``."""
    if canonicalize_team_name(team) == team_a:
        return SimulationPair(points_left=float(pts), points_right=float(opp_pts))
    return SimulationPair(points_left=float(opp_pts), points_right=float(pts))


def reconcile_orientation(ensemble: Ensemble, team_left: str, team_right: str) -> List[SimulationPair]:
    """Return ensemble pairs oriented to the market row's left team.

    The ensemble and the market row must describe the same two teams;
    anything else is a keying bug upstream and raises ``OrientationError``.
    """
    left = canonicalize_team_name(team_left)
    right = canonicalize_team_name(team_right)
    if left == ensemble.team_a and right == ensemble.team_b:
        return list(ensemble.pairs)
    if left == ensemble.team_b and right == ensemble.team_a:
        return [
            SimulationPair(points_left=pair.points_right, points_right=pair.points_left)
            for pair in ensemble.pairs
        ]
    raise OrientationError((ensemble.team_a, ensemble.team_b), (team_left, team_right))
