"""Load Monte Carlo sim CSVs into per-game ensembles."""

from pathlib import Path
from typing import Iterable, List, Optional
import logging

import numpy as np
import pandas as pd

from cfbtrends.exceptions import DataLoadError
from cfbtrends.models.types import Ensemble, SimulationPair
from cfbtrends.normalization.aliases import FIELD_ALIASES
from cfbtrends.normalization.ids import canonical_pair, canonicalize_team_name, make_pair_key
from cfbtrends.sources import InMemoryEnsembleSource

logger = logging.getLogger(__name__)

SIM_FIELDS = ("sim_team", "sim_opp", "sim_pts", "sim_opp_pts")


def _resolve_column(columns: Iterable[str], canonical: str) -> Optional[str]:
    available = {str(col).strip(): col for col in columns}
    for alias in FIELD_ALIASES[canonical]:
        if alias in available:
            return available[alias]
    return None


def read_sim_frame(path: Path) -> pd.DataFrame:
    """Read one sim CSV as a frame with columns team/opp/pts/opp_pts.

    Rows missing any of the four values are dropped.
    """
    try:
        raw = pd.read_csv(path)
    except pd.errors.EmptyDataError:
        logger.warning("Sim file %s is empty", path)
        return pd.DataFrame(columns=["team", "opp", "pts", "opp_pts"])
    except (pd.errors.ParserError, UnicodeDecodeError, OSError) as exc:
        raise DataLoadError(str(path), "could not parse sim CSV", exc)

    columns = {field: _resolve_column(raw.columns, field) for field in SIM_FIELDS}
    missing = [field for field, col in columns.items() if col is None]
    if missing:
        logger.warning("Sim file %s lacks columns %s; skipping", path, ", ".join(missing))
        return pd.DataFrame(columns=["team", "opp", "pts", "opp_pts"])

    frame = pd.DataFrame({
        "team": raw[columns["sim_team"]],
        "opp": raw[columns["sim_opp"]],
        "pts": pd.to_numeric(raw[columns["sim_pts"]], errors="coerce"),
        "opp_pts": pd.to_numeric(raw[columns["sim_opp_pts"]], errors="coerce"),
    })
    frame = frame.dropna(subset=["team", "opp", "pts", "opp_pts"])
    frame = frame.assign(
        team=frame["team"].map(canonicalize_team_name),
        opp=frame["opp"].map(canonicalize_team_name),
    )
    frame = frame[(frame["team"] != "") & (frame["opp"] != "")]
    frame = frame[np.isfinite(frame["pts"]) & np.isfinite(frame["opp_pts"])]

    dropped = len(raw) - len(frame)
    if dropped:
        logger.debug("Dropped %d incomplete sim rows from %s", dropped, path)
    return frame.reset_index(drop=True)


def ensembles_from_frame(frame: pd.DataFrame) -> List[Ensemble]:
    """Group sim rows by game, oriented to the alphabetically-first team."""
    if frame.empty:
        return []
    keyed = frame.assign(pair_key=[
        make_pair_key(team, opp) for team, opp in zip(frame["team"], frame["opp"])
    ])

    ensembles: List[Ensemble] = []
    for _, group in keyed.groupby("pair_key", sort=True):
        team_a, team_b = canonical_pair(group["team"].iloc[0], group["opp"].iloc[0])
        is_a = (group["team"] == team_a).to_numpy()
        pts = group["pts"].to_numpy(dtype=float)
        opp_pts = group["opp_pts"].to_numpy(dtype=float)
        left = np.where(is_a, pts, opp_pts)
        right = np.where(is_a, opp_pts, pts)
        pairs = [SimulationPair(points_left=float(l), points_right=float(r)) for l, r in zip(left, right)]
        ensembles.append(Ensemble(team_a=team_a, team_b=team_b, pairs=pairs))
    return ensembles


def load_ensembles(paths: Iterable[Path]) -> InMemoryEnsembleSource:
    """Build an ensemble source from every sim file of one week.

    Multiple files for the same game are concatenated.
    """
    source = InMemoryEnsembleSource()
    n_files = 0
    for path in paths:
        n_files += 1
        for ensemble in ensembles_from_frame(read_sim_frame(path)):
            source.add(ensemble)
    logger.debug("Loaded %d ensembles from %d sim files", len(source), n_files)
    return source
