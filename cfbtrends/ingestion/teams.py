"""Team info sheet -> conference lookup."""

from pathlib import Path
from typing import Union
import logging

import pandas as pd

from cfbtrends.exceptions import DataLoadError
from cfbtrends.normalization.aliases import lookup
from cfbtrends.sources import TableConferenceLookup

logger = logging.getLogger(__name__)


def load_team_info(path: Union[str, Path]) -> TableConferenceLookup:
    """Read ``team_info.csv`` into a conference lookup.

    A missing sheet yields an empty lookup, so games fall back to the
    conference columns of the week-games files.
    """
    path = Path(path)
    conferences = TableConferenceLookup()
    if not path.exists():
        logger.warning("Team info %s not found; relying on game-row conferences", path)
        return conferences
    try:
        frame = pd.read_csv(path, dtype=str)
    except pd.errors.EmptyDataError:
        return conferences
    except (pd.errors.ParserError, UnicodeDecodeError, OSError) as exc:
        raise DataLoadError(str(path), "could not parse team info CSV", exc)

    frame.columns = [str(col).strip() for col in frame.columns]
    for record in frame.to_dict(orient="records"):
        team = lookup(record, "info_team")
        conference = lookup(record, "info_conference")
        if not team or not conference:
            continue
        conferences.register(team, conference)
        alias = lookup(record, "info_alias")
        if alias:
            conferences.register(alias, conference)
    logger.info("Loaded %d conferences from %s", len(conferences.conferences), path)
    return conferences
