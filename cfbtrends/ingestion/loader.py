"""Per-week loader over the CSV data directory."""

from pathlib import Path
from typing import List, Optional, Tuple, Union
import logging

from cfbtrends.ingestion.discovery import discover_weeks
from cfbtrends.ingestion.games import load_week_games
from cfbtrends.ingestion.sims import load_ensembles
from cfbtrends.sources import InMemoryEnsembleSource, InMemoryMarketSource

logger = logging.getLogger(__name__)


class CsvWeekLoader:
    """Callable ``week_id -> (EnsembleSource, MarketSource)`` for one data dir."""

    def __init__(self, data_dir: Union[str, Path], season: Optional[int] = None) -> None:
        self.data_dir = Path(data_dir)
        self.season = season
        self._weeks = None

    @property
    def files(self):
        if self._weeks is None:
            self._weeks = discover_weeks(self.data_dir)
        return self._weeks

    def weeks(self) -> List[str]:
        """Week ids that have both sims and games files, in week order."""
        return [
            week for week, files in self.files.items()
            if files.score_files and files.games_files
        ]

    def __call__(self, week_id: str) -> Tuple[InMemoryEnsembleSource, InMemoryMarketSource]:
        files = self.files.get(week_id)
        if files is None:
            logger.warning("No files discovered for %s", week_id)
            return InMemoryEnsembleSource(), InMemoryMarketSource()
        ensembles = load_ensembles(files.score_files)
        market = load_week_games(files.games_files, week_id, self.season)
        logger.info(
            "Loaded %s: %d ensembles, %d game rows",
            week_id, len(ensembles), len(market.games()),
        )
        return ensembles, market
