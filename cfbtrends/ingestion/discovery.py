"""Locate sim and week-games CSVs under the data directory."""

from collections import OrderedDict
from fnmatch import fnmatch
from pathlib import Path
from typing import Dict, List, Union
import logging
import re

from cfbtrends.exceptions import DataLoadError
from cfbtrends.normalization.ids import week_number

logger = logging.getLogger(__name__)

ROOT_WEEK = "root"
SCORES_DIR = "scores"
WEEK_GAMES_PATTERN = "week*_games*.csv"
FALLBACK_GAMES_PATTERN = "games*.csv"

_WEEK_SEGMENT = re.compile(r"/(week[^/]+)/", re.IGNORECASE)


def week_from_path(path: Union[str, Path], data_root: Union[str, Path]) -> str:
    """Week id for a file: a ``weekN`` directory, else the first directory
    under the data root, else ``"root"``."""
    normalized = "/" + str(path).replace("\\", "/")
    match = _WEEK_SEGMENT.search(normalized)
    if match:
        return match.group(1).lower()
    try:
        relative = Path(path).relative_to(data_root)
    except ValueError:
        return ROOT_WEEK
    if len(relative.parts) > 1:
        return relative.parts[0].lower()
    return ROOT_WEEK


def _is_csv(path: Path) -> bool:
    return path.is_file() and path.name.lower().endswith(".csv")


def discover_score_files(data_root: Path) -> List[Path]:
    paths = [
        path for path in data_root.rglob("*")
        if _is_csv(path) and path.parent.name.lower() == SCORES_DIR
    ]
    return sorted(paths, key=lambda p: p.name)


def discover_games_files(data_root: Path) -> List[Path]:
    paths = []
    for path in data_root.rglob("*"):
        if not _is_csv(path) or path.parent.name.lower() == SCORES_DIR:
            continue
        name = path.name.lower()
        if fnmatch(name, WEEK_GAMES_PATTERN) or fnmatch(name, FALLBACK_GAMES_PATTERN):
            paths.append(path)
    return sorted(paths, key=lambda p: p.name)


def _prefer_week_games(paths: List[Path]) -> List[Path]:
    """Use ``week*_games*.csv`` files when a week has any, else ``games*.csv``."""
    primary = [p for p in paths if fnmatch(p.name.lower(), WEEK_GAMES_PATTERN)]
    return primary or paths


def week_sort_key(week_id: str):
    return (week_number(week_id), week_id)


class WeekFiles:
    def __init__(self, week: str) -> None:
        self.week = week
        self.score_files: List[Path] = []
        self.games_files: List[Path] = []

    def __repr__(self) -> str:
        return (
            f"WeekFiles(week={self.week!r}, scores={len(self.score_files)}, "
            f"games={len(self.games_files)})"
        )


def discover_weeks(data_root: Union[str, Path]) -> "OrderedDict[str, WeekFiles]":
    """Group every discovered CSV by week id, ordered by week number."""
    root = Path(data_root)
    if not root.is_dir():
        raise DataLoadError(str(root), "data directory does not exist")

    weeks: Dict[str, WeekFiles] = {}
    for path in discover_score_files(root):
        week = week_from_path(path, root)
        weeks.setdefault(week, WeekFiles(week)).score_files.append(path)
    for path in discover_games_files(root):
        week = week_from_path(path, root)
        weeks.setdefault(week, WeekFiles(week)).games_files.append(path)

    ordered: "OrderedDict[str, WeekFiles]" = OrderedDict()
    for week in sorted(weeks, key=week_sort_key):
        files = weeks[week]
        files.games_files = _prefer_week_games(files.games_files)
        ordered[week] = files
    logger.info("Discovered %d week(s) under %s", len(ordered), root)
    return ordered
