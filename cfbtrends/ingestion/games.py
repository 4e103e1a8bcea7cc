"""Week-games CSVs: lines, final scores, moneylines and kickoff times."""

from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple
import logging
import re

import pandas as pd

from cfbtrends.exceptions import DataLoadError
from cfbtrends.models.types import GameResult, GameRow, MarketLine
from cfbtrends.normalization.aliases import lookup, lookup_number
from cfbtrends.normalization.ids import canonicalize_team_name, make_pair_key
from cfbtrends.sources import InMemoryMarketSource

logger = logging.getLogger(__name__)


MONTHS = {
    "jan": 1, "january": 1, "feb": 2, "february": 2, "mar": 3, "march": 3,
    "apr": 4, "april": 4, "may": 5, "jun": 6, "june": 6, "jul": 7, "july": 7,
    "aug": 8, "august": 8, "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10, "nov": 11, "november": 11, "dec": 12, "december": 12,
}
_MONTH = r"(jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)[a-z]*"
_DAY_OF_WEEK = re.compile(r"^(mon|tue|wed|thu|fri|sat|sun)[a-z]*,\s*", re.IGNORECASE)
_MONTH_DAY = re.compile(rf"^{_MONTH}\s+(\d{{1,2}})(?:,\s*(\d{{4}}))?$", re.IGNORECASE)
_DAY_MONTH = re.compile(rf"^(\d{{1,2}})-{_MONTH}(?:-(\d{{4}}))?$", re.IGNORECASE)
_SLASHED = re.compile(r"^(\d{1,2})/(\d{1,2})(?:/(\d{2,4}))?$")
_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_ISO_STAMP = re.compile(r"^\d{4}-\d{2}-\d{2}[T ]\d")
_CLOCK = re.compile(r"^(\d{1,2})(?::(\d{2}))?\s*([AP]M)?$", re.IGNORECASE)


def parse_month_day(text: str) -> Optional[Tuple[Optional[int], int, int]]:
    """Parse a loosely written game date into (year or None, month, day).

    Accepts ``Sep 6``, ``Sat, Sep 6, 2025``, ``6-Sep``, ``9/6``,
    ``9/6/25`` and ``2025-09-06``.
    """
    value = _DAY_OF_WEEK.sub("", str(text or "").strip())

    match = _MONTH_DAY.match(value)
    if match:
        year = int(match.group(3)) if match.group(3) else None
        return year, MONTHS[match.group(1).lower()], int(match.group(2))

    match = _DAY_MONTH.match(value)
    if match:
        year = int(match.group(3)) if match.group(3) else None
        return year, MONTHS[match.group(2).lower()], int(match.group(1))

    match = _SLASHED.match(value)
    if match:
        month, day = int(match.group(1)), int(match.group(2))
        year = None
        if match.group(3):
            raw_year = match.group(3)
            year = int("20" + raw_year) if len(raw_year) == 2 else int(raw_year)
        if 1 <= month <= 12 and 1 <= day <= 31:
            return year, month, day
        return None

    match = _ISO_DATE.match(value)
    if match:
        return int(match.group(1)), int(match.group(2)), int(match.group(3))
    return None


def parse_clock(text: Optional[str]) -> Optional[Tuple[int, int]]:
    """Parse ``7:30 PM``, ``19:30`` or ``7PM`` into (hour, minute)."""
    if not text:
        return None
    match = _CLOCK.match(str(text).strip())
    if not match:
        return None
    hour = int(match.group(1))
    minute = int(match.group(2)) if match.group(2) else 0
    meridiem = (match.group(3) or "").upper()
    if meridiem == "PM" and hour < 12:
        hour += 12
    if meridiem == "AM" and hour == 12:
        hour = 0
    if hour > 23 or minute > 59:
        return None
    return hour, minute


def _parse_stamp(text: str) -> Optional[datetime]:
    parsed = pd.to_datetime(text, errors="coerce")
    if pd.isna(parsed):
        return None
    return parsed.to_pydatetime()


def parse_kickoff(row: Mapping, season: Optional[int] = None) -> Optional[datetime]:
    """Kickoff time from a week-games row, or None when it cannot be read.

    A full datetime column wins; otherwise date + optional time, with the
    season year filling in a date written without one.
    """
    stamp = lookup(row, "datetime")
    if stamp:
        parsed = _parse_stamp(stamp)
        if parsed is not None:
            return parsed

    # A "kickoff" column sometimes carries the full timestamp
    time_text = lookup(row, "time")
    clock = parse_clock(time_text)
    if clock is None and time_text and _ISO_STAMP.match(time_text):
        parsed = _parse_stamp(time_text)
        if parsed is not None:
            return parsed

    date_text = lookup(row, "date")
    month_day = parse_month_day(date_text) if date_text else None
    if month_day is None:
        return None
    year, month, day = month_day
    hour, minute = clock or (0, 0)
    try:
        return datetime(year or season or datetime.now().year, month, day, hour, minute)
    except ValueError:
        logger.debug("Invalid calendar date %r", date_text)
        return None


def game_row_from_record(row: Mapping, week: str, season: Optional[int] = None) -> Optional[GameRow]:
    team_left = lookup(row, "team_left")
    team_right = lookup(row, "team_right")
    if not team_left or not team_right:
        return None

    final_left = lookup_number(row, "final_left")
    final_right = lookup_number(row, "final_right")
    result = None
    if final_left is not None and final_right is not None:
        result = GameResult(final_left=final_left, final_right=final_right)

    ml_left = lookup_number(row, "ml_left")
    ml_right = lookup_number(row, "ml_right")
    if ml_left is None or ml_right is None:
        ml_left = ml_right = None

    return GameRow(
        week=week,
        team_left=canonicalize_team_name(team_left),
        team_right=canonicalize_team_name(team_right),
        line=MarketLine(
            spread=lookup_number(row, "spread"),
            total=lookup_number(row, "total"),
            ml_left=ml_left,
            ml_right=ml_right,
        ),
        result=result,
        conf_left=lookup(row, "conf_left"),
        conf_right=lookup(row, "conf_right"),
        kickoff=parse_kickoff(row, season),
    )


def read_games_records(path: Path) -> List[Dict]:
    try:
        frame = pd.read_csv(path, dtype=str)
    except pd.errors.EmptyDataError:
        logger.warning("Games file %s is empty", path)
        return []
    except (pd.errors.ParserError, UnicodeDecodeError, OSError) as exc:
        raise DataLoadError(str(path), "could not parse week games CSV", exc)
    frame.columns = [str(col).strip() for col in frame.columns]
    return frame.to_dict(orient="records")


def load_week_games(paths: Iterable[Path], week: str, season: Optional[int] = None) -> InMemoryMarketSource:
    """Build a market source from the games files of one week.

    Rows without both team names are skipped; the first row seen for a
    game wins over later duplicates.
    """
    rows: List[GameRow] = []
    seen = set()
    skipped = 0
    for path in paths:
        for record in read_games_records(path):
            game = game_row_from_record(record, week, season)
            if game is None:
                skipped += 1
                continue
            pair_key = make_pair_key(game.team_left, game.team_right)
            if pair_key in seen:
                logger.debug("Duplicate game row for %s in %s", pair_key, path)
                continue
            seen.add(pair_key)
            rows.append(game)
    if skipped:
        logger.debug("Skipped %d game rows without team names (%s)", skipped, week)
    return InMemoryMarketSource(rows)
