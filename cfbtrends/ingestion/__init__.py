"""CSV ingestion for sims, week games and team info."""

from cfbtrends.ingestion.discovery import discover_weeks, week_from_path
from cfbtrends.ingestion.games import game_row_from_record, load_week_games, parse_kickoff
from cfbtrends.ingestion.loader import CsvWeekLoader
from cfbtrends.ingestion.sims import ensembles_from_frame, load_ensembles, read_sim_frame
from cfbtrends.ingestion.teams import load_team_info

__all__ = [
    "CsvWeekLoader",
    "discover_weeks",
    "ensembles_from_frame",
    "game_row_from_record",
    "load_ensembles",
    "load_team_info",
    "load_week_games",
    "parse_kickoff",
    "read_sim_frame",
    "week_from_path",
]
