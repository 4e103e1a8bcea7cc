"""Report writers."""

from cfbtrends.reporting.csv_output import write_picks_csv, write_results_csv, write_trends_csv
from cfbtrends.reporting.json_output import write_trends_json

__all__ = ["write_picks_csv", "write_results_csv", "write_trends_csv", "write_trends_json"]
