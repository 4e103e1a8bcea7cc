"""CSV output helpers."""

from typing import Dict, Iterable, List
from pathlib import Path
import csv

from cfbtrends.models.grading import pick_type_of
from cfbtrends.models.types import GradedPick, ResultsSummary, TrendScored


def _write_rows(rows: List[Dict], output_path: str) -> None:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if not rows:
        path.write_text("", encoding="utf-8")
        return

    fieldnames = list(rows[0].keys())
    extra_keys = set()
    for row in rows[1:]:
        extra_keys.update(key for key in row.keys() if key not in fieldnames)
    if extra_keys:
        fieldnames.extend(sorted(extra_keys))
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)


def pick_row(pick: GradedPick) -> Dict:
    row = pick.to_dict()
    row["pick_type"] = pick_type_of(pick)
    return row


def write_picks_csv(picks: Iterable[GradedPick], output_path: str) -> None:
    """Write graded or pending picks to CSV, one row per pick."""
    _write_rows([pick_row(pick) for pick in picks], output_path)


def trend_row(trend: TrendScored, rank: int) -> Dict:
    row = {"rank": rank, "id": trend.id, "label": trend.label, "score": round(trend.score, 4)}
    row.update(trend.slice.to_dict())
    row.update(trend.metrics.to_dict())
    return row


def write_trends_csv(trends: Iterable[TrendScored], output_path: str) -> None:
    """Write ranked trends to CSV (slice, metrics and score flattened)."""
    _write_rows([trend_row(trend, rank) for rank, trend in enumerate(trends, start=1)], output_path)


def write_results_csv(summary: ResultsSummary, output_path: str) -> None:
    """Write the week-by-week split of a results summary, plus a total row."""
    rows = [week.to_dict() for week in summary.by_week]
    if rows:
        total = {
            "week": "total",
            "week_num": "",
            "wins": summary.wins,
            "losses": summary.losses,
            "pushes": summary.pushes,
            "record": summary.record,
            "units": round(summary.profit_units, 4),
        }
        rows.append(total)
    _write_rows(rows, output_path)
