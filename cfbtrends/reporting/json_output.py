"""JSON output for ranked trends, including cumulative-units timelines."""

from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence
import json

from cfbtrends.models.types import TrendScored
from cfbtrends.reporting.csv_output import trend_row


def trend_payload(trend: TrendScored, rank: int) -> Dict:
    payload = trend_row(trend, rank)
    payload["timeline"] = [
        {"bet": idx, "cumulative_units": round(cum, 4)} for idx, cum in trend.metrics.timeline
    ]
    return payload


def write_trends_json(
    trends: Sequence[TrendScored],
    output_path: str,
    sections: Optional[Mapping[str, Sequence[TrendScored]]] = None,
    market_view: str = "all",
) -> None:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    document: Dict = {
        "market_view": market_view,
        "trends": [trend_payload(trend, rank) for rank, trend in enumerate(trends, start=1)],
    }
    if sections is not None:
        document["sections"] = {
            name: [trend.id for trend in members] for name, members in sections.items()
        }
    path.write_text(json.dumps(document, indent=2), encoding="utf-8")


def read_trends_json(path: str) -> List[Dict]:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    return list(payload.get("trends", []))
