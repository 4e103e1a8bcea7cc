"""CLI entry points for grading and trend mining."""

from dataclasses import asdict
from pathlib import Path
from typing import List, Optional, Sequence, Tuple
import argparse
import hashlib
import json
import logging

from cfbtrends.config import Config
from cfbtrends.constants import (
    CONFERENCE_SCOPE,
    MARKET_VIEWS,
    NONCONFERENCE_SCOPE,
    PICK_TYPES_BY_MARKET,
    normalize_market,
)
from cfbtrends.engine import TrendEngine, WeekGrades
from cfbtrends.exceptions import CFBTrendsError, ConfigError
from cfbtrends.ingestion import CsvWeekLoader, load_team_info
from cfbtrends.models.types import GradedPick, TrendScored, TrendSlice
from cfbtrends.ops import configure_logging, get_metrics_recorder
from cfbtrends.reporting import write_picks_csv, write_results_csv, write_trends_csv, write_trends_json
from cfbtrends.runtime.manifest import RunManifest
from cfbtrends.trends import parse_band, slice_label

logger = logging.getLogger(__name__)

_SCOPE_ALIASES = {
    "conference": CONFERENCE_SCOPE,
    "conf": CONFERENCE_SCOPE,
    "nonconference": NONCONFERENCE_SCOPE,
    "non-conference": NONCONFERENCE_SCOPE,
    "nonconf": NONCONFERENCE_SCOPE,
    "non-conf": NONCONFERENCE_SCOPE,
}


def _hash_config(config: Config) -> str:
    payload = json.dumps(asdict(config), sort_keys=True).encode("utf-8")
    return hashlib.sha256(payload).hexdigest()


def _write_manifest(manifest: RunManifest, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    manifest_path = output_dir / f"manifest_{manifest.run_id}.json"
    manifest.outputs["manifest"] = str(manifest_path)
    manifest_path.write_text(
        json.dumps(manifest.to_dict(), indent=2, sort_keys=True),
        encoding="utf-8",
    )
    return manifest_path


def _load_run(
    command: str,
    config_path: Optional[str],
    data_dir: Optional[str],
    output_dir: Optional[str],
) -> Tuple[Config, RunManifest, CsvWeekLoader, TrendEngine]:
    config = Config.load(config_path=config_path)
    if data_dir:
        config.data_dir = data_dir
    if output_dir:
        config.output_dir = output_dir

    manifest = RunManifest(command=command)
    manifest.config_hash = _hash_config(config)
    configure_logging(run_id=manifest.run_id)
    if config_path:
        logger.info("Loaded config from %s", config_path)

    loader = CsvWeekLoader(config.data_dir, season=config.season)
    conferences = load_team_info(config.team_info_path)
    engine = TrendEngine(loader, conferences=conferences, config=config)
    return config, manifest, loader, engine


def _select_weeks(loader: CsvWeekLoader, week: Optional[str] = None) -> List[str]:
    weeks = loader.weeks()
    if week:
        weeks = [w for w in weeks if w == week.strip().lower()]
    return weeks


def _finish(manifest: RunManifest, config: Config, grades: WeekGrades) -> None:
    manifest.counts.update({
        "graded": len(grades.graded),
        "pending": len(grades.pending),
    })
    _write_manifest(manifest, Path(config.output_dir) / "runs")
    logger.info("Run metrics: %s", json.dumps(get_metrics_recorder().snapshot(), sort_keys=True))


def _format_trend(rank: int, trend: TrendScored) -> str:
    m = trend.metrics
    return (
        f"{rank:>2}. {trend.label}  score={trend.score:+.3f}  "
        f"bets={m.n_bets} weeks={m.n_weeks} units={m.profit_units:+.2f} "
        f"ror={m.ror:+.1%} win={m.win_pct:.1%}"
    )


def _format_pick(pick: GradedPick) -> str:
    outcome = pick.result or "pending"
    return (
        f"{pick.week:<8} {pick.team_left} vs {pick.team_right}: {pick.pick_text} "
        f"({pick.confidence:.1%}) -> {outcome} {pick.units:+.2f}u"
    )


def run_grade(
    config_path: Optional[str] = None,
    data_dir: Optional[str] = None,
    output_dir: Optional[str] = None,
    week: Optional[str] = None,
) -> int:
    """Grade every discovered week (or one) and write picks CSVs."""
    try:
        config, manifest, loader, engine = _load_run("grade", config_path, data_dir, output_dir)
        weeks = _select_weeks(loader, week=week)
        if not weeks:
            logger.warning("No weeks with both sims and games files under %s", config.data_dir)
            return 1
        manifest.weeks = weeks
        grades = engine.grade_weeks(weeks)
    except CFBTrendsError as exc:
        logger.error("%s", exc)
        return 1

    output_root = Path(config.output_dir)
    graded_path = output_root / "graded_picks.csv"
    pending_path = output_root / "pending_picks.csv"
    write_picks_csv(grades.graded, str(graded_path))
    write_picks_csv(grades.pending, str(pending_path))
    manifest.outputs["graded_picks"] = str(graded_path)
    manifest.outputs["pending_picks"] = str(pending_path)
    logger.info("Wrote %d graded and %d pending picks", len(grades.graded), len(grades.pending))
    _finish(manifest, config, grades)
    return 0


def run_rank(
    config_path: Optional[str] = None,
    data_dir: Optional[str] = None,
    output_dir: Optional[str] = None,
    market: str = "all",
    conference: str = "all",
) -> int:
    """Grade all weeks, rank trends for a market view and write the pool."""
    try:
        config, manifest, loader, engine = _load_run("rank", config_path, data_dir, output_dir)
        weeks = _select_weeks(loader)
        if not weeks:
            logger.warning("No weeks with both sims and games files under %s", config.data_dir)
            return 1
        manifest.weeks = weeks
        grades = engine.grade_weeks(weeks)
        ranked = engine.rank_trends(grades.graded, market_view=market)
    except CFBTrendsError as exc:
        logger.error("%s", exc)
        return 1

    sections = engine.trend_sections(ranked, conference_focus=conference)
    for name, members in sections.items():
        print(f"\n== Top {name} trends ==")
        if not members:
            print("   (none passed the sample guardrails)")
        for rank, trend in enumerate(members, start=1):
            print(_format_trend(rank, trend))

    output_root = Path(config.output_dir)
    csv_path = output_root / "trends.csv"
    json_path = output_root / "trends.json"
    view = normalize_market(market) or market
    write_trends_csv(ranked, str(csv_path))
    write_trends_json(ranked, str(json_path), sections=sections, market_view=view)
    manifest.outputs["trends_csv"] = str(csv_path)
    manifest.outputs["trends_json"] = str(json_path)
    manifest.counts["trends"] = len(ranked)
    _finish(manifest, config, grades)
    return 0


def _build_slice(market: str, pick_type: str, band: str, scope: str, conference: str) -> TrendSlice:
    canonical_market = normalize_market(market)
    if canonical_market not in PICK_TYPES_BY_MARKET:
        raise ConfigError("market", f"expected one of {', '.join(PICK_TYPES_BY_MARKET)}, got {market!r}")
    pick_type = (pick_type or "").strip().lower()
    if pick_type not in PICK_TYPES_BY_MARKET[canonical_market]:
        raise ConfigError("pick_type", f"{pick_type!r} is not valid for {canonical_market}")
    game_scope = _SCOPE_ALIASES.get((scope or "").strip().lower())
    if game_scope is None:
        raise ConfigError("scope", f"expected conference or nonconference, got {scope!r}")
    if not conference or not conference.strip():
        raise ConfigError("conference", "a conference name is required")
    return TrendSlice(
        market=canonical_market,
        pick_type=pick_type,
        confidence_band=parse_band(band),
        game_scope=game_scope,
        conference=conference.strip(),
    )


def run_drill_down(
    config_path: Optional[str] = None,
    data_dir: Optional[str] = None,
    output_dir: Optional[str] = None,
    market: str = "spread",
    pick_type: str = "favorite",
    band: str = "60-70",
    scope: str = "conference",
    conference: str = "",
    week_num: int = 1,
) -> int:
    """List the picks of one week that fall inside a single trend slice."""
    try:
        trend_slice = _build_slice(market, pick_type, band, scope, conference)
        config, manifest, loader, engine = _load_run("drill-down", config_path, data_dir, output_dir)
        weeks = _select_weeks(loader)
        manifest.weeks = weeks
        grades = engine.grade_weeks(weeks)
    except CFBTrendsError as exc:
        logger.error("%s", exc)
        return 1

    metrics = engine.slice_metrics(grades.graded, trend_slice)
    matches = engine.matches_for_week(grades.all_picks, trend_slice, week_num)
    print(f"{slice_label(trend_slice)}")
    print(
        f"season: bets={metrics.n_bets} weeks={metrics.n_weeks} "
        f"units={metrics.profit_units:+.2f} win={metrics.win_pct:.1%}"
    )
    print(f"week {week_num}: {len(matches)} matching pick(s)")
    for pick in matches:
        print("  " + _format_pick(pick))

    output_path = Path(config.output_dir) / f"drilldown_week{week_num}.csv"
    write_picks_csv(matches, str(output_path))
    manifest.outputs["drilldown"] = str(output_path)
    manifest.counts["matches"] = len(matches)
    _finish(manifest, config, grades)
    return 0


def run_results(
    config_path: Optional[str] = None,
    data_dir: Optional[str] = None,
    output_dir: Optional[str] = None,
    market: str = "all",
    pick_type: str = "all",
    positive_ev_only: bool = False,
    conf_min: float = 0.0,
    conf_max: float = 100.0,
) -> int:
    """Summarize graded results under a market/pick-type/EV/confidence filter."""
    try:
        config, manifest, loader, engine = _load_run("results", config_path, data_dir, output_dir)
        weeks = _select_weeks(loader)
        if not weeks:
            logger.warning("No weeks with both sims and games files under %s", config.data_dir)
            return 1
        manifest.weeks = weeks
        grades = engine.grade_weeks(weeks)
        summary = engine.summarize_results(
            grades.graded,
            market=market,
            pick_type=pick_type,
            positive_ev_only=positive_ev_only,
            conf_min=conf_min,
            conf_max=conf_max,
        )
    except CFBTrendsError as exc:
        logger.error("%s", exc)
        return 1

    print(f"Graded picks: {summary.n_picks}")
    print(
        f"Record: {summary.record}  Profit: {summary.profit_units:+.2f}u  "
        f"Win%: {summary.win_pct:.1%}  RoR: {summary.ror:+.1%}"
    )
    if not summary.by_week:
        print("   (no graded games in this filter)")
    for week in summary.by_week:
        print(f"  {week.week:<8} {week.record:<8} {week.units:+.2f}u")

    output_path = Path(config.output_dir) / "results_by_week.csv"
    write_results_csv(summary, str(output_path))
    manifest.outputs["results"] = str(output_path)
    manifest.counts["results"] = summary.n_picks
    _finish(manifest, config, grades)
    return 0


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", dest="config_path", help="Path to config file (.env or .json)")
    parser.add_argument("--data-dir", dest="data_dir", help="Override CFBTRENDS_DATA_DIR")
    parser.add_argument("--output-dir", dest="output_dir", help="Override CFBTRENDS_OUTPUT_DIR")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="College football sim grading and trend mining")
    subparsers = parser.add_subparsers(dest="command", required=True)

    grade = subparsers.add_parser("grade", help="Grade sims against lines and finals")
    _add_common(grade)
    grade.add_argument("--week", dest="week", help="Only grade this week id (e.g. week3)")

    rank = subparsers.add_parser("rank", help="Rank betting trends over graded picks")
    _add_common(rank)
    rank.add_argument(
        "--market",
        dest="market",
        default="all",
        help=f"Market view: {', '.join(MARKET_VIEWS)} (ml accepted)",
    )
    rank.add_argument("--conference", dest="conference", default="all", help="Focus the conference section")

    drill = subparsers.add_parser("drill-down", help="Show one week's picks inside a trend slice")
    _add_common(drill)
    drill.add_argument("--market", dest="market", required=True)
    drill.add_argument("--pick-type", dest="pick_type", required=True)
    drill.add_argument("--band", dest="band", required=True, help="Confidence band, e.g. 60-70")
    drill.add_argument("--scope", dest="scope", default="conference", help="conference or nonconference")
    drill.add_argument("--conference", dest="conference", required=True)
    drill.add_argument("--week-num", dest="week_num", type=int, required=True)

    results = subparsers.add_parser("results", help="Record, profit and weekly splits of graded picks")
    _add_common(results)
    results.add_argument("--market", dest="market", default="all")
    results.add_argument("--pick-type", dest="pick_type", default="all", help="favorite, underdog, over or under")
    results.add_argument("--positive-ev", dest="positive_ev_only", action="store_true")
    results.add_argument("--conf-min", dest="conf_min", type=float, default=0.0, help="Minimum confidence %%")
    results.add_argument("--conf-max", dest="conf_max", type=float, default=100.0, help="Maximum confidence %%")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "grade":
        return run_grade(
            config_path=args.config_path,
            data_dir=getattr(args, "data_dir", None),
            output_dir=getattr(args, "output_dir", None),
            week=getattr(args, "week", None),
        )
    if args.command == "rank":
        return run_rank(
            config_path=args.config_path,
            data_dir=getattr(args, "data_dir", None),
            output_dir=getattr(args, "output_dir", None),
            market=getattr(args, "market", "all"),
            conference=getattr(args, "conference", "all"),
        )
    if args.command == "drill-down":
        return run_drill_down(
            config_path=args.config_path,
            data_dir=getattr(args, "data_dir", None),
            output_dir=getattr(args, "output_dir", None),
            market=args.market,
            pick_type=args.pick_type,
            band=args.band,
            scope=getattr(args, "scope", "conference"),
            conference=args.conference,
            week_num=args.week_num,
        )
    if args.command == "results":
        return run_results(
            config_path=args.config_path,
            data_dir=getattr(args, "data_dir", None),
            output_dir=getattr(args, "output_dir", None),
            market=args.market,
            pick_type=args.pick_type,
            positive_ev_only=args.positive_ev_only,
            conf_min=args.conf_min,
            conf_max=args.conf_max,
        )
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
