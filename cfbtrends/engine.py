"""Trend engine facade: grade weeks, rank trends, drill into a slice."""

from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple
import logging

from cfbtrends.config import Config
from cfbtrends.models.grading import grade_game
from cfbtrends.models.types import GameRow, GradedPick, ResultsSummary, TrendScored, TrendSlice
from cfbtrends.ops.metrics import MetricsRecorder, get_metrics_recorder, timed
from cfbtrends.sources import ConferenceLookup, EnsembleSource, MarketSource
from cfbtrends.trends import metrics as trend_metrics
from cfbtrends.trends import ranking

logger = logging.getLogger(__name__)

WeekLoader = Callable[[str], Tuple[EnsembleSource, MarketSource]]


@dataclass
class WeekGrades:
    graded: List[GradedPick] = field(default_factory=list)
    pending: List[GradedPick] = field(default_factory=list)

    @property
    def all_picks(self) -> List[GradedPick]:
        return self.graded + self.pending

    def extend(self, other: "WeekGrades") -> None:
        self.graded.extend(other.graded)
        self.pending.extend(other.pending)


class TrendEngine:
    """Grades sim ensembles against market rows and mines trends over the result.

    ``week_loader(week_id)`` returns the ensemble and market sources for
    one week; ``conferences`` fills in conference names the market rows
    leave blank and fixes the candidate conference list.
    """

    def __init__(
        self,
        week_loader: WeekLoader,
        conferences: Optional[ConferenceLookup] = None,
        config: Optional[Config] = None,
        recorder: Optional[MetricsRecorder] = None,
    ) -> None:
        self.week_loader = week_loader
        self.conferences = conferences
        self.config = config or Config()
        self.pricing = self.config.pricing()
        self.settings = self.config.ranking_settings()
        self.recorder = recorder or get_metrics_recorder()

    def _resolve_conferences(self, game: GameRow) -> GameRow:
        if self.conferences is None or (game.conf_left and game.conf_right):
            return game
        return replace(
            game,
            conf_left=game.conf_left or self.conferences.of(game.team_left),
            conf_right=game.conf_right or self.conferences.of(game.team_right),
        )

    def grade_week(self, week_id: str) -> WeekGrades:
        ensembles, market = self.week_loader(week_id)
        grades = WeekGrades()
        for game in market.games():
            game = self._resolve_conferences(game)
            ensemble = ensembles.get_pairs(game.team_left, game.team_right)
            for pick in grade_game(ensemble, game, self.pricing, self.recorder):
                if pick.is_graded:
                    grades.graded.append(pick)
                else:
                    grades.pending.append(pick)
        logger.info(
            "Graded %s: %d graded, %d pending",
            week_id, len(grades.graded), len(grades.pending),
        )
        return grades

    def grade_weeks(self, week_ids: Iterable[str]) -> WeekGrades:
        combined = WeekGrades()
        for week_id in week_ids:
            combined.extend(self.grade_week(week_id))
        return combined

    def conference_list(self, picks: Iterable[GradedPick]) -> List[str]:
        if self.conferences is not None and self.conferences.conferences:
            return self.conferences.conferences
        return ranking.conferences_from_picks(picks)

    def rank_trends(self, picks: Sequence[GradedPick], market_view: str = "all") -> List[TrendScored]:
        with timed("ranking.rank_trends", self.recorder):
            ranked = ranking.rank_trends(
                picks,
                market_view=market_view,
                conferences=self.conference_list(picks),
                settings=self.settings,
            )
        logger.info("Ranked %d trends (view=%s)", len(ranked), market_view)
        return ranked

    def trend_sections(self, ranked: Sequence[TrendScored], conference_focus: str = "all") -> Dict[str, List[TrendScored]]:
        return ranking.trend_sections(ranked, top_n=self.config.top_n, conference_focus=conference_focus)

    def matches_for_week(
        self,
        picks: Iterable[GradedPick],
        trend_slice: TrendSlice,
        week_num: int,
    ) -> List[GradedPick]:
        """Graded and pending picks of one week that fall inside ``trend_slice``."""
        return trend_metrics.matches_for_week(picks, trend_slice, week_num)

    def slice_metrics(self, picks: Iterable[GradedPick], trend_slice: TrendSlice):
        return trend_metrics.slice_metrics(
            picks,
            trend_slice,
            break_even=self.settings.break_even,
            half_life_weeks=self.settings.half_life_weeks,
        )

    def summarize_results(
        self,
        picks: Iterable[GradedPick],
        market: str = "all",
        pick_type: str = "all",
        positive_ev_only: bool = False,
        conf_min: float = 0.0,
        conf_max: float = 100.0,
    ) -> ResultsSummary:
        summary = trend_metrics.summarize_results(
            picks,
            market=market,
            pick_type=pick_type,
            positive_ev_only=positive_ev_only,
            conf_min=conf_min,
            conf_max=conf_max,
        )
        self.recorder.increment("results.summarized_picks", summary.n_picks)
        return summary
