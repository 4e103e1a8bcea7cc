"""Core records shared by grading, trend mining and reporting."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple
import math

from cfbtrends.constants import CONFERENCE_SCOPE, PUSH
from cfbtrends.normalization.ids import week_number


@dataclass(frozen=True)
class SimulationPair:
    points_left: float
    points_right: float


@dataclass
class Ensemble:
    """Simulated final scores for one game, oriented to ``team_a``."""

    team_a: str
    team_b: str
    pairs: List[SimulationPair] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.pairs)


@dataclass(frozen=True)
class MarketLine:
    spread: Optional[float] = None
    total: Optional[float] = None
    ml_left: Optional[float] = None
    ml_right: Optional[float] = None

    @property
    def has_moneyline(self) -> bool:
        return self.ml_left is not None and self.ml_right is not None


@dataclass(frozen=True)
class GameResult:
    final_left: float
    final_right: float


@dataclass
class GameRow:
    """One market/result feed row for a game, left/right as the book lists it."""

    week: str
    team_left: str
    team_right: str
    line: MarketLine
    result: Optional[GameResult] = None
    conf_left: Optional[str] = None
    conf_right: Optional[str] = None
    kickoff: Optional[datetime] = None

    @property
    def week_num(self) -> int:
        return week_number(self.week)


@dataclass
class GradedPick:
    market: str
    pick_side: str
    pick_text: str
    confidence: float
    is_positive_ev: bool
    stake_risk: float
    week: str
    week_num: int
    key: str
    team_left: str
    team_right: str
    result: Optional[str] = None
    units: float = 0.0
    is_favorite_pick: bool = False
    is_underdog_pick: bool = False
    is_over_pick: bool = False
    is_under_pick: bool = False
    kickoff: Optional[datetime] = None
    conf_left: Optional[str] = None
    conf_right: Optional[str] = None

    @property
    def is_graded(self) -> bool:
        return self.result is not None

    @property
    def is_pending(self) -> bool:
        return self.result is None

    @property
    def is_push(self) -> bool:
        return self.result == PUSH

    @property
    def kickoff_ts(self) -> float:
        if self.kickoff is None:
            return math.inf
        return self.kickoff.timestamp()

    def to_dict(self) -> Dict:
        return {
            "week": self.week,
            "week_num": self.week_num,
            "kickoff": self.kickoff.isoformat() if self.kickoff else "",
            "key": self.key,
            "market": self.market,
            "team_left": self.team_left,
            "team_right": self.team_right,
            "conf_left": self.conf_left or "",
            "conf_right": self.conf_right or "",
            "pick_side": self.pick_side,
            "pick_text": self.pick_text,
            "confidence": round(self.confidence, 4),
            "is_positive_ev": self.is_positive_ev,
            "is_favorite_pick": self.is_favorite_pick,
            "is_underdog_pick": self.is_underdog_pick,
            "is_over_pick": self.is_over_pick,
            "is_under_pick": self.is_under_pick,
            "result": self.result or "",
            "units": round(self.units, 4),
            "stake_risk": round(self.stake_risk, 4),
        }


@dataclass(frozen=True)
class TrendSlice:
    market: str
    pick_type: str
    confidence_band: Tuple[int, int]
    game_scope: str
    conference: str

    def identity(self) -> Tuple:
        return (
            self.market,
            self.pick_type,
            tuple(self.confidence_band),
            self.game_scope,
            self.conference,
        )

    @property
    def is_conference_scope(self) -> bool:
        return self.game_scope == CONFERENCE_SCOPE

    def to_dict(self) -> Dict:
        return {
            "market": self.market,
            "pick_type": self.pick_type,
            "band_low": self.confidence_band[0],
            "band_high": self.confidence_band[1],
            "game_scope": self.game_scope,
            "conference": self.conference,
        }


@dataclass
class TrendMetrics:
    n_bets: int
    n_weeks: int
    profit_units: float
    risk_sum: float
    ror: float
    win_pct: float
    consistency: float
    max_drawdown: float
    ewma_profit: float
    sharpeish: float
    wilson_lower_vs_breakeven: float
    timeline: List[Tuple[int, float]] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "n_bets": self.n_bets,
            "n_weeks": self.n_weeks,
            "profit_units": round(self.profit_units, 4),
            "risk_sum": round(self.risk_sum, 4),
            "ror": round(self.ror, 4),
            "win_pct": round(self.win_pct, 4),
            "consistency": round(self.consistency, 4),
            "max_drawdown": round(self.max_drawdown, 4),
            "ewma_profit": round(self.ewma_profit, 4),
            "sharpeish": round(self.sharpeish, 4),
            "wilson_lower_vs_breakeven": round(self.wilson_lower_vs_breakeven, 4),
        }


@dataclass
class WeekRecord:
    week: str
    week_num: int
    wins: int = 0
    losses: int = 0
    pushes: int = 0
    units: float = 0.0

    @property
    def record(self) -> str:
        return f"{self.wins}-{self.losses}-{self.pushes}"

    def to_dict(self) -> Dict:
        return {
            "week": self.week,
            "week_num": self.week_num,
            "wins": self.wins,
            "losses": self.losses,
            "pushes": self.pushes,
            "record": self.record,
            "units": round(self.units, 4),
        }


@dataclass
class ResultsSummary:
    """Record, profit and weekly splits for a filtered set of graded picks."""

    n_picks: int
    wins: int
    losses: int
    pushes: int
    profit_units: float
    risk_sum: float
    ror: float
    win_pct: float
    by_week: List[WeekRecord] = field(default_factory=list)
    timeline: List[Tuple[int, float]] = field(default_factory=list)

    @property
    def record(self) -> str:
        return f"{self.wins}-{self.losses}-{self.pushes}"

    def to_dict(self) -> Dict:
        return {
            "n_picks": self.n_picks,
            "record": self.record,
            "wins": self.wins,
            "losses": self.losses,
            "pushes": self.pushes,
            "profit_units": round(self.profit_units, 4),
            "risk_sum": round(self.risk_sum, 4),
            "ror": round(self.ror, 4),
            "win_pct": round(self.win_pct, 4),
        }


@dataclass
class TrendScored:
    slice: TrendSlice
    metrics: TrendMetrics
    score: float

    @property
    def id(self) -> str:
        return "|".join(str(part) for part in self.slice.identity())

    @property
    def label(self) -> str:
        from cfbtrends.trends.slices import slice_label

        return slice_label(self.slice)
