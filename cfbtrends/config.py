"""Configuration for grading and trend ranking runs."""

from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional
import json
import os

from cfbtrends.constants import (
    DEFAULT_HALF_LIFE_WEEKS,
    DEFAULT_MIN_BETS,
    DEFAULT_MIN_WEEKS,
    DEFAULT_POOL_SIZE,
    DEFAULT_SIZE_SHRINK_K,
    DEFAULT_SPREAD_TOTAL_EV_THRESHOLD,
    DEFAULT_TOP_N,
    DEFAULT_VIG_ODDS,
)
from cfbtrends.models.pricing import PricingModel
from cfbtrends.trends.ranking import RankingSettings


_DEFAULT_DATA_DIR = "data"
_DEFAULT_TEAM_INFO_PATH = "data/team_info.csv"
_DEFAULT_OUTPUT_DIR = "output"


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def _coerce_float(value: Optional[str], default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _coerce_positive_float(value: Optional[str], default: float) -> float:
    number = _coerce_float(value, default)
    return number if number > 0 else default


def _coerce_int(value: Optional[str], default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _coerce_probability(value: Optional[str], default: float) -> float:
    number = _coerce_float(value, default)
    return number if 0.0 < number < 1.0 else default


def _parse_env_file(path: Path) -> Dict[str, str]:
    data: Dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        data[key.strip()] = _strip_quotes(value.strip())
    return data


def _load_config_data(path: Path) -> Dict[str, str]:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    if path.suffix.lower() == ".json":
        payload = json.loads(path.read_text(encoding="utf-8"))
        return {str(k): str(v) for k, v in payload.items()}
    return _parse_env_file(path)


def _settings_from(source: Dict[str, str], base: "Config") -> "Config":
    return Config(
        data_dir=source.get("CFBTRENDS_DATA_DIR", base.data_dir),
        team_info_path=source.get("CFBTRENDS_TEAM_INFO_PATH", base.team_info_path),
        output_dir=source.get("CFBTRENDS_OUTPUT_DIR", base.output_dir),
        season=_coerce_int(source.get("SEASON"), base.season),
        spread_total_ev_threshold=_coerce_probability(
            source.get("SPREAD_TOTAL_EV_THRESHOLD"),
            base.spread_total_ev_threshold,
        ),
        vig_odds=_coerce_float(source.get("VIG_ODDS"), base.vig_odds),
        min_bets=_coerce_int(source.get("MIN_BETS"), base.min_bets),
        min_weeks=_coerce_int(source.get("MIN_WEEKS"), base.min_weeks),
        size_shrink_k=_coerce_positive_float(source.get("SIZE_SHRINK_K"), base.size_shrink_k),
        half_life_weeks=_coerce_positive_float(source.get("HALF_LIFE_WEEKS"), base.half_life_weeks),
        trend_pool_size=_coerce_int(source.get("TREND_POOL_SIZE"), base.trend_pool_size),
        top_n=_coerce_int(source.get("TOP_N"), base.top_n),
    )


@dataclass
class Config:
    # Paths
    data_dir: str = _DEFAULT_DATA_DIR
    team_info_path: str = _DEFAULT_TEAM_INFO_PATH
    output_dir: str = _DEFAULT_OUTPUT_DIR
    season: int = 0

    # Pricing
    spread_total_ev_threshold: float = DEFAULT_SPREAD_TOTAL_EV_THRESHOLD
    vig_odds: float = DEFAULT_VIG_ODDS

    # Ranking
    min_bets: int = DEFAULT_MIN_BETS
    min_weeks: int = DEFAULT_MIN_WEEKS
    size_shrink_k: float = DEFAULT_SIZE_SHRINK_K
    half_life_weeks: float = DEFAULT_HALF_LIFE_WEEKS
    trend_pool_size: int = DEFAULT_POOL_SIZE
    top_n: int = DEFAULT_TOP_N

    def __post_init__(self) -> None:
        if not self.season:
            self.season = datetime.now().year

    @classmethod
    def from_env(cls) -> "Config":
        return _settings_from(dict(os.environ), cls())

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Config":
        """Environment settings, overridden by a ``KEY=VALUE`` or JSON file."""
        env_config = cls.from_env()
        if not config_path:
            return env_config
        return _settings_from(_load_config_data(Path(config_path)), env_config)

    def to_dict(self) -> Dict[str, str]:
        return {k: str(v) for k, v in asdict(self).items()}

    def pricing(self) -> PricingModel:
        return PricingModel(vig_odds=self.vig_odds, ev_threshold=self.spread_total_ev_threshold)

    def ranking_settings(self) -> RankingSettings:
        # Wilson edge is measured against the vig break-even, not the EV cutoff.
        return RankingSettings(
            min_bets=self.min_bets,
            min_weeks=self.min_weeks,
            size_shrink_k=self.size_shrink_k,
            half_life_weeks=self.half_life_weeks,
            pool_size=self.trend_pool_size,
            break_even=self.pricing().break_even,
        )
