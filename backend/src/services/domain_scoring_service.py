"""Domain scoring service for picking today's best ski sector."""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from models.ski_data import Lift, Piste, PisteDifficulty, SnowQualityCode, WeatherStation
from services.sector_weather_resolver import SectorWeatherResolver
from utils.labels import status_colour

logger = logging.getLogger(__name__)


def _format_cm(value: float) -> str:
    return f"{value:g}cm"


@dataclass
class DomainScore:
    """Desirability score for one sector, with the reasons behind it."""

    sector: str
    name: str
    score: int
    lifts_open: int
    lifts_total: int
    weather: WeatherStation | None
    reasons: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "sector": self.sector,
            "name": self.name,
            "score": self.score,
            "lifts_open": self.lifts_open,
            "lifts_total": self.lifts_total,
            "weather": self.weather.model_dump() if self.weather else None,
            "reasons": list(self.reasons),
        }


@dataclass
class DomainRecommendation:
    """Today's pick plus up to two alternatives."""

    ranking: list[DomainScore]
    max_avalanche_risk: int
    avalanche_advice: str | None

    @property
    def pick(self) -> DomainScore | None:
        return self.ranking[0] if self.ranking else None

    @property
    def alternatives(self) -> list[DomainScore]:
        return self.ranking[1:3]

    @property
    def limited_skiing(self) -> bool:
        """True when no sector qualifies, i.e. the fallback state."""
        return not self.ranking

    @property
    def highlight(self) -> str | None:
        """Tag describing what makes the pick stand out."""
        top = self.pick
        if top is None:
            return None
        station = top.weather
        if station and station.snow_quality_code == SnowQualityCode.FRAICHE:
            return "fresh_snow"
        if station and station.wind_speed_kmh and station.wind_speed_kmh > 40:
            return "windy"
        if top.score > 60:
            return "top_rated"
        return "thumbs_up"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "pick": self.pick.to_dict() if self.pick else None,
            "alternatives": [s.to_dict() for s in self.alternatives],
            "highlight": self.highlight,
            "limited_skiing": self.limited_skiing,
            "max_avalanche_risk": self.max_avalanche_risk,
            "avalanche_advice": self.avalanche_advice,
            "ranking": [s.to_dict() for s in self.ranking],
        }


@dataclass
class SectorSummary:
    """Overview of one sector for the sector list."""

    sector: str
    name: str
    lifts_open: int
    lifts_total: int
    status: str
    pistes_by_difficulty: dict[str, dict[str, int]]
    weather: WeatherStation | None
    lifts: list[Lift] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "sector": self.sector,
            "name": self.name,
            "lifts_open": self.lifts_open,
            "lifts_total": self.lifts_total,
            "status": self.status,
            "pistes_by_difficulty": self.pistes_by_difficulty,
            "weather": self.weather.model_dump() if self.weather else None,
            "lifts": [
                {
                    "lift_name": lift.lift_name,
                    "status": lift.status,
                    "type_label": lift.transport_type.label if lift.transport_type else None,
                }
                for lift in self.lifts
            ],
        }


class DomainScoringService:
    """Scores sectors on lift availability, piste variety and weather."""

    # Lift availability
    POINTS_PER_OPEN_LIFT = 4
    MOST_LIFTS_RATIO = 0.75
    MOST_LIFTS_BONUS = 15
    HALF_LIFTS_RATIO = 0.5
    HALF_LIFTS_BONUS = 8

    # Piste variety
    POINTS_PER_OPEN_PISTE = 2
    VARIETY_MIN_DIFFICULTIES = 3
    VARIETY_BONUS = 10

    # Wind bands (upper bound km/h, points); anything above the last band
    # scores STRONG_WIND_PENALTY
    WIND_BANDS = ((20, 15), (40, 10), (60, 5))
    STRONG_WIND_PENALTY = -10

    # Snow
    FRESH_SNOW_BONUS = 10
    DEEP_FRESH_SNOW_CM = 20
    DEEP_FRESH_SNOW_BONUS = 5
    SOFT_SNOW_BONUS = 5
    DEEP_BASE_CM = 100
    DEEP_BASE_BONUS = 5

    # Ideal morning temperature range (inclusive)
    IDEAL_TEMP_RANGE = (-10, -2)
    IDEAL_TEMP_BONUS = 5

    # Minimum viable area
    MIN_OPEN_LIFTS = 2
    SMALL_AREA_PENALTY = 50

    def __init__(self, resolver: SectorWeatherResolver | None = None):
        """Initialize the scoring service.

        Args:
            resolver: SectorWeatherResolver used to attach stations to sectors
        """
        self.resolver = resolver or SectorWeatherResolver()

    def score_domain(
        self,
        sector: str,
        lifts: Sequence[Lift],
        pistes: Sequence[Piste],
        weather: WeatherStation | None,
    ) -> DomainScore:
        """Score a single sector.

        Points accumulate from open lifts and their ratio, open pistes and
        their difficulty spread, then wind, snow surface, base depth and
        morning temperature when a station is known. Sectors with fewer than
        two open lifts lose 50 points, floored at zero.
        """
        score = 0
        reasons: list[str] = []

        lifts_open = sum(1 for lift in lifts if lift.is_open)
        lifts_total = len(lifts)
        lift_ratio = lifts_open / lifts_total if lifts_total > 0 else 0

        score += lifts_open * self.POINTS_PER_OPEN_LIFT
        if lift_ratio >= self.MOST_LIFTS_RATIO:
            score += self.MOST_LIFTS_BONUS
            reasons.append("most lifts running")
        elif lift_ratio >= self.HALF_LIFTS_RATIO:
            score += self.HALF_LIFTS_BONUS

        open_pistes = [piste for piste in pistes if piste.is_open]
        difficulties = {piste.difficulty for piste in open_pistes}
        score += len(open_pistes) * self.POINTS_PER_OPEN_PISTE
        if len(difficulties) >= self.VARIETY_MIN_DIFFICULTIES:
            score += self.VARIETY_BONUS
            reasons.append("great variety of runs")

        if weather is not None:
            score += self._score_weather(weather, reasons)

        if lifts_open < self.MIN_OPEN_LIFTS:
            score = max(0, score - self.SMALL_AREA_PENALTY)

        return DomainScore(
            sector=sector,
            name=self.resolver.display_name(sector),
            score=score,
            lifts_open=lifts_open,
            lifts_total=lifts_total,
            weather=weather,
            reasons=reasons,
        )

    def _score_weather(self, weather: WeatherStation, reasons: list[str]) -> int:
        points = 0

        wind = weather.wind_speed_kmh or 0
        for upper, band_points in self.WIND_BANDS:
            if wind < upper:
                points += band_points
                if upper == self.WIND_BANDS[0][0]:
                    reasons.append("calm winds")
                break
        else:
            points += self.STRONG_WIND_PENALTY

        quality = weather.snow_quality_code
        if quality == SnowQualityCode.FRAICHE:
            points += self.FRESH_SNOW_BONUS
            fresh_cm = weather.last_snowfall_cm
            if fresh_cm and fresh_cm > self.DEEP_FRESH_SNOW_CM:
                points += self.DEEP_FRESH_SNOW_BONUS
                reasons.append(f"{_format_cm(fresh_cm)} fresh snow")
            else:
                reasons.append("fresh snow")
        elif quality == SnowQualityCode.DOUCE:
            points += self.SOFT_SNOW_BONUS
            reasons.append("soft snow")

        if weather.snow_depth_cm and weather.snow_depth_cm > self.DEEP_BASE_CM:
            points += self.DEEP_BASE_BONUS

        temp = weather.temp_morning_c if weather.temp_morning_c is not None else 0
        low, high = self.IDEAL_TEMP_RANGE
        if low <= temp <= high:
            points += self.IDEAL_TEMP_BONUS

        return int(points)

    def rank_domains(
        self,
        lifts: Mapping[str, Sequence[Lift]],
        pistes: Mapping[str, Sequence[Piste]],
        weather: Sequence[WeatherStation],
    ) -> list[DomainScore]:
        """Score every sector and rank them, best first.

        Sectors with no open lift are left out entirely. Equal scores keep
        the order of the lift mapping.
        """
        scores = [
            self.score_domain(
                sector,
                lifts.get(sector) or [],
                pistes.get(sector) or [],
                self.resolver.resolve(sector, weather),
            )
            for sector in lifts
        ]
        ranked = [s for s in scores if s.lifts_open > 0]
        ranked.sort(key=lambda s: s.score, reverse=True)

        logger.debug(
            f"Ranked {len(ranked)} of {len(scores)} sectors: "
            f"{[(s.sector, s.score) for s in ranked]}"
        )
        return ranked

    def recommend(
        self,
        lifts: Mapping[str, Sequence[Lift]],
        pistes: Mapping[str, Sequence[Piste]],
        weather: Sequence[WeatherStation],
    ) -> DomainRecommendation:
        """Build today's recommendation from a normalised snapshot."""
        ranking = self.rank_domains(lifts, pistes, weather)
        max_risk = max_avalanche_risk(weather)

        advice = None
        if max_risk >= 4:
            advice = "Stay on marked pistes - high avalanche risk"
        elif max_risk >= 3:
            advice = "Exercise caution off-piste"

        if not ranking:
            logger.info("No sector has lifts open; limited skiing today")

        return DomainRecommendation(
            ranking=ranking, max_avalanche_risk=max_risk, avalanche_advice=advice
        )

    def summarize_sectors(
        self,
        lifts: Mapping[str, Sequence[Lift]],
        pistes: Mapping[str, Sequence[Piste]],
        weather: Sequence[WeatherStation],
    ) -> list[SectorSummary]:
        """Per-sector overview, most open lifts first, then largest areas."""
        summaries = []
        for sector, sector_lifts in lifts.items():
            lifts_open = sum(1 for lift in sector_lifts if lift.is_open)
            summaries.append(
                SectorSummary(
                    sector=sector,
                    name=self.resolver.display_name(sector),
                    lifts_open=lifts_open,
                    lifts_total=len(sector_lifts),
                    status=status_colour(lifts_open, len(sector_lifts)),
                    pistes_by_difficulty=_count_pistes(pistes.get(sector) or []),
                    weather=self.resolver.resolve(sector, weather),
                    lifts=list(sector_lifts),
                )
            )
        summaries.sort(key=lambda s: (s.lifts_open, s.lifts_total), reverse=True)
        return summaries


def max_avalanche_risk(weather: Sequence[WeatherStation]) -> int:
    """Highest avalanche risk across stations; 0 when nothing is reported."""
    return max((w.avalanche_risk or 0 for w in weather), default=0)


def _count_pistes(pistes: Sequence[Piste]) -> dict[str, dict[str, int]]:
    counts = {level.bucket: {"open": 0, "total": 0} for level in PisteDifficulty}
    for piste in pistes:
        level = piste.difficulty_level
        if level is None:
            continue
        counts[level.bucket]["total"] += 1
        if piste.is_open:
            counts[level.bucket]["open"] += 1
    return counts
