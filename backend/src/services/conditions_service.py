"""Resort-wide condition analysis from the weather bulletin.

Reduces the list of weather stations to a single ResortConditions record
used by the gear sizing engine and the insight generator.
"""

import math
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Sequence
from zoneinfo import ZoneInfo

from models.ski_data import SnowQualityCode, WeatherStation
from utils.constants import RESORT_TIMEZONE, SNOWFALL_DATE_FORMAT

TZ = ZoneInfo(RESORT_TIMEZONE)

# Hours assumed when the last snowfall is today / unknown
SAME_DAY_SNOWFALL_HOURS = 12
UNKNOWN_SNOWFALL_HOURS = 72

SPRING_MONTHS = {3, 4, 5}
SOUTHERLY_TOKENS = {"S", "SE", "SW", "SO", "SSE", "SSW", "SSO"}


class BaseCondition(str, Enum):
    """Dominant snow surface across the resort."""

    ICY = "icy"
    GROOMED = "groomed"
    PACKED_POWDER = "packed_powder"
    POWDER = "powder"
    WET_SPRING = "wet_spring"
    VARIABLE = "variable"


class Visibility(str, Enum):
    CLEAR = "clear"
    FLAT_LIGHT = "flat_light"
    WHITEOUT = "whiteout"


@dataclass(frozen=True)
class ResortConditions:
    """Aggregate weather signals for the whole resort."""

    avg_temperature: float
    min_temperature: float
    max_wind: float
    avg_wind: float
    fresh_snow_cm: float  # last snowfall at the representative station
    fresh_snow_24h: float
    fresh_snow_48h: float
    max_fresh_snow_cm: float
    hours_since_snowfall: int
    snow_quality: SnowQualityCode | None
    snow_qualities: frozenset[SnowQualityCode]
    avg_snow_depth: float
    avalanche_risk: int
    base_condition: BaseCondition
    visibility: Visibility
    is_powder_day: bool
    is_recent_snow: bool
    is_corn_snow: bool
    is_foehn: bool
    wind_direction: str | None
    mid_elevation_m: int


def representative_station(weather: Sequence[WeatherStation]) -> WeatherStation | None:
    """Middle station when ordered from highest to lowest elevation."""
    if not weather:
        return None
    by_elevation = sorted(weather, key=lambda w: w.elevation_m, reverse=True)
    return by_elevation[len(by_elevation) // 2]


def hours_since_snowfall(snowfall_date: str | None, now: datetime) -> int:
    """Estimate hours since the last snowfall from a dd/mm/yyyy date.

    Same-day snowfall counts as 12 hours old; an absent or unreadable date
    counts as 72 hours (old snow).
    """
    if not snowfall_date:
        return UNKNOWN_SNOWFALL_HOURS
    if snowfall_date == now.strftime(SNOWFALL_DATE_FORMAT):
        return SAME_DAY_SNOWFALL_HOURS
    try:
        fell_on = datetime.strptime(snowfall_date, SNOWFALL_DATE_FORMAT)
    except ValueError:
        return UNKNOWN_SNOWFALL_HOURS
    if now.tzinfo is not None:
        fell_on = fell_on.replace(tzinfo=now.tzinfo)
    return math.floor((now - fell_on).total_seconds() / 3600)


def is_southerly(direction: str | None) -> bool:
    """True for bearings such as 'Sud', 'Sud-Ouest', 'S' or 'SW'."""
    if not direction:
        return False
    upper = direction.upper()
    if "SUD" in upper:
        return True
    return any(token in SOUTHERLY_TOKENS for token in re.split(r"[^A-Z]+", upper))


def classify_base_condition(
    snow_quality: SnowQualityCode | None,
    fresh_snow_cm: float,
    hours_since: int,
    avg_temperature: float,
) -> BaseCondition:
    """Classify the surface; rules are checked in order, first match wins."""
    is_fresh = snow_quality == SnowQualityCode.FRAICHE
    if is_fresh and fresh_snow_cm > 15 and hours_since < 48:
        return BaseCondition.POWDER
    if is_fresh and fresh_snow_cm > 5:
        return BaseCondition.PACKED_POWDER
    if snow_quality == SnowQualityCode.HUMIDE or avg_temperature > 2:
        return BaseCondition.WET_SPRING
    if avg_temperature < -8 and not is_fresh:
        return BaseCondition.ICY
    if snow_quality in (SnowQualityCode.TRANSFORMEE, SnowQualityCode.CROUTE):
        return BaseCondition.VARIABLE
    return BaseCondition.GROOMED


def classify_visibility(max_wind: float, fresh_snow_cm: float, hours_since: int) -> Visibility:
    if max_wind > 50 or (fresh_snow_cm > 20 and hours_since < 6):
        return Visibility.WHITEOUT
    if max_wind > 30:
        return Visibility.FLAT_LIGHT
    return Visibility.CLEAR


def analyze_conditions(
    weather: Sequence[WeatherStation], now: datetime | None = None
) -> ResortConditions | None:
    """Aggregate the bulletin into resort-wide conditions.

    Missing numeric readings count as 0 in means and maxima. Returns None
    for an empty bulletin rather than inventing values.
    """
    if not weather:
        return None
    now = now or datetime.now(TZ)

    temps = [w.temp_morning_c or 0 for w in weather]
    winds = [w.wind_speed_kmh or 0 for w in weather]
    avg_temp = sum(temps) / len(temps)
    max_wind = max(winds)

    mid = representative_station(weather)
    fresh_snow = mid.last_snowfall_cm or 0
    snow_quality = mid.snow_quality_code
    hours_since = hours_since_snowfall(mid.last_snowfall_date, now)

    base = classify_base_condition(snow_quality, fresh_snow, hours_since, avg_temp)

    lowest = min(weather, key=lambda w: w.elevation_m)
    lowest_temp = lowest.temp_morning_c or 0
    is_corn = now.month in SPRING_MONTHS and avg_temp > 0 and lowest_temp < 0

    return ResortConditions(
        avg_temperature=avg_temp,
        min_temperature=min(temps),
        max_wind=max_wind,
        avg_wind=sum(winds) / len(winds),
        fresh_snow_cm=fresh_snow,
        fresh_snow_24h=fresh_snow if hours_since < 24 else 0,
        fresh_snow_48h=fresh_snow if hours_since < 48 else 0,
        max_fresh_snow_cm=max(w.last_snowfall_cm or 0 for w in weather),
        hours_since_snowfall=hours_since,
        snow_quality=snow_quality,
        snow_qualities=frozenset(
            code for code in (w.snow_quality_code for w in weather) if code
        ),
        avg_snow_depth=sum(w.snow_depth_cm or 0 for w in weather) / len(weather),
        avalanche_risk=max(w.avalanche_risk or 0 for w in weather),
        base_condition=base,
        visibility=classify_visibility(max_wind, fresh_snow, hours_since),
        is_powder_day=base == BaseCondition.POWDER,
        is_recent_snow=mid.last_snowfall_date == now.strftime(SNOWFALL_DATE_FORMAT),
        is_corn_snow=is_corn,
        is_foehn=is_southerly(mid.wind_direction) and avg_temp > 0,
        wind_direction=mid.wind_direction,
        mid_elevation_m=mid.elevation_m,
    )
