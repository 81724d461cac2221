"""Ski gear sizing from resort conditions and skier preferences.

The waist width starts from a per-surface baseline and is then adjusted by a
fixed sequence of modifiers:

1. fresh snow depth tiers (raise the floor, may upgrade the category)
2. regional snow density
3. temperature
4. powder age at the target altitude
5. wind packing
6. visibility
7. terrain and skill clamps

The final width is clamped to [68, 125] mm and drives the shape profile and
the length adjustment.
"""

import logging

from models.gear import (
    GearConfidence,
    GearPreferences,
    GearRecommendation,
    Ownership,
    SkillLevel,
    Terrain,
)
from services.conditions_service import BaseCondition, ResortConditions, Visibility

logger = logging.getLogger(__name__)

MIN_WIDTH_MM = 68
MAX_WIDTH_MM = 125
RANGE_HALF_WIDTH = 3

# Categories from narrowest to widest; downgrades move one step left
CATEGORY_LADDER = [
    "Race/Carving",
    "Carving/Piste",
    "All-Mountain",
    "All-Mountain Wide",
    "Freeride",
    "Powder",
]

BASE_WIDTHS: dict[BaseCondition, tuple[int, str, str]] = {
    BaseCondition.ICY: (75, "Race/Carving", "Narrow waist for maximum edge grip on hard snow"),
    BaseCondition.GROOMED: (82, "Carving/Piste", "Standard piste width for groomed conditions"),
    BaseCondition.PACKED_POWDER: (88, "All-Mountain", "Extra width helps on ungroomed sections"),
    BaseCondition.POWDER: (100, "Freeride", "Powder day - width for flotation"),
    BaseCondition.WET_SPRING: (85, "All-Mountain", "Medium width handles soft spring snow"),
    BaseCondition.VARIABLE: (88, "All-Mountain", "Versatile width for crusty, variable snow"),
}

# (minimum fresh cm within 48h, width floor, category)
FRESH_SNOW_TIERS = [
    (5, 85, None),
    (15, 95, "All-Mountain Wide"),
    (30, 105, "Freeride"),
    (40, 112, "Powder"),
]

REGIONAL_DENSITY_MM = -5
EXTREME_COLD_C = -15
NEAR_FREEZING_RANGE_C = (-2, 2)
POWDER_DECAY_HOURS = 48
POWDER_DECAY_ALTITUDE_M = 2500
STRONG_WIND_KMH = 40
MODIFIER_MM = 5

PISTE_MAX_MM = 90
OFF_PISTE_MIN_MM = 95
PARK_RANGE_MM = (85, 95)
BEGINNER_MAX_MM = 85

SKILL_LENGTH_OFFSETS: dict[SkillLevel, int] = {
    SkillLevel.BEGINNER: -12,
    SkillLevel.INTERMEDIATE: -7,
    SkillLevel.ADVANCED: -2,
    SkillLevel.EXPERT: 2,
}

HEAVY_ROCKER_MIN_MM = 105

CONFIDENCE_ORDER = [GearConfidence.HIGH, GearConfidence.MEDIUM, GearConfidence.LOW]


def _upgrade(current: str, candidate: str | None) -> str:
    if candidate is None:
        return current
    if CATEGORY_LADDER.index(candidate) > CATEGORY_LADDER.index(current):
        return candidate
    return current


def _downgrade(current: str) -> str:
    return CATEGORY_LADDER[max(0, CATEGORY_LADDER.index(current) - 1)]


def _lower_confidence(current: GearConfidence, to: GearConfidence) -> GearConfidence:
    if CONFIDENCE_ORDER.index(to) > CONFIDENCE_ORDER.index(current):
        return to
    return current


def profile_for_width(width_mm: int) -> str:
    """Shape profile for a waist width, from full camber to heavy rocker."""
    if width_mm < 80:
        return "Full camber"
    if width_mm < 95:
        return "Camber with tip rocker"
    if width_mm < HEAVY_ROCKER_MIN_MM:
        return "Rocker-camber-rocker"
    return "Heavy rocker (20%+ tip/tail)"


class GearSizer:
    """Computes one gear recommendation; holds the running adjustment state."""

    def __init__(self, conditions: ResortConditions, preferences: GearPreferences):
        self.conditions = conditions
        self.preferences = preferences
        self.reasoning: list[str] = []
        self.tips: list[str] = []

    def recommend(self) -> GearRecommendation:
        width, category = self._size_width()
        length = self._size_length(width)
        area, timing = self._area_and_timing()
        self._add_tips(category, width)

        return GearRecommendation(
            category=category,
            waist_width_mm=width,
            waist_width_min_mm=width - RANGE_HALF_WIDTH,
            waist_width_max_mm=width + RANGE_HALF_WIDTH,
            length_cm=length,
            length_min_cm=length - RANGE_HALF_WIDTH,
            length_max_cm=length + RANGE_HALF_WIDTH,
            profile=profile_for_width(width),
            base_condition=self.conditions.base_condition.value,
            reasoning=self.reasoning,
            tips=self.tips,
            area=area,
            timing=timing,
            confidence=self._confidence(),
        )

    def _size_width(self) -> tuple[int, str]:
        c = self.conditions
        prefs = self.preferences
        width, category, reason = BASE_WIDTHS[c.base_condition]
        self.reasoning.append(reason)

        # 1. Fresh snow depth tiers
        fresh = c.fresh_snow_48h
        for min_cm, floor_mm, tier_category in FRESH_SNOW_TIERS:
            if fresh >= min_cm:
                width = max(width, floor_mm)
                category = _upgrade(category, tier_category)
        if fresh >= FRESH_SNOW_TIERS[0][0]:
            self.reasoning.append(f"{fresh:g}cm fresh in the last 48h - extra float helps")

        # 2. Regional density
        width += REGIONAL_DENSITY_MM
        self.reasoning.append("Chamonix maritime snow is denser than continental")

        # 3. Temperature
        low, high = NEAR_FREEZING_RANGE_C
        if c.avg_temperature < EXTREME_COLD_C:
            width += MODIFIER_MM
            self.reasoning.append("Extreme cold keeps snow dry and light")
        elif low <= c.avg_temperature <= high:
            width -= MODIFIER_MM
            self.reasoning.append("Near-freezing snow is heavy and supportive")

        # 4. Powder age at the target altitude
        target_altitude = prefs.target_altitude_m or c.mid_elevation_m
        if (
            c.hours_since_snowfall > POWDER_DECAY_HOURS
            and target_altitude < POWDER_DECAY_ALTITUDE_M
        ):
            width -= MODIFIER_MM
            category = _downgrade(category)
            self.reasoning.append(
                "Snow has settled below 2500m - moderate width sufficient"
            )

        # 5. Wind packing
        if (
            c.max_wind > STRONG_WIND_KMH
            and c.hours_since_snowfall < POWDER_DECAY_HOURS
            and c.fresh_snow_cm > 0
        ):
            width -= MODIFIER_MM
            self.reasoning.append("Wind has packed the recent snow")

        # 6. Visibility
        if c.visibility in (Visibility.FLAT_LIGHT, Visibility.WHITEOUT):
            width -= MODIFIER_MM
            self.reasoning.append("Poor visibility favours a quicker, narrower ski")

        # 7. Terrain and skill
        if prefs.terrain == Terrain.PISTE and width > PISTE_MAX_MM:
            width = PISTE_MAX_MM
            self.reasoning.append("Capped for groomed piste skiing")
        elif (
            prefs.terrain == Terrain.OFF_PISTE
            and c.base_condition != BaseCondition.ICY
            and width < OFF_PISTE_MIN_MM
        ):
            width = OFF_PISTE_MIN_MM
            self.reasoning.append("Off-piste needs at least 95mm underfoot")
        elif prefs.terrain == Terrain.PARK:
            park_min, park_max = PARK_RANGE_MM
            width = min(max(width, park_min), park_max)
            self.reasoning.append("Park width keeps the ski playful and stable")

        if prefs.skill == SkillLevel.BEGINNER and width > BEGINNER_MAX_MM:
            width = BEGINNER_MAX_MM
            self.reasoning.append("Narrower skis are easier to turn while learning")

        return min(max(width, MIN_WIDTH_MM), MAX_WIDTH_MM), category

    def _size_length(self, width: int) -> int:
        prefs = self.preferences
        length = prefs.height_cm + SKILL_LENGTH_OFFSETS[SkillLevel(prefs.skill)]
        if prefs.terrain == Terrain.PISTE:
            length -= 5
        elif (
            prefs.terrain == Terrain.OFF_PISTE
            or self.conditions.base_condition == BaseCondition.POWDER
        ):
            length += 5
        if width >= HEAVY_ROCKER_MIN_MM:
            length += 3
        return length

    def _area_and_timing(self) -> tuple[str, str | None]:
        c = self.conditions
        if c.visibility == Visibility.WHITEOUT:
            return (
                "Les Houches - tree-lined runs",
                "Stay low until visibility improves",
            )
        if c.base_condition == BaseCondition.POWDER:
            return ("Grands Montets", "First lifts for untracked lines")
        if c.is_foehn:
            return (
                "North-facing runs at Grands Montets",
                "Ski early before the foehn softens the snow",
            )
        if c.is_corn_snow:
            return (
                "Brévent-Flégère sunny slopes",
                "East faces early, south faces late morning, off by early afternoon",
            )
        if c.visibility == Visibility.FLAT_LIGHT:
            return ("Les Houches and lower Brévent", None)
        if c.base_condition == BaseCondition.ICY:
            return (
                "Domaine de Balme",
                "Wait for the sun to soften the surface late morning",
            )
        if c.base_condition == BaseCondition.WET_SPRING:
            return (
                "Upper Grands Montets",
                "Ski early before the snow gets heavy",
            )

        terrain = self.preferences.terrain
        if terrain == Terrain.OFF_PISTE:
            return ("Grands Montets", None)
        if terrain == Terrain.PARK:
            return ("Domaine de Balme snowpark", None)
        return ("Brévent-Flégère", None)

    def _add_tips(self, category: str, width: int) -> None:
        c = self.conditions
        prefs = self.preferences

        if c.base_condition == BaseCondition.ICY:
            self.tips.append("Sharp edges are critical - get a tune")
        elif c.base_condition == BaseCondition.WET_SPRING:
            self.tips.append("Apply warm-weather wax")

        if c.avg_temperature < -10:
            self.tips.append(
                f"Cold day ({round(c.avg_temperature)}°C) - dress warm, snow will be fast"
            )

        if c.visibility == Visibility.FLAT_LIGHT:
            self.tips.append("Flat light - use orange/yellow lens goggles")

        if prefs.terrain in (Terrain.OFF_PISTE, Terrain.MIXED):
            if c.avalanche_risk >= 4:
                self.tips.append(
                    f"High avalanche risk ({c.avalanche_risk}/5) - stay on marked runs"
                )
            elif c.avalanche_risk == 3:
                self.tips.append("Considerable avalanche risk - careful route selection")

            if c.max_wind > STRONG_WIND_KMH:
                self.tips.append("Strong winds - avoid exposed ridges, wind slab risk")
            elif c.max_wind > 25:
                self.tips.append("Moderate wind - check lee slopes for wind slab")

            if c.visibility == Visibility.WHITEOUT:
                self.tips.append("Poor visibility - consider staying on-piste today")

        if prefs.ownership == Ownership.RENTAL:
            self.tips.append(f"Ask the rental shop for a {category} ski around {width}mm")
        elif width >= HEAVY_ROCKER_MIN_MM:
            self.tips.append("A demo powder ski may beat your everyday pair today")

    def _confidence(self) -> GearConfidence:
        c = self.conditions
        confidence = GearConfidence.HIGH
        if c.visibility == Visibility.FLAT_LIGHT:
            confidence = _lower_confidence(confidence, GearConfidence.MEDIUM)
        if c.max_wind > STRONG_WIND_KMH:
            confidence = _lower_confidence(confidence, GearConfidence.MEDIUM)
        if c.visibility == Visibility.WHITEOUT:
            confidence = _lower_confidence(confidence, GearConfidence.LOW)
        if c.avalanche_risk >= 4 and self.preferences.terrain == Terrain.OFF_PISTE:
            confidence = _lower_confidence(confidence, GearConfidence.LOW)
        return confidence


def recommend_gear(
    conditions: ResortConditions | None, preferences: GearPreferences | None = None
) -> GearRecommendation | None:
    """Recommend a ski for today's conditions.

    Returns None when there are no conditions to size against (empty
    weather bulletin).
    """
    if conditions is None:
        return None
    preferences = preferences or GearPreferences()
    recommendation = GearSizer(conditions, preferences).recommend()
    logger.debug(
        f"Gear for {preferences.terrain.value}/{preferences.skill.value}: "
        f"{recommendation.category} {recommendation.waist_width}"
    )
    return recommendation
