"""Data models for the Chamonix ski conditions API."""

from .gear import (
    GearConfidence,
    GearPreferences,
    GearRecommendation,
    Ownership,
    SkillLevel,
    Terrain,
)
from .insight import ConditionInsight, InsightCategory, InsightPriority, OverallCondition
from .ski_data import (
    Attraction,
    CalculatedSummary,
    Lift,
    LiftStatus,
    LiftType,
    Piste,
    PisteDifficulty,
    SkiData,
    SnowQualityCode,
    WeatherStation,
)

__all__ = [
    "SkiData",
    "Lift",
    "Attraction",
    "Piste",
    "WeatherStation",
    "CalculatedSummary",
    "LiftType",
    "LiftStatus",
    "PisteDifficulty",
    "SnowQualityCode",
    "GearPreferences",
    "GearRecommendation",
    "GearConfidence",
    "Terrain",
    "SkillLevel",
    "Ownership",
    "ConditionInsight",
    "InsightCategory",
    "InsightPriority",
    "OverallCondition",
]
