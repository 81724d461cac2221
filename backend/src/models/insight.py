"""Condition insight models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class InsightPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_ORDER: dict[InsightPriority, int] = {
    InsightPriority.HIGH: 0,
    InsightPriority.MEDIUM: 1,
    InsightPriority.LOW: 2,
}


class InsightCategory(str, Enum):
    """Condition dimension an insight belongs to."""

    VISIBILITY = "visibility"
    TEMPERATURE = "temperature"
    WIND = "wind"
    SNOW = "snow"
    AVALANCHE = "avalanche"
    FOEHN = "foehn"
    SNOW_BASE = "snow_base"


class ConditionInsight(BaseModel):
    """A human-readable insight about today's conditions."""

    title: str
    description: str
    category: InsightCategory
    icon: str
    priority: InsightPriority

    model_config = ConfigDict(use_enum_values=True)


class OverallCondition(BaseModel):
    """One-word verdict for the day."""

    label: str
    icon: str
