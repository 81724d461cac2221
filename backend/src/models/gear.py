"""Ski gear sizing models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Terrain(str, Enum):
    """Where the skier intends to spend the day."""

    PISTE = "piste"
    OFF_PISTE = "off_piste"
    MIXED = "mixed"
    PARK = "park"


class SkillLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class Ownership(str, Enum):
    RENTAL = "rental"
    OWNS = "owns"


class GearConfidence(str, Enum):
    """Confidence in a gear recommendation, ordered high to low."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class GearPreferences(BaseModel):
    """User-supplied preferences for ski sizing."""

    terrain: Terrain = Terrain.MIXED
    skill: SkillLevel = SkillLevel.INTERMEDIATE
    ownership: Ownership = Ownership.RENTAL
    height_cm: int = Field(175, ge=100, le=220, description="Skier height")
    target_altitude_m: int | None = Field(
        None, description="Altitude the skier plans to ski at (defaults to mid station)"
    )


class GearRecommendation(BaseModel):
    """Recommended ski for today's conditions."""

    category: str = Field(..., description="Ski category label")
    waist_width_mm: int = Field(..., description="Target waist width")
    waist_width_min_mm: int
    waist_width_max_mm: int
    length_cm: int = Field(..., description="Target ski length")
    length_min_cm: int
    length_max_cm: int
    profile: str = Field(..., description="Camber/rocker shape")
    base_condition: str
    reasoning: list[str] = Field(default_factory=list)
    tips: list[str] = Field(default_factory=list)
    area: str
    timing: str | None = None
    confidence: GearConfidence = GearConfidence.HIGH

    model_config = ConfigDict(use_enum_values=True)

    @property
    def waist_width(self) -> str:
        """Display string such as '79-85mm'."""
        return f"{self.waist_width_min_mm}-{self.waist_width_max_mm}mm"

    @property
    def length(self) -> str:
        return f"{self.length_min_cm}-{self.length_max_cm}cm"
