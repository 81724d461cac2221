"""Ski resort snapshot data models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class LiftType(str, Enum):
    """Recognised mechanical transport types."""

    TPH = "TPH"  # Téléphérique
    TC = "TC"  # Télécabine
    TSD = "TSD"  # Télésiège débrayable
    TS = "TS"  # Télésiège
    TK = "TK"  # Téléski
    FUNI = "FUNI"
    TAPIS = "TAPIS"
    ASCENSEUR = "ASCENSEUR"

    @classmethod
    def from_code(cls, code: str | None) -> "LiftType | None":
        """Resolve a raw type code (any case), or None if not a ski lift."""
        if not code:
            return None
        try:
            return cls(code.upper())
        except ValueError:
            return None

    @property
    def label(self) -> str:
        return LIFT_TYPE_LABELS[self]


LIFT_TYPE_LABELS: dict[LiftType, str] = {
    LiftType.TPH: "Cable car",
    LiftType.TC: "Gondola",
    LiftType.TSD: "Detachable chairlift",
    LiftType.TS: "Chairlift",
    LiftType.TK: "Drag lift",
    LiftType.FUNI: "Funicular",
    LiftType.TAPIS: "Carpet lift",
    LiftType.ASCENSEUR: "Elevator",
}


class LiftStatus(str, Enum):
    """Operating status shared by lifts and pistes."""

    OPEN = "O"
    CLOSED = "F"  # Fermé
    PLANNED = "P"


class PisteDifficulty(str, Enum):
    """Piste difficulty codes (French colour initials)."""

    GREEN = "V"  # Vert
    BLUE = "B"  # Bleu
    RED = "R"  # Rouge
    BLACK = "N"  # Noir

    @classmethod
    def from_code(cls, code: str | None) -> "PisteDifficulty | None":
        if not code:
            return None
        try:
            return cls(code)
        except ValueError:
            return None

    @property
    def bucket(self) -> str:
        """Name of the summary bucket (green, blue, red, black)."""
        return self.name.lower()


class SnowQualityCode(str, Enum):
    """Snow surface codes reported by the resort weather bulletin."""

    FRAICHE = "FRAICHE"
    DOUCE = "DOUCE"
    HUMIDE = "HUMIDE"
    CROUTE = "CROUTE"
    TRANSFORMEE = "TRANSFORMÉE"

    @classmethod
    def from_code(cls, code: str | None) -> "SnowQualityCode | None":
        if not code:
            return None
        try:
            return cls(code.upper())
        except ValueError:
            return None

    @property
    def label(self) -> str:
        return SNOW_QUALITY_LABELS[self]


SNOW_QUALITY_LABELS: dict[SnowQualityCode, str] = {
    SnowQualityCode.FRAICHE: "Fresh",
    SnowQualityCode.DOUCE: "Soft",
    SnowQualityCode.HUMIDE: "Wet",
    SnowQualityCode.CROUTE: "Crusty",
    SnowQualityCode.TRANSFORMEE: "Transformed",
}


class WeatherStation(BaseModel):
    """Weather bulletin for one station at one point in time."""

    location_name: str = Field(..., description="Station display name")
    elevation_m: int = Field(..., description="Station elevation in meters")
    temp_morning_c: float | None = Field(None, description="Morning temperature")
    temp_afternoon_c: float | None = Field(
        None, description="Afternoon temperature"
    )
    weather_code_morning: str | None = None
    wind_speed_kmh: float | None = Field(None, description="Wind speed in km/h")
    wind_direction: str | None = Field(
        None, description="Free-text compass bearing (e.g. 'Sud-Ouest')"
    )
    snow_depth_cm: float | None = Field(None, description="Snow base depth")
    snow_quality: str | None = Field(None, description="Snow surface code")
    rain_snow_limit_m: int | None = None
    last_snowfall_cm: float | None = Field(None, description="Last snowfall amount")
    last_snowfall_date: str | None = Field(
        None, description="Date of last snowfall, dd/mm/yyyy"
    )
    avalanche_risk: int | None = Field(
        None, description="Avalanche risk, 1 (low) to 5 (very high)"
    )

    @property
    def snow_quality_code(self) -> SnowQualityCode | None:
        return SnowQualityCode.from_code(self.snow_quality)


class Lift(BaseModel):
    """A lift record. Identity is (sector, lift_name)."""

    sector: str
    lift_name: str
    lift_type: str = ""
    status: str = Field(LiftStatus.CLOSED.value, description="O, F or P")
    opening_time: str = ""
    closing_time: str = ""
    status_message: str | None = None

    @property
    def is_open(self) -> bool:
        return self.status == LiftStatus.OPEN.value

    @property
    def transport_type(self) -> LiftType | None:
        return LiftType.from_code(self.lift_type)


class Attraction(Lift):
    """A lift-like record whose type is not a recognised ski lift."""


class Piste(BaseModel):
    """A marked run. Identity is (sector, piste_name)."""

    sector: str
    piste_name: str
    difficulty: str | None = Field(None, description="V, B, R, N or null")
    type: str = ""
    status: str = LiftStatus.CLOSED.value
    grooming_level: int | None = None
    status_message: str | None = None

    @property
    def is_open(self) -> bool:
        return self.status == LiftStatus.OPEN.value

    @property
    def difficulty_level(self) -> PisteDifficulty | None:
        return PisteDifficulty.from_code(self.difficulty)


class DifficultyCount(BaseModel):
    open: int = 0
    total: int = 0


class PistesByDifficulty(BaseModel):
    green: DifficultyCount = Field(default_factory=DifficultyCount)
    blue: DifficultyCount = Field(default_factory=DifficultyCount)
    red: DifficultyCount = Field(default_factory=DifficultyCount)
    black: DifficultyCount = Field(default_factory=DifficultyCount)


class CalculatedSummary(BaseModel):
    """Aggregate counts derived from one normalisation pass."""

    lifts_open: int = 0
    lifts_total: int = 0
    pistes_by_difficulty: PistesByDifficulty = Field(
        default_factory=PistesByDifficulty
    )


class Metadata(BaseModel):
    resort: str = ""
    source: str = ""
    scrape_timestamp: str = ""
    source_url: str = ""

    model_config = ConfigDict(extra="allow")


class SnapshotSummary(BaseModel):
    last_update_timestamp: str | None = None

    model_config = ConfigDict(extra="allow")


class SkiData(BaseModel):
    """The published, normalised resort snapshot."""

    metadata: Metadata
    weather: list[WeatherStation] = Field(default_factory=list)
    lifts: dict[str, list[Lift]] = Field(default_factory=dict)
    pistes: dict[str, list[Piste]] = Field(default_factory=dict)
    attractions: dict[str, list[Attraction]] = Field(default_factory=dict)
    calculated_summary: CalculatedSummary = Field(
        default_factory=CalculatedSummary
    )
    summary: SnapshotSummary = Field(default_factory=SnapshotSummary)
