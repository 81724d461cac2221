"""Tests for data models."""

import pytest
from pydantic import ValidationError

from models.gear import GearPreferences, GearRecommendation, SkillLevel, Terrain
from models.insight import ConditionInsight, InsightCategory, InsightPriority
from models.ski_data import (
    Lift,
    LiftType,
    Piste,
    PisteDifficulty,
    SkiData,
    SnowQualityCode,
    WeatherStation,
)


class TestLiftType:
    def test_from_code_is_case_insensitive(self):
        assert LiftType.from_code("tsd") == LiftType.TSD
        assert LiftType.from_code("Funi") == LiftType.FUNI

    def test_from_code_unknown_or_missing(self):
        assert LiftType.from_code("LUGE") is None
        assert LiftType.from_code("") is None
        assert LiftType.from_code(None) is None

    def test_labels(self):
        assert LiftType.TPH.label == "Cable car"
        assert LiftType.TK.label == "Drag lift"


class TestPisteDifficulty:
    def test_buckets(self):
        assert PisteDifficulty.GREEN.bucket == "green"
        assert PisteDifficulty.BLUE.bucket == "blue"
        assert PisteDifficulty.RED.bucket == "red"
        assert PisteDifficulty.BLACK.bucket == "black"

    def test_from_code(self):
        assert PisteDifficulty.from_code("N") == PisteDifficulty.BLACK
        assert PisteDifficulty.from_code("X") is None
        assert PisteDifficulty.from_code(None) is None


class TestSnowQualityCode:
    def test_accented_code(self):
        assert SnowQualityCode.from_code("TRANSFORMÉE") == SnowQualityCode.TRANSFORMEE
        assert SnowQualityCode.from_code("fraiche") == SnowQualityCode.FRAICHE

    def test_label(self):
        assert SnowQualityCode.CROUTE.label == "Crusty"


class TestWeatherStation:
    def test_optional_readings_default_to_none(self):
        station = WeatherStation(location_name="Flégère", elevation_m=1877)
        assert station.temp_morning_c is None
        assert station.avalanche_risk is None
        assert station.snow_quality_code is None

    def test_snow_quality_code(self, make_station):
        assert make_station(snow_quality="DOUCE").snow_quality_code == SnowQualityCode.DOUCE
        assert make_station(snow_quality="POUDREUSE").snow_quality_code is None


class TestLiftAndPiste:
    def test_lift_open(self):
        assert Lift(sector="BREVENT", lift_name="Parsa", status="O").is_open
        assert not Lift(sector="BREVENT", lift_name="Parsa", status="P").is_open

    def test_lift_defaults_closed(self):
        lift = Lift(sector="BREVENT", lift_name="Parsa")
        assert lift.status == "F"
        assert lift.transport_type is None

    def test_piste_difficulty_level(self):
        piste = Piste(sector="FLEGERE", piste_name="Pylones", difficulty="R", status="O")
        assert piste.is_open
        assert piste.difficulty_level == PisteDifficulty.RED


class TestSkiData:
    def test_parses_normalised_document(self, raw_payload):
        data = SkiData.model_validate(raw_payload)
        assert data.metadata.resort == "Chamonix"
        assert len(data.weather) == 3
        assert data.lifts["LES HOUCHES"][0].lift_name == "Téléphérique de Bellevue"
        assert data.attractions == {}
        assert data.calculated_summary.lifts_total == 0

    def test_metadata_keeps_extra_fields(self, raw_payload):
        raw_payload["metadata"]["scraper_version"] = "2.1"
        data = SkiData.model_validate(raw_payload)
        assert data.metadata.model_dump()["scraper_version"] == "2.1"

    def test_metadata_required(self):
        with pytest.raises(ValidationError):
            SkiData.model_validate({"weather": []})


class TestGearModels:
    def test_preference_defaults(self):
        prefs = GearPreferences()
        assert prefs.terrain == Terrain.MIXED
        assert prefs.skill == SkillLevel.INTERMEDIATE
        assert prefs.height_cm == 175
        assert prefs.target_altitude_m is None

    def test_height_bounds(self):
        with pytest.raises(ValidationError):
            GearPreferences(height_cm=90)
        with pytest.raises(ValidationError):
            GearPreferences(height_cm=230)

    def test_display_ranges(self):
        rec = GearRecommendation(
            category="All-Mountain",
            waist_width_mm=88,
            waist_width_min_mm=85,
            waist_width_max_mm=91,
            length_cm=170,
            length_min_cm=167,
            length_max_cm=173,
            profile="Camber with tip rocker",
            base_condition="packed_powder",
            area="Brévent-Flégère",
        )
        assert rec.waist_width == "85-91mm"
        assert rec.length == "167-173cm"
        assert rec.confidence == "high"


class TestConditionInsight:
    def test_enum_values_stored(self):
        insight = ConditionInsight(
            title="Breezy",
            description="Moderate winds",
            category=InsightCategory.WIND,
            icon="wind",
            priority=InsightPriority.LOW,
        )
        assert insight.model_dump()["category"] == "wind"
        assert insight.priority == "low"
