"""Pytest configuration and shared fixtures."""

import copy
from datetime import datetime

import pytest

from models.ski_data import Lift, Piste, WeatherStation
from services.conditions_service import TZ

# Bulletin ordered as the resort publishes it, highest station first
WEATHER_BULLETIN = [
    {
        "location_name": "Aiguille du Midi",
        "elevation_m": 3842,
        "temp_morning_c": -12.0,
        "temp_afternoon_c": -9.0,
        "weather_code_morning": "1",
        "wind_speed_kmh": 30.0,
        "wind_direction": "Nord-Ouest",
        "snow_depth_cm": 250.0,
        "snow_quality": "FRAICHE",
        "rain_snow_limit_m": 1200,
        "last_snowfall_cm": 10.0,
        "last_snowfall_date": "10/01/2026",
        "avalanche_risk": 3,
    },
    {
        "location_name": "Brévent",
        "elevation_m": 2525,
        "temp_morning_c": -5.0,
        "temp_afternoon_c": -2.0,
        "weather_code_morning": "1",
        "wind_speed_kmh": 15.0,
        "wind_direction": "Nord",
        "snow_depth_cm": 120.0,
        "snow_quality": "DOUCE",
        "rain_snow_limit_m": 1200,
        "last_snowfall_cm": 10.0,
        "last_snowfall_date": "10/01/2026",
        "avalanche_risk": 2,
    },
    {
        "location_name": "Les Houches",
        "elevation_m": 1900,
        "temp_morning_c": -1.0,
        "temp_afternoon_c": 3.0,
        "weather_code_morning": "2",
        "wind_speed_kmh": 10.0,
        "wind_direction": None,
        "snow_depth_cm": 40.0,
        "snow_quality": "HUMIDE",
        "rain_snow_limit_m": 1200,
        "last_snowfall_cm": None,
        "last_snowfall_date": None,
        "avalanche_risk": 1,
    },
]

RAW_LIFTS = {
    "BREVENT": [
        {
            "sector": "BREVENT",
            "lift_name": "Télécabine de Planpraz",
            "lift_type": "TC",
            "status": "O",
            "opening_time": "08:45",
            "closing_time": "16:30",
        },
        {
            "sector": "BREVENT",
            "lift_name": "Téléphérique du Brévent",
            "lift_type": "TPH",
            "status": "O",
            "opening_time": "09:00",
            "closing_time": "16:15",
        },
        {
            "sector": "BREVENT",
            "lift_name": "Télésiège de Parsa",
            "lift_type": "TSD",
            "status": "F",
            "opening_time": "",
            "closing_time": "",
        },
        # Scraped twice; the first record wins
        {
            "sector": "BREVENT",
            "lift_name": "Télécabine de Planpraz",
            "lift_type": "TC",
            "status": "F",
            "opening_time": "",
            "closing_time": "",
        },
        {
            "sector": "BREVENT",
            "lift_name": "Luge de Planpraz",
            "lift_type": "LUGE",
            "status": "O",
            "opening_time": "10:00",
            "closing_time": "16:00",
        },
    ],
    "LES HOUCHES": [
        {
            "sector": "LES HOUCHES",
            "lift_name": "Téléphérique de Bellevue",
            "lift_type": "TPH",
            "status": "O",
            "opening_time": "08:30",
            "closing_time": "16:45",
        },
        {
            "sector": "LES HOUCHES",
            "lift_name": "Télésiège de Plancerts",
            "lift_type": "ts",
            "status": "F",
            "opening_time": "",
            "closing_time": "",
        },
    ],
}

RAW_PISTES = {
    "BREVENT": [
        {"sector": "BREVENT", "piste_name": "Charlanon", "difficulty": "R", "type": "alpine", "status": "O"},
        {"sector": "BREVENT", "piste_name": "Charlanon", "difficulty": "R", "type": "alpine", "status": "F"},
        {"sector": "BREVENT", "piste_name": "Col Cornu", "difficulty": "B", "type": "alpine", "status": "O"},
        {"sector": "BREVENT", "piste_name": "Piste Noire", "difficulty": "N", "type": "alpine", "status": "F"},
        {"sector": "BREVENT", "piste_name": "Planpraz Verte", "difficulty": "V", "type": "alpine", "status": "O"},
    ],
    "LES HOUCHES": [
        {"sector": "LES HOUCHES", "piste_name": "Verte des Houches", "difficulty": "N", "type": "alpine", "status": "O"},
        {"sector": "LES HOUCHES", "piste_name": "Kandahar", "difficulty": "R", "type": "alpine", "status": "F"},
        {"sector": "LES HOUCHES", "piste_name": "Retour Vallée", "difficulty": None, "type": "alpine", "status": "F"},
    ],
}


@pytest.fixture
def raw_payload():
    """A scraped snapshot as posted by the scraper, before normalisation."""
    return {
        "metadata": {
            "resort": "Chamonix",
            "source": "chamonix.com",
            "scrape_timestamp": "2026-01-12T07:30:00",
            "source_url": "https://www.chamonix.com/ouverture-des-pistes",
        },
        "summary": {"last_update_timestamp": "12/01/2026 07:15"},
        "weather": copy.deepcopy(WEATHER_BULLETIN),
        "lifts": copy.deepcopy(RAW_LIFTS),
        "pistes": copy.deepcopy(RAW_PISTES),
    }


@pytest.fixture
def sample_weather():
    """Three-station bulletin: Aiguille du Midi, Brévent, Les Houches."""
    return [WeatherStation(**station) for station in WEATHER_BULLETIN]


@pytest.fixture
def make_station():
    """Factory for a single station with overridable readings."""

    def _make_station(**overrides) -> WeatherStation:
        data = {**WEATHER_BULLETIN[1], **overrides}
        return WeatherStation(**data)

    return _make_station


@pytest.fixture
def make_lift():
    def _make_lift(name: str, status: str = "O", sector: str = "BREVENT", lift_type: str = "TSD") -> Lift:
        return Lift(sector=sector, lift_name=name, lift_type=lift_type, status=status)

    return _make_lift


@pytest.fixture
def make_piste():
    def _make_piste(
        name: str, difficulty: str | None = "B", status: str = "O", sector: str = "BREVENT"
    ) -> Piste:
        return Piste(sector=sector, piste_name=name, difficulty=difficulty, status=status)

    return _make_piste


@pytest.fixture
def bulletin_morning():
    """09:00 resort time, two days after the bulletin's last snowfall."""
    return datetime(2026, 1, 12, 9, 0, tzinfo=TZ)
