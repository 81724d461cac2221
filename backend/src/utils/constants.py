"""Shared constants for the ski conditions backend."""

from types import MappingProxyType
from typing import Mapping

# Sector key -> substring of the weather station serving it.
# Sectors missing here never resolve to a station.
SECTOR_WEATHER_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "AIGUILLE DU MIDI": "Aiguille du Midi",
        "BREVENT": "Brévent",
        "DOMAINE DE BALME": "Balme Tour-Vallorcine",
        "FLEGERE": "Flégère",
        "GRANDS MONTETS": "Grands Montets",
        "LES HOUCHES": "Les Houches",
        "SITE DU MONTENVERS": "Montenvers",
        "TRAMWAY MONT BLANC": "Tramway du Mont-Blanc",
    }
)

SECTOR_DISPLAY_NAMES: Mapping[str, str] = MappingProxyType(
    {
        "AIGUILLE DU MIDI": "Aiguille du Midi",
        "BREVENT": "Brévent",
        "DOMAINE DE BALME": "Domaine de Balme",
        "FLEGERE": "Flégère",
        "GRANDS MONTETS": "Grands Montets",
        "LA VORMAINE": "La Vormaine",
        "LES HOUCHES": "Les Houches",
        "LES CHOSALETS": "Les Chosalets",
        "PLANARDS": "Planards",
        "POYA": "Poya",
        "SITE DU MONTENVERS": "Montenvers",
        "TRAMWAY MONT BLANC": "Tramway du Mont-Blanc",
    }
)

# Weather bulletin dates are local to the resort
RESORT_TIMEZONE = "Europe/Paris"
SNOWFALL_DATE_FORMAT = "%d/%m/%Y"

# Snapshot document names
RAW_SNAPSHOT_NAME = "chamonix_ski_data.json"
PUBLISHED_SNAPSHOT_NAME = "data.json"
