"""Resolve ski sectors to the weather station that covers them."""

from typing import Mapping, Sequence

from models.ski_data import WeatherStation
from utils.constants import SECTOR_DISPLAY_NAMES, SECTOR_WEATHER_ALIASES


class SectorWeatherResolver:
    """Maps sector keys to weather stations via a fixed alias table.

    Matching is a case-insensitive substring test of the alias against each
    station's location name. When several stations match, the first one in
    the bulletin order wins.
    """

    def __init__(
        self,
        aliases: Mapping[str, str] = SECTOR_WEATHER_ALIASES,
        display_names: Mapping[str, str] = SECTOR_DISPLAY_NAMES,
    ):
        """Initialize the resolver.

        Args:
            aliases: Sector key -> station name substring
            display_names: Sector key -> human-friendly sector name
        """
        self._aliases = dict(aliases)
        self._display_names = dict(display_names)

    def alias_for(self, sector: str) -> str | None:
        return self._aliases.get(sector)

    def resolve(
        self, sector: str, stations: Sequence[WeatherStation]
    ) -> WeatherStation | None:
        """Find the station for a sector, or None if unmapped or unmatched."""
        alias = self.alias_for(sector)
        if not alias:
            return None
        needle = alias.lower()
        for station in stations:
            if needle in station.location_name.lower():
                return station
        return None

    def display_name(self, sector: str) -> str:
        return self._display_names.get(sector, sector)
