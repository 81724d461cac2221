"""Services for the Chamonix ski conditions backend."""

from .domain_scoring_service import DomainScoringService
from .ingestion_service import IngestionService
from .sector_weather_resolver import SectorWeatherResolver
from .snapshot_client import SnapshotClient
from .snapshot_store import LocalSnapshotStore, S3SnapshotStore

__all__ = [
    "DomainScoringService",
    "IngestionService",
    "SectorWeatherResolver",
    "SnapshotClient",
    "LocalSnapshotStore",
    "S3SnapshotStore",
]
