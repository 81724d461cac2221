"""Client for retrieving the published resort snapshot over HTTP."""

import logging

import requests
from pydantic import ValidationError

from models.ski_data import SkiData

logger = logging.getLogger(__name__)


class SnapshotFetchError(Exception):
    """Raised when the published snapshot cannot be retrieved."""

    pass


class SnapshotClient:
    """Fetches and parses the published snapshot. No automatic retry."""

    def __init__(self, url: str, timeout: float = 30):
        """Initialize the client.

        Args:
            url: Full URL of the published data.json
            timeout: Request timeout in seconds
        """
        self.url = url
        self.timeout = timeout

    def fetch(self) -> SkiData:
        """Fetch the snapshot.

        Raises:
            SnapshotFetchError: On network failure, non-success status or a
                body that is not a valid snapshot.
        """
        try:
            response = requests.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to fetch snapshot from {self.url}: {e}")
            raise SnapshotFetchError("Failed to fetch data") from e
        except ValueError as e:
            logger.error(f"Snapshot at {self.url} is not valid JSON: {e}")
            raise SnapshotFetchError("Failed to fetch data") from e

        try:
            return SkiData.model_validate(payload)
        except ValidationError as e:
            logger.error(f"Snapshot at {self.url} has an unexpected shape: {e}")
            raise SnapshotFetchError("Snapshot has an unexpected shape") from e
