"""Ingestion of scraped resort snapshots."""

import hmac
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from models.ski_data import SkiData
from services.normalisation_service import (
    PayloadValidationError,
    normalise_ski_data,
    validate_payload,
)

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Bearer token missing or not equal to the configured secret."""

    pass


class ProcessingError(Exception):
    """Unexpected failure while normalising or persisting a snapshot."""

    pass


@dataclass
class IngestionResult:
    """Outcome of a successful ingestion."""

    timestamp: str
    lifts_total: int
    raw_location: str
    published_location: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "success": True,
            "message": "Data updated successfully",
            "timestamp": self.timestamp,
            "lifts_total": self.lifts_total,
        }


class IngestionService:
    """Authenticates, validates, normalises and stores scraped snapshots."""

    def __init__(self, secret: str, store):
        """Initialize the ingestion service.

        Args:
            secret: Shared bearer token expected from the scraper
            store: LocalSnapshotStore or S3SnapshotStore
        """
        self.secret = secret
        self.store = store

    def verify_token(self, token: str | None) -> None:
        """Check the bearer token.

        Raises:
            AuthenticationError: If the token does not match the secret.
        """
        if token is None or not hmac.compare_digest(
            token.encode("utf-8"), self.secret.encode("utf-8")
        ):
            raise AuthenticationError("Unauthorized")

    def ingest(self, token: str | None, payload: Any) -> IngestionResult:
        """Store the raw payload and its normalised form.

        Nothing is written unless the token is valid, the payload has its
        required fields and the normalised document parses as SkiData.

        Raises:
            AuthenticationError: Invalid token.
            PayloadValidationError: Missing metadata, lifts or weather, or
                records the published document cannot hold.
            ProcessingError: Normalisation or storage failed.
        """
        self.verify_token(token)
        validate_payload(payload)

        lifts_total = sum(len(records or []) for records in payload["lifts"].values())

        try:
            normalised = normalise_ski_data(payload)
        except Exception as e:
            logger.error(f"Error normalising data: {e}")
            raise ProcessingError("Failed to process data") from e

        try:
            SkiData.model_validate(normalised)
        except ValidationError as e:
            logger.warning(f"Rejected snapshot with {e.error_count()} invalid fields")
            raise PayloadValidationError(
                f"Invalid data structure - {e.error_count()} invalid fields"
            ) from e

        try:
            raw_location = self.store.write_raw(payload)
            published_location = self.store.write_published(normalised)
        except Exception as e:
            logger.error(f"Error updating data: {e}")
            raise ProcessingError("Failed to process data") from e

        result = IngestionResult(
            timestamp=datetime.now(UTC).isoformat(),
            lifts_total=lifts_total,
            raw_location=raw_location,
            published_location=published_location,
        )
        logger.info(
            f"Ingested snapshot with {lifts_total} lift records "
            f"-> {raw_location}, {published_location}"
        )
        return result
