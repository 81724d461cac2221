#!/usr/bin/env python3
"""Push a scraped snapshot to the ingestion endpoint.

Reads the scraper's JSON output, checks it has the fields the endpoint
requires, then POSTs it with the shared bearer token.

Usage:
    DATA_UPDATE_SECRET=... python scripts/push_snapshot.py \
        --file data/chamonix_ski_data.json \
        --url https://example.com/api/update-data
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

import requests

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from services.normalisation_service import PayloadValidationError, validate_payload

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

DEFAULT_URL = "http://localhost:8000/api/update-data"


def load_snapshot(path: str) -> dict:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def push_snapshot(payload: dict, url: str, token: str, timeout: float = 30) -> dict:
    """POST a snapshot and return the endpoint's JSON response.

    Raises:
        PayloadValidationError: If the snapshot lacks metadata, lifts or weather.
        requests.exceptions.RequestException: On network failure or a
            non-success status.
    """
    validate_payload(payload)
    response = requests.post(
        url,
        json=payload,
        headers={"Authorization": f"Bearer {token}"},
        timeout=timeout,
    )
    response.raise_for_status()
    return response.json()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Push a scraped ski snapshot")
    parser.add_argument(
        "--file",
        default="data/chamonix_ski_data.json",
        help="Path to the scraped snapshot JSON",
    )
    parser.add_argument(
        "--url",
        default=os.environ.get("DATA_UPDATE_URL", DEFAULT_URL),
        help="Ingestion endpoint URL",
    )
    parser.add_argument(
        "--token",
        default=os.environ.get("DATA_UPDATE_SECRET"),
        help="Bearer token (defaults to $DATA_UPDATE_SECRET)",
    )
    args = parser.parse_args(argv)

    if not args.token:
        logger.error("No token given and DATA_UPDATE_SECRET is not set")
        return 1

    try:
        payload = load_snapshot(args.file)
        result = push_snapshot(payload, args.url, args.token)
    except requests.exceptions.RequestException as e:
        logger.error(f"Upload to {args.url} failed: {e}")
        return 1
    except PayloadValidationError as e:
        logger.error(f"Snapshot rejected before upload: {e}")
        return 1
    except (OSError, ValueError) as e:
        logger.error(f"Could not read snapshot {args.file}: {e}")
        return 1

    logger.info(
        f"Uploaded snapshot: {result.get('lifts_total')} lifts at {result.get('timestamp')}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
