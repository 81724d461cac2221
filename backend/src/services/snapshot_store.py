"""Persistence for raw and published resort snapshots.

Two documents are written per ingestion, one after the other:
- the raw scraped payload, verbatim
- the normalised document served to clients

There is no transaction across the two writes. A failure after the first
write leaves the raw document newer than the published one.
"""

import json
import logging
from pathlib import Path
from typing import Any

from botocore.exceptions import ClientError

from utils.cache import CACHE_CONTROL_NO_STORE, CACHE_CONTROL_PUBLIC
from utils.constants import PUBLISHED_SNAPSHOT_NAME, RAW_SNAPSHOT_NAME

logger = logging.getLogger(__name__)


class SnapshotNotFoundError(Exception):
    """Raised when no published snapshot exists yet."""

    pass


def _dumps(document: dict[str, Any]) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False)


class LocalSnapshotStore:
    """Stores snapshots as pretty-printed JSON files on local disk."""

    def __init__(self, data_dir: str | Path = "data", public_dir: str | Path = "public"):
        """Initialize the store.

        Args:
            data_dir: Directory for the raw scraped snapshot
            public_dir: Directory for the published, normalised snapshot
        """
        self.data_dir = Path(data_dir)
        self.public_dir = Path(public_dir)

    @property
    def raw_path(self) -> Path:
        return self.data_dir / RAW_SNAPSHOT_NAME

    @property
    def published_path(self) -> Path:
        return self.public_dir / PUBLISHED_SNAPSHOT_NAME

    def write_raw(self, document: dict[str, Any]) -> str:
        return self._write(self.raw_path, document)

    def write_published(self, document: dict[str, Any]) -> str:
        return self._write(self.published_path, document)

    def read_published(self) -> dict[str, Any]:
        """Load the published snapshot.

        Raises:
            SnapshotNotFoundError: If nothing has been published yet.
        """
        if not self.published_path.exists():
            raise SnapshotNotFoundError(f"No snapshot at {self.published_path}")
        with open(self.published_path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _write(self, path: Path, document: dict[str, Any]) -> str:
        path.parent.mkdir(parents=True, exist_ok=True)
        content = _dumps(document)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        logger.info(f"Wrote {len(content)} bytes to {path}")
        return str(path)


class S3SnapshotStore:
    """Stores snapshots as JSON objects in an S3 bucket."""

    RAW_KEY = f"raw/{RAW_SNAPSHOT_NAME}"
    PUBLISHED_KEY = f"data/{PUBLISHED_SNAPSHOT_NAME}"

    def __init__(self, bucket: str, s3_client):
        """Initialize the store.

        Args:
            bucket: Target bucket name
            s3_client: boto3 S3 client
        """
        self.bucket = bucket
        self.s3_client = s3_client

    def write_raw(self, document: dict[str, Any]) -> str:
        return self._upload(self.RAW_KEY, document, cache_control=CACHE_CONTROL_NO_STORE)

    def write_published(self, document: dict[str, Any]) -> str:
        return self._upload(
            self.PUBLISHED_KEY, document, cache_control=CACHE_CONTROL_PUBLIC
        )

    def read_published(self) -> dict[str, Any]:
        """Load the published snapshot.

        Raises:
            SnapshotNotFoundError: If the object does not exist.
        """
        try:
            response = self.s3_client.get_object(
                Bucket=self.bucket, Key=self.PUBLISHED_KEY
            )
        except ClientError as e:
            if e.response["Error"]["Code"] in ("NoSuchKey", "404"):
                raise SnapshotNotFoundError(
                    f"No snapshot at s3://{self.bucket}/{self.PUBLISHED_KEY}"
                ) from e
            raise
        return json.loads(response["Body"].read().decode("utf-8"))

    def _upload(self, key: str, document: dict[str, Any], cache_control: str) -> str:
        content = _dumps(document)
        self.s3_client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=content.encode("utf-8"),
            ContentType="application/json",
            CacheControl=cache_control,
        )
        logger.info(f"Uploaded {len(content)} bytes to s3://{self.bucket}/{key}")
        return f"s3://{self.bucket}/{key}"
