"""Normalisation of scraped resort snapshots.

Turns a raw scraped payload into the published document:
- lifts are deduplicated by name within each sector (first occurrence wins)
- lift records whose transport type is not a ski lift become attractions
- pistes are deduplicated by name within each sector
- the calculated summary is recomputed from scratch
"""

import logging
from typing import Any, Iterable, Mapping

from models.ski_data import LiftStatus, LiftType, PisteDifficulty

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("metadata", "lifts", "weather")

OPEN_STATUS = LiftStatus.OPEN.value


class PayloadValidationError(Exception):
    """Raised when a payload is missing required top-level fields."""

    pass


def validate_payload(payload: Any) -> None:
    """Reject payloads that cannot be normalised.

    Raises:
        PayloadValidationError: If the payload is not an object, or if
            `metadata`, `lifts` or `weather` is absent or null. Empty
            collections are accepted.
    """
    if not isinstance(payload, Mapping):
        raise PayloadValidationError("Payload must be a JSON object")

    missing = [
        field
        for field in REQUIRED_FIELDS
        if field not in payload or payload[field] is None
    ]
    if missing:
        raise PayloadValidationError(
            f"Invalid data structure - missing required fields: {', '.join(missing)}"
        )
    if not isinstance(payload["lifts"], Mapping):
        raise PayloadValidationError("Invalid data structure - lifts must be keyed by sector")


def _dedupe_by_name(records: Iterable[dict], name_key: str, sector: str) -> list[dict]:
    seen: set[str] = set()
    kept = []
    for record in records:
        name = record.get(name_key)
        if name in seen:
            logger.debug(f"Dropping duplicate {name_key} '{name}' in {sector}")
            continue
        seen.add(name)
        kept.append(dict(record))
    return kept


def _is_lift(record: Mapping[str, Any]) -> bool:
    return LiftType.from_code(record.get("lift_type")) is not None


def normalise_lifts(
    raw_lifts: Mapping[str, list[dict]],
    existing_attractions: Mapping[str, list[dict]] | None = None,
) -> tuple[dict[str, list[dict]], dict[str, list[dict]]]:
    """Deduplicate lifts per sector and split out attractions.

    Args:
        raw_lifts: Sector -> lift records, in scrape order
        existing_attractions: Attractions from an already-normalised document,
            carried forward ahead of newly reclassified records

    Returns:
        (lifts, attractions). Every input sector appears in lifts, possibly
        with an empty list; only sectors with at least one attraction appear
        in attractions.
    """
    existing_attractions = existing_attractions or {}
    lifts: dict[str, list[dict]] = {}
    attractions: dict[str, list[dict]] = {}

    for sector, records in raw_lifts.items():
        sector_lifts = []
        sector_attractions = []
        for record in _dedupe_by_name(records or [], "lift_name", sector):
            if _is_lift(record):
                sector_lifts.append(record)
            else:
                sector_attractions.append(record)

        lifts[sector] = sector_lifts
        carried = existing_attractions.get(sector) or []
        merged = _dedupe_by_name([*carried, *sector_attractions], "lift_name", sector)
        if merged:
            attractions[sector] = merged

    # Sectors that only had attractions in a previous pass
    for sector, records in existing_attractions.items():
        if sector not in attractions and records:
            attractions[sector] = _dedupe_by_name(records, "lift_name", sector)

    return lifts, attractions


def normalise_pistes(raw_pistes: Mapping[str, list[dict]]) -> dict[str, list[dict]]:
    """Deduplicate pistes per sector by name (first occurrence wins)."""
    return {
        sector: _dedupe_by_name(records or [], "piste_name", sector)
        for sector, records in raw_pistes.items()
    }


def calculate_summary(
    lifts: Mapping[str, list[dict]], pistes: Mapping[str, list[dict]]
) -> dict[str, Any]:
    """Recompute the lift and per-difficulty piste counts.

    Pistes with a missing or unknown difficulty code are not counted in any
    bucket.
    """
    lifts_open = 0
    lifts_total = 0
    for sector_lifts in lifts.values():
        for lift in sector_lifts:
            lifts_total += 1
            if lift.get("status") == OPEN_STATUS:
                lifts_open += 1

    pistes_by_difficulty = {
        level.bucket: {"open": 0, "total": 0} for level in PisteDifficulty
    }
    for sector_pistes in pistes.values():
        for piste in sector_pistes:
            level = PisteDifficulty.from_code(piste.get("difficulty"))
            if level is None:
                continue
            bucket = pistes_by_difficulty[level.bucket]
            bucket["total"] += 1
            if piste.get("status") == OPEN_STATUS:
                bucket["open"] += 1

    return {
        "lifts_open": lifts_open,
        "lifts_total": lifts_total,
        "pistes_by_difficulty": pistes_by_difficulty,
    }


def normalise_ski_data(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Build the published document from a raw (or already normalised) payload.

    All top-level keys other than lifts, pistes, attractions and
    calculated_summary are passed through. The input is not modified.

    Raises:
        PayloadValidationError: If required fields are missing.
    """
    validate_payload(payload)

    lifts, attractions = normalise_lifts(
        payload["lifts"], payload.get("attractions") or {}
    )
    pistes = normalise_pistes(payload.get("pistes") or {})
    summary = calculate_summary(lifts, pistes)

    logger.info(
        f"Normalised {summary['lifts_total']} lifts "
        f"({summary['lifts_open']} open), "
        f"{sum(len(a) for a in attractions.values())} attractions, "
        f"{sum(len(p) for p in pistes.values())} pistes across {len(lifts)} sectors"
    )

    return {
        **payload,
        "lifts": lifts,
        "pistes": pistes,
        "attractions": attractions,
        "calculated_summary": summary,
    }
