"""
symptom_source.py — Read symptom documents from MongoDB for the body map.

The symptom store belongs to the web app. Documents look like:

    {
      "_id": ObjectId(...),
      "user_id": "a1b2...",
      "body_part": "left_forearm",
      "body_coordinates": {"x": 86.5, "y": 199.0, "view": "front"},  # optional
      "severity": 7,                                                  # optional
      "symptom_type": "Aching",
      "description": "...",
      "created_at": ISODate("2026-03-02T09:15:00Z")
    }

Documents are converted leniently: an unparsable severity becomes None,
unusable coordinates are dropped, and a document that still fails
validation is skipped with a warning instead of failing the request.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime, time, timezone
from typing import Any, Optional

from pydantic import ValidationError

from bodymap.core.config import settings
from bodymap.models.symptom import BodyCoordinates, SymptomRecord

logger = logging.getLogger(__name__)

_PROJECTION = {
    "_id": 1,
    "body_part": 1,
    "body_coordinates": 1,
    "severity": 1,
    "symptom_type": 1,
    "description": 1,
    "created_at": 1,
}


# ── Document conversion ───────────────────────────────────────────────────────

def _finite_int(value: int) -> Optional[int]:
    try:
        float(value)
    except OverflowError:
        return None
    return value


def _coerce_severity(value: Any) -> Optional[int]:
    """Stored severity as an int, or None when it isn't a usable number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return _finite_int(value)
    if isinstance(value, float):
        return round(value) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            return _finite_int(int(value.strip()))
        except ValueError:
            return None
    return None


def _coerce_coordinates(value: Any) -> Optional[BodyCoordinates]:
    if not isinstance(value, dict):
        return None
    try:
        return BodyCoordinates.model_validate(value)
    except ValidationError:
        return None


def doc_to_symptom(doc: dict) -> Optional[SymptomRecord]:
    """Build a SymptomRecord from a stored document, or None if unusable."""
    body_part = doc.get("body_part")
    try:
        return SymptomRecord(
            id=str(doc["_id"]),
            region_id=body_part if isinstance(body_part, str) else None,
            coordinates=_coerce_coordinates(doc.get("body_coordinates")),
            severity=_coerce_severity(doc.get("severity")),
            symptom_type=doc.get("symptom_type"),
            description=doc.get("description"),
            created_at=doc.get("created_at"),
        )
    except (KeyError, ValidationError) as exc:
        logger.warning("Skipping malformed symptom doc %s: %s", doc.get("_id"), exc)
        return None


# ── Query ─────────────────────────────────────────────────────────────────────

def build_query(
    user_id: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> dict:
    """
    Mongo filter for one user's symptoms within an inclusive day range.

    date_to covers the whole day (up to 23:59:59.999999 UTC).
    """
    query: dict = {}
    if user_id:
        query["user_id"] = user_id

    created: dict = {}
    if date_from is not None:
        created["$gte"] = datetime.combine(date_from, time.min, tzinfo=timezone.utc)
    if date_to is not None:
        created["$lte"] = datetime.combine(date_to, time.max, tzinfo=timezone.utc)
    if created:
        query["created_at"] = created
    return query


async def fetch_body_map_symptoms(
    db,
    user_id: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    limit: Optional[int] = None,
) -> list[SymptomRecord]:
    """
    Newest-first symptoms for the body map.

    Returns [] when the database is unavailable or the query fails — the
    body map then renders empty rather than erroring.
    """
    if db is None:
        return []

    query = build_query(user_id, date_from, date_to)
    limit = limit or settings.body_map_fetch_limit

    records: list[SymptomRecord] = []
    try:
        cursor = (
            db[settings.symptoms_collection]
            .find(query, _PROJECTION)
            .sort("created_at", -1)
            .limit(limit)
        )
        async for doc in cursor:
            record = doc_to_symptom(doc)
            if record is not None:
                records.append(record)
    except Exception as exc:
        logger.warning("Body-map symptom query failed: %s", exc)
        return []

    return records
