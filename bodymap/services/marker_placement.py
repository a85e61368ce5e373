"""
marker_placement.py — Where each symptom's dot is drawn on a body view.

Symptoms logged by tapping the map carry stored coordinates for the view
they were tapped on; those are authoritative. Everything else (AI-extracted
symptoms, records tapped on the other view, legacy records) is placed on a
golden-angle spiral around its region's anchor point:

    ordinal 0 → 4 units from the anchor at   0°
    ordinal 1 → 7 units from the anchor at 137.5°
    ordinal 2 → 10 units                at 275°
    ...
    ordinal ≥4 → capped at 15 units so dots stay inside the region

The spiral is a pure function of (anchor, ordinal). The only state is the
per-region ordinal counter, which lives for one place_markers() call and
advances in input order.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable

from bodymap.models.heatmap import MarkerPlacement
from bodymap.models.region import Point
from bodymap.models.symptom import SymptomRecord
from bodymap.services.region_catalog import resolve_region
from bodymap.services.severity import effective_severity, severity_color

logger = logging.getLogger(__name__)

GOLDEN_ANGLE_DEG = 137.5
_BASE_RADIUS     = 4
_RADIUS_STEP     = 3
_MAX_RADIUS      = 15


def fallback_position(anchor: Point, ordinal: int) -> Point:
    """Spiral offset of the ordinal-th unplaced marker around an anchor."""
    angle  = math.radians(ordinal * GOLDEN_ANGLE_DEG)
    radius = min(_BASE_RADIUS + ordinal * _RADIUS_STEP, _MAX_RADIUS)
    return Point(
        x=anchor.x + radius * math.cos(angle),
        y=anchor.y + radius * math.sin(angle),
    )


def place_markers(records: Iterable[SymptomRecord], view: str) -> list[MarkerPlacement]:
    """
    One placement per record whose region is drawn on `view`, in input order.

    Records with an empty or unknown region id, or whose region belongs to
    the other view, are left out. Only records that fall back to the spiral
    consume a per-region ordinal.
    """
    ordinals: dict[str, int] = {}
    placements: list[MarkerPlacement] = []
    skipped = 0

    for record in records:
        region = resolve_region(record.region_id)
        if region is None or region.view != view:
            skipped += 1
            continue

        color  = severity_color(effective_severity(record.severity))
        coords = record.coordinates
        if coords is not None and coords.view == view:
            placements.append(MarkerPlacement(
                symptom=record, x=coords.x, y=coords.y, color=color, is_fallback=False,
            ))
            continue

        ordinal = ordinals.get(region.id, 0)
        ordinals[region.id] = ordinal + 1
        point = fallback_position(region.anchor, ordinal)
        placements.append(MarkerPlacement(
            symptom=record, x=point.x, y=point.y, color=color, is_fallback=True,
        ))

    logger.debug("Placed %d markers on %s view (%d skipped)", len(placements), view, skipped)
    return placements
