"""
body_map.py — Body-map heatmap, marker and breakdown routes.

Routes:
  GET  /api/v1/body-map                              — snapshot from the symptom store
  POST /api/v1/body-map/heatmap                      — heatmap for a posted batch
  POST /api/v1/body-map/markers                      — marker placements for a posted batch
  POST /api/v1/body-map/breakdown                    — by-type / by-body-part statistics
  POST /api/v1/body-map/regions/{region_id}/symptoms — drill-down list for one region
  GET  /api/v1/body-map/severity                     — band for one severity value
  GET  /api/v1/body-map/legend                       — all four severity bands

HOW THE DATA FLOWS
──────────────────
1. The dashboard and the full body-map page call GET /api/v1/body-map with
   a view and an optional day range; the mini-map only reads the front view.
2. Records are read newest-first (capped) from the symptom store and run
   through compute_heatmap() and place_markers().
3. Pages that already hold a symptom list (e.g. after an edit) POST it to
   the pure endpoints instead of re-reading the store.

Everything after the store read is deterministic and fast (pure
computation, no I/O).

TESTING YOUR CHANGES
─────────────────────
  pytest tests/test_body_map_routes.py -v

  curl "http://localhost:8000/api/v1/body-map?view=back&date_from=2026-01-01"
  curl http://localhost:8000/api/v1/body-map/legend
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from bodymap.core.config import settings
from bodymap.core.database import get_db
from bodymap.core.rate_limit import limiter
from bodymap.models.heatmap import (
    BodyMapResponse,
    HeatmapEntry,
    MarkerPlacement,
    MarkerRequest,
    SeverityBand,
    SymptomBatch,
    SymptomBreakdown,
)
from bodymap.models.region import View
from bodymap.models.symptom import SymptomRecord
from bodymap.services.heatmap_engine import compute_heatmap, symptom_breakdown
from bodymap.services.marker_placement import place_markers
from bodymap.services.region_catalog import symptoms_for_region
from bodymap.services.severity import severity_band, severity_legend
from bodymap.services.symptom_source import fetch_body_map_symptoms

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/body-map", tags=["body-map"])


# ── Snapshot ──────────────────────────────────────────────────────────────────

@router.get("", response_model=BodyMapResponse)
@limiter.limit(settings.rate_limit)
async def get_body_map(
    request: Request,
    view: View = Query(default="front", description="front | back"),
    date_from: Optional[date] = Query(default=None, description="First day (inclusive)"),
    date_to: Optional[date] = Query(default=None, description="Last day (inclusive)"),
    # Row ownership is enforced by the web app's store; this only narrows the read.
    user_id: Optional[str] = Query(default=None, max_length=128),
    db=Depends(get_db),
):
    """
    Return stored symptoms plus their heatmap and marker placements for one view.

    The heatmap covers every stored record (both views) so region shading
    matches across the front / back toggle; markers are for `view` only.
    """
    if date_from and date_to and date_from > date_to:
        raise HTTPException(status_code=422, detail="date_from must not be after date_to")

    symptoms = await fetch_body_map_symptoms(
        db, user_id=user_id, date_from=date_from, date_to=date_to,
    )
    heatmap = compute_heatmap(symptoms)
    markers = place_markers(symptoms, view)

    logger.info(
        "Body-map snapshot: %d symptoms, %d regions, %d markers (%s)",
        len(symptoms), len(heatmap), len(markers), view,
    )

    return BodyMapResponse(
        view=view,
        symptoms=symptoms,
        heatmap=heatmap,
        markers=markers,
        total_symptoms=len(symptoms),
        region_count=len(heatmap),
        date_from=date_from.isoformat() if date_from else None,
        date_to=date_to.isoformat() if date_to else None,
    )


# ── Pure computations on a posted batch ───────────────────────────────────────

@router.post("/heatmap", response_model=dict[str, HeatmapEntry])
async def post_heatmap(payload: SymptomBatch):
    """Heatmap entries keyed by region id; regions without symptoms are absent."""
    return compute_heatmap(payload.symptoms)


@router.post("/markers", response_model=list[MarkerPlacement])
async def post_markers(payload: MarkerRequest):
    """Marker placements for payload.view, in input order."""
    return place_markers(payload.symptoms, payload.view)


@router.post("/breakdown", response_model=SymptomBreakdown)
async def post_breakdown(payload: SymptomBatch):
    """Counts and severities by symptom type and by body part."""
    return symptom_breakdown(payload.symptoms)


@router.post("/regions/{region_id}/symptoms", response_model=list[SymptomRecord])
async def post_region_symptoms(region_id: str, payload: SymptomBatch):
    """Symptoms listed under a tapped region (exact, coarse parent, or coarse child)."""
    return symptoms_for_region(payload.symptoms, region_id)


# ── Severity ──────────────────────────────────────────────────────────────────

@router.get("/severity", response_model=SeverityBand)
async def get_severity_band(value: float = Query(..., description="Severity, 1–10 (averages allowed)")):
    return severity_band(value)


@router.get("/legend", response_model=list[SeverityBand])
async def get_legend():
    """The four severity bands, mildest first."""
    return severity_legend()
