"""
heatmap.py — Pydantic models for the body-map heatmap, markers and breakdowns.

HeatmapEntry
────────────
Per-region aggregate recomputed on every call. Only regions with at least
one symptom appear in a heatmap; there are no zero-count entries.

  count               ≥ 1
  avg_severity        mean of contributing severities (missing → 5)
  max_severity        worst contributing severity
  normalized_density  count / max count across the symptom set, in (0, 1]
  fill_color          severity band colour of avg_severity
  fill_opacity        0.15 + normalized_density * 0.5, in [0.15, 0.65]

MarkerPlacement
───────────────
One plotted symptom. Stored coordinates for the rendered view are used
verbatim; otherwise the marker sits on a golden-angle spiral around the
region anchor and is_fallback is True.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from bodymap.models.region import View
from bodymap.models.symptom import SymptomRecord


class SeverityBand(BaseModel):
    """One of the four discrete severity categories."""

    model_config = ConfigDict(frozen=True)

    label: str   # Mild | Moderate | Severe | Critical
    color: str   # hex colour used by fills, markers and the legend
    range: str   # human-readable span of the 1–10 scale, e.g. "4-5"


class HeatmapEntry(BaseModel):
    """Aggregated statistics + visual encoding for one region id."""

    region_id: str
    count: int
    avg_severity: float
    max_severity: int
    normalized_density: float
    fill_color: str
    fill_opacity: float


class MarkerPlacement(BaseModel):
    """Plot position for a single symptom on one view."""

    symptom: SymptomRecord
    x: float
    y: float
    color: str
    is_fallback: bool


class BreakdownRow(BaseModel):
    """Count / severity statistics for one group of symptoms."""

    key: str
    label: str
    count: int
    avg_severity: float
    max_severity: int


class SymptomBreakdown(BaseModel):
    """Statistical breakdown handed to the report composer."""

    by_type: list[BreakdownRow]
    by_body_part: list[BreakdownRow]
    total_count: int
    avg_severity: float


# ── Request / response envelopes ──────────────────────────────────────────────

class SymptomBatch(BaseModel):
    """Request body for the pure computation endpoints."""

    symptoms: list[SymptomRecord] = Field(default_factory=list, max_length=5000)


class MarkerRequest(SymptomBatch):
    """Request body for POST /api/v1/body-map/markers."""

    view: View = "front"


class BodyMapResponse(BaseModel):
    """Snapshot returned by GET /api/v1/body-map."""

    view: View
    symptoms: list[SymptomRecord]
    heatmap: dict[str, HeatmapEntry]
    markers: list[MarkerPlacement]
    total_symptoms: int
    region_count: int
    date_from: Optional[str] = None
    date_to: Optional[str] = None
