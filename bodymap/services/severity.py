"""
severity.py — The one severity → band / colour mapping for the body map.

Heatmap fills, marker dots and the legend all call severity_band(), so the
same severity can never render in two different colours. Callers may pass
a per-region average, so the classifier is defined for every float.

    severity_band(2)    → Mild      #22c55e
    severity_band(5)    → Moderate  #eab308
    severity_band(6.5)  → Severe    #f97316
    severity_band(9)    → Critical  #ef4444
"""

from __future__ import annotations

import math
from typing import Optional

from bodymap.models.heatmap import SeverityBand

# Missing severities are read as the midpoint of the 1–10 scale.
DEFAULT_SEVERITY = 5

# ── Bands (inclusive upper bound, ascending) ─────────────────────────────────

_BANDS: tuple[tuple[float, SeverityBand], ...] = (
    (3, SeverityBand(label="Mild",     color="#22c55e", range="1-3")),
    (5, SeverityBand(label="Moderate", color="#eab308", range="4-5")),
    (7, SeverityBand(label="Severe",   color="#f97316", range="6-7")),
)
_CRITICAL = SeverityBand(label="Critical", color="#ef4444", range="8-10")


def effective_severity(severity: Optional[float]) -> float:
    """
    The severity used for aggregation and colouring.

    None, and anything that does not fit a finite float (NaN, ±inf, a
    400-digit integer from a corrupted document), is read as 5.
    """
    if severity is None:
        return DEFAULT_SEVERITY
    try:
        if not math.isfinite(severity):
            return DEFAULT_SEVERITY
    except (OverflowError, TypeError):
        return DEFAULT_SEVERITY
    return severity


def severity_band(severity: float) -> SeverityBand:
    """
    Map a numeric severity to its band.

    ≤3 Mild, ≤5 Moderate, ≤7 Severe, anything higher Critical.
    NaN, and integers too large for a float, are read as DEFAULT_SEVERITY.
    """
    try:
        value = float(severity)
    except (OverflowError, TypeError, ValueError):
        value = DEFAULT_SEVERITY
    if math.isnan(value):
        value = DEFAULT_SEVERITY
    for upper, band in _BANDS:
        if value <= upper:
            return band
    return _CRITICAL


def severity_color(severity: float) -> str:
    return severity_band(severity).color


def severity_label(severity: float) -> str:
    return severity_band(severity).label


def severity_legend() -> list[SeverityBand]:
    """All four bands, mildest first."""
    return [band for _, band in _BANDS] + [_CRITICAL]
