"""
heatmap_engine.py — Per-region symptom aggregation for the body-map heatmap.

USAGE
─────
    from bodymap.services.heatmap_engine import compute_heatmap

    heatmap = compute_heatmap([
        SymptomRecord(id="1", region_id="left_forearm", severity=8),
        SymptomRecord(id="2", region_id="left_forearm", severity=4),
        SymptomRecord(id="3", region_id="head",         severity=2),
    ])
    # heatmap["left_forearm"].avg_severity       → 6.0
    # heatmap["left_forearm"].normalized_density → 1.0
    # heatmap["head"].fill_opacity               → 0.40

Grouping is by the exact stored region id — a legacy coarse id ("head")
is its own heatmap key and is not folded into its children. Records with
no region id, or an id that is neither a catalog region nor a coarse
group, contribute nothing.

Everything here is a pure function of the input list: the same records in
the same order always produce identical entries, down to the floats.

The same count / mean / max primitive (aggregate_by) backs the symptom
breakdown the report composer consumes, grouped by symptom type and by
body part instead of by heatmap region.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence

from bodymap.models.heatmap import BreakdownRow, HeatmapEntry, SymptomBreakdown
from bodymap.models.symptom import SymptomRecord
from bodymap.services.region_catalog import (
    display_label,
    is_known_region_id,
    regions_for_view,
)
from bodymap.services.severity import effective_severity, severity_color

logger = logging.getLogger(__name__)

# ── Visual encoding ───────────────────────────────────────────────────────────
# Faintest region stays visible; the densest stays well short of opaque so
# region outlines remain legible through the fill.

_OPACITY_FLOOR = 0.15
_OPACITY_RANGE = 0.5

_UNKNOWN_TYPE = "Unknown"


# ── Aggregation primitive ─────────────────────────────────────────────────────

@dataclass
class SeverityStats:
    """Running count / sum / max of effective severities for one group."""

    count: int = 0
    total: float = 0  # stays an exact int for int severities; mean ≤ max fits a float
    max: Optional[float] = None

    def add(self, severity: Optional[float]) -> None:
        value = effective_severity(severity)
        self.count += 1
        self.total += value
        self.max = value if self.max is None else max(self.max, value)

    @property
    def mean(self) -> float:
        return self.total / self.count if self.count else 0.0


def aggregate_by(
    records: Iterable[SymptomRecord],
    key: Callable[[SymptomRecord], Optional[str]],
) -> dict[str, SeverityStats]:
    """
    Group records by key(record) and accumulate severity statistics.

    Records whose key is None or empty are skipped. Groups keep first-seen
    order.
    """
    groups: dict[str, SeverityStats] = {}
    for record in records:
        group = key(record)
        if not group:
            continue
        stats = groups.get(group)
        if stats is None:
            stats = groups[group] = SeverityStats()
        stats.add(record.severity)
    return groups


# ── Heatmap ───────────────────────────────────────────────────────────────────

def compute_heatmap(records: Iterable[SymptomRecord]) -> dict[str, HeatmapEntry]:
    """
    Aggregate symptoms into one HeatmapEntry per region id.

    Only regions with at least one record appear. Empty input → {}.

    Ids that are neither catalog regions nor coarse groups are dropped
    before max_count is taken. The web client used to key every non-empty
    body_part, so a typo'd id could become the densest "region" and dim
    every real one; here such ids never influence normalised density.
    """
    groups = aggregate_by(
        records,
        lambda r: r.region_id if is_known_region_id(r.region_id) else None,
    )
    if not groups:
        return {}

    # Floor of 1 keeps the division defined; densities land in (0, 1].
    max_count = max(1, max(stats.count for stats in groups.values()))

    heatmap: dict[str, HeatmapEntry] = {}
    for region_id, stats in groups.items():
        density = stats.count / max_count
        avg     = stats.mean
        heatmap[region_id] = HeatmapEntry(
            region_id=region_id,
            count=stats.count,
            avg_severity=avg,
            max_severity=stats.max,
            normalized_density=density,
            fill_color=severity_color(avg),
            fill_opacity=_OPACITY_FLOOR + density * _OPACITY_RANGE,
        )

    logger.debug("Heatmap computed: %d regions, max count %d", len(heatmap), max_count)
    return heatmap


def region_counts(records: Iterable[SymptomRecord], view: str) -> dict[str, HeatmapEntry]:
    """
    Heatmap entries limited to catalog regions drawn on one view.

    Densities are still normalised across the whole symptom set, so the
    dashboard mini-map shades regions exactly as the full map does.
    """
    heatmap = compute_heatmap(records)
    return {
        region.id: heatmap[region.id]
        for region in regions_for_view(view)
        if region.id in heatmap
    }


# ── Report breakdown ──────────────────────────────────────────────────────────

def _rows(groups: dict[str, SeverityStats], label: Callable[[str], str]) -> list[BreakdownRow]:
    rows = [
        BreakdownRow(
            key=key,
            label=label(key),
            count=stats.count,
            avg_severity=stats.mean,
            max_severity=stats.max,
        )
        for key, stats in groups.items()
    ]
    rows.sort(key=lambda row: (-row.count, row.key))
    return rows


def symptom_breakdown(records: Sequence[SymptomRecord]) -> SymptomBreakdown:
    """
    Statistical breakdown by symptom type and by body part.

    Records without a symptom type are counted under "Unknown"; records
    without a region id are left out of by_body_part but still count
    towards the totals.
    """
    overall = SeverityStats()
    for record in records:
        overall.add(record.severity)

    by_type = aggregate_by(records, lambda r: r.symptom_type or _UNKNOWN_TYPE)
    by_part = aggregate_by(records, lambda r: r.region_id)

    return SymptomBreakdown(
        by_type=_rows(by_type, lambda key: key),
        by_body_part=_rows(by_part, display_label),
        total_count=overall.count,
        avg_severity=overall.mean,
    )
