"""
regions.py — Region catalog routes.

Routes:
  GET  /api/v1/regions               — catalog, optionally one view
  GET  /api/v1/regions/parents       — coarse (legacy) region ids
  GET  /api/v1/regions/hit           — region under an (x, y) point
  GET  /api/v1/regions/{region_id}   — label / parent / children for any id

Used by the region picker and the breakdown list. Lookups never 404: an
unknown id resolves to itself with no region and no children.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query

from bodymap.models.region import Region, RegionDetail, RegionHit, View
from bodymap.services.region_catalog import (
    REGIONS,
    child_regions,
    display_label,
    parent_of,
    parent_region_ids,
    region_at,
    region_by_id,
    regions_for_view,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/regions", tags=["regions"])


@router.get("", response_model=list[Region])
async def list_regions(
    view: Optional[View] = Query(default=None, description="front | back (omit for all)"),
):
    """Catalog regions in declaration order."""
    if view is None:
        return list(REGIONS)
    return list(regions_for_view(view))


@router.get("/parents", response_model=list[str])
async def list_parent_regions():
    """Coarse region ids in first-seen catalog order."""
    return list(parent_region_ids())


@router.get("/hit", response_model=RegionHit)
async def hit_test(
    x: float = Query(..., description="x in body-map space"),
    y: float = Query(..., description="y in body-map space"),
    view: View = Query(default="front"),
):
    """Region whose outline contains the point, or region=null."""
    return RegionHit(x=x, y=y, view=view, region=region_at(x, y, view))


@router.get("/{region_id}", response_model=RegionDetail)
async def get_region(region_id: str):
    """Resolve any region id: fine, coarse, or unknown."""
    return RegionDetail(
        id=region_id,
        label=display_label(region_id),
        parent_region=parent_of(region_id),
        region=region_by_id(region_id),
        children=list(child_regions(region_id)),
    )
