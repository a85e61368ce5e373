"""
region.py — Pydantic models for the anatomical region catalog.

Coordinates live in the body-map SVG space (viewBox "50 0 180 400"):
x grows to the right of the figure's image, y grows downwards from the
top of the head (~15) to the soles (~390).
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

View = Literal["front", "back"]

VIEWS: tuple[str, ...] = ("front", "back")


class Point(BaseModel):
    """A single (x, y) location in body-map space."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class Region(BaseModel):
    """One fine-grained anatomical region of the front or back silhouette."""

    model_config = ConfigDict(frozen=True)

    id: str             # unique across the catalog, e.g. "left_forearm"
    label: str          # display name, e.g. "Left Forearm"
    parent_region: str  # coarse legacy id this region rolls up to
    view: View
    outline: str        # closed SVG path (absolute M / L / C / Z commands)
    anchor: Point       # label position + fallback marker origin


class RegionDetail(BaseModel):
    """Resolution result for any region id, known or not."""

    id: str
    label: str                     # display_label(id)
    parent_region: str             # parent_of(id)
    region: Optional[Region] = None
    children: list[Region]


class RegionHit(BaseModel):
    """Response for a point hit-test against one view."""

    x: float
    y: float
    view: View
    region: Optional[Region] = None
