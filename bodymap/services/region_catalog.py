"""
region_catalog.py — Static anatomical region table + resolution helpers.

The catalog is plain data: one row per fine-grained region of the front or
back silhouette, loaded once at import into immutable lookup indexes. Every
row also names a coarse `parent_region` — the legacy 18-region grouping that
older symptom records were logged against. Some coarse ids ("left_arm",
"upper_back") have no geometry of their own and exist only as grouping keys.

Every lookup is total. Region ids on symptom records come from free text and
user edits, so an unknown id is an expected input, not an error:

    region_by_id("left_forearm")       → Region
    region_by_id("left_arm")           → None   (coarse id, no own entry)
    parent_of("left_forearm")          → "left_arm"
    parent_of("left_arm")              → "left_arm"
    display_label("left_arm")          → "Left Arm"
    display_label("totally_unknown")   → "totally_unknown"

Outlines are SVG paths in the "50 0 180 400" viewBox. region_at() flattens
them to polygons for point hit-testing.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Iterable, Optional

from bodymap.models.region import VIEWS, Point, Region
from bodymap.models.symptom import SymptomRecord

logger = logging.getLogger(__name__)

# ── Catalog rows ──────────────────────────────────────────────────────────────
# Columns: id, label, parent_region, view, outline, anchor_x, anchor_y
# Regions that exist on both silhouettes are duplicated with their own ids
# (e.g. "left_elbow" / "left_elbow_back") rather than sharing geometry.

_RAW: tuple[tuple[str, str, str, str, str, int, int], ...] = (
    # ── Head (front) ──────────────────────────────────────────────────────
    ("forehead", "Forehead", "head", "front",
     "M 125,18 C 130,13 150,13 155,18 L 158,32 C 158,34 122,34 122,32 Z",
     140, 24),
    ("left_temple", "Left Temple", "head", "front",
     "M 115,28 C 113,22 118,18 125,18 L 122,34 C 118,34 115,33 115,28 Z",
     119, 27),
    ("right_temple", "Right Temple", "head", "front",
     "M 155,18 C 162,18 167,22 165,28 C 165,33 162,34 158,34 L 155,18 Z",
     161, 27),
    ("left_jaw", "Left Jaw", "head", "front",
     "M 115,40 C 114,36 115,33 115,28 L 122,34 L 125,55 C 120,52 116,47 115,40 Z",
     119, 42),
    ("right_jaw", "Right Jaw", "head", "front",
     "M 165,28 C 165,33 166,36 165,40 C 164,47 160,52 155,55 L 158,34 L 165,28 Z",
     161, 42),
    ("face", "Face", "head", "front",
     "M 122,34 L 158,34 L 155,55 C 150,62 140,68 140,68 C 140,68 130,62 125,55 L 122,34 Z",
     140, 50),

    # ── Head (back) ───────────────────────────────────────────────────────
    ("crown", "Crown", "head", "back",
     "M 120,15 C 128,10 152,10 160,15 C 167,22 168,35 165,48 C 162,58 155,65 140,72 C 125,65 118,58 115,48 C 112,35 113,22 120,15 Z",
     140, 42),

    # ── Neck ──────────────────────────────────────────────────────────────
    ("front_neck", "Front of Neck", "neck", "front",
     "M 130,72 L 150,72 L 150,98 L 130,98 Z",
     140, 85),
    ("back_neck", "Back of Neck", "neck", "back",
     "M 130,72 L 150,72 L 150,98 L 130,98 Z",
     140, 85),

    # ── Chest (front) ─────────────────────────────────────────────────────
    ("upper_chest", "Upper Chest", "chest", "front",
     "M 110,100 L 170,100 L 170,125 L 110,125 Z",
     140, 112),
    ("left_chest", "Left Chest", "chest", "front",
     "M 110,125 L 140,125 L 140,155 L 108,155 Z",
     124, 140),
    ("right_chest", "Right Chest", "chest", "front",
     "M 140,125 L 170,125 L 172,155 L 140,155 Z",
     156, 140),
    ("sternum", "Sternum", "chest", "front",
     "M 135,105 L 145,105 L 145,155 L 135,155 Z",
     140, 130),
    ("lower_chest", "Lower Chest", "chest", "front",
     "M 108,155 L 172,155 L 170,165 L 110,165 Z",
     140, 160),

    # ── Abdomen (front) ───────────────────────────────────────────────────
    ("epigastric", "Epigastric", "abdomen", "front",
     "M 120,165 L 160,165 L 158,182 L 122,182 Z",
     140, 173),
    ("upper_abdomen_left", "Upper Left Abdomen", "abdomen", "front",
     "M 108,165 L 122,165 L 122,195 L 107,195 Z",
     115, 180),
    ("upper_abdomen_right", "Upper Right Abdomen", "abdomen", "front",
     "M 158,165 L 172,165 L 173,195 L 158,195 Z",
     165, 180),
    ("umbilical", "Umbilical", "abdomen", "front",
     "M 122,182 L 158,182 L 158,205 L 122,205 Z",
     140, 193),
    ("lower_abdomen_left", "Lower Left Abdomen", "abdomen", "front",
     "M 107,195 L 122,195 L 122,215 L 110,215 Z",
     115, 205),
    ("lower_abdomen_right", "Lower Right Abdomen", "abdomen", "front",
     "M 158,195 L 173,195 L 170,215 L 158,215 Z",
     165, 205),
    ("suprapubic", "Suprapubic", "abdomen", "front",
     "M 122,205 L 158,205 L 155,220 L 125,220 Z",
     140, 212),

    # ── Shoulders (front) ─────────────────────────────────────────────────
    ("left_shoulder_front", "Left Shoulder", "left_shoulder", "front",
     "M 85,102 L 110,100 L 110,122 L 95,125 Z",
     98, 112),
    ("right_shoulder_front", "Right Shoulder", "right_shoulder", "front",
     "M 170,100 L 195,102 L 185,125 L 170,122 Z",
     182, 112),

    # ── Arms (front) ──────────────────────────────────────────────────────
    ("left_upper_arm", "Left Upper Arm", "left_arm", "front",
     "M 82,125 L 100,122 L 97,165 L 80,165 Z",
     90, 143),
    ("left_elbow", "Left Elbow", "left_arm", "front",
     "M 80,165 L 97,165 L 95,185 L 78,185 Z",
     88, 175),
    ("left_forearm", "Left Forearm", "left_arm", "front",
     "M 78,185 L 95,185 L 92,210 L 76,210 Z",
     85, 197),
    ("right_upper_arm", "Right Upper Arm", "right_arm", "front",
     "M 180,122 L 198,125 L 200,165 L 183,165 Z",
     190, 143),
    ("right_elbow", "Right Elbow", "right_arm", "front",
     "M 183,165 L 200,165 L 202,185 L 185,185 Z",
     192, 175),
    ("right_forearm", "Right Forearm", "right_arm", "front",
     "M 185,185 L 202,185 L 204,210 L 188,210 Z",
     195, 197),

    # ── Hands (front) ─────────────────────────────────────────────────────
    ("left_wrist", "Left Wrist", "left_hand", "front",
     "M 74,210 L 92,210 L 90,222 L 72,222 Z",
     82, 216),
    ("left_palm", "Left Palm", "left_hand", "front",
     "M 72,222 L 90,222 L 88,240 L 65,240 Z",
     78, 231),
    ("right_wrist", "Right Wrist", "right_hand", "front",
     "M 188,210 L 206,210 L 208,222 L 190,222 Z",
     198, 216),
    ("right_palm", "Right Palm", "right_hand", "front",
     "M 190,222 L 208,222 L 215,240 L 192,240 Z",
     202, 231),

    # ── Hands (back) ──────────────────────────────────────────────────────
    ("left_back_of_hand", "Left Back of Hand", "left_hand", "back",
     "M 72,222 L 90,222 L 88,240 L 65,240 Z",
     78, 231),
    ("right_back_of_hand", "Right Back of Hand", "right_hand", "back",
     "M 190,222 L 208,222 L 215,240 L 192,240 Z",
     202, 231),

    # ── Hips (front) ──────────────────────────────────────────────────────
    ("left_hip_joint", "Left Hip Joint", "left_hip", "front",
     "M 108,218 L 125,218 L 122,240 L 108,240 Z",
     116, 229),
    ("left_groin", "Left Groin", "left_hip", "front",
     "M 125,218 L 140,218 L 138,240 L 122,240 Z",
     131, 229),
    ("right_hip_joint", "Right Hip Joint", "right_hip", "front",
     "M 155,218 L 172,218 L 172,240 L 158,240 Z",
     164, 229),
    ("right_groin", "Right Groin", "right_hip", "front",
     "M 140,218 L 155,218 L 158,240 L 138,240 Z",
     149, 229),

    # ── Legs (front) ──────────────────────────────────────────────────────
    ("left_thigh", "Left Thigh", "left_leg", "front",
     "M 108,240 L 138,240 L 134,300 L 112,300 Z",
     123, 270),
    ("left_knee", "Left Knee", "left_leg", "front",
     "M 112,300 L 134,300 L 132,325 L 114,325 Z",
     123, 312),
    ("left_shin", "Left Shin", "left_leg", "front",
     "M 114,325 L 132,325 L 130,362 L 110,362 Z",
     122, 343),
    ("right_thigh", "Right Thigh", "right_leg", "front",
     "M 142,240 L 172,240 L 168,300 L 146,300 Z",
     157, 270),
    ("right_knee", "Right Knee", "right_leg", "front",
     "M 146,300 L 168,300 L 166,325 L 148,325 Z",
     157, 312),
    ("right_shin", "Right Shin", "right_leg", "front",
     "M 148,325 L 166,325 L 170,362 L 150,362 Z",
     158, 343),

    # ── Feet (front) ──────────────────────────────────────────────────────
    ("left_ankle", "Left Ankle", "left_foot", "front",
     "M 110,362 L 130,362 L 130,375 L 108,375 Z",
     120, 368),
    ("left_top_of_foot", "Left Top of Foot", "left_foot", "front",
     "M 108,375 L 130,375 L 132,390 L 100,390 Z",
     116, 382),
    ("right_ankle", "Right Ankle", "right_foot", "front",
     "M 150,362 L 170,362 L 172,375 L 150,375 Z",
     160, 368),
    ("right_top_of_foot", "Right Top of Foot", "right_foot", "front",
     "M 150,375 L 172,375 L 180,390 L 148,390 Z",
     164, 382),

    # ── Upper Back ────────────────────────────────────────────────────────
    ("left_upper_back", "Left Upper Back", "upper_back", "back",
     "M 110,100 L 138,100 L 138,145 L 108,145 Z",
     124, 122),
    ("right_upper_back", "Right Upper Back", "upper_back", "back",
     "M 142,100 L 170,100 L 172,145 L 142,145 Z",
     156, 122),
    ("spine_thoracic", "Thoracic Spine", "upper_back", "back",
     "M 136,100 L 144,100 L 144,165 L 136,165 Z",
     140, 132),

    # ── Lower Back ────────────────────────────────────────────────────────
    ("left_lower_back", "Left Lower Back", "lower_back", "back",
     "M 108,165 L 138,165 L 138,205 L 107,205 Z",
     122, 185),
    ("right_lower_back", "Right Lower Back", "lower_back", "back",
     "M 142,165 L 172,165 L 173,205 L 142,205 Z",
     158, 185),
    ("spine_lumbar", "Lumbar Spine", "lower_back", "back",
     "M 136,165 L 144,165 L 144,205 L 136,205 Z",
     140, 185),
    ("sacrum", "Sacrum", "lower_back", "back",
     "M 130,205 L 150,205 L 148,222 L 132,222 Z",
     140, 213),

    # ── Buttocks (back) ───────────────────────────────────────────────────
    ("left_buttock", "Left Buttock", "left_hip", "back",
     "M 108,218 L 138,218 L 138,248 L 108,248 Z",
     123, 233),
    ("right_buttock", "Right Buttock", "right_hip", "back",
     "M 142,218 L 172,218 L 172,248 L 142,248 Z",
     157, 233),

    # ── Calves (back) ─────────────────────────────────────────────────────
    ("left_calf", "Left Calf", "left_leg", "back",
     "M 112,300 L 134,300 L 130,362 L 110,362 Z",
     122, 330),
    ("right_calf", "Right Calf", "right_leg", "back",
     "M 146,300 L 168,300 L 170,362 L 150,362 Z",
     158, 330),

    # ── Heels / Soles (back) ──────────────────────────────────────────────
    ("left_heel", "Left Heel", "left_foot", "back",
     "M 110,362 L 130,362 L 130,378 L 108,378 Z",
     120, 370),
    ("left_sole", "Left Sole", "left_foot", "back",
     "M 108,378 L 130,378 L 132,390 L 100,390 Z",
     116, 384),
    ("right_heel", "Right Heel", "right_foot", "back",
     "M 150,362 L 170,362 L 172,378 L 150,378 Z",
     160, 370),
    ("right_sole", "Right Sole", "right_foot", "back",
     "M 150,378 L 172,378 L 180,390 L 148,390 Z",
     164, 384),

    # ── Back-view legs ──────────────────────────────────────────────────────────────────────
    ("left_thigh_back", "Left Thigh (Back)", "left_leg", "back",
     "M 108,248 L 138,248 L 134,300 L 112,300 Z",
     123, 274),
    ("left_knee_back", "Left Knee (Back)", "left_leg", "back",
     "M 112,300 L 134,300 L 132,325 L 114,325 Z",
     123, 312),
    ("right_thigh_back", "Right Thigh (Back)", "right_leg", "back",
     "M 142,248 L 172,248 L 168,300 L 146,300 Z",
     157, 274),
    ("right_knee_back", "Right Knee (Back)", "right_leg", "back",
     "M 146,300 L 168,300 L 166,325 L 148,325 Z",
     157, 312),

    # ── Back-view arms and wrists ─────────────────────────────────────────────────────────────────────────────
    ("left_shoulder_back", "Left Shoulder (Back)", "left_shoulder", "back",
     "M 85,102 L 110,100 L 110,122 L 95,125 Z",
     98, 112),
    ("right_shoulder_back", "Right Shoulder (Back)", "right_shoulder", "back",
     "M 170,100 L 195,102 L 185,125 L 170,122 Z",
     182, 112),
    ("left_upper_arm_back", "Left Upper Arm (Back)", "left_arm", "back",
     "M 82,125 L 100,122 L 97,165 L 80,165 Z",
     90, 143),
    ("left_elbow_back", "Left Elbow (Back)", "left_arm", "back",
     "M 80,165 L 97,165 L 95,185 L 78,185 Z",
     88, 175),
    ("left_forearm_back", "Left Forearm (Back)", "left_arm", "back",
     "M 78,185 L 95,185 L 92,210 L 76,210 Z",
     85, 197),
    ("right_upper_arm_back", "Right Upper Arm (Back)", "right_arm", "back",
     "M 180,122 L 198,125 L 200,165 L 183,165 Z",
     190, 143),
    ("right_elbow_back", "Right Elbow (Back)", "right_arm", "back",
     "M 183,165 L 200,165 L 202,185 L 185,185 Z",
     192, 175),
    ("right_forearm_back", "Right Forearm (Back)", "right_arm", "back",
     "M 185,185 L 202,185 L 204,210 L 188,210 Z",
     195, 197),
    ("left_wrist_back", "Left Wrist (Back)", "left_hand", "back",
     "M 74,210 L 92,210 L 90,222 L 72,222 Z",
     82, 216),
    ("right_wrist_back", "Right Wrist (Back)", "right_hand", "back",
     "M 188,210 L 206,210 L 208,222 L 190,222 Z",
     198, 216),
)


# ── Outline geometry ──────────────────────────────────────────────────────────

_PATH_TOKEN  = re.compile(r"[A-Za-z]|-?\d+(?:\.\d+)?")
_CURVE_STEPS = 8   # line segments per cubic Bézier when flattening

Polygon = tuple[tuple[float, float], ...]


def _cubic(p0, p1, p2, p3, t: float) -> tuple[float, float]:
    u = 1.0 - t
    x = u**3 * p0[0] + 3 * u**2 * t * p1[0] + 3 * u * t**2 * p2[0] + t**3 * p3[0]
    y = u**3 * p0[1] + 3 * u**2 * t * p1[1] + 3 * u * t**2 * p2[1] + t**3 * p3[1]
    return (x, y)


def _flatten_outline(path: str) -> Polygon:
    """
    Convert an absolute M / L / C / Z SVG path into polygon vertices.

    Curves are sampled at _CURVE_STEPS points. Anything the parser does not
    understand (relative commands, arcs, truncated coordinates) yields an
    empty polygon, which contains no point.
    """
    tokens = _PATH_TOKEN.findall(path)
    points: list[tuple[float, float]] = []
    command = None
    i = 0
    try:
        while i < len(tokens):
            token = tokens[i]
            if token.isalpha():
                command = token
                i += 1
                continue
            if command in ("M", "L"):
                points.append((float(tokens[i]), float(tokens[i + 1])))
                i += 2
            elif command == "C":
                c1  = (float(tokens[i]),     float(tokens[i + 1]))
                c2  = (float(tokens[i + 2]), float(tokens[i + 3]))
                end = (float(tokens[i + 4]), float(tokens[i + 5]))
                start = points[-1]
                for step in range(1, _CURVE_STEPS + 1):
                    points.append(_cubic(start, c1, c2, end, step / _CURVE_STEPS))
                i += 6
            else:
                return ()
    except (IndexError, ValueError):
        return ()
    return tuple(points)


def _polygon_area(polygon: Polygon) -> float:
    """Absolute shoelace area; 0.0 for degenerate polygons."""
    if len(polygon) < 3:
        return 0.0
    total = 0.0
    for (x1, y1), (x2, y2) in zip(polygon, polygon[1:] + polygon[:1]):
        total += x1 * y2 - x2 * y1
    return abs(total) / 2.0


def _polygon_contains(polygon: Polygon, x: float, y: float) -> bool:
    """Even-odd ray cast. Non-finite coordinates are never inside."""
    if len(polygon) < 3 or not (math.isfinite(x) and math.isfinite(y)):
        return False
    inside = False
    j = len(polygon) - 1
    for i in range(len(polygon)):
        xi, yi = polygon[i]
        xj, yj = polygon[j]
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


# ── Indexes (built once, never mutated) ───────────────────────────────────────

def _build_regions(rows) -> tuple[Region, ...]:
    regions = []
    seen: set[str] = set()
    for region_id, label, parent, view, outline, ax, ay in rows:
        if region_id in seen:
            raise ValueError(f"Duplicate region id in catalog: {region_id!r}")
        seen.add(region_id)
        regions.append(Region(
            id=region_id,
            label=label,
            parent_region=parent,
            view=view,
            outline=outline,
            anchor=Point(x=ax, y=ay),
        ))
    return tuple(regions)


REGIONS: tuple[Region, ...] = _build_regions(_RAW)

_BY_ID: dict[str, Region] = {r.id: r for r in REGIONS}

_BY_VIEW: dict[str, tuple[Region, ...]] = {
    view: tuple(r for r in REGIONS if r.view == view) for view in VIEWS
}

_BY_PARENT: dict[str, tuple[Region, ...]] = {}
for _region in REGIONS:
    _BY_PARENT[_region.parent_region] = _BY_PARENT.get(_region.parent_region, ()) + (_region,)

_POLYGONS: dict[str, Polygon] = {r.id: _flatten_outline(r.outline) for r in REGIONS}
_AREAS:    dict[str, float]   = {rid: _polygon_area(p) for rid, p in _POLYGONS.items()}

# All coarse ids in first-seen catalog order (legacy filter options).
PARENT_REGION_IDS: tuple[str, ...] = tuple(_BY_PARENT)

logger.debug(
    "Region catalog loaded: %d regions (%d front, %d back), %d coarse groups",
    len(REGIONS), len(_BY_VIEW["front"]), len(_BY_VIEW["back"]), len(PARENT_REGION_IDS),
)


# ── Resolution ────────────────────────────────────────────────────────────────

def region_by_id(region_id: str) -> Optional[Region]:
    """O(1) catalog lookup. Unknown and coarse ids return None."""
    return _BY_ID.get(region_id)


def resolve_region(region_id: Optional[str]) -> Optional[Region]:
    """Like region_by_id, but also accepts None / empty ids from records."""
    if not region_id:
        return None
    return _BY_ID.get(region_id)


def regions_for_view(view: str) -> tuple[Region, ...]:
    """Regions of one silhouette in catalog order. Unknown views → ()."""
    return _BY_VIEW.get(view, ())


def child_regions(coarse_id: str) -> tuple[Region, ...]:
    """All fine regions whose parent_region is coarse_id, in catalog order."""
    return _BY_PARENT.get(coarse_id, ())


def parent_of(region_id: str) -> str:
    """Coarse id for a fine region; any other id is returned unchanged."""
    region = _BY_ID.get(region_id)
    return region.parent_region if region is not None else region_id


def parent_region_ids() -> tuple[str, ...]:
    return PARENT_REGION_IDS


def is_known_region_id(region_id: Optional[str]) -> bool:
    """True for catalog ids and for coarse ids that group catalog regions."""
    if not region_id:
        return False
    return region_id in _BY_ID or region_id in _BY_PARENT


def humanize_region_id(region_id: str) -> str:
    """'left_arm' → 'Left Arm'. Only the first letter of each word changes."""
    return " ".join(word[:1].upper() + word[1:] for word in region_id.split("_"))


def display_label(region_id: str) -> str:
    """
    Label for any region id.

    Catalog label for fine regions, a humanized id for coarse groupings
    that have children, and the raw id for anything else.
    """
    region = _BY_ID.get(region_id)
    if region is not None:
        return region.label
    if _BY_PARENT.get(region_id):
        return humanize_region_id(region_id)
    return region_id


# ── Region drill-down ─────────────────────────────────────────────────────────

def matches_region(body_part: Optional[str], region_id: Optional[str]) -> bool:
    """
    True when a symptom logged on body_part belongs under region_id.

    Matches the exact id, a fine symptom under a selected coarse group,
    and a coarse (legacy) symptom under one of its selected children.
    """
    if not body_part or not region_id:
        return False
    if body_part == region_id:
        return True
    if parent_of(body_part) == region_id:
        return True
    return any(r.id == region_id for r in child_regions(body_part))


def symptoms_for_region(
    records: Iterable[SymptomRecord],
    region_id: Optional[str],
) -> list[SymptomRecord]:
    """Records shown in the breakdown list for one tapped region, input order kept."""
    return [r for r in records if matches_region(r.region_id, region_id)]


# ── Hit-testing ───────────────────────────────────────────────────────────────

def outline_polygon(region: Region) -> Polygon:
    """Flattened outline vertices for a catalog (or ad-hoc) region."""
    polygon = _POLYGONS.get(region.id)
    if polygon is not None and region == _BY_ID.get(region.id):
        return polygon
    return _flatten_outline(region.outline)


def region_at(x: float, y: float, view: str) -> Optional[Region]:
    """
    Region of `view` whose outline contains (x, y).

    Outlines overlap in a few places (the sternum strip sits on top of the
    chest regions, the spine on top of the back halves); the smallest
    containing region wins, then catalog order.
    """
    candidates = [
        r for r in regions_for_view(view)
        if _polygon_contains(_POLYGONS[r.id], x, y)
    ]
    if not candidates:
        return None
    return min(candidates, key=lambda r: _AREAS[r.id])
