"""
Tests for marker placement on a body view.

Run:
    pytest tests/test_marker_placement.py -v
"""

import math

import pytest

from bodymap.models.region import Point
from bodymap.models.symptom import BodyCoordinates, SymptomRecord
from bodymap.services.marker_placement import fallback_position, place_markers
from bodymap.services.region_catalog import region_by_id


def _rec(i, region_id, severity=None, coords=None):
    return SymptomRecord(id=str(i), region_id=region_id, severity=severity, coordinates=coords)


def _xy(point):
    return (point.x, point.y)


# ── Spiral ────────────────────────────────────────────────────────────────────

class TestFallbackPosition:

    def test_first_point_is_east_of_anchor(self):
        point = fallback_position(Point(x=100, y=100), 0)
        assert point.x == pytest.approx(104.0)
        assert point.y == pytest.approx(100.0)

    def test_second_point_follows_golden_angle(self):
        point = fallback_position(Point(x=100, y=100), 1)
        angle = math.radians(137.5)
        assert point.x == pytest.approx(100 + 7 * math.cos(angle))
        assert point.y == pytest.approx(100 + 7 * math.sin(angle))

    @pytest.mark.parametrize("ordinal,radius", [
        (0, 4), (1, 7), (2, 10), (3, 13), (4, 15), (10, 15), (39, 15),
    ])
    def test_radius_grows_then_caps(self, ordinal, radius):
        anchor = Point(x=140, y=200)
        point = fallback_position(anchor, ordinal)
        assert math.hypot(point.x - anchor.x, point.y - anchor.y) == pytest.approx(radius)

    def test_pure_function(self):
        anchor = Point(x=85, y=197)
        assert fallback_position(anchor, 5) == fallback_position(anchor, 5)

    def test_forty_positions_pairwise_distinct(self):
        anchor = Point(x=85, y=197)
        points = [fallback_position(anchor, n) for n in range(40)]
        for i, a in enumerate(points):
            for b in points[i + 1:]:
                assert math.hypot(a.x - b.x, a.y - b.y) > 1e-6


# ── place_markers ─────────────────────────────────────────────────────────────

class TestPlaceMarkers:

    def test_empty(self):
        assert place_markers([], "front") == []

    def test_stored_coordinates_used_verbatim(self):
        coords = BodyCoordinates(x=83.5, y=201.25, view="front")
        [marker] = place_markers([_rec(1, "left_forearm", 8, coords)], "front")
        assert (marker.x, marker.y) == (83.5, 201.25)
        assert marker.is_fallback is False
        assert marker.color == "#ef4444"

    def test_coordinates_for_other_view_fall_back(self):
        # Tapped on the back silhouette, but the region itself is a front region.
        coords = BodyCoordinates(x=83.5, y=201.25, view="back")
        [marker] = place_markers([_rec(1, "left_forearm", 2, coords)], "front")
        assert marker.is_fallback is True
        assert (marker.x, marker.y) == pytest.approx((89.0, 197.0))

    def test_fallback_uses_region_anchor(self):
        anchor = region_by_id("sacrum").anchor
        [marker] = place_markers([_rec(1, "sacrum")], "back")
        expected = fallback_position(anchor, 0)
        assert (marker.x, marker.y) == (expected.x, expected.y)
        assert marker.color == "#eab308"  # missing severity → 5

    @pytest.mark.parametrize("region_id", [None, "", "totally_unknown_xyz", "left_arm"])
    def test_unresolvable_regions_excluded(self, region_id):
        assert place_markers([_rec(1, region_id, 3)], "front") == []

    def test_other_view_regions_excluded(self):
        records = [_rec(1, "sacrum", 3), _rec(2, "face", 3)]
        markers = place_markers(records, "front")
        assert [m.symptom.id for m in markers] == ["2"]

    def test_ordinals_are_per_region(self):
        records = [
            _rec(1, "left_forearm"),
            _rec(2, "face"),
            _rec(3, "left_forearm"),
        ]
        markers = place_markers(records, "front")
        forearm = region_by_id("left_forearm").anchor
        face    = region_by_id("face").anchor

        assert (markers[0].x, markers[0].y) == _xy(fallback_position(forearm, 0))
        assert (markers[1].x, markers[1].y) == _xy(fallback_position(face, 0))
        assert (markers[2].x, markers[2].y) == _xy(fallback_position(forearm, 1))

    def test_placed_records_do_not_consume_ordinals(self):
        coords = BodyCoordinates(x=84, y=190, view="front")
        records = [_rec(1, "left_forearm", 3, coords), _rec(2, "left_forearm", 3)]
        markers = place_markers(records, "front")
        expected = fallback_position(region_by_id("left_forearm").anchor, 0)
        assert (markers[1].x, markers[1].y) == (expected.x, expected.y)

    def test_ordinals_reset_between_calls(self):
        records = [_rec(1, "face"), _rec(2, "face")]
        assert place_markers(records, "front") == place_markers(records, "front")

    def test_same_region_markers_pairwise_distinct(self):
        records = [_rec(i, "umbilical", i % 10 + 1) for i in range(40)]
        markers = place_markers(records, "front")
        assert len(markers) == 40
        positions = {(round(m.x, 6), round(m.y, 6)) for m in markers}
        assert len(positions) == 40

    def test_input_order_preserved(self):
        records = [_rec(i, rid) for i, rid in enumerate(["face", "sternum", "face", "epigastric"])]
        assert [m.symptom.id for m in place_markers(records, "front")] == ["0", "1", "2", "3"]

    def test_back_view(self):
        records = [_rec(1, "left_forearm_back", 9), _rec(2, "left_forearm", 9)]
        [marker] = place_markers(records, "back")
        assert marker.symptom.region_id == "left_forearm_back"
        assert marker.color == "#ef4444"
