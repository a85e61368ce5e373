"""
Tests for reading symptom documents out of the symptom store.

Run:
    pytest tests/test_symptom_source.py -v
"""

from datetime import date, datetime, timezone

import pytest

from bodymap.services.heatmap_engine import compute_heatmap
from bodymap.services.symptom_source import (
    _coerce_severity,
    build_query,
    doc_to_symptom,
    fetch_body_map_symptoms,
)


def _doc(_id, body_part="left_forearm", day=1, **extra):
    doc = {
        "_id": _id,
        "user_id": "u1",
        "body_part": body_part,
        "severity": 5,
        "symptom_type": "Aching",
        "created_at": datetime(2026, 3, day, 9, 0, tzinfo=timezone.utc),
    }
    doc.update(extra)
    return doc


# ── Conversion ────────────────────────────────────────────────────────────────

class TestCoerceSeverity:

    @pytest.mark.parametrize("value,expected", [
        (7,       7),
        (0,       0),
        (6.4,     6),
        (6.6,     7),
        ("8",     8),
        (" 3 ",   3),
        ("7.5",   None),
        ("high",  None),
        (None,    None),
        (True,    None),
        (float("nan"), None),
        (float("inf"), None),
        ([5],     None),
        (10**400,    None),
        ("9" * 400,  None),
        ("9" * 5000, None),
        (1e308,   int(1e308)),
    ])
    def test_coerce(self, value, expected):
        assert _coerce_severity(value) == expected


class TestDocToSymptom:

    def test_stored_field_names(self):
        record = doc_to_symptom(_doc(
            "abc",
            body_coordinates={"x": 86.5, "y": 199, "view": "front"},
            severity=7,
            description="Dull ache after typing",
        ))
        assert record.id == "abc"
        assert record.region_id == "left_forearm"
        assert record.coordinates.x == 86.5
        assert record.coordinates.view == "front"
        assert record.severity == 7
        assert record.description == "Dull ache after typing"

    def test_non_string_id_is_stringified(self):
        assert doc_to_symptom(_doc(12345)).id == "12345"

    @pytest.mark.parametrize("coords", [
        None,
        "86,199",
        {"x": 86.5},
        {"x": "left", "y": 2, "view": "front"},
    ])
    def test_unusable_coordinates_dropped(self, coords):
        record = doc_to_symptom(_doc("a", body_coordinates=coords))
        assert record is not None
        assert record.coordinates is None

    def test_non_string_body_part_dropped(self):
        record = doc_to_symptom(_doc("a", body_part=["left_arm"]))
        assert record is not None
        assert record.region_id is None

    def test_missing_id_skipped(self):
        doc = _doc("a")
        del doc["_id"]
        assert doc_to_symptom(doc) is None

    def test_oversized_numeric_severity_is_missing(self):
        record = doc_to_symptom(_doc("a", body_part="face", severity="9" * 400))
        assert record is not None
        assert record.severity is None
        assert compute_heatmap([record])["face"].avg_severity == 5

    def test_invalid_field_skipped(self):
        assert doc_to_symptom(_doc("a", created_at="not a date")) is None


# ── Query ─────────────────────────────────────────────────────────────────────

class TestBuildQuery:

    def test_no_filters(self):
        assert build_query() == {}

    def test_user_only(self):
        assert build_query(user_id="u1") == {"user_id": "u1"}

    def test_inclusive_day_range(self):
        query = build_query(date_from=date(2026, 3, 1), date_to=date(2026, 3, 31))
        created = query["created_at"]
        assert created["$gte"] == datetime(2026, 3, 1, tzinfo=timezone.utc)
        assert created["$lte"] == datetime(2026, 3, 31, 23, 59, 59, 999999, tzinfo=timezone.utc)

    def test_open_ended_range(self):
        query = build_query(date_to=date(2026, 3, 31))
        assert set(query["created_at"]) == {"$lte"}


# ── Fetch ─────────────────────────────────────────────────────────────────────

class TestFetchBodyMapSymptoms:

    async def test_no_database(self):
        assert await fetch_body_map_symptoms(None, user_id="u1") == []

    async def test_newest_first(self, fake_db):
        db = fake_db([_doc("old", day=1), _doc("new", day=3), _doc("mid", day=2)])
        records = await fetch_body_map_symptoms(db, user_id="u1")
        assert [r.id for r in records] == ["new", "mid", "old"]

    async def test_limit(self, fake_db):
        db = fake_db([_doc(str(d), day=d) for d in range(1, 11)])
        records = await fetch_body_map_symptoms(db, limit=3)
        assert [r.id for r in records] == ["10", "9", "8"]

    async def test_filters_by_user(self, fake_db):
        db = fake_db([_doc("mine"), _doc("theirs", user_id="u2")])
        records = await fetch_body_map_symptoms(db, user_id="u1")
        assert [r.id for r in records] == ["mine"]
        assert db.symptoms.last_query == {"user_id": "u1"}

    async def test_malformed_docs_skipped(self, fake_db):
        db = fake_db([_doc("good"), _doc("bad", symptom_type={"nested": True})])
        records = await fetch_body_map_symptoms(db)
        assert [r.id for r in records] == ["good"]

    async def test_query_failure_returns_empty(self):
        class BrokenDB:
            def __getitem__(self, name):
                raise RuntimeError("connection reset")

        assert await fetch_body_map_symptoms(BrokenDB()) == []
