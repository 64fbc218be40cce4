from __future__ import annotations

from kyoto_temples.grouper import build_draft, cluster_records
from kyoto_temples.models import ImageRecord, Location


def _rec(name: str, lat: float | None, lng: float | None, date: str | None = None) -> ImageRecord:
    loc = Location(lat, lng) if lat is not None else None
    return ImageRecord(reference=f"data/images/{name}", location=loc, captured_on=date)


def test_records_closer_than_threshold_share_a_cluster() -> None:
    clusters = cluster_records([_rec("a.jpg", 35.0, 135.0), _rec("b.jpg", 35.0009, 135.0)])

    assert len(clusters) == 1
    assert clusters[0].images == ["data/images/a.jpg", "data/images/b.jpg"]


def test_records_beyond_threshold_split() -> None:
    clusters = cluster_records([_rec("a.jpg", 35.0, 135.0), _rec("b.jpg", 35.0011, 135.0)])

    assert len(clusters) == 2


def test_distance_exactly_at_threshold_splits() -> None:
    clusters = cluster_records([_rec("a.jpg", 0.0, 0.0), _rec("b.jpg", 0.001, 0.0)])

    assert len(clusters) == 2


def test_anchor_is_fixed_and_not_a_centroid() -> None:
    records = [
        _rec("a.jpg", 35.0, 135.0),
        _rec("b.jpg", 35.0, 135.0009),
        _rec("c.jpg", 35.0, 135.0018),
    ]

    clusters = cluster_records(records)

    assert [c.images for c in clusters] == [
        ["data/images/a.jpg", "data/images/b.jpg"],
        ["data/images/c.jpg"],
    ]
    assert clusters[0].location == Location(35.0, 135.0)


def test_first_qualifying_cluster_wins_over_nearest() -> None:
    records = [
        _rec("a.jpg", 35.0, 135.0),
        _rec("b.jpg", 35.0, 135.0015),
        _rec("c.jpg", 35.0, 135.0008),
    ]

    clusters = cluster_records(records)

    assert clusters[0].images[-1] == "data/images/c.jpg"
    assert clusters[1].images == ["data/images/b.jpg"]


def test_date_comes_from_anchor_and_is_never_backfilled() -> None:
    records = [
        _rec("a.jpg", 35.0, 135.0),
        _rec("b.jpg", 35.0, 135.0001, "2024-01-01"),
        _rec("c.jpg", 36.0, 135.0, "2024-02-02"),
        _rec("d.jpg", 36.0, 135.0001, "2024-03-03"),
    ]

    clusters = cluster_records(records)

    assert clusters[0].date is None
    assert clusters[1].date == "2024-02-02"


def test_unlocated_records_are_dropped() -> None:
    clusters = cluster_records([_rec("none.jpg", None, None, "2024-01-01"), _rec("a.jpg", 35.0, 135.0)])

    assert len(clusters) == 1
    assert clusters[0].images == ["data/images/a.jpg"]


def test_clustering_is_repeatable_for_same_order() -> None:
    records = [_rec(f"{i}.jpg", 35.0 + (i % 3) * 0.01, 135.0 + i * 0.0001) for i in range(12)]

    assert cluster_records(records) == cluster_records(records)


def test_build_draft_fills_placeholders() -> None:
    clusters = cluster_records([_rec("a.jpg", 35.0, 135.0, "2024-01-01"), _rec("b.jpg", 36.0, 135.0)])

    draft = build_draft(clusters)

    assert "_note" in draft
    first, second = draft["temples"]
    assert first["id"] == "temple_1"
    assert first["name"] == "寺社 1"
    assert first["category"] == "temple"
    assert first["location"] == {"lat": 35.0, "lng": 135.0, "address": ""}
    assert first["visitDate"] == "2024-01-01"
    assert first["tags"] == []
    assert second["id"] == "temple_2"
    assert second["visitDate"] == ""
