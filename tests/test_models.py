from __future__ import annotations

from datetime import datetime

import pytest
from pydantic import ValidationError

from points_tracker.models import Bucket, EntityAggregate, FolderAggregate, PointRecord


def _record(**overrides: object) -> dict[str, object]:
    rec: dict[str, object] = {
        "date": datetime(2024, 4, 20),
        "entity_name": "Ana",
        "points": 10,
        "cycle_month": "Abril",
        "cycle_week": 4,
    }
    rec.update(overrides)
    return rec


def test_point_record_validates() -> None:
    rec = PointRecord.model_validate(_record())
    assert rec.site == ""
    assert rec.observations == ""
    assert rec.points == 10.0


@pytest.mark.parametrize(
    "overrides",
    [
        {"points": 0},
        {"points": -1},
        {"entity_name": ""},
        {"cycle_week": 0},
        {"cycle_week": 6},
        {"unexpected": "field"},
    ],
)
def test_point_record_rejects_invalid(overrides: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        PointRecord.model_validate(_record(**overrides))


def test_point_record_is_frozen() -> None:
    rec = PointRecord.model_validate(_record())
    with pytest.raises(ValidationError):
        rec.points = 20  # type: ignore[misc]


def test_aggregate_defaults_are_independent() -> None:
    a = EntityAggregate(name="Ana")
    b = EntityAggregate(name="Bia")
    a.records.append(PointRecord.model_validate(_record()))
    a.weekly_buckets["Week 4"] = Bucket(points=10, record_count=1)
    assert b.records == []
    assert b.weekly_buckets == {}


def test_folder_aggregate_defaults() -> None:
    folder = FolderAggregate()
    assert folder.entities == {}
    assert folder.statistics.total_files == 0
    assert isinstance(folder.last_processed, datetime)
