"""Accumulate records into entity aggregates and merge those into a folder result.

Merging is purely additive: totals add, record lists append in arrival
order and buckets add per label. Nothing is deduplicated, so folding the
same partial twice counts it twice.
"""
from __future__ import annotations

import logging
from datetime import datetime

from points_tracker.cycle.calculator import week_label
from points_tracker.models import (
    Bucket,
    EntityAggregate,
    FolderAggregate,
    FolderStatistics,
    PointRecord,
)

log = logging.getLogger(__name__)


def _add_to_bucket(buckets: dict[str, Bucket], label: str, points: float, count: int) -> None:
    bucket = buckets.get(label)
    if bucket is None:
        bucket = buckets[label] = Bucket()
    bucket.points += points
    bucket.record_count += count


def add_record(aggregate: EntityAggregate, record: PointRecord) -> None:
    """Append one record to `aggregate`, updating totals and both bucket maps."""
    aggregate.records.append(record)
    aggregate.total_points += record.points
    aggregate.total_records += 1
    _add_to_bucket(aggregate.monthly_buckets, record.cycle_month, record.points, 1)
    _add_to_bucket(aggregate.weekly_buckets, week_label(record.cycle_week), record.points, 1)


def merge_entity(folder: FolderAggregate, partial: EntityAggregate) -> EntityAggregate:
    """Fold a file-level aggregate into `folder` and return the entity's aggregate.

    A new entity takes over a copy of `partial`; an existing one accumulates
    it. `partial` itself is never modified.
    """
    existing = folder.entities.get(partial.name)
    if existing is None:
        merged = partial.model_copy(deep=True)
        folder.entities[partial.name] = merged
        return merged

    existing.total_points += partial.total_points
    existing.total_records += partial.total_records
    existing.records.extend(list(partial.records))

    for label, data in list(partial.monthly_buckets.items()):
        _add_to_bucket(existing.monthly_buckets, label, data.points, data.record_count)
    for label, data in list(partial.weekly_buckets.items()):
        _add_to_bucket(existing.weekly_buckets, label, data.points, data.record_count)
    return existing


def finalize_statistics(folder: FolderAggregate, total_files: int, unit_value: float) -> FolderStatistics:
    """Recompute `folder.statistics` from its entities and return them.

    Args:
        folder: Folder aggregate whose entities are complete.
        total_files: Number of files that were read successfully.
        unit_value: Currency value of one point.
    """
    total_points = sum(e.total_points for e in folder.entities.values())
    stats = FolderStatistics(
        total_files=total_files,
        total_entities=len(folder.entities),
        total_records=sum(e.total_records for e in folder.entities.values()),
        total_points=total_points,
        total_derived_value=total_points * unit_value,
    )
    folder.statistics = stats
    folder.last_processed = datetime.now()
    return stats
