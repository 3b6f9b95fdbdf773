"""Chart-ready tables derived from a folder aggregate.

Functions in this module are rebuilt on every read from the cached
`FolderAggregate`; they never mutate it.

Expectations:
- Input: a FolderAggregate whose entities are in catalog order.
- Outputs: small pandas DataFrames with the columns documented on each
  function, or lists of records for the records browser.
"""
from __future__ import annotations

import pandas as pd

from points_tracker.config import entity_color
from points_tracker.cycle.calculator import WEEKS_PER_CYCLE, month_order, week_label
from points_tracker.models import EntityAggregate, FolderAggregate, PointRecord

RECORD_COLUMNS = [
    "date", "entity_name", "site", "points", "observations", "cycle_month", "cycle_week",
]


def weekly_series(folder: FolderAggregate) -> pd.DataFrame:
    """Return points per cycle week and entity.

    Returns:
        DataFrame with one row per week ('Week 1'..'Week 5') and columns
        `name` plus one column per entity; missing weeks are 0.
    """
    entities = list(folder.entities)
    rows = []
    for week in range(1, WEEKS_PER_CYCLE + 1):
        label = week_label(week)
        row: dict[str, object] = {"name": label}
        for name in entities:
            bucket = folder.entities[name].weekly_buckets.get(label)
            row[name] = bucket.points if bucket is not None else 0
        rows.append(row)
    return pd.DataFrame(rows, columns=["name", *entities])


def monthly_series(folder: FolderAggregate) -> pd.DataFrame:
    """Return points per cycle month and entity.

    Returns:
        DataFrame with one row per month label seen in any entity, in
        calendar order (not alphabetical), and columns `name` plus one
        column per entity; missing months are 0.
    """
    entities = list(folder.entities)
    labels = {label for e in folder.entities.values() for label in e.monthly_buckets}
    rows = []
    for label in sorted(labels, key=lambda m: (month_order(m), m)):
        row: dict[str, object] = {"name": label}
        for name in entities:
            bucket = folder.entities[name].monthly_buckets.get(label)
            row[name] = bucket.points if bucket is not None else 0
        rows.append(row)
    return pd.DataFrame(rows, columns=["name", *entities])


def team_distribution(folder: FolderAggregate) -> pd.DataFrame:
    """Return each entity's total points with its display color.

    Returns:
        DataFrame with columns `name`, `value`, `color`.
    """
    rows = [
        {"name": name, "value": e.total_points, "color": entity_color(name)}
        for name, e in folder.entities.items()
    ]
    return pd.DataFrame(rows, columns=["name", "value", "color"])


def get_entity(folder: FolderAggregate, name: str) -> EntityAggregate | None:
    return folder.entities.get(name)


def filter_records(
    folder: FolderAggregate,
    entity: str | None = None,
    week: int | None = None,
    search: str | None = None,
) -> list[PointRecord]:
    """Return records matching every given filter, newest first.

    Args:
        folder: Folder aggregate to read.
        entity: Only records of this entity.
        week: Only records in this cycle week (1-5).
        search: Case-insensitive text matched against site and observations.
    """
    records = [r for e in folder.entities.values() for r in e.records]

    if entity:
        records = [r for r in records if r.entity_name == entity]
    if week is not None:
        records = [r for r in records if r.cycle_week == week]
    if search:
        needle = search.casefold()
        records = [
            r for r in records
            if needle in r.site.casefold() or needle in r.observations.casefold()
        ]

    return sorted(records, key=lambda r: r.date, reverse=True)


def records_frame(records: list[PointRecord]) -> pd.DataFrame:
    """Return records as a DataFrame with the columns in `RECORD_COLUMNS`."""
    return pd.DataFrame([r.model_dump() for r in records], columns=RECORD_COLUMNS)
