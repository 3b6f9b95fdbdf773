"""Pydantic models for point records and their aggregates.

These models define the canonical record produced by the row parser, the
per-entity and folder-level aggregates built by the merger, and the summary
returned to the dashboard and CLI.
"""

from __future__ import annotations

from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict


class PointRecord(BaseModel):
    """One observed unit of work, immutable once built.

    Attributes:
        date: When the work happened.
        entity_name: Employee the record belongs to (from the file name).
        site: Optional refinery/site tag.
        points: Points earned, always positive.
        observations: Optional free text.
        cycle_month: Billing-cycle month label (e.g. 'Abril').
        cycle_week: Week inside the billing cycle (1-5).
    """
    model_config = ConfigDict(extra="forbid", frozen=True)
    date: datetime
    entity_name: str = Field(..., min_length=1)
    site: str = ""
    points: float = Field(..., gt=0)
    observations: str = ""
    cycle_month: str
    cycle_week: int = Field(..., ge=1, le=5)


class Bucket(BaseModel):
    """Points and record count accumulated under one week or month label."""
    model_config = ConfigDict(extra="forbid")
    points: float = 0.0
    record_count: int = Field(0, ge=0)


class EntityAggregate(BaseModel):
    """Everything known about one employee across the files read so far."""
    model_config = ConfigDict(extra="forbid")
    name: str
    total_points: float = 0.0
    total_records: int = 0
    records: list[PointRecord] = Field(default_factory=list)
    monthly_buckets: dict[str, Bucket] = Field(default_factory=dict)
    weekly_buckets: dict[str, Bucket] = Field(default_factory=dict)


class FolderStatistics(BaseModel):
    """Totals over a full folder run."""
    model_config = ConfigDict(extra="forbid")
    total_files: int = Field(0, ge=0)
    total_entities: int = Field(0, ge=0)
    total_records: int = Field(0, ge=0)
    total_points: float = 0.0
    total_derived_value: float = 0.0


class FolderAggregate(BaseModel):
    """Result of one ingestion run: entity name → aggregate, plus totals."""
    model_config = ConfigDict(extra="forbid")
    entities: dict[str, EntityAggregate] = Field(default_factory=dict)
    statistics: FolderStatistics = Field(default_factory=FolderStatistics)
    last_processed: datetime = Field(default_factory=datetime.now)


class GeneralStats(BaseModel):
    """Summary shown on the statistics cards."""
    model_config = ConfigDict(extra="forbid")
    best_performer: str
    best_points: float
    team_average: float
    total_goal: float
    progress_percentage: float


class EntityMetrics(BaseModel):
    """Goal progress for one entity in a selected cycle week."""
    model_config = ConfigDict(extra="forbid")
    name: str
    weekly_points: float
    weekly_goal: int
    monthly_points: float
    monthly_goal: int
    weekly_progress: float
    monthly_progress: float
    status: str
