"""Configuration helpers and Settings container.

This module provides a small `Settings` dataclass and `get_settings` which
reads environment variables (with checks on the numeric values), plus the
fixed business constants: point value, goal tiers and entity colors.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os

from dotenv import load_dotenv

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")

DEFAULT_DATA_DIR = "registros monitorar"
DEFAULT_CACHE_TTL_SECONDS = 5 * 60
DEFAULT_UNIT_VALUE = 3.25  # R$ per point
DEFAULT_TEAM_MONTHLY_GOAL = 29500
DEFAULT_EXCLUDED_ENTITY = "Rodrigo"  # freelancer, not part of the team average
DEFAULT_PREMIUM_ENTITY = "Matheus"

ENTITY_COLORS = {
    "Rodrigo": "#8b5cf6",
    "Maurício": "#f59e0b",
    "Matheus": "#10b981",
    "Wesley": "#ef4444",
}
DEFAULT_ENTITY_COLOR = "#6b7280"


@dataclass(frozen=True)
class GoalPolicy:
    """Two-tier point goals: one premium entity, everyone else standard.

    Attributes:
        premium_entity: Entity name that gets the higher goals.
        premium_weekly: Weekly goal for the premium entity.
        premium_monthly: Monthly (cycle) goal for the premium entity.
        standard_weekly: Weekly goal for everyone else.
        standard_monthly: Monthly (cycle) goal for everyone else.
        working_days: Working days per week, used to derive daily goals.
    """
    premium_entity: str = DEFAULT_PREMIUM_ENTITY
    premium_weekly: int = 2675
    premium_monthly: int = 10500
    standard_weekly: int = 2375
    standard_monthly: int = 9500
    working_days: int = 5

    def weekly_goal(self, entity: str) -> int:
        if entity == self.premium_entity:
            return self.premium_weekly
        return self.standard_weekly

    def monthly_goal(self, entity: str) -> int:
        if entity == self.premium_entity:
            return self.premium_monthly
        return self.standard_monthly

    def daily_goal(self, entity: str) -> int:
        return self.weekly_goal(entity) // self.working_days


@dataclass(frozen=True)
class Settings:
    """Container for tracker configuration read from the environment.

    Attributes:
        data_dir: Root folder holding the month sub-folders.
        base_url: Optional HTTP base URL; when set, files are fetched remotely.
        cache_ttl_seconds: How long an ingested aggregate stays fresh.
        unit_value: Currency value of one point.
        team_monthly_goal: Team-wide point goal for one cycle.
        excluded_entity: Entity left out of the team average.
        goals: Per-entity goal tiers.
    """
    data_dir: Path
    base_url: str | None
    cache_ttl_seconds: float
    unit_value: float
    team_monthly_goal: float
    excluded_entity: str
    goals: GoalPolicy


def _read_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}.") from None
    if value <= 0:
        raise RuntimeError(f"{name} must be greater than zero, got {raw!r}.")
    return value


def get_settings() -> Settings:
    """Read environment variables and return a frozen `Settings` object.

    Raises:
        RuntimeError: if a numeric variable is set but is not a positive number.
    """
    data_dir = Path(os.getenv("POINTS_DATA_DIR", DEFAULT_DATA_DIR))
    base_url = os.getenv("POINTS_BASE_URL", "").strip() or None
    premium_entity = os.getenv("POINTS_PREMIUM_ENTITY", DEFAULT_PREMIUM_ENTITY).strip()

    return Settings(
        data_dir=data_dir,
        base_url=base_url,
        cache_ttl_seconds=_read_float("POINTS_CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS),
        unit_value=_read_float("POINTS_UNIT_VALUE", DEFAULT_UNIT_VALUE),
        team_monthly_goal=_read_float("POINTS_TEAM_MONTHLY_GOAL", DEFAULT_TEAM_MONTHLY_GOAL),
        excluded_entity=os.getenv("POINTS_EXCLUDED_ENTITY", DEFAULT_EXCLUDED_ENTITY).strip(),
        goals=GoalPolicy(premium_entity=premium_entity),
    )


def entity_color(name: str) -> str:
    """Return the fixed display color for an entity, gray when unmapped."""
    return ENTITY_COLORS.get(name, DEFAULT_ENTITY_COLOR)
