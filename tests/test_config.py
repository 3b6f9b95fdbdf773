from __future__ import annotations

from pathlib import Path

import pytest

from points_tracker.config import (
    DEFAULT_ENTITY_COLOR,
    GoalPolicy,
    entity_color,
    get_settings,
)

ENV_VARS = [
    "POINTS_DATA_DIR",
    "POINTS_BASE_URL",
    "POINTS_CACHE_TTL_SECONDS",
    "POINTS_UNIT_VALUE",
    "POINTS_TEAM_MONTHLY_GOAL",
    "POINTS_EXCLUDED_ENTITY",
    "POINTS_PREMIUM_ENTITY",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = get_settings()
    assert s.data_dir == Path("registros monitorar")
    assert s.base_url is None
    assert s.cache_ttl_seconds == 300
    assert s.unit_value == 3.25
    assert s.team_monthly_goal == 29500
    assert s.excluded_entity == "Rodrigo"
    assert s.goals.premium_entity == "Matheus"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POINTS_DATA_DIR", "/srv/points")
    monkeypatch.setenv("POINTS_BASE_URL", "https://files.example.com/")
    monkeypatch.setenv("POINTS_CACHE_TTL_SECONDS", "60")
    monkeypatch.setenv("POINTS_UNIT_VALUE", "4.5")
    monkeypatch.setenv("POINTS_PREMIUM_ENTITY", "Wesley")

    s = get_settings()
    assert s.data_dir == Path("/srv/points")
    assert s.base_url == "https://files.example.com/"
    assert s.cache_ttl_seconds == 60
    assert s.unit_value == 4.5
    assert s.goals.weekly_goal("Wesley") == 2675


def test_blank_base_url_means_local(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POINTS_BASE_URL", "   ")
    assert get_settings().base_url is None


@pytest.mark.parametrize("value", ["abc", "0", "-5"])
def test_invalid_numbers_raise(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    monkeypatch.setenv("POINTS_CACHE_TTL_SECONDS", value)
    with pytest.raises(RuntimeError, match="POINTS_CACHE_TTL_SECONDS"):
        get_settings()


def test_goal_policy_tiers() -> None:
    goals = GoalPolicy()
    assert goals.weekly_goal("Matheus") == 2675
    assert goals.monthly_goal("Matheus") == 10500
    assert goals.daily_goal("Matheus") == 535
    assert goals.weekly_goal("Wesley") == 2375
    assert goals.monthly_goal("Wesley") == 9500
    assert goals.daily_goal("Wesley") == 475


def test_entity_color() -> None:
    assert entity_color("Rodrigo") == "#8b5cf6"
    assert entity_color("Maurício") == "#f59e0b"
    assert entity_color("Someone") == DEFAULT_ENTITY_COLOR
