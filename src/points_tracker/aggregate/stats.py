"""Summary statistics and goal progress.

Computed fresh from the folder aggregate on every read, like the series.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from points_tracker.config import GoalPolicy
from points_tracker.cycle.calculator import week_label
from points_tracker.models import EntityMetrics, FolderAggregate, GeneralStats

ABOVE_THRESHOLD = 90.0
ON_TRACK_THRESHOLD = 70.0


def round_half_up(value: float, ndigits: int = 0) -> float:
    q = Decimal(10) ** -ndigits
    return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))


def progress_percentage(current: float, goal: float) -> float:
    """Return `current` as a percentage of `goal`, one decimal; 0 when the goal is 0."""
    if goal == 0:
        return 0.0
    return round_half_up(current / goal * 100, 1)


def performance_status(weekly_progress: float) -> str:
    """Classify weekly progress as 'above', 'on-track' or 'below'."""
    if weekly_progress >= ABOVE_THRESHOLD:
        return "above"
    if weekly_progress >= ON_TRACK_THRESHOLD:
        return "on-track"
    return "below"


def general_stats(folder: FolderAggregate, team_monthly_goal: float, excluded_entity: str) -> GeneralStats:
    """Return the figures shown on the statistics cards.

    The best performer is the entity with strictly the most points (the
    first one wins a tie). The team average leaves out `excluded_entity`.

    Args:
        folder: Folder aggregate to summarize.
        team_monthly_goal: Team point goal for a cycle.
        excluded_entity: Entity left out of the average (the freelancer).
    """
    best_performer = ""
    best_points = 0.0
    eligible: list[float] = []
    total_points = 0.0

    for name, entity in folder.entities.items():
        total_points += entity.total_points
        if entity.total_points > best_points:
            best_points = entity.total_points
            best_performer = name
        if name != excluded_entity:
            eligible.append(entity.total_points)

    team_average = sum(eligible) / len(eligible) if eligible else 0.0

    return GeneralStats(
        best_performer=best_performer,
        best_points=best_points,
        team_average=team_average,
        total_goal=round_half_up(team_monthly_goal / 1000, 1),
        progress_percentage=progress_percentage(total_points, team_monthly_goal),
    )


def entity_metrics(folder: FolderAggregate, week: int, goals: GoalPolicy) -> list[EntityMetrics]:
    """Return per-entity goal progress for cycle week `week`.

    Monthly points are the sum over all weekly buckets.
    """
    label = week_label(week)
    metrics = []
    for name, entity in folder.entities.items():
        bucket = entity.weekly_buckets.get(label)
        weekly_points = bucket.points if bucket is not None else 0.0
        monthly_points = sum(b.points for b in entity.weekly_buckets.values())
        weekly_goal = goals.weekly_goal(name)
        monthly_goal = goals.monthly_goal(name)
        weekly_progress = progress_percentage(weekly_points, weekly_goal)
        metrics.append(
            EntityMetrics(
                name=name,
                weekly_points=weekly_points,
                weekly_goal=weekly_goal,
                monthly_points=monthly_points,
                monthly_goal=monthly_goal,
                weekly_progress=weekly_progress,
                monthly_progress=progress_percentage(monthly_points, monthly_goal),
                status=performance_status(weekly_progress),
            )
        )
    return metrics


def team_progress(metrics: list[EntityMetrics]) -> float:
    """Return the team's monthly points as a percentage of the summed monthly goals."""
    total_goal = sum(m.monthly_goal for m in metrics)
    return progress_percentage(sum(m.monthly_points for m in metrics), total_goal)


def format_currency(value: float) -> str:
    """Format a value as Brazilian reais, e.g. 'R$ 1.234,56'."""
    text = f"{abs(value):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    sign = "-" if value < 0 else ""
    return f"{sign}R$ {text}"
