"""Command-line interface for inspecting the point spreadsheets.

Provides subcommands: `summary`, `weekly`, `monthly`, `team`, `records`,
`entity` and `cycle`. Each command is implemented as a `cmd_*` function that
accepts the argparse namespace, the aggregate cache and the settings.
"""
from __future__ import annotations

import argparse
import logging
from datetime import date
from pathlib import Path

import pandas as pd
from dotenv import load_dotenv

from points_tracker.aggregate.series import (
    filter_records,
    get_entity,
    monthly_series,
    records_frame,
    team_distribution,
    weekly_series,
)
from points_tracker.aggregate.stats import entity_metrics, format_currency, general_stats
from points_tracker.cache import AggregateCache
from points_tracker.config import Settings, get_settings
from points_tracker.cycle.calculator import (
    WEEKS_PER_CYCLE,
    current_week,
    cycle_of,
    week_date_range,
    week_of_cycle,
)
from points_tracker.errors import PipelineFailure
from points_tracker.logging_config import configure_logging
from points_tracker.pipeline import build_cache

log = logging.getLogger(__name__)


# --------------------------------------------------
# Helpers
# --------------------------------------------------
def _print_frame(df: pd.DataFrame) -> None:
    if df.empty:
        print("(no rows)")
        return
    print(df.to_string(index=False))


def _week_arg(value: str) -> int:
    week = int(value)
    if not 1 <= week <= WEEKS_PER_CYCLE:
        raise argparse.ArgumentTypeError(f"week must be between 1 and {WEEKS_PER_CYCLE}")
    return week


# --------------------------------------------------
# AGGREGATES
# --------------------------------------------------
def cmd_summary(_: argparse.Namespace, cache: AggregateCache, settings: Settings) -> None:
    """Print folder totals and the statistics-card figures."""
    folder = cache.get()
    s = folder.statistics
    stats = general_stats(folder, settings.team_monthly_goal, settings.excluded_entity)

    print(f"Files read:       {s.total_files}")
    print(f"Employees:        {s.total_entities}")
    print(f"Records:          {s.total_records}")
    print(f"Points:           {s.total_points:,.1f}")
    print(f"Value:            {format_currency(s.total_derived_value)}")
    print(f"Best performer:   {stats.best_performer or '-'} ({stats.best_points:,.1f})")
    print(f"Team average:     {stats.team_average:,.1f}")
    print(f"Team goal:        {stats.total_goal}K ({stats.progress_percentage}%)")


def cmd_weekly(_: argparse.Namespace, cache: AggregateCache, settings: Settings) -> None:
    _print_frame(weekly_series(cache.get()))


def cmd_monthly(_: argparse.Namespace, cache: AggregateCache, settings: Settings) -> None:
    _print_frame(monthly_series(cache.get()))


def cmd_team(_: argparse.Namespace, cache: AggregateCache, settings: Settings) -> None:
    _print_frame(team_distribution(cache.get()))


def cmd_records(args: argparse.Namespace, cache: AggregateCache, settings: Settings) -> None:
    """Print records filtered by entity, week and free text, newest first."""
    records = filter_records(cache.get(), entity=args.entity, week=args.week, search=args.search)
    _print_frame(records_frame(records[: args.limit]))
    print(f"{len(records)} matching records")


def cmd_entity(args: argparse.Namespace, cache: AggregateCache, settings: Settings) -> None:
    """Print one employee's goal progress and monthly buckets."""
    folder = cache.get()
    entity = get_entity(folder, args.name)
    if entity is None:
        raise SystemExit(f"Unknown employee: {args.name}")

    week = args.week or current_week()
    metrics = next(m for m in entity_metrics(folder, week, settings.goals) if m.name == args.name)
    print(f"{entity.name}: {entity.total_records} records, {entity.total_points:,.1f} points")
    print(f"Week {week}: {metrics.weekly_points:,.1f} / {metrics.weekly_goal} ({metrics.weekly_progress}%) [{metrics.status}]")
    print(f"Cycle: {metrics.monthly_points:,.1f} / {metrics.monthly_goal} ({metrics.monthly_progress}%)")
    _print_frame(
        pd.DataFrame(
            [{"month": k, "points": b.points, "records": b.record_count} for k, b in entity.monthly_buckets.items()]
        )
    )


# --------------------------------------------------
# CALENDAR
# --------------------------------------------------
def cmd_cycle(args: argparse.Namespace) -> None:
    """Print the billing cycle and week boundaries for a date."""
    day = date.fromisoformat(args.date) if args.date else date.today()
    cycle = cycle_of(day)
    print(f"{day.isoformat()} -> cycle {cycle.month_label} {cycle.year} "
          f"({cycle.start.isoformat()} .. {cycle.end.isoformat()}), week {week_of_cycle(day)}")
    for week in range(1, WEEKS_PER_CYCLE + 1):
        start, end = week_date_range(week, day)
        print(f"  Week {week}: {start.isoformat()} .. {end.isoformat()}")


# --------------------------------------------------
# CLI
# --------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser for the CLI.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    p = argparse.ArgumentParser(prog="points-tracker")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("summary")
    sub.add_parser("weekly")
    sub.add_parser("monthly")
    sub.add_parser("team")

    p_records = sub.add_parser("records")
    p_records.add_argument("--entity", default=None)
    p_records.add_argument("--week", type=_week_arg, default=None)
    p_records.add_argument("--search", default=None)
    p_records.add_argument("--limit", type=int, default=50)

    p_entity = sub.add_parser("entity")
    p_entity.add_argument("name")
    p_entity.add_argument("--week", type=_week_arg, default=None)

    p_cycle = sub.add_parser("cycle")
    p_cycle.add_argument("--date", default=None, help="YYYY-MM-DD, defaults to today")

    return p


COMMANDS = {
    "summary": cmd_summary,
    "weekly": cmd_weekly,
    "monthly": cmd_monthly,
    "team": cmd_team,
    "records": cmd_records,
    "entity": cmd_entity,
}


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: parse args, configure logging and dispatch commands."""
    load_dotenv()
    configure_logging(Path("logs/points_tracker.log"))

    args = build_parser().parse_args(argv)

    if args.cmd == "cycle":
        cmd_cycle(args)
        return

    settings = get_settings()
    cache = build_cache(settings)
    try:
        COMMANDS[args.cmd](args, cache, settings)
    except PipelineFailure as e:
        log.error("Could not load point spreadsheets: %s", e)
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
