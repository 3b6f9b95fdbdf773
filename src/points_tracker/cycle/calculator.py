"""Pure functions mapping calendar dates onto the 26→25 billing cycle.

`cycle_of` is the main entry point; the smaller helpers exist because the
record parser, the dashboard week picker and the CLI each need a different
slice of the same arithmetic.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

CYCLE_START_DAY = 26
CYCLE_END_DAY = 25
WEEKS_PER_CYCLE = 5
DAYS_PER_WEEK = 7

MONTH_NAMES = [
    "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
    "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro",
]


@dataclass(frozen=True)
class Cycle:
    """One billing cycle.

    Attributes:
        start: Day 26 of the start month.
        end: Day 25 of the following month (inclusive).
        month_index: Calendar month (1-12) the cycle is named after.
        year: Year of the month the cycle is named after.
    """
    start: date
    end: date
    month_index: int
    year: int

    @property
    def month_label(self) -> str:
        return MONTH_NAMES[self.month_index - 1]


def _as_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _previous_month(month: int, year: int) -> tuple[int, int]:
    if month == 1:
        return 12, year - 1
    return month - 1, year


def _next_month(month: int, year: int) -> tuple[int, int]:
    if month == 12:
        return 1, year + 1
    return month + 1, year


def cycle_start(reference: date) -> date:
    """Return the first day (day 26) of the cycle containing `reference`.

    From day 26 on, the cycle started this month; before that it started
    the previous month.
    """
    ref = _as_date(reference)
    month, year = ref.month, ref.year
    if ref.day < CYCLE_START_DAY:
        month, year = _previous_month(month, year)
    return date(year, month, CYCLE_START_DAY)


def cycle_date_range(month_index: int, year: int) -> tuple[date, date]:
    """Return the inclusive (start, end) dates of the cycle starting in `month_index`/`year`.

    Args:
        month_index: Calendar month (1-12) in which the cycle starts.
        year: Year in which the cycle starts.

    Raises:
        ValueError: if `month_index` or `year` is out of range.
    """
    start = date(year, month_index, CYCLE_START_DAY)
    end_month, end_year = _next_month(month_index, year)
    return start, date(end_year, end_month, CYCLE_END_DAY)


def cycle_of(value: date) -> Cycle:
    """Return the billing cycle an arbitrary (possibly historical) date belongs to."""
    start = cycle_start(value)
    start, end = cycle_date_range(start.month, start.year)
    return Cycle(start=start, end=end, month_index=end.month, year=end.year)


def week_of_cycle(value: date) -> int:
    """Return the week (1-5) of `value` inside its cycle.

    Weeks are fixed 7-day spans counted from day 26; week 5 absorbs whatever
    is left until the next cycle starts.
    """
    days = (_as_date(value) - cycle_start(value)).days
    week = days // DAYS_PER_WEEK + 1
    return min(max(week, 1), WEEKS_PER_CYCLE)


def month_label_of(value: date) -> str:
    """Return the month name a date is booked under: from day 26 on, the next month."""
    ref = _as_date(value)
    month = ref.month
    if ref.day >= CYCLE_START_DAY:
        month, _ = _next_month(month, ref.year)
    return MONTH_NAMES[month - 1]


def month_order(label: str) -> int:
    """Sort key placing month labels in calendar order; unknown labels go last."""
    try:
        return MONTH_NAMES.index(label)
    except ValueError:
        return len(MONTH_NAMES)


def week_label(week: int) -> str:
    return f"Week {week}"


def week_date_range(week: int, reference: date | None = None) -> tuple[date, date]:
    """Return the inclusive (start, end) dates of `week` in the cycle active at `reference`.

    Args:
        week: Week number (1-5).
        reference: Any date inside the cycle; defaults to today.

    Raises:
        ValueError: if `week` is not between 1 and 5.
    """
    if not 1 <= week <= WEEKS_PER_CYCLE:
        raise ValueError(f"week must be between 1 and {WEEKS_PER_CYCLE}, got {week}")
    start = cycle_start(reference or date.today()) + timedelta(days=(week - 1) * DAYS_PER_WEEK)
    return start, start + timedelta(days=DAYS_PER_WEEK - 1)


def current_cycle_start(today: date | None = None) -> date:
    return cycle_start(today or date.today())


def current_week(today: date | None = None) -> int:
    return week_of_cycle(today or date.today())
