"""Row parsing and normalization.

The spreadsheets were filled in by different people over time, so column
names, casing and date formats vary from file to file. This module maps one
raw row onto a `PointRecord`, or skips it when it carries no usable date or
no positive points (blank lines, separators, totals).
"""
from __future__ import annotations

import logging
import math
import numbers
import re
import unicodedata
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Callable, Iterable, Protocol

import pandas as pd

from points_tracker.cycle.calculator import month_label_of, week_of_cycle
from points_tracker.errors import SkippableRowError
from points_tracker.models import PointRecord

log = logging.getLogger(__name__)

# Spreadsheet serial day 0; serials before 60 predate the fictitious 1900-02-29
SERIAL_EPOCH = datetime(1899, 12, 30)
FICTITIOUS_LEAP_DAY_SERIAL = 60

SLASH_DATE_RE = re.compile(
    r"^(\d{1,2})/(\d{1,2})/(\d{4}|\d{2})(?:[ T]+(\d{1,2}):(\d{2})(?::(\d{2}))?)?$"
)
NUMERIC_RE = re.compile(r"^[+-]?\d+(?:[.,]\d+)?$")


class RawRow(Protocol):
    """Read-only, string-keyed row. Plain dicts and pandas Series qualify."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def keys(self) -> Iterable[Any]: ...

    def __contains__(self, key: object) -> bool: ...


Accessor = Callable[[RawRow], Any]


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return bool(pd.api.types.is_scalar(value) and pd.isna(value))


def _normalize_header(name: str) -> str:
    folded = unicodedata.normalize("NFKD", name.strip().casefold())
    return "".join(ch for ch in folded if not unicodedata.combining(ch))


def exact_accessor(name: str) -> Accessor:
    """Return an accessor reading column `name` exactly as written."""
    def _get(row: RawRow) -> Any:
        return row.get(name) if name in row else None
    return _get


def normalized_accessor(names: Iterable[str]) -> Accessor:
    """Return an accessor matching any of `names` ignoring case, accents and padding."""
    wanted = {_normalize_header(n) for n in names}

    def _get(row: RawRow) -> Any:
        for key in row.keys():
            if isinstance(key, str) and _normalize_header(key) in wanted:
                value = row.get(key)
                if not _is_blank(value):
                    return value
        return None
    return _get


def first_present(row: RawRow, accessors: Iterable[Accessor]) -> Any:
    """Return the first non-blank value produced by `accessors`, or None."""
    for accessor in accessors:
        value = accessor(row)
        if not _is_blank(value):
            return value
    return None


@dataclass(frozen=True)
class FieldAliases:
    """Column names tried, in order, for each field of a record.

    Extend these tuples (or pass a custom instance to `parse_row`) when a new
    spreadsheet layout shows up.
    """
    date: tuple[str, ...] = ("Data", "data", "DATA", "Date", "date", "DATE")
    points: tuple[str, ...] = ("Pontos", "pontos", "PONTOS", "Points", "points")
    site: tuple[str, ...] = ("Refinaria", "refinaria", "REFINARIA", "Refinery", "refinery")
    observations: tuple[str, ...] = (
        "Observações", "observações", "OBSERVAÇÕES",
        "Observacoes", "observacoes", "OBSERVACOES",
        "Observations", "observations",
    )

    def accessors(self, field: str) -> list[Accessor]:
        names: tuple[str, ...] = getattr(self, field)
        return [exact_accessor(n) for n in names] + [normalized_accessor(names)]


DEFAULT_ALIASES = FieldAliases()


def parse_points(value: Any) -> float:
    """Parse a points cell into a positive float.

    Raises:
        SkippableRowError: if the value is not a finite number greater than zero.
    """
    if isinstance(value, bool):
        raise SkippableRowError(f"points is not numeric: {value!r}")
    if isinstance(value, numbers.Real):
        points = float(value)
    else:
        text = str(value).strip().replace(" ", "")
        if "," in text and "." not in text:
            text = text.replace(",", ".")
        try:
            points = float(text)
        except ValueError:
            raise SkippableRowError(f"points is not numeric: {value!r}") from None
    if not math.isfinite(points) or points <= 0:
        raise SkippableRowError(f"points must be positive: {value!r}")
    return points


def _from_serial(serial: float) -> datetime:
    if not math.isfinite(serial) or serial < 1:
        raise SkippableRowError(f"serial date out of range: {serial!r}")
    if int(serial) == FICTITIOUS_LEAP_DAY_SERIAL:
        raise SkippableRowError("serial 60 is the fictitious 1900-02-29")
    if serial < FICTITIOUS_LEAP_DAY_SERIAL:
        serial += 1
    try:
        return SERIAL_EPOCH + timedelta(seconds=round(serial * 86400))
    except OverflowError:
        raise SkippableRowError(f"serial date out of range: {serial!r}") from None


def _from_slash(match: re.Match[str]) -> datetime:
    day, month, year = (int(g) for g in match.group(1, 2, 3))
    if year < 100:
        year += 2000 if year < 50 else 1900
    hour = int(match.group(4) or 0)
    minute = int(match.group(5) or 0)
    second = int(match.group(6) or 0)
    try:
        return datetime(year, month, day, hour, minute, second)
    except ValueError as e:
        raise SkippableRowError(f"invalid date {match.group(0)!r}: {e}") from None


def _from_text(text: str) -> datetime:
    ts = pd.to_datetime(text, errors="coerce")
    if pd.isna(ts):
        raise SkippableRowError(f"unparseable date: {text!r}")
    if ts.tzinfo is not None:
        ts = ts.tz_localize(None)
    return ts.to_pydatetime()


def parse_date(value: Any) -> datetime:
    """Parse a date cell polymorphically.

    Native dates pass through, 'dd/mm/yy[yy]' strings are read day-first,
    numbers are spreadsheet serials and anything else goes through pandas'
    generic parser.

    Purely numeric strings are taken as serials before the generic parser is
    tried, since CSV exports carry serials as text. A bare year such as
    '2024' therefore reads as serial day 2024 (1905-07-16), not as a year.

    Raises:
        SkippableRowError: if the value does not denote a valid instant.
    """
    if _is_blank(value):
        raise SkippableRowError("date is blank")
    if isinstance(value, pd.Timestamp):
        value = value.to_pydatetime()
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, bool):
        raise SkippableRowError(f"unsupported date value: {value!r}")
    if isinstance(value, numbers.Real):
        return _from_serial(float(value))
    if isinstance(value, str):
        text = value.strip()
        match = SLASH_DATE_RE.match(text)
        if match:
            return _from_slash(match)
        if NUMERIC_RE.match(text):
            return _from_serial(float(text.replace(",", ".")))
        return _from_text(text)
    raise SkippableRowError(f"unsupported date value: {value!r}")


def _text(value: Any) -> str:
    if _is_blank(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def build_record(row: RawRow, entity_name: str, aliases: FieldAliases = DEFAULT_ALIASES) -> PointRecord:
    """Build a `PointRecord` from `row` or raise `SkippableRowError`."""
    date_value = first_present(row, aliases.accessors("date"))
    if date_value is None:
        raise SkippableRowError("row has no date")

    points_value = first_present(row, aliases.accessors("points"))
    if points_value is None:
        raise SkippableRowError("row has no points")
    points = parse_points(points_value)

    when = parse_date(date_value)

    return PointRecord(
        date=when,
        entity_name=entity_name,
        site=_text(first_present(row, aliases.accessors("site"))),
        points=points,
        observations=_text(first_present(row, aliases.accessors("observations"))),
        cycle_month=month_label_of(when),
        cycle_week=week_of_cycle(when),
    )


def parse_row(row: RawRow, entity_name: str, aliases: FieldAliases = DEFAULT_ALIASES) -> PointRecord | None:
    """Convert one raw row into a `PointRecord`, or None when the row is skipped.

    Args:
        row: Raw spreadsheet row (column name → cell value).
        entity_name: Employee the file belongs to.
        aliases: Column aliases to try for each field.

    Returns:
        The parsed record, or None for rows without a valid date or positive points.
    """
    try:
        return build_record(row, entity_name, aliases)
    except SkippableRowError as e:
        log.debug("Skipping row for %s: %s", entity_name, e)
        return None
