"""Decode raw spreadsheet bytes into row dictionaries.

Only the first sheet is read; the first row is the header. Empty cells
become None so the row parser sees one notion of "blank".
"""

from __future__ import annotations

import io
import logging
from typing import Any

import pandas as pd

from points_tracker.errors import DecodeError

log = logging.getLogger(__name__)


def _frame_to_rows(df: pd.DataFrame) -> list[dict[str, Any]]:
    df = df.dropna(how="all")
    df.columns = [str(c).strip() if isinstance(c, str) else c for c in df.columns]
    df = df.astype(object).where(df.notna(), None)
    return df.to_dict(orient="records")


def decode_first_sheet(data: bytes, filename: str = "") -> list[dict[str, Any]]:
    """Decode the first sheet of a workbook (or a CSV file) into rows.

    Args:
        data: Raw file content.
        filename: Original file name; a '.csv' suffix selects the CSV reader.

    Returns:
        List of column name → cell value dictionaries, in sheet order.

    Raises:
        DecodeError: if the content cannot be read as a spreadsheet.
    """
    if not data:
        raise DecodeError(filename, "file is empty")
    try:
        if filename.lower().endswith(".csv"):
            df = pd.read_csv(io.BytesIO(data), dtype=str, sep=None, engine="python")
        else:
            df = pd.read_excel(io.BytesIO(data), sheet_name=0)
    except Exception as e:
        raise DecodeError(filename, f"{type(e).__name__}: {e}") from e

    rows = _frame_to_rows(df)
    log.debug("%d rows decoded from %s", len(rows), filename)
    return rows
