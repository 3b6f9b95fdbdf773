"""Read one catalog file into a file-level entity aggregate."""

from __future__ import annotations

import logging

from points_tracker.aggregate.merge import add_record
from points_tracker.clean.parse_row import DEFAULT_ALIASES, FieldAliases, parse_row
from points_tracker.errors import FileUnavailableError
from points_tracker.ingest.catalog import SourceFile
from points_tracker.ingest.decode import decode_first_sheet
from points_tracker.ingest.sources import FileSource
from points_tracker.models import EntityAggregate

log = logging.getLogger(__name__)


def ingest_file(
    source: FileSource,
    source_file: SourceFile,
    aliases: FieldAliases = DEFAULT_ALIASES,
) -> EntityAggregate:
    """Retrieve, decode and parse one spreadsheet.

    Rows that fail to parse are logged and skipped; they never abort the file.

    Args:
        source: File retrieval backend.
        source_file: Catalog entry to read.
        aliases: Column aliases handed to the row parser.

    Returns:
        EntityAggregate holding every valid record of the file.

    Raises:
        FileUnavailableError: if the file is missing or cannot be retrieved.
        DecodeError: if the content is not a readable spreadsheet.
    """
    path = source_file.path
    if not source.exists(path):
        raise FileUnavailableError(path)

    rows = decode_first_sheet(source.read_bytes(path), source_file.filename)
    log.info("%d rows found in %s", len(rows), source_file.filename)

    aggregate = EntityAggregate(name=source_file.entity_name)
    for index, row in enumerate(rows, start=1):
        try:
            record = parse_row(row, aggregate.name, aliases)
        except Exception as e:
            log.warning("Row %d of %s could not be parsed: %s", index, path, e)
            continue
        if record is not None:
            add_record(aggregate, record)

    log.info(
        "%s: %d records, %.1f points from %s",
        aggregate.name,
        aggregate.total_records,
        aggregate.total_points,
        source_file.filename,
    )
    return aggregate
