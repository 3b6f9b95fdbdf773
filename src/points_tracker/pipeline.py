"""Full ingestion run and the composition root wiring it to a cache.

`build_folder_aggregate` reads every catalog file in order and merges the
results; `build_cache` assembles source, catalog and loader from `Settings`
into the `AggregateCache` the CLI and dashboard read from.
"""

from __future__ import annotations

import logging
from typing import Callable

from points_tracker.aggregate.merge import finalize_statistics, merge_entity
from points_tracker.cache import AggregateCache
from points_tracker.clean.parse_row import DEFAULT_ALIASES, FieldAliases
from points_tracker.config import Settings
from points_tracker.errors import DecodeError, FileUnavailableError
from points_tracker.ingest.catalog import (
    DEFAULT_CATALOG,
    SourceCatalog,
    discover_catalog,
    iter_source_files,
)
from points_tracker.ingest.read_files import ingest_file
from points_tracker.ingest.sources import FileSource, HttpFileSource, LocalFileSource
from points_tracker.models import FolderAggregate

log = logging.getLogger(__name__)


def build_folder_aggregate(
    catalog: SourceCatalog,
    source: FileSource,
    unit_value: float,
    aliases: FieldAliases = DEFAULT_ALIASES,
) -> FolderAggregate:
    """Ingest every catalog file and merge the results into a new aggregate.

    Missing and undecodable files are logged and skipped, so any readable
    subset of the catalog still yields a result.

    Args:
        catalog: Month folder → file names, processed in order.
        source: File retrieval backend.
        unit_value: Currency value of one point, for the derived total.
        aliases: Column aliases handed to the row parser.

    Returns:
        A fully merged FolderAggregate with statistics filled in.
    """
    result = FolderAggregate()
    files_read = 0

    for source_file in iter_source_files(catalog):
        try:
            partial = ingest_file(source, source_file, aliases)
        except FileUnavailableError as e:
            log.warning("File unavailable, skipping: %s", e)
            continue
        except DecodeError as e:
            log.error("Could not decode, skipping: %s", e)
            continue
        merge_entity(result, partial)
        files_read += 1

    stats = finalize_statistics(result, files_read, unit_value)
    log.info(
        "Processing complete: files=%d entities=%d records=%d points=%.1f",
        stats.total_files,
        stats.total_entities,
        stats.total_records,
        stats.total_points,
    )
    return result


def build_source(settings: Settings) -> FileSource:
    """Return the HTTP source when a base URL is configured, else the local one."""
    if settings.base_url:
        return HttpFileSource(settings.base_url)
    return LocalFileSource(settings.data_dir)


def resolve_catalog(settings: Settings) -> SourceCatalog:
    """Scan the local data root when it exists; fall back to the known layout."""
    if settings.base_url is None and settings.data_dir.is_dir():
        discovered = discover_catalog(settings.data_dir)
        if discovered:
            return discovered
    return DEFAULT_CATALOG


def build_loader(
    settings: Settings,
    catalog: SourceCatalog | None = None,
    source: FileSource | None = None,
) -> Callable[[], FolderAggregate]:
    src = source or build_source(settings)

    def _load() -> FolderAggregate:
        return build_folder_aggregate(
            catalog if catalog is not None else resolve_catalog(settings),
            src,
            settings.unit_value,
        )
    return _load


def build_cache(
    settings: Settings,
    catalog: SourceCatalog | None = None,
    source: FileSource | None = None,
) -> AggregateCache:
    """Assemble the aggregate cache for `settings`.

    Args:
        settings: Tracker settings.
        catalog: Fixed catalog; when omitted it is resolved on every refresh.
        source: File backend; when omitted it is derived from the settings.
    """
    return AggregateCache(build_loader(settings, catalog, source), settings.cache_ttl_seconds)
