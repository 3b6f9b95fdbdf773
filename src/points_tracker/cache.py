"""Time-boxed, read-through cache over the ingestion pipeline.

The cache holds at most one `CacheEntry`. Reads inside the TTL return it
unchanged; otherwise the loader runs and its result replaces the entry in a
single assignment. Only one loader runs at a time; readers that arrive while
it runs wait and share its result.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable

from points_tracker.errors import PipelineFailure
from points_tracker.models import FolderAggregate

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """A folder aggregate and the clock reading at which it was built."""
    aggregate: FolderAggregate
    captured_at: float

    def is_fresh(self, now: float, ttl: float) -> bool:
        return now - self.captured_at < ttl


class AggregateCache:
    """Memoize the full ingestion run for `ttl_seconds`.

    Args:
        loader: Callable running the full pipeline and returning a fresh aggregate.
        ttl_seconds: How long a result stays fresh.
        clock: Monotonic clock in seconds; injectable for tests.
    """

    def __init__(
        self,
        loader: Callable[[], FolderAggregate],
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._loader = loader
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entry: CacheEntry | None = None
        self._epoch = 0
        self._lock = threading.Lock()

    @property
    def entry(self) -> CacheEntry | None:
        return self._entry

    def _fresh_entry(self) -> CacheEntry | None:
        entry = self._entry
        if entry is not None and entry.is_fresh(self._clock(), self.ttl_seconds):
            return entry
        return None

    def get(self) -> FolderAggregate:
        """Return the cached aggregate, rebuilding it when missing or expired.

        Raises:
            PipelineFailure: if the rebuild fails and nothing was cached before.
        """
        entry = self._fresh_entry()
        if entry is not None:
            log.debug("Using cached aggregate")
            return entry.aggregate

        with self._lock:
            # another reader may have refreshed while we waited
            entry = self._fresh_entry()
            if entry is not None:
                return entry.aggregate

            epoch = self._epoch
            log.info("Cache miss: running ingestion")
            try:
                aggregate = self._loader()
            except Exception as e:
                previous = self._entry
                if previous is None:
                    raise PipelineFailure(f"ingestion failed: {e}") from e
                log.error("Ingestion failed, keeping previous aggregate: %s", e)
                return previous.aggregate

            if epoch == self._epoch:
                self._entry = CacheEntry(aggregate=aggregate, captured_at=self._clock())
            return aggregate

    def invalidate(self) -> None:
        """Drop the cached aggregate so the next read runs the pipeline again."""
        self._epoch += 1
        self._entry = None
        log.info("Aggregate cache cleared")
