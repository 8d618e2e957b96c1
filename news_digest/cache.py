"""TTL-governed cache in front of the aggregation pipeline."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Mapping, Optional, Sequence, TYPE_CHECKING

from .aggregation import Aggregator
from .models import CacheInfo, CachePayload
from .storage import SnapshotStore

if TYPE_CHECKING:
    from .progress import StageHandle

LOGGER = logging.getLogger(__name__)

SourcesLoader = Callable[[], Mapping[str, Sequence[str]]]


def to_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def from_millis(value: int) -> datetime:
    return datetime.fromtimestamp(value // 1000, tz=timezone.utc) + timedelta(milliseconds=value % 1000)


def format_timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class _Flight:
    """A refresh run that other callers can wait on."""

    def __init__(self) -> None:
        self.done = threading.Event()
        self.payload: Optional[CachePayload] = None
        self.error: Optional[BaseException] = None


class NewsCache:
    """Serve the last aggregation run while it is fresh, rebuild it otherwise.

    Only one aggregation run is in flight at a time; callers arriving while
    a run is in progress wait for it and receive the same payload.
    """

    def __init__(
        self,
        aggregator: Aggregator,
        sources: SourcesLoader,
        store: SnapshotStore,
        ttl: timedelta,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.aggregator = aggregator
        self.store = store
        self.ttl = ttl
        self._sources = sources
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = threading.Lock()
        self._flight: Optional[_Flight] = None
        self._last_timestamp = 0

    @property
    def ttl_ms(self) -> int:
        return int(self.ttl.total_seconds() * 1000)

    def _read(self) -> Optional[CachePayload]:
        try:
            record = self.store.read()
        except Exception as exc:
            LOGGER.warning("Failed to read cache: %s", exc)
            return None
        if record is None:
            return None
        try:
            return CachePayload.from_dict(record)
        except (KeyError, TypeError, ValueError) as exc:
            LOGGER.warning("Ignoring malformed cache record: %s", exc)
            return None

    def get(self, force: bool = False, stage: Optional["StageHandle"] = None) -> CachePayload:
        if not force:
            cached = self._read()
            if cached is not None and to_millis(self._clock()) - cached.timestamp < self.ttl_ms:
                LOGGER.info("Serving cached news from %s", cached.last_updated)
                return cached
        return self._refresh(stage)

    def refresh(self, stage: Optional["StageHandle"] = None) -> CachePayload:
        return self.get(force=True, stage=stage)

    def _refresh(self, stage: Optional["StageHandle"]) -> CachePayload:
        with self._lock:
            flight = self._flight
            owner = flight is None
            if flight is None:
                flight = self._flight = _Flight()

        if not owner:
            LOGGER.info("Waiting for in-flight refresh")
            flight.done.wait()
            if flight.error is not None:
                raise flight.error
            assert flight.payload is not None
            return flight.payload

        try:
            flight.payload = self._run(stage)
        except BaseException as exc:
            flight.error = exc
            raise
        finally:
            with self._lock:
                self._flight = None
            flight.done.set()
        return flight.payload

    def _run(self, stage: Optional["StageHandle"]) -> CachePayload:
        LOGGER.info("Fetching fresh news from all sources")
        result = self.aggregator.run_all(self._sources(), stage=stage)

        now = self._clock()
        timestamp = max(to_millis(now), self._last_timestamp)
        self._last_timestamp = timestamp
        payload = CachePayload(
            timestamp=timestamp,
            last_updated=format_timestamp(from_millis(timestamp)),
            stats=result.stats,
            categories=result.categories,
        )
        try:
            self.store.write(payload.to_dict())
        except Exception as exc:
            LOGGER.error("Failed to write cache: %s", exc)
        return payload

    def get_info(self) -> CacheInfo:
        cached = self._read()
        if cached is None:
            return CacheInfo(exists=False)
        age = to_millis(self._clock()) - cached.timestamp
        return CacheInfo(
            exists=True,
            last_updated=cached.last_updated,
            age_ms=age,
            age_hours=round(age / 3_600_000, 1),
            is_stale=age >= self.ttl_ms,
            stats=cached.stats,
        )


__all__ = ["NewsCache", "format_timestamp", "from_millis", "to_millis"]
