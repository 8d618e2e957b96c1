"""Background thread that forces a cache refresh on a fixed interval."""

from __future__ import annotations

import logging
import threading
import time
from typing import Optional

from .cache import NewsCache

LOGGER = logging.getLogger(__name__)


class RefreshScheduler:
    """Call ``cache.refresh()`` every ``interval_seconds`` until stopped.

    Each loop thread owns its stop event, so a thread still busy in a
    refresh when :meth:`stop` gives up waiting exits after that refresh
    instead of being revived by a later :meth:`start`.
    """

    def __init__(self, cache: NewsCache, interval_seconds: float) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.cache = cache
        self.interval_seconds = interval_seconds
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return (
            self._thread is not None
            and self._thread.is_alive()
            and not self._stop_event.is_set()
        )

    def start(self) -> None:
        if self.running:
            return
        LOGGER.info("Scheduling forced refresh every %ss", self.interval_seconds)
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._loop,
            args=(self._stop_event,),
            name="news-refresh",
            daemon=True,
        )
        self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        self._stop_event.set()
        if self._thread is None:
            return
        self._thread.join(timeout=timeout)
        if self._thread.is_alive():
            LOGGER.warning("Refresh thread still busy after %ss; it exits after its current run", timeout)
        self._thread = None

    def run_once(self) -> None:
        try:
            payload = self.cache.refresh()
        except Exception as exc:
            LOGGER.exception("Scheduled refresh failed: %s", exc)
            return
        LOGGER.info(
            "Scheduled refresh done, %d/%d feeds OK",
            payload.stats.feeds_succeeded,
            payload.stats.feeds_total,
        )

    def _loop(self, stop_event: threading.Event) -> None:
        wait_time = self.interval_seconds
        while not stop_event.wait(wait_time):
            start = time.monotonic()
            self.run_once()
            elapsed = time.monotonic() - start
            wait_time = max(0.0, self.interval_seconds - elapsed)


__all__ = ["RefreshScheduler"]
