"""Time-bounded, single-flight cache for controller system information."""

from __future__ import annotations

import threading
import time
from concurrent.futures import Future
from typing import Callable, Protocol

from loguru import logger

from bmcinfo.models import SystemInformation

CACHE_TTL_SECONDS = 5 * 60


class Fetcher(Protocol):
    def fetch(self) -> SystemInformation: ...


class SystemInfoCache:
    """Serve the last fetched record while fresh and coalesce refetches.

    ``record``, ``fetched_at`` and the in-flight future are read and written
    together under one lock. The fetch itself runs outside the lock in the
    thread of the caller that found the cache stale; every other caller
    arriving before it completes waits on the same future. Fallback records
    from failed fetches are cached for the full TTL.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        ttl: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.fetcher = fetcher
        self.ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._record: SystemInformation | None = None
        self._fetched_at: float | None = None
        self._in_flight: Future[SystemInformation] | None = None
        self._log = logger.bind(classname=self.__class__.__name__)

    @property
    def fetched_at(self) -> float | None:
        return self._fetched_at

    def is_fresh(self) -> bool:
        with self._lock:
            return self._is_fresh_locked()

    def get(self) -> SystemInformation:
        """Return the cached record, fetching it first if stale or empty."""
        with self._lock:
            if self._is_fresh_locked():
                assert self._record is not None
                return self._record
            future = self._in_flight
            owner = future is None
            if future is None:
                future = Future()
                self._in_flight = future

        if owner:
            self._run_fetch(future)
        else:
            self._log.debug("Fetch already in flight, waiting for its result")
        return future.result()

    def refresh(self) -> SystemInformation:
        """Drop the cached record and return a newly fetched one.

        A fetch already in flight is not cancelled; its result is returned.
        """
        with self._lock:
            self._record = None
            self._fetched_at = None
        return self.get()

    def _is_fresh_locked(self) -> bool:
        if self._record is None or self._fetched_at is None:
            return False
        return self._clock() - self._fetched_at < self.ttl

    def _run_fetch(self, future: Future[SystemInformation]) -> None:
        try:
            record = self.fetcher.fetch()
        except Exception:
            self._log.exception("Fetcher raised, caching fallback record")
            record = SystemInformation.unavailable()
        except BaseException:
            # Waiters get the fallback, nothing is cached and the next get() refetches.
            with self._lock:
                self._in_flight = None
            future.set_result(SystemInformation.unavailable())
            raise

        with self._lock:
            self._record = record
            self._fetched_at = self._clock()
            self._in_flight = None
        future.set_result(record)
