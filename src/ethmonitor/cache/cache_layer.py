"""Bounded, time-expiring key/value caches with single-flight loading."""

import threading
import time
from typing import Callable, Generic, Hashable, Optional, Protocol, TypeVar

from cachetools import TTLCache

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class CacheLayer(Protocol[K, V]):
    """Interface for the per-data-kind caches used by the data façade."""

    def get(self, key: K) -> Optional[V]:
        """Return the cached value, or None when absent or expired."""
        ...

    def get_or_compute(self, key: K, loader: Callable[[K], V]) -> V:
        """Return the cached value, computing and storing it on a miss."""
        ...

    def put(self, key: K, value: V) -> None:
        """Store a value under key."""
        ...

    def invalidate(self, key: K) -> None:
        """Drop the entry for key, if any."""
        ...

    def clear(self) -> None:
        """Drop all entries."""
        ...


class _InFlight:
    """A load in progress; followers wait on `done`. A superseded load is never stored."""

    __slots__ = ("done", "value", "error", "superseded")

    def __init__(self):
        self.done = threading.Event()
        self.value = None
        self.error: Optional[BaseException] = None
        self.superseded = False


class TTLCacheLayer(Generic[K, V]):
    """
    Thread-safe cache on top of cachetools.TTLCache.

    - At most `max_size` entries; least recently used entries are evicted first.
    - Entries expire `ttl_seconds` after they were written, however often they are read.
    - get_or_compute runs at most one loader per key at a time. Concurrent callers
      for the same missing key wait for that loader and share its value or its error.
    - A loader that raises stores nothing, so the next call loads again.
    """

    def __init__(
        self,
        max_size: int,
        ttl_seconds: float,
        timer: Callable[[], float] = time.monotonic,
        name: str = "cache",
    ):
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.name = name
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._store: TTLCache = TTLCache(maxsize=max_size, ttl=ttl_seconds, timer=timer)
        self._lock = threading.RLock()
        self._in_flight: dict[K, _InFlight] = {}

    def get(self, key: K) -> Optional[V]:
        with self._lock:
            return self._store.get(key)

    def get_or_compute(self, key: K, loader: Callable[[K], V]) -> V:
        with self._lock:
            try:
                return self._store[key]
            except KeyError:
                pass
            flight = self._in_flight.get(key)
            leader = flight is None
            if leader:
                flight = _InFlight()
                self._in_flight[key] = flight

        if not leader:
            flight.done.wait()
            if flight.error is not None:
                raise flight.error
            return flight.value

        try:
            value = loader(key)
        except BaseException as e:
            flight.error = e
            with self._lock:
                self._release(key, flight)
            flight.done.set()
            raise

        flight.value = value
        with self._lock:
            if not flight.superseded:
                self._store[key] = value
            self._release(key, flight)
        flight.done.set()
        return value

    def put(self, key: K, value: V) -> None:
        with self._lock:
            self._supersede(key)
            self._store[key] = value

    def invalidate(self, key: K) -> None:
        with self._lock:
            self._supersede(key)
            self._store.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            for flight in self._in_flight.values():
                flight.superseded = True
            self._in_flight.clear()
            self._store.clear()

    def _supersede(self, key: K) -> None:
        # Caller holds the lock.
        flight = self._in_flight.pop(key, None)
        if flight is not None:
            flight.superseded = True

    def _release(self, key: K, flight: _InFlight) -> None:
        # Caller holds the lock. A newer load may own the slot already.
        if self._in_flight.get(key) is flight:
            del self._in_flight[key]

    def __len__(self) -> int:
        with self._lock:
            self._store.expire()
            return len(self._store)

    def __repr__(self) -> str:
        return f"TTLCacheLayer(name={self.name!r}, max_size={self.max_size}, ttl_seconds={self.ttl_seconds})"
