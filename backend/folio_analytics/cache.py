"""Period-keyed metrics cache with a single shared staleness clock."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Hashable

from .models import PortfolioMetrics


class MetricsCache:
    """In-memory cache of metrics snapshots keyed by period tag.

    Keys are usually the bare period; callers that vary other inputs fold
    them into a tuple key.

    Every entry shares one timestamp: the time of the most recent ``set`` for
    any period. Once ``duration`` has elapsed since then, all entries are
    treated as stale.
    """

    def __init__(
        self,
        duration: timedelta = timedelta(minutes=5),
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        if duration < timedelta(0):
            raise ValueError("cache duration must not be negative")
        self.duration = duration
        self._clock = clock
        self._store: Dict[Hashable, PortfolioMetrics] = {}
        self._last_calculation: datetime | None = None

    def get(self, key: Hashable) -> PortfolioMetrics | None:
        cached = self._store.get(key)
        if cached is None or self._last_calculation is None:
            return None
        if self._clock() - self._last_calculation >= self.duration:
            return None
        return cached

    def set(self, key: Hashable, metrics: PortfolioMetrics) -> None:
        self._store[key] = metrics
        self._last_calculation = self._clock()

    def invalidate(self) -> None:
        self._store.clear()
        self._last_calculation = None

    def __len__(self) -> int:
        return len(self._store)


__all__ = ["MetricsCache"]
