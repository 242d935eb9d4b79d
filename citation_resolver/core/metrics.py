"""Per-provider call counters used for observability.

An :class:`ApiCallMetrics` instance is owned by the client that creates it and
passed to each provider adapter, so tests can inject a fresh sink per run.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Dict, Iterable, Optional


@dataclass
class ApiCallStats:
    count: int = 0
    total_time: float = 0.0
    errors: int = 0

    @property
    def avg_response_time(self) -> float:
        return self.total_time / self.count if self.count else 0.0

    @property
    def error_rate(self) -> float:
        return (self.errors / self.count) * 100 if self.count else 0.0


class ApiCallMetrics:
    """Thread-safe counters keyed by provider name."""

    def __init__(self, providers: Iterable[str] = ()) -> None:
        self._lock = threading.Lock()
        self._providers = tuple(providers)
        self._stats: Dict[str, ApiCallStats] = {}
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self._stats = {name: ApiCallStats() for name in self._providers}
            self._started_at = time.monotonic()

    def track(self, provider: str, started_at: float, success: bool, *, now: Optional[float] = None) -> None:
        """Record one call that began at ``started_at`` (a ``time.monotonic`` value)."""

        elapsed = ((now if now is not None else time.monotonic()) - started_at) * 1000.0
        with self._lock:
            stats = self._stats.setdefault(provider, ApiCallStats())
            stats.count += 1
            stats.total_time += elapsed
            if not success:
                stats.errors += 1

    def get(self, provider: str) -> ApiCallStats:
        with self._lock:
            stats = self._stats.get(provider, ApiCallStats())
            return ApiCallStats(stats.count, stats.total_time, stats.errors)

    def snapshot(self) -> Dict[str, object]:
        with self._lock:
            api_calls = {
                name: {
                    "count": stats.count,
                    "avgResponseTime": round(stats.avg_response_time, 2),
                    "errorRate": stats.error_rate,
                }
                for name, stats in self._stats.items()
            }
            uptime = (time.monotonic() - self._started_at) * 1000.0
        return {"uptime": round(uptime), "apiCalls": api_calls}
