"""Latency and failure tracking for calls to the auth service and the backend"""

import asyncio
import logging
import threading
import time
from collections import deque
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

SLOW_CALL_SECONDS = 1.0
RECENT_WINDOW = 50


@dataclass
class CallStats:
    """Running numbers for one outbound operation, e.g. ``backend.GET /api/customers``"""
    calls: int = 0
    failures: int = 0
    total_seconds: float = 0.0
    slowest: float = 0.0
    recent: deque = field(default_factory=lambda: deque(maxlen=RECENT_WINDOW))
    last_error: Optional[str] = None

    def record(self, duration: float, error: Optional[str] = None) -> None:
        self.calls += 1
        self.total_seconds += duration
        self.slowest = max(self.slowest, duration)
        self.recent.append(duration)
        if error is not None:
            self.failures += 1
            self.last_error = error

    @property
    def average(self) -> float:
        return self.total_seconds / self.calls if self.calls else 0.0

    @property
    def recent_average(self) -> float:
        return sum(self.recent) / len(self.recent) if self.recent else 0.0

    @property
    def error_rate(self) -> float:
        return self.failures / self.calls if self.calls else 0.0

    def summary(self) -> Dict[str, Any]:
        return {
            "calls": self.calls,
            "failures": self.failures,
            "average_seconds": round(self.average, 4),
            "recent_average_seconds": round(self.recent_average, 4),
            "slowest_seconds": round(self.slowest, 4),
            "error_rate": round(self.error_rate, 4),
            "last_error": self.last_error,
        }


class PerformanceMonitor:
    """Thread-safe registry of CallStats keyed by operation name"""

    def __init__(self):
        self._stats: Dict[str, CallStats] = {}
        self._lock = threading.Lock()

    def record(self, name: str, duration: float, error: Optional[str] = None) -> None:
        with self._lock:
            self._stats.setdefault(name, CallStats()).record(duration, error)

    def get_metrics(self, name: Optional[str] = None) -> Dict[str, Any]:
        """Summary of one operation, or of every operation keyed by name."""
        with self._lock:
            if name is not None:
                stats = self._stats.get(name)
                return stats.summary() if stats else {}
            return {op: stats.summary() for op, stats in sorted(self._stats.items())}

    def reset_metrics(self, name: Optional[str] = None) -> None:
        with self._lock:
            if name is None:
                self._stats.clear()
            else:
                self._stats.pop(name, None)


performance_monitor = PerformanceMonitor()


def _finish(name: str, started: float, error: Optional[BaseException]) -> None:
    duration = time.perf_counter() - started
    performance_monitor.record(name, duration, type(error).__name__ if error else None)
    if duration > SLOW_CALL_SECONDS:
        logger.warning(f"Slow call: {name} took {duration:.3f}s")


def monitor_performance(operation_name: Optional[str] = None):
    """Time every call of an async function under operation_name."""
    def decorator(func: Callable):
        name = operation_name or f"{func.__module__}.{func.__qualname__}"

        if not asyncio.iscoroutinefunction(func):
            raise TypeError(f"monitor_performance expects a coroutine function, got {name}")

        @wraps(func)
        async def wrapper(*args, **kwargs):
            async with measure_time(name):
                return await func(*args, **kwargs)

        return wrapper

    return decorator


@asynccontextmanager
async def measure_time(operation_name: str):
    """Time the wrapped block; an exception counts as a failure and is re-raised."""
    started = time.perf_counter()
    try:
        yield
    except Exception as e:
        _finish(operation_name, started, e)
        raise
    _finish(operation_name, started, None)
