"""
Tests for outbound call metrics.
"""
import asyncio

import pytest

from src.utils.performance import (
    CallStats,
    PerformanceMonitor,
    measure_time,
    monitor_performance,
    performance_monitor,
)


@pytest.fixture(autouse=True)
def clean_metrics():
    performance_monitor.reset_metrics()
    yield
    performance_monitor.reset_metrics()


def test_call_stats_accumulate():
    """Test averages, error rate and the last error of one operation."""
    stats = CallStats()
    stats.record(0.2)
    stats.record(0.4, error="BackendError")

    assert stats.calls == 2
    assert stats.average == pytest.approx(0.3)
    assert stats.slowest == pytest.approx(0.4)
    assert stats.error_rate == 0.5
    assert stats.last_error == "BackendError"


def test_empty_call_stats():
    """Test an operation that never ran."""
    summary = CallStats().summary()

    assert summary["calls"] == 0
    assert summary["average_seconds"] == 0.0
    assert summary["error_rate"] == 0.0
    assert summary["last_error"] is None


def test_monitor_lookup_and_reset():
    """Test per-operation lookup and reset."""
    monitor = PerformanceMonitor()
    monitor.record("backend.GET /api/customers", 0.1)
    monitor.record("auth.sign_in", 0.1, error="AuthError")

    assert monitor.get_metrics("auth.sign_in")["failures"] == 1
    assert monitor.get_metrics("unknown") == {}
    assert list(monitor.get_metrics()) == ["auth.sign_in", "backend.GET /api/customers"]

    monitor.reset_metrics("auth.sign_in")
    assert list(monitor.get_metrics()) == ["backend.GET /api/customers"]
    monitor.reset_metrics()
    assert monitor.get_metrics() == {}


def test_monitor_performance_records_success_and_failure():
    """Test the decorator records both outcomes and re-raises."""

    @monitor_performance("test.op")
    async def operation(fail: bool):
        if fail:
            raise RuntimeError("boom")
        return "ok"

    assert asyncio.run(operation(False)) == "ok"
    with pytest.raises(RuntimeError):
        asyncio.run(operation(True))

    metrics = performance_monitor.get_metrics("test.op")
    assert metrics["calls"] == 2
    assert metrics["failures"] == 1
    assert metrics["last_error"] == "RuntimeError"


def test_monitor_performance_rejects_sync_functions():
    """Test that only coroutine functions can be monitored."""
    with pytest.raises(TypeError):
        @monitor_performance("test.sync")
        def operation():
            return None


def test_measure_time():
    """Test the context manager records failures."""

    async def run():
        async with measure_time("test.block"):
            pass
        with pytest.raises(ValueError):
            async with measure_time("test.block"):
                raise ValueError("bad")

    asyncio.run(run())

    metrics = performance_monitor.get_metrics("test.block")
    assert metrics["calls"] == 2
    assert metrics["error_rate"] == 0.5
