"""
Tests for performance monitoring.
"""
import pytest
import time
from datareduce.core.performance import PerformanceMonitor, track_performance
from datareduce.services.sampling import sample


def test_performance_monitor_record():
    """Test recording performance metrics."""
    PerformanceMonitor.clear_metrics()

    PerformanceMonitor.record_metric("test_metric", 1.5, {"test": "data"})
    PerformanceMonitor.record_metric("test_metric", 2.0)
    PerformanceMonitor.record_metric("test_metric", 0.5)

    stats = PerformanceMonitor.get_stats("test_metric")

    assert stats is not None
    assert stats["count"] == 3
    assert stats["min"] == 0.5
    assert stats["max"] == 2.0
    assert stats["mean"] == pytest.approx(1.333, rel=0.01)
    assert stats["p50"] == 1.5


def test_performance_decorator_sync():
    """Test performance tracking decorator on a function."""
    PerformanceMonitor.clear_metrics()

    @track_performance("test_function")
    def test_func(x: int) -> int:
        time.sleep(0.01)
        return x * 2

    result = test_func(5)

    assert result == 10

    stats = PerformanceMonitor.get_stats("test_function")
    assert stats is not None
    assert stats["count"] == 1
    assert stats["mean"] > 0


def test_performance_decorator_records_errors():
    """Test failures are timed and re-raised."""
    PerformanceMonitor.clear_metrics()

    @track_performance("failing_function")
    def failing():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        failing()

    assert PerformanceMonitor.get_stats("failing_function")["count"] == 1


def test_reductions_are_tracked():
    """Test the sampling entry point records its timing."""
    PerformanceMonitor.clear_metrics()

    sample([[1], [2]], ["a"])

    metrics = PerformanceMonitor.get_all_metrics()
    assert metrics["sample_rows"]["count"] == 1
    assert metrics["compute_aggregates"]["count"] == 1


def test_performance_monitor_clear():
    """Test clearing metrics."""
    PerformanceMonitor.record_metric("test", 1.0)
    assert PerformanceMonitor.get_stats("test") is not None

    PerformanceMonitor.clear_metrics()
    assert PerformanceMonitor.get_stats("test") is None
