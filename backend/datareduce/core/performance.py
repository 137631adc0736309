"""
Performance monitoring and metrics collection.
"""
import time
import logging
from typing import Dict, Optional, Any
from functools import wraps
from collections import defaultdict
import threading

from datareduce.core.config import get_settings

logger = logging.getLogger(__name__)

# Thread-safe metrics storage
_metrics_lock = threading.Lock()
_metrics: Dict[str, list] = defaultdict(list)


class PerformanceMonitor:
    """Monitor and track reduction timings."""

    @staticmethod
    def record_metric(name: str, value: float, metadata: Optional[Dict[str, Any]] = None):
        """
        Record a performance metric.

        Args:
            name: Metric name (e.g., 'sample_rows', 'optimize_series')
            value: Metric value (usually duration in seconds)
            metadata: Optional metadata (status, error)
        """
        history_size = get_settings().metrics_history_size
        with _metrics_lock:
            _metrics[name].append({
                'value': value,
                'timestamp': time.time(),
                'metadata': metadata or {}
            })

            if len(_metrics[name]) > history_size:
                _metrics[name] = _metrics[name][-history_size:]

    @staticmethod
    def get_stats(metric_name: str) -> Optional[Dict[str, float]]:
        """
        Get statistics for a metric.

        Returns:
            Dict with min, max, mean, count and percentiles, or None if no data
        """
        with _metrics_lock:
            if metric_name not in _metrics or not _metrics[metric_name]:
                return None

            values = sorted(m['value'] for m in _metrics[metric_name])
            return {
                'count': len(values),
                'min': values[0],
                'max': values[-1],
                'mean': sum(values) / len(values),
                'p50': values[len(values) // 2],
                'p95': values[int(len(values) * 0.95)],
                'p99': values[int(len(values) * 0.99)],
            }

    @staticmethod
    def get_all_metrics() -> Dict[str, Dict[str, float]]:
        """Get statistics for all metrics."""
        with _metrics_lock:
            names = list(_metrics.keys())
        return {name: PerformanceMonitor.get_stats(name) for name in names}

    @staticmethod
    def clear_metrics():
        """Clear all metrics (useful for testing)."""
        with _metrics_lock:
            _metrics.clear()


def track_performance(metric_name: str):
    """
    Decorator to track function execution time.

    Usage:
        @track_performance("sample_rows")
        def sample(...):
            ...
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration = time.perf_counter() - start_time
                PerformanceMonitor.record_metric(
                    metric_name,
                    duration,
                    {'status': 'error', 'error': str(e)}
                )
                logger.error(
                    f"{metric_name} failed after {duration:.3f}s: {e}",
                    extra={'metric': metric_name, 'duration': duration}
                )
                raise

            duration = time.perf_counter() - start_time
            PerformanceMonitor.record_metric(metric_name, duration, {'status': 'success'})
            logger.debug(
                f"{metric_name} completed in {duration:.3f}s",
                extra={'metric': metric_name, 'duration': duration}
            )
            return result

        return wrapper

    return decorator
