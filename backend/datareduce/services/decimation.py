"""
Series decimation algorithms.

Every algorithm takes an ordered list of point dicts and returns a shorter,
still ordered list. Only the first y-key drives point selection; cells that
do not parse as numbers are plotted as 0.
"""
import logging
import math
from typing import Any, Dict, List, Sequence

import numpy as np

from datareduce.core.parsing import coerce_number
from datareduce.core.schemas import AggregationMethod

logger = logging.getLogger(__name__)

Point = Dict[str, Any]


def aggregate_values(points: Sequence[Point], key: str, method: AggregationMethod) -> Any:
    """
    Aggregate one field across a group of points.

    ``first``/``last`` keep the raw cell; the numeric methods work on
    0-coerced values.
    """
    if method == AggregationMethod.FIRST:
        return points[0].get(key)
    if method == AggregationMethod.LAST:
        return points[-1].get(key)

    values = [coerce_number(p.get(key)) for p in points]
    if method == AggregationMethod.SUM:
        return sum(values)
    if method == AggregationMethod.MIN:
        return min(values)
    if method == AggregationMethod.MAX:
        return max(values)
    return sum(values) / len(values)


def lttb(data: List[Point], y_key: str, threshold: int) -> List[Point]:
    """
    Largest Triangle Three Buckets downsampling.

    Keeps the first and last point. Each of the ``threshold - 2`` inner
    buckets contributes the point forming the largest triangle with the
    previously selected point and the average of the next bucket. The point
    index is used as x.
    """
    n = len(data)
    if n <= threshold:
        return list(data)
    if threshold < 3:
        return [data[0], data[-1]][:threshold]

    x = np.arange(n, dtype=np.float64)
    y = np.array([coerce_number(p.get(y_key)) for p in data], dtype=np.float64)

    bucket_size = (n - 2) / (threshold - 2)
    sampled = [data[0]]
    a = 0

    for i in range(1, threshold - 1):
        bucket_start = int(math.floor((i - 1) * bucket_size)) + 1
        bucket_end = min(int(math.floor(i * bucket_size)) + 1, n - 1)

        next_start = bucket_end
        next_end = min(int(math.floor((i + 1) * bucket_size)) + 1, n)
        if next_start < next_end:
            avg_x = x[next_start:next_end].mean()
            avg_y = y[next_start:next_end].mean()
        else:
            avg_x, avg_y = x[n - 1], y[n - 1]

        if bucket_start >= bucket_end:
            continue

        xs = x[bucket_start:bucket_end]
        ys = y[bucket_start:bucket_end]
        areas = np.abs((x[a] - avg_x) * (ys - y[a]) - (x[a] - xs) * (avg_y - y[a])) * 0.5
        selected = bucket_start + int(np.argmax(areas))

        sampled.append(data[selected])
        a = selected

    sampled.append(data[-1])
    return sampled


def minmax(data: List[Point], y_key: str, max_points: int) -> List[Point]:
    """
    Keep the minimum and maximum point of each bucket, in input order.

    Buckets hold ``ceil(N / (max_points / 2))`` points, so the output is only
    approximately bounded by ``max_points``.
    """
    n = len(data)
    if n == 0:
        return []
    bucket_size = max(1, math.ceil(n / (max_points / 2)))
    values = [coerce_number(p.get(y_key)) for p in data]
    result = []

    for start in range(0, n, bucket_size):
        end = min(start + bucket_size, n)
        min_idx = max_idx = start
        for j in range(start + 1, end):
            if values[j] < values[min_idx]:
                min_idx = j
            if values[j] > values[max_idx]:
                max_idx = j

        if min_idx == max_idx:
            result.append(data[min_idx])
        else:
            for idx in sorted((min_idx, max_idx)):
                result.append(data[idx])

    return result


def average_buckets(
    data: List[Point],
    y_keys: Sequence[str],
    max_points: int,
    method: AggregationMethod,
) -> List[Point]:
    """One point per ``ceil(N / max_points)`` bucket, x taken from the bucket's first point."""
    n = len(data)
    if n == 0:
        return []
    bucket_size = math.ceil(n / max_points)
    result = []

    for start in range(0, n, bucket_size):
        bucket = data[start:start + bucket_size]
        aggregated = dict(bucket[0])
        for key in y_keys:
            aggregated[key] = aggregate_values(bucket, key, method)
        result.append(aggregated)

    return result


def nth_point(data: List[Point], max_points: int) -> List[Point]:
    """Fixed stride sampling that always ends on the last point."""
    n = len(data)
    if n == 0:
        return []
    step = math.ceil(n / max_points)
    result = data[::step]

    if (n - 1) % step != 0:
        result.append(data[-1])

    return result
