"""
Calendar grouping for time-indexed series.
"""
import logging
from typing import Any, Dict, List, Sequence, Tuple

import pandas as pd

from datareduce.core.parsing import parse_date, parse_dates
from datareduce.core.schemas import AggregationMethod, TimeGrouping
from datareduce.services.decimation import aggregate_values

logger = logging.getLogger(__name__)

# Points inspected when deciding whether the x-axis holds dates
TIME_CHECK_SIZE = 5

COUNT_FIELD = "_count"


def is_time_based(data: Sequence[Dict[str, Any]], x_key: str) -> bool:
    """True when every x-value among the first few points parses as a date."""
    if not data:
        return False

    for point in data[:TIME_CHECK_SIZE]:
        value = point.get(x_key)
        if not value or parse_date(value) is None:
            return False
    return True


def time_group_key(timestamp: pd.Timestamp, grouping: TimeGrouping) -> Tuple[str, pd.Timestamp]:
    """
    Bucket label and bucket start for a timestamp.

    Labels are ``YYYY``, ``YYYY-MM``, ``YYYY-Www`` (ISO year and week) or
    ``YYYY-MM-DD``. Any time zone is dropped; the wall-clock date is used.
    """
    day = pd.Timestamp(year=timestamp.year, month=timestamp.month, day=timestamp.day)

    if grouping == TimeGrouping.YEAR:
        return f"{day.year}", pd.Timestamp(year=day.year, month=1, day=1)
    if grouping == TimeGrouping.MONTH:
        return f"{day.year}-{day.month:02d}", pd.Timestamp(year=day.year, month=day.month, day=1)
    if grouping == TimeGrouping.WEEK:
        iso_year, iso_week, iso_weekday = day.isocalendar()
        return f"{iso_year}-W{iso_week:02d}", day - pd.Timedelta(days=iso_weekday - 1)
    return f"{day.year}-{day.month:02d}-{day.day:02d}", day


def aggregate_time_series(
    data: Sequence[Dict[str, Any]],
    x_key: str,
    y_keys: Sequence[str],
    grouping: TimeGrouping,
    method: AggregationMethod,
) -> List[Dict[str, Any]]:
    """
    Collapse points into calendar buckets.

    Each output point carries the bucket label as x, the number of source
    points in ``_count`` and every y-key aggregated with ``method``.
    Output is sorted by bucket start. Points whose x does not parse are left out.
    """
    groups: Dict[str, List[Dict[str, Any]]] = {}
    starts: Dict[str, pd.Timestamp] = {}
    skipped = 0

    timestamps = parse_dates([point.get(x_key) for point in data])
    for point, timestamp in zip(data, timestamps):
        if timestamp is None:
            skipped += 1
            continue
        key, start = time_group_key(timestamp, grouping)
        if key not in groups:
            groups[key] = []
            starts[key] = start
        groups[key].append(point)

    if skipped:
        logger.debug(f"Skipped {skipped} points with unparseable '{x_key}' during {grouping.value} grouping")

    result = []
    for key in sorted(groups, key=starts.__getitem__):
        items = groups[key]
        aggregated: Dict[str, Any] = {x_key: key, COUNT_FIELD: len(items)}
        for y_key in y_keys:
            aggregated[y_key] = aggregate_values(items, y_key, method)
        result.append(aggregated)

    return result
