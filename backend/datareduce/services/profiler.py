import logging
from collections import Counter
from typing import Any, Dict, List, Optional, Sequence, Set

import numpy as np

from datareduce.core.parsing import is_null, parse_boolean, parse_date, parse_dates, parse_number
from datareduce.core.performance import track_performance
from datareduce.core.schemas import (
    ColumnDataType,
    ColumnProfile,
    DataAggregates,
    NumericSummary,
    TopValue,
)

logger = logging.getLogger(__name__)

TOP_VALUES_LIMIT = 5

# Column types that get a numeric summary (mixed only when it holds numbers)
_SUMMARIZED_TYPES = (ColumnDataType.NUMBER, ColumnDataType.MIXED)


def _scalar_type(value: Any) -> Optional[ColumnDataType]:
    if parse_number(value) is not None:
        return ColumnDataType.NUMBER
    if parse_boolean(value) is not None:
        return ColumnDataType.BOOLEAN
    return None


def infer_value_type(value: Any) -> ColumnDataType:
    """
    Classify a single non-null cell.

    Trial order is number, boolean literal, date, then string.
    """
    scalar_type = _scalar_type(value)
    if scalar_type is not None:
        return scalar_type
    if parse_date(value) is not None:
        return ColumnDataType.DATE
    return ColumnDataType.STRING


def _count_key(value: Any) -> Any:
    # keeps True apart from 1 and unhashable cells countable
    try:
        hash(value)
    except TypeError:
        return (type(value).__name__, repr(value))
    return (isinstance(value, bool), value)


def column_types(distinct: Sequence[Any]) -> Set[ColumnDataType]:
    """
    Types present among distinct non-null values.

    Numbers and booleans are classified cell by cell; whatever is left is
    date-parsed in one batch.
    """
    types: Set[ColumnDataType] = set()
    remaining = []
    for value in distinct:
        scalar_type = _scalar_type(value)
        if scalar_type is None:
            remaining.append(value)
        else:
            types.add(scalar_type)

    for timestamp in parse_dates(remaining):
        types.add(ColumnDataType.STRING if timestamp is None else ColumnDataType.DATE)
    return types


def analyze_column(values: Sequence[Any], name: str) -> ColumnProfile:
    """Type, cardinality, nulls and top values of one column."""
    counts: Counter = Counter()
    originals: Dict[Any, Any] = {}
    null_count = 0

    for value in values:
        if is_null(value):
            null_count += 1
            continue
        key = _count_key(value)
        counts[key] += 1
        originals.setdefault(key, value)

    types = column_types(list(originals.values()))

    if len(types) == 1:
        data_type = types.pop()
    elif len(types) > 1:
        data_type = ColumnDataType.MIXED
    else:
        data_type = ColumnDataType.STRING

    top_values = [
        TopValue(value=originals[key], count=count)
        for key, count in counts.most_common(TOP_VALUES_LIMIT)
    ]

    return ColumnProfile(
        name=name,
        data_type=data_type,
        unique_value_count=len(counts),
        null_count=null_count,
        top_values=top_values,
    )


def calculate_median(numbers: Sequence[float]) -> float:
    return float(np.median(np.asarray(numbers, dtype=np.float64)))


def calculate_std_dev(numbers: Sequence[float]) -> float:
    """Population standard deviation."""
    return float(np.std(np.asarray(numbers, dtype=np.float64), ddof=0))


def summarize_numbers(numbers: Sequence[float]) -> Optional[NumericSummary]:
    if not numbers:
        return None

    arr = np.asarray(numbers, dtype=np.float64)
    return NumericSummary(
        min=float(arr.min()),
        max=float(arr.max()),
        mean=float(arr.mean()),
        median=calculate_median(arr),
        sum=float(arr.sum()),
        std_dev=calculate_std_dev(arr),
    )


@track_performance("compute_aggregates")
def compute_aggregates(rows: Sequence[Sequence[Any]], headers: Sequence[str]) -> DataAggregates:
    """
    Profile every column over the complete dataset.

    Cells missing from short rows count as nulls. Values that do not parse
    as numbers are left out of numeric summaries rather than counted as 0.
    Summaries are keyed by header, so when two summarized columns share a
    name the later column's summary is the one kept.
    """
    column_stats: List[ColumnProfile] = []
    numerical_summary: Dict[str, NumericSummary] = {}

    for index, header in enumerate(headers):
        column = [row[index] if index < len(row) else None for row in rows]
        stats = analyze_column(column, header)
        column_stats.append(stats)

        if stats.data_type in _SUMMARIZED_TYPES:
            numbers = [n for n in (parse_number(v) for v in column) if n is not None]
            summary = summarize_numbers(numbers)
            if summary is not None:
                numerical_summary[header] = summary

    logger.debug(f"Profiled {len(headers)} columns over {len(rows)} rows")

    return DataAggregates(
        row_count=len(rows),
        column_stats=column_stats,
        numerical_summary=numerical_summary or None,
    )
