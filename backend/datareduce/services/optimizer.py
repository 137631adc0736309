"""
Chart series optimization.

Reduces a series of points to a renderable size, optionally collapsing
date-indexed series into calendar buckets first, and recommends options
for a given chart type.
"""
import logging
from typing import Any, Dict, List, Sequence, Tuple, Union

from pydantic import ValidationError

from datareduce.core.errors import ErrorCodes, ReductionError
from datareduce.core.performance import track_performance
from datareduce.core.schemas import (
    AggregationMethod,
    ChartType,
    DecimationAlgorithm,
    DecimationOptions,
    DecimationResult,
    TimeGrouping,
)
from datareduce.services.decimation import average_buckets, lttb, minmax, nth_point
from datareduce.services.temporal import aggregate_time_series, is_time_based

logger = logging.getLogger(__name__)

# Series at or below this size are never reduced by the strategy selector
SMALL_SERIES_LIMIT = 500


def _resolve_options(options: Union[DecimationOptions, Dict[str, Any], None]) -> DecimationOptions:
    if options is None:
        return DecimationOptions()
    if isinstance(options, DecimationOptions):
        return options
    try:
        return DecimationOptions(**options)
    except ValidationError as e:
        raise ReductionError(ErrorCodes.INVALID_OPTIONS, str(e)) from e


def _normalize_keys(x_key: Any, y_key: Union[str, Sequence[str]]) -> Tuple[str, ...]:
    if not isinstance(x_key, str) or not x_key:
        raise ReductionError(ErrorCodes.INVALID_X_KEY, f"Got {x_key!r}.")

    y_keys = (y_key,) if isinstance(y_key, str) else tuple(y_key)
    if not y_keys or not all(isinstance(k, str) and k for k in y_keys):
        raise ReductionError(ErrorCodes.INVALID_Y_KEY, f"Got {y_key!r}.")
    return y_keys


def _decimate(
    data: List[Dict[str, Any]],
    y_keys: Tuple[str, ...],
    opts: DecimationOptions,
) -> List[Dict[str, Any]]:
    algorithm = opts.decimation_algorithm
    if algorithm == DecimationAlgorithm.LTTB:
        return lttb(data, y_keys[0], opts.max_data_points)
    if algorithm == DecimationAlgorithm.MINMAX:
        return minmax(data, y_keys[0], opts.max_data_points)
    if algorithm == DecimationAlgorithm.AVERAGE:
        return average_buckets(data, y_keys, opts.max_data_points, opts.aggregation_method)
    return nth_point(data, opts.max_data_points)


@track_performance("optimize_series")
def optimize(
    series: Sequence[Dict[str, Any]],
    x_key: str,
    y_key: Union[str, Sequence[str]],
    options: Union[DecimationOptions, Dict[str, Any], None] = None,
) -> DecimationResult:
    """
    Reduce a chart series to at most ``max_data_points`` points.

    Series that already fit are returned unchanged with method ``'none'``.
    When ``group_by`` names a calendar granularity and the x-axis holds
    dates, points are first aggregated per day/week/month/year; decimation
    only runs if the aggregated series still does not fit.

    Args:
        series: Ordered point dicts
        x_key: Field holding the category label or date
        y_key: Field name, or list of names (the first drives point selection)
        options: DecimationOptions, a dict of its fields, or None for defaults

    Returns:
        DecimationResult with the reduced points and what was applied

    Raises:
        ReductionError: for invalid options or field names, never for bad cell values
    """
    opts = _resolve_options(options)
    y_keys = _normalize_keys(x_key, y_key)
    data = list(series)
    original_size = len(data)

    if original_size <= opts.max_data_points:
        return DecimationResult(
            data=data,
            original_size=original_size,
            optimized_size=original_size,
            method="none",
        )

    aggregation_applied = False
    if opts.group_by.is_calendar and is_time_based(data, x_key):
        aggregated = aggregate_time_series(data, x_key, y_keys, opts.group_by, opts.aggregation_method)
        aggregation_applied = True

        if len(aggregated) <= opts.max_data_points:
            logger.debug(
                f"Aggregated {original_size} points into {len(aggregated)} {opts.group_by.value} buckets"
            )
            return DecimationResult(
                data=aggregated,
                original_size=original_size,
                optimized_size=len(aggregated),
                aggregation_applied=True,
                decimation_applied=False,
                method=f"time-aggregation-{opts.group_by.value}",
            )

        data = aggregated

    decimated = _decimate(data, y_keys, opts)
    logger.debug(
        f"Decimated {original_size} points to {len(decimated)} with {opts.decimation_algorithm.value}",
        extra={'original_size': original_size, 'optimized_size': len(decimated)}
    )

    return DecimationResult(
        data=decimated,
        original_size=original_size,
        optimized_size=len(decimated),
        aggregation_applied=aggregation_applied,
        decimation_applied=True,
        method=opts.decimation_algorithm.value,
    )


def get_optimal_strategy(
    series: Sequence[Dict[str, Any]],
    x_key: str,
    chart_type: Union[ChartType, str] = ChartType.LINE,
) -> DecimationOptions:
    """
    Recommend decimation options for a series and chart type.

    - up to 500 points: no reduction
    - date x-axis: month (>10k), week (>5k) or day grouping, then LTTB at 500
    - scatter: every nth point at 1000
    - bar: summed buckets at 100, bars need fewer readable categories
    - line/area: LTTB at 500
    """
    try:
        chart_type = ChartType(chart_type)
    except ValueError as e:
        raise ReductionError(ErrorCodes.INVALID_OPTIONS, str(e)) from e
    size = len(series)

    if size <= SMALL_SERIES_LIMIT:
        return DecimationOptions(max_data_points=max(size, 1))

    if is_time_based(series, x_key):
        if size > 10000:
            group_by = TimeGrouping.MONTH
        elif size > 5000:
            group_by = TimeGrouping.WEEK
        else:
            group_by = TimeGrouping.DAY
        return DecimationOptions(
            max_data_points=500,
            group_by=group_by,
            aggregation_method=AggregationMethod.AVERAGE,
            decimation_algorithm=DecimationAlgorithm.LTTB,
        )

    if chart_type == ChartType.SCATTER:
        return DecimationOptions(max_data_points=1000, decimation_algorithm=DecimationAlgorithm.NTH)
    if chart_type == ChartType.BAR:
        return DecimationOptions(
            max_data_points=100,
            decimation_algorithm=DecimationAlgorithm.AVERAGE,
            aggregation_method=AggregationMethod.SUM,
        )
    return DecimationOptions(max_data_points=500, decimation_algorithm=DecimationAlgorithm.LTTB)
