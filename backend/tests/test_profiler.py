"""
Unit tests for the profiler service.
"""
import math

import pytest

from datareduce.core.schemas import ColumnDataType, DataAggregates
from datareduce.services.profiler import (
    analyze_column,
    calculate_median,
    calculate_std_dev,
    column_types,
    compute_aggregates,
    infer_value_type,
    summarize_numbers,
)


@pytest.mark.unit
def test_analyze_column_mixed():
    """Test a column mixing numbers, text and nulls."""
    stats = analyze_column(["3", "7", "cat", "", None, "9"], "mixed")

    assert stats.name == "mixed"
    assert stats.data_type == ColumnDataType.MIXED
    assert stats.null_count == 2
    assert stats.unique_value_count == 4
    assert [tv.value for tv in stats.top_values] == ["3", "7", "cat", "9"]


@pytest.mark.unit
def test_mixed_column_numeric_summary_excludes_text():
    """Test unparseable values are left out of numeric aggregates."""
    rows = [[v] for v in ["3", "7", "cat", "", None, "9"]]
    aggregates = compute_aggregates(rows, ["c"])

    summary = aggregates.numerical_summary["c"]
    assert summary.min == 3
    assert summary.max == 9
    assert summary.sum == 19
    assert summary.mean == pytest.approx(19 / 3)
    assert summary.median == 7
    assert summary.std_dev == pytest.approx(math.sqrt(56 / 9))


@pytest.mark.unit
@pytest.mark.parametrize("values, expected", [
    (["1,000", "$2,500", "3k", 4], ColumnDataType.NUMBER),
    (["true", "False", True], ColumnDataType.BOOLEAN),
    (["2024-01-01", "2024-02-01"], ColumnDataType.DATE),
    (["alpha", "beta"], ColumnDataType.STRING),
    ([None, ""], ColumnDataType.STRING),
    ([1, "alpha"], ColumnDataType.MIXED),
])
def test_analyze_column_types(values, expected):
    """Test column type inference."""
    assert analyze_column(values, "col").data_type == expected


@pytest.mark.unit
def test_infer_value_type_order():
    """Test numeric parsing wins over date parsing."""
    assert infer_value_type("2024") == ColumnDataType.NUMBER
    assert infer_value_type("true") == ColumnDataType.BOOLEAN
    assert infer_value_type("2024-05-01") == ColumnDataType.DATE
    assert infer_value_type("alpha") == ColumnDataType.STRING
    assert infer_value_type("May") == ColumnDataType.STRING


@pytest.mark.unit
def test_analyze_column_month_names_are_strings():
    """Test a column of month names is text, not dates."""
    stats = analyze_column(["Jan", "Feb", "Mar", "Jan"], "month")

    assert stats.data_type == ColumnDataType.STRING
    assert stats.unique_value_count == 3


@pytest.mark.unit
def test_column_types_batches_text():
    """Test batched classification agrees with per-value inference."""
    values = ["7", "true", "2024-05-01", "May", "note 12 lorem", 3.5, "2023-12-31 08:00"]

    assert column_types(values) == {infer_value_type(v) for v in values}
    assert column_types([f"customer note {i} lorem" for i in range(2000)]) == {ColumnDataType.STRING}
    assert column_types([]) == set()


@pytest.mark.unit
def test_top_values_ordering():
    """Test top values are the five most frequent, most frequent first."""
    values = ["a"] * 5 + ["b"] * 4 + ["c"] * 3 + ["d"] * 2 + ["e", "f", "g"] + ["c"] * 3
    stats = analyze_column(values, "letters")

    assert [(tv.value, tv.count) for tv in stats.top_values] == [
        ("c", 6), ("a", 5), ("b", 4), ("d", 2), ("e", 1),
    ]
    assert stats.unique_value_count == 7


@pytest.mark.unit
def test_booleans_and_ones_are_distinct():
    """Test True and 1 are counted separately."""
    stats = analyze_column([True, 1, 1], "flags")

    assert stats.unique_value_count == 2
    assert stats.data_type == ColumnDataType.MIXED


@pytest.mark.unit
def test_compute_aggregates_basic():
    """Test profiling a small table."""
    headers = ["name", "age", "score"]
    rows = [
        ["Alice", "25", 85.5],
        ["Bob", "30", 90.0],
        ["Charlie", "35", 88.5],
    ]
    aggregates = compute_aggregates(rows, headers)

    assert isinstance(aggregates, DataAggregates)
    assert aggregates.row_count == 3
    assert [c.name for c in aggregates.column_stats] == headers
    assert aggregates.column_stats[0].data_type == ColumnDataType.STRING
    assert set(aggregates.numerical_summary) == {"age", "score"}
    assert aggregates.numerical_summary["age"].mean == 30


@pytest.mark.unit
def test_compute_aggregates_short_rows_count_as_nulls():
    """Test cells missing from short rows are nulls."""
    aggregates = compute_aggregates([[1, 2], [3]], ["a", "b"])

    b = aggregates.column_stats[1]
    assert b.null_count == 1
    assert b.unique_value_count == 1


@pytest.mark.unit
def test_compute_aggregates_duplicate_headers():
    """Test duplicate column names are profiled by position."""
    aggregates = compute_aggregates([["x", 1]], ["v", "v"])

    assert [c.data_type for c in aggregates.column_stats] == [ColumnDataType.STRING, ColumnDataType.NUMBER]

    aggregates = compute_aggregates([[1, 10], [3, 30]], ["v", "v"])

    assert len(aggregates.column_stats) == 2
    assert list(aggregates.numerical_summary) == ["v"]
    assert aggregates.numerical_summary["v"].sum == 40.0


@pytest.mark.unit
def test_compute_aggregates_empty():
    """Test profiling an empty table."""
    aggregates = compute_aggregates([], ["a", "b"])

    assert aggregates.row_count == 0
    assert len(aggregates.column_stats) == 2
    for stats in aggregates.column_stats:
        assert stats.null_count == 0
        assert stats.unique_value_count == 0
        assert stats.top_values == []
    assert aggregates.numerical_summary is None


@pytest.mark.unit
def test_compute_aggregates_does_not_mutate_rows():
    """Test input rows are left untouched."""
    rows = [["$1,000", None], ["2k", "x"]]
    snapshot = [list(r) for r in rows]
    compute_aggregates(rows, ["a", "b"])
    assert rows == snapshot


@pytest.mark.unit
def test_median_and_std_dev():
    """Test the statistics helpers."""
    assert calculate_median([3, 1, 2]) == 2
    assert calculate_median([1, 2, 3, 4]) == 2.5
    assert calculate_std_dev([2, 4, 4, 4, 5, 5, 7, 9]) == 2.0
    assert calculate_std_dev([5]) == 0.0


@pytest.mark.unit
def test_summarize_numbers():
    """Test a numeric summary, and none for no numbers."""
    summary = summarize_numbers([10.0, 20.0, 60.0])

    assert summary.min == 10
    assert summary.max == 60
    assert summary.mean == 30
    assert summary.median == 20
    assert summary.sum == 90
    assert summarize_numbers([]) is None
