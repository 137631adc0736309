"""
Plain-text digest of a sampling result for language model prompts.
"""
from typing import List

from datareduce.core.schemas import ColumnDataType, SamplingResult

# Top values listed per non-numeric column
CONTEXT_TOP_VALUES = 3


def _format_ratio(sample_size: int, total_rows: int) -> str:
    if total_rows == 0:
        return "0.0%"
    return f"{sample_size / total_rows * 100:.1f}%"


def prepare_llm_context(result: SamplingResult) -> str:
    """
    Summarize a sampling result so statistics describe the whole dataset
    even when only a few rows are sent verbatim.

    Example:
        Dataset Overview:
        - Total Rows: 2,000
        - Sample Size: 100 (5.0%)
        - Sampling Strategy: systematic
    """
    lines: List[str] = [
        "Dataset Overview:",
        f"- Total Rows: {result.total_rows:,}",
        f"- Sample Size: {result.sample_size:,} ({_format_ratio(result.sample_size, result.total_rows)})",
        f"- Sampling Strategy: {result.strategy}",
    ]

    aggregates = result.aggregates
    if aggregates is None:
        return "\n".join(lines) + "\n"

    lines.append("")
    lines.append("Column Statistics:")
    for stat in aggregates.column_stats:
        line = f"- {stat.name}: {stat.data_type.value} type, {stat.unique_value_count:,} unique values"
        if stat.null_count > 0:
            line += f" ({stat.null_count:,} nulls)"
        if stat.data_type != ColumnDataType.NUMBER and stat.top_values:
            top = ", ".join(f"{tv.value} ({tv.count})" for tv in stat.top_values[:CONTEXT_TOP_VALUES])
            line += f"; top: {top}"
        lines.append(line)

    if aggregates.numerical_summary:
        lines.append("")
        lines.append("Numerical Summaries:")
        for column, stats in aggregates.numerical_summary.items():
            lines.append(
                f"- {column}: min={stats.min:.2f}, max={stats.max:.2f}, mean={stats.mean:.2f}, "
                f"median={stats.median:.2f}, std_dev={stats.std_dev:.2f}"
            )

    return "\n".join(lines) + "\n"
