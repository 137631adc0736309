"""
Row sampling for large tabular datasets.

Picks a bounded, representative subset of rows for prompts and previews,
while the attached aggregates always describe the complete dataset.
"""
import logging
import time
from typing import Any, Dict, List, Sequence, Union

from pydantic import ValidationError

from datareduce.core.errors import ErrorCodes, ReductionError
from datareduce.core.parsing import is_null, parse_number
from datareduce.core.performance import track_performance
from datareduce.core.schemas import SamplingOptions, SamplingResult, SamplingStrategy
from datareduce.services.profiler import compute_aggregates

logger = logging.getLogger(__name__)

Row = Sequence[Any]

# Rows inspected when looking for a column to stratify by
NUMERIC_CHECK_ROWS = 10

# Sections the smart strategy spreads its random draws across
SMART_SECTIONS = 5


class SeededRandom:
    """
    Small linear congruential generator.

    Reproducible for a given seed and independent of the ``random`` module's
    global state. Its period is ``MODULUS`` draws.
    """

    MULTIPLIER = 9301
    INCREMENT = 49297
    MODULUS = 233280

    def __init__(self, seed: int):
        self._state = int(seed) % self.MODULUS

    def random(self) -> float:
        self._state = (self._state * self.MULTIPLIER + self.INCREMENT) % self.MODULUS
        return self._state / self.MODULUS

    def randrange(self, start: int, stop: int) -> int:
        return start + int(self.random() * (stop - start))


def first_sample(rows: Sequence[Row], sample_size: int) -> List[Row]:
    return list(rows[:sample_size])


def random_sample(rows: Sequence[Row], sample_size: int, seed: int) -> List[Row]:
    """Distinct rows in draw order; deterministic for a fixed seed."""
    rng = SeededRandom(seed)
    target = min(sample_size, len(rows))
    picked: Dict[int, None] = {}

    for _ in range(SeededRandom.MODULUS):
        if len(picked) >= target:
            break
        picked.setdefault(rng.randrange(0, len(rows)), None)

    return [rows[i] for i in picked]


def systematic_sample(rows: Sequence[Row], sample_size: int) -> List[Row]:
    """Every ``floor(N / sample_size)``-th row starting at the first."""
    interval = max(1, len(rows) // sample_size)
    return list(rows[::interval][:sample_size])


def find_numeric_column(rows: Sequence[Row], headers: Sequence[str]) -> int:
    """
    Index of the first column whose leading values are all numbers or nulls.

    Columns that are entirely null in the checked rows do not count. Returns -1
    when no column qualifies.
    """
    head = rows[:NUMERIC_CHECK_ROWS]
    for index in range(len(headers)):
        values = [row[index] if index < len(row) else None for row in head]
        present = [v for v in values if not is_null(v)]
        if present and all(parse_number(v) is not None for v in present):
            return index
    return -1


def stratified_sample(rows: Sequence[Row], headers: Sequence[str], sample_size: int) -> List[Row]:
    """
    Midpoint row of each of ``sample_size`` strata of a numeric column.

    Falls back to systematic sampling when there is no numeric column.
    """
    column = find_numeric_column(rows, headers)
    if column == -1:
        logger.info("No numeric column to stratify by, falling back to systematic sampling")
        return systematic_sample(rows, sample_size)

    def sort_key(row: Row):
        number = parse_number(row[column]) if column < len(row) else None
        return (number is None, number if number is not None else 0.0)

    ordered = sorted(rows, key=sort_key)
    strata_size = len(rows) // sample_size
    samples = []

    for i in range(sample_size):
        start = i * strata_size
        end = min((i + 1) * strata_size, len(rows))
        samples.append(ordered[(start + end) // 2])

    return samples


def smart_sample(rows: Sequence[Row], sample_size: int, seed: int) -> List[Row]:
    """
    First and last row plus random rows spread over five equal sections.

    Rows come back in dataset order, at most ``sample_size`` of them.
    """
    total = len(rows)
    rng = SeededRandom(seed)
    picked = {0: None}
    if total > 1:
        picked[total - 1] = None

    per_section = max(0, (sample_size - 2) // SMART_SECTIONS)
    section_size = total // SMART_SECTIONS

    for section in range(SMART_SECTIONS):
        start = section * section_size
        end = min((section + 1) * section_size, total)
        for i in range(per_section):
            if start + i >= end:
                break
            picked.setdefault(rng.randrange(start, end), None)

    indices = list(picked)[:sample_size]
    return [rows[i] for i in sorted(indices)]


def _resolve_options(options: Union[SamplingOptions, Dict[str, Any], None]) -> SamplingOptions:
    if options is None:
        return SamplingOptions()
    if isinstance(options, SamplingOptions):
        return options
    try:
        return SamplingOptions(**options)
    except ValidationError as e:
        raise ReductionError(ErrorCodes.INVALID_OPTIONS, str(e)) from e


@track_performance("sample_rows")
def sample(
    rows: Sequence[Row],
    headers: Sequence[str],
    options: Union[SamplingOptions, Dict[str, Any], None] = None,
) -> SamplingResult:
    """
    Reduce a table to at most ``max_rows`` representative rows.

    Tables that already fit come back whole with strategy ``'full'``.
    Aggregates are always computed over every row, so ``aggregates.row_count``
    equals ``total_rows`` however few rows are sampled.

    Args:
        rows: Row lists aligned positionally with ``headers``
        headers: Column names
        options: SamplingOptions, a dict of its fields, or None for defaults.
            A missing seed means the current time in milliseconds.

    Returns:
        SamplingResult with the sampled rows and full-dataset aggregates

    Raises:
        ReductionError: for invalid options or headers, never for bad cell values
    """
    opts = _resolve_options(options)
    if isinstance(headers, str) or not all(isinstance(h, str) for h in headers):
        raise ReductionError(ErrorCodes.INVALID_HEADERS, f"Got {headers!r}.")

    rows = list(rows)
    total_rows = len(rows)
    aggregates = compute_aggregates(rows, headers)

    if total_rows <= opts.max_rows:
        return SamplingResult(
            samples=rows,
            total_rows=total_rows,
            sample_size=total_rows,
            strategy="full",
            aggregates=aggregates,
        )

    seed = opts.seed if opts.seed is not None else int(time.time() * 1000)
    strategy = opts.strategy

    if strategy == SamplingStrategy.FIRST:
        samples = first_sample(rows, opts.max_rows)
    elif strategy == SamplingStrategy.RANDOM:
        samples = random_sample(rows, opts.max_rows, seed)
    elif strategy == SamplingStrategy.SYSTEMATIC:
        samples = systematic_sample(rows, opts.max_rows)
    elif strategy == SamplingStrategy.STRATIFIED:
        samples = stratified_sample(rows, headers, opts.max_rows)
    else:
        samples = smart_sample(rows, opts.max_rows, seed)

    logger.debug(
        f"Sampled {len(samples)} of {total_rows} rows ({strategy.value})",
        extra={'total_rows': total_rows, 'sample_size': len(samples)}
    )

    return SamplingResult(
        samples=samples,
        total_rows=total_rows,
        sample_size=len(samples),
        strategy=strategy.value,
        aggregates=aggregates,
    )
