from enum import Enum
from pydantic import BaseModel, Field
from typing import List, Optional, Any, Dict

from datareduce.core.config import get_settings


class SamplingStrategy(str, Enum):
    RANDOM = "random"
    STRATIFIED = "stratified"
    SYSTEMATIC = "systematic"
    FIRST = "first"
    SMART = "smart"


class DecimationAlgorithm(str, Enum):
    LTTB = "lttb"
    NTH = "nth"
    MINMAX = "minmax"
    AVERAGE = "average"


class AggregationMethod(str, Enum):
    AVERAGE = "average"
    SUM = "sum"
    MIN = "min"
    MAX = "max"
    FIRST = "first"
    LAST = "last"


class TimeGrouping(str, Enum):
    AUTO = "auto"  # never pre-aggregates
    NONE = "none"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def is_calendar(self) -> bool:
        return self not in (TimeGrouping.AUTO, TimeGrouping.NONE)


class ChartType(str, Enum):
    LINE = "line"
    BAR = "bar"
    AREA = "area"
    SCATTER = "scatter"


class ColumnDataType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    MIXED = "mixed"


class TopValue(BaseModel):
    value: Any
    count: int


class ColumnProfile(BaseModel):
    name: str
    data_type: ColumnDataType
    unique_value_count: int
    null_count: int
    top_values: List[TopValue] = []  # at most 5, most frequent first


class NumericSummary(BaseModel):
    min: float
    max: float
    mean: float
    median: float
    sum: float
    std_dev: float  # population


class DataAggregates(BaseModel):
    row_count: int  # always the full dataset, never the sample
    column_stats: List[ColumnProfile]
    numerical_summary: Optional[Dict[str, NumericSummary]] = None


class SamplingOptions(BaseModel):
    max_rows: int = Field(default=500, gt=0)
    strategy: SamplingStrategy = SamplingStrategy.SMART
    seed: Optional[int] = None  # None means "current time", resolved by sample()

    @classmethod
    def from_settings(cls, **overrides) -> "SamplingOptions":
        """Options seeded with the configured default row budget."""
        overrides.setdefault("max_rows", get_settings().default_max_rows)
        return cls(**overrides)


class SamplingResult(BaseModel):
    samples: List[Any]
    total_rows: int
    sample_size: int
    strategy: str  # a SamplingStrategy value, or 'full'
    aggregates: Optional[DataAggregates] = None


class DecimationOptions(BaseModel):
    max_data_points: int = Field(default=500, gt=0)
    aggregation_method: AggregationMethod = AggregationMethod.AVERAGE
    decimation_algorithm: DecimationAlgorithm = DecimationAlgorithm.LTTB
    group_by: TimeGrouping = TimeGrouping.AUTO

    @classmethod
    def from_settings(cls, **overrides) -> "DecimationOptions":
        """Options seeded with the configured default point budget."""
        overrides.setdefault("max_data_points", get_settings().default_max_data_points)
        return cls(**overrides)


class DecimationResult(BaseModel):
    data: List[Any]
    original_size: int
    optimized_size: int
    aggregation_applied: bool = False
    decimation_applied: bool = False
    method: str = "none"
