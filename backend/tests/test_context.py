"""
Unit tests for the language model context digest.
"""
import pytest

from datareduce.core.schemas import SamplingResult
from datareduce.services.context import prepare_llm_context
from datareduce.services.sampling import sample


@pytest.fixture
def sampled():
    headers = ["city", "revenue", "notes"]
    rows = [["Paris" if i % 3 else "Lyon", str(i), "" if i % 2 else "ok"] for i in range(2000)]
    return sample(rows, headers, {"strategy": "systematic", "max_rows": 100})


@pytest.mark.unit
def test_context_overview(sampled):
    """Test the overview block."""
    context = prepare_llm_context(sampled)

    assert context.startswith("Dataset Overview:\n")
    assert "- Total Rows: 2,000" in context
    assert "- Sample Size: 100 (5.0%)" in context
    assert "- Sampling Strategy: systematic" in context


@pytest.mark.unit
def test_context_column_statistics(sampled):
    """Test per-column lines describe the whole dataset."""
    context = prepare_llm_context(sampled)

    assert "Column Statistics:" in context
    assert "- city: string type, 2 unique values; top: Paris (1333), Lyon (667)" in context
    assert "- revenue: number type, 2,000 unique values\n" in context
    assert "- notes: string type, 1 unique values (1,000 nulls); top: ok (1000)" in context


@pytest.mark.unit
def test_context_numeric_summaries(sampled):
    """Test numeric summaries are rendered with two decimals."""
    context = prepare_llm_context(sampled)

    assert "Numerical Summaries:" in context
    assert "- revenue: min=0.00, max=1999.00, mean=999.50, median=999.50" in context


@pytest.mark.unit
def test_context_without_aggregates():
    """Test a result without aggregates only has the overview."""
    result = SamplingResult(samples=[], total_rows=0, sample_size=0, strategy="full")
    context = prepare_llm_context(result)

    assert "- Sample Size: 0 (0.0%)" in context
    assert "Column Statistics" not in context
    assert "Numerical Summaries" not in context
