"""
Unit tests for cell value parsing.
"""
from datetime import date, datetime

import numpy as np
import pandas as pd
import pytest

from datareduce.core.parsing import (
    coerce_number,
    is_null,
    parse_boolean,
    parse_date,
    parse_dates,
    parse_number,
)


@pytest.mark.unit
@pytest.mark.parametrize("raw, expected", [
    ("42", 42.0),
    ("  3.5 ", 3.5),
    ("-7", -7.0),
    ("+7", 7.0),
    (".5", 0.5),
    ("1,234", 1234.0),
    ("1,234,567.89", 1234567.89),
    ("$1,000", 1000.0),
    ("-$20", -20.0),
    ("$-20", -20.0),
    ("€50.00", 50.0),
    ("£ 12", 12.0),
    ("3k", 3000.0),
    ("2.5M", 2500000.0),
    ("1B", 1e9),
    ("50%", 50.0),
    ("1e3", 1000.0),
])
def test_parse_number_grammar(raw, expected):
    """Test strings accepted by the numeric grammar."""
    assert parse_number(raw) == pytest.approx(expected)


@pytest.mark.unit
@pytest.mark.parametrize("raw", [
    "", "cat", "1,23", "12abc", "2024-01-01", "--5", "-$-5", "$", "k", "1 000",
])
def test_parse_number_rejects(raw):
    """Test strings outside the grammar are not numbers."""
    assert parse_number(raw) is None


@pytest.mark.unit
def test_parse_number_native_types():
    """Test ints and floats pass through while booleans and NaN do not."""
    assert parse_number(5) == 5.0
    assert parse_number(2.25) == 2.25
    assert parse_number(np.int64(9)) == 9.0
    assert parse_number(True) is None
    assert parse_number(float("nan")) is None
    assert parse_number(float("inf")) is None
    assert parse_number(None) is None
    assert parse_number([1]) is None


@pytest.mark.unit
def test_coerce_number_defaults_to_zero():
    """Test chart coercion turns garbage into 0."""
    assert coerce_number("abc") == 0.0
    assert coerce_number(None) == 0.0
    assert coerce_number("$5") == 5.0


@pytest.mark.unit
def test_is_null():
    """Test null detection."""
    assert is_null(None)
    assert is_null("")
    assert is_null(float("nan"))
    assert is_null(pd.NA)
    assert is_null(pd.NaT)
    assert not is_null(0)
    assert not is_null(" ")
    assert not is_null("x")
    assert not is_null([None])


@pytest.mark.unit
def test_parse_boolean():
    """Test boolean literals."""
    assert parse_boolean(True) is True
    assert parse_boolean("FALSE") is False
    assert parse_boolean(" true ") is True
    assert parse_boolean("yes") is None
    assert parse_boolean(1) is None


@pytest.mark.unit
def test_parse_date():
    """Test date parsing never raises and ignores numbers."""
    assert parse_date("2024-03-05") == pd.Timestamp("2024-03-05")
    assert parse_date(datetime(2024, 3, 5, 12)) == pd.Timestamp("2024-03-05 12:00")
    assert parse_date(date(2024, 3, 5)) == pd.Timestamp("2024-03-05")
    assert parse_date("cat") is None
    assert parse_date("") is None
    assert parse_date(None) is None
    assert parse_date(20240305) is None


@pytest.mark.unit
def test_parse_dates_batch():
    """Test vectorised parsing keeps positions and skips non-dates."""
    parsed = parse_dates(["2024-01-01", None, "cat", 5, datetime(2024, 1, 2)])

    assert len(parsed) == 5
    assert parsed[0] == pd.Timestamp("2024-01-01")
    assert parsed[1] is None
    assert parsed[2] is None
    assert parsed[3] is None
    assert parsed[4] == pd.Timestamp("2024-01-02")


@pytest.mark.unit
def test_parse_dates_empty():
    """Test an input without candidates."""
    assert parse_dates([None, 1, ""]) == [None, None, None]
    assert parse_dates([]) == []


@pytest.mark.unit
def test_month_names_are_not_dates():
    """Test bare month names do not parse into the default year."""
    assert parse_date("May") is None
    assert parse_date("Jan") is None
    assert parse_date("December") is None
    assert parse_dates(["Jan", "2024-01-01", "Feb"]) == [None, pd.Timestamp("2024-01-01"), None]
