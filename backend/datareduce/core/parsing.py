"""
Cell value parsing shared by the decimator and the profiler.

Numbers follow one documented grammar (whitespace trimmed, case-insensitive)::

    [sign] [currency] [sign] digits [. digits] [exponent] [K|M|B] [%]

- currency is one of ``$ € £ ¥``
- digits are either plain (``1234``) or grouped by thousands commas (``1,234``)
- ``.5`` is accepted, ``1,23`` is not
- K, M and B multiply by one thousand, million and billion
- a trailing ``%`` is stripped, the value stays in percent units (``50%`` -> 50.0)

Python ints and floats pass through, booleans are never numbers.
"""
import math
import re
import warnings
from datetime import date, datetime
from typing import Any, List, Optional, Sequence

import numpy as np
import pandas as pd

_NUMBER_RE = re.compile(
    r"""
    ^(?P<sign>[+-])?
    (?P<currency>[$€£¥])?\s*
    (?P<inner_sign>[+-])?
    (?P<digits>(?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d*)?|\.\d+)
    (?P<exponent>[eE][+-]?\d+)?
    (?P<suffix>[kmb])?
    (?P<percent>%)?$
    """,
    re.VERBOSE | re.IGNORECASE,
)

_SUFFIX_MULTIPLIERS = {"k": 1e3, "m": 1e6, "b": 1e9}

_BOOLEAN_LITERALS = {"true": True, "false": False}

# pandas fills a missing year with 1 ("May" -> 0001-05-01)
_DEFAULT_YEAR = 1


def is_null(value: Any) -> bool:
    """None, empty strings and pandas/numpy missing markers (NaN, NA, NaT)."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if pd.api.types.is_scalar(value):
        return bool(pd.isna(value))
    return False


def parse_number(value: Any) -> Optional[float]:
    """Parse a cell into a float using the module grammar, or None."""
    if isinstance(value, (bool, np.bool_)):
        return None
    if isinstance(value, (int, float, np.integer, np.floating)):
        number = float(value)
        return number if math.isfinite(number) else None
    if not isinstance(value, str):
        return None

    match = _NUMBER_RE.match(value.strip())
    if not match:
        return None
    if match.group("sign") and match.group("inner_sign"):
        return None

    number = float(match.group("digits").replace(",", "") + (match.group("exponent") or ""))
    suffix = match.group("suffix")
    if suffix:
        number *= _SUFFIX_MULTIPLIERS[suffix.lower()]
    if "-" in (match.group("sign") or "", match.group("inner_sign") or ""):
        number = -number
    return number if math.isfinite(number) else None


def coerce_number(value: Any) -> float:
    """Parse a cell for plotting: anything unparseable becomes 0.0."""
    number = parse_number(value)
    return 0.0 if number is None else number


def parse_boolean(value: Any) -> Optional[bool]:
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, str):
        return _BOOLEAN_LITERALS.get(value.strip().lower())
    return None


def _is_date_text(value: Any) -> bool:
    """Strings worth handing to pandas: a date needs at least one digit."""
    return isinstance(value, str) and any(ch.isdigit() for ch in value)


def _accept_parsed(timestamp: Any) -> Optional[pd.Timestamp]:
    if timestamp is None or pd.isna(timestamp) or timestamp.year == _DEFAULT_YEAR:
        return None
    return timestamp


def parse_date(value: Any) -> Optional[pd.Timestamp]:
    """
    Parse a cell into a Timestamp, or None.

    Date/datetime objects pass through; strings go through ``pd.to_datetime``.
    Numbers are never treated as dates, and neither are strings without a
    digit ("May", "Jan") or that only parse into the default year. Never raises.
    """
    if isinstance(value, (datetime, date)):
        timestamp = pd.Timestamp(value)
        return None if pd.isna(timestamp) else timestamp
    if not _is_date_text(value):
        return None

    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            timestamp = pd.to_datetime(value.strip(), errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    return _accept_parsed(timestamp)


def parse_dates(values: Sequence[Any]) -> List[Optional[pd.Timestamp]]:
    """
    Vectorised ``parse_date`` for a whole column.

    Falls back to value-by-value parsing when pandas refuses the batch
    (for example a mix of time zone aware and naive strings).
    """
    candidates = [
        i for i, v in enumerate(values)
        if isinstance(v, (datetime, date)) or _is_date_text(v)
    ]
    parsed: List[Optional[pd.Timestamp]] = [None] * len(values)
    if not candidates:
        return parsed

    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            batch = pd.to_datetime(
                pd.Series([values[i] for i in candidates], dtype=object),
                errors="coerce",
                format="mixed",
            )
    except (ValueError, TypeError, OverflowError):
        for i in candidates:
            parsed[i] = parse_date(values[i])
        return parsed

    for i, timestamp in zip(candidates, batch):
        if isinstance(values[i], str):
            parsed[i] = _accept_parsed(timestamp)
        elif not pd.isna(timestamp):
            parsed[i] = timestamp
    return parsed
