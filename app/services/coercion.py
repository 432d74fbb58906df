"""
Cell coercion helpers.

Every raw cell is classified into one CellKind first; the coercers below
then convert it to a canonical number, boolean or date string, or return
None when the cell is missing or cannot be read.  Nothing here raises for
dirty input.
"""

import math
import re
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Union

import numpy as np
import pandas as pd


# ============================================================================
# CONSTANTS
# ============================================================================

TRUE_VALUES = {"true", "yes", "y", "1"}
FALSE_VALUES = {"false", "no", "n", "0"}

# Relative words pandas would resolve against the wall clock
RELATIVE_DATE_WORDS = {"now", "today"}

# Leading float literal, the part of the text a permissive number parse keeps
_LEADING_FLOAT = re.compile(
    r"^\s*([+-]?(?:infinity|(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?))",
    re.IGNORECASE,
)


class CellKind(str, Enum):
    ABSENT = "absent"
    BOOLEAN = "boolean"
    NUMBER = "number"
    TEXT = "text"
    DATE = "date"


# ============================================================================
# CLASSIFICATION
# ============================================================================

def is_blank(value: Any) -> bool:
    """True for None, the empty string and pandas/numpy missing markers."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if not pd.api.types.is_scalar(value):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def classify_cell(value: Any) -> CellKind:
    """Tag a raw cell with the kind of value it holds."""
    if is_blank(value):
        return CellKind.ABSENT
    if isinstance(value, (bool, np.bool_)):
        return CellKind.BOOLEAN
    if isinstance(value, (int, float, np.number)):
        return CellKind.NUMBER
    if isinstance(value, (datetime, date, pd.Timestamp, np.datetime64)):
        return CellKind.DATE
    return CellKind.TEXT


def to_text(value: Any) -> str:
    """Text form of a cell: 'true'/'false' for booleans, '3' for 3.0."""
    kind = classify_cell(value)

    if kind == CellKind.BOOLEAN:
        return "true" if value else "false"

    if kind == CellKind.NUMBER:
        if isinstance(value, (float, np.floating)) and math.isfinite(value) and float(value).is_integer():
            return str(int(value))
        return str(value)

    if kind == CellKind.DATE:
        return pd.Timestamp(value).isoformat()

    return str(value)


# ============================================================================
# COERCERS
# ============================================================================

def to_number(value: Any) -> Optional[Union[int, float]]:
    """Convert a cell to a finite number.

    Finite numbers come back unchanged.  Text has its thousands separators
    removed and its leading float literal parsed, so '1,200' is 1200.0 and
    '12 kg' is 12.0.

    Returns:
        The number, or None if the cell is missing or not numeric.
    """
    kind = classify_cell(value)

    if kind in (CellKind.ABSENT, CellKind.DATE):
        return None

    if kind == CellKind.NUMBER and math.isfinite(value):
        return value

    match = _LEADING_FLOAT.match(to_text(value).replace(",", ""))
    if not match:
        return None

    try:
        number = float(match.group(1))
    except (ValueError, OverflowError):
        return None

    return number if math.isfinite(number) else None


def normalize_boolean(value: Any) -> Optional[bool]:
    """Convert yes/no style values to bool.

    Returns:
        True, False, or None if the value is missing or ambiguous
    """
    kind = classify_cell(value)

    if kind == CellKind.BOOLEAN:
        return bool(value)

    if kind == CellKind.ABSENT:
        return None

    val_lower = to_text(value).strip().lower()

    if val_lower in TRUE_VALUES:
        return True
    elif val_lower in FALSE_VALUES:
        return False

    return None


def parse_timestamp(value: Any) -> Optional[pd.Timestamp]:
    """Parse a cell into a UTC timestamp.

    Numbers are read as epoch milliseconds, naive values are taken as UTC.
    """
    kind = classify_cell(value)

    if kind in (CellKind.ABSENT, CellKind.BOOLEAN):
        return None

    if isinstance(value, str) and value.strip().lower() in RELATIVE_DATE_WORDS:
        return None

    try:
        if kind == CellKind.NUMBER:
            if not math.isfinite(value):
                return None
            parsed = pd.to_datetime(value, unit="ms", utc=True)
        else:
            parsed = pd.to_datetime(value, utc=True)
    except (ValueError, TypeError, OverflowError, pd.errors.OutOfBoundsDatetime):
        return None

    if parsed is None or pd.isna(parsed):
        return None

    return parsed


def normalize_date(value: Any) -> Optional[str]:
    """Normalize a date-like cell to ISO form.

    Values at 00:00:00 (sub-seconds ignored) become 'YYYY-MM-DD', anything
    with a time of day becomes 'YYYY-MM-DDTHH:MM:SS.mmmZ'.  Returns None when
    the value cannot be parsed; callers keep the raw value in that case.
    """
    ts = parse_timestamp(value)
    if ts is None:
        return None

    if ts.hour == ts.minute == ts.second == 0:
        return ts.strftime("%Y-%m-%d")

    millis = ts.microsecond // 1000
    return f"{ts.strftime('%Y-%m-%dT%H:%M:%S')}.{millis:03d}Z"
