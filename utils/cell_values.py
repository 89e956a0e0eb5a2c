import re
from datetime import date, datetime

import numpy as np
import pandas as pd

# Stripped before numeric parsing: thousands separators and currency symbols
_NUMBER_FORMATTING = re.compile(r'[,$€£¥₹]')
_TRAILING_PERCENT = re.compile(r'%$')

DATE_PATTERNS = [
    (re.compile(r'^\d{4}-\d{2}-\d{2}$'), '%Y-%m-%d'),    # YYYY-MM-DD
    (re.compile(r'^\d{2}/\d{2}/\d{4}$'), '%m/%d/%Y'),    # MM/DD/YYYY
    (re.compile(r'^\d{2}-\d{2}-\d{4}$'), '%m-%d-%Y'),    # MM-DD-YYYY
    (re.compile(r'^\d{4}/\d{2}/\d{2}$'), '%Y/%m/%d'),    # YYYY/MM/DD
    (re.compile(r'^\d{2}\.\d{2}\.\d{4}$'), '%d.%m.%Y'),  # DD.MM.YYYY
    (re.compile(r'^\d{4}\.\d{2}\.\d{2}$'), '%Y.%m.%d'),  # YYYY.MM.DD
]


def is_empty(value):
    """Check whether a cell holds no value (None, NaN/NA/NaT or the empty string)"""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ''
    if isinstance(value, (list, tuple, dict, set)):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def is_numeric_scalar(value):
    """Numbers proper; booleans are not numbers"""
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, float, np.integer, np.floating))


def to_number(value):
    """Coerce a cell to a finite float, or None when it is not numeric.

    Strings may carry thousands separators, currency symbols and a trailing
    percent sign, e.g. "$1,250.50" or "12.5%".
    """
    if is_empty(value):
        return None

    if is_numeric_scalar(value):
        number = float(value)
    elif isinstance(value, str):
        cleaned = _NUMBER_FORMATTING.sub('', value.strip())
        cleaned = _TRAILING_PERCENT.sub('', cleaned).strip()
        if not cleaned:
            return None
        number = pd.to_numeric(cleaned, errors='coerce')
        if pd.isna(number):
            return None
        number = float(number)
    else:
        return None

    return number if np.isfinite(number) else None


def parse_date(value):
    """Parse a cell to a pandas Timestamp, or None when it is not a date.

    Only date objects and strings in one of DATE_PATTERNS that name a real
    calendar day are accepted.
    """
    if is_empty(value):
        return None

    if isinstance(value, (datetime, date)):
        return pd.Timestamp(value)

    if not isinstance(value, str):
        return None

    for pattern, date_format in DATE_PATTERNS:
        if pattern.match(value):
            parsed = pd.to_datetime(value, format=date_format, errors='coerce')
            return None if pd.isna(parsed) else parsed

    return None


def non_empty(values):
    """Drop empty cells, keeping order"""
    return [value for value in values if not is_empty(value)]
