# =============================================================================
# lib/transformers.py - Value Converters
# =============================================================================
# Pure functions that turn one raw cell value into its canonical form.
# Every converter is total: it returns a value or None and never raises for
# scalar input.
#
# Failure policies differ on purpose:
#   - parse_date returns None when nothing matches (reported as an error)
#   - parse_amount / parse_number fall back to 0
# =============================================================================

import logging
import math
import re
from datetime import date, datetime, timedelta
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

CURRENCY_SYMBOLS = "$€£¥"

CURRENCY_RE = re.compile(r"[$€£¥]")

# DD/MM/YYYY, DD-MM-YYYY or DD.MM.YYYY, optionally followed by HH:MM[:SS]
ITALIAN_DATE_RE = re.compile(
    r"^(\d{1,2})[./-](\d{1,2})[./-](\d{4})"
    r"(?:[ T](\d{1,2}):(\d{2})(?::(\d{2}))?)?$"
)

# Free-form dates must name their year; fragments ("May", "10:30") do not
YEAR_RE = re.compile(r"(?<!\d)\d{4}(?!\d)")

# Year-first strings are parsed as written, everything else day-first
YEAR_FIRST_RE = re.compile(r"^\d{4}[-/.]")

# Leading decimal number, the way a lenient float parser reads a prefix
LEADING_FLOAT_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# Strings that only hold a number are never read as dates
NUMERIC_ONLY_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)$")

RELATIVE_DATE_WORDS = {"now", "today"}


# =============================================================================
# Numeric Helpers
# =============================================================================

def leading_float(value: Any) -> float | None:
    """
    Parse the numeric prefix of a value.

    Numbers are returned as floats; strings are read from the start up to
    the first character that cannot belong to a number. Booleans and other
    objects are not numbers.

    Example:
        leading_float("12.5kg")  # 12.5
        leading_float("1.234.56")  # 1.234
        leading_float("abc")  # None
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None

    match = LEADING_FLOAT_RE.match(str(value).strip())
    if not match:
        return None
    number = float(match.group(0))
    return number if math.isfinite(number) else None


def has_currency_symbol(value: Any) -> bool:
    """True if the value's text contains $, €, £ or ¥."""
    return bool(CURRENCY_RE.search(str(value)))


def strip_currency(value: Any) -> str:
    """Remove currency symbols and all whitespace."""
    text = CURRENCY_RE.sub("", str(value))
    return re.sub(r"\s", "", text)


# =============================================================================
# Dates
# =============================================================================

def _overflow_date(
    day: int,
    month: int,
    year: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
) -> datetime | None:
    """
    Build a date letting out-of-range parts roll over.

    31/04/2024 becomes 1 May 2024 and 0/03/2024 the last day of February,
    matching calendar-arithmetic date constructors.
    """
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    try:
        return datetime(year, month, 1) + timedelta(
            days=day - 1, hours=hour, minutes=minute, seconds=second
        )
    except (ValueError, OverflowError):
        return None


def parse_date(value: Any) -> datetime | None:
    """
    Parse a raw value into a datetime.

    Accepts:
    - datetime / date / pandas Timestamp objects
    - DD/MM/YYYY, DD-MM-YYYY and DD.MM.YYYY, with an optional HH:MM[:SS]
      time (Italian day-first order)
    - other strings pandas can parse that contain a 4-digit year
      ("2024-01-15", "2024-01-15T10:30:00Z", "Jan 15, 2024"); they are read
      day-first unless they start with the year

    Plain numbers, numeric-only strings and fragments without a year
    ("May", "10:30", "12,50") are not dates.

    Returns:
        datetime, or None when the value is not a recognisable date
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, pd.Timestamp):
        return None if pd.isna(value) else value.to_pydatetime()
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text or NUMERIC_ONLY_RE.match(text):
        return None
    # pandas resolves these against the clock
    if text.lower() in RELATIVE_DATE_WORDS:
        return None

    match = ITALIAN_DATE_RE.match(text)
    if match:
        day, month, year, hour, minute, second = (int(part or 0) for part in match.groups())
        return _overflow_date(day, month, year, hour, minute, second)

    # without a year pandas fills in year 1 or today's date
    if not YEAR_RE.search(text):
        return None

    try:
        parsed = pd.to_datetime(
            text,
            errors="coerce",
            dayfirst=not YEAR_FIRST_RE.match(text),
        )
    except (TypeError, ValueError, OverflowError) as e:
        logger.debug(f"Date parse failed for {text!r}: {e}")
        return None

    if parsed is None or pd.isna(parsed):
        return None
    return parsed.to_pydatetime()


def is_valid_date(value: Any) -> bool:
    """True if parse_date can read the value."""
    return parse_date(value) is not None


# =============================================================================
# Amounts and Numbers
# =============================================================================

def parse_amount(value: Any) -> float:
    """
    Parse a money value.

    Strips currency symbols and whitespace, then swaps the first comma for
    a decimal point (European "12,50"). Thousand separators are not
    understood: "1.234,56" becomes "1.234.56" and parses as 1.234.

    Returns:
        The amount, or 0.0 when nothing numeric remains
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value) if math.isfinite(value) else 0.0
    if value is None:
        return 0.0

    cleaned = strip_currency(value).replace(",", ".", 1)
    return leading_float(cleaned) or 0.0


def parse_number(value: Any) -> float:
    """Parse a count-like value, 0.0 when it is not numeric."""
    if value is None:
        return 0.0
    return leading_float(value) or 0.0


# =============================================================================
# Text
# =============================================================================

def clean_text(value: Any) -> str | None:
    """Stringify and trim. None stays None."""
    if value is None:
        return None
    return str(value).strip()


def normalize_channel(value: Any) -> str | None:
    """Trim and lower-case a channel name ("Google " -> "google")."""
    text = clean_text(value)
    return text.lower() if text is not None else None


def identity(value: Any) -> Any:
    return value
