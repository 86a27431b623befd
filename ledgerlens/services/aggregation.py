"""
Aggregation Primitives - grouping, month bucketing and guarded arithmetic.

Nearly every analysis in this package follows the same shape: walk a record
collection once, derive a key per row, and accumulate sums into a per-key
record. KeyedAccumulator captures that shape so each service only has to say
what the key is and what the accumulator looks like.

An accumulator instance lives for a single function call. Nothing here keeps
module-level state, so independent analyses may run side by side without
sharing structures.

Helpers:
- KeyedAccumulator: insertion-ordered key -> mutable accumulator map
- extract_month: raw date cell -> "YYYY-MM" (or None when unusable)
- month_of_year: "YYYY-MM" -> 1..12 (or None)
- month_span: inclusive number of months between two "YYYY-MM" strings
- safe_divide / safe_percentage: zero-guarded division
- clamp, mean
"""

import re
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, Generic, Iterable, Iterator, List, Optional, Tuple, TypeVar

K = TypeVar('K')
A = TypeVar('A')
T = TypeVar('T')

# Spreadsheet serial day numbers count from this epoch (the 1900 leap-year
# bug is already folded into the offset).
SPREADSHEET_EPOCH: date = date(1899, 12, 30)

# Serial numbers outside this open interval are not treated as dates
# (40000 is 2009-07-06, 100000 is 2173-10-14).
SERIAL_MIN: int = 40000
SERIAL_MAX: int = 100000

_COMPACT_DATE = re.compile(r'^\d{8}$')

# Whole numbers in this range are YYYYMMDD dates delivered as numbers
COMPACT_NUMBER_MIN: int = 19000101
COMPACT_NUMBER_MAX: int = 99991231


# =============================================================================
# Keyed Accumulator
# =============================================================================


class KeyedAccumulator(Generic[K, A]):
    """
    Insertion-ordered map from a grouping key to a mutable accumulator.

    The factory is called the first time a key is seen. Iteration yields keys
    in first-seen order, which makes downstream "first match" lookups (such as
    fuzzy organization matching) deterministic.

    Example:
        >>> totals = KeyedAccumulator(lambda: [0.0])
        >>> totals.get('A')[0] += 10
        >>> totals.get('A')[0] += 5
        >>> dict(totals.items())
        {'A': [15.0]}
    """

    def __init__(self, factory: Callable[[], A]) -> None:
        self._factory = factory
        self._entries: Dict[K, A] = {}

    def get(self, key: K) -> A:
        """Return the accumulator for key, creating it on first use."""
        entry = self._entries.get(key)
        if entry is None:
            entry = self._factory()
            self._entries[key] = entry
        return entry

    def keys(self) -> List[K]:
        return list(self._entries.keys())

    def values(self) -> List[A]:
        return list(self._entries.values())

    def items(self) -> List[Tuple[K, A]]:
        return list(self._entries.items())

    def as_dict(self) -> Dict[K, A]:
        """Shallow copy of the underlying mapping, insertion order preserved."""
        return dict(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[K]:
        return iter(self._entries)


def group_by(rows: Iterable[T], key_fn: Callable[[T], Optional[K]]) -> Dict[K, List[T]]:
    """
    Group rows into lists by key.

    Rows whose key is None or an empty string are dropped.

    Args:
        rows: Records to group
        key_fn: Function deriving the grouping key from a row

    Returns:
        Dictionary mapping each key to its rows, in first-seen key order
    """
    groups: KeyedAccumulator[K, List[T]] = KeyedAccumulator(list)
    for row in rows:
        key = key_fn(row)
        if key is None or key == '':
            continue
        groups.get(key).append(row)
    return groups.as_dict()


def sum_by_key(
    rows: Iterable[T],
    key_fn: Callable[[T], Optional[K]],
    value_fn: Callable[[T], float],
) -> Dict[K, float]:
    """
    Sum a numeric field per key, skipping rows without a key.

    Args:
        rows: Records to aggregate
        key_fn: Function deriving the grouping key from a row
        value_fn: Function extracting the amount to add

    Returns:
        Dictionary mapping key to summed amount, in first-seen key order
    """
    totals: KeyedAccumulator[K, List[float]] = KeyedAccumulator(lambda: [0.0])
    for row in rows:
        key = key_fn(row)
        if key is None or key == '':
            continue
        totals.get(key)[0] += value_fn(row)
    return {key: acc[0] for key, acc in totals.items()}


# =============================================================================
# Month Bucketing
# =============================================================================


def _format_month(year: int, month: int) -> Optional[str]:
    if not 1 <= month <= 12 or not 1 <= year <= 9999:
        return None
    return f"{year:04d}-{month:02d}"


def _parse_year_month(year_part: str, month_part: str) -> Optional[str]:
    year_part = year_part.strip()
    month_part = month_part.strip()
    if not (year_part.isdigit() and month_part.isdigit()):
        return None
    if len(year_part) != 4:
        return None
    return _format_month(int(year_part), int(month_part))


def _month_from_serial(serial: float) -> Optional[str]:
    if not SERIAL_MIN < serial < SERIAL_MAX:
        return None
    day = SPREADSHEET_EPOCH + timedelta(days=int(serial))
    return _format_month(day.year, day.month)


def extract_month(raw: Any) -> Optional[str]:
    """
    Extract a calendar month ("YYYY-MM") from a raw date cell.

    Recognized inputs:
    - date / datetime objects
    - "YYYY-MM", "YYYY-MM-DD", "YYYY-MM-DD hh:mm:ss" (anything after the
      day is ignored)
    - "YYYY/MM" and "YYYY/MM/DD" (month may be one digit)
    - "YYYYMMDD", as text or as a whole number (20240315)
    - Spreadsheet serial day numbers (numeric or numeric string)

    Args:
        raw: The raw date value

    Returns:
        "YYYY-MM" string, or None when the value is blank or unparsable.
        Callers skip such rows for month-keyed aggregation.

    Example:
        >>> extract_month("2024/3/15")
        '2024-03'
        >>> extract_month("20240315")
        '2024-03'
        >>> extract_month("")
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (datetime, date)):
        return _format_month(raw.year, raw.month)
    if isinstance(raw, (int, float)):
        number = float(raw)
        if number.is_integer() and COMPACT_NUMBER_MIN <= number <= COMPACT_NUMBER_MAX:
            text = str(int(number))
            return _parse_year_month(text[:4], text[4:6])
        return _month_from_serial(number)

    text = str(raw).strip()
    if not text:
        return None

    if '-' in text:
        parts = text.split('-')
        if len(parts) < 2:
            return None
        # Keep only the leading digits of the month part ("03T10:00" -> "03")
        month_digits = re.match(r'\s*(\d{1,2})', parts[1])
        if month_digits is None:
            return None
        return _parse_year_month(parts[0], month_digits.group(1))

    if '/' in text:
        parts = text.split('/')
        if len(parts) < 2:
            return None
        return _parse_year_month(parts[0], parts[1])

    if _COMPACT_DATE.match(text):
        return _parse_year_month(text[:4], text[4:6])

    try:
        serial = float(text)
    except ValueError:
        return None
    return _month_from_serial(serial)


def month_of_year(month: str) -> Optional[int]:
    """
    Return the calendar month number (1-12) of a "YYYY-MM" string.

    Returns None when the month part is missing or out of range.
    """
    parts = month.split('-')
    if len(parts) < 2 or not parts[1][:2].isdigit():
        return None
    value = int(parts[1][:2])
    return value if 1 <= value <= 12 else None


def month_span(first: str, last: str) -> Optional[int]:
    """
    Inclusive number of months from first to last ("2024-01".."2024-03" -> 3).

    Returns None if either string is not a valid "YYYY-MM".
    """
    try:
        first_year, first_month = (int(p) for p in first.split('-')[:2])
        last_year, last_month = (int(p) for p in last.split('-')[:2])
    except ValueError:
        return None
    return (last_year - first_year) * 12 + (last_month - first_month) + 1


# =============================================================================
# Guarded Arithmetic
# =============================================================================


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide, returning default instead of raising when denominator is 0."""
    if denominator == 0:
        return default
    return numerator / denominator


def safe_percentage(numerator: float, denominator: float) -> float:
    """numerator / denominator * 100, or 0 when denominator is 0."""
    return safe_divide(numerator, denominator) * 100


def clamp(value: float, lower: float, upper: float) -> float:
    """Limit value to the closed interval [lower, upper]."""
    return max(lower, min(value, upper))


def mean(values: List[float]) -> float:
    """
    Calculate the arithmetic mean of a list of values.

    Returns:
        Arithmetic mean, or 0 if empty list
    """
    if not values:
        return 0.0
    return sum(values) / len(values)
