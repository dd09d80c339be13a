"""
Type coercion: raw cell text -> canonical value per field category.

Pure, stateless, never raises. Invalid or empty input degrades to ``None``
(``False`` for booleans); validation has already rejected malformed values in
strict columns before these run.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from praxis_ingestion.domain.types import FieldCategory

TRUE_TOKENS = frozenset({"true", "yes", "1", "y", "x"})

# Largest decimal exponent accepted as a number; beyond it "1e1000000" would expand to millions of digits.
MAX_EXPONENT = 30

# Tried in order after ISO parsing. US month-first; day-first forms are ambiguous and not accepted.
# Spreadsheet and Access exports append a time of day, which is dropped.
_DATE_FORMATS = (
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%y",
    "%m-%d-%Y",
    "%d-%b-%Y",
    "%d-%b-%y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%b %d %Y",
    "%B %d %Y",
)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value.strip() if isinstance(value, str) else str(value).strip()


def coerce_boolean(value: Any) -> bool:
    """Affirmative tokens (true/yes/1/y/x, any case) -> True; everything else -> False."""
    if isinstance(value, bool):
        return value
    return _text(value).lower() in TRUE_TOKENS


def parse_decimal(value: Any) -> Decimal | None:
    """Locale-neutral decimal parse. Rejects empty, non-numeric and non-finite input.

    Values whose magnitude is beyond 10**MAX_EXPONENT (or below its inverse) are
    rejected too.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, Decimal)):
        d = Decimal(value)
    else:
        s = _text(value)
        if not s:
            return None
        try:
            d = Decimal(s)
        except (InvalidOperation, ValueError):
            return None
    if not d.is_finite() or abs(d.adjusted()) > MAX_EXPONENT:
        return None
    return d


def coerce_integer(value: Any) -> int | None:
    """Whole number, rounding half away from zero ("2.5" -> 3)."""
    d = parse_decimal(value)
    if d is None:
        return None
    return int(d.to_integral_value(rounding=ROUND_HALF_UP))


def coerce_float(value: Any) -> Decimal | None:
    """Exact decimal amount; ``Decimal`` keeps currency values like 85303.59 exact."""
    return parse_decimal(value)


def parse_date(value: Any) -> date | None:
    """Calendar date from common spreadsheet spellings; time-of-day is discarded."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = _text(value)
    if not s:
        return None
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    return None


def coerce_date(value: Any) -> date | None:
    return parse_date(value)


def coerce_string(value: Any) -> str | None:
    """Trimmed text; empty becomes None so "missing" is uniformly None downstream."""
    s = _text(value)
    return s or None


def is_number(value: Any) -> bool:
    return parse_decimal(value) is not None


def is_date(value: Any) -> bool:
    return parse_date(value) is not None


def coerce_value(value: Any, category: FieldCategory) -> Any:
    """Dispatch on category. Lookup columns are carried as plain strings."""
    if category is FieldCategory.BOOLEAN:
        return coerce_boolean(value)
    if category is FieldCategory.INTEGER:
        return coerce_integer(value)
    if category is FieldCategory.FLOAT:
        return coerce_float(value)
    if category is FieldCategory.DATE:
        return coerce_date(value)
    return coerce_string(value)
