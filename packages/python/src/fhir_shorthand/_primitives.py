"""
Primitive codecs.

Convert loosely-typed scalar input (YAML/JSON scalars and parsed
temporal values) into canonical FHIR primitive representations.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Any, Optional

from fhir_shorthand.errors import ParseError

# Leading base-10 integer, ignoring surrounding whitespace.
_INTEGER_PREFIX = re.compile(r"^\s*([+-]?\d+)")

# Leading floating-point literal (digits with optional fraction and
# exponent, or a bare fraction such as ``.5``).
_DECIMAL_PREFIX = re.compile(
    r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)"
)

# Index where the date part of a full timestamp ends ("YYYY-MM-DD").
_DATE_LENGTH = 10


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def to_iso_timestamp(value: date | datetime) -> str:
    """Render a temporal value as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` (UTC).

    Naive datetimes are taken to be UTC; plain dates are midnight UTC.
    """
    if isinstance(value, datetime):
        dt = value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
        dt = dt.astimezone(timezone.utc)
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    else:
        raise ParseError("dateTime", value)
    millis = dt.microsecond // 1000
    return dt.strftime("%Y-%m-%dT%H:%M:%S") + f".{millis:03d}Z"


def to_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).lower() == "true"


def to_integer(value: Any) -> int | float:
    if _is_number(value):
        return value
    match = _INTEGER_PREFIX.match(str(value))
    if match is None:
        raise ParseError("integer", value)
    return int(match.group(1))


def to_decimal(value: Any) -> int | float:
    if _is_number(value):
        return value
    match = _DECIMAL_PREFIX.match(str(value))
    if match is None:
        raise ParseError("decimal", value)
    return float(match.group(1))


def to_date_time(value: Any) -> str:
    if isinstance(value, str):
        return value
    return to_iso_timestamp(value)


def to_date(value: Any) -> str:
    if isinstance(value, str):
        return value
    return to_iso_timestamp(value)[:_DATE_LENGTH]


def to_time(value: Any) -> str:
    # Skip the "T" separator as well as the date.
    if isinstance(value, str):
        return value
    return to_iso_timestamp(value)[_DATE_LENGTH + 1:]


def to_string(value: Any, default: Optional[str] = None) -> Optional[str]:
    """Textual rendering; ``default`` is returned for ``None``."""
    if value is None:
        return default
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
