from __future__ import annotations

import re
from datetime import datetime

from .errors import InvalidInputError
from .models import YearMonth, to_utc

_YEAR_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def parse_iso_utc(value: str) -> datetime:
    """Parse an ISO timestamp and normalize to UTC."""
    text = value.strip()
    # fromisoformat only accepts a trailing Z from Python 3.11 on.
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise InvalidInputError(f"Invalid timestamp: {value}") from exc

    # Wall-clock input without an offset is read as UTC.
    return to_utc(parsed)


def parse_year_month(value: str) -> YearMonth:
    match = _YEAR_MONTH_RE.match(value.strip())
    if match is None:
        raise InvalidInputError(f"Invalid month: {value}")

    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise InvalidInputError(f"Invalid month: {value}")
    return YearMonth(year=year, month=month)


def parse_threshold_days(value: str) -> int:
    try:
        days = int(value.strip(), 10)
    except ValueError as exc:
        raise InvalidInputError(f"Invalid number format for days: {value}") from exc

    if days < 0:
        raise InvalidInputError(f"Day count must not be negative: {value}")
    return days
