from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

MINUTE = timedelta(minutes=1)


def whole_units(delta: timedelta, unit: timedelta) -> int:
    """Count whole units in delta, truncating toward zero."""
    whole = abs(delta) // unit
    return whole if delta >= timedelta(0) else -whole


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to UTC, reading naive values as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True, slots=True)
class User:
    user_id: str
    name: str


@dataclass(frozen=True, slots=True)
class Session:
    login_at: datetime
    logout_at: datetime

    @property
    def minutes(self) -> int:
        # Logout before login stays negative.
        return whole_units(self.logout_at - self.login_at, MINUTE)


@dataclass(frozen=True, slots=True)
class YearMonth:
    year: int
    month: int

    def contains(self, value: datetime) -> bool:
        return value.year == self.year and value.month == self.month

    def __str__(self) -> str:
        return f"{self.year:04}-{self.month:02}"
