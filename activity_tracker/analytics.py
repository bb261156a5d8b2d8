from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone, tzinfo

from .errors import NoSessionsError
from .models import MINUTE, Session, YearMonth, to_utc, whole_units
from .registry import SessionRegistry

DAY = timedelta(days=1)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def minutes_between(start: datetime, end: datetime) -> int:
    """Signed whole minutes from start to end, truncated toward zero."""
    return whole_units(end - start, MINUTE)


def whole_days_between(start: datetime, end: datetime) -> int:
    """Signed whole days from start to end, truncated toward zero."""
    return whole_units(end - start, DAY)


class ActivityAnalytics:
    def __init__(
        self,
        registry: SessionRegistry,
        tz: tzinfo = timezone.utc,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.registry = registry
        self.tz = tz
        self.clock = clock

    def _require_sessions(self, user_id: str) -> list[Session]:
        # Unknown users and users without sessions are reported the same way.
        sessions = self.registry.get_sessions(user_id)
        if not sessions:
            raise NoSessionsError(user_id)
        return sessions

    def total_activity_minutes(self, user_id: str) -> int:
        sessions = self._require_sessions(user_id)
        return sum(minutes_between(s.login_at, s.logout_at) for s in sessions)

    def find_inactive_users(self, threshold_days: int, *, now_utc: datetime | None = None) -> list[str]:
        now = to_utc(now_utc or self.clock())

        inactive: list[str] = []
        for user_id, sessions in self.registry.session_histories().items():
            if not sessions:
                continue

            # Most recently recorded, not the latest logout.
            last_logout = sessions[-1].logout_at
            if whole_days_between(last_logout, now) > threshold_days:
                inactive.append(user_id)

        return inactive

    def monthly_activity_by_day(self, user_id: str, year_month: YearMonth) -> dict[str, int]:
        sessions = self._require_sessions(user_id)

        activity: dict[str, int] = {}
        for session in sessions:
            login_local = session.login_at.astimezone(self.tz)
            if not year_month.contains(login_local):
                continue

            day_key = login_local.date().isoformat()
            activity[day_key] = activity.get(day_key, 0) + session.minutes

        return dict(sorted(activity.items()))

    def local_day_key(self, dt_utc: datetime | None = None) -> str:
        current = dt_utc or self.clock()
        return current.astimezone(self.tz).date().isoformat()
