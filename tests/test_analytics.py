from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from activity_tracker.analytics import ActivityAnalytics, minutes_between, whole_days_between
from activity_tracker.errors import NoSessionsError
from activity_tracker.models import YearMonth
from activity_tracker.registry import SessionRegistry

NOW = datetime(2026, 2, 10, 12, 0, 0, tzinfo=timezone.utc)


def make_analytics(now: datetime = NOW) -> tuple[SessionRegistry, ActivityAnalytics]:
    registry = SessionRegistry()
    return registry, ActivityAnalytics(registry, clock=lambda: now)


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_minutes_between_truncates_toward_zero() -> None:
    start = utc(2026, 2, 1, 10, 0, 0)

    assert minutes_between(start, start + timedelta(minutes=1, seconds=59)) == 1
    assert minutes_between(start, start + timedelta(seconds=59)) == 0
    assert minutes_between(start, start - timedelta(minutes=30, seconds=30)) == -30


def test_whole_days_between_truncates() -> None:
    start = utc(2026, 2, 1, 10, 0)

    assert whole_days_between(start, start + timedelta(days=2, hours=23)) == 2
    assert whole_days_between(start, start - timedelta(hours=36)) == -1


def test_total_activity_sums_sessions() -> None:
    registry, analytics = make_analytics()
    registry.register_user("user1", "Alice")
    registry.record_session("user1", utc(2026, 2, 1, 10, 0), utc(2026, 2, 1, 11, 0))
    assert analytics.total_activity_minutes("user1") == 60

    registry.record_session("user1", utc(2026, 2, 2, 8, 0), utc(2026, 2, 2, 10, 0, 45))
    assert analytics.total_activity_minutes("user1") == 180


def test_total_activity_keeps_negative_durations() -> None:
    registry, analytics = make_analytics()
    registry.register_user("user1", "Alice")
    registry.record_session("user1", utc(2026, 2, 1, 10, 0), utc(2026, 2, 1, 11, 0))
    registry.record_session("user1", utc(2026, 2, 1, 20, 10), utc(2026, 2, 1, 19, 40))

    assert analytics.total_activity_minutes("user1") == 30


@pytest.mark.parametrize("register", [True, False])
def test_total_activity_without_sessions_fails(register: bool) -> None:
    registry, analytics = make_analytics()
    if register:
        registry.register_user("user1", "Alice")

    with pytest.raises(NoSessionsError):
        analytics.total_activity_minutes("user1")


def test_inactive_users_threshold_is_strict() -> None:
    registry, analytics = make_analytics()
    registry.register_user("exact", "Exact")
    registry.register_user("older", "Older")
    registry.register_user("idle", "No sessions")

    exact_logout = NOW - timedelta(days=5)
    registry.record_session("exact", exact_logout - timedelta(hours=1), exact_logout)
    older_logout = NOW - timedelta(days=6)
    registry.record_session("older", older_logout - timedelta(hours=1), older_logout)

    assert set(analytics.find_inactive_users(5)) == {"older"}
    assert set(analytics.find_inactive_users(4)) == {"exact", "older"}
    assert analytics.find_inactive_users(6) == []


def test_inactive_users_use_last_recorded_session() -> None:
    registry, analytics = make_analytics()
    registry.register_user("user3", "Jane")

    recent = NOW - timedelta(hours=2)
    registry.record_session("user3", recent - timedelta(hours=1), recent)
    stale = NOW - timedelta(days=10)
    registry.record_session("user3", stale - timedelta(hours=1), stale)

    assert analytics.find_inactive_users(3) == ["user3"]


def test_inactive_users_accepts_explicit_now() -> None:
    registry, analytics = make_analytics()
    registry.register_user("user1", "Alice")
    registry.record_session("user1", utc(2026, 2, 1, 9, 0), utc(2026, 2, 1, 10, 0))

    assert analytics.find_inactive_users(3, now_utc=utc(2026, 2, 3, 10, 0)) == []
    assert analytics.find_inactive_users(3, now_utc=utc(2026, 2, 5, 10, 0)) == ["user1"]


def test_monthly_activity_by_day() -> None:
    registry, analytics = make_analytics()
    registry.register_user("user4", "Mike")
    registry.record_session("user4", utc(2024, 2, 29, 19, 40), utc(2024, 2, 29, 20, 10))
    registry.record_session("user4", utc(2024, 3, 1, 8, 0), utc(2024, 3, 1, 10, 0))
    registry.record_session("user4", utc(2024, 3, 5, 12, 0), utc(2024, 3, 5, 12, 45))
    registry.record_session("user4", utc(2024, 3, 5, 15, 0), utc(2024, 3, 5, 15, 45))

    activity = analytics.monthly_activity_by_day("user4", YearMonth(2024, 3))

    assert activity == {"2024-03-01": 120, "2024-03-05": 90}


def test_monthly_activity_buckets_by_login_date() -> None:
    registry, analytics = make_analytics()
    registry.register_user("user1", "Alice")
    # Starts on the last day of the month and ends in the next one.
    registry.record_session("user1", utc(2024, 3, 31, 23, 30), utc(2024, 4, 1, 0, 30))
    registry.record_session("user1", utc(2024, 2, 29, 23, 30), utc(2024, 3, 1, 0, 30))

    assert analytics.monthly_activity_by_day("user1", YearMonth(2024, 3)) == {"2024-03-31": 60}
    assert analytics.monthly_activity_by_day("user1", YearMonth(2024, 5)) == {}


def test_monthly_activity_uses_display_timezone() -> None:
    registry = SessionRegistry()
    analytics = ActivityAnalytics(registry, tz=ZoneInfo("America/New_York"), clock=lambda: NOW)
    registry.register_user("user1", "Alice")
    # 2024-03-01 02:00 UTC is still February 29th in New York.
    registry.record_session("user1", utc(2024, 3, 1, 2, 0), utc(2024, 3, 1, 2, 30))

    assert analytics.monthly_activity_by_day("user1", YearMonth(2024, 3)) == {}
    assert analytics.monthly_activity_by_day("user1", YearMonth(2024, 2)) == {"2024-02-29": 30}


def test_monthly_activity_without_sessions_fails() -> None:
    registry, analytics = make_analytics()
    registry.register_user("userWithoutSessions", "John")

    with pytest.raises(NoSessionsError):
        analytics.monthly_activity_by_day("userWithoutSessions", YearMonth(2025, 3))


def test_local_day_key() -> None:
    registry = SessionRegistry()
    analytics = ActivityAnalytics(registry, tz=ZoneInfo("Asia/Tokyo"), clock=lambda: NOW)

    assert analytics.local_day_key(utc(2026, 2, 1, 20, 0)) == "2026-02-02"
    assert analytics.local_day_key() == "2026-02-10"


def test_inactive_users_reads_clock_once_per_call() -> None:
    ticks: list[datetime] = []

    def advancing_clock() -> datetime:
        ticks.append(NOW + timedelta(days=len(ticks)))
        return ticks[-1]

    registry = SessionRegistry()
    analytics = ActivityAnalytics(registry, clock=advancing_clock)
    for user_id in ("a", "b", "c"):
        registry.register_user(user_id, user_id.upper())
        logout = NOW - timedelta(days=3)
        registry.record_session(user_id, logout - timedelta(hours=1), logout)

    assert analytics.find_inactive_users(3) == []
    assert len(ticks) == 1

    assert analytics.find_inactive_users(3) == ["a", "b", "c"]
    assert len(ticks) == 2


def test_inactive_users_accepts_naive_now() -> None:
    registry, analytics = make_analytics()
    registry.register_user("user1", "Alice")
    registry.record_session("user1", utc(2026, 2, 1, 9, 0), utc(2026, 2, 1, 10, 0))

    assert analytics.find_inactive_users(3, now_utc=datetime(2026, 2, 5, 10, 0)) == ["user1"]
