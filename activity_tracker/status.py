from __future__ import annotations

from datetime import timezone, tzinfo
from typing import Protocol

from .models import Session

INACTIVE = "Inactive"
ACTIVE = "Active"
HIGHLY_ACTIVE = "Highly active"

ACTIVE_MINUTES = 60
HIGHLY_ACTIVE_MINUTES = 120


class AnalyticsLike(Protocol):
    def total_activity_minutes(self, user_id: str) -> int: ...


class SessionSourceLike(Protocol):
    def get_sessions(self, user_id: str) -> list[Session] | None: ...


def classify_minutes(total_minutes: int) -> str:
    """Map total activity minutes to a tier; lower bounds are inclusive."""
    if total_minutes < ACTIVE_MINUTES:
        return INACTIVE
    if total_minutes < HIGHLY_ACTIVE_MINUTES:
        return ACTIVE
    return HIGHLY_ACTIVE


class UserStatusService:
    def __init__(
        self,
        analytics: AnalyticsLike,
        sessions: SessionSourceLike,
        tz: tzinfo = timezone.utc,
    ) -> None:
        self.analytics = analytics
        self.sessions = sessions
        self.tz = tz

    def get_user_status(self, user_id: str) -> str:
        # NoSessionsError from the analytics layer propagates unchanged.
        return classify_minutes(self.analytics.total_activity_minutes(user_id))

    def get_last_session_date(self, user_id: str) -> str | None:
        sessions = self.sessions.get_sessions(user_id)
        if not sessions:
            return None

        latest = max(sessions, key=lambda session: session.logout_at)
        return latest.logout_at.astimezone(self.tz).date().isoformat()
