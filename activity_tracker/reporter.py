from __future__ import annotations

from typing import Protocol

from .errors import InvalidInputError
from .models import User
from .parsing import parse_threshold_days
from .status import UserStatusService

MISSING_PARAMETERS = "Missing parameters"
NO_SESSIONS = "No sessions found for user"
MISSING_DAYS = "Missing days parameter"
INVALID_DAYS = "Invalid number format for days"


class UserSourceLike(Protocol):
    def get_user(self, user_id: str) -> User | None: ...


class InactivityFinderLike(Protocol):
    def find_inactive_users(self, threshold_days: int) -> list[str]: ...


def format_minutes(total_minutes: int) -> str:
    """Render a minute count as H:MM, keeping the sign of negative totals."""
    sign = "-" if total_minutes < 0 else ""
    hours, minutes = divmod(abs(int(total_minutes)), 60)
    return f"{sign}{hours}:{minutes:02}"


def invalid_data(reason: object) -> str:
    return f"Invalid data: {reason}"


def registration_content(registered: bool) -> str:
    return f"User registered: {str(registered).lower()}"


def total_activity_content(total_minutes: int) -> str:
    return f"Total activity: {total_minutes} minutes"


def inactive_users_content(threshold_days: int, user_ids: list[str]) -> str:
    header = f"**Users inactive for more than {threshold_days} days**"
    if not user_ids:
        return f"{header}\nNo inactive users."

    lines = [f"- `{user_id}`" for user_id in user_ids]
    return "\n".join([header, *lines])


def inactive_users_reply(analytics: InactivityFinderLike, days: str | None) -> str:
    if days is None or not days.strip():
        return MISSING_DAYS

    try:
        threshold = parse_threshold_days(days)
    except InvalidInputError:
        return INVALID_DAYS

    return inactive_users_content(threshold, analytics.find_inactive_users(threshold))


def monthly_activity_content(user_id: str, month: str, activity: dict[str, int]) -> str:
    header = f"**Activity for {user_id} - {month}**"
    if not activity:
        return f"{header}\nNo tracked activity for {month}."

    lines = [
        f"- {day}: {minutes} minutes (`{format_minutes(minutes)}`)"
        for day, minutes in activity.items()
    ]
    total = sum(activity.values())
    lines.append(f"Total: {total} minutes")
    return "\n".join([header, *lines])


def user_status_content(user: User | None, user_id: str, status: str, last_session_date: str | None) -> str:
    # Unregistered ids can still be queried; fall back to the raw ID.
    display_name = user.name if user else f"User {user_id}"
    last_line = last_session_date or "never"
    return f"{display_name} (`{user_id}`): {status}\nLast session: {last_line}"


class Reporter:
    """Builds status replies from the classifier and the registry's user data."""

    def __init__(self, status_service: UserStatusService, users: UserSourceLike) -> None:
        self.status_service = status_service
        self.users = users

    def build_status_content(self, user_id: str) -> str:
        status = self.status_service.get_user_status(user_id)
        last_session_date = self.status_service.get_last_session_date(user_id)
        return user_status_content(self.users.get_user(user_id), user_id, status, last_session_date)
