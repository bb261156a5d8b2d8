from __future__ import annotations

import logging
import threading
from datetime import datetime

from .errors import AlreadyExistsError, NotFoundError
from .models import Session, User, to_utc


class SessionRegistry:
    """In-memory store of registered users and their recorded sessions.

    Sessions are kept per user in append order. A single lock guards both maps
    so a record followed by a read always sees the recorded session.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._users: dict[str, User] = {}
        self._sessions: dict[str, list[Session]] = {}
        self._lock = threading.RLock()
        self.logger = logger or logging.getLogger(__name__)

    def __contains__(self, user_id: object) -> bool:
        with self._lock:
            return user_id in self._users

    @property
    def user_count(self) -> int:
        with self._lock:
            return len(self._users)

    @property
    def session_count(self) -> int:
        with self._lock:
            return sum(len(sessions) for sessions in self._sessions.values())

    def register_user(self, user_id: str, name: str) -> bool:
        with self._lock:
            if user_id in self._users:
                raise AlreadyExistsError(user_id)
            self._users[user_id] = User(user_id=user_id, name=name)
            self._sessions[user_id] = []

        self.logger.debug("Registered user %s (%s)", user_id, name)
        return True

    def record_session(self, user_id: str, login_at: datetime, logout_at: datetime) -> Session:
        session = Session(login_at=to_utc(login_at), logout_at=to_utc(logout_at))
        with self._lock:
            if user_id not in self._users:
                raise NotFoundError(user_id)
            self._sessions[user_id].append(session)

        self.logger.debug("Recorded session user=%s minutes=%s", user_id, session.minutes)
        return session

    def get_user(self, user_id: str) -> User | None:
        with self._lock:
            return self._users.get(user_id)

    def get_sessions(self, user_id: str) -> list[Session] | None:
        with self._lock:
            sessions = self._sessions.get(user_id)
            if sessions is None:
                return None
            return list(sessions)

    def session_histories(self) -> dict[str, list[Session]]:
        with self._lock:
            return {user_id: list(sessions) for user_id, sessions in self._sessions.items()}
