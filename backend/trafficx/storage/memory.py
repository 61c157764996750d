"""
In-memory entity store.

Records live in per-entity dicts keyed by sequential integer ids. The store
is volatile: everything is lost when the process exits. None of the methods
await between reading and writing a record, so on a single event loop each
call completes before another request can observe the record.
"""

import itertools
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from trafficx.models import DEFAULT_MIN_VISIT_TIME, ExchangeSession, SessionStatus, Url, User
from trafficx.storage.base import (
    SESSION_COUNTERS,
    URL_COUNTERS,
    USER_COUNTERS,
    Storage,
    check_counter,
    new_client_id,
)

logger = logging.getLogger(__name__)


class MemStorage(Storage):
    def __init__(self):
        self._users: Dict[int, User] = {}
        self._sessions: Dict[int, ExchangeSession] = {}
        self._urls: Dict[int, Url] = {}
        # Ids are never reused, even after a url is deleted
        self._user_ids = itertools.count(1)
        self._session_ids = itertools.count(1)
        self._url_ids = itertools.count(1)

    # ─── Users ──────────────────────────────────────────────────────────
    async def get_user(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self._users.values() if u.username == username), None)

    async def create_user(self, username: str, password: str) -> User:
        user = User(
            id=next(self._user_ids),
            username=username,
            password=password,
            client_id=new_client_id(),
            points=0,
            hits=0,
        )
        self._users[user.id] = user
        logger.info(f"[Store] Created user {user.id} ({username})")
        return user

    async def increment_user(self, user_id: int, field: str, delta: int) -> None:
        check_counter(field, USER_COUNTERS, "user")
        user = self._users.get(user_id)
        if user:
            setattr(user, field, getattr(user, field) + delta)

    # ─── Sessions ───────────────────────────────────────────────────────
    async def get_sessions(self, user_id: int) -> List[ExchangeSession]:
        return [s for s in self._sessions.values() if s.user_id == user_id]

    async def get_session(self, session_id: int) -> Optional[ExchangeSession]:
        return self._sessions.get(session_id)

    async def get_session_by_client_id(self, client_id: str) -> Optional[ExchangeSession]:
        return next((s for s in self._sessions.values() if s.client_id == client_id), None)

    async def get_sessions_by_status(self, status: str) -> List[ExchangeSession]:
        return [s for s in self._sessions.values() if s.status == status]

    async def create_session(
        self,
        user_id: int,
        client_id: str,
        note: Optional[str] = None,
        proxy: Optional[str] = None,
        proxy_config: Optional[str] = None,
    ) -> ExchangeSession:
        session = ExchangeSession(
            id=next(self._session_ids),
            user_id=user_id,
            client_id=client_id,
            note=note or "",
            proxy=proxy or "System",
            proxy_config=proxy_config or None,
            points=0,
            hits=0,
            active=True,
            status=SessionStatus.READY.value,
        )
        self._sessions[session.id] = session
        return session

    async def set_session_status(self, session_id: int, status: str) -> None:
        session = self._sessions.get(session_id)
        if session:
            session.status = status

    async def set_session_active(self, session_id: int, active: bool) -> None:
        session = self._sessions.get(session_id)
        if session:
            session.active = active
            session.status = SessionStatus.READY.value if active else SessionStatus.PAUSED.value

    async def increment_session(self, session_id: int, field: str, delta: int) -> None:
        check_counter(field, SESSION_COUNTERS, "session")
        session = self._sessions.get(session_id)
        if session:
            setattr(session, field, getattr(session, field) + delta)

    # ─── Urls ───────────────────────────────────────────────────────────
    async def get_urls(self, user_id: int) -> List[Url]:
        return [u for u in self._urls.values() if u.user_id == user_id]

    async def get_url(self, url_id: int) -> Optional[Url]:
        return self._urls.get(url_id)

    async def create_url(self, user_id: int, url: str, min_visit_time: Optional[int] = None) -> Url:
        record = Url(
            id=next(self._url_ids),
            user_id=user_id,
            url=url,
            min_visit_time=min_visit_time or DEFAULT_MIN_VISIT_TIME,
            hits=0,
            today_hits=0,
            points_used=0,
            active=True,
            created_at=datetime.now(timezone.utc),
        )
        self._urls[record.id] = record
        return record

    async def set_url_active(self, url_id: int, active: bool) -> None:
        url = self._urls.get(url_id)
        if url:
            url.active = active

    async def increment_url(self, url_id: int, field: str, delta: int) -> None:
        check_counter(field, URL_COUNTERS, "url")
        url = self._urls.get(url_id)
        if url:
            setattr(url, field, getattr(url, field) + delta)

    async def delete_url(self, url_id: int) -> None:
        self._urls.pop(url_id, None)

    async def reset_today_hits(self) -> int:
        for url in self._urls.values():
            url.today_hits = 0
        return len(self._urls)
