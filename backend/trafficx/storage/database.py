"""
SQLAlchemy-backed entity store.

Same contract as MemStorage, persisted through an async engine. Counter
increments run as ``UPDATE ... SET col = col + :delta`` so concurrent
writers cannot lose updates.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncEngine

from trafficx.database.database import get_db_context, init_db, make_engine, make_session_factory
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


class DatabaseStorage(Storage):
    def __init__(self, url: Optional[str] = None, engine: Optional[AsyncEngine] = None):
        self.engine = engine or make_engine(url)
        self.session_factory = make_session_factory(self.engine)

    async def init(self) -> None:
        await init_db(self.engine)
        logger.info("[Store] Database tables ready")

    async def close(self) -> None:
        await self.engine.dispose()

    async def _get(self, model, record_id: int):
        async with get_db_context(self.session_factory) as db:
            return await db.get(model, record_id)

    async def _add(self, record):
        async with get_db_context(self.session_factory) as db:
            db.add(record)
            await db.commit()
            await db.refresh(record)
        return record

    async def _all(self, query) -> list:
        async with get_db_context(self.session_factory) as db:
            result = await db.execute(query)
            return list(result.scalars().all())

    async def _first(self, query):
        async with get_db_context(self.session_factory) as db:
            result = await db.execute(query.limit(1))
            return result.scalar_one_or_none()

    async def _update(self, model, record_id: int, values: dict) -> int:
        async with get_db_context(self.session_factory) as db:
            result = await db.execute(update(model).where(model.id == record_id).values(values))
            await db.commit()
            return result.rowcount

    async def _increment(self, model, record_id: int, field: str, delta: int) -> None:
        column = getattr(model, field)
        await self._update(model, record_id, {field: column + delta})

    # ─── Users ──────────────────────────────────────────────────────────
    async def get_user(self, user_id: int) -> Optional[User]:
        return await self._get(User, user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        return await self._first(select(User).where(User.username == username))

    async def create_user(self, username: str, password: str) -> User:
        user = await self._add(
            User(
                username=username,
                password=password,
                client_id=new_client_id(),
                points=0,
                hits=0,
            )
        )
        logger.info(f"[Store] Created user {user.id} ({username})")
        return user

    async def increment_user(self, user_id: int, field: str, delta: int) -> None:
        check_counter(field, USER_COUNTERS, "user")
        await self._increment(User, user_id, field, delta)

    # ─── Sessions ───────────────────────────────────────────────────────
    async def get_sessions(self, user_id: int) -> List[ExchangeSession]:
        return await self._all(
            select(ExchangeSession).where(ExchangeSession.user_id == user_id).order_by(ExchangeSession.id)
        )

    async def get_session(self, session_id: int) -> Optional[ExchangeSession]:
        return await self._get(ExchangeSession, session_id)

    async def get_session_by_client_id(self, client_id: str) -> Optional[ExchangeSession]:
        return await self._first(
            select(ExchangeSession).where(ExchangeSession.client_id == client_id).order_by(ExchangeSession.id)
        )

    async def get_sessions_by_status(self, status: str) -> List[ExchangeSession]:
        return await self._all(select(ExchangeSession).where(ExchangeSession.status == status))

    async def create_session(
        self,
        user_id: int,
        client_id: str,
        note: Optional[str] = None,
        proxy: Optional[str] = None,
        proxy_config: Optional[str] = None,
    ) -> ExchangeSession:
        return await self._add(
            ExchangeSession(
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
        )

    async def set_session_status(self, session_id: int, status: str) -> None:
        await self._update(ExchangeSession, session_id, {"status": status})

    async def set_session_active(self, session_id: int, active: bool) -> None:
        status = SessionStatus.READY.value if active else SessionStatus.PAUSED.value
        await self._update(ExchangeSession, session_id, {"active": active, "status": status})

    async def increment_session(self, session_id: int, field: str, delta: int) -> None:
        check_counter(field, SESSION_COUNTERS, "session")
        await self._increment(ExchangeSession, session_id, field, delta)

    # ─── Urls ───────────────────────────────────────────────────────────
    async def get_urls(self, user_id: int) -> List[Url]:
        return await self._all(select(Url).where(Url.user_id == user_id).order_by(Url.id))

    async def get_url(self, url_id: int) -> Optional[Url]:
        return await self._get(Url, url_id)

    async def create_url(self, user_id: int, url: str, min_visit_time: Optional[int] = None) -> Url:
        return await self._add(
            Url(
                user_id=user_id,
                url=url,
                min_visit_time=min_visit_time or DEFAULT_MIN_VISIT_TIME,
                hits=0,
                today_hits=0,
                points_used=0,
                active=True,
                created_at=datetime.now(timezone.utc),
            )
        )

    async def set_url_active(self, url_id: int, active: bool) -> None:
        await self._update(Url, url_id, {"active": active})

    async def increment_url(self, url_id: int, field: str, delta: int) -> None:
        check_counter(field, URL_COUNTERS, "url")
        await self._increment(Url, url_id, field, delta)

    async def delete_url(self, url_id: int) -> None:
        async with get_db_context(self.session_factory) as db:
            await db.execute(delete(Url).where(Url.id == url_id))
            await db.commit()

    async def reset_today_hits(self) -> int:
        async with get_db_context(self.session_factory) as db:
            result = await db.execute(update(Url).values(today_hits=0))
            await db.commit()
            return result.rowcount
