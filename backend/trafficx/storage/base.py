"""
Storage abstract base class for the exchange entities.

Defines what the API and the exchange protocol need from a store; the
in-memory and SQLAlchemy-backed implementations provide the how.

Counters are only ever changed through ``increment_*`` calls so that no
caller has to read a value, add to it and write it back.
"""

import secrets
from abc import ABC, abstractmethod
from typing import List, Optional

from trafficx.models import ExchangeSession, Url, User

USER_COUNTERS = frozenset({"points", "hits"})
SESSION_COUNTERS = frozenset({"points", "hits"})
URL_COUNTERS = frozenset({"hits", "today_hits", "points_used"})

CLIENT_ID_BYTES = 9  # 12 URL-safe characters


def new_client_id() -> str:
    return secrets.token_urlsafe(CLIENT_ID_BYTES)


def check_counter(field: str, allowed: frozenset, entity: str) -> None:
    if field not in allowed:
        raise ValueError(f"'{field}' is not a counter field of {entity}")


class Storage(ABC):
    """Entity store for users, exchange sessions and urls."""

    async def init(self) -> None:
        """Prepare the backing store (create tables, open pools)."""

    async def close(self) -> None:
        """Release resources held by the backing store."""

    # ─── Users ──────────────────────────────────────────────────────────
    @abstractmethod
    async def get_user(self, user_id: int) -> Optional[User]:
        ...

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[User]:
        ...

    @abstractmethod
    async def create_user(self, username: str, password: str) -> User:
        """
        Create a user with zeroed aggregates.

        Args:
            username: Unique login name
            password: Already-hashed credential

        Returns:
            The created user, with a freshly generated client id
        """
        ...

    @abstractmethod
    async def increment_user(self, user_id: int, field: str, delta: int) -> None:
        ...

    # ─── Sessions ───────────────────────────────────────────────────────
    @abstractmethod
    async def get_sessions(self, user_id: int) -> List[ExchangeSession]:
        ...

    @abstractmethod
    async def get_session(self, session_id: int) -> Optional[ExchangeSession]:
        ...

    @abstractmethod
    async def get_session_by_client_id(self, client_id: str) -> Optional[ExchangeSession]:
        ...

    @abstractmethod
    async def get_sessions_by_status(self, status: str) -> List[ExchangeSession]:
        ...

    @abstractmethod
    async def create_session(
        self,
        user_id: int,
        client_id: str,
        note: Optional[str] = None,
        proxy: Optional[str] = None,
        proxy_config: Optional[str] = None,
    ) -> ExchangeSession:
        ...

    @abstractmethod
    async def set_session_status(self, session_id: int, status: str) -> None:
        """Set status unconditionally, independent of the active flag."""
        ...

    @abstractmethod
    async def set_session_active(self, session_id: int, active: bool) -> None:
        """Set the active flag and force status to Ready or Paused."""
        ...

    @abstractmethod
    async def increment_session(self, session_id: int, field: str, delta: int) -> None:
        ...

    # ─── Urls ───────────────────────────────────────────────────────────
    @abstractmethod
    async def get_urls(self, user_id: int) -> List[Url]:
        ...

    @abstractmethod
    async def get_url(self, url_id: int) -> Optional[Url]:
        ...

    @abstractmethod
    async def create_url(self, user_id: int, url: str, min_visit_time: Optional[int] = None) -> Url:
        ...

    @abstractmethod
    async def set_url_active(self, url_id: int, active: bool) -> None:
        ...

    @abstractmethod
    async def increment_url(self, url_id: int, field: str, delta: int) -> None:
        ...

    @abstractmethod
    async def delete_url(self, url_id: int) -> None:
        ...

    @abstractmethod
    async def reset_today_hits(self) -> int:
        """
        Zero ``today_hits`` on every url.

        Returns:
            Count of urls that were reset
        """
        ...
