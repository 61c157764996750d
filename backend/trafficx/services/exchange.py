"""
Hit registration: the aggregate update applied when a session visits a url.

A hit touches three records. Each change is a separate store increment
issued in a fixed order; there is no rollback if a later step fails.
"""

import logging
from dataclasses import dataclass

from trafficx import config
from trafficx.core.exceptions import NotFoundError
from trafficx.storage.base import Storage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RewardPolicy:
    """Points moved from the visited url's budget to the visitor per hit."""
    points_per_hit: int = 2

    @classmethod
    def from_config(cls) -> "RewardPolicy":
        return cls(points_per_hit=config.POINTS_PER_HIT)


@dataclass(frozen=True)
class HitResult:
    success: bool
    points_earned: int


class ExchangeService:
    def __init__(self, storage: Storage, policy: RewardPolicy = None):
        self.storage = storage
        self.policy = policy or RewardPolicy.from_config()

    async def register_hit(self, session_id: int, url_id: int) -> HitResult:
        """
        Record one simulated visit of ``url_id`` by ``session_id``.

        Both records are looked up before anything is written, so an unknown
        id leaves every entity untouched. Ownership of the session is the
        caller's concern.

        Raises:
            NotFoundError: If the session or the url does not exist
        """
        session = await self.storage.get_session(session_id)
        url = await self.storage.get_url(url_id)
        if session is None or url is None:
            raise NotFoundError("Session or URL not found")

        reward = self.policy.points_per_hit

        await self.storage.increment_session(session.id, "hits", 1)
        await self.storage.increment_url(url.id, "hits", 1)
        await self.storage.increment_url(url.id, "today_hits", 1)
        await self.storage.increment_user(session.user_id, "hits", 1)

        await self.storage.increment_session(session.id, "points", reward)
        await self.storage.increment_user(session.user_id, "points", reward)
        await self.storage.increment_url(url.id, "points_used", reward)

        logger.debug(f"[Exchange] Hit session={session.id} url={url.id} +{reward} points")
        return HitResult(success=True, points_earned=reward)
