"""
Dashboard statistics endpoint
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from trafficx.api.deps import get_storage
from trafficx.core.security import get_current_user
from trafficx.models import User
from trafficx.schemas.exchange import StatsResponse
from trafficx.storage.base import Storage

logger = logging.getLogger(__name__)
router = APIRouter(tags=["stats"])


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """
    Totals for the dashboard cards: the caller's own hit and point
    aggregates plus how many of their sessions and urls are active.
    """
    try:
        sessions = await storage.get_sessions(current_user.id)
        urls = await storage.get_urls(current_user.id)

        return StatsResponse(
            total_hits=current_user.hits,
            available_points=current_user.points,
            active_sessions=sum(1 for s in sessions if s.active),
            active_urls=sum(1 for u in urls if u.active),
        )
    except Exception as e:
        logger.error(f"[Stats] Stats failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch stats")
