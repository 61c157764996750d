"""
Traffic exchange endpoints
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from trafficx.api.deps import get_exchange, get_storage
from trafficx.core.exceptions import ExchangeError
from trafficx.core.security import get_current_user
from trafficx.models import User
from trafficx.schemas.exchange import HitResponse, RegisterHitRequest
from trafficx.services.exchange import ExchangeService
from trafficx.storage.base import Storage

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/exchange", tags=["exchange"])


@router.post("/register-hit", response_model=HitResponse)
async def register_hit(
    body: RegisterHitRequest,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    exchange: ExchangeService = Depends(get_exchange),
):
    """Record a visit of a url by one of the caller's sessions"""
    try:
        session = await storage.get_session(body.session_id)
        # Url ownership is not checked: any url can receive hits
        if session is not None and session.user_id != current_user.id:
            raise HTTPException(status_code=403, detail="Not authorized")

        result = await exchange.register_hit(body.session_id, body.url_id)
        return HitResponse(success=result.success, points_earned=result.points_earned)
    except (HTTPException, ExchangeError):
        raise
    except Exception as e:
        logger.error(f"[Exchange] Register hit failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to register hit")
