"""
API endpoints for managing exchange sessions
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from trafficx.api.deps import get_owned_session, get_scheduler, get_storage
from trafficx.core.exceptions import ExchangeError
from trafficx.core.security import get_current_user
from trafficx.models import SessionStatus, User
from trafficx.schemas.base import ActiveUpdate, SuccessResponse
from trafficx.schemas.session import (
    SessionCreate,
    SessionResponse,
    SessionRestart,
    SessionRestartResponse,
    SessionStatusUpdate,
)
from trafficx.services.scheduler import SessionScheduler
from trafficx.storage.base import Storage

logger = logging.getLogger(__name__)
router = APIRouter(tags=["sessions"])


@router.get("/sessions", response_model=List[SessionResponse])
async def list_sessions(
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """List exchange sessions for current user"""
    try:
        return await storage.get_sessions(current_user.id)
    except Exception as e:
        logger.error(f"[Sessions] List failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch sessions")


@router.post("/sessions", response_model=SessionResponse, status_code=201)
async def create_session(
    body: Optional[SessionCreate] = None,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """Create a session; owner and client id come from the caller"""
    body = body or SessionCreate()
    try:
        session = await storage.create_session(
            user_id=current_user.id,
            client_id=current_user.client_id,
            note=body.note,
            proxy=body.proxy,
            proxy_config=body.proxy_config,
        )
        logger.info(f"[Sessions] Created session {session.id} for user {current_user.id}")
        return session
    except Exception as e:
        logger.error(f"[Sessions] Create failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to create session")


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: int,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    try:
        return await get_owned_session(storage, session_id, current_user.id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[Sessions] Get detail failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch session")


@router.put("/sessions/{session_id}/status", response_model=SuccessResponse)
async def update_session_status(
    session_id: int,
    body: SessionStatusUpdate,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """
    Set the status text as given. The active flag is left alone, so callers
    setting "Ready" or "Paused" here keep the two consistent themselves.
    """
    try:
        await get_owned_session(storage, session_id, current_user.id)
        await storage.set_session_status(session_id, body.status)
        return SuccessResponse()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[Sessions] Status update failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to update session status")


@router.put("/sessions/{session_id}/active", response_model=SuccessResponse)
async def update_session_active(
    session_id: int,
    body: ActiveUpdate,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    scheduler: SessionScheduler = Depends(get_scheduler),
):
    """Toggle exchange mode; status follows as Ready or Paused"""
    try:
        await get_owned_session(storage, session_id, current_user.id)
        scheduler.cancel_restart(session_id)
        await storage.set_session_active(session_id, body.active)
        return SuccessResponse()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[Sessions] Activity update failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to update session activity")


@router.post("/sessions/{session_id}/restart", response_model=SessionRestartResponse)
async def restart_session(
    session_id: int,
    body: Optional[SessionRestart] = None,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    scheduler: SessionScheduler = Depends(get_scheduler),
):
    """Put the session in Restarting and settle it after the restart delay"""
    try:
        await get_owned_session(storage, session_id, current_user.id)
        target = await scheduler.restart(session_id, body.active if body else None)
        return SessionRestartResponse(status=SessionStatus.RESTARTING.value, active=target)
    except (HTTPException, ExchangeError):
        raise
    except Exception as e:
        logger.error(f"[Sessions] Restart failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to restart session")
