"""
API endpoints for managing exchanged urls
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from trafficx.api.deps import get_owned_url, get_storage
from trafficx.core.security import get_current_user
from trafficx.models import User
from trafficx.schemas.base import ActiveUpdate, SuccessResponse
from trafficx.schemas.url import UrlCreate, UrlResponse
from trafficx.storage.base import Storage

logger = logging.getLogger(__name__)
router = APIRouter(tags=["urls"])


@router.get("/urls", response_model=List[UrlResponse])
async def list_urls(
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """List urls owned by current user"""
    try:
        return await storage.get_urls(current_user.id)
    except Exception as e:
        logger.error(f"[Urls] List failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch URLs")


@router.post("/urls", response_model=UrlResponse, status_code=201)
async def create_url(
    body: UrlCreate,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """
    Register a url for the exchange.

    The body is validated before this runs: an absolute http(s) url and a minimum
    visit time of at least 5 seconds. Invalid input never reaches the store.
    """
    try:
        url = await storage.create_url(
            user_id=current_user.id,
            url=str(body.url),
            min_visit_time=body.min_visit_time,
        )
        logger.info(f"[Urls] Created url {url.id} for user {current_user.id}: {url.url}")
        return url
    except Exception as e:
        logger.error(f"[Urls] Create failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to create URL")


@router.get("/urls/{url_id}", response_model=UrlResponse)
async def get_url(
    url_id: int,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    try:
        return await get_owned_url(storage, url_id, current_user.id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[Urls] Get detail failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch URL")


@router.put("/urls/{url_id}/active", response_model=SuccessResponse)
async def update_url_active(
    url_id: int,
    body: ActiveUpdate,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    try:
        await get_owned_url(storage, url_id, current_user.id)
        await storage.set_url_active(url_id, body.active)
        return SuccessResponse()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[Urls] Activity update failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to update URL activity")


@router.delete("/urls/{url_id}", response_model=SuccessResponse)
async def delete_url(
    url_id: int,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """Hard delete; counters already credited elsewhere are kept"""
    try:
        await get_owned_url(storage, url_id, current_user.id)
        await storage.delete_url(url_id)
        logger.info(f"[Urls] Deleted url {url_id}")
        return SuccessResponse()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[Urls] Delete failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete URL")
