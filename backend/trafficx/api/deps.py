from fastapi import HTTPException, Request

from trafficx.services.exchange import ExchangeService
from trafficx.services.scheduler import SessionScheduler
from trafficx.storage.base import Storage


def get_storage(request: Request) -> Storage:
    """The entity store built at startup and attached to the app"""
    return request.app.state.storage


def get_scheduler(request: Request) -> SessionScheduler:
    return request.app.state.scheduler


def get_exchange(request: Request) -> ExchangeService:
    return request.app.state.exchange


async def get_owned_session(storage: Storage, session_id: int, user_id: int):
    """Fetch a session for its owner: 404 if unknown, 403 if someone else's"""
    session = await storage.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    if session.user_id != user_id:
        raise HTTPException(status_code=403, detail="Not authorized")
    return session


async def get_owned_url(storage: Storage, url_id: int, user_id: int):
    """Fetch a url for its owner: 404 if unknown, 403 if someone else's"""
    url = await storage.get_url(url_id)
    if not url:
        raise HTTPException(status_code=404, detail="URL not found")
    if url.user_id != user_id:
        raise HTTPException(status_code=403, detail="Not authorized")
    return url
