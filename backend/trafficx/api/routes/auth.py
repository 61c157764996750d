# trafficx/api/routes/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from trafficx import config
from trafficx.api.deps import get_storage
from trafficx.core.security import (
    ACCESS_COOKIE,
    create_access_token,
    get_current_user,
    get_password_hash,
    verify_password,
)
from trafficx.models import User
from trafficx.schemas.user import AuthResponse, UserCredentials, UserResponse
from trafficx.storage.base import Storage

logger = logging.getLogger(__name__)
router = APIRouter(tags=["auth"])


def issue_token(response: Response, user: User) -> AuthResponse:
    """Create an access token, set it as a cookie and return it in the body"""
    access_token = create_access_token(user.id)
    response.set_cookie(
        key=ACCESS_COOKIE,
        value=access_token,
        httponly=True,
        secure=config.COOKIE_SECURE,
        samesite="lax",
        max_age=config.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
    )
    return AuthResponse(
        user=UserResponse.model_validate(user),
        access_token=access_token,
        expires_in=config.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    data: UserCredentials,
    response: Response,
    storage: Storage = Depends(get_storage),
):
    """Register a new account and log it in"""
    if await storage.get_user_by_username(data.username):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already exists",
        )

    user = await storage.create_user(data.username, get_password_hash(data.password))
    logger.info(f"[Auth] Registered user {user.id} ({user.username})")
    return issue_token(response, user)


@router.post("/login", response_model=AuthResponse)
async def login(
    data: UserCredentials,
    response: Response,
    storage: Storage = Depends(get_storage),
):
    user = await storage.get_user_by_username(data.username)
    if user is None or not verify_password(data.password, user.password):
        logger.warning(f"[Auth] Failed login for {data.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return issue_token(response, user)


@router.post("/logout")
async def logout(response: Response):
    response.delete_cookie(ACCESS_COOKIE, path="/")
    return {"message": "Logged out successfully"}


@router.get("/user", response_model=UserResponse)
async def get_profile(current_user: User = Depends(get_current_user)):
    """Returns the authenticated user without the credential"""
    return current_user
