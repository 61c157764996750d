from typing import Optional

from pydantic import Field

from trafficx.schemas.base import CamelModel


class SessionCreate(CamelModel):
    proxy: Optional[str] = Field(default=None, max_length=64)
    proxy_config: Optional[str] = None
    note: Optional[str] = None


class SessionStatusUpdate(CamelModel):
    # Free text; "Ready", "Paused" and "Restarting" are the conventional values
    status: str = Field(..., min_length=1, max_length=32)


class SessionRestart(CamelModel):
    active: Optional[bool] = None


class SessionRestartResponse(CamelModel):
    success: bool = True
    status: str
    active: bool


class SessionResponse(CamelModel):
    id: int
    user_id: int
    client_id: str
    note: Optional[str]
    proxy: str
    proxy_config: Optional[str]
    points: int
    hits: int
    active: bool
    status: str
