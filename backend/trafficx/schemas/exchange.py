from pydantic import Field

from trafficx.schemas.base import CamelModel


class RegisterHitRequest(CamelModel):
    session_id: int = Field(..., gt=0)
    url_id: int = Field(..., gt=0)


class HitResponse(CamelModel):
    success: bool
    points_earned: int


class StatsResponse(CamelModel):
    total_hits: int
    available_points: int
    active_sessions: int
    active_urls: int
