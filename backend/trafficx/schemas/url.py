from datetime import datetime
from typing import Optional

from pydantic import AnyHttpUrl, Field

from trafficx.schemas.base import CamelModel

MIN_VISIT_TIME_FLOOR = 5


class UrlCreate(CamelModel):
    # Absolute http(s) url with a host; stored in its normalized form
    url: AnyHttpUrl
    # Omitted -> the store default applies
    min_visit_time: Optional[int] = Field(default=None, ge=MIN_VISIT_TIME_FLOOR)


class UrlResponse(CamelModel):
    id: int
    user_id: int
    url: str
    min_visit_time: int
    hits: int
    today_hits: int
    points_used: int
    active: bool
    created_at: datetime
