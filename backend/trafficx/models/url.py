from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String

from trafficx.models.base import Base

DEFAULT_MIN_VISIT_TIME = 30


class Url(Base):
    __tablename__ = "urls"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    url = Column(String(2048), nullable=False)
    min_visit_time = Column(Integer, default=DEFAULT_MIN_VISIT_TIME, nullable=False)  # seconds

    # Statistics
    hits = Column(Integer, default=0, nullable=False)
    today_hits = Column(Integer, default=0, nullable=False)
    points_used = Column(Integer, default=0, nullable=False)

    active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
