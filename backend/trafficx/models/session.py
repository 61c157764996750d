"""
Exchange Session Model - one running exchange client owned by a user
"""

import enum

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text

from trafficx.models.base import Base


class SessionStatus(str, enum.Enum):
    READY = "Ready"
    PAUSED = "Paused"
    RESTARTING = "Restarting"


class ExchangeSession(Base):
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    client_id = Column(String(32), nullable=False, index=True)  # Copy of the owner's client id

    note = Column(Text, nullable=True)
    proxy = Column(String(64), nullable=False, default="System")
    proxy_config = Column(Text, nullable=True)

    # Running totals, independent of the user's aggregates
    points = Column(Integer, default=0, nullable=False)
    hits = Column(Integer, default=0, nullable=False)

    # Not an enum column: any caller text is stored as-is
    active = Column(Boolean, default=True, nullable=False, index=True)
    status = Column(String(32), default=SessionStatus.READY.value, nullable=False, index=True)
