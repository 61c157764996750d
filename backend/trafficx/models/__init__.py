from trafficx.models.base import Base
from trafficx.models.user import User
from trafficx.models.session import ExchangeSession, SessionStatus
from trafficx.models.url import Url, DEFAULT_MIN_VISIT_TIME

__all__ = [
    "Base",
    "User",
    "ExchangeSession",
    "SessionStatus",
    "Url",
    "DEFAULT_MIN_VISIT_TIME",
]
