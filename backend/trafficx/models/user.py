from sqlalchemy import Column, Integer, String

from trafficx.models.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(64), unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)  # bcrypt hash
    client_id = Column(String(32), unique=True, index=True, nullable=False)

    # Aggregates credited by the exchange
    points = Column(Integer, default=0, nullable=False)
    hits = Column(Integer, default=0, nullable=False)
