from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from trafficx import config
from trafficx.models import Base


def make_engine(url: str = None) -> AsyncEngine:
    return create_async_engine(
        url or config.DATABASE_URL,
        echo=config.SQL_ECHO,
        future=True,
    )


def make_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, expire_on_commit=False)


async def init_db(engine: AsyncEngine):
    """Initialize database tables"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def get_db_context(session_factory: async_sessionmaker):
    """Context manager for a single unit of work"""
    async with session_factory() as session:
        yield session
