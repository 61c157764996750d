import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from trafficx import __version__, config
from trafficx.api.errors import register_exception_handlers
from trafficx.api.routes import auth, exchange, sessions, stats, urls
from trafficx.services.exchange import ExchangeService, RewardPolicy
from trafficx.services.scheduler import SessionScheduler
from trafficx.storage import Storage, create_storage

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)


def create_app(
    storage: Optional[Storage] = None,
    policy: Optional[RewardPolicy] = None,
    scheduler: Optional[SessionScheduler] = None,
) -> FastAPI:
    """
    Build the API around one entity store.

    The store, the exchange service and the scheduler are created here once
    and reached by the routes through ``app.state``.
    """
    storage = storage or create_storage()

    app = FastAPI(
        title="Traffic Exchange API",
        description="Register sites, run exchange sessions and track hits and points",
        version=__version__,
    )
    app.state.storage = storage
    app.state.exchange = ExchangeService(storage, policy)
    app.state.scheduler = scheduler or SessionScheduler(storage)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    for module in (auth, sessions, urls, stats, exchange):
        app.include_router(module.router, prefix="/api")

    @app.on_event("startup")
    async def startup():
        """Initialize storage and scheduler on startup"""
        await storage.init()
        logger.info(f"[✓] Storage initialized ({type(storage).__name__})")

        await app.state.scheduler.start()
        logger.info("[✓] Session scheduler started")

    @app.on_event("shutdown")
    async def shutdown():
        """Clean up on shutdown"""
        await app.state.scheduler.shutdown()
        try:
            await storage.close()
            logger.info("[✓] Storage closed")
        except Exception as e:
            logger.error(f"[!] Storage close error: {e}")

    @app.get("/health")
    async def health():
        """Health check endpoint"""
        return {"status": "ok", "service": "trafficx"}

    return app


app = create_app()


def run():
    uvicorn.run("trafficx.main:app", host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()
