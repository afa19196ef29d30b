"""
Stats service entry point: records hits and answers view statistics for
the event service.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI

from ewm.api.errors import register_error_handlers
from ewm.api.middleware import RequestLoggingMiddleware
from ewm.core.logging import setup_logging, get_logger
from ewm_stats.config import get_stats_settings
from ewm_stats.db import engine, init_db
from ewm_stats.routes import router

settings = get_stats_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings)
    logger = get_logger(__name__)
    logger.info("stats_service_starting", app=settings.APP_NAME, version=settings.APP_VERSION)

    await init_db()
    yield

    await engine.dispose()
    logger.info("stats_service_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Hit recording and view statistics",
    lifespan=lifespan,
)
app.add_middleware(RequestLoggingMiddleware)
register_error_handlers(app)
app.include_router(router)


@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "healthy", "version": settings.APP_VERSION}
