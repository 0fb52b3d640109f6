import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lesson_market.api.v1 import api_router
from lesson_market.core import logs
from lesson_market.core.config import settings
from lesson_market.core.exceptions import register_exception_handlers
from lesson_market.core.logger import setup_logging
from lesson_market.core.middleware import ResponseWrapperMiddleware
from lesson_market.db import Base, engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Development databases get their tables created on startup.
    """
    logger.info(logs.START, settings.app_name, settings.app_env)
    if settings.is_development:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    yield

    await engine.dispose()
    logger.info(logs.STOP, settings.app_name)


def create_app() -> FastAPI:
    """Application factory pattern for creating the FastAPI app."""
    setup_logging()
    app = FastAPI(
        title=settings.app_name,
        openapi_url=f"{settings.api_v1_prefix}/openapi.json",
        docs_url=f"{settings.api_v1_prefix}/docs",
        redoc_url=f"{settings.api_v1_prefix}/redoc",
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    # Response wrapper middleware (add first so it runs last)
    app.add_middleware(ResponseWrapperMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix=settings.api_v1_prefix)

    return app


app = create_app()
