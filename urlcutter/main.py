"""
FastAPI Application Entry Point

This module builds the FastAPI application and configures:
- The store lifecycle (opened at startup, closed at shutdown)
- API routes
- Middleware (logging, CORS) and rate limiting

Design Decisions:
- create_app() takes its Settings, so tests build isolated apps on
  temporary database files
- The store is owned by the lifespan and handed to endpoints through
  app.state; there is no module-level store
- If the store cannot be opened the lifespan raises and the server
  does not start
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from urlcutter import __version__
from urlcutter.api import endpoints
from urlcutter.core.rate_limit import limiter
from urlcutter.core.setting import Settings, settings as default_settings
from urlcutter.db.store import SequenceKeyedStore
from urlcutter.middleware.logging import add_logging_middleware

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application for the given settings (module settings by default).
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        store = await SequenceKeyedStore.open(
            settings.DATABASE_PATH,
            collection=settings.COLLECTION_NAME,
            busy_timeout=settings.SQLITE_BUSY_TIMEOUT,
        )
        app.state.store = store
        try:
            yield
        finally:
            await store.close()

    app = FastAPI(
        title="URL Cutter Service",
        description="A URL shortening service issuing base58 keys from a durable counter",
        version=__version__,
        docs_url="/docs",  # Swagger UI documentation
        redoc_url="/redoc",  # ReDoc documentation
        lifespan=lifespan,
    )
    app.state.settings = settings

    limiter.enabled = settings.RATE_LIMIT_ENABLED
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    add_logging_middleware(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health endpoints defined before router to match before catch-all route
    @app.get("/", tags=["Health"])
    async def root():
        return {
            "message": "URL Cutter Service",
            "version": __version__,
            "docs": "/docs"
        }

    @app.get("/health", tags=["Health"])
    async def health_check():
        """
        Health check endpoint for monitoring.

        Reports unhealthy once the store has been closed.
        """
        store: Optional[SequenceKeyedStore] = getattr(app.state, "store", None)
        if store is None or store.closed:
            return {"status": "unavailable"}
        return {"status": "healthy"}

    app.include_router(endpoints.router, tags=["URL Cutter"])

    return app


app = create_app()
