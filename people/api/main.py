"""FastAPI application entrypoint for the People service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from people.api.middleware.logging import LoggingMiddleware
from people.api.routes import health
from people.core.config import Settings, get_settings
from people.core.database import DatabaseManager
from people.core.exceptions import ApplicationError
from people.core.logging import configure_logging
from people.core.observability import setup_tracing
from people.repositories.person import PersonRepository

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    *,
    database_factory: Callable[[Settings], DatabaseManager] = DatabaseManager,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Open the storage connection on startup and close it on shutdown."""

        database = database_factory(settings)
        await database.connect()
        app.state.database = database
        app.state.person_repository = PersonRepository(database.person_collection)
        logger.info("Server is running on port %s", settings.PORT)

        try:
            yield
        finally:
            await database.close()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = settings

    configure_logging(settings)
    setup_tracing(settings, app)

    app.add_middleware(LoggingMiddleware)
    app.include_router(health.router)

    @app.exception_handler(ApplicationError)
    async def handle_application_error(_: Request, exc: ApplicationError):
        """Return standardized responses for application layer exceptions."""

        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "code": exc.code})

    return app
