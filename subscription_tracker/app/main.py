"""
Main entrypoint for the Subscription Tracker API.

This module assembles the FastAPI application, sets up logging,
registers the error handlers and mounts the API router under
``/api``.  ``create_app`` builds and configures the app, which is then
instantiated at module import time as ``app`` so it can be served
with uvicorn::

    uvicorn subscription_tracker.app.main:app --reload

The application title and version come from ``Settings`` in
``core.config``.
"""

import logging

from fastapi import FastAPI

from .api.router import router as api_router
from .core.config import settings
from .core.db import init_db
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging
from .core.session_store import get_session_store


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that everything below can log.
    setup_logging(settings.log_level, settings.log_file or None, debug=settings.debug)

    app = FastAPI(title=settings.project_name, version=settings.api_version)
    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api")

    @app.on_event("startup")
    async def startup_event() -> None:
        # Creates the database file if needed and applies migrations.
        init_db()
        removed = get_session_store().prune()
        if removed:
            logging.getLogger(__name__).info("Pruned %d expired sessions", removed)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
