"""Entry point for the Subscription Tracker API server.

Starts the FastAPI application with Uvicorn.  It is intended to be
executed from the project root, for example under Docker, where you
only specify a single Python file to run.

Configuration (database path, session secret, host and port) is read
from environment variables; see ``subscription_tracker/app/core/config.py``
for the supported names.

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from subscription_tracker.app.core.config import settings
from subscription_tracker.app.main import app


async def run_api() -> None:
    """Serve the API on ``settings.host``/``settings.port``."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        pass
