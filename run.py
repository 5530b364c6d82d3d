"""Entry point for the track catalog API server.

Launches the FastAPI application with Uvicorn.  Host and port are read
from the ``API_HOST`` and ``API_PORT`` environment variables (defaults
``0.0.0.0`` and ``8080``); see ``spotibye_api/app/core/config.py`` for
the other supported variables.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from spotibye_api.app.core.config import settings


async def run_api() -> None:
    """Start the API server using Uvicorn."""
    config = Config(
        app="spotibye_api.app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Server stopped")
