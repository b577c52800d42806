"""Entry point for the User Registry API.

Serves the FastAPI application with Uvicorn.  Host and port come from
the ``HOST`` and ``PORT`` environment variables (defaults ``0.0.0.0``
and ``8000``); see ``user_registry_api/app/core/config.py`` for the
remaining settings.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from user_registry_api.app.core.config import settings
from user_registry_api.app.main import app


async def main() -> None:
    """Start the API server and run until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    logging.getLogger(__name__).info("Starting %s on %s:%s", settings.project_name, settings.host, settings.port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
