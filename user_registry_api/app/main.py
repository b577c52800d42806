"""
Main entrypoint for the User Registry API.

This module assembles the FastAPI application, sets up logging and
includes versioned routers.  ``create_app`` wires the object graph
explicitly: a ``UserStore`` and a breach checker go into a
``UserService``, which goes into the ``UserEndpoint`` kept on
``app.state``.  Both collaborators can be passed in, which is how the
tests run the app against an in-memory store.  The default instance is
created at import time as ``app`` so it can be served with uvicorn::

    uvicorn user_registry_api.app.main:app --reload
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse

from .core.config import settings
from .core.logging_config import setup_logging
from .api.v1.router import router as v1_router
from .api.v1.endpoints.users import UserEndpoint
from .services.breach_service import BreachChecker, BreachCheckError, HIBPBreachChecker
from .services.user_service import UserService
from .services.user_store import InMemoryUserStore, SQLiteUserStore, UserStore


logger = logging.getLogger(__name__)


def build_store() -> UserStore:
    """Create the store selected by ``settings.user_store``."""
    if settings.user_store == "memory":
        return InMemoryUserStore()
    if settings.user_store == "sqlite":
        return SQLiteUserStore(settings.database_url)
    raise ValueError(f"Unknown USER_STORE {settings.user_store!r}; expected 'sqlite' or 'memory'")


def create_app(store: Optional[UserStore] = None, checker: Optional[BreachChecker] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    store : Optional[UserStore]
        Store for user records.  Defaults to the one selected by
        ``settings.user_store``.
    checker : Optional[BreachChecker]
        Breach checker for registrations and lookups.  Defaults to a
        ``HIBPBreachChecker`` configured from settings.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    setup_logging(settings.log_level, settings.log_file or None)

    if store is None:
        store = build_store()
    if checker is None:
        checker = HIBPBreachChecker(settings.breach_check_url, settings.breach_check_timeout)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    app.state.user_endpoint = UserEndpoint(UserService(store, checker))

    app.include_router(v1_router, prefix=settings.api_prefix)

    @app.exception_handler(BreachCheckError)
    async def breach_check_unavailable(request: Request, exc: BreachCheckError) -> PlainTextResponse:
        logger.error("Breach check unavailable for %s: %s", request.url.path, exc)
        return PlainTextResponse(
            "Password breach check unavailable",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    @app.on_event("startup")
    async def startup_event() -> None:
        # Create the database file and apply migrations if needed.
        if isinstance(store, SQLiteUserStore):
            store.init_schema()
        logger.info("Serving users from %s", type(store).__name__)

    return app


app = create_app()
