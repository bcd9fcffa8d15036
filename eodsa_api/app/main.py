"""
Main entrypoint for the EODSA Competition API.

``create_app`` configures logging, mounts the versioned routers under
``/api/v1``, installs the error handlers and the registration rate
limiter, and applies database migrations at startup.  The module-level
``app`` lets an ASGI server discover the application, e.g.::

    uvicorn eodsa_api.app.main:app --reload
"""

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import init_db
from .core.errors import install_exception_handlers
from .core.logging_config import setup_logging
from .core.rate_limit import limiter


def create_app() -> FastAPI:
    """Create and configure a FastAPI application."""
    # Logging first so that everything below can log.
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    install_exception_handlers(app)

    app.include_router(v1_router, prefix="/api/v1")

    @app.on_event("startup")
    async def startup_event() -> None:
        # Creates the database file if needed and brings the schema up to date.
        init_db()

    return app


app = create_app()
