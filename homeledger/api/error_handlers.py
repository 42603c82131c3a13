"""Global exception handlers.

Domain errors raised by the services become ``{"detail": message}`` with the
status carried by the error class, the same body FastAPI uses for its own
``HTTPException``. Request shape errors keep FastAPI's 422 response.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..core.errors import HomeLedgerError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:

    @app.exception_handler(HomeLedgerError)
    async def domain_error_handler(request: Request, exc: HomeLedgerError):
        log = logger.warning if exc.http_status < 500 else logger.error
        log(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.http_status, content={"detail": exc.message})


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all, never leaks internal details."""
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "An unexpected error occurred"},
        )
