"""
Main entrypoint for the Users API.

This module assembles the FastAPI application, sets up logging,
includes the versioned routers and installs the handlers that turn
domain and validation errors into JSON responses.  ``create_app``
builds and configures the app, which is then instantiated at module
import time as ``app`` so it can be served directly, e.g.::

    uvicorn users_api.app.main:app --reload
"""

import logging
import time
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from .api.v1.router import router as v1_router
from .core.config import Settings, build_repository, settings as default_settings
from .core.errors import DomainError
from .core.logging_config import setup_logging
from .services.user_service import UserService

logger = logging.getLogger(__name__)


def _error_body(request: Request, status_code: int, code: str, message: str) -> dict:
    return {
        "status_code": status_code,
        "code": code,
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "path": request.url.path,
    }


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Map a ``DomainError`` to its HTTP status and error body."""
    logger.warning("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.status_code, exc.code, exc.message),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request validation failures as HTTP 400 ``VALIDATION_ERROR``."""
    errors: List[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        errors.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    logger.warning("Validation failed for %s %s: %s", request.method, request.url.path, errors)
    body = _error_body(
        request,
        status.HTTP_400_BAD_REQUEST,
        "VALIDATION_ERROR",
        f"Validation failed: {', '.join(errors)}",
    )
    body["errors"] = errors
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)


async def log_requests(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """Log method, path, status and duration of every request."""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms
    )
    return response


def create_app(config: Optional[Settings] = None, service: Optional[UserService] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    config : Settings, optional
        Settings to use instead of the module‑level ``settings``.
    service : UserService, optional
        Service to expose.  When omitted a new one is built on a fresh
        repository for the configured storage backend, so every app
        has its own store.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    config = (config or default_settings).validate()
    # Initialise logging before anything else so that the rest of the
    # setup can log.
    setup_logging(config.log_level, config.log_file, debug=config.debug)

    app = FastAPI(title=config.project_name, version=config.api_version, debug=config.debug)
    app.state.settings = config
    app.state.user_service = service or UserService(build_repository(config))
    app.state.started_at = time.monotonic()

    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.middleware("http")(log_requests)

    app.include_router(v1_router, prefix=config.api_prefix)
    logger.info("%s %s ready (storage: %s)", config.project_name, config.api_version, config.storage_backend)
    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
