"""FastAPI application factory for the Voteboard API."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from voteboard import __version__
from voteboard.core.config import Settings, get_settings
from voteboard.core.logging import configure_logging
from voteboard.domain.policy import RolePolicy
from voteboard.repositories.json_storage import JSONStore, StoreError
from voteboard.routers import auth as auth_router
from voteboard.routers import health as health_router
from voteboard.routers import suggestions as suggestions_router
from voteboard.services.session_service import reset_sessions

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (anti clickjacking, sniffing, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the injected store on startup; close it on shutdown only if opened here."""
    store: JSONStore = app.state.store
    opened_here = not store.is_open
    if opened_here:
        store.open()
    logger.info("Database initialized successfully")
    try:
        yield
    finally:
        logger.info("Shutting down gracefully...")
        if opened_here:
            store.close()
        reset_sessions()


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def _store_error(request: Request, exc: StoreError) -> JSONResponse:
    logger.exception("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse({"error": "Storage failure"}, status_code=500)


def create_app(settings: Optional[Settings] = None, store: Optional[JSONStore] = None) -> FastAPI:
    """Build the app around an explicitly constructed store."""
    settings = settings or get_settings()
    configure_logging(settings)
    store = store or JSONStore(settings.data_file)
    policy = RolePolicy.from_settings(settings)

    logger.info("Server starting in %s mode", "DEVELOPMENT" if settings.dev_mode else "PRODUCTION")
    logger.info("Voter roles: %s", list(policy.voter_roles))
    logger.info("Admin roles: %s", list(policy.admin_roles))

    app = FastAPI(title="Voteboard API", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.policy = policy

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")

    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(StoreError, _store_error)

    app.include_router(health_router.router)
    app.include_router(suggestions_router.router)
    app.include_router(auth_router.router)
    return app
