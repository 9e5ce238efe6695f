"""FastAPI application factory for the teamhub JSON API."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from teamhub import __version__
from teamhub.core.config import Settings, get_settings
from teamhub.core.log import configure_logging
from teamhub.routers import announcements as announcements_router
from teamhub.routers import schedule as schedule_router
from teamhub.routers import teams as teams_router
from teamhub.routers import users as users_router
from teamhub.services.storage_service import EntityStorage

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers on every JSON response."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


def create_app(storage: Optional[EntityStorage] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Factory compatible with ``uvicorn --factory teamhub.app:create_app``."""
    settings = settings or get_settings()
    configure_logging(settings)
    app = FastAPI(title="teamhub API", version=__version__)
    app.state.settings = settings
    app.state.storage = storage or EntityStorage.from_settings(settings)

    allowed_cors = set(settings.cors_origins)
    if settings.app_env != "prod":
        allowed_cors.update({"http://localhost:5173", "http://127.0.0.1:5173"})
    if allowed_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(allowed_cors),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")

    @app.get("/health")
    async def health():
        return {"ok": True}

    app.include_router(users_router.router)
    app.include_router(teams_router.router)
    app.include_router(schedule_router.router)
    app.include_router(announcements_router.router)
    logger.info("teamhub API ready (env=%s)", settings.app_env)
    return app
