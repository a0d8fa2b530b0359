"""FastAPI application instance and startup hooks."""
from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles

from hrpanel.core import get_logger, get_settings
from hrpanel.core.logger import init_logging
from hrpanel.core.paths import STATIC_DIR, redirect_to
from hrpanel.core.security import get_security_provider
from hrpanel.middleware.auth import AuthMiddleware
from hrpanel.routers import auth_router, months_router, reports_router, settings_router
from hrpanel.routers.auth import default_destination

LOGGER = get_logger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    init_logging(
        level=settings.log_level,
        log_dir=Path(settings.log_dir) if settings.log_dir else None,
    )

    app = FastAPI(title="HR Panel", version="0.1.0")
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    app.add_middleware(AuthMiddleware, security_provider=get_security_provider())
    app.include_router(auth_router)
    app.include_router(months_router)
    app.include_router(reports_router)
    app.include_router(settings_router)

    @app.get("/", include_in_schema=False)
    async def root_redirect(request: Request):
        user = getattr(request.state, "user", None)
        destination = "/login" if user is None else default_destination(user)
        return redirect_to(request, destination)

    LOGGER.info("FastAPI application initialised", extra={"auth_enabled": settings.auth.enabled})
    return app


app = create_app()
