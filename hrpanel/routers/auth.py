"""Authentication routes providing login and logout actions."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, Response

from hrpanel.core.logger import get_logger
from hrpanel.core.paths import redirect_to, root_path
from hrpanel.core.security import (
    AuthenticatedUser,
    SecurityProvider,
    get_security_provider,
)
from hrpanel.web.rendering import render

LOGGER = get_logger(__name__)
router = APIRouter(tags=["auth"])


def default_destination(user: AuthenticatedUser) -> str:
    if user.is_admin or "manage_settings" in user.permissions:
        return "/months"
    if "view_reports" in user.permissions:
        return "/reports/salary"
    if "view_employees" in user.permissions:
        return "/reports/store-management"
    if "manage_bonus_configuration" in user.permissions:
        return "/settings/bonus-tiers"
    return "/logout"


def _safe_next_path(next_path: str | None) -> str | None:
    if not next_path:
        return None
    next_path = next_path.strip()
    if not next_path:
        return None
    if next_path.startswith("/") and not next_path.startswith("//"):
        return next_path
    return None


def get_security() -> SecurityProvider:
    return get_security_provider()


@router.get("/login", response_class=HTMLResponse, include_in_schema=False)
async def login_form(request: Request) -> Response:
    """Render the login form. Redirect when already authenticated."""

    user: AuthenticatedUser | None = getattr(request.state, "user", None)
    if user is not None:
        LOGGER.debug("User already authenticated", extra={"username": user.username})
        return redirect_to(request, default_destination(user))

    return render(
        request,
        "auth/login.html",
        None,
        next=_safe_next_path(request.query_params.get("next")) or "",
        error=None,
        username="",
    )


@router.post("/login", include_in_schema=False)
async def login_submit(
    request: Request,
    username: str = Form(...),
    password: str = Form(...),
    next_path: str = Form("", alias="next"),
    security: SecurityProvider = Depends(get_security),
) -> Response:
    """Handle login submissions and issue an access token cookie."""

    user = security.authenticate(username.strip(), password)
    if user is None:
        LOGGER.info("Invalid login attempt", extra={"username": username})
        return render(
            request,
            "auth/login.html",
            None,
            status_code=401,
            next=_safe_next_path(next_path) or "",
            error="Invalid username or password",
            username=username,
        )

    token = security.create_access_token(user)
    response = redirect_to(request, _safe_next_path(next_path) or default_destination(user))
    response.set_cookie(
        security.cookie_name,
        token,
        max_age=security.token_ttl_seconds,
        httponly=True,
        samesite="lax",
        path=root_path(request) or "/",
    )
    LOGGER.info(
        "User logged in",
        extra={"username": user.username, "permissions": list(user.permissions)},
    )
    return response


@router.get("/logout", include_in_schema=False)
async def logout(request: Request, security: SecurityProvider = Depends(get_security)) -> Response:
    """Clear the access token and redirect to the login page."""

    response = redirect_to(request, "/login")
    response.delete_cookie(security.cookie_name, path=root_path(request) or "/")
    return response


__all__ = ["default_destination", "router"]
