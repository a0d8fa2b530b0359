"""Middleware resolving the signed-in user from the access token cookie."""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Iterable
from urllib.parse import urlencode

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from hrpanel.core.logger import get_logger, log_context
from hrpanel.core.paths import with_root_path
from hrpanel.core.security import AuthenticationError, AuthenticatedUser, SecurityProvider

LOGGER = get_logger(__name__)

_PUBLIC_PATHS = frozenset({"/openapi.json", "/docs", "/redoc", "/favicon.ico"})


class AuthMiddleware(BaseHTTPMiddleware):
    """Attach the principal to ``request.state`` and send anonymous users to the login page.

    Permission checks happen per route through ``require_permission``; this
    layer only answers "who is calling".  With authentication disabled every
    request runs as the configured administrator.
    """

    def __init__(
        self,
        app,
        security_provider: SecurityProvider,
        *,
        login_path: str = "/login",
        logout_path: str = "/logout",
        exempt_prefixes: Iterable[str] = ("/static",),
    ) -> None:
        super().__init__(app)
        self._security_provider = security_provider
        self._login_path = login_path
        self._exempt_paths = _PUBLIC_PATHS | {login_path, logout_path}
        self._exempt_prefixes = tuple(exempt_prefixes)

    def _is_exempt(self, path: str) -> bool:
        return path in self._exempt_paths or path.startswith(self._exempt_prefixes)

    def _login_redirect(self, request: Request, *, clear_cookie: bool) -> Response:
        target = with_root_path(request, self._login_path)
        # Only page loads come back after login; the root page is the default anyway.
        if request.method == "GET" and request.url.path not in self._exempt_paths | {"/"}:
            wanted = request.url.path
            if request.url.query:
                wanted = f"{wanted}?{request.url.query}"
            target = f"{target}?{urlencode({'next': wanted})}"
        response = RedirectResponse(target, status_code=303)
        if clear_cookie:
            response.delete_cookie(self._security_provider.cookie_name)
        return response

    def _resolve_user(self, token: str | None) -> tuple[AuthenticatedUser | None, bool]:
        if not token:
            return None, False
        try:
            return self._security_provider.decode_token(token), False
        except AuthenticationError as exc:
            LOGGER.info("Rejected access token", extra={"reason": str(exc)})
            return None, True

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if not self._security_provider.is_enabled:
            request.state.user = self._security_provider.default_admin_user()
            return await call_next(request)

        token = request.cookies.get(self._security_provider.cookie_name)
        user, invalid_token = self._resolve_user(token)
        request.state.user = user

        if self._is_exempt(request.url.path):
            if invalid_token:
                return self._login_redirect(request, clear_cookie=True)
            return await call_next(request)

        if user is None:
            return self._login_redirect(request, clear_cookie=bool(token))

        with log_context.scoped(user=user.username):
            return await call_next(request)
