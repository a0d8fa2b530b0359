"""JWT-backed authentication and per-request permission checks."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
import hmac

import jwt
from fastapi import Depends, HTTPException, Request, status
from jwt import ExpiredSignatureError, InvalidTokenError

from hrpanel.core.config import ALL_PERMISSIONS, AuthSettings, get_settings


class AuthenticationError(Exception):
    """Raised when authentication or token validation fails."""


@dataclass(frozen=True, slots=True)
class AuthenticatedUser:
    """Representation of the authenticated principal."""

    username: str
    permissions: tuple[str, ...] = ()
    is_admin: bool = False


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Principal and capability set handed to every page handler."""

    user: AuthenticatedUser
    permissions: frozenset[str]

    @property
    def username(self) -> str:
        return self.user.username

    def can(self, *permissions: str) -> bool:
        """True when the principal holds at least one of ``permissions``."""

        return any(permission in self.permissions for permission in permissions)


class SecurityProvider:
    """Authenticate configured accounts and issue/verify JWT access tokens."""

    def __init__(self, settings: AuthSettings) -> None:
        self._settings = settings
        self._accounts = {account.username: account for account in settings.staff_accounts}

    @property
    def cookie_name(self) -> str:
        """Return the cookie name used for the access token."""

        return self._settings.cookie_name

    @property
    def flash_cookie_name(self) -> str:
        return self._settings.flash_cookie_name

    @property
    def token_ttl_seconds(self) -> int:
        """Return the access token lifetime in seconds."""

        return int(self._settings.access_token_expire_minutes * 60)

    @property
    def admin_username(self) -> str:
        return self._settings.admin_username

    @property
    def is_enabled(self) -> bool:
        return self._settings.enabled

    def default_admin_user(self) -> AuthenticatedUser:
        return AuthenticatedUser(
            username=self._settings.admin_username,
            permissions=ALL_PERMISSIONS,
            is_admin=True,
        )

    def authenticate(self, username: str, password: str) -> AuthenticatedUser | None:
        """Validate the supplied credentials and return an ``AuthenticatedUser``."""

        # Check admin authentication first
        if username == self._settings.admin_username and hmac.compare_digest(
            password, self._settings.admin_password
        ):
            return self.default_admin_user()

        account = self._accounts.get(username)
        if account is None:
            return None
        if not hmac.compare_digest(password, self._settings.staff_password):
            return None
        return AuthenticatedUser(username=account.username, permissions=account.permissions)

    def _encode(self, payload: dict[str, object], ttl: timedelta) -> str:
        now = datetime.now(tz=timezone.utc)
        claims = {**payload, "iat": int(now.timestamp()), "exp": int((now + ttl).timestamp())}
        return jwt.encode(claims, self._settings.secret_key, algorithm=self._settings.algorithm)

    def _decode(self, token: str) -> dict[str, object]:
        try:
            return jwt.decode(
                token,
                self._settings.secret_key,
                algorithms=[self._settings.algorithm],
            )
        except ExpiredSignatureError as exc:
            raise AuthenticationError("Token expired") from exc
        except InvalidTokenError as exc:
            raise AuthenticationError("Invalid token") from exc

    def create_access_token(self, user: AuthenticatedUser) -> str:
        """Create a signed JWT for the authenticated user."""

        payload: dict[str, object] = {
            "sub": user.username,
            "permissions": list(user.permissions),
            "admin": user.is_admin,
        }
        return self._encode(
            payload, timedelta(minutes=self._settings.access_token_expire_minutes)
        )

    def decode_token(self, token: str) -> AuthenticatedUser:
        """Decode a JWT and return the corresponding ``AuthenticatedUser``."""

        payload = self._decode(token)
        username = payload.get("sub")
        if not isinstance(username, str):
            raise AuthenticationError("Token payload missing required claims")
        raw_permissions = payload.get("permissions") or []
        if not isinstance(raw_permissions, list) or not all(
            isinstance(item, str) for item in raw_permissions
        ):
            raise AuthenticationError("Token permissions claim invalid")
        permissions = tuple(item for item in raw_permissions if item in ALL_PERMISSIONS)
        return AuthenticatedUser(
            username=username,
            permissions=permissions,
            is_admin=bool(payload.get("admin", False)),
        )

    def sign_flash(self, messages: list[tuple[str, str]], *, ttl_seconds: int = 60) -> str:
        """Sign ``(category, text)`` pairs for a short-lived flash cookie."""

        return self._encode(
            {"flash": [list(item) for item in messages]}, timedelta(seconds=ttl_seconds)
        )

    def read_flash(self, token: str) -> list[tuple[str, str]]:
        try:
            payload = self._decode(token)
        except AuthenticationError:
            return []
        items = payload.get("flash")
        if not isinstance(items, list):
            return []
        return [
            (item[0], item[1])
            for item in items
            if isinstance(item, list)
            and len(item) == 2
            and all(isinstance(value, str) for value in item)
        ]


@lru_cache(maxsize=1)
def get_security_provider() -> SecurityProvider:
    """Return a cached security provider instance."""

    return SecurityProvider(get_settings().auth)


def get_authenticated_user(request: Request) -> AuthenticatedUser:
    """Retrieve the authenticated user from the request state."""

    security = get_security_provider()
    if not security.is_enabled:
        return security.default_admin_user()

    user = getattr(request.state, "user", None)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Login required")
    return user


def get_request_context(
    user: AuthenticatedUser = Depends(get_authenticated_user),
) -> RequestContext:
    permissions = frozenset(ALL_PERMISSIONS if user.is_admin else user.permissions)
    return RequestContext(user=user, permissions=permissions)


def require_permission(*permissions: str):
    """Dependency factory: the principal must hold any one of ``permissions``."""

    def _dependency(context: RequestContext = Depends(get_request_context)) -> RequestContext:
        if not context.can(*permissions):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to access this page",
            )
        return context

    return _dependency


__all__ = [
    "AuthenticatedUser",
    "AuthenticationError",
    "RequestContext",
    "SecurityProvider",
    "get_authenticated_user",
    "get_request_context",
    "get_security_provider",
    "require_permission",
]
