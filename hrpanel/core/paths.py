"""Filesystem locations and proxy-aware URL helpers."""
from __future__ import annotations

from pathlib import Path

from starlette.requests import Request
from starlette.responses import RedirectResponse

PACKAGE_DIR = Path(__file__).resolve().parent.parent
TEMPLATES_DIR = PACKAGE_DIR / "templates"
STATIC_DIR = PACKAGE_DIR / "static"


def root_path(request: Request) -> str:
    """Return the ASGI root path without a trailing slash."""

    value = request.scope.get("root_path", "") or ""
    return value.rstrip("/") if value != "/" else ""


def with_root_path(request: Request, path: str) -> str:
    """Prefix a path with the root path when mounted under a prefix."""

    root = root_path(request)
    if not root:
        return path
    if path == root or path.startswith(f"{root}/"):
        return path
    if not path.startswith("/"):
        path = f"/{path}"
    return f"{root}{path}"


def redirect_to(request: Request, path: str) -> RedirectResponse:
    """POST/redirect/GET helper; always answers ``303 See Other``."""

    return RedirectResponse(with_root_path(request, path), status_code=303)
