"""One-shot messages carried across a redirect in a signed cookie."""
from __future__ import annotations

from dataclasses import dataclass

from starlette.requests import Request
from starlette.responses import Response

from hrpanel.core.paths import root_path
from hrpanel.core.security import get_security_provider

SUCCESS = "success"
ERROR = "error"
WARNING = "warning"

FLASH_TTL_SECONDS = 60


@dataclass(frozen=True, slots=True)
class FlashMessage:
    category: str
    text: str


def set_flash(request: Request, response: Response, *messages: FlashMessage) -> Response:
    """Attach messages to ``response``; the next page render shows them."""

    pending = [(message.category, message.text) for message in messages if message.text]
    if not pending:
        return response
    security = get_security_provider()
    response.set_cookie(
        security.flash_cookie_name,
        security.sign_flash(pending, ttl_seconds=FLASH_TTL_SECONDS),
        max_age=FLASH_TTL_SECONDS,
        httponly=True,
        samesite="lax",
        path=root_path(request) or "/",
    )
    return response


def read_flash(request: Request) -> list[FlashMessage]:
    """Pending messages for this render; expired or tampered cookies yield none."""

    security = get_security_provider()
    token = request.cookies.get(security.flash_cookie_name)
    if not token:
        return []
    return [
        FlashMessage(category=category, text=text)
        for category, text in security.read_flash(token)
    ]


def clear_flash(request: Request, response: Response) -> Response:
    security = get_security_provider()
    if security.flash_cookie_name in request.cookies:
        response.delete_cookie(security.flash_cookie_name, path=root_path(request) or "/")
    return response


__all__ = [
    "ERROR",
    "SUCCESS",
    "WARNING",
    "FlashMessage",
    "clear_flash",
    "read_flash",
    "set_flash",
]
