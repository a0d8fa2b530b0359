"""Template rendering with the request context and pending flash messages."""
from __future__ import annotations

from typing import Any

from starlette.requests import Request
from starlette.responses import Response

from hrpanel.core.security import RequestContext
from hrpanel.core.templates import templates

from .flash import clear_flash, read_flash


def render(
    request: Request,
    name: str,
    context: RequestContext | None,
    *,
    status_code: int = 200,
    **values: Any,
) -> Response:
    payload = {"ctx": context, "flash_messages": read_flash(request), **values}
    response = templates.TemplateResponse(request, name, payload, status_code=status_code)
    return clear_flash(request, response)


__all__ = ["render"]
