"""Month lifecycle page: list months and run create/open/close/notes commands."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, Response
from sqlalchemy.orm import Session

from hrpanel.core.logger import get_logger, log_context
from hrpanel.core.paths import redirect_to
from hrpanel.core.security import RequestContext, require_permission
from hrpanel.domain.calendar import MONTH_NAMES
from hrpanel.domain.periods import parse_command
from hrpanel.exceptions import HRPanelError, InvalidInputError
from hrpanel.services import PeriodService
from hrpanel.web.dependencies import get_db_session
from hrpanel.web.flash import ERROR, SUCCESS, WARNING, FlashMessage, set_flash
from hrpanel.web.rendering import render

LOGGER = get_logger(__name__)
router = APIRouter(prefix="/months", tags=["months"])


@router.get("", response_class=HTMLResponse)
async def months_page(
    request: Request,
    session: Session = Depends(get_db_session),
    context: RequestContext = Depends(require_permission("manage_settings")),
) -> Response:
    service = PeriodService(session)
    suggested_month, suggested_year = service.suggest_next_period()
    return render(
        request,
        "months/index.html",
        context,
        periods=service.list_periods(),
        suggested_month=suggested_month,
        suggested_year=suggested_year,
        month_names=MONTH_NAMES,
    )


@router.post("")
async def months_command(
    request: Request,
    session: Session = Depends(get_db_session),
    context: RequestContext = Depends(require_permission("manage_settings")),
) -> Response:
    form = await request.form()
    fields = {key: str(value) for key, value in form.items()}
    response = redirect_to(request, "/months")

    with log_context.scoped(user=context.username, action=fields.get("action")):
        try:
            command = parse_command(fields)
            outcome = PeriodService(session).handle(command)
        except InvalidInputError as exc:
            LOGGER.info("Rejected month command", extra={"errors": list(exc.errors)})
            return set_flash(request, response, *(FlashMessage(ERROR, item) for item in exc.errors))
        except HRPanelError as exc:
            LOGGER.warning("Month command failed", extra={"code": exc.code, "reason": str(exc)})
            return set_flash(request, response, FlashMessage(ERROR, str(exc)))

    messages = [FlashMessage(SUCCESS, outcome.message)]
    messages.extend(FlashMessage(WARNING, warning) for warning in outcome.warnings)
    return set_flash(request, response, *messages)


__all__ = ["router"]
