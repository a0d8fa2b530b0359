"""Bonus tier and evaluation range configuration pages."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, Response
from sqlalchemy.orm import Session

from hrpanel.core.logger import get_logger
from hrpanel.core.paths import redirect_to
from hrpanel.core.security import RequestContext, require_permission
from hrpanel.exceptions import HRPanelError, InvalidInputError
from hrpanel.services import BonusConfigService
from hrpanel.web.dependencies import get_db_session
from hrpanel.web.flash import ERROR, SUCCESS, FlashMessage, set_flash
from hrpanel.web.rendering import render

LOGGER = get_logger(__name__)
router = APIRouter(prefix="/settings", tags=["settings"])

BONUS_TIERS_PATH = "/settings/bonus-tiers"
EVALUATION_RANGES_PATH = "/settings/evaluation-ranges"


def _failure(request: Request, path: str, exc: HRPanelError) -> Response:
    response = redirect_to(request, path)
    if isinstance(exc, InvalidInputError):
        return set_flash(request, response, *(FlashMessage(ERROR, item) for item in exc.errors))
    return set_flash(request, response, FlashMessage(ERROR, str(exc)))


@router.get("/bonus-tiers", response_class=HTMLResponse)
async def bonus_tiers_page(
    request: Request,
    session: Session = Depends(get_db_session),
    context: RequestContext = Depends(require_permission("manage_bonus_configuration")),
) -> Response:
    return render(
        request,
        "settings/bonus_tiers.html",
        context,
        tiers=BonusConfigService(session).list_tiers(),
    )


@router.post("/bonus-tiers")
async def bonus_tiers_command(
    request: Request,
    session: Session = Depends(get_db_session),
    context: RequestContext = Depends(require_permission("manage_bonus_configuration")),
) -> Response:
    form = await request.form()
    fields = {key: str(value) for key, value in form.items()}
    action = fields.get("action", "")
    service = BonusConfigService(session)
    try:
        if action == "add":
            service.add_tier(fields)
            message = "Bonus tier added successfully"
        elif action == "edit":
            service.update_tier(fields.get("old_min_sales", ""), fields)
            message = "Bonus tier updated successfully"
        elif action == "delete":
            service.delete_tier(fields.get("min_sales", ""))
            message = "Bonus tier deleted successfully"
        else:
            raise InvalidInputError([f"Unknown action: {action or '<empty>'}"])
    except HRPanelError as exc:
        LOGGER.info(
            "Bonus tier change rejected",
            extra={"user": context.username, "action": action, "reason": str(exc)},
        )
        return _failure(request, BONUS_TIERS_PATH, exc)
    response = redirect_to(request, BONUS_TIERS_PATH)
    return set_flash(request, response, FlashMessage(SUCCESS, message))


@router.get("/evaluation-ranges", response_class=HTMLResponse)
async def evaluation_ranges_page(
    request: Request,
    session: Session = Depends(get_db_session),
    context: RequestContext = Depends(require_permission("manage_settings")),
) -> Response:
    return render(
        request,
        "settings/evaluation_ranges.html",
        context,
        ranges=BonusConfigService(session).list_ranges(),
    )


@router.post("/evaluation-ranges")
async def evaluation_ranges_command(
    request: Request,
    session: Session = Depends(get_db_session),
    context: RequestContext = Depends(require_permission("manage_settings")),
) -> Response:
    form = await request.form()
    fields = {key: str(value) for key, value in form.items()}
    action = fields.get("action", "")
    service = BonusConfigService(session)
    try:
        if action == "add":
            service.add_range(fields)
            message = "Evaluation range added successfully"
        elif action == "edit":
            service.update_range(fields.get("id", ""), fields)
            message = "Evaluation range updated successfully"
        elif action == "delete":
            service.delete_range(fields.get("id", ""))
            message = "Evaluation range deleted successfully"
        else:
            raise InvalidInputError([f"Unknown action: {action or '<empty>'}"])
    except HRPanelError as exc:
        LOGGER.info(
            "Evaluation range change rejected",
            extra={"user": context.username, "action": action, "reason": str(exc)},
        )
        return _failure(request, EVALUATION_RANGES_PATH, exc)
    response = redirect_to(request, EVALUATION_RANGES_PATH)
    return set_flash(request, response, FlashMessage(SUCCESS, message))


__all__ = ["router"]
