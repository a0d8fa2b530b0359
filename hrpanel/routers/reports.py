"""Salary and store management reports, as HTML pages and CSV downloads."""
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, Response
from sqlalchemy.orm import Session

from hrpanel.core.logger import get_logger
from hrpanel.core.paths import redirect_to
from hrpanel.core.security import RequestContext, require_permission
from hrpanel.domain.calendar import MONTH_NAMES
from hrpanel.exceptions import DatabaseError
from hrpanel.services import (
    PeriodService,
    SalaryReportService,
    StoreManagementReportService,
)
from hrpanel.services.export import export_filename, salary_report_csv, store_management_csv
from hrpanel.web.dependencies import get_db_session
from hrpanel.web.flash import ERROR, FlashMessage, set_flash
from hrpanel.web.rendering import render
from hrpanel.web.utils.query_params import extract_period

LOGGER = get_logger(__name__)
router = APIRouter(prefix="/reports", tags=["reports"])

_view_salary = require_permission("view_reports")
_view_stores = require_permission("view_reports", "view_employees")

SALARY_PATH = "/reports/salary"
ASSISTANT_SALARY_PATH = "/reports/assistant-salary"


def _salary_period(request: Request, periods: PeriodService) -> tuple[int, int]:
    """Month shown by the salary reports.

    Without ``month`` and ``year`` the default period applies (the current
    month when open, else the most recently opened month). An explicit
    request is honoured as given, open or not, so closed months stay
    reportable; a missing half is taken from today.
    """

    month, year = extract_period(request.query_params)
    if month is None and year is None:
        return periods.resolve_default_period()
    today = date.today()
    return month or today.month, year or today.year


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _build_salary_report(session: Session, month: int, year: int, *, assistant: bool):
    service = SalaryReportService(session)
    if assistant:
        return service.build_assistant_report(month, year)
    return service.build_report(month, year)


def _salary_page(
    request: Request, session: Session, context: RequestContext, *, assistant: bool
) -> Response:
    periods = PeriodService(session)
    month, year = _salary_period(request, periods)
    report = None
    error = None
    try:
        report = _build_salary_report(session, month, year, assistant=assistant)
    except DatabaseError as exc:
        LOGGER.error(
            "Salary report failed",
            extra={"year": year, "month": month, "assistant": assistant},
        )
        error = str(exc)
    return render(
        request,
        "reports/salary.html",
        context,
        month=month,
        year=year,
        report=report,
        error=error,
        assistant=assistant,
        report_path=ASSISTANT_SALARY_PATH if assistant else SALARY_PATH,
        open_periods=periods.list_open_periods(),
        month_names=MONTH_NAMES,
    )


def _salary_export(request: Request, session: Session, *, assistant: bool) -> Response:
    month, year = _salary_period(request, PeriodService(session))
    path = ASSISTANT_SALARY_PATH if assistant else SALARY_PATH
    try:
        report = _build_salary_report(session, month, year, assistant=assistant)
    except DatabaseError as exc:
        response = redirect_to(request, f"{path}?month={month}&year={year}")
        return set_flash(request, response, FlashMessage(ERROR, str(exc)))
    prefix = "assistant-salary-report" if assistant else "salary-report"
    return _csv_response(salary_report_csv(report), export_filename(prefix, month, year))


@router.get("/salary", response_class=HTMLResponse)
async def salary_report(
    request: Request,
    session: Session = Depends(get_db_session),
    context: RequestContext = Depends(_view_salary),
) -> Response:
    return _salary_page(request, session, context, assistant=False)


@router.get("/salary.csv")
async def salary_report_export(
    request: Request,
    session: Session = Depends(get_db_session),
    context: RequestContext = Depends(_view_salary),
) -> Response:
    return _salary_export(request, session, assistant=False)


@router.get("/assistant-salary", response_class=HTMLResponse)
async def assistant_salary_report(
    request: Request,
    session: Session = Depends(get_db_session),
    context: RequestContext = Depends(_view_salary),
) -> Response:
    return _salary_page(request, session, context, assistant=True)


@router.get("/assistant-salary.csv")
async def assistant_salary_report_export(
    request: Request,
    session: Session = Depends(get_db_session),
    context: RequestContext = Depends(_view_salary),
) -> Response:
    return _salary_export(request, session, assistant=True)


@router.get("/store-management", response_class=HTMLResponse)
async def store_management_report(
    request: Request,
    session: Session = Depends(get_db_session),
    context: RequestContext = Depends(_view_stores),
) -> Response:
    month, year = extract_period(request.query_params)
    report = None
    error = None
    try:
        report = StoreManagementReportService(session).build_report(month, year)
    except DatabaseError as exc:
        LOGGER.error("Store management report failed", extra={"year": year, "month": month})
        error = str(exc)
    today = date.today()
    return render(
        request,
        "reports/store_management.html",
        context,
        month=report.month if report else (month or today.month),
        year=report.year if report else (year or today.year),
        report=report,
        error=error,
        month_names=MONTH_NAMES,
    )


@router.get("/store-management.csv")
async def store_management_export(
    request: Request,
    session: Session = Depends(get_db_session),
    context: RequestContext = Depends(_view_stores),
) -> Response:
    month, year = extract_period(request.query_params)
    try:
        report = StoreManagementReportService(session).build_report(month, year)
    except DatabaseError as exc:
        response = redirect_to(request, "/reports/store-management")
        return set_flash(request, response, FlashMessage(ERROR, str(exc)))
    return _csv_response(
        store_management_csv(report),
        export_filename("store-management", report.month, report.year),
    )


__all__ = ["router"]
