"""CSV renditions of the reports."""
from __future__ import annotations

import csv
import io
from typing import Iterable, Sequence

from hrpanel.core.formatting import format_date, format_duration, format_money

from .payroll import SalaryReport
from .store_management import StoreManagementReport

SALARY_HEADERS: tuple[str, ...] = (
    "Shop",
    "Manager",
    "Base Salary",
    "Monthly Sales",
    "Sales Bonus",
    "Evaluation Score",
    "Evaluation Bonus",
    "Paid Leave",
    "Years Bonus",
    "Inventory Shortage",
    "Salary Advance",
    "Sanctions",
    "Register Difference",
    "Total Deductions",
    "Net Salary",
)

ASSISTANT_SALARY_HEADERS: tuple[str, ...] = (
    "Shop",
    "Assistant Manager",
    "Base Salary",
    "Evaluation Score",
    "Evaluation Bonus",
    "Paid Leave",
    "Years Bonus",
    "Salary Advance",
    "Sanctions",
    "Total Deductions",
    "Net Salary",
)

_AMOUNT_COLUMNS: tuple[tuple[str, str], ...] = (
    ("Base Salary", "base_salary"),
    ("Monthly Sales", "monthly_sales"),
    ("Sales Bonus", "sales_bonus"),
    ("Evaluation Bonus", "evaluation_bonus"),
    ("Paid Leave", "paid_leave"),
    ("Years Bonus", "years_bonus"),
    ("Inventory Shortage", "inventory_shortage"),
    ("Salary Advance", "salary_advance"),
    ("Sanctions", "sanctions"),
    ("Register Difference", "register_difference"),
    ("Total Deductions", "total_deductions"),
    ("Net Salary", "net_salary"),
)

STORE_HEADERS: tuple[str, ...] = (
    "Store",
    "Location",
    "Manager",
    "Manager Recruitment Date",
    "Recommender",
    "Manager Employment Duration",
    "Assistant Manager",
    "Assistant Recruitment Date",
    "Assistant Employment Duration",
)


def _write_csv(headers: Sequence[str], rows: Iterable[dict[str, object]]) -> str:
    buffer = io.StringIO()
    # Rows carry every salary column; each report keeps only its own headers.
    writer = csv.DictWriter(buffer, fieldnames=headers, extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return buffer.getvalue()


def _amounts(source: object) -> dict[str, object]:
    return {
        header: format_money(getattr(source, attribute), thousands=False)
        for header, attribute in _AMOUNT_COLUMNS
    }


def salary_report_csv(report: SalaryReport) -> str:
    """One line per employee followed by the totals line."""

    if report.is_assistant:
        headers, person = ASSISTANT_SALARY_HEADERS, "Assistant Manager"
    else:
        headers, person = SALARY_HEADERS, "Manager"

    def _rows():
        for row in report.rows:
            yield {
                "Shop": row.shop_name,
                person: row.employee_name,
                "Evaluation Score": str(row.evaluation_score),
                **_amounts(row),
            }
        yield {"Shop": "Total", person: "", "Evaluation Score": "", **_amounts(report.totals)}

    return _write_csv(headers, _rows())


def store_management_csv(report: StoreManagementReport) -> str:
    rows = (
        {
            "Store": item.assignment.shop_name,
            "Location": item.assignment.shop_location or "",
            "Manager": item.assignment.manager_name or "",
            "Manager Recruitment Date": format_date(item.assignment.manager_recruitment_date, ""),
            "Recommender": item.assignment.manager_recommender or "",
            "Manager Employment Duration": format_duration(item.manager_duration),
            "Assistant Manager": item.assignment.assistant_name or "",
            "Assistant Recruitment Date": format_date(
                item.assignment.assistant_recruitment_date, ""
            ),
            "Assistant Employment Duration": format_duration(item.assistant_duration),
        }
        for item in report.rows
    )
    return _write_csv(STORE_HEADERS, rows)


def export_filename(prefix: str, month: int, year: int) -> str:
    return f"{prefix}-{year}-{month:02d}.csv"


__all__ = [
    "ASSISTANT_SALARY_HEADERS",
    "SALARY_HEADERS",
    "STORE_HEADERS",
    "export_filename",
    "salary_report_csv",
    "store_management_csv",
]
