"""Salary report assembled from the live tables."""
from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal

from hrpanel.core.config import DEFAULT_ASSISTANT_MANAGER_POST_ID
from hrpanel.services import SalaryReportService


def _seed_manager(seed):
    seed.posts()
    seed.bonus_tables()
    shop = seed.shop("Central")
    manager = seed.employee(
        "Amina",
        shop=shop,
        recruitment_date=date(2014, 6, 15),
        base_salary="1000",
    )
    seed.sale(shop, date(2024, 6, 1), "600")
    seed.sale(shop, date(2024, 6, 20), "400")
    seed.sale(shop, date(2024, 7, 1), "9000")
    seed.evaluation(manager, date(2024, 6, 1), "50")
    seed.debt(manager, date(2024, 6, 1), inventory_month="50")
    seed.debt(manager, date(2024, 6, 1), cash_discrepancy="25")
    seed.debt(manager, date(2024, 5, 1), salary_advance="300")
    return shop, manager


def test_report_computes_manager_salary(session, seed, payroll_settings) -> None:
    _seed_manager(seed)

    report = SalaryReportService(session, settings=payroll_settings).build_report(6, 2024)

    assert len(report.rows) == 1
    row = report.rows[0]
    assert row.employee_name == "Amina"
    assert row.shop_name == "Central"
    assert row.monthly_sales == Decimal("1000")
    assert row.sales_bonus == Decimal("20")
    assert row.evaluation_bonus == Decimal("10")
    assert row.paid_leave == Decimal("80")
    assert row.years_bonus == Decimal("3000")
    assert row.salary_advance == Decimal("0")
    assert row.total_deductions == Decimal("75")
    assert row.net_salary.quantize(Decimal("0.01")) == Decimal("4035.00")


def test_report_excludes_other_posts_and_defaults_missing_inputs(
    session, seed, payroll_settings
) -> None:
    seed.posts()
    shop = seed.shop("Harbour")
    seed.employee("Idle Manager", shop=shop, recruitment_date=date(2024, 2, 1), base_salary="900")
    seed.employee(
        "Assistant",
        post_id=DEFAULT_ASSISTANT_MANAGER_POST_ID,
        shop=shop,
        base_salary="700",
    )

    report = SalaryReportService(session, settings=payroll_settings).build_report(6, 2024)

    assert [row.employee_name for row in report.rows] == ["Idle Manager"]
    row = report.rows[0]
    assert row.monthly_sales == Decimal("0")
    assert row.sales_bonus == Decimal("0")
    assert row.evaluation_bonus == Decimal("0")
    assert row.paid_leave == Decimal("0")
    assert row.total_deductions == Decimal("0")
    assert row.net_salary == Decimal("900")


def test_stored_evaluation_bonus_is_used(session, seed, payroll_settings) -> None:
    seed.posts()
    seed.bonus_tables()
    shop = seed.shop("Central")
    manager = seed.employee("Amina", shop=shop, recruitment_date=date(2024, 1, 1), base_salary="0")
    seed.evaluation(manager, date(2024, 6, 1), "50", bonus_amount="120")

    report = SalaryReportService(session, settings=payroll_settings).build_report(6, 2024)

    assert report.rows[0].evaluation_bonus == Decimal("120")


def test_report_totals_sum_every_row(session, seed, payroll_settings) -> None:
    _seed_manager(seed)
    other = seed.shop("Harbour")
    seed.employee("Bilal", shop=other, recruitment_date=date(2024, 1, 1), base_salary="500")

    report = SalaryReportService(session, settings=payroll_settings).build_report(6, 2024)

    assert [row.shop_name for row in report.rows] == ["Central", "Harbour"]
    assert report.totals.base_salary == Decimal("1500")
    assert report.totals.total_deductions == Decimal("75")
    assert report.totals.net_salary.quantize(Decimal("0.01")) == Decimal("4535.00")


def test_paid_leave_measured_today_when_configured(session, seed, payroll_settings) -> None:
    seed.posts()
    shop = seed.shop("Central")
    seed.employee("Amina", shop=shop, recruitment_date=date(2023, 6, 1), base_salary="1000")

    at_period = SalaryReportService(session, settings=payroll_settings).build_report(6, 2023)
    as_of_today = SalaryReportService(
        session,
        settings=replace(payroll_settings, paid_leave_as_of="today"),
        today=date(2024, 7, 1),
    ).build_report(6, 2023)

    assert at_period.rows[0].paid_leave == Decimal("0")
    assert as_of_today.rows[0].paid_leave == Decimal("80")


def test_empty_report(session, payroll_settings) -> None:
    report = SalaryReportService(session, settings=payroll_settings).build_report(6, 2024)

    assert report.is_empty
    assert report.totals.net_salary == Decimal("0")
    assert report.label == "June 2024"


def _seed_assistant(seed):
    seed.posts()
    seed.bonus_tables()
    shop = seed.shop("Central")
    seed.employee("Amina", shop=shop, recruitment_date=date(2014, 6, 15), base_salary="1000")
    assistant = seed.employee(
        "Karim",
        post_id=DEFAULT_ASSISTANT_MANAGER_POST_ID,
        shop=shop,
        recruitment_date=date(2019, 6, 3),
        base_salary="600",
    )
    seed.sale(shop, date(2024, 6, 1), "5000")
    seed.evaluation(assistant, date(2024, 6, 1), "60")
    seed.debt(
        assistant,
        date(2024, 6, 1),
        salary_advance="100",
        sanction="20",
        inventory_month="70",
        cash_discrepancy="30",
    )
    return shop, assistant


def test_assistant_report_lists_assistant_managers_only(session, seed, payroll_settings) -> None:
    _seed_assistant(seed)

    report = SalaryReportService(session, settings=payroll_settings).build_assistant_report(6, 2024)

    assert report.is_assistant
    assert [row.employee_name for row in report.rows] == ["Karim"]


def test_assistant_salary_has_no_sales_bonus_and_fewer_deductions(
    session, seed, payroll_settings
) -> None:
    _seed_assistant(seed)

    row = (
        SalaryReportService(session, settings=payroll_settings)
        .build_assistant_report(6, 2024)
        .rows[0]
    )

    assert row.monthly_sales == Decimal("0")
    assert row.sales_bonus == Decimal("0")
    assert row.evaluation_bonus == Decimal("50")
    assert row.paid_leave == Decimal("48")
    # Five years in the recruitment month.
    assert row.years_bonus == Decimal("1200")
    assert row.salary_advance == Decimal("100")
    assert row.sanctions == Decimal("20")
    assert row.inventory_shortage == Decimal("0")
    assert row.register_difference == Decimal("0")
    assert row.total_deductions == Decimal("120")
    assert row.net_salary.quantize(Decimal("0.01")) == Decimal("1778.00")


def test_manager_report_is_unchanged_by_assistants(session, seed, payroll_settings) -> None:
    _seed_assistant(seed)

    report = SalaryReportService(session, settings=payroll_settings).build_report(6, 2024)

    assert not report.is_assistant
    assert [row.employee_name for row in report.rows] == ["Amina"]
    assert report.rows[0].sales_bonus == Decimal("150")
