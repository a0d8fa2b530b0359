"""Salary rules applied per manager, independent of the database."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from hrpanel.domain.payroll import (
    AnniversaryKind,
    BonusTierRule,
    EvaluationRange,
    PayrollCalculator,
    PayrollInputs,
    classify_anniversary,
    employment_years,
    evaluation_bonus,
    paid_leave,
    sales_bonus,
    years_of_service_bonus,
    zero_if_missing,
)

TIERS = [
    BonusTierRule(Decimal("0"), Decimal("1")),
    BonusTierRule(Decimal("1000"), Decimal("2")),
    BonusTierRule(Decimal("5000"), Decimal("3")),
]
RANGES = [
    EvaluationRange(Decimal("0"), Decimal("50"), Decimal("10")),
    EvaluationRange(Decimal("51"), Decimal("100"), Decimal("50")),
]


def _inputs(**overrides) -> PayrollInputs:
    values = {
        "employee_id": "e-1",
        "employee_name": "Amina",
        "shop_id": "s-1",
        "shop_name": "Central",
        "recruitment_date": date(2014, 6, 15),
    }
    values.update(overrides)
    return PayrollInputs(**values)


def test_sales_bonus_uses_highest_reached_tier() -> None:
    assert sales_bonus(Decimal("1000"), TIERS) == Decimal("20.00")
    assert sales_bonus(Decimal("6000"), TIERS) == Decimal("180")
    assert sales_bonus(Decimal("999"), TIERS) == Decimal("9.99")


def test_sales_bonus_is_zero_without_sales_or_tiers() -> None:
    assert sales_bonus(Decimal("0"), TIERS) == Decimal("0")
    assert sales_bonus(None, TIERS) == Decimal("0")
    assert sales_bonus(Decimal("1000"), []) == Decimal("0")


def test_sales_bonus_ignores_tier_order_of_input() -> None:
    assert sales_bonus(Decimal("1000"), list(reversed(TIERS))) == Decimal("20")


def test_sales_bonus_zero_when_first_tier_out_of_reach() -> None:
    tiers = [BonusTierRule(Decimal("500"), Decimal("5"))]
    assert sales_bonus(Decimal("499.99"), tiers) == Decimal("0")


def test_evaluation_bonus_matches_inclusive_range() -> None:
    assert evaluation_bonus(Decimal("50"), RANGES) == Decimal("10")
    assert evaluation_bonus(Decimal("51"), RANGES) == Decimal("50")
    assert evaluation_bonus(Decimal("100"), RANGES) == Decimal("50")


def test_evaluation_bonus_zero_for_zero_or_unmatched_score() -> None:
    assert evaluation_bonus(Decimal("0"), RANGES) == Decimal("0")
    assert evaluation_bonus(None, RANGES) == Decimal("0")
    assert evaluation_bonus(Decimal("150"), RANGES) == Decimal("0")
    assert evaluation_bonus(Decimal("50.5"), RANGES) == Decimal("0")


def test_stored_evaluation_bonus_wins_over_ranges() -> None:
    assert evaluation_bonus(Decimal("50"), RANGES, stored_bonus=Decimal("75")) == Decimal("75")
    assert evaluation_bonus(Decimal("50"), RANGES, stored_bonus=Decimal("0")) == Decimal("10")


@pytest.mark.parametrize(
    ("recruited", "year", "month", "expected"),
    [
        (date(2014, 6, 15), 2024, 6, 10),
        (date(2014, 6, 15), 2024, 5, 9),
        (date(2023, 7, 1), 2024, 6, 0),
        (date(2024, 8, 1), 2024, 6, 0),
        (None, 2024, 6, 0),
    ],
)
def test_employment_years(recruited, year, month, expected) -> None:
    assert employment_years(recruited, year, month) == expected


def test_anniversary_classification() -> None:
    assert classify_anniversary(date(2014, 6, 15), 2024, 6) is AnniversaryKind.TEN_YEAR
    assert classify_anniversary(date(2019, 6, 1), 2024, 6) is AnniversaryKind.FIVE_YEAR
    assert classify_anniversary(date(2021, 6, 1), 2024, 6) is AnniversaryKind.YEARLY
    assert classify_anniversary(date(2009, 6, 1), 2024, 6) is AnniversaryKind.YEARLY
    assert classify_anniversary(date(2024, 6, 1), 2024, 6) is None
    assert classify_anniversary(date(2014, 5, 15), 2024, 6) is None


def test_years_of_service_multipliers() -> None:
    base = Decimal("1000")
    assert years_of_service_bonus(base, AnniversaryKind.TEN_YEAR) == Decimal("3000")
    assert years_of_service_bonus(base, AnniversaryKind.FIVE_YEAR) == Decimal("2000")
    assert years_of_service_bonus(base, AnniversaryKind.YEARLY) == Decimal("1000")
    assert years_of_service_bonus(base, None) == Decimal("0")


def test_paid_leave_requires_a_full_year() -> None:
    assert paid_leave(Decimal("1000"), 1) == Decimal("80.00")
    assert paid_leave(Decimal("1000"), 0) == Decimal("0")
    assert paid_leave(Decimal("1000"), 3, rate=Decimal("0.1")) == Decimal("100")


def test_zero_default_policy() -> None:
    assert zero_if_missing(None) == Decimal("0")
    assert zero_if_missing(Decimal("4.5")) == Decimal("4.5")


def test_net_salary_for_ten_year_anniversary() -> None:
    calculator = PayrollCalculator(TIERS, RANGES)
    breakdown = calculator.compute(
        _inputs(
            base_salary=Decimal("1000"),
            monthly_sales=Decimal("1000"),
            evaluation_score=Decimal("50"),
            inventory_shortage=Decimal("50"),
            register_difference=Decimal("25"),
        ),
        year=2024,
        month=6,
    )

    assert breakdown.sales_bonus == Decimal("20")
    assert breakdown.evaluation_bonus == Decimal("10")
    assert breakdown.paid_leave == Decimal("80")
    assert breakdown.years_bonus == Decimal("3000")
    assert breakdown.employment_years == 10
    assert breakdown.anniversary is AnniversaryKind.TEN_YEAR
    assert breakdown.total_deductions == Decimal("75")
    assert breakdown.net_salary.quantize(Decimal("0.01")) == Decimal("4035.00")


def test_missing_inputs_count_as_zero() -> None:
    calculator = PayrollCalculator(TIERS, RANGES)
    breakdown = calculator.compute(_inputs(recruitment_date=None), year=2024, month=6)

    assert breakdown.base_salary == Decimal("0")
    assert breakdown.gross_salary == Decimal("0")
    assert breakdown.net_salary == Decimal("0")
    assert breakdown.anniversary is None


def test_net_salary_may_be_negative() -> None:
    calculator = PayrollCalculator([], [])
    breakdown = calculator.compute(
        _inputs(
            recruitment_date=date(2024, 1, 1),
            base_salary=Decimal("500"),
            salary_advance=Decimal("400"),
            sanctions=Decimal("150"),
        ),
        year=2024,
        month=6,
    )
    assert breakdown.net_salary == Decimal("-50")


def test_paid_leave_reference_date_overrides_reported_month() -> None:
    inputs = _inputs(recruitment_date=date(2023, 6, 1), base_salary=Decimal("1000"))

    at_period = PayrollCalculator([], []).compute(inputs, year=2023, month=6)
    as_of_later = PayrollCalculator([], [], paid_leave_reference=date(2024, 7, 1)).compute(
        inputs, year=2023, month=6
    )

    assert at_period.paid_leave == Decimal("0")
    assert as_of_later.paid_leave == Decimal("80")


def test_assistant_breakdown_drops_sales_bonus_and_store_deductions() -> None:
    inputs = _inputs(
        base_salary=Decimal("1000"),
        monthly_sales=Decimal("1000"),
        evaluation_score=Decimal("50"),
        salary_advance=Decimal("100"),
        sanctions=Decimal("20"),
        inventory_shortage=Decimal("50"),
        register_difference=Decimal("25"),
    )

    breakdown = PayrollCalculator(TIERS, RANGES).compute_assistant(inputs, year=2024, month=6)

    assert breakdown.sales_bonus == Decimal("0")
    assert breakdown.evaluation_bonus == Decimal("10")
    assert breakdown.paid_leave == Decimal("80")
    assert breakdown.years_bonus == Decimal("3000")
    assert breakdown.total_deductions == Decimal("120")
    assert breakdown.net_salary == Decimal("3970")
