"""Salary rules for shop managers and their assistants.

Every monetary input is optional: a manager without sales, evaluation or debt
rows for the month simply has nothing recorded. Missing values count as zero
(see :func:`zero_if_missing`); that is a payroll policy, not a fallback for
bad data, and it applies uniformly to every input below.

Net salary::

    base + sales bonus + evaluation bonus + paid leave + years bonus
         - (inventory shortage + salary advance + sanctions + register difference)

Assistant managers follow the same rules without the sales bonus, and only
the salary advance and sanctions are deducted from their pay.

Amounts keep full ``Decimal`` precision; rounding to cents happens only when a
value is rendered.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Iterable, Sequence

ZERO = Decimal("0")
HUNDRED = Decimal("100")
DEFAULT_PAID_LEAVE_RATE = Decimal("0.08")


class AnniversaryKind(str, Enum):
    """Service anniversary reached in the reported month."""

    TEN_YEAR = "ten_year"
    FIVE_YEAR = "five_year"
    YEARLY = "yearly"


YEARS_BONUS_MULTIPLIERS: dict[AnniversaryKind, Decimal] = {
    AnniversaryKind.TEN_YEAR: Decimal("3"),
    AnniversaryKind.FIVE_YEAR: Decimal("2"),
    AnniversaryKind.YEARLY: Decimal("1"),
}


def zero_if_missing(value: Decimal | None) -> Decimal:
    """Apply the zero-default policy to an optional payroll input."""

    return ZERO if value is None else value


@dataclass(frozen=True, slots=True)
class BonusTierRule:
    min_sales: Decimal
    bonus_percent: Decimal


@dataclass(frozen=True, slots=True)
class EvaluationRange:
    min_value: Decimal
    max_value: Decimal
    amount: Decimal

    def contains(self, score: Decimal) -> bool:
        return self.min_value <= score <= self.max_value


@dataclass(frozen=True, slots=True)
class PayrollInputs:
    """Everything recorded about one manager for the reported month."""

    employee_id: str
    employee_name: str
    shop_id: str
    shop_name: str
    recruitment_date: date | None
    base_salary: Decimal | None = None
    monthly_sales: Decimal | None = None
    evaluation_score: Decimal | None = None
    stored_evaluation_bonus: Decimal | None = None
    salary_advance: Decimal | None = None
    sanctions: Decimal | None = None
    inventory_shortage: Decimal | None = None
    register_difference: Decimal | None = None


@dataclass(frozen=True, slots=True)
class SalaryBreakdown:
    employee_id: str
    employee_name: str
    shop_id: str
    shop_name: str
    base_salary: Decimal
    monthly_sales: Decimal
    evaluation_score: Decimal
    sales_bonus: Decimal
    evaluation_bonus: Decimal
    paid_leave: Decimal
    years_bonus: Decimal
    inventory_shortage: Decimal
    salary_advance: Decimal
    sanctions: Decimal
    register_difference: Decimal
    employment_years: int
    anniversary: AnniversaryKind | None

    @property
    def total_deductions(self) -> Decimal:
        return (
            self.inventory_shortage
            + self.salary_advance
            + self.sanctions
            + self.register_difference
        )

    @property
    def gross_salary(self) -> Decimal:
        return (
            self.base_salary
            + self.sales_bonus
            + self.evaluation_bonus
            + self.paid_leave
            + self.years_bonus
        )

    @property
    def net_salary(self) -> Decimal:
        # May be negative; deductions are never capped.
        return self.gross_salary - self.total_deductions


def employment_years(recruitment_date: date | None, year: int, month: int) -> int:
    """Whole years of service from the recruitment month to ``month``/``year``.

    Tenure is counted in calendar months, so the anniversary month itself
    completes a year regardless of the day of recruitment.
    """

    if recruitment_date is None:
        return 0
    months = (year * 12 + month) - (recruitment_date.year * 12 + recruitment_date.month)
    return max(months // 12, 0)


def classify_anniversary(
    recruitment_date: date | None, year: int, month: int
) -> AnniversaryKind | None:
    """Return the anniversary reached in the reported month, if any."""

    if recruitment_date is None or recruitment_date.month != month:
        return None
    years = employment_years(recruitment_date, year, month)
    if years == 10:
        return AnniversaryKind.TEN_YEAR
    if years == 5:
        return AnniversaryKind.FIVE_YEAR
    if years >= 1:
        return AnniversaryKind.YEARLY
    return None


def sales_bonus(monthly_sales: Decimal | None, tiers: Iterable[BonusTierRule]) -> Decimal:
    """Apply the highest tier whose threshold the sales reach.

    Tiers are scanned by ascending ``min_sales``; each qualifying tier replaces
    the previous one and the scan stops at the first tier out of reach.
    """

    sales = zero_if_missing(monthly_sales)
    if sales <= ZERO:
        return ZERO
    applied = ZERO
    for tier in sorted(tiers, key=lambda item: item.min_sales):
        if sales < tier.min_sales:
            break
        applied = sales * tier.bonus_percent / HUNDRED
    return applied


def evaluation_bonus(
    score: Decimal | None,
    ranges: Sequence[EvaluationRange],
    *,
    stored_bonus: Decimal | None = None,
) -> Decimal:
    """Return the flat amount earned by an evaluation score.

    A non-zero bonus stored on the evaluation itself wins over the range table.
    """

    if stored_bonus:
        return stored_bonus
    value = zero_if_missing(score)
    if value <= ZERO:
        return ZERO
    for candidate in sorted(ranges, key=lambda item: item.min_value):
        if candidate.contains(value):
            return candidate.amount
    return ZERO


def paid_leave(
    base_salary: Decimal, tenure_years: int, *, rate: Decimal = DEFAULT_PAID_LEAVE_RATE
) -> Decimal:
    if tenure_years >= 1:
        return base_salary * rate
    return ZERO


def years_of_service_bonus(base_salary: Decimal, anniversary: AnniversaryKind | None) -> Decimal:
    if anniversary is None:
        return ZERO
    return base_salary * YEARS_BONUS_MULTIPLIERS[anniversary]


class PayrollCalculator:
    """Compute salary breakdowns against one set of bonus tables."""

    def __init__(
        self,
        tiers: Iterable[BonusTierRule],
        ranges: Iterable[EvaluationRange],
        *,
        paid_leave_rate: Decimal = DEFAULT_PAID_LEAVE_RATE,
        paid_leave_reference: date | None = None,
    ) -> None:
        self._tiers = tuple(sorted(tiers, key=lambda item: item.min_sales))
        self._ranges = tuple(sorted(ranges, key=lambda item: item.min_value))
        self._paid_leave_rate = paid_leave_rate
        # ``None`` measures paid-leave tenure at the reported month.
        self._paid_leave_reference = paid_leave_reference

    @property
    def tiers(self) -> tuple[BonusTierRule, ...]:
        return self._tiers

    @property
    def ranges(self) -> tuple[EvaluationRange, ...]:
        return self._ranges

    def compute(self, inputs: PayrollInputs, *, year: int, month: int) -> SalaryBreakdown:
        base = zero_if_missing(inputs.base_salary)
        tenure = employment_years(inputs.recruitment_date, year, month)
        anniversary = classify_anniversary(inputs.recruitment_date, year, month)

        if self._paid_leave_reference is None:
            leave_tenure = tenure
        else:
            leave_tenure = employment_years(
                inputs.recruitment_date,
                self._paid_leave_reference.year,
                self._paid_leave_reference.month,
            )

        return SalaryBreakdown(
            employee_id=inputs.employee_id,
            employee_name=inputs.employee_name,
            shop_id=inputs.shop_id,
            shop_name=inputs.shop_name,
            base_salary=base,
            monthly_sales=zero_if_missing(inputs.monthly_sales),
            evaluation_score=zero_if_missing(inputs.evaluation_score),
            sales_bonus=sales_bonus(inputs.monthly_sales, self._tiers),
            evaluation_bonus=evaluation_bonus(
                inputs.evaluation_score,
                self._ranges,
                stored_bonus=inputs.stored_evaluation_bonus,
            ),
            paid_leave=paid_leave(base, leave_tenure, rate=self._paid_leave_rate),
            years_bonus=years_of_service_bonus(base, anniversary),
            inventory_shortage=zero_if_missing(inputs.inventory_shortage),
            salary_advance=zero_if_missing(inputs.salary_advance),
            sanctions=zero_if_missing(inputs.sanctions),
            register_difference=zero_if_missing(inputs.register_difference),
            employment_years=tenure,
            anniversary=anniversary,
        )

    def compute_assistant(
        self, inputs: PayrollInputs, *, year: int, month: int
    ) -> SalaryBreakdown:
        """Assistant managers earn no sales bonus and only owe advances and sanctions."""

        return self.compute(
            replace(
                inputs,
                monthly_sales=None,
                inventory_shortage=None,
                register_difference=None,
            ),
            year=year,
            month=month,
        )


__all__ = [
    "AnniversaryKind",
    "BonusTierRule",
    "EvaluationRange",
    "PayrollCalculator",
    "PayrollInputs",
    "SalaryBreakdown",
    "classify_anniversary",
    "employment_years",
    "evaluation_bonus",
    "paid_leave",
    "sales_bonus",
    "years_of_service_bonus",
    "zero_if_missing",
]
