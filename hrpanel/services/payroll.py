"""Salary reports for shop managers and assistant managers."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hrpanel.core.config import PayrollSettings, get_settings
from hrpanel.core.logger import get_logger, timeit
from hrpanel.domain.calendar import month_label
from hrpanel.domain.payroll import ZERO, PayrollCalculator, SalaryBreakdown
from hrpanel.exceptions import DatabaseError
from hrpanel.repositories import PayrollRepository

LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class SalaryTotals:
    base_salary: Decimal = ZERO
    monthly_sales: Decimal = ZERO
    sales_bonus: Decimal = ZERO
    evaluation_bonus: Decimal = ZERO
    paid_leave: Decimal = ZERO
    years_bonus: Decimal = ZERO
    inventory_shortage: Decimal = ZERO
    salary_advance: Decimal = ZERO
    sanctions: Decimal = ZERO
    register_difference: Decimal = ZERO
    total_deductions: Decimal = ZERO
    net_salary: Decimal = ZERO

    @classmethod
    def from_rows(cls, rows: Sequence[SalaryBreakdown]) -> "SalaryTotals":
        def _sum(attribute: str) -> Decimal:
            return sum((getattr(row, attribute) for row in rows), ZERO)

        return cls(
            base_salary=_sum("base_salary"),
            monthly_sales=_sum("monthly_sales"),
            sales_bonus=_sum("sales_bonus"),
            evaluation_bonus=_sum("evaluation_bonus"),
            paid_leave=_sum("paid_leave"),
            years_bonus=_sum("years_bonus"),
            inventory_shortage=_sum("inventory_shortage"),
            salary_advance=_sum("salary_advance"),
            sanctions=_sum("sanctions"),
            register_difference=_sum("register_difference"),
            total_deductions=_sum("total_deductions"),
            net_salary=_sum("net_salary"),
        )


MANAGER = "manager"
ASSISTANT_MANAGER = "assistant_manager"


@dataclass(frozen=True, slots=True)
class SalaryReport:
    month: int
    year: int
    rows: tuple[SalaryBreakdown, ...] = ()
    totals: SalaryTotals = field(default_factory=SalaryTotals)
    role: str = MANAGER

    @property
    def label(self) -> str:
        return month_label(self.year, self.month)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    @property
    def is_assistant(self) -> bool:
        return self.role == ASSISTANT_MANAGER


class SalaryReportService:
    """Run the payroll engine for every shop manager, or assistant manager, of a month.

    Reports are all or nothing: any query failure raises ``DatabaseError``.
    """

    def __init__(
        self,
        session: Session,
        *,
        settings: PayrollSettings | None = None,
        today: date | None = None,
    ) -> None:
        self._session = session
        self._settings = settings or get_settings().payroll
        self._today = today
        self._repository = PayrollRepository(session)

    def _calculator(self) -> PayrollCalculator:
        reference = None
        if self._settings.paid_leave_as_of == "today":
            reference = self._today or date.today()
        return PayrollCalculator(
            self._repository.list_bonus_tiers(),
            self._repository.list_evaluation_ranges(),
            paid_leave_rate=self._settings.paid_leave_rate,
            paid_leave_reference=reference,
        )

    def build_report(self, month: int, year: int) -> SalaryReport:
        return self._build(month, year, role=MANAGER, post_id=self._settings.manager_post_id)

    def build_assistant_report(self, month: int, year: int) -> SalaryReport:
        return self._build(
            month,
            year,
            role=ASSISTANT_MANAGER,
            post_id=self._settings.assistant_manager_post_id,
        )

    def _build(self, month: int, year: int, *, role: str, post_id: str) -> SalaryReport:
        with timeit(f"Salary report ({role}) {month:02d}/{year}", logger=LOGGER) as timer:
            try:
                calculator = self._calculator()
                inputs = self._repository.fetch_payroll_inputs(
                    year=year, month=month, post_id=post_id
                )
            except SQLAlchemyError as exc:
                self._session.rollback()
                raise DatabaseError(str(exc)) from exc

            if role == ASSISTANT_MANAGER:
                compute = calculator.compute_assistant
            else:
                compute = calculator.compute
            rows = tuple(compute(item, year=year, month=month) for item in inputs)
            timer.add(len(rows))

        LOGGER.info(
            "Salary report generated",
            extra={"role": role, "year": year, "month": month, "employees": len(rows)},
        )
        return SalaryReport(
            month=month,
            year=year,
            rows=rows,
            totals=SalaryTotals.from_rows(rows),
            role=role,
        )


__all__ = [
    "ASSISTANT_MANAGER",
    "MANAGER",
    "SalaryReport",
    "SalaryReportService",
    "SalaryTotals",
]
