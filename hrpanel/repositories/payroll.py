"""Queries feeding the payroll engine."""
from __future__ import annotations

from sqlalchemy import and_, func, select

from hrpanel.domain.calendar import month_bounds
from hrpanel.domain.payroll import BonusTierRule, EvaluationRange, PayrollInputs
from hrpanel.models import (
    BonusTier,
    Employee,
    EmployeeEvaluation,
    EmployeeShop,
    ManagerDebt,
    MonthlySale,
    Shop,
    TotalRange,
)

from .base import BaseRepository


class PayrollRepository(BaseRepository):
    """Read-only access to salaries, sales, evaluations, debts and bonus tables."""

    def fetch_payroll_inputs(
        self, *, year: int, month: int, post_id: str
    ) -> list[PayrollInputs]:
        """One row per shop employee holding ``post_id`` with the month's aggregates.

        Aggregates are left as ``None`` when nothing was recorded; the engine
        applies the zero default.
        """

        start, end = month_bounds(year, month)

        def _debt_sum(column):
            return (
                select(func.sum(column))
                .where(
                    ManagerDebt.employee_id == Employee.id,
                    ManagerDebt.evaluation_month >= start,
                    ManagerDebt.evaluation_month < end,
                )
                .scalar_subquery()
            )

        def _evaluation_value(column):
            return (
                select(column)
                .where(
                    EmployeeEvaluation.employee_id == Employee.id,
                    EmployeeEvaluation.evaluation_month >= start,
                    EmployeeEvaluation.evaluation_month < end,
                )
                .limit(1)
                .scalar_subquery()
            )

        monthly_sales = (
            select(func.sum(MonthlySale.sales_amount))
            .where(
                MonthlySale.shop_id == Shop.id,
                MonthlySale.sales_month >= start,
                MonthlySale.sales_month < end,
            )
            .scalar_subquery()
        )

        statement = (
            select(
                Shop.id.label("shop_id"),
                Shop.name.label("shop_name"),
                Employee.id.label("employee_id"),
                Employee.full_name.label("employee_name"),
                Employee.base_salary.label("base_salary"),
                Employee.recruitment_date.label("recruitment_date"),
                monthly_sales.label("monthly_sales"),
                _evaluation_value(EmployeeEvaluation.total_score).label("evaluation_score"),
                _evaluation_value(EmployeeEvaluation.bonus_amount).label("stored_evaluation_bonus"),
                _debt_sum(ManagerDebt.salary_advance).label("salary_advance"),
                _debt_sum(ManagerDebt.sanction).label("sanctions"),
                _debt_sum(ManagerDebt.inventory_month).label("inventory_shortage"),
                _debt_sum(ManagerDebt.cash_discrepancy).label("register_difference"),
            )
            .select_from(Shop)
            .join(EmployeeShop, EmployeeShop.shop_id == Shop.id)
            .join(
                Employee,
                and_(Employee.id == EmployeeShop.employee_id, Employee.post_id == post_id),
            )
            .order_by(Shop.name.asc(), Employee.full_name.asc())
        )

        rows: list[PayrollInputs] = []
        for row in self._session.execute(statement).mappings():
            rows.append(
                PayrollInputs(
                    employee_id=str(row["employee_id"]),
                    employee_name=str(row["employee_name"]),
                    shop_id=str(row["shop_id"]),
                    shop_name=str(row["shop_name"]),
                    recruitment_date=self._to_optional_date(row["recruitment_date"]),
                    base_salary=self._to_optional_decimal(row["base_salary"]),
                    monthly_sales=self._to_optional_decimal(row["monthly_sales"]),
                    evaluation_score=self._to_optional_decimal(row["evaluation_score"]),
                    stored_evaluation_bonus=self._to_optional_decimal(
                        row["stored_evaluation_bonus"]
                    ),
                    salary_advance=self._to_optional_decimal(row["salary_advance"]),
                    sanctions=self._to_optional_decimal(row["sanctions"]),
                    inventory_shortage=self._to_optional_decimal(row["inventory_shortage"]),
                    register_difference=self._to_optional_decimal(row["register_difference"]),
                )
            )
        return rows

    def list_bonus_tiers(self) -> list[BonusTierRule]:
        statement = select(BonusTier).order_by(BonusTier.min_sales.asc())
        return [
            BonusTierRule(
                min_sales=self._to_decimal(tier.min_sales),
                bonus_percent=self._to_decimal(tier.bonus_percent),
            )
            for tier in self._session.execute(statement).scalars()
        ]

    def list_evaluation_ranges(self) -> list[EvaluationRange]:
        statement = select(TotalRange).order_by(TotalRange.min_value.asc())
        return [
            EvaluationRange(
                min_value=self._to_decimal(item.min_value),
                max_value=self._to_decimal(item.max_value),
                amount=self._to_decimal(item.amount),
            )
            for item in self._session.execute(statement).scalars()
        ]
