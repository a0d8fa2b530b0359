"""Monthly operational inputs to payroll: sales, evaluations and debts."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, UUIDPrimaryKeyMixin


class MonthlySale(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "monthly_sales"

    shop_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    sales_month: Mapped[date] = mapped_column(Date, nullable=False)
    sales_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)


class EmployeeEvaluation(UUIDPrimaryKeyMixin, Base):
    """Monthly evaluation of an employee; ``bonus_amount`` overrides range lookup."""

    __tablename__ = "employee_evaluations"

    employee_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    evaluation_month: Mapped[date] = mapped_column(Date, nullable=False)
    total_score: Mapped[Decimal | None] = mapped_column(Numeric(8, 2))
    bonus_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))


class ManagerDebt(UUIDPrimaryKeyMixin, Base):
    """Deductions recorded against a manager for one month."""

    __tablename__ = "manager_debts"

    employee_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    evaluation_month: Mapped[date] = mapped_column(Date, nullable=False)
    salary_advance: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    sanction: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    inventory_month: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    cash_discrepancy: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
