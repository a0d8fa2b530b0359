"""Live staffing tables owned by the CRUD screens and read here."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, UUIDPrimaryKeyMixin


class Post(UUIDPrimaryKeyMixin, Base):
    """Job position such as Manager or Assistant Manager."""

    __tablename__ = "posts"

    title: Mapped[str] = mapped_column(String(255), nullable=False)


class Recommender(UUIDPrimaryKeyMixin, Base):
    """Person who recommended an employee for hire."""

    __tablename__ = "recommenders"

    name: Mapped[str] = mapped_column(String(255), nullable=False)


class Shop(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "shops"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str | None] = mapped_column(Text)


class Employee(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "employees"

    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    post_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("posts.id", ondelete="SET NULL")
    )
    recruitment_date: Mapped[date | None] = mapped_column(Date)
    end_of_service_date: Mapped[date | None] = mapped_column(Date)
    recommended_by_id: Mapped[str | None] = mapped_column(String(36))
    base_salary: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))


class EmployeeShop(Base):
    """Assignment of an employee to a shop."""

    __tablename__ = "employee_shops"

    employee_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("employees.id", ondelete="CASCADE"), primary_key=True
    )
    shop_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("shops.id", ondelete="CASCADE"), primary_key=True
    )
