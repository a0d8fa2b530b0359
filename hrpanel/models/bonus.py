"""Lookup tables driving the sales and evaluation bonuses."""
from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class BonusTier(Base):
    """Sales threshold and the percentage paid once it is reached."""

    __tablename__ = "bonus_tiers"

    min_sales: Mapped[Decimal] = mapped_column(Numeric(12, 2), primary_key=True)
    bonus_percent: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)


class TotalRange(Base):
    """Inclusive evaluation score range paying a flat amount."""

    __tablename__ = "total_ranges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    min_value: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    max_value: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
