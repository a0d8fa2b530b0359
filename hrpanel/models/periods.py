"""ORM model for accounting months."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, UUIDPrimaryKeyMixin


class Month(UUIDPrimaryKeyMixin, Base):
    """One administrative month that operators open and close."""

    __tablename__ = "months"
    __table_args__ = (UniqueConstraint("year", "month", name="uq_months_year_month"),)

    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    is_open: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    opened_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    closed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        state = "open" if self.is_open else "closed"
        return f"<Month {self.year}-{self.month:02d} {state}>"
