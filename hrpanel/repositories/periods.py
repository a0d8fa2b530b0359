"""Persistence for accounting months."""
from __future__ import annotations

from sqlalchemy import func, select

from hrpanel.models import Month

from .base import BaseRepository


class MonthRepository(BaseRepository):
    """Queries and writes against the ``months`` table."""

    def get(self, period_id: str) -> Month | None:
        return self._session.get(Month, period_id)

    def exists(self, year: int, month: int) -> bool:
        count = self._session.execute(
            select(func.count())
            .select_from(Month)
            .where(Month.year == year, Month.month == month)
        ).scalar_one()
        return int(count or 0) > 0

    def add(self, year: int, month: int, notes: str) -> Month:
        row = Month(year=year, month=month, notes=notes, is_open=False)
        self._session.add(row)
        self._session.flush()
        return row

    def list_all(self) -> list[Month]:
        """All months, most recently opened first."""

        statement = select(Month).order_by(
            Month.opened_at.is_(None),
            Month.opened_at.desc(),
            Month.year.desc(),
            Month.month.desc(),
        )
        return list(self._session.execute(statement).scalars())

    def list_open(self) -> list[Month]:
        statement = (
            select(Month)
            .where(Month.is_open.is_(True))
            .order_by(Month.year.desc(), Month.month.asc())
        )
        return list(self._session.execute(statement).scalars())

    def latest_opened(self) -> Month | None:
        """The open month whose ``opened_at`` is the most recent."""

        statement = (
            select(Month)
            .where(Month.is_open.is_(True))
            .order_by(
                Month.opened_at.is_(None),
                Month.opened_at.desc(),
                Month.year.desc(),
                Month.month.desc(),
            )
            .limit(1)
        )
        return self._session.execute(statement).scalars().first()

    def is_open(self, month: int, year: int) -> bool:
        count = self._session.execute(
            select(func.count())
            .select_from(Month)
            .where(Month.year == year, Month.month == month, Month.is_open.is_(True))
        ).scalar_one()
        return int(count or 0) > 0
