"""Persistence for bonus tiers and evaluation score ranges."""
from __future__ import annotations

from decimal import Decimal

from sqlalchemy import and_, delete, func, or_, select, update

from hrpanel.models import BonusTier, TotalRange

from .base import BaseRepository


class BonusTierRepository(BaseRepository):
    def list_all(self) -> list[BonusTier]:
        return list(
            self._session.execute(select(BonusTier).order_by(BonusTier.min_sales.asc())).scalars()
        )

    def exists(self, min_sales: Decimal) -> bool:
        count = self._session.execute(
            select(func.count()).select_from(BonusTier).where(BonusTier.min_sales == min_sales)
        ).scalar_one()
        return int(count or 0) > 0

    def add(self, min_sales: Decimal, bonus_percent: Decimal) -> None:
        self._session.add(BonusTier(min_sales=min_sales, bonus_percent=bonus_percent))
        self._session.flush()

    def update(self, old_min_sales: Decimal, min_sales: Decimal, bonus_percent: Decimal) -> int:
        result = self._session.execute(
            update(BonusTier)
            .where(BonusTier.min_sales == old_min_sales)
            .values(min_sales=min_sales, bonus_percent=bonus_percent)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)

    def delete(self, min_sales: Decimal) -> int:
        result = self._session.execute(delete(BonusTier).where(BonusTier.min_sales == min_sales))
        return int(result.rowcount or 0)


class EvaluationRangeRepository(BaseRepository):
    def list_all(self) -> list[TotalRange]:
        return list(
            self._session.execute(select(TotalRange).order_by(TotalRange.min_value.asc())).scalars()
        )

    def get(self, range_id: int) -> TotalRange | None:
        return self._session.get(TotalRange, range_id)

    def count_overlapping(
        self, min_value: Decimal, max_value: Decimal, *, exclude_id: int | None = None
    ) -> int:
        """Ranges sharing at least one value with ``[min_value, max_value]``."""

        overlap = or_(
            and_(TotalRange.min_value <= min_value, TotalRange.max_value >= min_value),
            and_(TotalRange.min_value <= max_value, TotalRange.max_value >= max_value),
            and_(TotalRange.min_value >= min_value, TotalRange.max_value <= max_value),
        )
        statement = select(func.count()).select_from(TotalRange).where(overlap)
        if exclude_id is not None:
            statement = statement.where(TotalRange.id != exclude_id)
        return int(self._session.execute(statement).scalar_one() or 0)

    def add(self, min_value: Decimal, max_value: Decimal, amount: Decimal) -> TotalRange:
        row = TotalRange(min_value=min_value, max_value=max_value, amount=amount)
        self._session.add(row)
        self._session.flush()
        return row

    def delete(self, range_id: int) -> int:
        result = self._session.execute(delete(TotalRange).where(TotalRange.id == range_id))
        return int(result.rowcount or 0)
