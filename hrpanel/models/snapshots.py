"""Archived shop management assignments.

Rows are copies, not references: shop, manager and assistant columns hold the
values as they were on ``snapshot_date`` and carry no foreign keys, so later
changes to live employees or shops never alter history.
"""
from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Date, DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, UUIDPrimaryKeyMixin


class StoreManagementSnapshot(UUIDPrimaryKeyMixin, Base):
    """Frozen manager/assistant assignment of one shop for one month."""

    __tablename__ = "store_management_snapshots"

    snapshot_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    shop_id: Mapped[str] = mapped_column(String(36), nullable=False)
    shop_name: Mapped[str] = mapped_column(Text, nullable=False)
    shop_location: Mapped[str | None] = mapped_column(Text)
    manager_id: Mapped[str | None] = mapped_column(String(36))
    manager_name: Mapped[str | None] = mapped_column(Text)
    manager_recruitment_date: Mapped[date | None] = mapped_column(Date)
    manager_end_date: Mapped[date | None] = mapped_column(Date)
    manager_recommender: Mapped[str | None] = mapped_column(Text)
    manager_position: Mapped[str | None] = mapped_column(Text)
    assistant_id: Mapped[str | None] = mapped_column(String(36))
    assistant_name: Mapped[str | None] = mapped_column(Text)
    assistant_recruitment_date: Mapped[date | None] = mapped_column(Date)
    assistant_end_date: Mapped[date | None] = mapped_column(Date)
    assistant_position: Mapped[str | None] = mapped_column(Text)
    opened_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.current_timestamp(), nullable=True
    )
