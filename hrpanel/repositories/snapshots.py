"""Live and archived shop management assignments."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, NamedTuple

from sqlalchemy import func, select

from hrpanel.models import (
    Employee,
    EmployeeShop,
    Post,
    Recommender,
    Shop,
    StoreManagementSnapshot,
)

from .base import BaseRepository


@dataclass(frozen=True)
class ShopAssignmentRow:
    """Manager and assistant manager of one shop, live or archived."""

    shop_id: str
    shop_name: str
    shop_location: str | None
    manager_id: str | None
    manager_name: str | None
    manager_recruitment_date: date | None
    manager_end_date: date | None
    manager_recommender: str | None
    manager_position: str | None
    assistant_id: str | None
    assistant_name: str | None
    assistant_recruitment_date: date | None
    assistant_end_date: date | None
    assistant_position: str | None
    snapshot_date: date | None = None


class _Holder(NamedTuple):
    employee: Employee
    title: str | None
    recommender: str | None


class StoreManagementRepository(BaseRepository):
    """Reads live assignments and reads/writes ``store_management_snapshots``."""

    def ensure_snapshot_table(self) -> None:
        """Create the snapshot table when the schema predates it."""

        StoreManagementSnapshot.__table__.create(bind=self._session.connection(), checkfirst=True)

    def count_snapshots_between(self, start: date, end: date) -> int:
        """Snapshot rows with ``start <= snapshot_date < end``."""

        count = self._session.execute(
            select(func.count())
            .select_from(StoreManagementSnapshot)
            .where(
                StoreManagementSnapshot.snapshot_date >= start,
                StoreManagementSnapshot.snapshot_date < end,
            )
        ).scalar_one()
        return int(count or 0)

    def fetch_live_assignments(
        self,
        *,
        manager_post_id: str,
        assistant_post_id: str,
    ) -> list[ShopAssignmentRow]:
        """Every shop with its current manager and assistant manager, if any.

        When several employees of a shop hold the same post, the longest
        serving one (earliest recruitment, then lowest id) is reported, so
        every column of a row describes the same person.
        """

        shops = self._session.execute(select(Shop).order_by(Shop.name.asc())).scalars().all()

        holders_statement = (
            select(EmployeeShop.shop_id, Employee, Post.title, Recommender.name)
            .join(Employee, Employee.id == EmployeeShop.employee_id)
            .outerjoin(Post, Post.id == Employee.post_id)
            .outerjoin(Recommender, Recommender.id == Employee.recommended_by_id)
            .where(Employee.post_id.in_((manager_post_id, assistant_post_id)))
            .order_by(
                Employee.recruitment_date.is_(None),
                Employee.recruitment_date.asc(),
                Employee.id.asc(),
            )
        )
        holders: dict[tuple[str, str], _Holder] = {}
        for shop_id, employee, title, recommender in self._session.execute(holders_statement):
            holders.setdefault(
                (str(shop_id), str(employee.post_id)), _Holder(employee, title, recommender)
            )

        rows: list[ShopAssignmentRow] = []
        for shop in shops:
            manager = holders.get((shop.id, manager_post_id))
            assistant = holders.get((shop.id, assistant_post_id))
            rows.append(
                ShopAssignmentRow(
                    shop_id=shop.id,
                    shop_name=shop.name,
                    shop_location=shop.location,
                    manager_id=manager.employee.id if manager else None,
                    manager_name=manager.employee.full_name if manager else None,
                    manager_recruitment_date=(
                        manager.employee.recruitment_date if manager else None
                    ),
                    manager_end_date=manager.employee.end_of_service_date if manager else None,
                    manager_recommender=manager.recommender if manager else None,
                    manager_position=manager.title if manager else None,
                    assistant_id=assistant.employee.id if assistant else None,
                    assistant_name=assistant.employee.full_name if assistant else None,
                    assistant_recruitment_date=(
                        assistant.employee.recruitment_date if assistant else None
                    ),
                    assistant_end_date=(
                        assistant.employee.end_of_service_date if assistant else None
                    ),
                    assistant_position=assistant.title if assistant else None,
                )
            )
        return rows

    def insert_snapshots(self, snapshot_date: date, rows: Iterable[ShopAssignmentRow]) -> int:
        created = 0
        for row in rows:
            self._session.add(
                StoreManagementSnapshot(
                    snapshot_date=snapshot_date,
                    shop_id=row.shop_id,
                    shop_name=row.shop_name,
                    shop_location=row.shop_location,
                    manager_id=row.manager_id,
                    manager_name=row.manager_name,
                    manager_recruitment_date=row.manager_recruitment_date,
                    manager_end_date=row.manager_end_date,
                    manager_recommender=row.manager_recommender,
                    manager_position=row.manager_position,
                    assistant_id=row.assistant_id,
                    assistant_name=row.assistant_name,
                    assistant_recruitment_date=row.assistant_recruitment_date,
                    assistant_end_date=row.assistant_end_date,
                    assistant_position=row.assistant_position,
                )
            )
            created += 1
        self._session.flush()
        return created

    def fetch_snapshot(self, start: date, end: date) -> list[ShopAssignmentRow]:
        statement = (
            select(StoreManagementSnapshot)
            .where(
                StoreManagementSnapshot.snapshot_date >= start,
                StoreManagementSnapshot.snapshot_date < end,
            )
            .order_by(StoreManagementSnapshot.shop_name.asc())
        )
        return [
            ShopAssignmentRow(
                shop_id=snapshot.shop_id,
                shop_name=snapshot.shop_name,
                shop_location=snapshot.shop_location,
                manager_id=snapshot.manager_id,
                manager_name=snapshot.manager_name,
                manager_recruitment_date=snapshot.manager_recruitment_date,
                manager_end_date=snapshot.manager_end_date,
                manager_recommender=snapshot.manager_recommender,
                manager_position=snapshot.manager_position,
                assistant_id=snapshot.assistant_id,
                assistant_name=snapshot.assistant_name,
                assistant_recruitment_date=snapshot.assistant_recruitment_date,
                assistant_end_date=snapshot.assistant_end_date,
                assistant_position=snapshot.assistant_position,
                snapshot_date=snapshot.snapshot_date,
            )
            for snapshot in self._session.execute(statement).scalars()
        ]

    def list_snapshot_dates(self) -> list[date]:
        """Distinct snapshot dates, newest first."""

        statement = (
            select(StoreManagementSnapshot.snapshot_date)
            .distinct()
            .order_by(StoreManagementSnapshot.snapshot_date.desc())
        )
        return [value for value in self._session.execute(statement).scalars() if value is not None]
