"""Store management report: live assignments or an archived month."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hrpanel.core.config import PayrollSettings, get_settings
from hrpanel.core.logger import get_logger, timeit
from hrpanel.domain.calendar import month_bounds, month_label, service_duration
from hrpanel.exceptions import DatabaseError
from hrpanel.repositories import ShopAssignmentRow, StoreManagementRepository

LOGGER = get_logger(__name__)

NO_SNAPSHOT_MESSAGE = (
    "No data available for {label}. Snapshots start from the month following "
    "the opening of a new month."
)


@dataclass(frozen=True, slots=True)
class StoreManagementRow:
    assignment: ShopAssignmentRow
    manager_duration: tuple[int, int] | None
    assistant_duration: tuple[int, int] | None


@dataclass(frozen=True, slots=True)
class StoreManagementReport:
    month: int
    year: int
    is_historical: bool
    rows: tuple[StoreManagementRow, ...]
    available_months: tuple[tuple[int, int], ...]
    message: str | None = None

    @property
    def label(self) -> str:
        return month_label(self.year, self.month)


def _duration(
    recruitment_date: date | None, end_date: date | None, reference: date
) -> tuple[int, int] | None:
    if recruitment_date is None:
        return None
    return service_duration(recruitment_date, end_date or reference)


class StoreManagementReportService:
    """Choose between live assignments and snapshots for a requested month.

    The current calendar month reads live data; every other month reads the
    archived snapshot dated inside it.
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
        self._today = today or date.today()
        self._repository = StoreManagementRepository(session)

    def available_months(self) -> tuple[tuple[int, int], ...]:
        """``(month, year)`` pairs with archived data, newest first."""

        seen: list[tuple[int, int]] = []
        for snapshot_date in self._repository.list_snapshot_dates():
            key = (snapshot_date.month, snapshot_date.year)
            if key not in seen:
                seen.append(key)
        return tuple(seen)

    def build_report(self, month: int | None = None, year: int | None = None) -> StoreManagementReport:
        month = month or self._today.month
        year = year or self._today.year
        is_historical = (month, year) != (self._today.month, self._today.year)

        with timeit(f"Store management report {month:02d}/{year}", logger=LOGGER) as timer:
            try:
                self._repository.ensure_snapshot_table()
                available = self.available_months()
                if is_historical:
                    start, end = month_bounds(year, month)
                    assignments = self._repository.fetch_snapshot(start, end)
                else:
                    assignments = self._repository.fetch_live_assignments(
                        manager_post_id=self._settings.manager_post_id,
                        assistant_post_id=self._settings.assistant_manager_post_id,
                    )
            except SQLAlchemyError as exc:
                self._session.rollback()
                raise DatabaseError(str(exc)) from exc
            timer.add(len(assignments))

        rows = []
        for assignment in assignments:
            reference = assignment.snapshot_date if is_historical else self._today
            reference = reference or self._today
            rows.append(
                StoreManagementRow(
                    assignment=assignment,
                    manager_duration=_duration(
                        assignment.manager_recruitment_date, assignment.manager_end_date, reference
                    ),
                    assistant_duration=_duration(
                        assignment.assistant_recruitment_date,
                        assignment.assistant_end_date,
                        reference,
                    ),
                )
            )

        message = None
        if is_historical and not rows:
            message = NO_SNAPSHOT_MESSAGE.format(label=month_label(year, month))

        LOGGER.info(
            "Store management report generated",
            extra={"year": year, "month": month, "historical": is_historical, "shops": len(rows)},
        )
        return StoreManagementReport(
            month=month,
            year=year,
            is_historical=is_historical,
            rows=tuple(rows),
            available_months=available,
            message=message,
        )


__all__ = [
    "StoreManagementReport",
    "StoreManagementReportService",
    "StoreManagementRow",
]
