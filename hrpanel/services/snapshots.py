"""Archive shop management assignments of the month before an opened month."""
from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hrpanel.core.config import PayrollSettings, get_settings
from hrpanel.core.logger import get_logger
from hrpanel.domain.calendar import (
    last_day_of_month,
    month_bounds,
    month_label,
    previous_month,
)
from hrpanel.domain.periods import SnapshotResult
from hrpanel.repositories import StoreManagementRepository

LOGGER = get_logger(__name__)


class SnapshotArchiver:
    """Copy live shop → manager/assistant assignments into snapshot rows.

    The archiver flushes but never commits; ``PeriodService`` commits the
    snapshot together with the month it opens. On a database error it rolls
    the session back and reports the failure instead of raising.
    """

    def __init__(self, session: Session, *, settings: PayrollSettings | None = None) -> None:
        self._session = session
        self._settings = settings or get_settings().payroll
        self._repository = StoreManagementRepository(session)

    def archive_prior_month(self, current_month: int, current_year: int) -> SnapshotResult:
        prev_month, prev_year = previous_month(current_month, current_year)
        snapshot_date = last_day_of_month(prev_year, prev_month)
        label = month_label(prev_year, prev_month)
        start, end = month_bounds(prev_year, prev_month)

        try:
            self._repository.ensure_snapshot_table()
            if self._repository.count_snapshots_between(start, end) > 0:
                LOGGER.info("Snapshot already present", extra={"snapshot_date": str(snapshot_date)})
                return SnapshotResult(success=True, message=f"Snapshot already exists for {label}")

            rows = self._repository.fetch_live_assignments(
                manager_post_id=self._settings.manager_post_id,
                assistant_post_id=self._settings.assistant_manager_post_id,
            )
            if not rows:
                LOGGER.warning("No shops to snapshot", extra={"snapshot_date": str(snapshot_date)})
                return SnapshotResult(success=False, message="No shops found to snapshot")

            created = self._repository.insert_snapshots(snapshot_date, rows)
        except SQLAlchemyError as exc:
            self._session.rollback()
            LOGGER.exception("Failed to take store management snapshot")
            return SnapshotResult(success=False, message=f"Database error: {exc}")

        LOGGER.info(
            "Store management snapshot created",
            extra={"snapshot_date": str(snapshot_date), "records": created},
        )
        return SnapshotResult(
            success=True,
            message=f"Created {created} snapshot records for {label}",
            records_created=created,
        )


def archive_prior_month(
    session: Session,
    current_month: int,
    current_year: int,
    *,
    settings: PayrollSettings | None = None,
) -> SnapshotResult:
    """Functional entrypoint around :class:`SnapshotArchiver`."""

    return SnapshotArchiver(session, settings=settings).archive_prior_month(
        current_month, current_year
    )


__all__ = ["SnapshotArchiver", "archive_prior_month"]
