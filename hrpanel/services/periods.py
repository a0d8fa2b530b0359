"""Month lifecycle: create, open (with archiving), close and annotate months."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from hrpanel.core.logger import get_logger
from hrpanel.domain.calendar import is_valid_period, next_month
from hrpanel.domain.periods import (
    ClosePeriod,
    CreatePeriod,
    OpenPeriod,
    OpenPeriodResult,
    PeriodCommand,
    PeriodInfo,
    UpdateNotes,
)
from hrpanel.exceptions import (
    DatabaseError,
    DuplicatePeriodError,
    InvalidInputError,
    PeriodNotFoundError,
)
from hrpanel.models import Month
from hrpanel.repositories import MonthRepository

from .snapshots import SnapshotArchiver

LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CommandOutcome:
    """What an operator should be told after a month command."""

    message: str
    warnings: tuple[str, ...] = ()


class PeriodService:
    """Owns the ``months`` table; the only writer of month state.

    State machine per month: created Closed, ``open_period`` → Open,
    ``close_period`` → Closed, repeatable. Opening archives the previous
    month's shop management first; an archiving failure is returned as a
    warning and the month opens anyway.
    """

    def __init__(
        self,
        session: Session,
        *,
        archiver: SnapshotArchiver | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._session = session
        self._repository = MonthRepository(session)
        self._archiver = archiver or SnapshotArchiver(session)
        self._clock = clock

    # Queries -----------------------------------------------------------

    def list_periods(self) -> list[PeriodInfo]:
        return [PeriodInfo.from_row(row) for row in self._repository.list_all()]

    def list_open_periods(self) -> list[PeriodInfo]:
        return [PeriodInfo.from_row(row) for row in self._repository.list_open()]

    def is_open(self, month: int, year: int) -> bool:
        return self._repository.is_open(month, year)

    def resolve_default_period(
        self,
        month: int | None = None,
        year: int | None = None,
        *,
        today: date | None = None,
    ) -> tuple[int, int]:
        """Pick the ``(month, year)`` a page should work on.

        The requested month when it is open, else the most recently opened
        open month, else the requested (or current) month.
        """

        today = today or self._clock().date()
        requested_month = month or today.month
        requested_year = year or today.year
        if self._repository.is_open(requested_month, requested_year):
            return requested_month, requested_year
        latest = self._repository.latest_opened()
        if latest is not None:
            return latest.month, latest.year
        return requested_month, requested_year

    def suggest_next_period(self, *, today: date | None = None) -> tuple[int, int]:
        """Current month, or the following one when the current month exists."""

        today = today or self._clock().date()
        if self._repository.exists(today.year, today.month):
            return next_month(today.month, today.year)
        return today.month, today.year

    # Commands ----------------------------------------------------------

    @staticmethod
    def _validated_period(year: int | None, month: int | None) -> tuple[int, int]:
        """Return ``(year, month)`` or raise with every problem found."""

        errors: list[str] = []
        if year is None or not is_valid_period(year, 1):
            errors.append("Invalid year")
        if month is None or not is_valid_period(2000, month):
            errors.append("Invalid month")
        if errors or year is None or month is None:
            raise InvalidInputError(errors)
        return year, month

    def create_period(self, year: int | None, month: int | None, notes: str = "") -> PeriodInfo:
        year, month = self._validated_period(year, month)

        if self._repository.exists(year, month):
            raise DuplicatePeriodError(year, month)

        try:
            row = self._repository.add(year, month, notes.strip())
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            raise DuplicatePeriodError(year, month) from exc
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise DatabaseError(str(exc)) from exc

        LOGGER.info("Month created", extra={"year": year, "month": month, "period_id": row.id})
        return PeriodInfo.from_row(row)

    def open_period(self, period_id: str) -> OpenPeriodResult:
        row = self._require(period_id)
        year, month = row.year, row.month

        snapshot = self._archiver.archive_prior_month(month, year)

        try:
            # The archiver may have rolled back; reload before writing.
            row = self._require(period_id)
            row.is_open = True
            row.opened_at = self._clock()
            row.closed_at = None
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise DatabaseError(str(exc)) from exc

        LOGGER.info(
            "Month opened",
            extra={
                "period_id": period_id,
                "year": year,
                "month": month,
                "snapshot": snapshot.message,
                "snapshot_ok": snapshot.success,
            },
        )
        return OpenPeriodResult(period=PeriodInfo.from_row(row), snapshot=snapshot)

    def close_period(self, period_id: str) -> PeriodInfo:
        row = self._require(period_id)
        try:
            row.is_open = False
            row.closed_at = self._clock()
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise DatabaseError(str(exc)) from exc
        LOGGER.info("Month closed", extra={"period_id": period_id})
        return PeriodInfo.from_row(row)

    def update_notes(self, period_id: str, notes: str) -> PeriodInfo:
        row = self._require(period_id)
        try:
            row.notes = notes.strip()
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise DatabaseError(str(exc)) from exc
        return PeriodInfo.from_row(row)

    def handle(self, command: PeriodCommand) -> CommandOutcome:
        """Run one operator command."""

        match command:
            case CreatePeriod(year=year, month=month, notes=notes):
                period = self.create_period(year, month, notes)
                return CommandOutcome(f"{period.label} created successfully")
            case OpenPeriod(period_id=period_id):
                result = self.open_period(period_id)
                warning = result.warning
                return CommandOutcome(
                    f"{result.period.label} opened successfully",
                    warnings=(str(warning),) if warning is not None else (),
                )
            case ClosePeriod(period_id=period_id):
                period = self.close_period(period_id)
                return CommandOutcome(f"{period.label} closed successfully")
            case UpdateNotes(period_id=period_id, notes=notes):
                period = self.update_notes(period_id, notes)
                return CommandOutcome(f"Notes updated for {period.label}")
        raise InvalidInputError([f"Unsupported command: {type(command).__name__}"])

    def _require(self, period_id: str) -> Month:
        try:
            row = self._repository.get(period_id)
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise DatabaseError(str(exc)) from exc
        if row is None:
            raise PeriodNotFoundError(period_id)
        return row


__all__ = ["CommandOutcome", "PeriodService"]
