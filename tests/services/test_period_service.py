"""Month lifecycle behaviour of ``PeriodService``."""
from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest
from sqlalchemy import func, select

from hrpanel.domain.periods import ClosePeriod, CreatePeriod, OpenPeriod, UpdateNotes
from hrpanel.exceptions import DuplicatePeriodError, InvalidInputError, PeriodNotFoundError
from hrpanel.models import Month, StoreManagementSnapshot
from hrpanel.services import PeriodService, SnapshotArchiver


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(minutes=1)
        return self.now


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 3, 10, 9, 0))


@pytest.fixture()
def service(session, clock, payroll_settings) -> PeriodService:
    return PeriodService(
        session,
        archiver=SnapshotArchiver(session, settings=payroll_settings),
        clock=clock,
    )


def test_create_period_starts_closed(service) -> None:
    period = service.create_period(2024, 3, "  first quarter ")

    assert period.is_open is False
    assert period.opened_at is None
    assert period.notes == "first quarter"
    assert period.label == "March 2024"


def test_second_create_for_same_month_is_rejected(service, session) -> None:
    service.create_period(2024, 3)

    with pytest.raises(DuplicatePeriodError):
        service.create_period(2024, 3)

    count = session.execute(select(func.count()).select_from(Month)).scalar_one()
    assert count == 1


def test_create_collects_validation_errors(service) -> None:
    with pytest.raises(InvalidInputError) as excinfo:
        service.create_period(1999, 13)

    assert excinfo.value.errors == ("Invalid year", "Invalid month")


@pytest.mark.parametrize(
    ("year", "month", "errors"),
    [
        (None, None, ("Invalid year", "Invalid month")),
        (None, 3, ("Invalid year",)),
        (2024, None, ("Invalid month",)),
    ],
)
def test_create_rejects_missing_year_or_month(service, session, year, month, errors) -> None:
    with pytest.raises(InvalidInputError) as excinfo:
        service.create_period(year, month)

    assert excinfo.value.errors == errors
    assert session.execute(select(func.count()).select_from(Month)).scalar_one() == 0


def test_open_without_shops_opens_with_warning(service) -> None:
    period = service.create_period(2024, 3)

    result = service.open_period(period.id)

    assert result.period.is_open is True
    assert result.period.opened_at is not None
    assert result.snapshot.success is False
    assert result.warning is not None
    assert str(result.warning) == "No shops found to snapshot"
    assert service.is_open(3, 2024) is True


def test_open_archives_previous_month(service, session, seed) -> None:
    seed.posts()
    shop = seed.shop("Central")
    seed.employee("Amina", shop=shop, recruitment_date=date(2020, 1, 1))
    period = service.create_period(2024, 3)

    result = service.open_period(period.id)

    assert result.warning is None
    assert result.snapshot.records_created == 1
    snapshot_dates = session.execute(select(StoreManagementSnapshot.snapshot_date)).scalars().all()
    assert snapshot_dates == [date(2024, 2, 29)]


def test_close_then_reopen(service) -> None:
    period = service.create_period(2024, 3)
    service.open_period(period.id)

    closed = service.close_period(period.id)
    assert closed.is_open is False
    assert closed.closed_at is not None
    assert service.is_open(3, 2024) is False

    reopened = service.open_period(period.id)
    assert reopened.period.is_open is True
    assert reopened.period.closed_at is None


def test_is_open_false_for_unknown_or_closed_month(service) -> None:
    assert service.is_open(4, 2024) is False
    service.create_period(2024, 4)
    assert service.is_open(4, 2024) is False


def test_update_notes(service) -> None:
    period = service.create_period(2024, 3, "draft")

    updated = service.update_notes(period.id, "  inventory pending ")

    assert updated.notes == "inventory pending"


def test_unknown_period_raises_not_found(service) -> None:
    with pytest.raises(PeriodNotFoundError):
        service.open_period("missing")
    with pytest.raises(PeriodNotFoundError):
        service.close_period("missing")


def test_list_periods_orders_by_most_recently_opened(service) -> None:
    january = service.create_period(2024, 1)
    february = service.create_period(2024, 2)
    service.create_period(2023, 12)
    service.open_period(january.id)
    service.open_period(february.id)

    labels = [period.label for period in service.list_periods()]

    assert labels == ["February 2024", "January 2024", "December 2023"]


def test_list_open_periods_orders_year_desc_month_asc(service) -> None:
    for year, month in [(2023, 12), (2024, 2), (2024, 1)]:
        period = service.create_period(year, month)
        service.open_period(period.id)

    labels = [period.label for period in service.list_open_periods()]

    assert labels == ["January 2024", "February 2024", "December 2023"]


def test_resolve_default_period_prefers_requested_open_month(service) -> None:
    march = service.create_period(2024, 3)
    january = service.create_period(2024, 1)
    service.open_period(march.id)
    service.open_period(january.id)

    assert service.resolve_default_period(3, 2024) == (3, 2024)
    # Closed or unknown request falls back to the latest opened month.
    assert service.resolve_default_period(5, 2024) == (1, 2024)


def test_resolve_default_period_without_open_months(service) -> None:
    service.create_period(2024, 1)

    assert service.resolve_default_period(5, 2024) == (5, 2024)
    assert service.resolve_default_period(today=date(2024, 7, 4)) == (7, 2024)


def test_suggest_next_period(service) -> None:
    today = date(2024, 3, 10)
    assert service.suggest_next_period(today=today) == (3, 2024)

    service.create_period(2024, 3)
    assert service.suggest_next_period(today=today) == (4, 2024)


def test_handle_dispatches_each_command(service) -> None:
    created = service.handle(CreatePeriod(year=2024, month=3, notes=""))
    assert created.message == "March 2024 created successfully"

    period_id = service.list_periods()[0].id

    opened = service.handle(OpenPeriod(period_id=period_id))
    assert opened.message == "March 2024 opened successfully"
    assert opened.warnings == ("No shops found to snapshot",)

    noted = service.handle(UpdateNotes(period_id=period_id, notes="ok"))
    assert noted.message == "Notes updated for March 2024"

    closed = service.handle(ClosePeriod(period_id=period_id))
    assert closed.message == "March 2024 closed successfully"
    assert closed.warnings == ()
