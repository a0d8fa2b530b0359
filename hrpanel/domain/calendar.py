"""Calendar helpers for month based accounting."""
from __future__ import annotations

import calendar
from datetime import date

MONTH_NAMES: dict[int, str] = {index: calendar.month_name[index] for index in range(1, 13)}

MIN_YEAR = 2000
MAX_YEAR = 2100


def previous_month(month: int, year: int) -> tuple[int, int]:
    """Return ``(month, year)`` of the calendar month before the given one."""

    if month <= 1:
        return 12, year - 1
    return month - 1, year


def next_month(month: int, year: int) -> tuple[int, int]:
    if month >= 12:
        return 1, year + 1
    return month + 1, year


def last_day_of_month(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first day of the month and the first day of the following month.

    Queries filter with ``start <= value < end`` so they work on any backend.
    """

    following_month, following_year = next_month(month, year)
    return date(year, month, 1), date(following_year, following_month, 1)


def month_label(year: int, month: int) -> str:
    return f"{MONTH_NAMES[month]} {year}"


def is_valid_period(year: int | None, month: int | None) -> bool:
    return (
        year is not None
        and month is not None
        and MIN_YEAR <= year <= MAX_YEAR
        and 1 <= month <= 12
    )


def service_duration(start: date, reference: date) -> tuple[int, int]:
    """Completed ``(years, months)`` between two dates, zero when ``reference`` is earlier."""

    months = (reference.year - start.year) * 12 + (reference.month - start.month)
    if reference.day < start.day:
        months -= 1
    if months < 0:
        return 0, 0
    return divmod(months, 12)
