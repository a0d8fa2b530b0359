"""Typed errors raised by the HR panel services.

Every error carries a machine readable ``code``. Routers turn them into flash
messages; services never format user-facing text beyond ``str(exc)``.

    HRPanelError
    +-- InvalidInputError       (validation, collected messages)
    |   +-- ConfigurationError  (bonus tiers, evaluation ranges)
    +-- PeriodError
    |   +-- DuplicatePeriodError
    |   +-- PeriodNotFoundError
    +-- RecordNotFoundError     (bonus tiers, evaluation ranges)
    +-- DatabaseError           (wraps SQLAlchemyError)
    +-- SnapshotWarning         (non-fatal, returned alongside an open)
"""
from __future__ import annotations

from typing import Iterable


class HRPanelError(Exception):
    """Base class for every error the panel reports to an operator."""

    code: str = "HRPANEL_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(HRPanelError):
    """One or more submitted values failed validation before any write."""

    code = "INVALID_INPUT"

    def __init__(self, errors: Iterable[str]) -> None:
        self.errors: tuple[str, ...] = tuple(errors)
        super().__init__("; ".join(self.errors) or "Invalid input")


class PeriodError(HRPanelError):
    """Base class for month lifecycle errors."""

    code = "PERIOD_ERROR"


class DuplicatePeriodError(PeriodError):
    """A month already exists for the requested year and month."""

    code = "DUPLICATE_PERIOD"

    def __init__(self, year: int, month: int) -> None:
        self.year = year
        self.month = month
        super().__init__(f"Month {month:02d}/{year} already exists")


class PeriodNotFoundError(PeriodError):
    """No month matches the supplied identifier."""

    code = "PERIOD_NOT_FOUND"

    def __init__(self, period_id: str) -> None:
        self.period_id = period_id
        super().__init__(f"Month {period_id} not found")


class ConfigurationError(InvalidInputError):
    """A bonus tier or evaluation range submission was rejected."""

    code = "INVALID_CONFIGURATION"


class RecordNotFoundError(HRPanelError):
    """A configuration row (bonus tier, evaluation range) does not exist."""

    code = "RECORD_NOT_FOUND"


class DatabaseError(HRPanelError):
    """An underlying query or write failed."""

    code = "DATABASE_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(f"Database error: {message}")


class SnapshotWarning(HRPanelError):
    """Archiving the previous month failed or produced nothing.

    Never raised through ``PeriodService.open_period``; it is attached to the
    open result so the month still opens.
    """

    code = "SNAPSHOT_WARNING"


__all__ = [
    "ConfigurationError",
    "DatabaseError",
    "DuplicatePeriodError",
    "HRPanelError",
    "InvalidInputError",
    "PeriodError",
    "PeriodNotFoundError",
    "RecordNotFoundError",
    "SnapshotWarning",
]
