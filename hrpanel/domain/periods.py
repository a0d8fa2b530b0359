"""Month lifecycle value objects and the commands operators submit."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Union

from hrpanel.exceptions import InvalidInputError, SnapshotWarning

from .calendar import month_label


@dataclass(frozen=True, slots=True)
class PeriodInfo:
    """Read-only view of a month row."""

    id: str
    year: int
    month: int
    is_open: bool
    opened_at: datetime | None
    closed_at: datetime | None
    notes: str

    @property
    def label(self) -> str:
        return month_label(self.year, self.month)

    @classmethod
    def from_row(cls, row: object) -> "PeriodInfo":
        return cls(
            id=str(getattr(row, "id")),
            year=int(getattr(row, "year")),
            month=int(getattr(row, "month")),
            is_open=bool(getattr(row, "is_open")),
            opened_at=getattr(row, "opened_at"),
            closed_at=getattr(row, "closed_at"),
            notes=getattr(row, "notes") or "",
        )


@dataclass(frozen=True, slots=True)
class SnapshotResult:
    """Outcome of archiving the month before an opened period."""

    success: bool
    message: str
    records_created: int = 0

    def as_warning(self) -> SnapshotWarning | None:
        if self.success:
            return None
        return SnapshotWarning(self.message)


@dataclass(frozen=True, slots=True)
class OpenPeriodResult:
    period: PeriodInfo
    snapshot: SnapshotResult

    @property
    def warning(self) -> SnapshotWarning | None:
        return self.snapshot.as_warning()


@dataclass(frozen=True, slots=True)
class CreatePeriod:
    year: int | None
    month: int | None
    notes: str = ""


@dataclass(frozen=True, slots=True)
class OpenPeriod:
    period_id: str


@dataclass(frozen=True, slots=True)
class ClosePeriod:
    period_id: str


@dataclass(frozen=True, slots=True)
class UpdateNotes:
    period_id: str
    notes: str = ""


PeriodCommand = Union[CreatePeriod, OpenPeriod, ClosePeriod, UpdateNotes]


def _optional_int(value: str | None) -> int | None:
    if value is None or not str(value).strip():
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _required_id(form: Mapping[str, str]) -> str:
    period_id = (form.get("id") or "").strip()
    if not period_id:
        raise InvalidInputError(["Invalid month identifier"])
    return period_id


def parse_command(form: Mapping[str, str]) -> PeriodCommand:
    """Translate a submitted form into a month command.

    Raises:
        InvalidInputError: unknown ``action`` or a missing month identifier.
    """

    action = (form.get("action") or "").strip()
    notes = (form.get("notes") or "").strip()
    if action == "create":
        return CreatePeriod(
            year=_optional_int(form.get("year")),
            month=_optional_int(form.get("month")),
            notes=notes,
        )
    if action == "open":
        return OpenPeriod(period_id=_required_id(form))
    if action == "close":
        return ClosePeriod(period_id=_required_id(form))
    if action == "update_notes":
        return UpdateNotes(period_id=_required_id(form), notes=notes)
    raise InvalidInputError([f"Unknown action: {action or '<empty>'}"])


__all__ = [
    "ClosePeriod",
    "CreatePeriod",
    "OpenPeriod",
    "OpenPeriodResult",
    "PeriodCommand",
    "PeriodInfo",
    "SnapshotResult",
    "UpdateNotes",
    "parse_command",
]
