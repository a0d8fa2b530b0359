"""Maintenance of the sales bonus tiers and evaluation score ranges."""
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Mapping

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from hrpanel.core.logger import get_logger
from hrpanel.exceptions import ConfigurationError, DatabaseError, RecordNotFoundError
from hrpanel.models import BonusTier, TotalRange
from hrpanel.repositories import BonusTierRepository, EvaluationRangeRepository
from hrpanel.schemas.settings import BonusTierForm, EvaluationRangeForm, parse_form

LOGGER = get_logger(__name__)


def _decimal_key(value: object, label: str) -> Decimal:
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ConfigurationError([f"Invalid {label}"]) from exc


def _range_id(value: object) -> int:
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise ConfigurationError(["Invalid range identifier"]) from exc


class BonusConfigService:
    """Validated writes to ``bonus_tiers`` and ``total_ranges``."""

    def __init__(self, session: Session) -> None:
        self._session = session
        self._tiers = BonusTierRepository(session)
        self._ranges = EvaluationRangeRepository(session)

    def list_tiers(self) -> list[BonusTier]:
        return self._tiers.list_all()

    def list_ranges(self) -> list[TotalRange]:
        return self._ranges.list_all()

    # Bonus tiers -------------------------------------------------------

    def add_tier(self, data: Mapping[str, object]) -> BonusTierForm:
        form = parse_form(BonusTierForm, data)
        if self._tiers.exists(form.min_sales):
            raise ConfigurationError(["Minimum sales: a tier with this threshold already exists"])
        self._write(lambda: self._tiers.add(form.min_sales, form.bonus_percent))
        LOGGER.info("Bonus tier added", extra={"min_sales": str(form.min_sales)})
        return form

    def update_tier(self, old_min_sales: object, data: Mapping[str, object]) -> BonusTierForm:
        old_key = _decimal_key(old_min_sales, "tier identifier")
        form = parse_form(BonusTierForm, data)
        if not self._tiers.exists(old_key):
            raise RecordNotFoundError(f"Bonus tier {old_key} not found")
        if form.min_sales != old_key and self._tiers.exists(form.min_sales):
            raise ConfigurationError(["Minimum sales: a tier with this threshold already exists"])
        self._write(lambda: self._tiers.update(old_key, form.min_sales, form.bonus_percent))
        LOGGER.info(
            "Bonus tier updated",
            extra={"old_min_sales": str(old_key), "min_sales": str(form.min_sales)},
        )
        return form

    def delete_tier(self, min_sales: object) -> None:
        key = _decimal_key(min_sales, "tier identifier")
        deleted = self._write(lambda: self._tiers.delete(key))
        if not deleted:
            raise RecordNotFoundError(f"Bonus tier {key} not found")
        LOGGER.info("Bonus tier deleted", extra={"min_sales": str(key)})

    # Evaluation ranges -------------------------------------------------

    def add_range(self, data: Mapping[str, object]) -> EvaluationRangeForm:
        form = parse_form(EvaluationRangeForm, data)
        if self._ranges.count_overlapping(form.min_value, form.max_value):
            raise ConfigurationError(["This range overlaps an existing range"])
        self._write(lambda: self._ranges.add(form.min_value, form.max_value, form.amount))
        LOGGER.info(
            "Evaluation range added",
            extra={"min_value": str(form.min_value), "max_value": str(form.max_value)},
        )
        return form

    def update_range(self, range_id: object, data: Mapping[str, object]) -> EvaluationRangeForm:
        key = _range_id(range_id)
        form = parse_form(EvaluationRangeForm, data)
        row = self._ranges.get(key)
        if row is None:
            raise RecordNotFoundError(f"Evaluation range {key} not found")
        if self._ranges.count_overlapping(form.min_value, form.max_value, exclude_id=key):
            raise ConfigurationError(["This range overlaps an existing range"])

        def _apply() -> None:
            row.min_value = form.min_value
            row.max_value = form.max_value
            row.amount = form.amount

        self._write(_apply)
        LOGGER.info("Evaluation range updated", extra={"range_id": key})
        return form

    def delete_range(self, range_id: object) -> None:
        key = _range_id(range_id)
        deleted = self._write(lambda: self._ranges.delete(key))
        if not deleted:
            raise RecordNotFoundError(f"Evaluation range {key} not found")
        LOGGER.info("Evaluation range deleted", extra={"range_id": key})

    def _write(self, operation):
        try:
            result = operation()
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            raise ConfigurationError(["This value conflicts with an existing entry"]) from exc
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise DatabaseError(str(exc)) from exc
        return result


__all__ = ["BonusConfigService"]
