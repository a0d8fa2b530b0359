"""Validated payloads for the bonus configuration screens."""
from __future__ import annotations

from decimal import Decimal
from typing import Mapping, TypeVar

from pydantic import BaseModel, Field, ValidationError, model_validator

from hrpanel.exceptions import ConfigurationError

_LABELS = {
    "min_sales": "Minimum sales",
    "bonus_percent": "Bonus percentage",
    "min_value": "Minimum value",
    "max_value": "Maximum value",
    "amount": "Amount",
}

FormT = TypeVar("FormT", bound=BaseModel)


class BonusTierForm(BaseModel):
    """One sales threshold and the percentage it pays."""

    min_sales: Decimal = Field(ge=0)
    bonus_percent: Decimal = Field(ge=0, le=100)


class EvaluationRangeForm(BaseModel):
    """Inclusive evaluation score range and its flat bonus."""

    min_value: Decimal = Field(ge=0)
    max_value: Decimal = Field(ge=0)
    amount: Decimal = Field(ge=0)

    @model_validator(mode="after")
    def check_bounds(self) -> "EvaluationRangeForm":
        if self.min_value > self.max_value:
            raise ValueError("Minimum value cannot exceed maximum value")
        return self


def _describe(error: Mapping) -> str:
    message = str(error.get("msg", "Invalid value"))
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    location = error.get("loc") or ()
    if location:
        label = _LABELS.get(str(location[0]), str(location[0]))
        return f"{label}: {message}"
    return message


def parse_form(model: type[FormT], data: Mapping[str, object]) -> FormT:
    """Validate submitted form fields, collecting every problem at once.

    Blank fields are treated as missing.

    Raises:
        ConfigurationError: one message per failed field.
    """

    cleaned = {
        key: value.strip() if isinstance(value, str) else value
        for key, value in data.items()
        if key in model.model_fields and not (isinstance(value, str) and not value.strip())
    }
    try:
        return model.model_validate(cleaned)
    except ValidationError as exc:
        raise ConfigurationError([_describe(error) for error in exc.errors()]) from exc


__all__ = ["BonusTierForm", "EvaluationRangeForm", "parse_form"]
