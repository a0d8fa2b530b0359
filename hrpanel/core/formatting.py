"""Helper functions for formatting amounts, months and service durations."""

from __future__ import annotations
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from hrpanel.domain.calendar import MONTH_NAMES

_CENTS = Decimal("0.01")


def quantize_money(value: int | float | Decimal | None) -> Decimal:
    """Round an amount to cents; ``None`` renders as zero."""

    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP)


def format_money(value: int | float | Decimal | None, thousands: bool = True) -> str:
    """Format an amount with two decimals.

    Args:
        value: The amount to format
        thousands: If True, group thousands with commas
    """
    amount = quantize_money(value)
    if thousands:
        return f"{amount:,.2f}"
    return f"{amount:.2f}"


def format_date(value: date | None, empty: str = "-") -> str:
    if value is None:
        return empty
    return value.strftime("%d/%m/%Y")


def month_name(value: int | None) -> str:
    if value is None:
        return ""
    return MONTH_NAMES.get(int(value), str(value))


def format_duration(value: tuple[int, int] | None, empty: str = "") -> str:
    """Render ``(years, months)`` as ``"3 year(s), 2 month(s)"``."""

    if value is None:
        return empty
    years, months = value
    if years > 0:
        text = f"{years} year(s)"
        if months > 0:
            text += f", {months} month(s)"
        return text
    return f"{months} month(s)"
