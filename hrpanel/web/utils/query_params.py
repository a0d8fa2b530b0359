from __future__ import annotations

from typing import Mapping

from starlette.datastructures import QueryParams

from hrpanel.domain.calendar import MAX_YEAR, MIN_YEAR

ParamsMapping = Mapping[str, str] | QueryParams


def parse_positive_int(value: str | None) -> int | None:
    try:
        parsed = int(value) if value is not None else None
    except (TypeError, ValueError):
        return None
    if parsed is None or parsed <= 0:
        return None
    return parsed


def extract_period(
    params: ParamsMapping,
    *,
    month_param: str = "month",
    year_param: str = "year",
) -> tuple[int | None, int | None]:
    """Return the requested ``(month, year)``; out-of-range values become ``None``."""

    month = parse_positive_int(params.get(month_param))
    year = parse_positive_int(params.get(year_param))
    if month is not None and not 1 <= month <= 12:
        month = None
    if year is not None and not MIN_YEAR <= year <= MAX_YEAR:
        year = None
    return month, year
