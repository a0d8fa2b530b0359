"""Shared Jinja2 environment with the panel's formatting filters."""
from __future__ import annotations

from fastapi.templating import Jinja2Templates

from hrpanel.core.formatting import format_date, format_duration, format_money, month_name
from hrpanel.core.paths import TEMPLATES_DIR, with_root_path

# Single shared templates environment
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

templates.env.filters["money"] = format_money
templates.env.filters["month_name"] = month_name
templates.env.filters["date"] = format_date
templates.env.filters["duration"] = format_duration

templates.env.globals["with_root_path"] = with_root_path
