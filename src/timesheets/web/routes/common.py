from __future__ import annotations

from datetime import date
from pathlib import Path

from fastapi import HTTPException
from fastapi.templating import Jinja2Templates

from timesheets.periods import MonthRange, business_today, parse_year_month
from timesheets.settings import get_settings

templates_dir = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(templates_dir))


def parse_month(value: str) -> MonthRange:
    try:
        return parse_year_month(value)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid month, expected YYYY-MM") from exc


def current_business_date() -> date:
    return business_today(get_settings().timezone)
