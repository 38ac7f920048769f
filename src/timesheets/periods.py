from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil.relativedelta import relativedelta

_YEAR_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True)
class MonthRange:
    """Half-open date range ``[start, end)`` covering one calendar month."""

    start: date
    end: date

    def __contains__(self, day: object) -> bool:
        return isinstance(day, date) and self.start <= day < self.end


def month_range(year: int, month: int) -> MonthRange:
    start = date(year, month, 1)
    return MonthRange(start=start, end=start + relativedelta(months=1))


def month_range_for(day: date) -> MonthRange:
    return month_range(day.year, day.month)


def parse_year_month(value: str) -> MonthRange:
    match = _YEAR_MONTH_RE.match(value.strip())
    if match is None:
        raise ValueError(f"Expected YYYY-MM, got {value!r}")

    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Month out of range in {value!r}")
    return month_range(year, month)


def resolve_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name.strip() or "UTC")
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo("UTC")


def business_today(timezone_name: str, *, now: datetime | None = None) -> date:
    current = now if now is not None else datetime.now(UTC)
    if current.tzinfo is None:
        current = current.replace(tzinfo=UTC)
    return current.astimezone(resolve_timezone(timezone_name)).date()
