from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from timesheets.db.models import LEAVE_DAY_HOURS, Timesheet, TimesheetType
from timesheets.db.repos import TimesheetRepository, WorkPhaseRepository

DEFAULT_WORKED_HOURS = 8
MIN_HOURS = 1
MAX_HOURS = 24


class TimesheetError(ValueError):
    pass


class InvalidTimesheetError(TimesheetError):
    pass


class DuplicateTimesheetError(TimesheetError):
    pass


@dataclass(frozen=True)
class TimesheetEntry:
    date: date
    type: TimesheetType
    work_phase_id: int | None
    hours: int


async def normalize_entry(
    session: AsyncSession,
    *,
    day: date,
    entry_type: TimesheetType,
    work_phase_id: int | None,
    hours: int | None,
) -> TimesheetEntry:
    """Apply the per-type rules to a requested entry.

    Leave days are always a full day and never reference a phase. Worked days
    need an existing phase and a whole number of hours in 1..24.
    """
    if entry_type != TimesheetType.worked:
        return TimesheetEntry(date=day, type=entry_type, work_phase_id=None, hours=LEAVE_DAY_HOURS)

    if work_phase_id is None:
        raise InvalidTimesheetError("A work phase is required for worked days")
    phase = await WorkPhaseRepository(session).get_by_id(work_phase_id)
    if phase is None:
        raise InvalidTimesheetError("Unknown work phase")

    selected_hours = DEFAULT_WORKED_HOURS if hours is None else hours
    if not MIN_HOURS <= selected_hours <= MAX_HOURS:
        raise InvalidTimesheetError(f"Hours must be between {MIN_HOURS} and {MAX_HOURS}")

    return TimesheetEntry(
        date=day, type=entry_type, work_phase_id=work_phase_id, hours=selected_hours
    )


async def create_timesheet(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    day: date,
    entry_type: TimesheetType,
    work_phase_id: int | None = None,
    hours: int | None = None,
) -> Timesheet:
    entry = await normalize_entry(
        session, day=day, entry_type=entry_type, work_phase_id=work_phase_id, hours=hours
    )

    repo = TimesheetRepository(session)
    if await repo.get_for_user_and_date(user_id, entry.date) is not None:
        raise DuplicateTimesheetError("Timesheet already exists for this date")

    timesheet = Timesheet(
        user_id=user_id,
        date=entry.date,
        type=entry.type,
        work_phase_id=entry.work_phase_id,
        hours=entry.hours,
    )
    try:
        await repo.add(timesheet)
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise DuplicateTimesheetError("Timesheet already exists for this date") from exc

    await session.refresh(timesheet)
    return timesheet


async def update_timesheet(
    session: AsyncSession,
    timesheet: Timesheet,
    *,
    changes: Mapping[str, Any],
) -> Timesheet:
    """Apply a partial update, re-validating the merged entry as a whole."""
    work_phase_id = (
        changes["work_phase_id"] if "work_phase_id" in changes else timesheet.work_phase_id
    )
    entry = await normalize_entry(
        session,
        day=changes.get("date") or timesheet.date,
        entry_type=TimesheetType(changes.get("type") or timesheet.type),
        work_phase_id=work_phase_id,
        hours=timesheet.hours if changes.get("hours") is None else changes["hours"],
    )

    repo = TimesheetRepository(session)
    if entry.date != timesheet.date:
        clash = await repo.get_for_user_and_date(timesheet.user_id, entry.date)
        if clash is not None and clash.id != timesheet.id:
            raise DuplicateTimesheetError("Timesheet already exists for this date")

    timesheet.date = entry.date
    timesheet.type = entry.type
    timesheet.work_phase_id = entry.work_phase_id
    timesheet.hours = entry.hours
    # onupdate only fires when a column value changes.
    timesheet.updated_at = datetime.now(UTC)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise DuplicateTimesheetError("Timesheet already exists for this date") from exc

    await session.refresh(timesheet)
    return timesheet
