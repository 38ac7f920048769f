from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from timesheets.auth import require_user
from timesheets.db import get_session
from timesheets.db.models import Timesheet, User
from timesheets.db.repos import TimesheetRepository
from timesheets.logging_config import log_with_fields
from timesheets.schemas import TimesheetCreate, TimesheetRead, TimesheetUpdate
from timesheets.services import (
    DuplicateTimesheetError,
    InvalidTimesheetError,
    create_timesheet,
    update_timesheet,
)
from timesheets.web.routes.common import parse_month

router = APIRouter(prefix="/api/timesheets", tags=["timesheets"])
logger = logging.getLogger("timesheets.timesheets")


async def _load_own_timesheet(
    repo: TimesheetRepository, timesheet_id: int, current_user: User
) -> Timesheet:
    timesheet = await repo.get_by_id(timesheet_id)
    if timesheet is None:
        raise HTTPException(status_code=404, detail="Timesheet not found")
    if timesheet.user_id != current_user.id:
        raise HTTPException(status_code=403, detail="Forbidden")
    return timesheet


@router.get("/{user_id}/{year_month}", response_model=list[TimesheetRead])
async def list_month(
    user_id: uuid.UUID,
    year_month: str,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_user),
) -> list[TimesheetRead]:
    if user_id != current_user.id and not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Forbidden")

    period = parse_month(year_month)
    entries = await TimesheetRepository(session).list_for_user_between(
        user_id, start=period.start, end=period.end
    )
    return [TimesheetRead.model_validate(entry) for entry in entries]


@router.post("", response_model=TimesheetRead, status_code=201)
async def create(
    payload: TimesheetCreate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_user),
) -> TimesheetRead:
    if payload.user_id is not None and payload.user_id != current_user.id:
        raise HTTPException(status_code=403, detail="Forbidden")

    try:
        timesheet = await create_timesheet(
            session,
            user_id=current_user.id,
            day=payload.date,
            entry_type=payload.type,
            work_phase_id=payload.work_phase_id,
            hours=payload.hours,
        )
    except InvalidTimesheetError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except DuplicateTimesheetError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    log_with_fields(
        logger,
        logging.INFO,
        "timesheet created",
        user_id=current_user.id,
        timesheet_id=timesheet.id,
        date=timesheet.date.isoformat(),
        type=timesheet.type.value,
        hours=timesheet.hours,
    )
    return TimesheetRead.model_validate(timesheet)


@router.patch("/{timesheet_id}", response_model=TimesheetRead)
async def update(
    timesheet_id: int,
    payload: TimesheetUpdate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_user),
) -> TimesheetRead:
    repo = TimesheetRepository(session)
    timesheet = await _load_own_timesheet(repo, timesheet_id, current_user)

    try:
        timesheet = await update_timesheet(
            session, timesheet, changes=payload.model_dump(exclude_unset=True)
        )
    except InvalidTimesheetError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except DuplicateTimesheetError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    log_with_fields(
        logger,
        logging.INFO,
        "timesheet updated",
        user_id=current_user.id,
        timesheet_id=timesheet.id,
    )
    return TimesheetRead.model_validate(timesheet)


@router.delete("/{timesheet_id}", status_code=204)
async def delete(
    timesheet_id: int,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_user),
) -> Response:
    repo = TimesheetRepository(session)
    timesheet = await _load_own_timesheet(repo, timesheet_id, current_user)

    await repo.delete(timesheet)
    await repo.commit()
    log_with_fields(
        logger,
        logging.INFO,
        "timesheet deleted",
        user_id=current_user.id,
        timesheet_id=timesheet_id,
    )
    return Response(status_code=204)
