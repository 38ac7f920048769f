from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from timesheets.auth import get_optional_user
from timesheets.db import get_session
from timesheets.db.models import Timesheet, WorkPhase
from timesheets.db.repos import TimesheetRepository, WorkPhaseRepository
from timesheets.periods import month_range_for
from timesheets.web.routes.common import current_business_date, templates

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def index(request: Request, session: AsyncSession = Depends(get_session)) -> HTMLResponse:
    current_user = await get_optional_user(request, session)

    today = current_business_date()
    entries: list[Timesheet] = []
    phases: list[WorkPhase] = []
    if current_user is not None:
        period = month_range_for(today)
        entries = await TimesheetRepository(session).list_for_user_between(
            current_user.id, start=period.start, end=period.end
        )
        phases = await WorkPhaseRepository(session).list_ordered()

    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "current_user": current_user,
            "today": today,
            "entries": entries,
            "phases": phases,
            "phase_codes": {phase.id: phase.code for phase in phases},
        },
    )
