from __future__ import annotations

import uuid
from datetime import date

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from timesheets.auth import normalize_access_code
from timesheets.db.models import Timesheet, TimesheetType, User, UserRole, WorkPhase


async def create_user(
    db_session: AsyncSession,
    *,
    full_name: str,
    access_code: str | None = None,
    is_admin: bool = False,
    is_active: bool = True,
) -> User:
    user = User(
        full_name=full_name,
        access_code=normalize_access_code(access_code or full_name),
        role=UserRole.admin if is_admin else UserRole.user,
        is_active=is_active,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


async def create_phase(
    db_session: AsyncSession,
    *,
    code: str,
    description: str = "Test phase",
    category: str = "BOR01",
    hour_threshold: int = 100,
) -> WorkPhase:
    phase = WorkPhase(
        code=code,
        description=description,
        category=category,
        hour_threshold=hour_threshold,
    )
    db_session.add(phase)
    await db_session.commit()
    await db_session.refresh(phase)
    return phase


async def create_timesheet(
    db_session: AsyncSession,
    *,
    user_id: uuid.UUID,
    day: date,
    entry_type: TimesheetType = TimesheetType.worked,
    work_phase_id: int | None = None,
    hours: int = 8,
) -> Timesheet:
    timesheet = Timesheet(
        user_id=user_id,
        date=day,
        type=entry_type,
        work_phase_id=work_phase_id,
        hours=hours,
    )
    db_session.add(timesheet)
    await db_session.commit()
    await db_session.refresh(timesheet)
    return timesheet


async def login_as(client: AsyncClient, access_code: str) -> dict[str, object]:
    resp = await client.post("/api/login", json={"access_code": access_code})
    assert resp.status_code == 200, resp.text
    body: dict[str, object] = resp.json()["user"]
    return body
