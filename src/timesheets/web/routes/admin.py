from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from timesheets.auth import require_admin
from timesheets.db import get_session
from timesheets.db.models import User
from timesheets.db.repos import UserRepository
from timesheets.logging_config import log_with_fields
from timesheets.schemas import (
    AdminStats,
    EmployeeHours,
    PhaseHours,
    UserCreate,
    UserRead,
    UserUpdate,
    WorkPhaseRead,
)
from timesheets.security.audit import AuditActor, audit_admin_denied, audit_admin_success
from timesheets.security.audit_constants import (
    ADMIN_EVENT_USER_CREATE,
    ADMIN_EVENT_USER_UPDATE,
    ADMIN_REASON_DUPLICATE_CODE,
    ADMIN_REASON_SELF_DEACTIVATION_BLOCKED,
)
from timesheets.services import (
    DuplicateAccessCodeError,
    create_user,
    dashboard_stats,
    employee_hours,
)
from timesheets.web.routes.common import current_business_date, parse_month

router = APIRouter(prefix="/api/admin", tags=["admin"])
logger = logging.getLogger("timesheets.admin")


@router.get("/users", response_model=list[UserRead])
async def list_users(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin),
) -> list[UserRead]:
    users = await UserRepository(session).list_employees()
    log_with_fields(
        logger,
        logging.INFO,
        "admin users viewed",
        admin_user_id=current_user.id,
    )
    return [UserRead.model_validate(user) for user in users]


@router.post("/users", response_model=UserRead, status_code=201)
async def add_user(
    payload: UserCreate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin),
) -> UserRead:
    actor = AuditActor.of(current_user)
    try:
        user = await create_user(
            session,
            full_name=payload.full_name,
            access_code=payload.access_code,
            is_admin=payload.is_admin,
        )
    except DuplicateAccessCodeError:
        audit_admin_denied(ADMIN_EVENT_USER_CREATE, ADMIN_REASON_DUPLICATE_CODE, actor=actor)
        raise HTTPException(status_code=409, detail="Access code already in use") from None
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    audit_admin_success(
        ADMIN_EVENT_USER_CREATE,
        actor=actor,
        target_user_id=user.id,
        target_is_admin=user.is_admin,
    )
    return UserRead.model_validate(user)


@router.patch("/users/{user_id}", response_model=UserRead)
async def update_user(
    user_id: uuid.UUID,
    payload: UserUpdate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin),
) -> UserRead:
    users = UserRepository(session)
    user = await users.get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")

    if user.id == current_user.id and payload.is_active is False:
        audit_admin_denied(
            ADMIN_EVENT_USER_UPDATE,
            ADMIN_REASON_SELF_DEACTIVATION_BLOCKED,
            actor=AuditActor.of(current_user),
            target_user_id=user.id,
        )
        raise HTTPException(status_code=400, detail="You cannot deactivate your own account")

    changes = payload.model_dump(exclude_unset=True)
    if isinstance(changes.get("full_name"), str):
        changes["full_name"] = " ".join(changes["full_name"].split())
        if not changes["full_name"]:
            raise HTTPException(status_code=400, detail="Full name is required")

    previous_is_active = user.is_active
    await users.patch(user, changes)
    await users.commit()

    audit_admin_success(
        ADMIN_EVENT_USER_UPDATE,
        actor=AuditActor.of(current_user),
        target_user_id=user.id,
        previous_is_active=previous_is_active,
        new_is_active=user.is_active,
    )
    return UserRead.model_validate(user)


@router.get("/employee-hours", response_model=list[EmployeeHours])
async def get_employee_hours(
    year_month: str | None = None,
    session: AsyncSession = Depends(get_session),
    _: User = Depends(require_admin),
) -> list[EmployeeHours]:
    period = parse_month(year_month) if year_month else None
    totals = await employee_hours(session, period=period)
    return [
        EmployeeHours(
            user=UserRead.model_validate(entry.user),
            total_hours=entry.total_hours,
            phases=[
                PhaseHours(
                    phase_id=item.phase.id,
                    phase=WorkPhaseRead.model_validate(item.phase),
                    hours=item.hours,
                    over_threshold=item.over_threshold,
                )
                for item in entry.phases
            ],
        )
        for entry in totals
    ]


@router.get("/stats", response_model=AdminStats)
async def get_stats(
    session: AsyncSession = Depends(get_session),
    _: User = Depends(require_admin),
) -> AdminStats:
    stats = await dashboard_stats(session, today=current_business_date())
    return AdminStats(
        total_employees=stats.total_employees,
        active_today=stats.active_today,
        total_hours_this_month=stats.total_hours_this_month,
        phases_count=stats.phases_count,
    )
