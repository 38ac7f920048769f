from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from timesheets.auth import require_admin, require_user
from timesheets.db import get_session
from timesheets.db.models import User, WorkPhase
from timesheets.db.repos import WorkPhaseRepository
from timesheets.logging_config import log_with_fields
from timesheets.schemas import WorkPhaseCreate, WorkPhaseRead, WorkPhaseUpdate
from timesheets.security.audit import AuditActor, audit_admin_denied, audit_admin_success
from timesheets.security.audit_constants import (
    ADMIN_EVENT_PHASE_CREATE,
    ADMIN_EVENT_PHASE_DELETE,
    ADMIN_EVENT_PHASE_UPDATE,
    ADMIN_REASON_DUPLICATE_CODE,
)

router = APIRouter(prefix="/api/phases", tags=["phases"])
logger = logging.getLogger("timesheets.admin")


async def _load_phase_or_404(repo: WorkPhaseRepository, phase_id: int) -> WorkPhase:
    phase = await repo.get_by_id(phase_id)
    if phase is None:
        raise HTTPException(status_code=404, detail="Phase not found")
    return phase


def _duplicate_code(event: str, actor: AuditActor, code: str) -> HTTPException:
    audit_admin_denied(event, ADMIN_REASON_DUPLICATE_CODE, actor=actor, phase_code=code)
    return HTTPException(status_code=409, detail="Phase code already exists")


@router.get("", response_model=list[WorkPhaseRead])
async def list_phases(
    session: AsyncSession = Depends(get_session),
    _: User = Depends(require_user),
) -> list[WorkPhaseRead]:
    phases = await WorkPhaseRepository(session).list_ordered()
    return [WorkPhaseRead.model_validate(phase) for phase in phases]


@router.post("", response_model=WorkPhaseRead, status_code=201)
async def create_phase(
    payload: WorkPhaseCreate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin),
) -> WorkPhaseRead:
    actor = AuditActor.of(current_user)
    repo = WorkPhaseRepository(session)
    code = payload.code.strip()
    if await repo.get_by_code(code) is not None:
        raise _duplicate_code(ADMIN_EVENT_PHASE_CREATE, actor, code)

    phase = WorkPhase(
        code=code,
        description=payload.description.strip(),
        category=payload.category.strip(),
        hour_threshold=payload.hour_threshold,
    )
    try:
        await repo.add(phase)
        await repo.commit()
    except IntegrityError as exc:
        await repo.rollback()
        raise _duplicate_code(ADMIN_EVENT_PHASE_CREATE, actor, code) from exc

    audit_admin_success(
        ADMIN_EVENT_PHASE_CREATE,
        actor=actor,
        phase_id=phase.id,
        phase_code=phase.code,
    )
    log_with_fields(
        logger,
        logging.INFO,
        "phase created",
        admin_user_id=actor.user_id,
        phase_id=phase.id,
        phase_code=phase.code,
    )
    return WorkPhaseRead.model_validate(phase)


@router.patch("/{phase_id}", response_model=WorkPhaseRead)
async def update_phase(
    phase_id: int,
    payload: WorkPhaseUpdate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin),
) -> WorkPhaseRead:
    actor = AuditActor.of(current_user)
    repo = WorkPhaseRepository(session)
    phase = await _load_phase_or_404(repo, phase_id)

    changes = payload.model_dump(exclude_unset=True)
    for key in ("code", "description", "category"):
        if isinstance(changes.get(key), str):
            changes[key] = changes[key].strip()

    new_code = changes.get("code")
    if new_code is not None and new_code != phase.code:
        clash = await repo.get_by_code(new_code)
        if clash is not None:
            raise _duplicate_code(ADMIN_EVENT_PHASE_UPDATE, actor, new_code)

    try:
        await repo.patch(phase, changes)
        await repo.commit()
    except IntegrityError as exc:
        await repo.rollback()
        raise _duplicate_code(ADMIN_EVENT_PHASE_UPDATE, actor, str(new_code)) from exc

    audit_admin_success(
        ADMIN_EVENT_PHASE_UPDATE,
        actor=actor,
        phase_id=phase.id,
        changed_fields=",".join(sorted(changes)),
    )
    return WorkPhaseRead.model_validate(phase)


@router.delete("/{phase_id}", status_code=204)
async def delete_phase(
    phase_id: int,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin),
) -> Response:
    repo = WorkPhaseRepository(session)
    phase = await _load_phase_or_404(repo, phase_id)
    phase_code = phase.code

    detached = await repo.delete_and_detach(phase)
    await repo.commit()

    audit_admin_success(
        ADMIN_EVENT_PHASE_DELETE,
        actor=AuditActor.of(current_user),
        phase_id=phase_id,
        phase_code=phase_code,
        detached_timesheets=detached,
    )
    return Response(status_code=204)
