from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from timesheets.auth import (
    get_current_user_id,
    normalize_access_code,
    require_user,
    sign_in,
    sign_out,
)
from timesheets.db import get_session
from timesheets.db.models import User
from timesheets.db.repos import UserRepository
from timesheets.logging_config import log_with_fields
from timesheets.schemas import LoginRequest, LoginResponse, MessageResponse, UserRead
from timesheets.security.audit import AuditActor, audit_auth_denied, audit_auth_success
from timesheets.security.audit_constants import (
    AUTH_EVENT_LOGIN,
    AUTH_EVENT_LOGOUT,
    AUTH_REASON_INACTIVE_USER,
    AUTH_REASON_MISSING_CODE,
    AUTH_REASON_RATE_LIMITED,
    AUTH_REASON_UNKNOWN_CODE,
)
from timesheets.web.routes.auth_rate_limits import (
    client_ip,
    is_login_rate_limited,
    record_login_failure,
)

router = APIRouter(prefix="/api", tags=["auth"])
logger = logging.getLogger("timesheets.auth")


@router.post("/login", response_model=LoginResponse)
async def login(
    request: Request,
    payload: LoginRequest,
    session: AsyncSession = Depends(get_session),
) -> LoginResponse:
    code = normalize_access_code(payload.access_code)
    if not code:
        audit_auth_denied(
            AUTH_EVENT_LOGIN,
            AUTH_REASON_MISSING_CODE,
            client_ip=client_ip(request),
        )
        raise HTTPException(status_code=400, detail="Access code required")

    if is_login_rate_limited(request, code):
        audit_auth_denied(
            AUTH_EVENT_LOGIN,
            AUTH_REASON_RATE_LIMITED,
            client_ip=client_ip(request),
        )
        raise HTTPException(status_code=429, detail="Too many login attempts, try again later")

    user = await UserRepository(session).get_by_access_code(code)
    if user is None:
        record_login_failure(request, code)
        audit_auth_denied(
            AUTH_EVENT_LOGIN,
            AUTH_REASON_UNKNOWN_CODE,
            client_ip=client_ip(request),
        )
        raise HTTPException(status_code=401, detail="Invalid access code")

    if not user.is_active:
        record_login_failure(request, code)
        audit_auth_denied(
            AUTH_EVENT_LOGIN,
            AUTH_REASON_INACTIVE_USER,
            actor=AuditActor.of(user),
            client_ip=client_ip(request),
        )
        raise HTTPException(status_code=401, detail="Invalid access code")

    sign_in(request, user)
    audit_auth_success(AUTH_EVENT_LOGIN, actor=AuditActor.of(user), client_ip=client_ip(request))
    return LoginResponse(user=UserRead.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
async def logout(request: Request) -> MessageResponse:
    user_id = get_current_user_id(request)
    sign_out(request)
    if user_id is not None:
        audit_auth_success(AUTH_EVENT_LOGOUT, actor=AuditActor(user_id=user_id))
    else:
        log_with_fields(logger, logging.DEBUG, "logout without session")
    return MessageResponse(message="Logged out")


@router.get("/auth/user", response_model=UserRead)
async def current_user(user: User = Depends(require_user)) -> UserRead:
    return UserRead.model_validate(user)
