from __future__ import annotations

import uuid

from fastapi import Depends, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from timesheets.db import get_session
from timesheets.db.models import User

SESSION_USER_KEY = "user_id"


def normalize_access_code(code: str) -> str:
    """Access codes are people's names, so compare them case- and spacing-insensitively."""
    return " ".join(code.split()).lower()


def get_current_user_id(request: Request) -> uuid.UUID | None:
    raw = request.session.get(SESSION_USER_KEY)
    if raw is None:
        return None

    try:
        return uuid.UUID(str(raw))
    except ValueError:
        return None


def sign_in(request: Request, user: User) -> None:
    request.session.clear()
    request.session[SESSION_USER_KEY] = str(user.id)


def sign_out(request: Request) -> None:
    request.session.clear()


async def get_optional_user(request: Request, session: AsyncSession) -> User | None:
    user_id = get_current_user_id(request)
    if user_id is None:
        return None

    result = await session.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        return None
    return user


async def require_user(
    request: Request,
    session: AsyncSession = Depends(get_session),
) -> User:
    user = await get_optional_user(request, session)
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


async def require_admin(
    request: Request,
    session: AsyncSession = Depends(get_session),
) -> User:
    user = await require_user(request, session)
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
