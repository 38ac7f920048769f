from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from timesheets.auth import normalize_access_code
from timesheets.db.models import User, UserRole
from timesheets.db.repos import UserRepository


class DuplicateAccessCodeError(ValueError):
    pass


async def create_user(
    session: AsyncSession,
    *,
    full_name: str,
    access_code: str | None = None,
    is_admin: bool = False,
) -> User:
    """Create an account; the access code defaults to the person's name."""
    display_name = " ".join(full_name.split())
    if not display_name:
        raise ValueError("Full name is required")

    code = normalize_access_code(access_code if access_code else display_name)
    if not code:
        raise ValueError("Access code is required")

    users = UserRepository(session)
    if await users.get_by_access_code(code) is not None:
        raise DuplicateAccessCodeError(f"Access code already in use: {code}")

    user = User(
        full_name=display_name,
        access_code=code,
        role=UserRole.admin if is_admin else UserRole.user,
        is_active=True,
    )
    try:
        await users.add(user)
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise DuplicateAccessCodeError(f"Access code already in use: {code}") from exc

    await session.refresh(user)
    return user
