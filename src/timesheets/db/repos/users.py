from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from timesheets.db.models import User, UserRole
from timesheets.db.repos.base import BaseRepository


class UserRepository(BaseRepository[User]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_id(self, user_id: uuid.UUID) -> User | None:
        return await self.get(user_id)

    async def get_by_access_code(self, normalized_code: str) -> User | None:
        result = await self.session.execute(
            select(User).where(User.access_code == normalized_code)
        )
        return result.scalar_one_or_none()

    async def list_employees(self) -> list[User]:
        result = await self.session.execute(
            select(User).where(User.role != UserRole.admin).order_by(User.full_name.asc())
        )
        return list(result.scalars().all())

    async def count_employees(self) -> int:
        return await self.count_where(User.role != UserRole.admin)
