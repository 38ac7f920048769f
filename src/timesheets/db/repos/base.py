from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from timesheets.db.models import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):  # noqa: UP046
    """Persistence helpers shared by the per-table repositories.

    Writes only flush; committing (or rolling back) stays with the caller so a
    request can group several changes into one transaction.
    """

    def __init__(self, session: AsyncSession, model: type[ModelT]) -> None:
        self.session = session
        self.model = model

    async def add(self, obj: ModelT, *, flush: bool = True) -> ModelT:
        self.session.add(obj)
        if flush:
            await self.session.flush()  # assigns autoincrement ids
        return obj

    async def get(self, id_: Any) -> ModelT | None:
        return await self.session.get(self.model, id_)

    async def first_where(self, *predicates: ColumnElement[bool]) -> ModelT | None:
        result = await self.session.execute(select(self.model).where(*predicates).limit(1))
        return result.scalars().first()

    async def count_where(self, *predicates: ColumnElement[bool]) -> int:
        stmt = select(func.count()).select_from(self.model)
        if predicates:
            stmt = stmt.where(*predicates)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def delete(self, obj: ModelT, *, flush: bool = True) -> None:
        await self.session.delete(obj)
        if flush:
            await self.session.flush()

    async def patch(self, obj: ModelT, changes: Mapping[str, Any], *, flush: bool = True) -> ModelT:
        """Copy ``changes`` onto ``obj``; ``None`` means "leave as is"."""
        for name, value in changes.items():
            if value is not None:
                setattr(obj, name, value)
        if flush:
            await self.session.flush()
        return obj

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
