from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import Row, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from timesheets.db.models import Timesheet, TimesheetType
from timesheets.db.repos.base import BaseRepository


class TimesheetRepository(BaseRepository[Timesheet]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Timesheet)

    async def get_by_id(self, timesheet_id: int) -> Timesheet | None:
        return await self.get(timesheet_id)

    async def get_for_user_and_date(self, user_id: uuid.UUID, day: date) -> Timesheet | None:
        return await self.first_where(Timesheet.user_id == user_id, Timesheet.date == day)

    async def list_for_user_between(
        self,
        user_id: uuid.UUID,
        *,
        start: date,
        end: date,
    ) -> list[Timesheet]:
        """Entries dated in ``[start, end)``, newest first."""
        result = await self.session.execute(
            select(Timesheet)
            .where(
                Timesheet.user_id == user_id,
                Timesheet.date >= start,
                Timesheet.date < end,
            )
            .order_by(Timesheet.date.desc())
        )
        return list(result.scalars().all())

    async def count_active_users_on(self, day: date) -> int:
        result = await self.session.execute(
            select(func.count(distinct(Timesheet.user_id))).where(Timesheet.date == day)
        )
        return int(result.scalar_one())

    async def sum_hours_between(self, *, start: date, end: date) -> int:
        result = await self.session.execute(
            select(func.coalesce(func.sum(Timesheet.hours), 0)).where(
                Timesheet.date >= start,
                Timesheet.date < end,
            )
        )
        return int(result.scalar_one())

    async def worked_hours_by_user_and_phase(
        self,
        *,
        start: date | None = None,
        end: date | None = None,
    ) -> list[Row[tuple[uuid.UUID, int | None, int]]]:
        stmt = (
            select(
                Timesheet.user_id,
                Timesheet.work_phase_id,
                func.sum(Timesheet.hours).label("hours"),
            )
            .where(Timesheet.type == TimesheetType.worked)
            .group_by(Timesheet.user_id, Timesheet.work_phase_id)
        )
        if start is not None:
            stmt = stmt.where(Timesheet.date >= start)
        if end is not None:
            stmt = stmt.where(Timesheet.date < end)

        result = await self.session.execute(stmt)
        return list(result.all())
