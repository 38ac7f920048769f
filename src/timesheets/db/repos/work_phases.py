from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from timesheets.db.models import Timesheet, WorkPhase
from timesheets.db.repos.base import BaseRepository


class WorkPhaseRepository(BaseRepository[WorkPhase]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, WorkPhase)

    async def get_by_id(self, phase_id: int) -> WorkPhase | None:
        return await self.get(phase_id)

    async def get_by_code(self, code: str) -> WorkPhase | None:
        result = await self.session.execute(select(WorkPhase).where(WorkPhase.code == code))
        return result.scalar_one_or_none()

    async def list_ordered(self) -> list[WorkPhase]:
        result = await self.session.execute(select(WorkPhase).order_by(WorkPhase.code.asc()))
        return list(result.scalars().all())

    async def list_by_ids(self, phase_ids: Iterable[int]) -> list[WorkPhase]:
        ids = list(phase_ids)
        if not ids:
            return []
        result = await self.session.execute(
            select(WorkPhase).where(WorkPhase.id.in_(ids)).order_by(WorkPhase.code.asc())
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        return await self.count_where()

    async def delete_and_detach(self, phase: WorkPhase) -> int:
        """Delete a phase, keeping the timesheets that referenced it.

        Returns the number of timesheets whose phase reference was cleared.
        """
        result = await self.session.execute(
            update(Timesheet)
            .where(Timesheet.work_phase_id == phase.id)
            .values(work_phase_id=None)
            .execution_options(synchronize_session="fetch")
        )
        await self.delete(phase)
        return int(result.rowcount or 0)
