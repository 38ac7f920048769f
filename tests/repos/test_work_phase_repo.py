from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

import timesheets.db as db
from timesheets.db.models import TimesheetType
from timesheets.db.repos import TimesheetRepository, WorkPhaseRepository
from timesheets.testing.web_test_helpers import create_phase, create_timesheet, create_user


@pytest.mark.asyncio
async def test_list_ordered_and_lookups(db_session: AsyncSession) -> None:
    extra = await create_phase(db_session, code="EXTRA01", category="EXTRA")
    drilling = await create_phase(db_session, code="BOR0101")
    repo = WorkPhaseRepository(db_session)

    assert [phase.code for phase in await repo.list_ordered()] == ["BOR0101", "EXTRA01"]
    assert await repo.count() == 2

    got = await repo.get_by_code("EXTRA01")
    assert got is not None
    assert got.id == extra.id
    assert await repo.get_by_code("extra01") is None

    by_ids = await repo.list_by_ids({extra.id, drilling.id})
    assert [phase.code for phase in by_ids] == ["BOR0101", "EXTRA01"]
    assert await repo.list_by_ids([]) == []


@pytest.mark.asyncio
async def test_delete_and_detach_keeps_timesheets(db_session: AsyncSession) -> None:
    user = await create_user(db_session, full_name="Mario Rossi")
    phase = await create_phase(db_session, code="BOR0101")
    other = await create_phase(db_session, code="BOR0102")
    await create_timesheet(
        db_session, user_id=user.id, day=date(2024, 3, 1), work_phase_id=phase.id, hours=8
    )
    await create_timesheet(
        db_session, user_id=user.id, day=date(2024, 3, 2), work_phase_id=phase.id, hours=4
    )
    await create_timesheet(
        db_session, user_id=user.id, day=date(2024, 3, 3), work_phase_id=other.id, hours=2
    )

    repo = WorkPhaseRepository(db_session)
    detached = await repo.delete_and_detach(phase)
    await repo.commit()

    assert detached == 2

    async with db.SessionMaker() as verify_session:
        assert await WorkPhaseRepository(verify_session).get_by_code("BOR0101") is None
        entries = await TimesheetRepository(verify_session).list_for_user_between(
            user.id, start=date(2024, 3, 1), end=date(2024, 4, 1)
        )
        assert len(entries) == 3
        assert [entry.work_phase_id for entry in entries] == [other.id, None, None]
        assert all(entry.type == TimesheetType.worked for entry in entries)
