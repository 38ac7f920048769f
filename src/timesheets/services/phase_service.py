from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from timesheets.db.models import WorkPhase
from timesheets.db.repos import WorkPhaseRepository
from timesheets.seed_data import PhaseSeed


async def seed_work_phases(session: AsyncSession, phases: Iterable[PhaseSeed]) -> int:
    """Insert phases whose code is not in the catalog yet; returns how many were added."""
    repo = WorkPhaseRepository(session)
    existing = {phase.code for phase in await repo.list_ordered()}

    added = 0
    for seed in phases:
        if seed.code in existing:
            continue
        await repo.add(
            WorkPhase(
                code=seed.code,
                description=seed.description,
                category=seed.category,
                hour_threshold=seed.hour_threshold,
            ),
            flush=False,
        )
        existing.add(seed.code)
        added += 1

    await session.commit()
    return added
