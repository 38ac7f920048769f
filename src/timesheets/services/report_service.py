from __future__ import annotations

import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from timesheets.db.models import User, WorkPhase
from timesheets.db.repos import TimesheetRepository, UserRepository, WorkPhaseRepository
from timesheets.periods import MonthRange, month_range_for


@dataclass(frozen=True)
class PhaseTotal:
    phase: WorkPhase
    hours: int

    @property
    def over_threshold(self) -> bool:
        return self.hours > self.phase.hour_threshold


@dataclass
class EmployeeTotals:
    user: User
    total_hours: int = 0
    phases: list[PhaseTotal] = field(default_factory=list)


@dataclass(frozen=True)
class DashboardStats:
    total_employees: int
    active_today: int
    total_hours_this_month: int
    phases_count: int


async def employee_hours(
    session: AsyncSession,
    *,
    period: MonthRange | None = None,
) -> list[EmployeeTotals]:
    """Worked hours per employee, split by work phase.

    Hours booked to a phase that has since been deleted still count towards
    ``total_hours`` but are not listed under any phase.
    """
    employees = await UserRepository(session).list_employees()
    rows = await TimesheetRepository(session).worked_hours_by_user_and_phase(
        start=period.start if period is not None else None,
        end=period.end if period is not None else None,
    )

    totals: dict[uuid.UUID, int] = defaultdict(int)
    by_phase: dict[uuid.UUID, dict[int, int]] = defaultdict(dict)
    for user_id, phase_id, hours in rows:
        totals[user_id] += int(hours or 0)
        if phase_id is not None:
            by_phase[user_id][phase_id] = int(hours or 0)

    phase_ids = {phase_id for per_user in by_phase.values() for phase_id in per_user}
    phases = await WorkPhaseRepository(session).list_by_ids(phase_ids)

    result: list[EmployeeTotals] = []
    for user in employees:
        per_user = by_phase.get(user.id, {})
        result.append(
            EmployeeTotals(
                user=user,
                total_hours=totals.get(user.id, 0),
                phases=[
                    PhaseTotal(phase=phase, hours=per_user[phase.id])
                    for phase in phases
                    if phase.id in per_user
                ],
            )
        )
    return result


async def dashboard_stats(session: AsyncSession, *, today: date) -> DashboardStats:
    timesheets = TimesheetRepository(session)
    this_month = month_range_for(today)

    return DashboardStats(
        total_employees=await UserRepository(session).count_employees(),
        active_today=await timesheets.count_active_users_on(today),
        total_hours_this_month=await timesheets.sum_hours_between(
            start=this_month.start, end=this_month.end
        ),
        phases_count=await WorkPhaseRepository(session).count(),
    )
