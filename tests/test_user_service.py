from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from timesheets.cli import _create_user, _seed_phases
from timesheets.db.models import UserRole
from timesheets.db.repos import WorkPhaseRepository
from timesheets.seed_data import PREDEFINED_PHASES, PhaseSeed
from timesheets.services import DuplicateAccessCodeError, create_user, seed_work_phases


@pytest.mark.asyncio
async def test_create_user_defaults_access_code_to_name(db_session: AsyncSession) -> None:
    user = await create_user(db_session, full_name="  Mario   Rossi ")

    assert user.full_name == "Mario Rossi"
    assert user.access_code == "mario rossi"
    assert user.role == UserRole.user
    assert user.is_active is True


@pytest.mark.asyncio
async def test_create_user_rejects_duplicate_code(db_session: AsyncSession) -> None:
    await create_user(db_session, full_name="Mario Rossi")

    with pytest.raises(DuplicateAccessCodeError):
        await create_user(db_session, full_name="Someone Else", access_code="MARIO ROSSI")


@pytest.mark.asyncio
async def test_create_user_requires_name(db_session: AsyncSession) -> None:
    with pytest.raises(ValueError, match="Full name is required"):
        await create_user(db_session, full_name="   ")


@pytest.mark.asyncio
async def test_create_admin(db_session: AsyncSession) -> None:
    admin = await create_user(db_session, full_name="Boss", access_code="admin", is_admin=True)

    assert admin.is_admin is True
    assert admin.access_code == "admin"


@pytest.mark.asyncio
async def test_seed_work_phases_is_idempotent(db_session: AsyncSession) -> None:
    first = await seed_work_phases(db_session, PREDEFINED_PHASES)
    second = await seed_work_phases(
        db_session,
        [*PREDEFINED_PHASES, PhaseSeed("EXTRA02", "LAVORI IN ECONOMIA", "EXTRA", hour_threshold=40)],
    )

    assert first == len(PREDEFINED_PHASES)
    assert second == 1

    phases = await WorkPhaseRepository(db_session).list_ordered()
    assert [phase.code for phase in phases] == ["BOR0101", "BOR0102", "EXTRA02"]
    extra = next(phase for phase in phases if phase.code == "EXTRA02")
    assert extra.hour_threshold == 40


@pytest.mark.asyncio
async def test_cli_seed_phases_reports_counts(
    db_session: AsyncSession, capsys: pytest.CaptureFixture[str]
) -> None:
    _ = db_session
    await _seed_phases()
    await _seed_phases()

    out = capsys.readouterr().out.splitlines()
    assert out[0] == f"Added {len(PREDEFINED_PHASES)} work phases; skipped 0 existing"
    assert out[1] == f"Added 0 work phases; skipped {len(PREDEFINED_PHASES)} existing"


@pytest.mark.asyncio
async def test_cli_create_user_exits_cleanly_on_blank_name(
    db_session: AsyncSession, capsys: pytest.CaptureFixture[str]
) -> None:
    _ = db_session
    with pytest.raises(SystemExit) as excinfo:
        await _create_user("   ", None, False)

    assert str(excinfo.value) == "Full name is required"
    assert capsys.readouterr().out == ""


@pytest.mark.asyncio
async def test_cli_create_user_exits_cleanly_on_duplicate_code(db_session: AsyncSession) -> None:
    await create_user(db_session, full_name="Mario Rossi")

    with pytest.raises(SystemExit):
        await _create_user("Mario Bianchi", "mario rossi", False)
