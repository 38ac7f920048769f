from __future__ import annotations

from datetime import date

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from timesheets.db.models import TimesheetType
from timesheets.testing.web_test_helpers import (
    create_phase,
    create_timesheet,
    create_user,
    login_as,
)
from timesheets.web.routes import pages as page_routes


@pytest.mark.asyncio
async def test_index_anonymous_shows_login_form(client: AsyncClient) -> None:
    resp = await client.get("/")

    assert resp.status_code == 200
    assert 'id="login-form"' in resp.text
    assert "Signed in as" not in resp.text


@pytest.mark.asyncio
async def test_index_lists_current_month_entries(
    client: AsyncClient, db_session: AsyncSession, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(page_routes, "current_business_date", lambda: date(2024, 3, 15))
    user = await create_user(db_session, full_name="Mario Rossi")
    phase = await create_phase(db_session, code="BOR0101", description="FORATURA")
    await create_timesheet(
        db_session, user_id=user.id, day=date(2024, 3, 4), work_phase_id=phase.id, hours=6
    )
    await create_timesheet(
        db_session,
        user_id=user.id,
        day=date(2024, 2, 28),
        entry_type=TimesheetType.vacation,
        hours=8,
    )
    await login_as(client, "mario rossi")

    resp = await client.get("/")

    assert resp.status_code == 200
    assert "Signed in as Mario Rossi" in resp.text
    assert "March 2024" in resp.text
    assert "2024-03-04" in resp.text
    assert "2024-02-28" not in resp.text
    assert "BOR0101 (BOR01): FORATURA" in resp.text


@pytest.mark.asyncio
async def test_index_marks_admins(client: AsyncClient, db_session: AsyncSession) -> None:
    await create_user(db_session, full_name="Boss", access_code="admin", is_admin=True)
    await login_as(client, "admin")

    resp = await client.get("/")

    assert "Signed in as Boss (admin)" in resp.text
    assert "No entries this month" in resp.text


@pytest.mark.asyncio
async def test_index_renders_entry_form_and_delete_buttons(
    client: AsyncClient, db_session: AsyncSession, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(page_routes, "current_business_date", lambda: date(2024, 3, 15))
    user = await create_user(db_session, full_name="Mario Rossi")
    soletta = await create_phase(db_session, code="BOR0101")
    tramezzature = await create_phase(db_session, code="BOR0102")
    entry = await create_timesheet(
        db_session, user_id=user.id, day=date(2024, 3, 4), work_phase_id=soletta.id
    )
    await login_as(client, "mario rossi")

    resp = await client.get("/")

    assert resp.status_code == 200
    assert 'id="entry-form"' in resp.text
    assert 'value="2024-03-15"' in resp.text
    assert '<option value="vacation">' in resp.text
    assert f'<option value="{soletta.id}">BOR0101</option>' in resp.text
    assert f'<option value="{tramezzature.id}">BOR0102</option>' in resp.text
    assert f'class="delete-entry" data-id="{entry.id}"' in resp.text
