from __future__ import annotations

import logging

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from timesheets.testing.web_test_helpers import create_user, login_as


@pytest.mark.asyncio
async def test_list_users_returns_employees_only(
    client: AsyncClient, db_session: AsyncSession
) -> None:
    await create_user(db_session, full_name="Zeno Neri")
    await create_user(db_session, full_name="Anna Verdi", is_active=False)
    await create_user(db_session, full_name="Boss", access_code="admin", is_admin=True)
    await login_as(client, "admin")

    resp = await client.get("/api/admin/users")

    assert resp.status_code == 200
    users = resp.json()
    assert [user["full_name"] for user in users] == ["Anna Verdi", "Zeno Neri"]
    assert [user["is_active"] for user in users] == [False, True]
    assert all("access_code" not in user for user in users)


@pytest.mark.asyncio
async def test_admin_creates_user_who_can_then_log_in(
    client: AsyncClient, db_session: AsyncSession
) -> None:
    await create_user(db_session, full_name="Boss", access_code="admin", is_admin=True)
    await login_as(client, "admin")

    resp = await client.post("/api/admin/users", json={"full_name": "Luca  Bianchi"})
    assert resp.status_code == 201
    assert resp.json()["full_name"] == "Luca Bianchi"
    assert resp.json()["is_admin"] is False

    await client.post("/api/logout")
    user = await login_as(client, "LUCA BIANCHI")
    assert user["full_name"] == "Luca Bianchi"


@pytest.mark.asyncio
async def test_duplicate_access_code_is_rejected(
    client: AsyncClient, db_session: AsyncSession, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO, logger="timesheets.security.audit")
    await create_user(db_session, full_name="Mario Rossi")
    await create_user(db_session, full_name="Boss", access_code="admin", is_admin=True)
    await login_as(client, "admin")

    resp = await client.post(
        "/api/admin/users", json={"full_name": "Another Mario", "access_code": "Mario Rossi"}
    )

    assert resp.status_code == 409
    messages = [record.getMessage() for record in caplog.records]
    assert any(
        "audit_event=admin.user_create" in message
        and "outcome=denied" in message
        and "reason=duplicate_code" in message
        for message in messages
    )


@pytest.mark.asyncio
async def test_admin_deactivates_employee(client: AsyncClient, db_session: AsyncSession) -> None:
    mario = await create_user(db_session, full_name="Mario Rossi")
    await create_user(db_session, full_name="Boss", access_code="admin", is_admin=True)
    await login_as(client, "admin")

    resp = await client.patch(f"/api/admin/users/{mario.id}", json={"is_active": False})
    assert resp.status_code == 200
    assert resp.json()["is_active"] is False

    await client.post("/api/logout")
    denied = await client.post("/api/login", json={"access_code": "mario rossi"})
    assert denied.status_code == 401


@pytest.mark.asyncio
async def test_admin_cannot_deactivate_self(client: AsyncClient, db_session: AsyncSession) -> None:
    admin = await create_user(db_session, full_name="Boss", access_code="admin", is_admin=True)
    await login_as(client, "admin")

    resp = await client.patch(f"/api/admin/users/{admin.id}", json={"is_active": False})
    assert resp.status_code == 400

    missing = await client.patch(
        "/api/admin/users/00000000-0000-0000-0000-000000000000", json={"full_name": "X"}
    )
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_admin_cannot_blank_a_full_name(
    client: AsyncClient, db_session: AsyncSession
) -> None:
    mario = await create_user(db_session, full_name="Mario Rossi")
    await create_user(db_session, full_name="Boss", access_code="admin", is_admin=True)
    await login_as(client, "admin")

    resp = await client.patch(f"/api/admin/users/{mario.id}", json={"full_name": "   "})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Full name is required"

    renamed = await client.patch(
        f"/api/admin/users/{mario.id}", json={"full_name": "  Mario   Bianchi "}
    )
    assert renamed.status_code == 200
    assert renamed.json()["full_name"] == "Mario Bianchi"
