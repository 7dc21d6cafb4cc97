"""Tests for user account endpoints."""

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from presensi.models import Employee


@pytest.mark.asyncio
async def test_show_user(async_client: AsyncClient, employee_headers, employee_user):
    resp = await async_client.get(f"/api/user/{employee_user.id}", headers=employee_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["email"] == "budi@example.com"
    assert "hashed_password" not in data


@pytest.mark.asyncio
async def test_show_user_not_found(async_client: AsyncClient, employee_headers):
    resp = await async_client.get("/api/user/4242", headers=employee_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_show_users(async_client: AsyncClient, employee_headers, admin_user):
    resp = await async_client.get("/api/users", headers=employee_headers)
    assert resp.status_code == 200
    assert [u["name"] for u in resp.json()] == ["Admin", "Budi Santoso"]


@pytest.mark.asyncio
async def test_update_own_account(async_client: AsyncClient, employee_headers, employee_user):
    resp = await async_client.patch(
        f"/api/user/{employee_user.id}",
        headers=employee_headers,
        json={"name": "Budi Baru", "password": "newpassword1"},
    )
    assert resp.status_code == 200
    assert resp.json()["name"] == "Budi Baru"

    login = await async_client.post(
        "/api/login", json={"email": "budi@example.com", "password": "newpassword1"}
    )
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_cannot_promote_self(async_client: AsyncClient, employee_headers, employee_user):
    resp = await async_client.patch(
        f"/api/user/{employee_user.id}", headers=employee_headers, json={"role": "admin"}
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_cannot_edit_other_account(async_client: AsyncClient, employee_headers, admin_user):
    resp = await async_client.patch(
        f"/api/user/{admin_user.id}", headers=employee_headers, json={"name": "Hacked"}
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_admin_can_deactivate_user(async_client: AsyncClient, admin_headers, employee_user, auth_for):
    resp = await async_client.patch(
        f"/api/user/{employee_user.id}",
        headers=admin_headers,
        json={"is_active": False, "role": "manager"},
    )
    assert resp.status_code == 200
    assert resp.json()["is_active"] is False
    assert resp.json()["role"] == "manager"

    # The deactivated account's token no longer passes the gate
    locked = await async_client.get("/api/users", headers=auth_for(employee_user))
    assert locked.status_code == 401


@pytest.mark.asyncio
async def test_email_change_must_be_unique(async_client: AsyncClient, employee_headers, employee_user, admin_user):
    resp = await async_client.patch(
        f"/api/user/{employee_user.id}", headers=employee_headers, json={"email": "admin@example.com"}
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["", "   ", "x" * 201])
async def test_update_rejects_blank_or_long_name(async_client: AsyncClient, employee_headers, employee_user, name):
    resp = await async_client.patch(
        f"/api/user/{employee_user.id}", headers=employee_headers, json={"name": name}
    )
    assert resp.status_code == 422

    current = await async_client.get(f"/api/user/{employee_user.id}", headers=employee_headers)
    assert current.json()["name"] == "Budi Santoso"


@pytest.mark.asyncio
async def test_update_strips_name(async_client: AsyncClient, employee_headers, employee_user):
    resp = await async_client.patch(
        f"/api/user/{employee_user.id}", headers=employee_headers, json={"name": "  Budi  "}
    )
    assert resp.status_code == 200
    assert resp.json()["name"] == "Budi"


@pytest.mark.asyncio
async def test_deactivating_user_deactivates_employee_record(
    async_client: AsyncClient, admin_headers, employee_user, db_session
):
    await async_client.patch(
        f"/api/user/{employee_user.id}", headers=admin_headers, json={"is_active": False}
    )
    emp_id = (
        await db_session.execute(select(Employee.id).where(Employee.user_id == employee_user.id))
    ).scalar_one()
    emp = await async_client.get(f"/api/employees/{emp_id}", headers=admin_headers)
    assert emp.json()["is_active"] is False
