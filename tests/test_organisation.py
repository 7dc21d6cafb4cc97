"""Tests for department and position CRUD."""

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from presensi.models import Employee


async def _create(client: AsyncClient, headers, resource: str, **body):
    resp = await client.post(f"/api/{resource}", headers=headers, json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


# ── Departments ─────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_department_crud(async_client: AsyncClient, admin_headers):
    dept = await _create(async_client, admin_headers, "departments", name="Engineering")

    resp = await async_client.get(f"/api/departments/{dept['id']}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["name"] == "Engineering"

    resp = await async_client.patch(
        f"/api/departments/{dept['id']}",
        headers=admin_headers,
        json={"description": "Builds things"},
    )
    assert resp.status_code == 200
    assert resp.json()["description"] == "Builds things"
    assert resp.json()["name"] == "Engineering"

    resp = await async_client.delete(f"/api/departments/{dept['id']}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["success"] is True

    resp = await async_client.get(f"/api/departments/{dept['id']}", headers=admin_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_legacy_department_listing_matches(async_client: AsyncClient, admin_headers):
    await _create(async_client, admin_headers, "departments", name="HR")
    await _create(async_client, admin_headers, "departments", name="Finance")

    modern = await async_client.get("/api/departments", headers=admin_headers)
    legacy = await async_client.get("/api/departements", headers=admin_headers)
    assert modern.status_code == legacy.status_code == 200
    assert modern.json() == legacy.json()
    assert [d["name"] for d in modern.json()] == ["Finance", "HR"]


@pytest.mark.asyncio
async def test_duplicate_department_rejected(async_client: AsyncClient, admin_headers):
    await _create(async_client, admin_headers, "departments", name="Ops")
    resp = await async_client.post("/api/departments", headers=admin_headers, json={"name": "Ops"})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_department_writes_require_admin(async_client: AsyncClient, employee_headers):
    resp = await async_client.post("/api/departments", headers=employee_headers, json={"name": "X"})
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_deleting_department_unassigns_members(
    async_client: AsyncClient, admin_headers, admin_user, db_session
):
    dept = await _create(async_client, admin_headers, "departments", name="Legal")
    pos = await _create(
        async_client, admin_headers, "positions", name="Counsel", department_id=dept["id"]
    )
    emp_id = (
        await db_session.execute(select(Employee.id).where(Employee.user_id == admin_user.id))
    ).scalar_one()
    await async_client.patch(
        f"/api/employee/management/{emp_id}",
        headers=admin_headers,
        json={"department_id": dept["id"]},
    )

    await async_client.delete(f"/api/departments/{dept['id']}", headers=admin_headers)

    emp = (await async_client.get(f"/api/employees/{emp_id}", headers=admin_headers)).json()
    assert emp["department_id"] is None
    position = (await async_client.get(f"/api/positions/{pos['id']}", headers=admin_headers)).json()
    assert position["department_id"] is None


# ── Positions ───────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_position_crud(async_client: AsyncClient, admin_headers):
    pos = await _create(async_client, admin_headers, "positions", name="Staff")

    listed = await async_client.get("/api/positions", headers=admin_headers)
    assert [p["name"] for p in listed.json()] == ["Staff"]

    resp = await async_client.patch(
        f"/api/positions/{pos['id']}", headers=admin_headers, json={"name": "Senior Staff"}
    )
    assert resp.status_code == 200
    assert resp.json()["name"] == "Senior Staff"

    resp = await async_client.delete(f"/api/positions/{pos['id']}", headers=admin_headers)
    assert resp.status_code == 200
    assert (await async_client.get("/api/positions", headers=admin_headers)).json() == []


@pytest.mark.asyncio
async def test_position_with_unknown_department(async_client: AsyncClient, admin_headers):
    resp = await async_client.post(
        "/api/positions", headers=admin_headers, json={"name": "Ghost", "department_id": 99}
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_position_of_user(async_client: AsyncClient, admin_headers, employee_user, db_session):
    pos = await _create(async_client, admin_headers, "positions", name="Supervisor")

    resp = await async_client.get(f"/api/position/{employee_user.id}", headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "No position assigned"

    emp_id = (
        await db_session.execute(select(Employee.id).where(Employee.user_id == employee_user.id))
    ).scalar_one()
    await async_client.patch(
        f"/api/employee/management/{emp_id}", headers=admin_headers, json={"position_id": pos["id"]}
    )

    resp = await async_client.get(f"/api/position/{employee_user.id}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["name"] == "Supervisor"


@pytest.mark.asyncio
async def test_position_of_unknown_user(async_client: AsyncClient, admin_headers):
    resp = await async_client.get("/api/position/31337", headers=admin_headers)
    assert resp.status_code == 404
