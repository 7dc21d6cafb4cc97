"""Tests for daily status, clock in/out and overtime."""

import pytest
from httpx import AsyncClient

from presensi.core.clock import local_date_str


@pytest.mark.asyncio
async def test_status_before_clock_in(async_client: AsyncClient, employee_headers):
    resp = await async_client.get("/api/absen/status", headers=employee_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["date"] == local_date_str()
    assert data["clocked_in"] is False
    assert data["clocked_out"] is False
    assert data["attendance"] is None
    assert data["overtime"] == []


@pytest.mark.asyncio
async def test_clock_in_then_out(async_client: AsyncClient, employee_headers, employee_user):
    resp = await async_client.post("/api/absen/in", headers=employee_headers)
    assert resp.status_code == 201
    data = resp.json()
    assert data["user_id"] == employee_user.id
    assert data["clock_out"] is None
    assert isinstance(data["is_late"], bool)

    resp = await async_client.post("/api/absen/out", headers=employee_headers)
    assert resp.status_code == 200
    assert resp.json()["clock_out"] is not None

    status = (await async_client.get("/api/absen/status", headers=employee_headers)).json()
    assert status["clocked_in"] is True
    assert status["clocked_out"] is True


@pytest.mark.asyncio
async def test_double_clock_in_rejected(async_client: AsyncClient, employee_headers):
    await async_client.post("/api/absen/in", headers=employee_headers)
    resp = await async_client.post("/api/absen/in", headers=employee_headers)
    assert resp.status_code == 409
    assert resp.json()["detail"] == "Already clocked in today"


@pytest.mark.asyncio
async def test_clock_out_without_clock_in(async_client: AsyncClient, employee_headers):
    resp = await async_client.post("/api/absen/out", headers=employee_headers)
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_double_clock_out_rejected(async_client: AsyncClient, employee_headers):
    await async_client.post("/api/absen/in", headers=employee_headers)
    await async_client.post("/api/absen/out", headers=employee_headers)
    resp = await async_client.post("/api/absen/out", headers=employee_headers)
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_attendance_is_per_user(async_client: AsyncClient, employee_headers, admin_headers):
    await async_client.post("/api/absen/in", headers=employee_headers)
    resp = await async_client.post("/api/absen/in", headers=admin_headers)
    assert resp.status_code == 201


# ── Overtime ────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_overtime_requires_clock_out(async_client: AsyncClient, employee_headers):
    resp = await async_client.post("/api/lembur/in", headers=employee_headers)
    assert resp.status_code == 409

    await async_client.post("/api/absen/in", headers=employee_headers)
    resp = await async_client.post("/api/lembur/in", headers=employee_headers)
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_overtime_session(async_client: AsyncClient, employee_headers):
    await async_client.post("/api/absen/in", headers=employee_headers)
    await async_client.post("/api/absen/out", headers=employee_headers)

    start = await async_client.post("/api/lembur/in", headers=employee_headers)
    assert start.status_code == 201
    assert start.json()["ended_at"] is None
    assert start.json()["duration_minutes"] is None

    again = await async_client.post("/api/lembur/in", headers=employee_headers)
    assert again.status_code == 409

    end = await async_client.post("/api/lembur/out", headers=employee_headers)
    assert end.status_code == 200
    assert end.json()["ended_at"] is not None
    assert end.json()["duration_minutes"] == 0

    status = (await async_client.get("/api/absen/status", headers=employee_headers)).json()
    assert len(status["overtime"]) == 1


@pytest.mark.asyncio
async def test_overtime_out_without_session(async_client: AsyncClient, employee_headers):
    resp = await async_client.post("/api/lembur/out", headers=employee_headers)
    assert resp.status_code == 409
    assert resp.json()["detail"] == "No overtime in progress"


@pytest.mark.asyncio
async def test_status_reports_holiday(async_client: AsyncClient, admin_headers):
    today = local_date_str()
    await async_client.post(
        "/api/schedule/holiday", headers=admin_headers, json={"date": today, "name": "Cuti Bersama"}
    )
    data = (await async_client.get("/api/absen/status", headers=admin_headers)).json()
    assert data["is_holiday"] is True
    assert data["holiday_name"] == "Cuti Bersama"
