"""
Attendance handlers — daily status, clock in/out ("absen") and overtime
("lembur") sessions for the authenticated user.

Rules:
- one clock-in per local day; clock-out needs an open clock-in;
- overtime starts only after the day's clock-out, one session at a time.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from presensi.core.clock import is_late, local_date_str
from presensi.core.config import settings
from presensi.models.attendance import Attendance, Overtime
from presensi.models.holiday import Holiday
from presensi.routing.route import HandlerCall, HandlerResult
from presensi.schemas.attendance import AttendanceRead, OvertimeRead, TodayStatus

logger = logging.getLogger(__name__)


async def _attendance_on(db: AsyncSession, user_id: int, day: str) -> Attendance | None:
    result = await db.execute(
        select(Attendance).where(Attendance.user_id == user_id, Attendance.date == day)
    )
    return result.scalar_one_or_none()


async def _open_overtime(db: AsyncSession, user_id: int) -> Overtime | None:
    result = await db.execute(
        select(Overtime)
        .where(Overtime.user_id == user_id, Overtime.ended_at.is_(None))
        .order_by(Overtime.started_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def today_status(call: HandlerCall) -> HandlerResult:
    """Where the user stands today: holiday, clock-in/out, overtime."""
    db = call.db
    user_id = call.principal.id
    day = local_date_str()

    holiday = (
        await db.execute(select(Holiday).where(Holiday.date == day))
    ).scalar_one_or_none()
    attendance = await _attendance_on(db, user_id, day)
    overtime = (
        await db.execute(
            select(Overtime)
            .where(Overtime.user_id == user_id, Overtime.date == day)
            .order_by(Overtime.started_at.asc())
        )
    ).scalars().all()

    return 200, TodayStatus(
        date=day,
        is_holiday=holiday is not None,
        holiday_name=holiday.name if holiday else None,
        clocked_in=attendance is not None,
        clocked_out=attendance is not None and attendance.clock_out is not None,
        attendance=AttendanceRead.model_validate(attendance) if attendance else None,
        overtime=[OvertimeRead.model_validate(o) for o in overtime],
    )


async def clock_in(call: HandlerCall) -> HandlerResult:
    db = call.db
    user_id = call.principal.id
    now = datetime.now(timezone.utc)
    day = local_date_str(now)

    if await _attendance_on(db, user_id, day) is not None:
        raise HTTPException(status_code=409, detail="Already clocked in today")

    attendance = Attendance(
        user_id=user_id,
        date=day,
        clock_in=now,
        is_late=is_late(now, settings.WORK_START, settings.GRACE_MINUTES),
    )
    db.add(attendance)
    await db.commit()
    await db.refresh(attendance)
    logger.info("Clock-in for user %d on %s (late=%s)", user_id, day, attendance.is_late)
    return 201, AttendanceRead.model_validate(attendance)


async def clock_out(call: HandlerCall) -> HandlerResult:
    db = call.db
    user_id = call.principal.id
    now = datetime.now(timezone.utc)
    day = local_date_str(now)

    attendance = await _attendance_on(db, user_id, day)
    if attendance is None:
        raise HTTPException(status_code=409, detail="Not clocked in today")
    if attendance.clock_out is not None:
        raise HTTPException(status_code=409, detail="Already clocked out today")

    attendance.clock_out = now
    await db.commit()
    await db.refresh(attendance)
    logger.info("Clock-out for user %d on %s", user_id, day)
    return 200, AttendanceRead.model_validate(attendance)


async def overtime_in(call: HandlerCall) -> HandlerResult:
    db = call.db
    user_id = call.principal.id
    now = datetime.now(timezone.utc)
    day = local_date_str(now)

    attendance = await _attendance_on(db, user_id, day)
    if attendance is None or attendance.clock_out is None:
        raise HTTPException(status_code=409, detail="Overtime can only start after clocking out")
    if await _open_overtime(db, user_id) is not None:
        raise HTTPException(status_code=409, detail="Overtime already in progress")

    overtime = Overtime(user_id=user_id, date=day, started_at=now)
    db.add(overtime)
    await db.commit()
    await db.refresh(overtime)
    logger.info("Overtime started for user %d on %s", user_id, day)
    return 201, OvertimeRead.model_validate(overtime)


async def overtime_out(call: HandlerCall) -> HandlerResult:
    db = call.db
    user_id = call.principal.id

    overtime = await _open_overtime(db, user_id)
    if overtime is None:
        raise HTTPException(status_code=409, detail="No overtime in progress")

    overtime.ended_at = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(overtime)
    read = OvertimeRead.model_validate(overtime)
    logger.info("Overtime ended for user %d (%s min)", user_id, read.duration_minutes)
    return 200, read
