"""
Schedule handlers — yearly working calendar and company holidays.
"""

from __future__ import annotations

import calendar
import logging
from datetime import date, timedelta

from fastapi import HTTPException
from sqlalchemy import select

from presensi.api.deps import require_role
from presensi.core.clock import local_now
from presensi.models.holiday import Holiday
from presensi.routing.route import HandlerCall, HandlerResult
from presensi.schemas.schedule import HolidayCreate, HolidayRead, YearSchedule

logger = logging.getLogger(__name__)


def _parse_year(raw: str | None) -> int:
    if raw is None:
        return local_now().year
    if len(raw) != 4 or not raw.isdigit() or not 1900 <= int(raw) <= 2999:
        raise HTTPException(status_code=422, detail="Year must be a four-digit number between 1900 and 2999")
    return int(raw)


def _count_weekend_days(year: int) -> int:
    day = date(year, 1, 1)
    end = date(year, 12, 31)
    count = 0
    while day <= end:
        if day.weekday() >= 5:
            count += 1
        day += timedelta(days=1)
    return count


async def year_schedule(call: HandlerCall) -> HandlerResult:
    """Holidays of a year plus weekend / working-day totals.

    ``year`` is optional; without it the current local year is used.
    """
    year = _parse_year(call.params.get("year"))
    result = await call.db.execute(
        select(Holiday).where(Holiday.date.like(f"{year}-%")).order_by(Holiday.date)
    )
    holidays = list(result.scalars().all())

    total_days = 366 if calendar.isleap(year) else 365
    weekend_days = _count_weekend_days(year)
    weekday_holidays = sum(
        1 for h in holidays if date.fromisoformat(h.date).weekday() < 5
    )
    return 200, YearSchedule(
        year=year,
        total_days=total_days,
        weekend_days=weekend_days,
        holiday_count=len(holidays),
        working_days=total_days - weekend_days - weekday_holidays,
        holidays=[HolidayRead.model_validate(h) for h in holidays],
    )


async def add_holiday(call: HandlerCall) -> HandlerResult:
    """Declare a company holiday (admin / manager)."""
    require_role(call.principal, "admin", "manager")
    body = HolidayCreate.model_validate(call.body or {})
    db = call.db

    existing = await db.execute(select(Holiday).where(Holiday.date == body.date))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=409, detail=f"A holiday is already set for {body.date}")

    holiday = Holiday(date=body.date, name=body.name, created_by=call.principal.id)
    db.add(holiday)
    await db.commit()
    await db.refresh(holiday)
    logger.info("Holiday %s (%s) added by user %d", holiday.date, holiday.name, call.principal.id)
    return 201, HolidayRead.model_validate(holiday)
