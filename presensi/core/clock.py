"""
Local wall-clock helpers.

Attendance days are bucketed in the company's configured UTC offset,
not the server's timezone.
"""

from __future__ import annotations

from datetime import datetime, time, timedelta, timezone

from presensi.core.config import settings


def parse_offset(tz_offset: str) -> timezone:
    """Turn ``"+07:00"`` / ``"-0530"`` / ``"+7"`` into a fixed ``timezone``."""
    sign = -1 if tz_offset.startswith("-") else 1
    raw = tz_offset.lstrip("+-").replace(":", "")
    hours = int(raw[:2] if len(raw) > 2 else raw)
    minutes = int(raw[2:]) if len(raw) > 2 else 0
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def local_tz() -> timezone:
    return parse_offset(settings.TIMEZONE_OFFSET)


def ensure_utc(dt: datetime) -> datetime:
    """Normalise a potentially-naive timestamp to UTC-aware."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def local_now() -> datetime:
    return datetime.now(timezone.utc).astimezone(local_tz())


def local_date_str(moment: datetime | None = None) -> str:
    moment = ensure_utc(moment) if moment is not None else datetime.now(timezone.utc)
    return moment.astimezone(local_tz()).strftime("%Y-%m-%d")


def is_late(clock_in: datetime, work_start: str, grace_minutes: int) -> bool:
    """True when *clock_in* falls after ``work_start`` + grace, local time."""
    local = ensure_utc(clock_in).astimezone(local_tz())
    hour, minute = (int(part) for part in work_start.split(":")[:2])
    cutoff = datetime.combine(local.date(), time(hour, minute), tzinfo=local.tzinfo)
    return local > cutoff + timedelta(minutes=grace_minutes)
