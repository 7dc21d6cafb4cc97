"""Pydantic schemas for clock-in/out, overtime and the daily status."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, computed_field

from presensi.core.clock import ensure_utc


class AttendanceRead(BaseModel):
    id: int
    user_id: int
    date: str
    clock_in: datetime
    clock_out: datetime | None
    is_late: bool

    model_config = {"from_attributes": True}


class OvertimeRead(BaseModel):
    id: int
    user_id: int
    date: str
    started_at: datetime
    ended_at: datetime | None

    model_config = {"from_attributes": True}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def duration_minutes(self) -> int | None:
        if self.ended_at is None:
            return None
        delta = ensure_utc(self.ended_at) - ensure_utc(self.started_at)
        return max(0, int(delta.total_seconds() // 60))


class TodayStatus(BaseModel):
    date: str
    is_holiday: bool
    holiday_name: str | None = None
    clocked_in: bool
    clocked_out: bool
    attendance: AttendanceRead | None = None
    overtime: list[OvertimeRead] = []
