"""Pydantic schemas for holidays and the yearly working calendar."""

from __future__ import annotations

from pydantic import BaseModel, field_validator

from presensi.schemas.common import iso_date


class HolidayCreate(BaseModel):
    date: str
    name: str

    @field_validator("date")
    @classmethod
    def _date(cls, v: str) -> str:
        return iso_date(v)

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        return v


class HolidayRead(BaseModel):
    id: int
    date: str
    name: str

    model_config = {"from_attributes": True}


class YearSchedule(BaseModel):
    year: int
    total_days: int
    weekend_days: int
    holiday_count: int
    working_days: int
    holidays: list[HolidayRead]
